"""
Client for the inventory / catalog service: stock levels and product records.
Every call goes to the network, nothing is cached.
"""
from typing import Optional

import httpx
import structlog
from pydantic import ValidationError

from models.inventory_service_models import CatalogProduct, StockRecord

logger = structlog.get_logger(__name__)


class InventoryServiceError(Exception):
    """Any failure reaching the inventory service or reading its answer."""


class InventoryClient:
    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def _get_json(self, path: str):
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.get(path)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as exc:
            logger.warning("inventory_bad_status", path=path, status_code=exc.response.status_code)
            raise InventoryServiceError(f"GET {path} returned {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            logger.warning("inventory_unreachable", path=path, error=str(exc))
            raise InventoryServiceError(f"GET {path} failed: {exc}") from exc
        except ValueError as exc: # body is not JSON
            raise InventoryServiceError(f"GET {path} returned a malformed body") from exc

    async def get_stock(self, item_id: int) -> StockRecord:
        data = await self._get_json(f"/stock/{item_id}")
        try:
            return StockRecord.model_validate(data)
        except ValidationError as exc:
            raise InventoryServiceError(f"malformed stock record for item {item_id}") from exc

    async def get_product(self, item_id: int) -> CatalogProduct:
        data = await self._get_json(f"/products/{item_id}")
        try:
            product = CatalogProduct.model_validate(data)
        except ValidationError as exc:
            raise InventoryServiceError(f"malformed product record for item {item_id}") from exc

        if product.id != item_id:
            raise InventoryServiceError(f"asked for product {item_id}, got {product.id}")
        return product
