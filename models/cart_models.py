"""
Models for cart operations: the line items, the immutable snapshot,
and the result every mutation returns.
"""
import enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from models.inventory_service_models import CatalogProduct


class LineItem(BaseModel):
    """One cart entry. Display attributes from the catalog ride along as extra fields."""
    model_config = ConfigDict(frozen=True, extra="allow")

    id: int
    amount: int = Field(ge=1)

    @classmethod
    def from_product(cls, product: CatalogProduct, amount: int = 1) -> "LineItem":
        data = product.model_dump()
        data["amount"] = amount
        return cls.model_validate(data)

    def with_amount(self, amount: int) -> "LineItem":
        """Copy of this line with a different amount, every other attribute kept."""
        return LineItem.model_validate({**self.model_dump(), "amount": amount})


# Ordered, immutable. Replaced wholesale, never edited in place.
CartSnapshot = Tuple[LineItem, ...]


class MutationOutcome(str, enum.Enum):
    COMMITTED = "committed"
    IGNORED = "ignored" # set_quantity with amount <= 0
    OUT_OF_STOCK = "out_of_stock"
    NOT_IN_CART = "not_in_cart"
    SERVICE_FAILURE = "service_failure"
    STORAGE_FAILURE = "storage_failure"


class MutationResult(BaseModel):
    """What a cart mutation did, and the cart as it stands afterwards."""
    model_config = ConfigDict(frozen=True)

    outcome: MutationOutcome
    items: CartSnapshot
    message: Optional[str] = None

    @property
    def committed(self) -> bool:
        return self.outcome is MutationOutcome.COMMITTED

    @property
    def rejected(self) -> bool:
        return self.outcome not in (MutationOutcome.COMMITTED, MutationOutcome.IGNORED)


class QuantityUpdateModel(BaseModel):
    """Body for setting the absolute quantity of a cart line."""
    amount: int


def cart_info(items: CartSnapshot) -> Dict[str, Any]:
    """Response shape shared by every cart endpoint."""
    cart_items: List[Dict[str, Any]] = [item.model_dump() for item in items]
    return {
        "cart_items": cart_items,
        "total_items": len(cart_items),
    }
