"""
Cart service: the three validated cart mutations (add, remove, set quantity).

Each operation works on a copy of the snapshot taken when it starts, checks
stock with the inventory service, and commits the whole copy through the
store. A failed check or lookup leaves the store untouched and is reported
once through the notifier. Nothing raises past these methods.
"""
import asyncio
from contextlib import asynccontextmanager
from typing import Optional

import structlog

from models.cart_models import CartSnapshot, LineItem, MutationOutcome, MutationResult
from services.cart_store import CartStore
from services.inventory_service import InventoryClient, InventoryServiceError
from services.notifications import (
    ADD_FAILED_MESSAGE,
    OUT_OF_STOCK_MESSAGE,
    REMOVE_FAILED_MESSAGE,
    UPDATE_FAILED_MESSAGE,
    Notifier,
)
from services.storage import StorageError

logger = structlog.get_logger(__name__)


def find_index(snapshot: CartSnapshot, item_id: int) -> int:
    return next((index for index, item in enumerate(snapshot) if item.id == item_id), -1)


class CartService:
    def __init__(
        self,
        store: CartStore,
        inventory: InventoryClient,
        notifier: Notifier,
        serialize: bool = False,
    ):
        self.store = store
        self.inventory = inventory
        self.notifier = notifier
        # None keeps last-writer-wins between overlapping calls
        self._lock: Optional[asyncio.Lock] = asyncio.Lock() if serialize else None

    @property
    def items(self) -> CartSnapshot:
        return self.store.items

    @asynccontextmanager
    async def _turn(self):
        if self._lock is None:
            yield
        else:
            async with self._lock:
                yield

    def _reject(self, outcome: MutationOutcome, message: str) -> MutationResult:
        try:
            self.notifier.report(message, "error")
        except Exception:
            logger.exception("cart_notification_failed", message=message)
        return MutationResult(outcome=outcome, items=self.store.items, message=message)

    def _commit(self, snapshot: CartSnapshot, failure_message: str) -> MutationResult:
        try:
            self.store.replace(snapshot)
        except StorageError:
            logger.exception("cart_persist_failed", key=self.store.key)
            return self._reject(MutationOutcome.STORAGE_FAILURE, failure_message)
        return MutationResult(outcome=MutationOutcome.COMMITTED, items=self.store.items)

    async def add_item(self, item_id: int) -> MutationResult:
        """Add one unit of an item, fetching its catalog record the first time."""
        async with self._turn():
            current = self.store.items
            try:
                stock = await self.inventory.get_stock(item_id)
                if not stock.available:
                    logger.warning("add_item_out_of_stock", item_id=item_id, stock=stock.amount)
                    return self._reject(MutationOutcome.OUT_OF_STOCK, OUT_OF_STOCK_MESSAGE)

                updated = list(current)
                index = find_index(updated, item_id)

                if index == -1:
                    product = await self.inventory.get_product(item_id)
                    updated.append(LineItem.from_product(product, amount=1))
                else:
                    existing = updated[index]
                    if existing.amount >= stock.amount:
                        logger.warning(
                            "add_item_out_of_stock",
                            item_id=item_id, stock=stock.amount, in_cart=existing.amount,
                        )
                        return self._reject(MutationOutcome.OUT_OF_STOCK, OUT_OF_STOCK_MESSAGE)
                    updated[index] = existing.with_amount(existing.amount + 1)
            except InventoryServiceError:
                logger.exception("add_item_failed", item_id=item_id)
                return self._reject(MutationOutcome.SERVICE_FAILURE, ADD_FAILED_MESSAGE)

            result = self._commit(tuple(updated), ADD_FAILED_MESSAGE)
            if result.committed:
                logger.info("item_added", item_id=item_id)
            return result

    async def remove_item(self, item_id: int) -> MutationResult:
        """Drop a line from the cart. Removing an item that is not there is an error."""
        async with self._turn():
            current = self.store.items
            if find_index(current, item_id) == -1:
                logger.warning("remove_item_not_in_cart", item_id=item_id)
                return self._reject(MutationOutcome.NOT_IN_CART, REMOVE_FAILED_MESSAGE)

            result = self._commit(
                tuple(item for item in current if item.id != item_id), REMOVE_FAILED_MESSAGE
            )
            if result.committed:
                logger.info("item_removed", item_id=item_id)
            return result

    async def set_quantity(self, item_id: int, amount: int) -> MutationResult:
        """Set the absolute quantity of a line. amount <= 0 is ignored."""
        if amount <= 0:
            return MutationResult(outcome=MutationOutcome.IGNORED, items=self.store.items)

        async with self._turn():
            current = self.store.items
            try:
                stock = await self.inventory.get_stock(item_id)
            except InventoryServiceError:
                logger.exception("set_quantity_failed", item_id=item_id)
                return self._reject(MutationOutcome.SERVICE_FAILURE, UPDATE_FAILED_MESSAGE)

            if stock.amount < amount:
                logger.warning("set_quantity_out_of_stock", item_id=item_id, stock=stock.amount, requested=amount)
                return self._reject(MutationOutcome.OUT_OF_STOCK, OUT_OF_STOCK_MESSAGE)

            updated = list(current)
            index = find_index(updated, item_id)
            if index == -1:
                logger.warning("set_quantity_not_in_cart", item_id=item_id)
                return self._reject(MutationOutcome.NOT_IN_CART, UPDATE_FAILED_MESSAGE)

            updated[index] = updated[index].with_amount(amount)
            result = self._commit(tuple(updated), UPDATE_FAILED_MESSAGE)
            if result.committed:
                logger.info("quantity_updated", item_id=item_id, amount=amount)
            return result
