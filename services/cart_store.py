"""
Cart Store: the single source of truth for the cart during a session.

Holds the current snapshot and mirrors every replacement to durable storage
before returning. Readers only ever see whole snapshots; there is no way to
edit a single line from outside.
"""
from typing import Optional

import structlog
from pydantic import TypeAdapter, ValidationError

from models.cart_models import CartSnapshot, LineItem
from services.storage import CartStorage, StorageError

logger = structlog.get_logger(__name__)

_snapshot_adapter = TypeAdapter(CartSnapshot)


def dump_snapshot(snapshot: CartSnapshot) -> str:
    return _snapshot_adapter.dump_json(snapshot).decode()


def load_snapshot(raw: str) -> CartSnapshot:
    return _snapshot_adapter.validate_json(raw)


class CartStore:
    def __init__(self, storage: CartStorage, key: str):
        self.storage = storage
        self.key = key
        self._snapshot: CartSnapshot = ()
        self.restore()

    @property
    def items(self) -> CartSnapshot:
        return self._snapshot

    def get(self, item_id: int) -> Optional[LineItem]:
        return next((item for item in self._snapshot if item.id == item_id), None)

    def restore(self) -> CartSnapshot:
        """Load the persisted cart. Missing or unreadable data means an empty cart."""
        try:
            raw = self.storage.get(self.key)
        except StorageError:
            logger.warning("cart_restore_unreadable_storage", key=self.key, exc_info=True)
            raw = None

        if raw is None:
            self._snapshot = ()
            return self._snapshot

        try:
            snapshot = load_snapshot(raw)
        except ValidationError as exc: # also covers invalid JSON
            logger.warning("cart_restore_failed", key=self.key, errors=exc.error_count())
            snapshot = ()

        ids = [item.id for item in snapshot]
        if len(ids) != len(set(ids)):
            logger.warning("cart_restore_duplicate_ids", key=self.key)
            snapshot = ()

        self._snapshot = snapshot
        return self._snapshot

    def replace(self, snapshot: CartSnapshot) -> None:
        """Swap in a new snapshot and write it through to storage.

        If the write fails the previous snapshot is put back and a
        StorageError is raised, so memory and storage keep matching.
        """
        snapshot = tuple(snapshot)
        previous = self._snapshot
        self._snapshot = snapshot
        try:
            self.storage.set(self.key, dump_snapshot(snapshot))
        except StorageError:
            self._snapshot = previous
            raise
        except Exception as exc:
            self._snapshot = previous
            raise StorageError(f"could not write {self.key!r}") from exc

    def clear(self) -> None:
        """Empty the cart and drop the persisted copy."""
        self.storage.delete(self.key)
        self._snapshot = ()
