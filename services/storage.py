"""
Durable storage for the serialized cart: a plain get/set string blob store.
"""
from typing import Dict, Optional, Protocol

import structlog
from sqlalchemy import select # Select for queries
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from db.models.models import CartBlob

logger = structlog.get_logger(__name__)


class StorageError(Exception):
    """Raised when the storage medium cannot be read or written."""


class CartStorage(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class MemoryStorage:
    """Process local storage, gone when the process exits."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._blobs: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._blobs.get(key)

    def set(self, key: str, value: str) -> None:
        self._blobs[key] = value

    def delete(self, key: str) -> None:
        self._blobs.pop(key, None)


class SqlStorage:
    """Blob storage backed by the cart_blobs table, one row per key."""

    def __init__(self, session_factory: sessionmaker[Session]):
        self.session_factory = session_factory

    def get(self, key: str) -> Optional[str]:
        try:
            with self.session_factory() as session:
                result = session.execute(select(CartBlob.value).where(CartBlob.key == key)) # SELECT value FROM cart_blobs WHERE key =: key
                return result.scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise StorageError(f"could not read {key!r}") from exc

    def set(self, key: str, value: str) -> None:
        try:
            with self.session_factory() as session:
                blob = session.get(CartBlob, key)
                if blob is None:
                    session.add(CartBlob(key=key, value=value))
                else:
                    blob.value = value
                session.commit()
        except SQLAlchemyError as exc:
            raise StorageError(f"could not write {key!r}") from exc
        logger.debug("cart_blob_written", key=key, size=len(value))

    def delete(self, key: str) -> None:
        try:
            with self.session_factory() as session:
                blob = session.get(CartBlob, key)
                if blob is not None:
                    session.delete(blob)
                    session.commit()
        except SQLAlchemyError as exc:
            raise StorageError(f"could not delete {key!r}") from exc
