from sqlalchemy.orm import Mapped, mapped_column # object relational mapping
from sqlalchemy import String, Text, DateTime
from datetime import datetime

from db.base import Base # to know that all models inherit from base
from utils.time import utc_now


class CartBlob(Base):
    __tablename__ = "cart_blobs" # Table name in the database

    key: Mapped[str] = mapped_column(String(255), primary_key=True) # Storage key, one row per cart
    value: Mapped[str] = mapped_column(Text, nullable=False) # JSON serialized cart snapshot
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)
