"""
Records returned by the inventory / catalog service.
Read only, fetched fresh on every stock check.
"""
from pydantic import BaseModel, ConfigDict


class StockRecord(BaseModel):
    """Available quantity for an item, as reported by GET stock/{id}."""
    id: int
    amount: int # zero or less means out of stock

    @property
    def available(self) -> bool:
        return self.amount > 0


class CatalogProduct(BaseModel):
    """Catalog record from GET products/{id}. Display fields are kept as extras."""
    model_config = ConfigDict(extra="allow")

    id: int
