from decimal import Decimal

from pydantic import BaseModel


class ProductLotQuantityRead(BaseModel):
    product_id: int
    lot_id: int
    quantity: Decimal

    class Config:
        from_attributes = True


class LedgerDriftRead(ProductLotQuantityRead):
    ledger_total: Decimal
