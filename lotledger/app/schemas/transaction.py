from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel

from lotledger.app.db.models.core_types import LotPolicy, LotSource


class TransactionRead(BaseModel):
    id: int
    product_id: int
    lot_id: int
    quantity: Decimal
    policy: LotPolicy
    lot_source: LotSource
    idempotency_key: str | None
    created_at: datetime

    class Config:
        from_attributes = True
