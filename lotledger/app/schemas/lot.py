from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel


class LotRead(BaseModel):
    id: int
    product_id: int
    description: str | None
    created_at: datetime
    quantity: Decimal  # READ ONLY — modifié uniquement par les transactions

    class Config:
        from_attributes = True
