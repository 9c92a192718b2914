from __future__ import annotations

from decimal import Decimal

from fastapi import APIRouter, Depends, Header
from pydantic import BaseModel, Field, field_validator

from lotledger.app.api.deps import get_allocation_engine, get_store
from lotledger.app.db.models.core_types import LotPolicy
from lotledger.app.schemas.transaction import TransactionRead
from lotledger.services.allocation import AllocationEngine, AllocationRequest
from lotledger.services.errors import MethodNotAllowedError, TransactionNotFoundError
from lotledger.services.store import InventoryStore

router = APIRouter(prefix="/product-lot-transactions")


# ---------- Schemas ----------
class TransactionCreate(BaseModel):
    product_id: int
    lot_id: int | None = None  # absent -> lot choisi par la politique
    quantity: Decimal = Field(max_digits=18, decimal_places=4)
    policy: LotPolicy = LotPolicy.fifo

    @field_validator("quantity")
    @classmethod
    def quantity_not_zero(cls, v: Decimal) -> Decimal:
        if v == 0:
            raise ValueError("quantity must be non-zero")
        return v


# ---------- Helpers ----------
def _clean_idempotency_key(idempotency_key: str | None) -> str | None:
    if idempotency_key is None or not idempotency_key.strip():
        return None
    return idempotency_key.strip()


# ---------- Endpoints ----------
@router.get("", response_model=list[TransactionRead])
def list_transactions(store: InventoryStore = Depends(get_store)):
    return store.list_transactions()


@router.get("/{transaction_id}", response_model=TransactionRead)
def get_transaction(transaction_id: int, store: InventoryStore = Depends(get_store)):
    txn = store.get_transaction(transaction_id)
    if not txn:
        raise TransactionNotFoundError(transaction_id)
    return txn


@router.post("", response_model=TransactionRead)
def create_transaction(
    payload: TransactionCreate,
    engine: AllocationEngine = Depends(get_allocation_engine),
    idempotency_key: str | None = Header(default=None, alias="Idempotency-Key", max_length=64),
):
    return engine.create_transaction(
        AllocationRequest(
            product_id=payload.product_id,
            lot_id=payload.lot_id,
            quantity=payload.quantity,
            policy=payload.policy,
            idempotency_key=_clean_idempotency_key(idempotency_key),
        )
    )


# Journal append-only: toute modification est refusée, quel que soit le payload
@router.put("")
@router.patch("")
@router.delete("")
def reject_ledger_mutation():
    raise MethodNotAllowedError(allow=("GET", "POST"))


@router.put("/{transaction_id}")
@router.patch("/{transaction_id}")
@router.delete("/{transaction_id}")
def reject_transaction_mutation():
    raise MethodNotAllowedError(allow=("GET",))
