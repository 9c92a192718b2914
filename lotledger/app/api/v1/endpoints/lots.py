from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy import select
from sqlalchemy.orm import Session

from lotledger.app.api.deps import get_db, get_store
from lotledger.app.db.models.models_v1 import Lot, ProductLotTransaction
from lotledger.app.schemas.lot import LotRead
from lotledger.services.errors import LotNotFoundError, ProductNotFoundError, ReferencedEntityError
from lotledger.services.store import InventoryStore

router = APIRouter(prefix="/lots")


class LotCreate(BaseModel):
    product_id: int
    description: str | None = None
    # date de réception; défaut = maintenant (UTC)
    created_at: datetime | None = None


class LotUpdate(BaseModel):
    description: str | None = Field(default=None)


def _get_lot_or_404(db: Session, lot_id: int) -> Lot:
    lot = db.get(Lot, lot_id)
    if not lot:
        raise LotNotFoundError(lot_id)
    return lot


@router.get("", response_model=list[LotRead])
def list_lots(db: Session = Depends(get_db)):
    return db.execute(select(Lot).order_by(Lot.product_id, Lot.created_at, Lot.id)).scalars().all()


@router.get("/{lot_id}", response_model=LotRead)
def get_lot(lot_id: int, db: Session = Depends(get_db)):
    return _get_lot_or_404(db, lot_id)


@router.post("", response_model=LotRead)
def create_lot(payload: LotCreate, store: InventoryStore = Depends(get_store)):
    # FK check (fail fast, message clair)
    if store.get_product(payload.product_id) is None:
        raise ProductNotFoundError(payload.product_id)

    # un lot démarre toujours à 0: le stock entre par le journal
    lot = Lot(product_id=payload.product_id, description=payload.description)
    if payload.created_at is not None:
        lot.created_at = payload.created_at

    store.db.add(lot)
    store.commit()
    store.db.refresh(lot)
    return lot


@router.put("/{lot_id}", response_model=LotRead)
def update_lot(lot_id: int, payload: LotUpdate, store: InventoryStore = Depends(get_store)):
    lot = _get_lot_or_404(store.db, lot_id)
    lot.description = payload.description
    store.commit()
    store.db.refresh(lot)
    return lot


@router.delete("/{lot_id}")
def delete_lot(lot_id: int, store: InventoryStore = Depends(get_store)):
    lot = _get_lot_or_404(store.db, lot_id)

    referenced = store.db.execute(
        select(ProductLotTransaction.id).where(ProductLotTransaction.lot_id == lot_id).limit(1)
    ).first()
    if referenced:
        raise ReferencedEntityError(f"Lot {lot_id} is referenced by the transaction ledger")

    store.db.delete(lot)
    store.commit()
    return {"id": lot_id, "deleted": True}
