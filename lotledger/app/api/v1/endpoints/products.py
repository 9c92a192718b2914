from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy import select
from sqlalchemy.orm import Session

from lotledger.app.api.deps import get_db, get_store
from lotledger.app.db.models.models_v1 import Lot, Product
from lotledger.app.schemas.product import ProductRead
from lotledger.services.errors import ProductNotFoundError, ReferencedEntityError
from lotledger.services.store import InventoryStore

router = APIRouter(prefix="/products")


class ProductCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)


class ProductUpdate(BaseModel):
    name: str = Field(min_length=1, max_length=255)


def _get_product_or_404(db: Session, product_id: int) -> Product:
    p = db.get(Product, product_id)
    if not p:
        raise ProductNotFoundError(product_id)
    return p


@router.get("", response_model=list[ProductRead])
def list_products(db: Session = Depends(get_db)):
    return db.execute(select(Product).order_by(Product.id)).scalars().all()


@router.get("/{product_id}", response_model=ProductRead)
def get_product(product_id: int, db: Session = Depends(get_db)):
    return _get_product_or_404(db, product_id)


@router.post("", response_model=ProductRead)
def create_product(payload: ProductCreate, store: InventoryStore = Depends(get_store)):
    p = Product(name=payload.name)
    store.db.add(p)
    store.commit()
    store.db.refresh(p)
    return p


@router.put("/{product_id}", response_model=ProductRead)
def update_product(product_id: int, payload: ProductUpdate, store: InventoryStore = Depends(get_store)):
    p = _get_product_or_404(store.db, product_id)
    p.name = payload.name
    store.commit()
    store.db.refresh(p)
    return p


@router.delete("/{product_id}")
def delete_product(product_id: int, store: InventoryStore = Depends(get_store)):
    p = _get_product_or_404(store.db, product_id)

    has_lots = store.db.execute(select(Lot.id).where(Lot.product_id == product_id).limit(1)).first()
    if has_lots:
        raise ReferencedEntityError(f"Product {product_id} still has lots")

    store.db.delete(p)
    store.commit()
    return {"id": product_id, "deleted": True}
