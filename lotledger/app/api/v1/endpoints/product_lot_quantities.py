from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from lotledger.app.api.deps import get_db
from lotledger.app.schemas.quantity import LedgerDriftRead, ProductLotQuantityRead
from lotledger.services.inventory import find_ledger_drift, list_product_lot_quantities

router = APIRouter(prefix="/product-lot-quantities")


@router.get("", response_model=list[ProductLotQuantityRead])
def get_product_lot_quantities(db: Session = Depends(get_db)):
    """
    Quantités par (produit, lot) — READ ONLY.
    Aucun endpoint d'écriture: la quantité ne bouge que via le journal.
    """
    return list_product_lot_quantities(db)


@router.get("/drift", response_model=list[LedgerDriftRead])
def get_ledger_drift(db: Session = Depends(get_db)):
    return find_ledger_drift(db)
