from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from lotledger.app.db.models.models_v1 import Lot, ProductLotTransaction


@dataclass(frozen=True)
class ProductLotQuantity:
    product_id: int
    lot_id: int
    quantity: Decimal


@dataclass(frozen=True)
class LedgerDrift:
    product_id: int
    lot_id: int
    quantity: Decimal
    ledger_total: Decimal


def list_product_lot_quantities(db: Session) -> list[ProductLotQuantity]:
    """
    Projection (READ ONLY) de la quantité par (produit, lot).

    Lue directement sur lots.quantity à chaque appel: aucune table de cache,
    donc aucune dérive possible avec le lot.
    """
    rows = db.execute(
        select(Lot.product_id, Lot.id, Lot.quantity).order_by(Lot.product_id, Lot.created_at, Lot.id)
    ).all()
    return [ProductLotQuantity(product_id=int(pid), lot_id=int(lid), quantity=qty) for pid, lid, qty in rows]


def find_ledger_drift(db: Session) -> list[LedgerDrift]:
    """
    Contrôle de l'identité comptable:
        lots.quantity == SUM(product_lot_transactions.quantity) par lot

    Retourne uniquement les lots en écart (liste vide = journal cohérent).
    """
    ledger = (
        select(
            ProductLotTransaction.lot_id.label("lot_id"),
            func.sum(ProductLotTransaction.quantity).label("total"),
        )
        .group_by(ProductLotTransaction.lot_id)
        .subquery()
    )

    rows = db.execute(
        select(
            Lot.product_id,
            Lot.id,
            Lot.quantity,
            func.coalesce(ledger.c.total, 0),
        )
        .outerjoin(ledger, ledger.c.lot_id == Lot.id)
        .order_by(Lot.id)
    ).all()

    drift = []
    for pid, lid, qty, total in rows:
        total = Decimal(str(total))
        if Decimal(qty) != total:
            drift.append(LedgerDrift(product_id=int(pid), lot_id=int(lid), quantity=qty, ledger_total=total))
    return drift
