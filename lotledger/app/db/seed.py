from __future__ import annotations

import logging
from datetime import timedelta
from decimal import Decimal

from sqlalchemy import select

from lotledger.app.core.config import LOG_LEVEL
from lotledger.app.core.logging import configure_logging
from lotledger.app.db.base import Base
from lotledger.app.db.models.models_v1 import Lot, Product, utcnow
from lotledger.app.db.session import SessionLocal, engine
from lotledger.services.allocation import AllocationEngine, AllocationRequest
from lotledger.services.store import InventoryStore

logger = logging.getLogger("lotledger.seed")

DEMO_PRODUCT = "Riz parfumé 5kg"
DEMO_LOTS = [
    # (description, âge en jours, réception initiale)
    ("Lot A - container 1", 30, Decimal("40")),
    ("Lot B - container 2", 14, Decimal("25")),
    ("Lot C - container 3", 2, Decimal("60")),
]


def run_seed(session_factory=SessionLocal, bind=engine) -> int:
    """
    Crée le schéma puis un produit de démo avec 3 lots datés. Retourne l'id produit.

    Rejouable: chaque réception porte une clé d'idempotence par lot, un
    passage interrompu est complété au suivant sans doublon.
    """
    Base.metadata.create_all(bind=bind)

    db = session_factory()
    try:
        product = db.scalar(select(Product).where(Product.name == DEMO_PRODUCT))
        if product is None:
            product = Product(name=DEMO_PRODUCT)
            db.add(product)
            db.flush()

            now = utcnow()
            for description, age_days, _ in DEMO_LOTS:
                db.add(Lot(product_id=product.id, description=description, created_at=now - timedelta(days=age_days)))
            db.commit()
        product_id = product.id

        lots = db.execute(
            select(Lot).where(Lot.product_id == product_id).order_by(Lot.created_at.asc(), Lot.id.asc())
        ).scalars().all()
        lot_ids = [lot.id for lot in lots]

        # les réceptions passent par le journal (quantité initiale = somme des deltas)
        allocation = AllocationEngine(InventoryStore(db))
        for lot_id, (_, _, received) in zip(lot_ids, DEMO_LOTS):
            allocation.create_transaction(
                AllocationRequest(
                    product_id=product_id,
                    lot_id=lot_id,
                    quantity=received,
                    idempotency_key=f"seed-lot-{lot_id}",
                )
            )

        logger.info("SEED OK: product=%s lots=%s", product_id, lot_ids)
        return product_id
    finally:
        db.close()


if __name__ == "__main__":
    configure_logging(LOG_LEVEL)
    run_seed()
