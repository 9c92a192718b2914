from __future__ import annotations

import logging
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from lotledger.app.db import immutability  # noqa: F401  (import for side effects)
from lotledger.app.db.models.models_v1 import Lot, Product, ProductLotTransaction
from lotledger.services.errors import (
    ConflictError,
    InventoryError,
    StoreUnavailableError,
)

logger = logging.getLogger(__name__)


class InventoryStore:
    """
    Accès aux Product / Lot / ProductLotTransaction pour le moteur d'allocation.

    Une instance = une Session. commit_atomic() est le seul point de commit
    du moteur: la ligne de journal et la nouvelle quantité du lot partent
    dans la même transaction SQL, ou pas du tout.
    """

    def __init__(self, db: Session):
        self.db = db

    # ---------- READ ----------
    def get_product(self, product_id: int) -> Product | None:
        return self.db.get(Product, product_id)

    def get_lot(self, lot_id: int, *, for_update: bool = False) -> Lot | None:
        if not for_update:
            return self.db.get(Lot, lot_id)

        # FOR UPDATE (Postgres) + relecture forcée de l'identity map
        try:
            return self.db.execute(
                select(Lot)
                .where(Lot.id == lot_id)
                .with_for_update()
                .execution_options(populate_existing=True)
            ).scalar_one_or_none()
        except OperationalError as exc:
            self.db.rollback()
            logger.error("Could not lock lot %s: %s", lot_id, exc.orig)
            raise StoreUnavailableError(f"Lot {lot_id} could not be locked") from exc

    def list_lots(self, product_id: int) -> Sequence[Lot]:
        return self.db.execute(select(Lot).where(Lot.product_id == product_id)).scalars().all()

    def get_transaction(self, transaction_id: int) -> ProductLotTransaction | None:
        return self.db.get(ProductLotTransaction, transaction_id)

    def list_transactions(self) -> Sequence[ProductLotTransaction]:
        return (
            self.db.execute(select(ProductLotTransaction).order_by(ProductLotTransaction.id.asc()))
            .scalars()
            .all()
        )

    def find_transaction_by_key(self, idempotency_key: str) -> ProductLotTransaction | None:
        return self.db.execute(
            select(ProductLotTransaction).where(ProductLotTransaction.idempotency_key == idempotency_key)
        ).scalar_one_or_none()

    # ---------- WRITE ----------
    def commit_atomic(self, transaction: ProductLotTransaction, lot: Lot) -> None:
        self.db.add(lot)
        self.db.add(transaction)
        self.commit()

    def commit(self) -> None:
        try:
            self.db.commit()
        except StaleDataError as exc:
            self.db.rollback()
            logger.warning("Concurrent modification detected: %s", exc)
            raise ConflictError("Lot was modified concurrently, retry the operation") from exc
        except IntegrityError as exc:
            self.db.rollback()
            logger.warning("Integrity violation on commit: %s", exc.orig)
            raise ConflictError("Write rejected by a store constraint") from exc
        except OperationalError as exc:
            self.db.rollback()
            logger.error("Store failure on commit: %s", exc.orig)
            raise StoreUnavailableError("Inventory store unavailable, nothing was committed") from exc
        except InventoryError:
            self.db.rollback()
            raise

    def rollback(self) -> None:
        self.db.rollback()
