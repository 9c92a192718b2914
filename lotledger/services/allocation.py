from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Mapping, Union

from lotledger.app.db.models.core_types import LotPolicy, LotSource
from lotledger.app.db.models.models_v1 import Lot, ProductLotTransaction
from lotledger.services.errors import (
    IdempotencyMismatchError,
    InsufficientQuantityError,
    InvalidReferenceError,
    InventoryError,
    LotNotFoundError,
    NoLotAvailableError,
    ProductNotFoundError,
)
from lotledger.services.lot_selection import LOT_SELECTORS, LotSelector, select_lot
from lotledger.services.store import InventoryStore

logger = logging.getLogger(__name__)


# ---------- Cible d'une transaction ----------
@dataclass(frozen=True)
class ExplicitLot:
    lot_id: int


@dataclass(frozen=True)
class PolicyResolved:
    policy: LotPolicy


LotTarget = Union[ExplicitLot, PolicyResolved]


@dataclass(frozen=True)
class AllocationRequest:
    product_id: int
    quantity: Decimal
    policy: LotPolicy = LotPolicy.fifo
    lot_id: int | None = None
    idempotency_key: str | None = None

    def __post_init__(self):
        object.__setattr__(self, "policy", LotPolicy(self.policy))

    @property
    def target(self) -> LotTarget:
        if self.lot_id is not None:
            return ExplicitLot(self.lot_id)
        return PolicyResolved(self.policy)


class AllocationEngine:
    """
    Applique une transaction signée sur un lot.

    Déroulé:
        1. résolution du lot (explicite, sinon politique FIFO/LIFO)
        2. verrouillage du lot + validation quantity + delta >= 0
        3. lot.quantity += delta et ajout de la ligne de journal
        4. un seul commit pour les deux écritures

    Toute erreur avant le commit fait un rollback: rien n'est écrit.
    Un conflit au commit (version_id du lot) remonte en ConflictError,
    sans retry ici: c'est à l'appelant de rejouer.
    """

    def __init__(
        self,
        store: InventoryStore,
        selectors: Mapping[LotPolicy, LotSelector] = LOT_SELECTORS,
    ):
        self.store = store
        self.selectors = selectors

    def create_transaction(self, request: AllocationRequest) -> ProductLotTransaction:
        if request.idempotency_key:
            existing = self.store.find_transaction_by_key(request.idempotency_key)
            if existing:
                _check_replay(existing, request)
                return existing

        target = request.target
        try:
            lot = self._resolve_lot(request.product_id, target)
            quantity_after = lot.quantity + request.quantity
            if quantity_after < 0:
                raise InsufficientQuantityError(lot.id, lot.quantity, -request.quantity)
        except InventoryError as exc:
            self.store.rollback()
            logger.warning(
                "Transaction rejected product=%s target=%s delta=%s: %s",
                request.product_id,
                target,
                request.quantity,
                exc.message,
            )
            raise

        lot.quantity = quantity_after
        txn = ProductLotTransaction(
            product_id=request.product_id,
            lot_id=lot.id,
            quantity=request.quantity,
            policy=request.policy,
            lot_source=LotSource.explicit if isinstance(target, ExplicitLot) else LotSource.policy,
            idempotency_key=request.idempotency_key,
        )
        self.store.commit_atomic(txn, lot)

        logger.info(
            "Transaction %s committed product=%s lot=%s delta=%s quantity=%s policy=%s source=%s",
            txn.id,
            txn.product_id,
            txn.lot_id,
            txn.quantity,
            quantity_after,
            txn.policy.value,
            txn.lot_source.value,
        )
        return txn

    def _resolve_lot(self, product_id: int, target: LotTarget) -> Lot:
        product = self.store.get_product(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)

        if isinstance(target, ExplicitLot):
            lot = self.store.get_lot(target.lot_id, for_update=True)
            if lot is None:
                raise LotNotFoundError(target.lot_id)
            if lot.product_id != product.id:
                raise InvalidReferenceError(lot.id, product.id)
            return lot

        candidate = select_lot(self.store.list_lots(product.id), target.policy, self.selectors)
        if candidate is None:
            raise NoLotAvailableError(product.id)

        lot = self.store.get_lot(candidate.id, for_update=True)
        if lot is None:
            # supprimé entre la sélection et le verrou
            raise LotNotFoundError(candidate.id)
        return lot


def _check_replay(existing: ProductLotTransaction, request: AllocationRequest) -> None:
    same = (
        existing.product_id == request.product_id
        and existing.quantity == request.quantity
        and existing.policy == request.policy
        and (request.lot_id is None or existing.lot_id == request.lot_id)
    )
    if not same:
        raise IdempotencyMismatchError(request.idempotency_key)
