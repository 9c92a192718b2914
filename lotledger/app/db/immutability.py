"""
Garde-fous ORM sur le journal.

- ProductLotTransaction: append-only (aucun UPDATE ni DELETE via l'ORM)
- Lot: created_at et product_id figés après création

Les listeners sont enregistrés à l'import du module (import for side effects).
"""
from __future__ import annotations

import logging

from sqlalchemy import event, inspect

from lotledger.app.db.models.models_v1 import Lot, ProductLotTransaction
from lotledger.services.errors import ImmutableFieldError, MethodNotAllowedError

logger = logging.getLogger(__name__)

LOT_FROZEN_FIELDS = ("created_at", "product_id")


@event.listens_for(ProductLotTransaction, "before_update")
def _refuse_transaction_update(mapper, connection, target):
    state = inspect(target)
    if not any(state.attrs[attr.key].history.has_changes() for attr in mapper.column_attrs):
        return
    logger.warning("Refused UPDATE on product_lot_transactions id=%s", target.id)
    raise MethodNotAllowedError(f"Transaction {target.id} is immutable")


@event.listens_for(ProductLotTransaction, "before_delete")
def _refuse_transaction_delete(mapper, connection, target):
    logger.warning("Refused DELETE on product_lot_transactions id=%s", target.id)
    raise MethodNotAllowedError(f"Transaction {target.id} cannot be deleted")


@event.listens_for(Lot, "before_update")
def _freeze_lot_fields(mapper, connection, target):
    state = inspect(target)
    for field in LOT_FROZEN_FIELDS:
        if state.attrs[field].history.has_changes():
            raise ImmutableFieldError("Lot", field)
