from decimal import Decimal

from lotledger.app.db.models.models_v1 import Lot
from lotledger.services.allocation import AllocationEngine, AllocationRequest
from lotledger.services.errors import InventoryError
from lotledger.services.inventory import (
    LedgerDrift,
    ProductLotQuantity,
    find_ledger_drift,
    list_product_lot_quantities,
)
from lotledger.services.store import InventoryStore


def test_projection_has_one_row_per_lot(db_session, make_product, make_lot):
    p1 = make_product("P1")
    p2 = make_product("P2")
    a = make_lot(p1, age_days=3)
    b = make_lot(p1, age_days=1)
    c = make_lot(p2)

    rows = list_product_lot_quantities(db_session)

    assert rows == [
        ProductLotQuantity(product_id=p1.id, lot_id=a.id, quantity=Decimal("0")),
        ProductLotQuantity(product_id=p1.id, lot_id=b.id, quantity=Decimal("0")),
        ProductLotQuantity(product_id=p2.id, lot_id=c.id, quantity=Decimal("0")),
    ]


def test_accounting_identity_holds_after_mixed_attempts(db_session, make_product, make_lot):
    """
    GIVEN une suite de transactions dont certaines sont rejetées
    THEN chaque lot == somme des deltas committés (les rejets comptent 0)
    """
    p = make_product()
    old = make_lot(p, age_days=5)
    new = make_lot(p, age_days=1)
    engine = AllocationEngine(InventoryStore(db_session))

    attempts = [
        AllocationRequest(product_id=p.id, lot_id=old.id, quantity=Decimal("8")),
        AllocationRequest(product_id=p.id, lot_id=new.id, quantity=Decimal("1.5")),
        AllocationRequest(product_id=p.id, quantity=Decimal("-9")),  # FIFO -> old, rejeté
        AllocationRequest(product_id=p.id, quantity=Decimal("-2.25")),  # FIFO -> old
        AllocationRequest(product_id=p.id, quantity=Decimal("-2"), policy="LIFO"),  # new, rejeté
        AllocationRequest(product_id=p.id, quantity=Decimal("-1.5"), policy="LIFO"),  # new
    ]
    committed = {old.id: Decimal("0"), new.id: Decimal("0")}
    for request in attempts:
        try:
            txn = engine.create_transaction(request)
        except InventoryError:
            continue
        committed[txn.lot_id] += request.quantity

    quantities = {row.lot_id: row.quantity for row in list_product_lot_quantities(db_session)}
    assert quantities == committed == {old.id: Decimal("5.75"), new.id: Decimal("0")}
    assert find_ledger_drift(db_session) == []


def test_drift_reports_lot_changed_outside_the_ledger(db_session, make_product, make_lot):
    p = make_product()
    lot = make_lot(p)
    AllocationEngine(InventoryStore(db_session)).create_transaction(
        AllocationRequest(product_id=p.id, lot_id=lot.id, quantity=Decimal("4"))
    )

    # écriture directe sur le lot, sans ligne de journal
    db_session.get(Lot, lot.id).quantity = Decimal("6")
    db_session.commit()

    assert find_ledger_drift(db_session) == [
        LedgerDrift(product_id=p.id, lot_id=lot.id, quantity=Decimal("6"), ledger_total=Decimal("4"))
    ]


def test_lot_created_with_stock_but_no_ledger_is_drift(db_session, make_product, make_lot):
    lot = make_lot(make_product(), quantity=Decimal("2"))

    drift = find_ledger_drift(db_session)

    assert [(d.lot_id, d.ledger_total) for d in drift] == [(lot.id, Decimal("0"))]
