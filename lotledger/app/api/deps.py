from __future__ import annotations

from typing import Generator

from fastapi import Depends
from sqlalchemy.orm import Session

from lotledger.app.db.session import SessionLocal
from lotledger.services.allocation import AllocationEngine
from lotledger.services.store import InventoryStore


def get_db() -> Generator:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_store(db: Session = Depends(get_db)) -> InventoryStore:
    return InventoryStore(db)


def get_allocation_engine(store: InventoryStore = Depends(get_store)) -> AllocationEngine:
    return AllocationEngine(store)
