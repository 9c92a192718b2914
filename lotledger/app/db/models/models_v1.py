from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import (
    String,
    Integer,
    DateTime,
    ForeignKey,
    Numeric,
    Text,
    Enum,
    Index,
    CheckConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lotledger.app.core.config import QUANTITY_PRECISION, QUANTITY_SCALE
from lotledger.app.db.base import Base, BigIntPK
from lotledger.app.db.models.core_types import LotPolicy, LotSource


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------- MASTER DATA ----------
class Product(Base):
    __tablename__ = "products"
    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    lots: Mapped[list["Lot"]] = relationship(back_populates="product")


# ---------- INVENTORY ----------
class Lot(Base):
    __tablename__ = "lots"
    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    description: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    # Seule valeur modifiée par le moteur d'allocation
    quantity: Mapped[Decimal] = mapped_column(
        Numeric(QUANTITY_PRECISION, QUANTITY_SCALE),
        default=Decimal("0"),
        nullable=False,
    )
    version_id: Mapped[int] = mapped_column(Integer, nullable=False)

    product: Mapped[Product] = relationship(back_populates="lots")

    __mapper_args__ = {"version_id_col": version_id}
    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_lot_quantity_nonneg"),
        Index("ix_lots_product_created", "product_id", "created_at"),
    )


# ---------- LEDGER ----------
class ProductLotTransaction(Base):
    """Ligne du journal: append-only, jamais modifiée ni supprimée."""

    __tablename__ = "product_lot_transactions"
    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)

    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    lot_id: Mapped[int] = mapped_column(
        ForeignKey("lots.id", ondelete="RESTRICT"),
        nullable=False,
    )

    # delta signé (+ entrée, - sortie)
    quantity: Mapped[Decimal] = mapped_column(Numeric(QUANTITY_PRECISION, QUANTITY_SCALE), nullable=False)
    policy: Mapped[LotPolicy] = mapped_column(Enum(LotPolicy, name="lot_policy"), nullable=False)
    lot_source: Mapped[LotSource] = mapped_column(Enum(LotSource, name="lot_source"), nullable=False)

    idempotency_key: Mapped[str | None] = mapped_column(String(64), unique=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    lot: Mapped[Lot] = relationship()

    __table_args__ = (
        CheckConstraint("quantity <> 0", name="ck_lot_txn_qty_nonzero"),
        Index("ix_lot_txn_lot_id_id", "lot_id", "id"),
    )
