"""
Erreurs métier du stock par lot.

Chaque classe porte un status HTTP et un code machine; la couche API les
rend telles quelles via un exception handler unique (voir app/main.py).
"""
from __future__ import annotations

from decimal import Decimal


class InventoryError(Exception):
    status_code = 400
    code = "inventory_error"
    headers: dict[str, str] | None = None

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# ---------- NOT FOUND ----------
class NotFoundError(InventoryError):
    status_code = 404
    code = "not_found"


class ProductNotFoundError(NotFoundError):
    def __init__(self, product_id: int):
        super().__init__(f"Product {product_id} not found")
        self.product_id = product_id


class LotNotFoundError(NotFoundError):
    def __init__(self, lot_id: int):
        super().__init__(f"Lot {lot_id} not found")
        self.lot_id = lot_id


class TransactionNotFoundError(NotFoundError):
    def __init__(self, transaction_id: int):
        super().__init__(f"Transaction {transaction_id} not found")
        self.transaction_id = transaction_id


# ---------- VALIDATION ----------
class InvalidReferenceError(InventoryError):
    code = "invalid_reference"

    def __init__(self, lot_id: int, product_id: int):
        super().__init__(f"Lot {lot_id} does not belong to product {product_id}")
        self.lot_id = lot_id
        self.product_id = product_id


class NoLotAvailableError(InventoryError):
    code = "no_lot_available"

    def __init__(self, product_id: int):
        super().__init__(f"No lot available for product {product_id}")
        self.product_id = product_id


class InsufficientQuantityError(InventoryError):
    code = "insufficient_quantity"

    def __init__(self, lot_id: int, available: Decimal, requested: Decimal):
        super().__init__(
            f"Insufficient quantity in lot {lot_id} (available={available}, requested={requested})"
        )
        self.lot_id = lot_id
        self.available = available
        self.requested = requested


class ImmutableFieldError(InventoryError):
    code = "immutable_field"

    def __init__(self, entity: str, field: str):
        super().__init__(f"{entity}.{field} cannot be changed after creation")
        self.entity = entity
        self.field = field


class IdempotencyMismatchError(InventoryError):
    status_code = 422
    code = "idempotency_mismatch"

    def __init__(self, idempotency_key: str):
        super().__init__(f"Idempotency-Key {idempotency_key!r} was already used with a different payload")
        self.idempotency_key = idempotency_key


# ---------- STORE ----------
class ConflictError(InventoryError):
    """Modification concurrente détectée au commit: l'appelant peut rejouer."""

    status_code = 409
    code = "conflict"


class ReferencedEntityError(InventoryError):
    status_code = 409
    code = "in_use"


class StoreUnavailableError(InventoryError):
    status_code = 503
    code = "store_unavailable"


# ---------- LEDGER ----------
class MethodNotAllowedError(InventoryError):
    status_code = 405
    code = "method_not_allowed"

    def __init__(self, message: str = "Product lot transactions are append-only", allow=("GET", "POST")):
        super().__init__(message)
        self.headers = {"Allow": ", ".join(allow)}
