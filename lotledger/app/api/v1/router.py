from fastapi import APIRouter

from lotledger.app.api.v1.endpoints.health import router as health_router
from lotledger.app.api.v1.endpoints.products import router as products_router
from lotledger.app.api.v1.endpoints.lots import router as lots_router
from lotledger.app.api.v1.endpoints.product_lot_quantities import router as quantities_router
from lotledger.app.api.v1.endpoints.product_lot_transactions import router as transactions_router

router = APIRouter()
router.include_router(health_router, tags=["health"])
router.include_router(products_router, tags=["products"])
router.include_router(lots_router, tags=["lots"])
router.include_router(quantities_router, tags=["product_lot_quantities"])
router.include_router(transactions_router, tags=["product_lot_transactions"])
