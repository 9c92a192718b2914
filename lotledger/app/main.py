from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from lotledger.app.api.v1.router import router as v1_router
from lotledger.app.core.config import LOG_LEVEL
from lotledger.app.core.logging import configure_logging
from lotledger.services.errors import InventoryError

configure_logging(LOG_LEVEL)

app = FastAPI(title="LOT LEDGER", version="0.1.0")
app.include_router(v1_router, prefix="/v1")


@app.exception_handler(InventoryError)
async def inventory_error_handler(request: Request, exc: InventoryError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
        headers=exc.headers,
    )
