"""
Wallet Ledger — FastAPI Application.

This is the entry point for the application.
All routers are registered here.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from wallet_ledger.config import get_settings
from wallet_ledger.errors import LedgerError
from wallet_ledger.schemas.transaction import ErrorResponse
from wallet_ledger.api.middleware import RequestLogMiddleware
from wallet_ledger.api.health import router as health_router
from wallet_ledger.api.accounts import router as accounts_router
from wallet_ledger.api.transactions import router as transactions_router

settings = get_settings()


def configure_logging(level: str = settings.LOG_LEVEL) -> None:
    """Attach a single stream handler to the package logger."""
    logger = logging.getLogger("wallet_ledger")
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s"
        ))
        logger.addHandler(handler)


configure_logging()

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Balance-mutation and transaction-recording engine for a custodial wallet",
)

app.add_middleware(RequestLogMiddleware)


@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content=ErrorResponse(error=exc.code, detail=exc.message).model_dump(),
    )


# Register routers
app.include_router(health_router)
app.include_router(accounts_router)
app.include_router(transactions_router)


def run() -> None:
    """Serve the API with uvicorn on the configured host and port."""
    import uvicorn

    uvicorn.run(
        "wallet_ledger.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
