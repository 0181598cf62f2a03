"""
PayWallet FastAPI Application
Main entry point for the application
"""

import logging
import os
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from paywallet.core.config import settings

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)

# Sentry integration
if os.getenv("SENTRY_DSN"):
    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    from sentry_sdk.integrations.redis import RedisIntegration
    from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

    sentry_sdk.init(
        dsn=os.getenv("SENTRY_DSN"),
        integrations=[
            FastApiIntegration(),
            SqlalchemyIntegration(),
            RedisIntegration(),
        ],
        traces_sample_rate=0.1,
        environment=settings.app_env,
    )

from paywallet.api.health import router as health_router
from paywallet.api.v1.auth import router as auth_router
from paywallet.api.v1.kyc import router as kyc_router
from paywallet.api.v1.offers import router as offers_router
from paywallet.api.v1.transactions import router as transactions_router
from paywallet.api.v1.wallets import router as wallets_router
from paywallet.core.errors import WalletError
from paywallet.core.metrics import ACTIVE_CONNECTIONS, REQUEST_COUNT, REQUEST_DURATION

logger = logging.getLogger(__name__)

# Create FastAPI app instance
app = FastAPI(
    title="PayWallet API",
    description="Mobile wallet accounts, transfers and bill payments",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(WalletError)
async def wallet_error_handler(request: Request, exc: WalletError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.category.value, "detail": exc.message}
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"error": "internal", "detail": "Internal server error"}
    )


@app.middleware("http")
async def metrics_middleware(request: Request, call_next):
    start_time = time.time()
    ACTIVE_CONNECTIONS.inc()
    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
        return response
    finally:
        duration = time.time() - start_time
        ACTIVE_CONNECTIONS.dec()
        REQUEST_COUNT.labels(
            method=request.method,
            endpoint=request.url.path,
            status=status_code
        ).inc()
        REQUEST_DURATION.labels(
            method=request.method,
            endpoint=request.url.path
        ).observe(duration)


@app.get("/metrics")
async def metrics():
    """Prometheus metrics endpoint"""
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


# Include routers
app.include_router(health_router, prefix=settings.api_v1_prefix, tags=["health"])
app.include_router(auth_router, prefix=settings.api_v1_prefix, tags=["authentication"])
app.include_router(wallets_router, prefix=settings.api_v1_prefix, tags=["wallets"])
app.include_router(transactions_router, prefix=settings.api_v1_prefix, tags=["transactions"])
app.include_router(offers_router, prefix=settings.api_v1_prefix, tags=["offers"])
app.include_router(kyc_router, prefix=settings.api_v1_prefix, tags=["kyc"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "paywallet.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug
    )
