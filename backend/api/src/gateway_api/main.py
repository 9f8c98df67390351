"""FastAPI application serving the Razorpay transaction-session webhooks.

Routes:
- /api/ping and /api/health/gateway
- /api/webhooks/v1/* called synchronously by the platform

The same app runs behind API Gateway (``handler``) or locally (``run_server``).
"""

import logging
import os
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from mangum import Mangum

from gateway_api.exceptions import register_exception_handlers
from gateway_api.middleware.correlation import CorrelationIdMiddleware
from gateway_api.routes import health_router, webhooks_router
from gateway_shared.utils.logging import configure_logging

SERVICE_NAME = "razorpay-transaction-app"

configure_logging(getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO))
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Razorpay Transaction App",
    description="Transaction-session webhooks backed by Razorpay orders, payments and refunds",
    version="0.1.0",
)

# Checkout widget pages are served from the storefront origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=os.environ.get(
        "CORS_ALLOW_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000"
    ).split(","),
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)
app.add_middleware(CorrelationIdMiddleware)

register_exception_handlers(app)

app.include_router(health_router, prefix="/api")
app.include_router(webhooks_router, prefix="/api")


@app.get("/api/ping")
async def ping() -> dict[str, Any]:
    """Liveness probe; does not touch Razorpay."""
    return {
        "status": "ok",
        "timestamp": datetime.now(UTC).isoformat(),
        "service": SERVICE_NAME,
    }


# AWS Lambda entry point
handler = Mangum(app, lifespan="off")


def run_server(
    host: str = "0.0.0.0",
    port: int | None = None,
    reload: bool = False,
) -> None:
    """Serve the app with uvicorn.

    Args:
        host: Interface to bind.
        port: Port to listen on; defaults to $PORT or 8080.
        reload: Restart on source changes (development only).
    """
    import uvicorn

    port = port or int(os.environ.get("PORT", "8080"))
    logger.info("Starting %s on %s:%d", SERVICE_NAME, host, port)

    if reload:
        # reload needs an import string instead of the app object
        uvicorn.run(
            "gateway_api.main:app",
            host=host,
            port=port,
            reload=True,
            reload_dirs=["backend/api/src", "backend/shared/src"],
        )
    else:
        uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run_server(reload=True)
