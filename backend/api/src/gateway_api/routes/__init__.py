"""API routes package.

- health: Liveness and Razorpay credential checks
- webhooks: Transaction-session webhooks called by the platform

All routers are registered in main.py with /api prefix.
"""

from gateway_api.routes.health import router as health_router
from gateway_api.routes.webhooks import router as webhooks_router

__all__ = [
    "health_router",
    "webhooks_router",
]
