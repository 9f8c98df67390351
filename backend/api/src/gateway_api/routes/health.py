"""Health check endpoints."""

from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.status import HTTP_200_OK, HTTP_503_SERVICE_UNAVAILABLE

from gateway_api.dependencies import get_razorpay_service
from gateway_shared.models.errors import GatewayError
from gateway_shared.services.razorpay_service import RazorpayService

router = APIRouter(prefix="/health", tags=["health"])


@router.get(
    "/gateway",
    summary="Check Razorpay credentials",
    description="Performs a read-only Razorpay call with the configured key pair.",
    responses={503: {"description": "Razorpay rejected the credentials or is unreachable"}},
)
async def gateway_health(
    razorpay: RazorpayService = Depends(get_razorpay_service),
) -> JSONResponse:
    config = razorpay.config
    body: dict[str, Any] = {
        "gateway": config.gateway_name,
        "environment": config.environment,
        "testMode": config.is_test_mode,
    }

    try:
        await run_in_threadpool(razorpay.verify_credentials)
    except GatewayError as e:
        body.update(status="unavailable", message=e.message)
        return JSONResponse(status_code=HTTP_503_SERVICE_UNAVAILABLE, content=body)

    body["status"] = "ok"
    return JSONResponse(status_code=HTTP_200_OK, content=body)
