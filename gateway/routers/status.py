"""
gateway/routers/status.py

Status endpoints.
- GET /copy: full narrative (alive, activity, availability) for the latest device data
- GET /status, GET /activity: pass-through of the device API arrays
- POST /evaluate: run the classifier and predictor over caller-supplied snapshots
"""

import asyncio
from typing import Any

import httpx
import structlog
from fastapi import APIRouter
from fastapi.responses import JSONResponse

from config import settings
from gateway.schemas import EvaluationRequest, EvaluationResult, StatusCopy
from gateway.services import source
from gateway.services.availability import predict_availability
from gateway.services.classifier import classify_activity
from gateway.services.narrative import build_offline_copy, build_status_copy

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/copy", response_model=None)
async def get_status_copy() -> StatusCopy | JSONResponse:
    """
    Build the status narrative from the device API.

    Flow:
    1. Refuse with 500 when the device API base URL is not configured
    2. Fetch heart rate and window activity concurrently
    3. Error status from the source -> offline copy; timeout -> 504
    4. Classify, predict and return the assembled copy
    """
    if not settings.api_base:
        logger.error("api_base_not_configured")
        return JSONResponse({"error": "Server configuration error"}, status_code=500)

    try:
        status_record, activity_record = await asyncio.gather(
            source.fetch_latest_status(),
            source.fetch_latest_activity(),
        )
    except httpx.HTTPStatusError as exc:
        logger.error(
            "source_http_error",
            status=exc.response.status_code,
            url=str(exc.request.url),
        )
        return build_offline_copy()
    except httpx.TimeoutException:
        logger.warning("source_timeout", timeout=settings.source_timeout_seconds)
        return JSONResponse({"error": "Data source timeout"}, status_code=504)
    except (httpx.HTTPError, ValueError) as exc:
        logger.error("status_copy_failed", error=str(exc))
        return JSONResponse({"error": "Internal Server Error"}, status_code=500)

    return build_status_copy(
        status_record,
        activity_record,
        timestamp_unit=settings.heart_rate_timestamp_unit,
    )


async def _proxy(path: str) -> list[dict[str, Any]]:
    try:
        return await source.fetch_records(path)
    except httpx.TimeoutException:
        logger.warning("source_timeout", path=path)
        return []
    except httpx.HTTPStatusError as exc:
        logger.error("source_http_error", path=path, status=exc.response.status_code)
        return []
    except (httpx.HTTPError, ValueError) as exc:
        logger.error("source_fetch_failed", path=path, error=str(exc))
        return []


@router.get("/status")
async def get_heart_rate_records() -> list[dict[str, Any]]:
    """Device heart rate records; empty on any upstream failure."""
    return await _proxy(source.STATUS_PATH)


@router.get("/activity")
async def get_activity_records() -> list[dict[str, Any]]:
    """Device window activity records; empty on any upstream failure."""
    return await _proxy(source.ACTIVITY_PATH)


@router.post("/evaluate")
async def evaluate(request: EvaluationRequest) -> EvaluationResult:
    """Classify and predict for snapshots posted by the caller (timestamps in ms)."""
    telemetry = request.telemetry
    details = (
        classify_activity(telemetry.window_title, telemetry.process_name)
        if telemetry is not None
        else None
    )
    availability = predict_availability(
        request.heart_rate,
        details,
        telemetry.mouse_idle_seconds if telemetry is not None else 0,
        now=request.now,
    )
    logger.info(
        "evaluation_complete",
        activity_type=details.type.value if details is not None else None,
        availability=availability.status,
    )
    return EvaluationResult(activity=details, availability=availability)
