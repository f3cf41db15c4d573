"""
gateway/services/source.py

HTTP client for the remote device telemetry API.
- fetch_records: GET one endpoint and return its JSON array
- fetch_latest_status / fetch_latest_activity: first element of each array, parsed

Errors propagate to the caller, which decides between fallback and HTTP status.
"""

from typing import Any, Optional

import httpx
import structlog

from config import settings
from gateway.schemas import DeviceActivityRecord, DeviceStatusRecord

logger = structlog.get_logger(__name__)

STATUS_PATH: str = "/api/v1/status"
ACTIVITY_PATH: str = "/api/v1/activity"


async def fetch_records(path: str) -> list[dict[str, Any]]:
    """
    GET ``path`` from the device API.

    Raises httpx.TimeoutException / httpx.HTTPStatusError on transport or status
    failures, and ValueError when the body is not a JSON array.
    """
    url = f"{settings.api_base}{path}"
    async with httpx.AsyncClient(
        timeout=settings.source_timeout_seconds,
        headers={"User-Agent": settings.source_user_agent},
    ) as client:
        response = await client.get(url)
        response.raise_for_status()
        data = response.json()

    if not isinstance(data, list):
        raise ValueError(f"expected a JSON array from {path}, got {type(data).__name__}")

    logger.debug("source_records_fetched", path=path, count=len(data))
    return data


async def fetch_latest_status() -> Optional[DeviceStatusRecord]:
    """Return the first heart rate record, or None when the device has none."""
    records = await fetch_records(STATUS_PATH)
    return DeviceStatusRecord.model_validate(records[0]) if records else None


async def fetch_latest_activity() -> Optional[DeviceActivityRecord]:
    """Return the first window activity record, or None when the device has none."""
    records = await fetch_records(ACTIVITY_PATH)
    return DeviceActivityRecord.model_validate(records[0]) if records else None
