"""
gateway/services/narrative.py

Assembles the status copy served by GET /copy.
Runs the full pipeline over the first records returned by the device API:
timestamp normalization -> classifier -> predictor -> alive verdict.
"""

from datetime import datetime
from typing import Literal, Optional

import structlog

from gateway.schemas import (
    ActivityText,
    AliveStatus,
    AvailabilityStatus,
    CopyData,
    DeviceActivityRecord,
    DeviceStatusRecord,
    StatusCopy,
)
from gateway.services.availability import heart_rate_is_fresh, predict_availability
from gateway.services.classifier import classify_activity
from gateway.services.vitals import evaluate_alive_status

logger = structlog.get_logger(__name__)


def build_status_copy(
    status_record: Optional[DeviceStatusRecord],
    activity_record: Optional[DeviceActivityRecord],
    timestamp_unit: Literal["ns", "ms"],
    now: Optional[datetime] = None,
) -> StatusCopy:
    """Build the narrative for the latest device records; either may be missing."""
    now = now or datetime.now()

    heart_rate = (
        status_record.to_snapshot(timestamp_unit) if status_record is not None else None
    )
    telemetry = activity_record.to_snapshot() if activity_record is not None else None

    alive = evaluate_alive_status(heart_rate, heart_rate_is_fresh(heart_rate, now))
    details = (
        classify_activity(telemetry.window_title, telemetry.process_name)
        if telemetry is not None
        else None
    )
    availability = predict_availability(
        heart_rate,
        details,
        telemetry.mouse_idle_seconds if telemetry is not None else 0,
        now=now,
    )

    logger.info(
        "status_copy_built",
        activity_type=details.type.value if details is not None else None,
        availability=availability.status,
        alive=alive.text,
    )

    return StatusCopy(
        alive=alive,
        activity=ActivityText(text=details.description if details is not None else "未知"),
        availability=availability,
        data=CopyData(
            heart_rate=heart_rate.last_non_zero_hr if heart_rate is not None else None,
            mouse_idle_seconds=telemetry.mouse_idle_seconds if telemetry is not None else None,
            window_title=telemetry.window_title if telemetry is not None else None,
            process_name=telemetry.process_name if telemetry is not None else None,
        ),
        last_update=now,
    )


def build_offline_copy(now: Optional[datetime] = None) -> StatusCopy:
    """Copy shown when the device API answers with an error status."""
    return StatusCopy(
        alive=AliveStatus(text="掉线了", color="text-neutral-500"),
        activity=ActivityText(text="未知"),
        availability=AvailabilityStatus(
            status="有点懵",
            reason="暂时无法连接到数据源",
            color="text-neutral-500",
            suggestion="请稍后重试",
        ),
        data=CopyData(),
        last_update=now or datetime.now(),
    )
