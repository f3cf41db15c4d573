"""
tests/fixtures.py

Shared test data and helper functions for constructing test payloads.
All tests must use these fixtures instead of hardcoding test values.
"""

from datetime import datetime, timedelta
from typing import Optional

from gateway.schemas import (
    ActivityCategory,
    ActivityDetails,
    ActivitySubCategory,
    DeviceActivityRecord,
    DeviceStatusRecord,
    HeartRateSnapshot,
    Level,
)

# ── Reference clock ─────────────────────────────────────────

# Saturday; tests override the hour as needed
TEST_NOW: datetime = datetime(2024, 6, 15, 10, 0, 0)
TEST_WORKDAY_NOW: datetime = datetime(2024, 6, 12, 10, 0, 0)  # Wednesday


def at_hour(hour: int, base: datetime = TEST_NOW) -> datetime:
    """Return ``base`` moved to the given local hour."""
    return base.replace(hour=hour)


def millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def build_heart_rate(
    hr: int = 72,
    age: timedelta = timedelta(seconds=30),
    now: datetime = TEST_NOW,
    is_watch_off: bool = False,
) -> HeartRateSnapshot:
    """Build a HeartRateSnapshot whose last sample is ``age`` old relative to ``now``."""
    return HeartRateSnapshot(
        last_non_zero_hr=hr,
        last_timestamp_millis=millis(now - age),
        is_watch_off=is_watch_off,
    )


def build_activity(
    activity_type: ActivityCategory = ActivityCategory.WORKING,
    sub_type: Optional[ActivitySubCategory] = ActivitySubCategory.CODING_ACTIVE,
    description: str = "用 Cursor",
    raw_title: str = "main.ts - myproject",
    raw_process: str = "cursor.exe",
    focus_level: Optional[Level] = None,
    intensity: Optional[Level] = None,
) -> ActivityDetails:
    """Build an ActivityDetails with sensible defaults for testing."""
    return ActivityDetails(
        type=activity_type,
        sub_type=sub_type,
        description=description,
        raw_title=raw_title,
        raw_process=raw_process,
        focus_level=focus_level,
        intensity=intensity,
    )


def build_status_record(
    hr: int = 72,
    now: datetime = TEST_NOW,
    age: timedelta = timedelta(seconds=30),
    is_watch_off: bool = False,
) -> DeviceStatusRecord:
    """Build a device status record with a nanosecond timestamp, as the device API sends it."""
    timestamp_ns = millis(now - age) * 1_000_000
    return DeviceStatusRecord(
        user_id="demo",
        device_id="demo_device",
        alarm_state="NONE",
        last_non_zero_hr=hr,
        last_timestamp=timestamp_ns,
        is_watch_off=is_watch_off,
        recent_hrs=[{"HeartRate": hr, "Timestamp": timestamp_ns}],
    )


def build_activity_record(
    window_title: str = "main.ts - myproject",
    process_name: str = "cursor.exe",
    mouse_idle_seconds: int = 30,
) -> DeviceActivityRecord:
    """Build a device activity record with sensible defaults for testing."""
    return DeviceActivityRecord(
        user_id="demo",
        timestamp=millis(TEST_NOW),
        process_name=process_name,
        window_title=window_title,
        mouse_idle_seconds=mouse_idle_seconds,
        is_fullscreen=False,
        extra_info="",
    )
