"""
gateway/services/vitals.py

Coarse "alive" verdict derived from the heart rate snapshot alone.
Shown next to the availability narrative on the status page.
"""

from typing import Optional

from gateway.constants import (
    ALIVE_CRITICAL_HIGH,
    ALIVE_EXERCISE_MIN,
    ALIVE_NORMAL_MIN,
    ALIVE_SLEEP_MIN,
)
from gateway.schemas import AliveStatus, HeartRateSnapshot


def evaluate_alive_status(
    heart_rate: Optional[HeartRateSnapshot],
    is_recent: bool,
) -> AliveStatus:
    """Map the latest heart rate and its freshness to a short status label."""
    if heart_rate is None:
        return AliveStatus(text="未知", color="text-neutral-500 dark:text-neutral-400")

    hr = heart_rate.last_non_zero_hr

    if hr == 0 or heart_rate.is_watch_off:
        return AliveStatus(text="可能挂了", color="text-red-500 dark:text-red-400")

    if not is_recent:
        return AliveStatus(text="掉线了", color="text-neutral-500 dark:text-neutral-400")

    if hr >= ALIVE_CRITICAL_HIGH:
        return AliveStatus(text="快死了", color="text-red-500 dark:text-red-400")
    if hr >= ALIVE_EXERCISE_MIN:
        return AliveStatus(text="在运动", color="text-orange-500 dark:text-orange-400")
    if hr >= ALIVE_NORMAL_MIN:
        return AliveStatus(text="还没死", color="text-black dark:text-white")
    if hr >= ALIVE_SLEEP_MIN:
        return AliveStatus(text="在睡觉", color="text-blue-500 dark:text-blue-400")
    return AliveStatus(text="可能快死了？", color="text-red-500 dark:text-red-400")
