"""
gateway/services/availability.py

Availability prediction: can the user be contacted right now?
- heart_rate_is_fresh: freshness check on the latest heart rate sample
- predict_availability: prioritized decision cascade over heart rate, idle time,
  time of day and the classified activity

Uses constants from gateway/constants.py; no magic numbers allowed.
Pure apart from reading the wall clock, which callers may override via ``now``.
"""

import re
from datetime import datetime, timedelta
from typing import Optional

from pydantic import BaseModel

from gateway.constants import (
    BROWSING_TITLE_KEEP_LEN,
    BROWSING_TITLE_MAX_LEN,
    GAME_NAME_MAX_LEN,
    HR_CALM_MAX,
    HR_EXERTION_MIN,
    HR_FRESHNESS_MIN,
    HR_INTENSE_MIN,
    HR_RESTING_MAX,
    HR_RUNNING_MIN,
    HR_WALKING_MIN,
    IDLE_AWAY_MIN,
    IDLE_BORED_MIN,
    IDLE_BROWSING_DRIFT_MIN,
    IDLE_BROWSING_PAUSE_MIN,
    IDLE_COURSE_WATCH_MAX,
    IDLE_COURSE_WATCH_MIN,
    IDLE_DIGESTING_MAX,
    IDLE_EXERTION_MIN,
    IDLE_LEFT_MIN,
    IDLE_REST_MIN,
    IDLE_THINKING_MAX,
    IDLE_THINKING_MIN,
    IDLE_VERY_BORED_MIN,
    IDLE_WALKING_MIN,
    LAST_WORKDAY,
    LUNCH_END_HOUR,
    LUNCH_START_HOUR,
    MOVIE_TITLE_MAX_LEN,
    SLEEP_END_HOUR,
    SLEEP_START_HOUR,
    SOCIAL_TYPING_MAX_SEC,
    WORK_END_HOUR,
    WORK_START_HOUR,
)
from gateway.schemas import (
    ActivityCategory,
    ActivityDetails,
    ActivitySubCategory,
    AvailabilityStatus,
    HeartRateSnapshot,
    Level,
)

# ── Colour palette (Tailwind classes), grouped by semantic family ──
COLOR_UNCLEAR = "text-neutral-500 dark:text-neutral-400"
COLOR_UNKNOWN = "text-neutral-400 dark:text-neutral-500"
COLOR_ASLEEP = "text-purple-500 dark:text-purple-400"
COLOR_RESTING = "text-indigo-500 dark:text-indigo-400"
COLOR_EXERCISE_INTENSE = "text-emerald-600 dark:text-emerald-500"
COLOR_EXERCISE = "text-emerald-500 dark:text-emerald-400"
COLOR_OUTSIDE = "text-teal-600 dark:text-teal-500"
COLOR_WALKING = "text-blue-500 dark:text-blue-400"
COLOR_AWAY = "text-blue-600 dark:text-blue-500"
COLOR_LEFT = "text-sky-500 dark:text-sky-400"
COLOR_SYSTEM = "text-teal-500 dark:text-teal-400"
COLOR_GAMING_INTENSE = "text-red-600 dark:text-red-500"
COLOR_GAMING = "text-red-500 dark:text-red-400"
COLOR_WORKING = "text-orange-500 dark:text-orange-400"
COLOR_LEARNING = "text-green-600 dark:text-green-500"
COLOR_MEETING = "text-cyan-500 dark:text-cyan-400"
COLOR_ENTERTAINMENT = "text-lime-500 dark:text-lime-400"
COLOR_SOCIAL = "text-pink-500 dark:text-pink-400"
COLOR_AI = "text-violet-500 dark:text-violet-400"
COLOR_BROWSING = "text-sky-500 dark:text-sky-400"
COLOR_THINKING = "text-gray-500 dark:text-gray-400"
COLOR_IDLE = "text-yellow-500 dark:text-yellow-400"
COLOR_IDLE_LIGHT = "text-yellow-400 dark:text-yellow-300"
COLOR_IDLE_QUIET = "text-gray-400 dark:text-gray-500"

_GAME_TITLE_SPLIT = re.compile(r"[-–|—]|steam", re.IGNORECASE)
_TITLE_SPLIT = re.compile(r"[-–|—]")
_NEW_TAB = re.compile(r"\b(new tab|新标签页)\b", re.IGNORECASE | re.ASCII)
_STUDIO = re.compile(r"studio", re.IGNORECASE)

_BUSY_SYSTEM_TASKS = (
    ActivitySubCategory.SYSTEM_COMPILING,
    ActivitySubCategory.SYSTEM_RENDERING,
)


class _TimeContext(BaseModel):
    is_typical_sleep_time: bool
    is_typical_work_time: bool
    is_lunch_break_time: bool

    model_config = {"frozen": True}


def _time_context(now: datetime) -> _TimeContext:
    hour = now.hour
    is_workday = now.weekday() <= LAST_WORKDAY
    return _TimeContext(
        is_typical_sleep_time=hour >= SLEEP_START_HOUR or hour < SLEEP_END_HOUR,
        is_typical_work_time=WORK_START_HOUR <= hour < WORK_END_HOUR and is_workday,
        is_lunch_break_time=LUNCH_START_HOUR <= hour < LUNCH_END_HOUR,
    )


def heart_rate_is_fresh(
    heart_rate: Optional[HeartRateSnapshot],
    now: Optional[datetime] = None,
    max_staleness: timedelta = timedelta(minutes=HR_FRESHNESS_MIN),
) -> bool:
    """True when the last sample is no older than ``max_staleness``; a zero timestamp is stale."""
    if heart_rate is None or not heart_rate.last_timestamp_millis:
        return False
    now = now or datetime.now()
    staleness_millis = now.timestamp() * 1000 - heart_rate.last_timestamp_millis
    return staleness_millis <= max_staleness.total_seconds() * 1000


def _is_busy_system_task(activity: ActivityDetails) -> bool:
    return (
        activity.type == ActivityCategory.SYSTEM_TASK
        and activity.sub_type in _BUSY_SYSTEM_TASKS
    )


def predict_availability(
    heart_rate: Optional[HeartRateSnapshot],
    activity: Optional[ActivityDetails],
    mouse_idle_seconds: int,
    now: Optional[datetime] = None,
) -> AvailabilityStatus:
    """
    Infer availability from heart rate, the classified activity and mouse idleness.

    Branches are evaluated top to bottom and the first hit wins:
    sleep/rest -> exertion -> away -> possibly left -> per-category narrative.
    Never raises.
    """
    now = now or datetime.now()
    time_info = _time_context(now)
    idle_minutes = max(mouse_idle_seconds, 0) // 60

    if activity is None:
        return AvailabilityStatus(
            status="有点懵",
            reason="暂时看不清你在做什么",
            color=COLOR_UNCLEAR,
            suggestion="也许稍后信息会更明朗",
        )

    hr_fresh = heart_rate_is_fresh(heart_rate, now)
    hr_value = (
        heart_rate.last_non_zero_hr
        if heart_rate is not None and heart_rate.last_non_zero_hr > 0
        else None
    )
    desc = activity.description

    # ── Sleep / rest ─────────────────────────────────────────
    if hr_value and hr_value < HR_RESTING_MAX and hr_fresh and idle_minutes >= IDLE_REST_MIN:
        if time_info.is_typical_sleep_time:
            return AvailabilityStatus(
                status="睡着了",
                reason=f"心率{hr_value}...",
                color=COLOR_ASLEEP,
                suggestion="嘘，让她/他好好休息吧",
            )
        if time_info.is_lunch_break_time and activity.type != ActivityCategory.WORKING:
            return AvailabilityStatus(
                status="午休中",
                reason=f"心率{hr_value}，可能是午后小憩？",
                color=COLOR_ASLEEP,
                suggestion="让她/他安静地休息一会儿吧",
            )
        return AvailabilityStatus(
            status="在休息",
            reason=f"心率{hr_value}，鼠标{idle_minutes}分钟没动，可能在小憩？",
            color=COLOR_RESTING,
            suggestion="看起来在休息，不急的话晚点再联系",
        )

    # ── Elevated heart rate + not at the computer → exercising ──
    if hr_fresh and hr_value:
        if hr_value >= HR_EXERTION_MIN and idle_minutes >= IDLE_EXERTION_MIN:
            if hr_value >= HR_INTENSE_MIN:
                return AvailabilityStatus(
                    status="运动中",
                    reason=f"心率{hr_value}，估计跑得很快",
                    color=COLOR_EXERCISE_INTENSE,
                    suggestion="运动时不便回复，稍后再联系",
                )
            if hr_value >= HR_RUNNING_MIN:
                return AvailabilityStatus(
                    status="在跑步",
                    reason=f"心率{hr_value}，估计在跑步？",
                    color=COLOR_EXERCISE,
                    suggestion="运动时不便回复，稍后再试",
                )
            return AvailabilityStatus(
                status="可能出去了",
                reason=f"心率{hr_value}偏高，鼠标{idle_minutes}分钟没动，可能在外活动",
                color=COLOR_OUTSIDE,
                suggestion="试试其他联系方式？",
            )
        if HR_WALKING_MIN <= hr_value < HR_EXERTION_MIN and idle_minutes >= IDLE_WALKING_MIN:
            return AvailabilityStatus(
                status="可能外出了",
                reason=f"心率{hr_value}，鼠标{idle_minutes}分钟没动，可能出去散步",
                color=COLOR_WALKING,
                suggestion="暂时不在电脑前，晚点再联系",
            )

    # ── Long idle → probably away from the computer ─────────
    if idle_minutes > IDLE_AWAY_MIN:
        if _is_busy_system_task(activity):
            return AvailabilityStatus(
                status="电脑工作中",
                reason=f"电脑正在 {desc}，可能在等结果",
                color=COLOR_SYSTEM,
                suggestion="如果不急，可以稍等一下",
            )
        return AvailabilityStatus(
            status="似乎出门了",
            reason=f"鼠标{idle_minutes}分钟没动，大概率不在电脑前",
            color=COLOR_AWAY,
            suggestion="晚点再找或试试其他联系方式",
        )
    if idle_minutes > IDLE_LEFT_MIN:
        if _is_busy_system_task(activity):
            return AvailabilityStatus(
                status="电脑工作中",
                reason=f"电脑正在 {desc}，人可能在旁边等",
                color=COLOR_SYSTEM,
                suggestion="可以先留个言",
            )
        if hr_fresh and hr_value and hr_value < HR_CALM_MAX:
            return AvailabilityStatus(
                status="可能在小憩",
                reason=f"鼠标{idle_minutes}分钟没动，心率{hr_value}较平缓",
                color=COLOR_RESTING,
                suggestion="也许在闭目养神，稍等一下",
            )
        return AvailabilityStatus(
            status="可能离开了",
            reason=f"鼠标{idle_minutes}分钟没动，可能暂时不在",
            color=COLOR_LEFT,
            suggestion="可以留个言或稍后再看",
        )

    # ── Per-category narrative ───────────────────────────────
    handler = _CATEGORY_HANDLERS.get(activity.type, _unknown_status)
    return handler(activity, idle_minutes, mouse_idle_seconds)


def _gaming_status(
    activity: ActivityDetails, idle_minutes: int, idle_seconds: int
) -> AvailabilityStatus:
    desc = activity.description
    name = _GAME_TITLE_SPLIT.split(activity.raw_title)[0].strip()
    if len(name) > GAME_NAME_MAX_LEN or "exe" in name.lower():
        name = "某个游戏"
    play_desc = desc if desc.startswith("玩") else f"在玩《{name}》"
    if activity.intensity == Level.HIGH or activity.sub_type == ActivitySubCategory.GAMING_INTENSE:
        return AvailabilityStatus(
            status="沉浸游戏中",
            reason=f"{play_desc}，看起来很投入",
            color=COLOR_GAMING_INTENSE,
            suggestion="现在打扰可能会打断精彩操作",
        )
    return AvailabilityStatus(
        status="在玩游戏",
        reason=play_desc,
        color=COLOR_GAMING,
        suggestion="游戏时间，回复可能会慢",
    )


def _working_status(
    activity: ActivityDetails, idle_minutes: int, idle_seconds: int
) -> AvailabilityStatus:
    desc = activity.description
    status = "在忙碌"
    reason = f"正在{desc}"
    suggestion = "如果不急，可以留言"
    if activity.focus_level == Level.HIGH:
        status = "写代码"
        reason = f"都在{desc}了还能在干啥"
        suggestion = "她/他需要集中精神，晚点联系更好"
    if activity.sub_type == ActivitySubCategory.CODING_DEBUGGING:
        status = "在调试"
        reason = "似乎聚精会神地改Bug"
        suggestion = "调试时不可打断，建议稍后再联系"
    if IDLE_THINKING_MIN < idle_minutes <= IDLE_THINKING_MAX:
        status = "工作中"
        reason = f"正在{desc}，但已有{idle_minutes}分钟没动，可能在思考"
        suggestion = "可以发消息，但请耐心等待回复"
    return AvailabilityStatus(
        status=status, reason=reason, color=COLOR_WORKING, suggestion=suggestion
    )


def _learning_status(
    activity: ActivityDetails, idle_minutes: int, idle_seconds: int
) -> AvailabilityStatus:
    desc = activity.description
    status = "学习中"
    reason = f"正在{desc}"
    suggestion = "她/他在学习，尽量别打扰"
    if activity.focus_level == Level.HIGH or activity.sub_type in (
        ActivitySubCategory.LEARNING_READING_DOCS,
        ActivitySubCategory.LEARNING_VIDEO_COURSE,
    ):
        status = "沉浸学习"
        reason = f"正在{desc}，看起来很认真"
        suggestion = "让她/他安静学习一会儿"
    if (
        IDLE_COURSE_WATCH_MIN < idle_minutes <= IDLE_COURSE_WATCH_MAX
        and activity.sub_type == ActivitySubCategory.LEARNING_VIDEO_COURSE
    ):
        reason = f"正在{desc}，鼠标{idle_minutes}分钟没动，可能在认真观看或做笔记"
    elif IDLE_THINKING_MIN < idle_minutes <= IDLE_DIGESTING_MAX:
        reason = f"正在{desc}，有{idle_minutes}分钟没操作，可能在消化"
    return AvailabilityStatus(
        status=status, reason=reason, color=COLOR_LEARNING, suggestion=suggestion
    )


def _meeting_status(
    activity: ActivityDetails, idle_minutes: int, idle_seconds: int
) -> AvailabilityStatus:
    status = "大概在开会？"
    reason = activity.description
    if activity.sub_type == ActivitySubCategory.MEETING_PRESENTING:
        status = "可能在演示"
        reason = "专心演示中"
    return AvailabilityStatus(
        status=status, reason=reason, color=COLOR_MEETING, suggestion="可以留言"
    )


def _entertainment_status(
    activity: ActivityDetails, idle_minutes: int, idle_seconds: int
) -> AvailabilityStatus:
    status = "放松中"
    reason = activity.description
    if activity.sub_type == ActivitySubCategory.WATCHING_MOVIE_SERIES:
        status = "看剧/电影"
        title = _TITLE_SPLIT.split(activity.raw_title)[0].strip()
        lowered = title.lower()
        if len(title) > MOVIE_TITLE_MAX_LEN or "potplayer" in lowered or "vlc" in lowered:
            title = "一部影片"
        reason = f"正在看《{title}》"
        if IDLE_THINKING_MIN < idle_minutes <= IDLE_THINKING_MAX:
            reason += "，看得很专心"
    elif activity.sub_type == ActivitySubCategory.LISTENING_MUSIC:
        status = "听音乐"
        reason = "在听音乐放松"
    elif activity.sub_type == ActivitySubCategory.WATCHING_SHORT_VIDEO:
        status = "刷短视频"
        reason = "在看有趣的短视频"
    return AvailabilityStatus(
        status=status, reason=reason, color=COLOR_ENTERTAINMENT, suggestion="休息一下吧"
    )


def _social_status(
    activity: ActivityDetails, idle_minutes: int, idle_seconds: int
) -> AvailabilityStatus:
    desc = activity.description
    status = "在聊天"
    reason = desc
    if activity.sub_type == ActivitySubCategory.CHATTING_IM:
        reason = f"正在{desc}"
    elif activity.sub_type == ActivitySubCategory.BROWSING_SOCIAL_MEDIA:
        status = "逛动态"
        reason = f"在{desc}"
    if 0 < idle_seconds <= SOCIAL_TYPING_MAX_SEC:
        reason += "，可能在打字或看消息"
    return AvailabilityStatus(
        status=status, reason=reason, color=COLOR_SOCIAL, suggestion="可以发消息看看"
    )


def _ai_status(
    activity: ActivityDetails, idle_minutes: int, idle_seconds: int
) -> AvailabilityStatus:
    desc = activity.description
    reason = f"正在用 {desc.replace('与 ', '', 1).replace('对话', '', 1)}"
    if _STUDIO.search(desc):
        reason = f"在 {desc} 中尝试新功能"
    return AvailabilityStatus(
        status="与 AI 对话",
        reason=reason,
        color=COLOR_AI,
        suggestion="她/他可能在思考，稍等一下",
    )


def _browsing_status(
    activity: ActivityDetails, idle_minutes: int, idle_seconds: int
) -> AvailabilityStatus:
    status = "浏览网页"
    partial = activity.raw_title
    if len(partial) > BROWSING_TITLE_MAX_LEN:
        partial = partial[:BROWSING_TITLE_KEEP_LEN] + "..."
    if _NEW_TAB.search(partial):
        partial = "一个网页"
    reason = f"正在看 {partial}"
    suggestion = "可以试着联系，但回复可能慢"

    if activity.sub_type == ActivitySubCategory.BROWSING_RESEARCH:
        status = "查资料"
        reason = f'在网上查 "{partial}" 相关资料'
        if IDLE_THINKING_MIN < idle_minutes <= IDLE_THINKING_MAX:
            reason += "，似乎稍作停顿"
    elif activity.sub_type == ActivitySubCategory.BROWSING_NEWS:
        status = "看新闻"
        reason = f'正在阅读 "{partial}" 的新闻'
    elif activity.sub_type == ActivitySubCategory.BROWSING_GENERAL:
        reason = f"随便看看 {partial}"

    if (
        idle_minutes > IDLE_BROWSING_DRIFT_MIN
        and activity.sub_type != ActivitySubCategory.BROWSING_RESEARCH
    ):
        status = "可能走神"
        reason = f'浏览器开着 "{partial}"，鼠标{idle_minutes}分钟没动'
        suggestion = "可能暂时离开或走神"
    elif idle_minutes > IDLE_BROWSING_PAUSE_MIN:
        reason += "，也许在认真看"
    return AvailabilityStatus(
        status=status, reason=reason, color=COLOR_BROWSING, suggestion=suggestion
    )


def _planning_status(
    activity: ActivityDetails, idle_minutes: int, idle_seconds: int
) -> AvailabilityStatus:
    status = "整理思绪" if activity.type == ActivityCategory.NOTE_TAKING else "规划事情"
    return AvailabilityStatus(
        status=status,
        reason=f"正在 {activity.description}",
        color=COLOR_THINKING,
        suggestion="可能在安静思考",
    )


def _system_task_status(
    activity: ActivityDetails, idle_minutes: int, idle_seconds: int
) -> AvailabilityStatus:
    return AvailabilityStatus(
        status="电脑在忙",
        reason=f"电脑正在 {activity.description}",
        color=COLOR_SYSTEM,
        suggestion="可以先留个言",
    )


def _idle_status(
    activity: ActivityDetails, idle_minutes: int, idle_seconds: int
) -> AvailabilityStatus:
    idle_reason = f"鼠标{idle_minutes}分钟没动"
    if idle_minutes > IDLE_VERY_BORED_MIN:
        return AvailabilityStatus(
            status="非常无聊", reason=idle_reason, color=COLOR_IDLE, suggestion="或许可以聊天"
        )
    if idle_minutes > IDLE_BORED_MIN:
        return AvailabilityStatus(
            status="好无聊", reason=idle_reason, color=COLOR_IDLE, suggestion="或许可以聊聊"
        )
    if idle_minutes > IDLE_THINKING_MAX:
        return AvailabilityStatus(
            status="发呆中", reason=idle_reason, color=COLOR_IDLE, suggestion="也许可以打个招呼"
        )
    if idle_minutes > IDLE_THINKING_MIN:
        return AvailabilityStatus(
            status="摸鱼",
            reason=f"闲置 {idle_minutes}分钟",
            color=COLOR_IDLE_LIGHT,
            suggestion="大概率有空",
        )
    return AvailabilityStatus(
        status="小憩片刻",
        reason="暂无特别活动",
        color=COLOR_IDLE_QUIET,
        suggestion="可以试着联系",
    )


def _unknown_status(
    activity: ActivityDetails, idle_minutes: int, idle_seconds: int
) -> AvailabilityStatus:
    return AvailabilityStatus(
        status="未知",
        reason="进行未知活动",
        color=COLOR_UNKNOWN,
        suggestion="可以尝试联系",
    )


_CATEGORY_HANDLERS = {
    ActivityCategory.GAMING: _gaming_status,
    ActivityCategory.WORKING: _working_status,
    ActivityCategory.LEARNING: _learning_status,
    ActivityCategory.MEETING: _meeting_status,
    ActivityCategory.ENTERTAINMENT: _entertainment_status,
    ActivityCategory.SOCIAL: _social_status,
    ActivityCategory.AI_INTERACTION: _ai_status,
    ActivityCategory.BROWSING: _browsing_status,
    ActivityCategory.NOTE_TAKING: _planning_status,
    ActivityCategory.PLANNING: _planning_status,
    ActivityCategory.SYSTEM_TASK: _system_task_status,
    ActivityCategory.IDLE: _idle_status,
    ActivityCategory.UNKNOWN: _unknown_status,
}
