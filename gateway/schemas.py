"""
gateway/schemas.py

Pydantic data models for the gateway layer.
- ActivityCategory / ActivitySubCategory / Level: closed enums; the value is the wire key
- TelemetrySnapshot / HeartRateSnapshot: point-in-time inputs to the classifier and predictor
- ActivityRule: one row of the static classification table
- ActivityDetails / AvailabilityStatus / AliveStatus: results shown verbatim by the front-end
- DeviceStatusRecord / DeviceActivityRecord: raw records served by the device API
"""

import re
from datetime import datetime
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, Field

from gateway.constants import NANOS_PER_MILLI


class ActivityCategory(str, Enum):
    """Top-level classification of what the monitored user is doing."""

    GAMING = "gaming"
    WORKING = "working"
    LEARNING = "learning"
    ENTERTAINMENT = "entertainment"
    SOCIAL = "social"
    AI_INTERACTION = "ai_interaction"
    BROWSING = "browsing"
    MEETING = "meeting"
    NOTE_TAKING = "note_taking"
    PLANNING = "planning"
    SYSTEM_TASK = "system_task"
    IDLE = "idle"
    UNKNOWN = "unknown"


class ActivitySubCategory(str, Enum):
    """Finer-grained tag nested under an ActivityCategory."""

    # ── Gaming ───────────────────────────────────────────────
    GAMING_INTENSE = "gaming_intense"
    GAMING_CASUAL = "gaming_casual"
    GAMING_STRATEGY = "gaming_strategy"

    # ── Working ──────────────────────────────────────────────
    CODING_ACTIVE = "coding_active"
    CODING_DEBUGGING = "coding_debugging"
    WRITING_DOCS = "writing_docs"
    DESIGNING_UIUX = "designing_uiux"
    PROJECT_MANAGEMENT = "project_management"
    ANDROID_DEVELOPMENT = "android_development"
    WEB_DEVELOPMENT = "web_development"

    # ── Learning ─────────────────────────────────────────────
    LEARNING_VIDEO_COURSE = "learning_video_course"
    LEARNING_READING_DOCS = "learning_reading_docs"
    LEARNING_CODING_PRACTICE = "learning_coding_practice"

    # ── Entertainment ────────────────────────────────────────
    WATCHING_MOVIE_SERIES = "watching_movie_series"
    WATCHING_SHORT_VIDEO = "watching_short_video"
    LISTENING_MUSIC = "listening_music"
    READING_NOVEL_COMIC = "reading_novel_comic"

    # ── Social ───────────────────────────────────────────────
    CHATTING_IM = "chatting_im"
    BROWSING_SOCIAL_MEDIA = "browsing_social_media"
    VOICE_VIDEO_CALL = "voice_video_call"

    # ── AI interaction ───────────────────────────────────────
    AI_CHATTING_ASSISTANT = "ai_chatting_assistant"
    AI_CODE_GENERATION = "ai_code_generation"
    AI_IMAGE_GENERATION = "ai_image_generation"

    # ── Browsing ─────────────────────────────────────────────
    BROWSING_NEWS = "browsing_news"
    BROWSING_FORUM = "browsing_forum"
    BROWSING_SHOPPING = "browsing_shopping"
    BROWSING_RESEARCH = "browsing_research"
    BROWSING_GENERAL = "browsing_general"

    # ── Meeting ──────────────────────────────────────────────
    MEETING_ONLINE_CONFERENCE = "meeting_online_conference"
    MEETING_PRESENTING = "meeting_presenting"

    # ── Note taking / planning ───────────────────────────────
    NOTE_TAKING_QUICK = "note_taking_quick"
    NOTE_TAKING_ORGANIZING = "note_taking_organizing"
    PLANNING_TASK_MANAGEMENT = "planning_task_management"
    PLANNING_BRAINSTORMING = "planning_brainstorming"

    # ── System task ──────────────────────────────────────────
    SYSTEM_COMPILING = "system_compiling"
    SYSTEM_RENDERING = "system_rendering"
    SYSTEM_UPDATING = "system_updating"


class Level(str, Enum):
    """Three-step scale used for focus level and intensity hints."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# ── Core inputs ──────────────────────────────────────────────


class TelemetrySnapshot(BaseModel):
    """Active window and input idleness captured from the user's computer."""

    window_title: str = ""
    process_name: str = ""
    mouse_idle_seconds: int = Field(default=0, ge=0)

    model_config = {"frozen": True}


class HeartRateSnapshot(BaseModel):
    """Latest heart rate reading; the timestamp is epoch milliseconds."""

    last_non_zero_hr: int = 0
    last_timestamp_millis: int = 0
    is_watch_off: bool = False

    model_config = {"frozen": True}


# ── Classification table & results ───────────────────────────


class ActivityRule(BaseModel):
    """One pattern-to-activity mapping; higher priority is evaluated first."""

    process_matchers: tuple[re.Pattern[str], ...] = ()
    title_matchers: tuple[re.Pattern[str], ...] = ()
    activity_type: ActivityCategory
    activity_sub_type: Optional[ActivitySubCategory] = None
    description_template: str
    focus_level: Optional[Level] = None
    intensity: Optional[Level] = None
    priority: int

    model_config = {"frozen": True}

    def matches(self, title: str, process: str) -> bool:
        """OR across both matcher families: either side alone is enough."""
        return any(p.search(process) for p in self.process_matchers) or any(
            p.search(title) for p in self.title_matchers
        )


class ActivityDetails(BaseModel):
    """Classifier output, shown verbatim via ``description``."""

    type: ActivityCategory
    sub_type: Optional[ActivitySubCategory] = None
    description: str
    raw_title: str
    raw_process: str
    focus_level: Optional[Level] = None
    intensity: Optional[Level] = None

    model_config = {"frozen": True}


class AvailabilityStatus(BaseModel):
    """Predictor output: can the user be contacted right now?"""

    status: str
    reason: str
    color: str  # Tailwind text colour classes
    suggestion: Optional[str] = None

    model_config = {"frozen": True}


class AliveStatus(BaseModel):
    """Coarse 'is the person alive and connected' verdict from heart rate only."""

    text: str
    color: str

    model_config = {"frozen": True}


# ── Device API records ───────────────────────────────────────


class HeartRateSample(BaseModel):
    """Single entry of DeviceStatusRecord.recent_hrs, keyed as the device sends it."""

    HeartRate: int
    Timestamp: int


class DeviceStatusRecord(BaseModel):
    """Element of the device API's /api/v1/status array."""

    user_id: str = ""
    device_id: str = ""
    alarm_state: str = ""
    last_non_zero_hr: int = 0
    last_timestamp: int = 0  # unit set by settings.heart_rate_timestamp_unit
    is_watch_off: bool = False
    recent_hrs: list[HeartRateSample] = []

    def to_snapshot(self, timestamp_unit: Literal["ns", "ms"]) -> HeartRateSnapshot:
        """Normalize the device timestamp to epoch milliseconds."""
        millis = self.last_timestamp
        if timestamp_unit == "ns":
            millis = self.last_timestamp // NANOS_PER_MILLI
        return HeartRateSnapshot(
            last_non_zero_hr=self.last_non_zero_hr,
            last_timestamp_millis=millis,
            is_watch_off=self.is_watch_off,
        )


class DeviceActivityRecord(BaseModel):
    """Element of the device API's /api/v1/activity array."""

    user_id: str = ""
    timestamp: int = 0
    process_name: str = ""
    window_title: str = ""
    mouse_idle_seconds: int = 0
    is_fullscreen: bool = False
    extra_info: str = ""

    def to_snapshot(self) -> TelemetrySnapshot:
        return TelemetrySnapshot(
            window_title=self.window_title,
            process_name=self.process_name,
            mouse_idle_seconds=max(self.mouse_idle_seconds, 0),
        )


# ── Gateway request / response bodies ────────────────────────


class EvaluationRequest(BaseModel):
    """Body of POST /evaluate; heart rate timestamps must already be milliseconds."""

    telemetry: Optional[TelemetrySnapshot] = None
    heart_rate: Optional[HeartRateSnapshot] = None
    now: Optional[datetime] = None


class EvaluationResult(BaseModel):
    """Classifier and predictor output for one evaluation."""

    activity: Optional[ActivityDetails] = None
    availability: AvailabilityStatus


class ActivityText(BaseModel):
    text: str


class CopyData(BaseModel):
    """Raw values echoed next to the narrative."""

    heart_rate: Optional[int] = None
    mouse_idle_seconds: Optional[int] = None
    window_title: Optional[str] = None
    process_name: Optional[str] = None


class StatusCopy(BaseModel):
    """Assembled narrative returned by GET /copy."""

    alive: AliveStatus
    activity: ActivityText
    availability: AvailabilityStatus
    data: CopyData
    last_update: datetime
