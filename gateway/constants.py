"""
gateway/constants.py

Threshold constants used by the classifier and the availability predictor.
All numeric values referenced by the decision cascade must live in this module.
Magic numbers in business logic are prohibited.
"""

# ── Heart rate freshness ─────────────────────────────────────
HR_FRESHNESS_MIN: int = 5
NANOS_PER_MILLI: int = 1_000_000

# ── Heart rate bands (bpm) ───────────────────────────────────
HR_RESTING_MAX: int = 60  # below this counts as sleep/rest
HR_CALM_MAX: int = 65  # below this hints at napping
HR_WALKING_MIN: int = 80
HR_EXERTION_MIN: int = 110
HR_RUNNING_MIN: int = 120
HR_INTENSE_MIN: int = 140

# ── Alive status bands (bpm) ─────────────────────────────────
ALIVE_CRITICAL_HIGH: int = 150
ALIVE_EXERCISE_MIN: int = 100
ALIVE_NORMAL_MIN: int = 60
ALIVE_SLEEP_MIN: int = 40

# ── Mouse idle thresholds (minutes) ──────────────────────────
IDLE_REST_MIN: int = 20
IDLE_EXERTION_MIN: int = 15
IDLE_WALKING_MIN: int = 20
IDLE_AWAY_MIN: int = 45  # strictly greater than
IDLE_LEFT_MIN: int = 20  # strictly greater than

# ── Category narrative sub-thresholds (minutes) ──────────────
IDLE_THINKING_MIN: int = 5
IDLE_THINKING_MAX: int = 15
IDLE_COURSE_WATCH_MIN: int = 8
IDLE_COURSE_WATCH_MAX: int = 20
IDLE_DIGESTING_MAX: int = 10
IDLE_BROWSING_PAUSE_MIN: int = 3
IDLE_BROWSING_DRIFT_MIN: int = 8
IDLE_BORED_MIN: int = 30
IDLE_VERY_BORED_MIN: int = 40
SOCIAL_TYPING_MAX_SEC: int = 15

# ── Time of day (local hours) ────────────────────────────────
SLEEP_START_HOUR: int = 22
SLEEP_END_HOUR: int = 7
WORK_START_HOUR: int = 9
WORK_END_HOUR: int = 18
LUNCH_START_HOUR: int = 12
LUNCH_END_HOUR: int = 14
LAST_WORKDAY: int = 4  # datetime.weekday(): Monday=0 .. Friday=4

# ── Display truncation ───────────────────────────────────────
GAME_NAME_MAX_LEN: int = 30
MOVIE_TITLE_MAX_LEN: int = 30
BROWSING_TITLE_MAX_LEN: int = 40
BROWSING_TITLE_KEEP_LEN: int = 37
