"""
gateway/services/classifier.py

Activity classification from the foreground window.
- normalize_text / extract_process_name: canonical comparison forms
- classify_activity: first-match walk over gateway/rules.py plus keyword refinement

Pure and stateless: safe to call from any request without locking.
Never raises; unmatched input yields an UNKNOWN result.
"""

import re
import unicodedata
from collections.abc import Sequence
from typing import Optional

import structlog

from gateway.rules import ACTIVITY_RULES
from gateway.schemas import (
    ActivityCategory,
    ActivityDetails,
    ActivityRule,
    ActivitySubCategory,
)

logger = structlog.get_logger(__name__)

UNKNOWN_DESCRIPTION: str = "进行未知活动"

_ZERO_WIDTH = re.compile("[\u200b-\u200d\ufeff]")
_PATH_SEPARATORS = re.compile(r"[/\\]")

# Keyword groups for the refinement pass, in precedence order.
# Word boundaries are ASCII-only: CJK characters count as non-word characters.
_KEYWORD_FLAGS = re.IGNORECASE | re.ASCII
_LEARNING_KEYWORDS = re.compile(
    r"\b(教程|课程|学习|指南|tutorial|course|docs|lecture|how to|可汗学院|khan academy)\b",
    _KEYWORD_FLAGS,
)
_NEWS_KEYWORDS = re.compile(r"\b(新闻|资讯|报道|news|report)\b", _KEYWORD_FLAGS)
_SHOPPING_KEYWORDS = re.compile(r"\b(购物|商城|淘宝|京东|amazon|ebay)\b", _KEYWORD_FLAGS)
_MOVIE_KEYWORDS = re.compile(
    r"\b(电影|剧集|番剧|movie|series|episode|anime)\b", _KEYWORD_FLAGS
)

_REFINABLE_ENTERTAINMENT = (
    ActivitySubCategory.WATCHING_SHORT_VIDEO,
    ActivitySubCategory.WATCHING_MOVIE_SERIES,
)


def normalize_text(text: str) -> str:
    """NFKC-normalize, drop zero-width characters, lowercase."""
    return _ZERO_WIDTH.sub("", unicodedata.normalize("NFKC", text)).lower()


def extract_process_name(raw: str) -> str:
    """Return the normalized executable name from a bare name or a full path."""
    parts = [part for part in _PATH_SEPARATORS.split(normalize_text(raw)) if part]
    return parts[-1] if parts else ""


def refine_by_keywords(
    base_type: ActivityCategory,
    base_sub: Optional[ActivitySubCategory],
    cleaned_title: str,
) -> Optional[tuple[ActivityCategory, Optional[ActivitySubCategory], str]]:
    """
    Reclassify ambiguous browsing / video activity from title keywords.

    Only applies to BROWSING, or ENTERTAINMENT watching short videos or
    movies/series. Returns (type, sub_type, description) for the first keyword
    group that hits, or None to keep the rule's own result.
    """
    is_entertainment = (
        base_type == ActivityCategory.ENTERTAINMENT
        and base_sub in _REFINABLE_ENTERTAINMENT
    )
    if base_type != ActivityCategory.BROWSING and not is_entertainment:
        return None

    if _LEARNING_KEYWORDS.search(cleaned_title):
        return (
            ActivityCategory.LEARNING,
            ActivitySubCategory.LEARNING_VIDEO_COURSE,
            "在学习",
        )
    if _NEWS_KEYWORDS.search(cleaned_title):
        return base_type, ActivitySubCategory.BROWSING_NEWS, "阅读新闻资讯"
    if _SHOPPING_KEYWORDS.search(cleaned_title):
        return (
            ActivityCategory.BROWSING,
            ActivitySubCategory.BROWSING_SHOPPING,
            "网上购物",
        )
    if is_entertainment and _MOVIE_KEYWORDS.search(cleaned_title):
        return (
            ActivityCategory.ENTERTAINMENT,
            ActivitySubCategory.WATCHING_MOVIE_SERIES,
            "看电影/追剧",
        )
    return None


def classify_activity(
    window_title: Optional[str],
    process_name: Optional[str],
    rules: Sequence[ActivityRule] = ACTIVITY_RULES,
) -> ActivityDetails:
    """
    Map the foreground window to an ActivityDetails record.

    ``rules`` must already be sorted by descending priority (see
    gateway.rules.sort_rules); the first matching rule wins.
    """
    raw_title = window_title or ""
    raw_process = process_name or ""

    title_clean = normalize_text(raw_title)
    process_base = extract_process_name(raw_process)

    for rule in rules:
        if not rule.matches(title_clean, process_base):
            continue

        activity_type = rule.activity_type
        activity_sub_type = rule.activity_sub_type
        description = rule.description_template

        refined = refine_by_keywords(activity_type, activity_sub_type, title_clean)
        if refined is not None:
            activity_type, activity_sub_type, description = refined

        description = description.replace("{title}", raw_title, 1).replace(
            "{process}", raw_process, 1
        )

        return ActivityDetails(
            type=activity_type,
            sub_type=activity_sub_type,
            description=description,
            raw_title=raw_title,
            raw_process=raw_process,
            focus_level=rule.focus_level,
            intensity=rule.intensity,
        )

    logger.debug("activity_unmatched", process=process_base, title=title_clean)
    return ActivityDetails(
        type=ActivityCategory.UNKNOWN,
        description=UNKNOWN_DESCRIPTION,
        raw_title=raw_title,
        raw_process=raw_process,
    )
