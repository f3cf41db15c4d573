"""
tests/test_classifier.py

Unit tests for gateway/services/classifier.py and the rule table in gateway/rules.py.
Covers normalization, priority ordering, keyword refinement and the UNKNOWN fallback.
"""

import re

import pytest

from gateway.rules import ACTIVITY_RULES, sort_rules
from gateway.schemas import ActivityCategory, ActivityRule, ActivitySubCategory, Level
from gateway.services.classifier import (
    UNKNOWN_DESCRIPTION,
    classify_activity,
    extract_process_name,
    normalize_text,
)


# ── Normalization ───────────────────────────────────────────


@pytest.mark.parametrize(
    "text",
    [
        "Visual Studio Code",
        "ＣＵＲＳＯＲ．ＥＸＥ",
        "zero\u200bwidth\u200d\ufeffjoiner",
        "ﬁle ㎏ Ⅻ",
        "哔哩哔哩 (゜-゜)つロ",
        "",
    ],
)
def test_normalize_text_is_idempotent(text: str) -> None:
    """Normalizing twice must give the same result as normalizing once."""
    once = normalize_text(text)
    assert normalize_text(once) == once


def test_normalize_text_folds_width_case_and_zero_width() -> None:
    assert normalize_text("ＣＵＲ\u200bＳＯＲ") == "cursor"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("C:\\Program Files\\Cursor\\Cursor.exe", "cursor.exe"),
        ("/usr/bin/Code.exe", "code.exe"),
        ("cursor.exe", "cursor.exe"),
        ("C:\\Tools\\", "tools"),
        ("", ""),
    ],
)
def test_extract_process_name_handles_both_path_styles(raw: str, expected: str) -> None:
    assert extract_process_name(raw) == expected


# ── Rule table ──────────────────────────────────────────────


def test_rule_table_is_sorted_by_descending_priority() -> None:
    priorities = [rule.priority for rule in ACTIVITY_RULES]
    assert priorities == sorted(priorities, reverse=True)


def test_rule_table_keeps_declaration_order_for_ties() -> None:
    """The first declared priority-100 rule (Wuthering Waves) must stay first."""
    assert ACTIVITY_RULES[0].description_template == "玩鸣潮"
    assert ACTIVITY_RULES[0].process_matchers[0].pattern == r"wutheringwaves\.exe"


def test_higher_priority_wins_over_more_specific_rule() -> None:
    """A broad high-priority rule beats a lower-priority rule that also matches the title."""
    broad = ActivityRule(
        process_matchers=(re.compile(r"tool\.exe"),),
        activity_type=ActivityCategory.GAMING,
        description_template="broad",
        priority=100,
    )
    specific = ActivityRule(
        process_matchers=(re.compile(r"tool\.exe"),),
        title_matchers=(re.compile(r"report"),),
        activity_type=ActivityCategory.WORKING,
        description_template="specific",
        priority=10,
    )
    rules = sort_rules([specific, broad])

    result = classify_activity("quarterly report", "tool.exe", rules=rules)

    assert result.type == ActivityCategory.GAMING
    assert result.description == "broad"


def test_sort_rules_returns_new_tuple_without_touching_input() -> None:
    low = ActivityRule(
        activity_type=ActivityCategory.IDLE, description_template="low", priority=1
    )
    high = ActivityRule(
        activity_type=ActivityCategory.IDLE, description_template="high", priority=2
    )
    declared = [low, high]

    ordered = sort_rules(declared)

    assert [r.description_template for r in ordered] == ["high", "low"]
    assert declared == [low, high]


# ── Classification scenarios ────────────────────────────────


def test_cursor_editing_typescript_is_active_coding() -> None:
    result = classify_activity("main.ts - myproject", "cursor.exe")

    assert result.type == ActivityCategory.WORKING
    assert result.sub_type == ActivitySubCategory.CODING_ACTIVE
    assert "Cursor" in result.description
    assert result.focus_level == Level.HIGH
    assert result.raw_title == "main.ts - myproject"
    assert result.raw_process == "cursor.exe"


@pytest.mark.parametrize(
    "process",
    [
        "C:\\Program Files\\Cursor\\Cursor.exe",
        "cursor.exe",
        "CURSOR.EXE",
        "ｃｕｒｓｏｒ．ｅｘｅ",
    ],
)
def test_cursor_is_detected_regardless_of_case_width_and_path(process: str) -> None:
    result = classify_activity("", process)

    assert result.type == ActivityCategory.WORKING
    assert result.description == "用 Cursor"


def test_unmatched_input_is_unknown() -> None:
    result = classify_activity("???", "unknownapp.exe")

    assert result.type == ActivityCategory.UNKNOWN
    assert result.sub_type is None
    assert result.description == UNKNOWN_DESCRIPTION
    assert result.focus_level is None
    assert result.intensity is None


@pytest.mark.parametrize(("title", "process"), [("", ""), (None, None)])
def test_empty_input_is_unknown(title, process) -> None:
    result = classify_activity(title, process)

    assert result.type == ActivityCategory.UNKNOWN
    assert result.raw_title == ""
    assert result.raw_process == ""


def test_classification_is_deterministic() -> None:
    first = classify_activity("Cyberpunk 2077", "steam.exe")
    second = classify_activity("Cyberpunk 2077", "steam.exe")

    assert first == second
    assert first is not second


def test_specific_game_title_beats_generic_steam_rule() -> None:
    result = classify_activity("Cyberpunk 2077", "steam.exe")

    assert result.sub_type == ActivitySubCategory.GAMING_INTENSE
    assert result.description == "玩赛博朋克2077"
    assert result.intensity == Level.HIGH


def test_generic_steam_rule_catches_unknown_games() -> None:
    result = classify_activity("Hades", "steam.exe")

    assert result.type == ActivityCategory.GAMING
    assert result.sub_type == ActivitySubCategory.GAMING_CASUAL
    assert result.description == "不知道在玩什么游戏"


def test_title_alone_can_match_a_rule() -> None:
    result = classify_activity("原神", "launcher.exe")

    assert result.type == ActivityCategory.GAMING
    assert result.sub_type == ActivitySubCategory.GAMING_INTENSE


@pytest.mark.parametrize(
    ("title", "process"),
    [
        ("ChatGPT", "msedge.exe"),
        ("Example Domain", "chrome.exe"),
        ("ebay deals", "firefox.exe"),
        ("新标签页", "chrome.exe"),
        ("Friends episode 3 - bilibili.com", "chrome.exe"),
    ],
)
def test_any_browser_window_stops_at_the_top_browser_rule(title: str, process: str) -> None:
    """Browser rules match on the process alone, so the tech-docs rule shadows lower site rules."""
    result = classify_activity(title, process)

    assert result.type == ActivityCategory.LEARNING
    assert result.sub_type == ActivitySubCategory.LEARNING_READING_DOCS
    assert result.description == "查阅技术资料/看技术博客"


def test_browser_catch_all_rule_only_matches_browsers() -> None:
    catch_all = next(rule for rule in ACTIVITY_RULES if rule.description_template == "浏览网页")

    assert catch_all.priority == 5
    assert catch_all.matches("example domain", "chrome.exe")
    assert not catch_all.matches("example domain", "unknownapp.exe")
    assert classify_activity("Example Domain", "unknownapp.exe").type == ActivityCategory.UNKNOWN


def test_file_explorer_is_managing_files() -> None:
    result = classify_activity("Downloads", "C:\\Windows\\explorer.exe")

    assert result.type == ActivityCategory.BROWSING
    assert result.description == "管理文件"


def test_compile_title_is_system_task_for_any_process() -> None:
    result = classify_activity("Building project...", "gradle-daemon.exe")

    assert result.type == ActivityCategory.SYSTEM_TASK
    assert result.sub_type == ActivitySubCategory.SYSTEM_COMPILING


def test_terminal_process_is_coding() -> None:
    result = classify_activity("Administrator", "powershell.exe")

    assert result.type == ActivityCategory.WORKING
    assert result.description == "写代码"


def test_chatgpt_title_outside_a_browser_is_ai_interaction() -> None:
    result = classify_activity("ChatGPT", "chatgpt.exe")

    assert result.type == ActivityCategory.AI_INTERACTION
    assert result.description == "与 ChatGPT 对话"


# ── Keyword refinement ──────────────────────────────────────
# Driven through title-only matches: in a browser the tech-docs rule wins first.


def test_video_site_tutorial_is_reclassified_as_learning() -> None:
    result = classify_activity("Python tutorial - bilibili.com", "bilibili.exe")

    assert result.type == ActivityCategory.LEARNING
    assert result.sub_type == ActivitySubCategory.LEARNING_VIDEO_COURSE
    assert result.description == "在学习"
    # focus level still comes from the matched rule
    assert result.focus_level == Level.LOW


def test_video_site_news_keeps_type_and_sets_news_subtype() -> None:
    result = classify_activity("Evening news - youtube.com", "videoapp.exe")

    assert result.type == ActivityCategory.ENTERTAINMENT
    assert result.sub_type == ActivitySubCategory.BROWSING_NEWS
    assert result.description == "阅读新闻资讯"


def test_video_site_shopping_haul_becomes_shopping() -> None:
    result = classify_activity("amazon haul - youtube.com", "videoapp.exe")

    assert result.type == ActivityCategory.BROWSING
    assert result.sub_type == ActivitySubCategory.BROWSING_SHOPPING
    assert result.description == "网上购物"


def test_shopping_site_news_is_refined_to_news() -> None:
    result = classify_activity("jd.com news", "shopapp.exe")

    assert result.type == ActivityCategory.BROWSING
    assert result.sub_type == ActivitySubCategory.BROWSING_NEWS
    assert result.description == "阅读新闻资讯"


def test_video_site_episode_is_movie_series() -> None:
    result = classify_activity("Friends episode 3 - bilibili.com", "videoapp.exe")

    assert result.type == ActivityCategory.ENTERTAINMENT
    assert result.sub_type == ActivitySubCategory.WATCHING_MOVIE_SERIES
    assert result.description == "看电影/追剧"


def test_movie_keyword_does_not_touch_browsing() -> None:
    result = classify_activity("tmall anime figures", "shopapp.exe")

    assert result.type == ActivityCategory.BROWSING
    assert result.sub_type == ActivitySubCategory.BROWSING_SHOPPING
    assert result.description == "网上购物"


def test_refinement_skips_non_browsing_categories() -> None:
    result = classify_activity("docs tutorial", "cursor.exe")

    assert result.type == ActivityCategory.WORKING
    assert result.description == "用 Cursor"


def test_learning_takes_precedence_over_news() -> None:
    result = classify_activity("how to read the news - youtube.com", "videoapp.exe")

    assert result.type == ActivityCategory.LEARNING
    assert result.sub_type == ActivitySubCategory.LEARNING_VIDEO_COURSE


def test_ascii_keyword_followed_by_cjk_is_a_word() -> None:
    result = classify_activity("react course中文字幕 - bilibili.com", "bilibili.exe")

    assert result.type == ActivityCategory.LEARNING
    assert result.sub_type == ActivitySubCategory.LEARNING_VIDEO_COURSE


def test_cjk_keyword_inside_cjk_text_is_not_a_word() -> None:
    result = classify_activity("Python零基础入门教程 - bilibili.com", "bilibili.exe")

    assert result.type == ActivityCategory.ENTERTAINMENT
    assert result.sub_type == ActivitySubCategory.WATCHING_SHORT_VIDEO
    assert result.description == "看短视频"


# ── Description templates ───────────────────────────────────


def test_placeholders_are_filled_with_raw_strings() -> None:
    rule = ActivityRule(
        process_matchers=(re.compile(r"player\.exe"),),
        activity_type=ActivityCategory.ENTERTAINMENT,
        description_template="用 {process} 看 {title}",
        priority=1,
    )

    result = classify_activity("Ｍｙ Ｍｏｖｉｅ", "C:\\Apps\\Player.exe", rules=(rule,))

    assert result.description == "用 C:\\Apps\\Player.exe 看 Ｍｙ Ｍｏｖｉｅ"
