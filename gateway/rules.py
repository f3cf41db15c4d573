"""
gateway/rules.py

Static activity classification table.
Rules are matched first-match-wins in descending priority; equal priorities keep
declaration order. Priorities and patterns are hand-tuned against each other:
broad rules rely on sitting below the specific ones, so do not reorder or
"simplify" them without checking every overlapping rule.

Patterns are matched against normalized (NFKC, lowercased) text, case-insensitive,
with ASCII word boundaries.
"""

import re

from gateway.schemas import ActivityCategory as Cat
from gateway.schemas import ActivityRule
from gateway.schemas import ActivitySubCategory as Sub
from gateway.schemas import Level

_FLAGS = re.IGNORECASE | re.ASCII


def _compile(*patterns: str) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(p, _FLAGS) for p in patterns)


_BROWSERS: tuple[str, ...] = (
    r"chrome\.exe",
    r"msedge\.exe",
    r"firefox\.exe",
    r"safari\.app",
    r"brave\.exe",
)

_SOURCE_EXTENSIONS = r"\.(js|ts|py|java|kt|go|rs|html|css|scss|json|md|xml|gradle|dockerfile|yaml|yml)\b"

_VIDEO_FILES = r"\.(mkv|mp4|avi|rmvb|flv|mov)\b"


_RULE_TABLE: list[ActivityRule] = [
    # ── Games ────────────────────────────────────────────────
    ActivityRule(
        process_matchers=_compile(r"wutheringwaves\.exe", r"wwlauncher\.exe"),
        title_matchers=_compile(r"wuthering waves", r"鸣潮"),
        activity_type=Cat.GAMING,
        activity_sub_type=Sub.GAMING_INTENSE,
        description_template="玩鸣潮",
        intensity=Level.HIGH,
        priority=100,
    ),
    ActivityRule(
        process_matchers=_compile(r"tslgame\.exe"),
        title_matchers=_compile(r"playerunknown's battlegrounds", r"pubg"),
        activity_type=Cat.GAMING,
        activity_sub_type=Sub.GAMING_INTENSE,
        description_template="玩PUBG",
        intensity=Level.HIGH,
        priority=100,
    ),
    ActivityRule(
        process_matchers=_compile(r"discovery\.exe"),
        title_matchers=_compile(r"the finals"),
        activity_type=Cat.GAMING,
        activity_sub_type=Sub.GAMING_INTENSE,
        description_template="玩THE FINALS",
        intensity=Level.HIGH,
        priority=100,
    ),
    # Wuthering Waves also ships as Client-Win64-Shipping.exe on some platforms
    ActivityRule(
        process_matchers=_compile(
            r"genshinimpact\.exe", r"yuanshen\.exe", r"client-win64-shipping\.exe"
        ),
        title_matchers=_compile(r"genshin impact", r"原神", r"鸣潮"),
        activity_type=Cat.GAMING,
        activity_sub_type=Sub.GAMING_INTENSE,
        description_template="玩鸣潮",
        intensity=Level.HIGH,
        priority=100,
    ),
    ActivityRule(
        process_matchers=_compile(r"\btloupart1\.exe\b"),
        title_matchers=_compile(r"the last of us part i", r"最后生还者第一部"),
        activity_type=Cat.GAMING,
        activity_sub_type=Sub.GAMING_INTENSE,
        description_template="玩最后生还者",
        intensity=Level.HIGH,
        priority=100,
    ),
    ActivityRule(
        process_matchers=_compile(r"cyberpunk2077\.exe"),
        title_matchers=_compile(r"cyberpunk 2077", r"赛博朋克2077"),
        activity_type=Cat.GAMING,
        activity_sub_type=Sub.GAMING_INTENSE,
        description_template="玩赛博朋克2077",
        intensity=Level.HIGH,
        priority=100,
    ),
    ActivityRule(
        process_matchers=_compile(r"javaw\.exe", r"minecraftlauncher\.exe"),
        title_matchers=_compile(r"minecraft\b", r"我的世界"),
        activity_type=Cat.GAMING,
        activity_sub_type=Sub.GAMING_CASUAL,
        description_template="玩Minecraft",
        intensity=Level.MEDIUM,
        priority=99,
    ),
    ActivityRule(
        process_matchers=_compile(r"palworld-win64-shipping\.exe"),
        title_matchers=_compile(r"palworld", r"幻兽帕鲁"),
        activity_type=Cat.GAMING,
        activity_sub_type=Sub.GAMING_CASUAL,
        description_template="玩幻兽帕鲁",
        intensity=Level.MEDIUM,
        priority=99,
    ),
    ActivityRule(
        process_matchers=_compile(r"witcher3\.exe"),
        title_matchers=_compile(r"the witcher 3", r"巫师3"),
        activity_type=Cat.GAMING,
        activity_sub_type=Sub.GAMING_INTENSE,
        description_template="玩巫师3",
        intensity=Level.HIGH,
        priority=100,
    ),
    ActivityRule(
        process_matchers=_compile(r"rdr2\.exe"),
        title_matchers=_compile(r"red dead redemption 2", r"荒野大镖客2"),
        activity_type=Cat.GAMING,
        activity_sub_type=Sub.GAMING_INTENSE,
        description_template="玩荒野大镖客2",
        intensity=Level.HIGH,
        priority=100,
    ),
    ActivityRule(
        process_matchers=_compile(r"gta5\.exe"),
        title_matchers=_compile(r"grand theft auto v", r"侠盗猎车手5"),
        activity_type=Cat.GAMING,
        activity_sub_type=Sub.GAMING_INTENSE,
        description_template="玩GTA V",
        intensity=Level.HIGH,
        priority=100,
    ),
    ActivityRule(
        process_matchers=_compile(r"steam\.exe"),
        title_matchers=_compile(r"\b(game|play|level|steam)\b"),
        activity_type=Cat.GAMING,
        activity_sub_type=Sub.GAMING_CASUAL,
        description_template="不知道在玩什么游戏",
        intensity=Level.MEDIUM,
        priority=10,
    ),
    # ── Development tools ────────────────────────────────────
    ActivityRule(
        process_matchers=_compile(r"code\.exe", r"code - insiders\.exe"),
        title_matchers=_compile(r"visual studio code", _SOURCE_EXTENSIONS),
        activity_type=Cat.WORKING,
        activity_sub_type=Sub.CODING_ACTIVE,
        description_template="用 VSCode",
        focus_level=Level.HIGH,
        priority=90,
    ),
    ActivityRule(
        process_matchers=_compile(r"cursor\.exe"),
        title_matchers=_compile(r"cursor", _SOURCE_EXTENSIONS),
        activity_type=Cat.WORKING,
        activity_sub_type=Sub.CODING_ACTIVE,
        description_template="用 Cursor",
        focus_level=Level.HIGH,
        priority=91,
    ),
    ActivityRule(
        process_matchers=_compile(r"studio64\.exe", r"androidstudio64\.exe"),
        title_matchers=_compile(r"android studio", r"manifest\.xml", r"\.(kt|java|xml)\b"),
        activity_type=Cat.WORKING,
        activity_sub_type=Sub.ANDROID_DEVELOPMENT,
        description_template="用 Android Studio",
        focus_level=Level.HIGH,
        priority=95,
    ),
    ActivityRule(
        process_matchers=_compile(
            r"idea64\.exe",
            r"pycharm64\.exe",
            r"webstorm64\.exe",
            r"goland64\.exe",
            r"clion64\.exe",
            r"rubymine64\.exe",
            r"phpstorm64\.exe",
            r"datagrip64\.exe",
        ),
        title_matchers=_compile(
            r"intellij idea",
            r"pycharm",
            r"webstorm",
            r"goland",
            r"clion",
            r"rubymine",
            r"phpstorm",
            r"datagrip",
        ),
        activity_type=Cat.WORKING,
        activity_sub_type=Sub.CODING_ACTIVE,
        description_template="用 JetBrains IDE",
        focus_level=Level.HIGH,
        priority=92,
    ),
    ActivityRule(
        process_matchers=_compile(r"zed\.exe"),
        title_matchers=_compile(r"zed", r"\.(rs|js|ts|py|go|md)\b"),
        activity_type=Cat.WORKING,
        activity_sub_type=Sub.CODING_ACTIVE,
        description_template="用 Zed",
        focus_level=Level.HIGH,
        priority=89,
    ),
    ActivityRule(
        process_matchers=_compile(r"sublime_text\.exe"),
        title_matchers=_compile(r"sublime text"),
        activity_type=Cat.WORKING,
        activity_sub_type=Sub.CODING_ACTIVE,
        description_template="用 Sublime Text",
        focus_level=Level.MEDIUM,
        priority=88,
    ),
    ActivityRule(
        process_matchers=_compile(r"atom\.exe"),
        title_matchers=_compile(r"atom"),
        activity_type=Cat.WORKING,
        activity_sub_type=Sub.CODING_ACTIVE,
        description_template="用 Atom",
        focus_level=Level.MEDIUM,
        priority=87,
    ),
    ActivityRule(
        process_matchers=_compile(r"devenv\.exe"),
        title_matchers=_compile(r"microsoft visual studio", r"\.(cs|vb|cpp|fs)\b"),
        activity_type=Cat.WORKING,
        activity_sub_type=Sub.CODING_ACTIVE,
        description_template="用 Visual Studio",
        focus_level=Level.HIGH,
        priority=90,
    ),
    ActivityRule(
        process_matchers=_compile(r"xcode\.app"),
        title_matchers=_compile(r"xcode", r"\.(swift|m|h|storyboard|xib)\b"),
        activity_type=Cat.WORKING,
        activity_sub_type=Sub.CODING_ACTIVE,
        description_template="用 Xcode",
        focus_level=Level.HIGH,
        priority=90,
    ),
    ActivityRule(
        process_matchers=_compile(r"unity\.exe"),
        title_matchers=_compile(r"unity", r"game scene"),
        activity_type=Cat.WORKING,
        activity_sub_type=Sub.DESIGNING_UIUX,
        description_template="用 Unity",
        focus_level=Level.HIGH,
        priority=85,
    ),
    ActivityRule(
        process_matchers=_compile(r"unrealeditor\.exe"),
        title_matchers=_compile(r"unreal editor", r"blueprint"),
        activity_type=Cat.WORKING,
        activity_sub_type=Sub.DESIGNING_UIUX,
        description_template="用 Unreal Engine",
        focus_level=Level.HIGH,
        priority=85,
    ),
    ActivityRule(
        process_matchers=_compile(r"postman\.exe"),
        title_matchers=_compile(r"postman", r"request", r"collection"),
        activity_type=Cat.WORKING,
        activity_sub_type=Sub.CODING_ACTIVE,
        description_template="用 Postman 测试 API",
        focus_level=Level.MEDIUM,
        priority=80,
    ),
    ActivityRule(
        process_matchers=_compile(r"figma\.exe", r"sketch\.app"),
        title_matchers=_compile(r"figma", r"sketch", r"untitled design"),
        activity_type=Cat.WORKING,
        activity_sub_type=Sub.DESIGNING_UIUX,
        description_template="进行 UI/UX 设计",
        focus_level=Level.HIGH,
        priority=80,
    ),
    # ── Browsers ─────────────────────────────────────────────
    ActivityRule(
        process_matchers=_compile(*_BROWSERS),
        title_matchers=_compile(r"chatgpt", r"openai\.com"),
        activity_type=Cat.AI_INTERACTION,
        activity_sub_type=Sub.AI_CHATTING_ASSISTANT,
        description_template="与 ChatGPT 对话",
        focus_level=Level.MEDIUM,
        priority=75,
    ),
    ActivityRule(
        process_matchers=_compile(*_BROWSERS),
        title_matchers=_compile(r"gemini\.google\.com", r"bard\.google\.com"),
        activity_type=Cat.AI_INTERACTION,
        activity_sub_type=Sub.AI_CHATTING_ASSISTANT,
        description_template="与 Gemini 对话",
        focus_level=Level.MEDIUM,
        priority=75,
    ),
    ActivityRule(
        process_matchers=_compile(*_BROWSERS),
        title_matchers=_compile(r"aistudio\.google\.com", r"google ai studio"),
        activity_type=Cat.AI_INTERACTION,
        activity_sub_type=Sub.AI_CHATTING_ASSISTANT,
        description_template="用 Google AI Studio",
        focus_level=Level.MEDIUM,
        priority=75,
    ),
    ActivityRule(
        process_matchers=_compile(*_BROWSERS),
        title_matchers=_compile(r"bilibili\.com", r"哔哩哔哩", r"youtube\.com", r"youtu\.be"),
        activity_type=Cat.ENTERTAINMENT,
        activity_sub_type=Sub.WATCHING_SHORT_VIDEO,
        description_template="看短视频",
        focus_level=Level.LOW,
        priority=70,
    ),
    ActivityRule(
        process_matchers=_compile(*_BROWSERS),
        title_matchers=_compile(
            r"stackoverflow\.com",
            r"github\.com",
            r"developer\.mozilla\.org",
            r"medium\.com\/.*(programming|develop|code|software)",
            r"\.dev\b",
            r"掘金",
            r"csdn",
            r"segmentfault",
            r"v2ex\.com",
        ),
        activity_type=Cat.LEARNING,
        activity_sub_type=Sub.LEARNING_READING_DOCS,
        description_template="查阅技术资料/看技术博客",
        focus_level=Level.HIGH,
        priority=78,
    ),
    ActivityRule(
        process_matchers=_compile(*_BROWSERS),
        title_matchers=_compile(
            r"coursera\.org",
            r"udemy\.com",
            r"edx\.org",
            r"khanacademy\.org",
            r"中国大学mooc",
            r"学堂在线",
            r"网易公开课",
            r"freecodecamp\.org",
        ),
        activity_type=Cat.LEARNING,
        activity_sub_type=Sub.LEARNING_VIDEO_COURSE,
        description_template="在线学习课程",
        focus_level=Level.HIGH,
        priority=77,
    ),
    ActivityRule(
        process_matchers=_compile(*_BROWSERS),
        title_matchers=_compile(
            r"微博",
            r"twitter\.com",
            r"facebook\.com",
            r"instagram\.com",
            r"知乎",
            r"豆瓣",
            r"reddit\.com",
        ),
        activity_type=Cat.SOCIAL,
        activity_sub_type=Sub.BROWSING_SOCIAL_MEDIA,
        description_template="刷社交媒体",
        focus_level=Level.LOW,
        priority=60,
    ),
    ActivityRule(
        process_matchers=_compile(*_BROWSERS),
        title_matchers=_compile(r"淘宝", r"tmall", r"京东", r"jd\.com", r"amazon", r"pinduoduo"),
        activity_type=Cat.BROWSING,
        activity_sub_type=Sub.BROWSING_SHOPPING,
        description_template="网上购物",
        focus_level=Level.LOW,
        priority=50,
    ),
    # Catch-all for the browser family. Browser rules match on the process alone,
    # so the priority-78 tech-docs rule wins first for every browser window.
    ActivityRule(
        process_matchers=_compile(*_BROWSERS),
        activity_type=Cat.BROWSING,
        activity_sub_type=Sub.BROWSING_GENERAL,
        description_template="浏览网页",
        focus_level=Level.LOW,
        priority=5,
    ),
    # ── Messaging & meetings ─────────────────────────────────
    ActivityRule(
        process_matchers=_compile(r"wechat\.exe", r"weixin\.exe"),
        title_matchers=_compile(r"微信"),
        activity_type=Cat.SOCIAL,
        activity_sub_type=Sub.CHATTING_IM,
        description_template="聊微信",
        focus_level=Level.MEDIUM,
        priority=65,
    ),
    ActivityRule(
        process_matchers=_compile(r"qq\.exe"),
        title_matchers=_compile(r"qq", r"腾讯qq"),
        activity_type=Cat.SOCIAL,
        activity_sub_type=Sub.CHATTING_IM,
        description_template="聊QQ",
        focus_level=Level.MEDIUM,
        priority=64,
    ),
    ActivityRule(
        process_matchers=_compile(r"dingtalk\.exe"),
        title_matchers=_compile(r"钉钉", r"会议", r"直播"),
        activity_type=Cat.MEETING,
        activity_sub_type=Sub.MEETING_ONLINE_CONFERENCE,
        description_template="用钉钉",
        focus_level=Level.MEDIUM,
        priority=70,
    ),
    ActivityRule(
        process_matchers=_compile(r"slack\.exe"),
        title_matchers=_compile(r"slack"),
        activity_type=Cat.WORKING,
        activity_sub_type=Sub.CHATTING_IM,
        description_template="用Slack沟通",
        focus_level=Level.MEDIUM,
        priority=72,
    ),
    ActivityRule(
        process_matchers=_compile(r"discord\.exe"),
        title_matchers=_compile(r"discord"),
        activity_type=Cat.SOCIAL,
        activity_sub_type=Sub.VOICE_VIDEO_CALL,
        description_template="用Discord",
        focus_level=Level.MEDIUM,
        priority=68,
    ),
    ActivityRule(
        process_matchers=_compile(r"zoom\.exe", r"vmwarezoom\.exe"),
        title_matchers=_compile(r"zoom", r"会议", r"meeting"),
        activity_type=Cat.MEETING,
        activity_sub_type=Sub.MEETING_ONLINE_CONFERENCE,
        description_template="参加Zoom会议",
        focus_level=Level.HIGH,
        priority=76,
    ),
    ActivityRule(
        process_matchers=_compile(r"teams\.exe"),
        title_matchers=_compile(r"microsoft teams", r"会议", r"call"),
        activity_type=Cat.MEETING,
        activity_sub_type=Sub.MEETING_ONLINE_CONFERENCE,
        description_template="参加Teams会议/通话",
        focus_level=Level.HIGH,
        priority=76,
    ),
    ActivityRule(
        process_matchers=_compile(r"chrome\.exe", r"msedge\.exe", r"firefox\.exe"),
        title_matchers=_compile(r"meet\.google\.com", r"正在通话", r"会议中"),
        activity_type=Cat.MEETING,
        activity_sub_type=Sub.MEETING_ONLINE_CONFERENCE,
        description_template="参加Google Meet会议",
        focus_level=Level.HIGH,
        priority=77,
    ),
    ActivityRule(
        process_matchers=_compile(r"applicationframehost\.exe"),
        title_matchers=_compile(r"unigram"),
        activity_type=Cat.SOCIAL,
        activity_sub_type=Sub.CHATTING_IM,
        description_template="用Unigram聊天",
        focus_level=Level.MEDIUM,
        priority=65,
    ),
    # ── Media players ────────────────────────────────────────
    ActivityRule(
        process_matchers=_compile(r"cloudmusic\.exe", r"neteasecloudmusic\.exe"),
        title_matchers=_compile(r"网易云音乐"),
        activity_type=Cat.ENTERTAINMENT,
        activity_sub_type=Sub.LISTENING_MUSIC,
        description_template="听网易云音乐",
        focus_level=Level.LOW,
        priority=55,
    ),
    ActivityRule(
        process_matchers=_compile(r"qqmusic\.exe"),
        title_matchers=_compile(r"qq音乐"),
        activity_type=Cat.ENTERTAINMENT,
        activity_sub_type=Sub.LISTENING_MUSIC,
        description_template="听QQ音乐",
        focus_level=Level.LOW,
        priority=54,
    ),
    ActivityRule(
        process_matchers=_compile(r"spotify\.exe"),
        title_matchers=_compile(r"spotify"),
        activity_type=Cat.ENTERTAINMENT,
        activity_sub_type=Sub.LISTENING_MUSIC,
        description_template="听Spotify",
        focus_level=Level.LOW,
        priority=56,
    ),
    ActivityRule(
        process_matchers=_compile(r"potplayer.*\.exe"),
        title_matchers=_compile(_VIDEO_FILES),
        activity_type=Cat.ENTERTAINMENT,
        activity_sub_type=Sub.WATCHING_MOVIE_SERIES,
        description_template="用PotPlayer看片",
        focus_level=Level.LOW,
        priority=60,
    ),
    ActivityRule(
        process_matchers=_compile(r"potplayer.*\.exe"),
        title_matchers=_compile(r"教程", r"课程", r"教学", r"lesson", r"course", r"tutorial"),
        activity_type=Cat.LEARNING,
        activity_sub_type=Sub.LEARNING_VIDEO_COURSE,
        description_template="用PotPlayer看学习视频",
        focus_level=Level.MEDIUM,
        priority=62,
    ),
    ActivityRule(
        process_matchers=_compile(r"vlc\.exe"),
        title_matchers=_compile(_VIDEO_FILES),
        activity_type=Cat.ENTERTAINMENT,
        activity_sub_type=Sub.WATCHING_MOVIE_SERIES,
        description_template="用VLC看片",
        focus_level=Level.LOW,
        priority=59,
    ),
    # ── Notes & knowledge management ─────────────────────────
    ActivityRule(
        process_matchers=_compile(r"obsidian\.exe"),
        title_matchers=_compile(r"obsidian", r"\.md\b"),
        activity_type=Cat.NOTE_TAKING,
        activity_sub_type=Sub.NOTE_TAKING_ORGANIZING,
        description_template="用Obsidian记笔记/整理知识",
        focus_level=Level.MEDIUM,
        priority=70,
    ),
    ActivityRule(
        process_matchers=_compile(r"notion\.exe"),
        title_matchers=_compile(r"notion"),
        activity_type=Cat.PLANNING,
        activity_sub_type=Sub.PLANNING_TASK_MANAGEMENT,
        description_template="用Notion",
        focus_level=Level.MEDIUM,
        priority=71,
    ),
    ActivityRule(
        process_matchers=_compile(r"typora\.exe"),
        title_matchers=_compile(r"typora", r"\.md\b"),
        activity_type=Cat.NOTE_TAKING,
        activity_sub_type=Sub.WRITING_DOCS,
        description_template="用Typora写文档",
        focus_level=Level.MEDIUM,
        priority=69,
    ),
    ActivityRule(
        process_matchers=_compile(r"evernote\.exe", r"yinxiang\.exe"),
        title_matchers=_compile(r"evernote", r"印象笔记"),
        activity_type=Cat.NOTE_TAKING,
        activity_sub_type=Sub.NOTE_TAKING_QUICK,
        description_template="用印象笔记",
        focus_level=Level.MEDIUM,
        priority=68,
    ),
    # ── System & misc ────────────────────────────────────────
    # Catch-all for the file manager: any title while explorer is in front
    ActivityRule(
        process_matchers=_compile(r"explorer\.exe"),
        activity_type=Cat.BROWSING,
        activity_sub_type=Sub.BROWSING_GENERAL,
        description_template="管理文件",
        focus_level=Level.LOW,
        priority=20,
    ),
    # Any process; the title alone decides
    ActivityRule(
        title_matchers=_compile(r"编译", r"compile", r"building", r"打包"),
        activity_type=Cat.SYSTEM_TASK,
        activity_sub_type=Sub.SYSTEM_COMPILING,
        description_template="程序编译中",
        focus_level=Level.LOW,
        priority=30,
    ),
    # The title pattern matches a literal backslash; in practice this rule fires
    # on the terminal/editor process list alone.
    ActivityRule(
        process_matchers=_compile(
            r"code\.exe",
            r"sublime_text\.exe",
            r"atom\.exe",
            r"devenv\.exe",
            r"xcode\.app",
            r"zed\.exe",
            r"cursor\.exe",
            r"terminal",
            r"cmd",
            r"powershell",
        ),
        title_matchers=_compile(
            r"\\.(js|ts|jsx|tsx|py|java|kt|go|rs|html|css|scss|json|md|xml|gradle|dockerfile|yaml|yml|c|cpp|rb|php|sql)\\b"
        ),
        activity_type=Cat.WORKING,
        activity_sub_type=Sub.CODING_ACTIVE,
        description_template="写代码",
        focus_level=Level.HIGH,
        priority=85,
    ),
]


def sort_rules(rules: list[ActivityRule]) -> tuple[ActivityRule, ...]:
    """Return a new tuple ordered by descending priority; ties keep input order."""
    return tuple(sorted(rules, key=lambda rule: rule.priority, reverse=True))


ACTIVITY_RULES: tuple[ActivityRule, ...] = sort_rules(_RULE_TABLE)
