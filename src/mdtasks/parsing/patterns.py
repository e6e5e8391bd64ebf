"""Regular expressions for task lines and their inline metadata.

Two metadata conventions are recognised:

- "tasks": emoji markers, e.g. ``📅 2025-01-15``, ``⏫``, ``#project/home``,
  ``@office``
- "dataview": bracketed inline fields, e.g. ``[due:: 2025-01-15]``,
  ``[priority:: high]``, ``[project:: home]``
"""

import re

# "- [ ] text", "* [x] text", "1. [/] text", optionally quoted with ">"
TASK_PATTERN = re.compile(r"^(([\s>]*)?(-|\d+\.|\*|\+)\s\[(.)\])\s*(.*)$")

HEADING_PATTERN = re.compile(r"^(#{1,6})\s+(.*)$")

_DATE = r"(\d{4}-\d{2}-\d{2})"

# --- Emoji ("tasks") format ---

EMOJI_DUE_DATE = re.compile(r"(?:📅|🗓️?)\s*" + _DATE)
EMOJI_SCHEDULED_DATE = re.compile(r"(?:⏳|⌛)\s*" + _DATE)
EMOJI_START_DATE = re.compile(r"🛫\s*" + _DATE)
EMOJI_COMPLETED_DATE = re.compile(r"✅\s*" + _DATE)
EMOJI_CREATED_DATE = re.compile(r"➕\s*" + _DATE)

# Runs until the next marker (or end of text)
EMOJI_RECURRENCE = re.compile(
    r"🔁\s*(.*?)(?=\s(?:📅|🗓|🛫|⏳|⌛|✅|➕|🔁|🔺|⏫|🔼|🔽|⏬|@|#)|$)"
)

EMOJI_PRIORITY = re.compile(r"(🔺|⏫|🔼|🔽|⏬️?|\[#[A-C]\])")

EMOJI_CONTEXT = re.compile(r"@([\w-]+)")

PROJECT_TAG_PREFIX = "#project/"
EMOJI_PROJECT_TAG = re.compile(re.escape(PROJECT_TAG_PREFIX) + r"([\w/-]+)")

# --- Dataview format ---

DV_DUE_DATE = re.compile(r"\[(?:due|🗓️?)::\s*" + _DATE + r"\s*\]", re.IGNORECASE)
DV_SCHEDULED_DATE = re.compile(r"\[(?:scheduled|⏳)::\s*" + _DATE + r"\s*\]", re.IGNORECASE)
DV_START_DATE = re.compile(r"\[(?:start|🛫)::\s*" + _DATE + r"\s*\]", re.IGNORECASE)
DV_COMPLETED_DATE = re.compile(r"\[(?:completion|✅)::\s*" + _DATE + r"\s*\]", re.IGNORECASE)
DV_CREATED_DATE = re.compile(r"\[(?:created|➕)::\s*" + _DATE + r"\s*\]", re.IGNORECASE)

DV_RECURRENCE = re.compile(r"\[(?:repeat|recurrence|🔁)::\s*([^\]]+)\]", re.IGNORECASE)
DV_PRIORITY = re.compile(r"\[priority::\s*([^\]]+)\]", re.IGNORECASE)
DV_PROJECT = re.compile(r"\[project::\s*([^\]]+)\]", re.IGNORECASE)
DV_CONTEXT = re.compile(r"\[context::\s*([^\]]+)\]", re.IGNORECASE)

# Any "[key:: value]" field, stripped before tag scanning in dataview mode
ANY_DATAVIEW_FIELD = re.compile(r"\[[^\[\]:]+::\s*[^\]]*\]")

# --- Tags and links ---

TAG = re.compile(r"(?<!\S)#[\w/-]+")
CONTEXT_TOKEN = re.compile(r"@[\w-]+")

WIKI_LINK = re.compile(r"\[\[[^\[\]]+\]\]")
MARKDOWN_LINK = re.compile(r"\[([^\[\]]*)\]\((.*?)\)")

WHITESPACE_RUN = re.compile(r"\s{2,}")

# Symbol or name -> numeric priority (higher is more urgent)
PRIORITY_MAP: dict[str, int] = {
    "🔺": 5,
    "⏫": 4,
    "🔼": 3,
    "🔽": 2,
    "⏬️": 1,
    "⏬": 1,
    "[#A]": 4,
    "[#B]": 3,
    "[#C]": 2,
    "highest": 5,
    "high": 4,
    "medium": 3,
    "low": 2,
    "lowest": 1,
}
