"""Text normalisation shared by the analysis passes.

Stopword tables, tokenisers, page-title cleaning and URL domain parsing.
All tables are immutable and built once at import time.
"""

from __future__ import annotations

import re
from urllib.parse import urlsplit

# ── stopwords ────────────────────────────────────────────────────────

# Words that pass the length checks but carry no topic signal: common
# English, commit verbs, notification noise, UI chrome and generic acronyms.
ENTITY_STOPWORDS: frozenset[str] = frozenset({
    "The", "This", "That", "How", "What", "Why", "When",
    "From", "With", "Here", "There", "Your", "About", "After", "Before",
    "Into", "Over", "Just", "Also", "More", "Some", "Such", "Each",
    "Fix", "Add", "Remove", "Update", "Refactor", "Revert", "Merge", "Bump",
    "Move", "Rename", "Delete", "Change", "Enable", "Disable", "Clean",
    "Init", "Create", "Build", "Test", "Deploy", "Release", "Improve",
    "Handle", "Pull", "Push", "Commit", "Branch", "Issue", "Draft",
    "Review", "Resolve", "Conflict", "Sync",
    "Inbox", "Unread", "Reply", "Forward", "Sent", "Subject", "Thread",
    "Notification", "Alert",
    "Home", "Settings", "Profile", "Dashboard", "Overview", "Summary",
    "Details", "Results", "Loading", "Untitled",
    "HTML", "CSS", "API", "URL", "SDK", "CLI", "GUI", "IDE",
})

STOPWORDS_LOWER: frozenset[str] = frozenset(w.lower() for w in ENTITY_STOPWORDS)

# Short list used only for search-query overlap checks.
QUERY_STOPWORDS: frozenset[str] = frozenset({
    "the", "and", "for", "are", "but", "not", "you", "all", "can",
    "was", "will", "had", "has", "is", "it", "its", "of", "to",
    "in", "on", "at", "an", "a", "be", "do",
})

_NON_WORD_RE = re.compile(r"[^\w\s]", re.ASCII)


# ── tokenisation ─────────────────────────────────────────────────────


def _split_words(text: str, stopwords: frozenset[str]) -> list[str]:
    cleaned = _NON_WORD_RE.sub(" ", text.lower())
    return [w for w in cleaned.split() if len(w) > 2 and w not in stopwords]


def tokenize(text: str) -> list[str]:
    """Lowercase, strip punctuation, drop short tokens and stopwords.

    Punctuation becomes whitespace, so ``"node.js"`` yields ``["node"]``
    (``"js"`` is too short to survive).
    """
    return _split_words(text, STOPWORDS_LOWER)


def query_content_words(query: str) -> set[str]:
    """Content words of a search query, used for chain overlap checks."""
    return set(_split_words(query, QUERY_STOPWORDS))


# ── title cleaning ───────────────────────────────────────────────────

# Matches " | ", " — ", " – ", " · ", " » " and " - " separators.
_TITLE_SEPARATORS = re.compile(r"\s+[|—–·»]\s+|\s+-\s+")

_NAV_NOISE_TITLES: frozenset[str] = frozenset({
    "Home", "Login", "Sign In", "Dashboard", "Settings", "Profile",
    "New Tab", "Untitled", "Loading...", "404", "Error", "Page Not Found",
    "Search Results", "Google", "Bing", "DuckDuckGo",
})

_BRAND_SUFFIXES: tuple[str, ...] = (
    " | GitHub", " · GitHub", " - GitHub",
    " - Stack Overflow", " — Stack Overflow",
    " | MDN Web Docs", " | TypeScript",
    " | Google", " - Google Search",
    " | YouTube", " - YouTube",
    " | Reddit",
    " | Obsidian",
    " | Wikipedia", " - Wikipedia",
)

_MIN_TITLE_LENGTH = 5


def clean_title(raw_title: str) -> str:
    """Extract the article portion of a browser page title.

    Strips one known brand suffix, splits on title separators and keeps
    the longest segment. Returns ``""`` for navigation noise ("Home",
    "Login", ...) and for anything shorter than five characters.

    Examples::

        clean_title("How to deep copy array — Stack Overflow")
        # -> "How to deep copy array"
        clean_title("Home")
        # -> ""
    """
    if not raw_title:
        return ""

    title = raw_title
    for suffix in _BRAND_SUFFIXES:
        if title.endswith(suffix):
            title = title[: -len(suffix)].strip()
            break

    best = ""
    for part in _TITLE_SEPARATORS.split(title):
        part = part.strip()
        if len(part) > len(best):
            best = part

    if best in _NAV_NOISE_TITLES or len(best) < _MIN_TITLE_LENGTH:
        return ""
    return best


# ── URLs ─────────────────────────────────────────────────────────────


def parse_domain(url: str) -> str | None:
    """Return the hostname of ``url`` without a leading ``www.``.

    Returns ``None`` when the URL has no scheme or hostname or cannot be
    parsed at all.
    """
    try:
        parts = urlsplit(url)
        hostname = parts.hostname
    except ValueError:
        return None
    if not parts.scheme or not hostname:
        return None
    return hostname.removeprefix("www.")


def visit_domain(url: str) -> str:
    """Domain used for grouping; unparsable URLs map to ``""``."""
    domain = parse_domain(url)
    return domain if domain is not None else ""
