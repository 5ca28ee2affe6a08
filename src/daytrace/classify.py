"""Rule-based classification of AI-assistant conversation openers.

Provides the default implementations of the task classifier contract
(prompt -> ``TaskType``), the task-title extractor (prompt -> title)
and the ordered topic vocabulary used by the task session builder.
Callers can substitute their own callables and rule tables.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence

from daytrace.models import TaskType

TaskClassifier = Callable[[str], TaskType]
TitleExtractor = Callable[[str], str]
TopicRule = tuple[re.Pattern[str], str]

_CLASSIFY_PREFIX_CHARS = 200

# First matching rule wins.
_TASK_TYPE_RULES: tuple[tuple[re.Pattern[str], TaskType], ...] = (
    (
        re.compile(r"\b(fix|debug|why\s+(does|is|isn'?t)|not\s+work|error|crash|bug|broken|fail)\b", re.I),
        TaskType.DEBUGGING,
    ),
    (
        re.compile(r"\b(review|check|audit|is\s+this\s+(correct|right|good)|critique|look\s+at)\b", re.I),
        TaskType.REVIEW,
    ),
    (
        re.compile(
            r"\b(explain|describe|what\s+is|what\s+are|how\s+does|help\s+me\s+understand|teach|clarify)\b",
            re.I,
        ),
        TaskType.LEARNING,
    ),
    (
        re.compile(
            r"\b(design|plan|should\s+i|what\s+approach|architecture|structure"
            r"|how\s+should\s+i\s+(design|structure|organize))\b",
            re.I,
        ),
        TaskType.ARCHITECTURE,
    ),
    (
        re.compile(r"\b(add|build|create|implement|write|refactor|update|generate|set\s+up|migrate)\b", re.I),
        TaskType.IMPLEMENTATION,
    ),
)

TOPIC_VOCABULARY: tuple[TopicRule, ...] = (
    (re.compile(r"\b(oauth|auth|jwt|token|session|login|password|credential|permission|role|access)\b", re.I), "authentication"),
    (re.compile(r"\b(react|vue|angular|svelte|next\.?js|remix|component|hook|state|props|jsx|tsx)\b", re.I), "frontend"),
    (re.compile(r"\b(api|rest|graphql|endpoint|route|http|request|response|fetch|axios|webhook)\b", re.I), "api-design"),
    (re.compile(r"\b(docker|kubernetes|k8s|terraform|aws|cloud|deploy|ci|cd|pipeline|helm|ecs)\b", re.I), "infrastructure"),
    (re.compile(r"\b(test|spec|mock|vitest|jest|coverage|unit|integration|e2e|assert|expect)\b", re.I), "testing"),
    (re.compile(r"\b(sql|database|postgres|mysql|sqlite|query|schema|migration|index|orm|prisma)\b", re.I), "database"),
    (re.compile(r"\b(typescript|type|interface|generic|infer|narrowing|zod|validation)\b", re.I), "typescript"),
    (re.compile(r"\b(performance|optimize|slow|latency|memory|cache|cdn|bundle|profil)\b", re.I), "performance"),
    (re.compile(r"\b(security|vuln|xss|csrf|injection|sanitize|escape|encrypt|hash)\b", re.I), "security"),
    (re.compile(r"\b(git|commit|branch|merge|rebase|conflict|pr|pull\s+request|review)\b", re.I), "version-control"),
    (re.compile(r"\b(algorithm|data\s+structure|complexity|sort|search|tree|graph|dynamic\s+programming)\b", re.I), "algorithms"),
    (re.compile(r"\b(machine\s+learning|llm|ai|model|embedding|vector|neural|gpt|claude|anthropic)\b", re.I), "ai-ml"),
    (re.compile(r"\b(refactor|clean|solid|pattern|architecture|design|monolith|microservice|domain)\b", re.I), "software-design"),
    (re.compile(r"\b(error|exception|crash|stack\s+trace|debug|log|monitor|alert|incident)\b", re.I), "debugging"),
    (re.compile(r"\b(doc|readme|comment|jsdoc|api\s+spec|openapi|swagger|markdown)\b", re.I), "documentation"),
)


def classify_task_type(prompt: str) -> TaskType:
    """Classify an opener prompt by its leading verbs.

    Only the first 200 characters are considered. Defaults to
    ``TaskType.IMPLEMENTATION`` when nothing matches.
    """
    text = prompt[:_CLASSIFY_PREFIX_CHARS]
    for pattern, task_type in _TASK_TYPE_RULES:
        if pattern.search(text):
            return task_type
    return TaskType.IMPLEMENTATION


# ── task titles ──────────────────────────────────────────────────────

_MAX_TITLE_CHARS = 80
_SENTENCE_END_RE = re.compile(r"(?<=[.!?])\s")
_LEAD_IN_RE = re.compile(
    r"^(?:(?:hi|hey|hello|ok(?:ay)?|so|please|pls)[,!.]?\s+)*"
    r"(?:(?:can|could|would|will)\s+you\s+(?:please\s+)?|help\s+me\s+(?:to\s+)?|i\s+(?:want|need)\s+(?:you\s+)?to\s+)?",
    re.I,
)


def extract_task_title(prompt: str) -> str:
    """Derive a short human-readable title from an opener prompt.

    Takes the first non-empty line, cuts it at the first sentence end,
    drops conversational lead-ins ("please", "can you") and truncates on
    a word boundary.
    """
    line = next((ln.strip() for ln in prompt.splitlines() if ln.strip()), "")
    if not line:
        return ""

    sentence = _SENTENCE_END_RE.split(line, maxsplit=1)[0].rstrip(" .!?")
    title = _LEAD_IN_RE.sub("", sentence).strip() or sentence
    title = title[:1].upper() + title[1:]

    if len(title) > _MAX_TITLE_CHARS:
        cut = title[:_MAX_TITLE_CHARS].rsplit(" ", 1)[0]
        title = cut.rstrip(",;:") + "..."
    return title


# ── topics ───────────────────────────────────────────────────────────

_TOPIC_STRIP_RE = re.compile(r"[^\w\s-]", re.ASCII)
_FALLBACK_TOPIC_WORDS = 3


def extract_topic_cluster(text: str, vocabulary: Sequence[TopicRule] = TOPIC_VOCABULARY) -> str:
    """Label the topic of ``text`` with the first matching vocabulary rule.

    Falls back to the first three words longer than three characters,
    then to ``"general"``.
    """
    for pattern, label in vocabulary:
        if pattern.search(text):
            return label
    words = [w for w in _TOPIC_STRIP_RE.sub(" ", text).split() if len(w) > 3]
    if words:
        return " ".join(words[:_FALLBACK_TOPIC_WORDS])
    return "general"
