"""Pure data models for semantic extraction.

All Pydantic models and enums live here. No I/O, no business logic.
Analysis modules import from this module; this module only imports
from stdlib and third-party packages.
"""

from __future__ import annotations

from datetime import UTC, date, datetime
from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from daytrace.text import visit_domain

EPOCH = datetime.fromtimestamp(0, UTC)


def timestamp_key(value: datetime | None) -> float:
    """Sort key for optional timestamps; missing values sort as the epoch."""
    return value.timestamp() if value is not None else 0.0


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class IntentSignal(StrEnum):
    """Why an article cluster exists."""

    RESEARCH = "research"
    REFERENCE = "reference"
    IMPLEMENTATION = "implementation"
    BROWSING = "browsing"


class TaskType(StrEnum):
    """Verb-based classification of an AI-assistant conversation opener."""

    IMPLEMENTATION = "implementation"
    DEBUGGING = "debugging"
    REVIEW = "review"
    LEARNING = "learning"
    ARCHITECTURE = "architecture"


class InteractionMode(StrEnum):
    """Acceleration (user knows the goal) vs exploration (user is discovering)."""

    ACCELERATION = "acceleration"
    EXPLORATION = "exploration"


class SearchIntent(StrEnum):
    """Broder query taxonomy."""

    NAVIGATIONAL = "navigational"
    INFORMATIONAL = "informational"
    TRANSACTIONAL = "transactional"


# ---------------------------------------------------------------------------
# Input records
# ---------------------------------------------------------------------------


class Visit(BaseModel):
    """A single browser page visit."""

    model_config = ConfigDict(frozen=True)

    url: str
    title: str = ""
    timestamp: datetime | None = None
    domain: str = ""
    visit_count: int = 1

    @model_validator(mode="before")
    @classmethod
    def _derive_domain(cls, data: Any) -> Any:
        """Fill ``domain`` from the URL when the collector left it blank."""
        if isinstance(data, dict) and not data.get("domain"):
            data = dict(data)
            data["domain"] = visit_domain(str(data.get("url", "")))
        return data


class ScoredVisit(BaseModel):
    """A visit joined with its cleaned title and engagement score.

    Replaces the three index-aligned lists (visits, titles, scores) the
    clustering pass would otherwise need.
    """

    model_config = ConfigDict(frozen=True)

    visit: Visit
    cleaned_title: str = ""
    engagement_score: float = Field(default=0.0, ge=0.0, le=1.0)


class ConversationTurn(BaseModel):
    """One user prompt from an AI-assistant conversation file."""

    model_config = ConfigDict(frozen=True)

    prompt: str
    timestamp: datetime
    project: str = ""
    conversation_file: str = ""
    is_opener: bool = False
    turn_count: int | None = None


class SearchQuery(BaseModel):
    """A search engine query."""

    model_config = ConfigDict(frozen=True)

    query: str
    timestamp: datetime | None = None
    engine: str = ""


class GitCommit(BaseModel):
    """A commit as reported by the git log collector."""

    model_config = ConfigDict(frozen=True)

    hash: str
    message: str
    timestamp: datetime | None = None
    repo: str = ""
    files_changed: int = 0
    insertions: int = 0
    deletions: int = 0
    file_paths: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Semantic groupings
# ---------------------------------------------------------------------------


class TimeRange(BaseModel):
    """Inclusive time span of a grouping."""

    start: datetime
    end: datetime

    @model_validator(mode="after")
    def _check_order(self) -> TimeRange:
        if self.start.timestamp() > self.end.timestamp():
            raise ValueError("time range start must not be after end")
        return self


class ArticleCluster(BaseModel):
    """A focused reading session: related substantive visits close in time."""

    label: str = ""
    articles: list[str] = Field(default_factory=list)
    visits: list[Visit] = Field(default_factory=list)
    time_range: TimeRange
    engagement_score: float = Field(default=0.0, ge=0.0, le=1.0)
    intent_signal: IntentSignal = IntentSignal.BROWSING


class TaskSession(BaseModel):
    """One AI-assistant conversation file grouped into a task."""

    task_title: str
    task_type: TaskType
    topic_cluster: str
    prompts: list[ConversationTurn]
    time_range: TimeRange
    project: str = ""
    conversation_file: str
    turn_count: int
    interaction_mode: InteractionMode
    is_deep_learning: bool = False


class SearchMission(BaseModel):
    """A chain of related queries issued close together."""

    label: str
    queries: list[SearchQuery]
    visits: list[Visit] = Field(default_factory=list)
    time_range: TimeRange
    intent_type: SearchIntent


class SearchVisitPair(BaseModel):
    """A search query and the visits that followed it."""

    query: SearchQuery
    visits: list[Visit] = Field(default_factory=list)
    intent_type: Literal["directed", "undirected"] = "directed"


class CommitWorkUnit(BaseModel):
    """A group of commits that belong to one piece of work."""

    label: str
    work_mode: str = ""
    commits: list[GitCommit] = Field(default_factory=list)
    repos: list[str] = Field(default_factory=list)
    time_range: TimeRange
    has_why_information: bool = False
    why_clause: str | None = None
    is_generic: bool = False


class UnifiedTaskSession(BaseModel):
    """Cross-source task spanning reading, searching, prompting and committing.

    Declared for downstream consumers; nothing produces it yet.
    """

    label: str
    time_range: TimeRange
    browser_clusters: list[ArticleCluster] = Field(default_factory=list)
    commit_work_units: list[CommitWorkUnit] = Field(default_factory=list)
    task_sessions: list[TaskSession] = Field(default_factory=list)
    search_missions: list[SearchMission] = Field(default_factory=list)
    lifecycle: list[Literal["research", "implementation", "debugging", "commit"]] = Field(
        default_factory=list
    )
    primary_topic: str = ""
    outcome: Literal["committed", "in-progress", "abandoned", "learning-only"] = "in-progress"


# ---------------------------------------------------------------------------
# Envelopes
# ---------------------------------------------------------------------------


class DayActivity(BaseModel):
    """One day of sanitized activity records."""

    day: date | None = None
    visits: list[Visit] = Field(default_factory=list)
    searches: list[SearchQuery] = Field(default_factory=list)
    turns: list[ConversationTurn] = Field(default_factory=list)
    commits: list[CommitWorkUnit] = Field(default_factory=list)


class SemanticExtraction(BaseModel):
    """Everything the extraction pass produces for one day."""

    clusters: list[ArticleCluster] = Field(default_factory=list)
    task_sessions: list[TaskSession] = Field(default_factory=list)
    missions: list[SearchMission] = Field(default_factory=list)
    unified_sessions: list[UnifiedTaskSession] = Field(default_factory=list)
