"""Semantic extraction over one day of activity.

``SemanticExtractor`` wires the clustering, task-session and mission
passes to a ``DaytraceConfig``. ``load_day`` is the only function here
that touches the filesystem.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from pathlib import Path

from pydantic import ValidationError

from daytrace.classify import (
    TOPIC_VOCABULARY,
    TaskClassifier,
    TitleExtractor,
    TopicRule,
    classify_task_type,
    extract_task_title,
)
from daytrace.clusters import cluster_articles
from daytrace.config import DaytraceConfig
from daytrace.engagement import score_visits
from daytrace.errors import InputError
from daytrace.missions import detect_search_missions
from daytrace.models import (
    ArticleCluster,
    CommitWorkUnit,
    ConversationTurn,
    DayActivity,
    ScoredVisit,
    SearchMission,
    SearchQuery,
    SemanticExtraction,
    TaskSession,
    UnifiedTaskSession,
    Visit,
)
from daytrace.tasks import group_turns_into_tasks

logger = logging.getLogger(__name__)


def fuse_cross_source_sessions(
    clusters: Sequence[ArticleCluster],
    commits: Sequence[CommitWorkUnit],
    task_sessions: Sequence[TaskSession],
    missions: Sequence[SearchMission],
) -> list[UnifiedTaskSession]:
    """Merge work units from every source into unified task sessions.

    Not implemented: fusing needs a temporal plus topic overlap algorithm
    that has not been designed yet. Always returns an empty list so
    downstream consumers can depend on the shape today.
    """
    return []


class SemanticExtractor:
    """Runs the semantic extraction passes with one configuration."""

    def __init__(
        self,
        config: DaytraceConfig | None = None,
        *,
        classifier: TaskClassifier = classify_task_type,
        title_extractor: TitleExtractor = extract_task_title,
        topic_vocabulary: Sequence[TopicRule] = TOPIC_VOCABULARY,
    ) -> None:
        self._config = config or DaytraceConfig()
        self._classifier = classifier
        self._title_extractor = title_extractor
        self._topic_vocabulary = topic_vocabulary

    @property
    def config(self) -> DaytraceConfig:
        return self._config

    def score_visits(
        self, visits: Sequence[Visit], searches: Sequence[SearchQuery] = ()
    ) -> list[ScoredVisit]:
        return score_visits(
            visits, searches, link_window=self._config.missions.search_link_window
        )

    def cluster_visits(self, scored: Sequence[ScoredVisit]) -> list[ArticleCluster]:
        cfg = self._config.clusters
        return cluster_articles(
            scored,
            session_gap=cfg.session_gap,
            similarity_threshold=cfg.similarity_threshold,
            engagement_threshold=cfg.engagement_threshold,
            min_cluster_size=cfg.min_cluster_size,
        )

    def group_tasks(self, turns: Sequence[ConversationTurn]) -> list[TaskSession]:
        return group_turns_into_tasks(
            turns,
            classifier=self._classifier,
            title_extractor=self._title_extractor,
            topic_vocabulary=self._topic_vocabulary,
            deep_learning_min_turns=self._config.tasks.deep_learning_min_turns,
        )

    def detect_missions(
        self, searches: Sequence[SearchQuery], visits: Sequence[Visit]
    ) -> list[SearchMission]:
        return detect_search_missions(searches, visits, window=self._config.missions.window)

    def fuse(
        self,
        clusters: Sequence[ArticleCluster],
        commits: Sequence[CommitWorkUnit],
        task_sessions: Sequence[TaskSession],
        missions: Sequence[SearchMission],
    ) -> list[UnifiedTaskSession]:
        return fuse_cross_source_sessions(clusters, commits, task_sessions, missions)

    def extract(self, day: DayActivity) -> SemanticExtraction:
        """Run every pass over one day of activity."""
        clusters = self.cluster_visits(self.score_visits(day.visits, day.searches))
        task_sessions = self.group_tasks(day.turns)
        missions = self.detect_missions(day.searches, day.visits)
        logger.info(
            "Extracted %d clusters, %d task sessions, %d missions",
            len(clusters), len(task_sessions), len(missions),
        )
        return SemanticExtraction(
            clusters=clusters,
            task_sessions=task_sessions,
            missions=missions,
            unified_sessions=self.fuse(clusters, day.commits, task_sessions, missions),
        )


def load_day(path: str | Path) -> DayActivity:
    """Read a JSON day file into a ``DayActivity``.

    Raises:
        InputError: If the file is missing, is not UTF-8 JSON, or does not match
            the record schema.
    """
    day_path = Path(path)
    try:
        raw = json.loads(day_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as exc:
        raise InputError(f"Cannot read day file {day_path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise InputError(f"Day file {day_path} is not valid JSON: {exc}") from exc

    try:
        return DayActivity.model_validate(raw)
    except ValidationError as exc:
        raise InputError(f"Day file {day_path} has invalid records: {exc}") from exc
