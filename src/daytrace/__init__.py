"""daytrace - semantic groupings for a day of digital activity.

Turns sanitized browser visits, AI-assistant conversation turns and
search queries into article clusters, task sessions and search missions.
Deterministic, offline, no LLM calls.
"""

from daytrace.clusters import cluster_articles
from daytrace.missions import detect_search_missions
from daytrace.services import SemanticExtractor, fuse_cross_source_sessions
from daytrace.tasks import group_turns_into_tasks

__version__ = "0.1.0"

__all__ = [
    "SemanticExtractor",
    "__version__",
    "cluster_articles",
    "detect_search_missions",
    "fuse_cross_source_sessions",
    "group_turns_into_tasks",
]
