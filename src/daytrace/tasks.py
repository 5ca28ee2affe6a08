"""Group AI-assistant conversation turns into task sessions.

A conversation file is the strongest session boundary available, so
every distinct ``conversation_file`` becomes exactly one ``TaskSession``.
The opener prompt decides the task's title, type and topic.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from daytrace.classify import (
    TOPIC_VOCABULARY,
    TaskClassifier,
    TitleExtractor,
    TopicRule,
    classify_task_type,
    extract_task_title,
    extract_topic_cluster,
)
from daytrace.models import (
    ConversationTurn,
    InteractionMode,
    TaskSession,
    TaskType,
    TimeRange,
)

logger = logging.getLogger(__name__)

UNKNOWN_CONVERSATION = "unknown"
DEEP_LEARNING_MIN_TURNS = 5

_EXPLORATION_TYPES = frozenset({TaskType.LEARNING, TaskType.ARCHITECTURE})


def interaction_mode(task_type: TaskType) -> InteractionMode:
    """Learning and architecture work is exploration; the rest is acceleration."""
    if task_type in _EXPLORATION_TYPES:
        return InteractionMode.EXPLORATION
    return InteractionMode.ACCELERATION


def group_by_conversation(
    turns: Sequence[ConversationTurn],
) -> dict[str, list[ConversationTurn]]:
    """Partition turns by conversation file, in first-seen order.

    Turns without a conversation file share the ``"unknown"`` group.
    """
    groups: dict[str, list[ConversationTurn]] = {}
    for turn in turns:
        groups.setdefault(turn.conversation_file or UNKNOWN_CONVERSATION, []).append(turn)
    return groups


def group_turns_into_tasks(
    turns: Sequence[ConversationTurn],
    *,
    classifier: TaskClassifier = classify_task_type,
    title_extractor: TitleExtractor = extract_task_title,
    topic_vocabulary: Sequence[TopicRule] = TOPIC_VOCABULARY,
    deep_learning_min_turns: int = DEEP_LEARNING_MIN_TURNS,
) -> list[TaskSession]:
    """Build one task session per conversation file.

    Args:
        turns: All conversation turns for the day, openers or not.
        classifier: Maps the opener prompt to a ``TaskType``.
        title_extractor: Maps the opener prompt to a task title.
        topic_vocabulary: Ordered ``(pattern, label)`` topic rules.
        deep_learning_min_turns: Turn count at which a learning or
            architecture session counts as deep learning.

    Returns:
        Task sessions, most recently started first.
    """
    if not turns:
        return []

    sessions: list[TaskSession] = []
    for conversation_file, group in group_by_conversation(turns).items():
        ordered = sorted(group, key=lambda t: t.timestamp.timestamp())
        opener = next((t for t in ordered if t.is_opener), ordered[0])

        task_type = classifier(opener.prompt)
        turn_count = opener.turn_count or len(ordered)
        exploring = task_type in _EXPLORATION_TYPES

        sessions.append(
            TaskSession(
                task_title=title_extractor(opener.prompt),
                task_type=task_type,
                topic_cluster=extract_topic_cluster(opener.prompt, topic_vocabulary),
                prompts=ordered,
                time_range=TimeRange(start=ordered[0].timestamp, end=ordered[-1].timestamp),
                project=opener.project,
                conversation_file=conversation_file,
                turn_count=turn_count,
                interaction_mode=interaction_mode(task_type),
                is_deep_learning=exploring and turn_count >= deep_learning_min_turns,
            )
        )

    sessions.sort(key=lambda s: s.time_range.start.timestamp(), reverse=True)
    logger.debug("Grouped %d turns into %d task sessions", len(turns), len(sessions))
    return sessions
