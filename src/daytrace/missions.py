"""Search mission detection.

A mission is a run of queries issued within a short window of each other
that stay on the anchor query's topic: each new query must share at
least one content word with the query that opened the chain. Every
query ends up in exactly one mission, singletons included.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from datetime import timedelta

from daytrace.models import (
    EPOCH,
    SearchIntent,
    SearchMission,
    SearchQuery,
    TimeRange,
    Visit,
    timestamp_key,
)
from daytrace.text import query_content_words

logger = logging.getLogger(__name__)

DEFAULT_MISSION_WINDOW = timedelta(minutes=10)

_NAVIGATIONAL_RE = re.compile(
    r"\b(site:|docs|github|npm|official|login|sign\s+in|download)\b", re.I
)
_QUESTION_LEAD_RE = re.compile(
    r"^(how|what|why|when|where|who|which|can|is|does|explain)\b", re.I
)
_COMPARISON_RE = re.compile(r"\b(compare|vs|versus|difference\s+between)\b", re.I)


def classify_search_intent(query: str) -> SearchIntent:
    """Classify a query as navigational, informational or transactional.

    Navigational markers win over informational ones; anything else is
    transactional.
    """
    if _NAVIGATIONAL_RE.search(query):
        return SearchIntent.NAVIGATIONAL
    text = query.strip()
    if _QUESTION_LEAD_RE.search(text) or _COMPARISON_RE.search(text):
        return SearchIntent.INFORMATIONAL
    return SearchIntent.TRANSACTIONAL


def chain_queries(
    searches: Sequence[SearchQuery],
    *,
    window: timedelta = DEFAULT_MISSION_WINDOW,
) -> list[list[SearchQuery]]:
    """Partition queries, sorted by time, into topic chains.

    A query extends the current chain when it follows the chain's last
    query within ``window`` and shares a content word with the chain's
    first query. Missing timestamps count as the epoch.
    """
    ordered = sorted(searches, key=lambda q: timestamp_key(q.timestamp))
    window_seconds = window.total_seconds()

    chains: list[list[SearchQuery]] = []
    for query in ordered:
        if chains:
            chain = chains[-1]
            gap = timestamp_key(query.timestamp) - timestamp_key(chain[-1].timestamp)
            anchor_words = query_content_words(chain[0].query)
            if gap <= window_seconds and anchor_words & query_content_words(query.query):
                chain.append(query)
                continue
        chains.append([query])
    return chains


def detect_search_missions(
    searches: Sequence[SearchQuery],
    visits: Sequence[Visit],
    *,
    window: timedelta = DEFAULT_MISSION_WINDOW,
) -> list[SearchMission]:
    """Chain queries into missions and attach the visits they led to.

    A visit belongs to a mission when its timestamp falls between the
    mission's first query and ``window`` after its last query. Visits
    without a timestamp are never attached.
    """
    if not searches:
        return []

    window_seconds = window.total_seconds()
    missions: list[SearchMission] = []
    for chain in chain_queries(searches, window=window):
        anchor, last = chain[0], chain[-1]
        start = timestamp_key(anchor.timestamp)
        end = timestamp_key(last.timestamp) + window_seconds

        linked = [
            v for v in visits
            if v.timestamp is not None and start <= v.timestamp.timestamp() <= end
        ]
        missions.append(
            SearchMission(
                label=anchor.query,
                queries=chain,
                visits=linked,
                time_range=TimeRange(
                    start=anchor.timestamp or EPOCH,
                    end=last.timestamp or EPOCH,
                ),
                intent_type=classify_search_intent(anchor.query),
            )
        )

    logger.debug("Chained %d queries into %d missions", len(searches), len(missions))
    return missions
