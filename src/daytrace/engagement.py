"""Engagement scoring and search-to-visit linkage for browser activity.

Both are local heuristics: a visit scores higher when its title carries
a real topic, when it was revisited, when a search led to it, and when
the title looks technical. A score of 0.5 or more marks a visit as
substantive enough for clustering.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from datetime import timedelta

from daytrace.models import ScoredVisit, SearchQuery, SearchVisitPair, Visit
from daytrace.text import clean_title

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_LINK_WINDOW = timedelta(minutes=5)

SUBSTANTIVE_TITLE_MIN_WORDS = 5
_UNDIRECTED_MIN_VISITS = 3

# Version numbers, *Error / *Exception names, call syntax, CSS selectors.
_TECHNICAL_TERMS_RE = re.compile(
    r"\b\d+\.\d+\b|\b\w+Error\b|\b\w+Exception\b|\b\w+\(\)|\B#\w+|\B\.\w+\("
)

_TITLE_WORDS_WEIGHT = 0.25
_REVISIT_WEIGHT = 0.20
_SEARCH_LINK_WEIGHT = 0.25
_TECHNICAL_WEIGHT = 0.15


def link_searches_to_visits(
    searches: Sequence[SearchQuery],
    visits: Sequence[Visit],
    window: timedelta = DEFAULT_SEARCH_LINK_WINDOW,
) -> list[SearchVisitPair]:
    """Pair each search with the visits made within ``window`` after it.

    Searches without a timestamp get no visits. Three or more linked
    visits mark the search as ``undirected`` (the user compared results).
    """
    window_seconds = window.total_seconds()
    pairs: list[SearchVisitPair] = []
    for search in searches:
        linked: list[Visit] = []
        if search.timestamp is not None:
            start = search.timestamp.timestamp()
            for visit in visits:
                if visit.timestamp is None:
                    continue
                delta = visit.timestamp.timestamp() - start
                if 0 <= delta <= window_seconds:
                    linked.append(visit)
        pairs.append(
            SearchVisitPair(
                query=search,
                visits=linked,
                intent_type="undirected" if len(linked) >= _UNDIRECTED_MIN_VISITS else "directed",
            )
        )
    return pairs


def compute_engagement_score(
    visit: Visit,
    cleaned_title: str,
    day_visits: Sequence[Visit],
    search_links: Sequence[SearchVisitPair],
) -> float:
    """Score how likely ``visit`` was substantive reading, from 0.0 to 1.0.

    Components:
        +0.25 cleaned title has at least five words
        +0.20 the same URL was loaded more than once today
        +0.25 a search query led to this URL
        +0.15 the title contains technical terms
    """
    score = 0.0

    if len(cleaned_title.split()) >= SUBSTANTIVE_TITLE_MIN_WORDS:
        score += _TITLE_WORDS_WEIGHT

    if sum(1 for v in day_visits if v.url == visit.url) > 1:
        score += _REVISIT_WEIGHT

    if any(v.url == visit.url for pair in search_links for v in pair.visits):
        score += _SEARCH_LINK_WEIGHT

    if _TECHNICAL_TERMS_RE.search(cleaned_title):
        score += _TECHNICAL_WEIGHT

    return min(score, 1.0)


def score_visits(
    visits: Sequence[Visit],
    searches: Sequence[SearchQuery] = (),
    *,
    link_window: timedelta = DEFAULT_SEARCH_LINK_WINDOW,
) -> list[ScoredVisit]:
    """Clean titles and score every visit, keeping input order."""
    links = link_searches_to_visits(searches, visits, link_window)

    scored: list[ScoredVisit] = []
    for visit in visits:
        title = clean_title(visit.title)
        score = compute_engagement_score(visit, title, visits, links)
        scored.append(ScoredVisit(visit=visit, cleaned_title=title, engagement_score=score))

    logger.debug(
        "Scored %d visits, %d substantive",
        len(scored), sum(1 for s in scored if s.engagement_score >= 0.5),
    )
    return scored
