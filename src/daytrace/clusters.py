"""Article clustering over a day's substantive browser visits.

Groups visits into focused reading sessions with TF-IDF vectors and
cosine similarity:

1. Keep visits whose engagement score meets the threshold.
2. Sort by time and vectorise all cleaned titles once.
3. Walk the visits in time order. Each visit joins the first cluster, in
   creation order, whose last visit is within the session gap and whose
   centroid is similar enough. Otherwise it starts a new cluster.
4. Label every cluster, infer its intent, drop singletons.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta

from daytrace.models import (
    EPOCH,
    ArticleCluster,
    IntentSignal,
    ScoredVisit,
    TimeRange,
    Visit,
    timestamp_key,
)
from daytrace.text import STOPWORDS_LOWER, visit_domain
from daytrace.vectors import Vector, build_tfidf, centroid, cosine_similarity

logger = logging.getLogger(__name__)

DEFAULT_SESSION_GAP = timedelta(minutes=45)
DEFAULT_SIMILARITY_THRESHOLD = 0.3
DEFAULT_ENGAGEMENT_THRESHOLD = 0.5
MIN_CLUSTER_SIZE = 2

_RESEARCH_MIN_DOMAINS = 3
_LABEL_TERMS = 3


@dataclass
class _OpenCluster:
    """Mutable cluster state during the greedy pass."""

    members: list[int]
    articles: list[str]
    visits: list[Visit]
    engagement_score: float
    start: datetime
    end: datetime


def label_cluster(articles: Sequence[str]) -> str:
    """Join the three most frequent meaningful words across ``articles``.

    Words are lowercased and split on whitespace only; words of four or
    more characters that are not stopwords count. Ties keep the order in
    which words were first seen.
    """
    freq: Counter[str] = Counter()
    for title in articles:
        freq.update(
            w for w in title.lower().split() if len(w) > 3 and w not in STOPWORDS_LOWER
        )
    return " ".join(word for word, _ in freq.most_common(_LABEL_TERMS))


def infer_intent(visits: Sequence[Visit]) -> IntentSignal:
    """Classify why a cluster exists from its visits.

    Three or more distinct domains means research; otherwise a URL seen
    more than once means reference; otherwise plain browsing. URLs that
    cannot be parsed count as the empty domain.
    """
    domains = {visit_domain(v.url) for v in visits}
    if len(domains) >= _RESEARCH_MIN_DOMAINS:
        return IntentSignal.RESEARCH

    url_counts = Counter(v.url for v in visits)
    if any(count > 1 for count in url_counts.values()):
        return IntentSignal.REFERENCE

    return IntentSignal.BROWSING


def cluster_articles(
    scored: Sequence[ScoredVisit],
    *,
    session_gap: timedelta = DEFAULT_SESSION_GAP,
    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
    engagement_threshold: float = DEFAULT_ENGAGEMENT_THRESHOLD,
    min_cluster_size: int = MIN_CLUSTER_SIZE,
) -> list[ArticleCluster]:
    """Group substantive visits into thematic article clusters.

    Args:
        scored: Visits with their cleaned titles and engagement scores.
        session_gap: Maximum time between a cluster's latest visit and a
            new member.
        similarity_threshold: Minimum cosine similarity between a visit
            and a cluster centroid for the visit to join.
        engagement_threshold: Minimum engagement score for a visit to be
            considered at all.
        min_cluster_size: Clusters with fewer articles are dropped.
            Values below 2 are raised to 2.

    Returns:
        Clusters in creation order, each with at least two articles.
    """
    substantive = [s for s in scored if s.engagement_score >= engagement_threshold]
    logger.debug(
        "Clustering %d of %d visits (engagement >= %.2f)",
        len(substantive), len(scored), engagement_threshold,
    )
    if not substantive:
        return []

    ordered = sorted(substantive, key=lambda s: timestamp_key(s.visit.timestamp))
    vectors: list[Vector] = build_tfidf([s.cleaned_title for s in ordered])

    gap_seconds = session_gap.total_seconds()
    open_clusters: list[_OpenCluster] = []

    for i, item in enumerate(ordered):
        visit = item.visit
        placed = False

        for cluster in open_clusters:
            last_time = cluster.visits[-1].timestamp
            if last_time is None or visit.timestamp is None:
                continue
            if visit.timestamp.timestamp() - last_time.timestamp() > gap_seconds:
                continue

            center = centroid([vectors[m] for m in cluster.members])
            if cosine_similarity(vectors[i], center) < similarity_threshold:
                continue

            cluster.members.append(i)
            cluster.articles.append(item.cleaned_title)
            cluster.visits.append(visit)
            cluster.end = visit.timestamp
            n = len(cluster.visits)
            cluster.engagement_score = (
                cluster.engagement_score * (n - 1) + item.engagement_score
            ) / n
            placed = True
            break

        if not placed:
            seed_time = visit.timestamp or EPOCH
            open_clusters.append(
                _OpenCluster(
                    members=[i],
                    articles=[item.cleaned_title],
                    visits=[visit],
                    engagement_score=item.engagement_score,
                    start=seed_time,
                    end=seed_time,
                )
            )

    min_size = max(min_cluster_size, MIN_CLUSTER_SIZE)
    result = [
        ArticleCluster(
            label=label_cluster(c.articles),
            articles=c.articles,
            visits=c.visits,
            time_range=TimeRange(start=c.start, end=c.end),
            engagement_score=min(c.engagement_score, 1.0),
            intent_signal=infer_intent(c.visits),
        )
        for c in open_clusters
        if len(c.articles) >= min_size
    ]
    logger.debug(
        "Built %d clusters, kept %d with >= %d articles",
        len(open_clusters), len(result), min_size,
    )
    return result
