"""Sparse TF-IDF vectors and the vector operations built on them.

Vectors are plain ``dict[str, float]`` mappings from term to weight.
"""

from __future__ import annotations

import math
from collections import Counter
from collections.abc import Sequence

from daytrace.text import tokenize

Vector = dict[str, float]


def build_tfidf(documents: Sequence[str]) -> list[Vector]:
    """Build one TF-IDF vector per document, in document order.

    ``tf`` is the raw count divided by the document's token count and
    ``idf = 1 + ln(N / df)``. The ``1 +`` keeps terms shared by every
    document above zero weight, otherwise two near-identical titles in a
    two-document corpus would have no similarity at all.
    """
    n_docs = len(documents)
    if n_docs == 0:
        return []

    docs = [tokenize(doc) for doc in documents]

    df: Counter[str] = Counter()
    for doc in docs:
        df.update(set(doc))

    idf = {term: 1.0 + math.log(n_docs / count) for term, count in df.items()}

    vectors: list[Vector] = []
    for doc in docs:
        tf: Counter[str] = Counter(doc)
        total = len(doc) or 1
        vectors.append({term: (count / total) * idf[term] for term, count in tf.items()})
    return vectors


def cosine_similarity(a: Vector, b: Vector) -> float:
    """Cosine similarity between two sparse vectors; 0.0 if either is zero."""
    norm_a = math.sqrt(sum(w * w for w in a.values()))
    norm_b = math.sqrt(sum(w * w for w in b.values()))
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0

    # Terms missing from either side contribute 0; fsum keeps the result
    # independent of iteration order, so the function stays symmetric.
    dot = math.fsum(a[term] * b[term] for term in a.keys() & b.keys())
    return dot / (norm_a * norm_b)


def centroid(vectors: Sequence[Vector]) -> Vector:
    """Element-wise mean of ``vectors``; empty input gives an empty vector."""
    n = len(vectors)
    if n == 0:
        return {}
    total: Vector = {}
    for vec in vectors:
        for term, w in vec.items():
            total[term] = total.get(term, 0.0) + w
    return {term: w / n for term, w in total.items()}
