"""Collection analytics shown next to a notebook or report."""
from __future__ import annotations

import re
from collections import Counter
from typing import List, Tuple

from collab_hunter.models.notebooks import Collection
from collab_hunter.utils.datetime_helpers import year_month

KEYWORD_STOP_WORDS = frozenset({"with", "from", "this", "that", "brand", "collab"})
KEYWORD_MIN_LENGTH = 4

_WORD_SPLIT_RE = re.compile(r"\W+")


def case_timeline(collection: Collection) -> List[Tuple[str, int]]:
    """Case counts per "YYYY-MM", oldest month first. Cases without a month are left out."""
    counts: Counter = Counter()
    for case in collection.cases:
        bucket = year_month(case.date)
        if bucket:
            counts[bucket] += 1
    return sorted(counts.items())


def trend_categories(collection: Collection) -> List[Tuple[str, int]]:
    """Trend counts per category, most frequent first (ties keep first-seen order)."""
    counts: Counter = Counter(t.category for t in collection.trends)
    return sorted(counts.items(), key=lambda kv: -kv[1])


def top_keywords(collection: Collection, limit: int = 5) -> List[Tuple[str, int]]:
    text = " ".join(f"{c.partnerIntro} {c.productName}" for c in collection.cases).lower()
    words = [
        w
        for w in _WORD_SPLIT_RE.split(text)
        if len(w) >= KEYWORD_MIN_LENGTH and w not in KEYWORD_STOP_WORDS
    ]
    return Counter(words).most_common(limit)
