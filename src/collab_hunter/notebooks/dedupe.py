"""Duplicate flagging for the review step. Flags are warnings: they never remove or deselect anything."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from collab_hunter.structured_outputs.case_outputs import Case
from collab_hunter.utils.dedupe import normalize_name


@dataclass(frozen=True)
class ReviewCandidate:
    case: Case
    is_duplicate: bool
    selected: bool = True


def is_duplicate(candidate: Case, existing: Sequence[Case]) -> bool:
    """Case-insensitive exact match on productName or projectName against any existing case."""
    product = normalize_name(candidate.productName)
    project = normalize_name(candidate.projectName)
    return any(
        normalize_name(e.productName) == product or normalize_name(e.projectName) == project
        for e in existing
    )


def flag_duplicates(candidates: Sequence[Case], existing: Sequence[Case]) -> List[ReviewCandidate]:
    """Pair every candidate with its duplicate flag. All candidates start selected."""
    return [ReviewCandidate(case=c, is_duplicate=is_duplicate(c, existing)) for c in candidates]
