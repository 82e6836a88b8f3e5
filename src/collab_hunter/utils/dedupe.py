from typing import Iterable, List, Optional


def dedupe_keep_order(urls: Optional[Iterable[str]]) -> List[str]:
    seen = set()
    out: List[str] = []
    for u in urls or []:
        if not u:
            continue
        if u in seen:
            continue
        seen.add(u)
        out.append(u)
    return out


def normalize_name(value: Optional[str]) -> str:
    """Case-insensitive comparison key. Only case is folded: no trimming, no rewording."""
    return (value or "").lower()
