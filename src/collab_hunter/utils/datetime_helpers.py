import re
import time
from datetime import datetime, timezone
from typing import Optional, Tuple

# YYYY, YYYY.MM, YYYY.MM.DD with ".", "-", "/" or CJK 年/月/日 separators
_LOOSE_DATE_RE = re.compile(
    r"(?P<year>\d{4})"
    r"(?:\s*[./\-年]\s*(?P<month>\d{1,2})"
    r"(?:\s*[./\-月]\s*(?P<day>\d{1,2}))?)?"
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def now_ms() -> int:
    return int(time.time() * 1000)


def parse_loose_date(value: Optional[str]) -> Optional[datetime]:
    """
    Best-effort parse of the loosely formatted dates the model emits
    ("2024.05.12", "2023-11", "2022年3月", "2021"). Returns None when nothing usable is found.
    """
    if not value:
        return None
    match = _LOOSE_DATE_RE.search(value)
    if not match:
        return None

    year = int(match.group("year"))
    month = int(match.group("month") or 1)
    day = int(match.group("day") or 1)
    try:
        return datetime(year, month, day)
    except ValueError:
        return None


def date_sort_key(value: Optional[str]) -> Tuple[int, int]:
    """
    Key for "newest first" sorting with `sorted(...)`.
    Unparsable dates sort last regardless of direction of the parsable ones.
    """
    parsed = parse_loose_date(value)
    if parsed is None:
        return (1, 0)
    return (0, -parsed.toordinal())


def year_month(value: Optional[str]) -> Optional[str]:
    parsed = parse_loose_date(value)
    if parsed is None:
        return None
    # a bare year is not enough for a monthly bucket
    match = _LOOSE_DATE_RE.search(value or "")
    if match is None or match.group("month") is None:
        return None
    return f"{parsed.year:04d}-{parsed.month:02d}"
