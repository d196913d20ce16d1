"""Search, ordering and summary counts for the warden view."""

import enum
from datetime import date, datetime, timezone
from typing import Iterable, List, Optional

from hostel_feedback.store.base import FeedbackRecord, newest_first


class SortOrder(str, enum.Enum):
    """Orderings offered by the warden view."""
    NEWEST = "newest"
    OLDEST = "oldest"
    ROOM = "room"


def search(records: Iterable[FeedbackRecord], term: Optional[str]) -> List[FeedbackRecord]:
    """Case-insensitive substring match on name, room number or feedback text."""
    records = list(records)
    term = (term or "").strip().lower()
    if not term:
        return records
    return [
        r for r in records
        if term in r.name.lower()
        or term in r.room_number.lower()
        or term in r.feedback.lower()
    ]


def sort(records: Iterable[FeedbackRecord], order: SortOrder = SortOrder.NEWEST) -> List[FeedbackRecord]:
    records = newest_first(list(records))
    if order == SortOrder.OLDEST:
        return list(reversed(records))
    if order == SortOrder.ROOM:
        # Stable sort keeps newest-first within a room
        return sorted(records, key=lambda r: r.room_number.lower())
    return records


def summarize(records: Iterable[FeedbackRecord], today: Optional[date] = None) -> dict:
    """Totals shown on the warden dashboard.

    ``today`` counts records whose UTC creation date equals the given day,
    which defaults to the current UTC day. Callers in other time zones pass
    their own calendar day.
    """
    records = list(records)
    today = today or datetime.now(timezone.utc).date()
    return {
        "total": len(records),
        "unique_rooms": len({r.room_number for r in records}),
        "today": sum(1 for r in records if r.created_at.date() == today),
    }
