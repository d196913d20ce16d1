"""Record store contract shared by every storage backend."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class StoreError(RuntimeError):
    """The storage medium failed (I/O, decoding or database error)."""


class FeedbackRecord(BaseModel):
    """One feedback submission, as held by the store."""
    id: str
    name: str
    room_number: str
    feedback: str
    edit_token: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class FeedbackStore:
    """Async CRUD over feedback records, gated by the per-record edit token.

    ``update`` and ``delete`` only act on a record whose id AND edit token both
    match. An unknown id and a wrong token give the same result.
    """

    async def list(self) -> List[FeedbackRecord]:
        """All records, newest ``created_at`` first."""
        raise NotImplementedError

    async def get(self, feedback_id: str) -> Optional[FeedbackRecord]:
        raise NotImplementedError

    async def create(self, name: str, room_number: str, feedback: str) -> FeedbackRecord:
        raise NotImplementedError

    async def update(
        self,
        feedback_id: str,
        edit_token: str,
        name: str,
        room_number: str,
        feedback: str,
    ) -> Optional[FeedbackRecord]:
        raise NotImplementedError

    async def delete(self, feedback_id: str, edit_token: str) -> bool:
        raise NotImplementedError

    async def close(self) -> None:
        """Release backend resources."""


def newest_first(records: List[FeedbackRecord]) -> List[FeedbackRecord]:
    return sorted(records, key=lambda r: (r.created_at, r.id), reverse=True)
