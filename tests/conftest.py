import uuid
from pathlib import Path
from typing import AsyncIterator, List, Optional

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from asgi_lifespan import LifespanManager

from hostel_feedback.main import create_app
from hostel_feedback.models import generate_edit_token, utcnow
from hostel_feedback.store import (
    FeedbackRecord,
    FeedbackStore,
    JsonFileStore,
    SqlFeedbackStore,
    StoreError,
)
from hostel_feedback.store.base import newest_first


class InMemoryFeedbackStore(FeedbackStore):
    """Store fake holding records in a list."""

    def __init__(self) -> None:
        self.records: List[FeedbackRecord] = []

    def _match(self, feedback_id: str, edit_token: str) -> Optional[int]:
        for index, record in enumerate(self.records):
            if record.id == feedback_id and record.edit_token == edit_token:
                return index
        return None

    async def list(self) -> List[FeedbackRecord]:
        return newest_first(self.records)

    async def get(self, feedback_id: str) -> Optional[FeedbackRecord]:
        return next((r for r in self.records if r.id == feedback_id), None)

    async def create(self, name: str, room_number: str, feedback: str) -> FeedbackRecord:
        now = utcnow()
        record = FeedbackRecord(
            id=str(uuid.uuid4()),
            name=name,
            room_number=room_number,
            feedback=feedback,
            edit_token=generate_edit_token(),
            created_at=now,
            updated_at=now,
        )
        self.records.append(record)
        return record

    async def update(self, feedback_id, edit_token, name, room_number, feedback):
        index = self._match(feedback_id, edit_token)
        if index is None:
            return None
        self.records[index] = self.records[index].model_copy(
            update={
                "name": name,
                "room_number": room_number,
                "feedback": feedback,
                "updated_at": utcnow(),
            }
        )
        return self.records[index]

    async def delete(self, feedback_id: str, edit_token: str) -> bool:
        index = self._match(feedback_id, edit_token)
        if index is None:
            return False
        del self.records[index]
        return True


class BrokenFeedbackStore(FeedbackStore):
    """Every operation fails the way a dead disk or database would."""

    async def _fail(self, *args, **kwargs):
        raise StoreError("disk on fire: /srv/secret/path")

    list = get = create = update = delete = _fail


def make_store(kind: str, tmp_path: Path) -> FeedbackStore:
    if kind == "json":
        return JsonFileStore(tmp_path / "data" / "feedbacks.json")
    if kind == "sql":
        return SqlFeedbackStore(f"sqlite+aiosqlite:///{tmp_path / 'feedback.db'}")
    return InMemoryFeedbackStore()


@pytest_asyncio.fixture(params=["json", "sql", "memory"])
async def store(request, tmp_path: Path) -> AsyncIterator[FeedbackStore]:
    feedback_store = make_store(request.param, tmp_path)
    yield feedback_store
    await feedback_store.close()


async def _client_for(feedback_store: FeedbackStore) -> AsyncIterator[AsyncClient]:
    app = create_app(store=feedback_store, debug=True)
    async with LifespanManager(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
            yield ac


@pytest_asyncio.fixture(params=["json", "sql"])
async def client(request, tmp_path: Path) -> AsyncIterator[AsyncClient]:
    async for ac in _client_for(make_store(request.param, tmp_path)):
        yield ac


@pytest_asyncio.fixture()
async def broken_client() -> AsyncIterator[AsyncClient]:
    async for ac in _client_for(BrokenFeedbackStore()):
        yield ac


@pytest.fixture()
def asha() -> dict:
    return {"name": "Asha", "room_number": "A-101", "feedback": "Great stay"}
