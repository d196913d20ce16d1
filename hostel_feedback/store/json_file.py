"""JSON-file record store for development and single-process deployments."""

from __future__ import annotations

import asyncio
import json
import logging
import os
import secrets
import tempfile
import uuid
from pathlib import Path
from typing import List, Optional

from hostel_feedback.models import generate_edit_token, utcnow
from hostel_feedback.store.base import FeedbackRecord, FeedbackStore, StoreError, newest_first
from hostel_feedback.utils.logging import debug_log

logger = logging.getLogger("HostelFeedback.store.json")


class JsonFileStore(FeedbackStore):
    """
    Keeps the whole collection as one JSON array in a single file.

    Every operation loads the full array; mutations write the full array
    back. The lock serializes read-modify-write cycles within the process,
    and writes land through a temp file + ``os.replace``. Separate processes
    sharing the same file are still not safe.
    """

    def __init__(self, data_file: Path):
        self.data_file = Path(data_file)
        self._lock = asyncio.Lock()

    # --- file access (runs in a worker thread) ---

    def _ensure_file(self) -> None:
        self.data_file.parent.mkdir(parents=True, exist_ok=True)
        if not self.data_file.exists():
            self.data_file.write_text("[]", encoding="utf-8")

    def _read(self) -> List[FeedbackRecord]:
        self._ensure_file()
        with open(self.data_file, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, list):
            raise ValueError(f"{self.data_file} does not contain a JSON array")
        return [FeedbackRecord.model_validate(item) for item in data]

    def _write(self, records: List[FeedbackRecord]) -> None:
        self._ensure_file()
        payload = [r.model_dump(mode="json") for r in records]
        fd, tmp_path = tempfile.mkstemp(
            dir=self.data_file.parent, prefix=".feedbacks-", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.data_file)
        finally:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)

    async def _load(self) -> List[FeedbackRecord]:
        try:
            return await asyncio.to_thread(self._read)
        except (OSError, ValueError) as e:
            logger.exception(f"Could not read feedback file {self.data_file}")
            raise StoreError(f"Could not read {self.data_file}") from e

    async def _save(self, records: List[FeedbackRecord]) -> None:
        try:
            await asyncio.to_thread(self._write, records)
        except (OSError, ValueError) as e:
            logger.exception(f"Could not write feedback file {self.data_file}")
            raise StoreError(f"Could not write {self.data_file}") from e

    @staticmethod
    def _find(records: List[FeedbackRecord], feedback_id: str, edit_token: str) -> int:
        for index, record in enumerate(records):
            if record.id == feedback_id and secrets.compare_digest(
                record.edit_token.encode(), edit_token.encode()
            ):
                return index
        return -1

    # --- FeedbackStore ---

    async def list(self) -> List[FeedbackRecord]:
        async with self._lock:
            records = await self._load()
        return newest_first(records)

    async def get(self, feedback_id: str) -> Optional[FeedbackRecord]:
        async with self._lock:
            records = await self._load()
        return next((r for r in records if r.id == feedback_id), None)

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
        async with self._lock:
            records = await self._load()
            records.append(record)
            await self._save(records)
        debug_log("Stored feedback %s in %s", record.id, self.data_file)
        return record

    async def update(
        self,
        feedback_id: str,
        edit_token: str,
        name: str,
        room_number: str,
        feedback: str,
    ) -> Optional[FeedbackRecord]:
        async with self._lock:
            records = await self._load()
            index = self._find(records, feedback_id, edit_token)
            if index == -1:
                return None
            updated = records[index].model_copy(
                update={
                    "name": name,
                    "room_number": room_number,
                    "feedback": feedback,
                    "updated_at": utcnow(),
                }
            )
            records[index] = updated
            await self._save(records)
        return updated

    async def delete(self, feedback_id: str, edit_token: str) -> bool:
        async with self._lock:
            records = await self._load()
            index = self._find(records, feedback_id, edit_token)
            if index == -1:
                return False
            del records[index]
            await self._save(records)
        return True
