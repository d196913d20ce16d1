"""Relational record store on SQLAlchemy's async engine."""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import List, Optional

from sqlalchemy import delete, desc, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from hostel_feedback.models import Base, Feedback, generate_edit_token, utcnow
from hostel_feedback.store.base import FeedbackRecord, FeedbackStore, StoreError

logger = logging.getLogger("HostelFeedback.store.sql")


class SqlFeedbackStore(FeedbackStore):
    """
    Stores records in the ``feedbacks`` table.

    The table is created on first use if it does not exist. Update and
    delete match ``id`` and ``edit_token`` in one statement, so the
    authorization check and the write are atomic in the database.
    """

    def __init__(self, database_url: str, echo: bool = False):
        self.engine = create_async_engine(database_url, echo=echo)
        self.session_factory = async_sessionmaker(self.engine, expire_on_commit=False)
        self._schema_ready = False
        self._schema_lock = asyncio.Lock()

    async def _ensure_schema(self) -> None:
        if self._schema_ready:
            return
        async with self._schema_lock:
            if self._schema_ready:
                return
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            self._schema_ready = True
            logger.info("Feedback table is ready")

    async def list(self) -> List[FeedbackRecord]:
        try:
            await self._ensure_schema()
            async with self.session_factory() as session:
                result = await session.execute(
                    select(Feedback).order_by(desc(Feedback.created_at), desc(Feedback.id))
                )
                return [FeedbackRecord.model_validate(f) for f in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.exception(f"Database error listing feedbacks: {e}")
            raise StoreError("Could not list feedbacks") from e

    async def get(self, feedback_id: str) -> Optional[FeedbackRecord]:
        try:
            await self._ensure_schema()
            async with self.session_factory() as session:
                feedback = await session.get(Feedback, feedback_id)
                if feedback is None:
                    return None
                return FeedbackRecord.model_validate(feedback)
        except SQLAlchemyError as e:
            logger.exception(f"Database error fetching feedback {feedback_id}: {e}")
            raise StoreError("Could not fetch feedback") from e

    async def create(self, name: str, room_number: str, feedback: str) -> FeedbackRecord:
        now = utcnow()
        row = Feedback(
            id=str(uuid.uuid4()),
            name=name,
            room_number=room_number,
            feedback=feedback,
            edit_token=generate_edit_token(),
            created_at=now,
            updated_at=now,
        )
        try:
            await self._ensure_schema()
            async with self.session_factory() as session:
                session.add(row)
                await session.commit()
                return FeedbackRecord.model_validate(row)
        except SQLAlchemyError as e:
            logger.exception(f"Database error creating feedback: {e}")
            raise StoreError("Could not create feedback") from e

    async def update(
        self,
        feedback_id: str,
        edit_token: str,
        name: str,
        room_number: str,
        feedback: str,
    ) -> Optional[FeedbackRecord]:
        stmt = (
            update(Feedback)
            .where(Feedback.id == feedback_id, Feedback.edit_token == edit_token)
            .values(
                name=name,
                room_number=room_number,
                feedback=feedback,
                updated_at=utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        try:
            await self._ensure_schema()
            async with self.session_factory() as session:
                result = await session.execute(stmt)
                if result.rowcount == 0:
                    await session.rollback()
                    return None
                # Read back inside the same transaction
                row = await session.get(Feedback, feedback_id)
                record = FeedbackRecord.model_validate(row)
                await session.commit()
                return record
        except SQLAlchemyError as e:
            logger.exception(f"Database error updating feedback {feedback_id}: {e}")
            raise StoreError("Could not update feedback") from e

    async def delete(self, feedback_id: str, edit_token: str) -> bool:
        stmt = (
            delete(Feedback)
            .where(Feedback.id == feedback_id, Feedback.edit_token == edit_token)
            .execution_options(synchronize_session=False)
        )
        try:
            await self._ensure_schema()
            async with self.session_factory() as session:
                result = await session.execute(stmt)
                await session.commit()
                return result.rowcount > 0
        except SQLAlchemyError as e:
            logger.exception(f"Database error deleting feedback {feedback_id}: {e}")
            raise StoreError("Could not delete feedback") from e

    async def close(self) -> None:
        await self.engine.dispose()
