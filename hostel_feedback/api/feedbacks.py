"""Feedback API endpoints."""

import logging
from datetime import date, datetime
from typing import List, Optional

from litestar import Controller, Request, delete, get, post, put
from litestar.datastructures import CacheControlHeader, ResponseHeader
from litestar.exceptions import (
    HTTPException,
    NotAuthorizedException,
    NotFoundException,
    SerializationException,
    ValidationException,
)
from litestar.status_codes import HTTP_200_OK, HTTP_500_INTERNAL_SERVER_ERROR
from pydantic import BaseModel, Field, ValidationError

from hostel_feedback import query
from hostel_feedback.models import NAME_MAX_LENGTH, ROOM_NUMBER_MAX_LENGTH
from hostel_feedback.query import SortOrder
from hostel_feedback.store import FeedbackRecord, FeedbackStore, StoreError
from hostel_feedback.utils.logging import error_log

logger = logging.getLogger("HostelFeedback.feedbacks")

NO_CACHE = CacheControlHeader(no_store=True, no_cache=True, must_revalidate=True)
NO_CACHE_HEADERS = [
    ResponseHeader(name="Pragma", value="no-cache"),
    ResponseHeader(name="Expires", value="0"),
]

FIELDS_REQUIRED = "Name, room number, and feedback are required"
TOKEN_REQUIRED = "Edit token is required"
NOT_FOUND_OR_UNAUTHORIZED = "Feedback not found or unauthorized"


# --- Request/Response Schemas ---

class CreateFeedbackRequest(BaseModel):
    """Request to submit feedback."""
    name: Optional[str] = Field(default=None, max_length=NAME_MAX_LENGTH)
    room_number: Optional[str] = Field(default=None, max_length=ROOM_NUMBER_MAX_LENGTH)
    feedback: Optional[str] = None

    class Config:
        str_strip_whitespace = True

    def missing_fields(self) -> bool:
        return not (self.name and self.room_number and self.feedback)


class UpdateFeedbackRequest(CreateFeedbackRequest):
    """Request to edit feedback, authorized by its edit token."""
    edit_token: Optional[str] = None


class EditTokenRequest(BaseModel):
    """Just the edit token of a PUT or DELETE body."""
    edit_token: Optional[str] = None

    class Config:
        str_strip_whitespace = True


class FeedbackResponse(BaseModel):
    """Feedback as shown to readers. Never carries the edit token."""
    id: str
    name: str
    room_number: str
    feedback: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, record: FeedbackRecord) -> "FeedbackResponse":
        return cls.model_validate(record.model_dump())


class CreatedFeedbackResponse(FeedbackResponse):
    """Response to the submitter; the only place the edit token is returned."""
    edit_token: str


class FeedbackStatsResponse(BaseModel):
    """Warden dashboard counts."""
    total: int
    unique_rooms: int
    today: int


class DeleteFeedbackResponse(BaseModel):
    success: bool


def storage_failure(message: str, exc: StoreError, context: Optional[dict] = None) -> HTTPException:
    error_log(message, exc=exc, context=context)
    return HTTPException(detail=message, status_code=HTTP_500_INTERNAL_SERVER_ERROR)


async def read_json_object(request: Request) -> dict:
    """Decode a JSON object body. An empty or ``null`` body reads as ``{}``."""
    try:
        payload = await request.json()
    except SerializationException:
        raise ValidationException(detail="Request body must be valid JSON")
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationException(detail="Request body must be a JSON object")
    return payload


def parse_body(model, payload: dict):
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"]) or "body"
        raise ValidationException(detail=f"Invalid {field}: {error['msg']}")


# --- Controller ---

class FeedbackController(Controller):
    """API endpoints for feedback submission, editing and review."""

    path = "/feedbacks"
    tags = ["feedbacks"]

    @get("/", cache_control=NO_CACHE, response_headers=NO_CACHE_HEADERS)
    async def list_feedbacks(
        self,
        store: FeedbackStore,
        q: Optional[str] = None,
        sort: SortOrder = SortOrder.NEWEST,
    ) -> List[FeedbackResponse]:
        """List all feedback, newest first unless another order is requested."""
        try:
            records = await store.list()
        except StoreError as e:
            raise storage_failure("Failed to fetch feedbacks", e)

        if q or sort != SortOrder.NEWEST:
            records = query.sort(query.search(records, q), sort)
        return [FeedbackResponse.from_record(r) for r in records]

    @get("/stats", cache_control=NO_CACHE, response_headers=NO_CACHE_HEADERS)
    async def feedback_stats(
        self,
        store: FeedbackStore,
        today: Optional[date] = None,
    ) -> FeedbackStatsResponse:
        """Counts for the warden dashboard.

        ``today`` is the viewer's calendar day; it defaults to the current UTC day.
        """
        try:
            records = await store.list()
        except StoreError as e:
            raise storage_failure("Failed to fetch feedback stats", e)
        return FeedbackStatsResponse(**query.summarize(records, today=today))

    @post("/")
    async def create_feedback(
        self,
        data: CreateFeedbackRequest,
        store: FeedbackStore,
    ) -> CreatedFeedbackResponse:
        """Submit feedback. The response carries the edit token."""
        if data.missing_fields():
            raise ValidationException(detail="All fields are required")

        try:
            record = await store.create(data.name, data.room_number, data.feedback)
        except StoreError as e:
            raise storage_failure("Failed to create feedback", e, {"room_number": data.room_number})

        logger.info(f"Feedback {record.id} submitted for room {record.room_number}")
        return CreatedFeedbackResponse.model_validate(record.model_dump())

    @get("/{feedback_id:str}")
    async def get_feedback(self, feedback_id: str, store: FeedbackStore) -> FeedbackResponse:
        """Fetch a single feedback record."""
        try:
            record = await store.get(feedback_id)
        except StoreError as e:
            raise storage_failure("Failed to fetch feedback", e, {"feedback_id": feedback_id})

        if record is None:
            raise NotFoundException(detail="Feedback not found")
        return FeedbackResponse.from_record(record)

    @put("/{feedback_id:str}")
    async def update_feedback(
        self,
        feedback_id: str,
        request: Request,
        store: FeedbackStore,
    ) -> FeedbackResponse:
        """Edit feedback. Requires the edit token issued at creation."""
        payload = await read_json_object(request)
        if not parse_body(EditTokenRequest, payload).edit_token:
            raise NotAuthorizedException(detail=TOKEN_REQUIRED)

        data = parse_body(UpdateFeedbackRequest, payload)
        if data.missing_fields():
            raise ValidationException(detail=FIELDS_REQUIRED)

        try:
            record = await store.update(
                feedback_id,
                data.edit_token,
                data.name,
                data.room_number,
                data.feedback,
            )
        except StoreError as e:
            raise storage_failure("Failed to update feedback", e, {"feedback_id": feedback_id})

        if record is None:
            logger.info(f"Rejected update for feedback {feedback_id}")
            raise NotFoundException(detail=NOT_FOUND_OR_UNAUTHORIZED)

        logger.info(f"Feedback {feedback_id} updated")
        return FeedbackResponse.from_record(record)

    @delete("/{feedback_id:str}", status_code=HTTP_200_OK)
    async def delete_feedback(
        self,
        feedback_id: str,
        request: Request,
        store: FeedbackStore,
    ) -> DeleteFeedbackResponse:
        """Delete feedback. Requires the edit token in the JSON body."""
        data = parse_body(EditTokenRequest, await read_json_object(request))
        if not data.edit_token:
            raise NotAuthorizedException(detail=TOKEN_REQUIRED)

        try:
            deleted = await store.delete(feedback_id, data.edit_token)
        except StoreError as e:
            raise storage_failure("Failed to delete feedback", e, {"feedback_id": feedback_id})

        if not deleted:
            logger.info(f"Rejected delete for feedback {feedback_id}")
            raise NotFoundException(detail=NOT_FOUND_OR_UNAUTHORIZED)

        logger.info(f"Feedback {feedback_id} deleted")
        return DeleteFeedbackResponse(success=True)
