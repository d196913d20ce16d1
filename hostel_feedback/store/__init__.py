"""Feedback record store and backend selection."""

import logging
from pathlib import Path
from typing import Optional

from hostel_feedback.config import get_data_file, get_database_url, is_debug
from hostel_feedback.store.base import FeedbackRecord, FeedbackStore, StoreError
from hostel_feedback.store.json_file import JsonFileStore
from hostel_feedback.store.sql import SqlFeedbackStore

logger = logging.getLogger("HostelFeedback.store")


def store_from_env(
    database_url: Optional[str] = None,
    data_file: Optional[Path] = None,
) -> FeedbackStore:
    """Pick the backend once at start-up: a database URL selects SQL, otherwise the JSON file."""
    database_url = database_url or get_database_url()
    if database_url:
        logger.info("Using relational feedback store")
        return SqlFeedbackStore(database_url, echo=is_debug())
    data_file = data_file or get_data_file()
    logger.info(f"Using JSON file feedback store at {data_file}")
    return JsonFileStore(data_file)


__all__ = [
    "FeedbackRecord",
    "FeedbackStore",
    "StoreError",
    "JsonFileStore",
    "SqlFeedbackStore",
    "store_from_env",
]
