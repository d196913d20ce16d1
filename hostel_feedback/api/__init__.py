"""Feedback service API routes."""

from hostel_feedback.api.feedbacks import FeedbackController

__all__ = ["FeedbackController"]
