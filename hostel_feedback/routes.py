from hostel_feedback.api import FeedbackController

ROUTES = [
    FeedbackController,
]
