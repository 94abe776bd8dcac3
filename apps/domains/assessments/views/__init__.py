from .assessment_view import AssessmentDetailView, AssessmentListCreateView
from .attempt_view import AssessmentAttemptsView, StartAttemptView, SubmitAttemptView

__all__ = [
    "AssessmentListCreateView",
    "AssessmentDetailView",
    "StartAttemptView",
    "SubmitAttemptView",
    "AssessmentAttemptsView",
]
