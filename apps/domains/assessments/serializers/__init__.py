from .assessment import (
    AssessmentDetailSerializer,
    AssessmentListSerializer,
    AssessmentWriteSerializer,
)
from .attempt import AssessmentAttemptSerializer, SubmitAnswersSerializer

__all__ = [
    "AssessmentListSerializer",
    "AssessmentDetailSerializer",
    "AssessmentWriteSerializer",
    "AssessmentAttemptSerializer",
    "SubmitAnswersSerializer",
]
