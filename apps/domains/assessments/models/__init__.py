# apps/domains/assessments/models/__init__.py
from .assessment import Assessment
from .attempt import AssessmentAttempt

__all__ = [
    "Assessment",
    "AssessmentAttempt",
]
