from academy.application.ports.unit_of_work import UnitOfWork
from academy.application.ports.repositories import (
    AssessmentAttemptRepository,
    AssessmentRepository,
)
from academy.application.ports.clock import Clock, SystemClock

__all__ = [
    "UnitOfWork",
    "AssessmentRepository",
    "AssessmentAttemptRepository",
    "Clock",
    "SystemClock",
]
