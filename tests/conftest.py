from __future__ import annotations

import random
from datetime import datetime, timedelta, timezone

import pytest

from academy.application.use_cases.assessments.attempt_engine import AssessmentAttemptEngine
from academy.domain.assessments.entities import (
    AnswerVisibility,
    AssessmentDefinition,
    Question,
)

from tests.fakes import InMemoryStore, InMemoryUnitOfWork

NOW = datetime(2025, 3, 1, 9, 0, 0, tzinfo=timezone.utc)


class FixedClock:
    def __init__(self, now: datetime) -> None:
        self.current = now

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current = self.current + timedelta(**kwargs)
        return self.current


def make_questions(correct_answers=(1, 3, 1, 2)) -> tuple[Question, ...]:
    return tuple(
        Question(
            id=i,
            prompt=f"Question {i}",
            options=("A", "B", "C", "D"),
            correct_answer=correct,
        )
        for i, correct in enumerate(correct_answers, start=1)
    )


def make_definition(**overrides) -> AssessmentDefinition:
    fields = dict(
        id=1,
        module_id=1,
        title="Ethical Hacking Fundamentals Quiz",
        questions=make_questions(),
        passing_score=70,
        max_attempts=3,
        time_limit=30,
        due_date=None,
        randomize_questions=False,
        show_answers=AnswerVisibility.AFTER_SUBMISSION,
        is_published=True,
    )
    fields.update(overrides)
    return AssessmentDefinition(**fields)


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def graded_events():
    return []


@pytest.fixture
def engine(store, clock, graded_events):
    return AssessmentAttemptEngine(
        lambda: InMemoryUnitOfWork(store),
        clock=clock,
        rng=random.Random(7),
        on_graded=lambda attempt, definition, outcome: graded_events.append((attempt, outcome)),
    )


# --------------------------------------------------
# Django
# --------------------------------------------------

@pytest.fixture
def make_user(db):
    from apps.core.models import User

    def _make(username: str, role: str = "student", **extra):
        return User.objects.create_user(username=username, password="pw", role=role, **extra)

    return _make


@pytest.fixture
def student(make_user):
    return make_user("student1")


@pytest.fixture
def other_student(make_user):
    return make_user("student2")


@pytest.fixture
def instructor(make_user):
    return make_user("instructor1", role="instructor")


@pytest.fixture
def admin_user(make_user):
    return make_user("admin1", role="admin")


@pytest.fixture
def api_client():
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def make_assessment(db):
    from apps.domains.assessments.models import Assessment

    def _make(**overrides):
        fields = dict(
            title="Ethical Hacking Fundamentals Quiz",
            module_id=1,
            time_limit=30,
            passing_score=70,
            max_attempts=3,
            is_published=True,
            questions=[q.to_dict() for q in make_questions()],
        )
        fields.update(overrides)
        return Assessment.objects.create(**fields)

    return _make
