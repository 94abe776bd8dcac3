"""
Assessment / Attempt Repository: Django ORM 구현 (메서드 내부에서만 apps.domains.assessments import)
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from academy.domain.assessments.entities import (
    AnswerVisibility,
    AssessmentAttempt,
    AssessmentDefinition,
    Question,
    SubmittedAnswer,
)
from academy.domain.assessments.errors import ConcurrencyConflictError


def _assessment_to_entity(m) -> Optional[AssessmentDefinition]:
    if m is None:
        return None
    return AssessmentDefinition(
        id=m.id,
        module_id=m.module_id,
        title=m.title,
        questions=tuple(Question.from_dict(q) for q in (m.questions or [])),
        passing_score=int(m.passing_score),
        max_attempts=int(m.max_attempts or 0),
        time_limit=m.time_limit,
        due_date=m.due_date,
        randomize_questions=bool(m.randomize_questions),
        show_answers=AnswerVisibility(m.show_answers or AnswerVisibility.AFTER_SUBMISSION.value),
        is_published=bool(m.is_published),
    )


def _attempt_to_entity(m) -> Optional[AssessmentAttempt]:
    if m is None:
        return None
    return AssessmentAttempt(
        id=m.id,
        learner_id=m.learner_id,
        assessment_id=m.assessment_id,
        attempt_number=int(m.attempt_number),
        started_at=m.started_at,
        completed_at=m.completed_at,
        answers=[SubmittedAnswer.from_dict(a) for a in (m.answers or [])],
        score=m.score,
        passed=bool(m.passed),
        time_spent=m.time_spent,
    )


class DjangoAssessmentRepository:
    """AssessmentRepository 구현."""

    def get_by_id(self, assessment_id: int) -> Optional[AssessmentDefinition]:
        from apps.domains.assessments.models import Assessment
        m = Assessment.objects.filter(id=int(assessment_id)).first()
        return _assessment_to_entity(m)


class DjangoAssessmentAttemptRepository:
    """AssessmentAttemptRepository 구현. 원자성은 DB 제약/조건부 update 로만 보장."""

    def get_by_id(self, attempt_id: int) -> Optional[AssessmentAttempt]:
        from apps.domains.assessments.models import AssessmentAttempt as AttemptModel
        m = AttemptModel.objects.filter(id=int(attempt_id)).first()
        return _attempt_to_entity(m)

    def attempt_numbers_for_learner(self, learner_id: int, assessment_id: int) -> list[int]:
        from apps.domains.assessments.models import AssessmentAttempt as AttemptModel
        return list(
            AttemptModel.objects.filter(
                learner_id=learner_id,
                assessment_id=int(assessment_id),
            ).values_list("attempt_number", flat=True)
        )

    def insert(self, attempt: AssessmentAttempt) -> AssessmentAttempt:
        from django.db import IntegrityError, transaction
        from apps.domains.assessments.models import AssessmentAttempt as AttemptModel

        slot = {
            "learner_id": attempt.learner_id,
            "assessment_id": int(attempt.assessment_id),
            "attempt_number": int(attempt.attempt_number),
        }
        try:
            # savepoint: 유니크 위반이 바깥 트랜잭션을 깨지 않도록
            with transaction.atomic():
                m = AttemptModel.objects.create(
                    started_at=attempt.started_at,
                    answers=[],
                    **slot,
                )
        except IntegrityError as e:
            if AttemptModel.objects.filter(**slot).exists():
                raise ConcurrencyConflictError(
                    f"attempt slot #{attempt.attempt_number} already taken"
                ) from e
            raise
        return _attempt_to_entity(m)

    def complete_if_pending(
        self,
        attempt_id: int,
        *,
        answers: list[SubmittedAnswer],
        score: int,
        passed: bool,
        time_spent: int,
        completed_at: datetime,
    ) -> int:
        from django.utils import timezone
        from apps.domains.assessments.models import AssessmentAttempt as AttemptModel

        # UPDATE ... WHERE id = ? AND completed_at IS NULL
        return AttemptModel.objects.filter(
            id=int(attempt_id),
            completed_at__isnull=True,
        ).update(
            answers=[a.to_dict() for a in answers],
            score=int(score),
            passed=bool(passed),
            time_spent=int(time_spent),
            completed_at=completed_at,
            updated_at=timezone.now(),
        )

    def list_for_assessment(
        self,
        assessment_id: int,
        learner_id: Optional[int] = None,
    ) -> list[AssessmentAttempt]:
        from apps.domains.assessments.models import AssessmentAttempt as AttemptModel
        qs = AttemptModel.objects.filter(assessment_id=int(assessment_id))
        if learner_id is not None:
            qs = qs.filter(learner_id=learner_id)
        return [_attempt_to_entity(m) for m in qs.order_by("-started_at", "-id")]
