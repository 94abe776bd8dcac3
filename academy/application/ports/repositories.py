"""
Repository 포트: 영속화 추상화 (Django/ORM 미사용)

동시성 보장은 전부 저장소 원자성에 위임한다 (in-process lock 금지).
- insert: (learner, assessment, attempt_number) 유니크 위반 시 ConcurrencyConflictError
- complete_if_pending: completed_at IS NULL 조건부 update, 영향 row 수 반환
"""
from __future__ import annotations

from abc import abstractmethod
from datetime import datetime
from typing import Optional, Protocol

from academy.domain.assessments.entities import (
    AssessmentAttempt,
    AssessmentDefinition,
    SubmittedAnswer,
)


class AssessmentRepository(Protocol):
    """Assessment 정의 조회 (read-only)."""

    @abstractmethod
    def get_by_id(self, assessment_id: int) -> Optional[AssessmentDefinition]:
        """id로 조회. 없으면 None."""
        ...


class AssessmentAttemptRepository(Protocol):
    """Attempt 영속화. 원자성(유니크 제약/조건부 update)은 어댑터에서 보장."""

    @abstractmethod
    def get_by_id(self, attempt_id: int) -> Optional[AssessmentAttempt]:
        """id로 조회 (락 없음). 없으면 None."""
        ...

    @abstractmethod
    def attempt_numbers_for_learner(self, learner_id: int, assessment_id: int) -> list[int]:
        """(learner, assessment) 기존 attempt 들의 attempt_number. 개수 = 응시 횟수."""
        ...

    @abstractmethod
    def insert(self, attempt: AssessmentAttempt) -> AssessmentAttempt:
        """
        신규 attempt 저장 (id 채워서 반환).
        같은 attempt_number 가 이미 있으면 ConcurrencyConflictError.
        """
        ...

    @abstractmethod
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
        """
        Created → Completed 조건부 전이.
        Returns: 영향 row 수 (1 = 성공, 0 = 이미 완료/경합 패배).
        """
        ...

    @abstractmethod
    def list_for_assessment(
        self,
        assessment_id: int,
        learner_id: Optional[int] = None,
    ) -> list[AssessmentAttempt]:
        """started_at 내림차순. learner_id 지정 시 본인 것만."""
        ...
