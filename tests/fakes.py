"""
테스트용 in-memory UnitOfWork / Repository

- (learner, assessment, attempt_number) 유니크 슬롯
- completed_at IS NULL 조건부 완료
를 DB 와 같은 의미로 흉내낸다.

경합 재현: before_insert / before_complete 훅이 '다른 트랜잭션'의 쓰기를 끼워 넣는다.
"""
from __future__ import annotations

import dataclasses
from typing import Callable, Optional

from academy.domain.assessments.entities import AssessmentAttempt, AssessmentDefinition
from academy.domain.assessments.errors import ConcurrencyConflictError


def _copy(attempt: AssessmentAttempt) -> AssessmentAttempt:
    return dataclasses.replace(attempt, answers=list(attempt.answers))


class InMemoryStore:
    def __init__(self) -> None:
        self.assessments: dict[int, AssessmentDefinition] = {}
        self.attempts: dict[int, AssessmentAttempt] = {}
        self._next_attempt_id = 1

        # (store, attempt) 를 받아 경합 쓰기를 수행
        self.before_insert: Optional[Callable[["InMemoryStore", AssessmentAttempt], None]] = None
        self.before_complete: Optional[Callable[["InMemoryStore", int], None]] = None

        self.commits = 0

    def add_assessment(self, definition: AssessmentDefinition) -> AssessmentDefinition:
        self.assessments[definition.id] = definition
        return definition

    def put_attempt(self, attempt: AssessmentAttempt) -> AssessmentAttempt:
        for existing in self.attempts.values():
            if (
                existing.learner_id == attempt.learner_id
                and existing.assessment_id == attempt.assessment_id
                and existing.attempt_number == attempt.attempt_number
            ):
                raise ConcurrencyConflictError(
                    f"attempt slot #{attempt.attempt_number} already taken"
                )
        stored = _copy(attempt)
        stored.id = self._next_attempt_id
        self._next_attempt_id += 1
        self.attempts[stored.id] = stored
        return _copy(stored)


class InMemoryAssessmentRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    def get_by_id(self, assessment_id):
        return self._store.assessments.get(int(assessment_id))


class InMemoryAttemptRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    def get_by_id(self, attempt_id):
        a = self._store.attempts.get(int(attempt_id))
        return _copy(a) if a is not None else None

    def attempt_numbers_for_learner(self, learner_id, assessment_id) -> list[int]:
        return [
            a.attempt_number
            for a in self._store.attempts.values()
            if a.learner_id == learner_id and a.assessment_id == int(assessment_id)
        ]

    def insert(self, attempt: AssessmentAttempt) -> AssessmentAttempt:
        hook = self._store.before_insert
        if hook is not None:
            hook(self._store, attempt)
        return self._store.put_attempt(attempt)

    def complete_if_pending(self, attempt_id, *, answers, score, passed, time_spent, completed_at) -> int:
        hook = self._store.before_complete
        if hook is not None:
            hook(self._store, int(attempt_id))
        a = self._store.attempts.get(int(attempt_id))
        if a is None or a.completed_at is not None:
            return 0
        a.answers = list(answers)
        a.score = score
        a.passed = passed
        a.time_spent = time_spent
        a.completed_at = completed_at
        return 1

    def list_for_assessment(self, assessment_id, learner_id=None):
        rows = [
            _copy(a)
            for a in self._store.attempts.values()
            if a.assessment_id == int(assessment_id)
            and (learner_id is None or a.learner_id == learner_id)
        ]
        return sorted(rows, key=lambda a: (a.started_at, a.id), reverse=True)


class InMemoryUnitOfWork:
    """commit 시점(__exit__ 정상 종료)에만 on_commit 콜백 실행."""

    def __init__(self, store: InMemoryStore) -> None:
        self._store = store
        self.assessments = InMemoryAssessmentRepository(store)
        self.attempts = InMemoryAttemptRepository(store)
        self._callbacks: list[Callable[[], None]] = []

    def __enter__(self) -> "InMemoryUnitOfWork":
        self._callbacks = []
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type is not None:
            self._callbacks = []
            return
        self._store.commits += 1
        callbacks, self._callbacks = self._callbacks, []
        for cb in callbacks:
            cb()

    def on_commit(self, callback: Callable[[], None]) -> None:
        self._callbacks.append(callback)

    def rollback(self) -> None:
        self._callbacks = []
