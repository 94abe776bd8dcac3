"""
Django Unit of Work: transaction.atomic 래퍼 (lazy import)
"""
from __future__ import annotations

from typing import Callable


class DjangoUnitOfWork:
    """Django transaction.atomic으로 트랜잭션 경계. 메서드 내부에서 Django import."""

    def __init__(self) -> None:
        self._atomic = None
        self._assessments = None
        self._attempts = None

    @property
    def assessments(self):
        from academy.adapters.db.django.repositories_assessments import DjangoAssessmentRepository
        if self._assessments is None:
            self._assessments = DjangoAssessmentRepository()
        return self._assessments

    @property
    def attempts(self):
        from academy.adapters.db.django.repositories_assessments import DjangoAssessmentAttemptRepository
        if self._attempts is None:
            self._attempts = DjangoAssessmentAttemptRepository()
        return self._attempts

    def __enter__(self) -> DjangoUnitOfWork:
        from django.db import transaction
        self._atomic = transaction.atomic()
        self._atomic.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._atomic is not None:
            self._atomic.__exit__(exc_type, exc_val, exc_tb)
            self._atomic = None

    def on_commit(self, callback: Callable[[], None]) -> None:
        # robust=True: 콜백 예외는 로깅만 되고 커밋된 결과에 영향 없음
        from django.db import transaction
        transaction.on_commit(callback, robust=True)

    def rollback(self) -> None:
        from django.db import transaction
        transaction.set_rollback(True)
