"""
Unit of Work 포트: 트랜잭션 경계 (Django 미사용)
"""
from __future__ import annotations

from typing import Callable, Protocol

from academy.application.ports.repositories import (
    AssessmentAttemptRepository,
    AssessmentRepository,
)


class UnitOfWork(Protocol):
    """트랜잭션 단위. __enter__에서 시작, __exit__에서 commit/rollback."""

    @property
    def assessments(self) -> AssessmentRepository:
        ...

    @property
    def attempts(self) -> AssessmentAttemptRepository:
        ...

    def __enter__(self) -> "UnitOfWork":
        ...

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        ...

    def on_commit(self, callback: Callable[[], None]) -> None:
        """commit 이후 실행할 콜백 등록 (알림 등 best-effort 부수효과 전용)."""
        ...

    def rollback(self) -> None:
        ...
