# PATH: apps/domains/assessments/services/engine.py
"""
AssessmentAttemptEngine 조립 (Django 어댑터 주입)

- UoW: DjangoUnitOfWork (호출마다 새 트랜잭션)
- 경합 재시도 횟수: settings.ASSESSMENT_ATTEMPT_CONFLICT_RETRIES
- 채점 commit 이후 알림 task enqueue (best-effort)
"""
from __future__ import annotations

import logging

from django.conf import settings

from academy.adapters.db.django.uow import DjangoUnitOfWork
from academy.application.use_cases.assessments.attempt_engine import (
    DEFAULT_CONFLICT_RETRIES,
    AssessmentAttemptEngine,
)

logger = logging.getLogger(__name__)


def dispatch_graded_notification(attempt, definition, outcome) -> None:
    from apps.domains.notifications.tasks import notify_assessment_graded

    notify_assessment_graded.delay(attempt.id)
    logger.info(
        "graded notification enqueued: attempt=%s assessment=%s passed=%s",
        attempt.id, definition.id, outcome.passed,
    )


def get_attempt_engine(**overrides) -> AssessmentAttemptEngine:
    kwargs = {
        "conflict_retries": getattr(
            settings, "ASSESSMENT_ATTEMPT_CONFLICT_RETRIES", DEFAULT_CONFLICT_RETRIES,
        ),
        "on_graded": dispatch_graded_notification,
    }
    kwargs.update(overrides)
    return AssessmentAttemptEngine(DjangoUnitOfWork, **kwargs)
