# apps/domains/notifications/tasks.py
from __future__ import annotations

import logging

from celery import shared_task

logger = logging.getLogger(__name__)


@shared_task(
    bind=True,
    autoretry_for=(ConnectionError,),
    retry_kwargs={"max_retries": 3, "countdown": 10},
)
def notify_assessment_graded(self, attempt_id: int) -> int | None:
    """
    채점 완료 알림 생성 (채점 transaction commit 이후 enqueue)

    - attempt 가 없거나 미완료면 아무것도 하지 않음
    - 반환: 생성된 Notification id
    """
    from apps.domains.assessments.models import AssessmentAttempt
    from apps.domains.notifications.models import Notification

    attempt = (
        AssessmentAttempt.objects
        .select_related("assessment")
        .filter(id=attempt_id)
        .first()
    )
    if attempt is None or not attempt.is_completed:
        logger.warning("graded notification skipped: attempt=%s not found or not completed", attempt_id)
        return None

    assessment = attempt.assessment
    if attempt.passed:
        ntype = Notification.Type.SUCCESS
        title = "Assessment passed"
        message = f'You passed "{assessment.title}" with a score of {attempt.score}%.'
    else:
        ntype = Notification.Type.ASSESSMENT
        title = "Assessment graded"
        message = (
            f'You scored {attempt.score}% on "{assessment.title}". '
            f"The passing score is {assessment.passing_score}%."
        )

    n = Notification.objects.create(
        user_id=attempt.learner_id,
        type=ntype,
        title=title,
        message=message,
        data={
            "assessmentId": assessment.id,
            "attemptId": attempt.id,
            "score": attempt.score,
            "passed": attempt.passed,
        },
    )
    logger.info("graded notification created: id=%s attempt=%s user=%s", n.id, attempt.id, attempt.learner_id)
    return n.id
