from django.conf import settings
from django.db import models

from apps.api.common.models import BaseModel


class AssessmentAttempt(BaseModel):
    """
    학습자의 '시험 1회 응시'

    상태:
    - Created: completed_at IS NULL
    - Completed (terminal): completed_at 기록, score/passed/time_spent 1회만 set

    ✅ 동시성 고정 사항
    --------------------------------------------------
    1) (learner, assessment, attempt_number) 유니크
       - attempt_number = 기존 응시 수 + 1, max_attempts 초과 번호는 insert 전에 차단
       - 동시 start 는 같은 슬롯을 두고 경합 → 패자는 IntegrityError
    2) 완료 처리는 completed_at IS NULL 조건부 update 로만 수행
    """

    assessment = models.ForeignKey(
        "assessments.Assessment",
        on_delete=models.CASCADE,
        related_name="attempts",
    )
    learner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="assessment_attempts",
    )

    # 1부터 시작 (n번째 응시)
    attempt_number = models.PositiveIntegerField(help_text="1부터 시작")

    started_at = models.DateTimeField()
    completed_at = models.DateTimeField(null=True, blank=True)

    # [{"questionId": .., "selectedOptionIndex": ..}, ...]
    answers = models.JSONField(default=list, blank=True)

    score = models.PositiveSmallIntegerField(null=True, blank=True)
    passed = models.BooleanField(default=False)

    # 초 단위
    time_spent = models.PositiveIntegerField(null=True, blank=True)

    class Meta:
        db_table = "assessments_attempt"
        ordering = ["-started_at", "-id"]
        constraints = [
            models.UniqueConstraint(
                fields=["learner", "assessment", "attempt_number"],
                name="uniq_attempt_slot_per_learner",
            ),
        ]
        indexes = [
            models.Index(fields=["assessment", "learner"], name="attempt_assessment_learner_idx"),
        ]

    def __str__(self):
        return (
            f"AssessmentAttempt assessment={self.assessment_id} "
            f"learner={self.learner_id} "
            f"#{self.attempt_number}"
        )

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None
