from django.db import models
from django.db.models import Q

from apps.api.common.models import BaseModel


class Assessment(BaseModel):
    """
    시험 정의 (강사 작성, 학습자 read-only)

    questions JSON 포맷:
        [{"id": 1, "question": "...", "options": ["..", ".."], "correctAnswer": 1}, ...]

    ✅ 불변식
    - passing_score ∈ [0, 100]
    - max_attempts >= 0 (0 = 무제한)
    - correctAnswer 는 options 범위 내 인덱스 (serializer / 도메인 validate() 에서 강제)
    """

    class ShowAnswers(models.TextChoices):
        NEVER = "never", "Never"
        AFTER_SUBMISSION = "after_submission", "After submission"
        AFTER_DUE_DATE = "after_due_date", "After due date"

    # 모듈은 외부 도메인 → id 참조만 보관
    module_id = models.PositiveIntegerField(null=True, blank=True, db_index=True)

    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)

    # 예: quiz, exam, practice
    assessment_type = models.CharField(max_length=50, default="quiz")

    # 분 단위, null = 제한 없음
    time_limit = models.PositiveIntegerField(null=True, blank=True)

    passing_score = models.PositiveSmallIntegerField(default=70)
    max_attempts = models.PositiveIntegerField(default=1, help_text="0 = 무제한")
    due_date = models.DateTimeField(null=True, blank=True)

    questions = models.JSONField(default=list, blank=True)
    randomize_questions = models.BooleanField(default=False)
    show_answers = models.CharField(
        max_length=20,
        choices=ShowAnswers.choices,
        default=ShowAnswers.AFTER_SUBMISSION,
    )

    is_published = models.BooleanField(default=False)
    published_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "assessments_assessment"
        ordering = ["title"]
        constraints = [
            models.CheckConstraint(
                condition=Q(passing_score__lte=100),
                name="assessment_passing_score_lte_100",
            ),
        ]

    def __str__(self):
        return self.title
