# PATH: apps/api/common/models.py
from django.db import models


class TimestampModel(models.Model):
    """
    created_at / updated_at 자동 기록

    ❗ QuerySet.update() 는 auto_now 를 건너뛴다
       → 조건부 update 경로는 updated_at 을 직접 넣어야 함
    """
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class BaseModel(TimestampModel):
    """
    도메인 모델 공통 베이스 (Assessment, AssessmentAttempt, Notification)
    """
    class Meta:
        abstract = True
