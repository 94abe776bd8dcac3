from django.conf import settings
from django.db import models

from apps.api.common.models import BaseModel


class Notification(BaseModel):
    """
    사용자 알림 (in-app)

    - 채점 완료 등 도메인 이벤트 후 celery task 가 생성
    - 본인 알림만 조회 / 읽음 처리 / 삭제
    """

    class Type(models.TextChoices):
        INFO = "info", "Info"
        SUCCESS = "success", "Success"
        WARNING = "warning", "Warning"
        ERROR = "error", "Error"
        COURSE = "course", "Course"
        ASSESSMENT = "assessment", "Assessment"
        LAB = "lab", "Lab"
        CERTIFICATE = "certificate", "Certificate"
        SYSTEM = "system", "System"

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications",
    )
    type = models.CharField(max_length=20, choices=Type.choices, default=Type.INFO)
    title = models.CharField(max_length=255)
    message = models.TextField()
    data = models.JSONField(null=True, blank=True)
    is_read = models.BooleanField(default=False)

    class Meta:
        db_table = "notifications_notification"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["user", "is_read"], name="notification_user_read_idx"),
        ]

    def __str__(self):
        return f"Notification user={self.user_id} type={self.type} read={self.is_read}"
