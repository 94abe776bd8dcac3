# apps/api/celery.py
"""
Celery 앱 (채점 알림 등 post-commit 작업)

워커 실행:
  DJANGO_SETTINGS_MODULE=apps.api.config.settings.prod celery -A apps.api worker -l info
"""
from celery import Celery

# ❗ settings는 여기서 지정하지 않는다 (DJANGO_SETTINGS_MODULE 은 외부 주입)
app = Celery("hacklab")

# CELERY_* 설정만 읽음 (broker, eager 여부 등)
app.config_from_object("django.conf:settings", namespace="CELERY")

# apps.domains.*.tasks 자동 탐색
app.autodiscover_tasks()
