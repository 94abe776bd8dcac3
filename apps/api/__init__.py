# shared_task 가 이 Celery 앱(설정 포함)에 바인딩되도록 Django 기동 시 로드
from .celery import app as celery_app

__all__ = ("celery_app",)
