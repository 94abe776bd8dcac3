# apps/api/config/asgi.py
"""
ASGI 진입점 (uvicorn / daphne)

  uvicorn apps.api.config.asgi:application
"""
import os

from django.core.asgi import get_asgi_application

# 운영 기본값. 로컬은 manage.py 가 dev 로 지정
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "apps.api.config.settings.prod")

application = get_asgi_application()
