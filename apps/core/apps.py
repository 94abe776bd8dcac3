from django.apps import AppConfig


class CoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"

    name = "apps.core"

    # 🔥 AUTH_USER_MODEL = "core.User" 참조용 앱 라벨 (절대 변경 금지)
    label = "core"
