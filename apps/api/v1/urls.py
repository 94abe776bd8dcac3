# apps/api/v1/urls.py
from django.urls import path, include

urlpatterns = [
    # =========================
    # Domain APIs
    # =========================
    path("assessments/", include("apps.domains.assessments.urls")),
    path("notifications/", include("apps.domains.notifications.urls")),

    # =========================
    # Core
    # =========================
    path("core/", include("apps.core.urls")),
]
