# apps/domains/assessments/urls.py
from django.urls import path

from .views import (
    AssessmentAttemptsView,
    AssessmentDetailView,
    AssessmentListCreateView,
    StartAttemptView,
    SubmitAttemptView,
)

urlpatterns = [
    path("", AssessmentListCreateView.as_view(), name="assessment-list"),
    path("<int:pk>/", AssessmentDetailView.as_view(), name="assessment-detail"),
    path("<int:pk>/attempt/", StartAttemptView.as_view(), name="assessment-start-attempt"),
    path("<int:pk>/attempts/", AssessmentAttemptsView.as_view(), name="assessment-attempts"),
    path("attempts/<int:attempt_id>/", SubmitAttemptView.as_view(), name="assessment-submit-attempt"),
]
