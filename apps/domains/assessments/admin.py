from django.contrib import admin

from .models import Assessment, AssessmentAttempt


@admin.register(Assessment)
class AssessmentAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "title",
        "module_id",
        "passing_score",
        "max_attempts",
        "due_date",
        "is_published",
    )
    list_filter = ("is_published", "show_answers", "assessment_type")
    search_fields = ("title",)


@admin.register(AssessmentAttempt)
class AssessmentAttemptAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "assessment",
        "learner",
        "attempt_number",
        "started_at",
        "completed_at",
        "score",
        "passed",
    )
    list_filter = ("passed",)
    raw_id_fields = ("assessment", "learner")
    # 채점 결과는 engine 경유로만 기록
    readonly_fields = ("answers", "score", "passed", "time_spent", "completed_at")
