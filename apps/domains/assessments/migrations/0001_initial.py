import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Assessment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("module_id", models.PositiveIntegerField(blank=True, db_index=True, null=True)),
                ("title", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True)),
                ("assessment_type", models.CharField(default="quiz", max_length=50)),
                ("time_limit", models.PositiveIntegerField(blank=True, null=True)),
                ("passing_score", models.PositiveSmallIntegerField(default=70)),
                ("max_attempts", models.PositiveIntegerField(default=1, help_text="0 = 무제한")),
                ("due_date", models.DateTimeField(blank=True, null=True)),
                ("questions", models.JSONField(blank=True, default=list)),
                ("randomize_questions", models.BooleanField(default=False)),
                (
                    "show_answers",
                    models.CharField(
                        choices=[
                            ("never", "Never"),
                            ("after_submission", "After submission"),
                            ("after_due_date", "After due date"),
                        ],
                        default="after_submission",
                        max_length=20,
                    ),
                ),
                ("is_published", models.BooleanField(default=False)),
                ("published_at", models.DateTimeField(blank=True, null=True)),
            ],
            options={
                "db_table": "assessments_assessment",
                "ordering": ["title"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("passing_score__lte", 100)),
                        name="assessment_passing_score_lte_100",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="AssessmentAttempt",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("attempt_number", models.PositiveIntegerField(help_text="1부터 시작")),
                ("started_at", models.DateTimeField()),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                ("answers", models.JSONField(blank=True, default=list)),
                ("score", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("passed", models.BooleanField(default=False)),
                ("time_spent", models.PositiveIntegerField(blank=True, null=True)),
                (
                    "assessment",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="attempts",
                        to="assessments.assessment",
                    ),
                ),
                (
                    "learner",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="assessment_attempts",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "assessments_attempt",
                "ordering": ["-started_at", "-id"],
                "indexes": [
                    models.Index(fields=["assessment", "learner"], name="attempt_assessment_learner_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("learner", "assessment", "attempt_number"),
                        name="uniq_attempt_slot_per_learner",
                    ),
                ],
            },
        ),
    ]
