import django_filters

from .models import AssessmentAttempt


class AssessmentAttemptFilter(django_filters.FilterSet):
    passed = django_filters.BooleanFilter()
    completed = django_filters.BooleanFilter(method="filter_completed")

    class Meta:
        model = AssessmentAttempt
        fields = ["passed"]

    def filter_completed(self, queryset, name, value):
        return queryset.filter(completed_at__isnull=not value)
