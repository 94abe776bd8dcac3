# PATH: apps/domains/assessments/serializers/attempt.py

from rest_framework import serializers


class AnswerItemSerializer(serializers.Serializer):
    questionId = serializers.JSONField()
    selectedOptionIndex = serializers.IntegerField(allow_null=True, required=False)
    selectedOption = serializers.IntegerField(
        allow_null=True,
        required=False,
        help_text="legacy 키. selectedOptionIndex 가 없을 때만 사용",
    )


class SubmitAnswersSerializer(serializers.Serializer):
    """
    제출 body 문서화 전용 (swagger). 검증에 사용하지 않는다.
    실제 검증은 engine.parse_answers → SubmittedAnswer.from_dict 가 수행 (InvalidInputError).
    from_dict 가 받는 키가 바뀌면 AnswerItemSerializer 도 같이 수정.
    """
    answers = AnswerItemSerializer(many=True)


class AssessmentAttemptSerializer(serializers.Serializer):
    """
    AssessmentAttempt 엔티티 → 응답 (camelCase wire 포맷)
    """
    id = serializers.IntegerField()
    learnerId = serializers.IntegerField(source="learner_id")
    assessmentId = serializers.IntegerField(source="assessment_id")
    attemptNumber = serializers.IntegerField(source="attempt_number")
    state = serializers.CharField(source="state.value")
    startedAt = serializers.DateTimeField(source="started_at")
    completedAt = serializers.DateTimeField(source="completed_at", allow_null=True)
    answers = serializers.SerializerMethodField()
    score = serializers.IntegerField(allow_null=True)
    passed = serializers.BooleanField()
    timeSpent = serializers.IntegerField(source="time_spent", allow_null=True)

    def get_answers(self, obj):
        return [a.to_dict() for a in (obj.answers or [])]
