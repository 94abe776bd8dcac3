# PATH: apps/domains/assessments/serializers/assessment.py

from django.utils import timezone
from rest_framework import serializers

from academy.domain.assessments.entities import (
    AnswerVisibility,
    AssessmentDefinition,
    Question,
)
from academy.domain.assessments.errors import InvalidInputError
from apps.domains.assessments.models import Assessment


class AssessmentListSerializer(serializers.ModelSerializer):
    """
    목록용 (문항 제외)
    """

    question_count = serializers.SerializerMethodField()

    class Meta:
        model = Assessment
        fields = [
            "id",
            "module_id",
            "title",
            "description",
            "assessment_type",
            "time_limit",
            "passing_score",
            "max_attempts",
            "due_date",
            "is_published",
            "question_count",
        ]

    def get_question_count(self, obj) -> int:
        return len(obj.questions or [])


class AssessmentDetailSerializer(serializers.ModelSerializer):
    """
    상세 조회용.
    questions 는 view 에서 정답 공개 정책을 적용한 결과를 context 로 주입.
    """

    questions = serializers.SerializerMethodField()

    class Meta:
        model = Assessment
        fields = [
            "id",
            "module_id",
            "title",
            "description",
            "assessment_type",
            "time_limit",
            "passing_score",
            "max_attempts",
            "due_date",
            "randomize_questions",
            "show_answers",
            "is_published",
            "published_at",
            "questions",
        ]

    def get_questions(self, obj):
        presented = self.context.get("questions")
        if presented is not None:
            return presented
        # context 미지정 = 정답 제거
        return [
            {k: v for k, v in (q or {}).items() if k != "correctAnswer"}
            for q in (obj.questions or [])
        ]


class AssessmentWriteSerializer(serializers.ModelSerializer):
    """
    생성 / 수정 전용 (강사·관리자)

    정책:
    - questions 는 도메인 AssessmentDefinition.validate() 로 검증
      (correctAnswer 범위, 문항 id 중복)
    - is_published False → True 전환 시 published_at 자동 기록
    """

    questions = serializers.ListField(
        child=serializers.DictField(),
        required=False,
        allow_empty=True,
    )

    class Meta:
        model = Assessment
        fields = [
            "id",
            "module_id",
            "title",
            "description",
            "assessment_type",
            "time_limit",
            "passing_score",
            "max_attempts",
            "due_date",
            "questions",
            "randomize_questions",
            "show_answers",
            "is_published",
        ]
        read_only_fields = ["id"]

    def validate_passing_score(self, value):
        if not 0 <= int(value) <= 100:
            raise serializers.ValidationError("passing_score must be between 0 and 100")
        return value

    def validate(self, attrs):
        inst = self.instance

        def pick(name, default=None):
            if name in attrs:
                return attrs[name]
            return getattr(inst, name, default) if inst is not None else default

        try:
            questions = tuple(Question.from_dict(q) for q in (pick("questions") or []))
            AssessmentDefinition(
                id=getattr(inst, "id", 0) or 0,
                module_id=pick("module_id"),
                title=pick("title", ""),
                questions=questions,
                passing_score=pick("passing_score", 70),
                max_attempts=pick("max_attempts", 1),
                time_limit=pick("time_limit"),
                due_date=pick("due_date"),
                randomize_questions=bool(pick("randomize_questions", False)),
                show_answers=AnswerVisibility(pick("show_answers", AnswerVisibility.AFTER_SUBMISSION.value)),
                is_published=bool(pick("is_published", False)),
            ).validate()
        except InvalidInputError as e:
            raise serializers.ValidationError({"questions": e.message})

        # 정규화된 wire 포맷으로 저장
        if "questions" in attrs:
            attrs["questions"] = [q.to_dict(include_answer=True) for q in questions]

        was_published = bool(getattr(inst, "is_published", False))
        if attrs.get("is_published") and not was_published:
            attrs["published_at"] = timezone.now()

        return attrs
