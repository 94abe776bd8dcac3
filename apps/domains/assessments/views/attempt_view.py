# PATH: apps/domains/assessments/views/attempt_view.py

from __future__ import annotations

from django_filters.utils import translate_validation
from drf_yasg import openapi
from drf_yasg.utils import no_body, swagger_auto_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.permissions import is_instructor_or_admin, user_role
from apps.domains.assessments.filters import AssessmentAttemptFilter
from apps.domains.assessments.models import AssessmentAttempt
from apps.domains.assessments.serializers import AssessmentAttemptSerializer, SubmitAnswersSerializer
from apps.domains.assessments.services.engine import get_attempt_engine


class StartAttemptView(APIView):
    """
    POST /api/v1/assessments/{id}/attempt/

    - 응시 1건 생성 (attempt_number = 사용된 최대 번호 + 1, 삭제로 생긴 공백은 한도 안에서 재사용)
    - 응답 문항에는 정답이 절대 포함되지 않음
    """

    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(request_body=no_body, responses={201: "attempt + questions + timeLimit"})
    def post(self, request, pk: int):
        started = get_attempt_engine().start_attempt(
            request.user.id,
            pk,
            include_unpublished=is_instructor_or_admin(request.user),
        )
        return Response(started.to_dict(), status=status.HTTP_201_CREATED)


class SubmitAttemptView(APIView):
    """
    POST /api/v1/assessments/attempts/{attempt_id}/

    body: {"answers": [{"questionId": 1, "selectedOptionIndex": 2}, ...]}
    - 본인 attempt 만, 1회만 제출 가능
    """

    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(request_body=SubmitAnswersSerializer)
    def post(self, request, attempt_id: int):
        answers = request.data.get("answers") if hasattr(request.data, "get") else None
        graded = get_attempt_engine().submit_attempt(attempt_id, request.user.id, answers)
        return Response(graded.to_dict(), status=status.HTTP_200_OK)


class AssessmentAttemptsView(APIView):
    """
    GET /api/v1/assessments/{id}/attempts/?passed=true&completed=true

    - 강사/관리자: 전체 응시
    - 학습자: 본인 응시만
    - 최신 started_at 순
    """

    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        manual_parameters=[
            openapi.Parameter("passed", openapi.IN_QUERY, type=openapi.TYPE_BOOLEAN),
            openapi.Parameter("completed", openapi.IN_QUERY, type=openapi.TYPE_BOOLEAN),
        ],
        responses={200: AssessmentAttemptSerializer(many=True)},
    )
    def get(self, request, pk: int):
        attempts = get_attempt_engine().list_attempts(
            pk,
            caller_role=user_role(request.user),
            caller_learner_id=request.user.id,
        )

        # 범위(권한)는 engine 이 결정, query 필터는 그 결과 안에서만 적용
        if any(k in request.query_params for k in ("passed", "completed")):
            fs = AssessmentAttemptFilter(
                request.query_params,
                queryset=AssessmentAttempt.objects.filter(id__in=[a.id for a in attempts]),
            )
            if not fs.is_valid():
                raise translate_validation(fs.errors)
            keep = set(fs.qs.values_list("id", flat=True))
            attempts = [a for a in attempts if a.id in keep]

        return Response(AssessmentAttemptSerializer(attempts, many=True).data)
