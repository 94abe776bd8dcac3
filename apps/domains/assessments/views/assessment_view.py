# PATH: apps/domains/assessments/views/assessment_view.py

from __future__ import annotations

import logging

from django.shortcuts import get_object_or_404
from drf_yasg.utils import swagger_auto_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.permissions import IsAdminRole, IsInstructorOrAdmin, is_instructor_or_admin, user_role
from apps.domains.assessments.models import Assessment
from apps.domains.assessments.serializers import (
    AssessmentAttemptSerializer,
    AssessmentDetailSerializer,
    AssessmentListSerializer,
    AssessmentWriteSerializer,
)
from apps.domains.assessments.services.engine import get_attempt_engine

logger = logging.getLogger(__name__)


class AssessmentListCreateView(APIView):
    """
    GET  /api/v1/assessments/   → 공개된 시험 목록 (강사/관리자는 비공개 포함)
    POST /api/v1/assessments/   → 시험 생성 (강사/관리자)
    """

    def get_permissions(self):
        if self.request.method == "POST":
            return [IsAuthenticated(), IsInstructorOrAdmin()]
        return [IsAuthenticated()]

    @swagger_auto_schema(responses={200: AssessmentListSerializer(many=True)})
    def get(self, request):
        qs = Assessment.objects.all().order_by("title", "id")
        if not is_instructor_or_admin(request.user):
            qs = qs.filter(is_published=True)

        module_id = request.query_params.get("module_id")
        if module_id:
            qs = qs.filter(module_id=module_id)

        return Response(AssessmentListSerializer(qs, many=True).data)

    @swagger_auto_schema(request_body=AssessmentWriteSerializer, responses={201: AssessmentWriteSerializer})
    def post(self, request):
        ser = AssessmentWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        assessment = ser.save()
        logger.info("assessment created: id=%s by user=%s", assessment.id, request.user.id)
        return Response(AssessmentWriteSerializer(assessment).data, status=status.HTTP_201_CREATED)


class AssessmentDetailView(APIView):
    """
    GET    /api/v1/assessments/{id}/  → 시험 상세 + 본인 응시 목록 (정답은 공개 정책 적용)
    PUT    /api/v1/assessments/{id}/  → 수정 (강사/관리자)
    PATCH  /api/v1/assessments/{id}/  → 부분 수정 (강사/관리자)
    DELETE /api/v1/assessments/{id}/  → 삭제 (관리자, attempt cascade)
    """

    def get_permissions(self):
        method = self.request.method
        if method in ("PUT", "PATCH"):
            return [IsAuthenticated(), IsInstructorOrAdmin()]
        if method == "DELETE":
            return [IsAuthenticated(), IsAdminRole()]
        return [IsAuthenticated()]

    def get(self, request, pk: int):
        view = get_attempt_engine().view_assessment(
            pk,
            caller_role=user_role(request.user),
            caller_learner_id=request.user.id,
        )
        assessment = get_object_or_404(Assessment, pk=view.definition.id)

        data = AssessmentDetailSerializer(assessment, context={"questions": view.questions}).data
        data["attempts"] = AssessmentAttemptSerializer(view.attempts, many=True).data
        return Response(data)

    def _update(self, request, pk: int, partial: bool):
        assessment = get_object_or_404(Assessment, pk=pk)
        ser = AssessmentWriteSerializer(assessment, data=request.data, partial=partial)
        ser.is_valid(raise_exception=True)
        ser.save()
        logger.info("assessment updated: id=%s by user=%s", assessment.id, request.user.id)
        return Response(ser.data)

    @swagger_auto_schema(request_body=AssessmentWriteSerializer)
    def put(self, request, pk: int):
        return self._update(request, pk, partial=False)

    @swagger_auto_schema(request_body=AssessmentWriteSerializer)
    def patch(self, request, pk: int):
        return self._update(request, pk, partial=True)

    def delete(self, request, pk: int):
        assessment = get_object_or_404(Assessment, pk=pk)
        assessment.delete()
        logger.info("assessment deleted: id=%s by user=%s", pk, request.user.id)
        return Response(status=status.HTTP_204_NO_CONTENT)
