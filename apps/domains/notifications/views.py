# apps/domains/notifications/views.py

from django.shortcuts import get_object_or_404
from django.utils import timezone
from drf_yasg import openapi
from drf_yasg.utils import no_body, swagger_auto_schema
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import Notification
from .serializers import NotificationSerializer

DEFAULT_LIMIT = 20
MAX_LIMIT = 100


def _int_param(request, name: str, default: int) -> int:
    raw = request.query_params.get(name)
    if raw in (None, ""):
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ValidationError({name: "must be integer"})
    if value < 0:
        raise ValidationError({name: "must be >= 0"})
    return value


class NotificationListView(APIView):
    """
    GET /api/v1/notifications/?include_read=true&limit=20&offset=0

    - 본인 알림만, 최신순
    - 기본은 안 읽은 알림만
    """

    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        manual_parameters=[
            openapi.Parameter("include_read", openapi.IN_QUERY, type=openapi.TYPE_BOOLEAN),
            openapi.Parameter("limit", openapi.IN_QUERY, type=openapi.TYPE_INTEGER),
            openapi.Parameter("offset", openapi.IN_QUERY, type=openapi.TYPE_INTEGER),
        ],
    )
    def get(self, request):
        include_read = str(request.query_params.get("include_read", "")).lower() in ("1", "true", "yes")
        limit = min(_int_param(request, "limit", DEFAULT_LIMIT), MAX_LIMIT)
        offset = _int_param(request, "offset", 0)

        qs = Notification.objects.filter(user=request.user)
        if not include_read:
            qs = qs.filter(is_read=False)
        qs = qs.order_by("-created_at", "-id")

        return Response(
            {
                "count": qs.count(),
                "results": NotificationSerializer(qs[offset:offset + limit], many=True).data,
            }
        )


class NotificationDetailView(APIView):
    """
    DELETE /api/v1/notifications/{id}/
    """

    permission_classes = [IsAuthenticated]

    def delete(self, request, pk: int):
        n = get_object_or_404(Notification, pk=pk, user=request.user)
        n.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


class NotificationMarkReadView(APIView):
    """
    POST /api/v1/notifications/{id}/read/
    """

    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(request_body=no_body, responses={200: NotificationSerializer})
    def post(self, request, pk: int):
        n = get_object_or_404(Notification, pk=pk, user=request.user)
        if not n.is_read:
            n.is_read = True
            n.save(update_fields=["is_read", "updated_at"])
        return Response(NotificationSerializer(n).data)


class NotificationMarkAllReadView(APIView):
    """
    POST /api/v1/notifications/read-all/
    """

    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(request_body=no_body)
    def post(self, request):
        updated = Notification.objects.filter(user=request.user, is_read=False).update(
            is_read=True,
            updated_at=timezone.now(),
        )
        return Response({"updated": updated})
