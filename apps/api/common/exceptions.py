# apps/api/common/exceptions.py
"""
DRF 예외 핸들러

- academy 도메인 오류 → {"detail": message, "code": CODE} + 도메인 status_code
- 그 외 DRF 예외는 기본 핸들러 결과에 code 를 보강
"""
from __future__ import annotations

import logging

from rest_framework.response import Response
from rest_framework.views import exception_handler

from academy.domain.assessments.errors import AssessmentDomainError

logger = logging.getLogger(__name__)

# DRF 기본 code → 응답 code (도메인 taxonomy 와 맞춤)
DRF_CODE_MAP = {
    "permission_denied": "FORBIDDEN",
    "not_authenticated": "UNAUTHORIZED",
    "authentication_failed": "UNAUTHORIZED",
    "invalid": "INVALID_INPUT",
    "parse_error": "INVALID_INPUT",
}


def api_exception_handler(exc, context):
    if isinstance(exc, AssessmentDomainError):
        view = context.get("view")
        logger.info(
            "domain error in %s: code=%s detail=%s",
            view.__class__.__name__ if view else "-", exc.code, exc.message,
        )
        return Response({"detail": exc.message, "code": exc.code}, status=exc.status_code)

    response = exception_handler(exc, context)
    if response is not None and isinstance(response.data, dict) and "code" not in response.data:
        codes = exc.get_codes() if hasattr(exc, "get_codes") else None
        if isinstance(codes, str):
            response.data["code"] = DRF_CODE_MAP.get(codes, codes.upper())
        elif isinstance(codes, (dict, list)):
            response.data["code"] = "INVALID_INPUT"
    return response
