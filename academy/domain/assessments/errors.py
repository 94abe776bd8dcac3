"""
Assessment 도메인 오류: 순수 파이썬

모든 오류는 안정적인 code를 가진다 (클라이언트 분기/현지화용).
HTTP 매핑은 apps.api.common.exceptions 에서 status_code 로 수행.
"""
from __future__ import annotations


class AssessmentDomainError(Exception):
    """Assessment 도메인 규칙 위반 등."""
    code = "ASSESSMENT_ERROR"
    status_code = 400

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.code)
        self.message = message or self.code


class NotFoundError(AssessmentDomainError):
    """Assessment 또는 Attempt가 없음."""
    code = "NOT_FOUND"
    status_code = 404


class ForbiddenError(AssessmentDomainError):
    """호출자가 attempt 소유자가 아님."""
    code = "FORBIDDEN"
    status_code = 403


class AttemptLimitExceededError(AssessmentDomainError):
    """허용 응시 횟수 소진."""
    code = "ATTEMPT_LIMIT_EXCEEDED"
    status_code = 400

    def __init__(self, max_attempts: int) -> None:
        super().__init__(f"Maximum number of attempts ({max_attempts}) reached")
        self.max_attempts = max_attempts


class PastDueError(AssessmentDomainError):
    """응시 시작 시점이 due_date 이후."""
    code = "PAST_DUE"
    status_code = 400


class AlreadySubmittedError(AssessmentDomainError):
    """이미 completed_at 이 기록된 attempt."""
    code = "ALREADY_SUBMITTED"
    status_code = 400


class InvalidInputError(AssessmentDomainError):
    """answers payload 누락/형식 오류, 정의 불변식 위반."""
    code = "INVALID_INPUT"
    status_code = 400


class ConcurrencyConflictError(AssessmentDomainError):
    """조건부 쓰기(insert/complete)가 경합으로 0 row 처리됨."""
    code = "CONCURRENCY_CONFLICT"
    status_code = 409
