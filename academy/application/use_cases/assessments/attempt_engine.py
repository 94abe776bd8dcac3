"""
Assessment Attempt Engine: 도메인/포트만 사용 (Django 미사용)

응시 생성 / 제출·채점 / 응시 목록 / 시험 상세 조회.
상태 전이·검증 순서는 여기서 결정; 원자성은 UoW·Repository 어댑터가 보장.

동시성 규칙:
- start: (learner, assessment, attempt_number) 유니크 제약 + attempt_number <= max_attempts
  → 경합 패배 시 ConcurrencyConflictError, 내부에서 1회 재시도 (재검사 포함)
- submit: completed_at IS NULL 조건부 update, 0 row 면 ConcurrencyConflictError (재시도 없음)
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Iterable, Optional

from academy.application.ports.clock import Clock, SystemClock
from academy.application.ports.unit_of_work import UnitOfWork
from academy.domain.assessments.entities import (
    AssessmentAttempt,
    AssessmentDefinition,
    SubmittedAnswer,
    is_privileged_role,
)
from academy.domain.assessments.errors import (
    AlreadySubmittedError,
    AttemptLimitExceededError,
    ConcurrencyConflictError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
    PastDueError,
)
from academy.domain.assessments.grading import (
    GradeOutcome,
    answers_disclosed,
    can_view_answers,
    compute_time_spent,
    correct_answer_list,
    display_order,
    grade_answers,
    present_questions,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFLICT_RETRIES = 1

GradedCallback = Callable[[AssessmentAttempt, AssessmentDefinition, GradeOutcome], None]


@dataclass
class StartedAttempt:
    attempt: AssessmentAttempt
    questions: list[dict[str, Any]]
    time_limit: Optional[int]

    def to_dict(self) -> dict[str, Any]:
        return {
            "attempt": self.attempt.to_dict(),
            "questions": self.questions,
            "timeLimit": self.time_limit,
        }


@dataclass
class GradedAttempt:
    attempt: AssessmentAttempt
    score: int
    passed: bool
    correct_count: int
    total_questions: int
    time_spent: int
    correct_answers: Optional[list[dict[str, Any]]] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "attempt": self.attempt.to_dict(),
            "score": self.score,
            "passed": self.passed,
            "correctCount": self.correct_count,
            "totalQuestions": self.total_questions,
            "timeSpent": self.time_spent,
            "correctAnswers": self.correct_answers,
        }


@dataclass
class AssessmentView:
    definition: AssessmentDefinition
    questions: list[dict[str, Any]]
    attempts: list[AssessmentAttempt] = field(default_factory=list)


def parse_answers(answers: Any) -> list[SubmittedAnswer]:
    """answers 는 list 여야 함 (빈 list 허용). 그 외 InvalidInputError."""
    if answers is None or isinstance(answers, (str, bytes, dict)) or not isinstance(answers, (list, tuple)):
        raise InvalidInputError("Please provide answers array")
    return [SubmittedAnswer.from_dict(a) for a in answers]


class AssessmentAttemptEngine:
    """
    응시 라이프사이클 전담.

    uow_factory: 호출마다 새 트랜잭션 경계를 여는 UnitOfWork 생성자
    clock: now 미지정 시 사용
    rng: randomize_questions 표시 순서용 (테스트에서 seed 고정)
    on_graded: 채점 commit 이후 best-effort 콜백 (알림 등)
    """

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        *,
        clock: Optional[Clock] = None,
        rng: Optional[random.Random] = None,
        conflict_retries: int = DEFAULT_CONFLICT_RETRIES,
        on_graded: Optional[GradedCallback] = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._clock = clock or SystemClock()
        self._rng = rng
        self._conflict_retries = max(0, int(conflict_retries))
        self._on_graded = on_graded

    # -------------------------------------------------
    # start
    # -------------------------------------------------
    def start_attempt(
        self,
        learner_id: int,
        assessment_id: int,
        now: Optional[datetime] = None,
        *,
        include_unpublished: bool = False,
    ) -> StartedAttempt:
        now = now or self._clock.now()
        retries_left = self._conflict_retries

        while True:
            try:
                attempt, definition = self._create_attempt(
                    learner_id, assessment_id, now, include_unpublished=include_unpublished,
                )
                break
            except ConcurrencyConflictError:
                if retries_left <= 0:
                    logger.warning(
                        "start_attempt conflict not resolved: learner=%s assessment=%s",
                        learner_id, assessment_id,
                    )
                    raise
                retries_left -= 1
                logger.warning(
                    "start_attempt conflict, re-checking limit: learner=%s assessment=%s",
                    learner_id, assessment_id,
                )

        logger.info(
            "attempt started: id=%s learner=%s assessment=%s #%s",
            attempt.id, learner_id, assessment_id, attempt.attempt_number,
        )
        # 학습자 응시 화면: 정책과 무관하게 정답은 항상 제거
        questions = present_questions(display_order(definition, self._rng), reveal_answers=False)
        return StartedAttempt(attempt=attempt, questions=questions, time_limit=definition.time_limit)

    def _create_attempt(
        self,
        learner_id: int,
        assessment_id: int,
        now: datetime,
        *,
        include_unpublished: bool,
    ) -> tuple[AssessmentAttempt, AssessmentDefinition]:
        with self._uow_factory() as uow:
            # 1️⃣ 정의 존재
            definition = uow.assessments.get_by_id(assessment_id)
            if definition is None or not (definition.is_published or include_unpublished):
                raise NotFoundError("Assessment not found")

            # 2️⃣ 응시 횟수
            taken = uow.attempts.attempt_numbers_for_learner(learner_id, definition.id)
            if definition.has_attempt_limit and len(taken) >= int(definition.max_attempts):
                logger.info(
                    "attempt limit reached: learner=%s assessment=%s limit=%s",
                    learner_id, definition.id, definition.max_attempts,
                )
                raise AttemptLimitExceededError(int(definition.max_attempts))

            # 3️⃣ 마감
            if definition.is_past_due(now):
                logger.info("assessment past due: learner=%s assessment=%s", learner_id, definition.id)
                raise PastDueError("Assessment due date has passed")

            # 4️⃣ insert (유니크 슬롯 경합은 어댑터가 ConcurrencyConflictError 로 변환)
            # 삭제로 생긴 번호 공백은 next_attempt_number 가 메움
            attempt = uow.attempts.insert(
                AssessmentAttempt(
                    learner_id=learner_id,
                    assessment_id=definition.id,
                    started_at=now,
                    attempt_number=definition.next_attempt_number(taken),
                )
            )
        return attempt, definition

    # -------------------------------------------------
    # submit
    # -------------------------------------------------
    def submit_attempt(
        self,
        attempt_id: int,
        caller_learner_id: int,
        answers: Any,
        now: Optional[datetime] = None,
    ) -> GradedAttempt:
        parsed = parse_answers(answers)
        now = now or self._clock.now()

        with self._uow_factory() as uow:
            attempt = uow.attempts.get_by_id(attempt_id)
            if attempt is None:
                raise NotFoundError("Attempt not found")

            if not attempt.belongs_to(caller_learner_id):
                raise ForbiddenError("Not authorized to submit this attempt")

            if attempt.is_completed():
                raise AlreadySubmittedError("This attempt has already been submitted")

            definition = uow.assessments.get_by_id(attempt.assessment_id)
            if definition is None:
                # attempt 는 있는데 정의가 없음 = 정합성 오류 (cascade 누락 등)
                logger.error(
                    "attempt %s references missing assessment %s",
                    attempt.id, attempt.assessment_id,
                )
                raise NotFoundError("Assessment not found")

            outcome = grade_answers(definition, parsed)
            time_spent, clamped = compute_time_spent(attempt.started_at, now)
            if clamped:
                logger.warning(
                    "negative time spent clamped to 0: attempt=%s started_at=%s now=%s",
                    attempt.id, attempt.started_at, now,
                )

            affected = uow.attempts.complete_if_pending(
                attempt.id,
                answers=parsed,
                score=outcome.score,
                passed=outcome.passed,
                time_spent=time_spent,
                completed_at=now,
            )
            if affected != 1:
                logger.warning("submit_attempt lost completion race: attempt=%s", attempt.id)
                raise ConcurrencyConflictError("Attempt was completed by a concurrent submission")

            attempt.complete(
                answers=parsed,
                score=outcome.score,
                passed=outcome.passed,
                time_spent=time_spent,
                now=now,
            )

            if self._on_graded is not None:
                callback = self._on_graded
                graded = attempt
                uow.on_commit(lambda: callback(graded, definition, outcome))

        logger.info(
            "attempt graded: id=%s learner=%s score=%s passed=%s",
            attempt.id, attempt.learner_id, outcome.score, outcome.passed,
        )

        disclose = answers_disclosed(definition, now, has_submitted=True)
        return GradedAttempt(
            attempt=attempt,
            score=outcome.score,
            passed=outcome.passed,
            correct_count=outcome.correct_count,
            total_questions=outcome.total_questions,
            time_spent=time_spent,
            correct_answers=correct_answer_list(definition) if disclose else None,
        )

    # -------------------------------------------------
    # read
    # -------------------------------------------------
    def list_attempts(
        self,
        assessment_id: int,
        caller_role: Any,
        caller_learner_id: Optional[int],
    ) -> list[AssessmentAttempt]:
        """강사/관리자는 전체, 학습자는 본인 attempt 만 (started_at 내림차순)."""
        privileged = is_privileged_role(caller_role)
        with self._uow_factory() as uow:
            definition = uow.assessments.get_by_id(assessment_id)
            if definition is None or not (definition.is_published or privileged):
                raise NotFoundError("Assessment not found")
            return uow.attempts.list_for_assessment(
                definition.id,
                learner_id=None if privileged else caller_learner_id,
            )

    def view_assessment(
        self,
        assessment_id: int,
        caller_role: Any,
        caller_learner_id: Optional[int],
        now: Optional[datetime] = None,
    ) -> AssessmentView:
        """시험 상세 + 호출자 본인 attempt. 정답 노출은 can_view_answers 단일 규칙."""
        now = now or self._clock.now()
        privileged = is_privileged_role(caller_role)
        with self._uow_factory() as uow:
            definition = uow.assessments.get_by_id(assessment_id)
            if definition is None or not (definition.is_published or privileged):
                raise NotFoundError("Assessment not found")
            attempts: Iterable[AssessmentAttempt] = []
            if caller_learner_id is not None:
                attempts = uow.attempts.list_for_assessment(definition.id, learner_id=caller_learner_id)
            attempts = list(attempts)

        reveal = can_view_answers(
            definition,
            now,
            privileged=privileged,
            has_submitted=any(a.is_completed() for a in attempts),
        )
        return AssessmentView(
            definition=definition,
            questions=present_questions(definition.questions, reveal_answers=reveal),
            attempts=attempts,
        )
