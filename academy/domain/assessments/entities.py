"""
Assessment 도메인 엔티티: 순수 파이썬 (Django/ORM 미사용)

상태 전이 규칙은 엔티티 메서드로 표현.
- AssessmentDefinition: 강사가 작성하는 시험 정의 (학습자에게는 read-only)
- AssessmentAttempt: 학습자 1회 응시. Created → Completed (terminal) 두 상태뿐.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Iterable, Optional, Union

from academy.domain.assessments.errors import AlreadySubmittedError, InvalidInputError

QuestionId = Union[int, str]


class AnswerVisibility(str, Enum):
    """정답 공개 정책 (apps.domains.assessments.models Assessment.ShowAnswers choices와 동기화)."""
    NEVER = "never"
    AFTER_SUBMISSION = "after_submission"
    AFTER_DUE_DATE = "after_due_date"


class AttemptState(str, Enum):
    CREATED = "created"
    COMPLETED = "completed"


@dataclass(frozen=True)
class Question:
    """
    객관식 문항 1개.
    wire 포맷: {"id", "question", "options", "correctAnswer"}
    """
    id: QuestionId
    prompt: str
    options: tuple[str, ...]
    correct_answer: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Question":
        if not isinstance(data, dict):
            raise InvalidInputError("question must be an object")
        if "id" not in data:
            raise InvalidInputError("question.id is required")
        options = data.get("options") or []
        if not isinstance(options, (list, tuple)):
            raise InvalidInputError(f"question {data['id']}: options must be a list")
        correct = data.get("correctAnswer")
        if isinstance(correct, bool) or not isinstance(correct, int):
            raise InvalidInputError(f"question {data['id']}: correctAnswer must be an integer")
        return cls(
            id=data["id"],
            prompt=str(data.get("question") or ""),
            options=tuple(str(o) for o in options),
            correct_answer=correct,
        )

    def to_dict(self, *, include_answer: bool = True) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "question": self.prompt,
            "options": list(self.options),
        }
        if include_answer:
            out["correctAnswer"] = self.correct_answer
        return out


class Role(str, Enum):
    STUDENT = "student"
    INSTRUCTOR = "instructor"
    ADMIN = "admin"


PRIVILEGED_ROLES = (Role.INSTRUCTOR, Role.ADMIN)


def is_privileged_role(role: Any) -> bool:
    """instructor/admin 여부. 알 수 없는 role 은 학습자로 취급."""
    return str(getattr(role, "value", role) or "").lower() in {r.value for r in PRIVILEGED_ROLES}


@dataclass(frozen=True)
class SubmittedAnswer:
    question_id: QuestionId
    selected_option_index: Optional[int]

    @classmethod
    def from_dict(cls, data: Any) -> "SubmittedAnswer":
        """
        {"questionId", "selectedOptionIndex"} 파싱.
        legacy 클라이언트의 "selectedOption" 키도 허용.
        """
        if isinstance(data, SubmittedAnswer):
            return data
        if not isinstance(data, dict):
            raise InvalidInputError("each answer must be an object")
        if data.get("questionId") is None:
            raise InvalidInputError("answer.questionId is required")
        selected = data.get("selectedOptionIndex", data.get("selectedOption"))
        if selected is not None and (isinstance(selected, bool) or not isinstance(selected, int)):
            raise InvalidInputError(
                f"answer {data['questionId']}: selectedOptionIndex must be an integer or null"
            )
        return cls(question_id=data["questionId"], selected_option_index=selected)

    def to_dict(self) -> dict[str, Any]:
        return {
            "questionId": self.question_id,
            "selectedOptionIndex": self.selected_option_index,
        }


@dataclass(frozen=True)
class AssessmentDefinition:
    """
    시험 정의 (버전 단위 immutable).
    max_attempts == 0 이면 무제한.
    """
    id: int
    module_id: Optional[int]
    title: str
    questions: tuple[Question, ...]
    passing_score: int = 70
    max_attempts: int = 1
    time_limit: Optional[int] = None
    due_date: Optional[datetime] = None
    randomize_questions: bool = False
    show_answers: AnswerVisibility = AnswerVisibility.AFTER_SUBMISSION
    is_published: bool = False

    def validate(self) -> None:
        """
        정의 불변식 검증. 위반 시 InvalidInputError.
        - passing_score ∈ [0, 100]
        - max_attempts >= 0
        - 문항 correct_answer는 options 범위 내 인덱스
        - 문항 id 중복 금지
        """
        if not 0 <= int(self.passing_score) <= 100:
            raise InvalidInputError("passingScore must be between 0 and 100")
        if int(self.max_attempts) < 0:
            raise InvalidInputError("maxAttempts must be >= 0")
        seen: set = set()
        for q in self.questions:
            if q.id in seen:
                raise InvalidInputError(f"duplicate question id: {q.id}")
            seen.add(q.id)
            if not 0 <= q.correct_answer < len(q.options):
                raise InvalidInputError(
                    f"question {q.id}: correctAnswer {q.correct_answer} is not a valid option index"
                )

    @property
    def has_attempt_limit(self) -> bool:
        return int(self.max_attempts) > 0

    def is_past_due(self, now: datetime) -> bool:
        return self.due_date is not None and now > self.due_date

    def next_attempt_number(self, taken: Iterable[int]) -> int:
        """
        다음 attempt 슬롯 번호.
        기본은 사용된 최대 번호 + 1. 한도가 있고 그 값이 한도를 넘으면
        (관리자가 중간 attempt 를 삭제한 경우) 1..max_attempts 중 가장 작은 빈 번호.
        빈 번호가 없으면 한도 + 1 (호출측 한도 검사가 먼저 막음).
        """
        used = {int(n) for n in taken}
        candidate = max(used, default=0) + 1
        if not self.has_attempt_limit or candidate <= int(self.max_attempts):
            return candidate
        for n in range(1, int(self.max_attempts) + 1):
            if n not in used:
                return n
        return candidate

    def find_question(self, question_id: QuestionId) -> Optional[Question]:
        # 선형 탐색. id 중복은 validate()에서 차단됨
        for q in self.questions:
            if q.id == question_id:
                return q
        return None


@dataclass
class AssessmentAttempt:
    """
    학습자의 1회 응시 엔티티.
    completed_at != None 이 유일한 terminal 표식.
    """
    learner_id: int
    assessment_id: int
    started_at: datetime
    attempt_number: int = 1
    id: Optional[int] = None
    completed_at: Optional[datetime] = None
    answers: list[SubmittedAnswer] = field(default_factory=list)
    score: Optional[int] = None
    passed: bool = False
    time_spent: Optional[int] = None

    @property
    def state(self) -> AttemptState:
        return AttemptState.COMPLETED if self.completed_at is not None else AttemptState.CREATED

    def is_completed(self) -> bool:
        return self.state is AttemptState.COMPLETED

    def belongs_to(self, learner_id: int) -> bool:
        return str(self.learner_id) == str(learner_id)

    def complete(
        self,
        *,
        answers: list[SubmittedAnswer],
        score: int,
        passed: bool,
        time_spent: int,
        now: datetime,
    ) -> None:
        """Created → Completed. 이미 Completed면 AlreadySubmittedError."""
        if self.is_completed():
            raise AlreadySubmittedError(f"attempt {self.id} has already been submitted")
        self.answers = list(answers)
        self.score = score
        self.passed = passed
        self.time_spent = time_spent
        self.completed_at = now

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "learnerId": self.learner_id,
            "assessmentId": self.assessment_id,
            "attemptNumber": self.attempt_number,
            "state": self.state.value,
            "startedAt": self.started_at.isoformat() if self.started_at else None,
            "completedAt": self.completed_at.isoformat() if self.completed_at else None,
            "answers": [a.to_dict() for a in self.answers],
            "score": self.score,
            "passed": self.passed,
            "timeSpent": self.time_spent,
        }
