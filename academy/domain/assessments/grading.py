"""
채점 / 정답 공개 정책: 순수 함수 (Django 미사용)

✅ 정답 redaction 규칙은 여기 한 곳에서만 정의한다.
- start_attempt 문항 목록
- submit_attempt 정답 공개
- assessment 상세 조회
세 경로 모두 answers_disclosed / present_questions 를 사용.
"""
from __future__ import annotations

import math
import random
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Optional, Sequence

from academy.domain.assessments.entities import (
    AnswerVisibility,
    AssessmentDefinition,
    Question,
    SubmittedAnswer,
)


@dataclass(frozen=True)
class GradeOutcome:
    correct_count: int
    total_questions: int
    score: int
    passed: bool


def round_half_up(value: float) -> int:
    # 0.5는 항상 올림 (은행가 반올림 금지)
    return int(math.floor(value + 0.5))


def grade_answers(
    definition: AssessmentDefinition,
    answers: Iterable[SubmittedAnswer],
) -> GradeOutcome:
    """
    questionId 매칭 채점.

    - 분모는 제출 답안 수가 아니라 정의의 전체 문항 수 (미응답 = 오답)
    - 정의에 없는 questionId 는 무시
    - 같은 questionId 를 여러 번 보내도 1회만 인정
    """
    correct = 0
    counted: set = set()
    for ans in answers:
        if ans.question_id in counted:
            continue
        q = definition.find_question(ans.question_id)
        if q is None:
            continue
        counted.add(ans.question_id)
        if ans.selected_option_index is not None and ans.selected_option_index == q.correct_answer:
            correct += 1

    total = len(definition.questions)
    score = round_half_up(correct / total * 100) if total > 0 else 0
    return GradeOutcome(
        correct_count=correct,
        total_questions=total,
        score=score,
        passed=score >= int(definition.passing_score),
    )


def compute_time_spent(started_at: datetime, now: datetime) -> tuple[int, bool]:
    """
    (초 단위 소요 시간, clamp 여부).
    now < started_at 이면 0 으로 clamp.
    """
    seconds = round_half_up((now - started_at).total_seconds())
    if seconds < 0:
        return 0, True
    return seconds, False


def answers_disclosed(
    definition: AssessmentDefinition,
    now: datetime,
    *,
    has_submitted: bool = True,
) -> bool:
    """
    정답 공개 여부 (학습자 기준).

    - never: 항상 비공개
    - after_submission: 제출 완료한 학습자에게 공개
    - after_due_date: due_date 가 있고 now >= due_date 일 때만 공개
    """
    policy = AnswerVisibility(definition.show_answers)
    if policy == AnswerVisibility.AFTER_SUBMISSION:
        return bool(has_submitted)
    if policy == AnswerVisibility.AFTER_DUE_DATE:
        return definition.due_date is not None and now >= definition.due_date
    return False


def can_view_answers(
    definition: AssessmentDefinition,
    now: datetime,
    *,
    privileged: bool,
    has_submitted: bool,
) -> bool:
    """강사/관리자는 항상 공개, 그 외는 answers_disclosed 정책."""
    if privileged:
        return True
    return answers_disclosed(definition, now, has_submitted=has_submitted)


def present_questions(
    questions: Sequence[Question],
    *,
    reveal_answers: bool,
) -> list[dict[str, Any]]:
    """문항 목록 직렬화. reveal_answers=False 면 correctAnswer 키 자체를 제거."""
    return [q.to_dict(include_answer=reveal_answers) for q in questions]


def display_order(
    definition: AssessmentDefinition,
    rng: Optional[random.Random] = None,
) -> list[Question]:
    """
    randomize_questions 가 켜져 있으면 serve 시점에 섞는다 (저장하지 않음).
    채점은 questionId 기준이라 순서와 무관: 표시 전용.
    """
    questions = list(definition.questions)
    if definition.randomize_questions:
        (rng or random.Random()).shuffle(questions)
    return questions


def correct_answer_list(definition: AssessmentDefinition) -> list[dict[str, Any]]:
    """공개 시 전체 문항의 {questionId, correctAnswer} (제출한 문항만이 아님)."""
    return [
        {"questionId": q.id, "correctAnswer": q.correct_answer}
        for q in definition.questions
    ]
