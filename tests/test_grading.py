from datetime import timedelta

import pytest

from academy.domain.assessments.entities import (
    AnswerVisibility,
    AssessmentAttempt,
    AttemptState,
    Question,
    SubmittedAnswer,
)
from academy.domain.assessments.errors import AlreadySubmittedError, InvalidInputError
from academy.domain.assessments.grading import (
    answers_disclosed,
    can_view_answers,
    compute_time_spent,
    grade_answers,
    present_questions,
    round_half_up,
)

from tests.conftest import NOW, make_definition, make_questions


def answers(*pairs):
    return [SubmittedAnswer(question_id=q, selected_option_index=s) for q, s in pairs]


class TestGradeAnswers:
    def test_three_of_four_correct(self):
        outcome = grade_answers(make_definition(), answers((1, 1), (2, 3), (3, 1), (4, 0)))
        assert outcome.correct_count == 3
        assert outcome.total_questions == 4
        assert outcome.score == 75
        assert outcome.passed is True

    def test_two_question_half_score_passes_at_fifty(self):
        definition = make_definition(questions=make_questions((0, 1)), passing_score=50)
        outcome = grade_answers(definition, answers((1, 0), (2, 0)))
        assert (outcome.correct_count, outcome.total_questions, outcome.score, outcome.passed) == (1, 2, 50, True)

        empty = grade_answers(definition, [])
        assert (empty.correct_count, empty.total_questions, empty.score) == (0, 2, 0)

    def test_unanswered_questions_count_as_wrong(self):
        outcome = grade_answers(make_definition(), answers((1, 1)))
        assert outcome.score == 25
        assert outcome.passed is False

    def test_empty_answers(self):
        outcome = grade_answers(make_definition(), [])
        assert (outcome.correct_count, outcome.score, outcome.passed) == (0, 0, False)

    def test_zero_passing_score_passes_with_nothing(self):
        outcome = grade_answers(make_definition(passing_score=0), [])
        assert outcome.passed is True

    def test_unknown_question_ids_ignored(self):
        outcome = grade_answers(make_definition(), answers((99, 1), ("x", 0), (1, 1)))
        assert outcome.correct_count == 1
        assert outcome.total_questions == 4

    def test_repeated_question_id_counted_once(self):
        outcome = grade_answers(make_definition(), answers((1, 1), (1, 1), (1, 1)))
        assert outcome.correct_count == 1
        assert outcome.score == 25

    def test_first_answer_wins_for_repeated_id(self):
        outcome = grade_answers(make_definition(), answers((1, 0), (1, 1)))
        assert outcome.correct_count == 0

    def test_null_selection_is_wrong(self):
        outcome = grade_answers(make_definition(), answers((1, None)))
        assert outcome.correct_count == 0

    def test_no_questions(self):
        outcome = grade_answers(make_definition(questions=(), passing_score=50), [])
        assert (outcome.total_questions, outcome.score, outcome.passed) == (0, 0, False)

    def test_score_rounds_half_up(self):
        # 1/8 = 12.5 → 13
        definition = make_definition(questions=make_questions((0,) * 8))
        assert grade_answers(definition, answers((1, 0))).score == 13
        # 2/3 = 66.67 → 67
        definition = make_definition(questions=make_questions((0, 0, 0)))
        assert grade_answers(definition, answers((1, 0), (2, 0))).score == 67

    def test_passing_score_boundary_is_inclusive(self):
        outcome = grade_answers(make_definition(passing_score=75), answers((1, 1), (2, 3), (3, 1)))
        assert outcome.score == 75
        assert outcome.passed is True


class TestRoundHalfUp:
    @pytest.mark.parametrize("value,expected", [(0.5, 1), (1.5, 2), (2.5, 3), (2.49, 2), (0.0, 0)])
    def test_values(self, value, expected):
        assert round_half_up(value) == expected


class TestTimeSpent:
    def test_whole_seconds(self):
        assert compute_time_spent(NOW, NOW + timedelta(minutes=1, seconds=30)) == (90, False)

    def test_half_second_rounds_up(self):
        assert compute_time_spent(NOW, NOW + timedelta(seconds=2, milliseconds=500)) == (3, False)

    def test_negative_clamped(self):
        assert compute_time_spent(NOW, NOW - timedelta(seconds=5)) == (0, True)


class TestDisclosure:
    def test_never(self):
        d = make_definition(show_answers=AnswerVisibility.NEVER)
        assert answers_disclosed(d, NOW, has_submitted=True) is False

    def test_after_submission(self):
        d = make_definition(show_answers=AnswerVisibility.AFTER_SUBMISSION)
        assert answers_disclosed(d, NOW, has_submitted=True) is True
        assert answers_disclosed(d, NOW, has_submitted=False) is False

    def test_after_due_date(self):
        d = make_definition(show_answers=AnswerVisibility.AFTER_DUE_DATE, due_date=NOW)
        assert answers_disclosed(d, NOW - timedelta(seconds=1)) is False
        assert answers_disclosed(d, NOW) is True

    def test_after_due_date_without_due_date_never_discloses(self):
        d = make_definition(show_answers=AnswerVisibility.AFTER_DUE_DATE, due_date=None)
        assert answers_disclosed(d, NOW + timedelta(days=3650)) is False

    def test_privileged_always_sees_answers(self):
        d = make_definition(show_answers=AnswerVisibility.NEVER)
        assert can_view_answers(d, NOW, privileged=True, has_submitted=False) is True
        assert can_view_answers(d, NOW, privileged=False, has_submitted=True) is False

    def test_present_questions_drops_key(self):
        out = present_questions(make_questions(), reveal_answers=False)
        assert all("correctAnswer" not in q for q in out)
        assert out[0] == {"id": 1, "question": "Question 1", "options": ["A", "B", "C", "D"]}


class TestEntities:
    def test_definition_rejects_out_of_range_correct_answer(self):
        d = make_definition(questions=(Question(id=1, prompt="q", options=("a", "b"), correct_answer=2),))
        with pytest.raises(InvalidInputError, match="not a valid option index"):
            d.validate()

    def test_definition_rejects_duplicate_question_ids(self):
        q = Question(id=1, prompt="q", options=("a", "b"), correct_answer=0)
        with pytest.raises(InvalidInputError, match="duplicate question id"):
            make_definition(questions=(q, q)).validate()

    def test_definition_rejects_passing_score_over_100(self):
        with pytest.raises(InvalidInputError):
            make_definition(passing_score=101).validate()

    def test_submitted_answer_accepts_legacy_key(self):
        a = SubmittedAnswer.from_dict({"questionId": 3, "selectedOption": 2})
        assert a == SubmittedAnswer(question_id=3, selected_option_index=2)

    @pytest.mark.parametrize("payload", [{"selectedOptionIndex": 1}, {"questionId": 1, "selectedOptionIndex": "1"}, "x"])
    def test_submitted_answer_rejects_bad_shape(self, payload):
        with pytest.raises(InvalidInputError):
            SubmittedAnswer.from_dict(payload)

    def test_attempt_complete_is_one_shot(self):
        attempt = AssessmentAttempt(learner_id=1, assessment_id=1, started_at=NOW, id=5)
        assert attempt.state is AttemptState.CREATED
        attempt.complete(answers=[], score=0, passed=False, time_spent=0, now=NOW)
        with pytest.raises(AlreadySubmittedError):
            attempt.complete(answers=[], score=100, passed=True, time_spent=0, now=NOW)
        assert attempt.score == 0
        assert attempt.state is AttemptState.COMPLETED
        assert attempt.to_dict()["state"] == "completed"


class TestNextAttemptNumber:
    @pytest.mark.parametrize(
        "max_attempts,taken,expected",
        [
            (3, [], 1),
            (3, [1, 2], 3),
            (3, [2, 3], 1),  # #1 삭제됨
            (3, [1, 3], 2),
            (0, [2, 3], 4),  # 무제한: 항상 최대 + 1
            (2, [1, 2], 3),  # 빈 슬롯 없음 (한도 검사가 먼저 막음)
        ],
    )
    def test_slots(self, max_attempts, taken, expected):
        assert make_definition(max_attempts=max_attempts).next_attempt_number(taken) == expected
