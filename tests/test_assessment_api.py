from datetime import timedelta

import pytest
from django.utils import timezone

from apps.domains.assessments.models import Assessment, AssessmentAttempt
from apps.domains.notifications.models import Notification

pytestmark = pytest.mark.django_db

PERFECT = [
    {"questionId": 1, "selectedOptionIndex": 1},
    {"questionId": 2, "selectedOptionIndex": 3},
    {"questionId": 3, "selectedOptionIndex": 1},
    {"questionId": 4, "selectedOptionIndex": 2},
]


def start(client, assessment_id):
    return client.post(f"/api/v1/assessments/{assessment_id}/attempt/")


def submit(client, attempt_id, answers):
    return client.post(f"/api/v1/assessments/attempts/{attempt_id}/", {"answers": answers}, format="json")


@pytest.fixture
def as_student(api_client, student):
    api_client.force_authenticate(student)
    return api_client


class TestStartAttemptApi:
    def test_created_without_answers(self, as_student, make_assessment):
        a = make_assessment()
        res = start(as_student, a.id)

        assert res.status_code == 201
        body = res.json()
        assert body["attempt"]["attemptNumber"] == 1
        assert body["attempt"]["completedAt"] is None
        assert body["timeLimit"] == 30
        assert len(body["questions"]) == 4
        assert all("correctAnswer" not in q for q in body["questions"])

    def test_limit(self, as_student, make_assessment):
        a = make_assessment(max_attempts=1)
        assert start(as_student, a.id).status_code == 201

        res = start(as_student, a.id)
        assert res.status_code == 400
        assert res.json() == {"detail": "Maximum number of attempts (1) reached", "code": "ATTEMPT_LIMIT_EXCEEDED"}
        assert AssessmentAttempt.objects.filter(assessment=a).count() == 1

    def test_past_due(self, as_student, make_assessment):
        a = make_assessment(due_date=timezone.now() - timedelta(minutes=1))
        res = start(as_student, a.id)
        assert res.status_code == 400
        assert res.json()["code"] == "PAST_DUE"

    def test_missing_or_unpublished(self, as_student, make_assessment):
        draft = make_assessment(is_published=False)
        assert start(as_student, 9999).json()["code"] == "NOT_FOUND"
        res = start(as_student, draft.id)
        assert res.status_code == 404

    def test_requires_authentication(self, api_client, make_assessment):
        a = make_assessment()
        assert start(api_client, a.id).status_code in (401, 403)
        assert AssessmentAttempt.objects.count() == 0


class TestSubmitAttemptApi:
    @pytest.fixture
    def attempt_id(self, as_student, make_assessment):
        a = make_assessment()
        return start(as_student, a.id).json()["attempt"]["id"]

    def test_graded(self, as_student, attempt_id):
        res = submit(as_student, attempt_id, PERFECT[:3])

        assert res.status_code == 200
        body = res.json()
        assert body["score"] == 75
        assert body["passed"] is True
        assert body["correctCount"] == 3
        assert body["totalQuestions"] == 4
        assert body["attempt"]["completedAt"] is not None
        assert [c["questionId"] for c in body["correctAnswers"]] == [1, 2, 3, 4]

    def test_legacy_selected_option_key(self, as_student, attempt_id):
        legacy = [{"questionId": a["questionId"], "selectedOption": a["selectedOptionIndex"]} for a in PERFECT]
        res = submit(as_student, attempt_id, legacy)

        assert res.status_code == 200
        assert res.json()["score"] == 100
        assert res.json()["attempt"]["state"] == "completed"

    def test_second_submit(self, as_student, attempt_id):
        submit(as_student, attempt_id, [])
        res = submit(as_student, attempt_id, PERFECT)
        assert res.status_code == 400
        assert res.json()["code"] == "ALREADY_SUBMITTED"
        assert AssessmentAttempt.objects.get(id=attempt_id).score == 0

    def test_not_owner(self, api_client, other_student, attempt_id):
        api_client.force_authenticate(other_student)
        res = submit(api_client, attempt_id, PERFECT)
        assert res.status_code == 403
        assert res.json()["code"] == "FORBIDDEN"

    def test_missing_answers(self, as_student, attempt_id):
        res = as_student.post(f"/api/v1/assessments/attempts/{attempt_id}/", {}, format="json")
        assert res.status_code == 400
        assert res.json() == {"detail": "Please provide answers array", "code": "INVALID_INPUT"}

    def test_unknown_attempt(self, as_student):
        res = submit(as_student, 424242, [])
        assert res.status_code == 404

    def test_never_policy_hides_answers(self, as_student, make_assessment):
        a = make_assessment(title="Hidden", show_answers=Assessment.ShowAnswers.NEVER)
        attempt_id = start(as_student, a.id).json()["attempt"]["id"]
        assert submit(as_student, attempt_id, PERFECT).json()["correctAnswers"] is None

    def test_notification_after_commit(self, as_student, student, attempt_id, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            res = submit(as_student, attempt_id, PERFECT)
        assert res.status_code == 200

        n = Notification.objects.get(user=student)
        assert n.type == Notification.Type.SUCCESS
        assessment_id = AssessmentAttempt.objects.get(id=attempt_id).assessment_id
        assert n.data == {"assessmentId": assessment_id, "attemptId": attempt_id, "score": 100, "passed": True}


class TestListAttemptsApi:
    def test_scoped_by_role(self, api_client, student, other_student, instructor, make_assessment):
        a = make_assessment(max_attempts=0)
        for user in (student, other_student, student):
            api_client.force_authenticate(user)
            start(api_client, a.id)

        api_client.force_authenticate(student)
        mine = api_client.get(f"/api/v1/assessments/{a.id}/attempts/").json()
        assert len(mine) == 2
        assert {row["learnerId"] for row in mine} == {student.id}
        assert mine[0]["id"] > mine[1]["id"]
        assert {row["state"] for row in mine} == {"created"}

        api_client.force_authenticate(instructor)
        assert len(api_client.get(f"/api/v1/assessments/{a.id}/attempts/").json()) == 3

    def test_filters(self, as_student, make_assessment):
        a = make_assessment(max_attempts=0)
        done = start(as_student, a.id).json()["attempt"]["id"]
        submit(as_student, done, PERFECT)
        start(as_student, a.id)

        url = f"/api/v1/assessments/{a.id}/attempts/"
        assert [r["id"] for r in as_student.get(url, {"completed": "true"}).json()] == [done]
        assert len(as_student.get(url, {"completed": "false"}).json()) == 1
        assert [r["id"] for r in as_student.get(url, {"passed": "true"}).json()] == [done]

    def test_missing_assessment(self, as_student):
        assert as_student.get("/api/v1/assessments/9999/attempts/").status_code == 404


class TestAssessmentCrudApi:
    def payload(self, **overrides):
        data = {
            "title": "Network Scanning Techniques Assessment",
            "module_id": 4,
            "time_limit": 20,
            "passing_score": 80,
            "max_attempts": 2,
            "is_published": True,
            "questions": [
                {"id": 1, "question": "Which Nmap scan uses a full handshake?", "options": ["-sS", "-sT"], "correctAnswer": 1},
            ],
        }
        data.update(overrides)
        return data

    def test_student_cannot_create(self, as_student):
        res = as_student.post("/api/v1/assessments/", self.payload(), format="json")
        assert res.status_code == 403
        assert res.json()["code"] == "FORBIDDEN"

    def test_instructor_creates(self, api_client, instructor):
        api_client.force_authenticate(instructor)
        res = api_client.post("/api/v1/assessments/", self.payload(), format="json")

        assert res.status_code == 201
        a = Assessment.objects.get(id=res.json()["id"])
        assert a.published_at is not None
        assert a.questions[0]["correctAnswer"] == 1

    def test_rejects_invalid_correct_answer(self, api_client, instructor):
        api_client.force_authenticate(instructor)
        bad = self.payload(questions=[{"id": 1, "question": "q", "options": ["a", "b"], "correctAnswer": 5}])
        res = api_client.post("/api/v1/assessments/", bad, format="json")
        assert res.status_code == 400
        assert res.json()["code"] == "INVALID_INPUT"
        assert Assessment.objects.count() == 0

    def test_rejects_passing_score_over_100(self, api_client, instructor):
        api_client.force_authenticate(instructor)
        res = api_client.post("/api/v1/assessments/", self.payload(passing_score=120), format="json")
        assert res.status_code == 400

    def test_list_hides_drafts_and_questions(self, as_student, make_assessment):
        make_assessment(title="B published")
        make_assessment(title="A draft", is_published=False)

        rows = as_student.get("/api/v1/assessments/").json()
        assert [r["title"] for r in rows] == ["B published"]
        assert "questions" not in rows[0]
        assert rows[0]["question_count"] == 4

    def test_detail_redaction(self, as_student, api_client, instructor, make_assessment):
        a = make_assessment()
        detail = as_student.get(f"/api/v1/assessments/{a.id}/").json()
        assert all("correctAnswer" not in q for q in detail["questions"])
        assert detail["attempts"] == []

        attempt_id = start(as_student, a.id).json()["attempt"]["id"]
        submit(as_student, attempt_id, [])
        detail = as_student.get(f"/api/v1/assessments/{a.id}/").json()
        assert all("correctAnswer" in q for q in detail["questions"])
        assert [x["id"] for x in detail["attempts"]] == [attempt_id]

        api_client.force_authenticate(instructor)
        assert "correctAnswer" in api_client.get(f"/api/v1/assessments/{a.id}/").json()["questions"][0]

    def test_partial_update(self, api_client, instructor, make_assessment):
        a = make_assessment()
        api_client.force_authenticate(instructor)
        res = api_client.patch(f"/api/v1/assessments/{a.id}/", {"max_attempts": 5}, format="json")
        assert res.status_code == 200
        a.refresh_from_db()
        assert a.max_attempts == 5

    def test_only_admin_deletes(self, api_client, instructor, admin_user, student, make_assessment):
        a = make_assessment()
        api_client.force_authenticate(student)
        start(api_client, a.id)

        api_client.force_authenticate(instructor)
        assert api_client.delete(f"/api/v1/assessments/{a.id}/").status_code == 403

        api_client.force_authenticate(admin_user)
        assert api_client.delete(f"/api/v1/assessments/{a.id}/").status_code == 204
        assert not Assessment.objects.filter(id=a.id).exists()
        assert AssessmentAttempt.objects.count() == 0
