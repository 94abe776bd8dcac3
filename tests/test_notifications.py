import pytest
from django.utils import timezone

from apps.domains.assessments.models import AssessmentAttempt
from apps.domains.notifications.models import Notification
from apps.domains.notifications.tasks import notify_assessment_graded

pytestmark = pytest.mark.django_db


def notify(user, title="t", **extra):
    return Notification.objects.create(user=user, title=title, message="m", **extra)


class TestGradedNotificationTask:
    def test_failed_attempt_message(self, student, make_assessment):
        a = make_assessment(passing_score=70)
        attempt = AssessmentAttempt.objects.create(
            assessment=a,
            learner=student,
            attempt_number=1,
            started_at=timezone.now(),
            completed_at=timezone.now(),
            score=25,
            passed=False,
        )

        nid = notify_assessment_graded.delay(attempt.id).get()

        n = Notification.objects.get(id=nid)
        assert n.user_id == student.id
        assert n.type == Notification.Type.ASSESSMENT
        assert "25%" in n.message
        assert "70%" in n.message

    def test_skips_pending_attempt(self, student, make_assessment):
        a = make_assessment()
        attempt = AssessmentAttempt.objects.create(
            assessment=a, learner=student, attempt_number=1, started_at=timezone.now(),
        )
        assert notify_assessment_graded.delay(attempt.id).get() is None
        assert Notification.objects.count() == 0


class TestNotificationApi:
    def test_lists_own_unread_by_default(self, api_client, student, other_student):
        notify(student, "unread")
        notify(student, "read", is_read=True)
        notify(other_student, "someone else")
        api_client.force_authenticate(student)

        body = api_client.get("/api/v1/notifications/").json()
        assert body["count"] == 1
        assert [n["title"] for n in body["results"]] == ["unread"]

        body = api_client.get("/api/v1/notifications/", {"include_read": "true"}).json()
        assert body["count"] == 2

    def test_limit_and_offset(self, api_client, student):
        for i in range(5):
            notify(student, f"n{i}")
        api_client.force_authenticate(student)

        body = api_client.get("/api/v1/notifications/", {"limit": 2, "offset": 1}).json()
        assert body["count"] == 5
        assert len(body["results"]) == 2

        assert api_client.get("/api/v1/notifications/", {"limit": "x"}).status_code == 400

    def test_mark_read(self, api_client, student, other_student):
        mine = notify(student)
        theirs = notify(other_student)
        api_client.force_authenticate(student)

        res = api_client.post(f"/api/v1/notifications/{mine.id}/read/")
        assert res.status_code == 200
        assert res.json()["is_read"] is True

        assert api_client.post(f"/api/v1/notifications/{theirs.id}/read/").status_code == 404
        theirs.refresh_from_db()
        assert theirs.is_read is False

    def test_mark_all_read(self, api_client, student):
        notify(student)
        notify(student)
        api_client.force_authenticate(student)

        assert api_client.post("/api/v1/notifications/read-all/").json() == {"updated": 2}
        assert not Notification.objects.filter(user=student, is_read=False).exists()

    def test_delete_own_only(self, api_client, student, other_student):
        mine = notify(student)
        theirs = notify(other_student)
        api_client.force_authenticate(student)

        assert api_client.delete(f"/api/v1/notifications/{theirs.id}/").status_code == 404
        assert api_client.delete(f"/api/v1/notifications/{mine.id}/").status_code == 204
        assert list(Notification.objects.values_list("id", flat=True)) == [theirs.id]
