from datetime import timedelta

from django.utils import timezone

from hr_portal.audit.models import AuditLog
from tests.mixins import ROLE_EMPLOYEE
from tests.mixins import ROLE_MANAGER
from tests.mixins import ROLE_TEAM_LEAD
from tests.mixins import RoleAPITestCase


class RecentAuditTests(RoleAPITestCase):
    url_name = "api_v1:audit:recent"

    def _seed(self, count, model_name="LeaveRequest"):
        base = timezone.now()
        for i in range(count):
            row = AuditLog.objects.create(
                action=f"test_action_{i}", model_name=model_name, record_id=i
            )
            AuditLog.objects.filter(pk=row.pk).update(
                created_at=base + timedelta(seconds=i)
            )

    def test_requires_elevated_or_team_lead(self):
        denied = self.get(self.url_name, role=ROLE_EMPLOYEE)
        self.assert_http_status(denied, 403)
        allowed = self.get(self.url_name, role=ROLE_TEAM_LEAD)
        self.assert_http_status(allowed, 200)

    def test_returns_latest_five_by_default(self):
        self._seed(6)
        response = self.get(self.url_name, role=ROLE_MANAGER)
        self.assert_http_status(response, 200)
        assert response.data["limit"] == 5  # noqa: PLR2004
        actions = [row["action"] for row in response.data["results"]]
        assert actions == [f"test_action_{i}" for i in (5, 4, 3, 2, 1)]

    def test_limit_is_clamped_and_model_filtered(self):
        self._seed(3)
        self._seed(2, model_name="OvertimeRequest")
        response = self.get(
            self.url_name, role=ROLE_MANAGER, data={"limit": 500, "model": "Overtime"}
        )
        assert response.data["limit"] == 50  # noqa: PLR2004
        assert response.data["results"] == []

        response = self.get(
            self.url_name,
            role=ROLE_MANAGER,
            data={"limit": "abc", "model": "OvertimeRequest"},
        )
        assert response.data["limit"] == 5  # noqa: PLR2004
        assert {row["model_name"] for row in response.data["results"]} == {
            "OvertimeRequest"
        }

    def test_actor_is_serialized(self):
        AuditLog.objects.create(
            action="employee_updated", actor=self.roles[ROLE_MANAGER].user
        )
        response = self.get(self.url_name, role=ROLE_MANAGER)
        actor = response.data["results"][0]["actor"]
        assert actor["email"] == "manager@example.com"
        assert actor["user_type"] == "manager"
