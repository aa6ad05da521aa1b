from rest_framework import status

from hr_portal.audit.models import AuditLog
from tests.mixins import ROLE_EMPLOYEE
from tests.mixins import ROLE_MANAGER
from tests.mixins import RoleAPITestCase


class UserViewSetTests(RoleAPITestCase):
    def test_me_includes_groups_and_employee(self):
        response = self.get("api:user-me", role=ROLE_EMPLOYEE)
        self.assert_http_status(response, status.HTTP_200_OK)
        assert response.data["username"] == "employee"
        assert response.data["groups"] == ["Employee"]
        assert response.data["employee_id"] == self.employee.pk

    def test_manager_lists_everyone(self):
        response = self.get("api:user-list", role=ROLE_MANAGER)
        self.assert_http_status(response, status.HTTP_200_OK)
        assert len(response.data) == len(self.roles)

    def test_employee_lists_only_self(self):
        response = self.get("api:user-list", role=ROLE_EMPLOYEE)
        assert [row["username"] for row in response.data] == ["employee"]

    def test_update_keeps_user_type_and_audits(self):
        response = self.patch(
            "api:user-detail",
            role=ROLE_EMPLOYEE,
            reverse_kwargs={"username": "employee"},
            payload={"first_name": "Eve", "user_type": "manager"},
        )
        self.assert_http_status(response, status.HTTP_200_OK)
        user = self.roles[ROLE_EMPLOYEE].user
        user.refresh_from_db()
        assert user.first_name == "Eve"
        assert user.user_type == "employee"
        assert AuditLog.objects.filter(action="user_updated").exists()

    def test_cannot_see_other_users(self):
        response = self.get(
            "api:user-detail",
            role=ROLE_EMPLOYEE,
            reverse_kwargs={"username": "manager"},
        )
        self.assert_http_status(response, status.HTTP_404_NOT_FOUND)
