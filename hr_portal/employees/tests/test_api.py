from rest_framework import status

from hr_portal.attendance.models import MonthlyAttendance
from hr_portal.audit.models import AuditLog
from hr_portal.employees.models import Employee
from hr_portal.employees.models import TeamMembership
from hr_portal.policies.accessors import portal_now
from tests.mixins import ROLE_ADMIN
from tests.mixins import ROLE_EMPLOYEE
from tests.mixins import ROLE_MANAGER
from tests.mixins import ROLE_OUTSIDER
from tests.mixins import ROLE_TEAM_LEAD
from tests.mixins import RoleAPITestCase

EMPLOYEES_URL = "/api/v1/employees/"
TEAM_URL = "/api/v1/team-lead/"
AVAILABLE_URL = "/api/v1/team-lead/available/"


def detail_url(identifier) -> str:
    return f"{EMPLOYEES_URL}{identifier}/"


class EmployeeListTests(RoleAPITestCase):
    def _codes(self, response):
        return {row["employee_id"] for row in response.data["results"]}

    def test_manager_sees_everyone_with_pagination_block(self):
        self.authenticate(ROLE_MANAGER)
        response = self.client.get(EMPLOYEES_URL)
        self.assert_http_status(response, status.HTTP_200_OK)
        assert response.data["pagination"]["total"] == Employee.objects.count()
        assert response.data["pagination"]["page"] == 1
        assert "OUTSIDER" in self._codes(response)

    def test_limit_controls_page_size(self):
        self.authenticate(ROLE_ADMIN)
        response = self.client.get(EMPLOYEES_URL, {"limit": 2, "page": 2})
        self.assert_http_status(response, status.HTTP_200_OK)
        assert len(response.data["results"]) == 2
        assert response.data["pagination"]["total_pages"] == 3

    def test_team_lead_sees_self_and_team(self):
        self.authenticate(ROLE_TEAM_LEAD)
        response = self.client.get(EMPLOYEES_URL)
        assert self._codes(response) == {"LEAD", "EMPLOYEE"}

    def test_employee_sees_only_self(self):
        self.authenticate(ROLE_EMPLOYEE)
        response = self.client.get(EMPLOYEES_URL)
        assert self._codes(response) == {"EMPLOYEE"}

    def test_rows_carry_month_summary(self):
        MonthlyAttendance.objects.create(
            employee=self.employee,
            month=3,
            year=2025,
            total_days=26,
            working_days=12,
            leaves=1,
        )
        self.authenticate(ROLE_MANAGER)
        response = self.client.get(
            EMPLOYEES_URL, {"month": 3, "year": 2025, "search": "employee"}
        )
        self.assert_http_status(response, status.HTTP_200_OK)
        (row,) = response.data["results"]
        assert row["working_days"] == 12
        assert row["leaves"] == 1
        assert row["total_days"] == 26

    def test_rows_without_summary_are_zeroed(self):
        self.authenticate(ROLE_MANAGER)
        response = self.client.get(
            EMPLOYEES_URL, {"month": 3, "year": 2025, "search": "outsider"}
        )
        (row,) = response.data["results"]
        assert row["working_days"] == 0
        assert row["missed_days"] == 0
        assert row["total_days"] > 0

    def test_status_all_does_not_filter(self):
        Employee.objects.filter(employee_id="OUTSIDER").update(
            status=Employee.Status.INACTIVE
        )
        self.authenticate(ROLE_MANAGER)
        everyone = self.client.get(EMPLOYEES_URL, {"status": "all"})
        inactive = self.client.get(EMPLOYEES_URL, {"status": "Inactive"})
        assert "OUTSIDER" in self._codes(everyone)
        assert self._codes(inactive) == {"OUTSIDER"}


class EmployeeDetailTests(RoleAPITestCase):
    def test_retrieve_by_code_includes_attendance_and_logs(self):
        self.authenticate(ROLE_MANAGER)
        response = self.client.get(detail_url("employee"))
        self.assert_http_status(response, status.HTTP_200_OK)
        assert response.data["employee_id"] == "EMPLOYEE"
        assert response.data["manager_name"] == "Manager"
        assert "attendance" in response.data
        assert response.data["work_logs"] == []

    def test_retrieve_by_primary_key(self):
        self.authenticate(ROLE_MANAGER)
        response = self.client.get(detail_url(self.employee.pk))
        self.assert_http_status(response, status.HTTP_200_OK)
        assert response.data["id"] == self.employee.pk

    def test_outsider_cannot_see_other_employee(self):
        self.authenticate(ROLE_OUTSIDER)
        response = self.client.get(detail_url("EMPLOYEE"))
        self.assert_http_status(response, status.HTTP_404_NOT_FOUND)

    def test_create_opens_month_summary_and_audits(self):
        self.authenticate(ROLE_MANAGER)
        payload = {
            "employee_id": "DS100",
            "name": "New Hire",
            "designation": "Engineer",
            "work_mode": Employee.WorkMode.HYBRID,
            "manager": self.manager.pk,
        }
        response = self.client.post(EMPLOYEES_URL, payload, format="json")
        self.assert_http_status(response, status.HTTP_201_CREATED)
        employee = Employee.objects.get(employee_id="DS100")
        now = portal_now()
        assert MonthlyAttendance.objects.filter(
            employee=employee, month=now.month, year=now.year
        ).exists()
        assert AuditLog.objects.filter(
            action="employee_created", record_id=employee.pk
        ).exists()

    def test_non_elevated_users_cannot_write(self):
        self.authenticate(ROLE_TEAM_LEAD)
        response = self.client.post(
            EMPLOYEES_URL, {"employee_id": "X1", "name": "X"}, format="json"
        )
        self.assert_http_status(response, status.HTTP_403_FORBIDDEN)

    def test_update_records_before_and_after(self):
        self.authenticate(ROLE_ADMIN)
        response = self.client.patch(
            detail_url("EMPLOYEE"), {"designation": "Senior"}, format="json"
        )
        self.assert_http_status(response, status.HTTP_200_OK)
        entry = AuditLog.objects.get(action="employee_updated")
        assert entry.before == {"designation": ""}
        assert entry.after == {"designation": "Senior"}

    def test_employee_cannot_manage_themself(self):
        self.authenticate(ROLE_MANAGER)
        response = self.client.patch(
            detail_url("EMPLOYEE"), {"manager": self.employee.pk}, format="json"
        )
        self.assert_http_status(response, status.HTTP_400_BAD_REQUEST)
        assert "manager" in response.data

    def test_status_change(self):
        self.authenticate(ROLE_MANAGER)
        url = f"{detail_url('EMPLOYEE')}status/"
        response = self.client.patch(url, {"status": "Inactive"}, format="json")
        self.assert_http_status(response, status.HTTP_200_OK)
        self.employee.refresh_from_db()
        assert self.employee.status == Employee.Status.INACTIVE
        assert AuditLog.objects.filter(action="employee_status_changed").exists()

    def test_status_change_rejects_other_values(self):
        self.authenticate(ROLE_MANAGER)
        url = f"{detail_url('EMPLOYEE')}status/"
        response = self.client.patch(url, {"status": "On Leave"}, format="json")
        self.assert_http_status(response, status.HTTP_400_BAD_REQUEST)


class EmployeeProfileTests(RoleAPITestCase):
    url = f"{EMPLOYEES_URL}profile/"

    def test_own_profile_by_email(self):
        self.authenticate(ROLE_EMPLOYEE)
        response = self.client.get(self.url, {"email": "EMPLOYEE@example.com"})
        self.assert_http_status(response, status.HTTP_200_OK)
        assert response.data["employee_id"] == "EMPLOYEE"

    def test_team_lead_sees_member_profile(self):
        self.authenticate(ROLE_TEAM_LEAD)
        response = self.client.get(self.url, {"email": "employee@example.com"})
        self.assert_http_status(response, status.HTTP_200_OK)

    def test_outsider_is_forbidden(self):
        self.authenticate(ROLE_OUTSIDER)
        response = self.client.get(self.url, {"email": "employee@example.com"})
        self.assert_http_status(response, status.HTTP_403_FORBIDDEN)

    def test_email_required(self):
        self.authenticate(ROLE_EMPLOYEE)
        response = self.client.get(self.url)
        self.assert_http_status(response, status.HTTP_400_BAD_REQUEST)

    def test_unknown_email(self):
        self.authenticate(ROLE_MANAGER)
        response = self.client.get(self.url, {"email": "nobody@example.com"})
        self.assert_http_status(response, status.HTTP_404_NOT_FOUND)


class TeamMembersTests(RoleAPITestCase):
    def test_lead_lists_own_members(self):
        self.authenticate(ROLE_TEAM_LEAD)
        response = self.client.get(TEAM_URL)
        self.assert_http_status(response, status.HTTP_200_OK)
        assert response.data["team_lead_id"] == self.team_lead.pk
        codes = [row["employee"]["employee_id"] for row in response.data["members"]]
        assert codes == ["EMPLOYEE"]

    def test_add_and_remove_member(self):
        outsider = self.roles[ROLE_OUTSIDER].employee
        self.authenticate(ROLE_TEAM_LEAD)
        response = self.client.post(
            TEAM_URL, {"employee_id": "OUTSIDER"}, format="json"
        )
        self.assert_http_status(response, status.HTTP_201_CREATED)
        assert TeamMembership.objects.filter(
            team_lead=self.team_lead, employee=outsider, is_active=True
        ).exists()

        response = self.client.delete(f"{TEAM_URL}?employee_id=OUTSIDER")
        self.assert_http_status(response, status.HTTP_204_NO_CONTENT)
        membership = TeamMembership.objects.get(
            team_lead=self.team_lead, employee=outsider
        )
        assert membership.is_active is False

        # re-adding reactivates the same row
        response = self.client.post(
            TEAM_URL, {"employee_id": "OUTSIDER"}, format="json"
        )
        self.assert_http_status(response, status.HTTP_201_CREATED)
        membership.refresh_from_db()
        assert membership.is_active is True

    def test_duplicate_member_rejected(self):
        self.authenticate(ROLE_TEAM_LEAD)
        response = self.client.post(
            TEAM_URL, {"employee_id": "EMPLOYEE"}, format="json"
        )
        self.assert_http_status(response, status.HTTP_400_BAD_REQUEST)

    def test_lead_cannot_add_self(self):
        self.authenticate(ROLE_TEAM_LEAD)
        response = self.client.post(TEAM_URL, {"employee_id": "LEAD"}, format="json")
        self.assert_http_status(response, status.HTTP_400_BAD_REQUEST)

    def test_removing_non_member_is_404(self):
        self.authenticate(ROLE_TEAM_LEAD)
        response = self.client.delete(f"{TEAM_URL}?employee_id=OUTSIDER")
        self.assert_http_status(response, status.HTTP_404_NOT_FOUND)

    def test_lead_cannot_manage_another_team(self):
        self.authenticate(ROLE_TEAM_LEAD)
        response = self.client.get(TEAM_URL, {"team_lead_id": "MANAGER"})
        self.assert_http_status(response, status.HTTP_403_FORBIDDEN)

    def test_manager_manages_any_team(self):
        self.authenticate(ROLE_MANAGER)
        response = self.client.post(
            TEAM_URL,
            {"team_lead_id": "LEAD", "employee_id": "OUTSIDER"},
            format="json",
        )
        self.assert_http_status(response, status.HTTP_201_CREATED)

    def test_employee_is_forbidden(self):
        self.authenticate(ROLE_EMPLOYEE)
        response = self.client.get(TEAM_URL)
        self.assert_http_status(response, status.HTTP_403_FORBIDDEN)


class AvailableEmployeesTests(RoleAPITestCase):
    def test_excludes_lead_and_current_members(self):
        self.authenticate(ROLE_TEAM_LEAD)
        response = self.client.get(AVAILABLE_URL)
        self.assert_http_status(response, status.HTTP_200_OK)
        codes = {row["employee_id"] for row in response.data["results"]}
        assert codes == {"ADMIN", "MANAGER", "OUTSIDER"}
        assert response.data["pagination"]["total"] == 3

    def test_search_narrows_results(self):
        self.authenticate(ROLE_TEAM_LEAD)
        response = self.client.get(AVAILABLE_URL, {"search": "outs"})
        codes = [row["employee_id"] for row in response.data["results"]]
        assert codes == ["OUTSIDER"]
