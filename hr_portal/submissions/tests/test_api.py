from rest_framework import status

from hr_portal.notifications.models import Notification
from hr_portal.submissions.models import WorkSubmission
from tests.factories import create_user_with_role
from tests.mixins import ROLE_EMPLOYEE
from tests.mixins import ROLE_MANAGER
from tests.mixins import ROLE_OUTSIDER
from tests.mixins import ROLE_TEAM_LEAD
from tests.mixins import RoleAPITestCase


class WorkSubmissionWorkflowTests(RoleAPITestCase):
    def _submit(self, role=ROLE_EMPLOYEE, **overrides):
        payload = {
            "workType": "Bug fixing",
            "workDescription": "Fixed the payroll export",
            "priority": "High",
            **overrides,
        }
        return self.post("api_v1:work-submission-list", role=role, payload=payload)

    def _act(self, name, pk, role, payload=None):
        return self.post(
            f"api_v1:work-submission-{name}",
            role=role,
            payload=payload,
            reverse_kwargs={"pk": pk},
        )

    def test_employee_submission_waits_for_team_lead(self):
        res = self._submit()
        self.assert_http_status(res, status.HTTP_201_CREATED)
        assert res.data["status"] == WorkSubmission.Status.PENDING_TEAM_LEAD
        assert res.data["title"] == "Bug fixing"
        assert res.data["department"] == "Engineering"
        assert res.data["team_lead"] == self.team_lead.pk
        assert Notification.objects.filter(
            recipient=self.team_lead.user,
            title="New Work Submission",
            notification_type=Notification.Type.WORK_SUBMISSION,
        ).exists()

    def test_employee_without_team_lead_cannot_submit(self):
        res = self._submit(role=ROLE_OUTSIDER)
        self.assert_http_status(res, status.HTTP_400_BAD_REQUEST)
        assert not WorkSubmission.objects.exists()

    def test_team_lead_submission_goes_straight_to_manager(self):
        res = self._submit(role=ROLE_TEAM_LEAD)
        self.assert_http_status(res, status.HTTP_201_CREATED)
        assert res.data["status"] == WorkSubmission.Status.PENDING_FINAL
        assert res.data["manager"] == self.manager.pk

    def test_team_lead_without_manager_falls_back_to_any_manager(self):
        self.team_lead.manager = None
        self.team_lead.save(update_fields=["manager"])
        res = self._submit(role=ROLE_TEAM_LEAD)
        self.assert_http_status(res, status.HTTP_201_CREATED)
        assert res.data["manager"] == self.manager.pk

    def test_full_approval(self):
        pk = self._submit().data["id"]
        res = self._act("team-lead-approve", pk, ROLE_TEAM_LEAD)
        self.assert_http_status(res, status.HTTP_200_OK)
        assert res.data["submission"]["status"] == WorkSubmission.Status.PENDING_FINAL
        assert Notification.objects.filter(
            recipient=self.manager.user,
            title="Work Submission Pending Final Approval",
        ).exists()

        res = self._act(
            "final-approve", pk, ROLE_MANAGER, {"manager_comments": "Great work"}
        )
        self.assert_http_status(res, status.HTTP_200_OK)
        submission = WorkSubmission.objects.get(pk=pk)
        assert submission.status == WorkSubmission.Status.FINAL_APPROVED
        assert submission.final_approved_date is not None
        note = Notification.objects.get(
            recipient=self.employee.user, title="Work Submission Final Approved"
        )
        assert note.notification_type == Notification.Type.FINAL_APPROVAL
        assert note.message.endswith("Manager comments: Great work")

    def test_team_lead_rejection_records_reason(self):
        pk = self._submit().data["id"]
        res = self._act("team-lead-reject", pk, ROLE_TEAM_LEAD, {})
        self.assert_http_status(res, status.HTTP_200_OK)
        submission = WorkSubmission.objects.get(pk=pk)
        assert submission.status == WorkSubmission.Status.REJECTED_BY_TEAM_LEAD
        assert submission.rejection_reason == "No reason provided"
        assert Notification.objects.filter(
            recipient=self.employee.user,
            notification_type=Notification.Type.WORK_REJECTION,
        ).exists()

    def test_team_lead_of_another_team_is_refused(self):
        other_lead = create_user_with_role("lead2", user_type="team-lead")
        pk = self._submit().data["id"]
        self.client.force_authenticate(user=other_lead.user)
        res = self.client.post(
            f"/api/v1/work-submissions/{pk}/team-lead-approve/", format="json"
        )
        self.assert_http_status(res, status.HTTP_403_FORBIDDEN)

    def test_final_decision_requires_pending_final(self):
        pk = self._submit().data["id"]
        res = self._act("final-reject", pk, ROLE_MANAGER)
        self.assert_http_status(res, status.HTTP_404_NOT_FOUND)

    def test_final_actions_are_manager_only(self):
        pk = self._submit(role=ROLE_TEAM_LEAD).data["id"]
        res = self._act("final-approve", pk, ROLE_TEAM_LEAD)
        self.assert_http_status(res, status.HTTP_403_FORBIDDEN)

    def test_final_approvals_listing(self):
        self._submit()
        pending_final = self._submit(role=ROLE_TEAM_LEAD).data["id"]
        res = self.get(
            "api_v1:work-submission-final-approvals",
            role=ROLE_MANAGER,
            data={"manager_id": self.manager.employee_id},
        )
        self.assert_http_status(res, status.HTTP_200_OK)
        assert [row["id"] for row in res.data["submissions"]] == [pending_final]

    def test_team_lead_filter_lists_team_submissions(self):
        self._submit()
        res = self.get(
            "api_v1:work-submission-list",
            role=ROLE_TEAM_LEAD,
            data={"team_lead_id": self.team_lead.employee_id, "status": "all"},
        )
        self.assert_http_status(res, status.HTTP_200_OK)
        assert len(self.extract_results(res)) == 1
