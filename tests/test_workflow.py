import datetime as dt
from unittest import mock

import pytest

from hr_portal.approvals.workflow import InvalidTransition
from hr_portal.approvals.workflow import NotAuthorizedForStep
from hr_portal.approvals.workflow import StepNotFound
from hr_portal.approvals.workflow import WorkflowError
from hr_portal.approvals.workflow import notify
from hr_portal.approvals.workflow import with_comments
from hr_portal.audit.models import AuditLog
from hr_portal.leaves.models import LeaveRequest
from hr_portal.leaves.workflows import leave_flow
from hr_portal.notifications.models import Notification
from tests.factories import add_to_team
from tests.factories import create_employee
from tests.factories import create_user_with_role

pytestmark = pytest.mark.django_db


@pytest.fixture
def org():
    manager = create_user_with_role("manager", user_type="manager")
    lead = create_user_with_role("lead", user_type="team-lead")
    member = create_user_with_role("member", manager=manager.employee)
    add_to_team(lead.employee, member.employee)
    return {"manager": manager, "lead": lead, "member": member}


def _leave(employee):
    return leave_flow.submit(
        LeaveRequest(
            employee=employee,
            leave_type=LeaveRequest.LeaveType.CASUAL,
            start_date=dt.date(2026, 4, 1),
            end_date=dt.date(2026, 4, 2),
            reason="Family function",
        )
    )


def test_with_comments():
    assert with_comments("Approved.", "  ") == "Approved."
    assert with_comments("Approved.", "Enjoy") == "Approved. Comments: Enjoy"
    assert with_comments("Done.", "Fix", label="Reason") == "Done. Reason: Fix"


def test_notify_skips_unlinked_and_duplicate_recipients(org):
    unlinked = create_employee("NOUSER")
    created = notify(
        [org["member"].employee, unlinked, None, org["member"].employee],
        title="Heads up",
        message="Something happened",
        notification_type=Notification.Type.LEAVE_UPDATE,
        reference_id=42,
    )
    assert len(created) == 1
    assert created[0].recipient == org["member"].user
    assert created[0].reference_id == "42"


def test_submit_routes_to_team_leads_and_manager(org):
    leave = _leave(org["member"].employee)
    assert leave.status == LeaveRequest.Status.PENDING_TEAM_LEAD
    assert leave.manager == org["manager"].employee
    assert list(leave.eligible_team_leads.all()) == [org["lead"].employee]
    note = Notification.objects.get(recipient=org["lead"].user)
    assert note.title == "New Leave Request"
    assert AuditLog.objects.filter(action="leave_request_submitted").exists()


def test_submit_without_team_lead_is_refused(org):
    loner = create_user_with_role("loner", manager=org["manager"].employee)
    with pytest.raises(StepNotFound) as excinfo:
        _leave(loner.employee)
    assert str(excinfo.value.detail) == "Team lead not found for this employee"
    assert not LeaveRequest.objects.exists()
    assert Notification.objects.count() == 0


def test_two_stage_approval_publishes_status(org, django_capture_on_commit_callbacks):
    leave = _leave(org["member"].employee)
    target = "hr_portal.approvals.workflow.publish_request_status_changed"
    with mock.patch(target) as publish:
        with django_capture_on_commit_callbacks(execute=True):
            leave_flow.team_lead_decide(
                leave.pk, actor=org["lead"].user, action="approve", comments="ok"
            )
        with django_capture_on_commit_callbacks(execute=True):
            leave_flow.manager_decide(
                leave.pk, actor=org["manager"].user, action="APPROVE"
            )
    statuses = [call.kwargs["status"] for call in publish.call_args_list]
    assert statuses == [
        LeaveRequest.Status.PENDING_MANAGER,
        LeaveRequest.Status.APPROVED,
    ]
    leave.refresh_from_db()
    assert leave.team_lead_comments == "ok"
    assert leave.approved_at is not None
    changes = AuditLog.objects.filter(action="leave_request_status_changed")
    assert changes.count() == 2


def test_unassigned_request_falls_to_any_manager(org):
    loose = create_user_with_role("loose")
    add_to_team(org["lead"].employee, loose.employee)
    leave = _leave(loose.employee)
    assert leave.manager is None
    leave_flow.team_lead_decide(leave.pk, actor=org["lead"].user, action="approve")

    other_manager = create_user_with_role("other", user_type="manager")
    leave_flow.manager_decide(leave.pk, actor=other_manager.user, action="reject")
    leave.refresh_from_db()
    assert leave.status == LeaveRequest.Status.REJECTED
    assert leave.manager == other_manager.employee


def test_decision_errors(org):
    leave = _leave(org["member"].employee)
    with pytest.raises(WorkflowError):
        leave_flow.team_lead_decide(leave.pk, actor=org["lead"].user, action="maybe")
    with pytest.raises(NotAuthorizedForStep):
        leave_flow.team_lead_decide(
            leave.pk, actor=org["manager"].user, action="approve"
        )
    with pytest.raises(InvalidTransition) as excinfo:
        leave_flow.manager_decide(
            leave.pk, actor=org["manager"].user, action="approve"
        )
    assert "current status: Pending Team Lead" in str(excinfo.value.detail)
    with pytest.raises(StepNotFound):
        leave_flow.manager_decide(999999, actor=org["manager"].user, action="reject")
