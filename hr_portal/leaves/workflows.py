from hr_portal.approvals.workflow import Titles
from hr_portal.approvals.workflow import TwoStageFlow
from hr_portal.leaves.models import LeaveRequest
from hr_portal.leaves.models import PermissionRequest
from hr_portal.notifications.models import Notification

leave_flow = TwoStageFlow(
    model=LeaveRequest,
    kind="leave_request",
    noun="leave request",
    request_type=Notification.Type.LEAVE_REQUEST,
    update_type=Notification.Type.LEAVE_UPDATE,
    titles=Titles(
        submitted="New Leave Request",
        team_lead_approved="Leave Request Approved by Team Lead",
        approved="Leave Request Approved",
        rejected="Leave Request Rejected",
    ),
)

permission_flow = TwoStageFlow(
    model=PermissionRequest,
    kind="permission_request",
    noun="permission request",
    request_type=Notification.Type.PERMISSION_REQUEST,
    update_type=Notification.Type.PERMISSION_UPDATE,
    titles=Titles(
        submitted="New Permission Request",
        team_lead_approved="Approved by Team Lead",
        approved="Permission Approved",
        rejected="Permission Rejected",
    ),
)
