from hr_portal.approvals.workflow import WorkSubmissionFlow
from hr_portal.submissions.models import WorkSubmission

submission_flow = WorkSubmissionFlow(model=WorkSubmission)
