import logging

from django.db.models import Q
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import OpenApiParameter
from drf_spectacular.utils import OpenApiTypes
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import mixins
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from hr_portal.approvals.workflow import APPROVE
from hr_portal.approvals.workflow import REJECT
from hr_portal.audit.utils import client_ip
from hr_portal.employees.api.permissions import IsManagerOnly
from hr_portal.employees.api.permissions import IsTeamLeadOrElevated
from hr_portal.employees.api.permissions import is_elevated
from hr_portal.employees.services import employee_for_user
from hr_portal.employees.services import get_employee_or_404
from hr_portal.employees.services import leads_employee
from hr_portal.employees.services import team_member_ids
from hr_portal.submissions.api.filters import WorkSubmissionFilter
from hr_portal.submissions.api.serializers import ManagerCommentsSerializer
from hr_portal.submissions.api.serializers import RejectionSerializer
from hr_portal.submissions.api.serializers import WorkSubmissionSerializer
from hr_portal.submissions.models import WorkSubmission
from hr_portal.submissions.workflows import submission_flow
from hr_portal.users.models import User

logger = logging.getLogger(__name__)

FINAL_STATUSES = [
    WorkSubmission.Status.PENDING_FINAL,
    WorkSubmission.Status.FINAL_APPROVED,
    WorkSubmission.Status.FINAL_REJECTED,
]


@extend_schema_view(
    list=extend_schema(tags=["Work Submissions"]),
    retrieve=extend_schema(tags=["Work Submissions"]),
    create=extend_schema(tags=["Work Submissions"]),
)
class WorkSubmissionViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    GenericViewSet,
):
    serializer_class = WorkSubmissionSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [DjangoFilterBackend]
    filterset_class = WorkSubmissionFilter

    def get_permissions(self):
        if self.action in {"team_lead_approve", "team_lead_reject"}:
            return [IsTeamLeadOrElevated()]
        if self.action in {"final_approve", "final_reject", "final_approvals"}:
            return [IsManagerOnly()]
        return super().get_permissions()

    def get_queryset(self):
        qs = WorkSubmission.objects.select_related("employee", "team_lead", "manager")
        user = self.request.user
        if is_elevated(user):
            return qs
        own = employee_for_user(user)
        if own is None:
            return qs.none()
        return qs.filter(
            Q(employee=own)
            | Q(employee_id__in=team_member_ids(own))
            | Q(manager=own)
        )

    def create(self, request, *args, **kwargs):
        data = dict(request.data.items())
        for alias, key in (
            ("workType", "work_type"),
            ("workDescription", "work_description"),
            ("employeeId", "employee_id"),
        ):
            if alias in data and key not in data:
                data[key] = data.pop(alias)
        serializer = self.get_serializer(data=data)
        serializer.is_valid(raise_exception=True)
        employee = self._target_employee(serializer.validated_data.get("employee_id"))
        fields = dict(serializer.validated_data)
        fields.pop("employee_id", None)
        fields.setdefault("department", employee.department)
        if not fields.get("title"):
            fields["title"] = fields["work_type"]
        by_team_lead = (
            getattr(employee.user, "user_type", None) == User.UserType.TEAM_LEAD
        )
        submission = submission_flow.submit(
            WorkSubmission(employee=employee, **fields),
            by_team_lead=by_team_lead,
            actor=request.user,
            ip_address=client_ip(request),
        )
        return Response(
            self.get_serializer(submission).data, status=status.HTTP_201_CREATED
        )

    def _target_employee(self, raw):
        own = employee_for_user(self.request.user)
        if raw in (None, ""):
            if own is None:
                raise ValidationError(
                    {"detail": "User does not have an associated Employee profile."}
                )
            return own
        employee = get_employee_or_404(raw)
        if own is not None and own.pk == employee.pk:
            return employee
        if is_elevated(self.request.user) or leads_employee(own, employee):
            return employee
        msg = "You cannot submit work on behalf of this employee."
        raise PermissionDenied(msg)

    def _respond(self, submission, message):
        return Response(
            {"message": message, "submission": self.get_serializer(submission).data}
        )

    @extend_schema(tags=["Work Submissions"], request=None)
    @action(detail=True, methods=["post"], url_path="team-lead-approve")
    def team_lead_approve(self, request, pk=None):
        submission = submission_flow.team_lead_approve(
            pk, actor=request.user, ip_address=client_ip(request)
        )
        return self._respond(submission, "Submission approved successfully")

    @extend_schema(tags=["Work Submissions"], request=RejectionSerializer)
    @action(detail=True, methods=["post"], url_path="team-lead-reject")
    def team_lead_reject(self, request, pk=None):
        serializer = RejectionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        submission = submission_flow.team_lead_reject(
            pk,
            actor=request.user,
            rejection_reason=serializer.validated_data["rejection_reason"],
            ip_address=client_ip(request),
        )
        return self._respond(submission, "Work submission rejected successfully")

    def _final(self, request, pk, decision):
        serializer = ManagerCommentsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return submission_flow.final_decide(
            pk,
            actor=request.user,
            action=decision,
            manager_comments=serializer.validated_data["manager_comments"],
            ip_address=client_ip(request),
        )

    @extend_schema(tags=["Work Submissions"], request=ManagerCommentsSerializer)
    @action(detail=True, methods=["post"], url_path="final-approve")
    def final_approve(self, request, pk=None):
        submission = self._final(request, pk, APPROVE)
        return self._respond(submission, "Submission approved successfully")

    @extend_schema(tags=["Work Submissions"], request=ManagerCommentsSerializer)
    @action(detail=True, methods=["post"], url_path="final-reject")
    def final_reject(self, request, pk=None):
        submission = self._final(request, pk, REJECT)
        return self._respond(submission, "Submission rejected successfully")

    @extend_schema(
        tags=["Work Submissions"],
        parameters=[OpenApiParameter("manager_id", OpenApiTypes.STR)],
    )
    @action(detail=False, methods=["get"], url_path="final-approvals")
    def final_approvals(self, request):
        raw = request.query_params.get("manager_id")
        qs = WorkSubmission.objects.select_related(
            "employee", "team_lead", "manager"
        ).filter(status__in=FINAL_STATUSES)
        if raw:
            qs = qs.filter(manager=get_employee_or_404(raw))
        return Response(
            {"submissions": self.get_serializer(qs, many=True).data}
        )
