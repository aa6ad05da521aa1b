"""Leave and permission requests: submission, listing and decisions."""

import logging

from django.db.models import Q
from django.http import QueryDict
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

from hr_portal.audit.utils import client_ip
from hr_portal.employees.api.permissions import is_elevated
from hr_portal.employees.services import employee_for_user
from hr_portal.employees.services import get_employee_or_404
from hr_portal.employees.services import leads_employee
from hr_portal.leaves.api.filters import LeaveRequestFilter
from hr_portal.leaves.api.filters import PermissionRequestFilter
from hr_portal.leaves.api.serializers import DecisionSerializer
from hr_portal.leaves.api.serializers import LeaveRequestSerializer
from hr_portal.leaves.api.serializers import PermissionRequestSerializer
from hr_portal.leaves.models import LeaveRequest
from hr_portal.leaves.models import PermissionRequest
from hr_portal.leaves.workflows import leave_flow
from hr_portal.leaves.workflows import permission_flow

logger = logging.getLogger(__name__)


def _target_employee(request, raw):
    """Employee a request is filed for: ``raw`` (code or id) or the caller."""

    own = employee_for_user(request.user)
    if raw in (None, ""):
        if own is None:
            raise ValidationError(
                {"detail": "User does not have an associated Employee profile."}
            )
        return own
    employee = get_employee_or_404(raw)
    if own is not None and own.pk == employee.pk:
        return employee
    if is_elevated(request.user) or leads_employee(own, employee):
        return employee
    msg = "You cannot submit requests on behalf of this employee."
    raise PermissionDenied(msg)


class _TwoStageRequestViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    GenericViewSet,
):
    permission_classes = [IsAuthenticated]
    filter_backends = [DjangoFilterBackend]
    flow = None
    aliases: dict[str, str] = {}

    def get_queryset(self):
        qs = (
            self.queryset.all()
            .select_related("employee", "team_lead", "manager")
            .prefetch_related("eligible_team_leads")
        )
        user = self.request.user
        if is_elevated(user):
            return qs
        own = employee_for_user(user)
        if own is None:
            return qs.none()
        return qs.filter(
            Q(employee=own) | Q(eligible_team_leads=own) | Q(manager=own)
        ).distinct()

    def _normalize(self, data) -> dict:
        out = data.dict() if isinstance(data, QueryDict) else dict(data)
        for alias, key in self.aliases.items():
            if alias in out and key not in out:
                out[key] = out.pop(alias)
        return out

    def create(self, request, *args, **kwargs):
        payload = self._normalize(request.data)
        serializer = self.get_serializer(data=payload)
        serializer.is_valid(raise_exception=True)
        employee = _target_employee(request, payload.get("employee_id"))
        data = dict(serializer.validated_data)
        data.pop("employee_id", None)
        instance = self.flow.submit(
            self.queryset.model(employee=employee, **data),
            actor=request.user,
            ip_address=client_ip(request),
        )
        return Response(
            self.get_serializer(instance).data, status=status.HTTP_201_CREATED
        )

    def _decide(self, request, pk, step):
        serializer = DecisionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        instance = step(
            pk,
            actor=request.user,
            action=serializer.validated_data["action"],
            comments=serializer.validated_data["comments"],
            ip_address=client_ip(request),
        )
        rejected = instance.status == instance.Status.REJECTED
        verb = "rejected" if rejected else "approved"
        return Response(
            {
                "message": f"Request {verb} successfully",
                "data": self.get_serializer(instance).data,
            }
        )

    @extend_schema(request=DecisionSerializer)
    @action(detail=True, methods=["post"], url_path="team-lead-decision")
    def team_lead_decision(self, request, pk=None):
        return self._decide(request, pk, self.flow.team_lead_decide)

    @extend_schema(request=DecisionSerializer)
    @action(detail=True, methods=["post"], url_path="manager-decision")
    def manager_decision(self, request, pk=None):
        return self._decide(request, pk, self.flow.manager_decide)

    @extend_schema(
        parameters=[
            OpenApiParameter("manager_id", OpenApiTypes.STR),
            OpenApiParameter("status", OpenApiTypes.STR),
        ]
    )
    @action(detail=False, methods=["get"], url_path="final-approvals")
    def final_approvals(self, request):
        """Requests awaiting (or past) a manager's final decision."""

        raw = request.query_params.get("manager_id")
        manager = get_employee_or_404(raw) if raw else employee_for_user(request.user)
        if manager is None:
            raise ValidationError({"manager_id": "Manager ID is required"})
        qs = self.get_queryset().filter(manager=manager)
        wanted = (
            request.query_params.get("status") or LeaveRequest.Status.PENDING_MANAGER
        )
        if wanted.lower() != "all":
            qs = qs.filter(status=wanted)
        return Response(self.get_serializer(qs, many=True).data)


@extend_schema_view(
    list=extend_schema(tags=["Leave Requests"]),
    retrieve=extend_schema(tags=["Leave Requests"]),
    create=extend_schema(tags=["Leave Requests"]),
    team_lead_decision=extend_schema(tags=["Leave Requests"]),
    manager_decision=extend_schema(tags=["Leave Requests"]),
    final_approvals=extend_schema(tags=["Leave Requests"]),
)
class LeaveRequestViewSet(_TwoStageRequestViewSet):
    queryset = LeaveRequest.objects.all()
    serializer_class = LeaveRequestSerializer
    filterset_class = LeaveRequestFilter
    flow = leave_flow
    aliases = {
        "leaveType": "leave_type",
        "startDate": "start_date",
        "endDate": "end_date",
        "employeeId": "employee_id",
    }


@extend_schema_view(
    list=extend_schema(tags=["Permission Requests"]),
    retrieve=extend_schema(tags=["Permission Requests"]),
    create=extend_schema(tags=["Permission Requests"]),
    team_lead_decision=extend_schema(tags=["Permission Requests"]),
    manager_decision=extend_schema(tags=["Permission Requests"]),
    final_approvals=extend_schema(tags=["Permission Requests"]),
)
class PermissionRequestViewSet(_TwoStageRequestViewSet):
    queryset = PermissionRequest.objects.all()
    serializer_class = PermissionRequestSerializer
    filterset_class = PermissionRequestFilter
    flow = permission_flow
    aliases = {
        "permissionType": "permission_type",
        "startTime": "start_time",
        "endTime": "end_time",
        "employeeId": "employee_id",
    }
