"""Overtime sessions: start, document, end, forward and settle."""

import logging

from django.db.models import Q
from drf_spectacular.utils import OpenApiParameter
from drf_spectacular.utils import OpenApiTypes
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import mixins
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.exceptions import ValidationError
from rest_framework.parsers import FormParser
from rest_framework.parsers import JSONParser
from rest_framework.parsers import MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework.viewsets import GenericViewSet

from hr_portal.approvals.workflow import APPROVE
from hr_portal.approvals.workflow import REJECT
from hr_portal.audit.utils import audit_request
from hr_portal.employees.api.permissions import IsAdminOrManagerOnly
from hr_portal.employees.api.permissions import IsManagerOnly
from hr_portal.employees.api.permissions import IsTeamLeadOrElevated
from hr_portal.employees.api.permissions import is_elevated
from hr_portal.employees.services import can_view_employee
from hr_portal.employees.services import employee_for_user
from hr_portal.employees.services import get_employee_or_404
from hr_portal.employees.services import resolve_employee
from hr_portal.employees.services import team_member_ids
from hr_portal.overtime import services
from hr_portal.overtime.api.serializers import BulkSettleSerializer
from hr_portal.overtime.api.serializers import EndOvertimeSerializer
from hr_portal.overtime.api.serializers import OvertimeRequestSerializer
from hr_portal.overtime.api.serializers import OvertimeSummaryQuerySerializer
from hr_portal.overtime.api.serializers import StartOvertimeSerializer
from hr_portal.overtime.api.serializers import SubmitWorkSerializer
from hr_portal.overtime.models import OvertimeRequest
from hr_portal.policies.accessors import portal_now

logger = logging.getLogger(__name__)


def _owned_employee(request, raw):
    """The employee an overtime session belongs to, checked against the caller."""

    if raw in (None, ""):
        own = employee_for_user(request.user)
        if own is None:
            raise ValidationError({"employee_id": "Employee ID is required"})
        return own
    employee = get_employee_or_404(raw)
    if not can_view_employee(request.user, employee):
        msg = "You cannot record overtime for this employee."
        raise PermissionDenied(msg)
    return employee


@extend_schema_view(
    list=extend_schema(
        tags=["Overtime"],
        parameters=[
            OpenApiParameter("employee_id", OpenApiTypes.STR),
            OpenApiParameter("team_lead_id", OpenApiTypes.STR),
            OpenApiParameter("status", OpenApiTypes.STR),
        ],
    ),
    retrieve=extend_schema(tags=["Overtime"]),
    destroy=extend_schema(tags=["Overtime"]),
)
class OvertimeViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.DestroyModelMixin,
    GenericViewSet,
):
    serializer_class = OvertimeRequestSerializer
    permission_classes = [IsAuthenticated]
    parser_classes = (JSONParser, MultiPartParser, FormParser)

    def get_permissions(self):
        if self.action == "destroy":
            return [IsAdminOrManagerOnly()]
        if self.action in {"bulk_approve", "bulk_reject"}:
            return [IsManagerOnly()]
        if self.action == "team_lead_forward":
            return [IsTeamLeadOrElevated()]
        return super().get_permissions()

    def get_queryset(self):
        qs = OvertimeRequest.objects.select_related("employee")
        user = self.request.user
        if not is_elevated(user):
            own = employee_for_user(user)
            if own is None:
                return qs.none()
            qs = qs.filter(Q(employee=own) | Q(employee_id__in=team_member_ids(own)))
        if self.action != "list":
            return qs
        params = self.request.query_params
        if params.get("employee_id"):
            employee = resolve_employee(params["employee_id"])
            qs = qs.filter(employee_id=employee.pk if employee else -1)
        if params.get("team_lead_id"):
            lead = resolve_employee(params["team_lead_id"])
            qs = qs.filter(employee_id__in=team_member_ids(lead) if lead else [])
        wanted = params.get("status")
        if wanted and wanted.lower() != "all":
            qs = qs.filter(status=wanted)
        return qs

    def _session(self):
        session = self.get_object()
        if not can_view_employee(self.request.user, session.employee):
            msg = "You cannot change this overtime session."
            raise PermissionDenied(msg)
        return session

    def perform_destroy(self, instance):
        audit_request(
            self.request,
            "overtime_deleted",
            message=f"OT {instance.pk} {instance.employee_id} {instance.ot_date}",
            instance=instance,
        )
        instance.delete()

    @extend_schema(tags=["Overtime"], request=StartOvertimeSerializer)
    @action(detail=False, methods=["post"], url_path="start")
    def start(self, request):
        serializer = StartOvertimeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        employee = _owned_employee(request, data.get("employee_id"))
        now = portal_now()
        session, resumed = services.start_session(
            employee,
            ot_date=data.get("ot_date") or now.date(),
            start_time=data.get("start_time") or now.time(),
        )
        payload = OvertimeRequestSerializer(session, context={"request": request}).data
        payload["resumed"] = resumed
        return Response(
            payload, status=status.HTTP_200_OK if resumed else status.HTTP_201_CREATED
        )

    @extend_schema(
        tags=["Overtime"],
        parameters=[OpenApiParameter("employee_id", OpenApiTypes.STR)],
    )
    @action(detail=False, methods=["get"], url_path="active")
    def active(self, request):
        employee = _owned_employee(request, request.query_params.get("employee_id"))
        session = (
            OvertimeRequest.objects.filter(employee=employee, is_active=True)
            .order_by("-created_at")
            .first()
        )
        if session is None:
            return Response(None)
        return Response(
            OvertimeRequestSerializer(session, context={"request": request}).data
        )

    @extend_schema(tags=["Overtime"], request=SubmitWorkSerializer)
    @action(
        detail=True,
        methods=["post"],
        url_path="submit-work",
        parser_classes=[MultiPartParser, FormParser],
    )
    def submit_work(self, request, pk=None):
        session = self._session()
        serializer = SubmitWorkSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        session = services.submit_work(
            session,
            work_type=data["work_type"],
            work_description=data["work_description"],
            image1=data.get("image1"),
            image2=data.get("image2"),
        )
        return Response(
            OvertimeRequestSerializer(session, context={"request": request}).data
        )

    @extend_schema(tags=["Overtime"], request=EndOvertimeSerializer)
    @action(detail=True, methods=["post"], url_path="end")
    def end(self, request, pk=None):
        session = self._session()
        serializer = EndOvertimeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        end_time = serializer.validated_data.get("end_time") or portal_now().time()
        session = services.end_session(session, end_time=end_time)
        return Response(
            OvertimeRequestSerializer(session, context={"request": request}).data
        )

    @extend_schema(tags=["Overtime"], request=None)
    @action(detail=True, methods=["post"], url_path="team-lead-forward")
    def team_lead_forward(self, request, pk=None):
        session = services.forward_to_manager(
            pk, team_lead=employee_for_user(request.user)
        )
        return Response(
            OvertimeRequestSerializer(session, context={"request": request}).data
        )

    def _settle(self, request, decision):
        serializer = BulkSettleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        updated = services.settle(
            data["ids"],
            action=decision,
            manager=employee_for_user(request.user),
            batch_id=data["batch_id"],
            manager_remarks=data["manager_remarks"],
        )
        audit_request(
            request,
            f"overtime_bulk_{decision}",
            message=f"{updated} of {len(data['ids'])} records",
            model_name="OvertimeRequest",
            after={"ids": data["ids"], "batch_id": data["batch_id"]},
        )
        verb = "approved" if decision == APPROVE else "rejected"
        return Response(
            {
                "message": f"{updated} requests {verb} successfully",
                "updated_count": updated,
                "batch_id": data["batch_id"] if decision == APPROVE else None,
            }
        )

    @extend_schema(tags=["Overtime"], request=BulkSettleSerializer)
    @action(detail=False, methods=["post"], url_path="bulk-approve")
    def bulk_approve(self, request):
        return self._settle(request, APPROVE)

    @extend_schema(tags=["Overtime"], request=BulkSettleSerializer)
    @action(detail=False, methods=["post"], url_path="bulk-reject")
    def bulk_reject(self, request):
        return self._settle(request, REJECT)


@extend_schema(
    tags=["Overtime"],
    parameters=[
        OpenApiParameter("employee_id", OpenApiTypes.STR, required=True),
        OpenApiParameter("month", OpenApiTypes.INT, required=True),
        OpenApiParameter("year", OpenApiTypes.INT, required=True),
    ],
)
class OvertimeSummaryView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        params = dict(request.query_params.items())
        if "employeeId" in params and "employee_id" not in params:
            params["employee_id"] = params.pop("employeeId")
        query = OvertimeSummaryQuerySerializer(data=params)
        query.is_valid(raise_exception=True)
        data = query.validated_data
        employee = _owned_employee(request, data["employee_id"])
        summary = services.monthly_summary(employee, data["month"], data["year"])
        summary["records"] = OvertimeRequestSerializer(
            summary["records"], many=True, context={"request": request}
        ).data
        return Response(summary)
