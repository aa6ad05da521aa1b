"""Views for Employees API."""

import logging

from django.db import transaction
from django.db.models import Q
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import OpenApiParameter
from drf_spectacular.utils import OpenApiTypes
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import status
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound
from rest_framework.exceptions import PermissionDenied
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from hr_portal.attendance.api.serializers import MonthYearQuerySerializer
from hr_portal.attendance.models import DailyWorkLog
from hr_portal.attendance.models import MonthlyAttendance
from hr_portal.attendance.services import ensure_month_summary
from hr_portal.attendance.services import month_total_days
from hr_portal.attendance.services import summaries_by_employee
from hr_portal.audit.utils import audit_request
from hr_portal.employees.models import Employee
from hr_portal.employees.models import TeamMembership
from hr_portal.employees.services import add_team_member
from hr_portal.employees.services import available_employees
from hr_portal.employees.services import can_view_employee
from hr_portal.employees.services import employee_for_user
from hr_portal.employees.services import get_employee_or_404
from hr_portal.employees.services import remove_team_member
from hr_portal.employees.services import team_member_ids
from hr_portal.policies.accessors import portal_now

from .filters import EmployeeFilter
from .pagination import PageLimitPagination
from .permissions import IsAdminOrManagerCanWrite
from .permissions import IsTeamLeadOrElevated
from .permissions import is_elevated
from .permissions import is_team_lead
from .serializers import EmployeeDetailSerializer
from .serializers import EmployeeListSerializer
from .serializers import EmployeeSerializer
from .serializers import EmployeeStatusSerializer
from .serializers import TeamMemberSerializer
from .serializers import TeamMembershipInputSerializer

logger = logging.getLogger(__name__)


def _month_year(request) -> tuple[int, int]:
    query = MonthYearQuerySerializer(data=request.query_params)
    query.is_valid(raise_exception=True)
    return query.validated_data["month"], query.validated_data["year"]


def _audit(request, action_name: str, employee, **extra):
    audit_request(
        request,
        action_name,
        instance=employee,
        message=f"{employee.employee_id} {employee.name}",
        **extra,
    )


@extend_schema_view(
    list=extend_schema(
        tags=["Employees"],
        parameters=[
            OpenApiParameter("month", OpenApiTypes.INT),
            OpenApiParameter("year", OpenApiTypes.INT),
            OpenApiParameter("limit", OpenApiTypes.INT),
        ],
    ),
    retrieve=extend_schema(tags=["Employees"]),
    create=extend_schema(tags=["Employees"]),
    partial_update=extend_schema(tags=["Employees"]),
    update=extend_schema(tags=["Employees"]),
    destroy=extend_schema(tags=["Employees"]),
)
class EmployeeViewSet(viewsets.ModelViewSet):
    """Employees, addressed by primary key or employee code."""

    queryset = Employee.objects.all().select_related("manager", "user")
    serializer_class = EmployeeSerializer
    permission_classes = [IsAuthenticated, IsAdminOrManagerCanWrite]
    pagination_class = PageLimitPagination
    filter_backends = [DjangoFilterBackend]
    filterset_class = EmployeeFilter
    lookup_value_regex = "[^/]+"

    def get_queryset(self):
        """Scope employees by role.

        - Admin/Manager/staff: all employees
        - Team lead: their active team members and themself
        - Everyone else: only themself
        """
        qs = super().get_queryset()
        user = self.request.user
        if is_elevated(user):
            return qs
        own = employee_for_user(user)
        if own is None:
            return qs.none()
        if is_team_lead(user):
            return qs.filter(Q(pk=own.pk) | Q(pk__in=team_member_ids(own)))
        return qs.filter(pk=own.pk)

    def get_object(self):
        employee = get_employee_or_404(
            self.kwargs[self.lookup_field], self.get_queryset()
        )
        self.check_object_permissions(self.request, employee)
        return employee

    def list(self, request, *args, **kwargs):
        month, year = _month_year(request)
        qs = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(qs)
        rows = page if page is not None else list(qs)
        context = self.get_serializer_context()
        context["summaries"] = summaries_by_employee(
            [row.pk for row in rows], month, year
        )
        context["default_total_days"] = month_total_days(month, year)
        data = EmployeeListSerializer(rows, many=True, context=context).data
        if page is not None:
            return self.get_paginated_response(data)
        return Response(data)

    def retrieve(self, request, *args, **kwargs):
        employee = self.get_object()
        month, year = _month_year(request)
        context = self.get_serializer_context()
        context["summary"] = MonthlyAttendance.objects.filter(
            employee=employee, month=month, year=year
        ).first()
        context["default_total_days"] = month_total_days(month, year)
        context["work_logs"] = DailyWorkLog.objects.filter(
            employee=employee, date__month=month, date__year=year
        )
        return Response(EmployeeDetailSerializer(employee, context=context).data)

    def perform_create(self, serializer):
        with transaction.atomic():
            employee = serializer.save()
            now = portal_now()
            ensure_month_summary(employee, now.month, now.year)
        logger.info("Employee %s created", employee.employee_id)
        _audit(self.request, "employee_created", employee)

    def perform_update(self, serializer):
        changed = list(serializer.validated_data)
        instance = serializer.instance
        before = {name: instance.serializable_value(name) for name in changed}
        employee = serializer.save()
        after = {name: employee.serializable_value(name) for name in changed}
        _audit(self.request, "employee_updated", employee, before=before, after=after)

    def perform_destroy(self, instance):
        _audit(self.request, "employee_deleted", instance)
        with transaction.atomic():
            instance.delete()

    @extend_schema(
        tags=["Employees"],
        request=EmployeeStatusSerializer,
        responses=EmployeeSerializer,
    )
    @action(detail=True, methods=["patch"], url_path="status")
    def set_status(self, request, pk=None):
        employee = self.get_object()
        serializer = EmployeeStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        previous = employee.status
        employee.status = serializer.validated_data["status"]
        employee.save(update_fields=["status", "updated_at"])
        _audit(
            request,
            "employee_status_changed",
            employee,
            before={"status": previous},
            after={"status": employee.status},
        )
        return Response(EmployeeSerializer(employee).data)

    @extend_schema(
        tags=["Employees"],
        parameters=[OpenApiParameter("email", OpenApiTypes.EMAIL, required=True)],
        responses=EmployeeSerializer,
    )
    @action(detail=False, methods=["get"], url_path="profile")
    def profile(self, request):
        email = (request.query_params.get("email") or "").strip()
        if not email:
            raise ValidationError({"email": "Email is required"})
        employee = (
            Employee.objects.select_related("manager", "user")
            .filter(Q(email_address__iexact=email) | Q(user__email__iexact=email))
            .first()
        )
        if employee is None:
            msg = "Employee not found"
            raise NotFound(msg)
        if not can_view_employee(request.user, employee):
            msg = "You cannot view this employee."
            raise PermissionDenied(msg)
        return Response(EmployeeSerializer(employee).data)


def _team_lead_for(request, raw_id) -> Employee:
    """The team lead being managed; non-elevated leads manage only their team."""

    own = employee_for_user(request.user)
    if raw_id in (None, ""):
        if own is None:
            raise ValidationError({"team_lead_id": "Team lead ID is required"})
        return own
    team_lead = get_employee_or_404(raw_id)
    if not is_elevated(request.user) and (own is None or own.pk != team_lead.pk):
        msg = "You can only manage your own team."
        raise PermissionDenied(msg)
    return team_lead


@extend_schema(tags=["Teams"])
class TeamMembersView(APIView):
    """List, add and remove a team lead's members."""

    permission_classes = [IsTeamLeadOrElevated]

    @extend_schema(
        parameters=[OpenApiParameter("team_lead_id", OpenApiTypes.STR)],
        responses=TeamMemberSerializer(many=True),
    )
    def get(self, request):
        team_lead = _team_lead_for(request, request.query_params.get("team_lead_id"))
        members = TeamMembership.objects.filter(
            team_lead=team_lead, is_active=True
        ).select_related("employee", "employee__manager", "employee__user")
        return Response(
            {
                "team_lead_id": team_lead.pk,
                "members": TeamMemberSerializer(members, many=True).data,
            }
        )

    @extend_schema(
        request=TeamMembershipInputSerializer, responses=TeamMemberSerializer
    )
    def post(self, request):
        serializer = TeamMembershipInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        team_lead = _team_lead_for(request, data.get("team_lead_id"))
        employee = get_employee_or_404(data["employee_id"])
        membership = add_team_member(team_lead, employee)
        audit_request(
            request,
            "team_member_added",
            message=f"lead={team_lead.employee_id} member={employee.employee_id}",
            instance=membership,
        )
        return Response(
            TeamMemberSerializer(membership).data, status=status.HTTP_201_CREATED
        )

    @extend_schema(
        parameters=[
            OpenApiParameter("team_lead_id", OpenApiTypes.STR),
            OpenApiParameter("employee_id", OpenApiTypes.STR, required=True),
        ],
        responses={204: None},
    )
    def delete(self, request):
        employee_id = request.query_params.get("employee_id")
        if not employee_id:
            raise ValidationError({"employee_id": "Employee ID is required"})
        team_lead = _team_lead_for(request, request.query_params.get("team_lead_id"))
        employee = get_employee_or_404(employee_id)
        membership = remove_team_member(team_lead, employee)
        audit_request(
            request,
            "team_member_removed",
            message=f"lead={team_lead.employee_id} member={employee.employee_id}",
            instance=membership,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema(
    tags=["Teams"],
    parameters=[
        OpenApiParameter("team_lead_id", OpenApiTypes.STR),
        OpenApiParameter("search", OpenApiTypes.STR),
        OpenApiParameter("work_mode", OpenApiTypes.STR),
        OpenApiParameter("status", OpenApiTypes.STR),
        OpenApiParameter("page", OpenApiTypes.INT),
        OpenApiParameter("limit", OpenApiTypes.INT),
    ],
    responses=EmployeeSerializer(many=True),
)
class AvailableEmployeesView(APIView):
    """Employees a team lead could add to their team."""

    permission_classes = [IsTeamLeadOrElevated]

    def get(self, request):
        params = request.query_params
        team_lead = _team_lead_for(request, params.get("team_lead_id"))
        qs = available_employees(
            team_lead,
            search=(params.get("search") or "").strip(),
            work_mode=params.get("work_mode"),
            status=params.get("status"),
        )
        paginator = PageLimitPagination()
        page = paginator.paginate_queryset(qs, request, view=self)
        data = EmployeeSerializer(page, many=True).data
        return paginator.get_paginated_response(data)
