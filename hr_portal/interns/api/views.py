"""Intern records, documents and daily work logs."""

import logging

from django.db import IntegrityError
from django.db import transaction
from django.http import QueryDict
from django.utils.dateparse import parse_date
from drf_spectacular.utils import OpenApiParameter
from drf_spectacular.utils import OpenApiTypes
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import status
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import APIException
from rest_framework.exceptions import NotFound
from rest_framework.exceptions import PermissionDenied
from rest_framework.exceptions import ValidationError
from rest_framework.parsers import FormParser
from rest_framework.parsers import JSONParser
from rest_framework.parsers import MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from hr_portal.audit.utils import audit_request
from hr_portal.employees.api.pagination import PageLimitPagination
from hr_portal.employees.api.permissions import IsAdminOrManagerCanWrite
from hr_portal.employees.api.permissions import is_elevated
from hr_portal.employees.api.permissions import is_team_lead
from hr_portal.interns.api.serializers import InternSerializer
from hr_portal.interns.api.serializers import InternStatusSerializer
from hr_portal.interns.api.serializers import InternWorkLogInputSerializer
from hr_portal.interns.api.serializers import InternWorkLogSerializer
from hr_portal.interns.models import Intern
from hr_portal.interns.models import InternWorkLog
from hr_portal.interns.services import record_intern_work_log

logger = logging.getLogger(__name__)

# camelCase keys sent by the intern registration form
FIELD_ALIASES = {
    "phoneNumber": "phone_number",
    "yearOrPassedOut": "year_or_passed_out",
    "domainInOffice": "domain_in_office",
    "paidOrUnpaid": "paid_or_unpaid",
    "mentorName": "mentor_name",
    "checkInTime": "check_in",
    "checkOutTime": "check_out",
    "workType": "work_type",
    "workDescription": "description",
}


class Conflict(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Resource already exists."
    default_code = "conflict"


def _normalize_payload(data) -> dict:
    # Avoid QueryDict.copy(): it deep-copies uploaded files.
    out = data.dict() if isinstance(data, QueryDict) else dict(data)
    for alias, key in FIELD_ALIASES.items():
        if alias in out and key not in out:
            out[key] = out.pop(alias)
    return out


def _can_view_intern(user, intern: Intern) -> bool:
    if is_elevated(user) or is_team_lead(user):
        return True
    email = (getattr(user, "email", "") or "").lower()
    return bool(email) and email == intern.email.lower()


def _audit(request, action_name: str, intern: Intern, **extra):
    audit_request(
        request,
        action_name,
        instance=intern,
        message=f"{intern.name} <{intern.email}>",
        **extra,
    )


@extend_schema_view(
    list=extend_schema(tags=["Interns"]),
    retrieve=extend_schema(tags=["Interns"]),
    create=extend_schema(tags=["Interns"]),
    update=extend_schema(tags=["Interns"]),
    partial_update=extend_schema(tags=["Interns"]),
    destroy=extend_schema(tags=["Interns"]),
)
class InternViewSet(viewsets.ModelViewSet):
    queryset = Intern.objects.all()
    serializer_class = InternSerializer
    permission_classes = [IsAuthenticated, IsAdminOrManagerCanWrite]
    parser_classes = (JSONParser, MultiPartParser, FormParser)
    pagination_class = PageLimitPagination

    def get_queryset(self):
        qs = super().get_queryset()
        user = self.request.user
        if is_elevated(user) or is_team_lead(user):
            status_filter = self.request.query_params.get("status")
            if status_filter and status_filter.lower() != "all":
                qs = qs.filter(status=status_filter)
            return qs
        return qs.filter(email__iexact=getattr(user, "email", "") or "")

    def get_permissions(self):
        # Interns record their own work logs.
        if getattr(self, "action", None) == "worklog":
            return [IsAuthenticated()]
        return super().get_permissions()

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=_normalize_payload(request.data))
        serializer.is_valid(raise_exception=True)
        email = serializer.validated_data["email"]
        if Intern.objects.filter(email__iexact=email).exists():
            msg = "An intern with this email already exists"
            raise Conflict(msg)
        try:
            with transaction.atomic():
                intern = serializer.save()
        except IntegrityError as exc:
            msg = "An intern with this email already exists"
            raise Conflict(msg) from exc
        logger.info("Intern %s created", intern.pk)
        _audit(request, "intern_created", intern)
        return Response(serializer.data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        intern = self.get_object()
        serializer = self.get_serializer(
            intern, data=_normalize_payload(request.data), partial=partial
        )
        serializer.is_valid(raise_exception=True)
        email = serializer.validated_data.get("email")
        if (
            email
            and Intern.objects.filter(email__iexact=email)
            .exclude(pk=intern.pk)
            .exists()
        ):
            msg = "An intern with this email already exists"
            raise Conflict(msg)
        serializer.save()
        changed = list(serializer.validated_data)
        _audit(request, "intern_updated", intern, after=changed)
        return Response(serializer.data)

    def perform_destroy(self, instance):
        _audit(self.request, "intern_deleted", instance)
        instance.delete()

    @extend_schema(
        tags=["Interns"], request=InternStatusSerializer, responses=InternSerializer
    )
    @action(detail=True, methods=["patch"], url_path="status")
    def set_status(self, request, pk=None):
        intern = self.get_object()
        serializer = InternStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        previous = intern.status
        intern.status = serializer.validated_data["status"]
        intern.save(update_fields=["status", "updated_at"])
        _audit(
            request,
            "intern_status_changed",
            intern,
            before={"status": previous},
            after={"status": intern.status},
        )
        return Response(InternSerializer(intern, context={"request": request}).data)

    @extend_schema(
        tags=["Interns"],
        parameters=[OpenApiParameter("email", OpenApiTypes.EMAIL, required=True)],
        responses=InternSerializer,
    )
    @action(detail=False, methods=["get"], url_path="profile")
    def profile(self, request):
        email = (request.query_params.get("email") or "").strip()
        if not email:
            raise ValidationError({"email": "Email is required"})
        intern = Intern.objects.filter(email__iexact=email).first()
        if intern is None:
            msg = "Intern not found"
            raise NotFound(msg)
        if not _can_view_intern(request.user, intern):
            msg = "You cannot view this intern."
            raise PermissionDenied(msg)
        return Response(InternSerializer(intern, context={"request": request}).data)

    @extend_schema(
        tags=["Interns"],
        parameters=[OpenApiParameter("date", OpenApiTypes.DATE)],
        request=InternWorkLogInputSerializer,
        responses=InternWorkLogSerializer,
    )
    @action(detail=True, methods=["get", "post"], url_path="worklog")
    def worklog(self, request, pk=None):
        intern = self.get_object()
        if request.method == "GET":
            raw_date = request.query_params.get("date")
            if not raw_date:
                logs = InternWorkLog.objects.filter(intern=intern)
                return Response(
                    {"work_logs": InternWorkLogSerializer(logs, many=True).data}
                )
            try:
                day = parse_date(raw_date)
            except ValueError:
                day = None
            if day is None:
                raise ValidationError({"date": "Use YYYY-MM-DD."})
            log = InternWorkLog.objects.filter(intern=intern, date=day).first()
            return Response(InternWorkLogSerializer(log).data if log else None)

        serializer = InternWorkLogInputSerializer(data=_normalize_payload(request.data))
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        log, created = record_intern_work_log(
            intern,
            check_in=data["check_in"],
            check_out=data.get("check_out"),
            work_type=data.get("work_type"),
            description=data.get("description"),
        )
        return Response(
            InternWorkLogSerializer(log).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )
