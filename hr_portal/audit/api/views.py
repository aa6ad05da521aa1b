from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter
from drf_spectacular.utils import OpenApiTypes
from drf_spectacular.utils import extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from hr_portal.audit.api.serializers import AuditLogSerializer
from hr_portal.audit.api.serializers import RecentAuditQuerySerializer
from hr_portal.audit.models import AuditLog
from hr_portal.employees.api.permissions import IsTeamLeadOrElevated


@extend_schema(
    tags=["Audit"],
    parameters=[
        OpenApiParameter("limit", OpenApiTypes.INT),
        OpenApiParameter("model", OpenApiTypes.STR),
        OpenApiParameter("record_id", OpenApiTypes.INT),
        OpenApiParameter("action", OpenApiTypes.STR),
    ],
    responses=AuditLogSerializer(many=True),
)
class RecentAuditView(APIView):
    """Newest audit entries for the dashboard activity feed."""

    permission_classes = [IsAuthenticated, IsTeamLeadOrElevated]

    def get(self, request):
        query = RecentAuditQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data

        qs = AuditLog.objects.select_related("actor")
        if params.get("model"):
            qs = qs.filter(model_name=params["model"])
        if params.get("record_id"):
            qs = qs.filter(record_id=params["record_id"])
        if params.get("action"):
            qs = qs.filter(action=params["action"])
        rows = qs[: params["limit"]]
        return Response(
            {
                "results": AuditLogSerializer(rows, many=True).data,
                "limit": params["limit"],
            }
        )
