from drf_spectacular.utils import OpenApiParameter
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.mixins import ListModelMixin
from rest_framework.mixins import RetrieveModelMixin
from rest_framework.mixins import UpdateModelMixin
from rest_framework.permissions import AllowAny
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework.viewsets import GenericViewSet

from hr_portal.audit.utils import audit_request
from hr_portal.audit.utils import client_ip
from hr_portal.audit.utils import log_action
from hr_portal.employees.api.permissions import is_elevated
from hr_portal.users.models import User
from hr_portal.users.roles import can_access

from .serializers import SignupSerializer
from .serializers import UserSerializer


@extend_schema_view(
    list=extend_schema(tags=["Users"]),
    retrieve=extend_schema(tags=["Users"]),
    partial_update=extend_schema(tags=["Users"]),
    update=extend_schema(tags=["Users"]),
)
class UserViewSet(
    RetrieveModelMixin, ListModelMixin, UpdateModelMixin, GenericViewSet
):
    serializer_class = UserSerializer
    queryset = User.objects.all()
    lookup_field = "username"
    pagination_class = None

    def get_queryset(self, *args, **kwargs):  # type: ignore[override]
        user = self.request.user
        if not getattr(user, "is_authenticated", False):  # pragma: no cover
            return User.objects.none()
        # Managers/Admins may list all users; others only themselves
        if is_elevated(user):
            return User.objects.all()
        return User.objects.filter(pk=user.pk)

    @action(detail=False)
    def me(self, request):
        serializer = UserSerializer(request.user, context={"request": request})
        return Response(status=status.HTTP_200_OK, data=serializer.data)

    def perform_update(self, serializer):  # type: ignore[override]
        instance = serializer.save()
        audit_request(
            self.request,
            "user_updated",
            instance=instance,
            message=f"username={instance.username}",
        )


@extend_schema(tags=["Authentication"], request=SignupSerializer)
class SignupView(APIView):
    permission_classes = [AllowAny]
    authentication_classes: list = []

    def post(self, request):
        serializer = SignupSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        log_action(
            "user_signup",
            actor=user,
            instance=user,
            message=f"user_type={user.user_type}",
            ip_address=client_ip(request),
        )
        return Response(
            {"message": "Account created successfully", "id": user.pk},
            status=status.HTTP_201_CREATED,
        )


@extend_schema(tags=["Authentication"])
class ValidateRoleView(APIView):
    """Resolve the stored user type for an email address."""

    permission_classes = [AllowAny]
    authentication_classes: list = []

    def post(self, request):
        email = (request.data.get("email") or "").strip()
        if not email:
            return Response({"role": None}, status=status.HTTP_400_BAD_REQUEST)
        user = User.objects.filter(email__iexact=email).only("user_type").first()
        if user is None:
            return Response({"role": None}, status=status.HTTP_404_NOT_FOUND)
        return Response({"role": user.user_type})


@extend_schema(
    tags=["Authentication"],
    parameters=[OpenApiParameter("path", str, description="Portal page path")],
)
class AreaAccessView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        path = request.query_params.get("path") or "/"
        user_type = request.user.user_type
        allowed = can_access(user_type, path)
        return Response({"path": path, "user_type": user_type, "allowed": allowed})
