from django.urls import include
from django.urls import path
from rest_framework.routers import SimpleRouter

from hr_portal.leaves.api.views import LeaveRequestViewSet
from hr_portal.leaves.api.views import PermissionRequestViewSet

router = SimpleRouter()
router.register("leave-requests", LeaveRequestViewSet, basename="leave-request")
router.register(
    "permission-requests", PermissionRequestViewSet, basename="permission-request"
)

urlpatterns = [
    path("", include(router.urls)),
]
