from django.conf import settings
from django.urls import include
from django.urls import path
from rest_framework.routers import DefaultRouter
from rest_framework.routers import SimpleRouter

from hr_portal.employees.api.views import EmployeeViewSet
from hr_portal.users.api.views import UserViewSet

router = DefaultRouter() if settings.DEBUG else SimpleRouter()

router.register("users", UserViewSet)
router.register("employees", EmployeeViewSet, basename="employee")


app_name = "api"
# Explicit paths first so they win over the employee detail route.
urlpatterns = [
    path("audit/", include("hr_portal.audit.api.urls", namespace="audit")),
    path("", include("hr_portal.attendance.api.urls")),
    path("", include("hr_portal.employees.api.urls")),
    path("", include("hr_portal.interns.api.urls")),
    path("", include("hr_portal.leaves.api.urls")),
    path("", include("hr_portal.submissions.api.urls")),
    path("", include("hr_portal.overtime.api.urls")),
    path("", include("hr_portal.notifications.api.urls")),
    *router.urls,
]
