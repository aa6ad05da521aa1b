from django.urls import include
from django.urls import path
from rest_framework.routers import SimpleRouter

from hr_portal.overtime.api.views import OvertimeSummaryView
from hr_portal.overtime.api.views import OvertimeViewSet

router = SimpleRouter()
router.register("overtime", OvertimeViewSet, basename="overtime")

urlpatterns = [
    path("overtime-summary/", OvertimeSummaryView.as_view(), name="overtime-summary"),
    path("", include(router.urls)),
]
