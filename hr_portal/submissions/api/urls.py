from django.urls import include
from django.urls import path
from rest_framework.routers import SimpleRouter

from hr_portal.submissions.api.views import WorkSubmissionViewSet

router = SimpleRouter()
router.register("work-submissions", WorkSubmissionViewSet, basename="work-submission")

urlpatterns = [
    path("", include(router.urls)),
]
