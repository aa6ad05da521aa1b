from django.urls import include
from django.urls import path
from rest_framework.routers import SimpleRouter

from hr_portal.interns.api.views import InternViewSet

router = SimpleRouter()
router.register("interns", InternViewSet, basename="intern")

urlpatterns = [
    path("", include(router.urls)),
]
