from django.urls import include
from django.urls import path
from rest_framework.routers import SimpleRouter

from hr_portal.notifications.api.views import NotificationViewSet

router = SimpleRouter()
router.register("notifications", NotificationViewSet, basename="notification")

urlpatterns = [
    path("", include(router.urls)),
]
