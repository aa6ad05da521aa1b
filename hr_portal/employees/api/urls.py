from django.urls import path

from hr_portal.employees.api.views import AvailableEmployeesView
from hr_portal.employees.api.views import TeamMembersView

urlpatterns = [
    path("team-lead/", TeamMembersView.as_view(), name="team-members"),
    path(
        "team-lead/available/",
        AvailableEmployeesView.as_view(),
        name="team-available",
    ),
]
