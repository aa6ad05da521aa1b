from __future__ import annotations

from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework.test import APITestCase

from tests.factories import RoleContext
from tests.factories import add_to_team
from tests.factories import create_user_with_role

User = get_user_model()

ROLE_ADMIN = "admin"
ROLE_MANAGER = "manager"
ROLE_TEAM_LEAD = "team-lead"
ROLE_EMPLOYEE = "employee"
ROLE_OUTSIDER = "outsider"


class RoleAPITestCase(APITestCase):
    """A manager, a team lead leading one employee, and an employee outside the team.

    The employee reports to the manager; the outsider has no lead and no
    manager.
    """

    def setUp(self):
        super().setUp()
        self.roles: dict[str, RoleContext] = {}
        self.roles[ROLE_ADMIN] = create_user_with_role(
            "admin", user_type=User.UserType.ADMIN, is_staff=True
        )
        self.roles[ROLE_MANAGER] = create_user_with_role(
            "manager", user_type=User.UserType.MANAGER
        )
        self.roles[ROLE_TEAM_LEAD] = create_user_with_role(
            "lead",
            user_type=User.UserType.TEAM_LEAD,
            manager=self.roles[ROLE_MANAGER].employee,
        )
        self.roles[ROLE_EMPLOYEE] = create_user_with_role(
            "employee", manager=self.roles[ROLE_MANAGER].employee
        )
        self.roles[ROLE_OUTSIDER] = create_user_with_role(
            "outsider", department="Sales"
        )
        add_to_team(self.roles[ROLE_TEAM_LEAD].employee, self.employee)

    @property
    def employee(self):
        return self.roles[ROLE_EMPLOYEE].employee

    @property
    def team_lead(self):
        return self.roles[ROLE_TEAM_LEAD].employee

    @property
    def manager(self):
        return self.roles[ROLE_MANAGER].employee

    def authenticate(self, role: str):
        self.client.force_authenticate(user=self.roles[role].user)

    def assert_http_status(self, response, expected: int):
        assert response.status_code == expected, getattr(response, "data", None)

    def get(self, url_name: str, *, role: str, reverse_kwargs=None, **kwargs):
        self.authenticate(role)
        url = reverse(url_name, kwargs=reverse_kwargs)
        return self.client.get(url, **kwargs)

    def post(
        self, url_name: str, *, role: str, payload=None, reverse_kwargs=None, **kwargs
    ):
        self.authenticate(role)
        url = reverse(url_name, kwargs=reverse_kwargs)
        kwargs.setdefault("format", "json")
        return self.client.post(url, data=payload or {}, **kwargs)

    def patch(
        self, url_name: str, *, role: str, payload=None, reverse_kwargs=None, **kwargs
    ):
        self.authenticate(role)
        url = reverse(url_name, kwargs=reverse_kwargs)
        return self.client.patch(url, data=payload or {}, format="json", **kwargs)

    def delete(self, url_name: str, *, role: str, reverse_kwargs=None, **kwargs):
        self.authenticate(role)
        url = reverse(url_name, kwargs=reverse_kwargs)
        return self.client.delete(url, **kwargs)

    def extract_results(self, response):
        data = response.data
        if isinstance(data, dict) and "results" in data:
            return data["results"]
        return data if isinstance(data, list) else []
