"""Role constants and permission classes shared by every API."""

from collections.abc import Iterable

from rest_framework.permissions import SAFE_METHODS
from rest_framework.permissions import BasePermission

ROLE_ADMIN = "Admin"
ROLE_MANAGER = "Manager"
ROLE_TEAM_LEAD = "Team Lead"
ROLE_EMPLOYEE = "Employee"
ROLE_INTERN = "Intern"


def _user_in_groups(user, names: Iterable[str]) -> bool:
    groups = getattr(user, "groups", None)
    names_list = list(names)
    if not groups or not names_list:
        return False
    return groups.filter(name__in=names_list).exists()


def _is_staff_or_role(user, roles: Iterable[str]) -> bool:
    return bool(getattr(user, "is_staff", False)) or _user_in_groups(user, roles)


def is_elevated(user) -> bool:
    """Admins, managers and staff see and manage every record."""

    return bool(getattr(user, "is_superuser", False)) or _is_staff_or_role(
        user, [ROLE_ADMIN, ROLE_MANAGER]
    )


def is_team_lead(user) -> bool:
    return _user_in_groups(user, [ROLE_TEAM_LEAD])


class _RolePermission(BasePermission):
    """Base helper to gate access by role names."""

    allowed_roles: tuple[str, ...] = ()
    allow_staff: bool = True

    def has_permission(self, request, view) -> bool:
        user = getattr(request, "user", None)
        if not (user and getattr(user, "is_authenticated", False)):
            return False
        if self.allow_staff and getattr(user, "is_staff", False):
            return True
        return _user_in_groups(user, self.allowed_roles)


class IsAdminOrManagerCanWrite(BasePermission):
    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return bool(request.user and request.user.is_authenticated)
        u = request.user
        if not (u and getattr(u, "is_authenticated", False)):
            return False
        return _is_staff_or_role(u, [ROLE_ADMIN, ROLE_MANAGER])


class IsAdminOrManagerOnly(_RolePermission):
    """Allow access only to Admin/Manager/Staff users."""

    allowed_roles = (ROLE_ADMIN, ROLE_MANAGER)


class IsManagerOnly(_RolePermission):
    """Final approvers only."""

    allowed_roles = (ROLE_MANAGER,)


class IsTeamLeadOrElevated(_RolePermission):
    """Team leads manage their own team; admins and managers manage all."""

    allowed_roles = (ROLE_ADMIN, ROLE_MANAGER, ROLE_TEAM_LEAD)
