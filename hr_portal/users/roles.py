"""User types, their role groups and portal area access."""

from __future__ import annotations

from hr_portal.employees.api.permissions import ROLE_ADMIN
from hr_portal.employees.api.permissions import ROLE_EMPLOYEE
from hr_portal.employees.api.permissions import ROLE_INTERN
from hr_portal.employees.api.permissions import ROLE_MANAGER
from hr_portal.employees.api.permissions import ROLE_TEAM_LEAD
from hr_portal.users.models import User

USER_TYPE_GROUPS: dict[str, str] = {
    User.UserType.ADMIN: ROLE_ADMIN,
    User.UserType.EMPLOYEE: ROLE_EMPLOYEE,
    User.UserType.INTERN: ROLE_INTERN,
    User.UserType.TEAM_LEAD: ROLE_TEAM_LEAD,
    User.UserType.MANAGER: ROLE_MANAGER,
}

# Portal area prefix -> user types allowed to open it. Paths outside every
# prefix are unrestricted.
AREA_ACCESS: dict[str, tuple[str, ...]] = {
    "/admin": (User.UserType.MANAGER, User.UserType.TEAM_LEAD),
    "/team-lead": (User.UserType.TEAM_LEAD,),
    "/manager": (User.UserType.MANAGER,),
    "/employee": (
        User.UserType.EMPLOYEE,
        User.UserType.TEAM_LEAD,
        User.UserType.MANAGER,
    ),
    "/intern": (
        User.UserType.INTERN,
        User.UserType.EMPLOYEE,
        User.UserType.TEAM_LEAD,
        User.UserType.MANAGER,
    ),
}


def group_for_user_type(user_type: str) -> str:
    return USER_TYPE_GROUPS.get(user_type, ROLE_EMPLOYEE)


def can_access(user_type: str, path: str) -> bool:
    """Return whether ``user_type`` may open the portal page at ``path``.

    Every matching prefix must allow the user type.
    """

    for prefix, allowed in AREA_ACCESS.items():
        if path.startswith(prefix) and user_type not in allowed:
            return False
    return True
