"""Employee lookup and team membership rules."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.db.models import Q
from rest_framework.exceptions import NotFound
from rest_framework.exceptions import ValidationError

from hr_portal.employees.api.permissions import is_elevated
from hr_portal.employees.models import Employee
from hr_portal.employees.models import TeamMembership

if TYPE_CHECKING:
    from django.db.models import QuerySet

logger = logging.getLogger(__name__)


def resolve_employee(
    identifier, queryset: QuerySet[Employee] | None = None
) -> Employee | None:
    """Find an employee by employee code, falling back to the primary key."""

    if identifier in (None, ""):
        return None
    qs = queryset if queryset is not None else Employee.objects.all()
    raw = str(identifier).strip()
    employee = qs.filter(employee_id__iexact=raw).first()
    if employee is None and raw.isdigit():
        employee = qs.filter(pk=int(raw)).first()
    return employee


def get_employee_or_404(identifier, queryset=None) -> Employee:
    employee = resolve_employee(identifier, queryset)
    if employee is None:
        msg = "Employee not found"
        raise NotFound(msg)
    return employee


def employee_for_user(user) -> Employee | None:
    if not getattr(user, "is_authenticated", False):
        return None
    return Employee.objects.filter(user=user).first()


def active_team_leads(employee: Employee) -> QuerySet[Employee]:
    return Employee.objects.filter(
        led_memberships__employee=employee,
        led_memberships__is_active=True,
    ).distinct()


def team_member_ids(team_lead: Employee) -> list[int]:
    return list(
        TeamMembership.objects.filter(team_lead=team_lead, is_active=True).values_list(
            "employee_id", flat=True
        )
    )


def leads_employee(team_lead: Employee | None, employee: Employee) -> bool:
    if team_lead is None:
        return False
    return TeamMembership.objects.filter(
        team_lead=team_lead, employee=employee, is_active=True
    ).exists()


def add_team_member(team_lead: Employee, employee: Employee) -> TeamMembership:
    if team_lead.pk == employee.pk:
        msg = "A team lead cannot be added to their own team"
        raise ValidationError({"employee_id": msg})
    membership = TeamMembership.objects.filter(
        team_lead=team_lead, employee=employee
    ).first()
    if membership is not None and membership.is_active:
        msg = "Employee is already a member of this team"
        raise ValidationError({"employee_id": msg})
    if membership is not None:
        membership.is_active = True
        membership.save(update_fields=["is_active"])
        logger.info(
            "Reactivated team membership lead=%s employee=%s",
            team_lead.pk,
            employee.pk,
        )
        return membership
    return TeamMembership.objects.create(team_lead=team_lead, employee=employee)


def remove_team_member(team_lead: Employee, employee: Employee) -> TeamMembership:
    membership = TeamMembership.objects.filter(
        team_lead=team_lead, employee=employee, is_active=True
    ).first()
    if membership is None:
        msg = "Employee is not a member of this team"
        raise NotFound(msg)
    membership.is_active = False
    membership.save(update_fields=["is_active"])
    return membership


def available_employees(
    team_lead: Employee,
    *,
    search: str = "",
    work_mode: str | None = None,
    status: str | None = None,
) -> QuerySet[Employee]:
    """Employees that could join ``team_lead``'s team."""

    qs = Employee.objects.exclude(pk=team_lead.pk).exclude(
        pk__in=team_member_ids(team_lead)
    )
    if search:
        qs = qs.filter(
            Q(name__icontains=search)
            | Q(designation__icontains=search)
            | Q(employee_id__icontains=search)
        )
    if work_mode and work_mode.lower() != "all":
        qs = qs.filter(work_mode=work_mode)
    if status and status.lower() != "all":
        qs = qs.filter(status=status)
    return qs.order_by("name")


def can_view_employee(user, employee: Employee) -> bool:
    """Elevated users, the employee themself and their team leads."""

    if is_elevated(user):
        return True
    own = employee_for_user(user)
    if own is None:
        return False
    return own.pk == employee.pk or leads_employee(own, employee)
