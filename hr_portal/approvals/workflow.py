"""Approval state machines for leave, permission and work-submission requests.

Every request moves employee -> team lead -> manager. Transitions lock the
row, validate the actor and the current status, persist the new status,
write an audit entry and fan notifications out to every interested
employee. All of it happens inside one transaction; realtime pushes are
deferred until commit.
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from dataclasses import field
from typing import Any

from django.db import transaction
from django.db.transaction import on_commit
from django.utils import timezone
from rest_framework import status
from rest_framework.exceptions import APIException

from hr_portal.audit.utils import log_action
from hr_portal.employees.api.permissions import ROLE_MANAGER
from hr_portal.employees.api.permissions import _user_in_groups
from hr_portal.employees.models import Employee
from hr_portal.employees.services import active_team_leads
from hr_portal.employees.services import employee_for_user
from hr_portal.employees.services import leads_employee
from hr_portal.notifications.models import Notification
from hr_portal.realtime.events.approvals import publish_request_status_changed

logger = logging.getLogger(__name__)

APPROVE = "approve"
REJECT = "reject"
ACTIONS = (APPROVE, REJECT)


class WorkflowError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Workflow rule violated."
    default_code = "workflow_error"


class InvalidTransition(WorkflowError):
    default_detail = "This request has already been processed."
    default_code = "invalid_transition"


class NotAuthorizedForStep(WorkflowError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You are not authorized to process this request."
    default_code = "not_authorized_for_step"


class StepNotFound(WorkflowError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Request not found."
    default_code = "step_not_found"


def with_comments(message: str, comments: str | None, label: str = "Comments") -> str:
    comments = (comments or "").strip()
    if not comments:
        return message
    return f"{message} {label}: {comments}"


def notify(
    recipients: Iterable[Employee | None],
    *,
    title: str,
    message: str,
    notification_type: str,
    reference_id: Any = "",
) -> list[Notification]:
    """Create one notification per distinct recipient account.

    Employees without a linked user cannot be notified; they are skipped.
    """

    created: list[Notification] = []
    seen: set[int] = set()
    for employee in recipients:
        if employee is None:
            continue
        user_id = getattr(employee, "user_id", None)
        if user_id is None:
            logger.warning(
                "No account linked to employee %s; skipping %r notification",
                employee.pk,
                title,
            )
            continue
        if user_id in seen:
            continue
        seen.add(user_id)
        created.append(
            Notification.objects.create(
                recipient_id=user_id,
                title=title,
                message=message,
                notification_type=notification_type,
                reference_id=str(reference_id or ""),
            )
        )
    return created


def _parse_action(action: str | None) -> str:
    value = (action or "").strip().lower()
    if value not in ACTIONS:
        msg = "Invalid action. Must be 'approve' or 'reject'"
        raise WorkflowError(msg)
    return value


class _Flow:
    """Shared locking, transition and audit plumbing."""

    model: Any
    kind: str

    def _lock(self, pk):
        try:
            return self.model.objects.select_for_update().get(pk=pk)
        except (self.model.DoesNotExist, ValueError, TypeError) as exc:
            raise StepNotFound from exc

    def _move(  # noqa: PLR0913
        self,
        instance,
        to_status: str,
        *,
        allowed_from: Iterable[str],
        actor=None,
        ip_address: str = "",
        **changes,
    ):
        before = instance.status
        if before not in tuple(allowed_from):
            msg = f"Request is not in the expected state (current status: {before})"
            raise InvalidTransition(msg)
        instance.status = to_status
        for name, value in changes.items():
            setattr(instance, name, value)
        instance.save(update_fields=["status", "updated_at", *changes])
        logger.info(
            "%s %s: %s -> %s (actor=%s)",
            self.kind,
            instance.pk,
            before,
            to_status,
            getattr(actor, "pk", None),
        )
        with contextlib.suppress(Exception):
            log_action(
                f"{self.kind}_status_changed",
                actor=actor,
                message=f"{self.kind} {instance.pk}: {before} -> {to_status}",
                model_name=self.model.__name__,
                record_id=instance.pk,
                before={"status": before},
                after={"status": to_status},
                ip_address=ip_address,
            )
        kind, pk, employee_id = self.kind, instance.pk, instance.employee_id
        on_commit(
            lambda: publish_request_status_changed(
                kind=kind, request_id=pk, employee_id=employee_id, status=to_status
            )
        )
        return instance

    def _audit_created(self, instance, *, actor=None, ip_address: str = ""):
        with contextlib.suppress(Exception):
            log_action(
                f"{self.kind}_submitted",
                actor=actor,
                message=f"{self.kind} {instance.pk} by {instance.employee_id}",
                model_name=self.model.__name__,
                record_id=instance.pk,
                after={"status": instance.status},
                ip_address=ip_address,
            )


@dataclass(frozen=True)
class Titles:
    submitted: str
    team_lead_approved: str
    approved: str
    rejected: str


@dataclass
class TwoStageFlow(_Flow):
    """Pending Team Lead -> Pending Manager Approval -> Approved | Rejected.

    Used by leave and permission requests. ``noun`` is the lower-case name
    used in notification messages ("leave request").
    """

    model: Any
    kind: str
    noun: str
    request_type: str
    update_type: str
    titles: Titles
    label_attr: str = "label"
    statuses: Any = field(default=None)

    def __post_init__(self):
        if self.statuses is None:
            self.statuses = self.model.Status

    def _label(self, instance) -> str:
        return str(getattr(instance, self.label_attr))

    @transaction.atomic
    def submit(self, instance, *, actor=None, ip_address: str = ""):
        """Persist a new request and route it to the employee's team leads."""

        employee = instance.employee
        leads = list(active_team_leads(employee))
        if not leads:
            msg = "Team lead not found for this employee"
            raise StepNotFound(msg)
        instance.status = self.statuses.PENDING_TEAM_LEAD
        instance.manager = employee.manager
        instance.save()
        instance.eligible_team_leads.set(leads)
        notify(
            leads,
            title=self.titles.submitted,
            message=(
                f"{employee.name} has submitted a {self.noun} "
                f"for {self._label(instance)}"
            ),
            notification_type=self.request_type,
            reference_id=instance.pk,
        )
        self._audit_created(instance, actor=actor, ip_address=ip_address)
        return instance

    @transaction.atomic
    def team_lead_decide(  # noqa: PLR0913
        self,
        pk,
        *,
        actor,
        action: str,
        comments: str = "",
        ip_address: str = "",
    ):
        action = _parse_action(action)
        instance = self._lock(pk)
        lead = employee_for_user(actor)
        if lead is None or not instance.eligible_team_leads.filter(pk=lead.pk).exists():
            raise NotAuthorizedForStep
        allowed = (self.statuses.PENDING_TEAM_LEAD,)
        comments = (comments or "").strip()
        employee = instance.employee
        label = self._label(instance)

        if action == APPROVE:
            self._move(
                instance,
                self.statuses.PENDING_MANAGER,
                allowed_from=allowed,
                actor=actor,
                ip_address=ip_address,
                team_lead=lead,
                team_lead_comments=comments,
            )
            notify(
                [employee],
                title=self.titles.team_lead_approved,
                message=with_comments(
                    f"Your {self.noun} for {label} has been approved by your "
                    "Team Lead and is now pending Manager approval.",
                    comments,
                ),
                notification_type=self.update_type,
                reference_id=instance.pk,
            )
            notify(
                [instance.manager],
                title=self.titles.team_lead_approved,
                message=with_comments(
                    f"{employee.name}'s {self.noun} for {label} has been approved "
                    "by their Team Lead and is now pending your approval.",
                    comments,
                ),
                notification_type=self.update_type,
                reference_id=instance.pk,
            )
            return instance

        self._move(
            instance,
            self.statuses.REJECTED,
            allowed_from=allowed,
            actor=actor,
            ip_address=ip_address,
            team_lead=lead,
            team_lead_comments=comments,
            rejected_at=timezone.now(),
        )
        self._notify_rejected(instance, label, "Team Lead", comments)
        return instance

    @transaction.atomic
    def manager_decide(  # noqa: PLR0913
        self,
        pk,
        *,
        actor,
        action: str,
        comments: str = "",
        ip_address: str = "",
    ):
        action = _parse_action(action)
        instance = self._lock(pk)
        manager = employee_for_user(actor)
        if not self._is_assigned_manager(instance, manager, actor):
            raise NotAuthorizedForStep
        allowed = (self.statuses.PENDING_MANAGER,)
        comments = (comments or "").strip()
        label = self._label(instance)

        if action == APPROVE:
            self._move(
                instance,
                self.statuses.APPROVED,
                allowed_from=allowed,
                actor=actor,
                ip_address=ip_address,
                manager=manager,
                manager_comments=comments,
                approved_at=timezone.now(),
            )
            notify(
                [instance.employee],
                title=self.titles.approved,
                message=with_comments(
                    f"Your {self.noun} for {label} has been fully approved.",
                    comments,
                ),
                notification_type=self.update_type,
                reference_id=instance.pk,
            )
            return instance

        self._move(
            instance,
            self.statuses.REJECTED,
            allowed_from=allowed,
            actor=actor,
            ip_address=ip_address,
            manager=manager,
            manager_comments=comments,
            rejected_at=timezone.now(),
        )
        self._notify_rejected(instance, label, "Manager", comments)
        return instance

    @staticmethod
    def _is_assigned_manager(instance, manager: Employee | None, actor) -> bool:
        if manager is None:
            return False
        if instance.manager_id is None:
            # Unassigned requests fall to any manager.
            return _user_in_groups(actor, [ROLE_MANAGER])
        return instance.manager_id == manager.pk

    def _notify_rejected(self, instance, label: str, stage: str, comments: str):
        notify(
            [instance.employee],
            title=self.titles.rejected,
            message=with_comments(
                f"Your {self.noun} for {label} has been rejected by your {stage}.",
                comments,
            ),
            notification_type=self.update_type,
            reference_id=instance.pk,
        )


@dataclass
class WorkSubmissionFlow(_Flow):
    """Employee work submissions reviewed by a team lead, then a manager.

    Team leads skip their own review step: their submissions go straight to
    a manager.
    """

    model: Any
    kind: str = "work_submission"
    statuses: Any = field(default=None)

    def __post_init__(self):
        if self.statuses is None:
            self.statuses = self.model.Status

    @transaction.atomic
    def submit(
        self, instance, *, by_team_lead: bool, actor=None, ip_address: str = ""
    ):
        employee = instance.employee
        if by_team_lead:
            manager = employee.manager or (
                Employee.objects.filter(
                    user__user_type="manager", is_active=True
                ).exclude(pk=employee.pk).order_by("pk").first()
            )
            if manager is None:
                msg = "Manager not found"
                raise WorkflowError(msg)
            instance.status = self.statuses.PENDING_FINAL
            instance.manager = manager
            instance.save()
            notify(
                [manager],
                title="New Work Submission",
                message=(
                    f"{employee.name} has submitted work for final approval: "
                    f"{instance.title or instance.work_type}"
                ),
                notification_type=Notification.Type.WORK_SUBMISSION,
                reference_id=instance.pk,
            )
        else:
            leads = list(active_team_leads(employee))
            if not leads:
                msg = "Team lead not assigned"
                raise WorkflowError(msg)
            instance.status = self.statuses.PENDING_TEAM_LEAD
            instance.team_lead = leads[0]
            instance.manager = employee.manager
            instance.save()
            notify(
                leads,
                title="New Work Submission",
                message=(
                    f"{employee.name} has submitted work for review: "
                    f"{instance.title or instance.work_type}"
                ),
                notification_type=Notification.Type.WORK_SUBMISSION,
                reference_id=instance.pk,
            )
        self._audit_created(instance, actor=actor, ip_address=ip_address)
        return instance

    def _lead_for(self, instance, actor) -> Employee:
        lead = employee_for_user(actor)
        if not leads_employee(lead, instance.employee):
            msg = "Employee is not in your team"
            raise NotAuthorizedForStep(msg)
        return lead

    @transaction.atomic
    def team_lead_approve(self, pk, *, actor, ip_address: str = ""):
        instance = self._lock(pk)
        lead = self._lead_for(instance, actor)
        self._move(
            instance,
            self.statuses.PENDING_FINAL,
            allowed_from=(self.statuses.PENDING_TEAM_LEAD,),
            actor=actor,
            ip_address=ip_address,
            team_lead=lead,
            team_lead_approved_at=timezone.now(),
        )
        title = instance.title or instance.work_type
        notify(
            [instance.manager],
            title="Work Submission Pending Final Approval",
            message=(
                f"{instance.employee.name}'s work submission \"{title}\" has been "
                "approved by their Team Lead and requires your approval."
            ),
            notification_type=Notification.Type.WORK_SUBMISSION,
            reference_id=instance.pk,
        )
        return instance

    @transaction.atomic
    def team_lead_reject(
        self, pk, *, actor, rejection_reason: str = "", ip_address: str = ""
    ):
        instance = self._lock(pk)
        lead = self._lead_for(instance, actor)
        reason = (rejection_reason or "").strip()
        self._move(
            instance,
            self.statuses.REJECTED_BY_TEAM_LEAD,
            allowed_from=(self.statuses.PENDING_TEAM_LEAD,),
            actor=actor,
            ip_address=ip_address,
            team_lead=lead,
            rejection_reason=reason or "No reason provided",
        )
        notify(
            [instance.employee],
            title="Work Submission Rejected",
            message=(
                "Your work submission has been rejected by your team lead. "
                + (f"Reason: {reason}" if reason else "No reason provided")
            ),
            notification_type=Notification.Type.WORK_REJECTION,
            reference_id=instance.pk,
        )
        return instance

    def _lock_pending_final(self, pk):
        instance = self._lock(pk)
        if instance.status != self.statuses.PENDING_FINAL:
            msg = "Submission not found or not in pending final approval status"
            raise StepNotFound(msg)
        return instance

    @transaction.atomic
    def final_decide(  # noqa: PLR0913
        self,
        pk,
        *,
        actor,
        action: str,
        manager_comments: str = "",
        ip_address: str = "",
    ):
        action = _parse_action(action)
        instance = self._lock_pending_final(pk)
        comments = (manager_comments or "").strip()
        manager = employee_for_user(actor) or instance.manager
        title = instance.title or instance.work_type
        approve = action == APPROVE
        now = timezone.now()
        changes = {"manager": manager, "manager_comments": comments}
        if approve:
            changes["final_approved_date"] = now
        else:
            changes["final_rejected_date"] = now
        self._move(
            instance,
            self.statuses.FINAL_APPROVED if approve else self.statuses.FINAL_REJECTED,
            allowed_from=(self.statuses.PENDING_FINAL,),
            actor=actor,
            ip_address=ip_address,
            **changes,
        )
        if approve:
            notify(
                [instance.employee],
                title="Work Submission Final Approved",
                message=with_comments(
                    f'Your work submission "{title}" has been given final '
                    "approval by the manager.",
                    comments,
                    "Manager comments",
                ),
                notification_type=Notification.Type.FINAL_APPROVAL,
                reference_id=instance.pk,
            )
        else:
            notify(
                [instance.employee],
                title="Work Submission Final Rejected",
                message=with_comments(
                    f'Your work submission "{title}" has been rejected by the '
                    "manager.",
                    comments,
                    "Manager comments",
                ),
                notification_type=Notification.Type.FINAL_REJECTION,
                reference_id=instance.pk,
            )
        return instance
