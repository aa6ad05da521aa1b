from __future__ import annotations

import logging

from django.contrib.auth import get_user_model
from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import Employee

logger = logging.getLogger(__name__)


@receiver(post_save, sender=Employee)
def link_user_by_email(sender, instance, created, **kwargs):
    """Attach an existing portal account whose email matches the employee."""

    if instance.user_id or not instance.email_address:
        return
    user = (
        get_user_model()
        .objects.filter(email__iexact=instance.email_address, employee__isnull=True)
        .first()
    )
    if user is None:
        return
    Employee.objects.filter(pk=instance.pk).update(user=user)
    instance.user = user
    logger.info("Linked employee %s to user %s", instance.employee_id, user.pk)


@receiver(post_save, sender=get_user_model())
def link_employee_on_signup(sender, instance, created, **kwargs):
    if not created or not instance.email:
        return
    employee = Employee.objects.filter(
        email_address__iexact=instance.email, user__isnull=True
    ).first()
    if employee is None:
        return
    Employee.objects.filter(pk=employee.pk).update(user=instance)
    logger.info("Linked user %s to employee %s", instance.pk, employee.employee_id)
