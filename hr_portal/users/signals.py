from __future__ import annotations

from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from django.db.models.signals import post_save
from django.dispatch import receiver

from hr_portal.users.roles import USER_TYPE_GROUPS
from hr_portal.users.roles import group_for_user_type


@receiver(post_save, sender=get_user_model())
def sync_role_group(sender, instance, created, **kwargs):
    """Keep the user in exactly one role group matching ``user_type``.

    Groups are created on demand, so a fresh database does not need
    ``setup_rbac`` before users can sign up.
    """

    target, _ = Group.objects.get_or_create(
        name=group_for_user_type(instance.user_type)
    )
    stale = instance.groups.filter(name__in=USER_TYPE_GROUPS.values()).exclude(
        pk=target.pk
    )
    if stale.exists():
        instance.groups.remove(*stale)
    instance.groups.add(target)
