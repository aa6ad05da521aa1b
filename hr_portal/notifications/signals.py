from functools import partial

from django.db.models.signals import post_save
from django.db.transaction import on_commit
from django.dispatch import receiver

from hr_portal.realtime.events.notifications import publish_notification_created

from .models import Notification


@receiver(post_save, sender=Notification)
def push_new_notification(sender, instance, created, **kwargs):
    """Emit to the recipient's socket room once the row is committed."""

    if created:
        on_commit(partial(publish_notification_created, instance))
