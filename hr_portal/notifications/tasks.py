from celery import shared_task

from hr_portal.notifications.reminders import send_scheduled_reminders as sweep


@shared_task(name="notifications.send_scheduled_reminders")
def send_scheduled_reminders() -> dict[str, int]:
    """Beat-driven reminder sweep, run once a minute."""
    return sweep()
