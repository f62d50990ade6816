import json

from django.conf import settings
from django.core.management.base import BaseCommand
from django_celery_beat.models import CrontabSchedule, PeriodicTask

TASK_NAME = "Tipsters: settle finished bet slips"
TASK_PATH = "betting.tasks.settle_pending_slips"


class Command(BaseCommand):
    help = "Register (or update) the Celery Beat job that pays out won bet slips."

    def add_arguments(self, parser):
        parser.add_argument("--every", type=int, default=5, help="Run every N minutes (default 5).")
        parser.add_argument("--limit", type=int, default=500, help="Slips scanned per run (default 500).")
        parser.add_argument("--disable", action="store_true", help="Keep the job but switch it off.")

    def handle(self, *args, **options):
        every = max(1, min(options["every"], 59))

        crontab, _ = CrontabSchedule.objects.get_or_create(
            minute=f"*/{every}",
            hour="*",
            day_of_week="*",
            day_of_month="*",
            month_of_year="*",
            timezone=settings.TIME_ZONE,
        )

        task, created = PeriodicTask.objects.update_or_create(
            name=TASK_NAME,
            defaults={
                "task": TASK_PATH,
                "crontab": crontab,
                "kwargs": json.dumps({"limit": options["limit"]}),
                "enabled": not options["disable"],
            },
        )

        state = "enabled" if task.enabled else "disabled"
        verb = "created" if created else "updated"
        self.stdout.write(self.style.SUCCESS(f"{TASK_NAME} {verb}: every {every} min, {state}."))
