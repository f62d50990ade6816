# betting/management/commands/settle_bets.py
from django.core.management.base import BaseCommand

from betting.settle import settle_finished_slips


class Command(BaseCommand):
    help = "Settle unsettled bet slips whose matches are all finished (FT) and credit GP winnings."

    def add_arguments(self, parser):
        parser.add_argument("--limit", type=int, default=500, help="How many candidate slips to scan (default 500).")

    def handle(self, *args, **options):
        res = settle_finished_slips(limit=options["limit"])
        self.stdout.write(self.style.SUCCESS(f"Done. {res}"))
