# betting/tasks.py
from celery import shared_task

from .settle import settle_finished_slips


@shared_task
def settle_pending_slips(limit: int = 500) -> dict:
    """
    Safety net for the read-triggered settlement: pays out won slips
    even if their owner never opens the saved-bets page.
    """
    return settle_finished_slips(limit=limit)
