# betting/models.py
from __future__ import annotations

from django.conf import settings
from django.db import models
from django.utils import timezone

from matches.models import Match


class SavedBet(models.Model):
    """
    A multi-selection bet slip. `is_settled` flips False -> True once,
    when the slip is won and its payout has been credited.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="saved_bets",
    )

    total_odds = models.DecimalField(max_digits=12, decimal_places=3)
    stake = models.DecimalField(max_digits=14, decimal_places=2)
    potential_win = models.DecimalField(max_digits=16, decimal_places=2)

    is_settled = models.BooleanField(default=False)

    created_at = models.DateTimeField(default=timezone.now)
    settled_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        indexes = [
            models.Index(fields=["user", "created_at"], name="savedbet_user_created_idx"),
            models.Index(fields=["is_settled"], name="savedbet_settled_idx"),
        ]

    def __str__(self) -> str:
        return f"SavedBet#{self.pk} user={self.user_id} stake={self.stake} odds={self.total_odds} settled={self.is_settled}"


class BetSelection(models.Model):
    saved_bet = models.ForeignKey(SavedBet, on_delete=models.CASCADE, related_name="selections")
    match = models.ForeignKey(Match, on_delete=models.PROTECT, related_name="bet_selections")

    market = models.CharField(max_length=80)      # e.g. "Match Winner"
    selection = models.CharField(max_length=80)   # e.g. "Home", "Over 2.5"
    odd = models.DecimalField(max_digits=8, decimal_places=3)

    class Meta:
        ordering = ("id",)

    def __str__(self) -> str:
        return f"{self.saved_bet_id}: {self.match_id} {self.market}/{self.selection} @ {self.odd}"
