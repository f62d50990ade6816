# advisors/models.py
from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.db import models
from django.db.models import F
from django.utils import timezone


class AdvisorWallet(models.Model):
    """Real-money (EUR) balance earned from slip sales."""

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="advisor_wallet",
    )
    balance_euro = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))

    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.user} EUR {self.balance_euro}"


class BetLock(models.Model):
    """
    A buyer paid to see an advisor's slip. Existence of the row is the
    whole "unlocked for this viewer" predicate; rows are never updated.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="bet_locks",
    )
    saved_bet = models.ForeignKey("betting.SavedBet", on_delete=models.CASCADE, related_name="locks")
    purchased_price = models.DecimalField(max_digits=8, decimal_places=2)

    # PayPal order id for real purchases, blank for simulated ones
    payment_ref = models.CharField(max_length=64, blank=True, default="")

    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["user", "saved_bet"], name="uniq_bet_lock_buyer_bet")
        ]

    def __str__(self):
        return f"{self.user} unlocked slip#{self.saved_bet_id} for {self.purchased_price}"


class Transaction(models.Model):
    TYPE_CHOICES = (
        ("sale", "Sale"),
        ("withdrawal", "Withdrawal"),
    )
    STATUS_CHOICES = (
        ("pending", "Pending"),
        ("completed", "Completed"),
        ("rejected", "Rejected"),
    )

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="advisor_transactions",
    )
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    tx_type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="pending")

    # payer email for sales, payout destination for withdrawals
    payment_email = models.CharField(max_length=254, blank=True, default="")

    created_at = models.DateTimeField(default=timezone.now)
    processed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        indexes = [
            models.Index(fields=["user", "created_at"], name="advtx_user_created_idx"),
            models.Index(fields=["tx_type", "status"], name="advtx_type_status_idx"),
        ]

    def __str__(self):
        return f"{self.tx_type} {self.amount} {self.status} ({self.user})"


def wallet_balance(user_id: int) -> Decimal:
    row = AdvisorWallet.objects.filter(user_id=user_id).values_list("balance_euro", flat=True).first()
    return row if row is not None else Decimal("0")


def wallet_credit(user_id: int, amount: Decimal):
    """Upsert-increment; call inside transaction.atomic()."""
    wallet, created = AdvisorWallet.objects.select_for_update().get_or_create(
        user_id=user_id, defaults={"balance_euro": amount}
    )
    if not created:
        AdvisorWallet.objects.filter(pk=wallet.pk).update(balance_euro=F("balance_euro") + amount)
