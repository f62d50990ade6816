from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.db import models, transaction
from django.db.models import F


DEFAULT_GP_BALANCE = Decimal("100")


class Profile(models.Model):
    """
    Per-user flags the stock auth User does not carry.
    Admin = user.is_staff, blocked = not user.is_active.
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="profile",
    )
    display_name = models.CharField(max_length=120, blank=True, default="")
    email_verified = models.BooleanField(default=False)

    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.user} verified={self.email_verified}"


class GPBalance(models.Model):
    """Simulated GP points used to place bets; created lazily with 100 GP."""

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="gp_balance",
    )
    balance = models.DecimalField(max_digits=14, decimal_places=2, default=DEFAULT_GP_BALANCE)

    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.user} balance={self.balance}"


def display_name_for(user) -> str:
    profile = getattr(user, "profile", None)
    if profile is not None and profile.display_name.strip():
        return profile.display_name.strip()
    if user.email:
        return user.email.split("@")[0]
    return "Tipster"


def get_or_create_balance(user_id: int, *, lock: bool = False) -> GPBalance:
    """
    lock=True must run inside transaction.atomic(): the row stays locked
    (SELECT ... FOR UPDATE) until the surrounding transaction ends.
    """
    qs = GPBalance.objects.select_for_update() if lock else GPBalance.objects
    balance, _ = qs.get_or_create(user_id=user_id, defaults={"balance": DEFAULT_GP_BALANCE})
    return balance


def current_balance(user_id: int) -> Decimal:
    row = GPBalance.objects.filter(user_id=user_id).values_list("balance", flat=True).first()
    return row if row is not None else DEFAULT_GP_BALANCE


def _apply_balance(balance_id: int, amount: Decimal):
    GPBalance.objects.filter(pk=balance_id).update(balance=F("balance") + amount)


def balance_add(user_id: int, amount: Decimal) -> Decimal:
    if amount <= 0:
        raise ValueError("amount must be > 0")
    with transaction.atomic():
        b = get_or_create_balance(user_id, lock=True)
        _apply_balance(b.pk, amount)
        b.refresh_from_db(fields=["balance"])
    return b.balance
