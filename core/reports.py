# core/reports.py
"""Read-only money figures for the admin finance page."""
from __future__ import annotations

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.db.models import Count, DecimalField, Sum, Value
from django.db.models.functions import Coalesce

from advisors.models import AdvisorWallet, BetLock, Transaction
from advisors.pricing import REVENUE_SHARE

ZERO = Decimal("0")
MONEY = DecimalField(max_digits=14, decimal_places=2)


def _sum(qs, field: str) -> Decimal:
    return qs.aggregate(total=Coalesce(Sum(field), Value(ZERO), output_field=MONEY))["total"]


def financial_summary() -> dict:
    total_gross = _sum(BetLock.objects.all(), "purchased_price")
    total_advisor_earned = _sum(Transaction.objects.filter(tx_type="sale", status="completed"), "amount")
    return {
        "total_gross": total_gross,
        "total_advisor_balance": _sum(AdvisorWallet.objects.all(), "balance_euro"),
        "total_advisor_earned": total_advisor_earned,
        "total_withdrawn": _sum(Transaction.objects.filter(tx_type="withdrawal", status="completed"), "amount"),
        "total_pending_withdrawals": _sum(
            Transaction.objects.filter(tx_type="withdrawal", status="pending"), "amount"
        ),
        "platform_profit": total_gross - total_advisor_earned,
    }


def advisor_breakdown() -> list[dict]:
    """One row per advisor who sold at least one slip."""
    rows = (
        get_user_model().objects.annotate(
            total_sales_count=Count("saved_bets__locks"),
            gross_revenue=Coalesce(Sum("saved_bets__locks__purchased_price"), Value(ZERO), output_field=MONEY),
        )
        .filter(total_sales_count__gt=0)
        .order_by("-gross_revenue", "pk")
    )
    wallets = dict(
        AdvisorWallet.objects.filter(user__in=[r.pk for r in rows]).values_list("user_id", "balance_euro")
    )
    return [
        {
            "advisor_id": r.pk,
            "advisor_email": r.email,
            "display_name": r.email,
            "total_sales_count": r.total_sales_count,
            "gross_revenue": r.gross_revenue,
            "expected_advisor_share": (r.gross_revenue * REVENUE_SHARE).quantize(Decimal("0.01")),
            "current_wallet_balance": wallets.get(r.pk, ZERO),
        }
        for r in rows
    ]


def recent_transactions(limit: int = 100) -> list[dict]:
    txs = Transaction.objects.select_related("user").order_by("-created_at", "-id")[:limit]
    return [
        {
            "id": t.pk,
            "advisor_amount": t.amount,
            "type": t.tx_type,
            "status": t.status,
            "buyer_email": t.payment_email,
            "created_at": t.created_at,
            "advisor_email": t.user.email,
        }
        for t in txs
    ]
