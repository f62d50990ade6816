# advisors/pricing.py
from __future__ import annotations

from decimal import Decimal

ADVISOR_THRESHOLD = Decimal("10000")

# (minimum GP balance, EUR price), highest first
PRICE_TIERS = (
    (Decimal("18000"), Decimal("4.00")),
    (Decimal("15000"), Decimal("3.50")),
    (ADVISOR_THRESHOLD, Decimal("2.90")),
)

NOT_FOR_SALE = Decimal("0.00")

REVENUE_SHARE = Decimal("0.50")


def is_advisor(gp_balance) -> bool:
    return Decimal(gp_balance) >= ADVISOR_THRESHOLD


def slip_price(gp_balance) -> Decimal:
    """
    EUR price of one slip from the advisor's *current* GP balance.
    NOT_FOR_SALE (0.00) below the advisor threshold.
    """
    balance = Decimal(gp_balance)
    for minimum, price in PRICE_TIERS:
        if balance >= minimum:
            return price
    return NOT_FOR_SALE


def advisor_share(amount: Decimal) -> Decimal:
    return (Decimal(amount) * REVENUE_SHARE).quantize(Decimal("0.01"))
