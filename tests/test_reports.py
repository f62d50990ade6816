from decimal import Decimal

import pytest

from advisors.services import request_withdrawal, unlock_bet, complete_withdrawal
from core.reports import advisor_breakdown, financial_summary, recent_transactions


@pytest.mark.django_db
def test_empty_platform():
    summary = financial_summary()

    assert all(v == Decimal("0") for v in summary.values())
    assert advisor_breakdown() == []
    assert recent_transactions() == []


@pytest.mark.django_db
def test_money_figures_add_up(make_user, make_slip):
    top = make_user(balance="18000", email="top@example.com")
    mid = make_user(balance="10000", email="mid@example.com")
    make_user(balance="20000", email="idle@example.com")
    top_slip = make_slip(top)
    mid_slip = make_slip(mid)

    unlock_bet(buyer_id=make_user().pk, slip_id=top_slip.pk)
    unlock_bet(buyer_id=make_user().pk, slip_id=top_slip.pk)
    unlock_bet(buyer_id=make_user().pk, slip_id=mid_slip.pk)

    paid = request_withdrawal(user_id=top.pk, amount=Decimal("1.00"), email="top@paypal.com")
    complete_withdrawal(paid.pk)
    request_withdrawal(user_id=top.pk, amount=Decimal("0.50"), email="top@paypal.com")

    summary = financial_summary()
    assert summary["total_gross"] == Decimal("10.90")
    assert summary["total_advisor_earned"] == Decimal("5.45")
    assert summary["platform_profit"] == Decimal("5.45")
    assert summary["total_withdrawn"] == Decimal("1.00")
    assert summary["total_pending_withdrawals"] == Decimal("0.50")
    assert summary["total_advisor_balance"] == Decimal("3.95")

    rows = advisor_breakdown()
    assert [r["advisor_email"] for r in rows] == ["top@example.com", "mid@example.com"]
    assert rows[0]["total_sales_count"] == 2
    assert rows[0]["gross_revenue"] == Decimal("8.00")
    assert rows[0]["expected_advisor_share"] == Decimal("4.00")
    assert rows[0]["current_wallet_balance"] == Decimal("2.50")
    assert rows[1]["current_wallet_balance"] == Decimal("1.45")

    assert len(recent_transactions()) == 5
