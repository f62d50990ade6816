# advisors/services.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.db import transaction
from django.db.models import Count, Exists, OuterRef
from django.utils import timezone

from accounts.models import current_balance, display_name_for
from betting.models import SavedBet
from core.errors import (
    AlreadyUnlocked,
    InsufficientFunds,
    InvalidInput,
    NotForSale,
    NotFound,
    PaymentFailed,
)
from core.http import quantize
from matches.services import local_iso
from .models import AdvisorWallet, BetLock, Transaction, wallet_balance, wallet_credit
from .paypal import PayPalClient, PayPalError
from .pricing import NOT_FOR_SALE, advisor_share, is_advisor, slip_price

logger = logging.getLogger(__name__)

User = get_user_model()

CENT = Decimal("0.01")


# ---------------------------------------------------------------------------
# visibility
# ---------------------------------------------------------------------------
def can_view(viewer_id: int | None, slip: SavedBet) -> bool:
    if viewer_id is None:
        return False
    if viewer_id == slip.user_id:
        return True
    return BetLock.objects.filter(user_id=viewer_id, saved_bet_id=slip.pk).exists()


def price_for_slip(slip: SavedBet) -> Decimal:
    return slip_price(current_balance(slip.user_id))


def public_bets(tipster_id: int, viewer_id: int | None) -> dict:
    tipster = User.objects.select_related("profile").filter(pk=tipster_id).first()
    if tipster is None:
        raise NotFound("Tipster non trovato")

    balance = current_balance(tipster.pk)
    price = slip_price(balance)

    unlocked = BetLock.objects.filter(user_id=viewer_id or 0, saved_bet=OuterRef("pk"))
    slips = (
        SavedBet.objects.filter(user_id=tipster.pk)
        .annotate(match_count=Count("selections"), has_lock=Exists(unlocked))
        .order_by("-created_at", "-id")
    )

    data = []
    for b in slips:
        is_unlocked = bool(b.has_lock) or viewer_id == tipster.pk
        data.append(
            {
                "id": b.pk,
                "total_odds": b.total_odds,
                "match_count": b.match_count,
                "price": f"{price:.2f}",
                "created_at": b.created_at,
                "potential_win": b.potential_win,
                "stake": b.stake,
                "is_unlocked": is_unlocked,
                "is_obscured": not is_unlocked,
            }
        )

    return {
        "tipster": {
            "id": tipster.pk,
            "displayName": display_name_for(tipster),
            "isAdvisor": is_advisor(balance),
            "balance": balance,
        },
        "data": data,
    }


def public_matches(slip_id: int, viewer_id: int | None) -> dict:
    """
    Matches of a slip. Team and pick are only sent to the owner or a
    buyer; everyone else gets them as null.
    """
    slip = SavedBet.objects.filter(pk=slip_id).first()
    if slip is None:
        raise NotFound("Bet non trovata")

    visible = can_view(viewer_id, slip)
    now = timezone.now()

    data = []
    for s in slip.selections.select_related("match"):
        m = s.match
        data.append(
            {
                "market": s.market if visible else None,
                "selection": s.selection if visible else None,
                "odd": s.odd,
                "home_team": m.home_team if visible else None,
                "away_team": m.away_team if visible else None,
                "match_date": local_iso(m.fixture_date),
                "status": m.status,
                "goals_home": m.goals_home,
                "goals_away": m.goals_away,
                "minute": m.minute,
                "isExpired": m.fixture_date < now or m.status != "NS",
            }
        )
    return {"is_obscured": not visible, "data": data}


# ---------------------------------------------------------------------------
# sales
# ---------------------------------------------------------------------------
def _record_sale(*, buyer_id: int, slip: SavedBet, price: Decimal, payer_email: str = "", payment_ref: str = "") -> bool:
    """
    Lock row + 50% to the advisor wallet + ledger entry.
    Must run inside transaction.atomic() with the slip row locked.
    Returns False when the buyer already owns a lock (no second credit).
    """
    if BetLock.objects.filter(user_id=buyer_id, saved_bet_id=slip.pk).exists():
        return False

    revenue = advisor_share(price)

    BetLock.objects.create(
        user_id=buyer_id,
        saved_bet_id=slip.pk,
        purchased_price=price,
        payment_ref=payment_ref,
    )
    wallet_credit(slip.user_id, revenue)
    Transaction.objects.create(
        user_id=slip.user_id,
        amount=revenue,
        tx_type="sale",
        status="completed",
        payment_email=payer_email,
    )

    logger.info(
        "Slip %s sold to user %s for %s EUR (advisor %s credited %s)",
        slip.pk, buyer_id, price, slip.user_id, revenue,
    )
    return True


def _locked_slip(slip_id: int) -> SavedBet:
    slip = SavedBet.objects.select_for_update().filter(pk=slip_id).first()
    if slip is None:
        raise NotFound("Bet non trovata")
    return slip


def unlock_bet(*, buyer_id: int, slip_id: int) -> bool:
    """
    Simulated purchase (no real payment). True if newly unlocked,
    False if the buyer had already unlocked it.
    """
    slip = SavedBet.objects.filter(pk=slip_id).first()
    if slip is None:
        raise NotFound("Bet non trovata")
    if slip.user_id == buyer_id:
        raise InvalidInput("Non puoi acquistare una tua schedina")
    if BetLock.objects.filter(user_id=buyer_id, saved_bet_id=slip.pk).exists():
        return False

    price = price_for_slip(slip)
    if price == NOT_FOR_SALE:
        raise NotForSale()

    with transaction.atomic():
        slip = _locked_slip(slip_id)
        return _record_sale(buyer_id=buyer_id, slip=slip, price=price)


def create_payment_order(*, buyer_id: int, slip_id: int, client_price=None, client: PayPalClient | None = None) -> dict:
    """
    Open a PayPal order for one slip. The amount is always re-derived from
    the advisor's balance; whatever price the client sent is ignored.
    """
    slip = SavedBet.objects.filter(pk=slip_id).first()
    if slip is None:
        raise NotFound("Bet non trovata")
    if slip.user_id == buyer_id:
        raise InvalidInput("Non puoi acquistare una tua schedina")
    if BetLock.objects.filter(user_id=buyer_id, saved_bet_id=slip.pk).exists():
        raise AlreadyUnlocked()

    price = price_for_slip(slip)
    if price == NOT_FOR_SALE:
        raise NotForSale()

    if client_price is not None and client_price != price:
        logger.warning(
            "Client price %s for slip %s ignored, charging %s", client_price, slip.pk, price
        )

    logger.info("Creating PayPal order for slip %s at %s EUR (buyer %s)", slip.pk, price, buyer_id)
    client = client or PayPalClient()
    try:
        return client.create_order(
            custom_id=str(slip.pk),
            amount=price,
            description=f"Acquisto Schedina Tipsters Race - #{slip.pk}",
        )
    except PayPalError as e:
        raise PaymentFailed(str(e))


@dataclass(frozen=True)
class CaptureResult:
    slip_id: int
    unlocked: bool
    raw: dict


def capture_payment_order(*, buyer_id: int, order_id: str, client: PayPalClient | None = None) -> CaptureResult:
    """
    Capture a PayPal order and, when completed, unlock the slip named by the
    order's custom_id. The advisor gets 50% of the captured amount.
    """
    logger.info("Capturing PayPal order %s for buyer %s", order_id, buyer_id)
    client = client or PayPalClient()
    try:
        capture = client.capture_order(order_id)
    except PayPalError as e:
        raise PaymentFailed(str(e))

    if not capture.completed:
        raise PaymentFailed("Pagamento non completato", http_status=400, status=capture.status)

    try:
        slip_id = int(capture.custom_id or "")
    except ValueError:
        logger.error("PayPal order %s has no usable custom_id: %r", order_id, capture.custom_id)
        raise PaymentFailed("Impossibile identificare la bet pagata")

    with transaction.atomic():
        slip = _locked_slip(slip_id)
        unlocked = _record_sale(
            buyer_id=buyer_id,
            slip=slip,
            price=capture.amount,
            payer_email=capture.payer_email,
            payment_ref=capture.order_id,
        )

    if not unlocked:
        logger.warning("PayPal order %s captured for already unlocked slip %s", order_id, slip_id)
    return CaptureResult(slip_id=slip_id, unlocked=unlocked, raw=capture.raw)


# ---------------------------------------------------------------------------
# wallet
# ---------------------------------------------------------------------------
def wallet_overview(user_id: int) -> dict:
    txs = (
        Transaction.objects.filter(user_id=user_id)
        .order_by("-created_at", "-id")
        .values("id", "amount", "tx_type", "status", "payment_email", "created_at")
    )
    return {
        "balance": wallet_balance(user_id),
        "transactions": [
            {
                "id": t["id"],
                "amount": t["amount"],
                "type": t["tx_type"],
                "status": t["status"],
                "payment_email": t["payment_email"],
                "created_at": t["created_at"],
            }
            for t in txs
        ],
    }


def request_withdrawal(*, user_id: int, amount: Decimal | None, email: str) -> Transaction:
    amount = quantize(amount, CENT)
    if amount is None or amount <= 0:
        raise InvalidInput("Importo non valido")
    email = (email or "").strip()
    try:
        validate_email(email)
    except ValidationError:
        raise InvalidInput("Email PayPal non valida")

    with transaction.atomic():
        wallet = AdvisorWallet.objects.select_for_update().filter(user_id=user_id).first()
        if wallet is None or wallet.balance_euro < amount:
            raise InsufficientFunds("Saldo insufficiente")

        wallet.balance_euro -= amount
        wallet.save(update_fields=["balance_euro", "updated_at"])
        tx = Transaction.objects.create(
            user_id=user_id,
            amount=amount,
            tx_type="withdrawal",
            status="pending",
            payment_email=email,
        )

    logger.info("Withdrawal of %s EUR requested by user %s (tx %s)", amount, user_id, tx.pk)
    return tx


def complete_withdrawal(tx_id: int) -> bool:
    """Admin: money has been sent out. Only pending withdrawals move."""
    with transaction.atomic():
        tx = Transaction.objects.select_for_update().get(pk=tx_id)
        if tx.tx_type != "withdrawal" or tx.status != "pending":
            return False
        tx.status = "completed"
        tx.processed_at = timezone.now()
        tx.save(update_fields=["status", "processed_at"])
    logger.info("Withdrawal tx %s completed", tx_id)
    return True


def reject_withdrawal(tx_id: int) -> bool:
    """Admin: refuse a pending withdrawal and give the money back to the wallet."""
    with transaction.atomic():
        tx = Transaction.objects.select_for_update().get(pk=tx_id)
        if tx.tx_type != "withdrawal" or tx.status != "pending":
            return False
        wallet_credit(tx.user_id, tx.amount)
        tx.status = "rejected"
        tx.processed_at = timezone.now()
        tx.save(update_fields=["status", "processed_at"])
    logger.info("Withdrawal tx %s rejected, %s EUR returned to user %s", tx_id, tx.amount, tx.user_id)
    return True
