# betting/services.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from django.db import transaction

from accounts.models import get_or_create_balance
from core.errors import InsufficientFunds, InvalidInput, NotFound
from core.http import pick, quantize, to_decimal, to_int
from matches.models import Match
from .models import BetSelection, SavedBet

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
ODDS_QUANT = Decimal("0.001")


@dataclass(frozen=True)
class SelectionInput:
    match_id: int
    market: str
    selection: str
    odd: Decimal


@dataclass(frozen=True)
class BetRequest:
    stake: Decimal | None
    selections: list[SelectionInput]
    total_odds: Decimal | None = None
    potential_win: Decimal | None = None


def parse_bet_request(data: dict) -> BetRequest:
    """Map both client spellings onto one shape before the core sees them."""
    raw_selections = data.get("selections")
    if not isinstance(raw_selections, list):
        raw_selections = []

    selections: list[SelectionInput] = []
    for raw in raw_selections:
        if not isinstance(raw, dict):
            raise InvalidInput("Selezione non valida")
        match_id = to_int(pick(raw, "match_id", "matchId"))
        market = str(raw.get("market") or "").strip()
        selection = str(raw.get("selection") or "").strip()
        odd = to_decimal(raw.get("odd"))
        if match_id is None or not market or not selection or odd is None or odd <= 0:
            raise InvalidInput("Selezione non valida")
        selections.append(SelectionInput(match_id, market, selection, odd))

    return BetRequest(
        stake=to_decimal(data.get("stake")),
        selections=selections,
        total_odds=to_decimal(pick(data, "total_odds", "totalOdds")),
        potential_win=to_decimal(pick(data, "potential_win", "potentialWin")),
    )


def _combined_odds(selections: list[SelectionInput]) -> Decimal:
    total = Decimal("1")
    for s in selections:
        total *= s.odd
    return total


def place_bet(*, user_id: int, request: BetRequest) -> tuple[SavedBet, Decimal]:
    """
    Lock balance, check funds, insert slip + selections, debit stake.
    All in one transaction; returns (slip, new balance).
    """
    # amounts are checked after rounding to what the columns store
    stake = quantize(request.stake, CENT)
    if stake is None or stake <= 0:
        raise InvalidInput("Puntata non valida")
    if not request.selections:
        raise InvalidInput("Nessuna selezione")

    match_ids = {s.match_id for s in request.selections}
    known = set(Match.objects.filter(pk__in=match_ids).values_list("pk", flat=True))
    if known != match_ids:
        raise NotFound("Partita non trovata")

    total_odds = quantize(request.total_odds or _combined_odds(request.selections), ODDS_QUANT)
    if total_odds is None or total_odds <= 0:
        raise InvalidInput("Quota non valida")
    potential_win = quantize(request.potential_win or stake * total_odds, CENT)
    if potential_win is None or potential_win <= 0:
        raise InvalidInput("Vincita potenziale non valida")

    odds = [quantize(s.odd, ODDS_QUANT) for s in request.selections]
    if any(o is None or o <= 0 for o in odds):
        raise InvalidInput("Selezione non valida")

    with transaction.atomic():
        balance = get_or_create_balance(user_id, lock=True)
        if balance.balance < stake:
            raise InsufficientFunds("GP Points insufficienti")

        slip = SavedBet.objects.create(
            user_id=user_id,
            total_odds=total_odds,
            stake=stake,
            potential_win=potential_win,
        )
        BetSelection.objects.bulk_create(
            [
                BetSelection(
                    saved_bet=slip,
                    match_id=s.match_id,
                    market=s.market,
                    selection=s.selection,
                    odd=odd,
                )
                for s, odd in zip(request.selections, odds)
            ]
        )

        new_balance = balance.balance - stake
        balance.balance = new_balance
        balance.save(update_fields=["balance", "updated_at"])

    logger.info("Bet slip %s placed by user %s stake=%s", slip.pk, user_id, stake)
    return slip, new_balance
