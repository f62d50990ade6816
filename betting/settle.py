# betting/settle.py
"""
Settlement engine.

A slip is WON when every selection's match is FT and every selection wins,
LOST when every match is FT and at least one selection lost, LIVE otherwise.
A won slip pays `potential_win` into the owner's GP balance exactly once:
`settle_won_slip` locks the slip row and re-checks `is_settled` before paying.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Sequence

from django.db import DatabaseError, transaction
from django.db.models import Count, F, Prefetch, Q
from django.utils import timezone

from accounts.models import balance_add
from matches.models import Match
from matches.services import local_iso
from .models import BetSelection, SavedBet

logger = logging.getLogger(__name__)

WON = "WON"
LOST = "LOST"
LIVE = "LIVE"

Rule = Callable[[int, int], bool]

_MATCH_WINNER: dict[str, Rule] = {
    "Home": lambda gh, ga: gh > ga,
    "Draw": lambda gh, ga: gh == ga,
    "Away": lambda gh, ga: ga > gh,
}
_DOUBLE_CHANCE: dict[str, Rule] = {
    "Home/Draw": lambda gh, ga: gh >= ga,
    "Draw/Away": lambda gh, ga: ga >= gh,
    "Home/Away": lambda gh, ga: gh != ga,
    "Home or Draw": lambda gh, ga: gh >= ga,
    "Draw or Away": lambda gh, ga: ga >= gh,
    "Home or Away": lambda gh, ga: gh != ga,
}
_BOTH_TEAMS_SCORE: dict[str, Rule] = {
    "Yes": lambda gh, ga: gh > 0 and ga > 0,
    "No": lambda gh, ga: gh == 0 or ga == 0,
}
_OVER_UNDER: dict[str, Rule] = {
    "Over 2.5": lambda gh, ga: gh + ga > 2.5,
    "Under 2.5": lambda gh, ga: gh + ga < 2.5,
}

RULES: dict[str, dict[str, Rule]] = {
    "Match Winner": _MATCH_WINNER,
    "Double Chance": _DOUBLE_CHANCE,
    "Both Teams Score": _BOTH_TEAMS_SCORE,
    "Goals Over/Under": _OVER_UNDER,
    "Over/Under": _OVER_UNDER,
    "Over/Under 2.5": _OVER_UNDER,
}


def _goals(v: Any) -> int | None:
    if v is None or isinstance(v, bool):
        return None
    try:
        n = int(str(v).strip())
    except ValueError:
        return None
    return n if n >= 0 else None


def selection_is_winning(market: str, selection: str, goals_home: Any, goals_away: Any) -> bool:
    """
    Unknown score -> not (yet) winning. Unknown market/selection -> never winning.
    """
    gh = _goals(goals_home)
    ga = _goals(goals_away)
    if gh is None or ga is None:
        return False
    rule = RULES.get(market, {}).get(selection)
    if rule is None:
        return False
    return rule(gh, ga)


@dataclass(frozen=True)
class SelectionOutcome:
    match_status: str
    is_winning: bool


def slip_status(outcomes: Sequence[SelectionOutcome]) -> str:
    if not outcomes:
        return LIVE
    if not all(o.match_status == Match.FINISHED for o in outcomes):
        return LIVE
    return WON if all(o.is_winning for o in outcomes) else LOST


def settle_won_slip(slip_id: int) -> bool:
    """
    Credit a won slip's payout and mark it settled.
    Returns False when another caller already settled it.
    """
    with transaction.atomic():
        slip = SavedBet.objects.select_for_update().get(pk=slip_id)
        if slip.is_settled:
            return False

        if slip.potential_win > 0:
            new_balance = balance_add(slip.user_id, slip.potential_win)
        else:
            # nothing to pay; still close it so the read path stops retrying
            new_balance = None
            logger.warning("Won slip %s has no payout (potential_win=%s)", slip.pk, slip.potential_win)

        slip.is_settled = True
        slip.settled_at = timezone.now()
        slip.save(update_fields=["is_settled", "settled_at"])

    logger.info(
        "Settled slip %s: +%s GP to user %s (balance now %s)",
        slip.pk, slip.potential_win, slip.user_id, new_balance,
    )
    return True


def _evaluate(slip: SavedBet) -> tuple[str, list[dict]]:
    rows = []
    outcomes = []
    for s in slip.selections.all():
        m = s.match
        winning = selection_is_winning(s.market, s.selection, m.goals_home, m.goals_away)
        outcomes.append(SelectionOutcome(m.status, winning))
        rows.append(
            {
                "id": s.pk,
                "match_id": m.fixture_id,
                "market": s.market,
                "selection": s.selection,
                "odd": s.odd,
                "home_team": m.home_team,
                "away_team": m.away_team,
                "league_name": m.league_name,
                "goals_home": m.goals_home,
                "goals_away": m.goals_away,
                "fixture_date": local_iso(m.fixture_date),
                "isWinning": winning,
                "currentResult": f"{m.goals_home or 0} - {m.goals_away or 0}",
                "matchStatus": m.status,
                "matchMinute": m.minute,
            }
        )
    return slip_status(outcomes), rows


def _with_selections(qs):
    return qs.prefetch_related(
        Prefetch("selections", queryset=BetSelection.objects.select_related("match"))
    )


def _try_settle(slip: SavedBet) -> None:
    # a failed credit must not break the read; next read retries
    try:
        settle_won_slip(slip.pk)
    except DatabaseError:
        logger.exception("Error settling slip %s, will retry on next read", slip.pk)
        return
    slip.is_settled = True


def saved_bets_for_user(user_id: int) -> list[dict]:
    """The caller's slips, newest first, with live status. Settles won slips on the way."""
    slips = _with_selections(SavedBet.objects.filter(user_id=user_id).order_by("-created_at", "-id"))

    out = []
    for slip in slips:
        status, selections = _evaluate(slip)
        if status == WON and not slip.is_settled:
            _try_settle(slip)

        out.append(
            {
                "id": slip.pk,
                "user_id": slip.user_id,
                "total_odds": slip.total_odds,
                "stake": slip.stake,
                "potential_win": slip.potential_win,
                "created_at": slip.created_at,
                "is_settled": slip.is_settled,
                "status": status,
                "selections": selections,
            }
        )
    return out


def settle_finished_slips(limit: int = 500) -> dict:
    """
    Periodic reconciliation: unsettled slips whose matches are all FT.
    Uses the same locked credit as the read path, so both can run at once.
    """
    candidates = _with_selections(
        SavedBet.objects.filter(is_settled=False)
        .annotate(
            n_selections=Count("selections"),
            n_finished=Count("selections", filter=Q(selections__match__status=Match.FINISHED)),
        )
        .filter(n_selections__gt=0, n_finished=F("n_selections"))
        .order_by("created_at", "id")
    )[:limit]

    checked = 0
    won = 0
    lost = 0
    failed = 0

    for slip in candidates:
        checked += 1
        status, _ = _evaluate(slip)
        if status == LOST:
            lost += 1
            continue
        if status != WON:
            continue

        try:
            if settle_won_slip(slip.pk):
                won += 1
        except DatabaseError:
            logger.exception("Error settling slip %s during reconciliation", slip.pk)
            failed += 1

    return {"checked": checked, "won": won, "lost": lost, "failed": failed}
