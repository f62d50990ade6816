# matches/services.py
from __future__ import annotations

from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal

from django.conf import settings
from django.db.models import Exists, F, IntegerField, OuterRef, QuerySet, Subquery, Value
from django.db.models.functions import Coalesce
from django.utils import timezone

from .models import LeaguePriority, Match, MatchOdd, Team
from .odds import normalize_odds

DEFAULT_PRIORITY = 1000


def local_iso(dt) -> str | None:
    """Italian wall-clock time without offset; the SPA shows it as-is."""
    if dt is None:
        return None
    if timezone.is_aware(dt):
        dt = timezone.localtime(dt)
    return dt.replace(tzinfo=None).isoformat()


def _board_queryset(bookmaker_id: int) -> QuerySet:
    league_priority = LeaguePriority.objects.filter(league_id=OuterRef("league_id")).values("priority")[:1]
    has_odds = MatchOdd.objects.filter(match=OuterRef("pk"), bookmaker_id=bookmaker_id, odd__gt=0)
    return (
        Match.objects.annotate(
            current_priority=Coalesce(
                Subquery(league_priority, output_field=IntegerField()),
                F("priority"),
                Value(DEFAULT_PRIORITY),
            )
        )
        .filter(Exists(has_odds))
        .order_by("current_priority", "fixture_date", "fixture_id")
    )


def raw_odds_for(match_ids: list[int], bookmaker_id: int) -> dict[int, dict[str, dict[str, Decimal]]]:
    """match_id -> market -> selection -> odd; labels trimmed, first row wins."""
    out: dict[int, dict[str, dict[str, Decimal]]] = defaultdict(dict)
    if not match_ids:
        return out

    rows = (
        MatchOdd.objects.filter(match_id__in=match_ids, bookmaker_id=bookmaker_id)
        .order_by("id")
        .values_list("match_id", "market", "selection", "odd")
    )
    for match_id, market, selection, odd in rows:
        market = (market or "").strip()
        selection = (selection or "").strip()
        quotes = out[match_id].setdefault(market, {})
        if selection not in quotes:
            quotes[selection] = odd
    return out


def serialize_match(m: Match, raw_odds: dict | None = None) -> dict:
    return {
        "fixture_id": m.fixture_id,
        "league_id": m.league_id,
        "league_name": m.league_name,
        "home_team_id": m.home_team_id,
        "home_team": m.home_team,
        "home_logo": m.home_logo,
        "away_team_id": m.away_team_id,
        "away_team": m.away_team,
        "away_logo": m.away_logo,
        "fixture_date": local_iso(m.fixture_date),
        "status": m.status,
        "goals_home": m.goals_home,
        "goals_away": m.goals_away,
        "minute": m.minute,
        "priority": getattr(m, "current_priority", m.priority),
        "normalized_odds": normalize_odds(raw_odds),
    }


def _with_odds(matches: list[Match], bookmaker_id: int) -> list[dict]:
    odds = raw_odds_for([m.fixture_id for m in matches], bookmaker_id)
    return [serialize_match(m, odds.get(m.fixture_id)) for m in matches]


def upcoming_matches(*, bookmaker_id: int | None = None) -> list[dict]:
    """Not-started matches from today on that have at least one real odd."""
    bookmaker_id = bookmaker_id or settings.ODDS_BOOKMAKER_ID
    qs = _board_queryset(bookmaker_id).filter(
        status="NS",
        fixture_date__date__gte=timezone.localdate(),
    )
    return _with_odds(list(qs), bookmaker_id)


def matches_on(day: date, *, bookmaker_id: int | None = None) -> list[dict]:
    bookmaker_id = bookmaker_id or settings.ODDS_BOOKMAKER_ID
    qs = _board_queryset(bookmaker_id).filter(fixture_date__date=day)
    return _with_odds(list(qs), bookmaker_id)


TEAM_FALLBACK_DAYS = 90


def team_list() -> list[dict]:
    """
    Registered teams by name. With an empty registry, the home teams seen
    in the last 90 days of fixtures stand in for it.
    """
    teams = [{"id": t.team_id, "name": t.name, "logo": t.logo_url} for t in Team.objects.all()]
    if teams:
        return teams

    since = timezone.now() - timedelta(days=TEAM_FALLBACK_DAYS)
    rows = (
        Match.objects.filter(fixture_date__gte=since)
        .order_by("home_team", "home_team_id")
        .values_list("home_team_id", "home_team", "home_logo")
        .distinct()
    )
    return [{"id": team_id, "name": name, "logo": logo} for team_id, name, logo in rows]
