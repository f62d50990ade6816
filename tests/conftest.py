"""
Shared fixtures: users with a given GP balance, fixtures (matches),
placed slips and an authenticated API client.
"""
from __future__ import annotations

import itertools
from datetime import timedelta
from decimal import Decimal

import pytest
from django.test import Client
from django.utils import timezone

from accounts.models import GPBalance
from accounts.tokens import issue_token
from betting.models import BetSelection, SavedBet
from matches.models import Match, MatchOdd

_fixture_ids = itertools.count(1000)


@pytest.fixture
def make_user(django_user_model):
    counter = itertools.count(1)

    def _make(*, balance=None, email=None, is_staff=False, password="secret-pass-123"):
        n = next(counter)
        email = email or f"user{n}@example.com"
        user = django_user_model.objects.create_user(
            username=email, email=email, password=password, is_staff=is_staff
        )
        if balance is not None:
            GPBalance.objects.create(user=user, balance=Decimal(str(balance)))
        return user

    return _make


@pytest.fixture
def make_match():
    def _make(*, status="NS", goals_home=None, goals_away=None, kickoff=None, **extra):
        return Match.objects.create(
            fixture_id=extra.pop("fixture_id", next(_fixture_ids)),
            home_team=extra.pop("home_team", "Inter"),
            away_team=extra.pop("away_team", "Milan"),
            league_name=extra.pop("league_name", "Serie A"),
            fixture_date=kickoff or timezone.now() + timedelta(days=1),
            status=status,
            goals_home=goals_home,
            goals_away=goals_away,
            **extra,
        )

    return _make


@pytest.fixture
def add_odds():
    def _add(match, market, selection, odd, bookmaker_id=8):
        return MatchOdd.objects.create(
            match=match, bookmaker_id=bookmaker_id, market=market, selection=selection, odd=Decimal(str(odd))
        )

    return _add


@pytest.fixture
def make_slip(make_match):
    """A slip written straight to the DB (no balance debit)."""

    def _make(user, picks=None, *, stake="10", total_odds="2.0", potential_win="20", is_settled=False):
        slip = SavedBet.objects.create(
            user=user,
            stake=Decimal(stake),
            total_odds=Decimal(total_odds),
            potential_win=Decimal(potential_win),
            is_settled=is_settled,
        )
        for match, market, selection in picks or [(make_match(), "Match Winner", "Home")]:
            BetSelection.objects.create(
                saved_bet=slip, match=match, market=market, selection=selection, odd=Decimal("2.0")
            )
        return slip

    return _make


@pytest.fixture
def api_client():
    def _client(user=None):
        if user is None:
            return Client()
        return Client(HTTP_AUTHORIZATION=f"Bearer {issue_token(user)}")

    return _client
