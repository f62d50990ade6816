from decimal import Decimal

import pytest

from betting.models import BetSelection, SavedBet
from betting.services import BetRequest, SelectionInput, parse_bet_request, place_bet
from core.errors import InsufficientFunds, InvalidInput, NotFound
from tests.helpers import gp


def _request(match, *, stake="20", total_odds="2.50", potential_win="50", **extra):
    data = {
        "stake": stake,
        "total_odds": total_odds,
        "potential_win": potential_win,
        "selections": [{"match_id": match.pk, "market": "Match Winner", "selection": "Home", "odd": "2.50"}],
    }
    data.update(extra)
    return parse_bet_request(data)


def test_parse_accepts_camel_case():
    req = parse_bet_request(
        {
            "stake": 10,
            "totalOdds": 3.1,
            "potentialWin": 31,
            "selections": [{"matchId": "77", "market": "Over/Under", "selection": "Over 2.5", "odd": 3.1}],
        }
    )

    assert req.stake == Decimal("10")
    assert req.total_odds == Decimal("3.1")
    assert req.potential_win == Decimal("31")
    assert req.selections == [SelectionInput(77, "Over/Under", "Over 2.5", Decimal("3.1"))]


@pytest.mark.parametrize(
    "raw",
    [
        {"market": "Match Winner", "selection": "Home", "odd": "2"},
        {"match_id": 1, "selection": "Home", "odd": "2"},
        {"match_id": 1, "market": "Match Winner", "selection": "Home", "odd": "abc"},
        {"match_id": 1, "market": "Match Winner", "selection": "Home", "odd": "0"},
        "1-X",
    ],
)
def test_parse_rejects_bad_selection(raw):
    with pytest.raises(InvalidInput):
        parse_bet_request({"stake": 10, "selections": [raw]})


@pytest.mark.django_db
def test_place_bet_debits_stake(make_user, make_match):
    user = make_user(balance="100")
    match = make_match()

    slip, new_balance = place_bet(user_id=user.pk, request=_request(match))

    assert new_balance == Decimal("80")
    assert gp(user) == Decimal("80")
    assert slip.is_settled is False
    assert slip.potential_win == Decimal("50")
    assert list(slip.selections.values_list("match_id", "market", "selection")) == [
        (match.pk, "Match Winner", "Home")
    ]


@pytest.mark.django_db
def test_first_bet_starts_from_default_balance(make_user, make_match):
    user = make_user()

    _, new_balance = place_bet(user_id=user.pk, request=_request(make_match(), stake="30"))

    assert new_balance == Decimal("70")


@pytest.mark.django_db
def test_whole_balance_can_be_staked(make_user, make_match):
    user = make_user(balance="20")

    _, new_balance = place_bet(user_id=user.pk, request=_request(make_match(), stake="20"))

    assert new_balance == Decimal("0")


@pytest.mark.django_db
@pytest.mark.parametrize("stake", ["0", "-5", "abc", None, "0.001"])
def test_invalid_stake_rejected(make_user, make_match, stake):
    user = make_user(balance="100")

    with pytest.raises(InvalidInput):
        place_bet(user_id=user.pk, request=_request(make_match(), stake=stake))

    assert gp(user) == Decimal("100")
    assert not SavedBet.objects.exists()


@pytest.mark.django_db
def test_insufficient_funds(make_user, make_match):
    user = make_user(balance="10")

    with pytest.raises(InsufficientFunds):
        place_bet(user_id=user.pk, request=_request(make_match(), stake="20"))

    assert gp(user) == Decimal("10")
    assert not SavedBet.objects.exists()


@pytest.mark.django_db
def test_empty_selections_rejected(make_user):
    user = make_user(balance="100")

    with pytest.raises(InvalidInput):
        place_bet(user_id=user.pk, request=BetRequest(stake=Decimal("10"), selections=[]))


@pytest.mark.django_db
def test_unknown_match_rejected(make_user):
    user = make_user(balance="100")
    req = BetRequest(
        stake=Decimal("10"),
        selections=[SelectionInput(999999, "Match Winner", "Home", Decimal("2"))],
    )

    with pytest.raises(NotFound):
        place_bet(user_id=user.pk, request=req)

    assert gp(user) == Decimal("100")


@pytest.mark.django_db
def test_missing_totals_are_derived(make_user, make_match):
    user = make_user(balance="100")
    m1, m2 = make_match(), make_match()
    req = BetRequest(
        stake=Decimal("10"),
        selections=[
            SelectionInput(m1.pk, "Match Winner", "Home", Decimal("2.00")),
            SelectionInput(m2.pk, "Both Teams Score", "Yes", Decimal("1.50")),
        ],
    )

    slip, _ = place_bet(user_id=user.pk, request=req)

    assert slip.total_odds == Decimal("3.000")
    assert slip.potential_win == Decimal("30.00")


@pytest.mark.django_db
def test_failed_insert_rolls_back_everything(monkeypatch, make_user, make_match):
    user = make_user(balance="100")

    def boom(*args, **kwargs):
        raise RuntimeError("insert failed")

    monkeypatch.setattr(BetSelection.objects, "bulk_create", boom)

    with pytest.raises(RuntimeError):
        place_bet(user_id=user.pk, request=_request(make_match()))

    assert gp(user) == Decimal("100")
    assert not SavedBet.objects.exists()


@pytest.mark.django_db
@pytest.mark.parametrize(
    "field, value",
    [("potential_win", "0.001"), ("potential_win", "0.004"), ("total_odds", "0.0001")],
)
def test_amounts_that_round_to_zero_rejected(make_user, make_match, field, value):
    user = make_user(balance="100")

    with pytest.raises(InvalidInput):
        place_bet(user_id=user.pk, request=_request(make_match(), **{field: value}))

    assert gp(user) == Decimal("100")
    assert not SavedBet.objects.exists()


@pytest.mark.django_db
def test_selection_odd_that_rounds_to_zero_rejected(make_user, make_match):
    user = make_user(balance="100")
    req = BetRequest(
        stake=Decimal("10"),
        selections=[SelectionInput(make_match().pk, "Match Winner", "Home", Decimal("0.0004"))],
        total_odds=Decimal("2"),
    )

    with pytest.raises(InvalidInput):
        place_bet(user_id=user.pk, request=req)

    assert not SavedBet.objects.exists()


@pytest.mark.django_db
@pytest.mark.parametrize("field", ["stake", "total_odds", "potential_win"])
def test_amounts_too_large_to_store_rejected(make_user, make_match, field):
    user = make_user(balance="100")
    values = {"stake": Decimal("10"), "total_odds": Decimal("2"), "potential_win": Decimal("20")}
    values[field] = Decimal("1e30")
    req = BetRequest(
        selections=[SelectionInput(make_match().pk, "Match Winner", "Home", Decimal("2"))],
        **values,
    )

    with pytest.raises(InvalidInput):
        place_bet(user_id=user.pk, request=req)

    assert gp(user) == Decimal("100")
    assert not SavedBet.objects.exists()


@pytest.mark.django_db
def test_huge_stake_from_the_api_is_a_400(make_user, make_match, api_client):
    user = make_user(balance="100")
    match = make_match()
    body = {
        "stake": "1e30",
        "selections": [{"match_id": match.pk, "market": "Match Winner", "selection": "Home", "odd": "2"}],
    }

    resp = api_client(user).post("/api/saved-bets", body, content_type="application/json")

    assert resp.status_code == 400
    assert resp.json() == {"success": False, "error": "Puntata non valida"}
