from decimal import Decimal

import pytest

from advisors import paypal
from advisors.models import BetLock, Transaction
from advisors.paypal import CapturePayload, PayPalClient, PayPalError
from advisors.services import capture_payment_order, create_payment_order
from core.errors import AlreadyUnlocked, NotForSale, PaymentFailed
from tests.helpers import euro


def _capture_body(order_id="ORDER-1", status="COMPLETED", custom_id="1", value="4.00", on_unit=False):
    unit = {"payments": {"captures": [{"amount": {"currency_code": "EUR", "value": value}}]}}
    if on_unit:
        unit["custom_id"] = custom_id
    elif custom_id is not None:
        unit["payments"]["captures"][0]["custom_id"] = custom_id
    return {
        "id": order_id,
        "status": status,
        "payer": {"email_address": "buyer@example.com"},
        "purchase_units": [unit],
    }


class FakePayPal:
    def __init__(self, capture=None, fail=False):
        self.capture = capture
        self.fail = fail
        self.orders = []

    def create_order(self, *, custom_id, amount, description):
        if self.fail:
            raise PayPalError("PayPal Create Order Error: boom")
        self.orders.append((custom_id, amount))
        return {"id": "ORDER-1", "status": "CREATED"}

    def capture_order(self, order_id):
        if self.fail:
            raise PayPalError("PayPal Capture Error: boom")
        return self.capture


class FakeResponse:
    def __init__(self, status_code=200, data=None):
        self.status_code = status_code
        self.ok = status_code < 400
        self._data = data
        self.text = str(data)

    def json(self):
        if self._data is None:
            raise ValueError("no json")
        return self._data


@pytest.fixture
def top_slip(make_user, make_slip):
    advisor = make_user(balance="18000")
    return advisor, make_slip(advisor)


@pytest.mark.django_db
def test_order_amount_comes_from_server(caplog, make_user, top_slip):
    _, slip = top_slip
    fake = FakePayPal()

    order = create_payment_order(
        buyer_id=make_user().pk, slip_id=slip.pk, client_price=Decimal("0.01"), client=fake
    )

    assert order["id"] == "ORDER-1"
    assert fake.orders == [(str(slip.pk), Decimal("4.00"))]
    assert "ignored" in caplog.text


@pytest.mark.django_db
def test_order_refused_when_already_unlocked(make_user, top_slip):
    _, slip = top_slip
    buyer = make_user()
    BetLock.objects.create(user=buyer, saved_bet=slip, purchased_price=Decimal("4.00"))

    with pytest.raises(AlreadyUnlocked):
        create_payment_order(buyer_id=buyer.pk, slip_id=slip.pk, client=FakePayPal())


@pytest.mark.django_db
def test_order_refused_when_not_for_sale(make_user, make_slip):
    slip = make_slip(make_user(balance="100"))

    with pytest.raises(NotForSale):
        create_payment_order(buyer_id=make_user().pk, slip_id=slip.pk, client=FakePayPal())


@pytest.mark.django_db
def test_provider_error_becomes_payment_failed(make_user, top_slip):
    _, slip = top_slip

    with pytest.raises(PaymentFailed) as exc:
        create_payment_order(buyer_id=make_user().pk, slip_id=slip.pk, client=FakePayPal(fail=True))

    assert exc.value.http_status == 502


@pytest.mark.django_db
def test_capture_unlocks_and_credits_half(make_user, top_slip):
    advisor, slip = top_slip
    buyer = make_user()
    payload = PayPalClient.parse_capture("ORDER-1", _capture_body(custom_id=str(slip.pk)))

    result = capture_payment_order(buyer_id=buyer.pk, order_id="ORDER-1", client=FakePayPal(payload))

    assert result.unlocked is True
    assert result.slip_id == slip.pk
    lock = BetLock.objects.get(user=buyer, saved_bet=slip)
    assert lock.purchased_price == Decimal("4.00")
    assert lock.payment_ref == "ORDER-1"
    assert euro(advisor) == Decimal("2.00")
    assert Transaction.objects.get(user=advisor).payment_email == "buyer@example.com"


@pytest.mark.django_db
def test_second_capture_does_not_credit_again(make_user, top_slip):
    advisor, slip = top_slip
    buyer = make_user()
    fake = FakePayPal(PayPalClient.parse_capture("ORDER-1", _capture_body(custom_id=str(slip.pk))))

    capture_payment_order(buyer_id=buyer.pk, order_id="ORDER-1", client=fake)
    again = capture_payment_order(buyer_id=buyer.pk, order_id="ORDER-1", client=fake)

    assert again.unlocked is False
    assert euro(advisor) == Decimal("2.00")
    assert BetLock.objects.count() == 1


@pytest.mark.django_db
def test_pending_capture_unlocks_nothing(make_user, top_slip):
    _, slip = top_slip
    payload = PayPalClient.parse_capture("ORDER-1", _capture_body(status="PENDING", custom_id=str(slip.pk)))

    with pytest.raises(PaymentFailed) as exc:
        capture_payment_order(buyer_id=make_user().pk, order_id="ORDER-1", client=FakePayPal(payload))

    assert exc.value.http_status == 400
    assert exc.value.extra == {"status": "PENDING"}
    assert not BetLock.objects.exists()


@pytest.mark.django_db
def test_capture_without_custom_id(make_user):
    payload = PayPalClient.parse_capture("ORDER-1", _capture_body(custom_id=None))

    with pytest.raises(PaymentFailed):
        capture_payment_order(buyer_id=make_user().pk, order_id="ORDER-1", client=FakePayPal(payload))

    assert not BetLock.objects.exists()


def test_parse_capture_reads_custom_id_from_unit():
    payload = PayPalClient.parse_capture("X", _capture_body(custom_id="42", on_unit=True, value="2.90"))

    assert isinstance(payload, CapturePayload)
    assert payload.completed
    assert payload.custom_id == "42"
    assert payload.amount == Decimal("2.90")
    assert payload.payer_email == "buyer@example.com"


def test_parse_capture_tolerates_empty_body():
    payload = PayPalClient.parse_capture("X", {})

    assert payload.order_id == "X"
    assert payload.completed is False
    assert payload.custom_id is None
    assert payload.amount == Decimal("0")


def test_client_gets_token_then_creates_order(monkeypatch):
    calls = []

    def fake_request(method, url, **kwargs):
        calls.append((method, url, kwargs))
        if url.endswith("/v1/oauth2/token"):
            return FakeResponse(data={"access_token": "tok"})
        return FakeResponse(201, {"id": "ORDER-9", "status": "CREATED"})

    monkeypatch.setattr(paypal.requests, "request", fake_request)
    client = PayPalClient(client_id="id", client_secret="secret", mode="sandbox", timeout=5)

    order = client.create_order(custom_id="7", amount=Decimal("2.9"), description="x")

    assert order["id"] == "ORDER-9"
    token_call, order_call = calls
    assert token_call[1] == "https://api-m.sandbox.paypal.com/v1/oauth2/token"
    assert token_call[2]["auth"] == ("id", "secret")
    assert order_call[2]["headers"]["Authorization"] == "Bearer tok"
    unit = order_call[2]["json"]["purchase_units"][0]
    assert unit["custom_id"] == "7"
    assert unit["amount"]["value"] == "2.90"


def test_live_mode_uses_live_host():
    assert PayPalClient("a", "b", "live").base_url == "https://api-m.paypal.com"
    assert PayPalClient("a", "b", "anything-else").base_url == "https://api-m.sandbox.paypal.com"


def test_client_raises_on_http_error(monkeypatch):
    monkeypatch.setattr(
        paypal.requests, "request", lambda *a, **kw: FakeResponse(401, {"error": "invalid_client"})
    )
    client = PayPalClient(client_id="id", client_secret="bad", mode="sandbox", timeout=5)

    with pytest.raises(PayPalError, match="invalid_client"):
        client.access_token()


def test_client_requires_credentials():
    with pytest.raises(PayPalError):
        PayPalClient(client_id="", client_secret="", mode="sandbox").access_token()
