# advisors/views.py
from __future__ import annotations

from django.conf import settings
from django.http import HttpRequest, JsonResponse
from django.views.decorators.http import require_GET, require_POST

from accounts.auth import auth_optional, auth_required
from core.errors import InvalidInput
from core.http import api_endpoint, json_body, pick, to_decimal, to_int
from . import services


def _viewer_id(request) -> int | None:
    return request.claims.user_id if request.claims else None


@api_endpoint
@require_GET
@auth_optional
def tipster_public_bets(request: HttpRequest, tipster_id: int) -> JsonResponse:
    result = services.public_bets(tipster_id, _viewer_id(request))
    return JsonResponse({"success": True, **result})


@api_endpoint
@require_GET
@auth_optional
def bet_public_matches(request: HttpRequest, bet_id: int) -> JsonResponse:
    result = services.public_matches(bet_id, _viewer_id(request))
    return JsonResponse({"success": True, **result})


@api_endpoint
@require_POST
@auth_required
def unlock_bet(request: HttpRequest, bet_id: int) -> JsonResponse:
    unlocked = services.unlock_bet(buyer_id=request.claims.user_id, slip_id=bet_id)
    message = "Bet sbloccata con successo" if unlocked else "Già sbloccata"
    return JsonResponse({"success": True, "message": message})


@api_endpoint
@require_POST
@auth_required
def paypal_create_order(request: HttpRequest) -> JsonResponse:
    data = json_body(request)
    slip_id = to_int(pick(data, "bet_id", "betId"))
    if slip_id is None:
        raise InvalidInput("Missing betId")

    order = services.create_payment_order(
        buyer_id=request.claims.user_id,
        slip_id=slip_id,
        client_price=to_decimal(data.get("price")),
    )
    return JsonResponse(order)


@api_endpoint
@require_POST
@auth_required
def paypal_capture_order(request: HttpRequest) -> JsonResponse:
    data = json_body(request)
    order_id = str(pick(data, "order_id", "orderId", default="")).strip()
    if not order_id:
        raise InvalidInput("Missing orderId")

    result = services.capture_payment_order(buyer_id=request.claims.user_id, order_id=order_id)
    return JsonResponse({"success": True, "unlocked": result.unlocked, "capture": result.raw})


@api_endpoint
@require_GET
def paypal_public_config(request: HttpRequest) -> JsonResponse:
    return JsonResponse(
        {
            "success": True,
            "paypal_client_id": settings.PAYPAL_CLIENT_ID,
            "paypal_mode": settings.PAYPAL_MODE,
        }
    )


@api_endpoint
@require_GET
@auth_required
def advisor_wallet(request: HttpRequest) -> JsonResponse:
    return JsonResponse({"success": True, **services.wallet_overview(request.claims.user_id)})


@api_endpoint
@require_POST
@auth_required
def advisor_withdraw(request: HttpRequest) -> JsonResponse:
    data = json_body(request)
    services.request_withdrawal(
        user_id=request.claims.user_id,
        amount=to_decimal(data.get("amount")),
        email=str(data.get("email") or ""),
    )
    return JsonResponse({"success": True, "message": "Richiesta di prelievo inviata con successo"})
