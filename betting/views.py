# betting/views.py
from __future__ import annotations

from django.http import HttpRequest, JsonResponse
from django.views.decorators.http import require_http_methods

from accounts.auth import auth_required
from core.http import api_endpoint, json_body
from .services import parse_bet_request, place_bet
from .settle import saved_bets_for_user


@api_endpoint
@require_http_methods(["GET", "POST"])
@auth_required
def saved_bets(request: HttpRequest) -> JsonResponse:
    user_id = request.claims.user_id

    if request.method == "GET":
        # reading the list is what settles won slips
        return JsonResponse({"success": True, "data": saved_bets_for_user(user_id)})

    bet_request = parse_bet_request(json_body(request))
    slip, new_balance = place_bet(user_id=user_id, request=bet_request)
    return JsonResponse({"success": True, "id": slip.pk, "newBalance": new_balance})
