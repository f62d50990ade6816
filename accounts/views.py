# accounts/views.py
from __future__ import annotations

import logging

from django.contrib.auth import get_user_model
from django.http import HttpRequest, JsonResponse
from django.views.decorators.http import require_GET, require_POST

from advisors.models import wallet_balance
from core.errors import InvalidInput, NotFound, Unauthorized
from core.http import api_endpoint, json_body
from .auth import auth_required
from .models import Profile, get_or_create_balance
from .tokens import issue_token

logger = logging.getLogger(__name__)

User = get_user_model()


def _user_payload(user) -> dict:
    profile, _ = Profile.objects.get_or_create(user=user)
    gp = get_or_create_balance(user.pk)
    return {
        "id": user.pk,
        "email": user.email,
        "isAdmin": bool(user.is_staff),
        "email_verified": profile.email_verified,
        "gpBalance": gp.balance,
        "advisorBalance": wallet_balance(user.pk),
    }


@api_endpoint
@require_POST
def login(request: HttpRequest) -> JsonResponse:
    data = json_body(request)
    email = (data.get("email") or "").strip()
    password = data.get("password") or ""
    if not email or not password:
        raise InvalidInput("Email e password obbligatorie")

    user = User.objects.filter(email__iexact=email).order_by("pk").first()
    if user is None:
        raise Unauthorized("Email non trovata")
    if not user.is_active:
        raise Unauthorized("Account bloccato")
    if not user.check_password(password):
        raise Unauthorized("Password errata")

    logger.info("Login ok for user %s", user.pk)
    return JsonResponse({"success": True, "token": issue_token(user), "user": _user_payload(user)})


@api_endpoint
@require_GET
@auth_required
def me(request: HttpRequest) -> JsonResponse:
    user = User.objects.filter(pk=request.claims.user_id).first()
    if user is None:
        raise NotFound("Utente non trovato")
    return JsonResponse({"success": True, "user": _user_payload(user)})
