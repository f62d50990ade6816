# accounts/tokens.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta

import jwt
from django.conf import settings
from django.utils import timezone
from jwt.exceptions import InvalidTokenError

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    is_admin: bool = False


def issue_token(user) -> str:
    payload = {
        "userId": user.pk,
        "email": user.email,
        "isAdmin": bool(user.is_staff),
        "exp": timezone.now() + timedelta(days=settings.JWT_EXPIRE_DAYS),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=ALGORITHM)


def verify_token(token: str) -> TokenClaims | None:
    try:
        data = jwt.decode(token, settings.JWT_SECRET, algorithms=[ALGORITHM])
    except InvalidTokenError as e:
        logger.info("Token verification failed: %s", e)
        return None

    try:
        user_id = int(data["userId"])
    except (KeyError, TypeError, ValueError):
        logger.info("Token without a usable userId claim")
        return None
    return TokenClaims(user_id=user_id, is_admin=bool(data.get("isAdmin", False)))


def bearer_token(request) -> str | None:
    header = request.headers.get("Authorization", "")
    if not header.startswith("Bearer "):
        return None
    return header[7:].strip() or None
