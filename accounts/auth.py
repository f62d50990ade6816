# accounts/auth.py
from __future__ import annotations

import functools

from django.contrib.auth import get_user_model

from core.errors import Forbidden, Unauthorized
from .tokens import bearer_token, verify_token


def auth_required(view):
    """Reject with 401 before any work; sets request.claims."""

    @functools.wraps(view)
    def wrapper(request, *args, **kwargs):
        token = bearer_token(request)
        if not token:
            raise Unauthorized("Missing or invalid token")
        claims = verify_token(token)
        if claims is None:
            raise Unauthorized("Invalid token")
        request.claims = claims
        return view(request, *args, **kwargs)

    return wrapper


def auth_optional(view):
    """request.claims is None for anonymous (or badly authenticated) viewers."""

    @functools.wraps(view)
    def wrapper(request, *args, **kwargs):
        token = bearer_token(request)
        request.claims = verify_token(token) if token else None
        return view(request, *args, **kwargs)

    return wrapper


def admin_required(view):
    @auth_required
    @functools.wraps(view)
    def wrapper(request, *args, **kwargs):
        # the isAdmin claim can outlive a revoked staff flag, so ask the DB
        is_admin = get_user_model().objects.filter(
            pk=request.claims.user_id, is_staff=True, is_active=True
        ).exists()
        if not is_admin:
            raise Forbidden()
        return view(request, *args, **kwargs)

    return wrapper
