# core/http.py
from __future__ import annotations

import functools
import json
import logging
from decimal import Decimal, InvalidOperation
from typing import Any

from django.http import HttpRequest, HttpResponseNotAllowed, JsonResponse
from django.views.decorators.csrf import csrf_exempt

from .errors import ApiError, InvalidInput

logger = logging.getLogger(__name__)

GENERIC_ERROR = "Errore interno del server"
METHOD_NOT_ALLOWED = "Metodo non consentito"


def error_response(message: str, status: int, **extra) -> JsonResponse:
    return JsonResponse({"success": False, "error": message, **extra}, status=status)


def api_endpoint(view):
    """
    JSON endpoint wrapper:
    - bearer-token API, so no CSRF cookie dance
    - ApiError -> structured error body with its status
    - anything else -> logged, generic 500 (no internals leak out)
    - 405 from require_GET/require_POST -> same JSON error shape
    """

    @csrf_exempt
    @functools.wraps(view)
    def wrapper(request: HttpRequest, *args, **kwargs):
        try:
            response = view(request, *args, **kwargs)
        except ApiError as e:
            return error_response(e.message, e.http_status, **e.extra)
        except Exception:
            logger.exception("Unhandled error on %s %s", request.method, request.path)
            return error_response(GENERIC_ERROR, 500)

        if isinstance(response, HttpResponseNotAllowed):
            not_allowed = error_response(METHOD_NOT_ALLOWED, 405)
            not_allowed["Allow"] = response["Allow"]
            return not_allowed
        return response

    return wrapper


def json_body(request: HttpRequest) -> dict:
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except (ValueError, UnicodeDecodeError):
        raise InvalidInput("JSON non valido")
    if not isinstance(data, dict):
        raise InvalidInput("JSON non valido")
    return data


def pick(data: dict, *keys: str, default: Any = None) -> Any:
    """
    The SPA sends both snake_case and camelCase spellings
    (total_odds / totalOdds). First non-empty spelling wins.
    """
    for k in keys:
        v = data.get(k)
        if v is not None and v != "":
            return v
    return default


def to_decimal(value: Any) -> Decimal | None:
    """Parse a number coming from JSON; None when missing or not a finite number."""
    if value is None or isinstance(value, bool):
        return None
    try:
        d = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not d.is_finite():
        return None
    return d


def to_int(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def quantize(value: Decimal | None, exp: Decimal) -> Decimal | None:
    """Round to `exp`; None when missing or too large for the decimal context."""
    if value is None:
        return None
    try:
        return value.quantize(exp)
    except InvalidOperation:
        return None
