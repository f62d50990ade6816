# core/errors.py
from __future__ import annotations


class ApiError(Exception):
    """
    Base class for errors that are safe to show to the API caller.

    Services raise these; `core.http.api_endpoint` turns them into
    {"success": false, "error": message} with `http_status`.
    """

    http_status = 400
    default_message = "Richiesta non valida"

    def __init__(self, message: str | None = None, *, http_status: int | None = None, **extra):
        self.message = message or self.default_message
        if http_status is not None:
            self.http_status = http_status
        self.extra = extra
        super().__init__(self.message)


class InvalidInput(ApiError):
    http_status = 400


class InsufficientFunds(ApiError):
    http_status = 400
    default_message = "Saldo insufficiente"


class NotForSale(ApiError):
    http_status = 400
    default_message = "Questa bet non è in vendita"


class Unauthorized(ApiError):
    http_status = 401
    default_message = "Missing or invalid token"


class Forbidden(ApiError):
    http_status = 403
    default_message = "Accesso riservato agli amministratori"


class NotFound(ApiError):
    http_status = 404
    default_message = "Risorsa non trovata"


class AlreadyUnlocked(ApiError):
    http_status = 409
    default_message = "Già sbloccata"


class PaymentFailed(ApiError):
    http_status = 502
    default_message = "Errore del circuito di pagamento"
