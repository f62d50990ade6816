# advisors/paypal.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

import requests
from django.conf import settings

logger = logging.getLogger(__name__)

PAYPAL_BASE_URLS = {
    "live": "https://api-m.paypal.com",
    "sandbox": "https://api-m.sandbox.paypal.com",
}


class PayPalError(Exception):
    pass


@dataclass(frozen=True)
class CapturePayload:
    order_id: str
    status: str  # COMPLETED / PENDING / ...
    custom_id: Optional[str]
    amount: Decimal
    payer_email: str
    raw: Dict[str, Any]

    @property
    def completed(self) -> bool:
        return self.status == "COMPLETED"


class PayPalClient:
    """Thin wrapper over the PayPal Orders v2 REST API."""

    def __init__(
        self,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        mode: Optional[str] = None,
        timeout: Optional[int] = None,
    ):
        self.client_id = (client_id if client_id is not None else settings.PAYPAL_CLIENT_ID).strip()
        self.client_secret = (client_secret if client_secret is not None else settings.PAYPAL_CLIENT_SECRET).strip()
        self.mode = (mode or settings.PAYPAL_MODE).strip()
        self.timeout = timeout or settings.PAYPAL_TIMEOUT

    @property
    def base_url(self) -> str:
        return PAYPAL_BASE_URLS["live"] if self.mode == "live" else PAYPAL_BASE_URLS["sandbox"]

    def access_token(self) -> str:
        if not self.client_id or not self.client_secret:
            raise PayPalError("PayPal credentials not configured")

        data = self._call(
            "post",
            "/v1/oauth2/token",
            auth=(self.client_id, self.client_secret),
            data={"grant_type": "client_credentials"},
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            what="Auth",
        )
        token = data.get("access_token")
        if not token:
            raise PayPalError("PayPal Auth Error: no access_token in response")
        return token

    def create_order(self, *, custom_id: str, amount: Decimal, description: str) -> Dict[str, Any]:
        body = {
            "intent": "CAPTURE",
            "purchase_units": [
                {
                    "custom_id": custom_id,
                    "amount": {
                        "currency_code": settings.PAYPAL_CURRENCY,
                        "value": f"{amount:.2f}",
                    },
                    "description": description,
                }
            ],
        }
        return self._call("post", "/v2/checkout/orders", json=body, bearer=self.access_token(), what="Create Order")

    def capture_order(self, order_id: str) -> CapturePayload:
        data = self._call(
            "post",
            f"/v2/checkout/orders/{order_id}/capture",
            json={},
            bearer=self.access_token(),
            what="Capture",
        )
        return self.parse_capture(order_id, data)

    @classmethod
    def parse_capture(cls, order_id: str, data: Dict[str, Any]) -> CapturePayload:
        unit = (data.get("purchase_units") or [{}])[0]
        capture = ((unit.get("payments") or {}).get("captures") or [{}])[0]

        # custom_id shows up on the capture or on the purchase unit, depending on the flow
        custom_id = capture.get("custom_id") or unit.get("custom_id")

        return CapturePayload(
            order_id=str(data.get("id") or order_id),
            status=str(data.get("status") or ""),
            custom_id=str(custom_id) if custom_id else None,
            amount=cls._to_decimal((capture.get("amount") or {}).get("value")),
            payer_email=str((data.get("payer") or {}).get("email_address") or ""),
            raw=data,
        )

    def _call(self, method: str, path: str, *, bearer: Optional[str] = None, what: str = "", **kwargs) -> Dict[str, Any]:
        headers = dict(kwargs.pop("headers", None) or {})
        if bearer:
            headers["Authorization"] = f"Bearer {bearer}"
            headers.setdefault("Content-Type", "application/json")

        try:
            r = requests.request(method, f"{self.base_url}{path}", headers=headers, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise PayPalError(f"PayPal {what} Error: {e}") from e

        if not r.ok:
            try:
                detail = r.json()
            except ValueError:
                detail = r.text
            logger.warning("PayPal %s failed (%s): %s", what, r.status_code, detail)
            raise PayPalError(f"PayPal {what} Error: {detail}")

        try:
            return r.json()
        except ValueError as e:
            raise PayPalError(f"PayPal {what} Error: invalid JSON") from e

    @staticmethod
    def _to_decimal(v: Any) -> Decimal:
        try:
            d = Decimal(str(v))
        except (InvalidOperation, ValueError):
            return Decimal("0")
        return d if d.is_finite() else Decimal("0")
