# artmarket/services/payment_client.py
from decimal import Decimal, ROUND_HALF_UP

import requests
from requests import RequestException

from artmarket.domain.errors import UpstreamError
from artmarket.utils.settings import RAZORPAY_KEY_ID, RAZORPAY_KEY_SECRET, GATEWAY_TIMEOUT_SECONDS
from artmarket.utils.logging import get_logger

logger = get_logger(__name__)

ORDERS_URL = "https://api.razorpay.com/v1/orders"


def to_minor_units(amount) -> int:
    """499.99 -> 49999 (bez bledow floatow)."""
    return int((Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class PaymentGatewayClient:
    """
    Klient bramki platnosci. Bez retry - nie mamy kluczy idempotencji,
    ponowienie mogloby utworzyc dwa zamowienia.
    """

    def __init__(
        self,
        key_id: str | None = None,
        key_secret: str | None = None,
        base_url: str = ORDERS_URL,
        timeout: float = GATEWAY_TIMEOUT_SECONDS,
    ):
        self.key_id = key_id or RAZORPAY_KEY_ID
        self.key_secret = key_secret or RAZORPAY_KEY_SECRET
        self.base_url = base_url
        self.timeout = timeout

    def create_order(self, amount_minor: int, currency: str, receipt: str | None = None) -> dict:
        payload = {"amount": amount_minor, "currency": currency}
        if receipt:
            payload["receipt"] = receipt

        logger.info(f"PaymentGatewayClient POST {self.base_url} amount={amount_minor} {currency}")

        try:
            resp = requests.post(
                self.base_url,
                json=payload,
                auth=(self.key_id, self.key_secret),
                timeout=self.timeout,
            )
            resp.raise_for_status()
            order = resp.json()
        except (RequestException, ValueError) as e:
            logger.error(f"Gateway order creation failed: {e}")
            raise UpstreamError("Payment gateway error") from e

        if not isinstance(order, dict):
            logger.error(f"Gateway returned unexpected body: {order!r}")
            raise UpstreamError("Payment gateway error")
        return order
