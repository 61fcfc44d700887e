# artmarket/api/deps.py
from functools import lru_cache

from artmarket.services.image_client import ImageHostClient
from artmarket.services.mail_client import MailRelayClient
from artmarket.services.payment_client import PaymentGatewayClient


# klienci zewnetrznych serwisow - jedna instancja na proces,
# w testach podmieniane przez app.dependency_overrides

@lru_cache
def get_image_client() -> ImageHostClient:
    return ImageHostClient()


@lru_cache
def get_payment_client() -> PaymentGatewayClient:
    return PaymentGatewayClient()


@lru_cache
def get_mail_client() -> MailRelayClient:
    return MailRelayClient()
