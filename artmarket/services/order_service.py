# artmarket/services/order_service.py
from artmarket.domain.schemas import OrderCreate
from artmarket.services.payment_client import PaymentGatewayClient, to_minor_units
from artmarket.utils.logging import get_logger

logger = get_logger(__name__)


class OrderService:
    """
    Tworzenie zamowienia platnosci w bramce.
    Nic nie zapisujemy lokalnie - zwracamy to co odda bramka.
    """

    def __init__(self, payment_client: PaymentGatewayClient):
        self.payment_client = payment_client

    def create_order(self, payload: OrderCreate) -> dict:
        amount_minor = to_minor_units(payload.amount)
        order = self.payment_client.create_order(
            amount_minor=amount_minor,
            currency=payload.currency.upper(),
            receipt=payload.receipt,
        )
        logger.info(f"Gateway order {order.get('id')} created, receipt={payload.receipt}")
        return order
