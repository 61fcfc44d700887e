# artmarket/api/routers/orders.py
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from artmarket.api.deps import get_payment_client
from artmarket.domain.errors import UpstreamError
from artmarket.domain.schemas import OrderCreate
from artmarket.services.order_service import OrderService
from artmarket.services.payment_client import PaymentGatewayClient
from artmarket.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["orders"])


@router.post("/createorder")
def create_order(
    payload: OrderCreate,
    payment_client: PaymentGatewayClient = Depends(get_payment_client),
):
    """
    Tworzy zamowienie w bramce platnosci i zwraca jej odpowiedz 1:1.
    """
    svc = OrderService(payment_client)
    try:
        return svc.create_order(payload)
    except UpstreamError as e:
        logger.error(f"Error creating order: {e}")
        return JSONResponse(status_code=500, content={"error": "Failed to create order"})
