# artmarket/api/routers/notifications.py
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from artmarket.api.deps import get_mail_client
from artmarket.domain.errors import UpstreamError
from artmarket.domain.schemas import MessageOut, SendEmailIn
from artmarket.services.mail_client import MailRelayClient
from artmarket.services.notification_service import NotificationService
from artmarket.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["notifications"])


@router.post("/sendemail", response_model=MessageOut)
def send_email(
    payload: SendEmailIn,
    mail_client: MailRelayClient = Depends(get_mail_client),
):
    svc = NotificationService(mail_client)
    try:
        svc.send_referral_email(payload.email.referrer_email, payload.email.referee_email)
    except UpstreamError as e:
        logger.error(f"Error sending email: {e}")
        return JSONResponse(status_code=500, content={"error": "Failed to send email"})
    return {"message": "Email sent successfully"}
