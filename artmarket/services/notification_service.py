# artmarket/services/notification_service.py
from artmarket.services.mail_client import MailRelayClient
from artmarket.utils.logging import get_logger

logger = get_logger(__name__)

REFERRAL_SUBJECT = "Referral Submission Successful"


def referral_message(referee_email: str) -> tuple[str, str]:
    text = f"Thank you for referring {referee_email}."
    html = f"<p>Thank you for referring <strong>{referee_email}</strong>.</p>"
    return text, html


class NotificationService:
    """
    Maile transakcyjne. Wysylka synchroniczna - endpoint ma zwrocic blad
    jesli relay nie przyjal wiadomosci (bez kolejki i bez retry).
    """

    def __init__(self, mail_client: MailRelayClient):
        self.mail_client = mail_client

    def send_referral_email(self, referrer_email: str, referee_email: str) -> str | None:
        text, html = referral_message(referee_email)
        message_id = self.mail_client.send(
            to=referee_email,
            subject=REFERRAL_SUBJECT,
            text=text,
            html=html,
        )
        logger.info(f"[NOTIFICATION] referral from {referrer_email} sent to {referee_email}")
        return message_id
