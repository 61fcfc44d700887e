# artmarket/services/mail_client.py
import requests
from requests import RequestException

from artmarket.domain.errors import UpstreamError
from artmarket.utils.settings import SENDGRID_API_KEY, MAIL_FROM, MAIL_TIMEOUT_SECONDS
from artmarket.utils.logging import get_logger

logger = get_logger(__name__)

SEND_URL = "https://api.sendgrid.com/v3/mail/send"


class MailRelayClient:
    def __init__(
        self,
        api_key: str | None = None,
        from_email: str | None = None,
        base_url: str = SEND_URL,
        timeout: float = MAIL_TIMEOUT_SECONDS,
    ):
        self.api_key = api_key or SENDGRID_API_KEY
        self.from_email = from_email or MAIL_FROM
        self.base_url = base_url
        self.timeout = timeout

    def send(self, to: str, subject: str, text: str, html: str | None = None) -> str | None:
        """Wysyla jednego maila, zwraca message id z relaya (jesli jest)."""
        content = [{"type": "text/plain", "value": text}]
        if html:
            content.append({"type": "text/html", "value": html})

        payload = {
            "personalizations": [{"to": [{"email": to}]}],
            "from": {"email": self.from_email},
            "subject": subject,
            "content": content,
        }

        logger.info(f"MailRelayClient POST {self.base_url} to={to}")

        try:
            resp = requests.post(
                self.base_url,
                json=payload,
                headers={"Authorization": f"Bearer {self.api_key}"},
                timeout=self.timeout,
            )
            resp.raise_for_status()
        except RequestException as e:
            logger.error(f"Mail relay failed: {e}")
            raise UpstreamError("Mail relay error") from e

        return resp.headers.get("X-Message-Id")
