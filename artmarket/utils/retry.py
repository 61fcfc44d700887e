# artmarket/utils/retry.py
from sqlalchemy.exc import OperationalError
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type


def db_retry(attempts: int):
    """
    Retry tylko dla startu aplikacji (baza jeszcze nie wstala w docker compose).
    Requesty http NIE sa ponawiane.
    """
    return retry(
        reraise=True,
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
        retry=retry_if_exception_type(OperationalError),
    )
