# artmarket/services/image_client.py
import hashlib
import time
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from typing import List, NamedTuple

import requests
from requests import RequestException

from artmarket.domain.errors import UpstreamError
from artmarket.utils.settings import (
    CLOUDINARY_CLOUD_NAME,
    CLOUDINARY_API_KEY,
    CLOUDINARY_API_SECRET,
    UPLOAD_TRANSFORMATION,
    UPLOAD_TIMEOUT_SECONDS,
)
from artmarket.utils.logging import get_logger

logger = get_logger(__name__)

UPLOAD_URL = "https://api.cloudinary.com/v1_1/{cloud}/image/upload"


class ImageBlob(NamedTuple):
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"


def sign_params(params: dict, api_secret: str) -> str:
    #podpis cloudinary: posortowane k=v sklejone & + secret, sha1
    to_sign = "&".join(f"{k}={params[k]}" for k in sorted(params) if params[k] not in (None, ""))
    return hashlib.sha1((to_sign + api_secret).encode("utf-8")).hexdigest()


class ImageHostClient:
    """
    Upload obrazkow do image hosta.
    upload_many puszcza wszystkie uploady rownolegle i czeka na komplet,
    pierwszy blad (w kolejnosci wejscia) wywala caly batch.
    """

    def __init__(
        self,
        cloud_name: str | None = None,
        api_key: str | None = None,
        api_secret: str | None = None,
        transformation: str | None = None,
        timeout: float = UPLOAD_TIMEOUT_SECONDS,
    ):
        self.cloud_name = cloud_name or CLOUDINARY_CLOUD_NAME
        self.api_key = api_key or CLOUDINARY_API_KEY
        self.api_secret = api_secret or CLOUDINARY_API_SECRET
        self.transformation = UPLOAD_TRANSFORMATION if transformation is None else transformation
        self.timeout = timeout

    @property
    def url(self) -> str:
        return UPLOAD_URL.format(cloud=self.cloud_name)

    def upload(self, blob: ImageBlob, folder: str) -> str:
        params = {
            "folder": folder,
            "timestamp": int(time.time()),
            "transformation": self.transformation,
        }
        data = {
            **{k: v for k, v in params.items() if v},
            "api_key": self.api_key,
            "signature": sign_params(params, self.api_secret),
        }
        logger.info(f"ImageHostClient POST {self.url} ({blob.filename})")

        try:
            resp = requests.post(
                self.url,
                data=data,
                files={"file": (blob.filename, blob.content, blob.content_type)},
                timeout=self.timeout,
            )
            resp.raise_for_status()
            return resp.json()["secure_url"]
        except (RequestException, KeyError, ValueError) as e:
            logger.error(f"Upload {blob.filename} failed: {e}")
            raise UpstreamError(f"Image upload failed: {blob.filename}") from e

    def upload_many(self, blobs: List[ImageBlob], folder: str) -> List[str]:
        if not blobs:
            return []

        pool = ThreadPoolExecutor(max_workers=len(blobs))
        futures = [pool.submit(self.upload, blob, folder) for blob in blobs]
        done, _ = wait(futures, return_when=FIRST_EXCEPTION)

        failed = [f for f in futures if f in done and f.exception() is not None]
        if failed:
            # nie czekamy na reszte, kolejka idzie do kosza
            pool.shutdown(wait=False, cancel_futures=True)
            raise failed[0].exception()

        pool.shutdown()
        # wyniki w kolejnosci wejscia, nie zakonczenia
        return [f.result() for f in futures]
