import hashlib
import threading
import time
from unittest.mock import MagicMock, patch

import pytest
import requests

from artmarket.domain.errors import UpstreamError
from artmarket.services.image_client import ImageBlob, ImageHostClient, sign_params
from artmarket.services.mail_client import MailRelayClient
from artmarket.services.payment_client import PaymentGatewayClient, to_minor_units


def ok_response(json_body=None, headers=None):
    resp = MagicMock()
    resp.raise_for_status.return_value = None
    resp.json.return_value = json_body or {}
    resp.headers = headers or {}
    return resp


def failing_response(status=502):
    resp = MagicMock()
    resp.raise_for_status.side_effect = requests.HTTPError(f"{status} Server Error")
    return resp


@pytest.fixture
def image_client():
    return ImageHostClient(
        cloud_name="demo",
        api_key="key",
        api_secret="secret",
        transformation="c_limit,h_500,w_500,q_auto",
        timeout=5,
    )


# ----- image host -----

def test_sign_params_sorts_and_appends_secret():
    params = {"timestamp": 1700000000, "folder": "sell_art", "transformation": "c_limit,h_500,w_500"}

    expected = hashlib.sha1(
        b"folder=sell_art&timestamp=1700000000&transformation=c_limit,h_500,w_500secret"
    ).hexdigest()

    assert sign_params(params, "secret") == expected


def test_upload_posts_signed_request(image_client):
    blob = ImageBlob("a.png", b"data", "image/png")

    with patch("artmarket.services.image_client.requests.post") as post:
        post.return_value = ok_response({"secure_url": "https://res.test/a.png"})
        url = image_client.upload(blob, "sell_art")

    assert url == "https://res.test/a.png"
    args, kwargs = post.call_args
    assert args[0] == "https://api.cloudinary.com/v1_1/demo/image/upload"
    assert kwargs["data"]["api_key"] == "key"
    assert kwargs["data"]["folder"] == "sell_art"
    assert kwargs["data"]["transformation"] == "c_limit,h_500,w_500,q_auto"
    assert kwargs["data"]["signature"]
    assert kwargs["files"] == {"file": ("a.png", b"data", "image/png")}
    assert kwargs["timeout"] == 5


def test_upload_http_error_becomes_upstream_error(image_client):
    with patch("artmarket.services.image_client.requests.post") as post:
        post.return_value = failing_response()
        with pytest.raises(UpstreamError):
            image_client.upload(ImageBlob("a.png", b"data"), "sell_art")


def test_upload_without_secure_url_is_upstream_error(image_client):
    with patch("artmarket.services.image_client.requests.post") as post:
        post.return_value = ok_response({"error": {"message": "bad"}})
        with pytest.raises(UpstreamError):
            image_client.upload(ImageBlob("a.png", b"data"), "sell_art")


def test_upload_many_keeps_input_order_and_runs_concurrently(image_client):
    delays = {"slow.png": 0.2, "mid.png": 0.1, "fast.png": 0.0}
    in_flight = {"now": 0, "max": 0}
    lock = threading.Lock()

    def fake_upload(blob, folder):
        with lock:
            in_flight["now"] += 1
            in_flight["max"] = max(in_flight["max"], in_flight["now"])
        time.sleep(delays[blob.filename])
        with lock:
            in_flight["now"] -= 1
        return f"https://res.test/{folder}/{blob.filename}"

    blobs = [ImageBlob(name, b"x") for name in ("slow.png", "mid.png", "fast.png")]
    with patch.object(image_client, "upload", side_effect=fake_upload):
        urls = image_client.upload_many(blobs, "sell_art")

    assert urls == [
        "https://res.test/sell_art/slow.png",
        "https://res.test/sell_art/mid.png",
        "https://res.test/sell_art/fast.png",
    ]
    assert in_flight["max"] > 1


def test_upload_many_fails_whole_batch(image_client):
    def fake_upload(blob, folder):
        if blob.filename == "bad.png":
            raise UpstreamError("Image upload failed: bad.png")
        return f"https://res.test/{blob.filename}"

    blobs = [ImageBlob(n, b"x") for n in ("ok.png", "bad.png", "ok2.png")]
    with patch.object(image_client, "upload", side_effect=fake_upload):
        with pytest.raises(UpstreamError, match="bad.png"):
            image_client.upload_many(blobs, "sell_art")


def test_upload_many_fails_fast_without_waiting_for_slow_uploads(image_client):
    def fake_upload(blob, folder):
        if blob.filename == "slow.png":
            time.sleep(1.0)
            return f"https://res.test/{blob.filename}"
        raise UpstreamError("Image upload failed: bad.png")

    blobs = [ImageBlob("slow.png", b"x"), ImageBlob("bad.png", b"x")]
    started = time.monotonic()
    with patch.object(image_client, "upload", side_effect=fake_upload):
        with pytest.raises(UpstreamError, match="bad.png"):
            image_client.upload_many(blobs, "sell_art")

    assert time.monotonic() - started < 0.5


def test_upload_many_empty_does_not_call_host(image_client):
    with patch("artmarket.services.image_client.requests.post") as post:
        assert image_client.upload_many([], "sell_art") == []
    post.assert_not_called()


# ----- payment gateway -----

@pytest.mark.parametrize(
    "amount, expected",
    [(499.99, 49999), (10, 1000), (0.1, 10), (19.999, 2000), ("25.50", 2550)],
)
def test_to_minor_units(amount, expected):
    assert to_minor_units(amount) == expected


def test_create_order_posts_with_basic_auth():
    client = PaymentGatewayClient(key_id="rzp_id", key_secret="rzp_secret", timeout=3)

    with patch("artmarket.services.payment_client.requests.post") as post:
        post.return_value = ok_response({"id": "order_1", "amount": 1000})
        order = client.create_order(1000, "INR", "rcpt")

    assert order == {"id": "order_1", "amount": 1000}
    args, kwargs = post.call_args
    assert args[0] == "https://api.razorpay.com/v1/orders"
    assert kwargs["json"] == {"amount": 1000, "currency": "INR", "receipt": "rcpt"}
    assert kwargs["auth"] == ("rzp_id", "rzp_secret")
    assert kwargs["timeout"] == 3


def test_create_order_failure_is_not_retried():
    client = PaymentGatewayClient(key_id="id", key_secret="secret")

    with patch("artmarket.services.payment_client.requests.post") as post:
        post.side_effect = requests.ConnectionError("down")
        with pytest.raises(UpstreamError):
            client.create_order(1000, "INR")

    assert post.call_count == 1


def test_create_order_rejects_non_object_body():
    client = PaymentGatewayClient(key_id="id", key_secret="secret")

    with patch("artmarket.services.payment_client.requests.post") as post:
        post.return_value = ok_response(["order_1"])
        with pytest.raises(UpstreamError):
            client.create_order(1000, "INR")


# ----- mail relay -----

def test_send_mail_payload():
    client = MailRelayClient(api_key="sg-key", from_email="shop@example.com")

    with patch("artmarket.services.mail_client.requests.post") as post:
        post.return_value = ok_response(headers={"X-Message-Id": "m-1"})
        message_id = client.send("bob@example.com", "Hi", "plain", "<p>html</p>")

    assert message_id == "m-1"
    args, kwargs = post.call_args
    assert args[0] == "https://api.sendgrid.com/v3/mail/send"
    assert kwargs["headers"] == {"Authorization": "Bearer sg-key"}
    payload = kwargs["json"]
    assert payload["personalizations"] == [{"to": [{"email": "bob@example.com"}]}]
    assert payload["from"] == {"email": "shop@example.com"}
    assert payload["subject"] == "Hi"
    assert payload["content"] == [
        {"type": "text/plain", "value": "plain"},
        {"type": "text/html", "value": "<p>html</p>"},
    ]


def test_send_mail_failure_is_upstream_error():
    client = MailRelayClient(api_key="sg-key", from_email="shop@example.com")

    with patch("artmarket.services.mail_client.requests.post") as post:
        post.return_value = failing_response(401)
        with pytest.raises(UpstreamError):
            client.send("bob@example.com", "Hi", "plain")
