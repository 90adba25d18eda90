from __future__ import annotations

from datetime import datetime, timezone
import json

import httpx

from docsign.notify.webhook import (
    SIGNATURE_HEADER,
    WebhookConfig,
    WebhookEvent,
    build_payload,
    encode_payload,
    form_completed_data,
    send_webhook,
    sign_payload,
    submission_completed_data,
    verify_signature,
)


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def test_build_payload_shape():
    stamp = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    payload = build_payload(WebhookEvent.FORM_VIEWED, {"submission_id": "s1"}, stamp)
    assert payload == {
        "event": "form.viewed",
        "timestamp": "2024-05-01T12:00:00+00:00",
        "data": {"submission_id": "s1"},
    }


def test_signature_round_trip():
    body = encode_payload({"event": "form.completed"})
    signature = sign_payload(body, "s3cret")
    assert signature.startswith("sha256=")
    assert verify_signature(body, signature, "s3cret")
    assert not verify_signature(body, signature, "other")
    assert not verify_signature(body + b" ", signature, "s3cret")


def test_send_posts_signed_json():
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json={"ok": True})

    config = WebhookConfig(url="https://hooks.example.com/in", secret="s3cret")
    data = form_completed_data("sub-1", "Lease", "a@example.com", {"name": "Jane"})
    with _client(handler) as client:
        result = send_webhook(config, WebhookEvent.FORM_COMPLETED, data, client=client)

    assert result.success and not result.skipped
    assert result.status_code == 200
    request = captured[0]
    assert request.method == "POST"
    assert str(request.url) == "https://hooks.example.com/in"
    body = request.content
    assert verify_signature(body, request.headers[SIGNATURE_HEADER], "s3cret")
    payload = json.loads(body)
    assert payload["event"] == "form.completed"
    assert payload["data"]["values"] == {"name": "Jane"}


def test_send_without_secret_has_no_signature():
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(204)

    with _client(handler) as client:
        send_webhook(WebhookConfig(url="https://h.example.com"), WebhookEvent.FORM_VIEWED, {}, client)
    assert SIGNATURE_HEADER not in captured[0].headers


def test_disabled_and_unsubscribed_are_skipped():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    with _client(handler) as client:
        disabled = send_webhook(
            WebhookConfig(url="https://h.example.com", enabled=False),
            WebhookEvent.FORM_VIEWED,
            {},
            client,
        )
        unsubscribed = send_webhook(
            WebhookConfig(url="https://h.example.com", events=[WebhookEvent.FORM_COMPLETED]),
            WebhookEvent.FORM_VIEWED,
            {},
            client,
        )
    assert disabled.skipped and disabled.success
    assert unsubscribed.skipped and unsubscribed.success


def test_error_status_is_reported():
    with _client(lambda request: httpx.Response(500)) as client:
        result = send_webhook(WebhookConfig(url="https://h.example.com"), WebhookEvent.FORM_VIEWED, {}, client)
    assert not result.success
    assert result.status_code == 500
    assert "500" in result.error


def test_transport_error_is_reported():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with _client(handler) as client:
        result = send_webhook(WebhookConfig(url="https://h.example.com"), WebhookEvent.FORM_VIEWED, {}, client)
    assert not result.success
    assert result.status_code is None
    assert "refused" in result.error


def test_submission_completed_data():
    stamp = datetime(2024, 5, 1, tzinfo=timezone.utc)
    data = submission_completed_data("s1", "t1", "Lease", "a@example.com", stamp)
    assert data["completed_at"] == "2024-05-01T00:00:00+00:00"
    assert data["template_id"] == "t1"
