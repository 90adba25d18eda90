"""Webhook payloads, signatures and one-shot delivery."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
import hashlib
import hmac
import json
import logging
from typing import Any, Mapping

import httpx

from docsign.core.config import settings

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "X-DocSign-Signature"


class WebhookEvent(str, Enum):
    FORM_VIEWED = "form.viewed"
    FORM_STARTED = "form.started"
    FORM_COMPLETED = "form.completed"
    FORM_DECLINED = "form.declined"
    SUBMISSION_CREATED = "submission.created"
    SUBMISSION_COMPLETED = "submission.completed"
    SUBMISSION_EXPIRED = "submission.expired"
    SUBMISSION_ARCHIVED = "submission.archived"
    TEMPLATE_CREATED = "template.created"
    TEMPLATE_UPDATED = "template.updated"


@dataclass(slots=True)
class WebhookConfig:
    url: str
    events: list[WebhookEvent] = field(default_factory=lambda: list(WebhookEvent))
    secret: str | None = None
    enabled: bool = True


@dataclass(frozen=True, slots=True)
class WebhookResult:
    success: bool
    skipped: bool = False
    status_code: int | None = None
    error: str | None = None


def build_payload(
    event: WebhookEvent,
    data: Mapping[str, Any],
    timestamp: datetime | None = None,
) -> dict[str, Any]:
    timestamp = timestamp or datetime.now(timezone.utc)
    return {
        "event": event.value,
        "timestamp": timestamp.isoformat(),
        "data": dict(data),
    }


def encode_payload(payload: Mapping[str, Any]) -> bytes:
    return json.dumps(payload, separators=(",", ":"), default=str).encode("utf-8")


def sign_payload(body: bytes, secret: str) -> str:
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return f"sha256={digest}"


def verify_signature(body: bytes, signature: str, secret: str) -> bool:
    return hmac.compare_digest(sign_payload(body, secret), signature)


def send_webhook(
    config: WebhookConfig,
    event: WebhookEvent,
    data: Mapping[str, Any],
    client: httpx.Client | None = None,
) -> WebhookResult:
    """POST one event to ``config.url``. Failures are reported, not retried."""
    if not config.enabled:
        logger.debug("Webhook disabled, skipping %s", event.value)
        return WebhookResult(success=True, skipped=True)
    if event not in config.events:
        logger.debug("Event %s not subscribed, skipping", event.value)
        return WebhookResult(success=True, skipped=True)

    body = encode_payload(build_payload(event, data))
    headers = {
        "Content-Type": "application/json",
        "User-Agent": settings.WEBHOOK_USER_AGENT,
    }
    if config.secret:
        headers[SIGNATURE_HEADER] = sign_payload(body, config.secret)

    owns_client = client is None
    http = client or httpx.Client(timeout=settings.WEBHOOK_TIMEOUT)
    try:
        response = http.post(config.url, content=body, headers=headers)
    except httpx.HTTPError as exc:
        logger.warning("Webhook error for event %s: %s", event.value, exc)
        return WebhookResult(success=False, error=str(exc))
    finally:
        if owns_client:
            http.close()

    if response.is_error:
        message = f"Webhook failed with status {response.status_code}"
        logger.warning("Webhook error for event %s: %s", event.value, message)
        return WebhookResult(success=False, status_code=response.status_code, error=message)

    logger.info("Webhook sent for event %s", event.value)
    return WebhookResult(success=True, status_code=response.status_code)


def form_viewed_data(submission_id: str, form_name: str, recipient_email: str | None = None) -> dict:
    return {
        "submission_id": submission_id,
        "form_name": form_name,
        "recipient_email": recipient_email,
    }


def form_started_data(submission_id: str, form_name: str, recipient_email: str | None = None) -> dict:
    return form_viewed_data(submission_id, form_name, recipient_email)


def form_declined_data(submission_id: str, form_name: str, recipient_email: str | None = None) -> dict:
    return form_viewed_data(submission_id, form_name, recipient_email)


def form_completed_data(
    submission_id: str,
    form_name: str,
    recipient_email: str,
    values: Mapping[str, Any],
) -> dict:
    return {
        "submission_id": submission_id,
        "form_name": form_name,
        "recipient_email": recipient_email,
        "values": dict(values),
    }


def submission_created_data(
    submission_id: str,
    template_id: str,
    template_name: str,
    recipient_email: str,
) -> dict:
    return {
        "submission_id": submission_id,
        "template_id": template_id,
        "template_name": template_name,
        "recipient_email": recipient_email,
    }


def submission_completed_data(
    submission_id: str,
    template_id: str,
    template_name: str,
    recipient_email: str,
    completed_at: datetime,
) -> dict:
    return {
        "submission_id": submission_id,
        "template_id": template_id,
        "template_name": template_name,
        "recipient_email": recipient_email,
        "completed_at": completed_at.isoformat(),
    }
