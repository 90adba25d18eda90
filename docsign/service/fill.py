"""Fill orchestration for the API batch path and the recipient submit path."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
import logging
from typing import Any, Mapping

import httpx

from docsign.api.auth import ApiAuthError, ApiKeyStore, authenticate, extract_api_key
from docsign.core.config import settings
from docsign.model.placeholder import new_placeholder_id
from docsign.model.submission import (
    InvalidTransitionError,
    Submission,
    SubmissionStatus,
    update_recipient_status,
)
from docsign.model.template import Template
from docsign.notify.webhook import (
    WebhookConfig,
    WebhookEvent,
    WebhookResult,
    form_completed_data,
    send_webhook,
    submission_completed_data,
)
from docsign.pdf.filler import FillOptions, fill_pdf_template

logger = logging.getLogger(__name__)


class InvalidFillRequestError(ValueError):
    """Raised when a fill request body has the wrong shape."""


class MissingRequiredFieldsError(ValueError):
    """Raised when required placeholders have no value."""

    def __init__(self, keys: list[str]) -> None:
        super().__init__(f"Missing required fields: {', '.join(keys)}")
        self.keys = keys


def api_fill_options() -> FillOptions:
    return FillOptions(
        auto_size=True,
        max_font_size=settings.FILL_MAX_FONT_SIZE,
        min_font_size=settings.FILL_MIN_FONT_SIZE,
    )


@dataclass(slots=True)
class FilledDocument:
    template_id: str
    template_title: str
    file_name: str
    owner_id: str
    filled_data: dict[str, Any]
    pdf_bytes: bytes
    source: str = "api"
    source_details: dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    id: str = field(default_factory=new_placeholder_id)

    def webhook_data(self, file_url: str | None = None) -> dict[str, Any]:
        return {
            "documentId": self.id,
            "templateId": self.template_id,
            "fileUrl": file_url,
            "data": self.filled_data,
            "timestamp": self.created_at.isoformat(),
        }


@dataclass(slots=True)
class RecipientFillResult:
    pdf_bytes: bytes
    status: SubmissionStatus
    events: list[tuple[WebhookEvent, dict[str, Any]]]


def fill_template_via_api(
    template: Template,
    template_pdf: bytes,
    body: Any,
    headers: Mapping[str, str],
    key_store: ApiKeyStore,
) -> FilledDocument:
    """Authenticate, validate and fill ``template`` from a ``{data, metadata}`` body."""
    identity = authenticate(headers, key_store)
    if template.owner_id and identity.uid != template.owner_id:
        raise ApiAuthError("API key does not grant access to this template", status_code=403)
    if template.api_key and extract_api_key(headers) != template.api_key:
        raise ApiAuthError("Invalid API key", status_code=403)

    if not isinstance(body, Mapping) or not isinstance(body.get("data"), Mapping):
        raise InvalidFillRequestError("Invalid data format. Expected { data: { key: value } }")
    data = dict(body["data"])
    metadata = body.get("metadata")
    metadata = dict(metadata) if isinstance(metadata, Mapping) else {}

    missing = template.missing_required(data)
    if missing:
        raise MissingRequiredFieldsError(missing)

    pdf_bytes = fill_pdf_template(template_pdf, template.placeholders, data, api_fill_options())
    created_at = datetime.now(timezone.utc)
    document = FilledDocument(
        template_id=template.id,
        template_title=template.title,
        file_name=f"{template.title}-{int(created_at.timestamp() * 1000)}.pdf",
        owner_id=template.owner_id,
        filled_data=data,
        pdf_bytes=pdf_bytes,
        source=str(metadata.get("source") or "api"),
        source_details=metadata,
        created_at=created_at,
    )
    logger.info("Filled template %s for user %s", template.id, identity.uid)
    return document


def notify_template_webhook(
    template: Template,
    document: FilledDocument,
    file_url: str | None = None,
    client: httpx.Client | None = None,
) -> WebhookResult | None:
    """Tell the template's webhook about a filled document, if one is configured.

    Delivery problems are logged by :func:`send_webhook` and returned, never raised,
    so the fill itself still succeeds.
    """
    if not template.webhook_url:
        return None
    config = WebhookConfig(url=template.webhook_url)
    return send_webhook(config, WebhookEvent.FORM_COMPLETED, document.webhook_data(file_url), client)


def submit_recipient_values(
    submission: Submission,
    recipient_id: str,
    template_pdf: bytes,
    values: Mapping[str, Any],
    options: FillOptions | None = None,
) -> RecipientFillResult:
    """Fill the submission's placeholder snapshot and mark the recipient completed."""
    recipient = submission.get_recipient(recipient_id)
    if recipient.status in (SubmissionStatus.COMPLETED, SubmissionStatus.DECLINED):
        raise InvalidTransitionError(
            f"Recipient {recipient.email} has already {recipient.status.value} this submission"
        )
    snapshot = Template(
        title=submission.template_name,
        placeholders=submission.placeholders,
        id=submission.template_id,
    )
    missing = snapshot.missing_required(values)
    if missing:
        raise MissingRequiredFieldsError(missing)

    pdf_bytes = fill_pdf_template(
        template_pdf, submission.placeholders, values, options or FillOptions()
    )

    submission.filled_data.update(values)
    status = update_recipient_status(submission, recipient_id, SubmissionStatus.COMPLETED)

    events: list[tuple[WebhookEvent, dict[str, Any]]] = [
        (
            WebhookEvent.FORM_COMPLETED,
            form_completed_data(submission.id, submission.template_name, recipient.email, values),
        )
    ]
    if status is SubmissionStatus.COMPLETED and submission.completed_at is not None:
        events.append(
            (
                WebhookEvent.SUBMISSION_COMPLETED,
                submission_completed_data(
                    submission.id,
                    submission.template_id,
                    submission.template_name,
                    recipient.email,
                    submission.completed_at,
                ),
            )
        )
    return RecipientFillResult(pdf_bytes=pdf_bytes, status=status, events=events)
