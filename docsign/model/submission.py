"""Submission and recipient tracking.

A submission freezes a copy of the template's placeholders at send time
and tracks one status per recipient. The submission's own status is
always derived from its recipients and recomputed on every change.
"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
import secrets
from typing import Any, Iterable

from docsign.core.context import UserContext
from docsign.model.placeholder import Placeholder, new_placeholder_id
from docsign.model.template import Template


class SubmissionStatus(str, Enum):
    PENDING = "pending"
    SENT = "sent"
    OPENED = "opened"
    COMPLETED = "completed"
    DECLINED = "declined"


class InvalidTransitionError(ValueError):
    """Raised when a recipient status change is not allowed."""


_TRANSITIONS: dict[SubmissionStatus, frozenset[SubmissionStatus]] = {
    SubmissionStatus.PENDING: frozenset(
        {
            SubmissionStatus.SENT,
            SubmissionStatus.OPENED,
            SubmissionStatus.COMPLETED,
            SubmissionStatus.DECLINED,
        }
    ),
    SubmissionStatus.SENT: frozenset(
        {SubmissionStatus.OPENED, SubmissionStatus.COMPLETED, SubmissionStatus.DECLINED}
    ),
    SubmissionStatus.OPENED: frozenset({SubmissionStatus.COMPLETED, SubmissionStatus.DECLINED}),
    SubmissionStatus.COMPLETED: frozenset(),
    SubmissionStatus.DECLINED: frozenset(),
}

_TIMESTAMP_FIELDS = {
    SubmissionStatus.SENT: "sent_at",
    SubmissionStatus.OPENED: "opened_at",
    SubmissionStatus.COMPLETED: "completed_at",
    SubmissionStatus.DECLINED: "declined_at",
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class Recipient:
    email: str
    name: str
    status: SubmissionStatus = SubmissionStatus.PENDING
    submission_link: str = ""
    sent_at: datetime | None = None
    opened_at: datetime | None = None
    completed_at: datetime | None = None
    declined_at: datetime | None = None
    id: str = field(default_factory=new_placeholder_id)


@dataclass(slots=True)
class Submission:
    template_id: str
    template_name: str
    placeholders: list[Placeholder]
    recipients: list[Recipient]
    created_by: str
    status: SubmissionStatus = SubmissionStatus.PENDING
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)
    completed_at: datetime | None = None
    filled_data: dict[str, Any] = field(default_factory=dict)
    completed_file_url: str | None = None
    id: str = field(default_factory=new_placeholder_id)

    def get_recipient(self, recipient_id: str) -> Recipient:
        for recipient in self.recipients:
            if recipient.id == recipient_id:
                return recipient
        raise KeyError(f"Recipient not found: {recipient_id}")


def derive_submission_status(recipients: Iterable[Recipient]) -> SubmissionStatus:
    statuses = [recipient.status for recipient in recipients]
    if statuses and all(status is SubmissionStatus.COMPLETED for status in statuses):
        return SubmissionStatus.COMPLETED
    if any(status is SubmissionStatus.DECLINED for status in statuses):
        return SubmissionStatus.DECLINED
    reached = {SubmissionStatus.SENT, SubmissionStatus.OPENED, SubmissionStatus.COMPLETED}
    if any(status in reached for status in statuses):
        return SubmissionStatus.SENT
    return SubmissionStatus.PENDING


def create_submission(
    template: Template,
    recipients: Iterable[tuple[str, str]],
    creator: UserContext,
    base_url: str,
) -> Submission:
    """Create a submission for ``(email, name)`` pairs with one link per recipient."""
    submission_id = new_placeholder_id()
    base = base_url.rstrip("/")
    recipient_list = [
        Recipient(
            email=email,
            name=name or email,
            submission_link=f"{base}/submit/{submission_id}/{secrets.token_urlsafe(12)}",
        )
        for email, name in recipients
    ]
    if not recipient_list:
        raise ValueError("A submission needs at least one recipient")

    return Submission(
        id=submission_id,
        template_id=template.id,
        template_name=template.title or "Untitled Template",
        placeholders=deepcopy(template.placeholders),
        recipients=recipient_list,
        created_by=creator.uid,
    )


def update_recipient_status(
    submission: Submission,
    recipient_id: str,
    status: SubmissionStatus,
    now: datetime | None = None,
) -> SubmissionStatus:
    """Move one recipient to ``status`` and recompute the submission status."""
    now = now or _utcnow()
    recipient = submission.get_recipient(recipient_id)

    if recipient.status is not status:
        if status not in _TRANSITIONS[recipient.status]:
            raise InvalidTransitionError(
                f"Recipient {recipient.email} cannot move from {recipient.status.value} to {status.value}"
            )
        recipient.status = status

    stamp_field = _TIMESTAMP_FIELDS.get(status)
    if stamp_field is not None and getattr(recipient, stamp_field) is None:
        setattr(recipient, stamp_field, now)

    submission.status = derive_submission_status(submission.recipients)
    submission.updated_at = now
    if submission.status is SubmissionStatus.COMPLETED and submission.completed_at is None:
        submission.completed_at = now
    return submission.status
