from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from docsign.core.context import UserContext
from docsign.model.submission import (
    InvalidTransitionError,
    Recipient,
    SubmissionStatus,
    create_submission,
    derive_submission_status,
    update_recipient_status,
)

CREATOR = UserContext(uid="user-1", email="owner@example.com")
RECIPIENTS = [
    ("a@example.com", "Ann"),
    ("b@example.com", "Ben"),
    ("c@example.com", ""),
]


@pytest.fixture
def submission(template):
    return create_submission(template, RECIPIENTS, CREATOR, "https://sign.example.com/")


def test_create_submission_issues_links_and_snapshots(submission, template):
    assert submission.status is SubmissionStatus.PENDING
    assert submission.created_by == "user-1"
    assert submission.template_name == "Lease"
    assert submission.recipients[2].name == "c@example.com"

    links = {recipient.submission_link for recipient in submission.recipients}
    assert len(links) == 3
    for link in links:
        assert link.startswith(f"https://sign.example.com/submit/{submission.id}/")

    template.placeholders[0].x = 999
    assert submission.placeholders[0].x == 100


def test_create_submission_requires_recipients(template):
    with pytest.raises(ValueError):
        create_submission(template, [], CREATOR, "https://sign.example.com")


def test_aggregate_status_follows_recipients(submission):
    first, second, third = submission.recipients
    update_recipient_status(submission, first.id, SubmissionStatus.COMPLETED)
    status = update_recipient_status(submission, second.id, SubmissionStatus.OPENED)
    assert third.status is SubmissionStatus.PENDING
    assert status is SubmissionStatus.SENT
    assert submission.completed_at is None

    update_recipient_status(submission, second.id, SubmissionStatus.COMPLETED)
    status = update_recipient_status(submission, third.id, SubmissionStatus.COMPLETED)
    assert status is SubmissionStatus.COMPLETED
    assert submission.status is SubmissionStatus.COMPLETED
    assert submission.completed_at is not None


def test_decline_wins_over_progress(submission):
    first, second, _ = submission.recipients
    update_recipient_status(submission, first.id, SubmissionStatus.COMPLETED)
    assert update_recipient_status(submission, second.id, SubmissionStatus.DECLINED) is (
        SubmissionStatus.DECLINED
    )


@pytest.mark.parametrize(
    "statuses, expected",
    [
        ([], SubmissionStatus.PENDING),
        ([SubmissionStatus.PENDING, SubmissionStatus.PENDING], SubmissionStatus.PENDING),
        ([SubmissionStatus.SENT, SubmissionStatus.PENDING], SubmissionStatus.SENT),
        ([SubmissionStatus.COMPLETED, SubmissionStatus.OPENED], SubmissionStatus.SENT),
        ([SubmissionStatus.DECLINED, SubmissionStatus.COMPLETED], SubmissionStatus.DECLINED),
        ([SubmissionStatus.COMPLETED, SubmissionStatus.COMPLETED], SubmissionStatus.COMPLETED),
    ],
)
def test_derive_submission_status(statuses, expected):
    recipients = [Recipient(email=f"{i}@example.com", name="") for i in range(len(statuses))]
    for recipient, status in zip(recipients, statuses):
        recipient.status = status
    assert derive_submission_status(recipients) is expected


@pytest.mark.parametrize("terminal", [SubmissionStatus.COMPLETED, SubmissionStatus.DECLINED])
def test_terminal_states_cannot_move(submission, terminal):
    recipient = submission.recipients[0]
    update_recipient_status(submission, recipient.id, terminal)
    for target in (SubmissionStatus.PENDING, SubmissionStatus.SENT, SubmissionStatus.OPENED):
        with pytest.raises(InvalidTransitionError):
            update_recipient_status(submission, recipient.id, target)


def test_opened_cannot_go_back_to_sent(submission):
    recipient = submission.recipients[0]
    update_recipient_status(submission, recipient.id, SubmissionStatus.OPENED)
    with pytest.raises(InvalidTransitionError):
        update_recipient_status(submission, recipient.id, SubmissionStatus.SENT)


def test_timestamps_are_set_once(submission):
    recipient = submission.recipients[0]
    first = datetime(2024, 1, 1, tzinfo=timezone.utc)
    later = first + timedelta(hours=1)

    update_recipient_status(submission, recipient.id, SubmissionStatus.OPENED, now=first)
    update_recipient_status(submission, recipient.id, SubmissionStatus.OPENED, now=later)

    assert recipient.opened_at == first
    assert submission.updated_at == later


def test_unknown_recipient(submission):
    with pytest.raises(KeyError):
        update_recipient_status(submission, "nobody", SubmissionStatus.SENT)
