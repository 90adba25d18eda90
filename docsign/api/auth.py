"""API-key gate for automation endpoints."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
import logging
import secrets
from typing import Mapping, Protocol

from docsign.core.config import settings
from docsign.core.context import UserContext
from docsign.model.placeholder import new_placeholder_id

logger = logging.getLogger(__name__)

WWW_AUTHENTICATE = 'Bearer realm="DocSign API"'


class ApiAuthError(Exception):
    """Raised when a request's API credential is missing or not accepted."""

    def __init__(self, message: str, status_code: int = 401) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    @property
    def headers(self) -> dict[str, str]:
        if self.status_code == 401:
            return {"WWW-Authenticate": WWW_AUTHENTICATE}
        return {}


@dataclass(slots=True)
class ApiKeyRecord:
    key: str
    user_id: str
    name: str = ""
    enabled: bool = True
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    last_used: datetime | None = None
    id: str = field(default_factory=new_placeholder_id)


class ApiKeyStore(Protocol):
    def find(self, key: str) -> ApiKeyRecord | None: ...

    def mark_used(self, record: ApiKeyRecord, when: datetime) -> None: ...


class InMemoryApiKeyStore:
    def __init__(self, records: list[ApiKeyRecord] | None = None) -> None:
        self._records: dict[str, ApiKeyRecord] = {}
        for record in records or []:
            self.add(record)

    def add(self, record: ApiKeyRecord) -> None:
        self._records[record.key] = record

    def find(self, key: str) -> ApiKeyRecord | None:
        return self._records.get(key)

    def mark_used(self, record: ApiKeyRecord, when: datetime) -> None:
        record.last_used = when


def generate_api_key() -> str:
    return f"{settings.API_KEY_PREFIX}{secrets.token_urlsafe(32)}"


def extract_api_key(headers: Mapping[str, str]) -> str | None:
    lowered = {name.lower(): value for name, value in headers.items()}
    api_key = lowered.get("x-api-key")
    if api_key:
        return api_key.strip()
    authorization = lowered.get("authorization", "")
    if authorization.startswith("Bearer "):
        return authorization[len("Bearer "):].strip() or None
    return None


def authenticate(headers: Mapping[str, str], store: ApiKeyStore) -> UserContext:
    api_key = extract_api_key(headers)
    if not api_key:
        raise ApiAuthError("No API key provided")
    if not api_key.startswith(settings.API_KEY_PREFIX):
        raise ApiAuthError("Invalid API key format")

    record = store.find(api_key)
    if record is None:
        logger.warning("Rejected unknown API key ending in %s", api_key[-4:])
        raise ApiAuthError("API key not found")
    if not record.enabled:
        logger.warning("Rejected disabled API key %s", record.id)
        raise ApiAuthError("API key is disabled")

    store.mark_used(record, datetime.now(timezone.utc))
    return UserContext(uid=record.user_id)
