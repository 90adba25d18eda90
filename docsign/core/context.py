"""Caller identity passed explicitly into services."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class UserContext:
    uid: str
    email: str = ""
    display_name: str = ""
