"""Test fixtures for multikey-index tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from multikey_index import MultiKeyIndex


class Token:
    """Opaque, identity-hashed key, like a unique symbol."""

    def __init__(self, label: str) -> None:
        self.label = label

    def __repr__(self) -> str:
        return f"Token({self.label!r})"


@dataclass
class User:
    username: str
    ssn: str
    token: Token = field(default_factory=lambda: Token("user"))


def make_user(
    username: str = "john.doe",
    ssn: str = "123-45-6789",
    token: Token | None = None,
) -> User:
    """Create a user record with a fresh unique token."""
    return User(username=username, ssn=ssn, token=token or Token(username))


def make_test_index(**options: Any) -> MultiKeyIndex[User]:
    """Index users by ssn, username and token, in that order."""
    return MultiKeyIndex(
        [
            lambda user: user.ssn,
            lambda user: user.username,
            lambda user: user.token,
        ],
        **options,
    )
