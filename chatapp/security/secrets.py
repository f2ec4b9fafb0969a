"""Read credentials from the environment and reject obvious placeholders.

The JWT signing key and the Spaces key pair are loaded through here so a
half-configured deployment fails at first use instead of signing tokens with
a sample value.
"""
from __future__ import annotations

import os
from typing import Final

__all__ = ["MissingSecretError", "require_secret", "is_placeholder"]


class MissingSecretError(RuntimeError):
    """A required credential is unset, blank or still a sample value."""


_PLACEHOLDER_VALUES: Final[frozenset[str]] = frozenset(
    {
        "changeme",
        "change-me",
        "placeholder",
        "example",
        "sample",
        "secret",
        "your-key-here",
        "your-secret-here",
    }
)


def is_placeholder(value: str | None) -> bool:
    if not value:
        return True
    normalized = value.strip().lower()
    return not normalized or normalized in _PLACEHOLDER_VALUES or normalized.startswith("<")


def require_secret(name: str, *, min_length: int = 1) -> str:
    """Return the trimmed value of ``name`` or raise :class:`MissingSecretError`.

    The message names the variable only; the value never appears in errors or logs.
    """

    value = os.getenv(name)
    if is_placeholder(value):
        raise MissingSecretError(f"{name} must be set to a real value")
    secret = value.strip()
    if len(secret) < min_length:
        raise MissingSecretError(f"{name} must be at least {min_length} characters long")
    return secret
