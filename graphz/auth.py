"""
Auth provider error vocabulary.

The auth provider itself is external. Sign-in / sign-up / sign-out either
resolve or fail with one of a fixed set of codes; this module turns those
codes into the message shown under the form. The form stays usable
afterwards, so nothing here raises.
"""

from __future__ import annotations

import logging
from enum import StrEnum

logger = logging.getLogger(__name__)


class AuthErrorCode(StrEnum):
    INVALID_EMAIL = "invalid-email"
    USER_DISABLED = "user-disabled"
    USER_NOT_FOUND = "user-not-found"
    WRONG_PASSWORD = "wrong-password"
    EMAIL_ALREADY_IN_USE = "email-already-in-use"
    WEAK_PASSWORD = "weak-password"
    NETWORK_FAILURE = "network-request-failed"
    UNKNOWN = "unknown"


AUTH_ERROR_MESSAGES: dict[AuthErrorCode, str] = {
    AuthErrorCode.INVALID_EMAIL: "Invalid email address.",
    AuthErrorCode.USER_DISABLED: "This account has been disabled.",
    AuthErrorCode.USER_NOT_FOUND: "No account found with this email.",
    AuthErrorCode.WRONG_PASSWORD: "Incorrect password.",
    AuthErrorCode.EMAIL_ALREADY_IN_USE: "Email already in use.",
    AuthErrorCode.WEAK_PASSWORD: "Password should be at least 6 characters.",
    AuthErrorCode.NETWORK_FAILURE: "Network error. Check your connection and try again.",
    AuthErrorCode.UNKNOWN: "Authentication failed. Please try again.",
}

# Aliases seen from different provider SDK versions
_ALIASES: dict[str, AuthErrorCode] = {
    "network-failure": AuthErrorCode.NETWORK_FAILURE,
    "network_error": AuthErrorCode.NETWORK_FAILURE,
}


class AuthError(Exception):
    """A failed sign-in / sign-up / sign-out, carrying the provider code."""

    def __init__(self, code: str, message: str | None = None):
        self.code = parse_auth_error_code(code)
        super().__init__(message or auth_error_message(self.code))


def parse_auth_error_code(code: str | None) -> AuthErrorCode:
    """
    Normalise a provider code. Accepts bare ("wrong-password") and
    namespaced ("auth/wrong-password") forms; anything else is UNKNOWN.
    """
    if not code:
        return AuthErrorCode.UNKNOWN
    bare = code.strip().lower().removeprefix("auth/")
    if bare in _ALIASES:
        return _ALIASES[bare]
    try:
        return AuthErrorCode(bare)
    except ValueError:
        logger.warning("unrecognised auth error code: %s", code)
        return AuthErrorCode.UNKNOWN


def auth_error_message(code: str | AuthErrorCode | None) -> str:
    if not isinstance(code, AuthErrorCode):
        code = parse_auth_error_code(code)
    return AUTH_ERROR_MESSAGES[code]
