# -*- coding: utf-8 -*-
"""Error taxonomy shared by the store, auth and diary flows.

Nothing here is fatal to the process: every error is recovered by the
caller and turned into a notice, an inline field error or a fallback view.
"""

from __future__ import annotations

from typing import Dict, Optional


class CalorieAIError(Exception):
    """Base class for recoverable CalorieAI errors."""


class ValidationError(CalorieAIError):
    """Malformed form input. Never persisted; surfaced as inline field errors."""

    def __init__(self, fields: Dict[str, str]) -> None:
        self.fields = dict(fields)
        super().__init__("; ".join(f"{k}: {v}" for k, v in self.fields.items()) or "invalid input")


class AccountNotFoundError(CalorieAIError):
    """Sign-in email has no account. The caller should offer sign-up."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(
            "I don't recognize this email address. "
            "Please sign up to create your personal nutrition profile!"
        )


class AccountConflictError(CalorieAIError):
    """Sign-up email already has an account. No state was mutated."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__("Account already exists. Please sign in.")


class CapabilityUnavailable(CalorieAIError):
    """No verifying platform authenticator on this device."""


class BiometricRejectedError(CalorieAIError):
    """Biometric assertion failed, timed out or was cancelled."""

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or "Authentication failed or cancelled.")


class NotAuthenticatedError(CalorieAIError):
    """An operation that needs an active account ran without one."""

    def __init__(self) -> None:
        super().__init__("Not signed in")


class TransientAnalysisError(CalorieAIError):
    """AI analysis call failed. Prior state is intact; the user may retry."""


class StorageCorruption(CalorieAIError):
    """Persisted value could not be decoded."""

    def __init__(self, key: str, detail: str) -> None:
        self.key = key
        super().__init__(f"Corrupt value under {key!r}: {detail}")
