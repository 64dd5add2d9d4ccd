# -*- coding: utf-8 -*-
"""Auth — credential variants and results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict

from pydantic import BaseModel

from ..accounts.models import Profile
from ..errors import ValidationError
from ..session.models import AppView

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 15


class AuthState(str, Enum):
    anonymous = "anonymous"
    awaiting_credentials = "awaiting_credentials"
    authenticated = "authenticated"
    rejected = "rejected"


@dataclass(frozen=True)
class PasswordCredential:
    email: str
    password: str

    def validate(self) -> None:
        errors: Dict[str, str] = {}
        if not self.email.strip():
            errors["email"] = "Email is required"
        if not _password_ok(self.password):
            errors["password"] = f"Password must be {PASSWORD_MIN_LENGTH}-{PASSWORD_MAX_LENGTH} characters"
        if errors:
            raise ValidationError(errors)


@dataclass(frozen=True)
class BiometricAssertion:
    """Proof that the platform authenticator verified the user for ``email``."""

    email: str


@dataclass(frozen=True)
class SignUpForm:
    name: str
    email: str
    password: str
    confirm_password: str

    def validate(self) -> None:
        errors: Dict[str, str] = {}
        if not self.name.strip():
            errors["name"] = "Name is required"
        if not self.email.strip():
            errors["email"] = "Email is required"
        if not _password_ok(self.password):
            errors["password"] = f"Password must be {PASSWORD_MIN_LENGTH}-{PASSWORD_MAX_LENGTH} characters"
        if self.password != self.confirm_password:
            errors["confirm_password"] = "Passwords do not match"
        if errors:
            raise ValidationError(errors)


def _password_ok(password: str) -> bool:
    return PASSWORD_MIN_LENGTH <= len(password or "") <= PASSWORD_MAX_LENGTH


class AuthResult(BaseModel):
    view: AppView
    profile: Profile


# ---- HTTP payloads ----


class SignInRequest(BaseModel):
    email: str = ""
    password: str = ""


class SignUpRequest(BaseModel):
    name: str = ""
    email: str = ""
    password: str = ""
    confirm_password: str = ""
