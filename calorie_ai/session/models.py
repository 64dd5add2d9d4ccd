# -*- coding: utf-8 -*-
"""Session — view and presentation models."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class AppView(str, Enum):
    sign_in = "SIGN_IN"
    sign_up = "SIGN_UP"
    onboarding = "ONBOARDING"
    dashboard = "DASHBOARD"


class SignInMode(str, Enum):
    biometric = "biometric"
    form = "form"


class RememberedUser(BaseModel):
    email: str
    name: str


class SignInPresentation(BaseModel):
    mode: SignInMode
    remembered: Optional[RememberedUser] = None


class BootstrapState(BaseModel):
    view: AppView
    sign_in: SignInPresentation
