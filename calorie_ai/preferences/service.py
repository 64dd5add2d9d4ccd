# -*- coding: utf-8 -*-
"""Preferences — onboarding and settings flows."""

from __future__ import annotations

import logging
from typing import Any, Dict

from ..accounts.models import Profile
from ..auth.controller import AuthController
from ..biometric.bridge import AccountHint, BiometricBridge
from ..errors import BiometricRejectedError, CapabilityUnavailable, ValidationError
from ..session.context import Session
from ..session.models import AppView

logger = logging.getLogger(__name__)

_EDITABLE = {"name", "daily_calorie_goal", "height", "weight", "is_ai_suggestions_enabled"}


class PreferencesService:
    def __init__(self, session: Session, bridge: BiometricBridge, auth: AuthController) -> None:
        self.session = session
        self.bridge = bridge
        self.auth = auth

    def update_profile(self, changes: Dict[str, Any]) -> Profile:
        self.session.require_account()
        unknown = set(changes) - _EDITABLE
        if unknown:
            raise ValidationError({k: "Not editable" for k in sorted(unknown)})
        if "name" in changes and changes["name"] is not None:
            changes["name"] = str(changes["name"]).strip()
        return self.session.update_profile(**{k: v for k, v in changes.items() if v is not None})

    def complete_onboarding(self, **changes: Any) -> AppView:
        self.session.require_account()
        merged = self.session.profile.model_copy(update=changes)
        errors: Dict[str, str] = {}
        if not (merged.name or "").strip():
            errors["name"] = "Name is required"
        if not merged.height or merged.height <= 0:
            errors["height"] = "Height must be positive"
        if not merged.weight or merged.weight <= 0:
            errors["weight"] = "Weight must be positive"
        if errors:
            raise ValidationError(errors)
        self.update_profile(dict(changes))
        self.session.update_profile(is_onboarded=True)
        self.auth.enter_dashboard()
        return AppView.dashboard

    async def biometric_supported(self) -> bool:
        return await self.bridge.is_available()

    async def enable_biometric(self) -> Profile:
        self.session.require_account()
        if not await self.bridge.is_available():
            raise CapabilityUnavailable("No verifying platform authenticator")
        email = self.session.email or ""
        ok = await self.bridge.register(AccountHint(email=email, display_name=self.session.profile.name))
        if not ok:
            raise BiometricRejectedError("We couldn't verify your biometrics.")
        if self.session.email != email:
            # Signed out or switched while the dialog was open.
            raise BiometricRejectedError("Account changed during setup.")
        return self.session.update_profile(is_biometric_enabled=True)

    def disable_biometric(self) -> Profile:
        self.session.require_account()
        # Written through to the account map immediately by sync().
        return self.session.update_profile(is_biometric_enabled=False)
