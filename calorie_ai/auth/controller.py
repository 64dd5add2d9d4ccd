# -*- coding: utf-8 -*-
"""Auth — sign-in / sign-up / sign-out against the local account store.

States: anonymous -> awaiting_credentials -> authenticated | rejected.
A password credential and a biometric assertion are two variants of the
same sign-in. An assertion is only minted after the platform authenticator
verifies the user, and is then accepted without a password.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Set

from ..accounts.models import AccountSnapshot, Profile
from ..accounts.storage import AccountStore
from ..biometric.bridge import BiometricBridge
from ..errors import (
    AccountConflictError,
    AccountNotFoundError,
    BiometricRejectedError,
    CapabilityUnavailable,
)
from ..notifications.center import NotificationCenter
from ..session.bootstrap import SessionBootstrap
from ..session.context import Session
from ..session.models import AppView, SignInMode, SignInPresentation
from .models import AuthResult, AuthState, BiometricAssertion, PasswordCredential, SignUpForm

logger = logging.getLogger(__name__)


class AuthController:
    def __init__(
        self,
        session: Session,
        accounts: AccountStore,
        bridge: BiometricBridge,
        notifications: NotificationCenter,
        bootstrap: SessionBootstrap,
    ) -> None:
        self.session = session
        self.accounts = accounts
        self.bridge = bridge
        self.notifications = notifications
        self.bootstrap = bootstrap
        self.state = AuthState.authenticated if session.email else AuthState.anonymous
        self._background: Set[asyncio.Task] = set()

    def begin(self) -> SignInPresentation:
        self.state = AuthState.awaiting_credentials
        return self.bootstrap.sign_in_presentation()

    async def sign_in(self, credential: PasswordCredential) -> AuthResult:
        """Password sign-in. Biometric unlock goes through ``sign_in_with_biometrics``."""
        if not isinstance(credential, PasswordCredential):
            raise TypeError(f"Unsupported credential: {type(credential).__name__}")
        self.state = AuthState.awaiting_credentials
        credential.validate()
        snapshot = self.accounts.find_account(credential.email)
        if snapshot is None:
            self.state = AuthState.rejected
            raise AccountNotFoundError(credential.email)
        return self._complete(self.accounts.normalize(credential.email), snapshot)

    async def sign_in_with_biometrics(self) -> AuthResult:
        presentation = self.bootstrap.sign_in_presentation()
        if presentation.mode is not SignInMode.biometric or presentation.remembered is None:
            raise CapabilityUnavailable("No remembered account with biometric unlock")
        self.state = AuthState.awaiting_credentials
        if not await self.bridge.authenticate():
            # Stay on the form; password entry is still possible.
            raise BiometricRejectedError()
        return self._sign_in_assertion(BiometricAssertion(email=presentation.remembered.email))

    def _sign_in_assertion(self, assertion: BiometricAssertion) -> AuthResult:
        snapshot = self._biometric_account(assertion.email)
        if snapshot is None:
            self.state = AuthState.rejected
            raise BiometricRejectedError("Biometric unlock is not enabled for this account.")
        return self._complete(self.accounts.normalize(assertion.email), snapshot)

    def sign_up(self, form: SignUpForm) -> AuthResult:
        self.state = AuthState.awaiting_credentials
        form.validate()
        if self.accounts.account_exists(form.email):
            self.state = AuthState.rejected
            raise AccountConflictError(form.email)
        profile = Profile(name=form.name.strip(), email=self.accounts.normalize(form.email))
        self.session.load_snapshot(AccountSnapshot(profile=profile))
        self.accounts.remember_session(profile.email)
        self.notifications.announce_update()
        self.state = AuthState.authenticated
        logger.info("Created account %s", profile.email)
        return AuthResult(view=AppView.onboarding, profile=self.session.profile)

    def sign_out(self) -> None:
        # Keeps the session pointer and the account snapshot.
        self.session.clear()
        self.state = AuthState.anonymous

    def switch_account(self) -> SignInPresentation:
        self.accounts.clear_remembered_session()
        self.state = AuthState.awaiting_credentials
        return SignInPresentation(mode=SignInMode.form)

    def enter_dashboard(self) -> None:
        """Fire-and-forget daily insight check; never blocks navigation."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running loop; skipping daily insight check")
            return
        task = loop.create_task(self.notifications.ensure_daily_insight())
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def drain(self) -> None:
        """Wait for pending background work (used on shutdown and in tests)."""
        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    def _biometric_account(self, email: str) -> Optional[AccountSnapshot]:
        remembered = self.accounts.remembered_email()
        if not remembered or remembered != self.accounts.normalize(email):
            return None
        snapshot = self.accounts.find_account(remembered)
        if snapshot is None or not snapshot.profile.is_biometric_enabled:
            return None
        return snapshot

    def _complete(self, email: str, snapshot: AccountSnapshot) -> AuthResult:
        if not snapshot.profile.email:
            snapshot.profile.email = email
        self.session.load_snapshot(snapshot)
        self.accounts.remember_session(email)
        self.notifications.announce_update()
        self.state = AuthState.authenticated
        if self.session.profile.is_onboarded:
            self.enter_dashboard()
            view = AppView.dashboard
        else:
            view = AppView.onboarding
        return AuthResult(view=view, profile=self.session.profile)
