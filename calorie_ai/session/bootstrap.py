# -*- coding: utf-8 -*-
"""Session — cold-start view resolution."""

from __future__ import annotations

import logging

from ..accounts.models import Profile
from ..accounts.storage import AccountStore
from ..errors import StorageCorruption
from ..records import CURRENT_PROFILE_KEY, PersistentRecord
from .models import AppView, BootstrapState, RememberedUser, SignInMode, SignInPresentation

logger = logging.getLogger(__name__)


def view_for_profile(profile: Profile | None) -> AppView:
    if profile is None:
        return AppView.sign_in
    if profile.is_onboarded:
        return AppView.dashboard
    if profile.name:
        # Closed mid-onboarding: resume rather than restart.
        return AppView.onboarding
    return AppView.sign_in


class SessionBootstrap:
    def __init__(self, records: PersistentRecord, accounts: AccountStore) -> None:
        self.records = records
        self.accounts = accounts

    def initial_view(self) -> AppView:
        try:
            profile = self.records.decode(CURRENT_PROFILE_KEY, Profile)
        except StorageCorruption as exc:
            logger.warning("Starting at sign-in, current profile unreadable: %s", exc)
            return AppView.sign_in
        return view_for_profile(profile)

    def sign_in_presentation(self) -> SignInPresentation:
        email = self.accounts.remembered_email()
        if email:
            snapshot = self.accounts.find_account(email)
            if snapshot is not None and snapshot.profile.is_biometric_enabled:
                return SignInPresentation(
                    mode=SignInMode.biometric,
                    remembered=RememberedUser(email=email, name=snapshot.profile.name),
                )
        return SignInPresentation(mode=SignInMode.form)

    def run(self) -> BootstrapState:
        return BootstrapState(view=self.initial_view(), sign_in=self.sign_in_presentation())
