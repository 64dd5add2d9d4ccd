# -*- coding: utf-8 -*-

from __future__ import annotations

import shutil
import tempfile
import unittest
from pathlib import Path

from calorie_ai.accounts.models import Profile
from calorie_ai.auth.models import SignUpForm
from calorie_ai.deps import build_services
from calorie_ai.records import CURRENT_PROFILE_KEY
from calorie_ai.session.bootstrap import view_for_profile
from calorie_ai.session.models import AppView, SignInMode
from tests.fakes import FakeAnalyzer, FakePlatform, FixedClock


class TestViewForProfile(unittest.TestCase):
    def test_views(self) -> None:
        self.assertEqual(view_for_profile(None), AppView.sign_in)
        self.assertEqual(view_for_profile(Profile()), AppView.sign_in)
        self.assertEqual(view_for_profile(Profile(name="Alex")), AppView.onboarding)
        self.assertEqual(view_for_profile(Profile(name="Alex", is_onboarded=True)), AppView.dashboard)


class TestColdStart(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self._tmp = Path(tempfile.mkdtemp(prefix="calorieai-test-"))
        self.platform = FakePlatform()
        self.services = self._start()

    def tearDown(self) -> None:
        self.services.store.close()
        shutil.rmtree(self._tmp, ignore_errors=True)

    def _start(self):
        return build_services(
            store_path=self._tmp / "store.db",
            platform=self.platform,
            analyzer=FakeAnalyzer(),
            clock=FixedClock(),
            app_version="1.1.0",
        )

    def _restart(self):
        self.services.store.close()
        self.services = self._start()
        return self.services

    def _sign_up(self) -> None:
        self.services.auth.sign_up(
            SignUpForm(name="Alex", email="a@x.com", password="password1", confirm_password="password1")
        )

    def test_fresh_install_starts_at_sign_in_form(self) -> None:
        state = self.services.bootstrap.run()
        self.assertEqual(state.view, AppView.sign_in)
        self.assertEqual(state.sign_in.mode, SignInMode.form)
        self.assertIsNone(self.services.session.email)

    def test_mid_onboarding_resumes(self) -> None:
        self._sign_up()
        services = self._restart()
        self.assertEqual(services.bootstrap.initial_view(), AppView.onboarding)
        self.assertEqual(services.session.email, "a@x.com")
        self.assertEqual(services.session.profile.name, "Alex")

    async def test_onboarded_user_lands_on_dashboard_with_state(self) -> None:
        self._sign_up()
        self.services.preferences.complete_onboarding(height=170, weight=65)
        await self.services.auth.drain()
        services = self._restart()
        self.assertEqual(services.bootstrap.initial_view(), AppView.dashboard)
        self.assertTrue(services.session.profile.is_onboarded)
        # Update announcement is not repeated on restart.
        updates = [n for n in services.session.notifications if n.type.value == "update"]
        self.assertEqual(len(updates), 1)

    def test_signed_out_user_starts_at_sign_in(self) -> None:
        self._sign_up()
        self.services.auth.sign_out()
        services = self._restart()
        self.assertEqual(services.bootstrap.initial_view(), AppView.sign_in)
        self.assertEqual(services.bootstrap.sign_in_presentation().mode, SignInMode.form)

    def test_corrupt_current_profile_falls_back_to_sign_in(self) -> None:
        self.services.store.set_item(CURRENT_PROFILE_KEY, "][")
        with self.assertLogs("calorie_ai", level="WARNING"):
            services = self._restart()
            self.assertEqual(services.bootstrap.initial_view(), AppView.sign_in)

    async def test_biometric_presentation_follows_account_flag(self) -> None:
        self._sign_up()
        self.services.preferences.complete_onboarding(height=170, weight=65)
        await self.services.preferences.enable_biometric()
        await self.services.auth.drain()
        self.services.auth.sign_out()

        services = self._restart()
        presentation = services.bootstrap.sign_in_presentation()
        self.assertEqual(presentation.mode, SignInMode.biometric)
        self.assertEqual(presentation.remembered.name, "Alex")

    async def test_disabling_biometric_writes_through_immediately(self) -> None:
        self._sign_up()
        self.services.preferences.complete_onboarding(height=170, weight=65)
        await self.services.preferences.enable_biometric()
        await self.services.auth.drain()
        self.assertTrue(self.services.accounts.find_account("a@x.com").profile.is_biometric_enabled)

        self.services.preferences.disable_biometric()
        self.assertFalse(self.services.accounts.find_account("a@x.com").profile.is_biometric_enabled)

        self.services.auth.sign_out()
        services = self._restart()
        self.assertEqual(services.bootstrap.sign_in_presentation().mode, SignInMode.form)


if __name__ == "__main__":
    unittest.main()
