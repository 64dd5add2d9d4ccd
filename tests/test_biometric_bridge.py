# -*- coding: utf-8 -*-

from __future__ import annotations

import unittest

from calorie_ai.biometric.bridge import AccountHint, BiometricBridge
from tests.fakes import FakePlatform


class TestBiometricBridge(unittest.IsolatedAsyncioTestCase):
    async def test_no_platform_is_unavailable(self) -> None:
        bridge = BiometricBridge(None)
        self.assertFalse(await bridge.is_available())
        self.assertFalse(await bridge.register(AccountHint(email="a@x.com")))
        self.assertFalse(await bridge.authenticate())

    async def test_register_requests_verified_platform_credential(self) -> None:
        platform = FakePlatform()
        bridge = BiometricBridge(platform, timeout_sec=60, rp_name="CalorieAI")
        self.assertTrue(await bridge.register(AccountHint(email="a@x.com", display_name="Alex")))

        options = platform.created[0]["publicKey"]
        self.assertEqual(len(options["challenge"]), 32)
        self.assertEqual(len(options["user"]["id"]), 16)
        self.assertEqual(options["user"]["name"], "a@x.com")
        self.assertEqual(options["user"]["displayName"], "Alex")
        self.assertEqual(options["authenticatorSelection"]["userVerification"], "required")
        self.assertEqual(options["authenticatorSelection"]["authenticatorAttachment"], "platform")
        self.assertEqual(options["timeout"], 60000)

    async def test_each_ceremony_gets_a_fresh_challenge(self) -> None:
        platform = FakePlatform()
        bridge = BiometricBridge(platform)
        self.assertTrue(await bridge.authenticate())
        self.assertTrue(await bridge.authenticate())
        first, second = (o["publicKey"]["challenge"] for o in platform.asserted)
        self.assertNotEqual(first, second)
        self.assertEqual(platform.asserted[0]["publicKey"]["userVerification"], "required")

    async def test_platform_refusal_is_false(self) -> None:
        bridge = BiometricBridge(FakePlatform(error=PermissionError("NotAllowedError")))
        self.assertFalse(await bridge.authenticate())
        with self.assertLogs("calorie_ai.biometric.bridge", level="ERROR"):
            self.assertFalse(await bridge.register(AccountHint(email="a@x.com")))

    async def test_timeout_resolves_false(self) -> None:
        bridge = BiometricBridge(FakePlatform(hang=True), timeout_sec=0.05)
        self.assertFalse(await bridge.authenticate())
        self.assertFalse(await bridge.register(AccountHint(email="a@x.com")))

    async def test_missing_credential_is_false(self) -> None:
        bridge = BiometricBridge(FakePlatform(result=None))
        self.assertFalse(await bridge.authenticate())

    async def test_probe_reports_platform_answer(self) -> None:
        self.assertTrue(await BiometricBridge(FakePlatform()).is_available())
        self.assertFalse(await BiometricBridge(FakePlatform(available=False)).is_available())


if __name__ == "__main__":
    unittest.main()
