# -*- coding: utf-8 -*-

from __future__ import annotations

import json
import shutil
import tempfile
import unittest
from pathlib import Path

from calorie_ai.accounts.models import AccountSnapshot, Profile
from calorie_ai.accounts.storage import AccountStore, normalize_email
from calorie_ai.records import ACCOUNTS_KEY, PersistentRecord
from calorie_ai.store import KeyValueStore


class TestAccountStore(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = Path(tempfile.mkdtemp(prefix="calorieai-test-"))
        self.store = KeyValueStore(self._tmp / "store.db")
        self.accounts = AccountStore(PersistentRecord(self.store))

    def tearDown(self) -> None:
        self.store.close()
        shutil.rmtree(self._tmp, ignore_errors=True)

    def _snapshot(self, email: str, name: str) -> AccountSnapshot:
        return AccountSnapshot(profile=Profile(email=email, name=name))

    def test_upsert_keeps_other_accounts(self) -> None:
        self.accounts.upsert_account("a@x.com", self._snapshot("a@x.com", "Alex"))
        self.accounts.upsert_account("b@x.com", self._snapshot("b@x.com", "Bo"))
        self.accounts.upsert_account("a@x.com", self._snapshot("a@x.com", "Alexandra"))

        self.assertEqual(self.accounts.emails(), ["a@x.com", "b@x.com"])
        self.assertEqual(self.accounts.find_account("a@x.com").profile.name, "Alexandra")
        self.assertEqual(self.accounts.find_account("b@x.com").profile.name, "Bo")

    def test_malformed_neighbour_is_carried_over(self) -> None:
        self.store.set_item(ACCOUNTS_KEY, json.dumps({"old@x.com": {"profile": "garbage"}}))
        with self.assertLogs("calorie_ai.accounts.storage", level="WARNING"):
            rebuilt = self.accounts.find_account("old@x.com")
        self.assertEqual(rebuilt.profile.email, "old@x.com")

        self.accounts.upsert_account("a@x.com", self._snapshot("a@x.com", "Alex"))
        raw = json.loads(self.store.get_item(ACCOUNTS_KEY))
        self.assertEqual(raw["old@x.com"], {"profile": "garbage"})
        self.assertIn("a@x.com", raw)

    def test_malformed_entry_is_rebuilt_from_valid_parts(self) -> None:
        meal = {
            "id": "1",
            "timestamp": "2026-03-14T08:00:00Z",
            "item": {"name": "Oats", "calories": 300},
        }
        entry = {
            "profile": {"name": "Alex", "daily_calorie_goal": 99999, "is_onboarded": True},
            "meals": [meal, {"id": "2"}],
            "notes": "garbage",
        }
        self.store.set_item(ACCOUNTS_KEY, json.dumps({"a@x.com": entry}))

        with self.assertLogs("calorie_ai.accounts.storage", level="WARNING"):
            snapshot = self.accounts.find_account("a@x.com")
        self.assertTrue(self.accounts.account_exists("a@x.com"))
        self.assertEqual(snapshot.profile.email, "a@x.com")
        self.assertEqual(snapshot.profile.name, "Alex")
        self.assertTrue(snapshot.profile.is_onboarded)
        self.assertEqual(snapshot.profile.daily_calorie_goal, 2000)
        self.assertEqual([m.id for m in snapshot.meals], ["1"])
        self.assertEqual(snapshot.notes, [])

    def test_unreadable_map_is_preserved_before_write(self) -> None:
        truncated = '{"b@x.com": {"profile": {"name": "Bo"}}, "c@x.com": {'
        self.store.set_item(ACCOUNTS_KEY, truncated)

        with self.assertLogs("calorie_ai.accounts.storage", level="ERROR"):
            self.assertTrue(self.accounts.upsert_account("a@x.com", self._snapshot("a@x.com", "Alex")))

        backups = [k for k in self.store.keys() if k.startswith(f"{ACCOUNTS_KEY}.corrupt-")]
        self.assertEqual(len(backups), 1)
        self.assertEqual(self.store.get_item(backups[0]), truncated)
        self.assertEqual(self.accounts.emails(), ["a@x.com"])

    def test_non_object_map_is_preserved_before_write(self) -> None:
        self.store.set_item(ACCOUNTS_KEY, "[1, 2]")
        with self.assertLogs("calorie_ai.accounts.storage", level="ERROR"):
            self.accounts.upsert_account("a@x.com", self._snapshot("a@x.com", "Alex"))
        backups = [k for k in self.store.keys() if k.startswith(f"{ACCOUNTS_KEY}.corrupt-")]
        self.assertEqual([self.store.get_item(k) for k in backups], ["[1, 2]"])

    def test_readable_map_is_not_backed_up(self) -> None:
        self.accounts.upsert_account("a@x.com", self._snapshot("a@x.com", "Alex"))
        self.accounts.upsert_account("b@x.com", self._snapshot("b@x.com", "Bo"))
        self.assertEqual(self.store.keys(), [ACCOUNTS_KEY])

    def test_lookup_uses_same_normalization_as_store(self) -> None:
        self.accounts.upsert_account("  Alex@X.com ", self._snapshot("alex@x.com", "Alex"))
        self.assertTrue(self.accounts.account_exists("alex@x.com"))
        self.assertTrue(self.accounts.account_exists("ALEX@x.COM"))
        self.assertEqual(normalize_email(" A@B.c "), "a@b.c")
        self.assertFalse(self.accounts.account_exists(""))

    def test_clearing_session_pointer_keeps_snapshot(self) -> None:
        self.accounts.upsert_account("a@x.com", self._snapshot("a@x.com", "Alex"))
        self.accounts.remember_session("a@x.com")
        self.assertEqual(self.accounts.remembered_email(), "a@x.com")

        self.accounts.clear_remembered_session()
        self.assertIsNone(self.accounts.remembered_email())
        self.assertIsNotNone(self.accounts.find_account("a@x.com"))

    def test_missing_account(self) -> None:
        self.assertIsNone(self.accounts.find_account("nobody@x.com"))
        self.assertFalse(self.accounts.account_exists("nobody@x.com"))

    def test_upsert_without_email_is_refused(self) -> None:
        with self.assertLogs("calorie_ai.accounts.storage", level="ERROR"):
            self.assertFalse(self.accounts.upsert_account("  ", self._snapshot("", "Anon")))
        self.assertIsNone(self.store.get_item(ACCOUNTS_KEY))


if __name__ == "__main__":
    unittest.main()
