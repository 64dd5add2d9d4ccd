# -*- coding: utf-8 -*-

from __future__ import annotations

import shutil
import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path
from typing import List

from calorie_ai.accounts.models import LoggedMeal, Profile
from calorie_ai.records import CURRENT_MEALS_KEY, CURRENT_PROFILE_KEY, PersistentRecord
from calorie_ai.store import KeyValueStore
from tests.fakes import food


class TestPersistentRecord(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = Path(tempfile.mkdtemp(prefix="calorieai-test-"))
        self.store = KeyValueStore(self._tmp / "store.db")
        self.records = PersistentRecord(self.store)

    def tearDown(self) -> None:
        self.store.close()
        shutil.rmtree(self._tmp, ignore_errors=True)

    def test_meal_note_and_timestamp_survive_reopen(self) -> None:
        ts = datetime(2026, 3, 14, 8, 30, 15, 123000, tzinfo=timezone.utc)
        meal = LoggedMeal(id="1710405015123", timestamp=ts, item=food(), note="Post-run breakfast")
        self.assertTrue(self.records.write(CURRENT_MEALS_KEY, [meal], List[LoggedMeal]))
        self.store.close()

        self.store = KeyValueStore(self._tmp / "store.db")
        self.records = PersistentRecord(self.store)
        restored = self.records.read(CURRENT_MEALS_KEY, List[LoggedMeal], default=[])
        self.assertEqual(len(restored), 1)
        self.assertIsInstance(restored[0].timestamp, datetime)
        self.assertEqual(restored[0].timestamp, ts)
        self.assertEqual(restored[0].note, "Post-run breakfast")
        self.assertIn("2026-03-14T08:30:15.123", self.store.get_item(CURRENT_MEALS_KEY))

    def test_malformed_value_degrades_to_default_and_logs(self) -> None:
        self.store.set_item(CURRENT_MEALS_KEY, "{not json")
        with self.assertLogs("calorie_ai.records", level="WARNING"):
            value = self.records.read(CURRENT_MEALS_KEY, List[LoggedMeal], default=[])
        self.assertEqual(value, [])

    def test_wrong_shape_degrades_to_none(self) -> None:
        self.store.set_item(CURRENT_PROFILE_KEY, '{"daily_calorie_goal": "lots"}')
        with self.assertLogs("calorie_ai.records", level="WARNING"):
            self.assertIsNone(self.records.read(CURRENT_PROFILE_KEY, Profile))

    def test_missing_and_removed_keys_read_as_default(self) -> None:
        self.assertIsNone(self.records.read(CURRENT_PROFILE_KEY, Profile))
        self.records.write(CURRENT_PROFILE_KEY, Profile(name="Alex"), Profile)
        self.assertEqual(self.records.read(CURRENT_PROFILE_KEY, Profile).name, "Alex")
        self.records.remove(CURRENT_PROFILE_KEY)
        self.assertIsNone(self.store.get_item(CURRENT_PROFILE_KEY))


if __name__ == "__main__":
    unittest.main()
