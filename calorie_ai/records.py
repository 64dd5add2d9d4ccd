# -*- coding: utf-8 -*-
"""Typed read/write helpers over the durable key-value store.

Values are validated through pydantic ``TypeAdapter``s on the way in and out,
so timestamps are written as ISO-8601 strings and come back as ``datetime``.
Malformed data never reaches callers: it is logged and read as the default.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from typing import Any, Optional, TypeVar

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from .errors import StorageCorruption
from .store import KeyValueStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Logical key namespace. The users map is the durable source of truth; the
# current-* entries mirror the active session only.
CURRENT_PROFILE_KEY = "calorieai_user"
CURRENT_MEALS_KEY = "calorieai_logs"
CURRENT_NOTES_KEY = "calorieai_notes"
CURRENT_NOTIFICATIONS_KEY = "calorieai_notifications"
LAST_EMAIL_KEY = "calorieai_last_email"
ACCOUNTS_KEY = "calorieai_users_db"

CURRENT_KEYS = (
    CURRENT_PROFILE_KEY,
    CURRENT_MEALS_KEY,
    CURRENT_NOTES_KEY,
    CURRENT_NOTIFICATIONS_KEY,
)


@lru_cache(maxsize=None)
def _adapter(type_: Any) -> TypeAdapter:
    return TypeAdapter(type_)


class PersistentRecord:
    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    def decode(self, key: str, type_: Any) -> Optional[Any]:
        """Strict read: ``None`` when absent, ``StorageCorruption`` when malformed."""
        raw = self.store.get_item(key)
        if raw is None:
            return None
        try:
            return _adapter(type_).validate_json(raw)
        except (PydanticValidationError, ValueError) as exc:
            raise StorageCorruption(key, str(exc)) from exc

    def read(self, key: str, type_: Any, default: Optional[T] = None) -> Any:
        try:
            value = self.decode(key, type_)
        except StorageCorruption as exc:
            logger.warning("Ignoring malformed stored value: %s", exc)
            return default
        return default if value is None else value

    def write(self, key: str, value: Any, type_: Any = None) -> bool:
        """Serialize and store ``value``. Returns ``False`` (and logs) on failure."""
        adapter = _adapter(type_ if type_ is not None else type(value))
        try:
            raw = adapter.dump_json(value).decode("utf-8")
        except Exception as exc:
            logger.error("Failed to serialize %s: %s", key, exc)
            return False
        self.store.set_item(key, raw)
        return True

    def read_raw(self, key: str) -> Optional[Any]:
        """Plain JSON read for callers that merge untyped blobs."""
        raw = self.store.get_item(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as exc:
            logger.warning("Ignoring malformed JSON under %s: %s", key, exc)
            return None

    def write_raw(self, key: str, value: Any) -> None:
        self.store.set_item(key, json.dumps(value, ensure_ascii=False, separators=(",", ":")))

    def remove(self, key: str) -> None:
        self.store.remove_item(key)
