# -*- coding: utf-8 -*-
"""Accounts — multi-tenant snapshot map and session pointer.

The whole map lives under one key. Writes are read-entire-map,
replace-one-entry, write-entire-map, and operate on the raw JSON so that an
entry which no longer validates is carried over untouched instead of lost.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..records import ACCOUNTS_KEY, LAST_EMAIL_KEY, PersistentRecord
from ..timeutil import new_id
from .models import AccountSnapshot, LoggedMeal, Notification, PersonalNote, Profile

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    """Tenant key policy: surrounding whitespace stripped, case folded to lower."""
    return (email or "").strip().lower()


def _salvage_profile(email: str, raw: Any) -> Profile:
    if not isinstance(raw, dict):
        return Profile(email=email)
    fields = dict(raw)
    try:
        return Profile.model_validate(fields)
    except PydanticValidationError as exc:
        bad = {err["loc"][0] for err in exc.errors() if err.get("loc")}
    for name in bad:
        fields.pop(name, None)
    try:
        profile = Profile.model_validate(fields)
    except PydanticValidationError:
        profile = Profile()
    if not profile.email:
        profile.email = email
    return profile


def _salvage_list(raw: Any, model: type[BaseModel]) -> List[Any]:
    if not isinstance(raw, list):
        return []
    kept = []
    for item in raw:
        try:
            kept.append(model.model_validate(item))
        except PydanticValidationError:
            continue
    return kept


def salvage_snapshot(email: str, entry: Any) -> AccountSnapshot:
    """Rebuild a snapshot from a malformed entry, keeping every part that validates."""
    if not isinstance(entry, dict):
        entry = {}
    return AccountSnapshot(
        profile=_salvage_profile(email, entry.get("profile")),
        meals=_salvage_list(entry.get("meals"), LoggedMeal),
        notes=_salvage_list(entry.get("notes"), PersonalNote),
        notifications=_salvage_list(entry.get("notifications"), Notification),
    )


class AccountStore:
    def __init__(
        self,
        records: PersistentRecord,
        normalize: Callable[[str], str] = normalize_email,
    ) -> None:
        self.records = records
        self.normalize = normalize

    def _load_map(self) -> Dict[str, Any]:
        raw = self.records.read_raw(ACCOUNTS_KEY)
        if raw is None:
            return {}
        if not isinstance(raw, dict):
            logger.warning("Account map is not an object (%s); treating as empty", type(raw).__name__)
            return {}
        return raw

    def _load_map_for_write(self) -> Dict[str, Any]:
        """Like ``_load_map``, but an unreadable map is moved aside before it is replaced."""
        text = self.records.store.get_item(ACCOUNTS_KEY)
        if text is None:
            return {}
        try:
            raw = json.loads(text)
        except ValueError:
            raw = None
        if isinstance(raw, dict):
            return raw
        backup = f"{ACCOUNTS_KEY}.corrupt-{new_id()}"
        self.records.store.set_item(backup, text)
        logger.error("Account map is unreadable; preserved original under %s", backup)
        return {}

    def emails(self) -> List[str]:
        return sorted(self._load_map().keys())

    def find_account(self, email: str) -> Optional[AccountSnapshot]:
        key = self.normalize(email)
        if not key:
            return None
        accounts = self._load_map()
        if key not in accounts:
            return None
        entry = accounts[key]
        try:
            return AccountSnapshot.model_validate(entry)
        except PydanticValidationError as exc:
            logger.warning("Stored account %s is malformed, rebuilding from valid parts: %s", key, exc)
            return salvage_snapshot(key, entry)

    def account_exists(self, email: str) -> bool:
        key = self.normalize(email)
        return bool(key) and key in self._load_map()

    def upsert_account(self, email: str, snapshot: AccountSnapshot) -> bool:
        key = self.normalize(email)
        if not key:
            logger.error("Refusing to store an account without an email")
            return False
        try:
            entry = snapshot.model_dump(mode="json")
        except Exception as exc:
            logger.error("Failed to serialize account %s: %s", key, exc)
            return False
        accounts = self._load_map_for_write()
        accounts[key] = entry
        self.records.write_raw(ACCOUNTS_KEY, accounts)
        return True

    def remember_session(self, email: str) -> None:
        self.records.write(LAST_EMAIL_KEY, self.normalize(email), str)

    def remembered_email(self) -> Optional[str]:
        email = self.records.read(LAST_EMAIL_KEY, str)
        return email or None

    def clear_remembered_session(self) -> None:
        # Forgetting the pointer never touches the snapshot itself.
        self.records.remove(LAST_EMAIL_KEY)
