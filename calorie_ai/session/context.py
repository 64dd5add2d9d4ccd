# -*- coding: utf-8 -*-
"""Session — the working state of the active account.

All mutations of profile, meals, notes and notifications go through this
object and end in ``sync()``, the single place that writes the current-*
mirror and echoes the full snapshot into the account map.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from pydantic import ValidationError as PydanticValidationError

from ..accounts.models import AccountSnapshot, LoggedMeal, Notification, PersonalNote, Profile
from ..accounts.storage import AccountStore
from ..errors import NotAuthenticatedError, ValidationError
from ..records import (
    CURRENT_KEYS,
    CURRENT_MEALS_KEY,
    CURRENT_NOTES_KEY,
    CURRENT_NOTIFICATIONS_KEY,
    CURRENT_PROFILE_KEY,
    PersistentRecord,
)

logger = logging.getLogger(__name__)


class Session:
    def __init__(self, records: PersistentRecord, accounts: AccountStore) -> None:
        self.records = records
        self.accounts = accounts
        self.profile = Profile()
        self.meals: List[LoggedMeal] = []
        self.notes: List[PersonalNote] = []
        self.notifications: List[Notification] = []

    # ---- lifecycle ----

    def restore(self) -> bool:
        """Rebuild working state from the current-* mirror. Returns ``True`` if a profile was found."""
        profile = self.records.read(CURRENT_PROFILE_KEY, Profile)
        self.profile = profile or Profile()
        self.meals = self.records.read(CURRENT_MEALS_KEY, List[LoggedMeal], default=[])
        self.notes = self.records.read(CURRENT_NOTES_KEY, List[PersonalNote], default=[])
        self.notifications = self.records.read(CURRENT_NOTIFICATIONS_KEY, List[Notification], default=[])
        return profile is not None

    def load_snapshot(self, snapshot: AccountSnapshot) -> None:
        self.profile = snapshot.profile.model_copy(deep=True)
        self.meals = [m.model_copy(deep=True) for m in snapshot.meals]
        self.notes = [n.model_copy(deep=True) for n in snapshot.notes]
        self.notifications = [n.model_copy(deep=True) for n in snapshot.notifications]
        self.sync()

    def snapshot(self) -> AccountSnapshot:
        return AccountSnapshot(
            profile=self.profile.model_copy(deep=True),
            meals=[m.model_copy(deep=True) for m in self.meals],
            notes=[n.model_copy(deep=True) for n in self.notes],
            notifications=[n.model_copy(deep=True) for n in self.notifications],
        )

    def sync(self) -> None:
        self.records.write(CURRENT_PROFILE_KEY, self.profile, Profile)
        self.records.write(CURRENT_MEALS_KEY, self.meals, List[LoggedMeal])
        self.records.write(CURRENT_NOTES_KEY, self.notes, List[PersonalNote])
        self.records.write(CURRENT_NOTIFICATIONS_KEY, self.notifications, List[Notification])
        # Anonymous state never reaches the account map.
        if self.profile.email:
            self.accounts.upsert_account(self.profile.email, self.snapshot())

    def clear(self) -> None:
        """Drop working state and the current-* mirror. The account snapshot is kept."""
        self.profile = Profile()
        self.meals = []
        self.notes = []
        self.notifications = []
        for key in CURRENT_KEYS:
            self.records.remove(key)

    @property
    def email(self) -> Optional[str]:
        return self.profile.email or None

    def require_account(self) -> str:
        if not self.profile.email:
            raise NotAuthenticatedError()
        return self.profile.email

    # ---- profile ----

    def update_profile(self, **changes: Any) -> Profile:
        data = self.profile.model_dump()
        data.update(changes)
        try:
            profile = Profile.model_validate(data)
        except PydanticValidationError as exc:
            raise ValidationError(
                {".".join(str(p) for p in err["loc"]): err["msg"] for err in exc.errors()}
            ) from exc
        self.profile = profile
        self.sync()
        return profile

    # ---- meals ----

    def add_meal(self, meal: LoggedMeal) -> None:
        self.meals.insert(0, meal)
        self.sync()

    def find_meal(self, meal_id: str) -> Optional[LoggedMeal]:
        return next((m for m in self.meals if m.id == meal_id), None)

    def set_meal_note(self, meal_id: str, note: Optional[str]) -> Optional[LoggedMeal]:
        meal = self.find_meal(meal_id)
        if meal is None:
            return None
        meal.note = note or None
        self.sync()
        return meal

    def remove_meal(self, meal_id: str) -> bool:
        remaining = [m for m in self.meals if m.id != meal_id]
        if len(remaining) == len(self.meals):
            return False
        self.meals = remaining
        self.sync()
        return True

    def clear_meals(self) -> None:
        self.meals = []
        self.sync()

    # ---- notes ----

    def add_note(self, note: PersonalNote) -> None:
        self.notes.insert(0, note)
        self.sync()

    def remove_note(self, note_id: str) -> bool:
        remaining = [n for n in self.notes if n.id != note_id]
        if len(remaining) == len(self.notes):
            return False
        self.notes = remaining
        self.sync()
        return True

    # ---- notifications ----

    def set_notifications(self, notifications: List[Notification]) -> None:
        self.notifications = notifications
        self.sync()

    def clear_history(self) -> None:
        self.meals = []
        self.notes = []
        self.notifications = []
        self.sync()
