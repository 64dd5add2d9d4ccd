# -*- coding: utf-8 -*-
"""Session — goal-reached modal state, per (account, day)."""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Dict, Optional, Tuple

GoalKey = Tuple[str, date]


class GoalModalState(str, Enum):
    hidden = "hidden"
    shown = "shown"
    dismissed = "dismissed"


class GoalTracker:
    def __init__(self) -> None:
        self._states: Dict[GoalKey, GoalModalState] = {}
        self._current: Optional[GoalKey] = None

    @property
    def state(self) -> GoalModalState:
        if self._current is None:
            return GoalModalState.hidden
        return self._states.get(self._current, GoalModalState.hidden)

    def evaluate(self, *, account: str, day: date, total_calories: float, goal: int, meal_count: int) -> GoalModalState:
        key = (account, day)
        self._current = key
        state = self._states.get(key, GoalModalState.hidden)
        if meal_count == 0:
            state = GoalModalState.hidden
        elif total_calories >= goal and state is not GoalModalState.dismissed:
            state = GoalModalState.shown
        # Earlier days are never evaluated again.
        self._states = {k: v for k, v in self._states.items() if k[1] >= day}
        self._states[key] = state
        return state

    def dismiss(self) -> GoalModalState:
        if self._current is not None and self.state is GoalModalState.shown:
            self._states[self._current] = GoalModalState.dismissed
        return self.state

    def reset(self, account: Optional[str] = None) -> None:
        """Forget state for ``account``, or for everyone when omitted."""
        if account is None:
            self._states.clear()
        else:
            self._states = {k: v for k, v in self._states.items() if k[0] != account}
