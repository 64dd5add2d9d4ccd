# -*- coding: utf-8 -*-
"""Diary — meal log and personal notes for the active account."""

from __future__ import annotations

import logging
from typing import List, Optional

from ..accounts.models import FoodItem, LoggedMeal, Macros, PersonalNote
from ..analyzer.client import NutritionAnalyzer
from ..errors import TransientAnalysisError, ValidationError
from ..notifications.center import NotificationCenter
from ..session.context import Session
from ..session.goal import GoalModalState, GoalTracker
from ..timeutil import Clock, local_day, new_id, utc_now
from .models import SavedMeal

logger = logging.getLogger(__name__)


class DiaryService:
    def __init__(
        self,
        session: Session,
        notifications: NotificationCenter,
        analyzer: NutritionAnalyzer,
        *,
        clock: Clock = utc_now,
    ) -> None:
        self.session = session
        self.notifications = notifications
        self.analyzer = analyzer
        self.clock = clock
        self.goal = GoalTracker()

    # ---- analysis (never mutates state) ----

    async def analyze_image(self, image_bytes: bytes, mime: str = "image/jpeg") -> FoodItem:
        try:
            return await self.analyzer.analyze_image(image_bytes, mime)
        except Exception as exc:
            logger.warning("Image analysis failed: %s", exc)
            raise TransientAnalysisError("Failed to analyze image. Please try again.") from exc

    async def analyze_query(self, text: str) -> FoodItem:
        try:
            return await self.analyzer.analyze_query(text)
        except Exception as exc:
            logger.warning("Text analysis failed: %s", exc)
            raise TransientAnalysisError("Search failed. Try a different query.") from exc

    async def analyze_recipe(self, text: str) -> FoodItem:
        try:
            return await self.analyzer.analyze_recipe(text)
        except Exception as exc:
            logger.warning("Recipe analysis failed: %s", exc)
            raise TransientAnalysisError("Recipe analysis failed.") from exc

    # ---- meals ----

    async def save_meal(self, item: FoodItem, image_uri: Optional[str] = None) -> SavedMeal:
        self.session.require_account()
        meal = LoggedMeal(id=new_id(), timestamp=self.clock(), item=item, image_uri=image_uri)
        self.session.add_meal(meal)
        self.notifications.record_event(
            "Meal Logged",
            f"Successfully tracked {item.name} ({item.calories:g} kcal).",
            prefix="log",
        )

        suggestion = ""
        if self.session.profile.is_ai_suggestions_enabled:
            try:
                suggestion = await self.analyzer.suggest_meal_note(item)
            except Exception as exc:
                logger.warning("Note suggestion failed: %s", exc)
        return SavedMeal(meal=meal, suggestion=suggestion or "")

    def update_meal_note(self, meal_id: str, note: Optional[str]) -> Optional[LoggedMeal]:
        self.session.require_account()
        return self.session.set_meal_note(meal_id, (note or "").strip() or None)

    def delete_meal(self, meal_id: str) -> bool:
        self.session.require_account()
        return self.session.remove_meal(meal_id)

    def reset_history(self) -> None:
        account = self.session.require_account()
        self.session.clear_history()
        self.goal.reset(account)

    # ---- notes ----

    def add_note(self, content: str) -> PersonalNote:
        self.session.require_account()
        text = (content or "").strip()
        if not text:
            raise ValidationError({"content": "Note is empty"})
        note = PersonalNote(id=new_id(), content=text, timestamp=self.clock())
        self.session.add_note(note)
        self.notifications.record_event(
            "Note Added", "Your personal reflection has been saved.", prefix="note"
        )
        return note

    def delete_note(self, note_id: str) -> bool:
        self.session.require_account()
        return self.session.remove_note(note_id)

    # ---- goal ----

    def _today_meals(self) -> List[LoggedMeal]:
        today = local_day(self.clock())
        return [m for m in self.session.meals if local_day(m.timestamp) == today]

    def today_calories(self) -> float:
        return sum(m.item.calories for m in self._today_meals())

    def today_macros(self) -> Macros:
        meals = self._today_meals()
        return Macros(
            protein=sum(m.item.macros.protein for m in meals),
            carbs=sum(m.item.macros.carbs for m in meals),
            fat=sum(m.item.macros.fat for m in meals),
        )

    def goal_state(self) -> GoalModalState:
        account = self.session.require_account()
        return self.goal.evaluate(
            account=account,
            day=local_day(self.clock()),
            total_calories=self.today_calories(),
            goal=self.session.profile.daily_calorie_goal,
            meal_count=len(self.session.meals),
        )

    def dismiss_goal(self) -> GoalModalState:
        self.goal_state()
        return self.goal.dismiss()

    def start_new_day(self) -> GoalModalState:
        self.session.require_account()
        self.session.clear_meals()
        return self.goal_state()
