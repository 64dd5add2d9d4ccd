# -*- coding: utf-8 -*-
"""Diary — request/response models."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from ..accounts.models import FoodItem, LoggedMeal, Macros, PersonalNote
from ..session.goal import GoalModalState


class SavedMeal(BaseModel):
    meal: LoggedMeal
    suggestion: str = ""


class AnalyzeTextRequest(BaseModel):
    text: str = Field(..., min_length=1, max_length=4000)


class AnalyzeImageRequest(BaseModel):
    image_mime: str = Field("image/jpeg", pattern=r"^image/(jpeg|jpg|png|heic|webp)$")
    image_base64: str = Field(..., min_length=16, description="Raw base64 without data-url prefix")


class SaveMealRequest(BaseModel):
    item: FoodItem
    image_uri: Optional[str] = None


class MealNoteRequest(BaseModel):
    note: Optional[str] = Field(None, max_length=2000)


class AddNoteRequest(BaseModel):
    content: str = Field(..., min_length=1, max_length=4000)


class DiaryResponse(BaseModel):
    meals: List[LoggedMeal]
    notes: List[PersonalNote]
    today_calories: float
    today_macros: Macros
    goal: int
    goal_modal: GoalModalState
