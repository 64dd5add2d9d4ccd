# -*- coding: utf-8 -*-
"""Accounts — Pydantic models.

These are the (de)serialization boundary for everything persisted: a raw
parsed blob is only trusted once it has been validated into one of these.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

MIN_CALORIE_GOAL = 1200
MAX_CALORIE_GOAL = 4000
DEFAULT_CALORIE_GOAL = 2000


class Macros(BaseModel):
    protein: float = Field(0.0, ge=0)
    carbs: float = Field(0.0, ge=0)
    fat: float = Field(0.0, ge=0)


class Confidence(str, Enum):
    high = "High"
    medium = "Medium"
    low = "Low"


class SourceUrl(BaseModel):
    title: str = ""
    url: str


class FoodItem(BaseModel):
    name: str = Field(..., min_length=1)
    calories: float = Field(..., ge=0)
    macros: Macros = Macros()
    confidence: Confidence = Confidence.medium
    description: str = ""
    portion_size: str = ""
    source: Optional[str] = None
    alternatives: List[str] = []
    image_url: Optional[str] = None
    source_urls: List[SourceUrl] = []


class Profile(BaseModel):
    email: Optional[str] = None
    name: str = ""
    daily_calorie_goal: int = Field(DEFAULT_CALORIE_GOAL, ge=MIN_CALORIE_GOAL, le=MAX_CALORIE_GOAL)
    # 0 means unset.
    height: float = Field(0.0, ge=0)
    weight: float = Field(0.0, ge=0)
    is_onboarded: bool = False
    is_biometric_enabled: bool = False
    is_ai_suggestions_enabled: bool = True


class LoggedMeal(BaseModel):
    id: str
    timestamp: datetime
    item: FoodItem
    image_uri: Optional[str] = None
    note: Optional[str] = None


class PersonalNote(BaseModel):
    id: str
    content: str
    timestamp: datetime


class NotificationType(str, Enum):
    system = "system"
    update = "update"
    insight = "insight"
    alert = "alert"


class Notification(BaseModel):
    id: str
    title: str
    message: str
    type: NotificationType
    timestamp: datetime
    is_read: bool = False


class AccountSnapshot(BaseModel):
    """Everything persisted for one account, keyed by its email."""

    profile: Profile
    meals: List[LoggedMeal] = []
    notes: List[PersonalNote] = []
    notifications: List[Notification] = []
