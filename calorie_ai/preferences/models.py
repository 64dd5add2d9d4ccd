# -*- coding: utf-8 -*-
"""Preferences — Pydantic models."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from ..accounts.models import MAX_CALORIE_GOAL, MIN_CALORIE_GOAL


class ProfileUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, max_length=120)
    daily_calorie_goal: Optional[int] = Field(None, ge=MIN_CALORIE_GOAL, le=MAX_CALORIE_GOAL)
    height: Optional[float] = Field(None, ge=0)
    weight: Optional[float] = Field(None, ge=0)
    is_ai_suggestions_enabled: Optional[bool] = None


class BiometricToggleRequest(BaseModel):
    enabled: bool


class BiometricStatus(BaseModel):
    supported: bool
    enabled: bool
