# -*- coding: utf-8 -*-
"""Analyzer — Pydantic models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class DailyInsight(BaseModel):
    title: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)


EMPTY_INSIGHT = DailyInsight(title="Daily Tip", message="Stay consistent and hydrate today!")
FAILED_INSIGHT = DailyInsight(title="Welcome Back", message="Ready to track your meals today?")
