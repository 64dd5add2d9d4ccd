# -*- coding: utf-8 -*-
"""Diary — API endpoints."""

from __future__ import annotations

import base64
import os

from fastapi import APIRouter, Depends, HTTPException

from ..accounts.models import FoodItem, LoggedMeal, PersonalNote
from ..deps import AppServices, require_account, to_http
from ..errors import CalorieAIError
from ..session.goal import GoalModalState
from .models import (
    AddNoteRequest,
    AnalyzeImageRequest,
    AnalyzeTextRequest,
    DiaryResponse,
    MealNoteRequest,
    SavedMeal,
    SaveMealRequest,
)

router = APIRouter(prefix="/api/diary", tags=["Diary"])


def _decode_image_or_400(image_base64: str, max_bytes: int) -> bytes:
    try:
        data = base64.b64decode(image_base64, validate=True)
    except Exception as exc:
        raise HTTPException(status_code=400, detail=f"Invalid base64 image: {exc}") from exc
    if len(data) > max_bytes:
        raise HTTPException(status_code=400, detail=f"Image too large: {len(data)} bytes > {max_bytes}")
    return data


@router.get("", response_model=DiaryResponse, summary="Meals, notes and today's progress")
async def diary(services: AppServices = Depends(require_account)):
    return DiaryResponse(
        meals=services.session.meals,
        notes=services.session.notes,
        today_calories=services.diary.today_calories(),
        today_macros=services.diary.today_macros(),
        goal=services.session.profile.daily_calorie_goal,
        goal_modal=services.diary.goal_state(),
    )


@router.post("/analyze/image", response_model=FoodItem, summary="Estimate nutrition from a photo")
async def analyze_image(request: AnalyzeImageRequest, services: AppServices = Depends(require_account)):
    max_bytes = int(os.environ.get("CALORIEAI_MAX_IMAGE_BYTES") or "5000000")
    image_bytes = _decode_image_or_400(request.image_base64, max_bytes=max_bytes)
    try:
        return await services.diary.analyze_image(image_bytes, request.image_mime)
    except CalorieAIError as exc:
        raise to_http(exc) from exc


@router.post("/analyze/query", response_model=FoodItem, summary="Estimate nutrition from a text query")
async def analyze_query(request: AnalyzeTextRequest, services: AppServices = Depends(require_account)):
    try:
        return await services.diary.analyze_query(request.text)
    except CalorieAIError as exc:
        raise to_http(exc) from exc


@router.post("/analyze/recipe", response_model=FoodItem, summary="Estimate one serving of a recipe")
async def analyze_recipe(request: AnalyzeTextRequest, services: AppServices = Depends(require_account)):
    try:
        return await services.diary.analyze_recipe(request.text)
    except CalorieAIError as exc:
        raise to_http(exc) from exc


@router.post("/meals", response_model=SavedMeal, summary="Log an analyzed meal")
async def save_meal(request: SaveMealRequest, services: AppServices = Depends(require_account)):
    return await services.diary.save_meal(request.item, request.image_uri)


@router.patch("/meals/{meal_id}/note", response_model=LoggedMeal, summary="Edit a meal note")
async def update_meal_note(meal_id: str, request: MealNoteRequest, services: AppServices = Depends(require_account)):
    meal = services.diary.update_meal_note(meal_id, request.note)
    if meal is None:
        raise HTTPException(status_code=404, detail="Meal not found")
    return meal


@router.delete("/meals/{meal_id}", summary="Delete a meal")
async def delete_meal(meal_id: str, services: AppServices = Depends(require_account)):
    if not services.diary.delete_meal(meal_id):
        raise HTTPException(status_code=404, detail="Meal not found")
    return {"status": "ok"}


@router.delete("/history", summary="Clear meals, notes and notifications")
async def reset_history(services: AppServices = Depends(require_account)):
    services.diary.reset_history()
    return {"status": "ok"}


@router.post("/notes", response_model=PersonalNote, summary="Add a personal note")
async def add_note(request: AddNoteRequest, services: AppServices = Depends(require_account)):
    try:
        return services.diary.add_note(request.content)
    except CalorieAIError as exc:
        raise to_http(exc) from exc


@router.delete("/notes/{note_id}", summary="Delete a personal note")
async def delete_note(note_id: str, services: AppServices = Depends(require_account)):
    if not services.diary.delete_note(note_id):
        raise HTTPException(status_code=404, detail="Note not found")
    return {"status": "ok"}


@router.post("/goal/dismiss", response_model=GoalModalState, summary="Keep viewing today's log")
async def dismiss_goal(services: AppServices = Depends(require_account)):
    return services.diary.dismiss_goal()


@router.post("/goal/new-day", response_model=GoalModalState, summary="Clear the meal log for a new day")
async def start_new_day(services: AppServices = Depends(require_account)):
    return services.diary.start_new_day()
