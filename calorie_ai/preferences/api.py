# -*- coding: utf-8 -*-
"""Preferences — API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ..accounts.models import Profile
from ..deps import AppServices, require_account, to_http
from ..errors import CalorieAIError
from ..session.models import AppView
from .models import BiometricStatus, BiometricToggleRequest, ProfileUpdateRequest

router = APIRouter(prefix="/api/profile", tags=["Profile"])


@router.get("", response_model=Profile, summary="Active profile")
async def get_profile(services: AppServices = Depends(require_account)):
    return services.session.profile


@router.patch("", response_model=Profile, summary="Update profile and goals")
async def update_profile(request: ProfileUpdateRequest, services: AppServices = Depends(require_account)):
    try:
        return services.preferences.update_profile(request.model_dump(exclude_none=True))
    except CalorieAIError as exc:
        raise to_http(exc) from exc


@router.post("/onboarding", response_model=AppView, summary="Finish onboarding")
async def complete_onboarding(request: ProfileUpdateRequest, services: AppServices = Depends(require_account)):
    try:
        return services.preferences.complete_onboarding(**request.model_dump(exclude_none=True))
    except CalorieAIError as exc:
        raise to_http(exc) from exc


@router.get("/biometric", response_model=BiometricStatus, summary="Biometric support and state")
async def biometric_status(services: AppServices = Depends(require_account)):
    return BiometricStatus(
        supported=await services.preferences.biometric_supported(),
        enabled=services.session.profile.is_biometric_enabled,
    )


@router.put("/biometric", response_model=Profile, summary="Enable or disable biometric unlock")
async def toggle_biometric(request: BiometricToggleRequest, services: AppServices = Depends(require_account)):
    try:
        if request.enabled:
            return await services.preferences.enable_biometric()
        return services.preferences.disable_biometric()
    except CalorieAIError as exc:
        raise to_http(exc) from exc
