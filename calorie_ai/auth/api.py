# -*- coding: utf-8 -*-
"""Auth — API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ..deps import AppServices, get_services, to_http
from ..errors import CalorieAIError
from ..session.models import SignInPresentation
from .models import AuthResult, PasswordCredential, SignInRequest, SignUpForm, SignUpRequest

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.get("/presentation", response_model=SignInPresentation, summary="Biometric unlock or password form")
async def presentation(services: AppServices = Depends(get_services)):
    return services.auth.begin()


@router.post("/sign-in", response_model=AuthResult, summary="Sign in with email and password")
async def sign_in(request: SignInRequest, services: AppServices = Depends(get_services)):
    try:
        return await services.auth.sign_in(PasswordCredential(email=request.email, password=request.password))
    except CalorieAIError as exc:
        raise to_http(exc) from exc


@router.post("/biometric", response_model=AuthResult, summary="Unlock the remembered account")
async def biometric(services: AppServices = Depends(get_services)):
    try:
        return await services.auth.sign_in_with_biometrics()
    except CalorieAIError as exc:
        raise to_http(exc) from exc


@router.post("/sign-up", response_model=AuthResult, summary="Create a local account")
async def sign_up(request: SignUpRequest, services: AppServices = Depends(get_services)):
    form = SignUpForm(
        name=request.name,
        email=request.email,
        password=request.password,
        confirm_password=request.confirm_password,
    )
    try:
        return services.auth.sign_up(form)
    except CalorieAIError as exc:
        raise to_http(exc) from exc


@router.post("/sign-out", summary="Sign out (account and remembered email are kept)")
async def sign_out(services: AppServices = Depends(get_services)):
    services.auth.sign_out()
    return {"status": "ok"}


@router.post("/switch-account", response_model=SignInPresentation, summary="Forget the remembered email")
async def switch_account(services: AppServices = Depends(get_services)):
    return services.auth.switch_account()
