# -*- coding: utf-8 -*-
"""Service wiring and FastAPI dependency helpers."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from fastapi import Depends, HTTPException, Request

from .accounts.storage import AccountStore
from .analyzer.client import NutritionAnalyzer, OpenAICompatibleAnalyzer
from .auth.controller import AuthController
from .biometric.bridge import BiometricBridge, PlatformCredentialAPI
from .diary.service import DiaryService
from .errors import (
    AccountConflictError,
    AccountNotFoundError,
    BiometricRejectedError,
    CalorieAIError,
    CapabilityUnavailable,
    NotAuthenticatedError,
    TransientAnalysisError,
    ValidationError,
)
from .notifications.center import NotificationCenter
from .preferences.service import PreferencesService
from .records import PersistentRecord
from .session.bootstrap import SessionBootstrap
from .session.context import Session
from .store import KeyValueStore
from .timeutil import Clock, utc_now


@dataclass
class AppServices:
    store: KeyValueStore
    records: PersistentRecord
    accounts: AccountStore
    session: Session
    bootstrap: SessionBootstrap
    bridge: BiometricBridge
    notifications: NotificationCenter
    auth: AuthController
    diary: DiaryService
    preferences: PreferencesService


def build_services(
    *,
    store_path: Path | str | None = None,
    platform: Optional[PlatformCredentialAPI] = None,
    analyzer: Optional[NutritionAnalyzer] = None,
    clock: Clock = utc_now,
    app_version: str | None = None,
) -> AppServices:
    store = KeyValueStore(store_path)
    records = PersistentRecord(store)
    accounts = AccountStore(records)
    session = Session(records, accounts)
    session.restore()
    analyzer = analyzer or OpenAICompatibleAnalyzer()
    bootstrap = SessionBootstrap(records, accounts)
    bridge = BiometricBridge(platform)
    notifications = NotificationCenter(session, analyzer, clock=clock, app_version=app_version)
    if session.email:
        notifications.announce_update()
    auth = AuthController(session, accounts, bridge, notifications, bootstrap)
    diary = DiaryService(session, notifications, analyzer, clock=clock)
    preferences = PreferencesService(session, bridge, auth)
    return AppServices(
        store=store,
        records=records,
        accounts=accounts,
        session=session,
        bootstrap=bootstrap,
        bridge=bridge,
        notifications=notifications,
        auth=auth,
        diary=diary,
        preferences=preferences,
    )


def get_services(request: Request) -> AppServices:
    return request.app.state.services


def require_account(services: AppServices = Depends(get_services)) -> AppServices:
    if not services.session.email:
        raise HTTPException(status_code=401, detail="Not signed in")
    return services


def to_http(exc: CalorieAIError) -> HTTPException:
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=422, detail={"message": str(exc), "fields": exc.fields})
    if isinstance(exc, AccountNotFoundError):
        return HTTPException(status_code=404, detail={"message": str(exc), "offer": "sign_up"})
    if isinstance(exc, AccountConflictError):
        return HTTPException(status_code=409, detail=str(exc))
    if isinstance(exc, (BiometricRejectedError, NotAuthenticatedError)):
        return HTTPException(status_code=401, detail=str(exc))
    if isinstance(exc, CapabilityUnavailable):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, TransientAnalysisError):
        return HTTPException(status_code=502, detail=str(exc))
    return HTTPException(status_code=500, detail=str(exc))
