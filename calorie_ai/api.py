# -*- coding: utf-8 -*-
"""FastAPI application exposing the local identity & sync store."""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .analyzer.client import NutritionAnalyzer
from .auth.api import router as auth_router
from .biometric.bridge import PlatformCredentialAPI
from .config import settings
from .deps import AppServices, build_services, get_services
from .diary.api import router as diary_router
from .notifications.api import router as notifications_router
from .preferences.api import router as preferences_router
from .session.models import AppView, BootstrapState
from .timeutil import Clock, utc_now


def create_app(
    *,
    store_path: Path | str | None = None,
    platform: Optional[PlatformCredentialAPI] = None,
    analyzer: Optional[NutritionAnalyzer] = None,
    clock: Clock = utc_now,
    app_version: str | None = None,
) -> FastAPI:
    services = build_services(
        store_path=store_path,
        platform=platform,
        analyzer=analyzer,
        clock=clock,
        app_version=app_version,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await services.auth.drain()
        services.store.close()

    app = FastAPI(
        title="CalorieAI",
        description="Local multi-account store, session bootstrap, biometric unlock and notifications.",
        lifespan=lifespan,
    )
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/api/bootstrap", response_model=BootstrapState, tags=["Session"])
    async def bootstrap(svc: AppServices = Depends(get_services)):
        state = svc.bootstrap.run()
        if state.view is AppView.dashboard:
            svc.auth.enter_dashboard()
        return state

    @app.get("/health", tags=["meta"])
    async def health() -> dict[str, str]:
        return {"status": "ok", "version": services.notifications.app_version}

    app.include_router(auth_router)
    app.include_router(diary_router)
    app.include_router(notifications_router)
    app.include_router(preferences_router)
    return app
