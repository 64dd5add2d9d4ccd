# -*- coding: utf-8 -*-
"""Notifications — API endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ..accounts.models import Notification
from ..deps import AppServices, require_account

router = APIRouter(prefix="/api/notifications", tags=["Notifications"])


class NotificationFeed(BaseModel):
    unread: int
    notifications: List[Notification]


@router.get("", response_model=NotificationFeed, summary="Notification feed, newest first")
async def feed(services: AppServices = Depends(require_account)):
    center = services.notifications
    return NotificationFeed(unread=center.unread_count, notifications=center.feed)


@router.post("/{notification_id}/read", response_model=NotificationFeed, summary="Mark a notification read")
async def mark_read(notification_id: str, services: AppServices = Depends(require_account)):
    center = services.notifications
    if not center.mark_read(notification_id):
        raise HTTPException(status_code=404, detail="Notification not found")
    return NotificationFeed(unread=center.unread_count, notifications=center.feed)


@router.delete("", summary="Clear all notifications")
async def clear_all(services: AppServices = Depends(require_account)):
    services.notifications.clear_all()
    return {"status": "ok"}
