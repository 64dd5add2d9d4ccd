# -*- coding: utf-8 -*-
"""Notifications — feed generation, deduplication and read state.

Rules:
- update notifications are keyed by an id derived from the app version and
  are added at most once per account;
- at most one insight notification per local calendar day per account;
- system notifications get a fresh id per event and are never deduplicated.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Optional

from ..accounts.models import Notification, NotificationType
from ..config import settings
from ..session.context import Session
from ..timeutil import Clock, local_day, new_id, utc_now

if TYPE_CHECKING:
    from ..analyzer.client import NutritionAnalyzer

logger = logging.getLogger(__name__)

UPDATE_MESSAGE = "We added a new Notifications Center! Check back here for AI insights and daily tips."


def update_notification_id(version: str) -> str:
    return f"update-v{version}"


class NotificationCenter:
    def __init__(
        self,
        session: Session,
        analyzer: Optional["NutritionAnalyzer"] = None,
        *,
        clock: Clock = utc_now,
        app_version: str | None = None,
    ) -> None:
        self.session = session
        self.analyzer = analyzer
        self.clock = clock
        self.app_version = app_version or settings.app_version

    @property
    def feed(self) -> List[Notification]:
        return self.session.notifications

    @property
    def unread_count(self) -> int:
        return sum(1 for n in self.feed if not n.is_read)

    def add(self, notification: Notification) -> bool:
        """Prepend ``notification``. Update notifications with a known id are skipped."""
        if notification.type is NotificationType.update and any(n.id == notification.id for n in self.feed):
            return False
        self.session.set_notifications([notification, *self.feed])
        return True

    def mark_read(self, notification_id: str) -> bool:
        target = next((n for n in self.feed if n.id == notification_id), None)
        if target is None:
            return False
        if not target.is_read:
            target.is_read = True
            self.session.sync()
        return True

    def clear_all(self) -> None:
        self.session.set_notifications([])

    def record_event(self, title: str, message: str, *, prefix: str = "event") -> Notification:
        notification = Notification(
            id=new_id(prefix),
            title=title,
            message=message,
            type=NotificationType.system,
            timestamp=self.clock(),
        )
        self.add(notification)
        return notification

    def announce_update(self, version: str | None = None) -> bool:
        version = version or self.app_version
        return self.add(
            Notification(
                id=update_notification_id(version),
                title=f"App Updated to v{version}",
                message=UPDATE_MESSAGE,
                type=NotificationType.update,
                timestamp=self.clock(),
            )
        )

    def has_insight_today(self) -> bool:
        today = local_day(self.clock())
        return any(
            n.type is NotificationType.insight and local_day(n.timestamp) == today for n in self.feed
        )

    async def ensure_daily_insight(self) -> Optional[Notification]:
        """Generate today's insight unless one exists. Never raises."""
        if self.analyzer is None or self.has_insight_today():
            return None
        email = self.session.email
        if not email:
            return None
        profile = self.session.profile.model_copy()
        try:
            insight = await self.analyzer.generate_daily_insight(profile)
        except Exception as exc:
            logger.warning("Daily insight generation failed for %s: %s", email, exc)
            return None
        # The account or the feed may have changed while awaiting.
        if self.session.email != email or self.has_insight_today():
            return None
        notification = Notification(
            id=new_id("insight"),
            title=insight.title,
            message=insight.message,
            type=NotificationType.insight,
            timestamp=self.clock(),
        )
        self.add(notification)
        return notification
