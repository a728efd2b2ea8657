"""Streak refresh orchestrator: fetch calendar, compute snapshot, render title."""

from __future__ import annotations

from datetime import UTC, date, datetime
import logging
from typing import Any, Callable, Optional

from gitstreak.config.settings import settings
from gitstreak.crawlers.github.client import GitHubContributionClient, sanitize_log_extra
from gitstreak.models.contribution import StreakSnapshot
from gitstreak.models.display import DisplayTemplate
from gitstreak.services.streak.calculator import compute_streak
from gitstreak.services.streak.formatter import render_snapshot
from gitstreak.services.streak.templates import template_from_settings

logger = logging.getLogger(__name__)

LOADING_TITLE = "🔄"
ERROR_TITLE = "⚠️"
LOADING_MENU_TEXT = "Fetching streak data..."


def streak_menu_text(snapshot: StreakSnapshot) -> str:
    return f"Current streak: {snapshot.current_streak} days"


class StreakOrchestrator:
    """Coordinates one refresh cycle and keeps the latest snapshot for redisplay."""

    def __init__(
        self,
        *,
        client_factory: Callable[[], Any] = GitHubContributionClient,
        today_provider: Callable[[], date] = date.today,
        template: Optional[DisplayTemplate] = None,
        username: Optional[str] = None,
    ) -> None:
        self._client_factory = client_factory
        self._today_provider = today_provider
        self._template = template or template_from_settings(settings)
        self._username = username
        self._snapshot: Optional[StreakSnapshot] = None
        self._title = LOADING_TITLE
        self._menu_text = LOADING_MENU_TEXT
        self._last_refreshed_at: Optional[str] = None

    @property
    def last_snapshot(self) -> Optional[StreakSnapshot]:
        return self._snapshot

    @property
    def template(self) -> DisplayTemplate:
        return self._template

    @property
    def title(self) -> str:
        return self._title

    @property
    def menu_text(self) -> str:
        return self._menu_text

    def status(self) -> dict[str, Any]:
        return {
            "title": self._title,
            "menu_text": self._menu_text,
            "template": self._template.tag,
            "snapshot": self._snapshot.as_dict() if self._snapshot else None,
            "last_refreshed_at": self._last_refreshed_at,
        }

    async def refresh(self, *, username: Optional[str] = None) -> dict[str, Any]:
        """Fetch the calendar and recompute the snapshot.

        The calculator only runs on a successful fetch. On failure the cached
        snapshot is kept and the title switches to the error marker.
        """

        login = username or self._username or settings.GITHUB_USERNAME
        logger.info("Fetching streak data", extra=sanitize_log_extra(username=login))

        client = self._client_factory()
        try:
            response = await client.fetch_contribution_days(login)
        finally:
            close = getattr(client, "aclose", None)
            if close is not None:
                await close()

        if not response.ok:
            message = response.error or "An unknown error occurred."
            logger.warning(
                "Error fetching streak",
                extra=sanitize_log_extra(
                    username=login,
                    error=message,
                    error_kind=response.error_kind.value if response.error_kind else None,
                ),
            )
            self._title = ERROR_TITLE
            self._menu_text = f"Error: {message}"
            return {
                "success": False,
                "username": login,
                "title": self._title,
                "menu_text": self._menu_text,
                "snapshot": self._snapshot.as_dict() if self._snapshot else None,
                "error": message,
                "error_kind": response.error_kind.value if response.error_kind else None,
            }

        snapshot = compute_streak(response.data or [], today=self._today_provider())
        self._snapshot = snapshot
        self._last_refreshed_at = datetime.now(UTC).isoformat()
        self._menu_text = streak_menu_text(snapshot)
        self._title = render_snapshot(snapshot, self._template)
        logger.info(
            "Streak fetched successfully",
            extra=sanitize_log_extra(username=login, **snapshot.as_dict()),
        )

        return {
            "success": True,
            "username": login,
            "title": self._title,
            "menu_text": self._menu_text,
            "snapshot": snapshot.as_dict(),
            "error": None,
            "error_kind": None,
        }

    def set_template(self, template: DisplayTemplate) -> str:
        self._template = template
        return self.rerender()

    def rerender(self) -> str:
        """Re-render the cached snapshot under the active template without refetching."""

        if self._snapshot is None:
            return self._title
        self._title = render_snapshot(self._snapshot, self._template)
        return self._title

    async def test_connection(self) -> dict[str, Any]:
        logger.info("Testing network connection")
        client = self._client_factory()
        try:
            response = await client.check_connection()
        finally:
            close = getattr(client, "aclose", None)
            if close is not None:
                await close()

        if not response.ok:
            self._title = ERROR_TITLE
            self._menu_text = response.error or "Connection test failed"
            return {"success": False, "status_code": response.status_code, "menu_text": self._menu_text}

        connection_text = f"Connection successful! Status: {response.status_code}"
        logger.info(connection_text)
        # A reachable API clears any error title by fetching fresh data.
        refreshed = await self.refresh()
        return {
            "success": True,
            "status_code": response.status_code,
            "menu_text": connection_text,
            "refresh": refreshed,
        }
