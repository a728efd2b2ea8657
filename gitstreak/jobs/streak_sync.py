"""Streak refresh and display entrypoints used by the scheduler and API."""

from __future__ import annotations

from typing import Any, Sequence

from gitstreak.models.display import BuiltinFormat
from gitstreak.orchestrator import StreakOrchestrator
from gitstreak.services.streak.formatter import preview_template
from gitstreak.services.streak.templates import resolve_template

ACTION_REFRESH = "refresh"
ACTION_TEST_CONNECTION = "test_connection"
ACTION_RENDER = "render"

ALL_ACTIONS = (ACTION_REFRESH, ACTION_TEST_CONNECTION, ACTION_RENDER)


def normalize_action(raw: Any, *, default: str = ACTION_REFRESH, allowed: Sequence[str] = ALL_ACTIONS) -> str | None:
    """Normalize an action selector; returns None for unknown actions."""
    if raw is None:
        return default

    text = str(raw).strip().lower().replace("-", "_")
    if not text:
        return default
    return text if text in allowed else None


async def run_streak_refresh(
    *,
    orchestrator: StreakOrchestrator | None = None,
    username: str | None = None,
) -> dict[str, Any]:
    """Run one fetch/compute/render cycle."""
    job_orchestrator = orchestrator or StreakOrchestrator()
    return await job_orchestrator.refresh(username=username)


async def run_connection_test(*, orchestrator: StreakOrchestrator | None = None) -> dict[str, Any]:
    job_orchestrator = orchestrator or StreakOrchestrator()
    return await job_orchestrator.test_connection()


def apply_display_format(
    orchestrator: StreakOrchestrator,
    *,
    display_format: str | None,
    custom_format: str | None = None,
) -> dict[str, Any]:
    """Switch the active template and re-render the cached snapshot."""
    template = resolve_template(display_format, custom_format)
    title = orchestrator.set_template(template)
    return {
        "display_format": template.tag,
        "custom_format": getattr(template, "text", None),
        "title": title,
        "preview": preview_template(template),
    }


def describe_display_formats() -> list[dict[str, str]]:
    formats = []
    for builtin in BuiltinFormat:
        formats.append(
            {
                "value": builtin.value,
                "description": builtin.description,
                "preview": preview_template(resolve_template(builtin)),
            }
        )
    return formats
