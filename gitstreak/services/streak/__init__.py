"""Streak computation and display helpers."""

from gitstreak.services.streak.calculator import compute_streak
from gitstreak.services.streak.formatter import PREVIEW_SNAPSHOT, preview_template, render_snapshot
from gitstreak.services.streak.templates import (
    accept_custom_template,
    has_placeholder,
    resolve_template,
    template_from_settings,
)

__all__ = [
    "compute_streak",
    "PREVIEW_SNAPSHOT",
    "preview_template",
    "render_snapshot",
    "accept_custom_template",
    "has_placeholder",
    "resolve_template",
    "template_from_settings",
]
