"""Render streak snapshots into short status-bar titles."""

from __future__ import annotations

import re

from gitstreak.models.contribution import StreakSnapshot
from gitstreak.models.display import (
    PLACEHOLDER_CURRENT,
    PLACEHOLDER_LONGEST,
    PLACEHOLDER_TOTAL,
    BuiltinTemplate,
    CustomTemplate,
    DisplayTemplate,
)

_PLACEHOLDER_PATTERN = re.compile(
    "|".join(re.escape(token) for token in (PLACEHOLDER_CURRENT, PLACEHOLDER_LONGEST, PLACEHOLDER_TOTAL))
)

# Sample values shown by the display settings preview.
PREVIEW_SNAPSHOT = StreakSnapshot(current_streak=3, longest_streak=42, total_count=1250)


def render_snapshot(snapshot: StreakSnapshot, template: DisplayTemplate) -> str:
    """Substitute snapshot values into a built-in or custom template.

    Output length is not bounded here; custom templates are length-checked
    when they are accepted for storage.
    """

    match template:
        case BuiltinTemplate(format=builtin):
            return builtin.pattern.replace(PLACEHOLDER_CURRENT, str(snapshot.current_streak))
        case CustomTemplate(text=text):
            return _render_custom(snapshot, text)
    raise TypeError(f"Unsupported display template: {template!r}")


def preview_template(template: DisplayTemplate) -> str:
    return render_snapshot(PREVIEW_SNAPSHOT, template)


def _render_custom(snapshot: StreakSnapshot, text: str) -> str:
    values = {
        PLACEHOLDER_CURRENT: str(snapshot.current_streak),
        PLACEHOLDER_LONGEST: str(snapshot.longest_streak),
        PLACEHOLDER_TOTAL: str(snapshot.total_count),
    }
    # Single pass so substituted digits are never rescanned.
    return _PLACEHOLDER_PATTERN.sub(lambda match: values[match.group(0)], text)
