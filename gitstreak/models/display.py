"""Display template variants for rendering streak snapshots."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Union

PLACEHOLDER_CURRENT = "%d"
PLACEHOLDER_LONGEST = "%l"
PLACEHOLDER_TOTAL = "%t"
PLACEHOLDERS = (PLACEHOLDER_CURRENT, PLACEHOLDER_LONGEST, PLACEHOLDER_TOTAL)

CUSTOM_TEMPLATE_MAX_LENGTH = 15


class BuiltinFormat(str, enum.Enum):
    """Stored display format tags; `custom` selects the user template."""

    EMOJI = "emoji"
    FIRE_DAYS = "fire_days"
    NUMBER = "number"
    TEXT = "text"
    CUSTOM = "custom"

    @classmethod
    def from_value(cls, raw: str | None) -> "BuiltinFormat":
        """Resolve a stored tag, falling back to the emoji format."""
        try:
            return cls((raw or "").strip().lower())
        except ValueError:
            return cls.EMOJI

    @property
    def pattern(self) -> str:
        return _PATTERNS.get(self, _PATTERNS[BuiltinFormat.EMOJI])

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_PATTERNS: dict[BuiltinFormat, str] = {
    BuiltinFormat.EMOJI: "🔥 %d",
    BuiltinFormat.FIRE_DAYS: "🔥 %d days",
    BuiltinFormat.NUMBER: "%d",
    BuiltinFormat.TEXT: "Streak: %d",
}

_DESCRIPTIONS: dict[BuiltinFormat, str] = {
    BuiltinFormat.EMOJI: "Emoji (🔥 3)",
    BuiltinFormat.FIRE_DAYS: "Emoji with days (🔥 3 days)",
    BuiltinFormat.NUMBER: "Number only (3)",
    BuiltinFormat.TEXT: "Text (Streak: 3)",
    BuiltinFormat.CUSTOM: "Custom",
}


@dataclass(frozen=True, slots=True)
class BuiltinTemplate:
    """One of the fixed formats; its only placeholder is the current streak."""

    format: BuiltinFormat = BuiltinFormat.EMOJI

    @property
    def tag(self) -> str:
        return self.format.value


@dataclass(frozen=True, slots=True)
class CustomTemplate:
    """User-authored template using `%d`, `%l` and `%t` placeholders."""

    text: str

    @property
    def tag(self) -> str:
        return BuiltinFormat.CUSTOM.value


DisplayTemplate = Union[BuiltinTemplate, CustomTemplate]
