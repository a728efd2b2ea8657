"""Write-boundary checks for stored display templates."""

from __future__ import annotations

import logging

import regex

from gitstreak.models.display import (
    CUSTOM_TEMPLATE_MAX_LENGTH,
    PLACEHOLDER_CURRENT,
    PLACEHOLDERS,
    BuiltinFormat,
    BuiltinTemplate,
    CustomTemplate,
    DisplayTemplate,
)

logger = logging.getLogger(__name__)

# Extended grapheme clusters, so emoji sequences count as one character.
_GRAPHEME_PATTERN = regex.compile(r"\X")


def _visible_characters(text: str) -> list[str]:
    return _GRAPHEME_PATTERN.findall(text)


def has_placeholder(text: str) -> bool:
    return any(token in text for token in PLACEHOLDERS)


def accept_custom_template(raw: str | None) -> str:
    """Normalize user template text before it is stored.

    Text is capped at the custom template length; text without any
    recognized placeholder gets the current-streak placeholder appended.
    """

    characters = _visible_characters(raw or "")
    text = "".join(characters[:CUSTOM_TEMPLATE_MAX_LENGTH])
    if not text:
        return PLACEHOLDER_CURRENT
    if has_placeholder(text):
        return text

    room = CUSTOM_TEMPLATE_MAX_LENGTH - len(PLACEHOLDER_CURRENT)
    accepted = "".join(characters[:room]) + PLACEHOLDER_CURRENT
    logger.info("Custom template had no placeholder; appended current streak", extra={"template": accepted})
    return accepted


def resolve_template(display_format: str | BuiltinFormat | None, custom_format: str | None = None) -> DisplayTemplate:
    """Build a display template from stored format tag and custom text."""

    builtin = display_format if isinstance(display_format, BuiltinFormat) else BuiltinFormat.from_value(display_format)
    if builtin is BuiltinFormat.CUSTOM:
        return CustomTemplate(text=accept_custom_template(custom_format))
    return BuiltinTemplate(format=builtin)


def template_from_settings(config) -> DisplayTemplate:
    return resolve_template(
        getattr(config, "STREAK_DISPLAY_FORMAT", BuiltinFormat.EMOJI.value),
        getattr(config, "STREAK_CUSTOM_FORMAT", ""),
    )
