from __future__ import annotations

import pytest

from gitstreak.models.contribution import StreakSnapshot
from gitstreak.models.display import (
    CUSTOM_TEMPLATE_MAX_LENGTH,
    BuiltinFormat,
    BuiltinTemplate,
    CustomTemplate,
)
from gitstreak.services.streak.formatter import preview_template, render_snapshot
from gitstreak.services.streak.templates import accept_custom_template, has_placeholder, resolve_template


def test_custom_template_substitutes_all_placeholders() -> None:
    snapshot = StreakSnapshot(current_streak=3, longest_streak=10, total_count=500)

    assert render_snapshot(snapshot, CustomTemplate("%d|%l|%t")) == "3|10|500"


def test_custom_template_keeps_literal_text_around_current_streak() -> None:
    snapshot = StreakSnapshot(current_streak=7, longest_streak=9, total_count=12)

    assert render_snapshot(snapshot, CustomTemplate("on %d!")) == "on 7!"


def test_custom_template_substitution_is_single_pass() -> None:
    snapshot = StreakSnapshot(current_streak=1, longest_streak=2, total_count=3)

    assert render_snapshot(snapshot, CustomTemplate("%d%l%t %d")) == "123 1"
    assert render_snapshot(snapshot, CustomTemplate("%%t")) == "%3"


def test_custom_template_without_placeholders_is_echoed() -> None:
    snapshot = StreakSnapshot(current_streak=4, longest_streak=4, total_count=4)

    assert render_snapshot(snapshot, CustomTemplate("streak")) == "streak"


def test_rendered_output_is_not_truncated() -> None:
    snapshot = StreakSnapshot(current_streak=1234, longest_streak=56789, total_count=1234567)
    template = CustomTemplate("%d/%l/%t days")

    rendered = render_snapshot(snapshot, template)

    assert rendered == "1234/56789/1234567 days"
    assert len(rendered) > CUSTOM_TEMPLATE_MAX_LENGTH


@pytest.mark.parametrize(
    ("builtin", "expected"),
    [
        (BuiltinFormat.EMOJI, "🔥 12"),
        (BuiltinFormat.FIRE_DAYS, "🔥 12 days"),
        (BuiltinFormat.NUMBER, "12"),
        (BuiltinFormat.TEXT, "Streak: 12"),
    ],
)
def test_builtin_templates_render_current_streak(builtin: BuiltinFormat, expected: str) -> None:
    snapshot = StreakSnapshot(current_streak=12, longest_streak=40, total_count=900)

    assert render_snapshot(snapshot, BuiltinTemplate(builtin)) == expected


def test_render_rejects_unknown_template_type() -> None:
    with pytest.raises(TypeError):
        render_snapshot(StreakSnapshot(), "%d")  # type: ignore[arg-type]


def test_preview_uses_sample_snapshot() -> None:
    assert preview_template(CustomTemplate("%d/%l/%t")) == "3/42/1250"
    assert preview_template(BuiltinTemplate(BuiltinFormat.EMOJI)) == "🔥 3"


def test_accept_custom_template_caps_length() -> None:
    accepted = accept_custom_template("%d days and counting forever")

    assert accepted == "%d days and cou"
    assert len(accepted) == CUSTOM_TEMPLATE_MAX_LENGTH


def test_accept_custom_template_appends_placeholder() -> None:
    assert accept_custom_template("streak ") == "streak %d"
    assert accept_custom_template("a very long label") == "a very long l%d"
    assert accept_custom_template("") == "%d"
    assert accept_custom_template(None) == "%d"


def test_accept_custom_template_counts_emoji_sequences_as_one_character() -> None:
    example = "🔥%d | ⭐%l | 👨‍💻%t"

    accepted = accept_custom_template(example)

    assert accepted == example
    assert render_snapshot(StreakSnapshot(3, 42, 1250), CustomTemplate(accepted)) == "🔥3 | ⭐42 | 👨‍💻1250"


def test_accept_custom_template_never_splits_emoji_when_capping() -> None:
    assert accept_custom_template("👨‍💻" * 20) == "👨‍💻" * 13 + "%d"
    assert accept_custom_template("🔥" * 14 + "%d") == "🔥" * 13 + "%d"


def test_accept_custom_template_keeps_any_recognized_placeholder() -> None:
    assert accept_custom_template("best %l") == "best %l"
    assert has_placeholder("total %t")
    assert not has_placeholder("%x")


def test_resolve_template_dispatches_on_stored_tag() -> None:
    assert resolve_template("number") == BuiltinTemplate(BuiltinFormat.NUMBER)
    assert resolve_template("CUSTOM", "x") == CustomTemplate("x%d")
    assert resolve_template("no-such-format") == BuiltinTemplate(BuiltinFormat.EMOJI)
    assert resolve_template(None) == BuiltinTemplate(BuiltinFormat.EMOJI)
