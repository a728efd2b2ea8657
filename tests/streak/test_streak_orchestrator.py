from __future__ import annotations

import asyncio
from datetime import date, timedelta
from typing import Any

import pytest

from gitstreak.crawlers.github.contracts import FetchErrorKind, FetchResult, FetchState
from gitstreak.jobs.streak_sync import (
    apply_display_format,
    describe_display_formats,
    normalize_action,
    run_connection_test,
    run_streak_refresh,
)
from gitstreak.models.contribution import ContributionDay, StreakSnapshot
from gitstreak.models.display import BuiltinFormat, BuiltinTemplate, CustomTemplate
from gitstreak.orchestrator import ERROR_TITLE, LOADING_TITLE, StreakOrchestrator

TODAY = date(2026, 2, 14)


class FakeClient:
    def __init__(
        self,
        result: FetchResult[list[ContributionDay]],
        probe: FetchResult[int] | None = None,
    ) -> None:
        self.result = result
        self.probe = probe or FetchResult(state=FetchState.OK, data=200, status_code=200)
        self.requested: list[Any] = []
        self.closed = False

    async def fetch_contribution_days(self, username: Any) -> FetchResult[list[ContributionDay]]:
        self.requested.append(username)
        return self.result

    async def check_connection(self) -> FetchResult[int]:
        return self.probe

    async def aclose(self) -> None:
        self.closed = True


def _calendar(*counts: int) -> list[ContributionDay]:
    """Counts listed newest first, starting at TODAY."""
    return [ContributionDay(TODAY - timedelta(days=offset), count) for offset, count in enumerate(counts)]


def _orchestrator(client: FakeClient, template: Any = None) -> StreakOrchestrator:
    return StreakOrchestrator(
        client_factory=lambda: client,
        today_provider=lambda: TODAY,
        template=template or BuiltinTemplate(BuiltinFormat.EMOJI),
        username="octocat",
    )


@pytest.mark.asyncio
async def test_refresh_computes_snapshot_and_renders_title() -> None:
    client = FakeClient(FetchResult(state=FetchState.OK, data=_calendar(3, 2, 0, 5)))
    orchestrator = _orchestrator(client)

    assert orchestrator.title == LOADING_TITLE

    result = await orchestrator.refresh()

    assert result["success"] is True
    assert result["snapshot"] == {"current_streak": 2, "longest_streak": 2, "total_count": 10}
    assert result["title"] == "🔥 2"
    assert result["menu_text"] == "Current streak: 2 days"
    assert orchestrator.last_snapshot == StreakSnapshot(2, 2, 10)
    assert client.requested == ["octocat"]
    assert client.closed is True


@pytest.mark.asyncio
async def test_refresh_failure_keeps_cached_snapshot() -> None:
    client = FakeClient(FetchResult(state=FetchState.OK, data=_calendar(1, 1, 1)))
    orchestrator = _orchestrator(client)
    await orchestrator.refresh()

    client.result = FetchResult.failed(FetchErrorKind.RATE_LIMIT, status_code=429)
    result = await orchestrator.refresh()

    assert result["success"] is False
    assert result["error_kind"] == "rate_limit"
    assert result["title"] == ERROR_TITLE
    assert result["menu_text"] == f"Error: {FetchErrorKind.RATE_LIMIT.message}"
    assert orchestrator.last_snapshot == StreakSnapshot(3, 3, 3)


@pytest.mark.asyncio
async def test_empty_calendar_yields_zero_snapshot() -> None:
    orchestrator = _orchestrator(FakeClient(FetchResult(state=FetchState.EMPTY, data=[])))

    result = await orchestrator.refresh()

    assert result["success"] is True
    assert orchestrator.last_snapshot == StreakSnapshot(0, 0, 0)
    assert orchestrator.title == "🔥 0"


@pytest.mark.asyncio
async def test_template_change_rerenders_cached_snapshot_without_fetch() -> None:
    client = FakeClient(FetchResult(state=FetchState.OK, data=_calendar(1, 4, 0, 2, 2, 2)))
    orchestrator = _orchestrator(client)
    await orchestrator.refresh()

    title = orchestrator.set_template(CustomTemplate("%d|%l|%t"))

    assert title == "2|3|11"
    assert orchestrator.title == "2|3|11"
    assert client.requested == ["octocat"]


def test_rerender_before_first_refresh_keeps_loading_title() -> None:
    orchestrator = _orchestrator(FakeClient(FetchResult(state=FetchState.EMPTY, data=[])))

    assert orchestrator.set_template(CustomTemplate("%d")) == LOADING_TITLE
    assert orchestrator.status()["snapshot"] is None


def test_refresh_job_passes_explicit_username() -> None:
    client = FakeClient(FetchResult(state=FetchState.OK, data=_calendar(1)))
    orchestrator = _orchestrator(client)

    result = asyncio.run(run_streak_refresh(orchestrator=orchestrator, username="hubot"))

    assert result["username"] == "hubot"
    assert client.requested == ["hubot"]


def test_connection_job_reports_status_and_failure() -> None:
    client = FakeClient(FetchResult(state=FetchState.EMPTY, data=[]))
    orchestrator = _orchestrator(client)

    ok = asyncio.run(run_connection_test(orchestrator=orchestrator))
    client.probe = FetchResult.failed(FetchErrorKind.NETWORK, detail="Connection test failed: refused")
    failed = asyncio.run(run_connection_test(orchestrator=orchestrator))

    assert ok["success"] is True
    assert ok["status_code"] == 200
    assert ok["menu_text"] == "Connection successful! Status: 200"
    assert ok["refresh"]["success"] is True
    assert failed["success"] is False
    assert failed["menu_text"] == "Connection test failed: refused"
    assert orchestrator.title == ERROR_TITLE


@pytest.mark.asyncio
async def test_successful_connection_test_clears_error_title() -> None:
    client = FakeClient(FetchResult(state=FetchState.OK, data=_calendar(1)))
    orchestrator = _orchestrator(client)
    await orchestrator.refresh()

    client.probe = FetchResult.failed(FetchErrorKind.NETWORK)
    await orchestrator.test_connection()
    assert orchestrator.title == ERROR_TITLE

    client.probe = FetchResult(state=FetchState.OK, data=200, status_code=200)
    result = await orchestrator.test_connection()

    assert result["success"] is True
    assert orchestrator.title == "🔥 1"
    assert orchestrator.menu_text == "Current streak: 1 days"
    assert client.requested == ["octocat", "octocat"]


def test_apply_display_format_goes_through_write_boundary() -> None:
    orchestrator = _orchestrator(FakeClient(FetchResult(state=FetchState.OK, data=_calendar(1, 1))))
    asyncio.run(orchestrator.refresh())

    result = apply_display_format(orchestrator, display_format="custom", custom_format="days:")

    assert result["display_format"] == "custom"
    assert result["custom_format"] == "days:%d"
    assert result["title"] == "days:2"
    assert result["preview"] == "days:3"


def test_describe_display_formats_lists_every_format() -> None:
    formats = describe_display_formats()

    assert [item["value"] for item in formats] == [builtin.value for builtin in BuiltinFormat]
    assert formats[0]["preview"] == "🔥 3"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, "refresh"),
        ("", "refresh"),
        ("Test-Connection", "test_connection"),
        (" render ", "render"),
        ("crawl", None),
    ],
)
def test_normalize_action(raw: Any, expected: str | None) -> None:
    assert normalize_action(raw) == expected
