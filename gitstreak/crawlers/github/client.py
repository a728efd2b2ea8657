"""Resilient async GitHub client for contribution-calendar ingestion."""

from __future__ import annotations

import asyncio
import logging
import re
import time
from datetime import date
from typing import Any, Optional

import httpx
from dateutil import parser as date_parser
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from gitstreak.config.settings import settings
from gitstreak.crawlers.github.contracts import FetchErrorKind, FetchResult, FetchState
from gitstreak.models.contribution import ContributionDay

logger = logging.getLogger(__name__)

_REDACTED_VALUE = "***REDACTED***"
_SENSITIVE_KEYS = (
    "authorization",
    "token",
    "api_key",
    "apikey",
    "secret",
    "password",
    "cookie",
)
_PAYLOAD_KEYS = ("body", "raw", "content", "payload", "response")
_TOKEN_PATTERNS = (
    re.compile(r"(?i)(bearer\s+)[^\s,;]+"),
    re.compile(r"(?i)(token\s*[=:]\s*)[^\s,;]+"),
    re.compile(r"(?i)(access_token=)[^&\s]+"),
    re.compile(r"\b(gh[pousr]_)[A-Za-z0-9]{8,}"),
)

CONTRIBUTION_CALENDAR_QUERY = """
query($login: String!) {
  user(login: $login) {
    contributionsCollection {
      contributionCalendar {
        weeks {
          contributionDays {
            date
            contributionCount
          }
        }
      }
    }
  }
}
""".strip()

_USER_NOT_FOUND_MARKER = "could not resolve to a user"


def sanitize_for_log(value: Any, *, key: Optional[str] = None) -> Any:
    """Return a recursively sanitized copy of log payloads."""

    if isinstance(value, dict):
        sanitized: dict[str, Any] = {}
        for raw_key, raw_value in value.items():
            field = str(raw_key)
            if _contains_keyword(field, _SENSITIVE_KEYS):
                sanitized[field] = _REDACTED_VALUE
                continue
            if _contains_keyword(field, _PAYLOAD_KEYS) and isinstance(raw_value, str):
                sanitized[field] = _redact_payload(raw_value)
                continue
            sanitized[field] = sanitize_for_log(raw_value, key=field)
        return sanitized

    if isinstance(value, (list, tuple, set)):
        return [sanitize_for_log(item, key=key) for item in value]

    if isinstance(value, str):
        redacted = _redact_text(value)
        if key and _contains_keyword(key, _PAYLOAD_KEYS):
            return _redact_payload(redacted)
        return redacted

    return value


def sanitize_log_extra(**kwargs: Any) -> dict[str, Any]:
    """Helper for `extra=` payloads in structured logging."""

    return {key: sanitize_for_log(value, key=key) for key, value in kwargs.items()}


def _contains_keyword(field_name: str, keywords: tuple[str, ...]) -> bool:
    lowered = field_name.lower()
    return any(keyword in lowered for keyword in keywords)


def _redact_payload(raw: str) -> str:
    trimmed = raw.strip()
    if not trimmed:
        return ""
    return f"<redacted payload ({len(raw)} chars)>"


def _redact_text(raw: str) -> str:
    redacted = raw
    for pattern in _TOKEN_PATTERNS:
        redacted = pattern.sub(rf"\1{_REDACTED_VALUE}", redacted)
    return redacted


class _RateLimitRetryableError(Exception):
    """Retryable rate-limit signal for tenacity."""


class GitHubContributionClient:
    """GitHub GraphQL client for a user's daily contribution calendar."""

    BASE_URL = "https://api.github.com"
    GRAPHQL_PATH = "/graphql"
    API_VERSION = "2022-11-28"
    ACCEPT_JSON = "application/vnd.github+json"

    def __init__(
        self,
        *,
        token: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        max_retries: Optional[int] = None,
        backoff_base_seconds: Optional[float] = None,
        backoff_max_seconds: Optional[float] = None,
        rate_limit_buffer_seconds: Optional[int] = None,
        base_url: Optional[str] = None,
        graphql_path: Optional[str] = None,
        transport: Optional[Any] = None,
    ) -> None:
        self._token = token if token is not None else settings.GITHUB_TOKEN
        self._timeout_seconds = _pick(timeout_seconds, settings.GITHUB_TIMEOUT_SECONDS)
        self._max_retries = max(_pick(max_retries, settings.GITHUB_MAX_RETRIES), 1)
        self._backoff_base_seconds = _pick(backoff_base_seconds, settings.GITHUB_BACKOFF_BASE_SECONDS)
        self._backoff_max_seconds = _pick(backoff_max_seconds, settings.GITHUB_BACKOFF_MAX_SECONDS)
        self._rate_limit_buffer_seconds = _pick(rate_limit_buffer_seconds, settings.GITHUB_RATE_LIMIT_BUFFER_SECONDS)
        self._base_url = base_url or settings.GITHUB_API_URL or self.BASE_URL
        self._graphql_path = graphql_path or settings.GITHUB_GRAPHQL_PATH or self.GRAPHQL_PATH
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "GitHubContributionClient":
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def fetch_contribution_days(self, username: Optional[str]) -> FetchResult[list[ContributionDay]]:
        """Fetch the trailing contribution calendar for `username`.

        Failures come back as FAILED results tagged with an error kind;
        nothing is raised for HTTP, transport or GraphQL errors.
        """

        login = (username or "").strip()
        if not login:
            return FetchResult.failed(FetchErrorKind.NO_USERNAME)

        response = await self._post_graphql(CONTRIBUTION_CALENDAR_QUERY, {"login": login})
        if response.state != FetchState.OK:
            return FetchResult(
                state=response.state,
                status_code=response.status_code,
                error=response.error,
                error_kind=response.error_kind,
            )

        payload = response.data if isinstance(response.data, dict) else {}
        errors = payload.get("errors")
        if isinstance(errors, list) and errors:
            message = ""
            if isinstance(errors[0], dict):
                message = str(errors[0].get("message") or "")
            logger.warning(
                "GitHub GraphQL error",
                extra=sanitize_log_extra(username=login, error=message),
            )
            if _USER_NOT_FOUND_MARKER in message.lower():
                return FetchResult.failed(FetchErrorKind.USER_NOT_FOUND, status_code=response.status_code)
            return FetchResult.failed(FetchErrorKind.PARSING, status_code=response.status_code)

        data = payload.get("data")
        if isinstance(data, dict) and "user" in data and data["user"] is None:
            return FetchResult.failed(FetchErrorKind.USER_NOT_FOUND, status_code=response.status_code)

        weeks = _dig(data, "user", "contributionsCollection", "contributionCalendar", "weeks")
        if not isinstance(weeks, list):
            return FetchResult.failed(FetchErrorKind.PARSING, status_code=response.status_code)

        days = self._extract_days(weeks)
        if not days:
            return FetchResult(state=FetchState.EMPTY, data=[], status_code=response.status_code)

        logger.info(
            "Fetched contribution calendar",
            extra=sanitize_log_extra(username=login, days=len(days)),
        )
        return FetchResult(state=FetchState.OK, data=days, status_code=response.status_code)

    async def check_connection(self) -> FetchResult[int]:
        """Probe the API root and report the HTTP status."""

        client = await self._ensure_client()
        try:
            response = await client.get("/")
        except httpx.HTTPError as exc:
            logger.warning("GitHub connection test failed", extra=sanitize_log_extra(error=str(exc)))
            return FetchResult.failed(FetchErrorKind.NETWORK, detail=f"Connection test failed: {exc}")

        return FetchResult(state=FetchState.OK, data=response.status_code, status_code=response.status_code)

    async def _post_graphql(self, query: str, variables: dict[str, Any]) -> FetchResult[Any]:
        client = await self._ensure_client()
        body = {"query": query, "variables": variables}

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self._max_retries),
                wait=wait_exponential(multiplier=self._backoff_base_seconds, max=self._backoff_max_seconds),
                retry=retry_if_exception_type(_RateLimitRetryableError),
                reraise=True,
            ):
                with attempt:
                    response = await client.post(self._graphql_path, json=body)
                    logger.debug(
                        "GitHub API response",
                        extra=sanitize_log_extra(path=self._graphql_path, status_code=response.status_code),
                    )

                    if response.status_code == 200:
                        try:
                            return FetchResult(
                                state=FetchState.OK,
                                data=response.json(),
                                status_code=response.status_code,
                            )
                        except ValueError as exc:
                            logger.warning(
                                "GitHub response was not valid JSON",
                                extra=sanitize_log_extra(error=str(exc), status_code=response.status_code),
                            )
                            return FetchResult.failed(FetchErrorKind.PARSING, status_code=response.status_code)

                    if response.status_code == 401:
                        return FetchResult.failed(FetchErrorKind.AUTHENTICATION, status_code=401)

                    if response.status_code == 429 or (
                        response.status_code == 403 and self._is_rate_limited(response)
                    ):
                        wait_seconds = self._compute_rate_limit_wait(response.headers)
                        logger.warning(
                            "GitHub API rate limit encountered",
                            extra=sanitize_log_extra(
                                path=self._graphql_path,
                                status_code=response.status_code,
                                retry_after_seconds=wait_seconds,
                            ),
                        )
                        if wait_seconds > 0:
                            await asyncio.sleep(wait_seconds)
                        raise _RateLimitRetryableError(
                            f"GitHub rate limit encountered ({response.status_code})"
                        )

                    if response.status_code == 403:
                        return FetchResult.failed(FetchErrorKind.AUTHENTICATION, status_code=403)

                    if response.status_code == 400:
                        logger.warning(
                            "GitHub rejected the request",
                            extra=sanitize_log_extra(status_code=400, body=response.text),
                        )
                        return FetchResult.failed(FetchErrorKind.PARSING, status_code=400)

                    logger.warning(
                        "Unexpected GitHub response",
                        extra=sanitize_log_extra(status_code=response.status_code, body=response.text),
                    )
                    return FetchResult.failed(FetchErrorKind.UNKNOWN, status_code=response.status_code)
        except _RateLimitRetryableError as exc:
            logger.warning(
                "GitHub request failed after rate-limit retries",
                extra=sanitize_log_extra(path=self._graphql_path, error=str(exc), status_code=429),
            )
            return FetchResult.failed(FetchErrorKind.RATE_LIMIT, status_code=429)
        except httpx.HTTPError as exc:
            logger.warning(
                "GitHub request failed",
                extra=sanitize_log_extra(path=self._graphql_path, error=str(exc)),
            )
            return FetchResult.failed(FetchErrorKind.NETWORK)

        return FetchResult.failed(FetchErrorKind.UNKNOWN, detail="Unknown GitHub request failure")

    async def _ensure_client(self) -> httpx.AsyncClient:
        if self._client:
            return self._client

        headers = {
            "Accept": self.ACCEPT_JSON,
            "User-Agent": settings.USER_AGENT,
            "X-GitHub-Api-Version": self.API_VERSION,
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"

        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers=headers,
            timeout=self._timeout_seconds,
            transport=self._transport,
        )
        return self._client

    @staticmethod
    def _is_rate_limited(response: httpx.Response) -> bool:
        if response.headers.get("x-ratelimit-remaining") == "0":
            return True
        try:
            payload = response.json()
        except ValueError:
            return False
        message = payload.get("message") if isinstance(payload, dict) else None
        return isinstance(message, str) and "rate limit" in message.lower()

    def _compute_rate_limit_wait(self, headers: httpx.Headers) -> float:
        retry_after = headers.get("retry-after")
        if retry_after is not None:
            try:
                return max(float(retry_after), 0.0)
            except ValueError:
                pass

        reset_raw = headers.get("x-ratelimit-reset")
        if reset_raw is not None:
            try:
                reset_epoch = int(reset_raw)
                wait_seconds = reset_epoch - int(time.time()) + self._rate_limit_buffer_seconds
                return float(max(wait_seconds, 0))
            except ValueError:
                pass

        return self._backoff_base_seconds

    @staticmethod
    def _extract_days(weeks: list[Any]) -> list[ContributionDay]:
        days: list[ContributionDay] = []
        for week in weeks:
            entries = week.get("contributionDays") if isinstance(week, dict) else None
            if not isinstance(entries, list):
                continue
            for entry in entries:
                if not isinstance(entry, dict):
                    continue
                raw_date = entry.get("date")
                count = entry.get("contributionCount")
                if not isinstance(raw_date, str) or not isinstance(count, int) or isinstance(count, bool):
                    continue
                try:
                    day: date = date_parser.isoparse(raw_date).date()
                except (TypeError, ValueError):
                    continue
                days.append(ContributionDay(date=day, count=max(count, 0)))
        return days


def _pick(value: Any, default: Any) -> Any:
    return default if value is None else value


def _dig(payload: Any, *keys: str) -> Any:
    current = payload
    for key in keys:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current
