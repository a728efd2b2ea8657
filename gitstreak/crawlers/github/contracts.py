"""Typed fetch contracts returned by the GitHub contribution client."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class FetchState(str, enum.Enum):
    OK = "ok"
    EMPTY = "empty"
    FAILED = "failed"


class FetchErrorKind(str, enum.Enum):
    """Failure categories surfaced to the user instead of a streak."""

    NO_USERNAME = "no_username"
    NETWORK = "network"
    PARSING = "parsing"
    AUTHENTICATION = "authentication"
    RATE_LIMIT = "rate_limit"
    USER_NOT_FOUND = "user_not_found"
    UNKNOWN = "unknown"

    @property
    def message(self) -> str:
        return _ERROR_MESSAGES[self]


_ERROR_MESSAGES: dict[FetchErrorKind, str] = {
    FetchErrorKind.NO_USERNAME: "No GitHub username set. Please set a username in Settings.",
    FetchErrorKind.NETWORK: "Network connection error. Check your internet connection and try again.",
    FetchErrorKind.PARSING: "Error processing GitHub data. Please check your username and try again.",
    FetchErrorKind.AUTHENTICATION: "Authentication error. Check your GitHub token.",
    FetchErrorKind.RATE_LIMIT: "GitHub API rate limit exceeded. Try again later.",
    FetchErrorKind.USER_NOT_FOUND: "GitHub username not found. Please check the username in Settings.",
    FetchErrorKind.UNKNOWN: "An unknown error occurred.",
}


@dataclass(slots=True)
class FetchResult(Generic[T]):
    state: FetchState
    data: Optional[T] = None
    status_code: Optional[int] = None
    error: Optional[str] = None
    error_kind: Optional[FetchErrorKind] = None

    @property
    def ok(self) -> bool:
        return self.state != FetchState.FAILED

    @classmethod
    def failed(
        cls,
        kind: FetchErrorKind,
        *,
        status_code: Optional[int] = None,
        detail: Optional[str] = None,
    ) -> "FetchResult[T]":
        return cls(
            state=FetchState.FAILED,
            status_code=status_code,
            error=detail or kind.message,
            error_kind=kind,
        )
