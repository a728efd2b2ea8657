"""GitHub data-source collaborators."""

from gitstreak.crawlers.github.client import GitHubContributionClient, sanitize_for_log, sanitize_log_extra
from gitstreak.crawlers.github.contracts import FetchErrorKind, FetchResult, FetchState

__all__ = [
    "GitHubContributionClient",
    "sanitize_for_log",
    "sanitize_log_extra",
    "FetchErrorKind",
    "FetchResult",
    "FetchState",
]
