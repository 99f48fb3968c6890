"""Shared data models and errors for Reindexer."""

from dataclasses import dataclass, field
from typing import Any


class ReindexerError(Exception):
    """Base class for Reindexer errors."""


class SetupError(ReindexerError):
    """Raised when a run cannot start. Nothing has been submitted."""


class IndexingApiError(ReindexerError):
    """Raised when an Indexing API lookup returns an error response."""

    def __init__(self, code: int | None, status: str, message: str) -> None:
        self.code = code
        self.status = status
        self.message = message
        super().__init__(f"{status}: {message}")


@dataclass
class NotificationAck:
    """Server acknowledgment of a URL notification."""

    url: str
    notify_time: str | None = None
    raw: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api_response(cls, url: str, data: dict[str, Any]) -> "NotificationAck":
        """Create a NotificationAck from a publish response body."""
        metadata = data.get("urlNotificationMetadata", {})
        latest = metadata.get("latestUpdate") or metadata.get("latestRemove") or {}
        return cls(
            url=metadata.get("url", url),
            notify_time=latest.get("notifyTime"),
            raw=data,
        )


@dataclass
class NotificationError:
    """A failed URL notification."""

    status: str
    message: str
    code: int | None = None

    def __str__(self) -> str:
        if self.message and self.message != self.status:
            return f"{self.status}: {self.message}"
        return self.status


@dataclass
class SubmissionResult:
    """Outcome of submitting one URL."""

    index: int
    url: str
    outcome: NotificationAck | NotificationError

    @property
    def succeeded(self) -> bool:
        return isinstance(self.outcome, NotificationAck)

    @property
    def error(self) -> NotificationError | None:
        return self.outcome if isinstance(self.outcome, NotificationError) else None


@dataclass
class SubmissionReport:
    """Aggregated outcome of one submission run."""

    total: int
    results: list[SubmissionResult] = field(default_factory=list)
    deferred: list[str] = field(default_factory=list)

    @property
    def attempted(self) -> int:
        return len(self.results)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.succeeded)

    @property
    def failed(self) -> int:
        return self.attempted - self.succeeded

    @property
    def failures(self) -> list[tuple[str, str]]:
        """Failed URLs with their error messages, in input order."""
        return [(r.url, str(r.error)) for r in self.results if r.error is not None]

    @property
    def success_rate(self) -> float:
        """Percentage of attempted URLs that succeeded."""
        if not self.attempted:
            return 0.0
        return self.succeeded / self.attempted * 100

    @property
    def failed_urls(self) -> list[str]:
        """Failed URLs only, in input order. Deferred URLs are kept apart."""
        return [r.url for r in self.results if not r.succeeded]
