"""Batch URL submission workflow for Reindexer."""

import asyncio
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Protocol

from reindexer.config import Settings
from reindexer.models import (
    NotificationAck,
    NotificationError,
    SubmissionReport,
    SubmissionResult,
)
from reindexer.services.url_list import EmptyUrlListError
from reindexer.utils.logging import get_logger

logger = get_logger(__name__)

ProgressCallback = Callable[[int, int, SubmissionResult], None]


class Notifier(Protocol):
    """Anything that can announce URL changes to an indexing service."""

    async def authenticate(self) -> None: ...

    async def notify(self, url: str) -> NotificationAck | NotificationError: ...


class RunState(str, Enum):
    """Lifecycle of a single submission run."""

    NOT_STARTED = "not_started"
    AUTHENTICATING = "authenticating"
    SUBMITTING = "submitting"
    DONE = "done"


class BatchSubmitter:
    """Submits URLs one at a time with fixed pacing between requests."""

    def __init__(
        self,
        notifier: Notifier,
        settings: Settings,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
        on_result: ProgressCallback | None = None,
    ) -> None:
        self._notifier = notifier
        self._settings = settings
        self._sleep = sleep
        self._on_result = on_result
        self.state = RunState.NOT_STARTED

    async def run(self, urls: list[str]) -> SubmissionReport:
        """Submit every URL and return the aggregated report.

        Args:
            urls: URLs in submission order.

        Returns:
            SubmissionReport for this run only.

        Raises:
            EmptyUrlListError: If urls is empty. No request is made.
            CredentialError: If authentication fails. No URL is submitted.
        """
        self.state = RunState.NOT_STARTED
        if not urls:
            raise EmptyUrlListError("No URLs to submit.")

        limit = self._settings.max_requests_per_window
        batch, deferred = urls[:limit], urls[limit:]
        report = SubmissionReport(total=len(urls), deferred=deferred)

        logger.info(
            "Starting submission",
            total=len(urls),
            to_submit=len(batch),
            deferred=len(deferred),
            pacing_ms=self._settings.pacing_interval_ms,
        )
        if deferred:
            logger.warning(
                "URL list exceeds request quota, deferring remainder",
                quota=limit,
                deferred=len(deferred),
            )

        self.state = RunState.AUTHENTICATING
        await self._notifier.authenticate()

        self.state = RunState.SUBMITTING
        for index, url in enumerate(batch, 1):
            result = SubmissionResult(index=index, url=url, outcome=await self._submit_one(url))
            report.results.append(result)
            if self._on_result is not None:
                self._on_result(index, len(batch), result)

            if index < len(batch):
                await self._sleep(self._settings.pacing_interval)

        self.state = RunState.DONE
        logger.info(
            "Submission complete",
            attempted=report.attempted,
            succeeded=report.succeeded,
            failed=report.failed,
            deferred=len(report.deferred),
        )
        return report

    async def _submit_one(self, url: str) -> NotificationAck | NotificationError:
        """Submit a single URL; never raises."""
        try:
            outcome = await self._notifier.notify(url)
        except Exception as e:
            logger.error("Unexpected error submitting URL", url=url, error=str(e))
            return NotificationError(status="UNEXPECTED_ERROR", message=str(e) or type(e).__name__)

        if isinstance(outcome, NotificationAck):
            logger.info("URL submitted", url=url, notify_time=outcome.notify_time)
        else:
            logger.warning("URL submission failed", url=url, error=str(outcome))
        return outcome
