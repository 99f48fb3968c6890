"""Command-line entry point for Reindexer."""

import asyncio
import json
from pathlib import Path
from typing import Any

import click

from reindexer import __version__
from reindexer.clients.indexing import IndexingClient
from reindexer.config import DAILY_QUOTA, NOTIFICATION_TYPES, PER_MINUTE_QUOTA, Settings, get_settings
from reindexer.models import IndexingApiError, SetupError, SubmissionReport, SubmissionResult
from reindexer.services.submitter import BatchSubmitter
from reindexer.services.url_list import load_urls, write_url_file
from reindexer.utils.credentials import load_service_account
from reindexer.utils.logging import get_logger, setup_logging

RULE = "=" * 60

logger = get_logger(__name__)


def _echo_result(index: int, total: int, result: SubmissionResult) -> None:
    if result.succeeded:
        click.echo(f"[{index}/{total}] {result.url} - SUCCESS")
    else:
        click.echo(f"[{index}/{total}] {result.url} - FAILED: {result.error}")


def _echo_summary(report: SubmissionReport) -> None:
    click.echo()
    click.echo(RULE)
    click.echo("SUMMARY")
    click.echo(RULE)
    click.echo(f"Total URLs: {report.total}")
    click.echo(f"Submitted: {report.attempted}")
    click.echo(f"Succeeded: {report.succeeded}")
    click.echo(f"Failed: {report.failed}")
    if report.deferred:
        click.echo(f"Deferred (quota): {len(report.deferred)}")
    click.echo(f"Success rate: {report.success_rate:.1f}%")

    if report.failures:
        click.echo()
        click.echo("Failed URLs:")
        for url, error in report.failures:
            click.echo(f"  - {url}")
            click.echo(f"    Error: {error}")

    click.echo()
    click.echo(f"Indexing API limits: {DAILY_QUOTA} requests per day, {PER_MINUTE_QUOTA} per minute")


def _save_urls(path: Path, urls: list[str], label: str) -> None:
    """Write a URL file, turning I/O errors into a readable CLI error."""
    try:
        written = write_url_file(path, urls)
    except OSError as e:
        logger.error("Could not write URL file", path=str(path), error=str(e))
        listing = "\n".join(urls)
        raise click.ClickException(
            f"Could not write {path}: {e}\n{label} not saved:\n{listing}"
        ) from e
    if written is not None:
        click.echo(f"{label} saved to: {written}")


def _build_settings(**overrides: Any) -> Settings:
    """Apply command-line overrides on top of environment settings."""
    update = {key: value for key, value in overrides.items() if value is not None}
    try:
        # Init values take priority over the environment and are validated the same way
        return Settings(**(get_settings().model_dump() | update))
    except ValueError as e:
        raise click.BadParameter(str(e)) from e


@click.group()
@click.version_option(__version__, prog_name="reindexer")
def main() -> None:
    """Submit URLs to the Google Indexing API."""


@main.command()
@click.option("--input", "input_path", type=click.Path(path_type=Path), help="File of URLs, one per line.")
@click.option("--credentials", "credential_path", type=click.Path(path_type=Path), help="Service account JSON key file.")
@click.option("--failures", "failure_output_path", type=click.Path(path_type=Path), help="Where to write URLs that failed.")
@click.option("--deferred", "deferred_output_path", type=click.Path(path_type=Path), help="Where to write URLs past the request quota.")
@click.option("--pacing-ms", "pacing_interval_ms", type=click.IntRange(min=0), help="Delay between requests in milliseconds.")
@click.option("--max-requests", "max_requests_per_window", type=click.IntRange(min=1), help="Maximum requests in this run.")
@click.option(
    "--type",
    "notification_type",
    type=click.Choice([t.removeprefix("URL_").lower() for t in NOTIFICATION_TYPES]),
    help="Notification type to send.",
)
@click.option("--dry-run", is_flag=True, help="Validate inputs and show what would be sent.")
@click.option("--log-level", help="Logging level for the stderr log stream.")
def submit(dry_run: bool, notification_type: str | None, **options: Any) -> None:
    """Submit every URL in the input file."""
    if notification_type is not None:
        notification_type = f"URL_{notification_type.upper()}"
    settings = _build_settings(notification_type=notification_type, **options)
    setup_logging(settings.log_level)

    try:
        if dry_run:
            _dry_run(settings)
        else:
            asyncio.run(_submit(settings))
    except SetupError as e:
        logger.error("Run aborted", error=str(e))
        raise click.ClickException(str(e)) from e


def _dry_run(settings: Settings) -> None:
    urls = load_urls(settings.input_path)
    account = load_service_account(settings.credential_path)
    limit = settings.max_requests_per_window

    click.echo(f"Service account: {account.client_email}")
    click.echo(f"Would send {settings.notification_type} for {min(len(urls), limit)} URLs:")
    for index, url in enumerate(urls[:limit], 1):
        click.echo(f"[{index}/{min(len(urls), limit)}] {url}")
    if len(urls) > limit:
        click.echo(f"Would defer {len(urls) - limit} URLs past the {limit} request quota.")


async def _submit(settings: Settings) -> None:
    click.echo(RULE)
    click.echo("Google Indexing API - Batch URL Submitter")
    click.echo(RULE)

    urls = load_urls(settings.input_path)
    click.echo(f"Loaded {len(urls)} URLs from {settings.input_path}")
    limit = settings.max_requests_per_window
    if len(urls) > limit:
        click.echo(
            f"Submitting the first {limit} URLs; "
            f"{len(urls) - limit} are deferred past the {limit} request quota."
        )

    account = load_service_account(settings.credential_path)
    async with IndexingClient(account.credentials, settings.notification_type) as client:
        submitter = BatchSubmitter(client, settings, on_result=_echo_result)
        click.echo(f"Authenticating as {account.client_email}...")
        report = await submitter.run(urls)

    _echo_summary(report)
    _save_urls(settings.failure_output_path, report.failed_urls, "Failed URLs")
    _save_urls(settings.deferred_output_path, report.deferred, "Deferred URLs")


@main.command()
@click.argument("urls", nargs=-1, required=True)
@click.option("--credentials", "credential_path", type=click.Path(path_type=Path), help="Service account JSON key file.")
@click.option("--log-level", help="Logging level for the stderr log stream.")
def status(urls: tuple[str, ...], **options: Any) -> None:
    """Show the latest notifications Google recorded for URLS."""
    settings = _build_settings(**options)
    setup_logging(settings.log_level)

    try:
        asyncio.run(_status(settings, list(urls)))
    except SetupError as e:
        raise click.ClickException(str(e)) from e


async def _status(settings: Settings, urls: list[str]) -> None:
    account = load_service_account(settings.credential_path)
    async with IndexingClient(account.credentials) as client:
        await client.authenticate()
        for url in urls:
            try:
                metadata = await client.get_metadata(url)
            except IndexingApiError as e:
                click.echo(f"{url} - {e}")
                continue
            click.echo(f"{url}")
            click.echo(json.dumps(metadata, indent=2))


@main.command()
@click.option("--credentials", "credential_path", type=click.Path(path_type=Path), help="Service account JSON key file.")
@click.option("--log-level", help="Logging level for the stderr log stream.")
def check(**options: Any) -> None:
    """Verify the credential file and that Google accepts it."""
    settings = _build_settings(**options)
    setup_logging(settings.log_level)

    try:
        account = load_service_account(settings.credential_path)
        click.echo(f"Credential file: {settings.credential_path}")
        click.echo(f"Service account: {account.client_email}")
        click.echo(f"Project: {account.project_id or 'unknown'}")
        asyncio.run(_authenticate(account.credentials))
    except SetupError as e:
        raise click.ClickException(str(e)) from e
    click.echo("Authentication successful.")
    click.echo("Make sure the service account is an Owner of the Search Console property.")


async def _authenticate(credentials: Any) -> None:
    async with IndexingClient(credentials) as client:
        await client.authenticate()


if __name__ == "__main__":
    main()
