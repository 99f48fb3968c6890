"""URL list input and failure file output."""

from pathlib import Path

from reindexer.models import SetupError
from reindexer.utils.logging import get_logger

logger = get_logger(__name__)


class UrlListError(SetupError):
    """Raised when the URL list cannot be read."""


class EmptyUrlListError(UrlListError):
    """Raised when there are no URLs to submit."""


def load_urls(path: Path) -> list[str]:
    """Load URLs from a line-delimited text file.

    Lines are stripped and blank lines skipped. Order and duplicates are kept.

    Raises:
        UrlListError: If the file cannot be read.
        EmptyUrlListError: If the file holds no URLs.
    """
    try:
        with path.open(encoding="utf-8") as f:
            urls = [line.strip() for line in f if line.strip()]
    except FileNotFoundError as e:
        raise UrlListError(f"URL list {path} not found.") from e
    except (OSError, UnicodeDecodeError) as e:
        raise UrlListError(f"Cannot read URL list {path}: {e}") from e

    if not urls:
        raise EmptyUrlListError(f"No URLs found in {path}.")

    logger.info("Loaded URLs", path=str(path), count=len(urls))
    return urls


def write_url_file(path: Path, urls: list[str]) -> Path | None:
    """Persist a URL list for a later run, overwriting any earlier file.

    Used for both the failure file and the deferred file. When the list is
    empty, a file left by an earlier run is removed.

    Returns:
        The path written, or None when no file was written.

    Raises:
        OSError: If the file cannot be written or removed.
    """
    if not urls:
        if path.exists():
            path.unlink()
            logger.info("Removed stale URL file", path=str(path))
        return None

    path.write_text("".join(f"{url}\n" for url in urls), encoding="utf-8")
    logger.info("URL file written", path=str(path), count=len(urls))
    return path
