"""Unit tests for URL list loading and the failure file."""

from pathlib import Path

import pytest

from reindexer.services.url_list import (
    EmptyUrlListError,
    UrlListError,
    load_urls,
    write_url_file,
)


class TestLoadUrls:
    """Tests for load_urls."""

    def test_strips_and_skips_blank_lines(self, tmp_path: Path) -> None:
        """Should trim whitespace and ignore blank lines."""
        path = tmp_path / "urls.txt"
        path.write_text(
            "  https://example.com/a  \n\n\thttps://example.com/b\n   \nhttps://example.com/c",
            encoding="utf-8",
        )

        assert load_urls(path) == [
            "https://example.com/a",
            "https://example.com/b",
            "https://example.com/c",
        ]

    def test_keeps_duplicates_and_order(self, tmp_path: Path) -> None:
        """Should not deduplicate or reorder."""
        path = tmp_path / "urls.txt"
        path.write_text("https://b.com\nhttps://a.com\nhttps://b.com\n", encoding="utf-8")

        assert load_urls(path) == ["https://b.com", "https://a.com", "https://b.com"]

    def test_missing_file(self, tmp_path: Path) -> None:
        """Should raise UrlListError when the file does not exist."""
        with pytest.raises(UrlListError, match="not found"):
            load_urls(tmp_path / "missing.txt")

    def test_empty_file(self, tmp_path: Path) -> None:
        """Should raise EmptyUrlListError for a file with only blank lines."""
        path = tmp_path / "urls.txt"
        path.write_text("\n  \n\n", encoding="utf-8")

        with pytest.raises(EmptyUrlListError, match="No URLs"):
            load_urls(path)


class TestWriteUrlFile:
    """Tests for write_url_file."""

    def test_writes_one_url_per_line(self, tmp_path: Path) -> None:
        """Should write each URL on its own line."""
        path = tmp_path / "failed.txt"

        written = write_url_file(path, ["https://example.com/b", "https://example.com/d"])

        assert written == path
        assert path.read_text(encoding="utf-8") == "https://example.com/b\nhttps://example.com/d\n"

    def test_overwrites_previous_run(self, tmp_path: Path) -> None:
        """Should replace the contents of an earlier failure file."""
        path = tmp_path / "failed.txt"
        path.write_text("https://old.example.com\n", encoding="utf-8")

        write_url_file(path, ["https://example.com/new"])

        assert path.read_text(encoding="utf-8") == "https://example.com/new\n"

    def test_no_failures_removes_stale_file(self, tmp_path: Path) -> None:
        """A clean run should not leave an earlier run's failures behind."""
        path = tmp_path / "failed.txt"
        path.write_text("https://old.example.com\n", encoding="utf-8")

        assert write_url_file(path, []) is None
        assert not path.exists()

    def test_no_failures_no_file(self, tmp_path: Path) -> None:
        """Should not create a file when there is nothing to retry."""
        path = tmp_path / "failed.txt"

        assert write_url_file(path, []) is None
        assert not path.exists()
