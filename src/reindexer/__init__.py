"""Reindexer: batch URL submitter for the Google Indexing API."""

__version__ = "0.1.0"
