"""Service account credential loading for Reindexer."""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from google.oauth2 import service_account

from reindexer.models import SetupError
from reindexer.utils.logging import get_logger

logger = get_logger(__name__)

INDEXING_SCOPES = ["https://www.googleapis.com/auth/indexing"]
DEFAULT_TOKEN_URI = "https://oauth2.googleapis.com/token"
REQUIRED_FIELDS = ("client_email", "private_key")


class CredentialError(SetupError):
    """Raised when the service account credential cannot be used."""


@dataclass
class ServiceAccount:
    """A loaded service account and its scoped Google credentials."""

    client_email: str
    project_id: str | None
    credentials: service_account.Credentials


def read_service_account_info(path: Path) -> dict[str, Any]:
    """Read and validate a service account JSON key file.

    Args:
        path: Location of the JSON key file.

    Returns:
        The parsed key document, with ``token_uri`` filled in when absent.

    Raises:
        CredentialError: If the file is missing, not JSON, or lacks identity fields.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise CredentialError(
            f"Credential file {path} not found. "
            "Download a service account JSON key from the Google Cloud Console."
        ) from e
    except OSError as e:
        raise CredentialError(f"Cannot read credential file {path}: {e}") from e

    try:
        info = json.loads(text)
    except json.JSONDecodeError as e:
        raise CredentialError(f"Credential file {path} is not valid JSON: {e}") from e

    if not isinstance(info, dict):
        raise CredentialError(f"Credential file {path} must contain a JSON object.")

    missing = [name for name in REQUIRED_FIELDS if not info.get(name)]
    if missing:
        raise CredentialError(
            f"Credential file {path} is missing required fields: {', '.join(missing)}"
        )

    info.setdefault("token_uri", DEFAULT_TOKEN_URI)
    return info


def load_service_account(path: Path) -> ServiceAccount:
    """Load scoped Indexing API credentials from a service account key file."""
    info = read_service_account_info(path)

    try:
        credentials = service_account.Credentials.from_service_account_info(
            info, scopes=INDEXING_SCOPES
        )
    except ValueError as e:
        raise CredentialError(f"Credential file {path} was rejected: {e}") from e

    logger.info(
        "Loaded service account",
        client_email=info["client_email"],
        project_id=info.get("project_id"),
    )
    return ServiceAccount(
        client_email=info["client_email"],
        project_id=info.get("project_id"),
        credentials=credentials,
    )
