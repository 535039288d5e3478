"""Secrets loading for safari-publisher.

The GitHub token normally comes from a JSON ``ubo_secrets`` file found by
walking up from the working directory. When no such file exists the token
can be kept in the system keyring instead (SecretService, Keychain or
Credential Manager).
"""

from pathlib import Path
from typing import Any

import keyring
import orjson
from keyring.errors import KeyringError

from safari_publisher.constants import (
    KEYRING_SERVICE,
    KEYRING_USERNAME,
    SECRETS_FILE_NAME,
    SECRETS_TOKEN_KEY,
)
from safari_publisher.infrastructure.locator import find_upward
from safari_publisher.logger import get_logger

logger = get_logger(__name__)

Secrets = dict[str, Any]


class KeyringTokenStore:
    """Read-only access to a GitHub token stored in the system keyring."""

    def __init__(
        self,
        service: str = KEYRING_SERVICE,
        username: str = KEYRING_USERNAME,
    ) -> None:
        self.service = service
        self.username = username

    def get(self) -> str | None:
        """Return the stored token, or None if absent or unavailable."""
        try:
            return keyring.get_password(self.service, self.username)
        except KeyringError as e:
            logger.debug("Keyring unavailable: %s", e)
            return None


def load_secrets(
    start: Path | None = None,
    home: Path | None = None,
) -> Secrets | None:
    """Find and parse the nearest secrets file.

    Args:
        start: Directory to start from (defaults to the working directory)
        home: Search boundary (defaults to the user's home directory)

    Returns:
        Parsed secrets mapping, or None if not found or unreadable

    """
    secrets_path = find_upward(
        start or Path.cwd(),
        SECRETS_FILE_NAME,
        home or Path.home(),
    )
    if secrets_path is None:
        return None

    logger.info("Found secrets in %s", secrets_path)
    try:
        data = orjson.loads(secrets_path.read_bytes())
    except (OSError, orjson.JSONDecodeError) as e:
        logger.warning("Could not read secrets file %s: %s", secrets_path, e)
        return None

    if not isinstance(data, dict):
        logger.warning("Secrets file %s is not a JSON object", secrets_path)
        return None
    return data


def resolve_token(
    secrets: Secrets | None,
    token_store: KeyringTokenStore | None = None,
) -> str | None:
    """Return the GitHub token from secrets, falling back to the keyring.

    Args:
        secrets: Parsed secrets mapping (may be None)
        token_store: Keyring store consulted when secrets carry no token

    Returns:
        Token string, or None if no source provides one

    """
    if secrets:
        token = secrets.get(SECRETS_TOKEN_KEY)
        if isinstance(token, str) and token.strip():
            return token.strip()

    if token_store is None:
        return None

    token = token_store.get()
    if token:
        logger.debug("Using GitHub token from keyring")
        return token.strip()
    return None
