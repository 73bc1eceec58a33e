"""First-time capture of cloud credentials."""

from __future__ import annotations

import logging

from .credential_storage import CredentialRecord, CredentialStorage
from .credentials import ExplicitLogin
from .exception import ConfigurationError
from .token_service import TokenService

logger = logging.getLogger(__name__)


def ensure_can_write(storage: CredentialStorage, overwrite: bool) -> None:
    """Refuse to replace an existing record unless ``overwrite`` is set."""
    if storage.exists() and not overwrite:
        raise ConfigurationError(
            f"A config already exists at {storage.path}. Please remove it "
            "first or pass --overwrite before running setup again"
        )


async def run_setup(
    storage: CredentialStorage,
    token_service: TokenService,
    username: str,
    password: str,
    overwrite: bool = False,
) -> CredentialRecord:
    """Log in with the given credentials and save them with the new token.

    The record is only touched after the login succeeds, so a rejected
    password leaves any existing file as it was.

    Raises:
        ConfigurationError: If a record exists and ``overwrite`` is False
        AuthenticationError: If the cloud rejects the credentials
    """
    ensure_can_write(storage, overwrite)

    token = await token_service.obtain_token(
        ExplicitLogin(username=username, password=password)
    )
    record = CredentialRecord(username=username, password=password, token=token)
    storage.save(record)
    logger.info("Stored credentials for %s in %s", username, storage.path)
    return record
