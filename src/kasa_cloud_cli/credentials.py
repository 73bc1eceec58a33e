"""Login identities and the rules for choosing one."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .credential_storage import CredentialStorage
from .exception import InvalidArgumentsError, MissingConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StoredLogin:
    """Credentials loaded from the credential record, token possibly stale."""

    username: str
    password: str = field(repr=False)
    token: str | None = field(default=None, repr=False)


@dataclass(frozen=True, slots=True)
class ExplicitLogin:
    """One-off credentials from flags or prompts; never carries a token."""

    username: str
    password: str = field(repr=False)


LoginDetails = StoredLogin | ExplicitLogin


def resolve_login_details(
    username: str | None,
    password: str | None,
    storage: CredentialStorage,
) -> LoginDetails:
    """Pick the login identity for this invocation.

    Explicit credentials win and never consult the record. Without them the
    saved record is used as-is, including whatever token it holds.

    Raises:
        InvalidArgumentsError: If only one of username/password is given
        MissingConfigurationError: If neither is given and no record exists
    """
    if (username is None) != (password is None):
        raise InvalidArgumentsError(
            "You must pass both a username and password, or neither"
        )

    if username is not None and password is not None:
        logger.debug("Using explicit credentials for %s", username)
        return ExplicitLogin(username=username, password=password)

    record = storage.load()
    if record is None:
        raise MissingConfigurationError(
            f"Config does not exist at {storage.path}. Either run the setup "
            "command, or pass a username and password via command-line flags"
        )

    logger.debug("Using stored credentials for %s from %s", record.username, storage.path)
    return StoredLogin(
        username=record.username,
        password=record.password,
        token=record.token or None,
    )
