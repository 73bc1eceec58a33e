"""Session token acquisition."""

from __future__ import annotations

import logging
from typing import Any, Callable

from .cloud_client import CloudClient
from .const import DEFAULT_APP_TYPE, CloudErrorCode
from .credential_storage import CredentialRecord, CredentialStorage
from .credentials import LoginDetails, StoredLogin
from .exception import AuthenticationError
from .schemas import LoginResult

logger = logging.getLogger(__name__)


def build_login_request(
    username: str, password: str, app_type: str = DEFAULT_APP_TYPE
) -> dict[str, Any]:
    """Return the body of a ``login`` call."""
    return {
        "method": "login",
        "params": {
            "appType": app_type,
            "cloudUserName": username,
            "cloudPassword": password,
            "terminalUUID": "",
        },
    }


class TokenService:
    """Logs in to the cloud and keeps the credential record's token current."""

    def __init__(
        self,
        client: CloudClient,
        storage: CredentialStorage,
        app_type: str = DEFAULT_APP_TYPE,
        on_login: Callable[[str], None] | None = None,
    ):
        """Create a token service using ``client`` and writing to ``storage``.

        ``on_login`` is called with the username before each login request.
        """
        self._client = client
        self._storage = storage
        self._app_type = app_type
        self._on_login = on_login

    async def obtain_token(self, login: LoginDetails) -> str:
        """Log in and return a fresh session token.

        When ``login`` came from the credential record the new token is saved
        back so the next invocation can skip logging in. Explicit credentials
        are never written.

        Raises:
            AuthenticationError: If the cloud rejects the credentials
            TransportError: If the cloud cannot be reached or replies badly
            CredentialStorageError: If the new token cannot be saved
        """
        logger.info("Fetching new token for %s", login.username)
        if self._on_login is not None:
            self._on_login(login.username)
        envelope = await self._client.post(
            build_login_request(login.username, login.password, self._app_type)
        )
        if envelope.error_code != CloudErrorCode.SUCCESS:
            raise AuthenticationError(
                f"Got error when logging in (response = {envelope.raw_body})",
                response_body=envelope.raw_body,
            )

        token = envelope.parse_result(LoginResult).token

        if isinstance(login, StoredLogin):
            self._storage.save(
                CredentialRecord(
                    username=login.username,
                    password=login.password,
                    token=token,
                )
            )
            logger.info("Saved refreshed token to %s", self._storage.path)

        return token
