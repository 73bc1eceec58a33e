"""Authenticated API calls with a single re-login on token expiry."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

from .cloud_client import CloudClient
from .credentials import LoginDetails, StoredLogin
from .exception import ApiError, ProtocolInvariantViolation
from .schemas import ApiFailure, ApiOutcome, Success, classify_response
from .token_service import TokenService

logger = logging.getLogger(__name__)


class TokenState(Enum):
    """Whether the executor holds a token worth trying."""

    HAVE_TOKEN = "have_token"
    NEED_TOKEN = "need_token"


class RequestExecutor:
    """Runs API requests on behalf of a login identity.

    A cached token is tried first. If the cloud reports it expired, the
    executor logs in once and retries once. A freshly minted token that is
    also reported expired is a protocol violation and is never retried, so a
    call makes at most two requests and one login.
    """

    def __init__(self, client: CloudClient, token_service: TokenService):
        """Create an executor sending through ``client``."""
        self._client = client
        self._token_service = token_service

    async def execute(
        self, request: dict[str, Any], login: LoginDetails
    ) -> dict[str, Any]:
        """Send ``request`` and return the ``result`` payload of the response.

        Raises:
            ApiError: If the cloud rejects the request
            ProtocolInvariantViolation: If a new token is reported expired
            AuthenticationError: If re-login is needed and fails
            TransportError: On network or decoding failures
        """
        token = login.token if isinstance(login, StoredLogin) else None
        state = TokenState.HAVE_TOKEN if token else TokenState.NEED_TOKEN

        while True:
            if state is TokenState.NEED_TOKEN:
                token = await self._token_service.obtain_token(login)

            outcome = await self._attempt(request, token)

            if isinstance(outcome, Success):
                return outcome.payload
            if isinstance(outcome, ApiFailure):
                raise ApiError(
                    outcome.message,
                    error_code=outcome.error_code,
                    response_body=outcome.message,
                )

            # TokenExpired
            if state is TokenState.NEED_TOKEN:
                raise ProtocolInvariantViolation(
                    "Token is supposedly expired but we just got it"
                )
            logger.info("Cached token expired, logging in again")
            state = TokenState.NEED_TOKEN

    async def _attempt(
        self, request: dict[str, Any], token: str | None
    ) -> ApiOutcome:
        envelope = await self._client.post(request, token=token)
        return classify_response(envelope)
