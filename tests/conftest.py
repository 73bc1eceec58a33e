"""Shared fixtures: a scripted stand-in for the Kasa cloud."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

from kasa_cloud_cli.cloud_client import CloudClient
from kasa_cloud_cli.credential_storage import CredentialRecord, CredentialStorage

CLOUD_URL = "https://cloud.test/"
TOKEN_EXPIRED = {"error_code": -20651, "msg": "Token expired"}


def login_ok(token: str) -> dict[str, Any]:
    """Return a successful login envelope carrying ``token``."""
    return {"error_code": 0, "result": {"accountId": "42", "token": token}}


class FakeCloud:
    """Replays scripted replies in order and records every request."""

    def __init__(self, *replies: dict[str, Any] | str | httpx.Response):
        """Queue ``replies``; dicts are sent as JSON, strings as raw bodies."""
        self._replies = list(replies)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._replies:
            raise AssertionError(f"Unexpected request: {request.content!r}")
        reply = self._replies.pop(0)
        if isinstance(reply, httpx.Response):
            return reply
        if isinstance(reply, str):
            return httpx.Response(200, text=reply)
        return httpx.Response(200, json=reply)

    @property
    def bodies(self) -> list[dict[str, Any]]:
        """Decoded JSON bodies of the received requests."""
        return [json.loads(request.content) for request in self.requests]

    @property
    def methods(self) -> list[str]:
        """The ``method`` of each received request."""
        return [body["method"] for body in self.bodies]

    @property
    def tokens(self) -> list[str | None]:
        """The ``token`` query parameter of each received request."""
        return [request.url.params.get("token") for request in self.requests]

    @property
    def login_calls(self) -> int:
        """How many login requests were made."""
        return self.methods.count("login")

    def transport(self) -> httpx.MockTransport:
        """Wrap this fake as an httpx transport."""
        return httpx.MockTransport(self)


@pytest.fixture
def record_path(tmp_path: Path) -> Path:
    """Provide a temporary credential record path."""
    return tmp_path / "tplink.toml"


@pytest.fixture
def storage(record_path: Path) -> CredentialStorage:
    """Provide credential storage backed by a temporary path."""
    return CredentialStorage(record_path)


@pytest.fixture
def stored_record(storage: CredentialStorage) -> CredentialRecord:
    """Persist a record with a stale token and return it."""
    record = CredentialRecord(username="u", password="p", token="stale-token")
    storage.save(record)
    return record


@pytest.fixture
def make_client() -> Callable[[FakeCloud], CloudClient]:
    """Return a factory building a CloudClient that talks to a FakeCloud."""

    def _factory(cloud: FakeCloud) -> CloudClient:
        return CloudClient(CLOUD_URL, timeout=5.0, transport=cloud.transport())

    return _factory
