"""Pydantic models for cloud responses and the outcome of an API call."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, PrivateAttr, ValidationError

from .const import CloudErrorCode
from .exception import TransportError

ResultT = TypeVar("ResultT", bound=BaseModel)


class ApiEnvelope(BaseModel):
    """The ``{error_code, result}`` wrapper every cloud response shares."""

    error_code: int
    result: dict[str, Any] | None = None
    msg: str | None = None

    model_config = ConfigDict(extra="allow")

    _raw_body: str = PrivateAttr(default="")

    @classmethod
    def from_text(cls, text: str) -> "ApiEnvelope":
        """Decode a response body, raising TransportError when it is malformed."""
        try:
            envelope = cls.model_validate(json.loads(text))
        except (json.JSONDecodeError, ValidationError) as exc:
            raise TransportError(
                f"Unexpected response from cloud: {exc} (body = {text!r})"
            ) from exc
        envelope._raw_body = text
        return envelope

    @property
    def raw_body(self) -> str:
        """Response body exactly as received."""
        return self._raw_body

    def parse_result(self, model: type[ResultT]) -> ResultT:
        """Validate the ``result`` object against ``model``."""
        if self.result is None:
            raise TransportError(
                f"Cloud response has no result (body = {self.raw_body!r})"
            )
        return parse_result(model, self.result)


def parse_result(model: type[ResultT], payload: dict[str, Any]) -> ResultT:
    """Validate a result payload, raising TransportError on mismatch."""
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise TransportError(
            f"Unexpected {model.__name__} in cloud response: {exc}"
        ) from exc


class LoginResult(BaseModel):
    """Result of a successful ``login`` call."""

    token: str

    model_config = ConfigDict(extra="allow")


class DeviceInfo(BaseModel):
    """One entry of the account's device list."""

    alias: str
    deviceId: str

    model_config = ConfigDict(extra="allow")


class DeviceListResult(BaseModel):
    """Result of ``getDeviceList``."""

    deviceList: list[DeviceInfo]

    model_config = ConfigDict(extra="allow")


class PassthroughResult(BaseModel):
    """Result of a ``passthrough`` call; the device reply is an opaque string."""

    responseData: str

    model_config = ConfigDict(extra="allow")


@dataclass(frozen=True, slots=True)
class Success:
    """The call succeeded; ``payload`` is the envelope's result."""

    payload: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class TokenExpired:
    """The cloud reported the token as expired."""


@dataclass(frozen=True, slots=True)
class ApiFailure:
    """The cloud rejected the call for any other reason."""

    error_code: int
    message: str


ApiOutcome = Success | TokenExpired | ApiFailure


def classify_response(envelope: ApiEnvelope) -> ApiOutcome:
    """Map a decoded response onto the outcome of the call."""
    if envelope.error_code == CloudErrorCode.SUCCESS:
        return Success(envelope.result or {})
    if envelope.error_code == CloudErrorCode.TOKEN_EXPIRED:
        return TokenExpired()
    message = envelope.raw_body or envelope.msg or f"error_code {envelope.error_code}"
    return ApiFailure(error_code=envelope.error_code, message=message)
