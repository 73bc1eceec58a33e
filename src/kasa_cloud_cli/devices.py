"""Device listing and telemetry retrieval."""

from __future__ import annotations

import json
from typing import Any

from .credentials import LoginDetails
from .request_executor import RequestExecutor
from .schemas import (
    DeviceInfo,
    DeviceListResult,
    PassthroughResult,
    parse_result,
)

DEVICE_LIST_REQUEST: dict[str, Any] = {"method": "getDeviceList"}

# Asks the device for its system info and the current energy meter reading.
TELEMETRY_REQUEST: dict[str, Any] = {
    "system": {"get_sysinfo": None},
    "emeter": {"get_realtime": None},
}


def build_passthrough_request(
    device_id: str, request_data: dict[str, Any] | None = None
) -> dict[str, Any]:
    """Wrap a device-local request so the cloud relays it to ``device_id``."""
    data = TELEMETRY_REQUEST if request_data is None else request_data
    return {
        "method": "passthrough",
        "params": {
            "deviceId": device_id,
            "requestData": json.dumps(data, separators=(",", ":")),
        },
    }


async def list_devices(
    executor: RequestExecutor, login: LoginDetails
) -> list[DeviceInfo]:
    """Return the devices registered to the account."""
    payload = await executor.execute(dict(DEVICE_LIST_REQUEST), login)
    return parse_result(DeviceListResult, payload).deviceList


async def get_device_data(
    executor: RequestExecutor, login: LoginDetails, device_id: str
) -> str:
    """Return the raw telemetry string reported by ``device_id``."""
    payload = await executor.execute(build_passthrough_request(device_id), login)
    return parse_result(PassthroughResult, payload).responseData
