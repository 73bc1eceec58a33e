"""Constants for the TP-Link Kasa cloud API."""

from enum import IntEnum

DEFAULT_CLOUD_URL = "https://wap.tplinkcloud.com/"
DEFAULT_CONFIG_FILENAME = ".tplink.toml"
DEFAULT_APP_TYPE = ""
DEFAULT_HTTP_TIMEOUT = 10.0


class CloudErrorCode(IntEnum):
    """Error codes with special meaning in the cloud response envelope."""

    SUCCESS = 0
    TOKEN_EXPIRED = -20651
