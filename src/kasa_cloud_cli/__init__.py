"""Command-line client for the TP-Link Kasa cloud API."""

from .credentials import ExplicitLogin, LoginDetails, StoredLogin, resolve_login_details
from .request_executor import RequestExecutor
from .token_service import TokenService

__all__ = [
    "ExplicitLogin",
    "LoginDetails",
    "RequestExecutor",
    "StoredLogin",
    "TokenService",
    "resolve_login_details",
]
