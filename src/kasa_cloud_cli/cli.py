"""kasactl command line entrypoint."""

import asyncio
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, Coroutine, TypeVar

import typer
from rich.console import Console
from typing_extensions import Annotated

from .cloud_client import CloudClient
from .config import CloudConfig, configure_logging, resolve_config_path
from .const import DEFAULT_CONFIG_FILENAME
from .credential_setup import ensure_can_write, run_setup
from .credential_storage import CredentialStorage
from .credentials import LoginDetails, resolve_login_details
from .devices import get_device_data, list_devices
from .exception import KasaCloudError
from .request_executor import RequestExecutor
from .token_service import TokenService

logger = logging.getLogger(__name__)

T = TypeVar("T")

app = typer.Typer(no_args_is_help=True, help="Query TP-Link Kasa")
console = Console(highlight=False, emoji=False)
err_console = Console(stderr=True, highlight=False, emoji=False)

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        metavar="CONFIG",
        help=f"Override path to config file (default: ~/{DEFAULT_CONFIG_FILENAME})",
    ),
]
UsernameOption = Annotated[
    str | None,
    typer.Option("--username", "-u", metavar="USERNAME", help="TP-Link Kasa username"),
]
PasswordOption = Annotated[
    str | None,
    typer.Option("--password", "-p", metavar="PASSWORD", help="TP-Link Kasa password"),
]


def _make_client(config: CloudConfig) -> CloudClient:
    """Create the HTTP client for one invocation."""
    return CloudClient.from_config(config)


def _announce_login(username: str) -> None:
    err_console.print("Fetching new token", markup=False)


def _fail(exc: KasaCloudError) -> typer.Exit:
    """Report ``exc`` on stderr and return the exit to raise."""
    logger.debug("Command failed", exc_info=exc)
    err_console.print(f"Error: {exc}", markup=False, soft_wrap=True)
    return typer.Exit(code=1)


def _run(coro: Coroutine[Any, Any, T]) -> T:
    """Run ``coro`` to completion, turning kasactl errors into exit status 1."""
    try:
        return asyncio.run(coro)
    except KasaCloudError as exc:
        raise _fail(exc) from exc


async def _with_executor(
    config_path: Path | None,
    username: str | None,
    password: str | None,
    action: Callable[[RequestExecutor, LoginDetails], Awaitable[T]],
) -> T:
    """Resolve credentials, open a client and run ``action`` with an executor."""
    config = CloudConfig.from_env()
    storage = CredentialStorage(resolve_config_path(config_path))
    login = resolve_login_details(username, password, storage)
    async with _make_client(config) as client:
        token_service = TokenService(
            client, storage, app_type=config.app_type, on_login=_announce_login
        )
        return await action(RequestExecutor(client, token_service), login)


async def _setup(
    storage: CredentialStorage, username: str, password: str, overwrite: bool
) -> None:
    config = CloudConfig.from_env()
    async with _make_client(config) as client:
        token_service = TokenService(
            client, storage, app_type=config.app_type, on_login=_announce_login
        )
        await run_setup(storage, token_service, username, password, overwrite)


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Enable debug logging")
    ] = False,
) -> None:
    """Query TP-Link Kasa devices through the cloud API."""
    configure_logging(verbose)


@app.command("list")
def list_command(
    username: UsernameOption = None,
    password: PasswordOption = None,
    config: ConfigOption = None,
) -> None:
    """List TP-Link devices registered to your account."""
    devices = _run(_with_executor(config, username, password, list_devices))
    for device in devices:
        console.print(f"{device.alias} = {device.deviceId}", markup=False, soft_wrap=True)


@app.command("get-data")
def get_data(
    device_id: Annotated[
        str,
        typer.Option(
            "--device-id", "-d", metavar="DEVICE-ID", help="device id from <list> command"
        ),
    ],
    username: UsernameOption = None,
    password: PasswordOption = None,
    config: ConfigOption = None,
) -> None:
    """Get data from a TP-Link device."""

    async def _fetch(executor: RequestExecutor, login: LoginDetails) -> str:
        return await get_device_data(executor, login, device_id)

    data = _run(_with_executor(config, username, password, _fetch))
    console.print(data, markup=False, soft_wrap=True)


@app.command()
def setup(
    config: ConfigOption = None,
    overwrite: Annotated[
        bool,
        typer.Option(
            "--overwrite", "-o", help="Overwrite settings file if it exists"
        ),
    ] = False,
    username: UsernameOption = None,
    password: PasswordOption = None,
) -> None:
    """Store username, password and a fresh token in a settings file."""
    storage = CredentialStorage(resolve_config_path(config))
    try:
        ensure_can_write(storage, overwrite)
    except KasaCloudError as exc:
        raise _fail(exc) from exc

    if username is None:
        username = typer.prompt("Enter your TP-Link Kasa username").strip()
    if password is None:
        password = typer.prompt(
            "Enter your TP-Link Kasa password", hide_input=True
        ).strip()

    _run(_setup(storage, username, password, overwrite))
    console.print(f"Saved credentials to {storage.path}", markup=False, soft_wrap=True)


if __name__ == "__main__":
    app()
