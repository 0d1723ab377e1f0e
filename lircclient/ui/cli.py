"""Command line front end: list remotes, send commands, watch IR events."""

import asyncio
import logging
import signal
from typing import List, Optional

import typer

from lircclient import __version__
from lircclient.core.configs import ClientSettings, get_client_settings
from lircclient.daemon.client import LircClient
from lircclient.daemon.endpoint import UnixEndpoint, parse_address
from lircclient.daemon.protocol import SendType
from lircclient.errors import LircError
from lircclient.ui.output import UIManager

logger = logging.getLogger(__name__)

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Talk to a LIRC daemon: list remotes, send IR commands, receive events.",
)

ui = UIManager()


# ============================================================================
# Shared setup
# ============================================================================

def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"lirc-client {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    device: Optional[str] = typer.Option(
        None, "--device", "-d", help="Use this lircd socket [/var/run/lirc/lircd]"
    ),
    address: Optional[str] = typer.Option(
        None, "--address", "-a", help="Connect to lircd at host[:port]"
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Debug logging"),
    version: bool = typer.Option(
        False, "--version", "-v", callback=_version_callback, is_eager=True,
        help="Display version",
    ),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        settings = get_client_settings()
    except ValueError as e:
        ui.error(f"Error loading configuration: {e}")
        raise typer.Exit(1)

    try:
        ctx.obj = _make_client(settings, device, address)
    except ValueError as e:
        ui.error(f"Error: {e}")
        raise typer.Exit(1)


def _make_client(
    settings: ClientSettings,
    device: Optional[str],
    address: Optional[str],
) -> LircClient:
    """Command line options win over configuration."""
    if address:
        endpoint = parse_address(address)
    elif device:
        endpoint = UnixEndpoint(device)
    else:
        endpoint = settings.endpoint()
    return LircClient(endpoint, settle_delay=settings.settle_delay)


def _load_remote(client: LircClient, name: str):
    client.refresh_remotes()
    return client.remote(name)


# ============================================================================
# Commands
# ============================================================================

@app.command("list")
def list_(
    ctx: typer.Context,
    remote: Optional[str] = typer.Argument(None, help="List the commands of this remote"),
) -> None:
    """List remotes, or the commands of one remote."""
    client: LircClient = ctx.obj
    try:
        if remote:
            ui.commands(_load_remote(client, remote))
        else:
            ui.remotes(client.refresh_remotes())
    except LircError as e:
        ui.error(str(e))
        raise typer.Exit(1)


def _send(client: LircClient, send_type: SendType, remote: str, codes: List[str], count: int) -> None:
    try:
        target = _load_remote(client, remote)
        for code in codes:
            target.command(code).send(send_type, wait_for_reply=True, count=count)
    except LircError as e:
        ui.error(str(e))
        raise typer.Exit(1)


@app.command("send-once")
def send_once(
    ctx: typer.Context,
    remote: str = typer.Argument(..., help="Remote name"),
    codes: List[str] = typer.Argument(..., help="One or more command names"),
    count: int = typer.Option(0, "--count", "-c", min=0, help="Send each command n times"),
) -> None:
    """Send one or more commands once."""
    _send(ctx.obj, SendType.ONCE, remote, codes, count)


@app.command("send-start")
def send_start(
    ctx: typer.Context,
    remote: str = typer.Argument(..., help="Remote name"),
    code: str = typer.Argument(..., help="Command name"),
) -> None:
    """Start repeating a command (press and hold)."""
    _send(ctx.obj, SendType.START, remote, [code], 0)


@app.command("send-stop")
def send_stop(
    ctx: typer.Context,
    remote: str = typer.Argument(..., help="Remote name"),
    code: str = typer.Argument(..., help="Command name"),
) -> None:
    """Stop repeating a command."""
    _send(ctx.obj, SendType.STOP, remote, [code], 0)


@app.command()
def receive(ctx: typer.Context) -> None:
    """Print every IR event broadcast by the daemon until interrupted."""
    client: LircClient = ctx.obj
    loop = asyncio.new_event_loop()
    hung_up = False

    def on_close() -> None:
        nonlocal hung_up
        hung_up = True
        loop.stop()

    try:
        client.add_listener(ui.event, loop=loop, on_close=on_close)
    except LircError as e:
        loop.close()
        ui.error(str(e))
        raise typer.Exit(1)

    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, loop.stop)

    logger.info(f"Listening on {client.endpoint}")
    try:
        loop.run_forever()
    finally:
        client.close()
        loop.close()

    if hung_up:
        ui.error(f"Lost connection to {client.endpoint}")
        raise typer.Exit(1)


def run() -> None:
    """Entry point for console script mapping."""
    app()


if __name__ == "__main__":
    run()
