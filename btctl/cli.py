"""Typer CLI entrypoint."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from pathlib import Path

import typer

from btctl.core.config import load_settings
from btctl.core.errors import BtctlError
from btctl.core.model import Settings
from btctl.core.service import BtService
from btctl.core.status import render_status

app = typer.Typer(help="Toggle, pick, and report a Bluetooth device connection")


@dataclass
class _State:
    settings: Settings
    debug: bool = False


def _fail(exc: BtctlError, debug: bool) -> typer.Exit:
    if debug:
        typer.echo(f"Error: {exc}", err=True)
    return typer.Exit(code=1)


def _toggle(state: _State, device: str | None) -> None:
    try:
        service = BtService(state.settings)
        service.check_tools()
        service.toggle(device)
    except BtctlError as exc:
        raise _fail(exc, state.debug) from None


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    config: Path | None = typer.Option(None, "--config", help="Path to a YAML config file"),
    debug: bool = typer.Option(False, "--debug", help="Log progress and print errors"),
) -> None:
    """Toggle the last picked device when no command is given."""
    logging.basicConfig(level=logging.DEBUG if debug else logging.WARNING)
    try:
        settings = load_settings(config)
    except BtctlError as exc:
        raise _fail(exc, debug) from None
    ctx.obj = _State(settings=settings, debug=debug)
    if ctx.invoked_subcommand is None:
        _toggle(ctx.obj, None)


@app.command("toggle")
def toggle(
    ctx: typer.Context,
    device: str | None = typer.Option(None, "--device", help="Device address, defaults to the last pick"),
    store_path: Path | None = typer.Option(None, "--store-path", help="File holding the last device"),
) -> None:
    """Connect to the device, or power off if it is already connected."""
    state: _State = ctx.obj
    if store_path is not None:
        state.settings = replace(state.settings, store_path=store_path)
    _toggle(state, device)


@app.command("pick")
def pick(
    ctx: typer.Context,
    store_path: Path | None = typer.Option(None, "--store-path", help="File holding the last device"),
) -> None:
    """Choose a device from a live menu, connect, and remember it."""
    state: _State = ctx.obj
    settings = state.settings
    if store_path is not None:
        settings = replace(settings, store_path=store_path)
    try:
        service = BtService(settings)
        service.check_tools(need_menu=True)
        device = service.pick()
    except BtctlError as exc:
        raise _fail(exc, state.debug) from None
    if device is not None:
        typer.echo(f"Connected {device.name} ({device.address})")


@app.command("status")
def status(
    ctx: typer.Context,
    connected: str | None = typer.Option(None, "-c", "--connected", help="Text to display when connected"),
    disconnected: str | None = typer.Option(
        None, "-d", "--disconnected", help="Text to display when disconnected"
    ),
    off: str | None = typer.Option(None, "-o", "--off", help="Text to display when off"),
) -> None:
    """Print the adapter's connection state."""
    state: _State = ctx.obj
    settings = state.settings
    try:
        service = BtService(settings)
        service.check_tools()
        current = service.status()
    except BtctlError as exc:
        raise _fail(exc, state.debug) from None
    typer.echo(
        render_status(
            current,
            connected=connected if connected is not None else settings.connected_text,
            disconnected=disconnected if disconnected is not None else settings.disconnected_text,
            off=off if off is not None else settings.off_text,
        )
    )


@app.command("devices")
def list_devices(ctx: typer.Context) -> None:
    """List devices known to the adapter."""
    state: _State = ctx.obj
    try:
        service = BtService(state.settings)
        service.check_tools()
        devices = service.list_devices()
    except BtctlError as exc:
        raise _fail(exc, state.debug) from None
    if not devices:
        typer.echo("No Bluetooth devices found")
        return
    for device in devices:
        typer.echo(f"{device.address} {device.name}")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
