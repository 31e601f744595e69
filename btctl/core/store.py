"""Persistence of the last picked device address."""

from __future__ import annotations

from pathlib import Path

from btctl.core.errors import BtctlError, LastDeviceValidationError

ADDRESS_LENGTH = 17


def read_last_device(path: Path) -> str:
    """Return the stored address, creating an empty store if none exists."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.touch(exist_ok=True)
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise BtctlError(f"Could not read last device from {path}: {exc}") from exc
    return content.strip()


def write_last_device(path: Path, address: str) -> None:
    if len(address) != ADDRESS_LENGTH:
        raise LastDeviceValidationError(f"Wrong device format {address!r}")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(address, encoding="utf-8")
    except OSError as exc:
        raise BtctlError(f"Could not write last device to {path}: {exc}") from exc
