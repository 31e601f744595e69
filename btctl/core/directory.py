"""Parsing of the control tool's device listing."""

from __future__ import annotations

from btctl.core.errors import MalformedOutputError


def parse_device_listing(text: str) -> dict[str, str]:
    """Map device names to addresses from ``bluetoothctl devices`` output.

    Each line reads ``Device <address> <name...>``. A line with fewer than
    three space-separated fields aborts the whole parse.
    """
    devices: dict[str, str] = {}
    for line in text.splitlines():
        if not line.strip():
            continue
        pieces = line.split(" ")
        if len(pieces) < 3:
            raise MalformedOutputError(f"Device line {line!r} has fewer than 3 fields")
        devices[" ".join(pieces[2:])] = pieces[1]
    return devices
