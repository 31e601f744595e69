"""Device discovery: enabling scans and streaming new devices to a consumer."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Protocol

from btctl.core.errors import BtctlError
from btctl.tools.base import Controller, DirectoryQuery

LOGGER = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_S = 5.0


class LineWriter(Protocol):
    def write(self, data: bytes) -> None: ...

    async def drain(self) -> None: ...

    def is_closing(self) -> bool: ...


async def start_discovery(controller: Controller) -> None:
    """Enable discovery; failures are logged since scanning may already be on."""
    try:
        await controller.scan_on()
    except BtctlError as exc:
        LOGGER.debug("Could not enable discovery: %s", exc)


def diff_devices(
    snapshot: Mapping[str, str],
    seen: Mapping[str, str],
) -> tuple[dict[str, str], dict[str, str]]:
    """Split ``snapshot`` (name -> address) against ``seen`` (address -> name).

    Returns the entries not yet seen and a new seen mapping including them.
    """
    new_entries = {name: address for name, address in snapshot.items() if address not in seen}
    updated = dict(seen)
    for name, address in new_entries.items():
        updated[address] = name
    return new_entries, updated


async def feed_devices(
    query: DirectoryQuery,
    writer: LineWriter,
    *,
    interval: float = DEFAULT_POLL_INTERVAL_S,
) -> dict[str, str]:
    """Write each newly discovered device as a name line and an address line.

    Polls ``query`` every ``interval`` seconds until the writer closes, the
    consumer goes away, or the task is cancelled. Returns the seen mapping.
    """
    seen: dict[str, str] = {}
    while not writer.is_closing():
        try:
            snapshot = await query()
        except BtctlError as exc:
            LOGGER.debug("Device poll failed, retrying in %ss: %s", interval, exc)
            snapshot = {}

        new_entries, updated = diff_devices(snapshot, seen)
        if new_entries:
            try:
                for name, address in new_entries.items():
                    writer.write(f"{name}\n{address}\n".encode("utf-8"))
                await writer.drain()
            except (BrokenPipeError, ConnectionResetError) as exc:
                LOGGER.debug("Menu input closed: %s", exc)
                break
            LOGGER.debug("Fed %d new device(s) to menu", len(new_entries))
        seen = updated

        await asyncio.sleep(interval)
    return seen
