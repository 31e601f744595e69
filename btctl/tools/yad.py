"""yad list menu fed live with discovered devices."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import shutil
from collections.abc import Awaitable, Callable, Sequence

from btctl.core.discovery import DEFAULT_POLL_INTERVAL_S, feed_devices
from btctl.core.errors import MalformedSelectionError, ToolMissingError
from btctl.core.model import Device
from btctl.core.streams import read_lines
from btctl.tools.base import DirectoryQuery

LOGGER = logging.getLogger(__name__)

SELECTION_DELIMITER = "|"
MENU_ARGS = ("--list", "--column=name", "--column=device", "--no-buttons", "--listen")


def parse_selection(lines: Sequence[str]) -> tuple[str, str]:
    """Parse yad's ``name|address|`` output; no output means nothing was picked."""
    if not lines:
        return "", ""
    pieces = lines[0].split(SELECTION_DELIMITER)
    if len(pieces) == 1:
        raise MalformedSelectionError(
            f"Selection {lines[0]!r} does not contain delimiter {SELECTION_DELIMITER!r}"
        )
    return pieces[0], pieces[1]


class YadMenu:
    def __init__(self, binary: str = "yad", *, poll_interval_s: float = DEFAULT_POLL_INTERVAL_S) -> None:
        self.binary = binary
        self.poll_interval_s = poll_interval_s

    def check(self) -> None:
        if shutil.which(self.binary) is None:
            raise ToolMissingError(f"Required binary '{self.binary}' was not found on PATH")

    async def select(
        self,
        query: DirectoryQuery,
        *,
        scan: Callable[[], Awaitable[None]] | None = None,
    ) -> Device | None:
        """Show the menu until the user picks a row or closes it.

        Known devices are fed immediately and new ones as ``query`` finds them.
        Background tasks are cancelled before this returns.
        """
        try:
            proc = await asyncio.create_subprocess_exec(
                self.binary,
                *MENU_ARGS,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as exc:
            raise ToolMissingError(f"Required binary '{self.binary}' was not found on PATH") from exc

        tasks: list[asyncio.Task] = []
        try:
            if scan is not None:
                tasks.append(asyncio.create_task(scan()))
            tasks.append(
                asyncio.create_task(feed_devices(query, proc.stdin, interval=self.poll_interval_s))
            )
            lines = await read_lines(proc.stdout)
            returncode = await proc.wait()
            LOGGER.debug("Menu exited with status %s after %d line(s)", returncode, len(lines))
        finally:
            await _cancel_all(tasks)
            if proc.returncode is None:
                with contextlib.suppress(ProcessLookupError):
                    proc.kill()
                await proc.wait()
            proc.stdin.close()

        name, address = parse_selection(lines)
        if not address:
            return None
        return Device(name=name, address=address)


async def _cancel_all(tasks: list[asyncio.Task]) -> None:
    for task in tasks:
        task.cancel()
    results = await asyncio.gather(*tasks, return_exceptions=True)
    for result in results:
        if isinstance(result, Exception):
            LOGGER.debug("Background menu task failed: %s", result)
