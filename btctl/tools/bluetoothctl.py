"""bluetoothctl adapter driven through one-shot subcommands."""

from __future__ import annotations

import asyncio
import logging
import shutil

from btctl.core.directory import parse_device_listing
from btctl.core.errors import CommandTimeoutError, ProcessFailureError, ToolMissingError
from btctl.core.status import is_connected_text, is_powered_text

LOGGER = logging.getLogger(__name__)


class BluetoothCtl:
    def __init__(self, binary: str = "bluetoothctl", *, timeout_s: float | None = 5.0) -> None:
        self.binary = binary
        self.timeout_s = timeout_s

    def check(self) -> None:
        if shutil.which(self.binary) is None:
            raise ToolMissingError(f"Required binary '{self.binary}' was not found on PATH")

    async def _run(self, *args: str, timeout_s: float | None = None, check: bool = True) -> str:
        """Run ``bluetoothctl *args`` and return its combined stdout/stderr.

        The process is killed if it times out or the caller is cancelled.
        """
        command = (self.binary, *args)
        LOGGER.debug("Running %s", " ".join(command))
        try:
            proc = await asyncio.create_subprocess_exec(
                *command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except FileNotFoundError as exc:
            raise ToolMissingError(f"Required binary '{self.binary}' was not found on PATH") from exc

        try:
            stdout, _ = await asyncio.wait_for(proc.communicate(), timeout=timeout_s)
        except asyncio.TimeoutError as exc:
            await _kill(proc)
            raise CommandTimeoutError(command, timeout_s) from exc
        except asyncio.CancelledError:
            await _kill(proc)
            raise

        output = stdout.decode("utf-8", errors="replace") if stdout else ""
        if check and proc.returncode != 0:
            raise ProcessFailureError(command, proc.returncode, output)
        return output

    async def power_on(self) -> None:
        await self._run("power", "on", timeout_s=self.timeout_s)

    async def power_off(self) -> None:
        await self._run("power", "off", timeout_s=self.timeout_s)

    async def connect(self, address: str) -> None:
        await self._run("connect", address, timeout_s=self.timeout_s)

    async def disconnect(self) -> None:
        await self._run("disconnect", timeout_s=self.timeout_s)

    async def scan_on(self) -> None:
        # Discovery stays enabled only while the process lives.
        await self._run("scan", "on", timeout_s=None)

    async def show(self) -> str:
        return await self._run("show", timeout_s=self.timeout_s)

    async def info(self, address: str | None = None) -> str:
        args = ("info", address) if address else ("info",)
        return await self._run(*args, timeout_s=self.timeout_s)

    async def devices(self) -> dict[str, str]:
        output = await self._run("devices", timeout_s=self.timeout_s)
        return parse_device_listing(output)

    async def is_powered(self) -> bool:
        return is_powered_text(await self.show())

    async def is_connected(self, address: str | None = None) -> bool:
        if address:
            return is_connected_text(await self.info(address))
        # Without an address bluetoothctl fails when nothing is connected.
        output = await self._run("info", timeout_s=self.timeout_s, check=False)
        return is_connected_text(output)


async def _kill(proc: asyncio.subprocess.Process) -> None:
    try:
        proc.kill()
    except ProcessLookupError:
        pass
    await proc.wait()
