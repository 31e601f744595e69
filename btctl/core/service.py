"""Service layer used by the CLI: toggle, pick, and status flows."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Literal, TypeVar

from btctl.core.discovery import start_discovery
from btctl.core.errors import DeviceSelectionError, OperationTimeoutError, ProcessFailureError
from btctl.core.model import AdapterStatus, Device, Settings
from btctl.core.store import read_last_device, write_last_device
from btctl.tools.base import Controller, Menu
from btctl.tools.bluetoothctl import BluetoothCtl
from btctl.tools.yad import YadMenu

LOGGER = logging.getLogger(__name__)

ToggleAction = Literal["connect", "power_off"]
T = TypeVar("T")


def toggle_action(status: AdapterStatus) -> ToggleAction:
    """Connect unless the adapter is both powered and connected."""
    if not status.powered or not status.connected:
        return "connect"
    return "power_off"


class BtService:
    def __init__(
        self,
        settings: Settings | None = None,
        *,
        controller: Controller | None = None,
        menu: Menu | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.controller = controller or BluetoothCtl(
            self.settings.control_binary,
            timeout_s=self.settings.timeout_s,
        )
        self.menu = menu or YadMenu(
            self.settings.menu_binary,
            poll_interval_s=self.settings.poll_interval_s,
        )

    def check_tools(self, *, need_menu: bool = False) -> None:
        self.controller.check()
        if need_menu:
            self.menu.check()

    def status(self) -> AdapterStatus:
        return self._run(self._status)

    def list_devices(self) -> list[Device]:
        devices = self._run(self.controller.devices)
        return sorted(
            (Device(name=name, address=address) for name, address in devices.items()),
            key=lambda d: (d.name.lower(), d.address),
        )

    def toggle(self, device: str | None = None) -> ToggleAction:
        if not device:
            device = read_last_device(self.settings.store_path)
            if not device:
                raise DeviceSelectionError(
                    f"No device set in {str(self.settings.store_path)!r}. Run 'btctl pick' first."
                )

        async def _toggle() -> ToggleAction:
            status = await self._status()
            action = toggle_action(status)
            LOGGER.debug("Adapter %s, toggling with %s for %s", status, action, device)
            if action == "connect":
                await self._connect(device, was_connected=status.connected)
            else:
                await self.controller.power_off()
            return action

        return self._run(_toggle)

    def connect_device(self, address: str, *, was_connected: bool) -> None:
        self._run(lambda: self._connect(address, was_connected=was_connected))

    def pick(self) -> Device | None:
        """Let the user pick a device, then connect to it and remember it."""
        status = self.status()
        picked = asyncio.run(
            self.menu.select(
                self.controller.devices,
                scan=lambda: start_discovery(self.controller),
            )
        )
        if picked is None:
            LOGGER.debug("Nothing selected")
            return None

        self.connect_device(picked.address, was_connected=status.connected)
        write_last_device(self.settings.store_path, picked.address)
        return picked

    async def _status(self) -> AdapterStatus:
        powered = await self.controller.is_powered()
        connected = await self.controller.is_connected()
        return AdapterStatus(powered=powered, connected=connected)

    async def _connect(self, address: str, *, was_connected: bool) -> None:
        await self.controller.power_on()
        if was_connected:
            try:
                await self.controller.disconnect()
            except ProcessFailureError as exc:
                LOGGER.debug("Disconnect before connect failed: %s", exc)
        await self.controller.connect(address)

    def _run(self, factory: Callable[[], Awaitable[T]]) -> T:
        async def _bounded() -> T:
            async with asyncio.timeout(self.settings.timeout_s):
                return await factory()

        try:
            return asyncio.run(_bounded())
        except TimeoutError as exc:
            raise OperationTimeoutError(
                f"Bluetooth operation did not finish within {self.settings.timeout_s}s"
            ) from exc
