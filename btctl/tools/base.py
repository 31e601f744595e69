"""Interfaces for the external tools btctl drives."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Protocol

from btctl.core.model import Device

DirectoryQuery = Callable[[], Awaitable[dict[str, str]]]


class Controller(Protocol):
    def check(self) -> None:
        """Raise ToolMissingError if the backing binary is unavailable."""

    async def power_on(self) -> None: ...

    async def power_off(self) -> None: ...

    async def connect(self, address: str) -> None: ...

    async def disconnect(self) -> None: ...

    async def scan_on(self) -> None: ...

    async def is_powered(self) -> bool: ...

    async def is_connected(self, address: str | None = None) -> bool: ...

    async def devices(self) -> dict[str, str]:
        """Return the current name -> address directory snapshot."""


class Menu(Protocol):
    def check(self) -> None: ...

    async def select(
        self,
        query: DirectoryQuery,
        *,
        scan: Callable[[], Awaitable[None]] | None = None,
    ) -> Device | None:
        """Show devices from ``query`` and return the user's pick, if any."""
