"""Core data models used across tools, service, and CLI."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Device:
    name: str
    address: str


@dataclass(frozen=True)
class AdapterStatus:
    powered: bool
    connected: bool


@dataclass(frozen=True)
class Settings:
    connected_text: str = "connected"
    disconnected_text: str = "disconnected"
    off_text: str = "off"
    store_path: Path = Path("/tmp/.btdev")
    timeout_s: float = 5.0
    poll_interval_s: float = 5.0
    control_binary: str = "bluetoothctl"
    menu_binary: str = "yad"
