"""Interpretation of the control tool's free-text status output."""

from __future__ import annotations

from btctl.core.model import AdapterStatus

POWERED_INDICATOR = "Powered: yes"
CONNECTED_INDICATOR = "Connected: yes"


def is_powered_text(show_output: str) -> bool:
    return POWERED_INDICATOR in show_output


def is_connected_text(info_output: str) -> bool:
    return CONNECTED_INDICATOR in info_output


def render_status(status: AdapterStatus, *, connected: str, disconnected: str, off: str) -> str:
    """Pick the display text for ``status``; power wins over connection."""
    if not status.powered:
        return off
    if not status.connected:
        return disconnected
    return connected
