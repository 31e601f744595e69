"""Line-oriented helpers for subprocess pipes."""

from __future__ import annotations

import asyncio
import logging

LOGGER = logging.getLogger(__name__)


async def read_lines(stream: asyncio.StreamReader) -> list[str]:
    """Drain ``stream`` to EOF and return its stripped lines in order.

    A read error ends the read early; whatever was collected is returned.
    """
    lines: list[str] = []
    while True:
        try:
            raw = await stream.readline()
        except (OSError, ValueError, asyncio.IncompleteReadError) as exc:
            LOGGER.debug("Stopped reading stream after %d lines: %s", len(lines), exc)
            break
        if not raw:
            break
        lines.append(raw.decode("utf-8", errors="replace").strip())
    return lines
