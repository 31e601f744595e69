from __future__ import annotations

import asyncio

from btctl.core.streams import read_lines


class FailingStream:
    def __init__(self, lines: list[bytes]) -> None:
        self._lines = list(lines)

    async def readline(self) -> bytes:
        if self._lines:
            return self._lines.pop(0)
        raise OSError("pipe closed")


def test_read_lines_until_eof() -> None:
    async def _run() -> list[str]:
        reader = asyncio.StreamReader()
        reader.feed_data(b"Pixel Buds|AA:BB:CC:DD:EE:FF|\n  second  \nlast")
        reader.feed_eof()
        return await read_lines(reader)

    assert asyncio.run(_run()) == ["Pixel Buds|AA:BB:CC:DD:EE:FF|", "second", "last"]


def test_read_lines_empty_stream() -> None:
    async def _run() -> list[str]:
        reader = asyncio.StreamReader()
        reader.feed_eof()
        return await read_lines(reader)

    assert asyncio.run(_run()) == []


def test_read_error_truncates_silently() -> None:
    stream = FailingStream([b"one\n", b"two\n"])
    assert asyncio.run(read_lines(stream)) == ["one", "two"]
