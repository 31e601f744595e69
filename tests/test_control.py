from __future__ import annotations

import asyncio

import pytest

from btctl.core.errors import CommandTimeoutError, ProcessFailureError, ToolMissingError
from btctl.tools.bluetoothctl import BluetoothCtl


class FakeProcess:
    def __init__(self, output: str, returncode: int = 0, *, hang: bool = False) -> None:
        self.output = output.encode("utf-8")
        self.returncode: int | None = None
        self._final = returncode
        self.hang = hang
        self.killed = False

    async def communicate(self) -> tuple[bytes, None]:
        if self.hang:
            await asyncio.sleep(3600)
        self.returncode = self._final
        return self.output, None

    def kill(self) -> None:
        self.killed = True

    async def wait(self) -> int:
        self.returncode = -9 if self.killed else self._final
        return self.returncode


def _install(monkeypatch: pytest.MonkeyPatch, responses: dict[tuple[str, ...], FakeProcess]) -> list[tuple[str, ...]]:
    calls: list[tuple[str, ...]] = []

    async def fake_exec(*cmd, **kwargs):
        calls.append(tuple(cmd))
        try:
            return responses[tuple(cmd[1:])]
        except KeyError:
            raise AssertionError(f"Unexpected cmd: {cmd}") from None

    monkeypatch.setattr(asyncio, "create_subprocess_exec", fake_exec)
    return calls


def test_is_powered_reads_show_output(monkeypatch: pytest.MonkeyPatch) -> None:
    _install(monkeypatch, {("show",): FakeProcess("Controller 00:1A:7D:DA:71:13\n\tPowered: yes\n")})
    assert asyncio.run(BluetoothCtl().is_powered()) is True


def test_is_connected_for_address(monkeypatch: pytest.MonkeyPatch) -> None:
    calls = _install(
        monkeypatch,
        {("info", "AA:BB:CC:DD:EE:FF"): FakeProcess("Device AA:BB:CC:DD:EE:FF\n\tConnected: no\n")},
    )
    assert asyncio.run(BluetoothCtl().is_connected("AA:BB:CC:DD:EE:FF")) is False
    assert calls == [("bluetoothctl", "info", "AA:BB:CC:DD:EE:FF")]


def test_is_connected_without_device_tolerates_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    _install(monkeypatch, {("info",): FakeProcess("Missing device address argument\n", returncode=1)})
    assert asyncio.run(BluetoothCtl().is_connected()) is False


def test_non_zero_exit_carries_output(monkeypatch: pytest.MonkeyPatch) -> None:
    _install(
        monkeypatch,
        {("connect", "AA:BB:CC:DD:EE:FF"): FakeProcess("Failed to connect: org.bluez.Error.Failed\n", returncode=1)},
    )

    with pytest.raises(ProcessFailureError) as exc:
        asyncio.run(BluetoothCtl().connect("AA:BB:CC:DD:EE:FF"))

    assert exc.value.returncode == 1
    assert "org.bluez.Error.Failed" in exc.value.output
    assert "org.bluez.Error.Failed" in str(exc.value)


def test_devices_parses_listing(monkeypatch: pytest.MonkeyPatch) -> None:
    _install(
        monkeypatch,
        {("devices",): FakeProcess("Device AA:BB:CC:DD:EE:FF Pixel Buds\nDevice 11:22:33:44:55:66 Speaker\n")},
    )
    assert asyncio.run(BluetoothCtl().devices()) == {
        "Pixel Buds": "AA:BB:CC:DD:EE:FF",
        "Speaker": "11:22:33:44:55:66",
    }


def test_devices_failure_is_process_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    _install(monkeypatch, {("devices",): FakeProcess("No default controller available\n", returncode=1)})
    with pytest.raises(ProcessFailureError):
        asyncio.run(BluetoothCtl().devices())


def test_timeout_kills_process(monkeypatch: pytest.MonkeyPatch) -> None:
    proc = FakeProcess("", hang=True)
    _install(monkeypatch, {("power", "on"): proc})

    with pytest.raises(CommandTimeoutError):
        asyncio.run(BluetoothCtl(timeout_s=0.01).power_on())

    assert proc.killed


def test_missing_binary_when_spawning(monkeypatch: pytest.MonkeyPatch) -> None:
    async def fake_exec(*cmd, **kwargs):
        raise FileNotFoundError(cmd[0])

    monkeypatch.setattr(asyncio, "create_subprocess_exec", fake_exec)

    with pytest.raises(ToolMissingError):
        asyncio.run(BluetoothCtl("no-such-bluetoothctl").power_off())


def test_check_uses_path_lookup(monkeypatch: pytest.MonkeyPatch) -> None:
    import shutil

    monkeypatch.setattr(shutil, "which", lambda name: None)
    with pytest.raises(ToolMissingError):
        BluetoothCtl().check()
