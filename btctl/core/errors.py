"""Domain-specific errors for btctl."""

from __future__ import annotations


class BtctlError(Exception):
    """Base error for btctl."""


class ConfigError(BtctlError):
    """Raised when the configuration file cannot be read or is invalid."""


class ToolMissingError(BtctlError):
    """Raised when a required external binary is not on PATH."""


class ProcessFailureError(BtctlError):
    """Raised when an external command exits with a non-zero status."""

    def __init__(self, command: tuple[str, ...], returncode: int | None, output: str) -> None:
        self.command = command
        self.returncode = returncode
        self.output = output
        detail = output.strip() or "<no output>"
        super().__init__(f"'{' '.join(command)}' exited with status {returncode}: {detail}")


class CommandTimeoutError(ProcessFailureError):
    """Raised when an external command outlives its deadline and is killed."""

    def __init__(self, command: tuple[str, ...], timeout_s: float | None) -> None:
        super().__init__(command, None, f"timed out after {timeout_s}s")
        self.timeout_s = timeout_s


class MalformedOutputError(BtctlError):
    """Raised when tool output does not have the expected line shape."""


class MalformedSelectionError(MalformedOutputError):
    """Raised when the menu reports a selection without the column delimiter."""


class LastDeviceValidationError(BtctlError):
    """Raised when a last-device value is not a 17 character address."""


class DeviceSelectionError(BtctlError):
    """Raised when no target device can be determined."""


class OperationTimeoutError(BtctlError):
    """Raised when a whole operation outlives its shared deadline."""
