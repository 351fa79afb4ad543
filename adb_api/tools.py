from __future__ import annotations

import shlex
import time
from dataclasses import dataclass
from typing import Callable, Optional, Type

from pydantic import BaseModel, Field, ValidationError, field_validator

from .catalog import KEY_EVENTS, key_code
from .device import AdbClient, AdbCommandError
from .logging_utils import create_session_id, log_execution, setup_logger
from .models import ToolDefinition, ToolResult
from .resolver import CommandResolver


PACKAGE_NAME_PATTERN = r"^[A-Za-z0-9_]+(\.[A-Za-z0-9_]+)*$"


class SelectDeviceArgs(BaseModel):
    device_id: str = Field(..., min_length=1, description="The device ID to select")


class NaturalArgs(BaseModel):
    action: str = Field(..., description="Natural language description of the action to perform")


class KeyEventArgs(BaseModel):
    key: str = Field(..., description=f"Key name or code. Available keys: {', '.join(KEY_EVENTS)}")

    @field_validator("key", mode="before")
    @classmethod
    def _int_to_str(cls, v):
        return str(v) if isinstance(v, int) else v


class TapArgs(BaseModel):
    x: int = Field(..., description="X coordinate")
    y: int = Field(..., description="Y coordinate")


class SwipeArgs(BaseModel):
    x1: int = Field(..., description="Starting X coordinate")
    y1: int = Field(..., description="Starting Y coordinate")
    x2: int = Field(..., description="Ending X coordinate")
    y2: int = Field(..., description="Ending Y coordinate")
    duration: int = Field(300, ge=0, description="Duration in milliseconds (optional)")


class TextArgs(BaseModel):
    text: str = Field(..., description="Text to type")


class PackageArgs(BaseModel):
    package_name: str = Field(..., pattern=PACKAGE_NAME_PATTERN, description="Package name of the app")


class ListPackagesArgs(BaseModel):
    filter: Optional[str] = Field(None, description="Optional filter string to search for specific packages")


class CustomArgs(BaseModel):
    command: str = Field(..., min_length=1, description="Custom shell command to execute")


def escape_input_text(text: str) -> str:
    """Escape text for ``input text``: quotes are backslashed, spaces become %s."""
    return text.replace("'", "\\'").replace('"', '\\"').replace(" ", "%s")


def parse_packages(output: str) -> list[str]:
    return [
        line.strip()[len("package:"):]
        for line in output.splitlines()
        if line.strip().startswith("package:")
    ]


@dataclass(frozen=True)
class Tool:
    name: str
    description: str
    args_model: Type[BaseModel]
    handler: Callable[[BaseModel, "ShellRecorder"], str]

    def definition(self) -> ToolDefinition:
        schema = self.args_model.model_json_schema()
        schema.pop("title", None)
        return ToolDefinition(name=self.name, description=self.description, inputSchema=schema)


class ToolCallError(Exception):
    """A tool call that should be reported back to the caller as an error."""


class ShellRecorder:
    """Per-call view of the device that remembers which shell commands ran."""

    def __init__(self, device: AdbClient):
        self._device = device
        self.commands: list[str] = []

    def select_device(self, serial: Optional[str]) -> None:
        self._device.select_device(serial)

    def shell(self, command: str) -> str:
        self.commands.append(command)
        return self._device.shell(command)

    def summary(self) -> Optional[str]:
        return "; ".join(self.commands) or None


class DeviceTools:
    """Registry and dispatcher for the device-control tools.

    Every call returns a ToolResult; failures are folded into an error
    envelope instead of propagating to the transport.
    """

    def __init__(self, device: AdbClient, resolver: Optional[CommandResolver] = None, logger=None):
        self.device = device
        self.resolver = resolver or CommandResolver()
        self.logger = logger or setup_logger("adb_api.tools")
        self._tools: dict[str, Tool] = {}
        for tool in self._build_tools():
            self._tools[tool.name] = tool

    def _build_tools(self) -> list[Tool]:
        return [
            Tool("adb_select_device", "Select a specific device for subsequent commands",
                 SelectDeviceArgs, self._select_device),
            Tool("adb_natural",
                 'Execute ADB command using natural language (e.g., "go home", "take screenshot", "swipe up")',
                 NaturalArgs, self._natural),
            Tool("adb_keyevent", "Send a key event to the device", KeyEventArgs, self._keyevent),
            Tool("adb_tap", "Tap at specific coordinates on the screen", TapArgs, self._tap),
            Tool("adb_swipe", "Perform a swipe gesture on the screen", SwipeArgs, self._swipe),
            Tool("adb_text", "Type text on the device", TextArgs, self._text),
            Tool("adb_launch_app", "Launch an app by package name", PackageArgs, self._launch_app),
            Tool("adb_clear_app", "Clear app data and cache", PackageArgs, self._clear_app),
            Tool("adb_list_packages", "List installed packages on the device", ListPackagesArgs, self._list_packages),
            Tool("adb_custom", "Execute a custom ADB shell command", CustomArgs, self._custom),
        ]

    def names(self) -> list[str]:
        return list(self._tools)

    def has_tool(self, name: str) -> bool:
        return name in self._tools

    def definitions(self) -> list[ToolDefinition]:
        return [tool.definition() for tool in self._tools.values()]

    def call(self, name: str, arguments: Optional[dict] = None) -> ToolResult:
        session_id = create_session_id()
        start_time = time.time()
        arguments = arguments or {}
        device = ShellRecorder(self.device)

        try:
            tool = self._tools.get(name)
            if tool is None:
                raise ToolCallError(f"Unknown tool: {name}")
            args = tool.args_model.model_validate(arguments)
            text = tool.handler(args, device)
        except ValidationError as e:
            return self._fail(session_id, name, arguments, start_time, device, _format_validation_error(e))
        except (ToolCallError, AdbCommandError, ValueError) as e:
            return self._fail(session_id, name, arguments, start_time, device, str(e))

        duration_ms = (time.time() - start_time) * 1000
        log_execution(self.logger, session_id, name, arguments, True, duration_ms,
                      result_text=text, command=device.summary())
        return ToolResult.text(text)

    def _fail(self, session_id: str, name: str, arguments: dict, start_time: float,
              device: ShellRecorder, message: str) -> ToolResult:
        duration_ms = (time.time() - start_time) * 1000
        log_execution(self.logger, session_id, name, arguments, False, duration_ms,
                      command=device.summary(), error=message)
        return ToolResult.error(message)

    # Handlers ----------------------------------------------------------

    def _select_device(self, args: SelectDeviceArgs, device: ShellRecorder) -> str:
        device.select_device(args.device_id)
        return f"Selected device: {args.device_id}"

    def _natural(self, args: NaturalArgs, device: ShellRecorder) -> str:
        command = self.resolver.resolve(args.action)
        if command is None:
            available = ", ".join(self.resolver.catalog.phrases())
            raise ToolCallError(
                f'Could not understand action: "{args.action}". Available commands: {available}'
            )
        result = device.shell(command.command)
        return f"Executed: {command.name}\nCommand: adb shell {command.command}\n{result}"

    def _keyevent(self, args: KeyEventArgs, device: ShellRecorder) -> str:
        code = key_code(args.key)
        result = device.shell(f"input keyevent {code}")
        return f"Sent key event: {args.key} (code: {code})\n{result}"

    def _tap(self, args: TapArgs, device: ShellRecorder) -> str:
        result = device.shell(f"input tap {args.x} {args.y}")
        return f"Tapped at ({args.x}, {args.y})\n{result}"

    def _swipe(self, args: SwipeArgs, device: ShellRecorder) -> str:
        result = device.shell(
            f"input swipe {args.x1} {args.y1} {args.x2} {args.y2} {args.duration}"
        )
        return f"Swiped from ({args.x1}, {args.y1}) to ({args.x2}, {args.y2}) over {args.duration}ms\n{result}"

    def _text(self, args: TextArgs, device: ShellRecorder) -> str:
        result = device.shell(f"input text '{escape_input_text(args.text)}'")
        return f'Typed text: "{args.text}"\n{result}'

    def _launch_app(self, args: PackageArgs, device: ShellRecorder) -> str:
        result = device.shell(
            f"monkey -p {args.package_name} -c android.intent.category.LAUNCHER 1"
        )
        return f"Launched app: {args.package_name}\n{result}"

    def _clear_app(self, args: PackageArgs, device: ShellRecorder) -> str:
        result = device.shell(f"pm clear {args.package_name}")
        return f"Cleared app data: {args.package_name}\n{result}"

    def _list_packages(self, args: ListPackagesArgs, device: ShellRecorder) -> str:
        command = "pm list packages"
        if args.filter:
            command += f" | grep -i {shlex.quote(args.filter)}"
        packages = "\n".join(parse_packages(device.shell(command)))
        if args.filter:
            return f'Packages matching "{args.filter}":\n{packages}'
        return f"All installed packages:\n{packages}"

    def _custom(self, args: CustomArgs, device: ShellRecorder) -> str:
        result = device.shell(args.command)
        return f"Executed: {args.command}\n{result}"


def _format_validation_error(e: ValidationError) -> str:
    parts = []
    for err in e.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "arguments"
        parts.append(f"{loc}: {err.get('msg')}")
    return "Invalid arguments: " + "; ".join(parts)
