from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Optional


KEY_EVENTS: Mapping[str, int] = MappingProxyType({
    "HOME": 3,
    "BACK": 4,
    "CALL": 5,
    "END_CALL": 6,
    "VOLUME_UP": 24,
    "VOLUME_DOWN": 25,
    "POWER": 26,
    "CAMERA": 27,
    "CLEAR": 28,
    "ENTER": 66,
    "TAB": 61,
    "SPACE": 62,
    "DELETE": 67,
    "ESCAPE": 111,
    "DPAD_UP": 19,
    "DPAD_DOWN": 20,
    "DPAD_LEFT": 21,
    "DPAD_RIGHT": 22,
    "DPAD_CENTER": 23,
    "MENU": 82,
    "NOTIFICATION": 83,
    "SEARCH": 84,
    "PLAY_PAUSE": 85,
    "STOP": 86,
    "NEXT": 87,
    "PREVIOUS": 88,
    "REWIND": 89,
    "FAST_FORWARD": 90,
    "MUTE": 91,
    "PAGE_UP": 92,
    "PAGE_DOWN": 93,
    "SETTINGS": 176,
    "BRIGHTNESS_UP": 221,
    "BRIGHTNESS_DOWN": 220,
    "SLEEP": 223,
    "WAKEUP": 224,
    "APP_SWITCH": 187,
    "ASSIST": 219,
    "SCREENSHOT": 120,
    "LOCK": 276,
})

_PLACEHOLDER_RE = re.compile(r"\{[^}]*\}")


class UnknownKeyError(ValueError):
    """Raised when a key name is neither in KEY_EVENTS nor an integer code."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Unknown key: {key}. Available keys: {', '.join(KEY_EVENTS)}")


def key_code(key: str) -> int:
    """Resolve a symbolic key name (any case) or a numeric string to a key code."""
    k = (key or "").strip()
    if k.upper() in KEY_EVENTS:
        return KEY_EVENTS[k.upper()]
    if k.isascii() and k.isdigit():
        return int(k)
    raise UnknownKeyError(key)


def keyevent_command(key: str) -> str:
    return f"input keyevent {key_code(key)}"


@dataclass(frozen=True)
class CommandDescriptor:
    name: str
    description: str
    command: str


def normalize_phrase(phrase: str) -> str:
    """Lowercase, with words separated by exactly one space."""
    return " ".join((phrase or "").split()).lower()


def validate_entry(phrase: str, descriptor: CommandDescriptor) -> None:
    if not phrase or phrase != normalize_phrase(phrase):
        raise ValueError(f"Catalog phrase must be non-empty, lowercase, single-spaced words: {phrase!r}")
    if not descriptor.command.strip():
        raise ValueError(f"Empty command for phrase {phrase!r}")
    if _PLACEHOLDER_RE.search(descriptor.command):
        raise ValueError(f"Unresolved placeholder in command for {phrase!r}: {descriptor.command}")


class Catalog:
    """Read-only, insertion-ordered table of trigger phrases.

    Order matters: the resolver walks entries front to back and the first hit
    wins, so earlier entries take priority over later ones.
    """

    __slots__ = ("_entries", "_index")

    def __init__(self, entries: Iterable[tuple[str, CommandDescriptor]] = ()):
        items: list[tuple[str, CommandDescriptor]] = []
        index: dict[str, CommandDescriptor] = {}
        for phrase, descriptor in entries:
            validate_entry(phrase, descriptor)
            if phrase in index:
                raise ValueError(f"Duplicate catalog phrase: {phrase!r}")
            items.append((phrase, descriptor))
            index[phrase] = descriptor
        self._entries = tuple(items)
        self._index = MappingProxyType(index)

    def get(self, phrase: str) -> Optional[CommandDescriptor]:
        return self._index.get(phrase)

    def phrases(self) -> list[str]:
        return [phrase for phrase, _ in self._entries]

    def items(self) -> tuple[tuple[str, CommandDescriptor], ...]:
        return self._entries

    def extend(self, entries: Iterable[tuple[str, CommandDescriptor]]) -> "Catalog":
        """Return a new catalog with ``entries`` appended; known phrases are skipped."""
        merged = list(self._entries)
        seen = set(self._index)
        for phrase, descriptor in entries:
            if phrase in seen:
                continue
            seen.add(phrase)
            merged.append((phrase, descriptor))
        return Catalog(merged)

    def __iter__(self) -> Iterator[str]:
        return iter(self.phrases())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, phrase: object) -> bool:
        return phrase in self._index

    def __repr__(self) -> str:
        return f"Catalog({len(self)} phrases)"


def _key(name: str, description: str, key: str) -> CommandDescriptor:
    return CommandDescriptor(name=name, description=description, command=keyevent_command(key))


def _swipe(name: str, description: str, x1: int, y1: int, x2: int, y2: int, duration: int = 300) -> CommandDescriptor:
    return CommandDescriptor(
        name=name,
        description=description,
        command=f"input swipe {x1} {y1} {x2} {y2} {duration}",
    )


def build_default_catalog() -> Catalog:
    return Catalog([
        ("go home", _key("Go to Home Screen", "Navigate to the Android home screen", "HOME")),
        ("go back", _key("Go Back", "Navigate back to the previous screen", "BACK")),
        ("press enter", _key("Press Enter", "Press the enter/confirm key", "ENTER")),
        ("open recent apps", _key("Open Recent Apps", "Open the recent applications switcher", "APP_SWITCH")),
        ("open notifications", _key("Open Notifications", "Open the notification panel", "NOTIFICATION")),
        ("take screenshot", _key("Take Screenshot", "Capture a screenshot of the current screen", "SCREENSHOT")),
        ("volume up", _key("Volume Up", "Increase the device volume", "VOLUME_UP")),
        ("volume down", _key("Volume Down", "Decrease the device volume", "VOLUME_DOWN")),
        ("lock screen", _key("Lock Screen", "Lock the device screen", "LOCK")),
        ("wake up", _key("Wake Up", "Wake up the device from sleep", "WAKEUP")),
        ("open settings", _key("Open Settings", "Open the Android settings app", "SETTINGS")),
        ("play pause", _key("Play/Pause", "Toggle play/pause for media", "PLAY_PAUSE")),
        ("next track", _key("Next Track", "Skip to the next media track", "NEXT")),
        ("previous track", _key("Previous Track", "Go to the previous media track", "PREVIOUS")),
        ("swipe up", _swipe("Swipe Up", "Perform a swipe up gesture", 500, 1500, 500, 300)),
        ("swipe down", _swipe("Swipe Down", "Perform a swipe down gesture", 500, 300, 500, 1500)),
        ("swipe left", _swipe("Swipe Left", "Perform a swipe left gesture", 900, 500, 100, 500)),
        ("swipe right", _swipe("Swipe Right", "Perform a swipe right gesture", 100, 500, 900, 500)),
    ])


DEFAULT_CATALOG = build_default_catalog()
