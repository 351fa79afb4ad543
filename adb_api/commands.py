import logging
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import ValidationError

from .catalog import Catalog, CommandDescriptor, DEFAULT_CATALOG, keyevent_command, validate_entry
from .models import CommandEntry

logger = logging.getLogger("adb_api.commands")


def to_descriptor(entry: CommandEntry) -> CommandDescriptor:
    """Materialize a YAML entry; ``key`` entries become ``input keyevent N``."""
    command = keyevent_command(entry.key) if entry.key is not None else entry.command.strip()
    return CommandDescriptor(
        name=entry.name,
        description=entry.description or entry.name,
        command=command,
    )


def load_commands(commands_file: Path) -> List[tuple[str, CommandDescriptor]]:
    """
    Read extra trigger phrases from a YAML list.

    Returns ``(phrase, descriptor)`` pairs in file order. A missing, unreadable or empty
    file yields an empty list; malformed entries (bad shape, unknown key name)
    are logged and skipped so one typo does not take the whole file down.
    """
    if not commands_file.exists():
        logger.warning(f"Commands file not found: {commands_file}")
        return []
    try:
        data = yaml.safe_load(commands_file.read_text(encoding="utf-8"))
    except (yaml.YAMLError, OSError, UnicodeDecodeError) as e:
        logger.warning(f"Could not read commands file {commands_file}: {e}")
        return []
    if not data:
        return []
    if not isinstance(data, list):
        logger.warning(f"Commands file must contain a list, got {type(data).__name__}")
        return []

    commands = []
    for idx, item in enumerate(data):
        if not isinstance(item, dict):
            logger.warning(f"Skipping entry #{idx}: expected a mapping")
            continue
        try:
            entry = CommandEntry(**item)
            descriptor = to_descriptor(entry)
            validate_entry(entry.phrase, descriptor)
            commands.append((entry.phrase, descriptor))
        except (ValidationError, ValueError) as e:
            logger.warning(f"Skipping entry #{idx} ({item.get('phrase')!r}): {e}")
    return commands


def build_catalog(commands_file: Optional[Path] = None, base: Catalog = DEFAULT_CATALOG) -> Catalog:
    """Built-in phrases first, then any extras from ``commands_file``."""
    if commands_file is None:
        return base
    extra = load_commands(commands_file)
    catalog = base.extend(extra)
    logger.info(f"📚 Loaded {len(catalog) - len(base)} extra phrases from {commands_file}")
    return catalog
