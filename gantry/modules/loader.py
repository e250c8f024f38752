"""Dynamic module loader.

Responsibilities:
 - Discover module-list files by name across a search path
 - Extract the ordered identifier list stored under the module key
 - Instantiate every identifier through the catalog and append it to the
   module set after the static modules

Ordering: static identifiers (program order), then each discovered file in
discovery order, each file's identifiers in file order.

Failure policy: any read/parse error, unknown identifier or constructor
failure aborts loading; nothing is appended to the set.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator, Sequence

import yaml
from yaml import YAMLError

from gantry.errors import ConfigDiscoveryError
from gantry.events import EventBus, ModuleFileDiscovered, ModuleRegistered

from .catalog import ModuleCatalog
from .descriptor import ModuleDescriptor, ModuleSet, Origin
from .manifest import ModuleList

log = logging.getLogger("gantry.modules")

DEFAULT_FILE_NAME = "gantry-modules.yaml"
DEFAULT_KEY = "modules"


def find_module_files(
    search_path: Iterable[str | Path], file_name: str = DEFAULT_FILE_NAME
) -> list[Path]:
    """Locate files named ``file_name``.

    Entries are visited in order. A directory contributes every matching
    file beneath it (sorted); a file entry counts when its name matches.
    Missing entries are skipped.
    """
    found: list[Path] = []
    seen: set[Path] = set()
    for entry in search_path:
        for path in _iter_entry(Path(entry), file_name):
            resolved = path.resolve()
            if resolved in seen:
                continue
            seen.add(resolved)
            found.append(path)
    return found


def _iter_entry(entry: Path, file_name: str) -> Iterator[Path]:
    if entry.is_dir():
        for path in sorted(entry.rglob(file_name)):
            if path.is_file():
                yield path
    elif entry.is_file() and entry.name == file_name:
        yield entry


def read_module_identifiers(path: Path, key: str = DEFAULT_KEY) -> list[str]:
    """Return identifiers listed under ``key`` (case-insensitive)."""
    try:
        raw_text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigDiscoveryError(
            f"Cannot read module list {path}: {e}", path=path
        ) from e
    try:
        data = yaml.safe_load(raw_text)
    except YAMLError as e:
        raise ConfigDiscoveryError(
            f"Invalid module list {path}: {e}", path=path
        ) from e
    if data is None:
        return []
    if not isinstance(data, dict):
        raise ConfigDiscoveryError(
            f"Invalid module list {path}: top level must be a mapping",
            path=path,
        )
    identifiers: list = []
    for prop_key, value in data.items():
        if str(prop_key).lower() != key.lower() or value is None:
            continue
        if not isinstance(value, list):
            raise ConfigDiscoveryError(
                f"Invalid module list {path}: '{prop_key}' must be a list",
                path=path,
            )
        identifiers.extend(value)
    try:
        return list(ModuleList(path=path, identifiers=identifiers).identifiers)
    except Exception as e:  # noqa: BLE001
        raise ConfigDiscoveryError(
            f"Invalid module list {path}: {e}", path=path
        ) from e


def load_modules(
    static_identifiers: Sequence[str],
    catalog: ModuleCatalog,
    search_path: Iterable[str | Path] = (),
    file_name: str = DEFAULT_FILE_NAME,
    key: str = DEFAULT_KEY,
    events: EventBus | None = None,
) -> ModuleSet:
    """Assemble the module set (static first, then discovered)."""
    batch: list[ModuleDescriptor] = []
    for identifier in static_identifiers:
        batch.append(
            ModuleDescriptor(
                identifier, Origin.STATIC, catalog.instantiate(identifier)
            )
        )
    files = find_module_files(search_path, file_name)
    for path in files:
        identifiers = read_module_identifiers(path, key)
        log.info("module list %s: %d module(s)", path, len(identifiers))
        if events is not None:
            events.emit(ModuleFileDiscovered(str(path), len(identifiers)))
        for identifier in identifiers:
            module = catalog.instantiate(identifier, source=path)
            batch.append(
                ModuleDescriptor(identifier, Origin.DYNAMIC, module, path)
            )
    module_set = ModuleSet()
    module_set.extend(batch)
    if events is not None:
        for pos, desc in enumerate(module_set):
            events.emit(
                ModuleRegistered(desc.identifier, desc.origin.value, pos)
            )
    return module_set


__all__ = [
    "find_module_files",
    "read_module_identifiers",
    "load_modules",
    "DEFAULT_FILE_NAME",
    "DEFAULT_KEY",
]
