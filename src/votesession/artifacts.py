"""Contract interface description (ABI) loading."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from importlib.resources import files
from pathlib import Path
from typing import Any

from votesession.errors import ConfigurationError

type AbiEntry = Mapping[str, Any]
type Interface = tuple[AbiEntry, ...]

BUNDLED_ARTIFACT = "Voting.json"
READ_ONLY_MUTABILITY = frozenset({"view", "pure"})


def parse_interface(document: Any) -> Interface:
    """Extract the ABI from a build artifact or a bare ABI list."""

    abi = document.get("abi") if isinstance(document, Mapping) else document
    if isinstance(abi, (str, bytes)) or not isinstance(abi, Sequence):
        raise ConfigurationError("interface description must be a list of ABI entries")
    return tuple(abi)


def load_interface(path: Path | None = None) -> Interface:
    """Load the interface description from ``path`` or the bundled artifact."""

    try:
        if path is None:
            raw = (files("votesession") / "data" / BUNDLED_ARTIFACT).read_text(encoding="utf-8")
        else:
            raw = path.read_text(encoding="utf-8")
        document = json.loads(raw)
    except (OSError, ValueError) as exc:
        source = path or BUNDLED_ARTIFACT
        raise ConfigurationError(f"cannot read interface artifact {source}: {exc}") from exc
    return parse_interface(document)


def function_entries(interface: Interface) -> list[AbiEntry]:
    return [entry for entry in interface if isinstance(entry, Mapping) and entry.get("type") == "function"]


def find_function(interface: Interface, name: str) -> AbiEntry | None:
    for entry in function_entries(interface):
        if entry.get("name") == name:
            return entry
    return None


def is_read_only(entry: AbiEntry) -> bool:
    """Tell whether an ABI function entry is a read-only call.

    Legacy artifacts only carry ``constant``; newer ones carry ``stateMutability``.
    """

    mutability = entry.get("stateMutability")
    if mutability is not None:
        return mutability in READ_ONLY_MUTABILITY
    return bool(entry.get("constant", False))
