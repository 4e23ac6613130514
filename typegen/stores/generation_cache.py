"""Incremental-build cache that skips regeneration when nothing changed."""

from __future__ import annotations

import hashlib
import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence

from ..config import GenerateConfig
from ..logging import get_logger
from ..models import CommandInfo, EventInfo, TypeDefinition

_CACHE_VERSION = 1
CACHE_FILENAME = ".typecache"

_LOGGER = get_logger("stores.generation_cache")

_CONFIG_KEYS = (
    "validation_library",
    "include_private",
    "type_mappings",
    "default_parameter_case",
    "default_field_case",
)


def _digest(payload: Any) -> str:
    text = json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def hash_commands(commands: Sequence[CommandInfo], events: Sequence[EventInfo] = ()) -> str:
    """Hash commands, their channels and the discovered events in discovery order."""
    return _digest(
        {
            "commands": [asdict(command) for command in commands],
            "events": [asdict(event) for event in events],
        }
    )


def hash_types(types: Mapping[str, TypeDefinition]) -> str:
    return _digest([asdict(types[name]) for name in sorted(types)])


def hash_config(config: GenerateConfig) -> str:
    return _digest({key: getattr(config, key) for key in _CONFIG_KEYS})


@dataclass
class GenerationCache:
    """Fingerprint of the inputs of the last successful generation."""

    commands_hash: str
    structs_hash: str
    config_hash: str
    combined_hash: str
    version: int = _CACHE_VERSION

    @classmethod
    def build(
        cls,
        commands: Sequence[CommandInfo],
        types: Mapping[str, TypeDefinition],
        config: GenerateConfig,
        events: Sequence[EventInfo] = (),
    ) -> "GenerationCache":
        commands_hash = hash_commands(commands, events)
        structs_hash = hash_types(types)
        config_hash = hash_config(config)
        combined = hashlib.sha256(
            f"{commands_hash}{structs_hash}{config_hash}".encode("utf-8")
        ).hexdigest()
        return cls(
            commands_hash=commands_hash,
            structs_hash=structs_hash,
            config_hash=config_hash,
            combined_hash=combined,
        )

    @staticmethod
    def cache_path(output_dir: Path | str) -> Path:
        return Path(output_dir) / CACHE_FILENAME

    @classmethod
    def load(cls, output_dir: Path | str) -> Optional["GenerationCache"]:
        """Return the stored cache, or ``None`` when it is missing or unreadable."""
        path = cls.cache_path(output_dir)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, json.JSONDecodeError) as exc:
            _LOGGER.warning("Ignoring unreadable generation cache %s: %s", path, exc)
            return None
        if not isinstance(data, dict):
            return None
        fields: Dict[str, Any] = {}
        for key in ("commands_hash", "structs_hash", "config_hash", "combined_hash"):
            value = data.get(key)
            if not isinstance(value, str):
                return None
            fields[key] = value
        version = data.get("version")
        if not isinstance(version, int):
            return None
        return cls(version=version, **fields)

    def save(self, output_dir: Path | str) -> Path:
        path = self.cache_path(output_dir)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(asdict(self), indent=2, sort_keys=True), encoding="utf-8")
        return path


def needs_regeneration(
    output_dir: Path | str,
    commands: Sequence[CommandInfo],
    types: Mapping[str, TypeDefinition],
    config: GenerateConfig,
    events: Sequence[EventInfo] = (),
) -> bool:
    previous = GenerationCache.load(output_dir)
    if previous is None:
        return True
    if previous.version != _CACHE_VERSION:
        _LOGGER.debug("Generation cache version %s is stale", previous.version)
        return True
    current = GenerationCache.build(commands, types, config, events)
    return previous.combined_hash != current.combined_hash


__all__ = [
    "CACHE_FILENAME",
    "GenerationCache",
    "hash_commands",
    "hash_config",
    "hash_types",
    "needs_regeneration",
]
