"""Configuration loading for typegen (.typegen.yml or tauri.conf.json)."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .naming import RenameRule

CONFIG_FILENAME = ".typegen.yml"
VALIDATION_LIBRARIES = ("none", "zod")

# tauri.conf.json key -> GenerateConfig attribute
_TAURI_KEYS: Dict[str, str] = {
    "projectPath": "project_path",
    "outputPath": "output_path",
    "validationLibrary": "validation_library",
    "verbose": "verbose",
    "visualizeDeps": "visualize_deps",
    "includePrivate": "include_private",
    "typeMappings": "type_mappings",
    "excludePatterns": "exclude_patterns",
    "includePatterns": "include_patterns",
    "defaultParameterCase": "default_parameter_case",
    "defaultFieldCase": "default_field_case",
}

_STRING_KEYS = {
    "project_path",
    "output_path",
    "validation_library",
    "default_parameter_case",
    "default_field_case",
}
_BOOL_KEYS = {"verbose", "visualize_deps", "include_private"}
_LIST_KEYS = {"exclude_patterns", "include_patterns"}


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed or is invalid."""


@dataclass
class GenerateConfig:
    """Settings for one generation run."""

    project_path: str = "./src-tauri"
    output_path: str = "./src/generated"
    validation_library: str = "none"
    verbose: bool = False
    visualize_deps: bool = False
    include_private: bool = False
    type_mappings: Dict[str, str] = field(default_factory=dict)
    exclude_patterns: List[str] = field(default_factory=list)
    include_patterns: List[str] = field(default_factory=list)
    default_parameter_case: str = "camelCase"
    default_field_case: str = "snake_case"

    def validate(self) -> None:
        if self.validation_library not in VALIDATION_LIBRARIES:
            raise ConfigError(
                f"Invalid validation library: {self.validation_library}. Use 'zod' or 'none'"
            )
        for attribute in ("default_parameter_case", "default_field_case"):
            value = getattr(self, attribute)
            if RenameRule.parse(value) is None:
                options = ", ".join(rule.value for rule in RenameRule)
                raise ConfigError(f"Invalid {attribute}: {value}. Expected one of: {options}")

    def merge(self, other: "GenerateConfig") -> None:
        """Overlay every value of ``other`` that differs from the defaults."""
        defaults = GenerateConfig()
        for item in fields(self):
            value = getattr(other, item.name)
            if value != getattr(defaults, item.name):
                setattr(self, item.name, _copy(value))

    def to_tauri_section(self) -> Dict[str, Any]:
        return {key: _copy(getattr(self, attribute)) for key, attribute in _TAURI_KEYS.items()}

    def save_to_tauri_config(self, path: Path) -> None:
        """Write this config into ``plugins.typegen`` of an existing tauri.conf.json."""
        if not path.exists():
            raise ConfigError(
                f"tauri.conf.json not found at {path}. Please ensure you have a Tauri project initialized."
            )
        data = _read_json(path)
        if not isinstance(data, dict):
            data = {}
        plugins = data.get("plugins")
        if not isinstance(plugins, dict):
            plugins = {}
            data["plugins"] = plugins
        plugins["typegen"] = self.to_tauri_section()
        path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")


def load_config(config_path: Path) -> GenerateConfig:
    """Load configuration from ``.typegen.yml`` or a ``tauri.conf.json``.

    A directory is searched for ``.typegen.yml``. A missing file yields the
    defaults, as does a ``tauri.conf.json`` without a ``plugins.typegen``
    section.
    """
    config_file = _resolve_config_path(config_path)
    if not config_file.exists():
        return GenerateConfig()

    if config_file.suffix == ".json":
        data = _read_json(config_file)
        if not isinstance(data, dict):
            raise ConfigError(f"{config_file.name} must contain an object at the root")
        section = _as_dict(_as_dict(data.get("plugins")).get("typegen"))
        values = {
            attribute: section[key] for key, attribute in _TAURI_KEYS.items() if key in section
        }
    else:
        loaded = _read_yaml(config_file)
        if not isinstance(loaded, dict):
            raise ConfigError(f"{config_file.name} must contain a mapping at the root")
        values = loaded

    config = _from_mapping(values)
    config.validate()
    return config


def find_tauri_config(project_path: Path) -> Optional[Path]:
    """Return the tauri.conf.json next to or above ``project_path``."""
    for directory in (project_path, project_path.parent):
        candidate = directory / "tauri.conf.json"
        if candidate.exists():
            return candidate
        nested = directory / "src-tauri" / "tauri.conf.json"
        if nested.exists():
            return nested
    return None


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_yaml(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc


def _from_mapping(data: Dict[str, Any]) -> GenerateConfig:
    config = GenerateConfig()
    for key, value in data.items():
        if key in _STRING_KEYS:
            text = _as_str(value)
            if text is not None:
                setattr(config, key, text)
        elif key in _BOOL_KEYS:
            flag = _as_bool(value)
            if flag is not None:
                setattr(config, key, flag)
        elif key in _LIST_KEYS:
            setattr(config, key, _as_str_list(value))
        elif key == "type_mappings":
            config.type_mappings = {
                str(name): str(target) for name, target in _as_dict(value).items()
            }
    return config


def _copy(value: Any) -> Any:
    if isinstance(value, dict):
        return dict(value)
    if isinstance(value, list):
        return list(value)
    return value


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "GenerateConfig",
    "VALIDATION_LIBRARIES",
    "find_tauri_config",
    "load_config",
]
