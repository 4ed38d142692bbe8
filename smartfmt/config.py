"""Workspace configuration support for smartfmt."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import tomllib

from smartfmt.errors import ConfigError
from smartfmt.formatting.core import FORMAT_MODEL_FIELDS, KNOWN_FORMATTERS, SORT_IMPORTS, FormattingOptions

CONFIG_FILENAMES = ("smartfmt.toml", ".smartfmtrc")


def _default_formatters() -> Dict[str, List[str]]:
    return {
        "typescript": [SORT_IMPORTS],
        "typescriptreact": [SORT_IMPORTS],
        "prisma": [FORMAT_MODEL_FIELDS],
    }


@dataclass
class FieldSettings:
    """Settings for the model field aligner."""

    indent: int = 2
    location_prefixes: Tuple[str, ...] = ("@map", "@relation")
    width_prefixes: Tuple[str, ...] = ("@map",)


@dataclass
class FormatterConfig:
    """Resolved formatter configuration."""

    root: Optional[Path] = None
    formatters: Dict[str, List[str]] = field(default_factory=_default_formatters)
    fields: FieldSettings = field(default_factory=FieldSettings)
    source: Optional[Path] = None

    def formatters_for(self, language_id: Optional[str]) -> List[str]:
        if not language_id:
            return []
        return list(self.formatters.get(language_id, []))

    def options(self) -> FormattingOptions:
        return FormattingOptions(
            field_indent=self.fields.indent,
            location_prefixes=self.fields.location_prefixes,
            width_prefixes=self.fields.width_prefixes,
        )


def _read_json_config(path: Path) -> Dict[str, Any]:
    content = path.read_text(encoding="utf-8")
    try:
        return json.loads(content)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON: {exc.msg}", path=str(path), line=exc.lineno, column=exc.colno) from exc


def _read_toml_config(path: Path) -> Dict[str, Any]:
    with path.open("rb") as handle:
        try:
            return tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML: {exc}", path=str(path)) from exc


def _string_tuple(value: Any, default: Tuple[str, ...], *, key: str, path: Path) -> Tuple[str, ...]:
    if value is None:
        return default
    if isinstance(value, str):
        return (value,)
    if isinstance(value, (list, tuple)):
        return tuple(str(item) for item in value)
    raise ConfigError(f"'{key}' must be a string or a list of strings", path=str(path))


def _parse_formatters(data: Dict[str, Any], path: Path) -> Dict[str, List[str]]:
    section = data.get("formatters")
    if section is None:
        return _default_formatters()
    if not isinstance(section, dict):
        raise ConfigError("'formatters' must map language ids to formatter names", path=str(path))
    formatters: Dict[str, List[str]] = {}
    for language_id, names in section.items():
        if isinstance(names, str):
            names = [names]
        if not isinstance(names, (list, tuple)):
            raise ConfigError(f"Formatters for '{language_id}' must be a list", path=str(path))
        for name in names:
            if name not in KNOWN_FORMATTERS:
                raise ConfigError(
                    f"Unknown formatter '{name}' for '{language_id}'",
                    path=str(path),
                    hint=f"Expected one of: {', '.join(KNOWN_FORMATTERS)}",
                )
        formatters[str(language_id)] = [str(name) for name in names]
    return formatters


def _parse_fields(data: Dict[str, Any], path: Path) -> FieldSettings:
    section = data.get("fields") or {}
    if not isinstance(section, dict):
        raise ConfigError("'fields' must be a table", path=str(path))
    defaults = FieldSettings()
    indent_raw = section.get("indent", defaults.indent)
    try:
        indent = int(indent_raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"'fields.indent' must be an integer, got {indent_raw!r}", path=str(path)) from exc
    if indent < 0:
        raise ConfigError("'fields.indent' must not be negative", path=str(path))
    return FieldSettings(
        indent=indent,
        location_prefixes=_string_tuple(
            section.get("location_prefixes"), defaults.location_prefixes, key="fields.location_prefixes", path=path
        ),
        width_prefixes=_string_tuple(
            section.get("width_prefixes"), defaults.width_prefixes, key="fields.width_prefixes", path=path
        ),
    )


def locate_config_file(root: Path, explicit: Optional[Path] = None) -> Optional[Path]:
    if explicit is not None:
        return explicit if explicit.exists() else None
    for candidate in CONFIG_FILENAMES:
        path = root / candidate
        if path.exists():
            return path
    return None


def load_config(root: Path, explicit: Optional[Path] = None) -> FormatterConfig:
    root = root.resolve()
    config_path = locate_config_file(root, explicit)
    if config_path is None:
        return FormatterConfig(root=root)

    if config_path.suffix == ".toml":
        data = _read_toml_config(config_path)
    else:
        data = _read_json_config(config_path)
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a table/object", path=str(config_path))

    return FormatterConfig(
        root=root,
        formatters=_parse_formatters(data, config_path),
        fields=_parse_fields(data, config_path),
        source=config_path,
    )


def known_languages(config: FormatterConfig) -> Sequence[str]:
    return sorted(config.formatters)


__all__ = [
    "CONFIG_FILENAMES",
    "FieldSettings",
    "FormatterConfig",
    "locate_config_file",
    "load_config",
    "known_languages",
]
