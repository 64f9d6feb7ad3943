"""Configuration loading for jspack (jspack.yml)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .errors import ConfigError

CONFIG_FILENAMES = ("jspack.yml", "jspack.yaml", ".jspack.yml")
DEFAULT_OUTPUT_DIR = "dist"
DEFAULT_FILENAME = "bundle.js"
DEFAULT_EXTENSIONS = (".js", ".mjs")
DEFAULT_MAX_MODULES = 10_000
RESOLVE_MODES = ("base", "relative")


@dataclass
class OutputConfig:
    """Destination of the emitted bundle."""

    path: Path
    filename: str = DEFAULT_FILENAME

    @property
    def target(self) -> Path:
        return self.path / self.filename


@dataclass
class ResolveConfig:
    """How import specifiers are turned into file paths."""

    mode: str = "base"
    extensions: List[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))


@dataclass
class BuildConfig:
    """Represents the settings defined in jspack.yml merged with defaults."""

    root: Path
    entry: Optional[str] = None
    context: Optional[Path] = None
    output: Optional[OutputConfig] = None
    resolve: ResolveConfig = field(default_factory=ResolveConfig)
    dedupe: bool = True
    max_modules: int = DEFAULT_MAX_MODULES
    templates_dir: Optional[Path] = None

    def __post_init__(self) -> None:
        if self.output is None:
            self.output = OutputConfig(path=self.root / DEFAULT_OUTPUT_DIR)

    @property
    def entry_path(self) -> Path:
        """Absolute entry path; raises ConfigError when no entry is configured."""
        if not self.entry:
            raise ConfigError("entry cannot be empty")
        return Path(os.path.abspath(self.root / self.entry))

    @property
    def base_dir(self) -> Path:
        """Directory that import specifiers are resolved against in ``base`` mode."""
        if self.context is not None:
            return self.context
        return self.entry_path.parent


def load_config(config_path: Path) -> BuildConfig:
    """Load configuration from disk, falling back to defaults when no file exists."""
    config_file = _find_config_file(config_path)
    if config_file is None:
        root = config_path.expanduser().resolve()
        if not root.is_dir():
            root = root.parent
        return BuildConfig(root=root)

    root = config_file.parent
    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")
    return config_from_mapping(data, root)


def config_from_mapping(data: Dict[str, Any], root: Path) -> BuildConfig:
    """Build a BuildConfig from an already-parsed mapping rooted at ``root``."""
    entry = _as_str(data.get("entry"))

    context_str = _as_str(data.get("context"))
    context = (root / context_str).resolve() if context_str else None

    output_data = _as_dict(data.get("output"))
    output_dir = _as_str(output_data.get("path")) or DEFAULT_OUTPUT_DIR
    filename = _as_str(output_data.get("filename")) or DEFAULT_FILENAME
    output = OutputConfig(path=(root / output_dir).resolve(), filename=filename)

    resolve_data = _as_dict(data.get("resolve"))
    resolve = ResolveConfig()
    if resolve_data:
        mode = _as_str(resolve_data.get("mode"))
        if mode is not None:
            resolve.mode = mode
        if "extensions" in resolve_data:
            resolve.extensions = _as_str_list(resolve_data.get("extensions"))
    if resolve.mode not in RESOLVE_MODES:
        allowed = ", ".join(RESOLVE_MODES)
        raise ConfigError(f"resolve.mode must be one of: {allowed} (got '{resolve.mode}')")

    dedupe = _as_bool(data.get("dedupe"))
    max_modules = _as_int(data.get("max_modules"))
    if max_modules is not None and max_modules < 1:
        raise ConfigError("max_modules must be a positive integer")

    templates_dir_str = _as_str(data.get("templates_dir"))
    templates_dir = (root / templates_dir_str).resolve() if templates_dir_str else None

    return BuildConfig(
        root=root,
        entry=entry,
        context=context,
        output=output,
        resolve=resolve,
        dedupe=True if dedupe is None else dedupe,
        max_modules=max_modules or DEFAULT_MAX_MODULES,
        templates_dir=templates_dir,
    )


def _find_config_file(config_path: Path) -> Path | None:
    config_path = config_path.expanduser()
    if config_path.is_file():
        return config_path.resolve()
    if config_path.is_dir():
        for name in CONFIG_FILENAMES:
            candidate = config_path / name
            if candidate.is_file():
                return candidate.resolve()
        return None
    if config_path.suffix in {".yml", ".yaml"}:
        raise ConfigError(f"Config file not found: {config_path}")
    return None


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


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
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "BuildConfig",
    "CONFIG_FILENAMES",
    "OutputConfig",
    "ResolveConfig",
    "config_from_mapping",
    "load_config",
]
