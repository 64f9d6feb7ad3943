"""Import specifier to file path resolution."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Sequence

from ..config import DEFAULT_EXTENSIONS, RESOLVE_MODES
from ..errors import ConfigError


def normalize_path(path: Path | str) -> Path:
    """Absolute, normalised path without following symlinks."""
    return Path(os.path.normpath(os.path.abspath(path)))


class SpecifierResolver:
    """Resolves import specifiers against a fixed base directory or the importer's directory.

    ``base`` mode joins every specifier onto one shared directory no matter which
    module imports it. ``relative`` mode joins onto the importing module's own
    directory, the way Node and browsers resolve relative specifiers.

    When the joined path is not an existing file, each configured extension is
    appended in turn, then ``index<ext>`` inside a directory of that name is tried.
    If nothing matches, the plain joined path is returned and reading it fails later.
    """

    def __init__(
        self,
        base_dir: Path | str,
        *,
        mode: str = "base",
        extensions: Sequence[str] = DEFAULT_EXTENSIONS,
    ) -> None:
        if mode not in RESOLVE_MODES:
            raise ConfigError(f"Unknown resolve mode '{mode}'")
        self.base_dir = normalize_path(base_dir)
        self.mode = mode
        self.extensions = tuple(extensions)

    def resolve(self, specifier: str, importer: Path) -> Path:
        directory = self.base_dir if self.mode == "base" else importer.parent
        candidate = normalize_path(directory / specifier)
        for option in self._candidates(candidate):
            if option.is_file():
                return option
        return candidate

    def _candidates(self, candidate: Path) -> Iterable[Path]:
        yield candidate
        for extension in self.extensions:
            yield candidate.with_name(candidate.name + extension)
        for extension in self.extensions:
            yield candidate / f"index{extension}"


__all__ = ["SpecifierResolver", "normalize_path"]
