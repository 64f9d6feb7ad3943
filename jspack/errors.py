"""Error hierarchy shared by the jspack build pipeline."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class BuildError(RuntimeError):
    """Base class for every fatal build failure."""


class ConfigError(BuildError):
    """Raised when build options are missing or invalid."""


class ReadError(BuildError):
    """Raised when a module file cannot be read."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class ParseError(BuildError):
    """Raised when module source cannot be parsed or normalised."""

    def __init__(
        self,
        message: str,
        path: Path | None = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        location = ""
        if path is not None:
            location = str(path)
            if line is not None:
                location += f":{line}"
                if column is not None:
                    location += f":{column}"
        super().__init__(f"{location}: {message}" if location else message)
        self.path = path
        self.line = line
        self.column = column


class TemplateError(BuildError):
    """Raised when the bundle template cannot be rendered."""


class GraphError(BuildError):
    """Raised when a module graph is invalid or exceeds configured limits."""


class OutputError(BuildError):
    """Raised when the bundle cannot be written to its destination."""


__all__ = [
    "BuildError",
    "ConfigError",
    "GraphError",
    "OutputError",
    "ParseError",
    "ReadError",
    "TemplateError",
]
