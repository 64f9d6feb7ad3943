"""Contract for parser/transform collaborators."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional


@dataclass
class TransformResult:
    """Normalised module body plus the raw specifiers it imports, in source order."""

    code: str
    imports: List[str] = field(default_factory=list)


class Transformer(ABC):
    """Turns module source text into the require/exports calling convention."""

    @abstractmethod
    def transform(self, source: str, path: Optional[Path] = None) -> TransformResult:
        """Return normalised code and import specifiers; ``path`` is for diagnostics only."""
