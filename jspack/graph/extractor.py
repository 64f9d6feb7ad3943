"""Reads one module file and turns it into an Asset."""

from __future__ import annotations

from pathlib import Path

from ..errors import ReadError
from ..logging import get_logger
from ..models import Asset
from ..transform import Transformer
from .ids import IdAllocator
from .resolver import normalize_path


class AssetExtractor:
    """Reads a file, normalises it through the transformer and assigns the next id."""

    def __init__(self, transformer: Transformer, ids: IdAllocator) -> None:
        self._transformer = transformer
        self._ids = ids
        self.logger = get_logger("extractor")

    def extract(self, file_path: Path | str) -> Asset:
        path = normalize_path(file_path)
        try:
            source = path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise ReadError(f"Module not found: {path}", path=path) from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise ReadError(f"Cannot read module {path}: {exc}", path=path) from exc

        result = self._transformer.transform(source, path=path)
        asset = Asset(
            id=self._ids.next(),
            file_path=path,
            code=result.code,
            deps=list(result.imports),
        )
        self.logger.debug(
            "Extracted module %d from %s (%d imports)", asset.id, path, len(asset.deps)
        )
        return asset


__all__ = ["AssetExtractor"]
