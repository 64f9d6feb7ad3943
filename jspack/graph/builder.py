"""Breadth-first construction of the module graph."""

from __future__ import annotations

from collections import deque
from pathlib import Path
from typing import Deque, Dict, Optional, Sequence

from ..config import DEFAULT_EXTENSIONS, DEFAULT_MAX_MODULES
from ..errors import ConfigError, GraphError
from ..logging import get_logger
from ..models import Asset, ModuleGraph
from ..transform import EsmTransformer, Transformer
from .extractor import AssetExtractor
from .ids import IdAllocator
from .resolver import SpecifierResolver, normalize_path


class GraphBuilder:
    """Expands an entry module into the ordered table of every reachable module.

    Modules are visited in FIFO order, so ids follow breadth-first discovery and
    the entry is always id 0. With ``dedupe`` enabled a resolved path is
    extracted once and later imports of it reuse its id, which also makes
    cyclic imports terminate. With ``dedupe`` disabled every import occurrence
    is extracted as a distinct module; ``max_modules`` bounds that walk.
    """

    def __init__(
        self,
        resolver: SpecifierResolver,
        transformer: Transformer | None = None,
        *,
        dedupe: bool = True,
        max_modules: int = DEFAULT_MAX_MODULES,
    ) -> None:
        self._resolver = resolver
        self._transformer = transformer or EsmTransformer()
        self._dedupe = dedupe
        self._max_modules = max_modules
        self.logger = get_logger("graph")

    def build(self, entry_path: Path | str) -> ModuleGraph:
        if not entry_path or not str(entry_path).strip():
            raise ConfigError("entry cannot be empty")

        # Fresh allocator per build so ids are reproducible across builds.
        extractor = AssetExtractor(self._transformer, IdAllocator())
        root = extractor.extract(normalize_path(entry_path))
        graph = ModuleGraph([root])
        seen: Dict[Path, int] = {root.file_path: root.id}
        queue: Deque[Asset] = deque([root])

        while queue:
            parent = queue.popleft()
            for specifier in parent.deps:
                if not specifier:
                    continue
                target = self._resolver.resolve(specifier, parent.file_path)
                if self._dedupe and target in seen:
                    parent.mapping[specifier] = seen[target]
                    continue
                if len(graph) >= self._max_modules:
                    raise GraphError(
                        f"Module limit of {self._max_modules} exceeded while resolving "
                        f"'{specifier}' from {parent.file_path}"
                    )
                child = extractor.extract(target)
                parent.mapping[specifier] = child.id
                seen.setdefault(child.file_path, child.id)
                graph.add(child)
                queue.append(child)

        self.logger.info(
            "Built module graph with %d modules from %s", len(graph), root.file_path
        )
        return graph


def build_graph(
    entry_path: Path | str,
    base_dir: Path | str,
    *,
    transformer: Transformer | None = None,
    mode: str = "base",
    extensions: Optional[Sequence[str]] = None,
    dedupe: bool = True,
    max_modules: int = DEFAULT_MAX_MODULES,
) -> ModuleGraph:
    """Build the module graph for ``entry_path`` resolving specifiers against ``base_dir``."""
    if not entry_path or not str(entry_path).strip():
        raise ConfigError("entry cannot be empty")
    resolver = SpecifierResolver(
        base_dir,
        mode=mode,
        extensions=DEFAULT_EXTENSIONS if extensions is None else extensions,
    )
    builder = GraphBuilder(
        resolver, transformer, dedupe=dedupe, max_modules=max_modules
    )
    return builder.build(entry_path)


__all__ = ["GraphBuilder", "build_graph"]
