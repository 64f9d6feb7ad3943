"""Core data models shared across jspack components."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional


@dataclass
class Asset:
    """One discovered module: normalised source plus its raw import specifiers."""

    id: int
    file_path: Path
    code: str
    deps: List[str] = field(default_factory=list)
    mapping: Dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class ModuleRecord:
    """Projection of an asset carrying only what the runtime needs."""

    id: int
    file_path: str
    code: str
    mapping: Dict[str, int]


@dataclass
class ModuleGraph:
    """Ordered collection of assets reachable from the entry, root first."""

    assets: List[Asset] = field(default_factory=list)

    def __iter__(self) -> Iterator[Asset]:
        return iter(self.assets)

    def __len__(self) -> int:
        return len(self.assets)

    def __getitem__(self, module_id: int) -> Asset:
        return self.assets[module_id]

    @property
    def entry(self) -> Optional[Asset]:
        return self.assets[0] if self.assets else None

    def add(self, asset: Asset) -> None:
        self.assets.append(asset)

    def problems(self) -> List[str]:
        """Describe every broken id or mapping invariant; empty when the graph is sound."""
        issues: List[str] = []
        for position, asset in enumerate(self.assets):
            if asset.id != position:
                issues.append(f"asset at position {position} has id {asset.id}")
        known = set(range(len(self.assets)))
        for asset in self.assets:
            for specifier in asset.deps:
                if not specifier:
                    continue
                target = asset.mapping.get(specifier)
                if target is None:
                    issues.append(f"module {asset.id} has no mapping for '{specifier}'")
                elif target not in known:
                    issues.append(
                        f"module {asset.id} maps '{specifier}' to unknown id {target}"
                    )
        return issues

    def records(self) -> List[ModuleRecord]:
        """Project assets to the fields the bundle runtime consumes."""
        return [
            ModuleRecord(
                id=asset.id,
                file_path=asset.file_path.as_posix(),
                code=asset.code,
                mapping=dict(asset.mapping),
            )
            for asset in self.assets
        ]
