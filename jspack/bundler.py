"""Pipeline orchestration: config -> module graph -> bundle text -> output file."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .config import BuildConfig
from .emit import BundleEmitter
from .errors import ConfigError, OutputError
from .graph import GraphBuilder, SpecifierResolver
from .logging import get_logger
from .models import ModuleGraph
from .transform import EsmTransformer, Transformer


@dataclass
class BuildResult:
    """Outcome of a successful bundle build."""

    output_path: Path
    module_count: int
    size: int


class Bundler:
    """Runs one build per call; nothing is carried over between builds."""

    def __init__(
        self,
        config: BuildConfig,
        transformer: Transformer | None = None,
        emitter: BundleEmitter | None = None,
    ) -> None:
        self.config = config
        self._transformer = transformer or EsmTransformer()
        self._emitter = emitter or BundleEmitter(config.templates_dir)
        self.logger = get_logger("bundler")

    def graph(self) -> ModuleGraph:
        """Build the module graph for the configured entry."""
        entry_path = self.config.entry_path
        resolver = SpecifierResolver(
            self.config.base_dir,
            mode=self.config.resolve.mode,
            extensions=self.config.resolve.extensions,
        )
        builder = GraphBuilder(
            resolver,
            self._transformer,
            dedupe=self.config.dedupe,
            max_modules=self.config.max_modules,
        )
        return builder.build(entry_path)

    def run(self) -> BuildResult:
        """Build, render and write the bundle; nothing is written if any step fails."""
        output = self.config.output
        if output is None:
            raise ConfigError("No output location configured")
        graph = self.graph()
        text = self._emitter.emit(graph)

        target = output.target
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(text, encoding="utf-8")
        except OSError as exc:
            raise OutputError(f"Cannot write bundle to {target}: {exc}") from exc

        size = len(text.encode("utf-8"))
        self.logger.info("Wrote %s (%d modules, %d bytes)", target, len(graph), size)
        return BuildResult(output_path=target, module_count=len(graph), size=size)


def build(config: BuildConfig) -> BuildResult:
    """Convenience wrapper running a single build for ``config``."""
    return Bundler(config).run()


__all__ = ["BuildResult", "Bundler", "build"]
