"""Renders a module graph into a self-executing bundle."""

from __future__ import annotations

from pathlib import Path
from typing import List

from jinja2 import Environment, FileSystemLoader, StrictUndefined
from jinja2 import TemplateError as JinjaTemplateError

from ..errors import GraphError, TemplateError
from ..logging import get_logger
from ..models import ModuleGraph

DEFAULT_TEMPLATE = "bundle.js.j2"


class BundleEmitter:
    """Projects the module table through a Jinja template into runtime source.

    The template receives ``modules`` (a list of ``ModuleRecord``) and
    ``entry_id``. Rendering depends only on the graph, so identical graphs
    produce identical text.
    """

    def __init__(
        self,
        templates_dir: Path | None = None,
        template_name: str = DEFAULT_TEMPLATE,
    ) -> None:
        self.template_name = template_name
        self._env = self._create_env(templates_dir)
        self.logger = get_logger("emitter")

    def emit(self, graph: ModuleGraph) -> str:
        entry = graph.entry
        if entry is None:
            raise GraphError("Cannot emit an empty module graph")
        problems = graph.problems()
        if problems:
            raise GraphError("Invalid module graph: " + "; ".join(problems))

        records = graph.records()
        try:
            template = self._env.get_template(self.template_name)
            text = template.render(modules=records, entry_id=entry.id)
        except JinjaTemplateError as exc:
            raise TemplateError(f"Failed to render {self.template_name}: {exc}") from exc
        self.logger.debug("Rendered %d modules with %s", len(records), self.template_name)
        return text

    @staticmethod
    def _create_env(templates_dir: Path | None) -> Environment:
        directories: List[str] = []
        if templates_dir:
            directories.append(str(templates_dir))
        directories.append(str(Path(__file__).with_name("templates")))
        loader = FileSystemLoader(directories)
        return Environment(
            loader=loader,
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )


def emit(graph: ModuleGraph, templates_dir: Path | None = None) -> str:
    """Render ``graph`` with the default bundle template."""
    return BundleEmitter(templates_dir).emit(graph)


__all__ = ["BundleEmitter", "DEFAULT_TEMPLATE", "emit"]
