"""Tests for bundle rendering."""

from __future__ import annotations

from pathlib import Path

import pytest

from jspack.emit import BundleEmitter, emit
from jspack.errors import GraphError, TemplateError
from jspack.models import Asset, ModuleGraph


def _graph() -> ModuleGraph:
    return ModuleGraph(
        [
            Asset(
                id=0,
                file_path=Path("/src/a.js"),
                code='var b = require("./b.js");\nconsole.log(b.default);',
                deps=["./b.js"],
                mapping={"./b.js": 1},
            ),
            Asset(
                id=1,
                file_path=Path("/src/b.js"),
                code="exports.default = 42;",
            ),
        ]
    )


def test_emit_embeds_each_module_with_its_mapping() -> None:
    text = emit(_graph())

    assert 'var b = require("./b.js");\nconsole.log(b.default);' in text
    assert "exports.default = 42;" in text
    assert '{"./b.js": 1}' in text
    assert '"/src/a.js"' in text
    assert "  0: [" in text
    assert "  1: [" in text
    assert "load(0);" in text
    assert text.endswith("});\n")


def test_emit_is_deterministic() -> None:
    assert emit(_graph()) == emit(_graph())


def test_emit_runtime_scopes_require_to_module_mapping() -> None:
    text = emit(_graph())

    assert "function localRequire(specifier)" in text
    assert "return load(mapping[specifier]);" in text
    assert "cache[id] = module;" in text


def test_emit_rejects_empty_graph() -> None:
    with pytest.raises(GraphError):
        emit(ModuleGraph())


def test_emit_rejects_unresolved_mapping() -> None:
    graph = _graph()
    graph[0].mapping.clear()

    with pytest.raises(GraphError) as excinfo:
        emit(graph)
    assert "./b.js" in str(excinfo.value)


def test_templates_dir_overrides_default(tmp_path: Path) -> None:
    (tmp_path / "bundle.js.j2").write_text(
        "{% for module in modules %}{{ module.id }}={{ module.file_path }};{% endfor %}",
        encoding="utf-8",
    )

    text = BundleEmitter(tmp_path).emit(_graph())

    assert text == "0=/src/a.js;1=/src/b.js;"


def test_malformed_template_raises_template_error(tmp_path: Path) -> None:
    (tmp_path / "bundle.js.j2").write_text("{% for module in %}", encoding="utf-8")

    with pytest.raises(TemplateError):
        BundleEmitter(tmp_path).emit(_graph())


def test_undefined_template_variable_raises_template_error(tmp_path: Path) -> None:
    (tmp_path / "bundle.js.j2").write_text("{{ missing_value }}", encoding="utf-8")

    with pytest.raises(TemplateError):
        BundleEmitter(tmp_path).emit(_graph())
