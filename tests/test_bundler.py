"""End-to-end tests for the bundle pipeline."""

from __future__ import annotations

import shutil
import subprocess

import pytest

from jspack.bundler import Bundler
from jspack.config import BuildConfig, OutputConfig
from jspack.errors import ConfigError, ParseError, ReadError

NODE = shutil.which("node")


def _config(project, entry="index.js", **kwargs) -> BuildConfig:
    return BuildConfig(
        root=project.path(),
        entry=entry,
        output=OutputConfig(path=project.path("dist"), filename="bundle.js"),
        **kwargs,
    )


def _write_app(project) -> None:
    project.write(
        {
            "index.js": """
                import greet, { punctuation } from "./greet.js";
                import * as names from "./names.js";
                console.log(greet(names.first) + punctuation);
            """,
            "greet.js": """
                import { prefix } from "./names.js";
                export const punctuation = "!";
                export default function greet(name) {
                  return prefix + name;
                }
            """,
            "names.js": """
                export const prefix = "Hello, ";
                export const first = "jspack";
            """,
        }
    )


def test_run_writes_bundle(project) -> None:
    _write_app(project)

    result = Bundler(_config(project)).run()

    assert result.output_path == project.path("dist/bundle.js")
    assert result.module_count == 3
    text = result.output_path.read_text(encoding="utf-8")
    assert result.size == len(text.encode("utf-8"))
    assert 'require("./greet.js")' in text
    assert "load(0);" in text


def test_graph_reuses_ids_for_shared_imports(project) -> None:
    _write_app(project)

    graph = Bundler(_config(project)).graph()

    assert [asset.file_path.name for asset in graph] == ["index.js", "greet.js", "names.js"]
    assert graph[0].mapping == {"./greet.js": 1, "./names.js": 2}
    assert graph[1].mapping == {"./names.js": 2}


def test_rebuild_produces_identical_output(project) -> None:
    _write_app(project)
    bundler = Bundler(_config(project))

    first = bundler.run().output_path.read_text(encoding="utf-8")
    second = bundler.run().output_path.read_text(encoding="utf-8")

    assert first == second


def test_missing_entry_writes_nothing(project) -> None:
    config = _config(project, entry=None)

    with pytest.raises(ConfigError):
        Bundler(config).run()
    assert not project.path("dist").exists()


def test_missing_output_config_writes_nothing(project) -> None:
    _write_app(project)
    config = _config(project)
    config.output = None

    with pytest.raises(ConfigError):
        Bundler(config).run()
    assert not project.path("dist").exists()


def test_missing_dependency_writes_nothing(project) -> None:
    project.write({"index.js": 'import "./missing.js";\n'})

    with pytest.raises(ReadError):
        Bundler(_config(project)).run()
    assert not project.path("dist/bundle.js").exists()


def test_parse_failure_writes_nothing(project) -> None:
    project.write({"index.js": 'import "./bad.js";\n', "bad.js": "export const = ;\n"})

    with pytest.raises(ParseError):
        Bundler(_config(project)).run()
    assert not project.path("dist/bundle.js").exists()


@pytest.mark.skipif(NODE is None, reason="node is not installed")
def test_bundle_executes_under_node(project) -> None:
    _write_app(project)
    result = Bundler(_config(project)).run()

    completed = subprocess.run(
        [NODE, str(result.output_path)], capture_output=True, text=True, check=True
    )

    assert completed.stdout.strip() == "Hello, jspack!"


@pytest.mark.skipif(NODE is None, reason="node is not installed")
def test_cyclic_imports_execute_once(project) -> None:
    project.write(
        {
            "index.js": """
                import { ping } from "./ping.js";
                console.log(ping(3));
            """,
            "ping.js": """
                import { pong } from "./pong.js";
                export function ping(n) { return n <= 0 ? "done" : pong(n - 1); }
            """,
            "pong.js": """
                import * as pingModule from "./ping.js";
                export function pong(n) { return pingModule.ping(n); }
            """,
        }
    )
    result = Bundler(_config(project)).run()

    completed = subprocess.run(
        [NODE, str(result.output_path)], capture_output=True, text=True, check=True
    )

    assert completed.stdout.strip() == "done"


@pytest.mark.skipif(NODE is None, reason="node is not installed")
def test_cyclic_named_import_reads_binding_after_initialisation(project) -> None:
    project.write(
        {
            "index.js": """
                import { helper } from "./b.js";
                export const value = 1;
                console.log(helper());
            """,
            "b.js": """
                import { value } from "./index.js";
                export function helper() { return value + 1; }
            """,
        }
    )
    result = Bundler(_config(project)).run()

    completed = subprocess.run(
        [NODE, str(result.output_path)], capture_output=True, text=True, check=True
    )

    assert completed.stdout.strip() == "2"


@pytest.mark.skipif(NODE is None, reason="node is not installed")
def test_imported_let_binding_is_live(project) -> None:
    project.write(
        {
            "index.js": """
                import { count, inc } from "./counter.js";
                inc();
                console.log(count);
            """,
            "counter.js": """
                export let count = 0;
                export function inc() { count++; }
            """,
        }
    )
    result = Bundler(_config(project)).run()

    completed = subprocess.run(
        [NODE, str(result.output_path)], capture_output=True, text=True, check=True
    )

    assert completed.stdout.strip() == "1"
