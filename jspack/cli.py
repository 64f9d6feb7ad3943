"""CLI entrypoints for jspack commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .bundler import Bundler
from .config import RESOLVE_MODES, BuildConfig, OutputConfig, load_config
from .errors import BuildError
from .logging import configure_logging


def _add_common_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Project directory or config file (defaults to current directory).",
    )
    parser.add_argument(
        "-c",
        "--config",
        default=None,
        help="Explicit path to a jspack.yml file.",
    )
    parser.add_argument("--entry", default=None, help="Entry module, relative to the project root.")
    parser.add_argument(
        "--context",
        default=None,
        help="Base directory that import specifiers are resolved against.",
    )
    parser.add_argument(
        "--resolve",
        choices=RESOLVE_MODES,
        default=None,
        help="Resolve specifiers against the base directory or the importing module's directory.",
    )
    parser.add_argument(
        "--no-dedupe",
        action="store_true",
        help="Extract every import occurrence as its own module instead of reusing ids by path.",
    )
    parser.add_argument("--log-file", default=None, help="Also write logs to this file.")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jspack",
        description="Bundle an ES module entry point and its imports into a single script.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    build_parser = subparsers.add_parser("build", help="Build the bundle and write it to disk.")
    _add_common_options(build_parser)
    build_parser.add_argument("--output-path", default=None, help="Directory for the bundle.")
    build_parser.add_argument("--filename", default=None, help="Bundle file name.")

    graph_parser = subparsers.add_parser(
        "graph",
        help="Print the module table (ids, dependencies, mappings) as JSON.",
    )
    _add_common_options(graph_parser)

    return parser


def _resolve_config(args: argparse.Namespace) -> BuildConfig:
    config_path = Path(args.config) if args.config else Path(args.path)
    config = load_config(config_path)
    cwd = Path.cwd()

    if args.entry:
        config.entry = str((cwd / args.entry).resolve())
    if args.context:
        config.context = (cwd / args.context).resolve()
    if args.resolve:
        config.resolve.mode = args.resolve
    if args.no_dedupe:
        config.dedupe = False

    output_path = getattr(args, "output_path", None)
    filename = getattr(args, "filename", None)
    if output_path or filename:
        current = config.output or OutputConfig(path=config.root / "dist")
        config.output = OutputConfig(
            path=(cwd / output_path).resolve() if output_path else current.path,
            filename=filename or current.filename,
        )
    return config


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for jspack commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    log_file = Path(args.log_file) if args.log_file else None
    configure_logging(verbose=bool(args.verbose), log_file=log_file)

    try:
        config = _resolve_config(args)
        bundler = Bundler(config)
        if args.command == "build":
            result = bundler.run()
        elif args.command == "graph":
            graph = bundler.graph()
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except BuildError as exc:
        parser.exit(
            1, f"jspack {args.command} failed: {exc}\nRun with --verbose for more details.\n"
        )

    if args.command == "build":
        print(f"Bundle written to {_relativize(result.output_path)} ({result.module_count} modules)")
    else:
        table = [
            {
                "id": asset.id,
                "file": str(asset.file_path),
                "deps": asset.deps,
                "mapping": asset.mapping,
            }
            for asset in graph
        ]
        print(json.dumps(table, indent=2))


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
