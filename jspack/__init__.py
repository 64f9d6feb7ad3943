"""Bundle ES modules into a single self-executing script."""

from .bundler import BuildResult, Bundler, build
from .config import BuildConfig, load_config
from .emit import BundleEmitter, emit
from .errors import (
    BuildError,
    ConfigError,
    GraphError,
    OutputError,
    ParseError,
    ReadError,
    TemplateError,
)
from .graph import GraphBuilder, build_graph
from .models import Asset, ModuleGraph, ModuleRecord

__version__ = "0.1.0"

__all__ = [
    "Asset",
    "BuildConfig",
    "BuildError",
    "BuildResult",
    "BundleEmitter",
    "Bundler",
    "ConfigError",
    "GraphBuilder",
    "GraphError",
    "ModuleGraph",
    "ModuleRecord",
    "OutputError",
    "ParseError",
    "ReadError",
    "TemplateError",
    "build",
    "build_graph",
    "emit",
    "load_config",
]
