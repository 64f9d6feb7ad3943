"""Module discovery: id allocation, extraction, resolution and graph traversal."""

from .builder import GraphBuilder, build_graph
from .extractor import AssetExtractor
from .ids import IdAllocator
from .resolver import SpecifierResolver, normalize_path

__all__ = [
    "AssetExtractor",
    "GraphBuilder",
    "IdAllocator",
    "SpecifierResolver",
    "build_graph",
    "normalize_path",
]
