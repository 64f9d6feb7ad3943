"""Parser/transform collaborators that normalise module syntax."""

from .base import TransformResult, Transformer
from .esm import EsmTransformer

__all__ = ["EsmTransformer", "TransformResult", "Transformer"]
