"""Bundle rendering."""

from .emitter import BundleEmitter, emit

__all__ = ["BundleEmitter", "emit"]
