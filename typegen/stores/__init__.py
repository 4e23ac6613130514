"""Persistent stores used by the typegen pipeline."""

from .generation_cache import GenerationCache, needs_regeneration

__all__ = ["GenerationCache", "needs_regeneration"]
