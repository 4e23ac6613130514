"""Binding generators for the supported validation libraries."""

from __future__ import annotations

from typing import Callable, Dict, Optional

from ..config import GenerateConfig
from ..errors import CodeGenerationError
from .base import BaseGenerator
from .typescript import TypeScriptGenerator
from .zod import ZodGenerator

_GENERATORS: Dict[str, Callable[[Optional[GenerateConfig]], BaseGenerator]] = {
    "none": TypeScriptGenerator,
    "zod": ZodGenerator,
}


def create_generator(
    validation_library: str, config: Optional[GenerateConfig] = None
) -> BaseGenerator:
    """Return the generator registered for ``validation_library``."""
    factory = _GENERATORS.get(validation_library)
    if factory is None:
        options = ", ".join(sorted(_GENERATORS))
        raise CodeGenerationError(
            f"Unsupported validation library: {validation_library}. Expected one of: {options}"
        )
    return factory(config)


__all__ = ["BaseGenerator", "TypeScriptGenerator", "ZodGenerator", "create_generator"]
