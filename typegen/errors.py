"""Exception types raised by the typegen pipeline."""

from __future__ import annotations


class TypegenError(RuntimeError):
    """Base class for failures surfaced to the CLI."""


class CommandAnalysisError(TypegenError):
    """Raised when the Rust sources cannot be analysed."""


class CodeGenerationError(TypegenError):
    """Raised when bindings cannot be rendered or written."""


class InvalidProjectPathError(CommandAnalysisError):
    """Raised when the project path does not exist or is not a directory."""

    def __init__(self, path: object) -> None:
        super().__init__(f"Project path does not exist: {path}")
        self.path = path


__all__ = [
    "CodeGenerationError",
    "CommandAnalysisError",
    "InvalidProjectPathError",
    "TypegenError",
]
