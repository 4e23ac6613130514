"""Generate TypeScript bindings from the commands of a Tauri application."""

__version__ = "0.3.0"

__all__ = ["__version__"]
