"""Output directory management for generated bindings."""

from __future__ import annotations

import os
import shutil
import tempfile
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Set

from .logging import get_logger

_LOGGER = get_logger("output")

GENERATED_FILENAMES = frozenset(
    {
        "types.ts",
        "types.d.ts",
        "commands.ts",
        "commands.d.ts",
        "events.ts",
        "events.d.ts",
        "schemas.ts",
        "schemas.d.ts",
        "index.ts",
        "index.d.ts",
        "models.ts",
        "models.d.ts",
        "bindings.ts",
        "bindings.d.ts",
    }
)


class OutputError(RuntimeError):
    """Raised when the output directory cannot be prepared or written."""


@dataclass
class FileMetadata:
    name: str
    path: Path
    size: int
    modified: Optional[datetime] = None


@dataclass
class GenerationMetadata:
    output_directory: Path
    generated_at: datetime
    files: List[FileMetadata] = field(default_factory=list)
    total_size: int = 0


class OutputManager:
    """Writes generated files atomically and removes stale ones."""

    def __init__(self, output_dir: Path | str, backup_dir: Path | str | None = None) -> None:
        self.output_dir = Path(output_dir)
        self.backup_dir = Path(backup_dir) if backup_dir is not None else None
        self._managed: Set[str] = set()

    def prepare_output_directory(self) -> None:
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise OutputError(f"Cannot create output directory {self.output_dir}: {exc}") from exc

        marker = self.output_dir / ".write_test"
        try:
            marker.write_text("test", encoding="utf-8")
        except OSError as exc:
            raise OutputError(f"Cannot write to output directory {self.output_dir}: {exc}") from exc
        marker.unlink(missing_ok=True)

    def register_managed_file(self, filename: str) -> None:
        self._managed.add(filename)

    def is_generated_file(self, filename: str) -> bool:
        return (
            filename in GENERATED_FILENAMES
            or filename.startswith("generated_")
            or "_generated" in filename
            or filename in self._managed
        )

    def write_file(self, filename: str, content: str) -> Path:
        """Write ``content`` to ``filename`` through a temporary file and rename."""
        target = self.output_dir / filename
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            handle, temp_name = tempfile.mkstemp(
                dir=target.parent, prefix=f".{target.name}.", suffix=".tmp"
            )
            with os.fdopen(handle, "w", encoding="utf-8", newline="\n") as stream:
                stream.write(content)
            os.replace(temp_name, target)
        except OSError as exc:
            raise OutputError(f"Failed to write {target}: {exc}") from exc
        _LOGGER.debug("Wrote %s (%d bytes)", target, len(content.encode("utf-8")))
        return target

    def cleanup_old_files(self, current_files: Iterable[str]) -> List[str]:
        """Remove generated files that the current run did not produce."""
        if not self.output_dir.exists():
            return []
        current = set(current_files)
        cleaned: List[str] = []
        for path in sorted(self.output_dir.iterdir()):
            if not path.is_file():
                continue
            if self.is_generated_file(path.name) and path.name not in current:
                self._backup_and_remove(path)
                cleaned.append(path.name)
        return cleaned

    def _backup_and_remove(self, path: Path) -> None:
        try:
            if self.backup_dir is not None:
                self.backup_dir.mkdir(parents=True, exist_ok=True)
                stamp = int(datetime.now(timezone.utc).timestamp())
                shutil.copy2(path, self.backup_dir / f"{path.name}.backup.{stamp}")
            path.unlink()
        except OSError as exc:
            raise OutputError(f"Failed to remove stale file {path}: {exc}") from exc
        _LOGGER.info("Removed stale generated file %s", path.name)

    def verify_output(self, expected_files: Sequence[str]) -> List[str]:
        """Return the expected files that are missing from the output directory."""
        return [name for name in expected_files if not (self.output_dir / name).exists()]

    def get_generation_metadata(self) -> GenerationMetadata:
        metadata = GenerationMetadata(
            output_directory=self.output_dir, generated_at=datetime.now(timezone.utc)
        )
        if not self.output_dir.exists():
            return metadata
        for path in sorted(self.output_dir.iterdir()):
            if not path.is_file():
                continue
            stat = path.stat()
            metadata.files.append(
                FileMetadata(
                    name=path.name,
                    path=path,
                    size=stat.st_size,
                    modified=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
                )
            )
            metadata.total_size += stat.st_size
        return metadata

    def finalize_generation(self, generated_files: Sequence[str]) -> List[str]:
        """Register, clean up and verify the files of a finished run.

        Returns the names of the stale files that were removed.
        """
        self.prepare_output_directory()
        for name in generated_files:
            self.register_managed_file(name)
        cleaned = self.cleanup_old_files(generated_files)
        if cleaned:
            _LOGGER.info("Cleaned up %d old generated files", len(cleaned))
        missing = self.verify_output(generated_files)
        if missing:
            raise OutputError(f"Missing generated files: {', '.join(missing)}")
        return cleaned

    def create_summary_report(self) -> str:
        metadata = self.get_generation_metadata()
        lines = [
            "# TypeScript Generation Summary",
            "",
            f"Generated at: {metadata.generated_at:%Y-%m-%d %H:%M:%S} UTC",
            f"Output directory: {metadata.output_directory}",
            f"Total files: {len(metadata.files)}",
            f"Total size: {metadata.total_size} bytes",
            "",
            "## Generated Files",
            "",
        ]
        lines.extend(f"- **{item.name}** ({item.size} bytes)" for item in metadata.files)
        return "\n".join(lines) + "\n"


__all__ = [
    "FileMetadata",
    "GENERATED_FILENAMES",
    "GenerationMetadata",
    "OutputError",
    "OutputManager",
]
