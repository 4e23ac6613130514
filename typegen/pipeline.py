"""End-to-end generation: analyse, check the cache, render and write."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

from .analysis import CommandAnalyzer
from .config import GenerateConfig
from .errors import CodeGenerationError, CommandAnalysisError
from .generators import create_generator
from .logging import get_logger
from .output import OutputError, OutputManager
from .stores import GenerationCache, needs_regeneration

DEPENDENCY_GRAPH_TEXT = "dependency-graph.txt"
DEPENDENCY_GRAPH_DOT = "dependency-graph.dot"


@dataclass
class GenerationResult:
    """Outcome of one pipeline run."""

    output_path: Path
    files: List[str] = field(default_factory=list)
    commands_found: int = 0
    types_generated: int = 0
    events_found: int = 0
    skipped: bool = False


class GenerationPipeline:
    """Runs analysis and generation for one :class:`GenerateConfig`."""

    def __init__(
        self,
        analyzer_factory: Callable[[], CommandAnalyzer] | None = None,
        output_factory: Callable[[Path], OutputManager] | None = None,
    ) -> None:
        self._analyzer_factory = analyzer_factory or CommandAnalyzer
        self._output_factory = output_factory or OutputManager
        self.logger = get_logger("pipeline")
        self.analyzer: Optional[CommandAnalyzer] = None

    def run(self, config: GenerateConfig, *, force: bool = False) -> GenerationResult:
        config.validate()
        project_path = Path(config.project_path).expanduser()
        output_path = Path(config.output_path).expanduser()
        self.logger.info("Analyzing Tauri commands in %s", project_path)

        analyzer = self._analyzer_factory()
        self.analyzer = analyzer
        try:
            commands = analyzer.analyze_project(
                project_path,
                exclude_patterns=config.exclude_patterns,
                include_patterns=config.include_patterns,
            )
        except OSError as exc:
            raise CommandAnalysisError(f"Failed to analyze {project_path}: {exc}") from exc
        types = analyzer.discovered_types()
        events = analyzer.discovered_events()
        result = GenerationResult(
            output_path=output_path,
            commands_found=len(commands),
            types_generated=len(types),
            events_found=len(events),
        )

        if not force and not needs_regeneration(output_path, commands, types, config, events):
            self.logger.info("Bindings in %s are up to date; skipping generation", output_path)
            result.skipped = True
            return result

        output = self._output_factory(output_path)
        generator = create_generator(config.validation_library, config)
        try:
            files = generator.generate_models(commands, types, analyzer, output)
            if config.visualize_deps:
                output.write_file(DEPENDENCY_GRAPH_TEXT, analyzer.visualize_dependencies(commands))
                output.write_file(DEPENDENCY_GRAPH_DOT, analyzer.generate_dot_graph(commands))
                files.extend([DEPENDENCY_GRAPH_TEXT, DEPENDENCY_GRAPH_DOT])
            output.finalize_generation(files)
        except OutputError as exc:
            raise CodeGenerationError(str(exc)) from exc
        result.files = files

        try:
            GenerationCache.build(commands, types, config, events).save(output_path)
        except OSError as exc:
            self.logger.warning("Failed to write generation cache: %s", exc)

        self.logger.info(
            "Generated %d files for %d commands and %d types",
            len(files),
            result.commands_found,
            result.types_generated,
        )
        return result


__all__ = ["DEPENDENCY_GRAPH_DOT", "DEPENDENCY_GRAPH_TEXT", "GenerationPipeline", "GenerationResult"]
