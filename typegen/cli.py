"""CLI entrypoints for typegen commands."""

from __future__ import annotations

import argparse
from pathlib import Path

from .config import (
    CONFIG_FILENAME,
    VALIDATION_LIBRARIES,
    ConfigError,
    GenerateConfig,
    find_tauri_config,
    load_config,
)
from .errors import TypegenError
from .logging import configure_logging
from .pipeline import GenerationPipeline
from .project_scanner import ProjectScanner


def _verbosity_parent(default: object) -> argparse.ArgumentParser:
    """Parent parser for ``-v`` so the flag works before and after the subcommand.

    Subcommands pass ``argparse.SUPPRESS`` so an omitted flag does not reset
    one given before the subcommand name.
    """
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=default,
        help="Show per-stage progress and debug output.",
    )
    return parent


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tauri-typegen",
        description="Generate TypeScript bindings for Tauri commands, types and events.",
        parents=[_verbosity_parent(False)],
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Analyze the Rust sources and write TypeScript bindings.",
        parents=[_verbosity_parent(argparse.SUPPRESS)],
    )
    generate_parser.add_argument(
        "-p",
        "--project-path",
        help="Path to the Tauri source directory (defaults to ./src-tauri).",
    )
    generate_parser.add_argument(
        "-o",
        "--output-path",
        help="Directory for the generated files (defaults to ./src/generated).",
    )
    generate_parser.add_argument(
        "--validation",
        choices=VALIDATION_LIBRARIES,
        help="Validation library for the generated bindings.",
    )
    generate_parser.add_argument(
        "-c",
        "--config",
        help=f"Configuration file ({CONFIG_FILENAME} or tauri.conf.json).",
    )
    generate_parser.add_argument(
        "--visualize-deps",
        action="store_true",
        help="Also write dependency-graph.txt and dependency-graph.dot.",
    )
    generate_parser.add_argument(
        "--force",
        action="store_true",
        help="Regenerate even when the inputs have not changed.",
    )

    init_parser = subparsers.add_parser(
        "init",
        help="Add a typegen section to tauri.conf.json.",
        parents=[_verbosity_parent(argparse.SUPPRESS)],
    )
    init_parser.add_argument(
        "-o",
        "--output",
        help="tauri.conf.json to update (detected from the current directory by default).",
    )
    init_parser.add_argument(
        "--validation",
        choices=VALIDATION_LIBRARIES,
        default="none",
        help="Validation library recorded in the configuration.",
    )
    init_parser.add_argument(
        "-p",
        "--project-path",
        help="Tauri source directory recorded in the configuration.",
    )
    init_parser.add_argument(
        "--output-path",
        help="Output directory recorded in the configuration.",
    )
    init_parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing typegen section.",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for typegen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))

    if args.command == "generate":
        _run_generate(parser, args)
    elif args.command == "init":
        _run_init(parser, args)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _generate_config(args: argparse.Namespace) -> GenerateConfig:
    if args.config:
        config = load_config(Path(args.config))
    elif Path(CONFIG_FILENAME).exists():
        config = load_config(Path(CONFIG_FILENAME))
    else:
        tauri_config = find_tauri_config(Path(args.project_path or GenerateConfig.project_path))
        config = load_config(tauri_config) if tauri_config else GenerateConfig()

    overrides = GenerateConfig()
    if args.project_path:
        overrides.project_path = args.project_path
    if args.output_path:
        overrides.output_path = args.output_path
    if args.validation:
        overrides.validation_library = args.validation
    overrides.verbose = bool(args.verbose)
    overrides.visualize_deps = bool(args.visualize_deps)
    config.merge(overrides)
    return config


def _run_generate(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    try:
        config = _generate_config(args)
        if config.verbose and not args.verbose:
            configure_logging(verbose=True)
        result = GenerationPipeline().run(config, force=bool(args.force))
    except ConfigError as exc:
        parser.exit(1, f"Invalid configuration: {exc}\n")
    except TypegenError as exc:
        parser.exit(1, f"tauri-typegen generate failed: {exc}\nRun with --verbose for more details.\n")

    if result.skipped:
        print(f"Bindings in {result.output_path} are up to date (use --force to regenerate)")
        return
    if result.commands_found == 0:
        print(
            "No Tauri commands found. Make sure your project contains functions with "
            "#[tauri::command] attributes."
        )
    print(
        f"Generated {len(result.files)} files for {result.commands_found} commands "
        f"and {result.types_generated} types:"
    )
    for name in result.files:
        print(f"  {result.output_path / name}")


def _run_init(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    scanner = ProjectScanner()
    target = Path(args.output) if args.output else None
    project = scanner.detect_project(Path.cwd())
    if target is None and project is not None:
        target = project.tauri_config_path
    if target is None:
        parser.exit(1, "tauri.conf.json not found. Pass --output to point at it.\n")

    config = GenerateConfig(validation_library=args.validation)
    if args.project_path:
        config.project_path = args.project_path
    if args.output_path:
        config.output_path = args.output_path
    elif project is not None:
        config.output_path = scanner.recommended_output_path(project)

    plugins = scanner.read_tauri_config(target).get("plugins")
    if isinstance(plugins, dict) and "typegen" in plugins and not args.force:
        parser.exit(
            1, f"{target} already has a typegen configuration. Use --force to overwrite it.\n"
        )

    try:
        config.save_to_tauri_config(target)
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")
    print(f"Typegen configuration written to {target}")


__all__ = ["main"]
