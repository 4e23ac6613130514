"""CLI parser and command behaviour tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from tests._fixtures.project_builder import ProjectBuilder
from typegen.cli import _build_parser, main


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "generate"])
    assert args.verbose is True
    assert args.command == "generate"


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["generate", "-v"])
    assert args.verbose is True
    assert args.command == "generate"


def test_cli_verbose_defaults_to_false() -> None:
    assert _build_parser().parse_args(["init"]).verbose is False


def test_generate_options() -> None:
    parser = _build_parser()
    args = parser.parse_args(
        [
            "generate",
            "-p",
            "backend",
            "-o",
            "web/generated",
            "--validation",
            "zod",
            "-c",
            "typegen.yml",
            "--visualize-deps",
            "--force",
        ]
    )
    assert args.project_path == "backend"
    assert args.output_path == "web/generated"
    assert args.validation == "zod"
    assert args.config == "typegen.yml"
    assert args.visualize_deps is True
    assert args.force is True


def test_generate_rejects_unknown_validation() -> None:
    parser = _build_parser()
    with pytest.raises(SystemExit):
        parser.parse_args(["generate", "--validation", "yup"])


def test_init_defaults() -> None:
    parser = _build_parser()
    args = parser.parse_args(["init"])
    assert args.command == "init"
    assert args.validation == "none"
    assert args.force is False
    assert args.output is None


@pytest.fixture
def project(project_builder: ProjectBuilder, monkeypatch: pytest.MonkeyPatch) -> ProjectBuilder:
    project_builder.write(
        {
            "src/lib.rs": """
            #[tauri::command]
            fn greet(name: String) -> String {
                format!("Hello {name}")
            }
            """
        }
    )
    monkeypatch.chdir(project_builder.root)
    return project_builder


def test_generate_end_to_end(project: ProjectBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    main(["generate", "-o", "src/generated"])

    output = project.root / "src" / "generated"
    assert (output / "commands.ts").is_file()
    assert "greet(params: types.GreetParams)" in (output / "commands.ts").read_text(
        encoding="utf-8"
    )
    assert "Generated 3 files for 1 commands and 0 types:" in capsys.readouterr().out

    main(["generate", "-o", "src/generated"])
    assert "up to date" in capsys.readouterr().out


def test_generate_reads_typegen_yml(project: ProjectBuilder) -> None:
    (project.root / ".typegen.yml").write_text(
        "validation_library: zod\noutput_path: bindings\n", encoding="utf-8"
    )

    main(["generate"])

    assert "z.object" in (project.root / "bindings" / "types.ts").read_text(encoding="utf-8")


def test_generate_reads_tauri_plugin_section(project: ProjectBuilder) -> None:
    project.write_tauri_config(
        {"productName": "demo", "plugins": {"typegen": {"outputPath": "from-tauri"}}}
    )

    main(["generate"])

    assert (project.root / "from-tauri" / "index.ts").is_file()


def test_cli_values_override_config_file(project: ProjectBuilder) -> None:
    config_file = project.root / "custom.yml"
    config_file.write_text("output_path: ignored\nvalidation_library: zod\n", encoding="utf-8")

    main(["generate", "-c", str(config_file), "-o", "chosen"])

    assert (project.root / "chosen" / "types.ts").is_file()
    assert not (project.root / "ignored").exists()


def test_generate_missing_project_exits(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.chdir(tmp_path)

    with pytest.raises(SystemExit) as excinfo:
        main(["generate", "-p", "missing"])

    assert excinfo.value.code == 1
    assert "Project path does not exist" in capsys.readouterr().err


def test_generate_invalid_config_exits(
    project: ProjectBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    (project.root / ".typegen.yml").write_text("validation_library: yup\n", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        main(["generate"])

    assert excinfo.value.code == 1
    assert "Invalid configuration" in capsys.readouterr().err


def test_init_writes_plugin_section(project: ProjectBuilder) -> None:
    config_path = project.write_tauri_config()

    main(["init", "--validation", "zod"])

    data = json.loads(config_path.read_text(encoding="utf-8"))
    assert data["productName"] == "demo"
    assert data["plugins"]["typegen"]["validationLibrary"] == "zod"
    assert data["plugins"]["typegen"]["outputPath"] == "./generated"


def test_init_requires_force_to_overwrite(
    project: ProjectBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    config_path = project.write_tauri_config()
    main(["init", "--output", str(config_path)])

    with pytest.raises(SystemExit) as excinfo:
        main(["init", "--output", str(config_path), "--validation", "zod"])
    assert excinfo.value.code == 1
    assert "--force" in capsys.readouterr().err

    main(["init", "--output", str(config_path), "--validation", "zod", "--force"])
    data = json.loads(config_path.read_text(encoding="utf-8"))
    assert data["plugins"]["typegen"]["validationLibrary"] == "zod"


def test_init_without_tauri_config_exits(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)

    with pytest.raises(SystemExit) as excinfo:
        main(["init", "--output", str(tmp_path / "tauri.conf.json")])

    assert excinfo.value.code == 1
