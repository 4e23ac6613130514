"""Tests for plain TypeScript binding generation."""

from __future__ import annotations

from typing import Dict

import pytest

from tests._fixtures.project_builder import ProjectBuilder
from typegen.config import GenerateConfig
from typegen.errors import CodeGenerationError
from typegen.generators import TypeScriptGenerator, ZodGenerator, create_generator
from typegen.generators.base import FILE_HEADER, collect_used_types, property_key, unique_events
from typegen.output import OutputManager

SOURCE = """
use serde::{Deserialize, Serialize};
use tauri::{AppHandle, Emitter, State};

#[derive(Serialize, Deserialize)]
#[serde(rename_all = "camelCase")]
pub struct User {
    pub user_id: u32,
    pub role: Role,
    pub address: Option<Address>,
    #[serde(rename = "e-mail")]
    pub email: String,
}

#[derive(Serialize, Deserialize)]
pub enum Role {
    Admin,
    Member,
}

#[derive(Serialize, Deserialize)]
pub struct Address {
    pub city: String,
}

#[derive(Clone, Serialize)]
#[serde(tag = "kind", rename_all = "snake_case")]
pub enum Progress {
    Started { total_bytes: u64 },
    Chunk(u64),
    Finished,
}

#[derive(Serialize)]
pub struct Unused {
    pub x: i32,
}

#[tauri::command]
pub async fn get_user(user_id: u32, state: State<'_, AppState>) -> Result<User, String> {
    todo!()
}

#[tauri::command]
pub fn list_roles() -> Vec<Role> {
    vec![]
}

#[tauri::command]
pub async fn download(app: AppHandle, url: String, on_progress: Channel<Progress>) {
    app.emit("download-finished", url.clone()).unwrap();
    app.emit("download-finished", 1).unwrap();
}
"""


@pytest.fixture
def rendered(project_builder: ProjectBuilder) -> Dict[str, str]:
    project_builder.write({"src/lib.rs": SOURCE})
    commands = project_builder.analyze()
    analyzer = project_builder.analyzer
    return TypeScriptGenerator().render_files(commands, analyzer.discovered_types(), analyzer)


def test_files_and_index(rendered: Dict[str, str]) -> None:
    assert list(rendered) == ["types.ts", "commands.ts", "events.ts", "index.ts"]
    assert rendered["index.ts"].startswith(FILE_HEADER)
    assert "export * from './types';" in rendered["index.ts"]
    assert "export * from './events';" in rendered["index.ts"]


def test_interfaces_follow_serde_naming(rendered: Dict[str, str]) -> None:
    types = rendered["types.ts"]

    assert (
        "export interface User {\n"
        "  userId: number;\n"
        "  role: Role;\n"
        "  address?: Address | null;\n"
        '  "e-mail": string;\n'
        "}\n"
    ) in types
    assert "export interface Address {\n  city: string;\n}\n" in types
    assert "Unused" not in types


def test_types_are_emitted_in_dependency_order(rendered: Dict[str, str]) -> None:
    types = rendered["types.ts"]

    assert types.index("interface Address") < types.index("interface User")
    assert types.index("type Role") < types.index("interface User")


def test_enums(rendered: Dict[str, str]) -> None:
    types = rendered["types.ts"]

    assert 'export type Role = "Admin" | "Member";' in types
    assert (
        "export type Progress =\n"
        '  | { kind: "started"; total_bytes: number }\n'
        '  | { kind: "chunk"; data: number }\n'
        '  | { kind: "finished" };\n'
    ) in types


def test_params_interfaces(rendered: Dict[str, str]) -> None:
    types = rendered["types.ts"]

    assert "import type { Channel } from '@tauri-apps/api/core';" in types
    assert "export interface GetUserParams {\n  userId: number;\n}\n" in types
    assert (
        "export interface DownloadParams {\n"
        "  url: string;\n"
        "  onProgress: Channel<Progress>;\n"
        "}\n"
    ) in types
    assert "ListRolesParams" not in types


def test_command_wrappers(rendered: Dict[str, str]) -> None:
    commands = rendered["commands.ts"]

    assert "import { invoke } from '@tauri-apps/api/core';" in commands
    assert "import type * as types from './types';" in commands
    assert "export { Channel } from '@tauri-apps/api/core';" in commands
    assert (
        "export async function getUser(params: types.GetUserParams): Promise<types.User> {\n"
        "  return invoke<types.User>('get_user', { ...params });\n"
        "}\n"
    ) in commands
    assert (
        "export async function listRoles(): Promise<types.Role[]> {\n"
        "  return invoke<types.Role[]>('list_roles');\n"
        "}\n"
    ) in commands
    assert "export async function download(params: types.DownloadParams): Promise<void> {" in commands


def test_events_module(rendered: Dict[str, str]) -> None:
    events = rendered["events.ts"]

    assert "import { listen, type UnlistenFn } from '@tauri-apps/api/event';" in events
    assert '  DOWNLOAD_FINISHED: "download-finished",' in events
    assert events.count("export async function onDownloadFinished(") == 1
    assert "handler: (payload: string) => void," in events
    assert (
        'return listen<string>("download-finished", (event) => handler(event.payload));' in events
    )
    assert "import type * as types" not in events


def test_output_is_deterministic(project_builder: ProjectBuilder) -> None:
    project_builder.write({"src/lib.rs": SOURCE})
    first_commands = project_builder.analyze()
    analyzer = project_builder.analyzer
    first = TypeScriptGenerator().render_files(
        first_commands, analyzer.discovered_types(), analyzer
    )

    second_commands = project_builder.analyze()
    second = TypeScriptGenerator().render_files(
        second_commands, analyzer.discovered_types(), analyzer
    )

    assert first == second


def test_no_events_means_no_events_file(project_builder: ProjectBuilder) -> None:
    project_builder.write({"src/lib.rs": "#[tauri::command]\nfn ping() -> String {\n    todo!()\n}\n"})
    commands = project_builder.analyze()
    analyzer = project_builder.analyzer

    rendered = TypeScriptGenerator().render_files(commands, analyzer.discovered_types(), analyzer)

    assert list(rendered) == ["types.ts", "commands.ts", "index.ts"]
    assert "import type * as types" not in rendered["commands.ts"]
    assert "export async function ping(): Promise<string> {" in rendered["commands.ts"]


def test_type_mappings_and_parameter_case(project_builder: ProjectBuilder) -> None:
    project_builder.write(
        {
            "src/lib.rs": """
            #[tauri::command]
            fn touch(file_id: Uuid, modified_at: DateTime) -> Uuid {
                todo!()
            }
            """
        }
    )
    commands = project_builder.analyze()
    analyzer = project_builder.analyzer
    config = GenerateConfig(
        type_mappings={"Uuid": "string", "DateTime": "Date"},
        default_parameter_case="snake_case",
    )

    rendered = TypeScriptGenerator(config).render_files(
        commands, analyzer.discovered_types(), analyzer
    )

    assert "  file_id: string;\n  modified_at: Date;\n" in rendered["types.ts"]
    assert "Promise<string>" in rendered["commands.ts"]


def test_unresolved_names_project_to_unknown(project_builder: ProjectBuilder) -> None:
    project_builder.write(
        {
            "src/lib.rs": """
            #[derive(Serialize)]
            pub struct Holder<T> {
                pub value: T,
                pub extra: Missing,
            }

            #[tauri::command]
            fn lookup(key: Missing) -> Holder {
                todo!()
            }
            """
        }
    )
    commands = project_builder.analyze()
    analyzer = project_builder.analyzer

    rendered = TypeScriptGenerator().render_files(commands, analyzer.discovered_types(), analyzer)

    assert "export interface Holder {\n  value: unknown;\n  extra: unknown;\n}\n" in rendered["types.ts"]
    assert "export interface LookupParams {\n  key: unknown;\n}\n" in rendered["types.ts"]
    assert "Promise<types.Holder>" in rendered["commands.ts"]


def test_generate_models_writes_files(project_builder: ProjectBuilder, tmp_path) -> None:
    project_builder.write({"src/lib.rs": SOURCE})
    commands = project_builder.analyze()
    analyzer = project_builder.analyzer
    output = OutputManager(tmp_path / "out")

    written = TypeScriptGenerator().generate_models(
        commands, analyzer.discovered_types(), analyzer, output
    )

    assert written == ["types.ts", "commands.ts", "events.ts", "index.ts"]
    assert all((tmp_path / "out" / name).is_file() for name in written)


def test_custom_templates_dir_overrides_pack(project_builder: ProjectBuilder, tmp_path) -> None:
    templates = tmp_path / "templates"
    templates.mkdir()
    (templates / "index.ts.j2").write_text("// custom {{ modules | join(',') }}\n", encoding="utf-8")
    project_builder.write({"src/lib.rs": SOURCE})
    commands = project_builder.analyze()
    analyzer = project_builder.analyzer

    rendered = TypeScriptGenerator(templates_dir=templates).render_files(
        commands, analyzer.discovered_types(), analyzer
    )

    assert rendered["index.ts"] == "// custom types,commands,events\n"


def test_broken_template_raises_code_generation_error(tmp_path) -> None:
    templates = tmp_path / "templates"
    templates.mkdir()
    (templates / "index.ts.j2").write_text("{% for %}", encoding="utf-8")

    with pytest.raises(CodeGenerationError, match="index.ts.j2"):
        TypeScriptGenerator(templates_dir=templates).render("index.ts.j2", modules=[])


def test_create_generator() -> None:
    assert isinstance(create_generator("none"), TypeScriptGenerator)
    assert isinstance(create_generator("zod"), ZodGenerator)
    with pytest.raises(CodeGenerationError, match="Unsupported validation library"):
        create_generator("yup")


def test_helpers(project_builder: ProjectBuilder) -> None:
    project_builder.write({"src/lib.rs": SOURCE})
    commands = project_builder.analyze()
    analyzer = project_builder.analyzer

    events = unique_events(analyzer.discovered_events())
    used = collect_used_types(commands, events, analyzer.discovered_types())

    assert [event.payload_type for event in events] == ["String"]
    assert sorted(used) == ["Address", "Progress", "Role", "User"]
    assert property_key("userId") == "userId"
    assert property_key("e-mail") == '"e-mail"'
    assert property_key("$ref") == "$ref"
