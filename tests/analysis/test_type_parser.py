"""Tests for the Rust type expression parser."""

from __future__ import annotations

import pytest

from typegen.analysis.type_parser import (
    extract_type_names,
    generic_arguments,
    is_custom_type_name,
    parse_type_structure,
    split_top_level,
)
from typegen.models import TypeKind, TypeStructure


@pytest.mark.parametrize(
    ("rust_type", "expected"),
    [
        ("String", "Primitive(string)"),
        ("&str", "Primitive(string)"),
        ("&'a mut String", "Primitive(string)"),
        ("u64", "Primitive(number)"),
        ("bool", "Primitive(boolean)"),
        ("()", "Primitive(void)"),
        ("", "Primitive(void)"),
        ("Option<Vec<i32>>", "Optional(Array(Primitive(number)))"),
        ("Result<User, String>", "Result(Custom(User))"),
        ("HashMap<String, Vec<User>>", "Map(Primitive(string), Array(Custom(User)))"),
        ("std::collections::BTreeMap<u32, String>", "Map(Primitive(number), Primitive(string))"),
        ("HashSet<String>", "Set(Primitive(string))"),
        ("(i32, String)", "Tuple(Primitive(number), Primitive(string))"),
        ("(i32,)", "Tuple(Primitive(number))"),
        ("(User)", "Custom(User)"),
        ("[u8; 32]", "Array(Primitive(number))"),
        ("&[String]", "Array(Primitive(string))"),
        ("Box<User>", "Custom(User)"),
        ("Arc<Mutex<State>>", "Custom(Mutex<State>)"),
        ("crate::models::User", "Custom(User)"),
        ("unknown", "Primitive(unknown)"),
    ],
)
def test_parse_type_structure(rust_type: str, expected: str) -> None:
    assert parse_type_structure(rust_type).describe() == expected


def test_map_keeps_nested_commas_inside_value() -> None:
    structure = parse_type_structure("HashMap<String, HashMap<u32, (bool, f64)>>")

    assert structure.kind is TypeKind.MAP
    assert structure.key == TypeStructure.primitive("string")
    assert structure.value.kind is TypeKind.MAP
    assert structure.value.value.kind is TypeKind.TUPLE
    assert len(structure.value.value.elements) == 2


def test_option_is_tried_before_other_wrappers() -> None:
    structure = parse_type_structure("Option<HashMap<String, Option<User>>>")

    assert structure.kind is TypeKind.OPTIONAL
    assert structure.inner.kind is TypeKind.MAP
    assert structure.inner.value.kind is TypeKind.OPTIONAL


def test_generic_user_types_keep_their_arguments() -> None:
    structure = parse_type_structure("Page<User>")

    assert structure.is_custom
    assert structure.name == "Page<User>"
    assert is_custom_type_name(structure.name) is False


def test_split_top_level_respects_brackets_and_quotes() -> None:
    parts = split_top_level('A, B<C, D>, (E, F), "x, y"')

    assert parts == ["A", "B<C, D>", "(E, F)", '"x, y"']


def test_split_top_level_ignores_fn_arrows() -> None:
    assert split_top_level("fn(u8) -> u8, String") == ["fn(u8) -> u8", "String"]


def test_generic_arguments_drop_lifetimes() -> None:
    assert generic_arguments("State<'_, AppState>") == ["AppState"]
    assert generic_arguments("String") == []


def test_is_custom_type_name() -> None:
    assert is_custom_type_name("User")
    assert not is_custom_type_name("String")
    assert not is_custom_type_name("Vec")
    assert not is_custom_type_name("lowercase")
    assert not is_custom_type_name("")


def test_extract_type_names_ignores_error_type() -> None:
    assert extract_type_names("Result<Vec<User>, AppError>") == {"User"}
    assert extract_type_names("HashMap<Key, Option<Value>>") == {"Key", "Value"}
    assert extract_type_names("i32") == set()
