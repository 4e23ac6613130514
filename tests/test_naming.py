"""Tests for serde-compatible renaming."""

from __future__ import annotations

import pytest

from typegen.naming import (
    RenameRule,
    command_function_name,
    event_constant_name,
    event_function_name,
    resolve_field_name,
    resolve_parameter_name,
    resolve_variant_name,
)


@pytest.mark.parametrize(
    ("rule", "expected"),
    [
        (RenameRule.LOWER, "user_id"),
        (RenameRule.UPPER, "USER_ID"),
        (RenameRule.PASCAL, "UserId"),
        (RenameRule.CAMEL, "userId"),
        (RenameRule.SNAKE, "user_id"),
        (RenameRule.SCREAMING_SNAKE, "USER_ID"),
        (RenameRule.KEBAB, "user-id"),
        (RenameRule.SCREAMING_KEBAB, "USER-ID"),
    ],
)
def test_apply_to_field(rule: RenameRule, expected: str) -> None:
    assert rule.apply_to_field("user_id") == expected


@pytest.mark.parametrize(
    ("rule", "expected"),
    [
        (RenameRule.LOWER, "httperror"),
        (RenameRule.UPPER, "HTTPERROR"),
        (RenameRule.PASCAL, "HttpError"),
        (RenameRule.CAMEL, "httpError"),
        (RenameRule.SNAKE, "http_error"),
        (RenameRule.SCREAMING_SNAKE, "HTTP_ERROR"),
        (RenameRule.KEBAB, "http-error"),
        (RenameRule.SCREAMING_KEBAB, "HTTP-ERROR"),
    ],
)
def test_apply_to_variant(rule: RenameRule, expected: str) -> None:
    assert rule.apply_to_variant("HttpError") == expected


def test_parse_rejects_unknown_rules() -> None:
    assert RenameRule.parse("camelCase") is RenameRule.CAMEL
    assert RenameRule.parse("Camel") is None
    assert RenameRule.parse(None) is None


def test_field_name_precedence() -> None:
    assert resolve_field_name("user_id") == "user_id"
    assert resolve_field_name("user_id", default_case="camelCase") == "userId"
    assert (
        resolve_field_name("user_id", rename_all="kebab-case", default_case="camelCase")
        == "user-id"
    )
    assert (
        resolve_field_name("user_id", rename="uid", rename_all="kebab-case") == "uid"
    )


def test_parameter_names_default_to_camel_case() -> None:
    assert resolve_parameter_name("user_id") == "userId"
    assert resolve_parameter_name("user_id", rename_all="snake_case") == "user_id"
    assert resolve_parameter_name("user_id", default_case="snake_case") == "user_id"


def test_variant_name() -> None:
    assert resolve_variant_name("InProgress") == "InProgress"
    assert resolve_variant_name("InProgress", rename_all="snake_case") == "in_progress"
    assert resolve_variant_name("InProgress", rename="busy", rename_all="snake_case") == "busy"


def test_generated_identifiers() -> None:
    assert command_function_name("get_user_profile") == "getUserProfile"
    assert event_function_name("download-progress") == "onDownloadProgress"
    assert event_function_name("user:logged_in") == "onUserLoggedIn"
    assert event_constant_name("download-progress") == "DOWNLOAD_PROGRESS"
    assert event_constant_name("user:logged_in") == "USER_LOGGED_IN"
