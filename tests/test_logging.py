"""Tests for the typegen logger setup."""

from __future__ import annotations

import logging

import pytest

from typegen.logging import ROOT_LOGGER, configure_logging, get_logger


@pytest.fixture(autouse=True)
def _restore_logger():
    logger = logging.getLogger(ROOT_LOGGER)
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


def test_get_logger_nests_under_package() -> None:
    assert get_logger("analysis.analyzer").name == "typegen.analysis.analyzer"
    assert get_logger().name == "typegen"


def test_default_output_hides_progress(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging()
    logger = get_logger("pipeline")

    logger.info("Analyzing sources")
    logger.warning("Skipping broken.rs")

    err = capsys.readouterr().err
    assert "Analyzing sources" not in err
    assert "tauri-typegen: WARNING Skipping broken.rs" in err


def test_verbose_output_names_the_module(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging(verbose=True)

    get_logger("pipeline").debug("Emitting 3 types")

    assert "tauri-typegen: DEBUG [typegen.pipeline] Emitting 3 types" in capsys.readouterr().err


def test_reconfiguring_replaces_handlers() -> None:
    configure_logging()
    logger = configure_logging(verbose=True)

    assert len(logger.handlers) == 1
    assert logger.level == logging.DEBUG
