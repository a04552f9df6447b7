"""Shared pytest fixtures and test helpers for rulectl tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from rulectl.config.settings import RuleSettings
from rulectl.domain.expressions import ExpressionNode
from rulectl.services.evaluate import EvaluateService


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root and rulectl logger state after each test.

    CLI invocations reconfigure logging; later caplog-based tests must
    not inherit their handlers or levels.
    """
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    rule_logger = logging.getLogger("rulectl")
    rule_level = rule_logger.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    rule_logger.setLevel(rule_level)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def _isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run from an empty temp directory with no config override in the env."""
    monkeypatch.delenv("RULECTL_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> RuleSettings:
    """Default settings, isolated from any rulectl.toml on the host."""
    monkeypatch.delenv("RULECTL_CONFIG", raising=False)
    return RuleSettings.from_cli(start=tmp_path)


@pytest.fixture
def service(settings: RuleSettings) -> EvaluateService:
    return EvaluateService(settings)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def node(tag: str, *children: ExpressionNode, **attrs: str) -> ExpressionNode:
    """Build an expression node; ``boolean_op`` becomes ``boolean-op``."""
    normalized = {key.replace("boolean_op", "boolean-op"): value for key, value in attrs.items()}
    return ExpressionNode(tag=tag, attrs=normalized, children=list(children))


def utc(*args: Any) -> datetime:
    """Aware UTC datetime shorthand."""
    return datetime(*args, tzinfo=UTC)
