"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta
from pathlib import Path

import pytest

from cssgrade.catalog import CatalogDef, load_builtin_catalog
from cssgrade.config import GraderConfig, parse_due
from cssgrade.stylesheet import StyleRule, parse
from cssgrade.submission import FixedCommitProvider


@pytest.fixture
def complete_submission_path() -> Path:
    """Submission directory whose stylesheet implements every task."""
    return Path(__file__).parent / "fixtures" / "complete"


@pytest.fixture
def complete_rules(complete_submission_path: Path) -> list[StyleRule]:
    return parse((complete_submission_path / "styles.css").read_text(encoding="utf-8"))


@pytest.fixture
def catalog() -> CatalogDef:
    """The builtin lab-3-2 catalog."""
    return load_builtin_catalog("lab-3-2")


@pytest.fixture
def due() -> datetime:
    return parse_due("2025-10-09T23:59:00+03:00")


@pytest.fixture
def config(tmp_path: Path, due: datetime) -> GraderConfig:
    return GraderConfig(due=due, artifacts_dir=tmp_path / "artifacts")


@pytest.fixture
def on_time(due: datetime) -> FixedCommitProvider:
    return FixedCommitProvider(due - timedelta(hours=1))


@pytest.fixture
def late(due: datetime) -> FixedCommitProvider:
    return FixedCommitProvider(due + timedelta(minutes=1))
