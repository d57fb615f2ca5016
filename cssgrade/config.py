"""Grader configuration.

A GraderConfig is built once per run (defaults < cssgrade.toml < CLI options)
and passed down explicitly. Nothing reads module-level settings at grading time.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

import tomllib

from .errors import ConfigError

# 09 Oct 2025, 11:59 PM Riyadh time
DEFAULT_DUE = "2025-10-09T23:59:00+03:00"
DEFAULT_CONFIG_NAME = "cssgrade.toml"


def parse_due(value: str | datetime) -> datetime:
    """Parse an ISO-8601 instant. Naive values are rejected."""
    if isinstance(value, datetime):
        due = value
    else:
        try:
            due = datetime.fromisoformat(str(value).strip())
        except ValueError as e:
            raise ConfigError(f"Invalid due date {value!r}: expected ISO-8601 with offset") from e
    if due.tzinfo is None:
        raise ConfigError(f"Due date {value!r} has no UTC offset")
    return due


@dataclass(frozen=True)
class GraderConfig:
    due: datetime = dataclasses.field(default_factory=lambda: parse_due(DEFAULT_DUE))
    catalog: str = "lab-3-2"
    default_filename: str = "styles.css"
    entry_html: str = "index.html"
    artifacts_dir: Path = Path("artifacts")

    def with_overrides(self, **overrides: Any) -> "GraderConfig":
        """Return a copy with non-None overrides applied."""
        values = {k: v for k, v in overrides.items() if v is not None}
        if "due" in values:
            values["due"] = parse_due(values["due"])
        if "artifacts_dir" in values:
            values["artifacts_dir"] = Path(values["artifacts_dir"])
        return dataclasses.replace(self, **values)


def load_config(path: Path | None) -> GraderConfig:
    """Load a GraderConfig from the `[grader]` table of a TOML file.

    A missing file yields the defaults.
    """
    config = GraderConfig()
    if path is None or not path.exists():
        return config

    with open(path, "rb") as f:
        try:
            data = tomllib.load(f)
        except Exception as e:
            raise ConfigError(f"Failed to parse config TOML {path}: {e}") from e

    grader = data.get("grader", {})
    if not isinstance(grader, dict):
        raise ConfigError(f"{path}: [grader] must be a table")

    unknown = set(grader) - {f.name for f in dataclasses.fields(GraderConfig)}
    if unknown:
        raise ConfigError(f"{path}: unknown [grader] keys: {', '.join(sorted(unknown))}")

    return config.with_overrides(**grader)
