"""Submission metadata: which stylesheet, whose work, and when it was committed.

These are the fallible edges of a grading run. Every function here degrades
to a conservative default (no stylesheet, "student", not late) instead of
raising, so a grade report is always produced.
"""

from __future__ import annotations

import logging
import os
import re
import subprocess
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Mapping, Protocol
from urllib.parse import unquote, urlparse

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

SKIP_DIRS = {"node_modules", "artifacts", "__pycache__"}

# Authors treated as automation when picking the submission commit
BOT_AUTHOR_PATTERN = re.compile(r"\[bot\]|github-classroom|github-actions", re.IGNORECASE)


# ---------------------------------------------------------------------------
# Stylesheet discovery
# ---------------------------------------------------------------------------


def linked_stylesheets(html: str) -> list[str]:
    """Return href values of `<link rel="stylesheet">` tags in document order.

    Links inside HTML comments are not part of the document and are ignored.
    """
    soup = BeautifulSoup(html, features="html.parser")
    hrefs = []
    for link in soup.find_all("link"):
        rel = link.get("rel") or []
        if isinstance(rel, str):
            rel = rel.split()
        href = (link.get("href") or "").strip()
        if "stylesheet" in (r.lower() for r in rel) and href:
            hrefs.append(href)
    return hrefs


def _local_css_path(root: Path, href: str) -> Path | None:
    parsed = urlparse(href)
    if parsed.scheme or parsed.netloc:
        return None
    rel = unquote(parsed.path).lstrip("/")
    if not rel.lower().endswith(".css"):
        return None
    candidate = root / rel
    # Only files inside the submission count
    if not candidate.resolve().is_relative_to(root.resolve()):
        logger.debug("Ignoring stylesheet link outside the submission: %s", href)
        return None
    return candidate if candidate.is_file() else None


def _scan_for_css(root: Path) -> Path | None:
    candidates = []
    for path in root.rglob("*.css"):
        rel_parts = path.relative_to(root).parts
        if any(p.startswith(".") or p in SKIP_DIRS for p in rel_parts[:-1]):
            continue
        if path.is_file():
            candidates.append(path)
    candidates.sort(key=lambda p: (len(p.relative_to(root).parts), str(p.relative_to(root)).lower()))
    return candidates[0] if candidates else None


def resolve_stylesheet(
    root: Path,
    default_filename: str = "styles.css",
    entry_html: str = "index.html",
) -> Path | None:
    """Locate the submitted stylesheet.

    Order: the default filename, stylesheets linked from the entry HTML,
    then the shallowest `.css` file found by scanning the directory.
    """
    default = root / default_filename
    if default.is_file():
        return default

    html_path = root / entry_html
    if html_path.is_file():
        try:
            html = html_path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.warning(f"Could not read {html_path}: {e}")
            html = ""
        for href in linked_stylesheets(html):
            path = _local_css_path(root, href)
            if path is not None:
                logger.debug("Stylesheet resolved from %s link: %s", entry_html, href)
                return path

    found = _scan_for_css(root) if root.is_dir() else None
    if found is not None:
        logger.debug("Stylesheet resolved by directory scan: %s", found)
    return found


def read_stylesheet(path: Path | None) -> str | None:
    """Read stylesheet text; None when absent or unreadable."""
    if path is None:
        return None
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.warning(f"Could not read stylesheet {path}: {e}")
        return None


# ---------------------------------------------------------------------------
# Student identity
# ---------------------------------------------------------------------------


def resolve_student_id(env: Mapping[str, str] | None = None) -> str:
    """Resolve the student identifier from CI environment metadata.

    Order: STUDENT_USERNAME, the suffix of the classroom repo name
    (`org/lab-3-2-jdoe` -> `jdoe`), GITHUB_ACTOR, the repo name, "student".
    """
    env = os.environ if env is None else env
    repo_full = env.get("GITHUB_REPOSITORY", "")
    repo_name = repo_full.split("/")[1] if "/" in repo_full else repo_full
    from_suffix = repo_name.split("-")[-1] if "-" in repo_name else ""

    for candidate in (env.get("STUDENT_USERNAME", ""), from_suffix, env.get("GITHUB_ACTOR", ""), repo_name):
        if candidate.strip():
            return candidate.strip()
    return "student"


# ---------------------------------------------------------------------------
# Submission timing
# ---------------------------------------------------------------------------


class CommitTimestampProvider(Protocol):
    def latest_commit_time(self) -> datetime | None: ...


@dataclass(frozen=True)
class FixedCommitProvider:
    """Provider returning a known timestamp (or None)."""

    timestamp: datetime | None = None

    def latest_commit_time(self) -> datetime | None:
        return self.timestamp


Runner = Callable[[list[str], Path], str]


def _run_git(args: list[str], cwd: Path) -> str:
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        capture_output=True,
        text=True,
        timeout=10,
    )
    if result.returncode != 0:
        raise RuntimeError(result.stderr.strip() or f"git exited with {result.returncode}")
    return result.stdout


class GitCommitProvider:
    """Commit time from `git log`, preferring the latest human commit.

    Commits authored by automation (classroom bots, CI) are skipped; if only
    automated commits exist, the most recent commit overall is used.
    """

    def __init__(self, repo_path: Path, runner: Runner | None = None, max_count: int = 200):
        self.repo_path = repo_path
        self.runner = runner or _run_git
        self.max_count = max_count

    def latest_commit_time(self) -> datetime | None:
        try:
            out = self.runner(
                ["log", f"--max-count={self.max_count}", "--format=%ct%x09%an%x09%ae"],
                self.repo_path,
            )
        except (OSError, RuntimeError, subprocess.SubprocessError) as e:
            logger.warning(f"Commit history unavailable, treating submission as on time: {e}")
            return None

        latest: datetime | None = None
        for line in out.splitlines():
            parts = line.split("\t")
            try:
                when = datetime.fromtimestamp(int(parts[0].strip()), tz=timezone.utc)
            except (ValueError, IndexError):
                continue
            if latest is None:
                latest = when
            author = " ".join(parts[1:])
            if not BOT_AUTHOR_PATTERN.search(author):
                return when

        if latest is None:
            logger.warning("No commits found, treating submission as on time")
        return latest


def is_late(commit_time: datetime | None, due: datetime) -> bool:
    """A missing commit time is never late."""
    if commit_time is None:
        return False
    return commit_time > due
