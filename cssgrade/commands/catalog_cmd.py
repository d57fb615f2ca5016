"""Catalog and parser inspection commands."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..catalog import CatalogDef
from ..stylesheet import parse
from ..submission import read_stylesheet


def run_catalog(catalog: CatalogDef, console: Console | None = None) -> int:
    """Print the tasks and checks of a catalog."""
    console = console or Console()

    console.print(f"{catalog.catalog_id} v{catalog.version}", style="bold")
    if catalog.description:
        console.print(catalog.description, style="dim")

    for task in catalog.tasks:
        console.print()
        table = Table(title=f"{task.id}: {task.name} ({task.max_marks} marks)", title_justify="left")
        table.add_column("Kind", style="cyan")
        table.add_column("Selector(s)")
        table.add_column("Properties")

        for check in task.checks:
            targets = ", ".join(check.selectors) if check.selectors else ":root"
            if check.selector_pattern:
                targets += f" (+ /{check.selector_pattern}/)"
            props = []
            for prop in check.properties:
                aliases = catalog.aliases.get(prop, ()) if check.kind == "properties" else ()
                props.append(f"{prop} ({' | '.join(aliases)})" if aliases else prop)
            joiner = " OR " if check.kind == "any-of" else ", "
            table.add_row(check.kind, escape(targets), escape(joiner.join(props)))

        console.print(table)

    console.print()
    console.print(
        f"Tasks: {catalog.task_marks} marks, submission: {catalog.submission.on_time} on time / "
        f"{catalog.submission.late} late",
        style="dim",
    )
    return 0


def run_rules(css_path: Path, console: Console | None = None) -> int:
    """Print the rules the parser extracts from a stylesheet."""
    console = console or Console()

    text = read_stylesheet(css_path)
    if text is None:
        console.print(f"Cannot read {css_path}", style="bold red")
        return 1

    rules = parse(text)
    table = Table(title=f"{len(rules)} rule(s) in {css_path.name}")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Selector", style="cyan", no_wrap=True)
    table.add_column("Declarations")
    for i, rule in enumerate(rules, 1):
        table.add_row(str(i), escape(rule.selector), escape(rule.declarations) or "[dim](empty)[/]")
    console.print(table)
    return 0

