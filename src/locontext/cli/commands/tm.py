# Copyright 2025 KTTC AI (https://github.com/kttc-ai)
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Translation memory CLI commands."""

from __future__ import annotations

import json
from pathlib import Path

import typer
from rich.markup import escape
from rich.table import Table

from locontext.cli.commands.stores import open_translation_memory, resolve_tm_path, save_store
from locontext.utils.console import console, print_info, print_success

TM_FILE_HELP = "Translation memory file (default: LOCONTEXT_TM_FILE)"

tm_app = typer.Typer(
    name="tm",
    help="Inspect and maintain the translation memory",
    no_args_is_help=True,
)


@tm_app.command("info")
def info(
    file: Path | None = typer.Option(None, "--file", "-f", help=TM_FILE_HELP),
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show translation memory statistics.

    Example:
        locontext tm info
        locontext tm info --json
    """
    path = resolve_tm_path(file)
    if not path.exists():
        print_info(f"No translation memory file found at {path}.")
        print_info("It is created when the first translation is stored.")
        return

    stats = open_translation_memory(path).statistics

    if as_json:
        payload = {"file": str(path), **stats.model_dump()}
        typer.echo(json.dumps(payload, indent=2, sort_keys=True))
        return

    console.print("[bold]Translation Memory Info[/bold]")
    console.print(f"File: {escape(str(path))}")
    console.print(f"Entries: {stats.total_entries}")
    console.print(f"Human reviewed: {stats.human_reviewed_count}")

    if stats.language_counts:
        table = Table(show_header=True)
        table.add_column("Language", style="cyan")
        table.add_column("Translations", style="yellow", justify="right")
        for language, count in sorted(stats.language_counts.items()):
            table.add_row(escape(language), str(count))
        console.print(table)

    if stats.provider_counts:
        providers = ", ".join(
            f"{name} ({count})" for name, count in sorted(stats.provider_counts.items())
        )
        console.print(f"Providers: {escape(providers)}")


@tm_app.command("clear")
def clear(
    file: Path | None = typer.Option(None, "--file", "-f", help=TM_FILE_HELP),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Remove every entry from the translation memory."""
    path = resolve_tm_path(file)
    if not path.exists():
        print_info(f"No translation memory file found at {path}.")
        return

    tm = open_translation_memory(path)
    if not yes:
        typer.confirm(
            f"Delete all {len(tm)} entries from {path}? Strings will be re-translated",
            abort=True,
        )

    tm.clear()
    save_store(tm)
    print_success(f"Translation memory cleared: {path}")


@tm_app.command("lookup")
def lookup(
    text: str = typer.Argument(..., help="Source text to look up"),
    lang: str = typer.Option(..., "--lang", "-l", help="Target language code (e.g. 'fr')"),
    file: Path | None = typer.Option(None, "--file", "-f", help=TM_FILE_HELP),
    limit: int | None = typer.Option(None, "--limit", "-n", min=1, help="Maximum matches"),
) -> None:
    """Find exact and fuzzy matches for a source text.

    Example:
        locontext tm lookup "Save Change" --lang fr
    """
    path = resolve_tm_path(file)
    tm = open_translation_memory(path)
    matches = tm.find_similar(text, lang, limit=limit)

    if not matches:
        print_info(f"No matches for {text!r} in {lang}")
        return

    table = Table(title=f"Matches for {escape(repr(text))} ({escape(lang)})")
    table.add_column("Similarity", style="yellow", justify="right")
    table.add_column("Source", style="cyan")
    table.add_column("Translation", style="green")
    table.add_column("Reviewed", justify="center")

    for match in matches:
        table.add_row(
            f"{match.similarity:.0%}",
            escape(match.source),
            escape(match.translation),
            "✓" if match.human_reviewed else "",
        )

    console.print(table)
