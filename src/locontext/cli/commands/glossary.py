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

"""Glossary management CLI commands."""

from __future__ import annotations

import json
from pathlib import Path

import typer
from rich.markup import escape
from rich.table import Table

from locontext.cli.commands.stores import (
    open_glossary,
    report_missing_glossary,
    resolve_glossary_path,
    save_store,
)
from locontext.core.errors import StoreDecodeError
from locontext.core.models import GlossaryEntry, PartOfSpeech
from locontext.memory import Glossary
from locontext.utils.console import console, print_error, print_info, print_success

# Help text constants
GLOSSARY_FILE_HELP = "Glossary file (default: LOCONTEXT_GLOSSARY_FILE)"

# Create glossary subcommand app
glossary_app = typer.Typer(
    name="glossary",
    help="Manage the project glossary",
    no_args_is_help=True,
)


def parse_translations(values: list[str]) -> dict[str, str]:
    """Parse ``lang:value`` pairs into a translations mapping.

    Raises:
        typer.BadParameter: If a pair has no language or no value
    """
    translations: dict[str, str] = {}
    for item in values:
        language, sep, value = item.partition(":")
        language = language.strip()
        if not sep or not language or not value:
            raise typer.BadParameter(f"Invalid translation '{item}'. Use lang:value format")
        translations[language] = value
    return translations


@glossary_app.command("list")
def list_terms(
    file: Path | None = typer.Option(None, "--file", "-f", help=GLOSSARY_FILE_HELP),
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """List all glossary terms.

    Example:
        locontext glossary list
        locontext glossary list --json
    """
    path = resolve_glossary_path(file)
    if not path.exists():
        report_missing_glossary(path)
        return

    glossary = open_glossary(path)
    terms = glossary.all_terms

    if as_json:
        typer.echo(json.dumps(glossary.export_terms().to_json_dict(), indent=2, ensure_ascii=False))
        return

    if not terms:
        print_info("Glossary is empty. Use 'locontext glossary add' to add terms.")
        return

    table = Table(title=f"Glossary Terms ({len(terms)})", show_lines=False)
    table.add_column("Term", style="cyan", no_wrap=True)
    table.add_column("Translations", style="green")
    table.add_column("Definition", style="dim", max_width=40)
    table.add_column("Flags", style="yellow")

    for entry in terms:
        flags = []
        if entry.do_not_translate:
            flags.append("DNT")
        if entry.case_sensitive:
            flags.append("CS")
        translations = ", ".join(f"{lang}: {value}" for lang, value in sorted(entry.translations.items()))
        table.add_row(
            escape(entry.term),
            escape(translations) or "-",
            escape(entry.definition or ""),
            " ".join(flags),
        )

    console.print(table)


@glossary_app.command("add")
def add_term(
    term: str = typer.Argument(..., help="Term to add"),
    file: Path | None = typer.Option(None, "--file", "-f", help=GLOSSARY_FILE_HELP),
    definition: str | None = typer.Option(
        None, "--definition", "-d", help="Definition or context for the term"
    ),
    translation: list[str] = typer.Option(
        [], "--translation", "-t", help="Translation as lang:value (repeatable)"
    ),
    do_not_translate: bool = typer.Option(
        False, "--do-not-translate", help="Keep the term unchanged in every language"
    ),
    case_sensitive: bool = typer.Option(False, "--case-sensitive", help="Match with exact case"),
    part_of_speech: PartOfSpeech | None = typer.Option(
        None, "--part-of-speech", help="Part of speech"
    ),
) -> None:
    """Add or update a glossary term.

    Example:
        locontext glossary add LotoFuel --do-not-translate
        locontext glossary add "fill-up" -t fr:plein -t de:Tankfüllung
    """
    if not term.strip():
        print_error("Term must not be empty")
        raise typer.Exit(code=1)

    translations = parse_translations(translation)
    path = resolve_glossary_path(file)
    glossary = open_glossary(path)

    glossary.add_term(
        GlossaryEntry(
            term=term,
            definition=definition,
            translations=translations,
            case_sensitive=case_sensitive,
            do_not_translate=do_not_translate,
            part_of_speech=part_of_speech,
        )
    )
    save_store(glossary)

    print_success(f'Added term: "{term}"')
    if do_not_translate:
        console.print("  [red]DO NOT TRANSLATE[/red]")
    if definition:
        console.print(f"  Definition: {escape(definition)}")
    if translations:
        pairs = ", ".join(f"{lang}:{value}" for lang, value in sorted(translations.items()))
        console.print(f"  Translations: {escape(pairs)}")


@glossary_app.command("remove")
def remove_term(
    term: str = typer.Argument(..., help="Term to remove (case-insensitive)"),
    file: Path | None = typer.Option(None, "--file", "-f", help=GLOSSARY_FILE_HELP),
) -> None:
    """Remove a glossary term.

    Exits with code 1 if the term is not in the glossary.
    """
    path = resolve_glossary_path(file)
    glossary = open_glossary(path)

    if glossary.get_term(term) is None:
        print_error(f'Term not found: "{term}"')
        raise typer.Exit(code=1)

    glossary.remove_term(term)
    save_store(glossary)
    print_success(f'Removed term: "{term}"')


@glossary_app.command("init")
def init_glossary(
    file: Path | None = typer.Option(None, "--file", "-f", help=GLOSSARY_FILE_HELP),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing glossary"),
) -> None:
    """Create a new glossary file with a placeholder term.

    Exits with code 1 if the file exists and --force is not given.
    """
    path = resolve_glossary_path(file)

    if path.exists() and not force:
        print_error(f"Glossary file already exists: {path}")
        print_error("Use --force to overwrite.")
        raise typer.Exit(code=1)

    # Start empty; an existing file is overwritten, not merged.
    glossary = Glossary(path)
    glossary.add_term(
        GlossaryEntry(
            term="AppName",
            definition="Replace with your app name",
            do_not_translate=True,
        )
    )
    save_store(glossary)

    print_success(f"Created glossary file: {path}")
    console.print("\nNext steps:")
    console.print("  1. Add terms with 'locontext glossary add <term>'")
    console.print("  2. Configure translations with -t (e.g. -t fr:Bonjour)")
    console.print("  3. Mark brand names with --do-not-translate")


@glossary_app.command("import")
def import_terms(
    source: Path = typer.Argument(..., help="Interchange JSON file to import"),
    file: Path | None = typer.Option(None, "--file", "-f", help=GLOSSARY_FILE_HELP),
) -> None:
    """Import terms from an interchange JSON file.

    Existing terms with the same (case-insensitive) text are replaced.
    """
    path = resolve_glossary_path(file)
    glossary = open_glossary(path)

    try:
        count = glossary.import_json(source)
    except FileNotFoundError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    except StoreDecodeError as e:
        print_error(f"Invalid glossary document: {source}")
        raise typer.Exit(code=1) from e

    save_store(glossary)
    print_success(f"Imported {count} terms into {path}")


@glossary_app.command("export")
def export_terms(
    destination: Path = typer.Argument(..., help="Interchange JSON file to write"),
    file: Path | None = typer.Option(None, "--file", "-f", help=GLOSSARY_FILE_HELP),
) -> None:
    """Export terms to an interchange JSON file."""
    path = resolve_glossary_path(file)
    if not path.exists():
        report_missing_glossary(path)
        raise typer.Exit(code=1)

    glossary = open_glossary(path)
    try:
        count = glossary.export_json(destination)
    except OSError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Exported {count} terms to {destination}")
