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

"""Render translation prompts for a batch of strings."""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path

import typer
from pydantic import TypeAdapter, ValidationError

from locontext.cli.commands.stores import (
    load_settings,
    open_glossary,
    open_translation_memory,
    resolve_glossary_path,
    resolve_tm_path,
)
from locontext.context import ContextBuilder, ContextConfiguration, SourceCodeAnalyzer
from locontext.core.models import BatchEntry
from locontext.prompts import PromptRenderer
from locontext.utils.console import print_error

BATCH_ADAPTER = TypeAdapter(list[BatchEntry])


class PromptFormat(str, Enum):
    """Output format for rendered prompts."""

    FULL = "full"
    COMPACT = "compact"
    JSON = "json"


def load_batch(path: Path) -> list[BatchEntry]:
    """Load a batch file: a JSON array of ``{"key", "value", "comment"}`` objects.

    Raises:
        typer.Exit: If the file is missing or not a valid batch
    """
    try:
        return BATCH_ADAPTER.validate_json(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        print_error(f"Batch file not found: {path}")
        raise typer.Exit(code=1) from e
    except (OSError, UnicodeDecodeError) as e:
        print_error(f"Cannot read batch file {path}: {e}")
        raise typer.Exit(code=1) from e
    except ValidationError as e:
        print_error(f"Invalid batch file {path}: {e.error_count()} validation errors")
        raise typer.Exit(code=1) from e


def prompt(
    batch_file: Path = typer.Argument(..., help="JSON array of {key, value, comment} objects"),
    lang: str = typer.Option(..., "--lang", "-l", help="Target language code (e.g. 'fr')"),
    app_name: str = typer.Option("App", "--app-name", help="App name for the prompt context"),
    description: str = typer.Option("", "--description", help="Brief description of the app"),
    output_format: PromptFormat = typer.Option(
        PromptFormat.FULL, "--format", help="Output format: full, compact or json"
    ),
    simple: bool = typer.Option(
        False, "--simple", help="Use the glossary only (skip TM and source analysis)"
    ),
    project: Path | None = typer.Option(
        None, "--project", "-p", help="Project root to scan for string usage"
    ),
    glossary_file: Path | None = typer.Option(None, "--glossary-file", help="Glossary file"),
    tm_file: Path | None = typer.Option(None, "--tm-file", help="Translation memory file"),
) -> None:
    """
    Render translation prompts for a batch of strings.

    Builds context from the glossary, the translation memory and (with
    --project) source code usage, then prints the prompts a translation
    backend would receive.

    Example:
        locontext prompt batch.json --lang fr --app-name LotoFuel
        locontext prompt batch.json --lang de --format json --simple
    """
    entries = load_batch(batch_file)
    project_path = project if project is not None else load_settings().project_path

    config = ContextConfiguration(
        app_name=app_name,
        app_description=description,
        project_path=project_path,
    )
    builder = ContextBuilder(
        config,
        usage_analyzer=SourceCodeAnalyzer() if project_path is not None else None,
        glossary=open_glossary(resolve_glossary_path(glossary_file)),
    )

    if simple:
        context = builder.build_simple_context(entries, lang)
    else:
        builder = builder.with_translation_memory(open_translation_memory(resolve_tm_path(tm_file)))
        try:
            context = builder.build_context(entries, lang)
        except FileNotFoundError as e:
            print_error(str(e))
            raise typer.Exit(code=1) from e

    renderer = PromptRenderer(context)

    if output_format is PromptFormat.JSON:
        typer.echo(json.dumps(renderer.to_json_request(), indent=2, ensure_ascii=False))
    elif output_format is PromptFormat.COMPACT:
        typer.echo(renderer.to_compact_system_prompt())
        typer.echo()
        typer.echo(renderer.to_user_prompt())
    else:
        typer.echo(renderer.to_system_prompt())
        typer.echo()
        typer.echo(renderer.to_user_prompt())
