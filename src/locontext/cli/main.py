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

"""Main CLI application entry point for locontext.

This module serves as the central entry point for the CLI application.
All commands are organized in separate modules under `locontext.cli.commands/`.
"""

from __future__ import annotations

import logging

import typer

from locontext import __version__
from locontext.cli.commands.glossary import glossary_app
from locontext.cli.commands.prompt import prompt
from locontext.cli.commands.stores import load_settings
from locontext.cli.commands.tm import tm_app
from locontext.utils.console import console

# Create main app
app = typer.Typer(
    name="locontext",
    help="locontext - consistent app translations\n\nGlossary, translation memory and prompt context for batch translation.",
    add_completion=True,
    rich_markup_mode="rich",
    no_args_is_help=True,
)

# Register commands
app.command()(prompt)

# Add sub-apps for grouped commands
app.add_typer(glossary_app, name="glossary")
app.add_typer(tm_app, name="tm")


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"locontext version: [bold cyan]{__version__}[/bold cyan]")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(  # noqa: ARG001 - Used by Typer callback
        False,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    """
    locontext - consistent app translations.

    Keeps terminology and phrasing consistent across translation batches.
    """
    level = logging.DEBUG if verbose else load_settings().log_level
    logging.basicConfig(level=level, format="%(message)s", force=True)


def run() -> None:
    """Entry point for CLI."""
    app()


if __name__ == "__main__":
    run()
