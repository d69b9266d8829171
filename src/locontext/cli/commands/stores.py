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

"""Shared store loading for CLI commands.

Each command opens its store through these helpers so a missing file and a
corrupt file are reported differently.
"""

from __future__ import annotations

import logging
from pathlib import Path

import typer

from locontext.core.errors import ConfigurationError, StoreDecodeError
from locontext.memory import Glossary, TranslationMemory
from locontext.utils.config import Settings, get_settings
from locontext.utils.console import print_error, print_info

logger = logging.getLogger(__name__)


def load_settings() -> Settings:
    """Get settings, exiting with code 1 on invalid configuration."""
    try:
        return get_settings()
    except ConfigurationError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def resolve_glossary_path(path: Path | None) -> Path:
    return path if path is not None else load_settings().glossary_file


def resolve_tm_path(path: Path | None) -> Path:
    return path if path is not None else load_settings().tm_file


def open_glossary(path: Path) -> Glossary:
    """Load a glossary, exiting with code 1 if the file is corrupt."""
    glossary = Glossary(path)
    try:
        glossary.load()
    except StoreDecodeError as e:
        print_error(f"Glossary file is corrupt: {path}")
        logger.debug("Decode failure: %s", e)
        raise typer.Exit(code=1) from e
    except OSError as e:
        print_error(f"Cannot read glossary file {path}: {e}")
        raise typer.Exit(code=1) from e
    return glossary


def open_translation_memory(path: Path) -> TranslationMemory:
    """Load a translation memory, exiting with code 1 if the file is corrupt."""
    kwargs = load_settings().tm_kwargs()
    kwargs["storage_path"] = path
    tm = TranslationMemory(**kwargs)
    try:
        tm.load()
    except StoreDecodeError as e:
        print_error(f"Translation memory file is corrupt: {path}")
        logger.debug("Decode failure: %s", e)
        raise typer.Exit(code=1) from e
    except OSError as e:
        print_error(f"Cannot read translation memory file {path}: {e}")
        raise typer.Exit(code=1) from e
    return tm


def save_store(store: Glossary | TranslationMemory) -> None:
    """Save a store, exiting with code 1 on write failure."""
    try:
        store.save()
    except OSError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def report_missing_glossary(path: Path) -> None:
    print_info(f"No glossary file found at {path}")
    print_info("Run 'locontext glossary init' to create one.")
