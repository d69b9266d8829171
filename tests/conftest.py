"""Shared pytest fixtures for locontext tests.

Provides in-memory stores, a fake usage analyzer, and common utilities.
"""

import logging
from collections.abc import Iterator, Sequence
from pathlib import Path

import pytest
from typer.testing import CliRunner

from locontext.context.config import ContextConfiguration
from locontext.core.models import GlossaryEntry, StringUsageContext, UIElementType
from locontext.memory.glossary import Glossary
from locontext.memory.tm import TranslationMemory
from locontext.utils.config import reset_settings

# ============================================================================
# Fake Collaborators
# ============================================================================


class FakeUsageAnalyzer:
    """Usage analyzer returning canned contexts and recording its calls."""

    def __init__(self, contexts: dict[str, StringUsageContext] | None = None):
        self.contexts = contexts or {}
        self.calls: list[tuple[list[str], Path]] = []

    def analyze_usage(
        self, keys: Sequence[str], project_root: Path
    ) -> dict[str, StringUsageContext]:
        self.calls.append((list(keys), project_root))
        return {key: self.contexts[key] for key in keys if key in self.contexts}


@pytest.fixture
def fake_analyzer() -> FakeUsageAnalyzer:
    """Provide an analyzer that knows one button key."""
    return FakeUsageAnalyzer(
        {
            "save_button": StringUsageContext(
                key="save_button",
                element_types=frozenset({UIElementType.BUTTON}),
                modifiers=[".font"],
                code_snippets=['Button("save_button") { save() }'],
                file_locations=["Views/ContentView.swift"],
            )
        }
    )


# ============================================================================
# Store Fixtures
# ============================================================================


@pytest.fixture
def tm() -> TranslationMemory:
    """Provide an in-memory translation memory with a few French entries."""
    memory = TranslationMemory()
    memory.store("Save Changes", "Enregistrer les modifications", "fr", "openai")
    memory.store("Cancel", "Annuler", "fr", "openai", human_reviewed=True)
    memory.store("Delete", "Supprimer", "fr", "deepl")
    memory.store("Delete", "Löschen", "de", "deepl")
    return memory


@pytest.fixture
def glossary() -> Glossary:
    """Provide an in-memory glossary with a brand name and a domain term."""
    terms = Glossary()
    terms.add_term(GlossaryEntry(term="LotoFuel", do_not_translate=True))
    terms.add_term(
        GlossaryEntry(
            term="Fill-up",
            definition="A single refueling event",
            translations={"fr": "plein", "de": "Tankfüllung"},
        )
    )
    return terms


@pytest.fixture
def context_config(tmp_path: Path) -> ContextConfiguration:
    """Provide a context configuration pointing at a temporary project."""
    return ContextConfiguration(
        app_name="LotoFuel",
        app_description="Fuel tracking app",
        domain="automotive",
        project_path=tmp_path,
    )


# ============================================================================
# Settings Isolation
# ============================================================================


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    """Keep LOCONTEXT_* variables and .env files from leaking into tests."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    for name in [
        "LOCONTEXT_TM_FILE",
        "LOCONTEXT_GLOSSARY_FILE",
        "LOCONTEXT_MIN_SIMILARITY",
        "LOCONTEXT_MAX_MATCHES",
        "LOCONTEXT_PROJECT_PATH",
        "LOCONTEXT_LOG_LEVEL",
    ]:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    reset_settings()
    yield
    reset_settings()
    # The CLI callback reconfigures the root logger.
    root.handlers[:] = handlers
    root.setLevel(level)


# ============================================================================
# CLI Fixtures
# ============================================================================


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide Typer CLI test runner."""
    return CliRunner()


# ============================================================================
# Pytest Configuration Hooks
# ============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Modify test collection to auto-mark tests based on location."""
    for item in items:
        # Auto-mark based on test file location
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


def pytest_addoption(parser: pytest.Parser) -> None:
    """Add custom command line options."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="Run slow tests",
    )


def pytest_runtest_setup(item: pytest.Item) -> None:
    """Skip tests based on markers and command line options."""
    # Skip slow tests unless --run-slow is specified
    if "slow" in item.keywords and not item.config.getoption("--run-slow"):
        pytest.skip("Slow tests skipped (use --run-slow to run)")
