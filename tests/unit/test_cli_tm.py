"""Tests for CLI commands tm module."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from locontext.cli.commands.tm import tm_app
from locontext.memory.tm import TranslationMemory


@pytest.fixture
def tm_file(tmp_path: Path) -> Path:
    """Provide a saved translation memory."""
    path = tmp_path / "tm.json"
    tm = TranslationMemory(path)
    tm.store("Save Changes", "Enregistrer les modifications", "fr", "openai")
    tm.store("Cancel", "Annuler", "fr", "deepl", human_reviewed=True)
    tm.store("Cancel", "Abbrechen", "de", "deepl")
    tm.save()
    return path


@pytest.mark.unit
class TestInfoCommand:
    """Tests for tm info command."""

    def test_info(self, tm_file: Path) -> None:
        """Test statistics are printed."""
        runner = CliRunner()

        result = runner.invoke(tm_app, ["info", "--file", str(tm_file)])

        assert result.exit_code == 0
        assert "Entries: 2" in result.stdout
        assert "Human reviewed: 1" in result.stdout

    def test_info_json(self, tm_file: Path) -> None:
        """Test JSON statistics."""
        runner = CliRunner()

        result = runner.invoke(tm_app, ["info", "--file", str(tm_file), "--json"])

        assert result.exit_code == 0
        stats = json.loads(result.stdout)
        assert stats["total_entries"] == 2
        assert stats["language_counts"] == {"fr": 2, "de": 1}
        assert stats["provider_counts"] == {"openai": 1, "deepl": 2}
        assert stats["file"] == str(tm_file)

    def test_info_missing_file(self, tmp_path: Path) -> None:
        """Test a missing memory is reported, not an error."""
        runner = CliRunner()

        result = runner.invoke(tm_app, ["info", "--file", str(tmp_path / "none.json")])

        assert result.exit_code == 0
        assert "No translation memory file found" in result.stdout

    def test_info_corrupt_file(self, tmp_path: Path) -> None:
        """Test a corrupt memory exits 1."""
        path = tmp_path / "tm.json"
        path.write_text('{"entries": 3}')
        runner = CliRunner()

        result = runner.invoke(tm_app, ["info", "--file", str(path)])

        assert result.exit_code == 1
        assert "corrupt" in result.stdout

    def test_info_uses_settings_path(self, tm_file: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the file defaults to LOCONTEXT_TM_FILE."""
        monkeypatch.setenv("LOCONTEXT_TM_FILE", str(tm_file))
        runner = CliRunner()

        result = runner.invoke(tm_app, ["info"])

        assert result.exit_code == 0
        assert "Entries: 2" in result.stdout


@pytest.mark.unit
class TestClearCommand:
    """Tests for tm clear command."""

    def test_clear_with_yes(self, tm_file: Path) -> None:
        """Test --yes clears without prompting."""
        runner = CliRunner()

        result = runner.invoke(tm_app, ["clear", "--file", str(tm_file), "--yes"])

        assert result.exit_code == 0
        reloaded = TranslationMemory(tm_file)
        reloaded.load()
        assert len(reloaded) == 0

    def test_clear_confirmed(self, tm_file: Path) -> None:
        """Test answering yes at the prompt clears the memory."""
        runner = CliRunner()

        result = runner.invoke(tm_app, ["clear", "--file", str(tm_file)], input="y\n")

        assert result.exit_code == 0
        assert json.loads(tm_file.read_text(encoding="utf-8"))["entries"] == {}

    def test_clear_aborted(self, tm_file: Path) -> None:
        """Test answering no keeps the memory."""
        runner = CliRunner()

        result = runner.invoke(tm_app, ["clear", "--file", str(tm_file)], input="n\n")

        assert result.exit_code == 1
        assert len(json.loads(tm_file.read_text(encoding="utf-8"))["entries"]) == 2


@pytest.mark.unit
class TestLookupCommand:
    """Tests for tm lookup command."""

    def test_lookup_fuzzy(self, tm_file: Path) -> None:
        """Test a near-duplicate is found."""
        runner = CliRunner()

        result = runner.invoke(
            tm_app, ["lookup", "Save Change", "--lang", "fr", "--file", str(tm_file)]
        )

        assert result.exit_code == 0
        assert "Enregistrer" in result.stdout
        assert "92%" in result.stdout

    def test_lookup_no_match(self, tm_file: Path) -> None:
        """Test no matches is not an error."""
        runner = CliRunner()

        result = runner.invoke(tm_app, ["lookup", "Odometer", "--lang", "fr", "--file", str(tm_file)])

        assert result.exit_code == 0
        assert "No matches" in result.stdout

    def test_lookup_respects_min_similarity(
        self, tm_file: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test the threshold comes from settings."""
        monkeypatch.setenv("LOCONTEXT_MIN_SIMILARITY", "0.95")
        runner = CliRunner()

        result = runner.invoke(
            tm_app, ["lookup", "Save Change", "--lang", "fr", "--file", str(tm_file)]
        )

        assert result.exit_code == 0
        assert "No matches" in result.stdout
