"""Unit tests for translation memory module.

Tests edit-distance scoring, exact and fuzzy lookup, and persistence.
"""

import json
from pathlib import Path

import pytest

from locontext.core.models import TranslationQuality
from locontext.memory.tm import TranslationMemory, levenshtein_distance, similarity


@pytest.mark.unit
class TestLevenshteinDistance:
    """Test edit distance computation."""

    @pytest.mark.parametrize(
        ("s1", "s2", "expected"),
        [
            ("kitten", "sitting", 3),
            ("", "abc", 3),
            ("abc", "", 3),
            ("abc", "abc", 0),
            ("", "", 0),
            ("flaw", "lawn", 2),
            ("Save Change", "Save Changes", 1),
        ],
    )
    def test_known_distances(self, s1: str, s2: str, expected: int) -> None:
        """Test distances for well-known pairs."""
        assert levenshtein_distance(s1, s2) == expected

    def test_distance_is_symmetric(self) -> None:
        """Test argument order does not change the distance."""
        assert levenshtein_distance("sitting", "kitten") == levenshtein_distance(
            "kitten", "sitting"
        )

    def test_distance_counts_code_points(self) -> None:
        """Test non-ASCII characters count as single edits."""
        assert levenshtein_distance("café", "cafe") == 1


@pytest.mark.unit
class TestSimilarity:
    """Test normalized similarity."""

    def test_identical_strings_score_one(self) -> None:
        """Test identical strings are fully similar."""
        assert similarity("Hello", "Hello") == 1.0

    def test_different_strings_score_below_one(self) -> None:
        """Test any difference lowers the score below 1.0."""
        assert similarity("Hello", "Hellp") < 1.0

    def test_empty_strings(self) -> None:
        """Test empty string handling."""
        assert similarity("", "") == 1.0
        assert similarity("", "abc") == 0.0
        assert similarity("abc", "") == 0.0

    def test_score_is_within_unit_interval(self) -> None:
        """Test scores stay in [0, 1] for unrelated strings."""
        for a, b in [("a", "zzzz"), ("short", "a much longer sentence"), ("xyz", "abc")]:
            assert 0.0 <= similarity(a, b) <= 1.0

    def test_one_edit_over_twelve_characters(self) -> None:
        """Test 'Save Change' vs 'Save Changes' scores 11/12."""
        assert similarity("Save Change", "Save Changes") == pytest.approx(0.9167, abs=1e-4)


@pytest.mark.unit
class TestTranslationMemoryLookup:
    """Test exact and fuzzy lookup."""

    def test_find_exact(self) -> None:
        """Test a stored translation is found exactly."""
        # Arrange
        tm = TranslationMemory()
        tm.store("Hello", "Bonjour", "fr", "p")

        # Act & Assert
        assert tm.find_exact("Hello", "fr") == "Bonjour"

    def test_find_exact_missing(self, tm: TranslationMemory) -> None:
        """Test missing source or language returns None."""
        assert tm.find_exact("Unknown", "fr") is None
        assert tm.find_exact("Cancel", "de") is None

    def test_find_similar_fuzzy_match(self, tm: TranslationMemory) -> None:
        """Test 'Save Change' finds the 'Save Changes' entry."""
        # Act
        matches = tm.find_similar("Save Change", "fr")

        # Assert
        assert len(matches) == 1
        assert matches[0].source == "Save Changes"
        assert matches[0].translation == "Enregistrer les modifications"
        assert matches[0].similarity == pytest.approx(11 / 12)
        assert matches[0].provider == "openai"

    def test_find_similar_exact_short_circuit(self) -> None:
        """Test an exact hit is returned alone even when others are similar."""
        # Arrange
        tm = TranslationMemory()
        tm.store("Save Changes", "Enregistrer les modifications", "fr", "p")
        tm.store("Save Change", "Enregistrer la modification", "fr", "p")

        # Act
        matches = tm.find_similar("Save Changes", "fr")

        # Assert
        assert len(matches) == 1
        assert matches[0].similarity == 1.0
        assert matches[0].translation == "Enregistrer les modifications"

    def test_find_similar_exact_hit_respects_limit(self) -> None:
        """Test a zero limit returns nothing even for an exact hit."""
        tm = TranslationMemory()
        tm.store("Save", "Enregistrer", "fr", "p")

        assert tm.find_similar("Save", "fr", limit=0) == []
        assert len(tm.find_similar("Save", "fr", limit=1)) == 1

    def test_find_similar_respects_threshold(self) -> None:
        """Test matches below min_similarity are excluded."""
        # Arrange
        tm = TranslationMemory(min_similarity=0.7)
        tm.store("Help", "Aide", "fr", "p")

        # Act
        matches = tm.find_similar("Hello", "fr")

        # Assert: similarity("Hello", "Help") == 0.6
        assert matches == []

    def test_find_similar_filters_by_language(self, tm: TranslationMemory) -> None:
        """Test entries without the target language are skipped."""
        assert tm.find_similar("Save Change", "de") == []
        assert [m.translation for m in tm.find_similar("Delete", "de")] == ["Löschen"]

    def test_find_similar_orders_ties_by_source(self) -> None:
        """Test equal scores are ordered by source text."""
        # Arrange
        tm = TranslationMemory(min_similarity=0.7)
        tm.store("abce", "E", "fr", "p")
        tm.store("abcd", "D", "fr", "p")

        # Act
        matches = tm.find_similar("abcx", "fr")

        # Assert
        assert [m.source for m in matches] == ["abcd", "abce"]
        assert all(m.similarity == 0.75 for m in matches)

    def test_find_similar_sorted_and_limited(self) -> None:
        """Test results are sorted by similarity and truncated to the limit."""
        # Arrange
        tm = TranslationMemory(min_similarity=0.5, max_matches=2)
        tm.store("Save file", "A", "fr", "p")
        tm.store("Save files", "B", "fr", "p")
        tm.store("Save all files", "C", "fr", "p")

        # Act
        default_limit = tm.find_similar("Save filez", "fr")
        explicit_limit = tm.find_similar("Save filez", "fr", limit=3)

        # Assert
        assert [m.source for m in default_limit] == ["Save file", "Save files"]
        assert len(explicit_limit) == 3
        scores = [m.similarity for m in explicit_limit]
        assert scores == sorted(scores, reverse=True)

    def test_find_similar_reports_review_state(self, tm: TranslationMemory) -> None:
        """Test human review is carried on matches."""
        assert tm.find_similar("Cancel", "fr")[0].human_reviewed is True
        assert tm.find_similar("Delete", "fr")[0].human_reviewed is False

    def test_all_translations(self, tm: TranslationMemory) -> None:
        """Test all translations for a language are returned."""
        assert tm.all_translations("fr") == {
            "Cancel": "Annuler",
            "Delete": "Supprimer",
            "Save Changes": "Enregistrer les modifications",
        }
        assert tm.all_translations("ja") == {}

    def test_get_entry_returns_copy(self, tm: TranslationMemory) -> None:
        """Test mutating a returned entry leaves the store untouched."""
        entry = tm.get_entry("Delete")
        assert entry is not None

        entry.translations["fr"].value = "Changed"

        assert tm.find_exact("Delete", "fr") == "Supprimer"
        assert tm.get_entry("Missing") is None

    def test_len_and_contains(self, tm: TranslationMemory) -> None:
        """Test size and membership by source text."""
        assert len(tm) == 3
        assert "Cancel" in tm
        assert "Annuler" not in tm


@pytest.mark.unit
class TestTranslationMemoryMutations:
    """Test store, review, remove and clear."""

    def test_store_replaces_translation_for_language(self) -> None:
        """Test a second store for a language replaces the first."""
        tm = TranslationMemory()
        tm.store("Hello", "Salut", "fr", "p1")
        tm.store("Hello", "Bonjour", "fr", "p2")
        tm.store("Hello", "Hallo", "de", "p2")

        assert tm.find_exact("Hello", "fr") == "Bonjour"
        assert tm.find_exact("Hello", "de") == "Hallo"
        assert len(tm) == 1

    def test_store_sets_confidence(self) -> None:
        """Test machine and reviewed translations get different confidence."""
        tm = TranslationMemory()
        tm.store("A", "a", "fr", "p")
        tm.store("B", "b", "fr", "p", human_reviewed=True)

        machine = tm.get_entry("A")
        reviewed = tm.get_entry("B")

        assert machine is not None and reviewed is not None
        assert machine.translations["fr"].confidence == 0.9
        assert machine.quality == TranslationQuality.MACHINE_TRANSLATED
        assert reviewed.translations["fr"].confidence == 1.0
        assert reviewed.quality == TranslationQuality.HUMAN_REVIEWED

    def test_store_never_downgrades_reviewed_quality(self) -> None:
        """Test an unreviewed write keeps a humanReviewed entry reviewed."""
        tm = TranslationMemory()
        tm.store("Hello", "Bonjour", "fr", "p", human_reviewed=True)

        tm.store("Hello", "Salut", "fr", "p")

        entry = tm.get_entry("Hello")
        assert entry is not None
        assert entry.quality == TranslationQuality.HUMAN_REVIEWED
        assert entry.translations["fr"].value == "Salut"
        assert entry.translations["fr"].reviewed_by_human is False
        assert entry.translations["fr"].confidence == 0.9

    def test_store_keeps_first_context(self) -> None:
        """Test the usage context is kept from the first write."""
        tm = TranslationMemory()
        tm.store("Hello", "Bonjour", "fr", "p", context="Greeting screen")
        tm.store("Hello", "Hallo", "de", "p", context="Other")

        entry = tm.get_entry("Hello")
        assert entry is not None
        assert entry.context == "Greeting screen"

    def test_store_batch(self) -> None:
        """Test storing several triples at once."""
        tm = TranslationMemory()
        tm.store_batch([("Yes", "Oui", "fr"), ("No", "Non", "fr")], provider="deepl")

        assert tm.all_translations("fr") == {"No": "Non", "Yes": "Oui"}
        assert tm.statistics.provider_counts == {"deepl": 2}

    def test_mark_reviewed(self, tm: TranslationMemory) -> None:
        """Test marking a translation as reviewed upgrades it."""
        tm.mark_reviewed("Delete", "fr")

        entry = tm.get_entry("Delete")
        assert entry is not None
        assert entry.translations["fr"].reviewed_by_human is True
        assert entry.translations["fr"].confidence == 1.0
        assert entry.translations["de"].reviewed_by_human is False
        assert entry.quality == TranslationQuality.HUMAN_REVIEWED

    def test_mark_reviewed_missing_pair_is_noop(self, tmp_path: Path) -> None:
        """Test marking an absent pair changes nothing."""
        tm = TranslationMemory(tmp_path / "tm.json")
        tm.store("Hello", "Bonjour", "fr", "p")
        tm.save()

        tm.mark_reviewed("Hello", "de")
        tm.mark_reviewed("Missing", "fr")

        assert tm.is_dirty is False

    def test_mark_reviewed_keeps_human_translated(self) -> None:
        """Test a humanTranslated entry is never downgraded."""
        tm = TranslationMemory()
        tm.store("Hello", "Bonjour", "fr", "p")
        tm._entries["Hello"].quality = TranslationQuality.HUMAN_TRANSLATED

        tm.mark_reviewed("Hello", "fr")

        entry = tm.get_entry("Hello")
        assert entry is not None
        assert entry.quality == TranslationQuality.HUMAN_TRANSLATED

    def test_remove_and_clear(self, tm: TranslationMemory) -> None:
        """Test removing one entry and clearing all."""
        tm.remove("Cancel")
        assert "Cancel" not in tm
        assert len(tm) == 2

        tm.clear()
        assert len(tm) == 0
        assert tm.find_similar("Delete", "fr") == []

    def test_statistics(self, tm: TranslationMemory) -> None:
        """Test aggregate counts."""
        stats = tm.statistics

        assert stats.total_entries == 3
        assert stats.language_counts == {"fr": 3, "de": 1}
        assert stats.human_reviewed_count == 1
        assert stats.provider_counts == {"openai": 2, "deepl": 2}


@pytest.mark.unit
class TestTranslationMemoryPersistence:
    """Test save/load round trips and file format."""

    def test_round_trip(self, tmp_path: Path) -> None:
        """Test a saved memory loads into an equivalent fresh instance."""
        # Arrange
        path = tmp_path / "tm.json"
        tm = TranslationMemory(path)
        tm.store("Save Changes", "Enregistrer les modifications", "fr", "openai")
        tm.store("Cancel", "Annuler", "fr", None, context="Dialog", human_reviewed=True)
        tm.save()

        # Act
        reloaded = TranslationMemory(path)
        reloaded.load()

        # Assert
        assert reloaded.all_translations("fr") == tm.all_translations("fr")
        assert reloaded.statistics == tm.statistics
        assert reloaded.get_entry("Cancel") == tm.get_entry("Cancel")
        assert reloaded.is_dirty is False

    def test_file_format(self, tmp_path: Path) -> None:
        """Test the persisted document uses camelCase keys."""
        path = tmp_path / "tm.json"
        tm = TranslationMemory(path)
        tm.store("Hello", "Bonjour", "fr", "openai")
        tm.save()

        document = json.loads(path.read_text(encoding="utf-8"))

        assert document["version"] == "1.0"
        entry = document["entries"]["Hello"]
        assert entry["sourceText"] == "Hello"
        assert entry["quality"] == "machineTranslated"
        assert "lastUsed" in entry
        assert "context" not in entry
        assert entry["translations"]["fr"] == {
            "confidence": 0.9,
            "provider": "openai",
            "reviewedByHuman": False,
            "value": "Bonjour",
        }

    def test_file_is_sorted_and_indented(self, tmp_path: Path) -> None:
        """Test keys are written sorted for stable diffs."""
        path = tmp_path / "tm.json"
        tm = TranslationMemory(path)
        tm.store("b", "B", "fr", "p")
        tm.store("a", "A", "fr", "p")
        tm.save()

        text = path.read_text(encoding="utf-8")

        assert text.index('"a"') < text.index('"b"')
        assert text.startswith("{\n  ")
