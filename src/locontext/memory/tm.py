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

"""Translation Memory with edit-distance fuzzy search.

Provides file-backed translation memory with:
- Exact match reuse (100% matches)
- Fuzzy matching scored by normalized Levenshtein distance
- Human review tracking with monotonic quality upgrades
- Usage statistics
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from locontext.core.models import (
    CAMEL_CASE_CONFIG,
    TMEntry,
    TMMatch,
    TMStatistics,
    TranslatedText,
    TranslationQuality,
)
from locontext.memory.storage import STORAGE_VERSION, JsonStore

logger = logging.getLogger(__name__)

DEFAULT_MIN_SIMILARITY = 0.7
DEFAULT_MAX_MATCHES = 5

MACHINE_CONFIDENCE = 0.9
REVIEWED_CONFIDENCE = 1.0


class TMStorage(BaseModel):
    """Root document of a translation memory file."""

    model_config = CAMEL_CASE_CONFIG

    version: str = STORAGE_VERSION
    entries: dict[str, TMEntry] = Field(default_factory=dict)


def levenshtein_distance(s1: str, s2: str) -> int:
    """Calculate Levenshtein (edit) distance between two strings.

    Unit cost for insertion, deletion and substitution, computed over code
    points with two rows of the DP table.

    Args:
        s1: First string
        s2: Second string

    Returns:
        Minimum number of single-character edits

    Example:
        >>> levenshtein_distance("kitten", "sitting")
        3
    """
    # Keep the shorter string on the inner loop so the rows are O(min(m, n)).
    if len(s1) < len(s2):
        s1, s2 = s2, s1

    if not s2:
        return len(s1)

    previous_row = list(range(len(s2) + 1))
    current_row = [0] * (len(s2) + 1)

    for i, c1 in enumerate(s1, start=1):
        current_row[0] = i
        for j, c2 in enumerate(s2, start=1):
            cost = 0 if c1 == c2 else 1
            current_row[j] = min(
                previous_row[j] + 1,  # deletion
                current_row[j - 1] + 1,  # insertion
                previous_row[j - 1] + cost,  # substitution
            )
        previous_row, current_row = current_row, previous_row

    return previous_row[len(s2)]


def similarity(s1: str, s2: str) -> float:
    """Similarity between two strings in [0, 1].

    ``1 - distance / max(len)``; two empty strings are identical, and an
    empty string shares nothing with a non-empty one.
    """
    if not s1 or not s2:
        return 1.0 if s1 == s2 else 0.0

    distance = levenshtein_distance(s1, s2)
    return 1.0 - distance / max(len(s1), len(s2))


class TranslationMemory(JsonStore):
    """Translation Memory with fuzzy search.

    Stores source texts with at most one translation per language and
    retrieves exact or near-duplicate matches for new strings.

    Example:
        >>> tm = TranslationMemory(".locontext-tm.json")
        >>> tm.load()
        >>> tm.store(
        ...     source="Save Changes",
        ...     translation="Enregistrer les modifications",
        ...     language="fr",
        ...     provider="openai",
        ... )
        >>> for match in tm.find_similar("Save Change", "fr"):
        ...     print(f"{match.translation} (similarity: {match.similarity:.2f})")
        Enregistrer les modifications (similarity: 0.92)
        >>> tm.save()
    """

    def __init__(
        self,
        storage_path: str | Path | None = None,
        min_similarity: float = DEFAULT_MIN_SIMILARITY,
        max_matches: int = DEFAULT_MAX_MATCHES,
    ):
        """Initialize Translation Memory.

        Args:
            storage_path: Path to the JSON file (optional, in-memory if None)
            min_similarity: Minimum similarity for fuzzy matches
            max_matches: Default maximum number of fuzzy matches
        """
        super().__init__(storage_path)
        self.min_similarity = min_similarity
        self.max_matches = max_matches
        self._entries: dict[str, TMEntry] = {}

    def _restore(self, raw: str) -> None:
        storage = TMStorage.model_validate_json(raw)
        self._entries = dict(storage.entries)

    def _snapshot(self) -> dict[str, Any]:
        storage = TMStorage(version=STORAGE_VERSION, entries=self._entries)
        return storage.model_dump(mode="json", by_alias=True, exclude_none=True)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, source: object) -> bool:
        with self._lock:
            return source in self._entries

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find_exact(self, text: str, language: str) -> str | None:
        """Find exact match for a source text.

        Args:
            text: Source text to match
            language: Target language code

        Returns:
            The stored translation, or None
        """
        with self._lock:
            entry = self._entries.get(text)
            if entry is None:
                return None
            translation = entry.translations.get(language)
            return translation.value if translation is not None else None

    def find_similar(self, text: str, language: str, limit: int | None = None) -> list[TMMatch]:
        """Find similar translations using fuzzy matching.

        An exact hit is returned alone with similarity 1.0. Otherwise every
        entry translated into ``language`` is scored and kept when it
        reaches ``min_similarity``. Equal scores are ordered by source text.

        Args:
            text: Source text to find matches for
            language: Target language code
            limit: Maximum matches to return (default: ``max_matches``)

        Returns:
            Matches sorted by similarity, highest first
        """
        effective_limit = self.max_matches if limit is None else limit

        with self._lock:
            entry = self._entries.get(text)
            if entry is not None and language in entry.translations:
                exact = entry.translations[language]
                return [
                    TMMatch(
                        source=text,
                        translation=exact.value,
                        similarity=1.0,
                        provider=exact.provider,
                        human_reviewed=exact.reviewed_by_human,
                    )
                ][:effective_limit]

            candidates = [
                (source, stored.translations[language])
                for source, stored in self._entries.items()
                if language in stored.translations
            ]

        matches: list[TMMatch] = []
        for source, translation in candidates:
            score = similarity(text, source)
            if score < self.min_similarity:
                continue

            matches.append(
                TMMatch(
                    source=source,
                    translation=translation.value,
                    similarity=score,
                    provider=translation.provider,
                    human_reviewed=translation.reviewed_by_human,
                )
            )

        matches.sort(key=lambda m: (-m.similarity, m.source))
        return matches[:effective_limit]

    def all_translations(self, language: str) -> dict[str, str]:
        """Get all stored translations for a language, sorted by source."""
        with self._lock:
            return {
                source: entry.translations[language].value
                for source, entry in sorted(self._entries.items())
                if language in entry.translations
            }

    def get_entry(self, source: str) -> TMEntry | None:
        """Get a copy of the entry stored for ``source``."""
        with self._lock:
            entry = self._entries.get(source)
            return entry.model_copy(deep=True) if entry is not None else None

    @property
    def statistics(self) -> TMStatistics:
        """Get Translation Memory statistics."""
        language_counts: dict[str, int] = {}
        provider_counts: dict[str, int] = {}
        human_reviewed = 0

        with self._lock:
            total = len(self._entries)
            for entry in self._entries.values():
                for language, translation in entry.translations.items():
                    language_counts[language] = language_counts.get(language, 0) + 1
                    if translation.reviewed_by_human:
                        human_reviewed += 1
                    if translation.provider:
                        provider_counts[translation.provider] = (
                            provider_counts.get(translation.provider, 0) + 1
                        )

        return TMStatistics(
            total_entries=total,
            language_counts=language_counts,
            human_reviewed_count=human_reviewed,
            provider_counts=provider_counts,
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def store(
        self,
        source: str,
        translation: str,
        language: str,
        provider: str | None,
        context: str | None = None,
        human_reviewed: bool = False,
    ) -> None:
        """Store a translation, replacing any previous one for ``language``.

        Args:
            source: Source text
            translation: Translated text
            language: Target language code
            provider: Translation provider identifier
            context: Where the string is used (kept from the first write)
            human_reviewed: Whether a human reviewed this translation
        """
        now = datetime.now(timezone.utc)

        with self._lock:
            entry = self._entries.get(source)
            if entry is None:
                entry = TMEntry(
                    source_text=source,
                    context=context,
                    last_used=now,
                    quality=TranslationQuality.MACHINE_TRANSLATED,
                )
                self._entries[source] = entry

            entry.translations[language] = TranslatedText(
                value=translation,
                provider=provider,
                reviewed_by_human=human_reviewed,
                confidence=REVIEWED_CONFIDENCE if human_reviewed else MACHINE_CONFIDENCE,
            )
            entry.last_used = now

            if human_reviewed and entry.quality == TranslationQuality.MACHINE_TRANSLATED:
                entry.quality = TranslationQuality.HUMAN_REVIEWED

            self._mark_dirty()

    def store_batch(self, translations: Iterable[tuple[str, str, str]], provider: str) -> None:
        """Store multiple ``(source, translation, language)`` triples."""
        with self._lock:
            for source, translation, language in translations:
                self.store(source, translation, language, provider)

    def mark_reviewed(self, source: str, language: str) -> None:
        """Mark a translation as human-reviewed.

        Does nothing if ``source`` has no translation for ``language``.
        An entry already marked humanTranslated keeps that quality.
        """
        with self._lock:
            entry = self._entries.get(source)
            if entry is None or language not in entry.translations:
                return

            translation = entry.translations[language]
            translation.reviewed_by_human = True
            translation.confidence = REVIEWED_CONFIDENCE
            # humanTranslated already outranks a review.
            if entry.quality == TranslationQuality.MACHINE_TRANSLATED:
                entry.quality = TranslationQuality.HUMAN_REVIEWED
            self._mark_dirty()

    def remove(self, source: str) -> None:
        """Remove an entry from the memory."""
        with self._lock:
            if self._entries.pop(source, None) is not None:
                self._mark_dirty()

    def clear(self) -> None:
        """Clear all entries."""
        with self._lock:
            self._entries.clear()
            self._mark_dirty()
            logger.debug("Translation Memory cleared")
