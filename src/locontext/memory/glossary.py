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

"""Glossary store for app-specific terminology.

Supports consistent translation of domain terms, brand names and
technical vocabulary:
- Fixed per-language translations
- Do-not-translate markers for brand names and acronyms
- Definitions passed to the translator as context
- Git-friendly JSON storage, sorted by term
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from locontext.core.errors import StoreDecodeError
from locontext.core.models import (
    CAMEL_CASE_CONFIG,
    GlossaryEntry,
    GlossaryMatch,
    PartOfSpeech,
)
from locontext.memory.storage import STORAGE_VERSION, JsonStore, write_json_atomic

logger = logging.getLogger(__name__)


class GlossaryStorage(BaseModel):
    """Root document of a glossary file."""

    model_config = CAMEL_CASE_CONFIG

    version: str = STORAGE_VERSION
    terms: list[GlossaryEntry] = Field(default_factory=list)


class GlossaryTermConfig(BaseModel):
    """A glossary term as written in configuration files.

    Every field except ``term`` may be omitted; omitted flags mean False.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    term: str = Field(..., min_length=1)
    definition: str | None = None
    translations: dict[str, str] | None = None
    case_sensitive: bool | None = None
    do_not_translate: bool | None = None
    part_of_speech: PartOfSpeech | None = None

    def to_entry(self) -> GlossaryEntry:
        return GlossaryEntry(
            term=self.term,
            definition=self.definition,
            translations=dict(self.translations or {}),
            case_sensitive=bool(self.case_sensitive),
            do_not_translate=bool(self.do_not_translate),
            part_of_speech=self.part_of_speech,
        )

    @classmethod
    def from_entry(cls, entry: GlossaryEntry) -> GlossaryTermConfig:
        """Build the compact form, leaving defaulted fields unset."""
        return cls(
            term=entry.term,
            definition=entry.definition,
            translations=dict(entry.translations) or None,
            case_sensitive=entry.case_sensitive or None,
            do_not_translate=entry.do_not_translate or None,
            part_of_speech=entry.part_of_speech,
        )


class GlossaryInterchange(BaseModel):
    """Versioned document used to import and export glossary terms."""

    model_config = ConfigDict(extra="ignore")

    version: Literal["1.0"] = "1.0"
    terms: list[GlossaryTermConfig] = Field(default_factory=list)

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Glossary(JsonStore):
    """Glossary of terms keyed by their case-folded text.

    Two terms differing only by case share one slot; the later write wins.

    Example:
        >>> glossary = Glossary(".locontext-glossary.json")
        >>> glossary.load()
        >>> glossary.add_term(GlossaryEntry(term="LotoFuel", do_not_translate=True))
        >>> glossary.add_term(GlossaryEntry(term="Fill-up", translations={"fr": "plein"}))
        >>> [m.term for m in glossary.find_terms("Record your LotoFuel fill-up today")]
        ['Fill-up', 'LotoFuel']
    """

    def __init__(self, storage_path: str | Path | None = None):
        """Initialize glossary.

        Args:
            storage_path: Path to the JSON file (optional, in-memory if None)
        """
        super().__init__(storage_path)
        self._terms: dict[str, GlossaryEntry] = {}

    def _restore(self, raw: str) -> None:
        storage = GlossaryStorage.model_validate_json(raw)
        self._terms = {entry.key: entry for entry in storage.terms}

    def _snapshot(self) -> dict[str, Any]:
        storage = GlossaryStorage(version=STORAGE_VERSION, terms=self._sorted_terms())
        return storage.model_dump(mode="json", by_alias=True, exclude_none=True)

    def _sorted_terms(self) -> list[GlossaryEntry]:
        return [self._terms[key] for key in sorted(self._terms)]

    @property
    def all_terms(self) -> list[GlossaryEntry]:
        """All terms sorted by case-folded term."""
        with self._lock:
            return self._sorted_terms()

    def __len__(self) -> int:
        with self._lock:
            return len(self._terms)

    # ------------------------------------------------------------------
    # Term management
    # ------------------------------------------------------------------

    def add_term(self, entry: GlossaryEntry) -> None:
        """Add or update a term."""
        with self._lock:
            self._terms[entry.key] = entry
            self._mark_dirty()

    def add_terms(self, entries: Iterable[GlossaryEntry]) -> None:
        """Add multiple terms in batch."""
        with self._lock:
            for entry in entries:
                self._terms[entry.key] = entry
            self._mark_dirty()

    def remove_term(self, term: str) -> None:
        """Remove a term (case-insensitive)."""
        with self._lock:
            if self._terms.pop(term.lower(), None) is not None:
                self._mark_dirty()

    def get_term(self, term: str) -> GlossaryEntry | None:
        """Get a term (case-insensitive)."""
        with self._lock:
            return self._terms.get(term.lower())

    def clear(self) -> None:
        """Clear all terms."""
        with self._lock:
            self._terms.clear()
            self._mark_dirty()

    # ------------------------------------------------------------------
    # Term finding
    # ------------------------------------------------------------------

    def find_terms(self, text: str) -> list[GlossaryMatch]:
        """Find all glossary terms present in text.

        Args:
            text: Text to search in

        Returns:
            Matches ordered by case-folded term
        """
        with self._lock:
            return [
                GlossaryMatch.from_entry(entry)
                for entry in self._sorted_terms()
                if entry.matches(text)
            ]

    def terms_needing_translation(self, language: str) -> list[GlossaryEntry]:
        """Find translatable terms with no fixed translation for ``language``."""
        return [
            entry
            for entry in self.all_terms
            if not entry.do_not_translate and language not in entry.translations
        ]

    @staticmethod
    def to_prompt_instructions(matches: Iterable[GlossaryMatch], language: str) -> str:
        """Generate prompt instructions for glossary matches.

        Args:
            matches: Glossary matches found in strings
            language: Target language code

        Returns:
            Instruction block, or an empty string when there are no matches
        """
        matches = list(matches)
        if not matches:
            return ""

        instructions = ["Terminology to use:"]
        for match in matches:
            if match.do_not_translate:
                instructions.append(
                    f'- "{match.term}" → Keep as "{match.term}" (do not translate)'
                )
            elif language in match.translations:
                instructions.append(f'- "{match.term}" → "{match.translations[language]}"')
            elif match.definition:
                instructions.append(f'- "{match.term}" - {match.definition}')

        return "\n".join(instructions)

    # ------------------------------------------------------------------
    # Import / export
    # ------------------------------------------------------------------

    def import_terms(self, document: GlossaryInterchange) -> int:
        """Import terms from an interchange document.

        Returns:
            Number of terms imported
        """
        self.add_terms(config.to_entry() for config in document.terms)
        return len(document.terms)

    def export_terms(self) -> GlossaryInterchange:
        """Export terms in the compact interchange form."""
        return GlossaryInterchange(
            terms=[GlossaryTermConfig.from_entry(entry) for entry in self.all_terms]
        )

    def import_json(self, path: Path) -> int:
        """Import terms from an interchange JSON file.

        Raises:
            FileNotFoundError: If file doesn't exist
            StoreDecodeError: If the document is invalid
        """
        if not path.exists():
            raise FileNotFoundError(f"Glossary file not found: {path}")

        try:
            document = GlossaryInterchange.model_validate_json(path.read_text(encoding="utf-8"))
        except ValidationError as e:
            raise StoreDecodeError(f"Invalid glossary document {path}: {e}") from e

        count = self.import_terms(document)
        logger.debug("Imported %d terms from %s", count, path)
        return count

    def export_json(self, path: Path) -> int:
        """Export terms to an interchange JSON file.

        Returns:
            Number of terms exported
        """
        document = self.export_terms()
        write_json_atomic(path, document.to_json_dict())
        return len(document.terms)
