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

"""Core data models for locontext.

This module defines the records shared by the stores, the context builder
and the prompt renderer:
- Translation memory entries and query matches
- Glossary entries and query matches
- Source-code usage context supplied by an analyzer
- The per-batch prompt context
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# Persisted documents use camelCase keys; Python code uses snake_case.
CAMEL_CASE_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)

# Usage contexts keep at most this many code snippets.
MAX_CODE_SNIPPETS = 3


class TranslationQuality(str, Enum):
    """Quality level of a stored translation.

    Quality only ever moves forward, from machine output to human review.
    """

    MACHINE_TRANSLATED = "machineTranslated"
    HUMAN_REVIEWED = "humanReviewed"
    HUMAN_TRANSLATED = "humanTranslated"


class PartOfSpeech(str, Enum):
    """Part of speech for glossary terms."""

    NOUN = "noun"
    VERB = "verb"
    ADJECTIVE = "adjective"
    ADVERB = "adverb"
    PROPER_NOUN = "properNoun"


class UIElementType(str, Enum):
    """Kind of UI element a localized string is displayed in."""

    BUTTON = "button"
    TEXT = "text"
    LABEL = "label"
    ALERT = "alert"
    NAVIGATION_TITLE = "navigationTitle"
    CONFIRMATION_DIALOG = "confirmationDialog"
    TEXT_FIELD = "textField"
    TAB_ITEM = "tabItem"
    SHEET = "sheet"
    MENU = "menu"
    TOOLTIP = "tooltip"
    PLACEHOLDER = "placeholder"
    ERROR_MESSAGE = "errorMessage"
    SUCCESS_MESSAGE = "successMessage"
    ACCESSIBILITY_LABEL = "accessibilityLabel"
    ACCESSIBILITY_HINT = "accessibilityHint"

    @property
    def context_description(self) -> str:
        """Human-readable description for LLM context."""
        return UI_ELEMENT_DESCRIPTIONS[self]


UI_ELEMENT_DESCRIPTIONS: dict[UIElementType, str] = {
    UIElementType.BUTTON: "Button label (keep short, action-oriented)",
    UIElementType.TEXT: "Body text (can be longer, informative)",
    UIElementType.LABEL: "Label text (concise, descriptive)",
    UIElementType.ALERT: "Alert message (clear, possibly urgent)",
    UIElementType.NAVIGATION_TITLE: "Navigation title (short, identifies screen)",
    UIElementType.CONFIRMATION_DIALOG: "Confirmation dialog (action-oriented options)",
    UIElementType.TEXT_FIELD: "Text field placeholder (brief hint)",
    UIElementType.TAB_ITEM: "Tab bar item (very short, one or two words)",
    UIElementType.SHEET: "Sheet title or content",
    UIElementType.MENU: "Menu item (short, action-oriented)",
    UIElementType.TOOLTIP: "Tooltip (brief explanation)",
    UIElementType.PLACEHOLDER: "Placeholder text (hint for expected input)",
    UIElementType.ERROR_MESSAGE: "Error message (clear explanation of problem)",
    UIElementType.SUCCESS_MESSAGE: "Success message (positive confirmation)",
    UIElementType.ACCESSIBILITY_LABEL: "Accessibility label (describes UI element)",
    UIElementType.ACCESSIBILITY_HINT: "Accessibility hint (describes action result)",
}


# ============================================================================
# Translation memory
# ============================================================================


class TranslatedText(BaseModel):
    """A translated text with provenance and confidence."""

    model_config = CAMEL_CASE_CONFIG

    value: str = Field(..., description="Translated value")
    provider: str | None = Field(default=None, description="Provider that produced it")
    reviewed_by_human: bool = Field(default=False, description="Reviewed by a human")
    confidence: float = Field(default=0.9, description="Confidence score", ge=0.0, le=1.0)


class TMEntry(BaseModel):
    """A single source text and its translations, one per language."""

    model_config = CAMEL_CASE_CONFIG

    source_text: str = Field(..., description="Source text (the entry key)")
    translations: dict[str, TranslatedText] = Field(
        default_factory=dict, description="Translations indexed by language code"
    )
    context: str | None = Field(default=None, description="Where the string is used")
    last_used: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), description="Last write time"
    )
    quality: TranslationQuality = Field(
        default=TranslationQuality.MACHINE_TRANSLATED, description="Quality level"
    )


class TMMatch(BaseModel):
    """A translation memory query result. Never persisted."""

    model_config = ConfigDict(frozen=True)

    source: str = Field(..., description="Stored source text that matched")
    translation: str = Field(..., description="Stored translation")
    similarity: float = Field(..., description="Similarity score (1.0 = exact)", ge=0.0, le=1.0)
    provider: str | None = Field(default=None, description="Provider of the translation")
    human_reviewed: bool = Field(default=False, description="Reviewed by a human")


class TMStatistics(BaseModel):
    """Aggregate counts over a translation memory."""

    total_entries: int = 0
    language_counts: dict[str, int] = Field(default_factory=dict)
    human_reviewed_count: int = 0
    provider_counts: dict[str, int] = Field(default_factory=dict)


def tm_match_key(match: TMMatch) -> tuple[str, str, float, str | None, bool]:
    """Identity of a TM match when pooling results from several queries.

    Two matches are the same only if every field agrees.
    """
    return (
        match.source,
        match.translation,
        match.similarity,
        match.provider,
        match.human_reviewed,
    )


# ============================================================================
# Glossary
# ============================================================================


class GlossaryEntry(BaseModel):
    """A glossary term with fixed translations or a do-not-translate marker.

    Stored under ``term.lower()`` whatever the value of ``case_sensitive``.
    """

    model_config = CAMEL_CASE_CONFIG

    term: str = Field(..., description="Term text", min_length=1)
    definition: str | None = Field(default=None, description="Definition or context")
    translations: dict[str, str] = Field(
        default_factory=dict, description="Fixed translations by language code"
    )
    case_sensitive: bool = Field(default=False, description="Match with exact case")
    do_not_translate: bool = Field(default=False, description="Keep the term as is")
    part_of_speech: PartOfSpeech | None = Field(default=None, description="Part of speech")

    @property
    def key(self) -> str:
        """Storage key (case-folded term)."""
        return self.term.lower()

    def matches(self, text: str) -> bool:
        """Check if term appears in text.

        Plain substring containment, so short terms can match inside
        longer words.
        """
        if self.case_sensitive:
            return self.term in text
        return self.term.lower() in text.lower()


class GlossaryMatch(BaseModel):
    """A glossary term found in a string. Never persisted."""

    model_config = ConfigDict(frozen=True)

    term: str
    do_not_translate: bool = False
    translations: dict[str, str] = Field(default_factory=dict)
    definition: str | None = None

    @classmethod
    def from_entry(cls, entry: GlossaryEntry) -> GlossaryMatch:
        return cls(
            term=entry.term,
            do_not_translate=entry.do_not_translate,
            translations=dict(entry.translations),
            definition=entry.definition,
        )


def glossary_match_key(match: GlossaryMatch) -> str:
    """Identity of a glossary match when merging results across a batch.

    Only ``term`` counts; translations and flags are carried along but
    ignored, so the first match seen for a term wins.
    """
    return match.term


# ============================================================================
# Usage context and prompt context
# ============================================================================


class StringUsageContext(BaseModel):
    """How a string key is used in the codebase.

    Produced by a usage analyzer and consumed read-only.
    """

    model_config = ConfigDict(frozen=True)

    key: str
    element_types: frozenset[UIElementType] = Field(default_factory=frozenset)
    code_snippets: list[str] = Field(default_factory=list)
    modifiers: list[str] = Field(default_factory=list)
    file_locations: list[str] = Field(default_factory=list)

    @field_validator("code_snippets")
    @classmethod
    def _cap_snippets(cls, value: list[str]) -> list[str]:
        return value[:MAX_CODE_SNIPPETS]

    def to_context_description(self) -> str:
        """Generate context description for LLM prompts."""
        parts: list[str] = []

        if self.element_types:
            types = ", ".join(sorted(t.value for t in self.element_types))
            parts.append(f"UI Element: {types}")

        if self.modifiers:
            parts.append(f"Modifiers: {', '.join(self.modifiers[:5])}")

        if self.code_snippets:
            snippet = self.code_snippets[0]
            if len(snippet) > 200:
                snippet = snippet[:200] + "..."
            parts.append(f"Code Context:\n{snippet}")

        return "\n".join(parts)


class BatchEntry(BaseModel):
    """A string queued for translation."""

    key: str = Field(..., description="Localization key")
    value: str = Field(..., description="Source text")
    comment: str | None = Field(default=None, description="Developer comment")


class StringContext(BaseModel):
    """Combined context for a single string to translate."""

    key: str
    value: str
    comment: str | None = None
    usage_context: StringUsageContext | None = None
    glossary_terms: list[GlossaryMatch] = Field(default_factory=list)


class PromptContext(BaseModel):
    """Everything a translation backend needs for one batch.

    Built fresh per batch and discarded after rendering.
    """

    app_context: str
    string_contexts: list[StringContext] = Field(default_factory=list)
    glossary_terms: list[GlossaryMatch] = Field(default_factory=list)
    translation_memory_matches: list[TMMatch] = Field(default_factory=list)
    target_language: str
