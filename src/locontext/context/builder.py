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

"""Context builder for consistent batch translation.

Builds one prompt context per batch from glossaries, translation memory and
source-code usage, for injection into LLM prompts. For identical inputs
against unchanged stores the result is identical, so rendered prompts can
be cached and compared in tests.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from locontext.context.config import ContextConfiguration
from locontext.context.usage import UsageAnalyzer
from locontext.core.models import (
    BatchEntry,
    GlossaryMatch,
    PromptContext,
    StringContext,
    StringUsageContext,
    TMMatch,
    glossary_match_key,
    tm_match_key,
)
from locontext.memory.glossary import Glossary
from locontext.memory.tm import TranslationMemory

logger = logging.getLogger(__name__)

# TM matches fetched per entry, and kept for the whole batch.
TM_MATCHES_PER_ENTRY = 3
TM_MATCHES_PER_BATCH = 5

EntryLike = BatchEntry | tuple[str, str, str | None]


def _as_batch_entries(entries: Iterable[EntryLike]) -> list[BatchEntry]:
    result = []
    for entry in entries:
        if isinstance(entry, BatchEntry):
            result.append(entry)
        else:
            key, value, comment = entry
            result.append(BatchEntry(key=key, value=value, comment=comment))
    return result


def merge_glossary_matches(
    merged: dict[str, GlossaryMatch], matches: Iterable[GlossaryMatch]
) -> None:
    """Add matches to ``merged`` keyed by ``glossary_match_key``; first seen wins."""
    for match in matches:
        merged.setdefault(glossary_match_key(match), match)


def rank_tm_matches(pool: Iterable[TMMatch], limit: int = TM_MATCHES_PER_BATCH) -> list[TMMatch]:
    """Deduplicate pooled TM matches and keep the best ``limit``.

    Sorted by similarity descending, then by source and translation so
    equal scores come out in a stable order.
    """
    unique: dict[tuple[object, ...], TMMatch] = {}
    for match in pool:
        unique.setdefault(tm_match_key(match), match)

    ranked = sorted(unique.values(), key=lambda m: (-m.similarity, m.source, m.translation))
    return ranked[:limit]


class ContextBuilder:
    """Assembles translation context for a batch of strings.

    Orchestrates the context sources:
    - Source code analysis (how strings are used in UI)
    - Translation memory (previous translations for consistency)
    - Glossary (domain-specific terminology)
    - Developer comments from the string catalog

    The builder only reads from its stores, so many batches can be built
    concurrently.

    Example:
        >>> builder = ContextBuilder(config, translation_memory=tm, glossary=glossary)
        >>> context = builder.build_context(
        ...     [BatchEntry(key="greeting", value="Hello", comment="Greeting")],
        ...     target_language="fr",
        ... )
        >>> print(PromptRenderer(context).to_system_prompt())
    """

    def __init__(
        self,
        config: ContextConfiguration,
        usage_analyzer: UsageAnalyzer | None = None,
        translation_memory: TranslationMemory | None = None,
        glossary: Glossary | None = None,
    ):
        """Initialize context builder.

        Args:
            config: App configuration and enabled sources
            usage_analyzer: Source code usage analyzer (optional)
            translation_memory: Translation memory (optional)
            glossary: Glossary (optional)
        """
        self.config = config
        self.usage_analyzer = usage_analyzer
        self.translation_memory = translation_memory
        self.glossary = glossary

    def build_context(self, entries: Iterable[EntryLike], target_language: str) -> PromptContext:
        """Build comprehensive context for a batch of strings.

        Args:
            entries: Batch entries, or ``(key, value, comment)`` tuples
            target_language: Target language code

        Returns:
            Complete context for translation prompts
        """
        batch = _as_batch_entries(entries)
        usage_contexts = self._resolve_usage([entry.key for entry in batch])

        string_contexts: list[StringContext] = []
        all_terms: dict[str, GlossaryMatch] = {}
        tm_pool: list[TMMatch] = []

        for entry in batch:
            glossary_matches = self._find_glossary_terms(entry.value)
            merge_glossary_matches(all_terms, glossary_matches)

            if self.config.translation_memory_enabled and self.translation_memory is not None:
                tm_pool.extend(
                    self.translation_memory.find_similar(
                        entry.value, target_language, limit=TM_MATCHES_PER_ENTRY
                    )
                )

            string_contexts.append(
                StringContext(
                    key=entry.key,
                    value=entry.value,
                    comment=entry.comment,
                    usage_context=usage_contexts.get(entry.key),
                    glossary_terms=glossary_matches,
                )
            )

        tm_matches = rank_tm_matches(tm_pool)
        logger.debug(
            "Built context for %d strings: %d terms, %d TM matches",
            len(string_contexts),
            len(all_terms),
            len(tm_matches),
        )

        return PromptContext(
            app_context=self.config.build_app_context(),
            string_contexts=string_contexts,
            glossary_terms=list(all_terms.values()),
            translation_memory_matches=tm_matches,
            target_language=target_language,
        )

    def build_single_context(
        self, key: str, value: str, comment: str | None, target_language: str
    ) -> PromptContext:
        """Build context for a single string."""
        return self.build_context([BatchEntry(key=key, value=value, comment=comment)], target_language)

    def build_simple_context(
        self, entries: Iterable[EntryLike], target_language: str
    ) -> PromptContext:
        """Build context from the glossary only.

        Skips usage analysis and translation memory. Faster but provides
        less context.
        """
        string_contexts: list[StringContext] = []
        all_terms: dict[str, GlossaryMatch] = {}

        for entry in _as_batch_entries(entries):
            glossary_matches = self._find_glossary_terms(entry.value)
            merge_glossary_matches(all_terms, glossary_matches)

            string_contexts.append(
                StringContext(
                    key=entry.key,
                    value=entry.value,
                    comment=entry.comment,
                    glossary_terms=glossary_matches,
                )
            )

        return PromptContext(
            app_context=self.config.build_app_context(),
            string_contexts=string_contexts,
            glossary_terms=list(all_terms.values()),
            translation_memory_matches=[],
            target_language=target_language,
        )

    def with_translation_memory(self, translation_memory: TranslationMemory) -> ContextBuilder:
        """Return a builder using ``translation_memory``."""
        return ContextBuilder(
            self.config,
            usage_analyzer=self.usage_analyzer,
            translation_memory=translation_memory,
            glossary=self.glossary,
        )

    def with_glossary(self, glossary: Glossary) -> ContextBuilder:
        """Return a builder using ``glossary``."""
        return ContextBuilder(
            self.config,
            usage_analyzer=self.usage_analyzer,
            translation_memory=self.translation_memory,
            glossary=glossary,
        )

    def _find_glossary_terms(self, text: str) -> list[GlossaryMatch]:
        if not self.config.glossary_enabled or self.glossary is None:
            return []
        return self.glossary.find_terms(text)

    def _resolve_usage(self, keys: Sequence[str]) -> dict[str, StringUsageContext]:
        """Resolve usage for all keys in one analyzer call."""
        if (
            not self.config.source_code_analysis_enabled
            or self.config.project_path is None
            or self.usage_analyzer is None
        ):
            return {}

        return self.usage_analyzer.analyze_usage(list(keys), self.config.project_path)
