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

"""Prompt rendering for translation backends.

Turns a ``PromptContext`` into the text and structured forms a translation
backend consumes. Rendering is pure: no I/O and no network access, and the
same context always renders to the same output.
"""

from __future__ import annotations

from typing import Any

from locontext.core.models import GlossaryMatch, PromptContext

MAX_TM_LINES = 5
MAX_COMPACT_TERMS = 10

ROLE_LINE = "You are an expert translator for iOS/macOS applications."
COMPACT_ROLE_LINE = "You are a translator for iOS apps."

GUIDELINES = """
Translation Guidelines:
- Preserve format specifiers: %@, %lld, %.1f, %d
- Preserve Markdown syntax: ^[], **, _, ~~
- Preserve placeholders: {name}, {{value}}
- Maintain the same punctuation style
- Keep the same formality level
- Consider the UI element type for appropriate length/style"""

JSON_INSTRUCTION = """
Return ONLY a JSON object mapping original text to translations:
{"original1": "translation1", "original2": "translation2"}"""


class PromptRenderer:
    """Renders a prompt context as system/user prompts or a JSON request.

    Example:
        >>> renderer = PromptRenderer(context)
        >>> messages = [
        ...     {"role": "system", "content": renderer.to_system_prompt()},
        ...     {"role": "user", "content": renderer.to_user_prompt()},
        ... ]
    """

    def __init__(self, context: PromptContext):
        self.context = context

    @property
    def target_language(self) -> str:
        return self.context.target_language

    def _term_instruction(self, term: GlossaryMatch) -> str | None:
        if term.do_not_translate:
            return f'- "{term.term}" → Keep unchanged'
        translation = term.translations.get(self.target_language)
        if translation is not None:
            return f'- "{term.term}" → "{translation}"'
        return None

    def to_system_prompt(self) -> str:
        """Generate the system prompt with app context, terminology and TM."""
        parts = [f"{ROLE_LINE}\n\n{self.context.app_context}"]

        if self.context.glossary_terms:
            parts.append("\nTerminology (use these exact translations):")
            for term in self.context.glossary_terms:
                line = self._term_instruction(term)
                if line is not None:
                    parts.append(line)

        if self.context.translation_memory_matches:
            parts.append("\nPrevious translations for consistency:")
            for match in self.context.translation_memory_matches[:MAX_TM_LINES]:
                reviewed = " (reviewed)" if match.human_reviewed else ""
                parts.append(f'- "{match.source}" → "{match.translation}"{reviewed}')

        parts.append(GUIDELINES)
        return "\n".join(parts)

    def to_user_prompt(self) -> str:
        """Generate the user prompt listing the strings to translate."""
        lines = [f"Translate the following strings to {self.target_language}:", ""]

        for string in self.context.string_contexts:
            lines.append(f'Key: "{string.key}"')
            lines.append(f'Text: "{string.value}"')

            if string.comment:
                lines.append(f"Developer Note: {string.comment}")

            usage = string.usage_context
            if usage is not None and usage.element_types:
                lines.append(f"UI Context: {usage.to_context_description()}")

            if string.glossary_terms:
                terms = ", ".join(term.term for term in string.glossary_terms)
                lines.append(f"Contains terms: {terms}")

            lines.append("")

        return "\n".join(lines) + "\n" + JSON_INSTRUCTION

    def to_compact_system_prompt(self) -> str:
        """Generate a short system prompt for models with small context windows."""
        parts = [f"{COMPACT_ROLE_LINE} Target: {self.target_language}"]

        terms: list[str] = []
        for term in self.context.glossary_terms[:MAX_COMPACT_TERMS]:
            if term.do_not_translate:
                terms.append(f"{term.term} (keep)")
            elif self.target_language in term.translations:
                terms.append(f"{term.term}={term.translations[self.target_language]}")
        if terms:
            parts.append(f"Terms: {', '.join(terms)}")

        parts.append("Preserve: %@, %d, %lld, %.1f, {placeholders}")
        return "\n".join(parts)

    def to_json_request(self) -> dict[str, Any]:
        """Generate a structured request document.

        ``uiElement`` is the alphabetically first element type of a string,
        so the document is stable across runs.
        """
        strings: list[dict[str, Any]] = []
        for string in self.context.string_contexts:
            item: dict[str, Any] = {"key": string.key, "value": string.value}
            if string.comment is not None:
                item["comment"] = string.comment
            usage = string.usage_context
            if usage is not None and usage.element_types:
                item["uiElement"] = min(t.value for t in usage.element_types)
            strings.append(item)

        request: dict[str, Any] = {
            "targetLanguage": self.target_language,
            "appContext": self.context.app_context,
            "strings": strings,
        }

        if self.context.glossary_terms:
            glossary: list[dict[str, Any]] = []
            for term in self.context.glossary_terms:
                entry: dict[str, Any] = {"term": term.term}
                if term.do_not_translate:
                    entry["doNotTranslate"] = True
                elif self.target_language in term.translations:
                    entry["translation"] = term.translations[self.target_language]
                glossary.append(entry)
            request["glossary"] = glossary

        return request

    def to_messages(self, compact: bool = False) -> list[dict[str, str]]:
        """Render chat-style messages.

        Args:
            compact: Use the compact system prompt

        Returns:
            A system message followed by a user message
        """
        system = self.to_compact_system_prompt() if compact else self.to_system_prompt()
        return [
            {"role": "system", "content": system},
            {"role": "user", "content": self.to_user_prompt()},
        ]
