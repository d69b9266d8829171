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

"""Source code usage analysis for localization keys.

Answers "how is this key shown in the UI?" by scanning SwiftUI sources for
occurrences of each key and looking at the surrounding lines:
- UI element types (Button, Text, Label, Alert, etc.)
- Modifiers that affect presentation
- Short code snippets for the translator

The context builder only depends on the ``UsageAnalyzer`` protocol, so any
other analyzer can be plugged in.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from locontext.core.models import MAX_CODE_SNIPPETS, StringUsageContext, UIElementType

logger = logging.getLogger(__name__)

# Checked in order; the first pattern found decides the element type.
ELEMENT_PATTERNS: list[tuple[str, UIElementType]] = [
    ("Button(", UIElementType.BUTTON),
    ("Button {", UIElementType.BUTTON),
    (".buttonStyle", UIElementType.BUTTON),
    ("Text(", UIElementType.TEXT),
    ("Label(", UIElementType.LABEL),
    (".alert(", UIElementType.ALERT),
    ("Alert(", UIElementType.ALERT),
    (".navigationTitle(", UIElementType.NAVIGATION_TITLE),
    (".navigationBarTitle(", UIElementType.NAVIGATION_TITLE),
    (".confirmationDialog(", UIElementType.CONFIRMATION_DIALOG),
    ("TextField(", UIElementType.TEXT_FIELD),
    ("SecureField(", UIElementType.TEXT_FIELD),
    (".tabItem {", UIElementType.TAB_ITEM),
    (".tabItem(", UIElementType.TAB_ITEM),
    (".sheet(", UIElementType.SHEET),
    ("Menu(", UIElementType.MENU),
    (".contextMenu {", UIElementType.MENU),
    (".help(", UIElementType.TOOLTIP),
    (".placeholder", UIElementType.PLACEHOLDER),
    (".accessibilityLabel(", UIElementType.ACCESSIBILITY_LABEL),
    (".accessibilityHint(", UIElementType.ACCESSIBILITY_HINT),
]

MODIFIER_PATTERNS: list[str] = [
    ".font(",
    ".foregroundColor(",
    ".foregroundStyle(",
    ".bold(",
    ".italic(",
    ".lineLimit(",
    ".truncationMode(",
    ".multilineTextAlignment(",
    ".minimumScaleFactor(",
    ".frame(",
    ".padding(",
    ".disabled(",
    ".destructive",
    ".cancel",
    ".default",
]

SKIPPED_DIRECTORIES = frozenset({".build", "DerivedData", "Pods", ".git", "Carthage"})


class UsageAnalyzer(Protocol):
    """Resolves usage context for a batch of localization keys.

    Implementations must walk the project at most once per call, return an
    empty mapping for an empty key list, and never write to disk.
    """

    def analyze_usage(
        self, keys: Sequence[str], project_root: Path
    ) -> dict[str, StringUsageContext]: ...


@dataclass
class CodeOccurrence:
    """A location where a string key appears in source code.

    Attributes:
        file: File path relative to project root (POSIX separators)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        context: Surrounding lines of code
        matched_pattern: Pattern that found this occurrence
    """

    file: str
    line: int
    column: int
    context: str
    matched_pattern: str | None = None


class SourceCodeAnalyzer:
    """Scans Swift sources to find how localization keys are used.

    Example:
        >>> analyzer = SourceCodeAnalyzer()
        >>> usage = analyzer.analyze_usage(["welcome_message"], Path("MyApp"))
        >>> usage["welcome_message"].element_types
        frozenset({<UIElementType.TEXT: 'text'>})
    """

    def __init__(self, context_lines: int = 5, file_extensions: Sequence[str] = ("swift",)):
        """Initialize analyzer.

        Args:
            context_lines: Lines of context captured on each side of a match
            file_extensions: File extensions to scan (without the dot)
        """
        self.context_lines = context_lines
        self.file_extensions = frozenset(ext.lower().lstrip(".") for ext in file_extensions)

    def analyze_usage(
        self, keys: Sequence[str], project_root: Path
    ) -> dict[str, StringUsageContext]:
        """Analyze multiple keys with a single walk of the project.

        Args:
            keys: String keys to analyze
            project_root: Root directory of the project

        Returns:
            Mapping of every requested key to its usage context

        Raises:
            FileNotFoundError: If project_root is not a directory
        """
        if not keys:
            return {}

        project_root = Path(project_root)
        if not project_root.is_dir():
            raise FileNotFoundError(f"Project directory not found: {project_root}")

        file_contents = self._read_sources(project_root)
        logger.debug("Scanning %d source files for %d keys", len(file_contents), len(keys))

        results: dict[str, StringUsageContext] = {}
        for key in keys:
            occurrences: list[CodeOccurrence] = []
            for relative_path, content in file_contents:
                occurrences.extend(self._find_occurrences(key, content, relative_path))
            results[key] = self._summarize(key, occurrences)

        return results

    def _read_sources(self, project_root: Path) -> list[tuple[str, str]]:
        """Read every matching source file once, sorted by relative path."""
        contents: list[tuple[str, str]] = []

        for path in sorted(project_root.rglob("*")):
            relative = path.relative_to(project_root)
            if any(part in SKIPPED_DIRECTORIES or part.startswith(".") for part in relative.parts):
                continue
            if not path.is_file() or path.suffix.lower().lstrip(".") not in self.file_extensions:
                continue

            try:
                contents.append((relative.as_posix(), path.read_text(encoding="utf-8")))
            except (OSError, UnicodeDecodeError) as e:
                logger.warning("Skipping unreadable source file %s: %s", path, e)

        return contents

    def _find_occurrences(self, key: str, content: str, file: str) -> list[CodeOccurrence]:
        """Find occurrences of a key in a single file's content."""
        search_patterns = [
            f'"{key}"',
            f'LocalizedStringKey("{key}")',
            f'String(localized: "{key}")',
            f'NSLocalizedString("{key}"',
            f'Text("{key}"',
            f'Label("{key}"',
        ]

        lines = content.splitlines()
        occurrences: list[CodeOccurrence] = []

        for index, line in enumerate(lines):
            for pattern in search_patterns:
                column = line.find(pattern)
                if column < 0:
                    continue

                start = max(0, index - self.context_lines)
                end = min(len(lines), index + self.context_lines + 1)
                occurrences.append(
                    CodeOccurrence(
                        file=file,
                        line=index + 1,
                        column=column + 1,
                        context="\n".join(lines[start:end]),
                        matched_pattern=pattern,
                    )
                )
                break  # one occurrence per line

        return occurrences

    def _summarize(self, key: str, occurrences: list[CodeOccurrence]) -> StringUsageContext:
        element_types: set[UIElementType] = set()
        modifiers: set[str] = set()

        for occurrence in occurrences:
            element = detect_ui_element(occurrence.context)
            if element is not None:
                element_types.add(element)
            modifiers.update(detect_modifiers(occurrence.context))

        return StringUsageContext(
            key=key,
            element_types=frozenset(element_types),
            code_snippets=[o.context for o in occurrences[:MAX_CODE_SNIPPETS]],
            modifiers=sorted(modifiers),
            file_locations=sorted({o.file for o in occurrences}),
        )


def detect_ui_element(context: str) -> UIElementType | None:
    """Detect UI element type from code context."""
    for pattern, element in ELEMENT_PATTERNS:
        if pattern in context:
            return element

    if ("error" in context or "Error" in context) and (
        "message" in context or "Message" in context
    ):
        return UIElementType.ERROR_MESSAGE

    if "success" in context or "Success" in context:
        return UIElementType.SUCCESS_MESSAGE

    return None


def detect_modifiers(context: str) -> set[str]:
    """Detect SwiftUI modifiers from code context, without parameters."""
    return {pattern.replace("(", "") for pattern in MODIFIER_PATTERNS if pattern in context}
