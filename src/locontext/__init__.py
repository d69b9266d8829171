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

"""
locontext - consistent app translations

Retrieves terminology and prior translations for batches of localizable
strings and renders them as prompt context for a translation backend.
"""

__version__ = "0.1.0"
__author__ = "KTTC Development"
__email__ = "dev@kt.tc"

from locontext.context import ContextBuilder, ContextConfiguration, SourceCodeAnalyzer
from locontext.core.models import (
    BatchEntry,
    GlossaryEntry,
    PromptContext,
    TMMatch,
)
from locontext.memory import Glossary, TranslationMemory
from locontext.prompts import PromptRenderer

__all__ = [
    "BatchEntry",
    "ContextBuilder",
    "ContextConfiguration",
    "Glossary",
    "GlossaryEntry",
    "PromptContext",
    "PromptRenderer",
    "SourceCodeAnalyzer",
    "TMMatch",
    "TranslationMemory",
    "__version__",
]
