"""Translation Memory and Glossary stores.

Provides file-backed storage for:
- Translation Memory (TM): prior translations with exact and fuzzy lookup
- Glossary: domain terms with fixed or forbidden translations
"""

from .glossary import Glossary, GlossaryInterchange, GlossaryTermConfig
from .storage import JsonStore, write_json_atomic
from .tm import TranslationMemory, levenshtein_distance, similarity

__all__ = [
    "Glossary",
    "GlossaryInterchange",
    "GlossaryTermConfig",
    "JsonStore",
    "TranslationMemory",
    "levenshtein_distance",
    "similarity",
    "write_json_atomic",
]
