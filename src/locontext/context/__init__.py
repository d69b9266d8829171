"""Context assembly for batch translation."""

from locontext.context.builder import ContextBuilder, merge_glossary_matches, rank_tm_matches
from locontext.context.config import ContextConfiguration, FormalityLevel, Tone
from locontext.context.usage import SourceCodeAnalyzer, UsageAnalyzer

__all__ = [
    "ContextBuilder",
    "ContextConfiguration",
    "FormalityLevel",
    "SourceCodeAnalyzer",
    "Tone",
    "UsageAnalyzer",
    "merge_glossary_matches",
    "rank_tm_matches",
]
