"""比對策略與重疊消解"""

from .resolver import resolve_overlaps
from .strategies import (
    STRATEGIES,
    ContextSensitiveStrategy,
    ExactMatchStrategy,
    MatchStrategy,
    WordBoundaryStrategy,
    get_strategy,
    validate_context,
)

__all__ = [
    "MatchStrategy",
    "ExactMatchStrategy",
    "WordBoundaryStrategy",
    "ContextSensitiveStrategy",
    "STRATEGIES",
    "get_strategy",
    "validate_context",
    "resolve_overlaps",
]
