"""Engine package - Search and ranking logic.

Everything here is independent of any rendering layer.

Modules:
    - models: Commands, results, palette state
    - registry: Identifier-keyed command store
    - fuzzy: Ordered-subsequence matching and scoring
    - calculator: Inline arithmetic evaluator
    - search: Scoring, grouping and ordering of results
    - recency: Bounded recent-command list with persistence
"""

from cmdpalette.engine.calculator import evaluate_math_expression
from cmdpalette.engine.fuzzy import FuzzyMatch, fuzzy_match
from cmdpalette.engine.models import (
    Category,
    CategoryGroup,
    Command,
    CommandType,
    PaletteState,
    SearchResult,
    SearchResults,
    command_from_dict,
)
from cmdpalette.engine.recency import (
    JsonFileRecentStore,
    MemoryRecentStore,
    RecencyCache,
    RecentStore,
)
from cmdpalette.engine.registry import CommandRegistry
from cmdpalette.engine.search import CATEGORY_ORDER, recompute, search

__all__ = [
    # Models
    "Category",
    "CategoryGroup",
    "Command",
    "CommandType",
    "PaletteState",
    "SearchResult",
    "SearchResults",
    "command_from_dict",
    # Registry
    "CommandRegistry",
    # Matching
    "FuzzyMatch",
    "fuzzy_match",
    "evaluate_math_expression",
    # Search
    "CATEGORY_ORDER",
    "recompute",
    "search",
    # Recency
    "JsonFileRecentStore",
    "MemoryRecentStore",
    "RecencyCache",
    "RecentStore",
]
