"""Search orchestration - scores, groups and orders palette results.

Combines the registry, fuzzy matcher, recent ids and calculator into one
SearchResults for a query. Everything here is a pure function of its
inputs; the controller calls recompute() after every state change.

Scoring:
    - Title match counts in full, subtitle x0.8, each keyword x0.7
    - Best field wins; title indices kept only when the title won
    - Exact (case-insensitive) id match scores 1
    - Priority adds priority x0.1, clamped to [0, 1]
"""

from typing import Iterable, Optional, Union

from cmdpalette.engine.calculator import evaluate_math_expression
from cmdpalette.engine.fuzzy import fuzzy_match
from cmdpalette.engine.models import (
    Category,
    CategoryGroup,
    Command,
    PaletteState,
    SearchResult,
    SearchResults,
)
from cmdpalette.engine.registry import CommandRegistry

TITLE_WEIGHT = 1.0
SUBTITLE_WEIGHT = 0.8
KEYWORD_WEIGHT = 0.7
PRIORITY_WEIGHT = 0.1

CATEGORY_ORDER: tuple[str, ...] = (
    Category.RECENT.value,
    Category.APPS.value,
    Category.ACTIONS.value,
    Category.FILES.value,
    Category.FOLDERS.value,
    Category.COMMANDS.value,
    Category.SETTINGS.value,
    Category.URLS.value,
    Category.CALCULATIONS.value,
)


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def score_command(command: Command, query: str) -> Optional[SearchResult]:
    """Score one command against a non-empty query.

    Returns:
        SearchResult, or None when no field matched and the id is not an
        exact match
    """
    best_score = 0.0
    best_matches: list[int] = []

    title_match = fuzzy_match(query, command.title)
    if title_match and title_match.score * TITLE_WEIGHT > best_score:
        best_score = title_match.score * TITLE_WEIGHT
        best_matches = title_match.matches

    if command.subtitle:
        subtitle_match = fuzzy_match(query, command.subtitle)
        if subtitle_match and subtitle_match.score * SUBTITLE_WEIGHT > best_score:
            best_score = subtitle_match.score * SUBTITLE_WEIGHT
            best_matches = []

    for keyword in command.keywords:
        keyword_match = fuzzy_match(query, keyword)
        if keyword_match and keyword_match.score * KEYWORD_WEIGHT > best_score:
            best_score = keyword_match.score * KEYWORD_WEIGHT
            best_matches = []

    if command.id.lower() == query.lower():
        best_score = 1.0

    if best_score <= 0:
        return None

    return SearchResult(
        command=command,
        score=_clamp(best_score + command.priority * PRIORITY_WEIGHT),
        matches=list(best_matches),
    )


def search_commands(commands: Iterable[Command], query: str) -> list[SearchResult]:
    """Rank enabled commands for a query.

    An empty (or blank) query lists every enabled command by descending
    priority, registry order breaking ties, without fuzzy scoring.
    """
    query = query.strip()
    enabled = [c for c in commands if not c.disabled]

    if not query:
        ordered = sorted(enabled, key=lambda c: c.priority, reverse=True)
        return [SearchResult(command=c, score=1.0) for c in ordered]

    results: list[SearchResult] = []
    for command in enabled:
        result = score_command(command, query)
        if result is not None:
            results.append(result)

    # sort is stable: equal scores keep registry order
    results.sort(key=lambda r: r.score, reverse=True)
    return results


def recent_results(registry: CommandRegistry, recent_ids: Iterable[str]) -> list[SearchResult]:
    """Registered, enabled recent commands relabelled into Recent."""
    results: list[SearchResult] = []
    for command_id in recent_ids:
        command = registry.get(command_id)
        if command is None or command.disabled:
            continue
        results.append(SearchResult(command=command.with_category(Category.RECENT), score=1.0))
    return results


def group_results(results: Iterable[SearchResult]) -> list[CategoryGroup]:
    """Partition results by category in display order.

    Known categories follow CATEGORY_ORDER; any others follow in the order
    first seen. Order inside a group is the input order.
    """
    groups: dict[str, list[SearchResult]] = {}
    for result in results:
        groups.setdefault(result.command.category_label, []).append(result)

    ordered = [CategoryGroup(c, groups[c]) for c in CATEGORY_ORDER if groups.get(c)]
    ordered.extend(
        CategoryGroup(c, items)
        for c, items in groups.items()
        if c not in CATEGORY_ORDER and items
    )
    return ordered


def search(
    query: str,
    registry: Union[CommandRegistry, Iterable[Command]],
    recent_ids: Iterable[str] = (),
) -> SearchResults:
    """Grouped results and calculator value for a query.

    Args:
        query: Raw query text
        registry: Registry, or any iterable of commands
        recent_ids: Most-recent-first command ids

    Returns:
        SearchResults with groups in display order
    """
    if not isinstance(registry, CommandRegistry):
        registry = CommandRegistry(registry)

    results = search_commands(registry.snapshot(), query)

    recent_ids = list(recent_ids)
    if not query.strip() and recent_ids:
        recent = recent_results(registry, recent_ids)
        recent_set = {r.command.id for r in recent}
        results = recent + [r for r in results if r.command.id not in recent_set]

    return SearchResults(
        groups=group_results(results),
        arithmetic_result=evaluate_math_expression(query),
    )


def recompute(state: PaletteState, registry: CommandRegistry) -> SearchResults:
    """Results for a palette state against the current registry."""
    return search(state.query, registry, state.recent_ids)
