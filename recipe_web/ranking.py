"""
Ordering of recipe listings.

Recipes are ranked by :py:func:`rank`. Without a search query recipes are
shown in a pseudo-random order which is stable for a given seed (e.g. one
chosen per session, see :py:func:`generate_seed`). With a query, recipes are
fuzzy-matched against it and ordered by match quality. In both cases
favourite recipes receive a fixed bonus (:py:data:`FAVORITE_BONUS`) which
pulls them towards the top.

Recipes with identical scores keep the order produced by the shuffle or the
search, no further tie-breaking is applied.

.. autofunction:: rank

.. autofunction:: relevance_order

.. autofunction:: fuzzy_search
"""

from typing import (
    Callable,
    Iterable,
    List,
    Mapping,
    MutableSet,
    NamedTuple,
    Optional,
    Protocol,
    Sequence,
)

import hashlib

import logging

import math

import random

import sys

from dataclasses import replace

from thefuzz import fuzz  # type: ignore

from recipe_web.recipe import Recipe


__all__ = [
    "FAVORITE_BONUS",
    "SEARCH_THRESHOLD",
    "SEARCH_WEIGHTS",
    "RecipeFilter",
    "SearchResult",
    "Search",
    "Favorites",
    "FavoriteSet",
    "fuzzy_search",
    "filter_recipes",
    "shuffle_key",
    "favorite_score",
    "rank",
    "relevance_order",
    "generate_seed",
]


logger = logging.getLogger(__name__)


FAVORITE_BONUS = 20
"""Score added to favourite recipes when ranking."""

SEARCH_THRESHOLD = 0.4
"""
The largest per-field match cost (0 = perfect, 1 = no match) for a field to
count as matching a query.
"""

SEARCH_WEIGHTS: Mapping[str, float] = {
    "title": 10,
    "tags": 5,
    "author": 1,
    "description": 1,
    "ingredients": 1,
    "instructions": 1,
}
"""The relative importance of matches in each field of a recipe."""

EPSILON = sys.float_info.epsilon
"""Lower bound for match costs (avoids an infinite score for perfect matches)."""

SHUFFLE_KEY_RANGE = 2 ** 128
"""One more than the largest possible :py:func:`shuffle_key`."""


class RecipeFilter(NamedTuple):
    """Restricts a listing to an author and/or a tag."""

    author: Optional[str] = None
    tag: Optional[str] = None

    def matches(self, recipe: Recipe) -> bool:
        return (not self.author or recipe.author == self.author) and (
            not self.tag or self.tag in recipe.tags
        )


class SearchResult(NamedTuple):
    item: Recipe
    cost: float
    """Match cost between 0 (perfect match) and 1 (no match)."""


Search = Callable[
    [Sequence[Recipe], Mapping[str, float], float, str], List[SearchResult]
]
"""
A function ``(recipes, weights, threshold, query) -> [SearchResult, ...]``
returning the matching recipes, best match first.
"""


class Favorites(Protocol):
    """The set of recipes the user has marked as favourites."""

    def is_favorite(self, slug: str) -> bool:
        ...

    def toggle(self, slug: str) -> None:
        ...


class FavoriteSet:
    """An in-memory :py:class:`Favorites` implementation."""

    slugs: MutableSet[str]

    def __init__(self, slugs: Iterable[str] = ()) -> None:
        self.slugs = set(slugs)

    def is_favorite(self, slug: str) -> bool:
        return slug in self.slugs

    def toggle(self, slug: str) -> None:
        if slug in self.slugs:
            self.slugs.remove(slug)
        else:
            self.slugs.add(slug)


def generate_seed() -> int:
    """Choose a new shuffle seed, e.g. at the start of a session."""
    return random.randrange(2 ** 32)


def _field_values(recipe: Recipe, name: str) -> List[str]:
    if name == "author":
        return [recipe.author]
    elif name == "tags":
        return list(recipe.tags)
    else:
        return [getattr(recipe, name)]


def _field_similarity(query: str, value: str) -> int:
    # partial_ratio slides the shorter string over the longer one so a short
    # field (e.g. a tag) must match the whole query instead.
    if len(value) < len(query):
        return fuzz.ratio(query, value)
    return fuzz.partial_ratio(query, value)


def _field_cost(query: str, values: Iterable[str]) -> float:
    ratios = [_field_similarity(query, value.lower()) for value in values if value]
    return 1 - max(ratios, default=0) / 100


def fuzzy_search(
    recipes: Sequence[Recipe],
    weights: Mapping[str, float],
    threshold: float,
    query: str,
) -> List[SearchResult]:
    """
    Fuzzy match recipes against a query using :py:mod:`thefuzz`.

    Each field named in ``weights`` is compared with the query
    (case-insensitively) giving a per-field cost between 0 (perfect) and 1.
    Fields at least as long as the query are scored by their best partially
    matching substring while shorter fields must match the query as a whole,
    so a short tag or author cannot match any query containing it. Fields
    with a cost no greater than ``threshold`` match; recipes without any matching field are
    excluded. The cost of a recipe is the product of its matching fields'
    costs, each raised to the power of the field's share of the total weight,
    so that matches in heavily weighted fields produce lower costs.

    Results are returned in ascending order of cost (best first), recipes
    with equal costs keeping their original order.
    """
    query = query.strip().lower()
    total_weight = sum(weights.values())

    results = []
    for recipe in recipes:
        matched = False
        cost = 1.0
        for name, weight in weights.items():
            field_cost = _field_cost(query, _field_values(recipe, name))
            if field_cost <= threshold:
                matched = True
                cost *= max(field_cost, EPSILON) ** (weight / total_weight)
        if matched:
            results.append(SearchResult(recipe, cost))

    return sorted(results, key=lambda result: result.cost)


def filter_recipes(
    corpus: Mapping[str, Recipe], recipe_filter: RecipeFilter = RecipeFilter()
) -> List[Recipe]:
    """The recipes in a corpus matching a filter, in corpus order."""
    return [recipe for recipe in corpus.values() if recipe_filter.matches(recipe)]


def shuffle_key(slug: str, seed: int) -> int:
    """
    A pseudo-random but deterministic sort key for a recipe: the MD5 hash of
    the slug followed by the seed, as an integer.
    """
    return int(hashlib.md5(f"{slug}{seed}".encode("utf-8")).hexdigest(), 16)


def _no_favorites(slug: str) -> bool:
    return False


def favorite_score(recipe: Recipe, is_favorite: Callable[[str], bool]) -> float:
    """The score of a recipe plus the favourite bonus, if applicable."""
    return recipe.score + (FAVORITE_BONUS if is_favorite(recipe.slug) else 0)


def rank(
    corpus: Mapping[str, Recipe],
    recipe_filter: RecipeFilter = RecipeFilter(),
    query: str = "",
    is_favorite: Callable[[str], bool] = _no_favorites,
    seed: int = 0,
    search: Search = fuzzy_search,
) -> List[Recipe]:
    """
    Rank the recipes of a corpus for display.

    Parameters
    ==========
    corpus : {slug: :py:class:`~recipe_web.recipe.Recipe`, ...}
        The recipes to rank. Not modified.
    recipe_filter : :py:class:`RecipeFilter`
        Only recipes matching this filter are returned.
    query : str
        The (settled) search query. If empty, recipes are shuffled using the
        seed, otherwise only recipes matching the query are returned, best
        match first. A query consisting only of whitespace is treated as
        empty rather than as a search for whitespace.
    is_favorite : fn(slug) -> bool
        Identifies favourite recipes. These receive a
        :py:data:`FAVORITE_BONUS` added to their score when sorting.
    seed : int
        The shuffle seed used when there is no query.
    search : fn(recipes, weights, threshold, query) -> [:py:class:`SearchResult`, ...]
        The fuzzy search implementation to use.

    Returns
    =======
    [:py:class:`~recipe_web.recipe.Recipe`, ...]
        Copies of the ranked recipes with their
        :py:attr:`~recipe_web.recipe.Recipe.score` set. For shuffled listings
        the score lies in (0, 1], for searches it is ``-log10(cost)``. The
        favourite bonus is not included in the score.
    """
    candidates = filter_recipes(corpus, recipe_filter)

    scored: List[Recipe]
    if query.strip() == "":
        keys = {recipe.slug: shuffle_key(recipe.slug, seed) for recipe in candidates}
        shuffled = sorted(candidates, key=lambda recipe: keys[recipe.slug])
        scored = [
            replace(recipe, score=1 - keys[recipe.slug] / SHUFFLE_KEY_RANGE)
            for recipe in shuffled
        ]
    else:
        scored = [
            replace(result.item, score=-math.log10(max(result.cost, EPSILON)))
            for result in search(candidates, SEARCH_WEIGHTS, SEARCH_THRESHOLD, query)
        ]

    ranked = sorted(
        scored,
        key=lambda recipe: favorite_score(recipe, is_favorite),
        reverse=True,
    )
    logger.debug(
        "Ranked %d of %d recipes (query %r)", len(ranked), len(corpus), query
    )
    return ranked


def relevance_order(recipes: Iterable[Recipe]) -> List[Recipe]:
    """Order recipes by score alone (highest first), ignoring favourites."""
    return sorted(recipes, key=lambda recipe: recipe.score, reverse=True)
