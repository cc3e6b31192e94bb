"""
Data types describing recipes and the repositories they come from.

.. autoclass:: Repository
    :members:

.. autoclass:: RecipeMeta
    :members:

.. autoclass:: Recipe
    :members:
"""

from typing import Tuple

import re

from dataclasses import dataclass


__all__ = ["GITHUB_RAW", "Repository", "RecipeMeta", "Recipe", "recipe_slug"]


GITHUB_RAW = "https://raw.githubusercontent.com"
"""The host serving raw file contents of GitHub repositories."""


def recipe_slug(author: str, path: str) -> str:
    """
    The globally unique key of a recipe: the author followed by the recipe's
    path without its ``.md`` extension.

        >>> recipe_slug("alice", "cakes/brownies.md")
        'alice/cakes/brownies'
    """
    return f"{author}/{re.sub(r'[.]md$', '', path)}"


@dataclass(frozen=True)
class Repository:
    """A git repository (branch) containing RecipeMD recipes."""

    author: str
    repository: str
    branch: str

    @property
    def raw_root(self) -> str:
        """
        The URL (with trailing slash) under which the raw contents of the
        repository's files are served. Relative links and images in recipes
        are resolved against this.
        """
        return f"{GITHUB_RAW}/{self.author}/{self.repository}/{self.branch}/"


@dataclass(frozen=True)
class RecipeMeta(Repository):
    """The origin of a recipe: its repository and file path within it."""

    path: str = ""
    """The path of the recipe's markdown file within the repository."""

    slug: str = ""
    """See :py:func:`recipe_slug`."""

    @classmethod
    def from_path(cls, path: str, repository: Repository) -> "RecipeMeta":
        return cls(
            author=repository.author,
            repository=repository.repository,
            branch=repository.branch,
            path=path,
            slug=recipe_slug(repository.author, path),
        )


@dataclass(frozen=True)
class Recipe:
    """
    A parsed RecipeMD recipe.

    The markdown fields (:py:attr:`description`, :py:attr:`ingredients` and
    :py:attr:`instructions`) contain the original markdown source of the
    respective sections, ready to be rendered independently.
    """

    meta: RecipeMeta

    title: str = ""

    image_path: str = ""
    """Absolute URL of the first image in the recipe, or empty."""

    description: str = ""

    tags: Tuple[str, ...] = ()

    yields: str = ""
    """
    The unparsed yields, e.g. ``"4 servings | 2 kg dough"``. See
    :py:func:`recipe_web.quantity.split_amount_list`.
    """

    ingredients: str = ""

    instructions: str = ""

    language: str = ""
    """The detected language of the recipe text (an ISO 639-1 code)."""

    score: float = 0.0
    """
    The ranking score assigned by the most recent
    :py:func:`recipe_web.ranking.rank` call which produced this object.
    """

    @property
    def slug(self) -> str:
        return self.meta.slug

    @property
    def author(self) -> str:
        return self.meta.author
