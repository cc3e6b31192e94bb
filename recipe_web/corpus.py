"""
Collection of the recipes of a set of repositories into a corpus.

Repository contents are obtained from a :py:class:`RecipeSource`. Only a
local stand-in, :py:class:`DirectorySource`, is provided here: it reads
repositories from a directory laid out as ``<root>/<author>/<repository>``.

.. autofunction:: build_corpus

.. autofunction:: load_recipe
"""

from typing import Callable, Dict, Iterable, List, Protocol, Sequence

import logging

import posixpath

from pathlib import Path

from recipe_web.config import find_repository
from recipe_web.exceptions import RecipeNotFoundError, RepositoryTreeError
from recipe_web.parser import parse_recipe
from recipe_web.recipe import Recipe, Repository


__all__ = [
    "RecipeSource",
    "DirectorySource",
    "recipe_paths",
    "build_corpus",
    "load_recipe",
]


logger = logging.getLogger(__name__)


Parser = Callable[[str, str, Repository], Recipe]


class RecipeSource(Protocol):
    """Provides access to the files of recipe repositories."""

    def list_paths(self, repository: Repository) -> List[str]:
        """
        List the paths of all files in a repository (relative to its root,
        using '/' as separator). Throws
        :py:exc:`~recipe_web.exceptions.RepositoryTreeError` if the
        repository cannot be listed.
        """
        ...

    def read(self, repository: Repository, path: str) -> str:
        """
        Read a file from a repository. Throws
        :py:exc:`~recipe_web.exceptions.RecipeNotFoundError` if it does not
        exist.
        """
        ...


class DirectorySource:
    """A :py:class:`RecipeSource` reading repositories from the filesystem."""

    root: Path

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def repository_directory(self, repository: Repository) -> Path:
        return self.root / repository.author / repository.repository

    def list_paths(self, repository: Repository) -> List[str]:
        directory = self.repository_directory(repository)
        if not directory.is_dir():
            raise RepositoryTreeError(f"{directory} is not a directory")
        return sorted(
            path.relative_to(directory).as_posix()
            for path in directory.rglob("*")
            if path.is_file()
        )

    def read(self, repository: Repository, path: str) -> str:
        file = self.repository_directory(repository) / path
        try:
            with file.open(encoding="utf-8") as f:
                return f.read()
        except (FileNotFoundError, IsADirectoryError):
            raise RecipeNotFoundError(f"{file} does not exist")


def recipe_paths(paths: Iterable[str]) -> List[str]:
    """
    Select the recipe files from a repository listing: all markdown files
    except readmes.
    """
    return [
        path
        for path in paths
        if path.endswith(".md") and posixpath.basename(path).lower() != "readme.md"
    ]


def build_corpus(
    repositories: Sequence[Repository],
    source: RecipeSource,
    parse: Parser = parse_recipe,
) -> Dict[str, Recipe]:
    """
    Parse every recipe of every repository, returning a dictionary from recipe
    slug to :py:class:`~recipe_web.recipe.Recipe`.

    Repositories whose files cannot be listed are skipped (with a warning).
    """
    corpus: Dict[str, Recipe] = {}
    for repository in repositories:
        try:
            paths = recipe_paths(source.list_paths(repository))
        except RepositoryTreeError as e:
            logger.warning(
                "Skipping %s/%s: %s", repository.author, repository.repository, e
            )
            continue

        logger.info(
            "Loading %d recipes from %s/%s@%s",
            len(paths),
            repository.author,
            repository.repository,
            repository.branch,
        )
        for path in paths:
            recipe = parse(path, source.read(repository, path), repository)
            corpus[recipe.slug] = recipe

    return corpus


def load_recipe(
    repositories: Sequence[Repository],
    source: RecipeSource,
    author: str,
    slug_path: str,
    parse: Parser = parse_recipe,
) -> Recipe:
    """
    Load a single recipe given its author and its path without the ``.md``
    extension (i.e. its slug without the author prefix).

    Throws :py:exc:`~recipe_web.exceptions.RepositoryNotFoundError` if no
    repository is configured for the author and
    :py:exc:`~recipe_web.exceptions.RecipeNotFoundError` if the recipe
    doesn't exist.
    """
    repository = find_repository(repositories, author)
    path = f"{slug_path}.md"
    logger.debug("Loading %s from %s/%s", path, author, repository.repository)
    return parse(path, source.read(repository, path), repository)
