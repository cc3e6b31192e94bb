"""
Configuration of the repositories recipes are collected from.

Repositories are configured using the ``REPOSITORIES`` environment variable
which holds a JSON array of objects, for example::

    REPOSITORIES='[{"author": "alice", "repository": "recipes", "branch": "main"}]'

The command line tools additionally accept repositories given as
``AUTHOR/REPOSITORY[@BRANCH]`` (see :py:func:`parse_repository_argument`).
"""

from typing import Any, List, Mapping, Optional, Sequence

import json

import os

import re

from pydantic import BaseModel, Field, StrictStr, TypeAdapter, ValidationError

from recipe_web.exceptions import ConfigurationError, RepositoryNotFoundError
from recipe_web.recipe import Repository


__all__ = [
    "REPOSITORIES_VARIABLE",
    "DEFAULT_BRANCH",
    "RepositoryConfig",
    "load_repositories",
    "parse_repositories",
    "parse_repository_argument",
    "find_repository",
]


REPOSITORIES_VARIABLE = "REPOSITORIES"

DEFAULT_BRANCH = "main"

repository_argument_pattern = re.compile(
    r"(?P<author>[^/@\s]+)/(?P<repository>[^/@\s]+)(?:@(?P<branch>\S+))?"
)


class RepositoryConfig(BaseModel):
    """A single entry of the ``REPOSITORIES`` configuration."""

    author: StrictStr = Field(description="The GitHub user owning the repository")
    repository: StrictStr = Field(description="The name of the repository")
    branch: StrictStr = Field(description="The branch recipes are read from")

    def to_repository(self) -> Repository:
        return Repository(self.author, self.repository, self.branch)


repositories_adapter = TypeAdapter(List[RepositoryConfig])


def parse_repositories(data: Any) -> List[Repository]:
    """
    Validate decoded JSON repository configuration, producing a list of
    :py:class:`~recipe_web.recipe.Repository` objects. Throws
    :py:exc:`~recipe_web.exceptions.ConfigurationError` if the data is not a
    list of objects each having string 'author', 'repository' and 'branch'
    fields. Any other fields are ignored.
    """
    try:
        entries = repositories_adapter.validate_python(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid {REPOSITORIES_VARIABLE}: {e}")
    return [entry.to_repository() for entry in entries]


def load_repositories(environ: Optional[Mapping[str, str]] = None) -> List[Repository]:
    """
    Load the configured repositories from the environment (``os.environ`` by
    default). Returns an empty list when the variable is not set.
    """
    if environ is None:
        environ = os.environ

    try:
        data = json.loads(environ.get(REPOSITORIES_VARIABLE, "[]"))
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"{REPOSITORIES_VARIABLE} is not valid JSON: {e}")

    return parse_repositories(data)


def parse_repository_argument(value: str) -> Repository:
    """
    Parse a command line repository of the form
    ``AUTHOR/REPOSITORY[@BRANCH]``. The branch defaults to
    :py:data:`DEFAULT_BRANCH`. Throws a :py:exc:`ValueError` if the value is
    malformed (so it may be used as an argparse type).
    """
    match = repository_argument_pattern.fullmatch(value.strip())
    if match is None:
        raise ValueError(f"Expected AUTHOR/REPOSITORY[@BRANCH], got {value!r}")
    return Repository(
        author=match["author"],
        repository=match["repository"],
        branch=match["branch"] or DEFAULT_BRANCH,
    )


def find_repository(repositories: Sequence[Repository], author: str) -> Repository:
    """
    Find the repository configured for an author. Throws
    :py:exc:`~recipe_web.exceptions.RepositoryNotFoundError` if there is none.
    """
    for repository in repositories:
        if repository.author == author:
            return repository
    raise RepositoryNotFoundError(f"No repository is configured for {author!r}")
