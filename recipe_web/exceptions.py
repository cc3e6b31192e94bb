class RecipeWebError(Exception):
    """Base class for exceptions thrown while collecting or loading recipes."""


class ConfigurationError(RecipeWebError):
    """Thrown when the repository configuration is malformed."""


class RepositoryNotFoundError(RecipeWebError):
    """Thrown when no repository is configured for a given author."""


class RepositoryTreeError(RecipeWebError):
    """Thrown when the files of a repository cannot be listed."""


class RecipeNotFoundError(RecipeWebError):
    """Thrown when a recipe source file does not exist."""
