"""
Generates a stand alone HTML page for a single recipe.
"""

from typing import Optional, Sequence

from pathlib import Path

import logging

from recipe_web.exceptions import RecipeNotFoundError
from recipe_web.markdown import render_recipe
from recipe_web.parser import parse_recipe
from recipe_web.quantity import Number, format_decimal, to_fraction
from recipe_web.recipe import Repository
from recipe_web.scaling import needs_multiplier_control
from recipe_web.templates import recipe_css_template, standalone_recipe_template


__all__ = ["generate_standalone_page"]


logger = logging.getLogger(__name__)


def generate_standalone_page(
    input_file: Path,
    repository: Repository,
    scale: Number = 1,
    repositories: Sequence[Repository] = (),
    path: Optional[str] = None,
) -> str:
    """
    Generate a standalone page with a rendered RecipeMD recipe.

    Parameters
    ==========
    input_file : Path
        The file containing the RecipeMD document.
    repository : :py:class:`~recipe_web.recipe.Repository`
        The repository the recipe belongs to. Relative images and links are
        resolved against this repository.
    scale : number
        Scales the recipe by the provided factor (e.g. scale=2 will double all
        quantities).
    repositories : [:py:class:`~recipe_web.recipe.Repository`, ...]
        Other known repositories, links to whose recipes are rewritten into
        recipe page links.
    path : str or None
        The path of the recipe within the repository. Defaults to the input
        file's name.
    """
    try:
        with input_file.open(encoding="utf-8") as f:
            markdown = f.read()
    except FileNotFoundError:
        raise RecipeNotFoundError(f"{input_file} does not exist")

    if path is None:
        path = input_file.name

    recipe = parse_recipe(path, markdown, repository)
    rendered = render_recipe(recipe, scale, repositories)
    logger.info("Rendered %s scaled by %s", recipe.slug, scale)

    # Empty yield tracks are not shown so can't stand in for the multiplier
    multiplier = None
    if needs_multiplier_control(recipe.yields) or not all(rendered.yields):
        multiplier = format_decimal(to_fraction(scale))

    return standalone_recipe_template.render(
        recipe=rendered,
        language=recipe.language,
        multiplier=multiplier,
        source=recipe.meta.raw_root + path,
        css=recipe_css_template.render(),
    )
