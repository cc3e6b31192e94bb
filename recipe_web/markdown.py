"""
Rendering of recipe markdown into HTML, including scaling of ingredient
amounts.

Ingredient lists are scaled by rewriting the amount at the start of each list
item, for example with a multiplier of 2::

    - 250 g flour        ->   - 500 g flour
    - 2-3 eggs           ->   - 4-6 eggs
    - salt               ->   - salt

Scaling works on a copy of the markdown source: only the numbers are
replaced, everything else (including any markup) is left untouched.

.. autofunction:: scale_ingredients

.. autofunction:: render_recipe

.. autoclass:: RenderedRecipe
    :members:
"""

from typing import Iterator, List, Optional, Sequence, Tuple

from dataclasses import dataclass, field

from functools import partial

from marko import Markdown, block, inline  # type: ignore
from marko.element import Element  # type: ignore

from recipe_web.recipe import Recipe, Repository
from recipe_web.quantity import (
    Number,
    format_decimal,
    multiply_amount,
    range_pattern,
    split_amount_list,
    to_fraction,
)
from recipe_web.number_parser import number
from recipe_web.tokenizer import normalise_source
from recipe_web.html_postprocessing import (
    postprocess_html,
    resolve_images,
    resolve_links,
)


__all__ = [
    "scale_ingredients",
    "render_markdown",
    "render_ingredients",
    "RenderedRecipe",
    "render_recipe",
]


def _list_items(element: Element) -> Iterator[block.ListItem]:
    """Iterate over all list items (including nested ones) in a document."""
    for child in getattr(element, "children", []):
        if isinstance(child, block.ListItem):
            yield child
        if isinstance(child, block.BlockElement):
            yield from _list_items(child)


def _leading_text(item: block.ListItem) -> Optional[inline.RawText]:
    """
    Get the text element at the very start of a list item, or None if the item
    does not start with plain text.
    """
    if not item.children or not isinstance(item.children[0], block.Paragraph):
        return None
    paragraph = item.children[0]
    if not paragraph.children or not isinstance(
        paragraph.children[0], inline.RawText
    ):
        return None
    return paragraph.children[0]


def scale_ingredients(ingredients: str, multiplier: Number) -> str:
    """
    Multiply the amount at the start of every list item in a markdown
    ingredient list, returning the modified markdown.

    List items which don't start with a number are left unchanged, as is
    everything outside of list items.
    """
    source = normalise_source(ingredients)
    multiplier = to_fraction(multiplier)
    document = Markdown().parse(source)

    replacements: List[Tuple[int, int, str]] = []
    for item in _list_items(document):
        text = _leading_text(item)
        if text is None or text.source_span is None:
            continue
        match = range_pattern.match(text.children)
        if match is None:
            continue
        start = text.source_span[0]
        end = start + match.end()
        if source[start:end] != match.group():
            continue
        try:
            values = [
                number(value) * multiplier
                for value in (match["low"], match["high"])
                if value is not None
            ]
        except ValueError:
            # e.g. a zero denominator
            continue
        replacements.append(
            (start, end, "-".join(format_decimal(value) for value in values))
        )

    for start, end, replacement in sorted(replacements, reverse=True):
        source = source[:start] + replacement + source[end:]

    return source


def render_markdown(
    markdown: str, recipe: Recipe, repositories: Sequence[Repository] = ()
) -> str:
    """
    Render a fragment of a recipe's markdown into HTML, resolving images and
    links relative to the recipe's repository.
    """
    html = Markdown()(markdown)
    return postprocess_html(
        html,
        stages=[
            partial(resolve_images, root=recipe.meta.raw_root),
            partial(resolve_links, meta=recipe.meta, repositories=repositories),
        ],
    )


def render_ingredients(
    recipe: Recipe, multiplier: Number = 1, repositories: Sequence[Repository] = ()
) -> str:
    """Render a recipe's ingredients into HTML, scaled by a multiplier."""
    return render_markdown(
        scale_ingredients(recipe.ingredients, multiplier), recipe, repositories
    )


@dataclass
class RenderedRecipe:
    """A recipe rendered into HTML for display."""

    title: str
    tags: List[str] = field(default_factory=list)

    yields: List[str] = field(default_factory=list)
    """The (scaled) yield tracks."""

    description: str = ""
    ingredients: str = ""
    instructions: str = ""


def render_recipe(
    recipe: Recipe, multiplier: Number = 1, repositories: Sequence[Repository] = ()
) -> RenderedRecipe:
    """
    Render a recipe into HTML with its yields and ingredients scaled by the
    given multiplier.

    Parameters
    ==========
    recipe : :py:class:`~recipe_web.recipe.Recipe`
        The recipe to render.
    multiplier : number
        The factor to scale the recipe by.
    repositories : [:py:class:`~recipe_web.recipe.Repository`, ...]
        The configured repositories. Links to recipes in these repositories
        will be rewritten to point to their recipe pages.
    """
    return RenderedRecipe(
        title=recipe.title,
        tags=list(recipe.tags),
        yields=[
            multiply_amount(track, multiplier)
            for track in split_amount_list(recipe.yields)
        ],
        description=render_markdown(recipe.description, recipe, repositories),
        ingredients=render_ingredients(recipe, multiplier, repositories),
        instructions=render_markdown(recipe.instructions, recipe, repositories),
    )
