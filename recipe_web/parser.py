"""
Parser for RecipeMD documents.

A RecipeMD document is split into sections by horizontal rules::

    # Pancakes

    Fluffy pancakes for a lazy Sunday.

    *breakfast, sweet*

    **4 servings | 12 pancakes**

    ---

    - 250 g flour
    - 2 eggs

    ---

    Mix everything and fry in a hot pan.

Before the first rule (the preamble) the first H1 heading gives the title (any
later H1 headings are ignored), a paragraph consisting solely of emphasised
text gives the tags (separated by commas) and a paragraph consisting solely of
strong text gives the yields. Everything else in the preamble forms the
description. The ingredients follow the first rule and the instructions follow
the second; any further rules are part of the instructions.

The parser never fails: missing parts are left empty.

.. autofunction:: parse_recipe
"""

from typing import List, Optional

import logging

import re

from enum import Enum, auto

from functools import reduce

from dataclasses import dataclass, field

from urllib.parse import quote, urljoin

from recipe_web.recipe import Recipe, RecipeMeta, Repository
from recipe_web.tokenizer import Token, Tokenizer, tokenize
from recipe_web.language import LanguageIdentifier, detect_languages


__all__ = ["Section", "parse_recipe", "find_image", "split_tags"]


logger = logging.getLogger(__name__)


image_pattern = re.compile(r"!\[.*?\]\((.+?)\)|<img.+?src=\"(.+?)\"")
"""Matches a markdown image or an HTML <img> tag."""


class Section(Enum):
    """The section of a RecipeMD document being parsed."""

    PREAMBLE = auto()
    INGREDIENTS = auto()
    INSTRUCTIONS = auto()

    def next(self) -> "Section":
        """The section following a horizontal rule."""
        if self is Section.PREAMBLE:
            return Section.INGREDIENTS
        else:
            return Section.INSTRUCTIONS


@dataclass
class _Accumulator:
    section: Section = Section.PREAMBLE
    title: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    yields: str = ""
    description: List[str] = field(default_factory=list)
    ingredients: List[str] = field(default_factory=list)
    instructions: List[str] = field(default_factory=list)


def split_tags(text: str) -> List[str]:
    """Split a comma separated list of tags."""
    return [tag.strip() for tag in text.split(",") if tag.strip()]


def _sole_inline_token(token: Token) -> Optional[Token]:
    if token.type == "paragraph" and len(token.children) == 1:
        return token.children[0]
    return None


def _consume(acc: _Accumulator, token: Token) -> _Accumulator:
    if token.type == "hr":
        acc.section = acc.section.next()
    elif acc.section is Section.PREAMBLE:
        inline = _sole_inline_token(token)
        if token.type == "heading" and token.depth == 1:
            if acc.title is None:
                acc.title = token.text.strip()
        elif inline is not None and inline.type == "em":
            acc.tags = split_tags(inline.text)
        elif inline is not None and inline.type == "strong":
            acc.yields = inline.text
        else:
            acc.description.append(token.raw)
    elif acc.section is Section.INGREDIENTS:
        acc.ingredients.append(token.raw)
    else:
        acc.instructions.append(token.raw)
    return acc


def find_image(markdown: str, root: str) -> str:
    """
    Find the first image (markdown or HTML) anywhere in a document and return
    its absolute URL, resolving relative references against ``root``. Returns
    an empty string if the document contains no images.
    """
    match = image_pattern.search(markdown)
    if match is None:
        return ""

    target = (match[1] if match[1] is not None else match[2]).strip()
    if target.startswith("<") and ">" in target:
        # e.g. ![alt](<my image.jpg>)
        target = target[1 : target.index(">")]
    else:
        # Drop any markdown image title, e.g. ![alt](image.jpg "A title")
        target = target.split()[0] if target.split() else ""
    if not target:
        return ""

    return quote(urljoin(root, target), safe=":/?#[]@!$&'()*+,;=%~")


def parse_recipe(
    path: str,
    markdown: str,
    repository: Repository,
    tokenize: Tokenizer = tokenize,
    identify_language: LanguageIdentifier = detect_languages,
) -> Recipe:
    """
    Parse a RecipeMD document.

    Parameters
    ==========
    path : str
        The path of the document within its repository, e.g.
        "cakes/brownies.md".
    markdown : str
        The markdown source.
    repository : :py:class:`~recipe_web.recipe.Repository`
        The repository containing the document.
    tokenize : fn(markdown) -> [:py:class:`~recipe_web.tokenizer.Token`, ...]
        The markdown tokenizer to use.
    identify_language : fn(text, top_n) -> [(language, confidence), ...]
        The language identifier to use.
    """
    meta = RecipeMeta.from_path(path, repository)

    acc = reduce(_consume, tokenize(markdown), _Accumulator())

    languages = identify_language(markdown, 1)

    recipe = Recipe(
        meta=meta,
        title=acc.title if acc.title is not None else "",
        image_path=find_image(markdown, meta.raw_root),
        description="".join(acc.description),
        tags=tuple(acc.tags),
        yields=acc.yields,
        ingredients="".join(acc.ingredients),
        instructions="".join(acc.instructions),
        language=languages[0][0] if languages else "",
    )
    logger.debug("Parsed recipe %s: %r", recipe.slug, recipe.title)
    return recipe
