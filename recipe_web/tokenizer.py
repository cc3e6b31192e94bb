"""
Markdown tokenization.

The recipe parser works on a flat sequence of block tokens, each carrying the
exact markdown source it was parsed from. This module produces those tokens
using the :py:mod:`marko` CommonMark parser (which records the source span of
every element it parses).

.. autofunction:: tokenize

.. autoclass:: Token
    :members:
"""

from typing import Callable, List, Mapping, Optional, Sequence, Tuple

from dataclasses import dataclass

from marko import Markdown, block  # type: ignore
from marko.element import Element  # type: ignore


__all__ = ["Token", "Tokenizer", "tokenize", "normalise_source"]


@dataclass(frozen=True)
class Token:
    """A block or inline markdown element."""

    type: str
    """
    The kind of element, one of (for blocks) ``heading``, ``paragraph``,
    ``list``, ``list_item``, ``hr``, ``space``, ``code``, ``html``,
    ``blockquote``, ``def`` or (for inline elements) ``text``, ``em``,
    ``strong``, ``image``, ``link``, ``codespan``, ``html``, ``br``, ``escape``.
    """

    raw: str
    """The markdown source of the element."""

    text: str = ""
    """
    The markdown source of the element's content, e.g. the text between the
    asterisks of an emphasis span or after the hashes of a heading.
    """

    depth: Optional[int] = None
    """The level of a heading, None for all other elements."""

    children: Tuple["Token", ...] = ()
    """The inline tokens of a paragraph or heading, or nested block tokens."""


Tokenizer = Callable[[str], List[Token]]


TOKEN_TYPES: Mapping[str, str] = {
    # Blocks
    "Heading": "heading",
    "SetextHeading": "heading",
    "Paragraph": "paragraph",
    "List": "list",
    "ListItem": "list_item",
    "ThematicBreak": "hr",
    "BlankLine": "space",
    "CodeBlock": "code",
    "FencedCode": "code",
    "HTMLBlock": "html",
    "Quote": "blockquote",
    "LinkRefDef": "def",
    # Inline
    "RawText": "text",
    "Emphasis": "em",
    "StrongEmphasis": "strong",
    "Image": "image",
    "Link": "link",
    "AutoLink": "link",
    "CodeSpan": "codespan",
    "InlineHTML": "html",
    "LineBreak": "br",
    "Literal": "escape",
}


def normalise_source(markdown: str) -> str:
    """
    Normalise line terminators in the same way as :py:mod:`marko` does before
    parsing so that element source spans index into the returned string.
    """
    markdown = markdown.replace("\r\n", "\n").replace("\r", "\n").replace("\f", "\n")
    return markdown.replace("\x00", "�")


def _span_text(element: Element, source: str) -> Optional[str]:
    if element.source_span is None:
        return None
    start, end = element.source_span
    return source[start:end]


def _children(element: Element) -> Sequence[Element]:
    children = getattr(element, "children", [])
    if isinstance(children, str):
        return []
    return children


def _content_text(element: Element, source: str) -> str:
    """
    Get the markdown source of an element's content, i.e. the source spanned
    by its children.
    """
    children = getattr(element, "children", [])
    if isinstance(children, str):
        return children

    if children and children[0].source_span and children[-1].source_span:
        return source[children[0].source_span[0] : children[-1].source_span[1]]

    return "".join(_content_text(child, source) for child in children)


def _token(element: Element, source: str) -> Token:
    raw = _span_text(element, source)
    if raw is None:
        raw = _content_text(element, source)

    return Token(
        type=TOKEN_TYPES.get(element.get_type(), element.get_type(snake_case=True)),
        raw=raw,
        text=_content_text(element, source),
        depth=getattr(element, "level", None),
        children=tuple(_token(child, source) for child in _children(element)),
    )


def tokenize(markdown: str) -> List[Token]:
    """
    Split a markdown document into its top-level block tokens, in document
    order. The ``raw`` source of each token is the (line-ending normalised)
    document text the token was parsed from.
    """
    source = normalise_source(markdown)
    # NB: Markdown objects are not thread safe so one is created per call.
    document: block.Document = Markdown().parse(source)
    return [_token(element, source) for element in document.children]
