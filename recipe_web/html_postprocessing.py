"""
Routines for post-processing rendered recipe HTML, e.g. resolving links and
images relative to the repository a recipe came from.
"""

from typing import Callable, Optional, Sequence

import posixpath

import re

from urllib.parse import urljoin, urlsplit, quote, unquote

import lxml.html  # type: ignore

from recipe_web.recipe import GITHUB_RAW, RecipeMeta, Repository, recipe_slug


HTMLPostprocessingStage = Callable[
    [lxml.html.HtmlElement], Optional[lxml.html.HtmlElement]
]
"""
Function which post-processes a lxml.html.HtmlElement tree, optionally
returning the modified element (or modifying in place if None is returned).
"""


github_blob_pattern = re.compile(
    r"/(?P<author>[^/]+)/(?P<repository>[^/]+)/blob/(?P<branch>[^/]+)/(?P<path>.+)"
)
"""Matches the path of a file page on github.com."""

github_raw_pattern = re.compile(
    r"/(?P<author>[^/]+)/(?P<repository>[^/]+)/(?P<branch>[^/]+)/(?P<path>.+)"
)
"""Matches the path of a raw file on raw.githubusercontent.com."""


def postprocess_html(
    html: str,
    stages: Sequence[HTMLPostprocessingStage] = (),
) -> str:
    """
    Post-process a HTML fragment with the specified processing stages which
    manipulate the document.

    Parameters
    ==========
    html : str
        The HTML fragment.
    stages : [ElementTree -> ElementTree or None, ...]
        A series of post-processing stages which transform the lxml parsed
        representation of the provided HTML. If the function returns None, the
        previous provided element tree will be assumed to be modified in-place.

        Note that the provided HTML will be logically wrapped in a <div> tag.
        This tag must not be modified or removed. The tag will be dropped again
        in the final output.
    """
    # NB: Wrap in <div> because lxml cannot handle things like bare text or
    # sequences of tags as a fragment.
    tree = lxml.html.fragment_fromstring(f"<div>{html}</div>")

    for stage in stages:
        new_tree = stage(tree)
        if new_tree is not None:
            tree = new_tree

    html = lxml.html.tostring(tree, encoding="unicode")

    empty, open_div, html = html.partition("<div>")
    assert open_div == "<div>"
    assert empty == ""
    html, close_div, empty = html.rpartition("</div>")
    assert close_div == "</div>"
    assert empty == ""

    return html


def _is_relative(url: str) -> bool:
    parts = urlsplit(url)
    return parts.scheme == "" and parts.netloc == "" and parts.path != ""


def _recipe_href(author: str, path: str, fragment: str = "") -> str:
    href = "/" + quote(recipe_slug(author, path))
    if fragment:
        href += "#" + fragment
    return href


def resolve_images(tree: lxml.html.HtmlElement, root: str) -> None:
    """
    A post-processing stage which makes relative image sources absolute by
    resolving them against ``root`` (a repository's raw content root).
    """
    for img in tree.iter("img"):
        src = img.get("src")
        if src is not None and _is_relative(src):
            img.set("src", urljoin(root, src))


def resolve_links(
    tree: lxml.html.HtmlElement,
    meta: RecipeMeta,
    repositories: Sequence[Repository] = (),
) -> None:
    """
    A post-processing stage which rewrites links.

    * Relative links to markdown files become links to the recipe page of
      that file (``/<author>/<path without .md>``), other relative links are
      resolved against the recipe repository's raw content root.
    * Absolute links to markdown files in one of the given ``repositories``
      (either the GitHub file page or the raw file) also become links to the
      corresponding recipe page.
    * All other links are left alone.

    Parameters
    ==========
    tree: lxml.html.HtmlElement
        The tree whose ``<a>`` tags will be rewritten.
    meta: :py:class:`~recipe_web.recipe.RecipeMeta`
        The recipe the links appear in.
    repositories: [:py:class:`~recipe_web.recipe.Repository`, ...]
        The repositories which recipe pages exist for.
    """
    known = {(r.author, r.repository, r.branch) for r in repositories}
    raw_netloc = urlsplit(GITHUB_RAW).netloc

    def rewrite_link(url: str) -> str:
        parts = urlsplit(url)

        if _is_relative(url):
            path = posixpath.normpath(unquote(parts.path)).lstrip("/")
            if path.endswith(".md"):
                return _recipe_href(meta.author, path, parts.fragment)
            return urljoin(meta.raw_root, url)

        if parts.scheme in ("http", "https"):
            if parts.netloc == "github.com":
                match = github_blob_pattern.fullmatch(unquote(parts.path))
            elif parts.netloc == raw_netloc:
                match = github_raw_pattern.fullmatch(unquote(parts.path))
            else:
                match = None
            if (
                match is not None
                and match["path"].endswith(".md")
                and (match["author"], match["repository"], match["branch"]) in known
            ):
                return _recipe_href(match["author"], match["path"], parts.fragment)

        return url

    for a in tree.iter("a"):
        href = a.get("href")
        if href is not None:
            a.set("href", rewrite_link(href))
