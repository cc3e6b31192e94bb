"""
The ``recipe-web`` command renders a single RecipeMD recipe into a
stand-alone HTML page.

.. highlight:: bash

Basic usage
===========

.. code:: text

    $ recipe-web RECIPE_SOURCE [OUTPUT_FILENAME]

This will render the recipe in the indicated markdown file. If no output
filename is given, the input filename with the suffix replaced with '.html' is
used.

Scaling recipes
===============

You can scale the recipe by an arbitrary factor using the ``--scale`` or
``-S`` argument. This takes integers (e.g. '2'), decimal numbers (e.g. '1.5'
or '1,5') and fractions (e.g. '1/2' or '1 1/3').

Repositories
============

Relative images and links in the recipe are resolved against the GitHub
repository given by ``--author``, ``--repository`` and ``--branch``. Links to
recipes in any of the repositories configured in the ``REPOSITORIES``
environment variable (or given with ``--known-repository``) are rewritten
into recipe page links.
"""

import logging

import sys

from argparse import ArgumentParser

from pathlib import Path

from recipe_web.number_parser import number

from recipe_web.config import (
    DEFAULT_BRANCH,
    load_repositories,
    parse_repository_argument,
)

from recipe_web.exceptions import RecipeWebError

from recipe_web.recipe import Repository

from recipe_web.standalone_page import generate_standalone_page


def main() -> None:
    parser = ArgumentParser(
        description="""
            Render a RecipeMD markdown file into a standalone HTML page.
        """,
    )

    parser.add_argument(
        "recipe",
        type=Path,
        help="""
            The filename of the RecipeMD markdown file to render.
        """,
    )
    parser.add_argument(
        "output",
        type=Path,
        nargs="?",
        default=None,
        help="""
            The output filename for the generated HTML file. Defaults to the
            input filename with the extension replaced with .html if no name is
            given.
        """,
    )

    parser.add_argument(
        "--scale",
        "-S",
        type=number,
        metavar="MULTIPLIER",
        default=1,
        help="""
            Multiplier to scale the recipe by. May be a decimal (e.g. '3' or
            '3.14') or a fraction (e.g. '1/2' or '9 3/4').
        """,
    )

    parser.add_argument(
        "--author",
        "-a",
        default="local",
        help="""
            The author (GitHub user) owning the recipe's repository.
        """,
    )
    parser.add_argument(
        "--repository",
        "-r",
        default="recipes",
        help="""
            The name of the recipe's repository.
        """,
    )
    parser.add_argument(
        "--branch",
        "-b",
        default=DEFAULT_BRANCH,
        help=f"""
            The branch of the recipe's repository. Defaults to
            '{DEFAULT_BRANCH}'.
        """,
    )
    parser.add_argument(
        "--known-repository",
        "-k",
        type=parse_repository_argument,
        action="append",
        default=[],
        metavar="AUTHOR/REPOSITORY[@BRANCH]",
        help="""
            A repository whose recipes may be linked to, in addition to those
            in the REPOSITORIES environment variable. May be given several
            times.
        """,
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="""
            Show debugging output.
        """,
    )

    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        repositories = load_repositories() + args.known_repository
        html = generate_standalone_page(
            args.recipe,
            repository=Repository(args.author, args.repository, args.branch),
            scale=args.scale,
            repositories=repositories,
        )
    except RecipeWebError as e:
        sys.stderr.write(f"{e}\n")
        sys.exit(1)

    output = args.output
    if output is None:
        output = args.recipe.with_suffix(".html")

    with output.open("w", encoding="utf-8") as f:
        f.write(html)


if __name__ == "__main__":
    main()
