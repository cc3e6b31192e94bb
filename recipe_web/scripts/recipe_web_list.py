"""
The ``recipe-web-list`` command lists the recipes of a set of repositories in
ranked order.

.. highlight:: bash

Basic usage
===========

.. code:: text

    $ recipe-web-list ROOT

The repositories are read from the directory ``ROOT`` which must contain a
``<author>/<repository>`` subdirectory for every configured repository.
Repositories are configured using the ``REPOSITORIES`` environment variable
(see :py:mod:`recipe_web.config`) and/or the ``--repository`` argument.

Without a query, recipes are listed in a shuffled order determined by the
``--seed``. With ``--query`` only matching recipes are listed, best match
first, preceded by the number of matches. Favourite recipes (given with
``--favorite``) are always listed first.
"""

import logging

import sys

from argparse import ArgumentParser

from pathlib import Path

from recipe_web.config import load_repositories, parse_repository_argument

from recipe_web.corpus import DirectorySource, build_corpus

from recipe_web.exceptions import RecipeWebError

from recipe_web.ranking import FavoriteSet, RecipeFilter, filter_recipes, rank


def main() -> None:
    parser = ArgumentParser(
        description="""
            List the recipes in a directory of recipe repositories.
        """,
    )

    parser.add_argument(
        "root",
        type=Path,
        help="""
            The directory containing the repositories, as
            <author>/<repository> subdirectories.
        """,
    )
    parser.add_argument(
        "--repository",
        "-r",
        type=parse_repository_argument,
        action="append",
        default=[],
        metavar="AUTHOR/REPOSITORY[@BRANCH]",
        help="""
            A repository to list recipes from, in addition to those in the
            REPOSITORIES environment variable. May be given several times.
        """,
    )
    parser.add_argument(
        "--query",
        "-q",
        default="",
        help="""
            Only list recipes matching this (fuzzy) search query.
        """,
    )
    parser.add_argument(
        "--author",
        "-a",
        default=None,
        help="""
            Only list recipes by this author.
        """,
    )
    parser.add_argument(
        "--tag",
        "-t",
        default=None,
        help="""
            Only list recipes with this tag.
        """,
    )
    parser.add_argument(
        "--seed",
        "-s",
        type=int,
        default=0,
        help="""
            The seed determining the order of recipes when no query is given.
        """,
    )
    parser.add_argument(
        "--favorite",
        "-f",
        nargs="+",
        default=[],
        metavar="SLUG",
        help="""
            The slugs (e.g. 'alice/cakes/brownies') of favourite recipes.
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
        repositories = load_repositories() + args.repository
        corpus = build_corpus(repositories, DirectorySource(args.root))
    except RecipeWebError as e:
        sys.stderr.write(f"{e}\n")
        sys.exit(1)

    recipe_filter = RecipeFilter(author=args.author, tag=args.tag)
    favorites = FavoriteSet(args.favorite)
    recipes = rank(
        corpus,
        recipe_filter=recipe_filter,
        query=args.query,
        is_favorite=favorites.is_favorite,
        seed=args.seed,
    )

    if args.query.strip():
        candidates = filter_recipes(corpus, recipe_filter)
        print(f"{len(recipes)} / {len(candidates)}")

    for recipe in recipes:
        star = "*" if favorites.is_favorite(recipe.slug) else " "
        print(f"{star} {recipe.slug}\t{recipe.title}")


if __name__ == "__main__":
    main()
