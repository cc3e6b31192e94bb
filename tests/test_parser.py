import pytest

from textwrap import dedent

from typing import List, Tuple

from recipe_web.parser import Section, find_image, parse_recipe, split_tags
from recipe_web.recipe import Repository
from recipe_web.tokenizer import Token


REPOSITORY = Repository("alice", "recipes", "main")

ROOT = "https://raw.githubusercontent.com/alice/recipes/main/"


def english(text: str, top_n: int) -> List[Tuple[str, float]]:
    return [("en", 0.99)]


def no_language(text: str, top_n: int) -> List[Tuple[str, float]]:
    return []


def parse(markdown: str, path: str = "pancakes.md"):
    return parse_recipe(path, markdown, REPOSITORY, identify_language=english)


PANCAKES = dedent(
    """
    # Pancakes

    Fluffy pancakes for a lazy Sunday.

    ![A stack of pancakes](images/pancakes.jpg)

    *breakfast, sweet*

    **4 servings | 12 pancakes**

    ---

    - 250 g flour
    - 2 eggs

    ---

    Mix everything and fry in a hot pan.
    """
).lstrip()


class TestSection:
    def test_next(self) -> None:
        assert Section.PREAMBLE.next() is Section.INGREDIENTS
        assert Section.INGREDIENTS.next() is Section.INSTRUCTIONS
        assert Section.INSTRUCTIONS.next() is Section.INSTRUCTIONS


@pytest.mark.parametrize(
    "text, exp",
    [
        ("", []),
        ("breakfast", ["breakfast"]),
        ("breakfast, sweet", ["breakfast", "sweet"]),
        ("breakfast,sweet", ["breakfast", "sweet"]),
        ("breakfast,  sweet ,", ["breakfast", "sweet"]),
    ],
)
def test_split_tags(text: str, exp: List[str]) -> None:
    assert split_tags(text) == exp


class TestFindImage:
    @pytest.mark.parametrize(
        "markdown, exp",
        [
            # No images
            ("", ""),
            ("Just [a link](foo.md)", ""),
            # Markdown images
            ("![alt](a.jpg)", ROOT + "a.jpg"),
            ("![alt](img/a.jpg)", ROOT + "img/a.jpg"),
            ('![alt](a.jpg "A title")', ROOT + "a.jpg"),
            ("![alt](<my image.jpg>)", ROOT + "my%20image.jpg"),
            ("![alt](https://example.com/a.jpg)", "https://example.com/a.jpg"),
            # HTML images
            ('<img src="b.png">', ROOT + "b.png"),
            ('<img alt="x" src="/b.png" />', "https://raw.githubusercontent.com/b.png"),
            # First image wins
            ("![one](1.jpg)\n\n![two](2.jpg)", ROOT + "1.jpg"),
            ('<img src="1.png">\n\n![two](2.jpg)', ROOT + "1.png"),
        ],
    )
    def test_find(self, markdown: str, exp: str) -> None:
        assert find_image(markdown, ROOT) == exp


class TestParseRecipe:
    def test_complete_recipe(self) -> None:
        recipe = parse(PANCAKES, "breakfast/pancakes.md")

        assert recipe.meta.author == "alice"
        assert recipe.meta.path == "breakfast/pancakes.md"
        assert recipe.slug == "alice/breakfast/pancakes"

        assert recipe.title == "Pancakes"
        assert recipe.tags == ("breakfast", "sweet")
        assert recipe.yields == "4 servings | 12 pancakes"
        assert recipe.image_path == ROOT + "images/pancakes.jpg"
        assert recipe.language == "en"
        assert recipe.score == 0

        assert "Fluffy pancakes for a lazy Sunday." in recipe.description
        assert "![A stack of pancakes](images/pancakes.jpg)" in recipe.description
        assert "breakfast" not in recipe.description
        assert "servings" not in recipe.description

        assert "- 250 g flour\n- 2 eggs" in recipe.ingredients
        assert "Mix" not in recipe.ingredients

        assert recipe.instructions.strip() == "Mix everything and fry in a hot pan."

    def test_empty_document(self) -> None:
        recipe = parse_recipe("empty.md", "", REPOSITORY, identify_language=no_language)
        assert recipe.title == ""
        assert recipe.tags == ()
        assert recipe.yields == ""
        assert recipe.description == ""
        assert recipe.ingredients == ""
        assert recipe.instructions == ""
        assert recipe.image_path == ""
        assert recipe.language == ""

    @pytest.mark.parametrize(
        "markdown",
        [
            "# Soup\n\nHot.\n",
            "# Soup\n\n- 1 l water\n",
            "",
            "Just a paragraph",
        ],
    )
    def test_no_rule_has_no_ingredients_or_instructions(self, markdown: str) -> None:
        recipe = parse(markdown)
        assert recipe.ingredients == ""
        assert recipe.instructions == ""

    def test_single_rule_has_no_instructions(self) -> None:
        recipe = parse("# Soup\n\n---\n\n- 1 l water\n")
        assert "- 1 l water" in recipe.ingredients
        assert recipe.instructions == ""

    def test_further_rules_are_part_of_instructions(self) -> None:
        recipe = parse("# Soup\n\n---\n\n- 1 l water\n\n---\n\nBoil.\n\n---\n\nServe.\n")
        assert "Boil." in recipe.instructions
        assert "Serve." in recipe.instructions
        # The rules themselves are dropped
        assert "---" not in recipe.instructions

    def test_first_title_wins(self) -> None:
        recipe = parse("# First\n\nIntro\n\n# Second\n")
        assert recipe.title == "First"
        assert "Second" not in recipe.description
        assert recipe.description.strip() == "Intro"

    def test_lower_level_headings_are_description(self) -> None:
        recipe = parse("## Not a title\n\n# Title\n")
        assert recipe.title == "Title"
        assert "## Not a title" in recipe.description

    def test_partially_emphasised_paragraph_is_description(self) -> None:
        recipe = parse("Serves **4** people, *quickly*\n")
        assert recipe.yields == ""
        assert recipe.tags == ()
        assert "Serves **4** people" in recipe.description

    def test_tags_and_yields_only_in_preamble(self) -> None:
        recipe = parse("# Soup\n\n---\n\n*hot*\n\n**2 bowls**\n")
        assert recipe.tags == ()
        assert recipe.yields == ""
        assert "*hot*" in recipe.ingredients
        assert "**2 bowls**" in recipe.ingredients

    def test_sections_do_not_overlap(self) -> None:
        recipe = parse(PANCAKES)
        for line in ("Fluffy", "250 g flour", "Mix everything"):
            assert (
                sum(
                    line in section
                    for section in (
                        recipe.description,
                        recipe.ingredients,
                        recipe.instructions,
                    )
                )
                == 1
            )

    def test_language_identifier_receives_whole_document(self) -> None:
        calls = []

        def identify(text: str, top_n: int) -> List[Tuple[str, float]]:
            calls.append((text, top_n))
            return [("de", 0.9), ("nl", 0.1)]

        recipe = parse_recipe("x.md", PANCAKES, REPOSITORY, identify_language=identify)
        assert recipe.language == "de"
        assert calls == [(PANCAKES, 1)]

    def test_custom_tokenizer(self) -> None:
        tokens = [
            Token(type="heading", raw="# T\n", text="T", depth=1),
            Token(
                type="paragraph",
                raw="*a, b*\n",
                text="*a, b*",
                children=(Token(type="em", raw="*a, b*", text="a, b"),),
            ),
            Token(type="hr", raw="---\n"),
            Token(type="list", raw="- 1 egg\n"),
            Token(type="hr", raw="---\n"),
            Token(type="paragraph", raw="Cook.\n", text="Cook."),
        ]
        recipe = parse_recipe(
            "t.md",
            "ignored",
            REPOSITORY,
            tokenize=lambda markdown: tokens,
            identify_language=english,
        )
        assert recipe.title == "T"
        assert recipe.tags == ("a", "b")
        assert recipe.description == ""
        assert recipe.ingredients == "- 1 egg\n"
        assert recipe.instructions == "Cook.\n"

    @pytest.mark.parametrize(
        "markdown",
        [
            "---",
            "***\n***\n***\n",
            "# \n",
            "**\n",
            "* * *",
            "- - -\n- -",
            "\r\n\r\n",
            "<img src=\"\">",
            "![]()",
        ],
    )
    def test_never_fails(self, markdown: str) -> None:
        parse(markdown)
