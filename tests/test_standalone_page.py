import pytest

from fractions import Fraction

from pathlib import Path

from textwrap import dedent

from recipe_web.exceptions import RecipeNotFoundError
from recipe_web.recipe import Repository
from recipe_web.standalone_page import generate_standalone_page


REPOSITORY = Repository("alice", "recipes", "main")


@pytest.fixture
def recipe_file(tmp_path: Path) -> Path:
    path = tmp_path / "brownies.md"
    path.write_text(
        dedent(
            """
            # Brownies & co

            Rich and fudgy.

            ![Brownies](brownies.jpg)

            *baking, sweet*

            **12 pieces**

            ---

            - 200 g chocolate
            - 3 eggs

            ---

            See also [the sauce](sauce.md).
            """
        ).lstrip(),
        encoding="utf-8",
    )
    return path


class TestGenerateStandalonePage:
    def test_page(self, recipe_file: Path) -> None:
        html = generate_standalone_page(recipe_file, REPOSITORY)
        assert html.startswith("<!DOCTYPE html>")
        assert "<title>Brownies &amp; co</title>" in html
        assert "<h1>Brownies &amp; co</h1>" in html
        assert "<li>baking</li>" in html
        assert "<li>12 pieces</li>" in html
        assert "Rich and fudgy." in html
        assert "200 g chocolate" in html
        assert (
            'src="https://raw.githubusercontent.com/alice/recipes/main/brownies.jpg"'
            in html
        )
        assert 'href="/alice/sauce"' in html
        assert (
            'href="https://raw.githubusercontent.com/alice/recipes/main/brownies.md"'
            in html
        )
        assert "(Multiplier)" in html

    def test_scaled(self, recipe_file: Path) -> None:
        html = generate_standalone_page(recipe_file, REPOSITORY, scale=Fraction(1, 2))
        assert "<li>6 pieces</li>" in html
        assert "100 g chocolate" in html
        assert "1.5 eggs" in html
        assert "0.5 (Multiplier)" in html

    def test_path_in_repository(self, recipe_file: Path) -> None:
        html = generate_standalone_page(recipe_file, REPOSITORY, path="cakes/b.md")
        assert (
            'href="https://raw.githubusercontent.com/alice/recipes/main/cakes/b.md"'
            in html
        )

    def test_no_multiplier_control_for_single_yield(self, tmp_path: Path) -> None:
        path = tmp_path / "cake.md"
        path.write_text("# Cake\n\n**1 cake**\n\n---\n\n- 1 egg\n", encoding="utf-8")
        html = generate_standalone_page(path, REPOSITORY)
        assert "(Multiplier)" not in html

    @pytest.mark.parametrize(
        "yields, exp_tracks",
        [
            ("", []),
            ("**4 servings |**\n\n", ["<li>8 servings</li>"]),
        ],
    )
    def test_empty_yield_track_shows_multiplier(
        self, tmp_path: Path, yields: str, exp_tracks
    ) -> None:
        path = tmp_path / "cake.md"
        path.write_text(f"# Cake\n\n{yields}---\n\n- 1 egg\n", encoding="utf-8")
        html = generate_standalone_page(path, REPOSITORY, scale=2)
        assert "<li>2 (Multiplier)</li>" in html
        assert "<li></li>" not in html
        for track in exp_tracks:
            assert track in html

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(RecipeNotFoundError):
            generate_standalone_page(tmp_path / "nope.md", REPOSITORY)
