import pytest

from pathlib import Path

from typing import Dict, List

from recipe_web.corpus import (
    DirectorySource,
    build_corpus,
    load_recipe,
    recipe_paths,
)
from recipe_web.exceptions import (
    RecipeNotFoundError,
    RepositoryNotFoundError,
    RepositoryTreeError,
)
from recipe_web.recipe import Recipe, RecipeMeta, Repository


ALICE = Repository("alice", "recipes", "main")
BOB = Repository("bob", "food", "dev")


class FakeSource:
    """A recipe source backed by a dictionary of file contents."""

    def __init__(self, files: Dict[Repository, Dict[str, str]]) -> None:
        self.files = files

    def list_paths(self, repository: Repository) -> List[str]:
        if repository not in self.files:
            raise RepositoryTreeError(f"No tree for {repository}")
        return list(self.files[repository])

    def read(self, repository: Repository, path: str) -> str:
        try:
            return self.files[repository][path]
        except KeyError:
            raise RecipeNotFoundError(path)


def fake_parse(path: str, markdown: str, repository: Repository) -> Recipe:
    return Recipe(meta=RecipeMeta.from_path(path, repository), title=markdown)


@pytest.fixture
def source() -> FakeSource:
    return FakeSource(
        {
            ALICE: {
                "README.md": "Readme",
                "pancakes.md": "Pancakes",
                "cakes/brownies.md": "Brownies",
                "cakes/readme.md": "Cakes readme",
                "images/pancakes.jpg": "...",
            },
            BOB: {"soup.md": "Soup"},
        }
    )


@pytest.mark.parametrize(
    "paths, exp",
    [
        ([], []),
        (["a.md", "b.txt", "c.jpg"], ["a.md"]),
        (["README.md", "x/Readme.md", "x/readme.md"], []),
        (["x/README.md.bak", "notreadme.md"], ["notreadme.md"]),
        (["b.md", "a/a.md", "a.md"], ["b.md", "a/a.md", "a.md"]),
    ],
)
def test_recipe_paths(paths: List[str], exp: List[str]) -> None:
    assert recipe_paths(paths) == exp


class TestBuildCorpus:
    def test_build(self, source: FakeSource) -> None:
        corpus = build_corpus([ALICE, BOB], source, parse=fake_parse)
        assert list(corpus) == ["alice/pancakes", "alice/cakes/brownies", "bob/soup"]
        assert corpus["alice/cakes/brownies"].title == "Brownies"
        assert corpus["bob/soup"].meta.repository == "food"

    def test_no_repositories(self, source: FakeSource) -> None:
        assert build_corpus([], source, parse=fake_parse) == {}

    def test_unlistable_repository_skipped(self, source: FakeSource) -> None:
        carol = Repository("carol", "nothing", "main")
        corpus = build_corpus([carol, BOB], source, parse=fake_parse)
        assert list(corpus) == ["bob/soup"]

    def test_same_path_different_authors(self) -> None:
        source = FakeSource({ALICE: {"soup.md": "A"}, BOB: {"soup.md": "B"}})
        corpus = build_corpus([ALICE, BOB], source, parse=fake_parse)
        assert corpus["alice/soup"].title == "A"
        assert corpus["bob/soup"].title == "B"


class TestLoadRecipe:
    def test_load(self, source: FakeSource) -> None:
        recipe = load_recipe([ALICE, BOB], source, "alice", "cakes/brownies", fake_parse)
        assert recipe.slug == "alice/cakes/brownies"
        assert recipe.meta.path == "cakes/brownies.md"
        assert recipe.title == "Brownies"

    def test_unknown_author(self, source: FakeSource) -> None:
        with pytest.raises(RepositoryNotFoundError):
            load_recipe([ALICE], source, "bob", "soup", fake_parse)

    def test_unknown_recipe(self, source: FakeSource) -> None:
        with pytest.raises(RecipeNotFoundError):
            load_recipe([ALICE], source, "alice", "nope", fake_parse)


class TestDirectorySource:
    @pytest.fixture
    def root(self, tmp_path: Path) -> Path:
        repo = tmp_path / "alice" / "recipes"
        (repo / "cakes").mkdir(parents=True)
        (repo / "pancakes.md").write_text("# Pancakes\n", encoding="utf-8")
        (repo / "cakes" / "brownies.md").write_text("# Brownies\n", encoding="utf-8")
        (repo / "README.md").write_text("# My recipes\n", encoding="utf-8")
        return tmp_path

    def test_list_paths(self, root: Path) -> None:
        assert DirectorySource(root).list_paths(ALICE) == [
            "README.md",
            "cakes/brownies.md",
            "pancakes.md",
        ]

    def test_list_missing_repository(self, root: Path) -> None:
        with pytest.raises(RepositoryTreeError):
            DirectorySource(root).list_paths(BOB)

    def test_read(self, root: Path) -> None:
        source = DirectorySource(root)
        assert source.read(ALICE, "cakes/brownies.md") == "# Brownies\n"

    def test_read_missing(self, root: Path) -> None:
        with pytest.raises(RecipeNotFoundError):
            DirectorySource(root).read(ALICE, "nope.md")

    def test_build_corpus(self, root: Path) -> None:
        corpus = build_corpus([ALICE], DirectorySource(root))
        assert sorted(corpus) == ["alice/cakes/brownies", "alice/pancakes"]
        assert corpus["alice/pancakes"].title == "Pancakes"
