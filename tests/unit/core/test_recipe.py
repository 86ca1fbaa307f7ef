"""Unit tests for recipe file I/O."""

import tomllib
from pathlib import Path

import pytest
from caskforge.core.paths import get_user_recipes_dir
from caskforge.core.recipe import (
    RecipeNotFoundError,
    RecipeParseError,
    RecipeValidationError,
    bundled_tokens,
    load_recipe,
    load_recipe_file,
    recipe_to_toml,
)
from caskforge.models.recipe import Recipe

MINIMAL_RECIPE = """\
[package]
token = "demo"
name = "Demo"
version = "2.0"
url = "https://example.com/demo.git"

[build]
project = "Demo.xcodeproj"
scheme = "Demo"

[entitlements]
filename = "Demo.entitlements"

[artifact]
app = "Demo.app"
"""


class TestLoadRecipeFile:
    """Tests for load_recipe_file function."""

    def test_minimal(self, tmp_path: Path) -> None:
        """Optional sections fall back to defaults."""
        path = tmp_path / "demo.toml"
        path.write_text(MINIMAL_RECIPE)

        recipe = load_recipe_file(path)

        assert recipe.token == "demo"
        assert recipe.requires.macos is None
        assert recipe.zap.trash == []
        assert recipe.artifact.binary is None

    def test_not_found(self, tmp_path: Path) -> None:
        """A missing file raises RecipeNotFoundError."""
        with pytest.raises(RecipeNotFoundError, match="Recipe not found"):
            load_recipe_file(tmp_path / "missing.toml")

    def test_invalid_toml(self, tmp_path: Path) -> None:
        """Broken TOML raises RecipeParseError."""
        path = tmp_path / "broken.toml"
        path.write_text("[package\nname = ")

        with pytest.raises(RecipeParseError, match="Invalid TOML syntax"):
            load_recipe_file(path)

    def test_invalid_content(self, tmp_path: Path) -> None:
        """Schema violations raise RecipeValidationError."""
        path = tmp_path / "bad.toml"
        path.write_text(MINIMAL_RECIPE.replace('app = "Demo.app"', 'app = "Demo"'))

        with pytest.raises(RecipeValidationError, match="Invalid recipe"):
            load_recipe_file(path)


class TestLoadRecipe:
    """Tests for load_recipe function."""

    def test_bundled(self) -> None:
        """The bundled TrackWeight recipe loads by token."""
        recipe = load_recipe("trackweight")

        assert recipe.package.name == "TrackWeight"

    def test_unknown_token(self) -> None:
        """Unknown tokens raise RecipeNotFoundError."""
        with pytest.raises(RecipeNotFoundError, match="No recipe found for 'nope'"):
            load_recipe("nope")

    def test_user_recipe_overrides_bundled(self) -> None:
        """A user recipe with the same token wins."""
        user_dir = get_user_recipes_dir()
        user_dir.mkdir(parents=True)
        (user_dir / "trackweight.toml").write_text(
            MINIMAL_RECIPE.replace('token = "demo"', 'token = "trackweight"')
        )

        recipe = load_recipe("trackweight")

        assert recipe.package.name == "Demo"

    def test_explicit_path(self, tmp_path: Path) -> None:
        """An explicit path takes precedence over the token."""
        path = tmp_path / "demo.toml"
        path.write_text(MINIMAL_RECIPE)

        recipe = load_recipe("trackweight", path=path)

        assert recipe.token == "demo"

    def test_bundled_tokens(self) -> None:
        """The bundled recipe is listed."""
        assert "trackweight" in bundled_tokens()


class TestRecipeToToml:
    """Tests for recipe_to_toml function."""

    def test_reloads_to_same_recipe(self, recipe: Recipe) -> None:
        """Exported TOML validates back to an equal recipe."""
        exported = recipe_to_toml(recipe)

        assert Recipe.model_validate(tomllib.loads(exported)) == recipe
