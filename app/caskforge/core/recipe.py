"""Recipe file I/O operations.

This module provides functions for locating, loading and exporting
recipes in TOML format with validation using Pydantic models.

Lookup order for a token:
1. User recipe (~/.config/caskforge/recipes/<token>.toml)
2. Bundled recipe (caskforge.data/<token>.toml)
"""

import logging
import tomllib
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Any

import tomli_w
from pydantic import ValidationError

from caskforge.core.paths import get_user_recipes_dir
from caskforge.models.recipe import Recipe

logger = logging.getLogger(__name__)

DEFAULT_TOKEN = "trackweight"


class RecipeError(Exception):
    """Base exception for recipe-related errors."""


class RecipeNotFoundError(RecipeError):
    """Raised when no recipe exists for a token or path."""


class RecipeParseError(RecipeError):
    """Raised when a recipe file cannot be parsed."""


class RecipeValidationError(RecipeError):
    """Raised when recipe content is invalid."""


def _bundled_recipe(token: str) -> Traversable:
    return resources.files("caskforge.data").joinpath(f"{token}.toml")


def bundled_tokens() -> list[str]:
    """List tokens of all recipes shipped with caskforge."""
    return sorted(
        entry.name.removesuffix(".toml")
        for entry in resources.files("caskforge.data").iterdir()
        if entry.name.endswith(".toml")
    )


def parse_recipe(data: dict[str, Any], origin: str = "<memory>") -> Recipe:
    """Validate already-decoded recipe data.

    Args:
        data: Decoded TOML document.
        origin: Where the data came from, used in error messages.

    Raises:
        RecipeValidationError: If the content doesn't match the schema.
    """
    try:
        return Recipe.model_validate(data)
    except ValidationError as e:
        raise RecipeValidationError(f"Invalid recipe {origin}: {e}") from e


def load_recipe_file(path: Path) -> Recipe:
    """Load and validate a recipe from a TOML file.

    Args:
        path: Path to the recipe file.

    Returns:
        Validated Recipe object.

    Raises:
        RecipeNotFoundError: If the file doesn't exist.
        RecipeParseError: If the TOML syntax is invalid.
        RecipeValidationError: If the content doesn't match the schema.
    """
    if not path.exists():
        raise RecipeNotFoundError(f"Recipe not found: {path}")

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise RecipeParseError(f"Invalid TOML syntax in {path}: {e}") from e
    except OSError as e:
        raise RecipeError(f"Failed to read recipe {path}: {e}") from e

    return parse_recipe(data, origin=str(path))


def load_recipe(token: str = DEFAULT_TOKEN, path: Path | None = None) -> Recipe:
    """Resolve a recipe by explicit path or by token.

    Args:
        token: Recipe token, used when ``path`` is None.
        path: Explicit recipe file, takes precedence over ``token``.

    Returns:
        Validated Recipe object.

    Raises:
        RecipeNotFoundError: If no user or bundled recipe matches.
        RecipeParseError: If the TOML syntax is invalid.
        RecipeValidationError: If the content doesn't match the schema.
    """
    if path is not None:
        return load_recipe_file(path)

    user_path = get_user_recipes_dir() / f"{token}.toml"
    if user_path.exists():
        logger.info("Using user recipe %s", user_path)
        return load_recipe_file(user_path)

    bundled = _bundled_recipe(token)
    if not bundled.is_file():
        raise RecipeNotFoundError(f"No recipe found for '{token}'")

    try:
        data = tomllib.loads(bundled.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise RecipeParseError(f"Invalid TOML syntax in bundled recipe '{token}': {e}") from e

    return parse_recipe(data, origin=f"bundled:{token}")


def recipe_to_toml(recipe: Recipe) -> str:
    """Serialize a recipe back to TOML, omitting unset optional fields."""
    return tomli_w.dumps(recipe.model_dump(mode="json", exclude_none=True))
