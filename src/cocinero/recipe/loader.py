"""Recipe discovery and parsing."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path

from pydantic import ValidationError

from cocinero.config import CookConfig
from cocinero.errors import (
    DuplicateRecipeError,
    MissingRecipeError,
    RecipeParseError,
    StagingIOError,
)
from cocinero.recipe.spec import Recipe

log = logging.getLogger(__name__)


def load_recipe(path: Path) -> Recipe:
    """Load and validate a single recipe file.

    Raises:
        MissingRecipeError: `path` does not exist.
        StagingIOError: The file exists but cannot be read.
        RecipeParseError: Invalid TOML or a schema violation.
    """
    try:
        if not path.exists():
            raise MissingRecipeError(path)
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise StagingIOError(f"loading recipe {path}", e) from e

    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise RecipeParseError(path, str(e)) from e

    try:
        return Recipe.model_validate(data)
    except ValidationError as e:
        raise RecipeParseError(path, str(e)) from e


def load_all_recipes(
    recipes_root: Path, config: CookConfig | None = None
) -> dict[str, Recipe]:
    """Load every recipe directory under `recipes_root`.

    Returns a mapping of directory name to Recipe, ordered by name so that
    builds are reproducible. Entries that are not directories, and
    directories without a recipe file, are skipped.
    """
    config = config or CookConfig()

    try:
        entries = sorted(recipes_root.iterdir(), key=lambda p: p.name)
    except OSError as e:
        raise StagingIOError(f"listing recipes in {recipes_root}", e) from e

    recipes: dict[str, Recipe] = {}
    for entry in entries:
        if not entry.is_dir():
            log.debug("Ignoring non directory entry: %s", entry.name)
            continue

        try:
            recipe = load_recipe(entry / config.recipe_filename)
        except MissingRecipeError:
            log.debug("Ignoring directory %s without %s", entry.name, config.recipe_filename)
            continue

        if entry.name in recipes:
            raise DuplicateRecipeError(entry.name)
        recipes[entry.name] = recipe
        log.info(
            "Loaded recipe %s (%d packages, %d steps)",
            entry.name,
            len(recipe.packages),
            len(recipe.steps),
        )

    return recipes
