"""Recipe models and loading."""

from cocinero.recipe.loader import load_all_recipes, load_recipe
from cocinero.recipe.spec import InstallStep, Recipe, RunStep, ShellStep, Step

__all__ = [
    "Recipe",
    "Step",
    "InstallStep",
    "ShellStep",
    "RunStep",
    "load_recipe",
    "load_all_recipes",
]
