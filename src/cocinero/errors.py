"""Error taxonomy for cocinero.

Every fatal error derives from CocineroError and carries the message shown to
the operator plus the process exit code. Advisory conditions are records, not
exceptions (see DisclaimerMissing).
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import NoReturn

import typer


class CocineroError(Exception):
    """Base exception for cocinero operations."""

    def __init__(self, message: str, exit_code: int = 1) -> None:
        self.message = message
        self.exit_code = exit_code
        super().__init__(message)


class MissingRecipeError(CocineroError):
    """Raised when a recipe directory has no recipe file.

    The loader catches this and skips the directory.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"No recipe at {path}")


class StagingIOError(CocineroError):
    """Raised when reading, writing or copying a file fails."""

    def __init__(self, context: str, error: OSError) -> None:
        self.context = context
        self.error = error
        super().__init__(f"Io error {error} happened while {context}")


class RecipeParseError(CocineroError):
    """Raised when a recipe file is not valid TOML or fails validation."""

    def __init__(self, path: Path, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Couldn't parse recipe {path}: {detail}")


class DuplicateRecipeError(CocineroError):
    """Raised when two recipe directories resolve to the same key."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Duplicate recipe: {name}")


class TemplateError(CocineroError):
    """Raised when a template fails to compile."""

    pass


class RenderError(CocineroError):
    """Raised when rendering fails, e.g. on an undefined variable."""

    pass


class StagingCollisionError(CocineroError):
    """Raised when two different outputs of a recipe map to one staging name."""

    def __init__(self, recipe: str, staged_name: str, first: str, second: str) -> None:
        self.recipe = recipe
        self.staged_name = staged_name
        super().__init__(
            f"Recipe {recipe}: {first!r} and {second!r} "
            f"both stage as {staged_name!r}"
        )


@dataclass(frozen=True)
class DisclaimerMissing:
    """A staged file lacks the managed-by disclaimer marker."""

    path: Path
    marker: str

    @property
    def message(self) -> str:
        return f'File {self.path} has no "{self.marker}" disclaimer.'


def exit_with_error(message: str, exit_code: int = 1) -> NoReturn:
    """Exit the program with an error message."""
    typer.echo(f"Error: {message}", err=True)
    sys.exit(exit_code)


def handle_error(error: Exception) -> NoReturn:
    """Handle and exit on cocinero errors."""
    if isinstance(error, CocineroError):
        exit_with_error(error.message, error.exit_code)
    else:
        # Unexpected error
        typer.echo(f"Unexpected error: {error}", err=True)
        sys.exit(1)
