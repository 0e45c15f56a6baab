import textwrap
from pathlib import Path

import pytest

from cocinero.staging import StagingFS


@pytest.fixture
def recipes_root(tmp_path: Path) -> Path:
    root = tmp_path / "recipes"
    root.mkdir()
    return root


@pytest.fixture
def make_recipe(recipes_root: Path):
    """Create a recipe directory. `toml=None` leaves out the recipe file."""

    def _make(name: str, toml: str | None = "", files: dict[str, str] | None = None) -> Path:
        d = recipes_root / name
        d.mkdir()
        if toml is not None:
            (d / "receipe.toml").write_text(textwrap.dedent(toml))
        for rel, content in (files or {}).items():
            p = d / rel
            p.parent.mkdir(parents=True, exist_ok=True)
            p.write_text(content)
        return d

    return _make


@pytest.fixture
def staging(tmp_path: Path) -> StagingFS:
    fs = StagingFS(tmp_path / "out")
    fs.reset()
    return fs
