"""Staging area: the output tree rebuilt from scratch on every run."""

from __future__ import annotations

import logging
import shutil
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, TextIO

from cocinero.errors import StagingIOError

log = logging.getLogger(__name__)

# owner read + execute, added to whatever mode the file was created with
EXEC_BITS = 0o500


class StagingFS:
    """Filesystem operations on the staging root.

    Every OSError is re-raised as StagingIOError with a short description of
    what was being done.
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    def reset(self) -> None:
        """Destroy and recreate the staging root."""
        try:
            shutil.rmtree(self.root)
        except FileNotFoundError:
            pass
        except OSError as e:
            raise StagingIOError(f"removing {self.root}", e) from e
        self._mkdir(self.root)
        log.info("Staging root reset: %s", self.root)

    def recipe_dir(self, name: str) -> Path:
        path = self.root / name
        self._mkdir(path)
        return path

    def copy(self, src: Path, dest: Path) -> None:
        """Copy `src` to `dest`, creating parent directories."""
        self._mkdir(dest.parent)
        try:
            shutil.copyfile(src, dest)
        except OSError as e:
            raise StagingIOError(f"copying {src} to {dest}", e) from e
        log.debug("Staged %s -> %s", src, dest)

    @contextmanager
    def open_output(self, path: Path) -> Iterator[TextIO]:
        """Open `path` for writing rendered output."""
        self._mkdir(path.parent)
        try:
            f = open(path, "w", encoding="utf-8", newline="")
        except OSError as e:
            raise StagingIOError(f"creating {path}", e) from e
        with f:
            yield f

    def read_bytes(self, path: Path) -> bytes:
        try:
            return path.read_bytes()
        except OSError as e:
            raise StagingIOError(f"reading {path}", e) from e

    def write_script(self, path: Path, text: str) -> None:
        """Write a generated script and mark it executable."""
        self._mkdir(path.parent)
        try:
            path.write_text(text, encoding="utf-8")
        except OSError as e:
            raise StagingIOError(f"writing script {path}", e) from e
        self.make_executable(path)

    def make_executable(self, path: Path) -> None:
        try:
            mode = path.stat().st_mode
            path.chmod(mode | EXEC_BITS)
        except OSError as e:
            raise StagingIOError(f"marking {path} executable", e) from e

    def _mkdir(self, path: Path) -> None:
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StagingIOError(f"creating directory {path}", e) from e
