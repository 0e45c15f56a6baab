"""cocinero - compiles recipe directories into a shell deployment script.

Each recipe declares packages, systemd units and ordered steps. The compiler
turns them into a top-level ``cook.sh`` plus one ``_cook.sh`` per recipe and a
staged tree of the files those scripts install.
"""

from cocinero._version import __version__
from cocinero.compiler import build
from cocinero.config import CookConfig

__all__ = ["__version__", "build", "CookConfig"]
