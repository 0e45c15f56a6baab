"""ScriptAssembler - merges per-recipe output into the top-level script.

The top-level script runs in three fixed phases: package installation, then
each recipe's sub-script, then systemd activation. Units are only (re)started
once every recipe's files are in place.
"""

from __future__ import annotations

import shlex
from pathlib import Path
from typing import Iterator, List, Mapping, Optional, Sequence

from cocinero.compiler.spec import CookPlan, RecipeScript, ShellScript
from cocinero.compiler.steps import StepCompiler
from cocinero.config import CookConfig
from cocinero.recipe.spec import Recipe


def chunks(items: Sequence[str], size: int) -> Iterator[Sequence[str]]:
    for start in range(0, len(items), size):
        yield items[start : start + size]


class ScriptAssembler:
    """Builds the CookPlan for a set of recipes."""

    def __init__(self, steps: StepCompiler, config: Optional[CookConfig] = None):
        self.steps = steps
        self.config = config or CookConfig()

    def assemble(self, recipes: Mapping[str, Recipe], recipes_root: Path) -> CookPlan:
        """Compile every recipe and assemble the top-level script.

        `recipes` is iterated in its own order; callers pass it sorted.
        """
        plan = CookPlan()
        top = plan.top
        top.emit("echo 'starting to cook'")

        self._emit_packages(top, recipes)
        top.emit()

        for name, recipe in recipes.items():
            sub = self.steps.compile(name, recipe, recipes_root / name)
            if sub is None:
                continue
            plan.recipes.append(sub)
            self._emit_invocation(top, sub)
        top.emit()

        self._emit_systemd(top, recipes)
        return plan

    def _emit_packages(self, top: ShellScript, recipes: Mapping[str, Recipe]) -> None:
        # flattened in recipe order, no deduplication
        packages: List[str] = [p for r in recipes.values() for p in r.packages]
        for batch in chunks(packages, self.config.package_batch_size):
            names = " ".join(shlex.quote(p) for p in batch)
            top.emit(f"{self.config.install_command} {names}")

    def _emit_invocation(self, top: ShellScript, sub: RecipeScript) -> None:
        banner = f'running receipe "{sub.recipe}"'
        top.emit(f"echo {shlex.quote(banner)}")
        top.emit(f"(cd {shlex.quote(sub.recipe)} && ./{self.config.script_name})")

    def _emit_systemd(self, top: ShellScript, recipes: Mapping[str, Recipe]) -> None:
        for recipe in recipes.values():
            for unit in recipe.systemd:
                unit = shlex.quote(unit)
                top.emit(f"systemctl enable --now {unit}")
                top.emit(f"systemctl reload-or-restart {unit}")
