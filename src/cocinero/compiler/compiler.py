"""Build driver - load recipes, compile, assemble, persist."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

from cocinero.compiler.assembler import ScriptAssembler
from cocinero.compiler.renderer import Renderer
from cocinero.compiler.spec import CookPlan
from cocinero.compiler.steps import StepCompiler
from cocinero.config import CookConfig
from cocinero.errors import CocineroError, DisclaimerMissing
from cocinero.recipe.loader import load_all_recipes
from cocinero.staging import StagingFS

log = logging.getLogger(__name__)


@dataclass
class BuildResult:
    """What a build produced."""

    target: Path
    script: Path
    recipes: List[str] = field(default_factory=list)
    warnings: List[DisclaimerMissing] = field(default_factory=list)


def build(
    recipes_root: Path,
    target: Optional[Path] = None,
    config: Optional[CookConfig] = None,
    on_warning: Optional[Callable[[DisclaimerMissing], None]] = None,
) -> BuildResult:
    """Compile every recipe under `recipes_root` into `target`.

    The target directory is wiped first. Scripts are written only after every
    recipe compiled, so a failed build never leaves a ``cook.sh`` behind.
    `on_warning` is called for each disclaimer warning as soon as it is found.
    """
    config = config or CookConfig()
    recipes_root = Path(recipes_root)
    target = Path(target) if target is not None else Path(config.default_target)

    recipes = load_all_recipes(recipes_root, config)
    log.info("Loaded %d recipes from %s", len(recipes), recipes_root)
    _check_target(recipes_root, target, list(recipes))

    staging = StagingFS(target)
    staging.reset()

    assembler = ScriptAssembler(StepCompiler(staging, config, on_warning), config)
    plan = assembler.assemble(recipes, recipes_root)

    script = write_plan(plan, staging, config)
    return BuildResult(
        target=target,
        script=script,
        recipes=[r.recipe for r in plan.recipes],
        warnings=plan.warnings,
    )


def _check_target(recipes_root: Path, target: Path, names: List[str]) -> None:
    """Refuse a target whose wipe would delete recipe sources."""
    root = recipes_root.resolve()
    dest = target.resolve()
    if dest == root or dest in root.parents:
        raise CocineroError(f"Refusing to wipe {target}: it contains the recipes")
    for name in names:
        source = (root / name).resolve()
        if dest == source or source in dest.parents:
            raise CocineroError(
                f"Refusing to wipe {target}: it is inside recipe {name}"
            )


def write_plan(plan: CookPlan, staging: StagingFS, config: CookConfig) -> Path:
    """Write the sub-scripts, then the top-level script. Returns the latter."""
    renderer = Renderer()
    for sub in plan.recipes:
        path = staging.root / sub.recipe / config.script_name
        staging.write_script(path, renderer.render(sub.script))

    top_path = staging.root / config.top_script_name
    staging.write_script(top_path, renderer.render(plan.top))
    log.info("Wrote %s", top_path)
    return top_path
