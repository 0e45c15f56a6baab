"""StepCompiler - turns one recipe's steps into staged files and shell lines."""

from __future__ import annotations

import logging
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple, Type

from cocinero.compiler.spec import RecipeScript
from cocinero.compiler.templates import TemplateEngine
from cocinero.config import CookConfig
from cocinero.errors import DisclaimerMissing, RenderError, StagingCollisionError
from cocinero.recipe.spec import InstallStep, Recipe, RunStep, ShellStep, VariableBinding
from cocinero.staging import StagingFS

log = logging.getLogger(__name__)

# what claimed a staging name: ("copy", src), ("render", dest), ("run", script, i) or ("script",)
Origin = Tuple[object, ...]


def mangle_destination(dest: str) -> str:
    """Flatten a rendered destination path into a single staging file name.

    ``/etc/foo/bar.conf`` becomes ``etc__foo__bar.conf``.
    """
    return dest.lstrip("/").replace("/", "__")


def install_line(src: str, dest: str, mode: Optional[str] = None) -> str:
    line = f"install -D {shlex.quote(src)} {shlex.quote(dest)}"
    if mode:
        line += f" --mode={shlex.quote(mode)}"
    return line


def invoke_line(script: str) -> str:
    return shlex.quote(f"./{script}")


def _describe(origin: Origin) -> str:
    return " ".join(str(part) for part in origin)


@dataclass
class _RecipeContext:
    """State for one pass over a recipe."""

    name: str
    recipe: Recipe
    source_dir: Path
    target_dir: Path
    out: RecipeScript
    # staging name -> the output that claimed it
    staged: Dict[str, Origin] = field(default_factory=dict)

    @property
    def bindings(self) -> List[VariableBinding]:
        return self.recipe.template_vars


class StepCompiler:
    """Compiles recipes one at a time into RecipeScript IR.

    Files are staged under the StagingFS root as a side effect. The template
    engine is only constructed once a templated step is seen, and is then
    reused for the rest of the build.
    """

    def __init__(
        self,
        staging: StagingFS,
        config: Optional[CookConfig] = None,
        on_warning: Optional[Callable[[DisclaimerMissing], None]] = None,
    ):
        self.staging = staging
        self.config = config or CookConfig()
        self.on_warning = on_warning
        self._engine: Optional[TemplateEngine] = None

        self._handlers: Dict[Tuple[Type, bool], Callable[..., None]] = {
            (InstallStep, False): self._install_file,
            (InstallStep, True): self._install_template,
            (ShellStep, False): self._shell,
            (ShellStep, True): self._shell_template,
            (RunStep, False): self._run_script,
            (RunStep, True): self._run_template,
        }

    @property
    def engine(self) -> TemplateEngine:
        if self._engine is None:
            log.debug("Creating template engine")
            self._engine = TemplateEngine()
        return self._engine

    @property
    def has_engine(self) -> bool:
        return self._engine is not None

    def compile(
        self, name: str, recipe: Recipe, source_dir: Path
    ) -> Optional[RecipeScript]:
        """Compile `recipe` (loaded from `source_dir`) into its sub-script.

        Returns None for a recipe without steps; nothing is staged for it.
        """
        if not recipe.steps:
            log.debug("Recipe %s has no steps, skipping", name)
            return None

        ctx = _RecipeContext(
            name=name,
            recipe=recipe,
            source_dir=Path(source_dir),
            target_dir=self.staging.recipe_dir(name),
            out=RecipeScript(recipe=name),
        )
        # the sub-script itself lives in the same directory
        ctx.staged[self.config.script_name] = ("script",)
        for step in recipe.steps:
            handler = self._handlers[(type(step), step.template)]
            handler(ctx, step)

        log.info("Compiled recipe %s: %d lines", name, len(ctx.out.script.lines))
        return ctx.out

    # -- install ---------------------------------------------------------

    def _install_file(self, ctx: _RecipeContext, step: InstallStep) -> None:
        self._claim(ctx, step.src, ("copy", step.src))
        target_path = ctx.target_dir / step.src
        self.staging.copy(ctx.source_dir / step.src, target_path)
        self._check_disclaimer(ctx, target_path)
        ctx.out.script.emit(install_line(step.src, step.dest, step.mode))

    def _install_template(self, ctx: _RecipeContext, step: InstallStep) -> None:
        dest_template = self.engine.register(step.dest)
        file_template = self.engine.register_file(ctx.source_dir / step.src)

        for binding in ctx.bindings:
            dest = self.engine.render(dest_template, binding)
            staged_name = mangle_destination(dest)
            if not staged_name:
                raise RenderError(
                    f"Recipe {ctx.name}: destination {step.dest!r} rendered to {dest!r}"
                )
            self._claim(ctx, staged_name, ("render", dest))

            target_path = ctx.target_dir / staged_name
            with self.staging.open_output(target_path) as f:
                self.engine.render_to_stream(file_template, binding, f)
            self._check_disclaimer(ctx, target_path)
            ctx.out.script.emit(install_line(staged_name, dest, step.mode))

    def _claim(self, ctx: _RecipeContext, staged_name: str, origin: Origin) -> None:
        previous = ctx.staged.get(staged_name)
        if previous is not None and previous != origin:
            raise StagingCollisionError(
                ctx.name, staged_name, _describe(previous), _describe(origin)
            )
        ctx.staged[staged_name] = origin

    # -- shell -----------------------------------------------------------

    def _shell(self, ctx: _RecipeContext, step: ShellStep) -> None:
        ctx.out.script.emit(step.cmd)

    def _shell_template(self, ctx: _RecipeContext, step: ShellStep) -> None:
        cmd_template = self.engine.register(step.cmd)
        for binding in ctx.bindings:
            ctx.out.script.emit(self.engine.render(cmd_template, binding))

    # -- run -------------------------------------------------------------

    def _run_script(self, ctx: _RecipeContext, step: RunStep) -> None:
        self._claim(ctx, step.script, ("copy", step.script))
        target_path = ctx.target_dir / step.script
        self.staging.copy(ctx.source_dir / step.script, target_path)
        self.staging.make_executable(target_path)
        ctx.out.script.emit(invoke_line(step.script))

    def _run_template(self, ctx: _RecipeContext, step: RunStep) -> None:
        file_template = self.engine.register_file(ctx.source_dir / step.script)
        for i, binding in enumerate(ctx.bindings):
            dest_name = f"{step.script}.{i}"
            self._claim(ctx, dest_name, ("run", step.script, i))
            target_path = ctx.target_dir / dest_name
            with self.staging.open_output(target_path) as f:
                self.engine.render_to_stream(file_template, binding, f)
            self.staging.make_executable(target_path)
            ctx.out.script.emit(invoke_line(dest_name))

    # -- checks ----------------------------------------------------------

    def _check_disclaimer(self, ctx: _RecipeContext, path: Path) -> None:
        marker = self.config.disclaimer_marker
        if marker.encode() not in self.staging.read_bytes(path):
            warning = DisclaimerMissing(path=path, marker=marker)
            log.debug(warning.message)
            ctx.out.warnings.append(warning)
            if self.on_warning is not None:
                self.on_warning(warning)
