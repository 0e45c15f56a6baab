"""cocinero compiler - transforms recipes into shell scripts."""

from cocinero.compiler.assembler import ScriptAssembler
from cocinero.compiler.compiler import BuildResult, build, write_plan
from cocinero.compiler.renderer import Renderer
from cocinero.compiler.spec import CookPlan, RecipeScript, ShellScript
from cocinero.compiler.steps import StepCompiler
from cocinero.compiler.templates import TemplateEngine, TemplateHandle

__all__ = [
    "build",
    "write_plan",
    "BuildResult",
    "ScriptAssembler",
    "StepCompiler",
    "TemplateEngine",
    "TemplateHandle",
    "Renderer",
    "CookPlan",
    "RecipeScript",
    "ShellScript",
]
