"""Compiler IR spec - shell script intermediate representation."""

from dataclasses import dataclass, field
from typing import List

from cocinero.errors import DisclaimerMissing

SCRIPT_HEADER = [
    "#!/usr/bin/bash",
    "",
    "# Generated by cocinero",
    "",
    "set -e",
    "",
]


@dataclass
class ShellScript:
    """A generated script: fixed header followed by command lines."""

    lines: List[str] = field(default_factory=list)
    header: List[str] = field(default_factory=lambda: list(SCRIPT_HEADER))

    def emit(self, line: str = "") -> None:
        self.lines.append(line)


@dataclass
class RecipeScript:
    """StepCompiler output for one recipe."""

    recipe: str
    script: ShellScript = field(default_factory=ShellScript)
    warnings: List[DisclaimerMissing] = field(default_factory=list)


@dataclass
class CookPlan:
    """Everything a build writes: the top-level script and its sub-scripts."""

    top: ShellScript = field(default_factory=ShellScript)
    recipes: List[RecipeScript] = field(default_factory=list)

    @property
    def warnings(self) -> List[DisclaimerMissing]:
        return [w for r in self.recipes for w in r.warnings]
