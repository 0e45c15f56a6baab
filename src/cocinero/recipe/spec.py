"""Recipe models.

A recipe file looks like:

    packages = ["nginx"]
    systemd = ["nginx.service"]
    template_vars = [{ site = "a" }, { site = "b" }]

    [[steps]]
    kind = "install"
    template = true
    src = "site.conf"
    dest = "/etc/nginx/sites-enabled/{{ site }}.conf"

Steps are a closed union discriminated by ``kind``.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field

# One binding; key order follows the file.
VariableBinding = dict[str, Any]


class _StepBase(BaseModel):
    model_config = {"extra": "forbid", "frozen": True}

    template: bool = Field(
        default=False, description="Render through the template engine once per binding"
    )


class InstallStep(_StepBase):
    """Copy or render a file into place with ``install -D``."""

    # "copy" is accepted as an alias for "install"
    kind: Literal["install", "copy"]
    src: str = Field(description="Source file, relative to the recipe directory")
    dest: str = Field(description="Destination path on the target host")
    mode: str | None = Field(default=None, description="Permission string for install")


class ShellStep(_StepBase):
    """Emit a shell command line."""

    kind: Literal["shell"]
    cmd: str


class RunStep(_StepBase):
    """Stage an executable script and invoke it."""

    kind: Literal["run"]
    script: str = Field(description="Script path, relative to the recipe directory")


Step = Annotated[Union[InstallStep, ShellStep, RunStep], Field(discriminator="kind")]


class Recipe(BaseModel):
    """One recipe directory's declarations."""

    model_config = {"extra": "forbid", "frozen": True}

    packages: list[str] = Field(default_factory=list)
    systemd: list[str] = Field(default_factory=list)
    template_vars: list[VariableBinding] = Field(default_factory=list)
    steps: list[Step] = Field(default_factory=list)
