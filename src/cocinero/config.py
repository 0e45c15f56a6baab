"""Configuration for a cocinero build.

Every knob the compiler reads lives on CookConfig. The defaults reproduce the
stock layout: recipes in ``<dir>/receipe.toml``, output in ``cocinero_target``.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

DEFAULT_TARGET = "cocinero_target"


class CookConfig(BaseModel):
    """Build-wide settings."""

    model_config = {"frozen": True}

    recipe_filename: str = Field(
        default="receipe.toml", description="Recipe file looked up in each directory"
    )
    script_name: str = Field(
        default="_cook.sh", description="Per-recipe sub-script name"
    )
    top_script_name: str = Field(
        default="cook.sh", description="Top-level script name"
    )
    package_batch_size: int = Field(
        default=64, ge=1, description="Maximum packages named per install line"
    )
    install_command: str = Field(
        default="apt-get install -y", description="Package install command prefix"
    )
    disclaimer_marker: str = Field(
        default="managed by cocinero",
        description="Marker expected in every staged managed file",
    )
    default_target: str = Field(
        default=DEFAULT_TARGET, description="Output directory when none is given"
    )
