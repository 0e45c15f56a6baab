"""Template engine - compiles template sources to handles, renders strictly.

Rendering uses StrictUndefined: a reference to a variable missing from the
binding raises RenderError instead of rendering as an empty string.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, TextIO

import jinja2

from cocinero.errors import RenderError, TemplateError


@dataclass(frozen=True)
class TemplateHandle:
    """Opaque reference to one compiled template."""

    name: str


class TemplateEngine:
    """Registry of compiled Jinja templates.

    Each registration gets a fresh name from the engine's own counter, so
    registering identical text twice yields two distinct handles.
    """

    def __init__(self) -> None:
        self._env = jinja2.Environment(
            undefined=jinja2.StrictUndefined,
            autoescape=False,
            keep_trailing_newline=True,
        )
        # Jinja normalizes line endings; CRLF sources render through this overlay
        self._crlf_env = self._env.overlay(newline_sequence="\r\n")
        self._templates: dict[str, jinja2.Template] = {}
        self._origins: dict[str, str] = {}
        self._counter = 0

    def _next_template_name(self) -> str:
        self._counter += 1
        return f"template_{self._counter}"

    def register(self, source: str) -> TemplateHandle:
        """Compile a template from a string."""
        return self._register(source, origin="<string>")

    def register_file(self, path: Path) -> TemplateHandle:
        """Compile a template from a file."""
        try:
            with open(path, encoding="utf-8", newline="") as f:
                source = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise TemplateError(f"Couldn't read template {path}: {e}") from e
        return self._register(source, origin=str(path))

    def _register(self, source: str, origin: str) -> TemplateHandle:
        name = self._next_template_name()
        try:
            env = self._crlf_env if "\r\n" in source else self._env
            template = env.from_string(source)
        except jinja2.TemplateSyntaxError as e:
            raise TemplateError(
                f"Invalid template {origin} (line {e.lineno}): {e.message}"
            ) from e
        self._templates[name] = template
        self._origins[name] = origin
        return TemplateHandle(name)

    def render(self, handle: TemplateHandle, binding: Mapping[str, Any]) -> str:
        """Render `handle` against `binding`."""
        template = self._templates[handle.name]
        try:
            return template.render(binding)
        except Exception as e:
            # expression errors such as TypeError surface here too
            raise RenderError(f"Couldn't render {self._origins[handle.name]}: {e}") from e

    def render_to_stream(
        self, handle: TemplateHandle, binding: Mapping[str, Any], sink: TextIO
    ) -> None:
        """Render `handle` against `binding`, writing chunks to `sink`."""
        template = self._templates[handle.name]
        try:
            for chunk in template.generate(binding):
                sink.write(chunk)
        except Exception as e:
            # expression errors such as TypeError surface here too
            raise RenderError(f"Couldn't render {self._origins[handle.name]}: {e}") from e

    def __len__(self) -> int:
        return len(self._templates)
