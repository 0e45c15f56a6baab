"""Renderer - converts ShellScript IR to final bash text."""

from cocinero.compiler.spec import ShellScript


class Renderer:
    """Renders ShellScript IR to bash text."""

    def render(self, script: ShellScript) -> str:
        """Render a ShellScript to executable bash text.

        Every line, the last one included, is newline-terminated.
        """
        parts = script.header + script.lines
        return "".join(f"{line}\n" for line in parts)
