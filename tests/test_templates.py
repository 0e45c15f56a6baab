"""Tests for the template engine."""

import io

import pytest

from cocinero.compiler.templates import TemplateEngine
from cocinero.errors import RenderError, TemplateError


def test_render_substitutes_binding():
    engine = TemplateEngine()
    handle = engine.register("listen {{ port }}")
    assert engine.render(handle, {"port": 8080}) == "listen 8080"


def test_identical_sources_get_distinct_handles():
    engine = TemplateEngine()
    first = engine.register("echo {{ x }}")
    second = engine.register("echo {{ x }}")

    assert first != second
    assert first.name == "template_1"
    assert second.name == "template_2"
    assert len(engine) == 2


def test_counter_is_per_engine():
    a = TemplateEngine()
    b = TemplateEngine()
    a.register("a")
    a.register("a")
    assert b.register("b").name == "template_1"


def test_undefined_variable_is_an_error():
    """Missing variables must fail, not render as blanks."""
    engine = TemplateEngine()
    handle = engine.register("rm -rf /srv/{{ site }}")

    with pytest.raises(RenderError):
        engine.render(handle, {"other": "x"})


def test_undefined_variable_is_an_error_when_streaming():
    engine = TemplateEngine()
    handle = engine.register("{{ missing }}")

    with pytest.raises(RenderError):
        engine.render_to_stream(handle, {}, io.StringIO())


def test_syntax_error_raises_template_error():
    engine = TemplateEngine()
    with pytest.raises(TemplateError):
        engine.register("{{ unclosed")


def test_register_file_keeps_trailing_newline(tmp_path):
    path = tmp_path / "motd"
    path.write_text("# managed by cocinero\nhello {{ who }}\n")

    engine = TemplateEngine()
    handle = engine.register_file(path)
    sink = io.StringIO()
    engine.render_to_stream(handle, {"who": "world"}, sink)

    assert sink.getvalue() == "# managed by cocinero\nhello world\n"


def test_register_missing_file_raises_template_error(tmp_path):
    engine = TemplateEngine()
    with pytest.raises(TemplateError):
        engine.register_file(tmp_path / "nope")


def test_render_does_not_mutate_engine():
    engine = TemplateEngine()
    handle = engine.register("{{ a }}")
    engine.render(handle, {"a": 1})
    engine.render(handle, {"a": 2})
    assert len(engine) == 1


def test_expression_errors_raise_render_error():
    engine = TemplateEngine()
    concat = engine.register("{{ n + 1 }}")
    divide = engine.register("{{ 1 / 0 }}")

    with pytest.raises(RenderError):
        engine.render(concat, {"n": "x"})
    with pytest.raises(RenderError):
        engine.render_to_stream(divide, {}, io.StringIO())


def test_register_file_keeps_crlf_line_endings(tmp_path):
    path = tmp_path / "win.ini"
    path.write_bytes(b"; managed by cocinero\r\nname={{ name }}\r\n")

    engine = TemplateEngine()
    handle = engine.register_file(path)

    assert engine.render(handle, {"name": "box"}) == "; managed by cocinero\r\nname=box\r\n"
