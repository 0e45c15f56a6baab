"""End-to-end tests for build()."""

import os
from pathlib import Path

import pytest

from cocinero.compiler import build
from cocinero.errors import CocineroError, RenderError

MARKER = "# managed by cocinero\n"

NGINX = """
packages = ["nginx"]
systemd = ["nginx.service"]
template_vars = [{ site = "blog" }, { site = "wiki" }]

[[steps]]
kind = "install"
template = true
src = "site.conf"
dest = "/etc/nginx/sites-enabled/{{ site }}.conf"

[[steps]]
kind = "run"
script = "reload.sh"
"""


def snapshot(root: Path) -> dict[str, bytes]:
    return {
        str(p.relative_to(root)): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }


@pytest.fixture
def nginx_recipe(make_recipe):
    return make_recipe(
        "nginx",
        NGINX,
        files={
            "site.conf": MARKER + "server_name {{ site }}.example.org;\n",
            "reload.sh": "#!/bin/sh\nnginx -t\n",
        },
    )


def test_build_writes_layout(tmp_path, recipes_root, nginx_recipe, make_recipe):
    make_recipe("base", 'packages = ["curl"]\n')
    target = tmp_path / "out"

    result = build(recipes_root, target)

    assert result.script == target / "cook.sh"
    assert result.recipes == ["nginx"]
    assert result.warnings == []

    cook = (target / "cook.sh").read_text()
    assert "apt-get install -y curl nginx" in cook
    assert "(cd nginx && ./_cook.sh)" in cook
    assert "base" not in cook

    sub = (target / "nginx" / "_cook.sh").read_text()
    assert sub.endswith(
        "install -D etc__nginx__sites-enabled__blog.conf /etc/nginx/sites-enabled/blog.conf\n"
        "install -D etc__nginx__sites-enabled__wiki.conf /etc/nginx/sites-enabled/wiki.conf\n"
        "./reload.sh\n"
    )
    assert not (target / "base").exists()


def test_scripts_are_executable(tmp_path, recipes_root, nginx_recipe):
    target = tmp_path / "out"
    build(recipes_root, target)

    for path in [target / "cook.sh", target / "nginx" / "_cook.sh", target / "nginx" / "reload.sh"]:
        assert os.stat(path).st_mode & 0o500 == 0o500


def test_build_is_deterministic(tmp_path, recipes_root, nginx_recipe):
    first = tmp_path / "first"
    second = tmp_path / "second"

    build(recipes_root, first)
    build(recipes_root, second)

    assert snapshot(first) == snapshot(second)


def test_rebuild_wipes_previous_output(tmp_path, recipes_root, nginx_recipe):
    target = tmp_path / "out"
    target.mkdir()
    (target / "stale.txt").write_text("old")

    build(recipes_root, target)

    assert not (target / "stale.txt").exists()
    assert (target / "cook.sh").exists()


def test_render_error_leaves_no_script(tmp_path, recipes_root, make_recipe):
    make_recipe(
        "broken",
        """
        template_vars = [{ name = "x" }]

        [[steps]]
        kind = "shell"
        template = true
        cmd = "echo {{ nmae }}"
        """,
    )
    target = tmp_path / "out"

    with pytest.raises(RenderError):
        build(recipes_root, target)

    assert not (target / "cook.sh").exists()
    assert not (target / "broken" / "_cook.sh").exists()


def test_disclaimer_warnings_collected(tmp_path, recipes_root, make_recipe):
    make_recipe(
        "app",
        """
        [[steps]]
        kind = "install"
        src = "app.conf"
        dest = "/etc/app.conf"
        """,
        files={"app.conf": "unmanaged\n"},
    )

    result = build(recipes_root, tmp_path / "out")

    assert [w.path.name for w in result.warnings] == ["app.conf"]
    assert (tmp_path / "out" / "cook.sh").exists()


def test_refuses_to_wipe_recipes(recipes_root, nginx_recipe):
    with pytest.raises(CocineroError):
        build(recipes_root, recipes_root.parent)

    assert (nginx_recipe / "receipe.toml").exists()


def test_refuses_target_inside_a_recipe(recipes_root, nginx_recipe):
    for target in [nginx_recipe, nginx_recipe / "out"]:
        with pytest.raises(CocineroError):
            build(recipes_root, target)

    assert (nginx_recipe / "receipe.toml").exists()
    assert (nginx_recipe / "site.conf").exists()


def test_target_inside_root_but_outside_recipes_is_allowed(recipes_root, nginx_recipe):
    result = build(recipes_root, recipes_root / "out")

    assert result.script.exists()
    assert (nginx_recipe / "receipe.toml").exists()
