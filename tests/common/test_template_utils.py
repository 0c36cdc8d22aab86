from common.template_utils import (
    find_unresolved_placeholders,
    render_template,
    render_template_file,
)


def test_render_replaces_every_occurrence():
    assert render_template("{{NAME}}-{{NAME}}/{{NAME}}", {"NAME": "shop"}) == "shop-shop/shop"


def test_render_keeps_unknown_placeholders():
    rendered = render_template("{{DB_USER}}@{{DB_HOST}}", {"DB_USER": "postgres"})
    assert rendered == "postgres@{{DB_HOST}}"


def test_render_ignores_unused_keys():
    assert render_template("PORT={{DB_PORT}}", {"DB_PORT": "5432", "UNUSED": "x"}) == "PORT=5432"


def test_render_without_placeholders_is_unchanged():
    text = "NODE_ENV=development\n"
    assert render_template(text, {"DB_NAME": "shop"}) == text
    assert render_template(text, {}) == text


def test_render_inserts_values_verbatim():
    rendered = render_template("PASSWORD={{DB_PASSWORD}}", {"DB_PASSWORD": r"p@ss$1\g<0>.*"})
    assert rendered == r"PASSWORD=p@ss$1\g<0>.*"


def test_render_does_not_rescan_substituted_values():
    rendered = render_template("{{A}} {{B}}", {"A": "{{B}}", "B": "two"})
    assert rendered == "{{B}} two"


def test_render_is_idempotent_once_resolved():
    replacements = {"DB_NAME": "shop"}
    once = render_template("DB={{DB_NAME}}", replacements)
    assert render_template(once, replacements) == once


def test_render_template_file(tmp_path):
    template = tmp_path / "env.template"
    template.write_text("JWT_SECRET={{JWT_SECRET}}\n", encoding="utf-8")

    assert render_template_file(template, {"JWT_SECRET": "abc"}) == "JWT_SECRET=abc\n"


def test_find_unresolved_placeholders_distinct_in_order():
    text = "{{B}} {{A}} {{B}} {{not-a-key}} {{C_1}}"
    assert find_unresolved_placeholders(text) == ["B", "A", "C_1"]
