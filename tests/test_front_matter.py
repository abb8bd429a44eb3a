"""
Tests for rendering, parsing and linting front-matter blocks.
"""
import pytest

from front_matter import FrontMatter, check_front_matter, parse_front_matter, render_front_matter


def make_meta(**overrides):
    values = dict(
        name="Text and Markers on Maps",
        plot_url="scatter-geo-text.html",
        language="python",
        suite="scatter-geo",
        order=3,
        sitemap=False,
        arrangement="horizontal",
    )
    values.update(overrides)
    return FrontMatter(**values)


def test_render_keeps_declaration_order_and_drops_unset():
    block = render_front_matter(make_meta())
    lines = block.splitlines()

    assert lines[0] == "---"
    assert lines[-1] == "---"
    keys = [line.split(":")[0] for line in lines[1:-1]]
    assert keys == ["name", "language", "suite", "order", "plot_url", "sitemap", "arrangement"]
    assert "thumbnail" not in block


def test_parse_reads_back_rendered_page():
    meta = make_meta()
    page = render_front_matter(meta) + "<div>plot</div>\n"

    data, body = parse_front_matter(page)
    assert data == meta.to_dict()
    assert body == "<div>plot</div>\n"


def test_parse_without_block_returns_text():
    data, body = parse_front_matter("just a body\n")
    assert data == {}
    assert body == "just a body\n"


def test_parse_unterminated_block():
    with pytest.raises(ValueError, match="not terminated"):
        parse_front_matter("---\nname: x\n")


def test_parse_rejects_non_mapping():
    with pytest.raises(ValueError, match="mapping"):
        parse_front_matter("---\n- a\n- b\n---\nbody")


def test_check_accepts_well_formed_block():
    assert check_front_matter(make_meta()) == []


def test_check_reports_problems():
    problems = check_front_matter({
        "name": "",
        "language": "python",
        "suite": "scatter-geo",
        "order": "3",
        "sitemap": "no",
        "arrangement": "diagonal",
    })

    assert "missing required key 'name'" in problems
    assert any("'order' must be an integer" in p for p in problems)
    assert any("'sitemap' must be true or false" in p for p in problems)
    assert any("'arrangement' must be one of" in p for p in problems)


def test_check_rejects_boolean_order():
    assert any("'order'" in p for p in check_front_matter(make_meta(order=True)))
