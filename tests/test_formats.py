from __future__ import annotations

from pathlib import Path

import pytest

from specmark.formats import markdown_to_html, write_output
from specmark.manifest import Config, Metadata, Specification


def test_markdown_to_html_renders_tables_and_strikethrough():
    html = markdown_to_html("| a | b |\n|---|---|\n| 1 | 2 |\n\n~~old~~\n")

    assert "<table>" in html
    assert "<s>old</s>" in html


def test_markdown_to_html_renders_footnotes():
    html = markdown_to_html("Blocks are final[^1].\n\n[^1]: After two confirmations.\n")

    assert 'class="footnote-ref"' in html
    assert 'class="footnotes"' in html
    assert "After two confirmations." in html


def test_markdown_to_html_renders_task_lists():
    html = markdown_to_html("- [x] sign blocks\n- [ ] gossip votes\n")

    assert html.count('type="checkbox"') == 2
    assert 'checked="checked"' in html


def test_markdown_to_html_links_bare_urls():
    html = markdown_to_html("See https://example.com for details.\n")

    assert '<a href="https://example.com">https://example.com</a>' in html


def test_markdown_to_html_keeps_raw_html():
    assert '<div class="note">' in markdown_to_html('<div class="note">hi</div>\n')


def test_write_output_wraps_html_in_respec_page(tmp_path: Path):
    specification = Specification(
        metadata=Metadata(name="Consensus Rules", authors=["Ada"]),
        config=Config(template="template.md"),
    )
    target = tmp_path / "out.html"

    written = write_output(specification, "# Title\n", "html", target)

    html = target.read_text(encoding="utf-8")
    assert written == target
    assert "<h1>Title</h1>" in html
    assert "consensus-rules" in html


def test_write_output_rejects_unknown_format(tmp_path: Path):
    specification = Specification(
        metadata=Metadata(name="x"), config=Config(template="template.md")
    )

    with pytest.raises(ValueError, match="unknown output format"):
        write_output(specification, "", "pdf", tmp_path / "out.pdf")
