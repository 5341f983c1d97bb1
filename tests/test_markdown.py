# ABOUTME: Pytest tests for the markdown-subset renderer and inline bold spans.
# ABOUTME: One block per line, classified by priority; unterminated ** stays literal.

from life_strategy.markdown import (
    HEADING,
    LIST_ITEM,
    PARAGRAPH,
    SPACER,
    Span,
    blocks_to_html,
    inline_markdown,
    render_markdown,
)


def test_inline_plain_text_is_single_span():
    assert inline_markdown("hello world") == [Span("hello world")]


def test_inline_bold_becomes_emphasized_span():
    spans = inline_markdown("Hello **world** today")
    assert spans == [Span("Hello "), Span("world", emphasized=True), Span(" today")]


def test_inline_multiple_bold_segments():
    emphasized = [s.text for s in inline_markdown("**A** and **B**") if s.emphasized]
    assert emphasized == ["A", "B"]


def test_inline_unterminated_bold_stays_literal():
    spans = inline_markdown("**unterminated")
    assert spans == [Span("**unterminated")]


def test_heading_levels():
    (h1,) = render_markdown("# Title")
    assert h1.kind == HEADING and h1.level == 1 and h1.text() == "Title"
    (h2,) = render_markdown("## Section Header")
    assert h2.kind == HEADING and h2.level == 2 and h2.text() == "Section Header"
    (h3,) = render_markdown("### Sub Section")
    assert h3.kind == HEADING and h3.level == 3 and h3.text() == "Sub Section"


def test_dash_and_star_bullets():
    for line in ("- item", "* item"):
        (block,) = render_markdown(line)
        assert block.kind == LIST_ITEM
        assert not block.ordered
        assert block.text() == "item"


def test_numbered_item_keeps_prefix():
    (block,) = render_markdown("1. step")
    assert block.kind == LIST_ITEM
    assert block.ordered
    assert "1." in block.plain_text()
    assert "step" in block.plain_text()
    (third,) = render_markdown("3. Third step")
    assert third.prefix == "3."


def test_empty_line_is_spacer():
    (block,) = render_markdown("")
    assert block.kind == SPACER
    assert block.spans == []


def test_paragraph_with_bold():
    (block,) = render_markdown("Start **bold** end")
    assert block.kind == PARAGRAPH
    assert [s.text for s in block.spans if s.emphasized] == ["bold"]
    assert block.text() == "Start bold end"


def test_paragraph_with_unterminated_bold():
    (block,) = render_markdown("**unterminated")
    assert block.kind == PARAGRAPH
    assert block.text() == "**unterminated"
    assert not any(s.emphasized for s in block.spans)


def test_bold_inside_heading():
    (block,) = render_markdown("## **Bold** Section")
    assert block.spans[0] == Span("Bold", emphasized=True)


def test_hash_without_space_is_paragraph():
    (block,) = render_markdown("#hashtag")
    assert block.kind == PARAGRAPH


def test_mixed_lines_keep_order():
    blocks = render_markdown("# Title\n\n## Section\n- Item one\n- Item two")
    assert [b.kind for b in blocks] == [HEADING, SPACER, HEADING, LIST_ITEM, LIST_ITEM]
    assert render_markdown("Line 1\nLine 2") == render_markdown("Line 1\nLine 2")
    assert len(render_markdown("Line 1\nLine 2")) == 2


def test_blocks_to_html_escapes_text():
    html = blocks_to_html(render_markdown("# A <b>\n- **x** & y\n2. two"))
    assert "<h1>A &lt;b&gt;</h1>" in html
    assert "<strong>x</strong> &amp; y" in html
    assert "<b>2.</b> two" in html
