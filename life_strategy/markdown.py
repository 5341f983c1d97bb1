# ABOUTME: Line-oriented markdown subset (headings, bullets, numbered items, bold, spacers) to typed blocks.
# ABOUTME: render_markdown() emits one Block per input line; blocks_to_html() renders them for the UI.

import html
import re
from dataclasses import dataclass, field

_BOLD = re.compile(r"(\*\*[^*]+\*\*)")
_BULLET = re.compile(r"^[-*]\s")
_ORDERED = re.compile(r"^(\d+)\.\s(.*)", re.DOTALL)

HEADING = "heading"
LIST_ITEM = "list_item"
SPACER = "spacer"
PARAGRAPH = "paragraph"


@dataclass(frozen=True)
class Span:
    text: str
    emphasized: bool = False


@dataclass(frozen=True)
class Block:
    """One rendered line.

    kind is heading, list_item, spacer or paragraph. level is set for headings (1-3);
    prefix holds the literal "N." of an ordered list item.
    """

    kind: str
    spans: list[Span] = field(default_factory=list)
    level: int | None = None
    prefix: str | None = None

    @property
    def ordered(self) -> bool:
        return self.kind == LIST_ITEM and self.prefix is not None

    def text(self) -> str:
        """Content text without any list prefix."""
        return "".join(span.text for span in self.spans)

    def plain_text(self) -> str:
        """Text as displayed, including the ordered-list prefix."""
        if self.prefix is not None:
            return f"{self.prefix} {self.text()}"
        return self.text()


def inline_markdown(text: str) -> list[Span]:
    """Split text into spans, emphasizing **bounded** segments. Unclosed ** stays literal."""
    spans = []
    for part in _BOLD.split(text):
        if not part:
            continue
        if len(part) > 4 and part.startswith("**") and part.endswith("**"):
            spans.append(Span(part[2:-2], emphasized=True))
        else:
            spans.append(Span(part))
    return spans


def _render_line(line: str) -> Block:
    if line.startswith("### "):
        return Block(HEADING, inline_markdown(line[4:]), level=3)
    if line.startswith("## "):
        return Block(HEADING, inline_markdown(line[3:]), level=2)
    if line.startswith("# "):
        return Block(HEADING, inline_markdown(line[2:]), level=1)
    if _BULLET.match(line):
        return Block(LIST_ITEM, inline_markdown(line[2:]))
    ordered = _ORDERED.match(line)
    if ordered:
        return Block(LIST_ITEM, inline_markdown(ordered.group(2)), prefix=f"{ordered.group(1)}.")
    if line == "":
        return Block(SPACER)
    return Block(PARAGRAPH, inline_markdown(line))


def render_markdown(text: str) -> list[Block]:
    """Render text to one block per line, preserving line order."""
    return [_render_line(line) for line in text.split("\n")]


def _spans_to_html(spans: list[Span]) -> str:
    out = []
    for span in spans:
        escaped = html.escape(span.text)
        out.append(f"<strong>{escaped}</strong>" if span.emphasized else escaped)
    return "".join(out)


def blocks_to_html(blocks: list[Block]) -> str:
    """Render blocks to escaped HTML for st.markdown(unsafe_allow_html=True)."""
    parts = []
    for block in blocks:
        content = _spans_to_html(block.spans)
        if block.kind == HEADING:
            parts.append(f"<h{block.level}>{content}</h{block.level}>")
        elif block.kind == LIST_ITEM:
            if block.prefix is not None:
                parts.append(f'<div class="ls-item"><b>{html.escape(block.prefix)}</b> {content}</div>')
            else:
                parts.append(f'<div class="ls-item">&#10003; {content}</div>')
        elif block.kind == SPACER:
            parts.append('<div style="height:0.5rem"></div>')
        else:
            parts.append(f"<p>{content}</p>")
    return "\n".join(parts)
