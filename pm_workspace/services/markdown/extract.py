# pm_workspace_core/pm_workspace/services/markdown/extract.py
"""
Line-level markdown tokenizer shared by the artifact parsers.

A document is cut into top-level blocks:

    TITLE    "# Title" (heading documents) or the first "## Name" (card documents)
    SECTION  "## Heading" plus its body
    BOLD     "**Label:** inline" plus the lines that follow it
    QUOTE    a "> text" line
    TEXT     anything else that is not inside one of the above

A section runs until the next "##" heading; a later "# " line stays in its
body. In card documents (personas, competitors) a section also ends at a bold
label or a quote line, since their fields are bold blocks. A bold block ends
at the next bold label, "#"/"##" heading or quote.

Lines inside a fenced code block (``` or ~~~) are never read as structure.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import re
from typing import List, Optional

H1_RE = re.compile(r"^#\s+(.+?)\s*$")
H2_RE = re.compile(r"^##\s+(.+?)\s*$")
BOLD_LABEL_RE = re.compile(r"^\*\*([^*\n]+?):\*\*\s*(.*?)\s*$")
QUOTE_RE = re.compile(r'^>\s*"?(.*?)"?\s*$')
BULLET_RE = re.compile(r"^\s*-\s+(.*?)\s*$")
FENCE_RE = re.compile(r"^\s*(```|~~~)")


class BlockKind(str, Enum):
    TITLE = "title"
    SECTION = "section"
    BOLD = "bold"
    QUOTE = "quote"
    TEXT = "text"


@dataclass
class Block:
    kind: BlockKind
    label: str = ""
    inline: str = ""
    lines: List[str] = field(default_factory=list)

    @property
    def body(self) -> str:
        return "\n".join(self.lines).strip()

    @property
    def text(self) -> str:
        """Inline content and body together, as one trimmed string."""
        if self.inline and self.body:
            return f"{self.inline}\n{self.body}"
        return self.inline or self.body


def bullet_items(text: str) -> List[str]:
    """Trimmed, non-empty "- item" entries; other lines are ignored."""
    items: List[str] = []
    for line in (text or "").splitlines():
        match = BULLET_RE.match(line)
        if match and match.group(1):
            items.append(match.group(1))
    return items


def non_bullet_text(text: str) -> str:
    """Non-blank lines that are not "- item" entries, joined back together."""
    return "\n".join(
        line.strip() for line in (text or "").splitlines() if line.strip() and not BULLET_RE.match(line)
    )


def tokenize(markdown: str, title_level: int = 1) -> List[Block]:
    """Split markdown into top-level blocks (see module docstring).

    title_level=1 reads a heading document, title_level=2 a card document.
    """
    if title_level not in (1, 2):
        raise ValueError(f"title_level must be 1 or 2, got {title_level}")

    blocks: List[Block] = []
    current: Optional[Block] = None
    have_title = False
    fence_marker: Optional[str] = None

    def close() -> None:
        nonlocal current
        if current is not None:
            blocks.append(current)
        current = None

    for raw in (markdown or "").replace("\r\n", "\n").split("\n"):
        line = raw.rstrip()

        fence = FENCE_RE.match(line)
        if fence or fence_marker:
            if fence and not fence_marker:
                fence_marker = fence.group(1)
            elif fence and fence.group(1) == fence_marker:
                fence_marker = None
            if current is None:
                current = Block(BlockKind.TEXT)
            current.lines.append(line)
            continue

        h1 = H1_RE.match(line)
        h2 = H2_RE.match(line)

        if h1 or h2:
            level, text = (1, h1.group(1)) if h1 else (2, h2.group(1))
            if level == title_level and not have_title:
                close()
                blocks.append(Block(BlockKind.TITLE, label=text))
                have_title = True
            elif level == 2:
                close()
                current = Block(BlockKind.SECTION, label=text)
            elif current is not None and current.kind == BlockKind.SECTION:
                current.lines.append(line)
            else:
                # a stray "# Heading" outside a section is kept as loose text
                close()
                current = Block(BlockKind.TEXT, lines=[line])
            continue

        bold = BOLD_LABEL_RE.match(line)
        quote = QUOTE_RE.match(line) if line.startswith(">") else None

        if current is not None and current.kind == BlockKind.SECTION:
            if title_level == 1 or not (bold or quote):
                current.lines.append(line)
                continue

        if bold:
            close()
            current = Block(BlockKind.BOLD, label=bold.group(1).strip(), inline=bold.group(2))
        elif quote:
            close()
            blocks.append(Block(BlockKind.QUOTE, inline=quote.group(1).strip()))
        elif current is not None:
            current.lines.append(line)
        elif line.strip():
            current = Block(BlockKind.TEXT, lines=[line])

    close()
    return blocks


__all__ = [
    "BlockKind",
    "Block",
    "bullet_items",
    "non_bullet_text",
    "tokenize",
]
