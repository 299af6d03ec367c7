# pm_workspace_core/pm_workspace/services/markdown/fields.py
"""
Declarative field tables for markdown artifacts.

Each artifact type is described by an ordered list of FieldSpec entries
(attribute, extractor kind, label). parse_fields / serialize_fields walk the
same table in both directions, so the known-label set lives in one place and
anything outside it is carried as ExtraSection.

Matching rules:
- bold labels are case-sensitive, "##" headings case-insensitive
- first match wins; later blocks with an already-filled label become extras
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Type, TypeVar

from pydantic import BaseModel

from pm_workspace.schemas.documents import ExtraSection, ExtraSectionStyle
from pm_workspace.services.markdown.extract import Block, BlockKind, bullet_items, non_bullet_text, tokenize

logger = logging.getLogger(__name__)

# Label given to loose text that sits outside every block
PREAMBLE_SECTION_LABEL = "Overview"
LOOSE_TEXT_LABEL = "Notes"
EXTRA_QUOTE_LABEL = "Quote"

M = TypeVar("M", bound=BaseModel)


class FieldKind(str, Enum):
    H1_TITLE = "h1_title"
    H2_TITLE = "h2_title"
    BOLD_FIELD = "bold_field"  # **Label:** value
    BOLD_LIST = "bold_list"  # **Label:**\n- item
    BOLD_TEXT = "bold_text"  # **Label:**\nfree text
    BLOCKQUOTE = "blockquote"  # > "text"
    SECTION_TEXT = "section_text"  # ## Label\n\ntext
    SECTION_LIST = "section_list"  # ## Label\n\n- item


_BOLD_KINDS = {FieldKind.BOLD_FIELD, FieldKind.BOLD_LIST, FieldKind.BOLD_TEXT}
_SECTION_KINDS = {FieldKind.SECTION_TEXT, FieldKind.SECTION_LIST}
_LIST_KINDS = {FieldKind.BOLD_LIST, FieldKind.SECTION_LIST}


@dataclass(frozen=True)
class FieldSpec:
    attr: str
    kind: FieldKind
    label: str = ""
    always: bool = False  # serialize even when empty


def _title_level(specs: Sequence[FieldSpec]) -> int:
    return 2 if any(s.kind == FieldKind.H2_TITLE for s in specs) else 1


def _extract(spec: FieldSpec, block: Block) -> Any:
    if spec.kind in _LIST_KINDS:
        return bullet_items(block.text)
    if spec.kind in _SECTION_KINDS:
        return block.body
    return block.text


def _list_leftover(spec: FieldSpec, block: Block) -> Optional[ExtraSection]:
    """Text in a list field that is not a bullet, kept under the field's own label."""
    if spec.kind not in _LIST_KINDS:
        return None
    if spec.kind == FieldKind.SECTION_LIST:
        text = non_bullet_text(block.body)
        return ExtraSection(label=block.label, content=text, style=ExtraSectionStyle.HEADING) if text else None
    text = non_bullet_text(block.text)
    if not text:
        return None
    return ExtraSection(label=block.label, content=text, style=ExtraSectionStyle.BOLD, inline=bool(block.inline))


def collect_fields(markdown: str, specs: Sequence[FieldSpec]) -> Tuple[Dict[str, Any], List[ExtraSection]]:
    """Known field values by attribute, plus everything else as extras (in document order)."""
    title_level = _title_level(specs)
    title_spec = next((s for s in specs if s.kind in (FieldKind.H1_TITLE, FieldKind.H2_TITLE)), None)
    quote_spec = next((s for s in specs if s.kind == FieldKind.BLOCKQUOTE), None)
    bold_specs: Dict[str, FieldSpec] = {}
    section_specs: Dict[str, FieldSpec] = {}
    for s in specs:
        if s.kind in _BOLD_KINDS:
            bold_specs.setdefault(s.label, s)
        elif s.kind in _SECTION_KINDS:
            section_specs.setdefault(s.label.lower(), s)

    values: Dict[str, Any] = {}
    extras: List[ExtraSection] = []
    loose: List[str] = []

    for block in tokenize(markdown, title_level):
        if block.kind == BlockKind.TITLE:
            if title_spec is not None:
                values[title_spec.attr] = block.label
        elif block.kind == BlockKind.SECTION:
            spec = section_specs.get(block.label.lower())
            if spec is not None and spec.attr not in values:
                values[spec.attr] = _extract(spec, block)
                leftover = _list_leftover(spec, block)
                if leftover is not None:
                    extras.append(leftover)
            else:
                extras.append(ExtraSection(label=block.label, content=block.body, style=ExtraSectionStyle.HEADING))
        elif block.kind == BlockKind.BOLD:
            spec = bold_specs.get(block.label)
            if spec is not None and spec.attr not in values:
                values[spec.attr] = _extract(spec, block)
                leftover = _list_leftover(spec, block)
                if leftover is not None:
                    extras.append(leftover)
            else:
                extras.append(
                    ExtraSection(
                        label=block.label,
                        content=block.text,
                        style=ExtraSectionStyle.BOLD,
                        inline=bool(block.inline),
                    )
                )
        elif block.kind == BlockKind.QUOTE:
            if quote_spec is not None and quote_spec.attr not in values:
                values[quote_spec.attr] = block.inline
            else:
                extras.append(
                    ExtraSection(
                        label=EXTRA_QUOTE_LABEL,
                        content=block.inline,
                        style=ExtraSectionStyle.BOLD,
                        inline=bool(block.inline),
                    )
                )
        elif block.body:
            loose.append(block.body)

    if loose:
        text = "\n\n".join(loose)
        if title_level == 1:
            spec = section_specs.get(PREAMBLE_SECTION_LABEL.lower())
            if spec is not None and spec.attr not in values:
                values[spec.attr] = bullet_items(text) if spec.kind in _LIST_KINDS else text
            else:
                extras.insert(0, ExtraSection(label=PREAMBLE_SECTION_LABEL, content=text, style=ExtraSectionStyle.HEADING))
        else:
            extras.insert(0, ExtraSection(label=LOOSE_TEXT_LABEL, content=text, style=ExtraSectionStyle.BOLD))

    if title_level == 1:
        # serialize_fields puts bold extras before the sections; keep the same order here
        extras = [e for e in extras if e.style == ExtraSectionStyle.BOLD] + [
            e for e in extras if e.style == ExtraSectionStyle.HEADING
        ]

    if extras:
        logger.debug("markdown.extras_preserved", extra={"count": len(extras)})
    return values, extras


def parse_fields(markdown: str, specs: Sequence[FieldSpec], model_cls: Type[M]) -> M:
    values, extras = collect_fields(markdown, specs)
    return model_cls(**values, extra_sections=extras)


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------

def _field_part(spec: FieldSpec, value: Any) -> Optional[str]:
    if spec.kind in _LIST_KINDS:
        items = [str(v).strip() for v in (value or []) if str(v).strip()]
        if not items and not spec.always:
            return None
        bullets = "\n".join(f"- {v}" for v in items)
        if spec.kind == FieldKind.BOLD_LIST:
            return f"**{spec.label}:**\n{bullets}".rstrip()
        return f"## {spec.label}\n\n{bullets}".rstrip()

    text = (value or "").strip()
    if not text and not spec.always:
        return None
    if spec.kind == FieldKind.H1_TITLE:
        return f"# {text}"
    if spec.kind == FieldKind.H2_TITLE:
        return f"## {text}"
    if spec.kind == FieldKind.BOLD_FIELD:
        return f"**{spec.label}:** {text}".rstrip()
    if spec.kind == FieldKind.BOLD_TEXT:
        return f"**{spec.label}:**\n{text}".rstrip()
    if spec.kind == FieldKind.BLOCKQUOTE:
        return f'> "{text}"'
    return f"## {spec.label}\n\n{text}".rstrip()


def extra_part(extra: ExtraSection) -> str:
    content = (extra.content or "").strip()
    if extra.style == ExtraSectionStyle.HEADING:
        return f"## {extra.label}\n\n{content}".rstrip()
    if extra.inline:
        return f"**{extra.label}:** {content}".rstrip()
    return f"**{extra.label}:**\n{content}".rstrip()


def serialize_fields(
    values: Mapping[str, Any],
    specs: Sequence[FieldSpec],
    extras: Sequence[ExtraSection] = (),
) -> str:
    """Known fields in table order, then extras. Parts are separated by a blank line.

    In heading documents a "##" section swallows every line up to the next
    heading, so bold extras are placed right after the title where a reparse
    finds them again.
    """
    title_parts: List[str] = []
    field_parts: List[str] = []
    for spec in specs:
        part = _field_part(spec, values.get(spec.attr))
        if part is None:
            continue
        if spec.kind in (FieldKind.H1_TITLE, FieldKind.H2_TITLE):
            title_parts.append(part)
        else:
            field_parts.append(part)

    if _title_level(specs) == 1:
        lead = [extra_part(e) for e in extras if e.style == ExtraSectionStyle.BOLD]
        tail = [extra_part(e) for e in extras if e.style == ExtraSectionStyle.HEADING]
        parts = [*title_parts, *lead, *field_parts, *tail]
    else:
        parts = [*title_parts, *field_parts, *(extra_part(e) for e in extras)]
    return "\n\n".join(parts)


__all__ = [
    "FieldKind",
    "FieldSpec",
    "collect_fields",
    "parse_fields",
    "extra_part",
    "serialize_fields",
]
