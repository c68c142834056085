"""Citation field codes: generation and parsing.

Field codes are inline markers that stand in for a rendered citation while a
document is still being edited::

    [cite:<citation_id>:<paper_id>]
    [cite:<citation_id>:<paper_id>](<display text>)

They are never stored on their own; every access re-parses the paragraph
text, so offsets always refer to the string that was just parsed.
"""

import re
from dataclasses import dataclass
from typing import Optional

FIELD_CODE_PATTERN = re.compile(r"\[cite:([^:\]]+):([^\]]+)\](?:\(([^)]+)\))?")


@dataclass(frozen=True)
class FieldCode:
    """A field code found in text.

    Attributes:
        citation_id: The citation identifier
        paper_id: The cited paper's identifier
        display_text: User-editable display text override, if any
        full_match: The exact matched substring
        start_index: Start offset in the parsed text
        end_index: End offset (exclusive) in the parsed text
    """

    citation_id: str
    paper_id: str
    display_text: Optional[str]
    full_match: str
    start_index: int
    end_index: int


def generate_field_code(
    citation_id: str, paper_id: str, display_text: Optional[str] = None
) -> str:
    """Build the marker text for a citation."""
    if display_text:
        return f"[cite:{citation_id}:{paper_id}]({display_text})"
    return f"[cite:{citation_id}:{paper_id}]"


def parse_field_codes(content: str) -> list[FieldCode]:
    """Extract every field code from text, left to right."""
    if not content:
        return []
    return [
        FieldCode(
            citation_id=match.group(1),
            paper_id=match.group(2),
            display_text=match.group(3) or None,
            full_match=match.group(0),
            start_index=match.start(),
            end_index=match.end(),
        )
        for match in FIELD_CODE_PATTERN.finditer(content)
    ]


def has_field_code(content: str) -> bool:
    """Check whether text contains at least one field code."""
    return bool(content) and FIELD_CODE_PATTERN.search(content) is not None


def find_field_code_by_citation_id(content: str, citation_id: str) -> Optional[FieldCode]:
    """First field code for a citation id, or None."""
    for field_code in parse_field_codes(content):
        if field_code.citation_id == citation_id:
            return field_code
    return None


def find_field_codes_by_paper_id(content: str, paper_id: str) -> list[FieldCode]:
    """All field codes that cite a paper."""
    return [fc for fc in parse_field_codes(content) if fc.paper_id == paper_id]
