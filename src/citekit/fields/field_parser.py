"""Editing operations on field codes inside paragraph text.

Every mutation locates its target by parsing first and then splices the
text around the match offsets, so display text that happens to look like a
marker is never rewritten by accident.
"""

from collections.abc import Collection
from dataclasses import dataclass, field

from citekit.fields.field_code import (
    FieldCode,
    find_field_code_by_citation_id,
    generate_field_code,
    parse_field_codes,
)


@dataclass
class FieldCodeValidationResult:
    """Outcome of checking field codes against the known citation ids.

    Attributes:
        valid: True when every field code refers to a known citation
        invalid_codes: Orphan field codes, in text order
    """

    valid: bool
    invalid_codes: list[FieldCode] = field(default_factory=list)


def extract_field_codes(content: str) -> list[FieldCode]:
    """Extract all field codes from paragraph content."""
    return parse_field_codes(content)


def insert_field_code(content: str, field_code: str, position: int) -> str:
    """Insert marker text at an offset (clamped to the bounds of the text)."""
    position = max(0, min(position, len(content)))
    return content[:position] + field_code + content[position:]


def remove_field_code(content: str, citation_id: str) -> str:
    """Remove the first field code of a citation; unchanged when absent."""
    target = find_field_code_by_citation_id(content, citation_id)
    if target is None:
        return content
    return content[: target.start_index] + content[target.end_index :]


def update_field_code_display_text(content: str, citation_id: str, display_text: str) -> str:
    """Replace the display text of a citation's field code; unchanged when absent."""
    target = find_field_code_by_citation_id(content, citation_id)
    if target is None:
        return content
    replacement = generate_field_code(target.citation_id, target.paper_id, display_text)
    return content[: target.start_index] + replacement + content[target.end_index :]


def strip_field_codes(content: str) -> str:
    """Remove every field code from text."""
    result = content
    for field_code in reversed(parse_field_codes(content)):
        result = result[: field_code.start_index] + result[field_code.end_index :]
    return result


def validate_field_codes(
    content: str, valid_citation_ids: Collection[str]
) -> FieldCodeValidationResult:
    """Check that every field code refers to a known citation id."""
    known = set(valid_citation_ids)
    invalid = [fc for fc in parse_field_codes(content) if fc.citation_id not in known]
    return FieldCodeValidationResult(valid=not invalid, invalid_codes=invalid)
