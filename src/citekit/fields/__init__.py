"""Citation field code system.

Inline markers of the form ``[cite:<citation_id>:<paper_id>](<display text>)``
that stand in for rendered citations while a document is editable.
"""

from citekit.fields.field_code import (
    FIELD_CODE_PATTERN,
    FieldCode,
    find_field_code_by_citation_id,
    find_field_codes_by_paper_id,
    generate_field_code,
    has_field_code,
    parse_field_codes,
)
from citekit.fields.field_parser import (
    FieldCodeValidationResult,
    extract_field_codes,
    insert_field_code,
    remove_field_code,
    strip_field_codes,
    update_field_code_display_text,
    validate_field_codes,
)
from citekit.fields.field_renderer import (
    AuthorFormat,
    InTextConfig,
    InTextFormat,
    NumericStyle,
    in_text_config_for_order,
    render_citation_field,
    render_paragraph_content,
    resolve_config,
)

__all__ = [
    # Codec
    "FIELD_CODE_PATTERN",
    "FieldCode",
    "generate_field_code",
    "parse_field_codes",
    "has_field_code",
    "find_field_code_by_citation_id",
    "find_field_codes_by_paper_id",
    # Editing
    "FieldCodeValidationResult",
    "extract_field_codes",
    "insert_field_code",
    "remove_field_code",
    "update_field_code_display_text",
    "strip_field_codes",
    "validate_field_codes",
    # Rendering
    "InTextFormat",
    "NumericStyle",
    "AuthorFormat",
    "InTextConfig",
    "resolve_config",
    "render_citation_field",
    "render_paragraph_content",
    "in_text_config_for_order",
]
