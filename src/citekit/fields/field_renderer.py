"""In-text rendering of field codes (numeric or author-date forms)."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Optional, Union

from citekit.engine.author_formatter import UNKNOWN_AUTHOR, AuthorFormatter
from citekit.fields.field_code import FieldCode, parse_field_codes
from citekit.models.citation import Citation
from citekit.models.paper import PaperData
from citekit.styles.types import AuthorRules, CitationStyle


class InTextFormat(str, Enum):
    AUTHOR_DATE = "author-date"  # (Smith et al., 2020)
    NUMERIC = "numeric"  # [1] or (1)
    AUTHOR_YEAR = "author-year"  # Smith et al. (2020)


class NumericStyle(str, Enum):
    BRACKETS = "brackets"
    PARENTHESES = "parentheses"


class AuthorFormat(str, Enum):
    FULL = "full"
    ET_AL = "et-al"


@dataclass(frozen=True)
class InTextConfig:
    """In-text citation settings.

    Attributes:
        format: Target form
        numeric_style: "[1]" or "(1)"
        author_format: "full" lists every author, "et-al" truncates
        max_authors: Authors shown before "et al."; None uses the style's
            ``author_rules.max_authors``
    """

    format: Union[InTextFormat, str] = InTextFormat.AUTHOR_DATE
    numeric_style: Union[NumericStyle, str] = NumericStyle.BRACKETS
    author_format: Union[AuthorFormat, str] = AuthorFormat.ET_AL
    max_authors: Optional[int] = None


ConfigLike = Union[InTextConfig, Mapping[str, Any], None]


def resolve_config(style: CitationStyle, config: ConfigLike = None) -> InTextConfig:
    """Merge a full or partial config over the defaults for a style."""
    base = InTextConfig(max_authors=style.author_rules.max_authors)
    if config is None:
        return base
    if isinstance(config, InTextConfig):
        overrides = {k: v for k, v in vars(config).items() if v is not None}
    else:
        known = {f.name for f in fields(InTextConfig)}
        overrides = {k: v for k, v in config.items() if k in known and v is not None}
    return replace(base, **overrides)


def in_text_rules(rules: AuthorRules, config: InTextConfig) -> AuthorRules:
    """Author rules for in-text use, which usually truncate harder than references."""
    max_authors = config.max_authors or rules.max_authors
    if config.author_format == AuthorFormat.FULL:
        et_al_after = 0
    else:
        et_al_after = config.max_authors or rules.et_al_after
    return rules.model_copy(update={"max_authors": max_authors, "et_al_after": et_al_after})


def _format_or_none(value: Any) -> Optional[InTextFormat]:
    try:
        return InTextFormat(value)
    except ValueError:
        return None


def render_citation_field(
    field_code: FieldCode,
    paper: PaperData,
    style: CitationStyle,
    citation_number: Optional[int] = None,
    config: ConfigLike = None,
    author_formatter: Optional[AuthorFormatter] = None,
) -> str:
    """Render one field code to its visible in-text form.

    Args:
        field_code: The parsed field code
        paper: The cited paper
        style: Citation style (author rules)
        citation_number: The paper's number, for numeric citations
        config: Full or partial in-text config; explicit values win over
            the defaults

    Returns:
        The in-text citation
    """
    final = resolve_config(style, config)
    formatter = author_formatter or AuthorFormatter()
    fmt = _format_or_none(final.format)

    if fmt == InTextFormat.NUMERIC:
        if citation_number is not None:
            if final.numeric_style == NumericStyle.PARENTHESES:
                return f"({citation_number})"
            return f"[{citation_number}]"
        # No number yet: show the author-date form instead.
        fmt = InTextFormat.AUTHOR_DATE

    if fmt in (InTextFormat.AUTHOR_DATE, InTextFormat.AUTHOR_YEAR):
        authors = formatter.format(paper.authors, in_text_rules(style.author_rules, final))
        if fmt == InTextFormat.AUTHOR_DATE:
            return f"({authors}, {paper.year})" if paper.year is not None else f"({authors})"
        return f"{authors} ({paper.year})" if paper.year is not None else authors

    if field_code.display_text:
        return field_code.display_text
    authors = paper.authors_string.strip() or UNKNOWN_AUTHOR
    return f"({authors}, {paper.year})" if paper.year is not None else f"({authors})"


def in_text_config_for_order(order: str) -> InTextConfig:
    """Default in-text config for a numbering order.

    Appearance order pairs with numeric brackets, alphabetical order with
    author-date. Callers may override either.
    """
    if str(getattr(order, "value", order)) == "appearance":
        return InTextConfig(
            format=InTextFormat.NUMERIC,
            numeric_style=NumericStyle.BRACKETS,
            author_format=AuthorFormat.ET_AL,
            max_authors=3,
        )
    return InTextConfig(
        format=InTextFormat.AUTHOR_DATE,
        numeric_style=NumericStyle.BRACKETS,
        author_format=AuthorFormat.ET_AL,
        max_authors=3,
    )


def render_paragraph_content(
    content: str,
    field_codes: Optional[Sequence[FieldCode]],
    citations: Mapping[str, Citation],
    style: CitationStyle,
    citation_number_map: Mapping[str, int],
    config: ConfigLike = None,
    author_formatter: Optional[AuthorFormatter] = None,
) -> str:
    """Replace every field code in a paragraph with its rendered form.

    Field codes are spliced from the highest start offset down, so earlier
    offsets stay valid while later text changes length. Field codes whose
    citation id is unknown, or whose citation has no paper, are left as is.

    Args:
        content: Paragraph text
        field_codes: Field codes parsed from ``content``; None parses here
        citations: citation id -> Citation (with its paper)
        style: Citation style
        citation_number_map: paper id -> number
        config: In-text config

    Returns:
        The rewritten paragraph text
    """
    if field_codes is None:
        field_codes = parse_field_codes(content)

    formatter = author_formatter or AuthorFormatter()
    result = content

    for field_code in sorted(field_codes, key=lambda fc: fc.start_index, reverse=True):
        citation = citations.get(field_code.citation_id)
        if citation is None or citation.paper is None:
            continue

        paper_id = citation.resolved_paper_id or field_code.paper_id
        rendered = render_citation_field(
            field_code,
            citation.paper,
            style,
            citation_number_map.get(paper_id),
            config,
            formatter,
        )
        result = result[: field_code.start_index] + rendered + result[field_code.end_index :]

    return result
