"""Citation records: a paper anchored to a place in the document."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Optional

from citekit.models.paper import PaperData

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def leading_int(value: Any) -> int:
    """Parse the leading integer of a value, returning 0 when there is none.

    "12" -> 12, "12a" -> 12, "n/a" -> 0, None -> 0.
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else 0


def _optional_order(value: Any) -> Optional[int]:
    """citation_order from JSON: numbers and numeric strings, else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str) and _LEADING_INT.match(value):
        return leading_int(value)
    return None


def paragraph_order(paragraph_number: Optional[str]) -> int:
    """Numeric position of an external paragraph identifier such as "P12"."""
    if not paragraph_number:
        return 0
    return leading_int(str(paragraph_number).replace("P", "", 1))


@dataclass(frozen=True)
class ParagraphRef:
    """The paragraph a citation was inserted into."""

    id: str
    paragraph_number: str = ""

    @property
    def order(self) -> int:
        return paragraph_order(self.paragraph_number)


@dataclass(frozen=True)
class Citation:
    """One insertion of a paper into a paragraph.

    Attributes:
        id: Citation identifier (the citationId used in field codes)
        paper_id: Identifier of the cited paper, when known separately
        paper: The cited paper record, if it has been resolved
        paragraph: Owning paragraph, if any
        citation_order: Sequence number of the insertion within its paragraph
    """

    id: str
    paper_id: Optional[str] = None
    paper: Optional[PaperData] = None
    paragraph: Optional[ParagraphRef] = None
    citation_order: Optional[int] = None

    @property
    def resolved_paper_id(self) -> Optional[str]:
        """The deduplication key: the paper record's id, else ``paper_id``."""
        if self.paper is not None and self.paper.id:
            return self.paper.id
        return self.paper_id or None

    @property
    def has_position(self) -> bool:
        """True when both paragraph and citation_order are known."""
        return self.paragraph is not None and self.citation_order is not None

    @property
    def position_key(self) -> tuple[int, int]:
        """(paragraph order, citation order) with missing parts read as 0."""
        para = self.paragraph.order if self.paragraph else 0
        return para, self.citation_order or 0

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        paragraphs: Optional[dict[str, ParagraphRef]] = None,
    ) -> Citation:
        """Build a citation from a JSON-style dict.

        The owning paragraph may be given inline (``paragraph``) or by id
        (``paragraph_id``), resolved against ``paragraphs``.
        """
        paper_raw = data.get("paper")
        paper = PaperData.from_dict(paper_raw) if isinstance(paper_raw, dict) else None

        paragraph = None
        inline = data.get("paragraph")
        if isinstance(inline, dict):
            paragraph = ParagraphRef(
                id=str(inline.get("id") or ""),
                paragraph_number=str(inline.get("paragraph_number") or ""),
            )
        elif data.get("paragraph_id") and paragraphs is not None:
            paragraph = paragraphs.get(str(data["paragraph_id"]))

        order = data.get("citation_order")
        return cls(
            id=str(data.get("id") or ""),
            paper_id=data.get("paper_id") or None,
            paper=paper,
            paragraph=paragraph,
            citation_order=_optional_order(order),
        )
