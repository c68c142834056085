"""Document models: paragraphs and the manuscript that groups them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from citekit.models.citation import Citation, ParagraphRef, paragraph_order


@dataclass(frozen=True)
class Paragraph:
    """A paragraph of manuscript prose, possibly containing field codes."""

    id: str
    paragraph_number: str = ""
    content: str = ""
    section_type: Optional[str] = None
    title: Optional[str] = None

    @property
    def order(self) -> int:
        return paragraph_order(self.paragraph_number)

    @property
    def ref(self) -> ParagraphRef:
        return ParagraphRef(id=self.id, paragraph_number=self.paragraph_number)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Paragraph:
        return cls(
            id=str(data.get("id") or ""),
            paragraph_number=str(data.get("paragraph_number") or ""),
            content=str(data.get("content") or ""),
            section_type=data.get("section_type") or None,
            title=data.get("title") or None,
        )


@dataclass
class Manuscript:
    """A document being edited: its paragraphs and all recorded citations."""

    title: str = ""
    paragraphs: list[Paragraph] = field(default_factory=list)
    citations: list[Citation] = field(default_factory=list)

    @property
    def ordered_paragraphs(self) -> list[Paragraph]:
        """Paragraphs sorted by their numeric paragraph number (stable)."""
        return sorted(self.paragraphs, key=lambda p: p.order)

    @property
    def paragraphs_by_id(self) -> dict[str, Paragraph]:
        return {p.id: p for p in self.paragraphs}

    @property
    def citations_by_id(self) -> dict[str, Citation]:
        return {c.id: c for c in self.citations}

    def citations_for_paragraph(self, paragraph_id: str) -> list[Citation]:
        """Citations owned by a paragraph, in insertion order."""
        owned = [c for c in self.citations if c.paragraph and c.paragraph.id == paragraph_id]
        return sorted(owned, key=lambda c: c.citation_order or 0)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Manuscript:
        """Load the JSON document shape::

            {"title": "...",
             "paragraphs": [{"id", "paragraph_number", "content", ...}],
             "citations": [{"id", "paper_id", "paragraph_id", "citation_order", "paper": {...}}]}
        """
        paragraphs = [Paragraph.from_dict(p) for p in data.get("paragraphs") or []]
        refs = {p.id: p.ref for p in paragraphs}
        citations = [Citation.from_dict(c, refs) for c in data.get("citations") or []]
        return cls(
            title=str(data.get("title") or ""),
            paragraphs=paragraphs,
            citations=citations,
        )
