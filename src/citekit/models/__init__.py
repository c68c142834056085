"""Data models for citekit."""

from citekit.models.citation import Citation, ParagraphRef, leading_int, paragraph_order
from citekit.models.document import Manuscript, Paragraph
from citekit.models.paper import PaperData

__all__ = [
    "PaperData",
    "Citation",
    "ParagraphRef",
    "Paragraph",
    "Manuscript",
    "leading_int",
    "paragraph_order",
]
