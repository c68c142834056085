"""Reference management for manuscripts.

This module ties the engine together for one document:
- Citation deduplication by paper and stable numbering
- In-text rendering of every field code
- Bibliography assembly and markdown export
- Orphan and missing-paper reporting

Example usage:
    from citekit.models import Manuscript
    from citekit.references import ReferenceManager

    manager = ReferenceManager(style="nature")
    manuscript = Manuscript.from_dict(data)

    rendered = manager.render(manuscript)
    print(rendered.paragraphs["para-1"])
    for entry in rendered.bibliography:
        print(entry.text)
"""

from citekit.references.manager import (
    BibliographyEntry,
    ReferenceManager,
    ReferenceValidationResult,
    RenderedManuscript,
)
from citekit.references.numbering import (
    AlphabeticalStrategy,
    AppearanceStrategy,
    CanonicalEntry,
    CitationOrder,
    CitationOrderStrategy,
    DedupResult,
    NumberingResolver,
    NumberingResult,
    get_unique_citations,
    order_for_style,
)

__all__ = [
    # Numbering
    "CitationOrder",
    "order_for_style",
    "DedupResult",
    "get_unique_citations",
    "AppearanceStrategy",
    "CitationOrderStrategy",
    "AlphabeticalStrategy",
    "CanonicalEntry",
    "NumberingResult",
    "NumberingResolver",
    # Manager
    "ReferenceManager",
    "BibliographyEntry",
    "RenderedManuscript",
    "ReferenceValidationResult",
]
