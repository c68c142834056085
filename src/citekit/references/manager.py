"""Reference manager: renders a manuscript's citations end to end."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional, Union

from citekit.config import get_settings
from citekit.engine.renderer import OutputFormat, ReferenceRenderer
from citekit.fields.field_code import FieldCode, parse_field_codes
from citekit.fields.field_renderer import (
    InTextConfig,
    in_text_config_for_order,
    render_paragraph_content,
    resolve_config,
)
from citekit.logging import get_logger, log_warning
from citekit.models.citation import Citation
from citekit.models.document import Manuscript, Paragraph
from citekit.models.paper import PaperData
from citekit.references.numbering import (
    CitationOrder,
    NumberingResolver,
    NumberingResult,
    order_for_style,
)
from citekit.styles.registry import StyleRegistry
from citekit.styles.types import CitationStyle

logger = get_logger("references")

SECTION_ORDER = ("introduction", "methods", "results", "discussion")
SECTION_NAMES = {
    "introduction": "Introduction",
    "methods": "Methods",
    "results": "Results",
    "discussion": "Discussion",
}
DEFAULT_TITLE = "Manuscript"


@dataclass
class BibliographyEntry:
    """A rendered bibliography line.

    Attributes:
        number: The paper's citation number
        paper_id: The paper identifier
        paper: The paper record
        text: Rendered reference ("n. " prefixed under appearance order)
    """

    number: int
    paper_id: str
    paper: PaperData
    text: str


@dataclass
class RenderedManuscript:
    """A manuscript with every field code rendered.

    Attributes:
        paragraphs: paragraph id -> rewritten text, in paragraph order
        bibliography: Bibliography entries, ordered by number
        numbering: The numbering both outputs were built from
        orphans: Field codes that reference unknown citation ids
    """

    paragraphs: dict[str, str]
    bibliography: list[BibliographyEntry]
    numbering: NumberingResult
    orphans: list[FieldCode] = field(default_factory=list)


@dataclass
class ReferenceValidationResult:
    """Result of checking a manuscript's field codes against its citations.

    Attributes:
        valid: True when there are no orphan codes and every citation has a paper
        orphan_codes: Field codes whose citation id is unknown
        citations_without_paper: Citations that cannot be numbered
        unused_citations: Citation ids with no field code in the text
        citation_count: Total citations recorded (including duplicates)
        unique_paper_count: Number of distinct numbered papers
    """

    valid: bool
    orphan_codes: list[FieldCode]
    citations_without_paper: list[str]
    unused_citations: list[str]
    citation_count: int
    unique_paper_count: int


@dataclass
class ReferenceManager:
    """Renders citations and the bibliography for a manuscript.

    Example usage:
        manager = ReferenceManager(style="nature")
        manuscript = Manuscript.from_dict(data)

        rendered = manager.render(manuscript)
        for entry in rendered.bibliography:
            print(entry.text)

        result = manager.validate(manuscript)
        if not result.valid:
            print(f"Orphan field codes: {[c.full_match for c in result.orphan_codes]}")
    """

    style: Union[CitationStyle, str, None] = None
    order: Union[CitationOrder, str, None] = None
    output_format: Union[OutputFormat, str, None] = None
    in_text: Union[InTextConfig, Mapping[str, Any], None] = None
    registry: Optional[StyleRegistry] = None
    user_id: Optional[str] = None
    _resolver: NumberingResolver = field(default_factory=NumberingResolver)
    _renderer: ReferenceRenderer = field(default_factory=ReferenceRenderer)

    def __post_init__(self):
        """Resolve the style, numbering order and output format."""
        settings = get_settings()
        if self.registry is None:
            self.registry = StyleRegistry()
        if not isinstance(self.style, CitationStyle):
            self.style = self.registry.load_style(self.style or settings.default_style, self.user_id)

        self.order = (
            CitationOrder.coerce(self.order)
            or CitationOrder.coerce(settings.citation_order)
            or order_for_style(self.style)
        )
        self.output_format = OutputFormat.coerce(self.output_format or settings.output_format)

    @property
    def in_text_config(self) -> InTextConfig:
        """In-text config: an explicit one wins over the order-derived default."""
        if self.in_text is not None:
            return resolve_config(self.style, self.in_text)
        default = in_text_config_for_order(self.order)
        return replace(default, max_authors=get_settings().in_text_max_authors)

    def number_citations(self, manuscript: Manuscript) -> NumberingResult:
        """Deduplicate and number the manuscript's citations."""
        return self._resolver.resolve(manuscript.citations, manuscript.paragraphs, self.order)

    def render_paragraph(
        self,
        paragraph: Paragraph,
        manuscript: Manuscript,
        numbering: Optional[NumberingResult] = None,
        config: Union[InTextConfig, Mapping[str, Any], None] = None,
    ) -> str:
        """Rewrite one paragraph's field codes to in-text citations.

        Args:
            paragraph: Paragraph to render
            manuscript: Owning manuscript (citations and papers)
            numbering: Numbering to use; computed when omitted
            config: Per-call in-text config, overriding the manager's

        Returns:
            The paragraph text with rendered citations
        """
        if numbering is None:
            numbering = self.number_citations(manuscript)
        in_text = resolve_config(self.style, config) if config is not None else self.in_text_config
        return render_paragraph_content(
            paragraph.content,
            None,
            self._citation_map(manuscript, numbering),
            self.style,
            numbering.number_map,
            in_text,
        )

    def generate_bibliography(
        self, manuscript: Manuscript, numbering: Optional[NumberingResult] = None
    ) -> list[BibliographyEntry]:
        """Render one bibliography entry per canonical paper, in number order."""
        if numbering is None:
            numbering = self.number_citations(manuscript)
        numbered = numbering.order == CitationOrder.APPEARANCE

        return [
            BibliographyEntry(
                number=entry.number,
                paper_id=entry.paper_id,
                paper=entry.paper,
                text=self._renderer.render(
                    entry.paper,
                    self.style,
                    self.output_format,
                    entry.number if numbered else None,
                ),
            )
            for entry in numbering.entries
        ]

    def render(self, manuscript: Manuscript) -> RenderedManuscript:
        """Render every paragraph and the bibliography from one numbering pass."""
        numbering = self.number_citations(manuscript)
        citations = self._citation_map(manuscript, numbering)
        in_text = self.in_text_config

        paragraphs: dict[str, str] = {}
        orphans: list[FieldCode] = []
        for paragraph in manuscript.ordered_paragraphs:
            codes = parse_field_codes(paragraph.content)
            orphans.extend(code for code in codes if code.citation_id not in citations)
            paragraphs[paragraph.id] = render_paragraph_content(
                paragraph.content, codes, citations, self.style, numbering.number_map, in_text
            )

        if orphans:
            log_warning(
                logger,
                "render manuscript",
                f"{len(orphans)} field code(s) reference unknown citations",
                context={"citation_ids": ",".join(code.citation_id for code in orphans)},
            )

        return RenderedManuscript(
            paragraphs=paragraphs,
            bibliography=self.generate_bibliography(manuscript, numbering),
            numbering=numbering,
            orphans=orphans,
        )

    def generate_document_content(self, manuscript: Manuscript) -> str:
        """Export the manuscript as markdown with rendered citations.

        Sections come in the order introduction, methods, results, discussion,
        followed by any other section types in first-seen order. A References
        section lists every numbered paper.
        """
        if not manuscript.paragraphs:
            return ""

        rendered = self.render(manuscript)
        content = f"# {manuscript.title or DEFAULT_TITLE}\n\n"

        for section_type, paragraphs in self._sections(manuscript):
            if section_type is not None:
                content += f"## {SECTION_NAMES.get(section_type, section_type)}\n\n"
            for paragraph in paragraphs:
                if paragraph.title and paragraph.title.strip():
                    content += f"**{paragraph.title.strip()}**\n\n"
                content += f"{rendered.paragraphs[paragraph.id].strip()}\n\n"

        if rendered.bibliography:
            content += "## References\n\n"
            for entry in rendered.bibliography:
                content += f"{entry.text}\n\n"

        return content

    def validate(self, manuscript: Manuscript) -> ReferenceValidationResult:
        """Check field codes and citations for inconsistencies."""
        known = manuscript.citations_by_id
        numbering = self.number_citations(manuscript)

        cited: set[str] = set()
        orphans: list[FieldCode] = []
        for paragraph in manuscript.ordered_paragraphs:
            for code in parse_field_codes(paragraph.content):
                cited.add(code.citation_id)
                if code.citation_id not in known:
                    orphans.append(code)

        without_paper = [c.id for c in numbering.invalid]
        unused = [c.id for c in manuscript.citations if c.id not in cited]

        return ReferenceValidationResult(
            valid=not orphans and not without_paper,
            orphan_codes=orphans,
            citations_without_paper=without_paper,
            unused_citations=unused,
            citation_count=len(manuscript.citations),
            unique_paper_count=len(numbering.entries),
        )

    def _citation_map(self, manuscript: Manuscript, numbering: NumberingResult) -> dict[str, Citation]:
        # Citations without their own paper record borrow their group's.
        papers = {entry.paper_id: entry.paper for entry in numbering.entries}
        citations: dict[str, Citation] = {}
        for citation in manuscript.citations:
            if citation.paper is None and citation.resolved_paper_id in papers:
                citation = replace(citation, paper=papers[citation.resolved_paper_id])
            citations[citation.id] = citation
        return citations

    def _sections(
        self, manuscript: Manuscript
    ) -> list[tuple[Optional[str], list[Paragraph]]]:
        grouped: dict[Optional[str], list[Paragraph]] = {}
        for paragraph in manuscript.ordered_paragraphs:
            if not paragraph.content.strip():
                continue
            grouped.setdefault(paragraph.section_type, []).append(paragraph)

        known = [s for s in SECTION_ORDER if s in grouped]
        others = [s for s in grouped if s not in SECTION_ORDER and s is not None]
        ordered: list[Optional[str]] = known + others
        if None in grouped:
            ordered.append(None)
        return [(section, grouped[section]) for section in ordered]
