"""Bibliography entry rendering.

Works as a small template engine over a style's ``template`` string and
supports markdown, HTML, LaTeX and plain output.
"""

import re
from collections.abc import Sequence
from enum import Enum
from typing import Optional, Union

from citekit.engine.author_formatter import AuthorFormatter
from citekit.models.paper import PaperData
from citekit.styles.types import (
    CitationStyle,
    DoiRules,
    JournalRules,
    PageFormat,
    TitleCase,
    TitleRules,
    VolumeRules,
    YearFormat,
    YearRules,
)


class OutputFormat(str, Enum):
    """Markup flavour of rendered output."""

    MARKDOWN = "markdown"
    HTML = "html"
    LATEX = "latex"
    PLAIN = "plain"

    @classmethod
    def coerce(cls, value: Union["OutputFormat", str, None]) -> "OutputFormat":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.MARKDOWN


ITALIC_MARKUP = {
    OutputFormat.MARKDOWN: "*{}*",
    OutputFormat.HTML: "<em>{}</em>",
    OutputFormat.LATEX: "\\textit{{{}}}",
    OutputFormat.PLAIN: "{}",
}

BOLD_MARKUP = {
    OutputFormat.MARKDOWN: "**{}**",
    OutputFormat.HTML: "<strong>{}</strong>",
    OutputFormat.LATEX: "\\textbf{{{}}}",
    OutputFormat.PLAIN: "{}",
}

DOI_PREFIXES = ("doi:", "https://doi.org/")

# The adjacent volume/pages pair is matched first so it collapses as one unit.
_PLACEHOLDER = re.compile(r"\{volume\}, \{pages\}|\{(authors|title|journal|volume|pages|year|doi)\}")
_PAGE_SPLIT = re.compile(r"[-–]")
_WHITESPACE = re.compile(r"\s+")


class ReferenceRenderer:
    """Renders one bibliography entry from paper data and a style."""

    def __init__(self, author_formatter: Optional[AuthorFormatter] = None):
        self.author_formatter = author_formatter or AuthorFormatter()

    def render(
        self,
        paper: PaperData,
        style: CitationStyle,
        output_format: Union[OutputFormat, str] = OutputFormat.MARKDOWN,
        citation_number: Optional[int] = None,
    ) -> str:
        """Render a bibliography entry.

        Missing optional fields are omitted rather than treated as errors.

        Args:
            paper: Paper to render
            style: Citation style
            output_format: Markup flavour for italics and bold
            citation_number: When given, the entry is prefixed with "<n>. "

        Returns:
            The rendered entry
        """
        fmt = OutputFormat.coerce(output_format)

        volume, pages = self.format_volume_pages(paper, style.volume, fmt)
        fragments = {
            "authors": self.author_formatter.format(paper.authors, style.author_rules),
            "title": self.format_title(paper.title, style.title),
            "journal": self.format_journal(paper.venue, style.journal, fmt),
            "volume": volume,
            "pages": pages,
            "year": self.format_year(paper.year, style.year),
            "doi": self.format_doi(paper.doi, style.doi),
        }
        volume_pages = ", ".join(part for part in (volume, pages) if part)

        def substitute(match: re.Match) -> str:
            name = match.group(1)
            if name is None:
                return volume_pages
            return fragments[name]

        result = _PLACEHOLDER.sub(substitute, style.template)

        if citation_number is not None:
            result = f"{citation_number}. {result}"

        return _WHITESPACE.sub(" ", result).strip()

    def render_many(
        self,
        papers: Sequence[PaperData],
        style: CitationStyle,
        output_format: Union[OutputFormat, str] = OutputFormat.MARKDOWN,
        numbered: bool = False,
    ) -> list[str]:
        """Render several entries, numbering them 1..N when ``numbered``."""
        return [
            self.render(paper, style, output_format, i if numbered else None)
            for i, paper in enumerate(papers, start=1)
        ]

    def format_title(self, title: Optional[str], rules: TitleRules) -> str:
        if not rules.include or not title or not title.strip():
            return ""

        formatted = title.strip()
        if rules.case == TitleCase.SENTENCE:
            # Only the first character is touched; existing capitals are kept.
            formatted = formatted[0].upper() + formatted[1:]

        if rules.end_punctuation and not formatted.endswith(rules.end_punctuation):
            formatted += rules.end_punctuation

        return formatted

    def format_journal(
        self,
        venue: Optional[str],
        rules: JournalRules,
        output_format: OutputFormat = OutputFormat.MARKDOWN,
    ) -> str:
        venue = (venue or "").strip()
        if rules.use_venue and venue:
            journal_name = venue
        elif rules.fallback_abbreviation:
            journal_name = rules.fallback_abbreviation
        else:
            journal_name = venue

        if not journal_name:
            return ""

        if rules.use_italic:
            return ITALIC_MARKUP[output_format].format(journal_name)
        return journal_name

    def format_volume_pages(
        self,
        paper: PaperData,
        rules: VolumeRules,
        output_format: OutputFormat = OutputFormat.MARKDOWN,
    ) -> tuple[str, str]:
        """Return the (volume, pages) fragments."""
        volume = ""
        if paper.volume:
            volume = BOLD_MARKUP[output_format].format(paper.volume) if rules.use_bold else paper.volume

        if volume and rules.include_issue and paper.issue:
            volume += f"({paper.issue})"

        pages = ""
        if rules.format == PageFormat.ARTICLE_NUMBER:
            pages = paper.article_number or paper.pages or ""
        elif rules.format == PageFormat.RANGE and paper.pages:
            pages = paper.pages
        elif rules.format == PageFormat.START_ONLY and paper.pages:
            pages = _PAGE_SPLIT.split(paper.pages)[0].strip()

        return volume, pages

    def format_doi(self, doi: Optional[str], rules: DoiRules) -> str:
        if not rules.include or not doi:
            return ""
        if doi.startswith(DOI_PREFIXES):
            return doi
        return f"{rules.prefix}{doi}"

    def format_year(self, year: Optional[int], rules: YearRules) -> str:
        if year is None:
            return ""
        if rules.format == YearFormat.PARENTHESES:
            return f"({year})"
        return f", {year}"
