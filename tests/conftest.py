"""Shared fixtures for citekit tests."""

import pytest

from citekit.config import get_settings
from citekit.models import Citation, Manuscript, PaperData, Paragraph, ParagraphRef
from citekit.styles import get_style_by_id


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Isolate tests from the developer's environment and from each other."""
    for name in (
        "CITEKIT_DEFAULT_STYLE",
        "CITEKIT_FALLBACK_STYLE",
        "CITEKIT_OUTPUT_FORMAT",
        "CITEKIT_CITATION_ORDER",
        "CITEKIT_IN_TEXT_MAX_AUTHORS",
        "CITEKIT_STYLE_IMPORT_TIMEOUT",
        "CITEKIT_LOG_LEVEL",
        "CITEKIT_LOG_FORMAT",
        "CITEKIT_LOG_FILE",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def nature_style():
    return get_style_by_id("nature")


@pytest.fixture
def harvard_style():
    return get_style_by_id("harvard")


@pytest.fixture
def vancouver_style():
    return get_style_by_id("vancouver")


@pytest.fixture
def sample_paper():
    """A fully populated paper."""
    return PaperData(
        id="p1",
        title="crispr screens in human cells",
        authors="Smith J, Doe A",
        year=2020,
        venue="Cell Reports",
        doi="10.1016/j.celrep.2020.01.001",
        volume="12",
        issue="3",
        pages="100-110",
    )


@pytest.fixture
def four_author_paper():
    return PaperData(
        id="p4",
        title="Large consortium study",
        authors=["Smith J", "Doe A", "Lee K", "Park S"],
        year=2020,
        venue="Genome Biology",
    )


def make_citation(
    citation_id,
    paper_id=None,
    paragraph_number=None,
    citation_order=None,
    paper=None,
    paragraph_id=None,
):
    """Build a citation anchored to a paragraph such as "P1"."""
    paragraph = None
    if paragraph_number is not None:
        paragraph = ParagraphRef(
            id=paragraph_id or f"para-{paragraph_number}", paragraph_number=paragraph_number
        )
    return Citation(
        id=citation_id,
        paper_id=paper_id,
        paper=paper,
        paragraph=paragraph,
        citation_order=citation_order,
    )


@pytest.fixture
def numeric_manuscript():
    """One paragraph citing two papers, recorded in text order."""
    p1 = PaperData(id="p1", title="First paper", authors="Smith J", year=2020, venue="Nature")
    p2 = PaperData(id="p2", title="Second paper", authors="Doe A", year=2019, venue="Science")
    paragraph = Paragraph(
        id="para-P1",
        paragraph_number="P1",
        content="See [cite:c1:p1] and [cite:c2:p2].",
        section_type="introduction",
    )
    return Manuscript(
        title="Numeric Test",
        paragraphs=[paragraph],
        citations=[
            make_citation("c1", "p1", "P1", 0, p1),
            make_citation("c2", "p2", "P1", 1, p2),
        ],
    )


@pytest.fixture
def alphabetical_manuscript():
    """Two papers each cited twice; Zimmer appears first in the text."""
    zimmer = PaperData(id="p1", title="Zebrafish", authors="Zimmer, A", year=2020, venue="Dev Cell")
    adams = PaperData(id="p2", title="Arabidopsis", authors="Adams, B", year=2019, venue="Plant Cell")
    paragraphs = [
        Paragraph(
            id="para-P1",
            paragraph_number="P1",
            content="Fish [cite:c1:p1] and plants [cite:c2:p2].",
            section_type="introduction",
        ),
        Paragraph(
            id="para-P2",
            paragraph_number="P2",
            content="Again fish [cite:c3:p1] and plants [cite:c4:p2].",
            section_type="discussion",
        ),
    ]
    return Manuscript(
        title="Alphabetical Test",
        paragraphs=paragraphs,
        citations=[
            make_citation("c1", "p1", "P1", 0, zimmer),
            make_citation("c2", "p2", "P1", 1, adams),
            make_citation("c3", "p1", "P2", 0, zimmer),
            make_citation("c4", "p2", "P2", 1, adams),
        ],
    )
