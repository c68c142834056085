"""Tests for citation sorting."""

import pytest

from conftest import make_citation

from citekit.engine import CitationSorter, collation_key
from citekit.models import PaperData
from citekit.styles import SortConfig, SortMode


@pytest.fixture
def sorter():
    return CitationSorter()


def paper(authors, year=None, volume=None):
    return PaperData(title="t", authors=authors, year=year, volume=volume)


class TestCitationOrder:
    """Tests for the citation-order mode."""

    def test_orders_by_paragraph_then_citation_order(self, sorter):
        citations = [
            make_citation("a", "p1", "P2", 0),
            make_citation("b", "p2", "P1", 1),
            make_citation("c", "p3", "P1", 0),
        ]
        result = sorter.sort(citations, SortConfig(mode=SortMode.CITATION_ORDER))
        assert [c.id for c in result] == ["c", "b", "a"]

    def test_paragraph_numbers_compare_numerically(self, sorter):
        citations = [make_citation("p10", "x", "P10", 0), make_citation("p2", "y", "P2", 0)]
        assert [c.id for c in sorter.sort(citations, "citation-order")] == ["p2", "p10"]

    def test_citations_without_paragraph_come_first(self, sorter):
        citations = [
            make_citation("anchored", "p1", "P1", 0),
            make_citation("loose", "p2", None, 3),
        ]
        assert [c.id for c in sorter.sort(citations, SortMode.CITATION_ORDER)] == [
            "loose",
            "anchored",
        ]

    def test_missing_citation_order_reads_as_zero(self, sorter):
        citations = [make_citation("b", "p1", "P1", 1), make_citation("a", "p2", "P1", None)]
        assert [c.id for c in sorter.sort(citations, SortMode.CITATION_ORDER)] == ["a", "b"]

    @pytest.mark.parametrize("mode", ["bogus", "", None])
    def test_unknown_mode_falls_back(self, sorter, mode):
        citations = [make_citation("b", "p1", "P2", 0), make_citation("a", "p2", "P1", 0)]
        assert [c.id for c in sorter.sort(citations, mode)] == ["a", "b"]


class TestAlphabetical:
    """Tests for the alphabetical mode."""

    def test_sorts_by_first_author_surname(self, sorter):
        citations = [
            make_citation("z", paper=paper("Zimmer, A")),
            make_citation("a", paper=paper("Adams, B")),
            make_citation("m", paper=paper("Miller C, Adams B")),
        ]
        result = sorter.sort(citations, SortMode.ALPHABETICAL)
        assert [c.id for c in result] == ["a", "m", "z"]

    def test_case_and_accent_insensitive(self, sorter):
        citations = [
            make_citation("zimmer", paper=paper("Zimmer A")),
            make_citation("emile", paper=paper(["Émile B"])),
            make_citation("adams", paper=paper("adams C")),
        ]
        result = sorter.sort(citations, SortMode.ALPHABETICAL)
        assert [c.id for c in result] == ["adams", "emile", "zimmer"]

    def test_citation_without_paper_sorts_first(self, sorter):
        citations = [make_citation("with", paper=paper("Adams B")), make_citation("without")]
        assert [c.id for c in sorter.sort(citations, SortMode.ALPHABETICAL)] == ["without", "with"]

    def test_stable_for_equal_keys(self, sorter):
        citations = [make_citation(str(i), paper=paper("Smith J")) for i in range(5)]
        assert [c.id for c in sorter.sort(citations, SortMode.ALPHABETICAL)] == list("01234")

    def test_collation_key(self):
        assert collation_key("Ångström") == collation_key("angstrom")


class TestOtherModes:
    """Tests for year-then-author and volume-year modes."""

    def test_year_then_author(self, sorter):
        citations = [
            make_citation("b2020", paper=paper("Brown A", 2020)),
            make_citation("a2020", paper=paper("Adams A", 2020)),
            make_citation("z2019", paper=paper("Zimmer A", 2019)),
        ]
        result = sorter.sort(citations, SortMode.YEAR_THEN_AUTHOR)
        assert [c.id for c in result] == ["z2019", "a2020", "b2020"]

    def test_volume_year_uses_leading_digits(self, sorter):
        citations = [
            make_citation("v12", paper=paper("A", 2001, "12a")),
            make_citation("v3", paper=paper("A", 2005, "3")),
            make_citation("none", paper=paper("A", 1999, None)),
        ]
        result = sorter.sort(citations, SortMode.VOLUME_YEAR)
        assert [c.id for c in result] == ["none", "v3", "v12"]


class TestSortContract:
    def test_input_not_mutated(self, sorter):
        citations = [make_citation("b", "p1", "P2", 0), make_citation("a", "p2", "P1", 0)]
        original = list(citations)
        sorter.sort(citations, SortMode.CITATION_ORDER)
        assert citations == original

    def test_deterministic(self, sorter):
        citations = [make_citation(c, paper=paper(f"{c.upper()} X")) for c in "qwerty"]
        first = sorter.sort(citations, SortMode.ALPHABETICAL)
        second = sorter.sort(citations, SortMode.ALPHABETICAL)
        assert first == second
