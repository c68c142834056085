"""Citation sorting for the supported bibliography sort modes."""

import unicodedata
from collections.abc import Sequence
from typing import Any, Callable, TypeVar, Union

from citekit.engine.author_formatter import AuthorFormatter
from citekit.models.citation import Citation, leading_int
from citekit.styles.types import SortConfig, SortMode

C = TypeVar("C", bound=Citation)


def collation_key(text: str) -> str:
    """Case- and accent-insensitive comparison key ("Émile" sorts with "emile")."""
    decomposed = unicodedata.normalize("NFKD", text)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.casefold()


class CitationSorter:
    """Orders citations according to a style's sort policy.

    Sorting is stable and never mutates the input list.
    """

    def __init__(self, author_formatter: AuthorFormatter | None = None):
        self.author_formatter = author_formatter or AuthorFormatter()
        self._sort_keys: dict[SortMode, Callable[[Citation], Any]] = {
            SortMode.CITATION_ORDER: self.citation_order_key,
            SortMode.ALPHABETICAL: self._alphabetical_key,
            SortMode.YEAR_THEN_AUTHOR: self._year_then_author_key,
            SortMode.VOLUME_YEAR: self._volume_year_key,
        }

    def sort(
        self,
        citations: Sequence[C],
        config: Union[SortConfig, SortMode, str, None] = None,
    ) -> list[C]:
        """Sort citations.

        Args:
            citations: Citations to order
            config: Sort configuration, or a bare mode; unknown modes sort
                in citation order

        Returns:
            A new, sorted list
        """
        mode = config.mode if isinstance(config, SortConfig) else SortMode.coerce(config)
        return sorted(citations, key=self._sort_keys[mode])

    def first_author_last_name(self, citation: Citation) -> str:
        if citation.paper is None:
            return ""
        return self.author_formatter.extract_last_name(citation.paper.first_author)

    def citation_order_key(self, citation: Citation) -> tuple[int, int, int]:
        # Paragraph-less citations come first.
        has_paragraph = 1 if citation.paragraph is not None else 0
        para, order = citation.position_key
        return has_paragraph, para, order

    def _alphabetical_key(self, citation: Citation) -> str:
        return collation_key(self.first_author_last_name(citation))

    def _year_then_author_key(self, citation: Citation) -> tuple[int, str]:
        year = citation.paper.year if citation.paper and citation.paper.year else 0
        return year, self._alphabetical_key(citation)

    def _volume_year_key(self, citation: Citation) -> tuple[int, int]:
        paper = citation.paper
        volume = leading_int(paper.volume) if paper else 0
        year = paper.year if paper and paper.year else 0
        return volume, year
