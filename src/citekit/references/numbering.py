"""Citation deduplication and numbering.

A document cites each paper possibly many times. Numbering works on
canonical entries: one per paper id, represented by the earliest citation of
that paper. Numbers are assigned 1..N in the order chosen by the first
applicable strategy:

    appearance:    AppearanceStrategy -> CitationOrderStrategy -> AlphabeticalStrategy
    alphabetical:  AlphabeticalStrategy
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Optional, Protocol, Union

from citekit.engine.sorter import CitationSorter
from citekit.logging import get_logger, log_warning
from citekit.models.citation import Citation
from citekit.models.document import Paragraph
from citekit.models.paper import PaperData
from citekit.styles.types import CitationStyle, SortMode

logger = get_logger("numbering")


class CitationOrder(str, Enum):
    """Number-assignment policies."""

    ALPHABETICAL = "alphabetical"
    APPEARANCE = "appearance"

    @classmethod
    def coerce(cls, value: Any) -> Optional[CitationOrder]:
        """Parse a policy name; None for missing or unknown values."""
        if value is None or isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


def order_for_style(style: CitationStyle) -> CitationOrder:
    """Numbering policy implied by a style: citation-order styles number by appearance."""
    if style.sort.mode == SortMode.CITATION_ORDER:
        return CitationOrder.APPEARANCE
    return CitationOrder.ALPHABETICAL


@dataclass
class DedupResult:
    """Citations grouped by paper.

    Attributes:
        representatives: One citation per paper, in first-seen group order;
            each carries a paper record
        groups: paper id -> every citation of that paper
        invalid: Citations with no paper id, or whose whole group lacks a
            paper record
    """

    representatives: list[Citation] = field(default_factory=list)
    groups: dict[str, list[Citation]] = field(default_factory=dict)
    invalid: list[Citation] = field(default_factory=list)


def get_unique_citations(citations: Iterable[Citation]) -> DedupResult:
    """Deduplicate citations by the paper they cite."""
    groups: dict[str, list[Citation]] = {}
    invalid: list[Citation] = []

    for citation in citations:
        paper_id = citation.resolved_paper_id
        if paper_id is None:
            invalid.append(citation)
            continue
        groups.setdefault(paper_id, []).append(citation)

    representatives: list[Citation] = []
    kept: dict[str, list[Citation]] = {}
    for paper_id, group in groups.items():
        ordered = sorted(group, key=lambda c: c.position_key)
        representative = ordered[0]
        if representative.paper is None:
            donor = next((c for c in ordered if c.paper is not None), None)
            if donor is None:
                invalid.extend(group)
                continue
            representative = replace(representative, paper=donor.paper)
        representatives.append(representative)
        kept[paper_id] = group

    if invalid:
        log_warning(
            logger,
            "deduplicate citations",
            f"{len(invalid)} citation(s) have no paper and will not be numbered",
            context={"citation_ids": ",".join(c.id for c in invalid)},
        )

    return DedupResult(representatives=representatives, groups=kept, invalid=invalid)


class NumberingStrategy(Protocol):
    """One ordering tier. Returns the ordered representatives, or None when
    the tier cannot order this document."""

    name: str

    def order(
        self, dedup: DedupResult, paragraphs: Mapping[str, Paragraph]
    ) -> Optional[list[Citation]]: ...


def marker_search_pattern(citation_id: str) -> re.Pattern[str]:
    """Pattern matching the opening of any field code for a citation id."""
    return re.compile(r"\[cite:" + re.escape(citation_id) + ":")


class AppearanceStrategy:
    """Order papers by the first position of any of their markers.

    Each citation's marker is looked up in its owning paragraph. Papers with
    no locatable marker go last, in citation order.
    """

    name = "appearance"

    def __init__(self, sorter: Optional[CitationSorter] = None):
        self.sorter = sorter or CitationSorter()

    def first_position(
        self, group: Iterable[Citation], paragraphs: Mapping[str, Paragraph]
    ) -> Optional[tuple[int, int]]:
        """(paragraph order, character offset) of the earliest marker, if any."""
        best: Optional[tuple[int, int]] = None
        for citation in group:
            if citation.paragraph is None:
                continue
            paragraph = paragraphs.get(citation.paragraph.id)
            if paragraph is None:
                continue
            match = marker_search_pattern(citation.id).search(paragraph.content)
            if match is None:
                continue
            position = (paragraph.order, match.start())
            if best is None or position < best:
                best = position
        return best

    def order(
        self, dedup: DedupResult, paragraphs: Mapping[str, Paragraph]
    ) -> Optional[list[Citation]]:
        positions: dict[str, Optional[tuple[int, int]]] = {}
        for representative in dedup.representatives:
            paper_id = representative.resolved_paper_id
            positions[paper_id] = self.first_position(dedup.groups.get(paper_id, []), paragraphs)

        if not any(positions.values()):
            return None

        def key(citation: Citation) -> tuple[int, float, float, tuple[int, int, int]]:
            position = positions.get(citation.resolved_paper_id)
            fallback = self.sorter.citation_order_key(citation)
            if position is None:
                return 1, math.inf, math.inf, fallback
            return 0, position[0], position[1], fallback

        return sorted(dedup.representatives, key=key)


class CitationOrderStrategy:
    """Order papers by recorded paragraph number and citation order."""

    name = "citation-order"

    def __init__(self, sorter: Optional[CitationSorter] = None):
        self.sorter = sorter or CitationSorter()

    def order(
        self, dedup: DedupResult, paragraphs: Mapping[str, Paragraph]
    ) -> Optional[list[Citation]]:
        has_metadata = any(
            citation.has_position for group in dedup.groups.values() for citation in group
        )
        if not has_metadata:
            return None
        return self.sorter.sort(dedup.representatives, SortMode.CITATION_ORDER)


class AlphabeticalStrategy:
    """Order papers by first author surname; always applicable."""

    name = "alphabetical"

    def __init__(self, sorter: Optional[CitationSorter] = None):
        self.sorter = sorter or CitationSorter()

    def order(
        self, dedup: DedupResult, paragraphs: Mapping[str, Paragraph]
    ) -> Optional[list[Citation]]:
        return self.sorter.sort(dedup.representatives, SortMode.ALPHABETICAL)


@dataclass(frozen=True)
class CanonicalEntry:
    """A numbered unique paper."""

    number: int
    paper_id: str
    citation: Citation
    paper: PaperData


@dataclass
class NumberingResult:
    """Outcome of numbering a document's citations.

    Attributes:
        order: Policy that was requested
        strategy: Name of the strategy that produced the order
        entries: Canonical entries, numbered 1..N
        number_map: paper id -> number
        invalid: Citations left out of numbering
    """

    order: CitationOrder
    strategy: str
    entries: list[CanonicalEntry] = field(default_factory=list)
    number_map: dict[str, int] = field(default_factory=dict)
    invalid: list[Citation] = field(default_factory=list)

    def number_for(self, paper_id: Optional[str]) -> Optional[int]:
        if paper_id is None:
            return None
        return self.number_map.get(paper_id)

    @property
    def paper_ids(self) -> list[str]:
        return [entry.paper_id for entry in self.entries]


class NumberingResolver:
    """Assigns one stable number to each unique paper in a document.

    Example usage:
        resolver = NumberingResolver()
        result = resolver.resolve(manuscript.citations, manuscript.paragraphs, "appearance")
        result.number_map  # {"p1": 1, "p2": 2}
    """

    def __init__(self, sorter: Optional[CitationSorter] = None):
        self.sorter = sorter or CitationSorter()

    def strategies_for(self, order: CitationOrder) -> list[NumberingStrategy]:
        """Strategy chain for a policy, highest priority first."""
        if order == CitationOrder.APPEARANCE:
            return [
                AppearanceStrategy(self.sorter),
                CitationOrderStrategy(self.sorter),
                AlphabeticalStrategy(self.sorter),
            ]
        return [AlphabeticalStrategy(self.sorter)]

    def resolve(
        self,
        citations: Iterable[Citation],
        paragraphs: Union[Iterable[Paragraph], Mapping[str, Paragraph]] = (),
        order: Union[CitationOrder, str] = CitationOrder.APPEARANCE,
    ) -> NumberingResult:
        """Deduplicate and number citations.

        Args:
            citations: Every citation recorded for the document
            paragraphs: The document's paragraphs (marker search for
                appearance order), as a list or an id mapping
            order: Numbering policy; unknown values mean appearance

        Returns:
            NumberingResult with entries numbered 1..N
        """
        policy = CitationOrder.coerce(order) or CitationOrder.APPEARANCE
        if isinstance(paragraphs, Mapping):
            by_id = dict(paragraphs)
        else:
            by_id = {p.id: p for p in paragraphs}

        dedup = get_unique_citations(citations)

        ordered: list[Citation] = []
        used = AlphabeticalStrategy.name
        strategies = self.strategies_for(policy)
        for index, strategy in enumerate(strategies):
            result = strategy.order(dedup, by_id)
            if result is not None:
                ordered, used = result, strategy.name
                break
            if index + 1 < len(strategies) and dedup.representatives:
                log_warning(
                    logger,
                    "number citations",
                    f"{strategy.name} ordering not applicable, "
                    f"falling back to {strategies[index + 1].name}",
                    context={"papers": len(dedup.representatives)},
                )

        entries: list[CanonicalEntry] = []
        number_map: dict[str, int] = {}
        for number, citation in enumerate(ordered, start=1):
            paper_id = citation.resolved_paper_id
            entries.append(
                CanonicalEntry(number=number, paper_id=paper_id, citation=citation, paper=citation.paper)
            )
            number_map[paper_id] = number

        return NumberingResult(
            order=policy,
            strategy=used,
            entries=entries,
            number_map=number_map,
            invalid=dedup.invalid,
        )
