"""Paper records as supplied by the bibliographic-resolution layer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

Authors = Union[str, list[str]]


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _optional_year(value: Any) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class PaperData:
    """Bibliographic data for one source paper.

    The engine only reads these records. ``authors`` is either a single
    delimited string ("Smith, J & Doe, A") or an ordered list of names.
    Everything past title/authors/year/venue is optional.
    """

    title: str = ""
    authors: Authors = ""
    year: int | None = None
    venue: str = ""
    doi: str | None = None
    volume: str | None = None
    issue: str | None = None
    pages: str | None = None
    article_number: str | None = None
    id: str | None = None

    @property
    def first_author(self) -> str:
        """First entry of the author list, or the whole string when not a list."""
        if isinstance(self.authors, str):
            return self.authors
        return self.authors[0] if self.authors else ""

    @property
    def authors_string(self) -> str:
        """Return authors as a comma-separated string."""
        if isinstance(self.authors, str):
            return self.authors
        return ", ".join(self.authors)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PaperData:
        """Build a paper from a JSON-style dict (snake_case or camelCase keys)."""
        authors = data.get("authors") or ""
        if not isinstance(authors, str):
            authors = [str(a) for a in authors]
        return cls(
            title=str(data.get("title") or ""),
            authors=authors,
            year=_optional_year(data.get("year")),
            venue=str(data.get("venue") or data.get("journal") or ""),
            doi=_optional_str(data.get("doi")),
            volume=_optional_str(data.get("volume")),
            issue=_optional_str(data.get("issue")),
            pages=_optional_str(data.get("pages")),
            article_number=_optional_str(
                data.get("article_number", data.get("articleNumber"))
            ),
            id=_optional_str(data.get("id")),
        )
