"""Citation style definitions.

A style is the JSON exchange artifact of the engine: camelCase keys on the
wire (``displayName``, ``authorRules.etAlAfter`` ...), snake_case attributes
in Python. Styles are immutable once loaded.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class SortMode(str, Enum):
    """Bibliography sort policies."""

    CITATION_ORDER = "citation-order"
    ALPHABETICAL = "alphabetical"
    YEAR_THEN_AUTHOR = "year-then-author"
    VOLUME_YEAR = "volume-year"

    @classmethod
    def coerce(cls, value: Any) -> SortMode:
        """Map any value to a mode; unknown or missing values mean citation order."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.CITATION_ORDER


class NameFormat(str, Enum):
    LAST_NAME_FIRST_INITIAL = "LastName FirstInitial"
    LAST_NAME_FIRST_NAME = "LastName FirstName"


class TitleCase(str, Enum):
    SENTENCE = "sentence"
    TITLE = "title"


class PageFormat(str, Enum):
    RANGE = "range"
    START_ONLY = "start-only"
    ARTICLE_NUMBER = "article-number"


class YearFormat(str, Enum):
    PARENTHESES = "parentheses"
    COMMA = "comma"


class _StyleSection(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class SortConfig(_StyleSection):
    mode: SortMode = SortMode.CITATION_ORDER
    key: Optional[str] = None

    @field_validator("mode", mode="before")
    @classmethod
    def _coerce_mode(cls, value: Any) -> SortMode:
        return SortMode.coerce(value)


class AuthorRules(_StyleSection):
    """Author list rules.

    Attributes:
        max_authors: Authors shown before truncation in in-text citations
        et_al_after: Truncate to this many authors plus " et al." (0 disables)
        delimiter: Between authors
        final_delimiter: Before the last author
        format: Name form for each author
    """

    max_authors: int = 6
    et_al_after: int = 6
    delimiter: str = ", "
    final_delimiter: str = ", "
    format: NameFormat = NameFormat.LAST_NAME_FIRST_INITIAL


class TitleRules(_StyleSection):
    include: bool = True
    case: TitleCase = TitleCase.SENTENCE
    end_punctuation: str = "."


class JournalRules(_StyleSection):
    use_italic: bool = False
    use_venue: bool = True
    fallback_abbreviation: str = ""


class VolumeRules(_StyleSection):
    use_bold: bool = False
    include_issue: bool = False
    format: PageFormat = PageFormat.RANGE
    page_separator: str = "-"


class DoiRules(_StyleSection):
    include: bool = False
    prefix: str = "https://doi.org/"


class YearRules(_StyleSection):
    format: YearFormat = YearFormat.PARENTHESES


REQUIRED_PLACEHOLDERS = ("{authors}", "{journal}", "{year}")


class CitationStyle(_StyleSection):
    """A complete citation style definition."""

    id: str
    name: str
    display_name: str
    is_system: bool = False
    sort: SortConfig = Field(default_factory=SortConfig)
    author_rules: AuthorRules = Field(default_factory=AuthorRules)
    title: TitleRules = Field(default_factory=TitleRules)
    journal: JournalRules = Field(default_factory=JournalRules)
    volume: VolumeRules = Field(default_factory=VolumeRules)
    doi: DoiRules = Field(default_factory=DoiRules)
    year: YearRules = Field(default_factory=YearRules)
    template: str = "{authors} {title} {journal} {volume}, {pages} {year}. {doi}"

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the camelCase exchange format."""
        return self.model_dump(by_alias=True, mode="json")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CitationStyle:
        return cls.model_validate(data)
