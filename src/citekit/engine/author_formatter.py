"""Author list formatting: name forms, delimiters and et al. truncation."""

import re
from typing import Union

from citekit.styles.types import AuthorRules, NameFormat

UNKNOWN_AUTHOR = "Unknown Author"

_AUTHOR_SPLIT = re.compile(r"[,&]")
_INITIALS_SPLIT = re.compile(r"[,\s]+")


class AuthorFormatter:
    """Formats author lists according to a style's author rules.

    Names are assumed to be surname first ("Smith, J. A." or "Smith J A").
    """

    def format(self, authors: Union[str, list[str], None], rules: AuthorRules) -> str:
        """Format an author list into a style-compliant string.

        Args:
            authors: Delimited string or ordered list of names
            rules: Author rules of the style

        Returns:
            Formatted authors, or "Unknown Author" when there are none
        """
        author_list = self.parse_authors(authors)
        if not author_list:
            return UNKNOWN_AUTHOR

        use_et_al = rules.et_al_after > 0 and len(author_list) > rules.et_al_after
        shown = author_list[: rules.et_al_after] if use_et_al else author_list

        formatted = [self.format_name(author, rules.format) for author in shown]

        if len(formatted) == 1:
            result = formatted[0]
        elif len(formatted) == 2:
            result = f"{formatted[0]}{rules.final_delimiter}{formatted[1]}"
        else:
            result = rules.delimiter.join(formatted[:-1]) + rules.final_delimiter + formatted[-1]

        if use_et_al:
            result += " et al."

        return result

    def parse_authors(self, authors: Union[str, list[str], None]) -> list[str]:
        """Normalize authors to a list; strings are split on commas and ampersands."""
        if not authors:
            return []
        if isinstance(authors, str):
            parts = _AUTHOR_SPLIT.split(authors)
        else:
            parts = [str(a) for a in authors if a is not None]
        return [p.strip() for p in parts if p.strip()]

    def extract_last_name(self, author: str) -> str:
        """Surname of an author: text before the first comma, else the first word."""
        if not author or not author.strip():
            return ""

        trimmed = author.strip()
        if "," in trimmed:
            return trimmed.split(",")[0].strip()
        return trimmed.split()[0]

    def extract_initials(self, author: str) -> str:
        """Everything after the surname, e.g. "Smith, J. A." -> "J. A."."""
        trimmed = author.strip() if author else ""
        if "," in trimmed:
            rest = trimmed.split(",", 1)[1]
        else:
            words = trimmed.split(None, 1)
            rest = words[1] if len(words) > 1 else ""
        return " ".join(p for p in _INITIALS_SPLIT.split(rest) if p)

    def format_name(self, author: str, name_format: NameFormat) -> str:
        """Format a single author name."""
        if name_format == NameFormat.LAST_NAME_FIRST_INITIAL:
            last_name = self.extract_last_name(author)
            initials = self.extract_initials(author)
            if initials:
                return f"{last_name}, {initials}"
            return last_name
        return author
