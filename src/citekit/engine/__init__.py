"""Citation engine: author formatting, sorting and bibliography rendering."""

from citekit.engine.author_formatter import UNKNOWN_AUTHOR, AuthorFormatter
from citekit.engine.renderer import OutputFormat, ReferenceRenderer
from citekit.engine.sorter import CitationSorter, collation_key

__all__ = [
    "AuthorFormatter",
    "UNKNOWN_AUTHOR",
    "CitationSorter",
    "collation_key",
    "ReferenceRenderer",
    "OutputFormat",
]
