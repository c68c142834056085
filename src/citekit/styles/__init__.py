"""Citation styles: the rule model, the registry and the importer."""

from citekit.styles.importer import StyleFormData, StyleImporter
from citekit.styles.registry import (
    SYSTEM_STYLE_IDS,
    InMemoryStyleStore,
    StyleRegistry,
    StyleStore,
    get_available_styles,
    get_default_style,
    get_style_by_id,
    is_system_style,
    load_citation_style,
    load_system_catalog,
)
from citekit.styles.types import (
    REQUIRED_PLACEHOLDERS,
    AuthorRules,
    CitationStyle,
    DoiRules,
    JournalRules,
    NameFormat,
    PageFormat,
    SortConfig,
    SortMode,
    TitleCase,
    TitleRules,
    VolumeRules,
    YearFormat,
    YearRules,
)

__all__ = [
    # Model
    "CitationStyle",
    "SortConfig",
    "SortMode",
    "AuthorRules",
    "NameFormat",
    "TitleRules",
    "TitleCase",
    "JournalRules",
    "VolumeRules",
    "PageFormat",
    "DoiRules",
    "YearRules",
    "YearFormat",
    "REQUIRED_PLACEHOLDERS",
    # Registry
    "SYSTEM_STYLE_IDS",
    "StyleStore",
    "InMemoryStyleStore",
    "StyleRegistry",
    "load_system_catalog",
    "load_citation_style",
    "get_available_styles",
    "get_style_by_id",
    "get_default_style",
    "is_system_style",
    # Import
    "StyleImporter",
    "StyleFormData",
]
