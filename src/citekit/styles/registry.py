"""Citation style loading.

Lookup order: a user's own style (from an external store), the bundled
system catalog, then a fixed fallback style. Each tier is a strategy that
returns a style or None, tried in sequence.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from importlib import resources
from typing import Callable, Optional, Protocol

from citekit.config import get_settings
from citekit.logging import get_logger, log_failure, log_warning
from citekit.styles.types import CitationStyle

logger = get_logger("styles")

# Catalog order as listed to users
SYSTEM_STYLE_IDS = (
    "nature",
    "cell",
    "science",
    "jcb",
    "jbc",
    "elife",
    "pnas",
    "harvard",
    "vancouver",
)


@lru_cache
def load_system_catalog() -> dict[str, CitationStyle]:
    """Load the bundled system styles (read once; styles are immutable)."""
    catalog: dict[str, CitationStyle] = {}
    system_dir = resources.files("citekit.styles") / "system"
    for style_id in SYSTEM_STYLE_IDS:
        raw = (system_dir / f"{style_id}.json").read_text(encoding="utf-8")
        catalog[style_id] = CitationStyle.model_validate(json.loads(raw))
    return catalog


class StyleStore(Protocol):
    """User-scoped style storage, provided by the embedding application."""

    def get_style(self, style_id: str, user_id: str) -> Optional[CitationStyle]: ...


class InMemoryStyleStore:
    """Dict-backed ``StyleStore`` for callers without a database."""

    def __init__(self) -> None:
        self._styles: dict[tuple[str, str], CitationStyle] = {}

    def save_style(self, user_id: str, style: CitationStyle) -> None:
        """Create or replace a user's style."""
        self._styles[(user_id, style.id)] = style

    def get_style(self, style_id: str, user_id: str) -> Optional[CitationStyle]:
        return self._styles.get((user_id, style_id))

    def list_styles(self, user_id: str) -> list[CitationStyle]:
        return [style for (owner, _), style in self._styles.items() if owner == user_id]


StyleStrategy = Callable[[str, Optional[str]], Optional[CitationStyle]]


class StyleRegistry:
    """Resolves style ids to styles.

    Example usage:
        registry = StyleRegistry()
        style = registry.load_style("nature")

        # With user-defined styles
        store = InMemoryStyleStore()
        store.save_style("user-1", my_style)
        registry = StyleRegistry(store=store)
        style = registry.load_style("my-style", user_id="user-1")
    """

    def __init__(
        self,
        store: Optional[StyleStore] = None,
        fallback_style_id: Optional[str] = None,
        default_style_id: Optional[str] = None,
    ):
        settings = get_settings()
        self.store = store
        self.fallback_style_id = fallback_style_id or settings.fallback_style
        self.default_style_id = default_style_id or settings.default_style

    @property
    def strategies(self) -> list[StyleStrategy]:
        """Lookup tiers in priority order."""
        return [self._from_user_store, self._from_system_catalog, self._fallback]

    def load_style(self, style_id: str, user_id: Optional[str] = None) -> CitationStyle:
        """Load a style; never fails, unknown ids resolve to the fallback style."""
        for strategy in self.strategies:
            style = strategy(style_id, user_id)
            if style is not None:
                return style
        return self._fallback(style_id, user_id)

    def get_available_styles(self) -> list[CitationStyle]:
        """List the system catalog."""
        return list(load_system_catalog().values())

    def get_style_by_id(self, style_id: str) -> Optional[CitationStyle]:
        """System style by id, or None."""
        return load_system_catalog().get(style_id)

    def get_default_style(self) -> CitationStyle:
        return self.load_style(self.default_style_id)

    def is_system_style(self, style_id: str) -> bool:
        return style_id in load_system_catalog()

    def _from_user_store(self, style_id: str, user_id: Optional[str]) -> Optional[CitationStyle]:
        if self.store is None or not user_id:
            return None
        try:
            return self.store.get_style(style_id, user_id)
        except Exception as e:
            log_failure(
                logger,
                "load user style",
                e,
                context={"style_id": style_id, "user_id": user_id},
                level=logging.WARNING,
            )
            return None

    def _from_system_catalog(self, style_id: str, user_id: Optional[str]) -> Optional[CitationStyle]:
        return self.get_style_by_id(style_id)

    def _fallback(self, style_id: str, user_id: Optional[str]) -> CitationStyle:
        catalog = load_system_catalog()
        fallback = catalog.get(self.fallback_style_id) or catalog["vancouver"]
        log_warning(
            logger,
            "load style",
            f"unknown style '{style_id}', using '{fallback.id}'",
        )
        return fallback


def load_citation_style(style_id: str, user_id: Optional[str] = None) -> CitationStyle:
    """Load a style with the default registry."""
    return StyleRegistry().load_style(style_id, user_id)


def get_available_styles() -> list[CitationStyle]:
    """List the system catalog."""
    return StyleRegistry().get_available_styles()


def get_style_by_id(style_id: str) -> Optional[CitationStyle]:
    """System style by id, or None."""
    return StyleRegistry().get_style_by_id(style_id)


def get_default_style() -> CitationStyle:
    """The configured default style."""
    return StyleRegistry().get_default_style()


def is_system_style(style_id: str) -> bool:
    return StyleRegistry().is_system_style(style_id)
