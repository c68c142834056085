"""Citation style import from JSON text, a URL, or a form payload.

All three paths run the same validator. Import is the one place in citekit
that fails loudly: problems are authoring errors the user can fix, so each
error names what is missing.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, Optional, Union

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from citekit.config import get_settings
from citekit.exceptions import (
    StyleImportError,
    StyleValidationError,
    UnsupportedStyleFormatError,
)
from citekit.logging import get_logger, log_failure
from citekit.styles.types import (
    REQUIRED_PLACEHOLDERS,
    AuthorRules,
    CitationStyle,
    DoiRules,
    JournalRules,
    SortConfig,
    TitleRules,
    VolumeRules,
    YearRules,
)

logger = get_logger("importer")

JSON_CONTENT_TYPES = ("application/json", "+json", "text/json")
CSL_CONTENT_TYPES = ("application/xml", "text/xml", "application/vnd.citationstyles.style+xml")


class StyleFormData(BaseModel):
    """Style as entered through an editor form."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    id: str
    name: str
    display_name: str
    sort: SortConfig
    author_rules: AuthorRules
    title: TitleRules = Field(default_factory=TitleRules)
    journal: JournalRules = Field(default_factory=JournalRules)
    volume: VolumeRules = Field(default_factory=VolumeRules)
    doi: DoiRules = Field(default_factory=DoiRules)
    year: YearRules = Field(default_factory=YearRules)
    template: str


def _first_error_location(error: ValidationError) -> str:
    errors = error.errors()
    if not errors:
        return ""
    return ".".join(str(part) for part in errors[0].get("loc", ()))


def _lookup(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


class StyleImporter:
    """Imports user-supplied style definitions.

    Example usage:
        importer = StyleImporter()
        style = importer.import_from_json(path.read_text())
        style = importer.import_from_url("https://example.org/styles/mine.json")
    """

    def __init__(self, client: Optional[httpx.Client] = None, timeout: Optional[float] = None):
        """Initialize the importer.

        Args:
            client: HTTP client for URL imports; a short-lived one is created
                per request when omitted
            timeout: Request timeout in seconds (default from settings)
        """
        self.client = client
        self.timeout = timeout if timeout is not None else get_settings().style_import_timeout

    def import_from_json(self, json_data: str) -> CitationStyle:
        """Import a style from JSON text.

        Raises:
            StyleImportError: If the text is not valid JSON
            StyleValidationError: If the style is incomplete
        """
        try:
            data = json.loads(json_data)
        except (TypeError, ValueError) as e:
            raise StyleImportError(f"Invalid JSON format: {e}") from e
        return self.validate_style(data)

    def import_from_url(self, url: str) -> CitationStyle:
        """Import a style from a URL serving JSON.

        CSL (XML) styles are recognized and rejected.

        Raises:
            StyleImportError: On transport errors, HTTP errors or unsupported
                content types
            UnsupportedStyleFormatError: For CSL/XML styles
        """
        try:
            response = self._fetch(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            log_failure(logger, "import style from URL", e, context={"url": url})
            raise StyleImportError(
                f"Failed to fetch style from URL: HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            log_failure(logger, "import style from URL", e, context={"url": url})
            raise StyleImportError(f"Failed to import from URL: {e}") from e

        content_type = response.headers.get("content-type", "").lower()
        if any(marker in content_type for marker in JSON_CONTENT_TYPES):
            return self.import_from_json(response.text)
        if any(marker in content_type for marker in CSL_CONTENT_TYPES) or url.lower().endswith(".csl"):
            raise UnsupportedStyleFormatError("CSL format conversion is not yet implemented")
        raise StyleImportError(f"Unsupported content type: {content_type or 'unknown'}")

    def import_from_form(self, form: Union[StyleFormData, Mapping[str, Any]]) -> CitationStyle:
        """Import a style from form data.

        Raises:
            StyleValidationError: If the form is incomplete
        """
        if not isinstance(form, StyleFormData):
            try:
                form = StyleFormData.model_validate(dict(form))
            except ValidationError as e:
                location = _first_error_location(e)
                raise StyleValidationError(
                    f"Style form is invalid at '{location}': {e.errors()[0]['msg']}",
                    field=location,
                ) from e
        return self.validate_style(form.model_dump(by_alias=True, mode="json"))

    def validate_style(self, data: Any) -> CitationStyle:
        """Check a raw style definition and build the style.

        Imported styles are never system styles.

        Raises:
            StyleValidationError: Naming the first missing requirement
        """
        if not isinstance(data, Mapping):
            raise StyleValidationError("Style definition must be a JSON object")

        for key in ("id", "name", "displayName"):
            value = _lookup(data, key, "display_name" if key == "displayName" else key)
            if not value:
                raise StyleValidationError(
                    f"Style must have id, name, and displayName (missing '{key}')", field=key
                )

        sort = data.get("sort")
        if not isinstance(sort, Mapping) or not sort.get("mode"):
            raise StyleValidationError("Style must have sort configuration with a mode", field="sort")

        if not isinstance(_lookup(data, "authorRules", "author_rules"), Mapping):
            raise StyleValidationError("Style must have authorRules", field="authorRules")

        template = data.get("template")
        if not isinstance(template, str) or not template.strip():
            raise StyleValidationError("Style must have template", field="template")

        missing = [p for p in REQUIRED_PLACEHOLDERS if p not in template]
        if missing:
            raise StyleValidationError(
                f"Template must include {', '.join(missing)}", field="template"
            )

        try:
            return CitationStyle.model_validate({**data, "isSystem": False})
        except ValidationError as e:
            location = _first_error_location(e)
            raise StyleValidationError(
                f"Invalid style definition at '{location}': {e.errors()[0]['msg']}",
                field=location,
            ) from e

    def _fetch(self, url: str) -> httpx.Response:
        if self.client is not None:
            return self.client.get(url)
        with httpx.Client(timeout=self.timeout, follow_redirects=True) as client:
            return client.get(url)
