"""citekit - Citation formatting engine for manuscripts."""

from citekit.models.document import Manuscript
from citekit.models.paper import PaperData
from citekit.references.manager import ReferenceManager
from citekit.styles.types import CitationStyle

__version__ = "0.1.0"
__all__ = ["ReferenceManager", "Manuscript", "PaperData", "CitationStyle"]
