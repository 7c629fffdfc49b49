"""Protocol definitions for feature extractors.

Extractors turn raw source text into canonical feature ids. Three
implementations exist:
- StyleFeatureExtractor: tree-sitter CSS
- ScriptFeatureExtractor: tree-sitter JavaScript / TypeScript / TSX
- MarkupFeatureExtractor: tree-sitter HTML
"""

from __future__ import annotations
from typing import Protocol, runtime_checkable, TYPE_CHECKING

if TYPE_CHECKING:
    from .models import ExtractionResult


@runtime_checkable
class FeatureExtractor(Protocol):
    """Protocol for per-language feature extraction.

    Methods receive source text rather than reading files. Implementations
    are stateless: the same text always yields an equal result, and a parse
    failure yields an empty result instead of raising.
    """

    language: str

    def extract(self, text: str) -> ExtractionResult:
        """Extract features and their source ranges.

        Args:
            text: Full content of the source unit.

        Returns:
            ExtractionResult with deduplicated ids and per-occurrence ranges.
        """
        ...

    def extract_features(self, text: str) -> list[str]:
        """Extract only the feature ids, without locations."""
        ...


@runtime_checkable
class TypeResolver(Protocol):
    """Optional type information for script member calls.

    When a host can tell what an expression's type is (a language server,
    a symbol table), it can plug in here. The script extractor asks it
    before falling back to its syntax-only classifier.
    """

    def resolve_owner(self, object_name: str, member: str) -> str | None:
        """Return the owning interface (e.g. "Array") or None if unknown.

        Args:
            object_name: Identifier on the left of the member access.
            member: Property or method name on the right.
        """
        ...
