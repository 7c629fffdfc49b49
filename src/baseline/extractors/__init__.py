"""Per-language feature extractors."""

from .models import ExtractionResult, SourceRange
from .protocol import FeatureExtractor, TypeResolver
from .style import StyleFeatureExtractor
from .script import ScriptFeatureExtractor
from .markup import MarkupFeatureExtractor
from .registry import ExtractorKind, ExtractorRegistry, kind_for_language, kind_for_path

__all__ = [
    "ExtractionResult",
    "SourceRange",
    "FeatureExtractor",
    "TypeResolver",
    "StyleFeatureExtractor",
    "ScriptFeatureExtractor",
    "MarkupFeatureExtractor",
    "ExtractorKind",
    "ExtractorRegistry",
    "kind_for_language",
    "kind_for_path",
]
