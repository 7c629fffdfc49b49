"""Routing from editor language ids and file suffixes to extractors."""

from __future__ import annotations

from enum import Enum
from pathlib import PurePosixPath
from typing import Optional

from ..errors import ErrorReporter
from .markup import MarkupFeatureExtractor
from .models import ExtractionResult
from .protocol import TypeResolver
from .script import ScriptFeatureExtractor
from .style import StyleFeatureExtractor


class ExtractorKind(str, Enum):
    STYLE = "style"
    SCRIPT = "script"
    MARKUP = "markup"


# Editor language id to extractor
_LANGUAGE_IDS: dict[str, ExtractorKind] = {
    "css": ExtractorKind.STYLE,
    "scss": ExtractorKind.STYLE,
    "less": ExtractorKind.STYLE,
    "javascript": ExtractorKind.SCRIPT,
    "typescript": ExtractorKind.SCRIPT,
    "javascriptreact": ExtractorKind.SCRIPT,
    "typescriptreact": ExtractorKind.SCRIPT,
    "html": ExtractorKind.MARKUP,
    "xml": ExtractorKind.MARKUP,
}

# File extension to editor language id
_SUFFIXES: dict[str, str] = {
    ".css": "css",
    ".scss": "scss",
    ".less": "less",
    ".js": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".jsx": "javascriptreact",
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "typescriptreact",
    ".html": "html",
    ".htm": "html",
    ".xhtml": "html",
    ".xml": "xml",
}

# Script grammars keyed by language id, used when the identity has no suffix
_SCRIPT_HINTS: dict[str, str] = {
    "javascript": "source.js",
    "javascriptreact": "source.jsx",
    "typescript": "source.ts",
    "typescriptreact": "source.tsx",
}


def kind_for_language(language_id: str) -> Optional[ExtractorKind]:
    if not isinstance(language_id, str):
        return None
    return _LANGUAGE_IDS.get(language_id.strip().lower())


def language_for_path(file_path: str) -> Optional[str]:
    ext = PurePosixPath(file_path).suffix.lower()
    return _SUFFIXES.get(ext)


def kind_for_path(file_path: str) -> Optional[ExtractorKind]:
    language_id = language_for_path(file_path)
    return _LANGUAGE_IDS.get(language_id) if language_id else None


class ExtractorRegistry:
    """Holds one extractor per kind and dispatches extraction to it."""

    def __init__(
        self,
        reporter: ErrorReporter | None = None,
        type_resolver: TypeResolver | None = None,
        ambiguous_defaults: dict[str, str] | None = None,
    ) -> None:
        reporter = reporter if reporter is not None else ErrorReporter()
        self.style = StyleFeatureExtractor(reporter)
        self.script = ScriptFeatureExtractor(reporter, type_resolver, ambiguous_defaults)
        self.markup = MarkupFeatureExtractor(reporter)

    def get(self, kind: ExtractorKind):
        if kind == ExtractorKind.STYLE:
            return self.style
        if kind == ExtractorKind.SCRIPT:
            return self.script
        return self.markup

    def extract(self, language_id: str, text: str, identity: str | None = None) -> Optional[ExtractionResult]:
        """Run the extractor for ``language_id``; None for unsupported languages."""
        kind = kind_for_language(language_id)
        if kind is None:
            return None
        if kind == ExtractorKind.SCRIPT:
            return self.script.extract(text, _script_path(language_id, identity))
        return self.get(kind).extract(text)


def _script_path(language_id: str, identity: str | None) -> str | None:
    if identity and language_for_path(identity) in _SCRIPT_HINTS:
        return identity
    return _SCRIPT_HINTS.get(language_id.strip().lower())
