"""JavaScript/TypeScript feature extractor using tree-sitter."""

from __future__ import annotations

import logging
from pathlib import PurePosixPath

import tree_sitter_javascript as tsjs
import tree_sitter_typescript as tsts
from tree_sitter import Language, Node, Parser

from ..config import DEFAULT_AMBIGUOUS_METHODS
from ..errors import ErrorReporter, ParseError, ValidationError
from ._tree import PositionMapper, describe_error, node_text
from .api_tables import (
    ARRAY_ONLY_METHODS,
    GLOBAL_FUNCTIONS,
    MEMBER_PATHS,
    PREFIX_ROOTS,
    STORAGE_OBJECTS,
    STRING_ONLY_METHODS,
)
from .models import ExtractionResult
from .protocol import TypeResolver

logger = logging.getLogger(__name__)

JS_LANGUAGE = Language(tsjs.language())
TS_LANGUAGE = Language(tsts.language_typescript())
TSX_LANGUAGE = Language(tsts.language_tsx())

# Map file extensions to tree-sitter languages
_LANG_MAP: dict[str, Language] = {
    ".js": JS_LANGUAGE,
    ".jsx": JS_LANGUAGE,
    ".mjs": JS_LANGUAGE,
    ".cjs": JS_LANGUAGE,
    ".ts": TS_LANGUAGE,
    ".mts": TS_LANGUAGE,
    ".cts": TS_LANGUAGE,
    ".tsx": TSX_LANGUAGE,
}

_MEMBER_TYPES = frozenset({"member_expression", "subscript_expression"})


class ScriptFeatureExtractor:
    """Extract web platform API usages from script source.

    Only syntax is available, so a member call such as ``value.includes(x)``
    is classified by method name. Names that exist on both Array and String
    go through a fixed tie-break table unless a TypeResolver answers first.
    """

    language = "JavaScript"

    def __init__(
        self,
        reporter: ErrorReporter | None = None,
        type_resolver: TypeResolver | None = None,
        ambiguous_defaults: dict[str, str] | None = None,
    ) -> None:
        self._reporter = reporter if reporter is not None else ErrorReporter()
        self._type_resolver = type_resolver
        self._ambiguous = dict(DEFAULT_AMBIGUOUS_METHODS if ambiguous_defaults is None else ambiguous_defaults)

    def extract(self, text: str, file_path: str | None = None) -> ExtractionResult:
        result = ExtractionResult()
        try:
            if not isinstance(text, str):
                raise ValidationError("Invalid JavaScript content provided")
            if not text.strip():
                return result

            source = text.encode("utf-8")
            root = self._parse(source, file_path)
            mapper = PositionMapper(source)
            self._collect(root, mapper, result)
        except ValidationError as e:
            self._reporter.validation_error(e.message, "JavaScript parsing validation")
            return ExtractionResult()
        except ParseError as e:
            self._reporter.parser_error(e, self.language, "Parsing JavaScript content with tree-sitter")
            return ExtractionResult.failed(e.message)

        logger.debug("Extracted %d JavaScript features", len(result.features))
        return result

    def extract_features(self, text: str, file_path: str | None = None) -> list[str]:
        return self.extract(text, file_path).features

    def resolve_path(self, segments: list[str]) -> str | None:
        """Map a dotted member path to a feature id, most specific rule first."""
        if not segments:
            return None
        path = ".".join(segments)
        if path in MEMBER_PATHS:
            return MEMBER_PATHS[path]
        if len(segments) == 1:
            return GLOBAL_FUNCTIONS.get(segments[0])
        if len(segments) == 2:
            feature_id = self._resolve_pair(segments[0], segments[1])
            if feature_id:
                return feature_id
        root = PREFIX_ROOTS.get(segments[0])
        if root:
            return f"api.{root}.{segments[1]}"
        return None

    def _resolve_pair(self, object_name: str, member: str) -> str | None:
        if object_name in STORAGE_OBJECTS:
            return STORAGE_OBJECTS[object_name]
        if self._type_resolver is not None:
            owner = self._type_resolver.resolve_owner(object_name, member)
            if owner:
                return f"api.{owner}.{member}"
        if member in ARRAY_ONLY_METHODS:
            return f"api.Array.{member}"
        if member in STRING_ONLY_METHODS:
            return f"api.String.{member}"
        owner = self._ambiguous.get(member)
        if owner:
            return f"api.{owner}.{member}"
        return None

    def _get_language(self, file_path: str | None) -> Language:
        """Pick the right tree-sitter language from file extension."""
        if not file_path:
            return TSX_LANGUAGE
        ext = PurePosixPath(file_path).suffix.lower()
        return _LANG_MAP.get(ext, TSX_LANGUAGE)

    def _parse(self, source: bytes, file_path: str | None) -> Node:
        parser = Parser(self._get_language(file_path))
        root = parser.parse(source).root_node
        if root.has_error:
            raise ParseError(self.language, describe_error(root))
        return root

    def _collect(self, root: Node, mapper: PositionMapper, result: ExtractionResult) -> None:
        stack: list[tuple[Node, bool]] = [(root, True)]
        while stack:
            node, analyze = stack.pop()
            if analyze:
                if node.type == "call_expression":
                    self._visit_call(node, mapper, result)
                elif node.type in _MEMBER_TYPES:
                    self._visit_member(node, node, mapper, result)
            for child in reversed(node.children):
                stack.append((child, not _is_inner_chain(node, child)))

    def _visit_call(self, node: Node, mapper: PositionMapper, result: ExtractionResult) -> None:
        callee = node.child_by_field_name("function")
        if callee is None:
            return
        if callee.type == "identifier":
            feature_id = GLOBAL_FUNCTIONS.get(node_text(callee))
            if feature_id:
                result.record(feature_id, mapper.node_range(node))
        elif callee.type in _MEMBER_TYPES:
            self._visit_member(callee, node, mapper, result)

    def _visit_member(self, node: Node, span: Node, mapper: PositionMapper, result: ExtractionResult) -> None:
        segments = member_path(node)
        if segments is None:
            return
        feature_id = self.resolve_path(segments)
        if feature_id:
            result.record(feature_id, mapper.node_range(span))


def member_path(node: Node) -> list[str] | None:
    """Dotted segments of a static member chain, or None if any part is dynamic."""
    segments: list[str] = []
    current = node
    while current.type in _MEMBER_TYPES:
        if current.type == "member_expression":
            prop = current.child_by_field_name("property")
            if prop is None or prop.type != "property_identifier":
                return None
            segments.append(node_text(prop))
        else:
            index = current.child_by_field_name("index")
            key = _string_literal(index)
            if key is None:
                return None
            segments.append(key)
        current = current.child_by_field_name("object")
        if current is None:
            return None
    if current.type != "identifier":
        return None
    segments.append(node_text(current))
    segments.reverse()
    return segments


def _string_literal(node: Node | None) -> str | None:
    if node is None or node.type != "string":
        return None
    fragments = [c for c in node.children if c.type == "string_fragment"]
    if len(fragments) != 1:
        return None
    return node_text(fragments[0])


def _is_inner_chain(parent: Node, child: Node) -> bool:
    """True when ``child`` is already covered by the chain or call above it."""
    if child.type not in _MEMBER_TYPES:
        return False
    if parent.type in _MEMBER_TYPES:
        return parent.child_by_field_name("object") == child
    if parent.type == "call_expression":
        return parent.child_by_field_name("function") == child
    return False
