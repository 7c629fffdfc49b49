"""CSS feature extractor using tree-sitter."""

from __future__ import annotations

import logging
import re
from typing import Optional

import tree_sitter_css as tscss
from tree_sitter import Language, Node, Parser

from ..errors import ErrorReporter, ParseError, ValidationError
from ._tree import PositionMapper, describe_error, node_text, walk
from .models import ExtractionResult

logger = logging.getLogger(__name__)

CSS_LANGUAGE = Language(tscss.language())

_VENDOR_PREFIX = re.compile(r"^-(?:webkit|moz|ms|o)-")

# At-rules whose keyword is not already the feature name
_AT_RULE_OVERRIDES: dict[str, str] = {
    "-webkit-keyframes": "css.at-rules.keyframes",
    "-moz-keyframes": "css.at-rules.keyframes",
    "-o-keyframes": "css.at-rules.keyframes",
    "-ms-viewport": "css.at-rules.viewport",
    "-moz-document": "css.at-rules.document",
}


def property_feature_id(prop: str) -> str:
    """Canonical id for a declared property; vendor prefixes collapse.

    Custom properties keep their own case-sensitive name.
    """
    if prop.startswith("--"):
        return f"css.properties.{prop}"
    return f"css.properties.{_VENDOR_PREFIX.sub('', prop.lower())}"


def at_rule_feature_id(keyword: str) -> str:
    keyword = keyword.lower()
    return _AT_RULE_OVERRIDES.get(keyword, f"css.at-rules.{keyword}")


_CLOSERS = {"}": "{", ")": "(", "]": "["}
_OPENER_NAMES = {"{": "block", "(": "bracket", "[": "bracket"}

# Preprocessor variables ($gap: 1rem, @gap: 1rem) are not properties
_VARIABLE_SIGILS = (b"$", b"@")
_DEFINITION_COLON = re.compile(rb":")


def _position(text: str, offset: int) -> str:
    line = text.count("\n", 0, offset) + 1
    column = offset - (text.rfind("\n", 0, offset) + 1) + 1
    return f"line {line}, column {column}"


def find_unbalanced(text: str) -> Optional[str]:
    """Describe the first unclosed or unexpected block, bracket, string or comment.

    A style sheet with one of these cannot be recovered; other syntax errors
    only cost the construct they appear in.
    """
    stack: list[tuple[str, int]] = []
    i, n = 0, len(text)
    while i < n:
        ch = text[i]
        if text.startswith("/*", i):
            end = text.find("*/", i + 2)
            if end < 0:
                return f"Unclosed comment at {_position(text, i)}"
            i = end + 2
            continue
        if ch in "\"'":
            j = i + 1
            # An unescaped newline ends a bad string
            while j < n and text[j] not in (ch, "\n"):
                j += 2 if text[j] == "\\" else 1
            if j >= n:
                return f"Unclosed string at {_position(text, i)}"
            i = j + 1
            continue
        if ch == "\\":
            i += 2
            continue
        if ch in _OPENER_NAMES:
            stack.append((ch, i))
        elif ch in _CLOSERS:
            if not stack or stack[-1][0] != _CLOSERS[ch]:
                return f"Unexpected {ch} at {_position(text, i)}"
            stack.pop()
        i += 1

    if stack:
        opener, offset = stack[-1]
        return f"Unclosed {_OPENER_NAMES[opener]} at {_position(text, offset)}"
    return None


class StyleFeatureExtractor:
    """Extract CSS properties and at-rules from style sheets.

    Constructs the grammar does not know (range media queries, layered
    imports, preprocessor variables) are skipped and the rest of the sheet
    is still walked. Unbalanced blocks, unclosed strings or comments, and
    sheets with no recognizable rule at all count as parse failures.
    """

    language = "CSS"

    def __init__(self, reporter: ErrorReporter | None = None) -> None:
        self._reporter = reporter if reporter is not None else ErrorReporter()

    def extract(self, text: str) -> ExtractionResult:
        result = ExtractionResult()
        try:
            if not isinstance(text, str):
                raise ValidationError("Invalid CSS content provided")
            if not text.strip():
                return result

            problem = find_unbalanced(text)
            if problem:
                raise ParseError(self.language, problem)

            source = text.encode("utf-8")
            root = Parser(CSS_LANGUAGE).parse(source).root_node
            mapper = PositionMapper(source)

            for node in walk(root):
                if node.type == "declaration":
                    self._record_declaration(node, source, mapper, result)
                elif node.type == "at_rule" or node.type.endswith("_statement"):
                    self._record_at_rule(node, source, mapper, result)

            if root.has_error:
                if result.is_empty:
                    raise ParseError(self.language, describe_error(root))
                logger.debug("Skipped unparsable CSS, first at %s", describe_error(root))
        except ValidationError as e:
            self._reporter.validation_error(e.message, "CSS parsing validation")
            return ExtractionResult()
        except ParseError as e:
            self._reporter.parser_error(e, self.language, "Parsing CSS content with tree-sitter")
            return ExtractionResult.failed(e.message)

        logger.debug("Extracted %d CSS features", len(result.features))
        return result

    def extract_features(self, text: str) -> list[str]:
        return self.extract(text).features

    def _record_declaration(
        self, node: Node, source: bytes, mapper: PositionMapper, result: ExtractionResult
    ) -> None:
        prop_node = next((c for c in node.children if c.type == "property_name"), None)
        prop = node_text(prop_node).strip()
        if not prop:
            return
        start = prop_node.start_byte
        if start > 0 and source[start - 1 : start] in _VARIABLE_SIGILS:
            return
        result.record(property_feature_id(prop), mapper.node_range(prop_node))

    def _record_at_rule(
        self, node: Node, source: bytes, mapper: PositionMapper, result: ExtractionResult
    ) -> None:
        if not node.children:
            return
        keyword_node = node.children[0]
        keyword = node_text(keyword_node)
        if not keyword.startswith("@") or len(keyword) < 2:
            return
        if _DEFINITION_COLON.match(source, keyword_node.end_byte):
            return
        result.record(at_rule_feature_id(keyword[1:]), mapper.node_range(keyword_node))
