"""HTML feature extractor using tree-sitter."""

from __future__ import annotations

import logging
import re

import tree_sitter_html as tshtml
from tree_sitter import Language, Node, Parser

from ..errors import ErrorReporter, ValidationError
from ._tree import PositionMapper, node_text, walk
from .models import ExtractionResult

logger = logging.getLogger(__name__)

HTML_LANGUAGE = Language(tshtml.language())

_ELEMENT_TYPES = frozenset({"element", "script_element", "style_element"})
_TAG_TYPES = frozenset({"start_tag", "self_closing_tag"})

# Attributes present on nearly every element
_IGNORED_ATTRIBUTES = frozenset({"class", "id", "style", "title", "lang", "dir"})
_IGNORED_PREFIXES = ("data-", "aria-")
_EVENT_HANDLER = re.compile(r"^on[a-z]+$")

# (element, attribute) pairs tracked under the element's own id
NOTABLE_ATTRIBUTES: dict[str, frozenset[str]] = {
    "a": frozenset({"download", "ping", "referrerpolicy", "rel"}),
    "audio": frozenset({"autoplay", "controls", "loop", "muted", "preload"}),
    "button": frozenset({"popovertarget", "popovertargetaction", "formaction"}),
    "details": frozenset({"open", "name"}),
    "dialog": frozenset({"open"}),
    "form": frozenset({"novalidate", "autocomplete"}),
    "iframe": frozenset({"allow", "loading", "referrerpolicy", "sandbox", "srcdoc"}),
    "img": frozenset({"decoding", "fetchpriority", "loading", "sizes", "srcset"}),
    "input": frozenset({
        "accept",
        "autocomplete",
        "capture",
        "list",
        "max",
        "min",
        "multiple",
        "pattern",
        "placeholder",
        "required",
        "step",
    }),
    "link": frozenset({"as", "crossorigin", "fetchpriority", "integrity", "referrerpolicy"}),
    "meta": frozenset({"charset", "http-equiv"}),
    "script": frozenset({
        "async",
        "crossorigin",
        "defer",
        "integrity",
        "nomodule",
        "referrerpolicy",
        "type",
    }),
    "select": frozenset({"multiple", "required"}),
    "source": frozenset({"media", "sizes", "srcset"}),
    "template": frozenset({"shadowrootmode"}),
    "textarea": frozenset({"placeholder", "required", "maxlength", "minlength"}),
    "video": frozenset({"autoplay", "controls", "loop", "muted", "playsinline", "poster", "preload"}),
}


def is_ignored_attribute(name: str) -> bool:
    return (
        name in _IGNORED_ATTRIBUTES
        or name.startswith(_IGNORED_PREFIXES)
        or bool(_EVENT_HANDLER.match(name))
    )


def attribute_feature_id(tag: str, attr: str) -> str:
    if attr in NOTABLE_ATTRIBUTES.get(tag, ()):
        return f"html.elements.{tag}.{attr}"
    return f"html.global_attributes.{attr}"


class MarkupFeatureExtractor:
    """Extract HTML elements and attributes from markup.

    The HTML grammar recovers from almost anything, so malformed markup
    still yields whatever elements could be recognized.
    """

    language = "HTML"

    def __init__(self, reporter: ErrorReporter | None = None) -> None:
        self._reporter = reporter if reporter is not None else ErrorReporter()

    def extract(self, text: str) -> ExtractionResult:
        result = ExtractionResult()
        try:
            if not isinstance(text, str):
                raise ValidationError("Invalid HTML content provided")
        except ValidationError as e:
            self._reporter.validation_error(e.message, "HTML parsing validation")
            return result
        if not text.strip():
            return result

        source = text.encode("utf-8")
        root = Parser(HTML_LANGUAGE).parse(source).root_node
        if root.has_error:
            logger.debug("HTML content contains recoverable syntax errors")
        mapper = PositionMapper(source)

        for node in walk(root):
            if node.type in _ELEMENT_TYPES:
                tag_node = next((c for c in node.children if c.type in _TAG_TYPES), None)
                self._record_tag(tag_node, mapper, result)
            elif node.type in _TAG_TYPES and _is_orphan(node):
                # Tags left open at end of input are wrapped in an ERROR node
                self._record_tag(node, mapper, result)

        logger.debug("Extracted %d HTML features", len(result.features))
        return result

    def extract_features(self, text: str) -> list[str]:
        return self.extract(text).features

    def _record_tag(self, tag_node: Node | None, mapper: PositionMapper, result: ExtractionResult) -> None:
        if tag_node is None or tag_node.is_missing:
            return
        name_node = next((c for c in tag_node.children if c.type == "tag_name"), None)
        tag = node_text(name_node).strip().lower()
        if not tag:
            return

        result.record(f"html.elements.{tag}", mapper.node_range(tag_node))

        for attribute in tag_node.children:
            if attribute.type != "attribute":
                continue
            attr_name = next((c for c in attribute.children if c.type == "attribute_name"), None)
            attr = node_text(attr_name).strip().lower()
            if not attr or is_ignored_attribute(attr):
                continue
            result.record(attribute_feature_id(tag, attr), mapper.node_range(attribute))


def _is_orphan(tag_node: Node) -> bool:
    parent = tag_node.parent
    return parent is None or parent.type not in _ELEMENT_TYPES
