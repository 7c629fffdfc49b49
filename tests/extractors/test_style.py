"""Tests for the CSS feature extractor."""

import pytest

from baseline.errors import ErrorCategory, ErrorReporter
from baseline.extractors.models import SourceRange
from baseline.extractors.style import (
    StyleFeatureExtractor,
    at_rule_feature_id,
    find_unbalanced,
    property_feature_id,
)


SAMPLE_CSS = '''
.card {
  display: grid;
  gap: 1rem;
  -webkit-user-select: none;
  user-select: none;
}

@media (min-width: 600px) {
  .card:hover {
    transform: scale(1.05);
  }
}

@supports (display: grid) {
  .grid { grid-template-columns: 1fr 1fr; }
}
'''


@pytest.fixture
def extractor(reporter):
    return StyleFeatureExtractor(reporter)


class TestFeatureIds:
    @pytest.mark.parametrize("prefix", ["-webkit-", "-moz-", "-ms-", "-o-"])
    def test_vendor_prefixes_collapse(self, prefix):
        assert property_feature_id(f"{prefix}transform") == property_feature_id("transform")

    def test_property_names_are_lowercased(self):
        assert property_feature_id("Display") == "css.properties.display"

    def test_custom_properties_keep_their_name(self):
        assert property_feature_id("--brand-color") == "css.properties.--brand-color"
        assert property_feature_id("--Brand") == "css.properties.--Brand"

    def test_prefixed_keyframes_override(self):
        assert at_rule_feature_id("-webkit-keyframes") == "css.at-rules.keyframes"
        assert at_rule_feature_id("keyframes") == "css.at-rules.keyframes"

    def test_unknown_at_rule_kept_verbatim(self):
        assert at_rule_feature_id("container") == "css.at-rules.container"


class TestFindUnbalanced:
    @pytest.mark.parametrize(
        "text",
        [
            "a { color: red }",
            "a { content: '}' }",
            "/* { */ a { b: c }",
            "a { background: url(x.png) }",
            "a::after { content: \"it's\" }",
        ],
    )
    def test_balanced(self, text):
        assert find_unbalanced(text) is None

    def test_unclosed_block_position(self):
        assert find_unbalanced("a {}\n.b { color: red") == "Unclosed block at line 2, column 4"

    def test_unexpected_closer(self):
        assert find_unbalanced("a { } }") == "Unexpected } at line 1, column 7"

    def test_mismatched_bracket(self):
        assert find_unbalanced("a { b: f(1] }").startswith("Unexpected ]")

    def test_unclosed_string_and_comment(self):
        assert find_unbalanced("a { b: 'x").startswith("Unclosed string")
        assert find_unbalanced("/* x").startswith("Unclosed comment")


class TestStyleFeatureExtractor:
    def test_scenario_declarations(self, extractor):
        result = extractor.extract(".c{display:flex;-webkit-transform:scale(1);gap:1rem}")

        assert result.features == [
            "css.properties.display",
            "css.properties.transform",
            "css.properties.gap",
        ]
        assert result.locations["css.properties.display"] == [SourceRange(0, 3, 0, 10)]

    def test_walks_nested_blocks_and_at_rules(self, extractor):
        result = extractor.extract(SAMPLE_CSS)

        assert result.features == [
            "css.properties.display",
            "css.properties.gap",
            "css.properties.user-select",
            "css.at-rules.media",
            "css.properties.transform",
            "css.at-rules.supports",
            "css.properties.grid-template-columns",
        ]

    def test_every_occurrence_has_a_range(self, extractor):
        result = extractor.extract(SAMPLE_CSS)

        ranges = result.locations["css.properties.user-select"]
        assert len(ranges) == 2
        assert ranges[0].start_line == 4
        assert ranges[1].start_line == 5
        assert ranges[1].start_column == 2

    def test_at_rule_range_covers_keyword(self, extractor):
        result = extractor.extract("@media print { p { color: black } }")

        assert result.locations["css.at-rules.media"] == [SourceRange(0, 0, 0, 6)]

    def test_prefixed_keyframes(self, extractor):
        css = "@-webkit-keyframes spin { from { opacity: 0 } to { opacity: 1 } }\n@keyframes spin { }"
        result = extractor.extract(css)

        assert result.features[0] == "css.at-rules.keyframes"
        assert len(result.locations["css.at-rules.keyframes"]) == 2

    def test_custom_properties(self, extractor):
        result = extractor.extract(":root { --brand: #333; --gap: 4px; } a { color: var(--brand); }")

        assert result.features == [
            "css.properties.--brand",
            "css.properties.--gap",
            "css.properties.color",
        ]
        assert result.locations["css.properties.--gap"] == [SourceRange(0, 23, 0, 28)]

    def test_columns_are_characters(self, extractor):
        result = extractor.extract("/*é*/.a{gap:1px}")

        assert result.locations["css.properties.gap"] == [SourceRange(0, 8, 0, 11)]

    @pytest.mark.parametrize("text", ["", "   \n\t"])
    def test_empty_input(self, extractor, text):
        result = extractor.extract(text)

        assert result.features == []
        assert result.locations == {}
        assert result.parse_error is None

    def test_syntax_error_yields_empty_result(self, extractor, reporter):
        result = extractor.extract(".a { color: red; } }}} {{{ @@")

        assert result.is_empty
        assert result.parse_error
        assert reporter.by_category(ErrorCategory.PARSER)

    def test_range_media_query_keeps_the_rest(self, extractor):
        result = extractor.extract("@media (width >= 600px) { a { color: red } }")

        assert result.parse_error is None
        assert "css.properties.color" in result.features

    def test_layered_import_keeps_later_rules(self, extractor):
        result = extractor.extract("@import url(x.css) layer(base);\na { color: red }")

        assert result.parse_error is None
        assert result.locations["css.properties.color"] == [SourceRange(1, 4, 1, 9)]

    def test_nested_rules(self, extractor):
        result = extractor.extract(".a { color: red; &:hover { color: blue; } }")

        assert result.features == ["css.properties.color"]
        assert len(result.locations["css.properties.color"]) == 2

    def test_preprocessor_variables_are_not_properties(self, extractor):
        result = extractor.extract("$gap: 1rem;\n.a { gap: $gap; }")

        assert result.parse_error is None
        assert result.features == ["css.properties.gap"]
        assert result.locations["css.properties.gap"] == [SourceRange(1, 5, 1, 8)]

    @pytest.mark.parametrize(
        "text",
        [
            ".a { color: red",
            ".a { content: 'open }",
            "/* never closed .a { color: red }",
            "a { color: red } }",
        ],
    )
    def test_unbalanced_input_yields_empty_result(self, extractor, reporter, text):
        result = extractor.extract(text)

        assert result.is_empty
        assert result.parse_error
        assert reporter.by_category(ErrorCategory.PARSER)

    def test_nothing_recognizable_yields_empty_result(self, extractor):
        result = extractor.extract("%%% !!! ???")

        assert result.is_empty
        assert result.parse_error

    def test_non_string_input(self, reporter):
        result = StyleFeatureExtractor(reporter).extract(None)

        assert result.is_empty
        assert reporter.by_category(ErrorCategory.VALIDATION)

    def test_idempotent(self, extractor):
        assert extractor.extract(SAMPLE_CSS).to_dict() == extractor.extract(SAMPLE_CSS).to_dict()

    def test_extract_features(self):
        assert StyleFeatureExtractor().extract_features("a{color:red}") == ["css.properties.color"]
