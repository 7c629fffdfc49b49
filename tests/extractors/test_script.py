"""Tests for the JavaScript/TypeScript feature extractor."""

import pytest

from baseline.errors import ErrorCategory
from baseline.extractors.models import SourceRange
from baseline.extractors.protocol import TypeResolver
from baseline.extractors.script import ScriptFeatureExtractor


SAMPLE_JS = '''import { render } from './view.js';

async function copyLink(url) {
    await navigator.clipboard.writeText(url);
    const response = await fetch(url).then((r) => r.json());
    localStorage.setItem('last', url);
    return response;
}

document.addEventListener('DOMContentLoaded', () => {
    const items = Object.entries(state);
    items.forEach(render);
    requestAnimationFrame(tick);
});
'''


class ArrayResolver:
    """Resolver that knows every ``list*`` variable is an array."""

    def resolve_owner(self, object_name, member):
        return "Array" if object_name.startswith("list") else None


@pytest.fixture
def extractor(reporter):
    return ScriptFeatureExtractor(reporter)


class TestResolvePath:
    @pytest.mark.parametrize(
        "path, expected",
        [
            ("navigator.clipboard.writeText", "api.Clipboard.writeText"),
            ("fetch", "api.fetch"),
            ("setTimeout", "api.Window.setTimeout"),
            ("sessionStorage.clear", "api.Storage"),
            ("indexedDB.deleteDatabase", "api.IDBFactory"),
            ("items.flatMap", "api.Array.flatMap"),
            ("title.padStart", "api.String.padStart"),
            ("value.includes", "api.String.includes"),
            ("list.at", "api.Array.at"),
            ("navigator.onLine", "api.Navigator.onLine"),
            ("document.body.append", "api.Document.body"),
            ("window.localStorage.setItem", "api.Window.localStorage"),
            ("console.log", None),
            ("a.b.c", None),
            ("parseInt", None),
        ],
    )
    def test_resolution_order(self, extractor, path, expected):
        assert extractor.resolve_path(path.split(".")) == expected

    def test_ambiguous_defaults_are_configurable(self):
        extractor = ScriptFeatureExtractor(ambiguous_defaults={"includes": "Array"})

        assert extractor.resolve_path(["value", "includes"]) == "api.Array.includes"
        assert extractor.resolve_path(["value", "at"]) is None

    def test_type_resolver_consulted_before_heuristics(self):
        extractor = ScriptFeatureExtractor(type_resolver=ArrayResolver())

        assert isinstance(ArrayResolver(), TypeResolver)
        assert extractor.resolve_path(["listOfNames", "includes"]) == "api.Array.includes"
        assert extractor.resolve_path(["name", "includes"]) == "api.String.includes"

    def test_storage_names_win_over_resolver(self):
        extractor = ScriptFeatureExtractor(type_resolver=ArrayResolver())

        assert extractor.resolve_path(["localStorage", "map"]) == "api.Storage"


class TestScriptFeatureExtractor:
    def test_scenario_clipboard_and_fetch(self, extractor):
        result = extractor.extract("navigator.clipboard.writeText('x'); fetch('/x'); fetch('/y');")

        assert result.features == ["api.Clipboard.writeText", "api.fetch"]
        assert result.locations["api.Clipboard.writeText"] == [SourceRange(0, 0, 0, 34)]
        assert len(result.locations["api.fetch"]) == 2
        assert result.locations["api.fetch"][1].start_column == 49

    def test_sample_module(self, extractor):
        result = extractor.extract(SAMPLE_JS)

        assert result.features == [
            "api.Clipboard.writeText",
            "api.fetch",
            "api.Storage",
            "api.EventTarget.addEventListener",
            "api.Object.entries",
            "api.Array.forEach",
            "api.Window.requestAnimationFrame",
        ]

    def test_inner_chain_is_not_a_separate_usage(self, extractor):
        result = extractor.extract("navigator.clipboard.readText();")

        assert result.features == ["api.Clipboard.readText"]
        assert "api.Clipboard" not in result.locations

    def test_plain_member_access_range(self, extractor):
        result = extractor.extract("const online = navigator.onLine;")

        assert result.locations["api.Navigator.onLine"] == [SourceRange(0, 15, 0, 31)]

    def test_computed_access_is_unresolvable(self, extractor):
        result = extractor.extract("navigator[key].share({}); navigator[`clip`].readText();")

        assert result.features == []

    def test_string_subscript_is_resolved(self, extractor):
        result = extractor.extract("navigator['clipboard'].writeText('x');")

        assert result.features == ["api.Clipboard.writeText"]

    def test_optional_chaining(self, extractor):
        result = extractor.extract("navigator?.clipboard?.writeText('x'); navigator.share?.({});")

        assert result.features == ["api.Clipboard.writeText", "api.Navigator.share"]

    def test_non_identifier_root_is_unresolvable(self, extractor):
        result = extractor.extract("this.items.map(fn); getList().filter(Boolean); [1, 2].includes(1);")

        assert result.features == []

    def test_constructor_member(self, extractor):
        result = extractor.extract("const seg = new Intl.Segmenter('en', { granularity: 'word' });")

        assert result.features == ["api.Intl.Segmenter"]

    def test_jsx_by_default(self, extractor):
        result = extractor.extract("const el = <button onClick={() => fetch('/a')}>Go</button>;")

        assert result.features == ["api.fetch"]

    def test_typescript_grammar_from_path(self, extractor):
        source = "const n = <number>value;\nconst found = items.findLast((x: number) => x > n);"

        assert extractor.extract(source, "util.ts").features == ["api.Array.findLast"]
        assert extractor.extract(source, "util.tsx").is_empty

    def test_columns_are_characters(self, extractor):
        result = extractor.extract("const s = 'héllo'; fetch(s);")

        assert result.locations["api.fetch"] == [SourceRange(0, 19, 0, 27)]

    @pytest.mark.parametrize("text", ["", "\n\n  "])
    def test_empty_input(self, extractor, text):
        result = extractor.extract(text)

        assert result.features == []
        assert result.locations == {}

    def test_syntax_error_yields_empty_result(self, extractor, reporter):
        result = extractor.extract("fetch('/a');\nconst = ;")

        assert result.is_empty
        assert result.parse_error
        assert reporter.by_category(ErrorCategory.PARSER)

    def test_non_string_input(self, extractor, reporter):
        assert extractor.extract(b"fetch()").is_empty
        assert reporter.by_category(ErrorCategory.VALIDATION)

    def test_idempotent(self, extractor):
        assert extractor.extract(SAMPLE_JS).to_dict() == extractor.extract(SAMPLE_JS).to_dict()
