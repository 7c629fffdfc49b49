"""Tests for the compatibility dataset accessor."""

import asyncio
import json
from datetime import date

import pytest

from baseline.dataset import BaselineDataset
from baseline.errors import DataLoadError, ErrorCategory, ErrorReporter
from baseline.models import BaselineStatus, FeatureRecord


class TestInitialize:
    @pytest.mark.asyncio
    async def test_initialize_loads_records(self, dataset_file):
        data = BaselineDataset(dataset_file)

        assert not data.is_initialized
        await data.initialize()

        assert data.is_initialized
        assert len(data) == 9
        assert "api.fetch" in data

    @pytest.mark.asyncio
    async def test_concurrent_initialize_shares_one_load(self, dataset_file):
        data = BaselineDataset(dataset_file)
        calls = []
        original = data._load_records

        def counting():
            calls.append(1)
            return original()

        data._load_records = counting

        await asyncio.gather(data.initialize(), data.initialize(), data.initialize())

        assert len(calls) == 1
        assert data.is_initialized

    @pytest.mark.asyncio
    async def test_missing_file_raises_data_load_error(self, tmp_path):
        notified = []
        reporter = ErrorReporter(notifier=notified.append)
        data = BaselineDataset(tmp_path / "missing.json", reporter)

        with pytest.raises(DataLoadError):
            await data.initialize()

        assert not data.is_initialized
        assert len(notified) == 1
        assert notified[0].category == ErrorCategory.DATA_LOAD

    @pytest.mark.asyncio
    async def test_failed_load_can_be_retried(self, tmp_path):
        path = tmp_path / "later.json"
        data = BaselineDataset(path)

        with pytest.raises(DataLoadError):
            await data.initialize()

        path.write_text(json.dumps({"api.fetch": {"name": "Fetch", "status": {"baseline": "high"}}}))
        await data.initialize()

        assert data.is_baseline_supported("api.fetch")

    def test_malformed_yaml_raises(self, tmp_path):
        path = tmp_path / "broken.yml"
        path.write_text("features: [unclosed", encoding="utf-8")

        with pytest.raises(DataLoadError):
            BaselineDataset(path).load()

    def test_non_mapping_root_raises(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")

        with pytest.raises(DataLoadError):
            BaselineDataset(path).load()

    def test_scalar_status_raises(self, tmp_path):
        path = tmp_path / "scalar.yml"
        path.write_text("css.properties.gap:\n  name: gap\n  status: high\n", encoding="utf-8")

        with pytest.raises(DataLoadError, match="status must be a mapping"):
            BaselineDataset(path).load()

    @pytest.mark.asyncio
    async def test_scalar_status_can_be_retried(self, tmp_path):
        path = tmp_path / "scalar.yml"
        path.write_text("css.properties.gap:\n  status: high\n", encoding="utf-8")
        data = BaselineDataset(path)

        with pytest.raises(DataLoadError):
            await data.initialize()

        path.write_text("css.properties.gap:\n  status:\n    baseline: high\n", encoding="utf-8")
        await data.initialize()

        assert data.is_baseline_supported("css.properties.gap")

    def test_json_web_features_layout(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text(
            json.dumps(
                {
                    "features": {
                        "css.properties.gap": {
                            "name": "gap",
                            "status": {"baseline": "low", "baseline_low_date": "≤2021-04-26"},
                            "spec": ["https://drafts.csswg.org/css-align-3/#gap-shorthand"],
                        },
                        "not-a-feature": "ignored",
                    }
                }
            ),
            encoding="utf-8",
        )
        data = BaselineDataset(path)
        data.load()

        record = data.get_feature_data("css.properties.gap")
        assert record.baseline_status == BaselineStatus.LIMITED
        assert record.low_date == date(2021, 4, 26)
        assert record.spec_url == "https://drafts.csswg.org/css-align-3/#gap-shorthand"
        assert "not-a-feature" not in data

    def test_bundled_dataset_loads(self):
        data = BaselineDataset()
        data.load()

        assert len(data) > 50
        assert data.is_baseline_supported("css.properties.display")
        assert "html.elements.dialog" in data


class TestQueries:
    def test_get_feature_data(self, dataset):
        record = dataset.get_feature_data("css.properties.display")

        assert isinstance(record, FeatureRecord)
        assert record.name == "display"
        assert record.baseline_status == BaselineStatus.SUPPORTED
        assert record.high_date == date(2018, 1, 29)
        assert record.doc_url == "https://developer.mozilla.org/docs/Web/CSS/display"

    def test_unknown_id_returns_none(self, dataset):
        assert dataset.get_feature_data("css.properties.nope") is None

    @pytest.mark.parametrize("bad_id", ["", None, 42, ["api.fetch"]])
    def test_invalid_ids_never_raise(self, dataset, reporter, bad_id):
        assert dataset.get_feature_data(bad_id) is None
        assert dataset.is_baseline_supported(bad_id) is False
        assert reporter.by_category(ErrorCategory.VALIDATION)

    def test_query_before_initialize(self, dataset_file, reporter):
        data = BaselineDataset(dataset_file, reporter)

        assert data.get_feature_data("api.fetch") is None
        assert data.feature_ids() == []
        assert len(data) == 0
        assert reporter.by_category(ErrorCategory.VALIDATION)

    @pytest.mark.parametrize(
        "feature_id, expected",
        [
            ("css.properties.gap", False),  # baseline: false
            ("api.fetch", True),  # baseline: true
            ("css.properties.user-select", True),  # baseline: low
            ("css.properties.display", True),  # baseline: high
            ("api.unknown", False),
        ],
    )
    def test_is_baseline_supported(self, dataset, feature_id, expected):
        assert dataset.is_baseline_supported(feature_id) is expected

    def test_feature_ids(self, dataset):
        ids = dataset.feature_ids()

        assert "api.Clipboard.writeText" in ids
        assert len(ids) == len(dataset)

    def test_contains_guards_non_strings(self, dataset):
        assert 3 not in dataset
        assert "html.elements.p" in dataset
