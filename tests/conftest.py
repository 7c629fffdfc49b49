"""Pytest configuration and shared fixtures."""

import pytest
from pathlib import Path

from baseline.config import Config
from baseline.dataset import BaselineDataset
from baseline.errors import ErrorReporter


SAMPLE_DATASET = """\
features:
  css.properties.display:
    name: display
    status: {baseline: high, baseline_low_date: 2015-07-29, baseline_high_date: 2018-01-29}
    spec: https://drafts.csswg.org/css-display-3/
    mdn_url: https://developer.mozilla.org/docs/Web/CSS/display
  css.properties.transform:
    name: transform
    status: {baseline: high}
  css.properties.gap:
    name: gap
    status: {baseline: false}
  css.properties.user-select:
    name: user-select
    status: {baseline: low, baseline_low_date: 2024-03-19}
  css.at-rules.container:
    name: "@container"
    status: {baseline: low}
  api.fetch:
    name: Fetch
    status: {baseline: true}
  api.Clipboard.writeText:
    name: Clipboard writeText
    status: {baseline: false}
  html.elements.dialog:
    name: dialog
    status: {baseline: false}
  html.elements.p:
    name: p
    status: {baseline: high}
"""


@pytest.fixture
def config() -> Config:
    """Provide a test configuration with a short debounce."""
    return Config(debounce_delay_ms=50, parse_timeout_ms=5000)


@pytest.fixture
def dataset_file(tmp_path: Path) -> Path:
    """Write a small YAML dataset and return its path."""
    path = tmp_path / "features.yml"
    path.write_text(SAMPLE_DATASET, encoding="utf-8")
    return path


@pytest.fixture
def reporter() -> ErrorReporter:
    return ErrorReporter()


@pytest.fixture
def dataset(dataset_file: Path, reporter: ErrorReporter) -> BaselineDataset:
    """A dataset loaded from the sample file."""
    data = BaselineDataset(dataset_file, reporter)
    data.load()
    return data
