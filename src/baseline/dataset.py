"""Compatibility dataset accessor.

The dataset is a static table of ``FeatureRecord`` keyed by canonical
feature id. It is loaded once per ``BaselineDataset`` instance and then only
queried. Construct one instance at startup and pass it to the consumers
that need it.
"""

from __future__ import annotations

import asyncio
import json
import logging
from importlib import resources
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError as PydanticValidationError

from .errors import DataLoadError, ErrorReporter
from .models import BaselineStatus, FeatureRecord

logger = logging.getLogger(__name__)

BUNDLED_DATASET = "features.yml"


class BaselineDataset:
    """Initialize-once, query-many access to baseline feature records.

    Usage:
        dataset = BaselineDataset()            # bundled data
        await dataset.initialize()             # raises DataLoadError on failure
        dataset.is_baseline_supported("api.fetch")
    """

    def __init__(self, source: Path | None = None, reporter: ErrorReporter | None = None) -> None:
        self._source = source
        self._reporter = reporter if reporter is not None else ErrorReporter()
        self._records: dict[str, FeatureRecord] | None = None
        self._loading: asyncio.Future | None = None

    @property
    def is_initialized(self) -> bool:
        return self._records is not None

    async def initialize(self) -> None:
        """Load the dataset. Concurrent callers share one in-flight load."""
        if self._records is not None:
            return

        if self._loading is None:
            self._loading = asyncio.ensure_future(self._load_async())

        loading = self._loading
        try:
            await loading
        except DataLoadError:
            # Let a later call retry instead of replaying the same failure.
            if self._loading is loading:
                self._loading = None
            raise

    def load(self) -> None:
        """Synchronous variant of ``initialize`` for callers without a loop."""
        if self._records is None:
            self._records = self._load_records()

    async def _load_async(self) -> None:
        self._records = self._load_records()

    def _load_records(self) -> dict[str, FeatureRecord]:
        try:
            raw = self._read_source()
            records = self._build_records(raw)
        except DataLoadError as e:
            self._reporter.data_load_error(e)
            raise
        except (
            OSError,
            UnicodeDecodeError,
            yaml.YAMLError,
            PydanticValidationError,
            ValueError,
            TypeError,
        ) as e:
            error = DataLoadError(f"Could not load dataset from {self._describe_source()}: {e}")
            self._reporter.data_load_error(error)
            raise error from e

        logger.info("Compatibility data loaded: %d features from %s", len(records), self._describe_source())
        return records

    def _describe_source(self) -> str:
        return str(self._source) if self._source else f"bundled {BUNDLED_DATASET}"

    def _read_source(self) -> Any:
        if self._source is None:
            text = resources.files("baseline").joinpath("data", BUNDLED_DATASET).read_text(encoding="utf-8")
            return yaml.safe_load(text)

        text = Path(self._source).read_text(encoding="utf-8")
        if Path(self._source).suffix.lower() in (".yml", ".yaml"):
            return yaml.safe_load(text)
        return json.loads(text)

    def _build_records(self, raw: Any) -> dict[str, FeatureRecord]:
        if not isinstance(raw, dict):
            raise DataLoadError("Dataset root must be a mapping")

        # web-features layout nests entries under "features"
        entries = raw.get("features", raw)
        if not isinstance(entries, dict):
            raise DataLoadError("Dataset 'features' must be a mapping of id to entry")

        records: dict[str, FeatureRecord] = {}
        for feature_id, entry in entries.items():
            if not isinstance(entry, dict):
                logger.debug("Skipping non-mapping dataset entry %r", feature_id)
                continue
            records[str(feature_id)] = FeatureRecord.from_web_features(str(feature_id), entry)
        return records

    def get_feature_data(self, feature_id: Any) -> Optional[FeatureRecord]:
        """Return the record for ``feature_id`` or None. Never raises."""
        if self._records is None:
            self._reporter.validation_error(
                "BaselineDataset not initialized. Call initialize() first.", "Getting feature data"
            )
            return None

        if not isinstance(feature_id, str) or not feature_id:
            self._reporter.validation_error(f"Invalid feature ID: {feature_id!r}", "Feature ID validation")
            return None

        return self._records.get(feature_id)

    def is_baseline_supported(self, feature_id: Any) -> bool:
        """True unless the feature is unknown or hard-unsupported."""
        record = self.get_feature_data(feature_id)
        if record is None:
            return False
        return record.baseline_status != BaselineStatus.NOT_SUPPORTED

    def feature_ids(self) -> list[str]:
        if self._records is None:
            self._reporter.validation_error(
                "BaselineDataset not initialized. Call initialize() first.", "Getting all feature IDs"
            )
            return []
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records) if self._records is not None else 0

    def __contains__(self, feature_id: object) -> bool:
        return self._records is not None and isinstance(feature_id, str) and feature_id in self._records
