"""Join extraction results against the dataset to produce diagnostics."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Optional

from .dataset import BaselineDataset
from .extractors.models import ExtractionResult, SourceRange
from .models import BaselineStatus, FeatureRecord

logger = logging.getLogger(__name__)

DIAGNOSTIC_SOURCE = "Baseline Sidekick"
DOC_URI_TEMPLATE = "https://web-platform-dx.github.io/web-features/{feature_id}"


class DiagnosticSeverity(IntEnum):
    """Editor severity levels, numbered as in the language server protocol."""

    ERROR = 1
    WARNING = 2
    INFORMATION = 3
    HINT = 4


@dataclass(frozen=True)
class Diagnostic:
    range: SourceRange
    message: str
    severity: DiagnosticSeverity
    feature_id: str
    doc_uri: str
    source: str = DIAGNOSTIC_SOURCE
    language: str = ""

    def to_dict(self) -> dict:
        return {
            "range": self.range.to_dict(),
            "message": self.message,
            "severity": self.severity.name.lower(),
            "feature_id": self.feature_id,
            "doc_uri": self.doc_uri,
            "source": self.source,
            "language": self.language,
        }


def doc_uri(feature_id: str) -> str:
    return DOC_URI_TEMPLATE.format(feature_id=feature_id)


def format_message(language: str, feature_id: str, record: Optional[FeatureRecord]) -> str:
    """Message naming the feature, qualified by how far its support reaches."""
    name = record.name if record else feature_id
    message = f'{language} feature "{name}" is not supported by Baseline'
    if record is None:
        return message
    if record.baseline_status == BaselineStatus.NOT_SUPPORTED:
        message += " (not supported by all browsers)"
    elif record.baseline_status == BaselineStatus.LIMITED:
        message += " (limited browser support)"
    return message


class DiagnosticAssembler:
    """Produce one diagnostic per occurrence of a feature that fails the baseline check.

    Features missing from the dataset are skipped unless
    ``report_unknown_features`` is set.
    """

    def __init__(
        self,
        dataset: BaselineDataset,
        report_unknown_features: bool = False,
        severity: DiagnosticSeverity = DiagnosticSeverity.WARNING,
        is_supported: Optional[Callable[[str], bool]] = None,
    ) -> None:
        self._dataset = dataset
        self._report_unknown = report_unknown_features
        self._severity = severity
        self._is_supported = is_supported if is_supported is not None else dataset.is_baseline_supported

    @property
    def dataset(self) -> BaselineDataset:
        return self._dataset

    def assemble(self, result: ExtractionResult, language: str) -> list[Diagnostic]:
        diagnostics: list[Diagnostic] = []
        for feature_id in result.features:
            if feature_id not in self._dataset and not self._report_unknown:
                continue
            if self._is_supported(feature_id):
                continue

            record = self._dataset.get_feature_data(feature_id) if feature_id in self._dataset else None
            message = format_message(language, feature_id, record)
            for source_range in result.locations.get(feature_id, []):
                diagnostics.append(
                    Diagnostic(
                        range=source_range,
                        message=message,
                        severity=self._severity,
                        feature_id=feature_id,
                        doc_uri=doc_uri(feature_id),
                        language=language,
                    )
                )

        logger.debug("Assembled %d %s diagnostics", len(diagnostics), language)
        return diagnostics
