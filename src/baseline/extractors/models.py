"""Data models for feature extraction."""

from __future__ import annotations
from dataclasses import dataclass, field


@dataclass(frozen=True)
class SourceRange:
    """A half-open span in a source unit. Lines and columns are 0-based."""

    start_line: int
    start_column: int
    end_line: int
    end_column: int

    def to_dict(self) -> dict:
        return {
            "start_line": self.start_line,
            "start_column": self.start_column,
            "end_line": self.end_line,
            "end_column": self.end_column,
        }


@dataclass
class ExtractionResult:
    """Features found in one source unit, in first-occurrence order."""

    features: list[str] = field(default_factory=list)
    locations: dict[str, list[SourceRange]] = field(default_factory=dict)
    parse_error: str | None = None

    def record(self, feature_id: str, source_range: SourceRange | None = None) -> None:
        """Add one occurrence of a feature.

        The id is kept once; every occurrence with a known position adds a range.
        """
        if feature_id not in self.locations:
            self.features.append(feature_id)
            self.locations[feature_id] = []
        if source_range is not None:
            self.locations[feature_id].append(source_range)

    @classmethod
    def failed(cls, message: str) -> ExtractionResult:
        return cls(parse_error=message)

    @property
    def is_empty(self) -> bool:
        return not self.features

    def to_dict(self) -> dict:
        result = {
            "features": list(self.features),
            "locations": {
                feature_id: [r.to_dict() for r in ranges]
                for feature_id, ranges in self.locations.items()
            },
        }
        if self.parse_error:
            result["parse_error"] = self.parse_error
        return result
