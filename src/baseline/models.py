"""Compatibility dataset models."""

from datetime import date, datetime
from enum import Enum
from typing import Any, Mapping, Optional
from pydantic import BaseModel, ConfigDict, Field


class BaselineStatus(str, Enum):
    """Cross-engine availability of a feature."""

    SUPPORTED = "supported"  # baseline "high" (or plain true)
    LIMITED = "limited"  # baseline "low"
    NOT_SUPPORTED = "not_supported"  # baseline false

    @classmethod
    def from_baseline(cls, value: Any) -> "BaselineStatus":
        """Map a web-features ``status.baseline`` value onto a status."""
        if value is True or value == "high":
            return cls.SUPPORTED
        if value == "low":
            return cls.LIMITED
        return cls.NOT_SUPPORTED


class FeatureRecord(BaseModel):
    """One web platform feature from the compatibility dataset."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str
    baseline_status: BaselineStatus
    low_date: Optional[date] = None
    high_date: Optional[date] = None
    spec_url: str = ""
    doc_url: Optional[str] = None

    @property
    def is_baseline(self) -> bool:
        return self.baseline_status != BaselineStatus.NOT_SUPPORTED

    @classmethod
    def from_web_features(cls, feature_id: str, raw: Mapping[str, Any]) -> "FeatureRecord":
        """Build a record from a web-features style entry.

        Expected shape::

            name: Clipboard writeText
            status:
              baseline: low            # true | "high" | "low" | false
              baseline_low_date: 2020-03-24
              baseline_high_date: ...
            spec: https://...          # string or list of strings
            mdn_url: https://...
        """
        status = raw.get("status") or {}
        if not isinstance(status, Mapping):
            raise ValueError(f"Feature {feature_id!r}: status must be a mapping, got {type(status).__name__}")
        spec = raw.get("spec") or ""
        if isinstance(spec, (list, tuple)):
            spec = spec[0] if spec else ""

        return cls(
            id=feature_id,
            name=raw.get("name") or feature_id,
            baseline_status=BaselineStatus.from_baseline(status.get("baseline", False)),
            low_date=_parse_date(status.get("baseline_low_date")),
            high_date=_parse_date(status.get("baseline_high_date")),
            spec_url=spec,
            doc_url=raw.get("mdn_url"),
        )


def _parse_date(value: Any) -> Optional[date]:
    """Parse a dataset date. Ranged dates such as "≤2018-04-12" keep their bound."""
    if isinstance(value, datetime):
        return value.date()
    if value is None or isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).lstrip("≤").strip())
    except ValueError:
        return None
