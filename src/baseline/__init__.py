"""Baseline Sidekick - flag web platform features that are not Baseline."""

__version__ = "0.1.0"

from .config import Config
from .dataset import BaselineDataset
from .diagnostics import Diagnostic, DiagnosticAssembler, DiagnosticSeverity
from .errors import (
    AnalysisTimeoutError,
    BaselineError,
    DataLoadError,
    ErrorReporter,
    ParseError,
    ValidationError,
)
from .models import BaselineStatus, FeatureRecord
from .scheduler import ResultCache, Scheduler
from .analyzer import BaselineAnalyzer

__all__ = [
    "__version__",
    "Config",
    "BaselineDataset",
    "Diagnostic",
    "DiagnosticAssembler",
    "DiagnosticSeverity",
    "AnalysisTimeoutError",
    "BaselineError",
    "DataLoadError",
    "ErrorReporter",
    "ParseError",
    "ValidationError",
    "BaselineStatus",
    "FeatureRecord",
    "ResultCache",
    "Scheduler",
    "BaselineAnalyzer",
]
