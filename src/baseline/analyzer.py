"""Analysis service tying extraction, scheduling and the dataset together.

The host owns one ``BaselineAnalyzer`` and feeds it source units as they
change. Each unit is identified by a string (a path or URI); published
diagnostics for an identity always replace the previous set wholesale.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Optional

from .config import Config
from .dataset import BaselineDataset
from .diagnostics import Diagnostic, DiagnosticAssembler
from .errors import AnalysisTimeoutError, DataLoadError, ErrorReporter
from .extractors.models import ExtractionResult
from .extractors.registry import ExtractorRegistry, kind_for_language
from .scheduler import Scheduler, fingerprint

logger = logging.getLogger(__name__)

PublishCallback = Callable[[str, list[Diagnostic]], None]


class BaselineAnalyzer:
    """Analyze source units and publish baseline diagnostics.

    Usage:
        analyzer = BaselineAnalyzer(Config.from_env(), on_publish=show)
        await analyzer.dataset.initialize()
        analyzer.schedule("file:///app.css", text, "css")   # debounced
        diagnostics = await analyzer.analyze("app.css", text, "css")  # immediate

    When a re-analysis times out or the text fails to parse, the previously
    published diagnostics stay in place.
    """

    def __init__(
        self,
        config: Config | None = None,
        dataset: BaselineDataset | None = None,
        scheduler: Scheduler | None = None,
        registry: ExtractorRegistry | None = None,
        assembler: DiagnosticAssembler | None = None,
        reporter: ErrorReporter | None = None,
        on_publish: Optional[PublishCallback] = None,
    ) -> None:
        self.config = config if config is not None else Config()
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.dataset = dataset if dataset is not None else BaselineDataset(self.config.dataset_path, self.reporter)
        self.scheduler = scheduler if scheduler is not None else Scheduler(self.config)
        self.registry = registry if registry is not None else ExtractorRegistry(
            self.reporter, ambiguous_defaults=self.config.ambiguous_method_defaults
        )
        self.assembler = assembler if assembler is not None else DiagnosticAssembler(
            self.dataset, report_unknown_features=self.config.report_unknown_features
        )
        self._on_publish = on_publish
        self._published: dict[str, list[Diagnostic]] = {}
        self._requested: dict[str, int] = {}
        self._completed: dict[str, int] = {}
        self._extract = self.scheduler.memoize(self._run_extractor, self._cache_key)

    async def analyze(self, identity: str, text: str, language_id: str) -> Optional[list[Diagnostic]]:
        """Analyze one source unit now.

        Returns the diagnostics, or None when nothing should be published:
        unsupported language, oversized input, a parse failure or a timeout.

        Raises:
            DataLoadError: If the dataset cannot be loaded.
        """
        kind = kind_for_language(language_id)
        if kind is None:
            logger.debug("No extractor for language %r, skipping %s", language_id, identity)
            return None
        if not isinstance(text, str):
            self.reporter.validation_error(f"Invalid content for {identity}", "Analyzing source unit")
            return None

        size = len(text.encode("utf-8", errors="surrogatepass"))
        if not self.scheduler.should_process(size):
            return None

        await self.dataset.initialize()
        self.scheduler.track_memory_usage(identity, size)

        try:
            if self.config.enable_async_processing and self.scheduler.is_large(size):
                logger.debug("Large input (%d bytes), analyzing %s cooperatively", size, identity)
                result = await self.scheduler.with_timeout(
                    self.scheduler.run_cooperatively, self._extract, language_id, identity, text
                )
            else:
                result = await self.scheduler.with_timeout(self._extract, language_id, identity, text)
        except AnalysisTimeoutError as e:
            self.reporter.timeout_error(e, f"Analyzing {identity}")
            return None

        if result.parse_error:
            logger.debug("Keeping previous diagnostics for %s: %s", identity, result.parse_error)
            return None

        language = self.registry.get(kind).language
        return self.assembler.assemble(result, language)

    def schedule(self, identity: str, text: str, language_id: str) -> None:
        """Debounced analysis; the result is published through ``on_publish``.

        Must be called from a running event loop.
        """
        generation = self._requested.get(identity, 0) + 1
        self._requested[identity] = generation
        self.scheduler.debounce(identity, self._analyze_and_publish, identity, text, language_id, generation)

    async def _analyze_and_publish(self, identity: str, text: str, language_id: str, generation: int) -> None:
        try:
            diagnostics = await self.analyze(identity, text, language_id)
        except DataLoadError:
            # Already reported to the user by the dataset.
            return
        if diagnostics is None:
            return
        if generation < self._completed.get(identity, 0):
            logger.debug("Discarding stale analysis of %s (generation %d)", identity, generation)
            return
        self._completed[identity] = generation
        self._publish(identity, diagnostics)

    def _publish(self, identity: str, diagnostics: list[Diagnostic]) -> None:
        self._published[identity] = list(diagnostics)
        if self._on_publish is not None:
            self._on_publish(identity, list(diagnostics))

    def diagnostics_for(self, identity: str) -> list[Diagnostic]:
        return list(self._published.get(identity, []))

    def clear(self, identity: str) -> None:
        """Forget a source unit: pending work, cached results and diagnostics."""
        self.scheduler.cancel_debounce(identity)
        self.scheduler.release_memory_tracking(identity)
        self.scheduler.clear_cache(f"^[^:]*:{re.escape(identity)}:[0-9a-f]+$")
        self._requested.pop(identity, None)
        self._completed.pop(identity, None)
        if self._published.pop(identity, None) is not None and self._on_publish is not None:
            self._on_publish(identity, [])

    def clear_all(self) -> None:
        for identity in list(self._published):
            self.clear(identity)
        self._requested.clear()
        self._completed.clear()

    def dispose(self) -> None:
        self.scheduler.dispose()
        self._published.clear()
        self._requested.clear()
        self._completed.clear()

    def _run_extractor(self, language_id: str, identity: str, text: str) -> ExtractionResult:
        result = self.registry.extract(language_id, text, identity)
        return result if result is not None else ExtractionResult()

    @staticmethod
    def _cache_key(language_id: str, identity: str, text: str) -> str:
        return fingerprint(language_id, identity, text)
