"""Competitor Analyzer: SERP evidence -> ranked competitor report."""

import asyncio
import logging
import time
from dataclasses import dataclass, fields
from typing import Any, Iterable, Optional

from competitor_engine.integrations.serp_provider import SERPProvider
from competitor_engine.models.competitor import (
    CompetitionAnalysisResult,
    KeywordLookupResult,
    KeywordQuery,
)
from competitor_engine.modules.competitor_analysis.accumulator import CompetitorAccumulator
from competitor_engine.modules.competitor_analysis.domain_filter import normalize_domain
from competitor_engine.modules.competitor_analysis.ingestion import SERPIngestor
from competitor_engine.modules.competitor_analysis.keyword_selector import select_keywords
from competitor_engine.modules.competitor_analysis.ranker import (
    build_market_summary,
    rank_competitors,
)
from competitor_engine.utils.rate_limiter import RateLimiter
from competitor_engine.utils.validators import validate_analysis_request

logger = logging.getLogger(__name__)

METHOD_DYNAMIC = "serper_dynamic_analysis"
METHOD_NOT_CONFIGURED = "serper_not_configured"
METHOD_FAILED = "serper_failed"

NOT_CONFIGURED_ERROR = "Serper API not configured"
FAILED_ERROR = "Competition analysis failed"
DEADLINE_ERROR = "deadline exceeded"


@dataclass
class AnalysisSettings:
    """Tunables for one analyzer; defaults match the published behaviour."""
    region: str = "United Kingdom"
    results_per_keyword: int = 20
    max_keywords: int = 10
    max_position: int = 10
    min_shared_keywords: int = 2
    min_overlap_percentage: int = 20
    max_competitors: int = 12
    request_delay_seconds: float = 0.5
    requests_per_minute: Optional[int] = None
    max_concurrency: int = 1
    timeout_seconds: Optional[float] = 120.0
    extra_excluded_domains: tuple[str, ...] = ()

    @classmethod
    def from_config(cls, config: Optional[dict[str, Any]]) -> "AnalysisSettings":
        """Build from the ``competitor_analysis`` config section; unknown keys are ignored."""
        config = config or {}
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in config.items() if k in known}
        if "extra_excluded_domains" in values:
            values["extra_excluded_domains"] = tuple(values["extra_excluded_domains"] or ())
        unknown = sorted(set(config) - known)
        if unknown:
            logger.warning("Ignoring unknown competitor_analysis settings: %s", unknown)
        return cls(**values)


class CompetitorAnalyzer:
    """Identify the domains competing with a target for its keywords.

    The SERP provider is injected once; its ``is_configured`` check gates
    every analysis before any lookup is attempted.

    Usage::

        analyzer = CompetitorAnalyzer(SerperClient())
        result = await analyzer.analyze(
            "example.com",
            [KeywordQuery("seo tools", 1000), KeywordQuery("marketing agency", 500)],
        )
        print(result.to_dict())
    """

    def __init__(
        self,
        provider: SERPProvider,
        settings: Optional[AnalysisSettings] = None,
        rate_limiter: Optional[RateLimiter] = None,
    ):
        self._provider = provider
        self._settings = settings or AnalysisSettings()
        self._rate_limiter = rate_limiter or RateLimiter(
            min_interval=self._settings.request_delay_seconds,
            requests_per_minute=self._settings.requests_per_minute,
            name="serp",
        )

    @property
    def settings(self) -> AnalysisSettings:
        return self._settings

    @property
    def provider(self) -> SERPProvider:
        return self._provider

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def analyze(
        self,
        domain: str,
        keywords: Iterable[KeywordQuery | dict[str, Any]],
        region: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> CompetitionAnalysisResult:
        """Run one competitor analysis.

        Args:
            domain: Target site host; scheme and ``www.`` are optional.
            keywords: Candidate keywords with search volumes.
            region: SERP region name; defaults to the configured region.
            timeout: Seconds before pending lookups are abandoned and a
                partial report is built from the completed ones.
        """
        keyword_list = list(keywords)
        total = len(keyword_list)
        target = normalize_domain(domain)
        logger.info("Competitor analysis for %s: %d keywords provided", target, total)

        if not self._provider.is_configured():
            logger.warning("SERP provider not configured; skipping analysis for %s", target)
            return CompetitionAnalysisResult(
                competitors=[],
                total_keywords_analyzed=total,
                analysis_method=METHOD_NOT_CONFIGURED,
                error=NOT_CONFIGURED_ERROR,
                status_code=400,
            )

        queries = [
            kw if isinstance(kw, KeywordQuery) else KeywordQuery.from_dict(kw)
            for kw in keyword_list
        ]
        selected = select_keywords(
            [q for q in queries if q is not None],
            limit=self._settings.max_keywords,
        )
        logger.info("Analyzing competitors for %d keywords: %s",
                    len(selected), [q.keyword for q in selected])

        lookups: list[KeywordLookupResult] = []
        partial = False
        if selected:
            ingestor = SERPIngestor(
                self._provider,
                self._rate_limiter,
                region=region or self._settings.region,
                result_count=self._settings.results_per_keyword,
            )
            deadline = timeout if timeout is not None else self._settings.timeout_seconds
            lookups, partial = await self._run_lookups(ingestor, selected, deadline)

        accumulator = CompetitorAccumulator(
            target,
            extra_exclusions=self._settings.extra_excluded_domains,
            max_position=self._settings.max_position,
        )
        for lookup in lookups:
            accumulator.add_lookup(lookup)

        competitors = rank_competitors(
            accumulator,
            selected_count=len(selected),
            min_shared_keywords=self._settings.min_shared_keywords,
            min_overlap=self._settings.min_overlap_percentage,
            max_competitors=self._settings.max_competitors,
        )
        result = CompetitionAnalysisResult(
            competitors=competitors,
            total_keywords_analyzed=total,
            analysis_method=METHOD_DYNAMIC,
            analysis=build_market_summary(competitors),
            keywords_selected=[q.keyword for q in selected],
            lookups=lookups,
            partial=partial,
        )
        if result.failed_keywords:
            logger.warning("SERP lookups failed for %d keywords: %s",
                           len(result.failed_keywords), result.failed_keywords)
        logger.info("Found %d competitors for %s%s", len(competitors), target,
                    " (partial)" if partial else "")
        return result

    async def handle_request(self, payload: Any) -> tuple[int, dict[str, Any]]:
        """Validate a decoded request body and run the analysis.

        Returns:
            Tuple of (status_code, response_body). Never raises.
        """
        is_valid, error = validate_analysis_request(payload)
        if not is_valid:
            logger.warning("Rejected competition analysis request: %s", error)
            return 400, {"error": error}

        try:
            result = await self.analyze(
                payload["domain"],
                payload["keywords"],
                region=payload.get("region"),
                timeout=payload.get("timeoutSeconds"),
            )
        except Exception:
            logger.exception("Competition analysis failed for %r", payload.get("domain"))
            result = CompetitionAnalysisResult(
                competitors=[],
                total_keywords_analyzed=0,
                analysis_method=METHOD_FAILED,
                error=FAILED_ERROR,
                status_code=500,
            )
        return result.status_code, result.to_dict()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _run_lookups(
        self,
        ingestor: SERPIngestor,
        selected: list[KeywordQuery],
        deadline: Optional[float],
    ) -> tuple[list[KeywordLookupResult], bool]:
        """Look up every selected keyword, at most ``max_concurrency`` at once.

        Results come back in selection order. Lookups still pending at the
        deadline are cancelled and reported as failed.
        """
        semaphore = asyncio.Semaphore(max(1, self._settings.max_concurrency))

        async def _bounded(query: KeywordQuery) -> KeywordLookupResult:
            async with semaphore:
                return await ingestor.lookup(query)

        started = time.monotonic()
        tasks = [asyncio.create_task(_bounded(q)) for q in selected]
        try:
            done, pending = await asyncio.wait(tasks, timeout=deadline)
        except asyncio.CancelledError:
            for task in tasks:
                task.cancel()
            raise

        if pending:
            logger.warning(
                "Deadline of %.1fs reached after %.1fs; %d of %d lookups abandoned",
                deadline, time.monotonic() - started, len(pending), len(tasks),
            )
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)

        results: list[KeywordLookupResult] = []
        for query, task in zip(selected, tasks):
            if task in done:
                results.append(task.result())
            else:
                results.append(KeywordLookupResult(
                    keyword=query.keyword,
                    volume=query.volume,
                    error=DEADLINE_ERROR,
                ))
        return results, bool(pending)
