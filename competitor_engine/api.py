"""
HTTP endpoint for competitor analysis.

FastAPI handler consumed by the website-audit pipeline:
1. Receives {domain, keywords} from the audit pipeline
2. Rejects malformed requests and an unconfigured SERP provider with 400
3. Runs the SERP overlap analysis and returns the ranked competitors
4. Turns any unexpected failure into a 500 with a well-formed body
"""

import json
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from competitor_engine.app import CompetitorEngineApp, setup_logging
from competitor_engine.modules.competitor_analysis import CompetitorAnalyzer
from competitor_engine.modules.competitor_analysis.analyzer import FAILED_ERROR, METHOD_FAILED
from competitor_engine.utils.validators import MISSING_PARAMETERS

logger = logging.getLogger(__name__)

FAILED_BODY = {
    "competitors": [],
    "totalKeywordsAnalyzed": 0,
    "analysisMethod": METHOD_FAILED,
    "creditsUsed": 0,
    "error": FAILED_ERROR,
}


def create_app(
    analyzer: Optional[CompetitorAnalyzer] = None,
    engine: Optional[CompetitorEngineApp] = None,
) -> FastAPI:
    """Build the FastAPI app.

    Args:
        analyzer: Pre-wired analyzer (tests inject one with a fake provider).
        engine: Application wiring used to build the analyzer lazily when
            ``analyzer`` is not given.
    """
    api = FastAPI(
        title="SERP Competitor Engine",
        description="Identify organic-search competitors from SERP overlap",
        version="1.0.0",
    )
    api.state.analyzer = analyzer
    api.state.engine = engine

    def _get_analyzer() -> CompetitorAnalyzer:
        if api.state.analyzer is None:
            if api.state.engine is None:
                api.state.engine = CompetitorEngineApp()
            api.state.engine.initialize()
            setup_logging(api.state.engine.log_level)
            api.state.analyzer = api.state.engine.get_analyzer()
        return api.state.analyzer

    @api.on_event("shutdown")
    async def shutdown_event():
        if api.state.engine is not None:
            await api.state.engine.close()

    @api.get("/health")
    async def health():
        try:
            analyzer = _get_analyzer()
        except Exception:
            logger.exception("Could not build the competitor analyzer")
            return JSONResponse(
                {"status": "error", "serpProviderConfigured": False},
                status_code=500,
            )
        return {
            "status": "ok",
            "serpProviderConfigured": analyzer.provider.is_configured(),
        }

    @api.post("/api/competition-analysis")
    async def competition_analysis(request: Request):
        try:
            payload = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.warning("Competition analysis request body is not valid JSON")
            return JSONResponse({"error": MISSING_PARAMETERS}, status_code=400)

        try:
            analyzer = _get_analyzer()
        except Exception:
            logger.exception("Could not build the competitor analyzer")
            return JSONResponse(FAILED_BODY, status_code=500)

        status_code, body = await analyzer.handle_request(payload)
        return JSONResponse(body, status_code=status_code)

    return api


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("competitor_engine.api:app", host="0.0.0.0", port=8000)
