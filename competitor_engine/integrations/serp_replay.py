"""Replay provider serving pre-recorded SERP observations from JSON."""

import json
import logging
from pathlib import Path
from typing import Any

from competitor_engine.integrations.serp_provider import SERPProviderError
from competitor_engine.models.competitor import SerpHit

logger = logging.getLogger(__name__)


class ReplaySERPProvider:
    """Answer SERP lookups from a recording instead of the network.

    The recording maps each keyword to its hits, or to ``{"error": "..."}``
    to reproduce a failed lookup::

        {
            "seo tools": [{"domain": "competitor-a.com", "title": "...", "position": 1}],
            "broken keyword": {"error": "Serper API error: 502 Bad Gateway"}
        }
    """

    def __init__(self, recording: dict[str, Any]):
        self._recording = recording
        self.calls: list[str] = []

    @classmethod
    def from_file(cls, path: str | Path) -> "ReplaySERPProvider":
        with open(path, "r", encoding="utf-8") as fh:
            recording = json.load(fh)
        if not isinstance(recording, dict):
            raise ValueError(f"Replay file {path} must contain a JSON object")
        logger.info("Loaded SERP recording for %d keywords from %s", len(recording), path)
        return cls(recording)

    def is_configured(self) -> bool:
        return True

    async def get_full_serp_results(
        self,
        keyword: str,
        region: str = "United Kingdom",
        num: int = 20,
    ) -> list[SerpHit]:
        self.calls.append(keyword)
        entry = self._recording.get(keyword, [])
        if isinstance(entry, dict):
            raise SERPProviderError(entry.get("error") or f"Recorded failure for {keyword!r}")
        hits = [
            SerpHit(
                domain=item.get("domain", ""),
                title=item.get("title", ""),
                position=item.get("position", 0),
                url=item.get("url", ""),
            )
            for item in entry
            if isinstance(item, dict)
        ]
        return hits[:num]

    async def close(self) -> None:
        return None


def write_recording(path: str | Path, recording: dict[str, Any]) -> None:
    """Write a keyword -> hits mapping in the format ``from_file`` reads."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as fh:
        json.dump(recording, fh, indent=2, ensure_ascii=False)
    logger.info("Wrote SERP recording for %d keywords to %s", len(recording), path)
