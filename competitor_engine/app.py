"""Application wiring: configuration, logging, and SERP provider selection."""

import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/settings.yaml"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: str | int = logging.INFO) -> None:
    """Configure root logging and quiet the HTTP client loggers."""
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


class CompetitorEngineApp:
    """Central application class that wires the analyzer to a SERP provider.

    The provider is chosen once, here: a replay file when one is given,
    otherwise the live Serper client.

    Usage::

        app = CompetitorEngineApp()
        app.initialize()
        analyzer = app.get_analyzer()
        result = await analyzer.analyze("example.com", keywords)
        await app.close()
    """

    def __init__(
        self,
        config_path: Optional[str] = None,
        env_path: str = ".env",
        replay_path: Optional[str] = None,
    ):
        self._config_path = config_path or os.getenv(
            "COMPETITOR_ENGINE_CONFIG", DEFAULT_CONFIG_PATH
        )
        self._env_path = env_path
        self._replay_path = replay_path
        self.config: dict[str, Any] = {}
        self._initialized = False
        self._provider = None
        self._analyzer = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def initialize(self) -> None:
        """Load environment and YAML configuration."""
        if self._initialized:
            return

        env_file = Path(self._env_path)
        if env_file.exists():
            load_dotenv(env_file)
            logger.info("Loaded environment from %s", self._env_path)

        self.config = self._load_config()
        self._initialized = True
        logger.info("CompetitorEngineApp initialised.")

    def _load_config(self) -> dict[str, Any]:
        """Load the YAML configuration file."""
        config_file = Path(self._config_path)
        if not config_file.exists():
            logger.warning("Config file not found: %s, using defaults.", self._config_path)
            return {}
        with open(config_file, "r", encoding="utf-8") as fh:
            config = yaml.safe_load(fh) or {}
        logger.info("Configuration loaded from %s", self._config_path)
        return config

    @property
    def log_level(self) -> str:
        return str(self.config.get("logging", {}).get("level", "INFO"))

    # ------------------------------------------------------------------
    # Wiring
    # ------------------------------------------------------------------

    def get_provider(self):
        """Lazy-initialise and return the SERP provider."""
        self._ensure_initialized()
        if self._provider is None:
            if self._replay_path:
                from competitor_engine.integrations.serp_replay import ReplaySERPProvider
                self._provider = ReplaySERPProvider.from_file(self._replay_path)
                logger.debug("ReplaySERPProvider created from %s.", self._replay_path)
            else:
                from competitor_engine.integrations.serper_client import SerperClient
                serper_cfg = self.config.get("serper", {})
                self._provider = SerperClient(
                    base_url=serper_cfg.get("base_url", "https://google.serper.dev/search"),
                    default_country=serper_cfg.get("country", "uk"),
                    language=serper_cfg.get("language", "en"),
                    timeout=serper_cfg.get("timeout", 30.0),
                    max_retries=serper_cfg.get("max_retries", 2),
                    retry_delay=serper_cfg.get("retry_delay", 2.0),
                )
                logger.debug("SerperClient created.")
        return self._provider

    def get_analyzer(self):
        """Lazy-initialise and return the CompetitorAnalyzer."""
        if self._analyzer is None:
            from competitor_engine.modules.competitor_analysis import (
                AnalysisSettings,
                CompetitorAnalyzer,
            )
            settings = AnalysisSettings.from_config(self.config.get("competitor_analysis"))
            self._analyzer = CompetitorAnalyzer(self.get_provider(), settings=settings)
            logger.debug("CompetitorAnalyzer created.")
        return self._analyzer

    async def close(self) -> None:
        """Release the provider's network resources."""
        if self._provider is not None:
            await self._provider.close()
            self._provider = None
            self._analyzer = None

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def get_status(self) -> dict[str, dict[str, Any]]:
        """Return health status of the configuration and SERP provider."""
        self._ensure_initialized()
        status: dict[str, dict[str, Any]] = {}

        provider = self.get_provider()
        configured = provider.is_configured()
        status["serp_provider"] = {
            "status": "ok" if configured else "warning",
            "details": (
                f"{type(provider).__name__} "
                f"{'configured' if configured else 'not configured (set SERPER_API_KEY)'}"
            ),
        }
        status["config"] = {
            "status": "ok" if self.config else "warning",
            "details": f"{len(self.config)} sections loaded" if self.config else "no config",
        }
        return status

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            raise RuntimeError("Call initialize() before using the application.")
