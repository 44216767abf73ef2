"""
Configuration Management for listing_scraper

This module provides centralized configuration management with:
- Environment variable loading
- Type validation
- Sensible defaults

The extraction core never reads this module directly; the runner turns a
Config into ScrapeOptions and passes them down explicitly.
"""

import os
from pathlib import Path
from typing import List, Optional
from dotenv import load_dotenv


PACING_MODES = {"conservative", "fast"}

_FALSY = {"0", "false", "False", "no"}
_TRUTHY = {"1", "true", "True", "yes"}


def _split_csv(raw: str) -> List[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


def _optional_int(raw: Optional[str]) -> Optional[int]:
    if raw is None or not raw.strip():
        return None
    return int(raw)


class Config:
    """
    Application configuration loaded from environment variables.

    All configuration is read from configs/.env file or environment variables.
    """

    def __init__(self, env_path: Optional[Path] = None):
        """
        Initialize configuration from environment.

        Args:
            env_path: Path to .env file (default: configs/.env)
        """
        if env_path is None:
            env_path = Path("configs/.env")

        load_dotenv(dotenv_path=env_path, override=True)

        # === Extraction Options ===
        self.include_company_url: bool = os.getenv("INCLUDE_COMPANY_URL", "0") in _TRUTHY
        self.max_results: int = int(os.getenv("MAX_RESULTS", "50"))
        self.pacing_mode: str = os.getenv("PACING_MODE", "conservative").strip().lower()
        self.title_keywords: List[str] = _split_csv(os.getenv("TITLE_KEYWORDS", ""))
        self.enrich_limit: Optional[int] = _optional_int(os.getenv("ENRICH_LIMIT"))
        self.dedupe: bool = os.getenv("DEDUPE", "1") not in _FALSY

        # === Browser / Navigation ===
        self.headless: bool = os.getenv("HEADLESS", "1") not in _FALSY
        self.max_retries: int = int(os.getenv("MAX_RETRIES", "2"))
        self.nav_timeout_ms: int = int(os.getenv("NAV_TIMEOUT_MS", "60000"))
        self.load_timeout_ms: int = int(os.getenv("LOAD_TIMEOUT_MS", "15000"))
        self.detail_timeout_ms: int = int(os.getenv("DETAIL_TIMEOUT_MS", "15000"))

        # === Logging Configuration ===
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO")
        self.log_dir: Path = Path(os.getenv("LOG_DIR", "logs"))
        self.error_log_dir: Path = Path(os.getenv("ERROR_LOG_DIR", "logs/errors"))

        # === Inputs ===
        self.start_urls_file: Path = Path(os.getenv("START_URLS_FILE", "configs/urls.txt"))

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ValueError: If configuration is invalid
        """
        errors = []

        if self.pacing_mode not in PACING_MODES:
            errors.append(f"PACING_MODE must be one of {sorted(PACING_MODES)}, got {self.pacing_mode!r}")

        if self.max_results <= 0:
            errors.append(f"MAX_RESULTS must be positive, got {self.max_results}")

        if self.enrich_limit is not None and self.enrich_limit < 0:
            errors.append(f"ENRICH_LIMIT must be non-negative, got {self.enrich_limit}")

        if self.max_retries < 0:
            errors.append(f"MAX_RETRIES must be non-negative, got {self.max_retries}")

        for name in ("nav_timeout_ms", "load_timeout_ms", "detail_timeout_ms"):
            value = getattr(self, name)
            if value <= 0:
                errors.append(f"{name.upper()} must be positive, got {value}")

        if errors:
            raise ValueError("Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors))

    def __repr__(self) -> str:
        return (
            f"Config(\n"
            f"  include_company_url={self.include_company_url},\n"
            f"  max_results={self.max_results},\n"
            f"  pacing_mode={self.pacing_mode},\n"
            f"  title_keywords={self.title_keywords},\n"
            f"  enrich_limit={self.enrich_limit},\n"
            f"  headless={self.headless},\n"
            f"  log_level={self.log_level}\n"
            f")"
        )


# Global configuration instance (lazy-loaded)
_config: Optional[Config] = None


def get_config(env_path: Optional[Path] = None) -> Config:
    """
    Get the global configuration instance.

    Args:
        env_path: Optional path to .env file (only used on first call)

    Returns:
        Global Config instance
    """
    global _config
    if _config is None:
        _config = Config(env_path=env_path)
    return _config
