"""Pydantic settings loaded from YAML configuration."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, SecretStr

_settings: Settings | None = None

_DEFAULT_CONFIG_PATH = Path("config/settings.yaml")
CONFIG_ENV_VAR = "SKYNET_CONFIG"


class WeatherFeedConfig(BaseModel):
    """Open-Meteo current-conditions feed."""

    base_url: str = "https://api.open-meteo.com/v1/forecast"
    fallback_lat: float = 40.7128
    fallback_lon: float = -74.0060
    timeout_secs: float = 10.0


class SeismicFeedConfig(BaseModel):
    """USGS earthquake summary feed (M4.5+, past day)."""

    base_url: str = (
        "https://earthquake.usgs.gov/earthquakes/feed/v1.0/summary/4.5_day.geojson"
    )
    max_events: int = 10
    timeout_secs: float = 10.0


class CryptoFeedConfig(BaseModel):
    """CoinGecko spot-price feed for a single asset."""

    base_url: str = "https://api.coingecko.com/api/v3/simple/price"
    asset_id: str = "bitcoin"
    vs_currency: str = "usd"
    timeout_secs: float = 10.0


class GeolocationFeedConfig(BaseModel):
    """IP geolocation lookup for the caller's approximate position."""

    base_url: str = "https://ipapi.co/json/"
    timeout_secs: float = 10.0


class FeedsConfig(BaseModel):
    """Container for all feed configurations."""

    weather: WeatherFeedConfig = WeatherFeedConfig()
    seismic: SeismicFeedConfig = SeismicFeedConfig()
    crypto: CryptoFeedConfig = CryptoFeedConfig()
    geolocation: GeolocationFeedConfig = GeolocationFeedConfig()


class AggregatorConfig(BaseModel):
    """Threat snapshot cache and per-branch fetch bounds."""

    cache_ttl_secs: float = 300.0
    fetch_timeout_secs: float = 10.0


class CompletionConfig(BaseModel):
    """OpenAI-compatible chat completion endpoint (Cerebras by default)."""

    base_url: str = "https://api.cerebras.ai/v1"
    api_key: SecretStr = SecretStr("")
    model: str = "llama-4-scout-17b-16e-instruct"
    max_tokens: int = 300
    temperature: float = 0.7
    timeout_secs: float = 30.0


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "json"


class Settings(BaseModel):
    """Root settings container."""

    feeds: FeedsConfig = FeedsConfig()
    aggregator: AggregatorConfig = AggregatorConfig()
    completion: CompletionConfig = CompletionConfig()
    logging: LoggingConfig = LoggingConfig()


def _read_yaml(config_path: Path) -> dict[str, Any]:
    """Top-level mapping of *config_path*; empty when absent or not a mapping."""
    if not config_path.is_file():
        return {}
    raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    return raw if isinstance(raw, dict) else {}


def load_settings(path: str | Path | None = None) -> Settings:
    """Parse settings from YAML and make them the process-wide instance.

    Args:
        path: YAML file to read. When omitted, ``$SKYNET_CONFIG`` is used if
            set, else ``config/settings.yaml``. Keys missing from the file
            keep their model defaults.
    """
    global _settings  # noqa: PLW0603

    config_path = Path(path or os.environ.get(CONFIG_ENV_VAR) or _DEFAULT_CONFIG_PATH)
    _settings = Settings.model_validate(_read_yaml(config_path))
    return _settings


def get_settings() -> Settings:
    """Process-wide settings, loaded from the default location on first use."""
    return _settings if _settings is not None else load_settings()


def reset_settings() -> None:
    """Forget the loaded settings so the next ``get_settings`` reloads."""
    global _settings  # noqa: PLW0603
    _settings = None
