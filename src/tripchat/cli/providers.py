"""Provider factory functions for the CLI.

Builds the chat backend and map clients from environment variables.
"""

import os

from ..config import (
    DEFAULT_ANTHROPIC_MODEL,
    DEFAULT_GEMINI_MODEL,
    DEFAULT_LLM_PROVIDER,
    DEFAULT_OPENAI_MODEL,
)
from ..errors import ConfigurationError
from ..geo import GeocodingProvider, RouteProvider, create_geocoder, create_router
from ..llm import LLMProvider, create_llm_provider


def _require(*names: str) -> str:
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    raise ConfigurationError(
        f"{names[0]} is not configured. "
        f"Please set the {names[0]} environment variable.",
        setting_name=names[0],
    )


def get_llm() -> LLMProvider:
    """Create the chat backend from environment variables.

    Environment variables:
        LLM_PROVIDER: gemini (default), openai or anthropic
        GEMINI_API_KEY / API_KEY, GEMINI_MODEL (default: gemini-2.5-flash)
        OPENAI_API_KEY, OPENAI_CHAT_MODEL (default: gpt-4o-mini)
        ANTHROPIC_API_KEY, ANTHROPIC_MODEL (default: claude-sonnet-4-20250514)

    Raises:
        ConfigurationError: Unknown provider or missing API key
    """
    provider = os.getenv("LLM_PROVIDER", DEFAULT_LLM_PROVIDER).lower()

    if provider == "gemini":
        api_key = _require("GEMINI_API_KEY", "API_KEY")
        model = os.getenv("GEMINI_MODEL", DEFAULT_GEMINI_MODEL)
        return create_llm_provider("gemini", api_key=api_key, model=model)

    if provider == "openai":
        api_key = _require("OPENAI_API_KEY")
        model = os.getenv("OPENAI_CHAT_MODEL", DEFAULT_OPENAI_MODEL)
        return create_llm_provider("openai", api_key=api_key, model=model)

    if provider in ("anthropic", "claude"):
        api_key = _require("ANTHROPIC_API_KEY")
        model = os.getenv("ANTHROPIC_MODEL", DEFAULT_ANTHROPIC_MODEL)
        return create_llm_provider("anthropic", api_key=api_key, model=model)

    raise ConfigurationError(f"Unknown LLM provider: {provider}", setting_name="LLM_PROVIDER")


def get_geocoder() -> GeocodingProvider:
    """Create the place search client. Requires MAPBOX_ACCESS_TOKEN."""
    return create_geocoder("mapbox", access_token=_require("MAPBOX_ACCESS_TOKEN"))


def get_router() -> RouteProvider:
    """Create the route lookup client. Requires MAPBOX_ACCESS_TOKEN."""
    return create_router("mapbox", access_token=_require("MAPBOX_ACCESS_TOKEN"))
