"""Centralized HTTP client factory for the Repliers APIs."""

import httpx

from homefinder.config import RepliersConfig


def create_http_client(repliers_config: RepliersConfig | None = None) -> httpx.AsyncClient:
    """
    Create the AsyncClient shared by the NLP and listings calls.

    Args:
        repliers_config: Repliers config. Defaults to RepliersConfig().

    Returns:
        httpx.AsyncClient with the configured transport timeout.
    """
    config = repliers_config or RepliersConfig()
    return httpx.AsyncClient(timeout=config.request_timeout_seconds)


def auth_headers(api_key: str, repliers_config: RepliersConfig) -> dict[str, str]:
    """Headers sent with every Repliers request."""
    return {
        "Content-Type": "application/json",
        repliers_config.api_key_header: api_key,
    }
