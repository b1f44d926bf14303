"""Runtime configuration for dispatching tools against the Outline API.

Read from the environment:
  OUTLINE_API_KEY   bearer token sent with every request
  OUTLINE_BASE_URL  API root (default https://app.getoutline.com/api)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

DEFAULT_BASE_URL = "https://app.getoutline.com/api"
DEFAULT_TIMEOUT = 30.0


def normalize_base_url(base_url: str) -> str:
    """Strip a trailing slash and make sure the URL ends in /api."""
    trimmed = base_url.strip()
    if not trimmed:
        raise ValueError("Outline base URL is empty")
    normalized = trimmed.rstrip("/")
    if normalized.endswith("/api"):
        return normalized
    return f"{normalized}/api"


@dataclass(frozen=True)
class Settings:
    api_key: str
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        api_key = env.get("OUTLINE_API_KEY", "").strip()
        if not api_key:
            raise ValueError("OUTLINE_API_KEY is required")
        base_url = normalize_base_url(env.get("OUTLINE_BASE_URL") or DEFAULT_BASE_URL)
        return cls(api_key=api_key, base_url=base_url)
