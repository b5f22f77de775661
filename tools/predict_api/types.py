from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_API_BASE = "http://127.0.0.1:24828"
DEFAULT_CATALOG_PATH = "/api/DX_API002002"
DEFAULT_SUBMIT_PATH = "/api/DX_API002003"
DEFAULT_RETRIEVE_PATH = "/api/DX_API002004"

DEFAULT_TIMEOUT_SEC = 15.0
DEFAULT_RETRIEVE_TIMEOUT_SEC = 20.0


def _env_seconds(env: Mapping[str, str], var: str, default: float) -> float:
    raw = (env.get(var) or "").strip()
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        raise ValueError(f"{var} must be a number of seconds, got {raw!r}") from None
    if val <= 0:
        raise ValueError(f"{var} must be positive, got {raw!r}")
    return val


@dataclass(frozen=True)
class ApiConfig:
    """Connection settings for the prediction service."""

    base_url: str = DEFAULT_API_BASE
    catalog_path: str = DEFAULT_CATALOG_PATH
    submit_path: str = DEFAULT_SUBMIT_PATH
    retrieve_path: str = DEFAULT_RETRIEVE_PATH

    catalog_timeout: float = DEFAULT_TIMEOUT_SEC
    submit_timeout: float = DEFAULT_TIMEOUT_SEC
    retrieve_timeout: float = DEFAULT_RETRIEVE_TIMEOUT_SEC

    def url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "ApiConfig":
        """Read RECIPE_API_* variables (call after the .env file is loaded)."""
        e = os.environ if env is None else env
        timeout = _env_seconds(e, "RECIPE_API_TIMEOUT", DEFAULT_TIMEOUT_SEC)
        return cls(
            base_url=(e.get("RECIPE_API_BASE") or DEFAULT_API_BASE).strip(),
            catalog_path=e.get("RECIPE_API_CATALOG_PATH") or DEFAULT_CATALOG_PATH,
            submit_path=e.get("RECIPE_API_SUBMIT_PATH") or DEFAULT_SUBMIT_PATH,
            retrieve_path=e.get("RECIPE_API_RETRIEVE_PATH") or DEFAULT_RETRIEVE_PATH,
            catalog_timeout=timeout,
            submit_timeout=timeout,
            retrieve_timeout=_env_seconds(e, "RECIPE_API_RETRIEVE_TIMEOUT", DEFAULT_RETRIEVE_TIMEOUT_SEC),
        )
