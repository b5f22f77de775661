"""tools/predict_api/api.py

All prediction-service HTTP calls live here.

Design goals:
  - Keep network I/O separated from row parsing (see :mod:`.rows`).
  - Turn every ``requests`` failure into one exception type
    (:class:`PredictApiError`) whose ``kind`` says what went wrong, so the
    pipeline can tell a timeout from a refused connection from a bad status.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

import requests

from .rows import CATALOG_WRAPPER_KEYS, unwrap_rows
from .types import ApiConfig

logger = logging.getLogger(__name__)

_JSON_HEADERS = {"Content-Type": "application/json"}

TIMEOUT_MESSAGE = "The request timed out."
CONNECTION_MESSAGE = "Could not reach the prediction server. Check the server address."


class PredictApiError(RuntimeError):
    """Transport-level failure talking to the prediction service.

    kind is one of: "http", "timeout", "connection", "decode".
    """

    def __init__(
        self,
        message: str,
        *,
        kind: str,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.status_code = status_code
        self.url = url


def _send(
    method: str,
    url: str,
    *,
    timeout: float,
    payload: Optional[Mapping[str, Any]] = None,
) -> Any:
    try:
        if method == "GET":
            resp = requests.get(url, headers=_JSON_HEADERS, timeout=timeout)
        else:
            resp = requests.post(url, json=payload, headers=_JSON_HEADERS, timeout=timeout)
    except requests.Timeout as e:
        raise PredictApiError(TIMEOUT_MESSAGE, kind="timeout", url=url) from e
    except requests.ConnectionError as e:
        raise PredictApiError(CONNECTION_MESSAGE, kind="connection", url=url) from e
    except requests.RequestException as e:
        raise PredictApiError(f"Request failed: {e}", kind="connection", url=url) from e

    if not resp.ok:
        text = (resp.text or "")[:200]
        msg = f"HTTP {resp.status_code} {resp.reason or ''}".rstrip()
        if text:
            msg += f" - {text}"
        raise PredictApiError(msg, kind="http", status_code=resp.status_code, url=url)

    try:
        return resp.json()
    except ValueError as e:
        raise PredictApiError("Could not decode JSON response.", kind="decode", url=url) from e


def fetch_catalog_rows(cfg: ApiConfig) -> List[Dict[str, Any]]:
    """GET the master catalog (a list, or ``{"rows": [...]}``)."""
    data = _send("GET", cfg.url(cfg.catalog_path), timeout=cfg.catalog_timeout)
    rows = unwrap_rows(data, CATALOG_WRAPPER_KEYS)
    logger.info("Fetched %d catalog rows", len(rows))
    return rows


def submit_cases(cfg: ApiConfig, data_object: Mapping[str, Mapping[str, str]]) -> Any:
    """POST the per-case maps; returns the raw JSON payload."""
    return _send(
        "POST",
        cfg.url(cfg.submit_path),
        timeout=cfg.submit_timeout,
        payload={"dataObject": dict(data_object)},
    )


def retrieve_predictions(cfg: ApiConfig, id_list: Sequence[Any]) -> Any:
    """POST the assigned ids (in submission order); returns the raw JSON payload."""
    return _send(
        "POST",
        cfg.url(cfg.retrieve_path),
        timeout=cfg.retrieve_timeout,
        payload={"idList": list(id_list)},
    )


class PredictApiClient:
    """Config-bound wrapper handed to the pipeline."""

    def __init__(self, cfg: ApiConfig) -> None:
        self.cfg = cfg

    def fetch_catalog(self) -> List[Dict[str, Any]]:
        return fetch_catalog_rows(self.cfg)

    def submit(self, data_object: Mapping[str, Mapping[str, str]]) -> Any:
        return submit_cases(self.cfg, data_object)

    def retrieve(self, id_list: Sequence[Any]) -> Any:
        return retrieve_predictions(self.cfg, id_list)
