"""pipeline.wiring

This module is the **composition root** for the Python runtime.

"Composition root" means: the single place where we *assemble* the running
application from its building blocks:

- load configuration / environment variables (``.env`` via python-dotenv)
- configure logging
- choose the real HTTP client or an injected stand-in (tests, demos)
- build the session facade

Keeping this wiring in one place prevents configuration and dependency setup
from being duplicated across entrypoints (CLI, scripts, notebooks).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from tools.predict_api import ApiConfig, PredictApiClient

from .core import ROOT_DIR
from .pipeline import RecipePredictionSession

ENV_PATH: Path = ROOT_DIR / ".env"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def load_dotenv_if_present(dotenv_path: Path = ENV_PATH) -> bool:
    """Load KEY=VALUE lines into os.environ; already-exported variables win."""
    if not dotenv_path.exists():
        return False
    return bool(load_dotenv(dotenv_path, override=False))


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format=LOG_FORMAT)
    # urllib3 connection chatter drowns the pipeline's own DEBUG lines.
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def build_session(
    *,
    load_env: bool = True,
    cfg: Optional[ApiConfig] = None,
    client: Any = None,
    bootstrap: bool = True,
) -> RecipePredictionSession:
    """Build (and by default bootstrap) a session.

    *client* overrides the HTTP client entirely; otherwise one is built from
    *cfg* or, failing that, from RECIPE_API_* environment variables.
    """
    if load_env:
        load_dotenv_if_present(ENV_PATH)

    if client is None:
        client = PredictApiClient(cfg or ApiConfig.from_env())

    session = RecipePredictionSession(client)
    if bootstrap:
        session.bootstrap()
    return session
