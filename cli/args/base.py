from __future__ import annotations

import argparse

MODES = ("catalog", "predict", "interactive")


def add_base_args(parser: argparse.ArgumentParser) -> None:
    """Register flags shared by every mode (mode selection, connection, logging)."""

    parser.add_argument(
        "--mode",
        choices=list(MODES),
        help=(
            "catalog = list materials/properties, predict = one prediction run from flags/files, "
            "interactive = menu-driven editing and runs"
        ),
    )
    parser.add_argument(
        "--api-base",
        help="Prediction service base URL (default: RECIPE_API_BASE or http://127.0.0.1:24828).",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="Per-request timeout in seconds for every endpoint (default: 15s, 20s for retrieval).",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable DEBUG logging.")
    parser.add_argument(
        "--no-dotenv",
        action="store_true",
        help="Do not load the repo-root .env file.",
    )
