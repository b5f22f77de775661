from __future__ import annotations

import argparse


def add_predict_args(parser: argparse.ArgumentParser) -> None:
    """Register flags for predict mode."""

    parser.add_argument(
        "--cases",
        help=(
            "(predict mode) Recipe file (JSON, or YAML for .yml/.yaml): {\"cases\": [{\"ingredients\": [{\"name\": ..., \"value\": ...}]}]}. "
            "If omitted, the cases seeded from the catalog are used."
        ),
    )
    parser.add_argument(
        "--properties",
        help="(predict mode) Comma-separated property codes. If omitted, the first 6 catalog properties are used.",
    )
    parser.add_argument("--out", help="(predict mode) Write cases + results as JSON to this path.")
