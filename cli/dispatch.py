from __future__ import annotations

import argparse

from cli.commands.catalog import run_catalog
from cli.commands.interactive import run_interactive
from cli.commands.predict import run_predict
from cli.ui import choose_from_menu
from pipeline.pipeline import RecipePredictionSession

MODE_LABELS = {
    "predict": "Run one prediction",
    "interactive": "Edit cases and run predictions interactively",
    "catalog": "List materials and properties",
}


def dispatch(args: argparse.Namespace, session: RecipePredictionSession) -> int:
    mode = args.mode or choose_from_menu("Choose a mode:", MODE_LABELS)

    if mode == "catalog":
        return int(run_catalog(args, session))
    if mode == "interactive":
        return int(run_interactive(args, session))

    # default: predict
    return int(run_predict(args, session))
