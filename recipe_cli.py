#!/usr/bin/env python3
"""
CLI for the recipe property predictor.

Modes:
  1) catalog     - list the materials and properties the service knows
  2) predict     - submit cases once and print the correlated predictions
  3) interactive - edit cases/properties from a menu and run predictions

Usage:
  python recipe_cli.py
  python recipe_cli.py --mode catalog
  python recipe_cli.py --mode predict --cases recipes.json --properties ITEM_T_01,ITEM_T_02
  python recipe_cli.py --mode predict --out results.json --api-base http://10.0.0.5:24828
  python recipe_cli.py --mode interactive --verbose
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from typing import Optional, Sequence

from cli.args.base import add_base_args
from cli.args.predict import add_predict_args
from cli.dispatch import dispatch
from pipeline.wiring import build_session, configure_logging, load_dotenv_if_present
from tools.predict_api import ApiConfig


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Predict material properties for recipe cases.")
    add_base_args(parser)
    add_predict_args(parser)
    return parser.parse_args(argv)


def resolve_config(args: argparse.Namespace) -> ApiConfig:
    """Environment (.env included) first, then command-line overrides."""
    if not args.no_dotenv:
        load_dotenv_if_present()

    try:
        cfg = ApiConfig.from_env()
    except ValueError as e:
        raise SystemExit(f"Invalid configuration: {e}")

    if args.api_base:
        cfg = replace(cfg, base_url=args.api_base)
    if args.timeout is not None:
        if args.timeout <= 0:
            raise SystemExit("--timeout must be positive.")
        cfg = replace(
            cfg,
            catalog_timeout=args.timeout,
            submit_timeout=args.timeout,
            retrieve_timeout=args.timeout,
        )
    return cfg


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.verbose)

    cfg = resolve_config(args)
    print(f"Prediction service: {cfg.base_url}")

    session = build_session(load_env=False, cfg=cfg)
    notice = session.errors.current
    if notice is not None:
        print(f"⚠️ {notice.message}")

    return dispatch(args, session)


if __name__ == "__main__":
    raise SystemExit(main())
