from __future__ import annotations

"""cli.common

Small shared helpers for CLI command modules.

The CLI is split by "mode" (catalog/predict/interactive). Helpers that more
than one mode needs live here so two command files never grow diverging
copies of the same parsing or printing logic.
"""

from pathlib import Path
from typing import Any, Optional, Sequence, Tuple

from recipe_predict.domain import Case, PredictionResult
from recipe_predict.io import read_json


def parse_csv(raw: Optional[str]) -> list[str]:
    """Parse a comma-separated list value into a list of non-empty strings."""
    if not raw:
        return []
    return [x.strip() for x in raw.split(",") if x.strip()]


def fmt3(v: float) -> str:
    return f"{float(v):.3f}"


YAML_SUFFIXES = (".yml", ".yaml")


def _read_recipe_document(path: Path) -> Any:
    if path.suffix.lower() not in YAML_SUFFIXES:
        return read_json(path)

    import yaml  # type: ignore

    try:
        return yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"{path}: yaml_parse_error: {e}") from e


def load_cases_file(path: Path) -> Tuple[Case, ...]:
    """Read a recipe file: ``{"cases": [{"ingredients": [{"name", "value"}]}]}``.

    JSON by default, YAML for ``.yml``/``.yaml``. A bare list of cases is
    accepted too. Raises ValueError on a bad shape.
    """
    data = _read_recipe_document(Path(path))
    raw_cases = data.get("cases") if isinstance(data, dict) else data
    if not isinstance(raw_cases, list):
        raise ValueError(f"{path}: expected a 'cases' list")
    try:
        return tuple(Case.from_dict(c) for c in raw_cases)
    except (TypeError, AttributeError) as e:
        raise ValueError(f"{path}: {e}") from e


def print_cases(cases: Sequence[Case]) -> None:
    for c in cases:
        print(f"\n{c.title}  ({c.ingredient_count} ingredients)")
        for i, ing in enumerate(c.ingredients, start=1):
            print(f"  [{i}] {ing.name:<30} {ing.value:g}")


def print_results(results: Sequence[PredictionResult]) -> None:
    for r in results:
        mark = "x" if r.checked else " "
        print(f"\n[{mark}] {r.title}")
        if not r.detail_rows:
            print("  (no properties)")
            continue
        width = max(len("Property"), *(len(d.label) for d in r.detail_rows))
        print(f"  {'Property':<{width}}  {'y_pred':>10}  {'ci_low':>10}  {'ci_high':>10}")
        for d in r.detail_rows:
            print(f"  {d.label:<{width}}  {fmt3(d.y_pred):>10}  {fmt3(d.ci_low):>10}  {fmt3(d.ci_high):>10}")


def results_payload(
    cases: Sequence[Case],
    codes: Sequence[str],
    results: Sequence[PredictionResult],
) -> dict:
    """JSON document written by ``--out``."""
    return {
        "cases": [c.to_dict() for c in cases],
        "properties": list(codes),
        "results": [r.to_dict() for r in results],
    }
