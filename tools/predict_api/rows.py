"""tools/predict_api/rows.py

Tolerant readers for the loosely-shaped JSON the prediction service returns.

The service has shipped several spellings of the same fields over time
(``RECIPE_IDX`` vs ``recipe_idx``, ``rows`` vs ``data`` wrappers, ...). Each
field is described by an ordered tuple of candidate keys; the first key with a
usable value wins. Keep new aliases in these tuples rather than growing
``or``-chains at call sites.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

from recipe_predict.domain import coerce_quantity

# ---- Catalog rows ----
CATALOG_WRAPPER_KEYS = ("rows",)
CATALOG_CODE_KEYS = ("CODE", "code")
DISPLAY_NAME_KEYS = ("CODENAME", "MAT_NAME", "NAME")

# Material rows may also describe an existing recipe.
RECIPE_GROUP_KEYS = ("ID", "RECIPE_IDX", "TITLE")
MATERIAL_NAME_KEYS = ("MAT_NAME", "NAME")
QUANTITY_KEYS = ("VALUE", "QUANTITY")

# ---- Submit response ----
INSERTED_ROWS_KEY = "insertedRows"
INSERTED_ID_KEY = "insertedId"

# ---- Retrieval rows ----
RESULT_WRAPPER_KEYS = ("rows", "data", "items", "result", "results")
ROW_ID_KEYS = ("RECIPE_IDX", "recipe_idx", "ID", "id")
PROPERTY_CODE_KEYS = ("CODE", "code", "target")
Y_PRED_KEYS = ("y_pred", "Y_PRED")
CI_LOW_KEYS = ("ci_low", "CI_LOW")
CI_HIGH_KEYS = ("ci_high", "CI_HIGH")


def first_present(row: Mapping[str, Any], keys: Sequence[str]) -> Any:
    """Return the value of the first key that is set and not a blank string."""
    if not isinstance(row, Mapping):
        return None
    for k in keys:
        v = row.get(k)
        if v is None:
            continue
        if isinstance(v, str) and not v.strip():
            continue
        return v
    return None


def first_str(row: Mapping[str, Any], keys: Sequence[str]) -> Optional[str]:
    v = first_present(row, keys)
    return None if v is None else str(v).strip()


def first_float(row: Mapping[str, Any], keys: Sequence[str], default: float = 0.0) -> float:
    q = coerce_quantity(first_present(row, keys))
    return default if q is None else q


def unwrap_rows(payload: Any, wrapper_keys: Sequence[str]) -> List[Dict[str, Any]]:
    """Accept a bare list or an object wrapping the list under one of *wrapper_keys*."""
    if isinstance(payload, list):
        items = payload
    elif isinstance(payload, Mapping):
        items = []
        for k in wrapper_keys:
            arr = payload.get(k)
            if isinstance(arr, list):
                items = arr
                break
    else:
        items = []
    return [dict(r) for r in items if isinstance(r, Mapping)]


def catalog_code(row: Mapping[str, Any]) -> Optional[str]:
    return first_str(row, CATALOG_CODE_KEYS)


def display_name(row: Mapping[str, Any], code: str) -> str:
    """Display name for a catalog row, falling back to the raw code."""
    return first_str(row, DISPLAY_NAME_KEYS) or code


def normalize_id(v: Any) -> str:
    """Canonical string form of a server id: 101, 101.0 and " 101" all read "101"."""
    if isinstance(v, float) and v.is_integer():
        return str(int(v))
    return str(v).strip()


def extract_inserted_ids(payload: Any) -> List[Any]:
    """Pull the server-assigned ids out of a submit response, in order.

    Returns [] when ``insertedRows`` is missing, not a list, or empty.
    Raises ValueError when an entry carries no id: dropping it would shift
    every later id onto the wrong case.
    """
    if not isinstance(payload, Mapping):
        return []
    rows = payload.get(INSERTED_ROWS_KEY)
    if not isinstance(rows, list):
        return []

    ids: List[Any] = []
    for idx, r in enumerate(rows):
        v = r.get(INSERTED_ID_KEY) if isinstance(r, Mapping) else None
        if v is None:
            raise ValueError(f"{INSERTED_ROWS_KEY}[{idx}] has no {INSERTED_ID_KEY}")
        ids.append(v)
    return ids


@dataclass(frozen=True)
class PredictionRow:
    """One retrieval row reduced to the fields the pipeline uses."""

    assigned_id: str
    code: Optional[str]
    y_pred: float = 0.0
    ci_low: float = 0.0
    ci_high: float = 0.0


def parse_prediction_row(row: Mapping[str, Any]) -> Optional[PredictionRow]:
    """Return None when the row has no resolvable assigned id."""
    raw_id = first_present(row, ROW_ID_KEYS)
    if raw_id is None:
        return None
    return PredictionRow(
        assigned_id=normalize_id(raw_id),
        code=first_str(row, PROPERTY_CODE_KEYS),
        y_pred=first_float(row, Y_PRED_KEYS),
        ci_low=first_float(row, CI_LOW_KEYS),
        ci_high=first_float(row, CI_HIGH_KEYS),
    )
