# pipeline/core.py
from __future__ import annotations

from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]

MAX_CASE = 10
MAX_ING = 100

DEFAULT_INGREDIENT_VALUE = 1.0

# Reserved key in every submitted case map; value = comma-joined property codes.
PREDICT_LIST_KEY = "PREDICT_LIST"

# Catalog code substrings that classify a row.
MATERIAL_MARKER = "ITEM_M"
PROPERTY_MARKER = "ITEM_T"

INITIAL_PROPERTY_COUNT = 6
FALLBACK_PROPERTY_COUNT = 10

# Number of cases shown right after bootstrap.
INITIAL_CASE_COUNT = 2


def case_title(position: int) -> str:
    """Title for the case at 0-based *position*."""
    return f"case - {position + 1}"


def placeholder_material_label(index: int) -> str:
    return f"Material {index + 1}"
