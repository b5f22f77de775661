"""recipe_predict

Core package namespace for the recipe property predictor.

Why this exists
---------------
The runtime is split into a few top-level packages (``tools`` talks HTTP,
``pipeline`` orchestrates, ``cli`` is the user-facing surface). All of them
need to agree on the same small vocabulary of data types, so that vocabulary
lives here and depends on nothing else in the repo:

* domain types (cases, ingredients, options, prediction results)
* local validation errors
* IO helpers (atomic JSON writes)
"""

from __future__ import annotations

from .domain import (
    Case,
    DetailRow,
    Ingredient,
    Option,
    PredictionResult,
    ValidationError,
)

__all__ = [
    "Case",
    "DetailRow",
    "Ingredient",
    "Option",
    "PredictionResult",
    "ValidationError",
]
