"""recipe_predict.domain.validation

Local (synchronous) validation helpers.

Validation failures never travel through the pipeline's error channel: they
are raised as :class:`ValidationError` so the caller can surface them inline
next to the offending input.
"""

from __future__ import annotations

import math
from typing import Any, Optional


class ValidationError(ValueError):
    """A user edit was rejected before it reached the case store.

    ``reset_value`` is set when the store already replaced the offending input
    with a safe default (e.g. a non-positive quantity reset to 1).
    """

    def __init__(self, message: str, *, reset_value: Optional[float] = None) -> None:
        super().__init__(message)
        self.reset_value = reset_value


def coerce_quantity(v: Any) -> Optional[float]:
    """Best-effort conversion of user/server input to a finite float.

    Returns None for empty strings, booleans, NaN/inf and anything that does
    not parse as a number.
    """
    if v is None:
        return None
    # bool is a subclass of int; treat as invalid.
    if isinstance(v, bool):
        return None
    if isinstance(v, str):
        v = v.strip()
        if not v:
            return None
    try:
        out = float(v)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(out):
        return None
    return out


def format_quantity(v: float) -> str:
    """Stringify a quantity the way the prediction service expects.

    Integral values are sent without a trailing ``.0`` ("1", not "1.0").
    """
    f = float(v)
    if f.is_integer():
        return str(int(f))
    return repr(f)
