"""recipe_predict.domain.prediction

Prediction results as published to consumers.

A run produces one :class:`PredictionResult` per submitted case, positionally
aligned with the case tuple as it was at submission time. The arrays
``values``, ``ci_low`` and ``ci_high`` are parallel to ``property_keys`` and
``detail_rows`` carries the same numbers as label/value/low/high tuples for
full-precision display.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Sequence, Tuple


@dataclass(frozen=True)
class DetailRow:
    """One property line of a result: label + predicted value + interval."""

    label: str
    y_pred: float = 0.0
    ci_low: float = 0.0
    ci_high: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "y_pred": self.y_pred,
            "ci_low": self.ci_low,
            "ci_high": self.ci_high,
        }


@dataclass(frozen=True)
class PredictionResult:
    id: str
    title: str
    checked: bool
    property_keys: Tuple[str, ...] = field(default_factory=tuple)
    values: Tuple[float, ...] = field(default_factory=tuple)
    ci_low: Tuple[float, ...] = field(default_factory=tuple)
    ci_high: Tuple[float, ...] = field(default_factory=tuple)
    detail_rows: Tuple[DetailRow, ...] = field(default_factory=tuple)

    # Stable Case.id this result was computed for (None for placeholders).
    case_id: Optional[str] = None

    @property
    def prop_count(self) -> int:
        return len(self.property_keys)

    @classmethod
    def from_rows(
        cls,
        *,
        title: str,
        checked: bool,
        rows: Sequence[DetailRow],
        case_id: Optional[str] = None,
        result_id: Optional[str] = None,
    ) -> "PredictionResult":
        """Build a result whose parallel arrays are derived from *rows*."""
        rows_t = tuple(rows)
        return cls(
            id=result_id or str(uuid.uuid4()),
            title=title,
            checked=checked,
            property_keys=tuple(r.label for r in rows_t),
            values=tuple(r.y_pred for r in rows_t),
            ci_low=tuple(r.ci_low for r in rows_t),
            ci_high=tuple(r.ci_high for r in rows_t),
            detail_rows=rows_t,
            case_id=case_id,
        )

    def toggled(self) -> "PredictionResult":
        return replace(self, checked=not self.checked)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "checked": self.checked,
            "case_id": self.case_id,
            "prop_count": self.prop_count,
            "property_keys": list(self.property_keys),
            "values": list(self.values),
            "ci_low": list(self.ci_low),
            "ci_high": list(self.ci_high),
            "detail_rows": [r.to_dict() for r in self.detail_rows],
        }
