"""pipeline.selection

The ordered set of property codes the user wants predicted.

Order is significant: it defines the column order of every prediction
result. Confirmed selections are always stored in *catalog* order so the
columns stay stable no matter in which order the user ticked the boxes.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

from recipe_predict.domain import DetailRow, Option, PredictionResult
from recipe_predict.domain.option import label_for

from .core import INITIAL_PROPERTY_COUNT

PLACEHOLDER_TITLE = "Test case - 1"


class PropertySelection:
    def __init__(self, properties: Sequence[Option], codes: Iterable[str] = ()) -> None:
        self._properties: Tuple[Option, ...] = tuple(properties)
        self._codes: Tuple[str, ...] = self._in_catalog_order(codes)

    @classmethod
    def initial(cls, properties: Sequence[Option], count: int = INITIAL_PROPERTY_COUNT) -> "PropertySelection":
        return cls(properties, [o.value for o in list(properties)[:count]])

    @property
    def codes(self) -> Tuple[str, ...]:
        return self._codes

    @property
    def properties(self) -> Tuple[Option, ...]:
        return self._properties

    def _in_catalog_order(self, codes: Iterable[str]) -> Tuple[str, ...]:
        wanted = set(codes)
        return tuple(o.value for o in self._properties if o.value in wanted)

    def labels(self) -> List[str]:
        return [label_for(self._properties, code) for code in self._codes]

    def confirm(self, codes: Iterable[str]) -> Tuple[str, ...]:
        """Replace the selection; unknown codes are dropped."""
        self._codes = self._in_catalog_order(codes)
        return self._codes

    def toggle_all(self, visible_codes: Sequence[str]) -> Tuple[str, ...]:
        """Select every visible code, or clear them all if all are selected.

        Returns the candidate selection; nothing changes until :meth:`confirm`.
        """
        current = set(self._codes)
        visible = set(visible_codes)
        if visible and visible <= current:
            candidate = current - visible
        else:
            candidate = current | visible
        return self._in_catalog_order(candidate)

    def placeholder_results(self) -> Tuple[PredictionResult, ...]:
        """A single all-zero result covering the current selection."""
        rows = [DetailRow(label=label) for label in self.labels()]
        return (PredictionResult.from_rows(title=PLACEHOLDER_TITLE, checked=True, rows=rows),)
