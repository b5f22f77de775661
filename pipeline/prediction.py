"""pipeline.prediction

Two-phase submit -> retrieve -> correlate prediction run.

Protocol
--------
1. **Submit.** Each case becomes a flat ``{ingredient name: quantity}`` map
   plus a reserved ``PREDICT_LIST`` entry holding the selected property
   codes. The maps are sent keyed by 1-based position; the service answers
   with one assigned id per case, in submission order.
2. **Retrieve.** The assigned ids are sent back as a list; the service
   answers with flat rows, each tagged with the assigned id it belongs to.
3. **Correlate.** Rows are grouped by assigned id and the i-th assigned id is
   taken to belong to the i-th submitted case. Matching is positional: the
   service never echoes our own case ids, and a service that reordered or
   dropped ids would misattribute results.

A run either publishes a complete new result tuple or leaves the previous
one untouched; there are no partial results. Only one run may be in flight.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Sequence, Tuple

from recipe_predict.domain import Case, DetailRow, Option, PredictionResult, format_quantity
from recipe_predict.domain.option import label_for
from tools.predict_api import PredictApiError
from tools.predict_api.rows import (
    RESULT_WRAPPER_KEYS,
    PredictionRow,
    extract_inserted_ids,
    normalize_id,
    parse_prediction_row,
    unwrap_rows,
)

from .core import PREDICT_LIST_KEY
from .errors import (
    ErrorChannel,
    ErrorNotice,
    FailureReason,
    PipelineBusyError,
    PipelineFailure,
    reason_for_kind,
)

logger = logging.getLogger(__name__)


class PipelineState(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    RETRIEVING = "retrieving"
    CORRELATING = "correlating"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class PredictionService(Protocol):
    """What the pipeline needs from the remote side (see tools.predict_api)."""

    def submit(self, data_object: Mapping[str, Mapping[str, str]]) -> Any: ...

    def retrieve(self, id_list: Sequence[Any]) -> Any: ...


@dataclass(frozen=True)
class RunOutcome:
    succeeded: bool
    results: Tuple[PredictionResult, ...]
    error: Optional[ErrorNotice] = None
    assigned_ids: Tuple[Any, ...] = ()


def _failure_from_api(e: PredictApiError, phase: str) -> PipelineFailure:
    return PipelineFailure(str(e), reason=reason_for_kind(e.kind), phase=phase)


def build_data_object(cases: Sequence[Case], codes: Sequence[str]) -> Dict[str, Dict[str, str]]:
    """Per-case request maps keyed by 1-based submission position."""
    predict_list = ",".join(codes)
    out: Dict[str, Dict[str, str]] = {}
    for idx, case in enumerate(cases, start=1):
        entry: Dict[str, str] = {}
        for i, ing in enumerate(case.ingredients, start=1):
            name = (ing.name or f"Material {i}").strip()
            entry[name] = format_quantity(ing.value)
        entry[PREDICT_LIST_KEY] = predict_list
        out[str(idx)] = entry
    return out


def group_rows(rows: Sequence[PredictionRow]) -> Dict[str, List[PredictionRow]]:
    grouped: Dict[str, List[PredictionRow]] = {}
    for r in rows:
        grouped.setdefault(r.assigned_id, []).append(r)
    return grouped


def correlate(
    cases: Sequence[Case],
    assigned_ids: Sequence[Any],
    grouped: Mapping[str, Sequence[PredictionRow]],
    codes: Sequence[str],
    properties: Sequence[Option],
) -> Tuple[PredictionResult, ...]:
    """One result per case, in case order; missing rows/fields default to 0."""
    results: List[PredictionResult] = []
    for i, case in enumerate(cases):
        case_rows: Sequence[PredictionRow] = []
        if i < len(assigned_ids):
            case_rows = grouped.get(normalize_id(assigned_ids[i]), [])

        details: List[DetailRow] = []
        for code in codes:
            match = next((r for r in case_rows if r.code == code), None)
            details.append(
                DetailRow(
                    label=label_for(properties, code),
                    y_pred=match.y_pred if match else 0.0,
                    ci_low=match.ci_low if match else 0.0,
                    ci_high=match.ci_high if match else 0.0,
                )
            )
        results.append(
            PredictionResult.from_rows(title=case.title, checked=i == 0, rows=details, case_id=case.id)
        )
    return tuple(results)


class PredictionPipeline:
    """Runs predictions and owns the published result tuple."""

    def __init__(
        self,
        service: PredictionService,
        *,
        error_channel: Optional[ErrorChannel] = None,
        on_state_change: Optional[Callable[[PipelineState], None]] = None,
    ) -> None:
        self._service = service
        self.error_channel = error_channel or ErrorChannel()
        self._on_state_change = on_state_change

        self._lock = threading.Lock()
        self._cancel = threading.Event()
        self._state = PipelineState.IDLE
        self._last_state: Optional[PipelineState] = None
        self._results: Tuple[PredictionResult, ...] = ()

    # ---- observation ----

    @property
    def state(self) -> PipelineState:
        return self._state

    @property
    def last_state(self) -> Optional[PipelineState]:
        """Terminal state (SUCCEEDED / FAILED) of the previous run."""
        return self._last_state

    @property
    def is_busy(self) -> bool:
        return self._state is not PipelineState.IDLE

    @property
    def results(self) -> Tuple[PredictionResult, ...]:
        return self._results

    def publish(self, results: Sequence[PredictionResult]) -> Tuple[PredictionResult, ...]:
        """Replace the result tuple outside a run (placeholder, toggles)."""
        self._results = tuple(results)
        return self._results

    def cancel(self) -> None:
        """Ask the in-flight run to stop before its next phase."""
        if self.is_busy:
            self._cancel.set()

    # ---- run ----

    def _set_state(self, state: PipelineState) -> None:
        self._state = state
        logger.debug("Prediction pipeline -> %s", state.value)
        if self._on_state_change is None:
            return
        # A broken observer must not wedge the pipeline in a busy state.
        try:
            self._on_state_change(state)
        except Exception:
            logger.exception("State observer failed on %s", state.value)

    def _check_cancelled(self, phase: str) -> None:
        if self._cancel.is_set():
            raise PipelineFailure("The prediction run was cancelled.", reason=FailureReason.CANCELLED, phase=phase)

    def _call_service(self, phase: str, fn: Callable[[Any], Any], arg: Any) -> Any:
        try:
            return fn(arg)
        except PredictApiError as e:
            raise _failure_from_api(e, phase) from e
        except Exception as e:
            raise PipelineFailure(
                f"Unexpected error talking to the prediction server: {e}",
                reason=FailureReason.TRANSPORT,
                phase=phase,
            ) from e

    def _submit(self, cases: Sequence[Case], codes: Sequence[str]) -> List[Any]:
        data_object = build_data_object(cases, codes)
        payload = self._call_service("submit", self._service.submit, data_object)

        try:
            ids = extract_inserted_ids(payload)
        except ValueError as e:
            raise PipelineFailure(str(e), reason=FailureReason.PROTOCOL, phase="submit") from e
        if not ids:
            raise PipelineFailure(
                "The server did not return any assigned ids.",
                reason=FailureReason.PROTOCOL,
                phase="submit",
            )
        if len(ids) != len(cases):
            logger.warning("Submitted %d cases but received %d assigned ids", len(cases), len(ids))
        logger.info("Submitted %d cases, assigned ids: %s", len(cases), ids)
        return ids

    def _retrieve(self, ids: Sequence[Any]) -> List[PredictionRow]:
        payload = self._call_service("retrieve", self._service.retrieve, ids)

        raw_rows = unwrap_rows(payload, RESULT_WRAPPER_KEYS)
        rows = [r for r in (parse_prediction_row(x) for x in raw_rows) if r is not None]
        if len(rows) != len(raw_rows):
            logger.debug("Discarded %d prediction rows without an assigned id", len(raw_rows) - len(rows))
        if not rows:
            raise PipelineFailure("The prediction result is empty.", reason=FailureReason.PROTOCOL, phase="retrieve")
        logger.info("Retrieved %d prediction rows for %d ids", len(rows), len(ids))
        return rows

    def run(
        self,
        cases: Sequence[Case],
        codes: Sequence[str],
        properties: Sequence[Option],
    ) -> RunOutcome:
        """Execute one run against a snapshot of *cases* and *codes*.

        Raises PipelineBusyError if a run is already in flight. Every other
        failure is reported on the error channel and returned in the outcome.
        """
        with self._lock:
            if self._state is not PipelineState.IDLE:
                logger.warning("Rejected prediction run: pipeline is %s", self._state.value)
                raise PipelineBusyError("A prediction run is already in progress.")
            self._cancel.clear()
            self._set_state(PipelineState.SUBMITTING)

        cases = tuple(cases)
        codes = tuple(codes)
        self.error_channel.dismiss()

        terminal = PipelineState.FAILED
        try:
            ids = self._submit(cases, codes)
            self._check_cancelled("retrieve")

            self._set_state(PipelineState.RETRIEVING)
            rows = self._retrieve(ids)
            self._check_cancelled("correlate")

            self._set_state(PipelineState.CORRELATING)
            results = correlate(cases, ids, group_rows(rows), codes, properties)
        except PipelineFailure as f:
            notice = ErrorNotice.from_failure(f)
            logger.error("Prediction run failed during %s (%s): %s", f.phase, f.reason.value, f)
            self.error_channel.report(notice)
            return RunOutcome(succeeded=False, results=self._results, error=notice)
        else:
            self._results = results
            terminal = PipelineState.SUCCEEDED
            return RunOutcome(succeeded=True, results=results, assigned_ids=tuple(ids))
        finally:
            self._last_state = terminal
            self._set_state(terminal)
            self._set_state(PipelineState.IDLE)
