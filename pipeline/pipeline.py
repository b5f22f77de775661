"""pipeline.pipeline

This module defines a *single, high-level* object that represents one user
session of the predictor.

Why this exists
---------------
The behavior is implemented across several small owners:

- :mod:`pipeline.catalog` classifies the option catalog.
- :mod:`pipeline.case_store` owns the recipe cases.
- :mod:`pipeline.selection` owns the chosen property codes.
- :mod:`pipeline.prediction` runs the remote round trips and owns results.
- :mod:`pipeline.errors` holds the last failure.

Callers (CLI, notebooks, tests) should not have to wire those together
themselves. :class:`RecipePredictionSession` is the front door: it is built
once per session (see :func:`pipeline.wiring.build_session`) and handed to
whatever needs it. There is no module-level state.
"""

from __future__ import annotations

from typing import Any, Callable, List, Optional, Tuple

from recipe_predict.domain import DetailRow, Option, PredictionResult
from recipe_predict.domain.option import filter_options

from .case_store import CaseStore, default_cases, seed_cases_from_rows
from .catalog import OptionCatalog, load_catalog
from .errors import ErrorChannel, ErrorNotice, reason_for_kind
from .prediction import PipelineState, PredictionPipeline, RunOutcome
from .selection import PropertySelection

BOOTSTRAP_FALLBACK_MESSAGE = "No server response: initialized with test data."


class RecipePredictionSession:
    """High-level facade over catalog, cases, selection and prediction runs.

    ``client`` needs ``fetch_catalog()``, ``submit(data_object)`` and
    ``retrieve(id_list)`` (see :class:`tools.predict_api.PredictApiClient`).
    """

    def __init__(
        self,
        client: Any,
        *,
        on_state_change: Optional[Callable[[PipelineState], None]] = None,
    ) -> None:
        self._client = client
        self.errors = ErrorChannel()
        self.prediction = PredictionPipeline(client, error_channel=self.errors, on_state_change=on_state_change)

        self.catalog = OptionCatalog()
        self.cases = CaseStore()
        self.selection = PropertySelection(())

    def bootstrap(self) -> OptionCatalog:
        """Fetch the catalog once and seed cases, selection and placeholder results."""
        catalog, err = load_catalog(self._client.fetch_catalog)
        self.catalog = catalog

        if catalog.material_rows:
            seeded = seed_cases_from_rows(catalog.material_rows, catalog.materials)
        else:
            seeded = default_cases(catalog.materials)
        self.cases = CaseStore(seeded, materials=catalog.materials)

        self.selection = PropertySelection.initial(catalog.properties)
        self.prediction.publish(self.selection.placeholder_results())

        if err is not None:
            self.errors.report(
                ErrorNotice(BOOTSTRAP_FALLBACK_MESSAGE, reason=reason_for_kind(err.kind), phase="catalog")
            )
        return catalog

    # ---- results ----

    @property
    def results(self) -> Tuple[PredictionResult, ...]:
        return self.prediction.results

    @property
    def is_busy(self) -> bool:
        return self.prediction.is_busy

    def run_prediction(self) -> RunOutcome:
        """Run one prediction for the current cases and selection.

        Raises ValidationError (nothing sent) if a quantity is not positive,
        and PipelineBusyError if a run is already in flight.
        """
        self.cases.check_submittable()
        return self.prediction.run(self.cases.cases, self.selection.codes, self.catalog.properties)

    def toggle_result(self, result_id: str) -> Tuple[PredictionResult, ...]:
        results = self.prediction.results
        if not any(r.id == result_id for r in results):
            raise KeyError(result_id)
        return self.prediction.publish([r.toggled() if r.id == result_id else r for r in results])

    def detail_for(self, result_id: str) -> Tuple[str, Tuple[DetailRow, ...]]:
        for r in self.prediction.results:
            if r.id == result_id:
                return r.title, r.detail_rows
        raise KeyError(result_id)

    # ---- properties ----

    def search_properties(self, term: Optional[str]) -> List[Option]:
        return filter_options(self.catalog.properties, term)

    def confirm_selection(self, codes: List[str]) -> Tuple[PredictionResult, ...]:
        """Store the new selection and publish a zeroed placeholder result for it."""
        self.selection.confirm(codes)
        return self.prediction.publish(self.selection.placeholder_results())
