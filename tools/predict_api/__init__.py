"""tools.predict_api

Client for the remote recipe property prediction service.

Three logical operations:

* catalog fetch (GET)  - master list of materials and properties
* submit (POST)        - per-case ingredient maps; returns assigned ids
* retrieve (POST)      - predicted values for a list of assigned ids
"""

from .api import (
    PredictApiClient,
    PredictApiError,
    fetch_catalog_rows,
    retrieve_predictions,
    submit_cases,
)
from .types import ApiConfig

__all__ = [
    "ApiConfig",
    "PredictApiClient",
    "PredictApiError",
    "fetch_catalog_rows",
    "retrieve_predictions",
    "submit_cases",
]
