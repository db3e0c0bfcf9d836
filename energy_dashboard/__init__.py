"""
Renewable energy trends dashboard
---------------------------------

Data layer behind the Dash app in ``app.py``:

- data: loading and canonical schema of the two input tables
- pipeline: filter, aggregation, 4-year delta and map join
- regression: OLS fit of renewable production against GDP
- figures: plotly figures for each view
"""

from .data import DatasetError, EnergySource, load_dataset
from .pipeline import (
    DashboardPipeline,
    aggregate_by_year,
    aggregate_by_year_country,
    aggregate_for_regression,
    compute_delta_4yr,
    effective_selection,
    filter_records,
    join_map_data,
)
from .regression import InsufficientDataError, RegressionResult, fit_regression

__all__ = [
    "DatasetError",
    "EnergySource",
    "load_dataset",
    "DashboardPipeline",
    "aggregate_by_year",
    "aggregate_by_year_country",
    "aggregate_for_regression",
    "compute_delta_4yr",
    "effective_selection",
    "filter_records",
    "join_map_data",
    "InsufficientDataError",
    "RegressionResult",
    "fit_regression",
]
