"""
Derived tables feeding each dashboard view.

Every function here is pure: it takes the read-only base tables plus explicit
filter arguments and returns a new DataFrame. `DashboardPipeline` memoizes
them so a callback only recomputes the stages whose inputs changed.
"""

import logging
from functools import lru_cache

import numpy as np
import pandas as pd

from energy_dashboard import settings
from energy_dashboard.data import EnergySource
from energy_dashboard.regression import fit_regression

logger = logging.getLogger(__name__)

DELTA_COLUMNS = ['country', 'value_start', 'value_latest', 'delta']
MAP_COLUMNS = ['country', 'latitude', 'longitude', 'delta']


# FILTER ENGINE

def effective_selection(records, selected_countries):
    """
    Resolve the user's country selection.

    An empty selection means "all countries": every distinct country in
    `records`, in dataset order. Returns (countries, used_fallback).
    """
    if selected_countries:
        return list(selected_countries), False
    return list(records['country'].unique()), True


def filter_records(records, selected_countries, year_min, year_max):
    """Rows whose country is selected and whose year lies in [year_min, year_max]."""
    countries, _ = effective_selection(records, selected_countries)
    mask = (
        records['country'].isin(countries)
        & (records['year'] >= year_min)
        & (records['year'] <= year_max)
    )
    return records.loc[mask]


# DELTA ENGINE

def _values_for_year(records, column, year, name):
    rows = records.loc[records['year'] == year, ['country', column]]
    # min_count=1 keeps an all-missing country absent instead of 0
    values = rows.groupby('country')[column].sum(min_count=1)
    return values.rename(name).reset_index()


def compute_delta_4yr(records, source):
    """
    Percentage change of `source` per country between the latest year in the
    dataset and the year four years earlier, clamped to [0, 100].

    The start year is looked up literally; a gap in the data leaves the start
    value absent. A missing, infinite or non-positive start value, or a missing
    or infinite latest value, yields a delta of exactly 0.
    """
    column = EnergySource.from_value(source).column
    years = records['year'].dropna()
    if years.empty:
        return pd.DataFrame(columns=DELTA_COLUMNS)

    latest_year = int(years.max())
    start_year = latest_year - settings.DELTA_WINDOW_YEARS

    start = _values_for_year(records, column, start_year, 'value_start')
    latest = _values_for_year(records, column, latest_year, 'value_latest')
    deltas = start.merge(latest, on='country', how='outer')
    deltas = deltas.sort_values('country', ignore_index=True)
    deltas['value_start'] = deltas['value_start'].astype(float)
    deltas['value_latest'] = deltas['value_latest'].astype(float)

    valid = (
        np.isfinite(deltas['value_start'])
        & (deltas['value_start'] > 0)
        & np.isfinite(deltas['value_latest'])
    )
    raw = (deltas['value_latest'] - deltas['value_start']) / deltas['value_start'] * 100
    low, high = settings.DELTA_RANGE
    deltas['delta'] = raw.where(valid, 0.0).clip(lower=low, upper=high).astype(float)
    return deltas[DELTA_COLUMNS]


# AGGREGATION ENGINE

def aggregate_by_year(filtered, source):
    """Total production of `source` per year; missing values count as 0."""
    column = EnergySource.from_value(source).column
    totals = filtered.groupby('year', as_index=False)[column].sum()
    return totals.rename(columns={column: 'total'})


def aggregate_by_year_country(filtered, source):
    """Production of `source` per (year, country); missing values count as 0."""
    column = EnergySource.from_value(source).column
    production = filtered.groupby(['year', 'country'], as_index=False)[column].sum()
    return production.rename(columns={column: 'production'})


def aggregate_for_regression(filtered):
    """
    GDP and total renewable production per (country, year).

    Rows without GDP are dropped before grouping, so a country-year with no
    GDP at all never reaches the regression.
    """
    with_gdp = filtered.dropna(subset=['gdp'])
    return with_gdp.groupby(['country', 'year'], as_index=False).agg(
        gdp=('gdp', 'sum'),
        renewable_production=('total_renewables', 'sum'),
    )


# MAP JOIN

def join_map_data(coords, deltas):
    """
    Attach deltas to coordinate rows.

    Coordinate rows without a delta keep a missing delta; delta rows without
    coordinates are dropped since they cannot be placed on a map.
    """
    joined = coords.merge(deltas[['country', 'delta']], on='country', how='left')
    return joined[MAP_COLUMNS]


# MEMOIZED PIPELINE

def _normalize_countries(countries):
    if not countries:
        return ()
    return tuple(sorted(set(countries)))


class DashboardPipeline:
    """
    Cached view of the derived tables over a fixed pair of base tables.

    The base tables are never modified. Returned DataFrames are shared
    between callers and must be treated as read-only.
    """

    def __init__(self, records, coords):
        self.records = records
        self.coords = coords
        self.countries = list(records['country'].unique())
        self.latest_year = int(records['year'].max()) if len(records) else None

        self._filtered = lru_cache(maxsize=64)(self._compute_filtered)
        self._time_series = lru_cache(maxsize=64)(self._compute_time_series)
        self._regression_input = lru_cache(maxsize=64)(self._compute_regression_input)
        self._delta = lru_cache(maxsize=None)(self._compute_delta)
        self._map_data = lru_cache(maxsize=None)(self._compute_map_data)

    def selection(self, countries):
        return effective_selection(self.records, _normalize_countries(countries))

    def filtered(self, countries, year_min, year_max):
        return self._filtered(_normalize_countries(countries), int(year_min), int(year_max))

    def time_series(self, countries, year_min, year_max, source):
        """(per-country production, yearly total) for the time series chart."""
        return self._time_series(_normalize_countries(countries), int(year_min), int(year_max),
                                 EnergySource.from_value(source))

    def regression_input(self, countries, year_min, year_max):
        return self._regression_input(_normalize_countries(countries), int(year_min), int(year_max))

    def regression(self, countries, year_min, year_max):
        """Fit GDP vs renewable production; raises InsufficientDataError."""
        reg_data = self.regression_input(countries, year_min, year_max)
        return fit_regression(reg_data['gdp'], reg_data['renewable_production'])

    def delta(self, source):
        return self._delta(EnergySource.from_value(source))

    def map_data(self, source):
        return self._map_data(EnergySource.from_value(source))

    def cache_info(self):
        return {
            'filtered': self._filtered.cache_info(),
            'time_series': self._time_series.cache_info(),
            'regression_input': self._regression_input.cache_info(),
            'delta': self._delta.cache_info(),
            'map_data': self._map_data.cache_info(),
        }

    def _compute_filtered(self, countries, year_min, year_max):
        return filter_records(self.records, countries, year_min, year_max)

    def _compute_time_series(self, countries, year_min, year_max, source):
        filtered = self._filtered(countries, year_min, year_max)
        return aggregate_by_year_country(filtered, source), aggregate_by_year(filtered, source)

    def _compute_regression_input(self, countries, year_min, year_max):
        return aggregate_for_regression(self._filtered(countries, year_min, year_max))

    def _compute_delta(self, source):
        logger.debug("Computing %s deltas", source.value)
        return compute_delta_4yr(self.records, source)

    def _compute_map_data(self, source):
        return join_map_data(self.coords, self._delta(source))
