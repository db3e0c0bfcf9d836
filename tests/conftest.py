import numpy as np
import pandas as pd
import pytest

COLUMNS = ['country', 'year', 'solar', 'wind', 'hydro', 'total_renewables', 'gdp']


def make_records(rows):
    """Build an EnergyRecord frame from dicts; unspecified values are missing."""
    return pd.DataFrame(
        [{col: row.get(col, np.nan) for col in COLUMNS} for row in rows],
        columns=COLUMNS,
    ).astype({'year': int, 'solar': float, 'wind': float, 'hydro': float,
              'total_renewables': float, 'gdp': float})


@pytest.fixture
def scenario_records():
    return make_records([
        {'country': 'A', 'year': 2016, 'solar': 50.0},
        {'country': 'A', 'year': 2020, 'solar': 100.0},
        {'country': 'B', 'year': 2016, 'solar': 0.0},
        {'country': 'B', 'year': 2020, 'solar': 10.0},
    ])


@pytest.fixture
def records():
    rows = []
    for year in range(2015, 2021):
        t = year - 2015
        rows.append({'country': 'Spain', 'year': year, 'solar': 10.0 + t, 'wind': 20.0 + 2 * t,
                     'hydro': 30.0, 'total_renewables': 60.0 + 3 * t, 'gdp': 1000.0 + 50 * t})
        rows.append({'country': 'Kenya', 'year': year, 'solar': 1.0 + 0.5 * t, 'wind': np.nan,
                     'hydro': 3.0, 'total_renewables': 4.0 + 0.5 * t,
                     'gdp': np.nan if year == 2017 else 60.0 + 4 * t})
        rows.append({'country': 'Denmark', 'year': year, 'solar': 2.0 * (t + 1), 'wind': 15.0 - t,
                     'hydro': np.nan, 'total_renewables': 17.0 + t, 'gdp': 300.0 + 9 * t})
    return make_records(rows)


@pytest.fixture
def coords():
    return pd.DataFrame({
        'country': ['Spain', 'Kenya', 'Norway'],
        'latitude': [40.4637, -0.0236, 60.472],
        'longitude': [-3.7492, 37.9062, 8.4689],
    })
