"""
Dataset loading for the renewable energy dashboard.

Two static tables are read once at startup:

- energy-data.csv: one row per (country, year) with electricity production
  by source and GDP.
- country_coords.csv: one row per country with its map position.

Both are renamed into the canonical lowercase schema used everywhere else.
"""

import logging
from enum import Enum
from pathlib import Path

import pandas as pd

from energy_dashboard import settings

logger = logging.getLogger(__name__)

ENERGY_RENAME_MAP = {
    'country': 'country',
    'year': 'year',
    'solar_electricity': 'solar',
    'wind_electricity': 'wind',
    'hydro_electricity': 'hydro',
    'renewables_electricity': 'total_renewables',
    'gdp': 'gdp',
}

COORDS_RENAME_MAP = {
    'Country': 'country',
    'Latitude': 'latitude',
    'Longitude': 'longitude',
}

ENERGY_COLUMNS = list(ENERGY_RENAME_MAP.values())
NUMERIC_COLUMNS = ['solar', 'wind', 'hydro', 'total_renewables', 'gdp']
COORDS_COLUMNS = list(COORDS_RENAME_MAP.values())


class DatasetError(ValueError):
    """Raised when an input table is missing required columns."""


class EnergySource(Enum):
    SOLAR = 'Solar'
    WIND = 'Wind'
    HYDRO = 'Hydro'
    TOTAL_RENEWABLES = 'TotalRenewables'

    @property
    def column(self):
        return SOURCE_COLUMNS[self]

    @property
    def label(self):
        return SOURCE_LABELS[self]

    @classmethod
    def from_value(cls, value):
        """Accept an EnergySource or its dropdown value ('Solar', 'Wind', ...)."""
        if isinstance(value, cls):
            return value
        return cls(value)


SOURCE_COLUMNS = {
    EnergySource.SOLAR: 'solar',
    EnergySource.WIND: 'wind',
    EnergySource.HYDRO: 'hydro',
    EnergySource.TOTAL_RENEWABLES: 'total_renewables',
}

SOURCE_LABELS = {
    EnergySource.SOLAR: 'Solar',
    EnergySource.WIND: 'Wind',
    EnergySource.HYDRO: 'Hydro',
    EnergySource.TOTAL_RENEWABLES: 'Total Renewables',
}


def _require_columns(df, required, table_name):
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise DatasetError(f"{table_name} is missing required columns: {missing}")


def prepare_energy_records(raw: pd.DataFrame) -> pd.DataFrame:
    """Rename, select and coerce the raw energy table into EnergyRecord rows."""
    _require_columns(raw, list(ENERGY_RENAME_MAP), 'energy-data.csv')

    df = raw.rename(columns=ENERGY_RENAME_MAP)[ENERGY_COLUMNS].copy()
    df['year'] = pd.to_numeric(df['year'], errors='coerce')
    for col in NUMERIC_COLUMNS:
        df[col] = pd.to_numeric(df[col], errors='coerce')

    invalid = df['country'].isna() | df['year'].isna()
    if invalid.any():
        logger.warning("Dropping %d energy rows without country or year", int(invalid.sum()))
        df = df.loc[~invalid].copy()
    if df.empty:
        raise DatasetError("energy-data.csv has no rows with both country and year")

    df['year'] = df['year'].astype(int)
    df['country'] = df['country'].astype(str)
    return df.reset_index(drop=True)


def prepare_country_coords(raw: pd.DataFrame) -> pd.DataFrame:
    """Rename and coerce the raw coordinates table into CountryCoordinate rows."""
    _require_columns(raw, list(COORDS_RENAME_MAP), 'country_coords.csv')

    df = raw.rename(columns=COORDS_RENAME_MAP)[COORDS_COLUMNS].copy()
    df['country'] = df['country'].astype(str)
    df['latitude'] = pd.to_numeric(df['latitude'], errors='coerce')
    df['longitude'] = pd.to_numeric(df['longitude'], errors='coerce')
    return df.reset_index(drop=True)


def find_unmatched_countries(records: pd.DataFrame, coords: pd.DataFrame) -> list:
    """Countries present in the energy table that have no coordinate row."""
    known = set(coords['country'])
    return sorted(c for c in records['country'].unique() if c not in known)


def _read_csv(path):
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Dataset not found at {path}. Make sure the `dataset/` folder is present.")
    return pd.read_csv(path)


def load_dataset(data_dir=None):
    """
    Load both base tables from `data_dir` (default: settings.DATA_DIR).

    Returns
    -------
    (records, coords):
        EnergyRecord and CountryCoordinate DataFrames. Callers must treat
        them as read-only for the lifetime of the process.
    """
    data_dir = Path(data_dir or settings.DATA_DIR)

    records = prepare_energy_records(_read_csv(data_dir / settings.ENERGY_CSV_NAME))
    coords = prepare_country_coords(_read_csv(data_dir / settings.COORDS_CSV_NAME))
    logger.info("Loaded %d energy records for %d countries and %d coordinate rows",
                len(records), records['country'].nunique(), len(coords))

    unmatched = find_unmatched_countries(records, coords)
    if unmatched:
        logger.warning("%d countries have no coordinates and will not appear on maps: %s",
                       len(unmatched), ', '.join(unmatched))

    return records, coords
