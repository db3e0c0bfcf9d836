"""Runtime configuration and logging setup for the dashboard."""

import logging
import os
from pathlib import Path

BASE = Path(__file__).resolve().parent.parent


def _env_flag(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


# DATA LOCATION
DATA_DIR = Path(os.environ.get('ENERGY_DASHBOARD_DATA_DIR', BASE / 'dataset'))
ENERGY_CSV_NAME = 'energy-data.csv'
COORDS_CSV_NAME = 'country_coords.csv'

# SERVER
HOST = os.environ.get('ENERGY_DASHBOARD_HOST', '0.0.0.0')
PORT = int(os.environ.get('ENERGY_DASHBOARD_PORT', '8000'))
DEBUG = _env_flag('ENERGY_DASHBOARD_DEBUG', True)
LOG_LEVEL = os.environ.get('ENERGY_DASHBOARD_LOG_LEVEL', 'INFO').upper()

# DOMAIN CONSTANTS
SLIDER_MIN_YEAR = 2000
DELTA_WINDOW_YEARS = 4
DELTA_RANGE = (0, 100)
DELTA_COLOR_SCALE = 'RdYlGn'

CHART_LAYOUT = dict(
    plot_bgcolor='white',
    paper_bgcolor='white',
    font=dict(size=12, color='#222'),
    xaxis=dict(
        gridcolor='#e0e0e0',
        linecolor='#333',
        linewidth=2,
        showgrid=True,
        zeroline=True,
        zerolinecolor='#999',
        zerolinewidth=1
    ),
    yaxis=dict(
        gridcolor='#e0e0e0',
        linecolor='#333',
        linewidth=2,
        showgrid=True,
        zeroline=True,
        zerolinecolor='#999',
        zerolinewidth=1
    ),
    legend=dict(
        bgcolor='rgba(255,255,255,0.9)',
        bordercolor='#ccc',
        borderwidth=1
    )
)

LOGGER_NAME = 'energy_dashboard'


def configure_logging(level=None):
    """Attach a single stream handler to the package logger."""
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s"
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.setLevel(level or LOG_LEVEL)
    return logger
