import logging

import dash
from dash import dcc, html
from dash.dependencies import Input, Output
import dash_bootstrap_components as dbc

from energy_dashboard import settings
from energy_dashboard.data import EnergySource, load_dataset
from energy_dashboard.figures import (
    delta_map_figure,
    regression_figure,
    regression_summary_text,
    time_series_figure,
)
from energy_dashboard.pipeline import DashboardPipeline
from energy_dashboard.regression import InsufficientDataError

settings.configure_logging()
logger = logging.getLogger('energy_dashboard.app')

# DATA LOADING
records, coords = load_dataset()
pipeline = DashboardPipeline(records, coords)

COUNTRIES = pipeline.countries
MAX_YEAR = pipeline.latest_year
MIN_YEAR = min(settings.SLIDER_MIN_YEAR, MAX_YEAR)
default_countries = COUNTRIES[:1]

SOURCE_OPTIONS = [
    {'label': source.label, 'value': source.value} for source in EnergySource
]

# tab id -> energy source shown on that map
MAP_TABS = {
    'tab-delta-solar': EnergySource.SOLAR,
    'tab-delta-wind': EnergySource.WIND,
    'tab-delta-water': EnergySource.HYDRO,
}
FILTER_TABS = ('tab-timeseries', 'tab-regression')

# APP CONFIGURATION
app = dash.Dash(__name__, external_stylesheets=[dbc.themes.BOOTSTRAP],
                title='Renewable Energy Trends Dashboard')
server = app.server


def _map_tab(label, tab_id):
    return dbc.Tab(label=label, tab_id=tab_id, children=[
        dcc.Graph(id=f'{tab_id}-map', config={'displayModeBar': False},
                  style={'height': '600px'})
    ])


# DASHBOARD LAYOUT
app.layout = dbc.Container([
    # Header
    dbc.Row([
        dbc.Col([
            html.H2("Renewable Energy Trends Dashboard", className='text-center mb-2')
        ])
    ]),

    dbc.Row([
        # Controls, shown only on the time series and regression tabs
        dbc.Col([
            html.Div([
                html.Label("Select Country", style={'fontWeight': '600', 'marginBottom': '5px'}),
                dcc.Dropdown(
                    id='country-dropdown',
                    options=[{'label': c, 'value': c} for c in COUNTRIES],
                    value=default_countries,
                    multi=True,
                    placeholder='All countries'
                ),
                html.Div(id='selection-status', className='text-muted small',
                         style={'marginTop': '4px', 'marginBottom': '15px'}),

                html.Label("Select Year Range", style={'fontWeight': '600', 'marginBottom': '5px'}),
                dcc.RangeSlider(
                    id='year-range-slider',
                    min=MIN_YEAR,
                    max=MAX_YEAR,
                    value=[MIN_YEAR, MAX_YEAR],
                    marks={y: str(y) for y in range(MIN_YEAR, MAX_YEAR + 1, 5)},
                    step=1,
                    tooltip={"placement": "bottom", "always_visible": True}
                ),

                html.Label("Select Renewable Source",
                           style={'fontWeight': '600', 'marginBottom': '5px', 'marginTop': '25px'}),
                dcc.Dropdown(
                    id='source-dropdown',
                    options=SOURCE_OPTIONS,
                    value=EnergySource.SOLAR.value,
                    clearable=False
                ),
            ], id='filter-controls')
        ], width=3),

        # Tabs
        dbc.Col([
            dbc.Tabs([
                dbc.Tab(label="Time Series Analysis", tab_id="tab-timeseries", children=[
                    dcc.Graph(id='timeseries-plot', config={'displayModeBar': False},
                              style={'height': '500px'})
                ]),
                dbc.Tab(label="Regression Analysis", tab_id="tab-regression", children=[
                    dcc.Graph(id='regression-plot', config={'displayModeBar': False},
                              style={'height': '450px'}),
                    html.Pre(id='regression-summary',
                             style={'fontSize': '0.8rem', 'backgroundColor': '#f9f9f9',
                                    'padding': '10px', 'border': '1px solid #ccc'})
                ]),
                _map_tab("Solar 4-yr Delta", 'tab-delta-solar'),
                _map_tab("Wind 4-yr Delta", 'tab-delta-wind'),
                _map_tab("Water 4-yr Delta", 'tab-delta-water'),
            ], id="main-tabs", active_tab="tab-timeseries")
        ], width=9)
    ])
], fluid=True, style={'paddingTop': '10px', 'paddingBottom': '10px'})

# CALLBACKS

@app.callback(
    Output('filter-controls', 'style'),
    Input('main-tabs', 'active_tab')
)
def toggle_controls(active_tab):
    """Hide the filter controls on the map tabs, which ignore them."""
    if active_tab in FILTER_TABS:
        return {'display': 'block'}
    return {'display': 'none'}


@app.callback(
    Output('selection-status', 'children'),
    Input('country-dropdown', 'value')
)
def update_selection_status(selected_countries):
    _, used_fallback = pipeline.selection(selected_countries)
    if used_fallback:
        logger.info("Empty country selection, falling back to all %d countries", len(COUNTRIES))
        return f"No country selected: showing all {len(COUNTRIES)} countries."
    return ''


# TIME SERIES TAB CALLBACK
@app.callback(
    Output('timeseries-plot', 'figure'),
    Input('country-dropdown', 'value'),
    Input('year-range-slider', 'value'),
    Input('source-dropdown', 'value')
)
def update_timeseries(selected_countries, year_range, source):
    """Per-country and total production of the selected source over time."""
    year_min, year_max = year_range
    by_country, totals = pipeline.time_series(selected_countries, year_min, year_max, source)
    return time_series_figure(by_country, totals, source)


# REGRESSION TAB CALLBACK
@app.callback(
    Output('regression-plot', 'figure'),
    Output('regression-summary', 'children'),
    Input('country-dropdown', 'value'),
    Input('year-range-slider', 'value')
)
def update_regression(selected_countries, year_range):
    """GDP vs total renewable production with the OLS fit and its summary."""
    year_min, year_max = year_range
    reg_data = pipeline.regression_input(selected_countries, year_min, year_max)
    try:
        result = pipeline.regression(selected_countries, year_min, year_max)
    except InsufficientDataError as e:
        message = 'Insufficient data for regression'
        return regression_figure(reg_data, message=message), f"{message}.\n{e}"
    return regression_figure(reg_data, result), regression_summary_text(result)


# DELTA MAP TABS CALLBACK
@app.callback(
    [Output(f'{tab_id}-map', 'figure') for tab_id in MAP_TABS],
    Input('main-tabs', 'active_tab')
)
def update_delta_maps(active_tab):
    """Delta maps depend only on the full dataset; the pipeline caches them."""
    return [delta_map_figure(pipeline.map_data(source), source) for source in MAP_TABS.values()]


if __name__ == '__main__':
    app.run(debug=settings.DEBUG, port=settings.PORT, host=settings.HOST)
