import pytest

import app as dashboard_app


@pytest.mark.parametrize('selection', [[], None])
def test_empty_selection_shows_all_countries_status(selection):
    status = dashboard_app.update_selection_status(selection)

    assert status == f"No country selected: showing all {len(dashboard_app.COUNTRIES)} countries."


def test_explicit_selection_has_no_status():
    assert dashboard_app.update_selection_status(['Spain']) == ''


@pytest.mark.parametrize('tab_id', ['tab-timeseries', 'tab-regression'])
def test_controls_visible_on_filter_tabs(tab_id):
    assert dashboard_app.toggle_controls(tab_id) == {'display': 'block'}


@pytest.mark.parametrize('tab_id', ['tab-delta-solar', 'tab-delta-wind', 'tab-delta-water'])
def test_controls_hidden_on_map_tabs(tab_id):
    assert dashboard_app.toggle_controls(tab_id) == {'display': 'none'}


def test_regression_with_single_point_reports_insufficient_data():
    fig, summary = dashboard_app.update_regression(['Spain'], [2020, 2020])

    assert summary.startswith('Insufficient data for regression')
    assert len(fig.data) == 1
    assert fig.layout.annotations[0].text == 'Insufficient data for regression'


def test_regression_with_enough_points_shows_model_summary():
    fig, summary = dashboard_app.update_regression(['Spain', 'Germany'], [2000, 2022])

    assert 'R-squared' in summary
    assert fig.data[1].name.startswith('OLS Fit')


def test_timeseries_callback_builds_source_chart():
    fig = dashboard_app.update_timeseries(['Spain', 'Kenya'], [2010, 2020], 'Wind')

    assert fig.layout.title.text == 'Wind Production Over Time'
    assert [trace.name for trace in fig.data] == ['Kenya', 'Spain', 'Total']


def test_delta_maps_one_figure_per_map_tab():
    figures = dashboard_app.update_delta_maps('tab-delta-solar')

    assert len(figures) == len(dashboard_app.MAP_TABS)
    titles = [fig.data[0].marker.colorbar.title.text for fig in figures]
    assert titles == ['Solar 4-yr Delta (%)', 'Wind 4-yr Delta (%)', 'Hydro 4-yr Delta (%)']
