"""Plotly figure builders for the three dashboard views."""

import numpy as np
import plotly.express as px
import plotly.graph_objects as go

from energy_dashboard import settings
from energy_dashboard.data import EnergySource

COLORS = px.colors.qualitative.Bold
CHART_LAYOUT = settings.CHART_LAYOUT

MAP_POPUP_LABELS = {
    EnergySource.SOLAR: 'Solar 4-yr Change:',
    EnergySource.WIND: 'Wind 4-yr Change:',
    EnergySource.HYDRO: 'Water 4-yr Change:',
}


def empty_figure(message):
    fig = go.Figure()
    fig.add_annotation(text=message, xref='paper', yref='paper',
                       x=0.5, y=0.5, showarrow=False)
    fig.update_layout(**CHART_LAYOUT)
    return fig


def time_series_figure(by_country, totals, source):
    """One line per country plus a dashed line for the yearly total."""
    source = EnergySource.from_value(source)
    if by_country.empty:
        return empty_figure('No data available for the selected countries and years')

    fig = go.Figure()
    for idx, (country, country_data) in enumerate(by_country.groupby('country', sort=False)):
        country_data = country_data.sort_values('year')
        fig.add_trace(go.Scatter(
            x=country_data['year'],
            y=country_data['production'],
            mode='lines+markers',
            name=country,
            line=dict(color=COLORS[idx % len(COLORS)], width=2),
            marker=dict(size=6),
            hovertemplate=f'<b>{country}</b><br>Year: %{{x}}<br>Production: %{{y:,.2f}}<extra></extra>'
        ))

    totals = totals.sort_values('year')
    fig.add_trace(go.Scatter(
        x=totals['year'],
        y=totals['total'],
        mode='lines',
        name='Total',
        line=dict(color='black', width=3, dash='dash'),
        hovertemplate='<b>Total</b><br>Year: %{x}<br>Production: %{y:,.2f}<extra></extra>'
    ))

    fig.update_layout(
        **CHART_LAYOUT,
        title=f'{source.label} Production Over Time',
        hovermode='closest'
    )
    fig.update_xaxes(title='Year')
    fig.update_yaxes(title='Production')
    return fig


def regression_figure(reg_data, result=None, message=None):
    """
    Scatter of GDP vs renewable production with the fitted line.

    Without a fit result the points are still drawn and `message` is shown
    in place of the line.
    """
    if reg_data.empty:
        return empty_figure(message or 'No GDP data available for the selected countries and years')

    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=reg_data['gdp'],
        y=reg_data['renewable_production'],
        mode='markers',
        name='Country-years',
        text=reg_data['country'] + ' ' + reg_data['year'].astype(str),
        marker=dict(size=8, color=COLORS[0], opacity=0.8, line=dict(width=0.5, color='white')),
        hovertemplate='<b>%{text}</b><br>GDP: %{x:,.0f}<br>Renewables: %{y:,.2f}<extra></extra>'
    ))

    if result is not None:
        x_fit = np.linspace(reg_data['gdp'].min(), reg_data['gdp'].max(), 100)
        fig.add_trace(go.Scatter(
            x=x_fit,
            y=result.predict(x_fit),
            mode='lines',
            name=f'OLS Fit (R²={result.r_squared:.3f})',
            line=dict(color='red', width=2),
            hovertemplate=f'y = {result.slope:.2e}x + {result.intercept:.2e}<extra></extra>'
        ))
    elif message:
        fig.add_annotation(text=message, xref='paper', yref='paper',
                           x=0.98, y=0.98, xanchor='right', yanchor='top', showarrow=False,
                           bgcolor='rgba(255, 255, 255, 0.9)', bordercolor='#ccc', borderwidth=1)

    fig.update_layout(
        **CHART_LAYOUT,
        title='Regression: GDP vs Renewable Electricity Production',
        hovermode='closest'
    )
    fig.update_xaxes(title='GDP (USD)')
    fig.update_yaxes(title='Renewable Production (GWh)')
    return fig


def regression_summary_text(result):
    sig_marker = lambda p: '***' if p < 0.001 else '**' if p < 0.01 else '*' if p < 0.05 else 'ns'
    header = (
        f"n = {result.n_obs}\n"
        f"Intercept: {result.intercept:.4g} (SE {result.intercept_stderr:.4g}, p = {result.intercept_pvalue:.4g})\n"
        f"GDP:       {result.slope:.4g} (SE {result.slope_stderr:.4g}, p = {result.slope_pvalue:.4g}) "
        f"{sig_marker(result.slope_pvalue)}\n"
        f"R²:        {result.r_squared:.4f}\n"
    )
    return header + '\n' + result.summary


def delta_map_figure(map_data, source):
    """Point map of 4-year deltas on a red-yellow-green scale fixed to [0, 100]."""
    source = EnergySource.from_value(source)
    points = map_data.dropna(subset=['latitude', 'longitude', 'delta'])
    if points.empty:
        return empty_figure(f'No {source.label.lower()} delta data available')

    label = MAP_POPUP_LABELS.get(source, f'{source.label} 4-yr Change:')
    cmin, cmax = settings.DELTA_RANGE
    hover = [
        f"Country: {country}<br>{label} {round(float(delta), 2):g} %"
        for country, delta in zip(points['country'], points['delta'])
    ]

    fig = go.Figure(go.Scattergeo(
        lat=points['latitude'],
        lon=points['longitude'],
        mode='markers',
        text=hover,
        hoverinfo='text',
        marker=dict(
            size=8,
            opacity=0.8,
            color=points['delta'],
            colorscale=settings.DELTA_COLOR_SCALE,
            cmin=cmin,
            cmax=cmax,
            line=dict(width=0),
            colorbar=dict(title=f'{source.value} 4-yr Delta (%)', thickness=15, len=0.7)
        )
    ))
    fig.update_layout(
        margin={'t': 40, 'b': 0, 'l': 0, 'r': 0},
        paper_bgcolor='white',
        font=dict(size=12, color='#222'),
        geo=dict(
            showframe=True,
            framecolor='#333',
            showcoastlines=True,
            coastlinecolor='#666',
            showcountries=True,
            projection_type='natural earth'
        )
    )
    return fig
