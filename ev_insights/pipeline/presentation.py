# ========================
# ev_insights/pipeline/presentation.py
# ========================

"""
Presentation Module

Turns pipeline output into the plain structures the dashboard renders:
key metrics, chart payloads and table rows.
"""

from typing import Any, Dict, List, Mapping, Sequence, Tuple

from .transformation import AggregateResult

MISSING_VALUE = 'N/A'

# (column label shown in the table, source CSV column)
TABLE_COLUMNS: Tuple[Tuple[str, str], ...] = (
    ('VIN', 'VIN (1-10)'),
    ('County', 'County'),
    ('City', 'City'),
    ('State', 'State'),
    ('Postal Code', 'Postal Code'),
    ('Model Year', 'Model Year'),
    ('Make', 'Make'),
    ('Model', 'Model'),
    ('Electric Vehicle Type', 'Electric Vehicle Type'),
    ('CAFV Eligibility', 'Clean Alternative Fuel Vehicle (CAFV) Eligibility'),
    ('Electric Range', 'Electric Range'),
    ('Base MSRP', 'Base MSRP'),
    ('Legislative District', 'Legislative District'),
    ('DOL Vehicle ID', 'DOL Vehicle ID'),
    ('Vehicle Location', 'Vehicle Location'),
    ('Electric Utility', 'Electric Utility'),
    ('Census Tract', '2020 Census Tract'),
)

PALETTE: Tuple[str, ...] = (
    '#4e79a7', '#f28e2b', '#e15759', '#76b7b2', '#59a14f',
    '#edc948', '#b07aa1', '#ff9da7', '#9c755f', '#bab0ac',
    '#1f77b4', '#ff7f0e', '#2ca02c', '#d62728', '#9467bd',
    '#8c564b', '#e377c2', '#7f7f7f', '#bcbd22', '#17becf',
)

BAR_COLOR = 'rgba(75, 192, 192, 0.6)'
LINE_FILL_COLOR = 'rgba(255, 99, 132, 0.6)'
LINE_BORDER_COLOR = 'rgba(255, 99, 132, 1)'


def series_colors(count: int) -> List[str]:
    """Colors for `count` series, cycling through PALETTE by position."""
    return [PALETTE[i % len(PALETTE)] for i in range(count)]


def format_table_row(row: Mapping[str, Any]) -> Dict[str, str]:
    """Map a raw row to table labels, substituting N/A for empty cells."""
    formatted = {}
    for label, column in TABLE_COLUMNS:
        value = row.get(column)
        formatted[label] = value if value else MISSING_VALUE
    return formatted


def format_table(rows: Sequence[Mapping[str, Any]]) -> List[Dict[str, str]]:
    return [format_table_row(row) for row in rows]


def key_metrics(total_vehicles: int, aggregates: AggregateResult) -> Dict[str, Any]:
    return {
        'total_vehicles': total_vehicles,
        'unique_makes': aggregates.unique_makes,
        'average_range': aggregates.average_range,
    }


def build_chart_payloads(aggregates: AggregateResult) -> Dict[str, Dict[str, Any]]:
    """
    Build the three dashboard charts in a labels/datasets layout.

    Returns:
        dict: chart name -> {'type', 'title', 'labels', 'datasets'}
    """
    years = list(aggregates.counts_by_year)
    year_data = [aggregates.counts_by_year[year] for year in years]
    makes = list(aggregates.counts_by_make)
    make_data = [aggregates.counts_by_make[make] for make in makes]

    return {
        'registrations_by_year': {
            'type': 'bar',
            'title': 'Vehicles Registered by Year',
            'labels': years,
            'datasets': [{
                'label': 'Vehicles Registered',
                'data': year_data,
                'backgroundColor': BAR_COLOR,
            }],
        },
        'makes_distribution': {
            'type': 'pie',
            'title': 'Vehicle Makes Distribution',
            'labels': makes,
            'datasets': [{
                'data': make_data,
                'backgroundColor': series_colors(len(makes)),
            }],
        },
        'registration_trend': {
            'type': 'line',
            'title': 'Trend of EV Registrations',
            'labels': list(years),
            'datasets': [{
                'label': 'Registration Trend',
                'data': list(year_data),
                'fill': False,
                'backgroundColor': LINE_FILL_COLOR,
                'borderColor': LINE_BORDER_COLOR,
            }],
        },
    }
