"""
EV Insights

Loads electric-vehicle registration data and derives the aggregates, charts
and paginated table shown on the EV insights dashboard.
"""

__version__ = "1.0.0"
