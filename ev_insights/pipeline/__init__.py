# ========================
# ev_insights/pipeline/__init__.py
# ========================

"""
Data Pipeline Package

Core components of the dashboard pipeline:
- ingestion: CSV fetching and parsing into an immutable Dataset
- transformation: per-year / per-make counts and mean electric range
- pagination: stateless table paging
- presentation: key metrics, chart payloads and table rows
- orchestrator: session state and coordination
"""

from .ingestion import (
    Dataset,
    DatasetLoader,
    FetchFailed,
    LoadError,
    LoadResult,
    ParseFailed,
    load_dataset,
)
from .transformation import AggregateResult, RegistrationAggregator, aggregate
from .pagination import InvalidArgument, Page, paginate
from .orchestrator import DashboardSession, SessionNotReady

__all__ = [
    'Dataset',
    'DatasetLoader',
    'FetchFailed',
    'LoadError',
    'LoadResult',
    'ParseFailed',
    'load_dataset',
    'AggregateResult',
    'RegistrationAggregator',
    'aggregate',
    'InvalidArgument',
    'Page',
    'paginate',
    'DashboardSession',
    'SessionNotReady',
]
