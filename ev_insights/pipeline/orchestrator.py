# ========================
# ev_insights/pipeline/orchestrator.py
# ========================

"""
Dashboard Session Module

Owns the session-scoped state of the dashboard (loaded dataset, ready signal,
current page, load failure notice) and threads it into the pure aggregation
and pagination functions.
"""

import logging
import threading
from concurrent.futures import Future
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .ingestion import Dataset, DatasetLoader, LoadError, LoadResult
from .pagination import Page, paginate
from .presentation import build_chart_payloads, format_table, key_metrics
from .transformation import AggregateResult, aggregate
from ..utils.config import Config
from ..utils.performance_monitor import monitor_performance

logger = logging.getLogger(__name__)

LOAD_FAILED_MESSAGE = "Failed to load CSV data. Please check the logs for more details."


class SessionNotReady(RuntimeError):
    """Raised when data is requested before the dataset has loaded."""


class DashboardSession:
    """
    One dashboard session: a single dataset load followed by any number of
    summary and page requests.
    """

    def __init__(self,
                 source: Optional[Union[str, Path]] = None,
                 page_size: Optional[int] = None,
                 loader: Optional[DatasetLoader] = None,
                 config: Optional[Config] = None):
        """
        Initialize the session.

        Args:
            source (str): Dataset location; defaults to config.DATA_SOURCE
            page_size (int): Rows per table page; defaults to config.RECORDS_PER_PAGE
            loader (DatasetLoader): Loader to use, mainly for tests
            config (Config): Configuration object
        """
        self.config = config or Config()
        self.source = source if source is not None else self.config.DATA_SOURCE
        self.page_size = page_size if page_size is not None else self.config.RECORDS_PER_PAGE
        self.loader = loader or DatasetLoader(timeout=self.config.FETCH_TIMEOUT_SECONDS)

        self.current_page = 0
        self.notification: Optional[str] = None
        self.last_performance: Optional[Dict[str, Any]] = None
        self._ready: Future = Future()
        self._load_lock = threading.Lock()

        logger.info(f"DashboardSession initialized: source={self.source}, page_size={self.page_size}")

    @property
    def ready(self) -> Future:
        """Resolves with the Dataset once loaded, or with the LoadError."""
        return self._ready

    @property
    def is_loaded(self) -> bool:
        return self._ready.done() and self._ready.exception() is None

    @property
    def error(self) -> Optional[LoadError]:
        if not self._ready.done():
            return None
        return self._ready.exception()

    def load(self) -> LoadResult:
        """
        Run one load to completion and resolve the ready signal.

        Loads are serialized per session. While a reload runs, readers keep
        seeing the previous outcome until the new one is published.

        Returns:
            LoadResult: the outcome of the load
        """
        with self._load_lock:
            return self._load()

    def ensure_loaded(self) -> Future:
        """
        Load the dataset unless a load has already completed.

        Concurrent callers wait for the one in-flight load instead of
        starting their own.

        Returns:
            Future: the resolved ready signal
        """
        with self._load_lock:
            if not self._ready.done():
                self._load()
            return self._ready

    def reload(self) -> LoadResult:
        """Discard the current dataset and load again from scratch."""
        logger.info("Reloading dataset")
        with self._load_lock:
            self.current_page = 0
            return self._load()

    def _load(self) -> LoadResult:
        # Caller holds self._load_lock
        with monitor_performance("Dataset load") as monitor:
            result = self.loader.load(self.source)
            if result.ok:
                monitor.update_progress(len(result.dataset))
        self.last_performance = monitor.summary

        ready = self._ready if not self._ready.done() else Future()
        if result.ok:
            self.notification = None
            ready.set_result(result.dataset)
        else:
            self.notification = LOAD_FAILED_MESSAGE
            logger.error(f"{LOAD_FAILED_MESSAGE} ({result.error.kind}: {result.error})")
            ready.set_exception(result.error)
        self._ready = ready

        return result

    @property
    def dataset(self) -> Dataset:
        """
        The loaded dataset.

        Raises:
            SessionNotReady: if no load has completed yet
            LoadError: if the last load failed
        """
        if not self._ready.done():
            raise SessionNotReady("Dataset has not been loaded yet")
        return self._ready.result()

    def summary(self) -> AggregateResult:
        return aggregate(self.dataset)

    def select_page(self, index: int) -> None:
        """Record the page chosen by the user; no clamping is applied."""
        logger.debug(f"Page selected: {index}")
        self.current_page = index

    def page(self, index: Optional[int] = None) -> Page:
        if index is None:
            index = self.current_page
        return paginate(self.dataset, index, self.page_size)

    def table_page(self, index: Optional[int] = None) -> Dict[str, Any]:
        page = self.page(index)
        return {
            'rows': format_table(page.items),
            'page_count': page.page_count,
            'current_page': page.index,
            'has_previous': page.has_previous,
            'has_next': page.has_next,
        }

    def dashboard(self) -> Dict[str, Any]:
        """Everything the dashboard page renders, as plain values."""
        aggregates = self.summary()
        return {
            'metrics': key_metrics(len(self.dataset), aggregates),
            'charts': build_chart_payloads(aggregates),
            'table': self.table_page(),
        }

    def run(self) -> Dict[str, Any]:
        """
        Load the dataset and aggregate it once.

        Returns:
            dict: Summary of the run
        """
        result = self.load()
        if not result.ok:
            return {
                'status': 'failed',
                'source': str(self.source),
                'error': {'kind': result.error.kind, 'message': str(result.error)},
                'notification': self.notification,
            }

        aggregates = self.summary()
        run_results = {
            'status': 'completed',
            'source': str(self.source),
            'metrics': key_metrics(len(result.dataset), aggregates),
            'aggregates': aggregates.to_dict(),
            'page_count': self.page(0).page_count,
            'performance': self.last_performance,
        }
        self._log_final_summary(run_results)
        return run_results

    def _log_final_summary(self, results: Dict[str, Any]) -> None:
        metrics = results['metrics']
        logger.info("=" * 60)
        logger.info("EV DASHBOARD SUMMARY")
        logger.info("=" * 60)
        logger.info(f"Source: {results['source']}")
        logger.info(f"Total vehicles: {metrics['total_vehicles']:,}")
        logger.info(f"Unique makes: {metrics['unique_makes']}")
        logger.info(f"Average electric range: {metrics['average_range']} miles")
        logger.info(f"Table pages: {results['page_count']}")
        logger.info("=" * 60)
