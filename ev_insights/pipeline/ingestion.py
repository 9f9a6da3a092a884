# ========================
# ev_insights/pipeline/ingestion.py
# ========================

"""
Data Ingestion Module

Fetches the registration CSV (HTTP URL, file:// URI or local path) and parses
it into an immutable Dataset. Failures are reported as a LoadResult carrying a
LoadError; a Dataset is only ever handed out complete.
"""

import csv
import io
import logging
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, List, Mapping, Optional, Sequence, Tuple, Union
from urllib.parse import unquote, urlparse

import requests

logger = logging.getLogger(__name__)

Row = Mapping[str, str]


class LoadError(Exception):
    """Base class for failures while loading the dataset."""

    kind = "LoadError"


class FetchFailed(LoadError):
    """The resource could not be reached or read."""

    kind = "FetchFailed"


class ParseFailed(LoadError):
    """The resource was read but is not valid CSV text."""

    kind = "ParseFailed"


class Dataset:
    """
    Ordered, read-only sequence of rows sharing one header.
    """

    def __init__(self, header: Sequence[str], rows: Sequence[Row]):
        self._header = tuple(header)
        self._rows = tuple(rows)

    @property
    def header(self) -> Tuple[str, ...]:
        return self._header

    @property
    def rows(self) -> Tuple[Row, ...]:
        return self._rows

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self._rows)

    def __getitem__(self, index):
        return self._rows[index]

    def __eq__(self, other) -> bool:
        if not isinstance(other, Dataset):
            return NotImplemented
        return self._header == other._header and self._rows == other._rows

    def __repr__(self) -> str:
        return f"Dataset(columns={len(self._header)}, rows={len(self._rows)})"


@dataclass(frozen=True)
class LoadResult:
    """Outcome of one load: exactly one of `dataset` or `error` is set."""

    dataset: Optional[Dataset] = None
    error: Optional[LoadError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Dataset:
        if self.error is not None:
            raise self.error
        return self.dataset


class DatasetLoader:
    """
    Loads a delimited text resource into a Dataset.

    Every call to `load` performs a fresh read; nothing is cached between
    calls.
    """

    def __init__(self, timeout: Optional[float] = None, encoding: str = 'utf-8-sig'):
        """
        Initialize the loader.

        Args:
            timeout (float): Optional HTTP timeout in seconds (None waits indefinitely)
            encoding (str): Text encoding of the resource
        """
        self.timeout = timeout
        self.encoding = encoding

    def load(self, source: Union[str, Path]) -> LoadResult:
        """
        Fetch and parse the resource at `source`.

        Args:
            source (str | Path): http(s) URL, file:// URI or filesystem path

        Returns:
            LoadResult: the complete Dataset, or the LoadError that stopped it
        """
        logger.info(f"Loading dataset from: {source}")
        try:
            payload = self._fetch(source)
            dataset = self.parse(payload)
        except LoadError as e:
            logger.warning(f"Failed to load dataset from '{source}': {e}")
            return LoadResult(error=e)

        logger.info(f"Loaded {len(dataset)} rows with {len(dataset.header)} columns")
        return LoadResult(dataset=dataset)

    def _fetch(self, source: Union[str, Path]) -> bytes:
        location = str(source)
        scheme = urlparse(location).scheme.lower()

        if scheme in ('http', 'https'):
            return self._fetch_url(location)
        if scheme == 'file':
            return self._read_file(Path(unquote(urlparse(location).path)))
        return self._read_file(Path(location))

    def _fetch_url(self, url: str) -> bytes:
        try:
            response = requests.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise FetchFailed(f"Could not fetch {url}: {e}") from e
        logger.debug(f"Fetched {len(response.content)} bytes from {url}")
        return response.content

    def _read_file(self, path: Path) -> bytes:
        try:
            return path.read_bytes()
        except FileNotFoundError as e:
            raise FetchFailed(f"File '{path}' was not found") from e
        except OSError as e:
            raise FetchFailed(f"Could not read '{path}': {e}") from e

    def parse(self, payload: bytes) -> Dataset:
        """
        Parse raw CSV bytes into a Dataset.

        The first record is the header. Short records are padded with empty
        strings, fields past the header are dropped and blank lines skipped.

        Raises:
            ParseFailed: on undecodable bytes or malformed quoting
        """
        try:
            text = payload.decode(self.encoding)
        except UnicodeDecodeError as e:
            raise ParseFailed(f"Resource is not valid {self.encoding} text: {e}") from e

        reader = csv.reader(io.StringIO(text, newline=''), strict=True)
        header: List[str] = []
        rows: List[Row] = []

        try:
            for record in reader:
                if not record:
                    continue
                if not header:
                    header = record
                    logger.info(f"CSV header: {header}")
                    continue
                rows.append(self._to_row(header, record))
        except csv.Error as e:
            raise ParseFailed(f"Malformed CSV near line {reader.line_num}: {e}") from e

        return Dataset(header, rows)

    @staticmethod
    def _to_row(header: Sequence[str], record: Sequence[str]) -> Row:
        values = list(record[:len(header)])
        values.extend([''] * (len(header) - len(values)))
        return MappingProxyType(dict(zip(header, values)))


def load_dataset(source: Union[str, Path], timeout: Optional[float] = None) -> LoadResult:
    """Load `source` with a default DatasetLoader."""
    return DatasetLoader(timeout=timeout).load(source)
