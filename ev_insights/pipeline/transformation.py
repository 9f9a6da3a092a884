# ========================
# ev_insights/pipeline/transformation.py
# ========================

"""
Data Transformation Module

Aggregates registration rows into per-year counts, per-make counts and the
mean electric range. Dirty fields are skipped, never raised on.
"""

import logging
import re
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, Mapping, Optional

logger = logging.getLogger(__name__)

YEAR_COLUMN = 'Model Year'
MAKE_COLUMN = 'Make'
RANGE_COLUMN = 'Electric Range'

_LEADING_INT = re.compile(r'\s*([+-]?[0-9]+)')
_CENTS = Decimal('0.01')


def parse_range(value: Any) -> Optional[int]:
    """
    Parse an `Electric Range` value as a base-10 integer.

    Surrounding whitespace is ignored and, like a browser's parseInt, a
    leading integer prefix is accepted ("250 miles" -> 250). Returns None
    when there are no leading digits.
    """
    if not isinstance(value, str):
        return None
    match = _LEADING_INT.match(value)
    if not match:
        return None
    return int(match.group(1))


def mean_to_cents(total: int, count: int) -> Decimal:
    """Mean rounded half-up to two decimals; 0 when nothing was counted."""
    if count == 0:
        return Decimal(0)
    return (Decimal(total) / Decimal(count)).quantize(_CENTS, rounding=ROUND_HALF_UP)


def _field(row: Mapping[str, Any], column: str) -> str:
    value = row.get(column)
    return value if isinstance(value, str) else ''


@dataclass(frozen=True)
class AggregateResult:
    """Summary of a dataset used by the charts and key metrics."""

    counts_by_year: Dict[str, int] = field(default_factory=dict)
    counts_by_make: Dict[str, int] = field(default_factory=dict)
    average_range: Decimal = Decimal(0)
    records_processed: int = 0
    range_samples: int = 0

    @property
    def unique_makes(self) -> int:
        return len(self.counts_by_make)

    @property
    def counted_records(self) -> int:
        """Rows that had both a model year and a make."""
        return sum(self.counts_by_year.values())

    def to_dict(self) -> Dict[str, Any]:
        return {
            'counts_by_year': dict(self.counts_by_year),
            'counts_by_make': dict(self.counts_by_make),
            'average_range': self.average_range,
            'records_processed': self.records_processed,
            'range_samples': self.range_samples,
        }


class RegistrationAggregator:
    """
    Accumulates registration rows chunk by chunk.
    Only counters are kept, so memory grows with the number of distinct
    years and makes rather than with the number of rows.
    """

    def __init__(self):
        self.reset()
        logger.debug("RegistrationAggregator initialized")

    def reset(self) -> None:
        """Reset all aggregation data structures."""
        self.year_counts: Dict[str, int] = {}
        self.make_counts: Dict[str, int] = {}
        self.range_total = 0
        self.range_count = 0
        self.records_processed = 0

    def process_chunk(self, chunk: Iterable[Mapping[str, Any]]) -> None:
        """
        Update the counters from a chunk of rows.

        Args:
            chunk (iterable[dict]): Rows mapping column name to raw string value
        """
        for row in chunk:
            self._process_single_record(row)
            self.records_processed += 1

        logger.debug(f"Chunk processed. Total records so far: {self.records_processed}")

    def _process_single_record(self, row: Mapping[str, Any]) -> None:
        year = _field(row, YEAR_COLUMN)
        make = _field(row, MAKE_COLUMN)

        if year and make:
            self.year_counts[year] = self.year_counts.get(year, 0) + 1
            self.make_counts[make] = self.make_counts.get(make, 0) + 1

        electric_range = parse_range(row.get(RANGE_COLUMN))
        if electric_range is not None:
            self.range_total += electric_range
            self.range_count += 1

    def finalize_aggregations(self) -> AggregateResult:
        """
        Freeze the counters into an AggregateResult.

        Years are emitted in ascending lexical order; makes keep the order
        in which they were first seen.
        """
        result = AggregateResult(
            counts_by_year={year: self.year_counts[year] for year in sorted(self.year_counts)},
            counts_by_make=dict(self.make_counts),
            average_range=mean_to_cents(self.range_total, self.range_count),
            records_processed=self.records_processed,
            range_samples=self.range_count,
        )
        self._log_summary_statistics(result)
        return result

    def _log_summary_statistics(self, result: AggregateResult) -> None:
        logger.info(
            f"Aggregation complete. Processed {result.records_processed} records: "
            f"{len(result.counts_by_year)} model years, {result.unique_makes} makes, "
            f"{result.range_samples} range samples (avg {result.average_range})"
        )
        skipped = result.records_processed - result.counted_records
        if skipped:
            logger.debug(f"{skipped} records lacked a model year or make")

    def get_aggregation_summary(self) -> Dict[str, int]:
        return {
            'records_processed': self.records_processed,
            'model_years': len(self.year_counts),
            'unique_makes': len(self.make_counts),
            'range_samples': self.range_count,
        }


def aggregate(rows: Iterable[Mapping[str, Any]]) -> AggregateResult:
    """Aggregate a full row sequence in a single pass."""
    aggregator = RegistrationAggregator()
    aggregator.process_chunk(rows)
    return aggregator.finalize_aggregations()
