#!/usr/bin/env python3
# ========================
# main.py
# ========================

"""
Main Entry Point for the EV Insights Dashboard

Loads the configured registration dataset (generating a sample file first
when a local source is missing), aggregates it and prints the dashboard
summary with the first table page.
"""

import logging
import sys
from pathlib import Path
from urllib.parse import urlparse

from ev_insights.pipeline import DashboardSession
from ev_insights.utils import Config, DataGenerator, setup_logging

logger = logging.getLogger(__name__)


def main() -> int:
    """Main execution function."""
    config = Config()

    setup_logging(
        log_level=config.LOG_LEVEL,
        log_file="dashboard.log",
        log_dir=config.LOG_DIR
    )

    logger.info("=" * 60)
    logger.info("EV INSIGHTS DASHBOARD - MAIN EXECUTION")
    logger.info("=" * 60)

    logger.debug(config)

    invalid = [name for name, ok in config.validate_config().items() if not ok]
    if invalid:
        logger.error(f"Invalid configuration values: {', '.join(invalid)}")
        return 1

    try:
        _ensure_sample_data(config)

        session = DashboardSession(config=config)
        results = session.run()
        if results['status'] != 'completed':
            logger.error(f"{results['notification']} {results['error']['kind']}: {results['error']['message']}")
            return 1

        _print_execution_summary(results, session.table_page(0))
        return 0

    except Exception as e:
        logger.error(f"Dashboard run failed: {e}", exc_info=True)
        return 1


def _ensure_sample_data(config: Config) -> None:
    """Generate a sample dataset when the configured local file is missing."""
    if urlparse(str(config.DATA_SOURCE)).scheme in ('http', 'https', 'file'):
        return
    path = Path(config.DATA_SOURCE)
    if path.exists():
        return

    logger.info(f"{path} not found, generating {config.SAMPLE_ROWS} sample rows")
    generator = DataGenerator(seed=config.SAMPLE_SEED)
    generator.generate_dataset(
        file_path=path,
        num_rows=config.SAMPLE_ROWS,
        error_rate=config.SAMPLE_ERROR_RATE
    )


def _print_execution_summary(results: dict, first_page: dict) -> None:
    """Print final execution summary."""
    metrics = results['metrics']
    aggregates = results['aggregates']

    print("\n" + "=" * 70)
    print("ELECTRIC VEHICLE INSIGHTS")
    print("=" * 70)
    print(f"Total Vehicles: {metrics['total_vehicles']:,}")
    print(f"Unique Makes: {metrics['unique_makes']}")
    print(f"Average Electric Range: {metrics['average_range']} miles")

    print("\nVehicles Registered by Year:")
    for year, count in aggregates['counts_by_year'].items():
        print(f"   {year}: {count:,}")

    print("\nVehicle Makes Distribution:")
    for make, count in aggregates['counts_by_make'].items():
        print(f"   {make}: {count:,}")

    print(f"\nVehicle Details (page 1 of {first_page['page_count']}):")
    for row in first_page['rows']:
        print(f"   {row['VIN']}  {row['Model Year']}  {row['Make']}  {row['Model']}  {row['Electric Range']}")

    print("=" * 70)


if __name__ == '__main__':
    sys.exit(main())
