# ========================
# ev_insights/utils/data_generator.py
# ========================

"""
Data Generation Utilities

Writes realistic electric-vehicle registration CSVs with controlled dirty
values, for demos and tests.
"""

import csv
import logging
import random
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

logger = logging.getLogger(__name__)

HEADER = [
    'VIN (1-10)', 'County', 'City', 'State', 'Postal Code', 'Model Year',
    'Make', 'Model', 'Electric Vehicle Type',
    'Clean Alternative Fuel Vehicle (CAFV) Eligibility', 'Electric Range',
    'Base MSRP', 'Legislative District', 'DOL Vehicle ID', 'Vehicle Location',
    'Electric Utility', '2020 Census Tract',
]

BEV = 'Battery Electric Vehicle (BEV)'
PHEV = 'Plug-in Hybrid Electric Vehicle (PHEV)'


class DataGenerator:
    """
    Generator for EV registration datasets.
    """

    def __init__(self, seed: Optional[int] = None):
        """
        Initialize data generator.

        Args:
            seed (int): Random seed for reproducible data generation
        """
        self._random = random.Random(seed)
        self._initialize_data_patterns()
        logger.info(f"DataGenerator initialized with seed: {seed}")

    def _initialize_data_patterns(self) -> None:
        # Catalog: make -> list of (model, vehicle type, typical range)
        self.vehicles = {
            'TESLA': [('MODEL 3', BEV, 266), ('MODEL Y', BEV, 291), ('MODEL S', BEV, 337)],
            'NISSAN': [('LEAF', BEV, 150)],
            'CHEVROLET': [('BOLT EV', BEV, 259), ('VOLT', PHEV, 53)],
            'FORD': [('MUSTANG MACH-E', BEV, 0), ('FUSION', PHEV, 26)],
            'KIA': [('NIRO', BEV, 239), ('EV6', BEV, 0)],
            'BMW': [('I3', BEV, 153), ('X5', PHEV, 30)],
            'TOYOTA': [('PRIUS PRIME', PHEV, 25), ('RAV4 PRIME', PHEV, 42)],
            'VOLKSWAGEN': [('ID.4', BEV, 0)],
        }
        self.make_weights = {
            'TESLA': 0.45, 'NISSAN': 0.1, 'CHEVROLET': 0.1, 'FORD': 0.08,
            'KIA': 0.08, 'BMW': 0.06, 'TOYOTA': 0.08, 'VOLKSWAGEN': 0.05,
        }
        # County -> (city, postal code, legislative district, utility)
        self.locations = {
            'King': [('Seattle', '98101', '43', 'CITY OF SEATTLE - (WA)|CITY OF TACOMA - (WA)'),
                     ('Bellevue', '98004', '48', 'PUGET SOUND ENERGY INC||CITY OF TACOMA - (WA)')],
            'Snohomish': [('Bothell', '98012', '1', 'PUGET SOUND ENERGY INC')],
            'Thurston': [('Olympia', '98501', '22', 'PUGET SOUND ENERGY INC')],
            'Spokane': [('Spokane', '99201', '3', 'MODERN ELECTRIC WATER COMPANY')],
            'Clark': [('Vancouver', '98661', '49', 'BONNEVILLE POWER ADMINISTRATION||PUD NO 1 OF CLARK COUNTY - (WA)')],
        }
        self.years = list(range(2011, 2025))

    def generate_dataset(self,
                         file_path: Union[str, Path],
                         num_rows: int,
                         error_rate: float = 0.1) -> Dict[str, Any]:
        """
        Generate a registration dataset with controlled dirty values.

        Args:
            file_path (str): Output CSV file path
            num_rows (int): Number of rows to generate
            error_rate (float): Fraction of records with intentional errors

        Returns:
            dict: Generation statistics
        """
        logger.info(f"Generating {num_rows:,} rows with {error_rate:.1%} error rate...")

        stats = {
            'total_rows': num_rows,
            'error_rate': error_rate,
            'records_with_errors': 0,
            'error_types': {},
        }

        Path(file_path).parent.mkdir(parents=True, exist_ok=True)

        with open(file_path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.writer(f)
            writer.writerow(HEADER)
            for i in range(num_rows):
                writer.writerow(self._generate_single_record(i, error_rate, stats))

        stats['error_rate_actual'] = stats['records_with_errors'] / num_rows if num_rows else 0.0

        logger.info(f"Dataset generated: {file_path}")
        logger.info(f"Error breakdown: {stats['error_types']}")
        return stats

    def _generate_single_record(self, index: int, error_rate: float, stats: Dict[str, Any]) -> List[Any]:
        rng = self._random
        makes = list(self.make_weights)
        make = rng.choices(makes, weights=[self.make_weights[m] for m in makes])[0]
        model, vehicle_type, electric_range = rng.choice(self.vehicles[make])
        county = rng.choice(list(self.locations))
        city, postal_code, district, utility = rng.choice(self.locations[county])
        longitude = round(rng.uniform(-123.0, -117.0), 5)
        latitude = round(rng.uniform(45.5, 48.9), 5)

        if electric_range == 0:
            eligibility = 'Eligibility unknown as battery range has not been researched'
        elif electric_range >= 30:
            eligibility = 'Clean Alternative Fuel Vehicle Eligible'
        else:
            eligibility = 'Not eligible due to low battery range'

        record = {
            'VIN (1-10)': ''.join(rng.choice('0123456789ABCDEFGHJKLMNPRSTUVWXYZ') for _ in range(10)),
            'County': county,
            'City': city,
            'State': 'WA',
            'Postal Code': postal_code,
            'Model Year': str(rng.choice(self.years)),
            'Make': make,
            'Model': model,
            'Electric Vehicle Type': vehicle_type,
            'Clean Alternative Fuel Vehicle (CAFV) Eligibility': eligibility,
            'Electric Range': str(electric_range),
            'Base MSRP': '0',
            'Legislative District': district,
            'DOL Vehicle ID': str(100000000 + index),
            'Vehicle Location': f'POINT ({longitude} {latitude})',
            'Electric Utility': utility,
            '2020 Census Tract': f'530{rng.randint(10000000, 79999999)}',
        }

        if rng.random() < error_rate:
            stats['records_with_errors'] += 1
            self._inject_errors(record, stats)

        return [record[column] for column in HEADER]

    def _inject_errors(self, record: Dict[str, str], stats: Dict[str, Any]) -> None:
        """Inject one kind of dirty value into the record."""
        error_type = self._random.choice([
            'blank_make', 'blank_year', 'non_numeric_range', 'blank_range', 'lowercase_make',
        ])

        if error_type == 'blank_make':
            record['Make'] = ''
        elif error_type == 'blank_year':
            record['Model Year'] = ''
        elif error_type == 'non_numeric_range':
            record['Electric Range'] = 'unknown'
        elif error_type == 'blank_range':
            record['Electric Range'] = ''
        elif error_type == 'lowercase_make':
            record['Make'] = record['Make'].title()

        self._track_error_type(stats, error_type)

    def _track_error_type(self, stats: Dict[str, Any], error_type: str) -> None:
        if error_type not in stats['error_types']:
            stats['error_types'][error_type] = 0
        stats['error_types'][error_type] += 1
