# ========================
# tests/test_config.py
# ========================

import unittest
import os
import sys
from unittest.mock import patch

# Add the project root to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ev_insights.utils.config import Config


class TestConfig(unittest.TestCase):

    @patch.dict(os.environ, {}, clear=True)
    def test_defaults(self):
        config = Config()

        self.assertEqual(config.DATA_SOURCE, 'data/Electric_Vehicle_Population_Data.csv')
        self.assertEqual(config.RECORDS_PER_PAGE, 10)
        self.assertIsNone(config.FETCH_TIMEOUT_SECONDS)
        self.assertTrue(all(config.validate_config().values()))

    @patch.dict(os.environ, {
        'EV_DATA_SOURCE': 'https://example.com/ev.csv',
        'RECORDS_PER_PAGE': '25',
        'FETCH_TIMEOUT_SECONDS': '2.5',
        'LOG_LEVEL': 'DEBUG',
    }, clear=True)
    def test_environment_overrides(self):
        config = Config()

        self.assertEqual(config.DATA_SOURCE, 'https://example.com/ev.csv')
        self.assertEqual(config.RECORDS_PER_PAGE, 25)
        self.assertEqual(config.FETCH_TIMEOUT_SECONDS, 2.5)
        self.assertEqual(config.LOG_LEVEL, 'DEBUG')

    def test_dict_overrides_and_validation(self):
        config = Config({'records_per_page': 0, 'log_level': 'LOUD', 'unknown_key': 1})

        validations = config.validate_config()

        self.assertFalse(validations['records_per_page'])
        self.assertFalse(validations['log_level'])
        self.assertFalse(hasattr(config, 'UNKNOWN_KEY'))

    def test_to_dict_and_str(self):
        config = Config({'records_per_page': 15})

        self.assertEqual(config.to_dict()['RECORDS_PER_PAGE'], 15)
        self.assertIn('RECORDS_PER_PAGE: 15', str(config))


if __name__ == '__main__':
    unittest.main()
