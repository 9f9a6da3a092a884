# ========================
# tests/test_api_integration.py
# ========================

import unittest
import tempfile
import os
import sys
import csv
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import patch

from fastapi.testclient import TestClient

# Add the project root to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import api_server
from ev_insights.pipeline.ingestion import DatasetLoader
from ev_insights.pipeline.orchestrator import LOAD_FAILED_MESSAGE, DashboardSession
from ev_insights.utils.config import Config


class TestAPIIntegration(unittest.TestCase):
    """
    Integration tests for the API endpoints, served in-process.
    """

    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(api_server.app)

    def setUp(self):
        rows = [['Model Year', 'Make', 'Electric Range', 'Model']]
        rows += [['2020', 'Tesla', '250', 'MODEL 3'],
                 ['2020', 'Nissan', 'not_a_number', ''],
                 ['2021', 'Tesla', '150', 'MODEL Y']]

        with tempfile.NamedTemporaryFile(mode='w', suffix='.csv', delete=False, newline='') as f:
            csv.writer(f).writerows(rows)
            self.csv_path = f.name

        self.session = DashboardSession(self.csv_path, config=Config({'records_per_page': 2}))
        patcher = patch('api_server.session', self.session)
        patcher.start()
        self.addCleanup(patcher.stop)

    def tearDown(self):
        os.unlink(self.csv_path)

    def test_root_endpoint(self):
        response = self.client.get("/")
        self.assertEqual(response.status_code, 200)

        data = response.json()
        self.assertIn("message", data)
        self.assertIn("endpoints", data)

    def test_health_endpoint(self):
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)

        data = response.json()
        self.assertEqual(data["status"], "healthy")
        self.assertIn("timestamp", data)
        self.assertFalse(data["dataset_loaded"])

    def test_summary_loads_on_first_use(self):
        response = self.client.get("/summary")
        self.assertEqual(response.status_code, 200)

        data = response.json()
        self.assertEqual(data["metrics"]["total_vehicles"], 3)
        self.assertEqual(data["metrics"]["unique_makes"], 2)
        self.assertEqual(data["metrics"]["average_range"], 200.0)
        self.assertEqual(data["aggregates"]["counts_by_year"], {"2020": 2, "2021": 1})
        self.assertEqual(data["aggregates"]["counts_by_make"], {"Tesla": 2, "Nissan": 1})
        self.assertTrue(self.session.is_loaded)

    def test_charts_endpoint(self):
        response = self.client.get("/charts")
        self.assertEqual(response.status_code, 200)

        data = response.json()
        self.assertEqual(data["registrations_by_year"]["labels"], ["2020", "2021"])
        self.assertEqual(data["makes_distribution"]["labels"], ["Tesla", "Nissan"])

    def test_records_pages(self):
        first = self.client.get("/records").json()
        self.assertEqual(first["page_count"], 2)
        self.assertEqual(first["current_page"], 0)
        self.assertEqual(len(first["rows"]), 2)
        self.assertEqual(first["rows"][1]["Model"], "N/A")

        second = self.client.get("/records", params={"page": 1}).json()
        self.assertEqual(len(second["rows"]), 1)
        # Per-request page; shared session state is left alone
        self.assertEqual(second["current_page"], 1)
        self.assertEqual(self.session.current_page, 0)

        beyond = self.client.get("/records", params={"page": 9})
        self.assertEqual(beyond.status_code, 200)
        self.assertEqual(beyond.json()["rows"], [])

    def test_load_failure_returns_503(self):
        failing = DashboardSession('missing.csv', config=Config())
        with patch('api_server.session', failing):
            response = self.client.get("/summary")

        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()["detail"], LOAD_FAILED_MESSAGE)

    def test_reload(self):
        self.client.get("/summary")
        with open(self.csv_path, 'a', newline='') as f:
            csv.writer(f).writerow(['2022', 'Kia', '239', 'EV6'])

        response = self.client.post("/reload")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["rows"], 4)

        summary = self.client.get("/summary").json()
        self.assertEqual(summary["metrics"]["total_vehicles"], 4)

    def test_invalid_page_size_returns_400(self):
        bad = DashboardSession(self.csv_path, page_size=0, config=Config())
        with patch('api_server.session', bad):
            response = self.client.get("/records")

        self.assertEqual(response.status_code, 400)

class CountingLoader(DatasetLoader):
    """Loader that counts calls and sleeps `delay` seconds per load."""

    def __init__(self, delay=0.0):
        super().__init__()
        self.delay = delay
        self.calls = 0
        self.started = threading.Event()

    def load(self, source):
        self.calls += 1
        self.started.set()
        time.sleep(self.delay)
        return super().load(source)


class TestConcurrentRequests(unittest.TestCase):
    """
    Handlers called from several threads at once, as FastAPI's threadpool
    does for plain `def` endpoints.
    """

    def setUp(self):
        rows = [['Model Year', 'Make', 'Electric Range', 'Model']]
        rows += [['2020', 'Tesla', '250', f'M{i}'] for i in range(10)]

        with tempfile.NamedTemporaryFile(mode='w', suffix='.csv', delete=False, newline='') as f:
            csv.writer(f).writerows(rows)
            self.csv_path = f.name

        self.loader = CountingLoader(delay=0.3)
        self.session = DashboardSession(self.csv_path, page_size=2, loader=self.loader)
        patcher = patch('api_server.session', self.session)
        patcher.start()
        self.addCleanup(patcher.stop)

    def tearDown(self):
        os.unlink(self.csv_path)

    def test_simultaneous_first_requests_load_once(self):
        with ThreadPoolExecutor(max_workers=4) as executor:
            futures = [executor.submit(api_server.get_records, page=0) for _ in range(4)]
            pages = [future.result(timeout=10) for future in futures]

        self.assertEqual(self.loader.calls, 1)
        for page in pages:
            self.assertEqual(page["page_count"], 5)
            self.assertEqual([row["Model"] for row in page["rows"]], ["M0", "M1"])

    def test_each_request_gets_its_own_page(self):
        self.loader.delay = 0.0
        requested = [1, 4] * 10

        with ThreadPoolExecutor(max_workers=8) as executor:
            served = list(executor.map(lambda index: api_server.get_records(page=index), requested))

        for index, page in zip(requested, served):
            self.assertEqual(page["current_page"], index)
            self.assertEqual([row["Model"] for row in page["rows"]], [f"M{index * 2}", f"M{index * 2 + 1}"])
        self.assertEqual(self.session.current_page, 0)

    def test_reload_while_requests_in_flight(self):
        self.loader.delay = 0.0
        api_server.get_summary()
        with open(self.csv_path, 'a', newline='') as f:
            csv.writer(f).writerow(['2021', 'Kia', '239', 'M10'])

        self.loader.delay = 0.3
        self.loader.started.clear()
        with ThreadPoolExecutor(max_workers=6) as executor:
            reloading = executor.submit(api_server.reload_dataset)
            self.assertTrue(self.loader.started.wait(timeout=5))
            readers = [executor.submit(api_server.get_summary) for _ in range(3)]
            readers += [executor.submit(api_server.get_records, page=1) for _ in range(2)]

            reloaded = reloading.result(timeout=10)
            responses = [future.result(timeout=10) for future in readers]

        self.assertEqual(reloaded["rows"], 11)
        self.assertEqual(self.loader.calls, 2)
        for response in responses[:3]:
            self.assertIn(response["metrics"]["total_vehicles"], (10, 11))
        for response in responses[3:]:
            self.assertEqual(response["current_page"], 1)
        self.assertEqual(api_server.get_summary()["metrics"]["total_vehicles"], 11)



if __name__ == '__main__':
    unittest.main()
