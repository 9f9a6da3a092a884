# ========================
# tests/test_pagination.py
# ========================

import unittest
import sys
import os

# Add the project root to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ev_insights.pipeline.pagination import InvalidArgument, Page, page_count, paginate


class TestPagination(unittest.TestCase):

    def setUp(self):
        self.rows = tuple({'DOL Vehicle ID': str(i)} for i in range(25))

    def test_last_partial_page(self):
        page = paginate(self.rows, index=2, size=10)

        self.assertEqual(page.items, self.rows[20:25])
        self.assertEqual(len(page.items), 5)
        self.assertEqual(page.page_count, 3)

    def test_first_page(self):
        page = paginate(self.rows, 0, 10)

        self.assertEqual(page.items, self.rows[:10])
        self.assertFalse(page.has_previous)
        self.assertTrue(page.has_next)

    def test_empty_dataset_has_no_pages(self):
        page = paginate([], 0, 10)

        self.assertEqual(page.items, ())
        self.assertEqual(page.page_count, 0)
        self.assertFalse(page.has_next)
        self.assertFalse(page.has_previous)

    def test_out_of_range_index_is_empty(self):
        for index in [3, 4, 100, -1, -3]:
            page = paginate(self.rows, index, 10)
            self.assertEqual(page.items, (), f"Failed for index: {index}")
            self.assertEqual(page.page_count, 3)

    def test_non_positive_size_is_invalid(self):
        for size in [0, -1, -10]:
            with self.assertRaises(InvalidArgument):
                paginate(self.rows, 0, size)
            with self.assertRaises(InvalidArgument):
                paginate([], 5, size)

    def test_non_integer_size_is_invalid(self):
        for size in [2.5, '10', None, True]:
            with self.assertRaises(InvalidArgument):
                paginate(self.rows, 0, size)

    def test_invalid_argument_is_value_error(self):
        self.assertTrue(issubclass(InvalidArgument, ValueError))

    def test_exact_multiple_of_page_size(self):
        page = paginate(self.rows[:20], 1, 10)

        self.assertEqual(page.page_count, 2)
        self.assertEqual(page.items, self.rows[10:20])
        self.assertTrue(page.has_previous)
        self.assertFalse(page.has_next)

    def test_navigation_flags_outside_range(self):
        for index in [3, 4, -1]:
            page = paginate(self.rows, index, 10)
            self.assertFalse(page.has_previous, f"Failed for index: {index}")
            self.assertFalse(page.has_next, f"Failed for index: {index}")

        last = paginate(self.rows, 2, 10)
        self.assertTrue(last.has_previous)
        self.assertFalse(last.has_next)

    def test_page_count_helper(self):
        self.assertEqual(page_count(0, 10), 0)
        self.assertEqual(page_count(1, 10), 1)
        self.assertEqual(page_count(10, 10), 1)
        self.assertEqual(page_count(11, 10), 2)

    def test_page_is_independent_of_later_calls(self):
        first = paginate(self.rows, 0, 5)
        paginate(self.rows, 1, 5)

        self.assertEqual(first, Page(items=self.rows[:5], page_count=5, index=0, size=5))

    def test_to_dict(self):
        payload = paginate(self.rows, 4, 6).to_dict()

        self.assertEqual(payload, {
            'items': [{'DOL Vehicle ID': '24'}],
            'page_count': 5,
            'index': 4,
            'size': 6,
        })


if __name__ == '__main__':
    unittest.main()
