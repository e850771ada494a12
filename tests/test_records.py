import os
import tempfile
import unittest

from game import (
    PersistedState,
    SessionReporter,
    db_list_best,
    db_lookup_best,
    db_store_best,
    db_store_setting,
    format_time,
    grid_key,
    load_state,
)


class TestRecordsDb(unittest.TestCase):
    def test_given_best_when_store_then_lookup_returns_it(self):
        with tempfile.TemporaryDirectory() as td:
            db = os.path.join(td, "memory.db")
            self.assertIsNone(db_lookup_best(db, 4, 4))
            db_store_best(db, 4, 4, 42.5, 12)
            self.assertEqual(db_lookup_best(db, 4, 4), (42.5, 12))
            db_store_best(db, 4, 4, 30.0, 10)
            self.assertEqual(db_lookup_best(db, 4, 4), (30.0, 10))
            self.assertIsNone(db_lookup_best(db, 6, 6))

    def test_given_nested_path_when_storing_then_directories_created(self):
        with tempfile.TemporaryDirectory() as td:
            db = os.path.join(td, "deep", "nest", "memory.db")
            db_store_best(db, 2, 2, 1.0, 2)
            self.assertTrue(os.path.isfile(db))

    def test_given_several_grids_when_listing_then_smallest_first(self):
        with tempfile.TemporaryDirectory() as td:
            db = os.path.join(td, "memory.db")
            db_store_best(db, 6, 6, 90.0, 30)
            db_store_best(db, 4, 4, 20.0, 9)
            db_store_best(db, 5, 4, 40.0, 14)
            self.assertEqual([g for g, *_ in db_list_best(db)], ["4x4", "5x4", "6x6"])

    def test_given_stored_rows_when_loading_state_then_cache_filled(self):
        with tempfile.TemporaryDirectory() as td:
            db = os.path.join(td, "memory.db")
            db_store_best(db, 4, 4, 33.0, 11)
            db_store_setting(db, "grid_size", "5x6")
            loaded = load_state(db)
            self.assertEqual(loaded.best_times, {"4x4": 33.0})
            self.assertEqual(loaded.best_moves, {"4x4": 11})
            self.assertEqual(loaded.grid_size, (5, 6))

    def test_given_empty_db_when_loading_then_blank_state(self):
        with tempfile.TemporaryDirectory() as td:
            loaded = load_state(os.path.join(td, "memory.db"))
            self.assertEqual(loaded, PersistedState())

    def test_given_grid_when_keyed_then_rows_x_cols(self):
        self.assertEqual(grid_key(5, 6), "5x6")


class TestSessionReporter(unittest.TestCase):
    def test_given_no_best_when_win_then_new_best(self):
        r = SessionReporter(None)
        res = r.report_win(4, 4, 50.0, 20)
        self.assertTrue(res.new_best)
        self.assertIsNone(res.previous_best)
        self.assertEqual(r.best_time(4, 4), 50.0)
        self.assertEqual(r.best_moves(4, 4), 20)

    def test_given_best_when_slower_or_equal_win_then_kept(self):
        r = SessionReporter(None)
        r.report_win(4, 4, 50.0, 20)
        res = r.report_win(4, 4, 50.0, 15)
        self.assertFalse(res.new_best)
        self.assertEqual(res.best, 50.0)
        self.assertEqual(r.best_moves(4, 4), 20)
        res = r.report_win(4, 4, 49.0, 25)
        self.assertTrue(res.new_best)
        self.assertEqual(res.previous_best, 50.0)

    def test_given_grids_when_winning_then_bests_are_per_size(self):
        r = SessionReporter(None)
        r.report_win(4, 4, 50.0, 20)
        self.assertIsNone(r.best_time(6, 6))

    def test_given_db_when_reporter_reopened_then_best_and_grid_survive(self):
        with tempfile.TemporaryDirectory() as td:
            db = os.path.join(td, "memory.db")
            r = SessionReporter(db)
            r.report_win(4, 4, 61.5, 18)
            r.report_win(4, 4, 70.0, 10)
            r.save_grid_size(6, 4)
            again = SessionReporter(db)
            self.assertEqual(again.best_time(4, 4), 61.5)
            self.assertEqual(again.best_moves(4, 4), 18)
            self.assertEqual(again.saved_grid_size(), (6, 4))

    def test_given_two_reporters_on_one_db_when_slower_win_then_stored_best_wins(self):
        with tempfile.TemporaryDirectory() as td:
            db = os.path.join(td, "memory.db")
            stale = SessionReporter(db)
            SessionReporter(db).report_win(4, 4, 40.0, 12)
            res = stale.report_win(4, 4, 45.0, 9)
            self.assertFalse(res.new_best)
            self.assertEqual(res.previous_best, 40.0)
            self.assertEqual(stale.best_moves(4, 4), 12)
            self.assertEqual(db_lookup_best(db, 4, 4), (40.0, 12))

    def test_given_seconds_when_formatted_then_mm_ss(self):
        self.assertEqual(format_time(0), "00:00")
        self.assertEqual(format_time(59.9), "00:59")
        self.assertEqual(format_time(61), "01:01")
        self.assertEqual(format_time(3600), "60:00")
        self.assertEqual(format_time(-3), "00:00")


if __name__ == '__main__':
    unittest.main(verbosity=2)
