import random
import unittest

from game import CardState, Scheduler, TurnController, TurnPhase, board_from_ids, deal_board

SETTLE = 0.25
MISMATCH = 0.5


def _make(ids, rows=None, cols=None):
    rows = rows or 1
    cols = cols or len(ids)
    scheduler = Scheduler()
    wins = []
    ctrl = TurnController(scheduler, settle_delay=SETTLE, mismatch_delay=MISMATCH, on_win=wins.append)
    board = board_from_ids(rows, cols, ids, generation=1)
    ctrl.attach(board)
    return ctrl, board, scheduler, wins


class TestTurnController(unittest.TestCase):
    def test_given_idle_when_first_reveal_then_one_selected(self):
        ctrl, board, _, _ = _make([0, 0, 1, 1])
        self.assertIs(ctrl.phase, TurnPhase.IDLE)
        self.assertTrue(ctrl.reveal(0))
        self.assertIs(ctrl.phase, TurnPhase.ONE_SELECTED)
        self.assertIs(ctrl.first, board.cards[0])
        self.assertIsNone(ctrl.second)
        self.assertFalse(ctrl.input_locked)
        self.assertEqual(board.moves, 0)

    def test_given_one_selected_when_same_card_tapped_then_ignored(self):
        ctrl, board, scheduler, _ = _make([0, 0, 1, 1])
        ctrl.reveal(0)
        self.assertFalse(ctrl.reveal(0))
        self.assertIs(ctrl.phase, TurnPhase.ONE_SELECTED)
        self.assertIs(ctrl.first, board.cards[0])
        self.assertEqual(board.moves, 0)
        self.assertEqual(scheduler.pending(), 0)

    def test_given_second_reveal_when_selected_then_evaluating_and_locked(self):
        ctrl, board, scheduler, _ = _make([0, 0, 1, 1])
        ctrl.reveal(0)
        ctrl.reveal(2)
        self.assertIs(ctrl.phase, TurnPhase.EVALUATING)
        self.assertTrue(ctrl.input_locked)
        self.assertTrue(all(c.locked for c in board.cards))
        self.assertEqual(board.moves, 1)
        self.assertEqual(scheduler.pending(), 1)

    def test_given_evaluating_when_third_tap_then_dropped_not_queued(self):
        ctrl, board, scheduler, _ = _make([0, 0, 1, 1])
        ctrl.reveal(0)
        ctrl.reveal(2)
        self.assertFalse(ctrl.reveal(1))
        self.assertIs(board.cards[1].state, CardState.HIDDEN)
        scheduler.advance(SETTLE + MISMATCH)
        self.assertIs(ctrl.phase, TurnPhase.IDLE)
        self.assertIs(board.cards[1].state, CardState.HIDDEN)
        self.assertEqual(board.moves, 1)

    def test_given_matching_pair_when_settled_then_both_matched_and_unlocked(self):
        ctrl, board, scheduler, _ = _make([0, 0, 1, 1])
        ctrl.reveal(0)
        ctrl.reveal(1)
        scheduler.advance(SETTLE / 2)
        self.assertIs(board.cards[0].state, CardState.REVEALED)
        scheduler.advance(SETTLE / 2)
        self.assertIs(board.cards[0].state, CardState.MATCHED)
        self.assertIs(board.cards[1].state, CardState.MATCHED)
        self.assertIs(ctrl.phase, TurnPhase.IDLE)
        self.assertFalse(any(c.locked for c in board.cards))

    def test_given_mismatch_when_settled_then_visible_until_mismatch_delay(self):
        ctrl, board, scheduler, _ = _make([0, 0, 1, 1])
        ctrl.reveal(0)
        ctrl.reveal(2)
        scheduler.advance(SETTLE)
        self.assertIs(board.cards[0].state, CardState.REVEALED)
        self.assertIs(board.cards[2].state, CardState.REVEALED)
        self.assertTrue(ctrl.input_locked)
        scheduler.advance(MISMATCH)
        self.assertIs(board.cards[0].state, CardState.HIDDEN)
        self.assertIs(board.cards[2].state, CardState.HIDDEN)
        self.assertFalse(ctrl.input_locked)
        # selectable again
        self.assertTrue(ctrl.reveal(0))

    def test_given_four_cards_when_played_through_then_scenario_holds(self):
        ctrl, board, scheduler, wins = _make([0, 0, 1, 1], rows=2, cols=2)
        ctrl.reveal(0)
        self.assertIs(ctrl.phase, TurnPhase.ONE_SELECTED)
        ctrl.reveal(2)
        scheduler.advance(SETTLE + MISMATCH)
        self.assertTrue(all(c.state is CardState.HIDDEN for c in board.cards))
        self.assertEqual(board.moves, 1)
        self.assertTrue(board.running)
        self.assertEqual(wins, [])

        ctrl.reveal(0)
        ctrl.reveal(1)
        scheduler.advance(SETTLE)
        self.assertIs(board.cards[0].state, CardState.MATCHED)
        self.assertIs(board.cards[1].state, CardState.MATCHED)
        self.assertEqual(board.moves, 2)
        self.assertEqual(wins, [])

        ctrl.reveal(2)
        ctrl.reveal(3)
        scheduler.advance(SETTLE)
        self.assertEqual(board.moves, 3)
        self.assertTrue(board.all_matched())
        self.assertFalse(board.running)
        self.assertEqual(wins, [board])

    def test_given_solved_board_when_more_time_and_taps_then_win_not_repeated(self):
        ctrl, board, scheduler, wins = _make([0, 0])
        ctrl.reveal(0)
        ctrl.reveal(1)
        scheduler.advance(SETTLE)
        self.assertEqual(len(wins), 1)
        self.assertFalse(ctrl.reveal(0))
        scheduler.advance(10.0)
        self.assertEqual(len(wins), 1)

    def test_given_reset_mid_evaluation_when_time_passes_then_no_stale_hide(self):
        ctrl, board, scheduler, wins = _make([0, 0, 1, 1])
        ctrl.reveal(0)
        ctrl.reveal(2)
        scheduler.advance(SETTLE)  # mismatch hide now pending
        new_board = board_from_ids(1, 4, [1, 0, 1, 0], generation=2)
        ctrl.attach(new_board)
        self.assertEqual(scheduler.pending(), 0)
        scheduler.advance(5.0)
        self.assertIs(board.cards[0].state, CardState.REVEALED)
        self.assertIs(board.cards[2].state, CardState.REVEALED)
        self.assertIs(ctrl.phase, TurnPhase.IDLE)
        self.assertFalse(ctrl.input_locked)
        self.assertTrue(all(c.state is CardState.HIDDEN and not c.locked for c in new_board.cards))
        self.assertEqual(new_board.moves, 0)
        self.assertEqual(wins, [])

    def test_given_reset_before_settle_when_time_passes_then_no_match(self):
        ctrl, board, scheduler, _ = _make([0, 0, 1, 1])
        ctrl.reveal(0)
        ctrl.reveal(1)
        ctrl.attach(board_from_ids(1, 4, [0, 1, 0, 1], generation=2))
        scheduler.advance(5.0)
        self.assertIs(board.cards[0].state, CardState.REVEALED)
        self.assertIs(board.cards[1].state, CardState.REVEALED)

    def test_given_stale_callback_when_fired_for_old_generation_then_new_board_untouched(self):
        ctrl, board, scheduler, _ = _make([0, 0, 1, 1])
        ctrl.reveal(0)
        ctrl.reveal(2)
        new_board = board_from_ids(1, 4, [0, 0, 1, 1], generation=2)
        ctrl.attach(new_board)
        ctrl.reveal(0)
        # a continuation that escaped cancellation must not touch the new selection
        ctrl._evaluate(board.generation)
        ctrl._hide_pair(board.generation)
        self.assertIs(ctrl.first, new_board.cards[0])
        self.assertIs(new_board.cards[0].state, CardState.REVEALED)

    def test_given_selection_no_longer_on_board_when_evaluated_then_aborts_cleanly(self):
        ctrl, board, scheduler, wins = _make([0, 0, 1, 1])
        ctrl.reveal(0)
        ctrl.reveal(1)
        stray = board_from_ids(1, 2, [0, 0], generation=board.generation)
        ctrl._second = stray.cards[1]
        scheduler.advance(SETTLE + MISMATCH)
        self.assertIs(ctrl.phase, TurnPhase.IDLE)
        self.assertFalse(ctrl.input_locked)
        self.assertIs(board.cards[0].state, CardState.REVEALED)
        self.assertIs(board.cards[1].state, CardState.REVEALED)
        self.assertEqual(wins, [])

    def test_given_out_of_range_index_when_reveal_then_index_error(self):
        ctrl, _, _, _ = _make([0, 0])
        with self.assertRaises(IndexError):
            ctrl.reveal(2)
        with self.assertRaises(IndexError):
            ctrl.reveal(-1)

    def test_given_no_board_when_reveal_then_false(self):
        ctrl = TurnController(Scheduler())
        self.assertFalse(ctrl.reveal(0))

    def test_given_negative_delay_when_constructed_then_value_error(self):
        with self.assertRaises(ValueError):
            TurnController(Scheduler(), settle_delay=-1)

    def test_given_random_taps_when_playing_then_invariants_hold(self):
        rng = random.Random(1234)
        for game_no in range(20):
            scheduler = Scheduler()
            wins = []
            ctrl = TurnController(scheduler, settle_delay=SETTLE, mismatch_delay=MISMATCH, on_win=wins.append)
            board = deal_board(4, 4, seed=game_no, generation=1)
            ctrl.attach(board)
            evaluations = 0
            steps = 0
            while board.running and steps < 20000:
                before = ctrl.phase
                ctrl.reveal(rng.randrange(len(board)))
                if before is TurnPhase.ONE_SELECTED and ctrl.phase is TurnPhase.EVALUATING:
                    evaluations += 1
                outside = [c for c in board.cards if c.state is CardState.REVEALED]
                self.assertLessEqual(len(outside), 2)
                scheduler.advance(rng.choice([0.0, 0.125, 0.25, 0.5]))
                steps += 1
            scheduler.advance(SETTLE + MISMATCH)
            self.assertFalse(board.running)
            self.assertTrue(board.all_matched())
            self.assertEqual(board.moves, evaluations)
            self.assertEqual(len(wins), 1)


if __name__ == '__main__':
    unittest.main(verbosity=2)
