"""
Tests for the session state machine and the scheduler.
"""

import random

import pytest

from game.board import Board, Player
from game.config import GameConfig, OpponentMode, SessionSettings
from game.scheduler import ManualScheduler
from game.session import GameSession, Score
from game.win_checker import Outcome


def two_player_session() -> GameSession:
    return GameSession(SessionSettings(mode=OpponentMode.HUMAN), ManualScheduler())


def computer_session(human_side: Player = Player.X, delay_ms: int = 280):
    scheduler = ManualScheduler()
    settings = SessionSettings(
        mode=OpponentMode.COMPUTER,
        human_side=human_side,
        computer_delay_ms=delay_ms
    )
    return GameSession(settings, scheduler), scheduler


class NonCancellingScheduler(ManualScheduler):
    """A scheduler whose cancel does nothing, like a timer that already fired."""

    def cancel(self, handle):
        pass


# ==================== SCHEDULER ====================

def test_manual_scheduler_runs_in_due_order():
    scheduler = ManualScheduler()
    calls = []
    scheduler.call_later(200, lambda: calls.append("b"))
    scheduler.call_later(100, lambda: calls.append("a"))
    scheduler.call_later(200, lambda: calls.append("c"))

    assert scheduler.advance(99) == 0
    assert scheduler.advance(1) == 1
    assert calls == ["a"]
    assert scheduler.advance(500) == 2
    assert calls == ["a", "b", "c"]
    assert scheduler.now_ms == 600


def test_manual_scheduler_cancel():
    scheduler = ManualScheduler()
    calls = []
    handle = scheduler.call_later(10, lambda: calls.append(1))
    scheduler.cancel(handle)
    scheduler.cancel(handle)
    assert scheduler.pending == 0
    scheduler.advance(100)
    assert calls == []


def test_manual_scheduler_runs_callbacks_scheduled_while_advancing():
    scheduler = ManualScheduler()
    calls = []

    def first():
        calls.append("first")
        scheduler.call_later(10, lambda: calls.append("second"))

    scheduler.call_later(10, first)
    scheduler.advance(20)
    assert calls == ["first", "second"]


def test_run_pending_empties_queue():
    scheduler = ManualScheduler()
    calls = []
    scheduler.call_later(5, lambda: calls.append(1))
    scheduler.call_later(50, lambda: calls.append(2))
    assert scheduler.run_pending() == 2
    assert scheduler.pending == 0
    assert scheduler.now_ms == 50


# ==================== ROUND LIFECYCLE ====================

def test_session_starts_with_x_to_move():
    session = two_player_session()
    assert session.board == Board.empty()
    assert session.turn == Player.X
    assert not session.game_over
    assert session.score == Score()
    assert session.accepting_input
    assert session.status_text() == "X to move"


def test_new_round_clears_board_and_keeps_score():
    session = two_player_session()
    for index in (0, 4, 1, 7, 2):
        session.request_move(index)
    assert session.score.x_wins == 1

    session.new_round(Player.O)

    assert session.board == Board.empty()
    assert session.turn == Player.O
    assert not session.game_over
    assert session.winning_line is None
    assert session.score == Score(x_wins=1)


def test_reset_all_zeroes_score():
    session = two_player_session()
    session.score = Score(x_wins=3, o_wins=2, draws=5)
    session.new_round(Player.O)

    session.reset_all()

    assert session.score == Score(0, 0, 0)
    assert session.turn == Player.X
    assert session.board == Board.empty()


def test_request_new_round_alternates_start():
    session = two_player_session()
    session.request_move(0)          # X moved, O to move
    session.request_new_round()
    assert session.turn == Player.X  # side not on move starts

    session.request_new_round()
    assert session.turn == Player.O

    session.request_new_round(Player.O)
    assert session.turn == Player.O


def test_request_new_round_after_win_lets_loser_start():
    session = two_player_session()
    for index in (0, 4, 1, 7, 2):
        session.request_move(index)
    session.request_new_round()
    assert session.turn == Player.O


def test_request_full_reset():
    session = two_player_session()
    for index in (0, 4, 1, 7, 2):
        session.request_move(index)
    session.request_full_reset()
    assert session.score == Score()
    assert session.turn == Player.X


# ==================== MOVES ====================

def test_full_playthrough_x_wins_top_row():
    session = two_player_session()
    for index in (0, 4, 1, 7, 2):
        assert session.request_move(index)

    assert session.outcome == Outcome.win(Player.X, (0, 1, 2))
    assert session.winning_line == (0, 1, 2)
    assert session.game_over
    assert session.score.x_wins == 1
    assert not session.accepting_input
    assert session.status_text() == "X wins!"


def test_draw_scenario():
    session = two_player_session()
    # X:0 O:4 X:8 O:2 X:6 O:3 X:5 O:7 X:1
    for index in (0, 4, 8, 2, 6, 3, 5, 7, 1):
        assert session.request_move(index)

    assert session.outcome.is_draw
    assert session.winning_line is None
    assert session.score == Score(draws=1)
    assert not session.accepting_input
    assert session.status_text() == "Draw!"


def test_sequence_ending_on_bottom_row_is_a_win():
    session = two_player_session()
    # X's last move completes 6-7-8
    for index in (0, 4, 8, 2, 6, 3, 5, 1, 7):
        session.request_move(index)
    assert session.outcome == Outcome.win(Player.X, (6, 7, 8))


def test_apply_move_ignores_occupied_cell():
    session = two_player_session()
    assert session.apply_move(4, Player.X)
    board = session.board
    assert not session.apply_move(4, Player.O)
    assert session.board == board
    assert session.turn == Player.O


def test_apply_move_ignores_wrong_side():
    session = two_player_session()
    assert not session.apply_move(0, Player.O)
    assert session.board == Board.empty()
    assert session.turn == Player.X


def test_apply_move_ignores_out_of_range():
    session = two_player_session()
    assert not session.apply_move(9, Player.X)
    assert not session.apply_move(-1, Player.X)
    assert session.board == Board.empty()


def test_apply_move_after_round_over_is_ignored():
    session = two_player_session()
    for index in (0, 4, 1, 7, 2):
        session.request_move(index)
    board = session.board
    score = session.snapshot().score

    assert not session.apply_move(5, Player.O)
    assert session.board == board
    assert session.score == score


def test_apply_move_accepts_symbol_strings():
    session = two_player_session()
    assert session.apply_move(0, "X")
    assert session.board[0] == Player.X


def test_turn_alternates():
    session = two_player_session()
    session.request_move(0)
    assert session.turn == Player.O
    session.request_move(1)
    assert session.turn == Player.X


# ==================== COMPUTER ====================

def test_computer_move_waits_for_delay():
    session, scheduler = computer_session()
    assert session.request_move(0)
    assert session.computer_pending
    assert not session.accepting_input
    assert session.board.count(Player.O) == 0

    scheduler.advance(GameConfig.COMPUTER_DELAY_MS - 1)
    assert session.board.count(Player.O) == 0

    scheduler.advance(1)
    assert session.board[4] == Player.O
    assert not session.computer_pending
    assert session.turn == Player.X
    assert session.accepting_input


def test_human_cannot_move_during_computer_turn():
    session, scheduler = computer_session()
    session.request_move(0)
    assert not session.request_move(1)
    assert session.board[1] is None
    scheduler.advance(1000)
    assert session.board.count(Player.O) == 1


def test_computer_moves_first_when_human_plays_o():
    session, scheduler = computer_session(human_side=Player.O)
    assert session.turn == Player.X
    assert session.computer_pending
    assert not session.accepting_input

    scheduler.advance(280)

    assert session.board[0] == Player.X
    assert session.turn == Player.O
    assert session.accepting_input


def test_stale_computer_move_dropped_after_new_round():
    session, scheduler = computer_session()
    session.request_move(0)
    assert session.computer_pending

    session.new_round(Player.X)
    scheduler.advance(1000)

    assert session.board == Board.empty()
    assert session.turn == Player.X


def test_stale_computer_move_dropped_even_if_timer_not_cancelled():
    scheduler = NonCancellingScheduler()
    session = GameSession(SessionSettings(mode=OpponentMode.COMPUTER), scheduler)
    session.request_move(0)
    old_generation = session.generation

    session.new_round(Player.X)
    assert session.generation == old_generation + 1
    session.request_move(8)

    # Both the stale and the fresh callback are queued; only the fresh one may run
    scheduler.advance(1000)

    assert session.board[0] is None
    assert session.board[8] == Player.X
    assert session.board.count(Player.O) == 1


def test_stale_computer_move_dropped_after_reset_all():
    session, scheduler = computer_session()
    session.request_move(0)
    session.reset_all()
    scheduler.advance(1000)
    assert session.board == Board.empty()


def test_new_round_with_computer_start_schedules_one_move():
    session, scheduler = computer_session()
    session.new_round(Player.O)
    assert session.computer_pending
    session.maybe_trigger_computer()
    assert scheduler.pending == 1
    scheduler.advance(280)
    assert session.board.count(Player.O) == 1
    assert session.turn == Player.X


def test_maybe_trigger_computer_noop_in_two_player_mode():
    session = two_player_session()
    session.request_move(0)
    assert not session.maybe_trigger_computer()
    assert session.scheduler.pending == 0


def test_computer_never_loses_against_random_human():
    rng = random.Random(7)
    session, scheduler = computer_session(delay_ms=0)

    for round_number in range(20):
        session.request_new_round(Player.X if round_number % 2 == 0 else Player.O)
        while not session.game_over:
            scheduler.run_pending()
            if session.game_over:
                break
            session.request_move(rng.choice(session.board.empty_cells()))

    assert session.score.x_wins == 0
    assert session.score.o_wins + session.score.draws == 20


def test_computer_punishes_edge_reply():
    session, scheduler = computer_session(human_side=Player.O)
    scheduler.advance(280)
    assert session.board[0] == Player.X

    # An edge reply to a corner opening loses by force
    session.request_move(1)
    while not session.game_over:
        scheduler.run_pending()
        if session.game_over:
            break
        session.request_move(session.board.empty_cells()[0])

    assert session.outcome.winner == Player.X
    assert session.score.x_wins == 1


def test_close_cancels_pending_move():
    session, scheduler = computer_session()
    session.request_move(0)
    session.close()
    assert scheduler.pending == 0
    assert not session.computer_pending


# ==================== CONFIGURATION ====================

def test_set_opponent_mode_starts_new_round_and_keeps_score():
    session = two_player_session()
    for index in (0, 4, 1, 7, 2):
        session.request_move(index)

    session.set_opponent_mode("hvc")

    assert session.settings.mode == OpponentMode.COMPUTER
    assert session.board == Board.empty()
    assert session.turn == Player.X
    assert session.score.x_wins == 1


def test_set_opponent_mode_same_value_is_noop():
    session = two_player_session()
    session.request_move(0)
    session.set_opponent_mode(OpponentMode.HUMAN)
    assert session.board[0] == Player.X


def test_set_human_side_makes_computer_play_x():
    session, scheduler = computer_session()
    session.request_move(0)

    session.set_human_side("O")

    assert session.settings.computer_side == Player.X
    assert session.board == Board.empty()
    scheduler.advance(1000)
    # The old O reply was dropped; the computer now opens as X
    assert session.board.count(Player.X) == 1
    assert session.board.count(Player.O) == 0


def test_switching_to_two_players_drops_pending_computer_move():
    session, scheduler = computer_session()
    session.request_move(0)
    session.set_opponent_mode(OpponentMode.HUMAN)
    scheduler.advance(1000)
    assert session.board == Board.empty()
    assert session.accepting_input


def test_invalid_configuration_values_raise():
    session = two_player_session()
    with pytest.raises(ValueError):
        session.set_opponent_mode("online")
    with pytest.raises(ValueError):
        session.set_human_side("Z")
    with pytest.raises(ValueError):
        SessionSettings(computer_delay_ms=-1)


# ==================== SNAPSHOTS ====================

def test_listeners_receive_snapshots():
    session = two_player_session()
    snapshots = []
    session.add_listener(snapshots.append)

    session.request_move(0)
    session.request_move(0)   # ignored, no event
    session.request_move(4)

    assert len(snapshots) == 2
    assert snapshots[0].board[0] == Player.X
    assert snapshots[0].turn == Player.O
    assert snapshots[1].board[4] == Player.O

    session.remove_listener(snapshots.append)
    session.request_move(8)
    assert len(snapshots) == 2


def test_snapshot_is_independent_copy():
    session = two_player_session()
    snap = session.snapshot()
    for index in (0, 4, 1, 7, 2):
        session.request_move(index)
    assert snap.board == Board.empty()
    assert snap.score == Score()
    assert not snap.round_over


def test_snapshot_after_win():
    session = two_player_session()
    for index in (0, 4, 1, 7, 2):
        session.request_move(index)
    snap = session.snapshot()
    assert snap.round_over
    assert snap.winning_line == (0, 1, 2)
    assert snap.score.as_dict() == {"X": 1, "O": 0, "D": 0}
    assert not snap.accepting_input
    assert snap.status_text == "X wins!"


def test_snapshot_reports_pending_computer_move():
    session, scheduler = computer_session()
    snapshots = []
    session.add_listener(snapshots.append)
    session.request_move(0)
    assert snapshots[-1].computer_pending
    assert not snapshots[-1].accepting_input
    scheduler.advance(280)
    assert not snapshots[-1].computer_pending
    assert snapshots[-1].accepting_input
