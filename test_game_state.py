"""
Tests for the game session: turns, results, restarts and the AI hook.
"""

import random

import pytest

from tictactoe import (
    Board,
    ControlMode,
    Difficulty,
    GameConfig,
    GameSession,
    GameStatus,
    InvalidMoveError,
    Mark,
    Player,
    PlayerSlot,
)


class ScriptedStrategy:
    """Plays a fixed list of cells."""

    def __init__(self, moves):
        self.moves = list(moves)

    def choose_move(self, board, ai_mark, opponent_mark):
        return self.moves.pop(0)


def play(session, moves):
    results = []
    for index in moves:
        results.append(session.apply_move(index))
    return results


# ==================== BASIC FLOW ====================

class TestTurns:

    def test_initial_state(self, two_humans):
        state = two_humans.current_state()
        assert state.turn is Mark.X
        assert state.status is GameStatus.IN_PROGRESS
        assert state.winner is None
        assert state.move_count == 0
        assert two_humans.board == Board().snapshot()
        assert two_humans.current_player_display_name() == "Alice"

    def test_move_places_mark_and_flips_turn(self, two_humans):
        result = two_humans.apply_move(4)
        assert result.index == 4
        assert result.mark is Mark.X
        assert result.status is GameStatus.IN_PROGRESS
        assert result.move_number == 1
        assert two_humans.board[4] is Mark.X
        assert two_humans.current_state().turn is Mark.O
        assert two_humans.current_player_display_name() == "Bob"

    def test_row_win(self, two_humans):
        # X 0, O 3, X 1, O 4, X 2
        results = play(two_humans, [0, 3, 1, 4, 2])
        assert [r.status for r in results[:-1]] == [GameStatus.IN_PROGRESS] * 4
        assert results[-1].produced_win
        state = two_humans.current_state()
        assert state.status is GameStatus.WON
        assert state.winner is Mark.X
        assert state.turn is Mark.X
        assert state.move_count == 5
        assert two_humans.winner_label() == "Alice"

    def test_last_move_draw(self, two_humans):
        results = play(two_humans, [0, 1, 2, 4, 3, 5, 7, 6, 8])
        assert results[-1].produced_draw
        assert not results[-1].produced_win
        state = two_humans.current_state()
        assert state.status is GameStatus.DRAW
        assert state.winner is None
        assert two_humans.winner_label() == "DRAW"
        assert two_humans.board == Board.from_string("XOX|XOO|OXX").snapshot()

    def test_o_can_start(self):
        session = GameSession(
            player_one=Player("Alice", Mark.X),
            player_two=Player("Bob", Mark.O),
            starting_mark=Mark.O,
        )
        assert session.apply_move(0).mark is Mark.O
        assert session.current_state().turn is Mark.X

    def test_winner_label_in_progress(self, two_humans):
        assert two_humans.winner_label() is None


# ==================== REJECTED MOVES ====================

class TestInvalidMoves:

    @pytest.mark.parametrize("index", [-1, 9, "4", None])
    def test_out_of_range(self, two_humans, index):
        with pytest.raises(InvalidMoveError):
            two_humans.apply_move(index)
        assert two_humans.move_count == 0

    def test_occupied_cell_leaves_state_unchanged(self, two_humans):
        two_humans.apply_move(4)
        board_before = two_humans.board
        state_before = two_humans.current_state()

        with pytest.raises(InvalidMoveError, match="already occupied"):
            two_humans.apply_move(4)

        assert two_humans.board == board_before
        assert two_humans.current_state() == state_before

    def test_no_moves_after_game_over(self, two_humans):
        play(two_humans, [0, 3, 1, 4, 2])
        state_before = two_humans.current_state()
        with pytest.raises(InvalidMoveError, match="already over"):
            two_humans.apply_move(8)
        assert two_humans.current_state() == state_before
        assert two_humans.board[8] is Mark.EMPTY

    def test_invalid_move_error_is_value_error(self, two_humans):
        with pytest.raises(ValueError):
            two_humans.apply_move(42)

    def test_human_cannot_move_for_the_ai(self, make_ai_session, manual_scheduler):
        session = make_ai_session(scheduler=manual_scheduler)
        session.apply_move(0)
        assert session.current_state().turn is Mark.O
        with pytest.raises(InvalidMoveError, match="AI"):
            session.apply_move(1)
        assert session.move_count == 1


# ==================== AI TURNS ====================

class TestAITurns:

    def test_ai_replies_immediately(self, make_ai_session):
        session = make_ai_session(Difficulty.HARD)
        result = session.apply_move(0)

        # The returned result describes the human's move
        assert result.index == 0
        assert result.mark is Mark.X
        # ...and the AI has already answered in the center
        assert session.board[4] is Mark.O
        state = session.current_state()
        assert state.move_count == 2
        assert state.turn is Mark.X

    def test_ai_moves_first_when_it_starts(self, make_ai_session):
        session = make_ai_session(Difficulty.HARD, starting_mark=Mark.O)
        assert session.board[0] is Mark.O
        assert session.move_count == 1
        assert session.current_state().turn is Mark.X

    def test_ai_move_waits_for_scheduler(self, make_ai_session, manual_scheduler):
        session = make_ai_session(Difficulty.HARD, scheduler=manual_scheduler)
        session.apply_move(0)
        assert len(manual_scheduler.pending) == 1
        delay, _ = manual_scheduler.pending[0]
        assert delay == GameConfig.AI_MOVE_DELAY

        manual_scheduler.run_pending()
        assert session.board[4] is Mark.O
        assert session.current_state().turn is Mark.X

    def test_stale_ai_move_is_discarded_after_restart(self, make_ai_session, manual_scheduler):
        session = make_ai_session(Difficulty.HARD, scheduler=manual_scheduler)
        session.apply_move(0)
        session.restart()
        manual_scheduler.run_pending()

        assert session.board == Board().snapshot()
        assert session.move_count == 0
        assert session.current_state().turn is Mark.X

    def test_ai_win_is_labelled_ai(self):
        session = GameSession(
            player_one=Player("Alice", Mark.X),
            player_two=Player("Robot", Mark.O, ControlMode.AI, Difficulty.HARD),
            starting_mark=Mark.X,
            strategy_factory=lambda difficulty, rng: ScriptedStrategy([0, 1, 2]),
        )
        play(session, [3, 7, 8])
        state = session.current_state()
        assert state.winner is Mark.O
        assert session.winner_label() == "AI"

    def test_random_games_stay_consistent(self):
        for seed in range(30):
            session = GameSession(
                player_one=Player("A", Mark.X, ControlMode.AI, Difficulty.EASY),
                player_two=Player("B", Mark.O, ControlMode.AI, Difficulty.MEDIUM),
                starting_mark=Mark.X,
                rng=random.Random(seed),
            )
            state = session.current_state()
            board = Board.from_marks(session.board)
            assert state.is_game_over
            assert state.move_count == board.occupied_count()
            x_count = session.board.count(Mark.X)
            o_count = session.board.count(Mark.O)
            assert x_count - o_count in (0, 1)
            if state.status is GameStatus.DRAW:
                assert board.is_full()


# ==================== RESTART & CONFIGURATION ====================

class TestRestart:

    def test_restart_clears_board(self, two_humans):
        play(two_humans, [0, 3, 1, 4, 2])
        two_humans.restart()
        state = two_humans.current_state()
        assert state.status is GameStatus.IN_PROGRESS
        assert state.turn is Mark.X
        assert state.move_count == 0
        assert two_humans.board == Board().snapshot()

    def test_restart_twice_same_as_once(self, two_humans):
        play(two_humans, [0, 4])
        two_humans.restart()
        once = (two_humans.current_state(), two_humans.board)
        two_humans.restart()
        assert (two_humans.current_state(), two_humans.board) == once

    def test_restart_twice_with_ai_starter(self, make_ai_session):
        session = make_ai_session(Difficulty.HARD, starting_mark=Mark.O)
        session.apply_move(8)
        session.restart()
        once = (session.current_state(), session.board)
        session.restart()
        assert (session.current_state(), session.board) == once
        assert session.board[0] is Mark.O

    def test_starter_is_fixed(self):
        session = GameSession(
            player_one=Player("Alice", Mark.X),
            player_two=Player("Bob", Mark.O),
            starting_mark=Mark.O,
        )
        # O wins, yet O still starts the next game
        play(session, [0, 3, 1, 4, 2])
        assert session.current_state().winner is Mark.O
        session.restart()
        assert session.current_state().turn is Mark.O

    def test_configure_ai_first(self, two_humans):
        two_humans.apply_move(4)
        two_humans.configure(Mark.O, True, Difficulty.HARD)

        player_two = two_humans.player(PlayerSlot.TWO)
        assert player_two.is_ai
        assert player_two.difficulty is Difficulty.HARD
        assert two_humans.starting_mark is Mark.O
        # Restarted, and the AI already opened in the corner
        assert two_humans.move_count == 1
        assert two_humans.board[0] is Mark.O

    def test_configure_human_player_two(self, make_ai_session):
        session = make_ai_session(Difficulty.EASY)
        session.configure(Mark.X, False)
        assert not session.player(2).is_ai
        assert session.player(2).difficulty is Difficulty.EASY
        session.apply_move(0)
        session.apply_move(1)
        assert session.board[1] is Mark.O

    def test_configure_rejects_empty_mark(self, two_humans):
        with pytest.raises(ValueError):
            two_humans.configure(Mark.EMPTY, False)


class TestPlayers:

    def test_default_players_from_config(self):
        session = GameSession(rng=random.Random(0))
        one, two = session.players
        assert one.name == "Player 1" and one.mark is Mark.X and not one.is_ai
        assert two.name == "Player 2" and two.mark is Mark.O and two.is_ai
        assert two.difficulty is Difficulty.EASY

    def test_custom_config(self):
        config = GameConfig()
        config.IS_PLAYER_TWO_AI = False
        config.WHO_PLAYS_FIRST = "O"
        config.PLAYER_TWO_NAME = "Carol"
        session = GameSession(config=config)
        assert session.current_player_display_name() == "Carol"
        assert session.move_count == 0

    def test_set_player_name(self, two_humans):
        two_humans.set_player_name(PlayerSlot.ONE, "Zed")
        assert two_humans.current_player_display_name() == "Zed"
        play(two_humans, [0, 3, 1, 4, 2])
        assert two_humans.winner_label() == "Zed"

    def test_status_text(self, make_ai_session, two_humans):
        session = make_ai_session()
        assert session.status_text(PlayerSlot.TWO) == "AI Playing"
        assert session.status_text(PlayerSlot.ONE) == "Player 1"
        assert two_humans.status_text(2) == "Player 2"

    def test_players_must_have_x_and_o(self):
        with pytest.raises(ValueError):
            GameSession(player_one=Player("A", Mark.O), player_two=Player("B", Mark.X))

    def test_starting_mark_must_be_playing_mark(self):
        with pytest.raises(ValueError):
            GameSession(
                player_one=Player("A", Mark.X),
                player_two=Player("B", Mark.O),
                starting_mark=Mark.EMPTY,
            )

    def test_unknown_difficulty_in_config(self):
        config = GameConfig()
        config.AI_DIFFICULTY = "IMPOSSIBLE"
        with pytest.raises(ValueError, match="Unknown AI difficulty: 'IMPOSSIBLE'"):
            GameSession(config=config)


# ==================== NOTIFICATIONS ====================

class TestListeners:

    def test_move_events(self, two_humans, listener):
        two_humans.add_listener(listener)
        two_humans.apply_move(0)
        assert listener.events == [("cell", 0, Mark.X), ("turn", Mark.O)]

    def test_game_end_event(self, two_humans, listener):
        two_humans.add_listener(listener)
        play(two_humans, [0, 3, 1, 4, 2])
        assert listener.events[-2:] == [
            ("cell", 2, Mark.X),
            ("end", GameStatus.WON, "Alice"),
        ]

    def test_draw_event(self, two_humans, listener):
        two_humans.add_listener(listener)
        play(two_humans, [0, 1, 2, 4, 3, 5, 7, 6, 8])
        assert listener.events[-1] == ("end", GameStatus.DRAW, "DRAW")

    def test_restart_event(self, two_humans, listener):
        two_humans.add_listener(listener)
        two_humans.restart()
        assert listener.events == [("restart", Mark.X)]

    def test_ai_events(self, make_ai_session, listener):
        session = make_ai_session(Difficulty.HARD, listeners=[listener])
        session.apply_move(0)
        assert listener.events == [
            ("cell", 0, Mark.X),
            ("turn", Mark.O),
            ("cell", 4, Mark.O),
            ("turn", Mark.X),
        ]

    def test_remove_listener(self, two_humans, listener):
        two_humans.add_listener(listener)
        two_humans.remove_listener(listener)
        two_humans.apply_move(0)
        assert listener.events == []


class FailingListener:
    """Raises when a mark lands in one particular cell."""

    def __init__(self, cell):
        self.cell = cell

    def on_cell_updated(self, index, mark):
        if index == self.cell:
            raise RuntimeError("display broke")

    def on_turn_changed(self, mark):
        pass

    def on_game_ended(self, state, winner_label):
        pass

    def on_restart(self, state):
        pass


class TestListenerFailures:

    def test_winning_move_is_recorded_before_listeners(self, two_humans):
        two_humans.add_listener(FailingListener(cell=2))
        play(two_humans, [0, 3, 1, 4])
        with pytest.raises(RuntimeError):
            two_humans.apply_move(2)

        state = two_humans.current_state()
        assert state.status is GameStatus.WON
        assert state.winner is Mark.X
        assert state.move_count == 5
        with pytest.raises(InvalidMoveError, match="already over"):
            two_humans.apply_move(8)

    def test_turn_passes_before_listeners(self, two_humans):
        two_humans.add_listener(FailingListener(cell=0))
        with pytest.raises(RuntimeError):
            two_humans.apply_move(0)

        assert two_humans.current_state().turn is Mark.O
        assert two_humans.board[0] is Mark.X
        two_humans.apply_move(4)
        assert two_humans.board[4] is Mark.O

    def test_listeners_see_final_state(self, two_humans):
        seen = []

        class StateRecorder(FailingListener):
            def on_cell_updated(self, index, mark):
                seen.append(two_humans.current_state())

        two_humans.add_listener(StateRecorder(cell=None))
        play(two_humans, [0, 3, 1, 4, 2])
        assert seen[0].turn is Mark.O
        assert seen[-1].status is GameStatus.WON
        assert seen[-1].winner is Mark.X
