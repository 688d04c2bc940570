"""
Game session for the TicTacToe engine.
Tracks the board, the players, whose turn it is, and the result.
"""

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Union

from .ai_player import AIStrategy, Difficulty, create_strategy
from .board import Board, Mark
from .config import GameConfig
from .errors import InvalidMoveError
from .move_generator import MoveGenerator
from .scheduler import ImmediateScheduler, Scheduler
from .win_detector import WinDetector


logger = logging.getLogger(__name__)


class ControlMode(Enum):
    """Who decides a player's moves."""
    HUMAN = "human"
    AI = "ai"


class PlayerSlot(Enum):
    """Seat at the table. Player 1 plays X, player 2 plays O."""
    ONE = 1
    TWO = 2


class GameStatus(Enum):
    IN_PROGRESS = "in_progress"
    WON = "won"
    DRAW = "draw"


@dataclass
class Player:
    """
    A participant in the game.

    The name can be edited at any time; the mark is fixed for the session.
    """
    name: str
    mark: Mark
    control: ControlMode = ControlMode.HUMAN
    difficulty: Difficulty = Difficulty.EASY  # Only used when control is AI

    @property
    def is_ai(self) -> bool:
        return self.control is ControlMode.AI


@dataclass(frozen=True)
class SessionState:
    """Snapshot of the session for the presentation layer."""
    turn: Mark                  # Mark to move next (last mover once the game is over)
    status: GameStatus
    winner: Optional[Mark]
    move_count: int

    @property
    def is_game_over(self) -> bool:
        return self.status is not GameStatus.IN_PROGRESS


@dataclass(frozen=True)
class MoveResult:
    """
    A move that was applied.
    """
    index: int              # Cell the mark went into
    mark: Mark              # Mark that was placed
    status: GameStatus      # Game status right after this move
    move_number: int        # 1 for the first move of the game

    @property
    def produced_win(self) -> bool:
        return self.status is GameStatus.WON

    @property
    def produced_draw(self) -> bool:
        return self.status is GameStatus.DRAW


class GameListener:
    """
    Receives session events. Override the methods you need.
    """

    def on_cell_updated(self, index: int, mark: Mark):
        pass

    def on_turn_changed(self, mark: Mark):
        pass

    def on_game_ended(self, state: SessionState, winner_label: str):
        pass

    def on_restart(self, state: SessionState):
        pass


StrategyFactory = Callable[[Difficulty, Optional[random.Random]], AIStrategy]


class GameSession:
    """
    Orchestrates a TicTacToe game.

    Game flow:
    1. The presentation layer calls apply_move() for a human's move
    2. The move is validated and placed
    3. A completed line ends the game as a win, a full board as a draw
    4. Otherwise the turn passes; if the next player is the AI, its move
       is handed to the scheduler and applied the same way
    """

    def __init__(
        self,
        player_one: Optional[Player] = None,
        player_two: Optional[Player] = None,
        starting_mark: Optional[Mark] = None,
        config: Optional[GameConfig] = None,
        scheduler: Optional[Scheduler] = None,
        rng: Optional[random.Random] = None,
        strategy_factory: StrategyFactory = create_strategy,
        listeners: Iterable[GameListener] = (),
    ):
        """
        Initialize the game session.

        Args:
            player_one: The X player (default: human named from config).
            player_two: The O player (default: from config, AI unless disabled).
            starting_mark: Mark that moves first in every game.
            config: Game settings.
            scheduler: Runs AI moves (default: immediately, on this thread).
            rng: Random source handed to the AI strategies.
            strategy_factory: Builds the AI strategy for a difficulty.
            listeners: Receive events from the very first move on.
        """
        self.config = config or GameConfig()

        if player_one is None:
            player_one = Player(self.config.PLAYER_ONE_NAME, Mark.X)
        if player_two is None:
            try:
                difficulty = Difficulty[self.config.AI_DIFFICULTY.upper()]
            except KeyError:
                raise ValueError(
                    f"Unknown AI difficulty: {self.config.AI_DIFFICULTY!r}"
                ) from None
            player_two = Player(
                self.config.PLAYER_TWO_NAME,
                Mark.O,
                ControlMode.AI if self.config.IS_PLAYER_TWO_AI else ControlMode.HUMAN,
                difficulty,
            )
        if player_one.mark is not Mark.X or player_two.mark is not Mark.O:
            raise ValueError("Player 1 must play X and player 2 must play O")

        if starting_mark is None:
            starting_mark = Mark.from_symbol(self.config.WHO_PLAYS_FIRST)
        self._check_playing_mark(starting_mark)

        self._players: Dict[PlayerSlot, Player] = {
            PlayerSlot.ONE: player_one,
            PlayerSlot.TWO: player_two,
        }
        self.starting_mark = starting_mark
        self.scheduler = scheduler or ImmediateScheduler()
        self.ai_move_delay = self.config.AI_MOVE_DELAY
        self.rng = rng or random.Random()

        self.move_generator = MoveGenerator()
        self.win_detector = WinDetector()
        self._strategy_factory = strategy_factory
        self._strategies: Dict[Difficulty, AIStrategy] = {}
        self._listeners: List[GameListener] = list(listeners)

        self._board = Board()
        self._turn = starting_mark
        self._move_count = 0
        self._status = GameStatus.IN_PROGRESS
        self._winner: Optional[Mark] = None

        # Bumped on every restart so stale AI callbacks can be ignored
        self._generation = 0

        self._schedule_ai_turn()

    # ==================== QUERIES ====================

    @property
    def board(self) -> Tuple[Mark, ...]:
        """Read-only snapshot of the nine cells."""
        return self._board.snapshot()

    @property
    def move_count(self) -> int:
        return self._move_count

    @property
    def is_game_over(self) -> bool:
        return self._status is not GameStatus.IN_PROGRESS

    @property
    def players(self) -> Tuple[Player, Player]:
        return self._players[PlayerSlot.ONE], self._players[PlayerSlot.TWO]

    @property
    def current_player(self) -> Player:
        return self.player_for(self._turn)

    def player(self, slot: Union[PlayerSlot, int]) -> Player:
        return self._players[PlayerSlot(slot)]

    def player_for(self, mark: Mark) -> Player:
        """Get the player who plays `mark`."""
        for player in self._players.values():
            if player.mark is mark:
                return player
        raise ValueError(f"No player plays {mark!r}")

    def current_state(self) -> SessionState:
        return SessionState(
            turn=self._turn,
            status=self._status,
            winner=self._winner,
            move_count=self._move_count,
        )

    def current_player_display_name(self) -> str:
        return self.current_player.name

    def status_text(self, slot: Union[PlayerSlot, int]) -> str:
        """Label shown next to a player: the AI tag or the seat name."""
        slot = PlayerSlot(slot)
        if self._players[slot].is_ai:
            return self.config.AI_STATUS_TEXT
        return self.config.HUMAN_STATUS_TEXT.format(slot=slot.value)

    def winner_label(self) -> Optional[str]:
        """
        Get the text announcing the result.

        Returns:
            "DRAW" for a draw, the fixed AI label when the AI won, the winning
            player's name otherwise, or None while the game is running.
        """
        if self._status is GameStatus.DRAW:
            return self.config.DRAW_LABEL
        if self._status is GameStatus.WON:
            winner = self.player_for(self._winner)
            return self.config.AI_WINNER_LABEL if winner.is_ai else winner.name
        return None

    # ==================== COMMANDS ====================

    def apply_move(self, index: int) -> MoveResult:
        """
        Play a human move for the current player.

        Args:
            index: Cell number (0-8).

        Returns:
            The applied move. AI replies (if any) have already been handed to
            the scheduler when this returns.

        Raises:
            InvalidMoveError: If the game is over, the cell is out of range or
                taken, or the AI is the one to move.
        """
        result = self.move_generator.validate_move(self._board, index, self.is_game_over)
        if not result.is_valid:
            raise InvalidMoveError(result.error_message)

        player = self.current_player
        if player.is_ai:
            raise InvalidMoveError(f"It's {player.name}'s turn (AI is thinking)")

        return self._apply(index)

    def restart(self):
        """
        Start a new game with the same players.

        The board is cleared and the configured starting mark moves first.
        """
        self._generation += 1
        self._board.clear()
        self._turn = self.starting_mark
        self._move_count = 0
        self._status = GameStatus.IN_PROGRESS
        self._winner = None

        logger.info("Game restarted, %s plays first", self.starting_mark.value)
        self._notify("on_restart", self.current_state())
        self._schedule_ai_turn()

    def set_player_name(self, slot: Union[PlayerSlot, int], name: str):
        self._players[PlayerSlot(slot)].name = name

    def configure(
        self,
        starting_mark: Mark,
        is_player_two_ai: bool,
        ai_difficulty: Optional[Difficulty] = None
    ):
        """
        Change who starts and who controls player 2, then restart.

        Args:
            starting_mark: Mark that moves first from now on.
            is_player_two_ai: Whether the computer plays O.
            ai_difficulty: New AI level (keeps the current one if None).
        """
        self._check_playing_mark(starting_mark)

        player_two = self._players[PlayerSlot.TWO]
        player_two.control = ControlMode.AI if is_player_two_ai else ControlMode.HUMAN
        if ai_difficulty is not None:
            player_two.difficulty = ai_difficulty
        self.starting_mark = starting_mark

        logger.info(
            "Configured: %s starts, player 2 is %s (%s)",
            starting_mark.value, player_two.control.value, player_two.difficulty.name
        )
        self.restart()

    def add_listener(self, listener: GameListener):
        self._listeners.append(listener)

    def remove_listener(self, listener: GameListener):
        self._listeners.remove(listener)

    # ==================== INTERNALS ====================

    def _apply(self, index: int) -> MoveResult:
        result = self.move_generator.validate_move(self._board, index, self.is_game_over)
        if not result.is_valid:
            raise InvalidMoveError(result.error_message)

        mark = self._turn
        self._board.set(index, mark)
        self._move_count += 1
        logger.debug("Move %d: %s -> cell %d", self._move_count, mark.value, index)

        # Only the mover can have completed a line
        if self.win_detector.has_win(self._board, mark):
            self._status = GameStatus.WON
            self._winner = mark
        elif self._board.is_full():
            self._status = GameStatus.DRAW
        else:
            self._turn = mark.opponent()

        move = MoveResult(
            index=index,
            mark=mark,
            status=self._status,
            move_number=self._move_count,
        )

        # Listeners only run once the session state is final
        self._notify("on_cell_updated", index, mark)

        if self.is_game_over:
            label = self.winner_label()
            logger.info("Game over after %d moves: %s", self._move_count, label)
            self._notify("on_game_ended", self.current_state(), label)
            return move

        self._notify("on_turn_changed", self._turn)
        self._schedule_ai_turn()
        return move

    def _schedule_ai_turn(self):
        if self.is_game_over or not self.current_player.is_ai:
            return
        generation = self._generation
        self.scheduler.enqueue(self.ai_move_delay, lambda: self._play_ai_turn(generation))

    def _play_ai_turn(self, generation: int):
        # The game may have been restarted or reconfigured while waiting
        if generation != self._generation or self.is_game_over or not self.current_player.is_ai:
            logger.debug("Discarding stale AI move")
            return

        player = self.current_player
        strategy = self._strategy_for(player.difficulty)
        # Strategies think on a copy of the board
        index = strategy.choose_move(self._board.copy(), player.mark, player.mark.opponent())
        logger.debug("%s (%s) chose cell %d", player.name, player.difficulty.name, index)
        self._apply(index)

    def _strategy_for(self, difficulty: Difficulty) -> AIStrategy:
        if difficulty not in self._strategies:
            self._strategies[difficulty] = self._strategy_factory(difficulty, self.rng)
        return self._strategies[difficulty]

    def _notify(self, event: str, *args):
        for listener in list(self._listeners):
            getattr(listener, event)(*args)

    @staticmethod
    def _check_playing_mark(mark: Mark):
        if mark not in (Mark.X, Mark.O):
            raise ValueError(f"Starting mark must be X or O, got {mark!r}")
