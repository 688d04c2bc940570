"""
Game configuration for the TicTacToe engine.
All the default settings for players, turn order, and the AI opponent.
"""


class GameConfig:
    """
    Configuration class for game settings.
    Pass an instance to GameSession; override attributes per instance
    (or use the command line flags of the console driver).
    """

    # ==================== TURN ORDER ====================
    # Mark that moves first in every game (also after a restart)
    WHO_PLAYS_FIRST = "X"

    # ==================== PLAYERS ====================
    PLAYER_ONE_NAME = "Player 1"   # Always plays X
    PLAYER_TWO_NAME = "Player 2"   # Always plays O

    # Player 2 is the computer by default
    IS_PLAYER_TWO_AI = True

    # Status line shown next to each player ({slot} is 1 or 2)
    AI_STATUS_TEXT = "AI Playing"
    HUMAN_STATUS_TEXT = "Player {slot}"

    # ==================== AI SETTINGS ====================
    # One of: EASY (random), MEDIUM (win/block), HARD (minimax)
    AI_DIFFICULTY = "EASY"

    # Seconds to wait before the AI's move becomes visible
    AI_MOVE_DELAY = 0.5

    # ==================== RESULT LABELS ====================
    AI_WINNER_LABEL = "AI"
    DRAW_LABEL = "DRAW"
