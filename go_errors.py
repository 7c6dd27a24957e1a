"""
Exception hierarchy for the Go engine.

Illegal moves and positions without a legal move are ordinary return values
(False / None). Exceptions are reserved for contract violations: bad
configuration, applying an unvalidated move, or acting on a finished game.

Usage:
    from go_errors import ConfigurationError

    try:
        config = GameConfig.from_dict(payload)
    except ConfigurationError as e:
        await sio.emit('error', e.to_dict(), room=sid)
"""

from typing import Any, Dict, Optional

__all__ = [
    "GoError",
    "ConfigurationError",
    "MovePreconditionError",
    "GameStateError",
]


class GoError(Exception):
    """Base exception for all engine errors.

    Attributes:
        code: Machine-readable error code
        message: Human-readable description
        context: Extra details for debugging and client payloads
    """
    code: str = "GO_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"[{self.code}] {self.message} ({ctx})"
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context,
        }


class ConfigurationError(GoError, ValueError):
    """Board size, difficulty or another setting outside its allowed values."""
    code: str = "CONFIGURATION_ERROR"


class MovePreconditionError(GoError):
    """A move was applied without being legal on the given board.

    Raised by apply_move when the target is off the board, occupied or
    suicidal. Callers are expected to validate with is_legal_move first.
    """
    code: str = "MOVE_PRECONDITION"


class GameStateError(GoError):
    """Action not possible in the current game state (e.g. game over),
    or a saved game whose history does not replay consistently."""
    code: str = "GAME_STATE"
