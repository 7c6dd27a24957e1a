"""
Game configuration: board sizes, AI difficulty tiers and session settings.
Everything is validated here so the engine never sees malformed settings.
"""
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, Optional

from go_board import BLACK, WHITE, parse_color, color_name
from go_errors import ConfigurationError

BOARD_SIZES = (9, 13, 19)

DEFAULT_BOARD_SIZE = 19
DEFAULT_THINKING_DELAY = 1.0  # seconds the AI "thinks" before answering
DEFAULT_THINKING_TIMEOUT = 10.0  # AI forfeits after this many seconds


class Difficulty(str, Enum):
    VERY_EASY = 'very-easy'
    EASY = 'easy'
    MEDIUM = 'medium'
    HARD = 'hard'
    VERY_HARD = 'very-hard'

    @classmethod
    def parse(cls, value) -> 'Difficulty':
        """Accept an enum member or its name ('very-hard', 'very_hard')"""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalized = value.strip().lower().replace('_', '-')
            for member in cls:
                if member.value == normalized:
                    return member
        raise ConfigurationError(
            f"Unknown difficulty: {value!r}",
            context={'allowed': [d.value for d in cls]},
        )


def validate_board_size(size) -> int:
    """Return size as int if it is one of 9, 13, 19"""
    try:
        size_int = int(size)
    except (TypeError, ValueError):
        raise ConfigurationError(f"Board size must be an integer, got {size!r}") from None
    if size_int != size or size_int not in BOARD_SIZES:
        raise ConfigurationError(
            "Board size must be 9, 13, or 19",
            context={'board_size': size},
        )
    return size_int


@dataclass
class GameConfig:
    """Settings for one game against the AI"""
    board_size: int = DEFAULT_BOARD_SIZE
    difficulty: Difficulty = Difficulty.EASY
    ai_color: int = WHITE
    thinking_delay: float = DEFAULT_THINKING_DELAY
    thinking_timeout: float = DEFAULT_THINKING_TIMEOUT
    seed: Optional[int] = None

    def __post_init__(self):
        self.board_size = validate_board_size(self.board_size)
        self.difficulty = Difficulty.parse(self.difficulty)
        try:
            self.ai_color = parse_color(self.ai_color)
        except ValueError as e:
            raise ConfigurationError(str(e)) from None
        if self.thinking_delay < 0:
            raise ConfigurationError("thinking_delay must be >= 0")
        if self.thinking_timeout <= 0:
            raise ConfigurationError("thinking_timeout must be > 0")

    @property
    def human_color(self) -> int:
        return BLACK if self.ai_color == WHITE else WHITE

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GameConfig':
        """Build from a JSON payload; accepts snake_case or camelCase keys"""
        aliases = {
            'boardSize': 'board_size',
            'aiColor': 'ai_color',
            'thinkingDelay': 'thinking_delay',
            'thinkingTimeout': 'thinking_timeout',
        }
        kwargs = {}
        for key, value in (data or {}).items():
            name = aliases.get(key, key)
            if name not in cls.__dataclass_fields__:
                raise ConfigurationError(f"Unknown configuration key: {key!r}")
            kwargs[name] = value
        return cls(**kwargs)

    @classmethod
    def from_args(cls, args) -> 'GameConfig':
        """Build from an argparse namespace"""
        return cls(
            board_size=args.board_size,
            difficulty=args.difficulty,
            seed=getattr(args, 'seed', None),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['difficulty'] = self.difficulty.value
        data['ai_color'] = color_name(self.ai_color)
        return data
