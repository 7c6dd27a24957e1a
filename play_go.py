#!/usr/bin/env python3
"""
Play Go in the terminal against the classic AI, or run AI-vs-AI games.

Examples:
    python play_go.py --board-size 9 --difficulty medium
    python play_go.py --board-size 9 --self-play 20 --black-difficulty hard
"""

import argparse
import random
import sys
from typing import Optional

from tqdm import tqdm

from classic_go_ai import ClassicGoAI
from go_board import BLACK, WHITE, EMPTY, Coordinate, color_name
from go_config import BOARD_SIZES, Difficulty, GameConfig
from go_errors import GoError
from go_game import GoGame

COLUMN_LABELS = "ABCDEFGHJKLMNOPQRST"  # no 'I', as on a real board


def format_coord(coord: Coordinate, size: int) -> str:
    x, y = coord
    return f"{COLUMN_LABELS[x]}{size - y}"


def parse_coord(text: str, size: int) -> Optional[Coordinate]:
    """'D4' -> (3, size - 4); None if the text is not a point on the board"""
    text = text.strip().upper()
    if len(text) < 2 or text[0] not in COLUMN_LABELS[:size] or not text[1:].isdigit():
        return None
    row = int(text[1:])
    if not 1 <= row <= size:
        return None
    return COLUMN_LABELS.index(text[0]), size - row


def render(game: GoGame) -> str:
    symbols = {EMPTY: '.', BLACK: 'X', WHITE: 'O'}
    size = game.size
    lines = ['   ' + ' '.join(COLUMN_LABELS[:size])]
    for y in range(size):
        cells = ' '.join(symbols[int(v)] for v in game.board[y])
        lines.append(f"{size - y:2d} {cells}")
    lines.append(f"Captures - black: {game.captures[BLACK]}, white: {game.captures[WHITE]}")
    return '\n'.join(lines)


def print_result(game: GoGame) -> None:
    if game.result is None:
        print(f"Game over. Winner: {color_name(game.winner) if game.winner else 'draw'}")
        return
    r = game.result
    print(f"Black: {r.black_territory} territory + {r.black_captures} captures = {r.black_total}")
    print(f"White: {r.white_territory} territory + {r.white_captures} captures = {r.white_total}")
    print(f"Winner: {color_name(r.winner) if r.winner else 'draw'}")


def play_interactive(config: GameConfig) -> None:
    game = GoGame(config)
    ai = game.make_ai()
    print(f"You play {color_name(config.human_color)} on {config.board_size}x{config.board_size} "
          f"against the {config.difficulty.value} AI.")
    print("Enter a point like D4, 'pass' or 'resign'.\n")

    while not game.game_over:
        if game.current_player == ai.color:
            record = game.ai_turn(ai)
            if record.is_pass:
                print("AI passes")
            else:
                print(f"AI plays {format_coord(record.coordinate, game.size)}"
                      + (f", capturing {record.captures}" if record.captures else ""))
            continue

        print(render(game))
        try:
            text = input(f"{color_name(game.current_player)}> ").strip().lower()
        except EOFError:
            print()
            return

        if text == 'pass':
            game.pass_turn()
        elif text == 'resign':
            game.resign(game.current_player)
        else:
            coord = parse_coord(text, game.size)
            if coord is None or game.play(coord) is None:
                print("Illegal move, try again")

    print(render(game))
    print_result(game)


def self_play(args) -> None:
    """Run AI-vs-AI games and print a summary"""
    rng = random.Random(args.seed)
    wins = {BLACK: 0, WHITE: 0, None: 0}
    total_moves = 0
    max_plies = args.board_size * args.board_size * 2

    for _ in tqdm(range(args.self_play), desc="Self-play games"):
        config = GameConfig(board_size=args.board_size, difficulty=args.difficulty)
        game = GoGame(config)
        players = {
            BLACK: ClassicGoAI(args.board_size, args.black_difficulty or args.difficulty,
                               color=BLACK, rng=random.Random(rng.getrandbits(32))),
            WHITE: ClassicGoAI(args.board_size, args.difficulty,
                               color=WHITE, rng=random.Random(rng.getrandbits(32))),
        }

        while not game.game_over and len(game.moves) < max_plies:
            game.ai_turn(players[game.current_player])
        if not game.game_over:
            game.end_game()

        wins[game.winner] += 1
        total_moves += len(game.moves)

    games = max(1, args.self_play)
    print(f"\nResults after {args.self_play} games:")
    print(f"  Black wins: {wins[BLACK]} ({wins[BLACK] / games:.1%})")
    print(f"  White wins: {wins[WHITE]} ({wins[WHITE] / games:.1%})")
    print(f"  Draws:      {wins[None]}")
    print(f"  Average game length: {total_moves / games:.1f} moves")


def main(argv=None):
    difficulties = [d.value for d in Difficulty]
    parser = argparse.ArgumentParser(description='Play Go against a heuristic AI.')
    parser.add_argument('--board-size', type=int, default=9, choices=BOARD_SIZES,
                        help='Size of the Go board (9, 13 or 19).')
    parser.add_argument('--difficulty', type=str, default='medium', choices=difficulties,
                        help='AI difficulty (the white AI in self-play).')
    parser.add_argument('--black-difficulty', type=str, default=None, choices=difficulties,
                        help='Difficulty of the black AI in self-play (defaults to --difficulty).')
    parser.add_argument('--seed', type=int, default=None, help='Random seed for reproducible games.')
    parser.add_argument('--self-play', type=int, default=0, metavar='N',
                        help='Play N AI-vs-AI games instead of an interactive game.')
    args = parser.parse_args(argv)

    try:
        if args.self_play > 0:
            self_play(args)
        else:
            play_interactive(GameConfig.from_args(args))
    except GoError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nGame interrupted by user")
        sys.exit(0)


if __name__ == "__main__":
    main()
