"""
Playroom CLI - Command-line interface for the engine.

Usage:
    playroom serve [--host H] [--port P]   Run the HTTP/WebSocket server
    playroom variants                      List hosted variants
    playroom digits <secret> <guess>       Score a digit-duel guess
    playroom colors <target> <guess>       Color a word-feedback guess
"""

import argparse
import logging
import sys

from .config import Config


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Playroom - Authoritative engine for word and number games",
        prog="playroom",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    serve_parser = subparsers.add_parser("serve", help="Run the API server")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Bind port")

    subparsers.add_parser("variants", help="List hosted variants")

    digits_parser = subparsers.add_parser("digits", help="Score a digit-duel guess")
    digits_parser.add_argument("secret", help="Secret code")
    digits_parser.add_argument("guess", help="Guessed code")

    colors_parser = subparsers.add_parser("colors", help="Color a word-feedback guess")
    colors_parser.add_argument("target", help="Target word")
    colors_parser.add_argument("guess", help="Guessed word")

    args = parser.parse_args(argv)
    config = Config.from_env()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.command == "serve":
        cmd_serve(args, config)
    elif args.command == "variants":
        cmd_variants(args)
    elif args.command == "digits":
        cmd_digits(args)
    elif args.command == "colors":
        cmd_colors(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_serve(args, config):
    """Run the API under uvicorn."""
    import uvicorn
    from .api import create_app

    uvicorn.run(create_app(config=config), host=args.host, port=args.port)


def cmd_variants(args):
    from .games import GAME_TYPES, SOURCED_VARIANTS

    for variant, cls in GAME_TYPES.items():
        players = f"{cls.min_players}+" if cls.max_players is None else f"{cls.min_players}-{cls.max_players}"
        source = " (word source)" if variant in SOURCED_VARIANTS else ""
        print(f"{variant.value:<14} players {players}{source}")


def cmd_digits(args):
    """Score a guess against a secret code."""
    from .games.digit_duel.rules import is_valid_code, score_guess

    if not (is_valid_code(args.secret, len(args.secret)) and is_valid_code(args.guess, len(args.secret))):
        print("Error: secret and guess must be digit strings of the same length")
        sys.exit(1)
    score = score_guess(args.secret, args.guess)
    print(f"correct digits: {score.correct_digits}")
    print(f"correct place:  {score.correct_place}")


def cmd_colors(args):
    """Color a guess against a target word."""
    from .games.word_feedback.rules import color_guess

    try:
        letters = color_guess(args.target, args.guess)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)
    for result in letters:
        print(f"{result.letter} {result.color.value}")


if __name__ == "__main__":
    main()
