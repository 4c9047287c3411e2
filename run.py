"""Delve CLI entry point.

Provides subcommands for running the dungeon HTTP API and for generating a
dungeon straight to a JSON file. Accepts configuration via flags and
environment variables, with optional .env loading.

Run `python run.py --help` for details.
"""

import argparse
import os
import signal
import sys
from textwrap import dedent

from colorama import Fore, Style
from colorama import init as _color_init
from dotenv import load_dotenv

__version__ = "0.1.0"


def _color_enabled() -> bool:
    # Disable colors if output is not a real terminal (e.g., during pytest capture)
    return sys.stdout.isatty()


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    Delve dungeon generator

    Run the dungeon HTTP API or generate a single dungeon to a JSON file.
    Configuration can be provided via CLI flags or environment variables. If
    both are present, CLI flags take precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          HOST             Bind address for the web server (default: 0.0.0.0)
          PORT             Port for the web server (default: 5000)
          DATABASE_URL     SQLAlchemy database URI (default: sqlite:///instance/delve.db)
          DUNGEON_*        Generation overrides (DUNGEON_WIDTH, DUNGEON_SEED, ...)
          DELVE_LOG_LEVEL  debug | info | warn | error

        Examples:
          # Run the server on the default host and port
          python run.py server

          # Load variables from .env then run the server
          python run.py --env-file .env server

          # Generate a seeded 40x40 dungeon and print its map
          python run.py generate --width 40 --height 40 --seed 7 --out instance/d.json --show-map
        """
    )

    parser = argparse.ArgumentParser(
        prog="delve",
        description=dedent(description),
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument(
        "--env-file",
        dest="env_file",
        help="Path to a .env file to load before processing flags",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        choices=["debug", "info", "warn", "error"],
        default=None,
        help="Structured log level (default: env DELVE_LOG_LEVEL or info)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"Delve {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    server_parser = subparsers.add_parser(
        "server",
        help="Run the dungeon HTTP API",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    server_parser.add_argument("--host", default=None, help="Host interface to bind (default: env HOST or 0.0.0.0)")
    server_parser.add_argument("--port", type=int, default=None, help="Port to listen on (default: env PORT or 5000)")
    server_parser.add_argument(
        "--db",
        dest="db_uri",
        default=None,
        help="Database URI (default: env DATABASE_URL or sqlite:///instance/delve.db)",
    )
    server_parser.add_argument("--debug", action="store_true", help="Enable Flask debug mode")
    server_parser.set_defaults(command="server")

    gen_parser = subparsers.add_parser(
        "generate",
        help="Generate one dungeon and write its JSON document",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    gen_parser.add_argument("--width", type=int, default=None)
    gen_parser.add_argument("--height", type=int, default=None)
    gen_parser.add_argument("--theme", default=None)
    gen_parser.add_argument("--min-path-length", dest="min_path_length", type=int, default=None)
    gen_parser.add_argument("--seed", type=int, default=None)
    gen_parser.add_argument("--out", default=None, help="Output path (default: print the document)")
    gen_parser.add_argument("--show-map", action="store_true", help="Print the main path map")
    gen_parser.set_defaults(command="generate")

    return parser.parse_args(argv)


def _generate(args) -> int:
    from delve.dungeon.config import DungeonConfig
    from delve.dungeon.errors import ConfigurationError
    from delve.dungeon.map_view import render_map
    from delve.dungeon.pipeline import generate_dungeon
    from delve.dungeon.serializer import dumps, save

    try:
        config = DungeonConfig.from_env(
            width=args.width,
            height=args.height,
            theme=args.theme,
            min_path_length=args.min_path_length,
            seed=args.seed,
        )
        dungeon = generate_dungeon(config)
    except ConfigurationError as exc:
        print(f"[ERROR] {exc}")
        return 2
    if args.out:
        path = save(dungeon, args.out)
        print(f"Wrote {len(dungeon.grid)} rooms (seed {dungeon.seed}) to {path}")
    else:
        print(dumps(dungeon))
    if args.show_map:
        print("\n".join(render_map(dungeon)))
    return 0


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if getattr(args, "log_level", None):
        from delve.logging_utils import configure

        configure(level=args.log_level)
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        # Load default .env if present (no error if missing)
        load_dotenv()

    mode = (getattr(args, "command", None) or "server").lower()
    if mode == "generate":
        return _generate(args)

    host = getattr(args, "host", None) or os.getenv("HOST", "0.0.0.0")
    port = int(getattr(args, "port", None) or os.getenv("PORT", "5000"))
    db_uri_cli = getattr(args, "db_uri", None)
    # Make DATABASE_URL available to the Flask app BEFORE importing it
    if db_uri_cli:
        os.environ["DATABASE_URL"] = db_uri_cli
    db_banner = db_uri_cli or os.getenv("DATABASE_URL") or "auto (instance/delve.db)"

    def handle_sigint(sig, frame):
        print("\n[INFO] Shutting down server...")
        sys.exit(0)

    signal.signal(signal.SIGINT, handle_sigint)

    from delve.logging_utils import log
    from delve.server import start_server

    colored = _color_enabled()
    if colored:
        _color_init()

    def label(text: str) -> str:
        return f"{Fore.YELLOW}{text}{Style.RESET_ALL}" if colored else text

    def value(val) -> str:
        return f"{Fore.GREEN}{val}{Style.RESET_ALL}" if colored else str(val)

    title = f"{Fore.CYAN}{Style.BRIGHT}Delve Dungeon API{Style.RESET_ALL}" if colored else "Delve Dungeon API"
    divider = (Fore.MAGENTA + "=" * 40 + Style.RESET_ALL) if colored else "=" * 40
    print(
        "\n".join(
            [
                divider,
                f"  {title}",
                divider,
                f"  {label('Host:'):12} {value(host)}",
                f"  {label('Port:'):12} {value(port)}",
                f"  {label('Database:'):12} {value(db_banner)}",
                divider,
                "",
            ]
        )
    )
    log.info(event="startup", mode=mode, host=host, port=port, db=db_banner)
    start_server(host=host, port=port, debug=getattr(args, "debug", False))
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
