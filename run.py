"""WFC Dungeon CLI entry point.

Provides subcommands for generating a map in the terminal and for running
the JSON API server. Accepts configuration via flags and environment
variables, with optional .env loading.

Run `python run.py --help` for details.
"""

import argparse
import json
import os
import random
import sys
from pathlib import Path
from textwrap import dedent

from colorama import Fore, Style, just_fix_windows_console
from dotenv import load_dotenv

just_fix_windows_console()

PLAYER_MARK = "@"
ENEMY_MARK = "E"

# Spawn selection gets its own stream so it never perturbs map generation
_SPAWN_SEED_SALT = 0xE7717


def _load_version() -> str:
    path = Path(__file__).resolve().parent / "VERSION"
    try:
        return path.read_text(encoding="utf-8").strip()
    except OSError:
        return "0.0.0"


__version__ = _load_version()


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    WFC Dungeon Map Generator

    Generate a connected dungeon map with the wave-function-collapse solver
    and print it, or run the JSON API server. Configuration can be provided
    via CLI flags or environment variables. If both are present, CLI flags
    take precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          HOST                                Bind address for the web server (default: 0.0.0.0)
          PORT                                Port for the web server (default: 5000)
          DUNGEON_ENABLE_GENERATION_METRICS   Collect per-phase metrics (default: 1)
          DUNGEON_VERIFY_CONNECTIVITY         Re-check connectivity after pruning (default: 0)
          WFC_DUNGEON_LOG_LEVEL               debug|info|warn|error for generator events

        Examples:
          # Print a 40x25 map with a random seed
          python run.py

          # Reproducible 60x30 map, doubled in size, with 4 enemies
          python run.py generate --width 60 --height 30 --seed 42 --scale 2 --enemies 4

          # Machine readable output
          python run.py generate --seed 7 --json

          # Run the API server on a custom port
          python run.py server --port 8080
        """
    )

    parser = argparse.ArgumentParser(
        prog="wfc-dungeon",
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
        "--version",
        action="version",
        version=f"WFC Dungeon {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    # generate subcommand
    gen_parser = subparsers.add_parser(
        "generate",
        help="Generate a map and print it",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Generate one map, place the player and enemies, and print it",
    )
    gen_parser.add_argument("--width", type=int, default=40, help="Map width in tiles (default: 40)")
    gen_parser.add_argument("--height", type=int, default=25, help="Map height in tiles (default: 25)")
    gen_parser.add_argument("--seed", type=int, default=None, help="Random seed (default: random)")
    gen_parser.add_argument("--scale", type=int, default=1, help="Upscale factor applied after generation")
    gen_parser.add_argument("--enemies", type=int, default=3, help="Number of enemies to place (default: 3)")
    gen_parser.add_argument(
        "--min-distance",
        dest="min_distance",
        type=int,
        default=5,
        help="Preferred Manhattan distance between player and enemies (default: 5)",
    )
    gen_parser.add_argument("--json", action="store_true", help="Print a JSON document instead of the map")
    gen_parser.add_argument("--no-color", dest="no_color", action="store_true", help="Disable colored output")
    gen_parser.add_argument("--verbose", action="store_true", help="Print generator log events")
    gen_parser.set_defaults(command="generate")

    # server subcommand
    server_parser = subparsers.add_parser(
        "server",
        help="Run the JSON API server",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Run the Flask dungeon map API",
    )
    server_parser.add_argument(
        "--host",
        default=None,
        help="Host interface to bind (default: env HOST or 0.0.0.0)",
    )
    server_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to listen on (default: env PORT or 5000)",
    )
    server_parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable Flask debug mode with verbose error pages",
    )
    server_parser.set_defaults(command="server")

    # If no subcommand provided, default to generate
    if len(argv) == 0:
        argv = ["generate"]

    return parser.parse_args(argv)


_TILE_COLORS = {
    "#": Style.DIM + Fore.WHITE,
    ".": Fore.WHITE,
    "+": Fore.YELLOW,
    PLAYER_MARK: Style.BRIGHT + Fore.GREEN,
    ENEMY_MARK: Style.BRIGHT + Fore.RED,
}


def render(text: str, player=None, enemies=(), color: bool = False) -> str:
    """Overlay spawn markers on the map and optionally colorize each tile."""
    rows = [list(line) for line in text.split("\n")]
    for r, c in enemies:
        rows[r][c] = ENEMY_MARK
    if player is not None:
        rows[player[0]][player[1]] = PLAYER_MARK
    if not color:
        return "\n".join("".join(line) for line in rows)
    out = []
    for line in rows:
        out.append("".join(f"{_TILE_COLORS.get(ch, '')}{ch}{Style.RESET_ALL}" for ch in line))
    return "\n".join(out)


def run_generate(args) -> int:
    from wfc_dungeon.dungeon import MapGenerator, MapGenerationError, choose_positions, upscale
    from wfc_dungeon.logging_utils import set_level

    if not args.verbose:
        set_level("warn")
    try:
        gen = MapGenerator(width=args.width, height=args.height, seed=args.seed)
        text = gen.generate()
        text = upscale(text, args.scale)
        spawn = choose_positions(
            text,
            args.enemies,
            args.min_distance,
            rng=random.Random(gen.seed ^ _SPAWN_SEED_SALT),
        )
    except MapGenerationError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 2

    if args.json:
        doc = {
            "seed": gen.seed,
            "width": args.width,
            "height": args.height,
            "scale": args.scale,
            "grid": text,
        }
        doc.update(spawn.to_dict())
        doc["metrics"] = gen.metrics
        print(json.dumps(doc, indent=2))
        return 0

    color = not args.no_color and sys.stdout.isatty()
    print(render(text, spawn.player, spawn.enemies, color=color))
    print(f"seed={gen.seed} size={args.width}x{args.height} scale={args.scale} enemies={len(spawn.enemies)}")
    return 0


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        # Load default .env if present (no error if missing)
        load_dotenv()

    mode = (getattr(args, "command", None) or "generate").lower()
    if mode == "generate":
        return run_generate(args)

    host = getattr(args, "host", None) or os.getenv("HOST", "0.0.0.0")
    port = int(getattr(args, "port", None) or os.getenv("PORT", "5000"))
    debug = bool(getattr(args, "debug", False) or os.getenv("FLASK_DEBUG") == "1")

    # Import server entrypoint only after environment is ready
    from wfc_dungeon.logging_utils import log
    from wfc_dungeon.server import start_server

    divider = Fore.MAGENTA + "=" * 40 + Style.RESET_ALL
    lines = [
        divider,
        f"  {Fore.CYAN}{Style.BRIGHT}WFC Dungeon API{Style.RESET_ALL}",
        divider,
        f"  {Fore.YELLOW}Host:{Style.RESET_ALL}    {Fore.GREEN}{host}{Style.RESET_ALL}",
        f"  {Fore.YELLOW}Port:{Style.RESET_ALL}    {Fore.GREEN}{port}{Style.RESET_ALL}",
        f"  {Fore.YELLOW}Version:{Style.RESET_ALL} {Fore.GREEN}{__version__}{Style.RESET_ALL}",
        divider,
        "",
    ]
    print("\n".join(lines))
    log.info(event="listen", host=host, port=port, debug=debug)
    start_server(host=host, port=port, debug=debug)
    return 0


def _console_main() -> int:
    return main(sys.argv[1:])


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
