#!/usr/bin/env python3
"""
Death Counter - Command Line Interface

Follows one character's death count in the game save and publishes it to a
text file and/or a browser-source overlay.

Usage:
    uv run python cli.py                    # run (setup wizard on first start)
    uv run python cli.py run -v             # run with debug logging
    uv run python cli.py setup              # re-run the setup wizard
    uv run python cli.py list               # show characters in the save
    uv run python cli.py list --save ER0000.sl2
    uv run python cli.py --dir ~/counter run
"""

import argparse
import logging
import os
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from deathcounter.config import CONFIG_FILE_NAME, load_config
from deathcounter.errors import ConfigError, SaveNotFoundError, WebServerError
from deathcounter.log import setup_logging
from deathcounter.save.decoder import parse_save_data
from deathcounter.save.locator import resolve_save_path
from deathcounter.service import DeathCounterService
from deathcounter.wizard import format_profiles, run_setup_wizard

logger = logging.getLogger("deathcounter.cli")


def _config_path(args: argparse.Namespace) -> Path:
    if args.config:
        return Path(args.config)
    return Path(args.dir) / CONFIG_FILE_NAME


# =============================================================================
# COMMANDS
# =============================================================================

def cmd_run(args: argparse.Namespace) -> int:
    """Load the config (running setup if needed) and monitor the save."""
    config_path = _config_path(args)

    try:
        config = load_config(config_path)
    except ConfigError as e:
        logger.info(f"No usable config ({e}), starting setup")
        if not run_setup_wizard(config_path):
            return 1
        try:
            config = load_config(config_path)
        except ConfigError as e:
            print(f"Error loading config: {e}")
            return 1

    service = DeathCounterService(config, base_dir=args.dir)
    try:
        service.run()
    except WebServerError as e:
        logger.error(f"Web server failed: {e}")
        return 1
    except KeyboardInterrupt:
        print("\nStopped.")
    return 0


def cmd_setup(args: argparse.Namespace) -> int:
    """Run the setup wizard and overwrite the config."""
    return 0 if run_setup_wizard(_config_path(args)) else 1


def cmd_list(args: argparse.Namespace) -> int:
    """Print every character found in the save file."""
    if args.save:
        save_path = args.save
    else:
        config = None
        try:
            config = load_config(_config_path(args))
        except ConfigError:
            pass
        try:
            save_path = resolve_save_path(config)
        except SaveNotFoundError as e:
            print(f"Save file not found: {e}")
            return 1

    try:
        data = Path(save_path).read_bytes()
    except OSError as e:
        print(f"Error reading save file: {e}")
        return 1

    profiles = parse_save_data(data)
    print(f"Save file: {save_path}")
    if not profiles:
        print("No active characters found.")
        return 0
    print(format_profiles(profiles))
    return 0


# =============================================================================
# MAIN
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Publish a character's death count from the game save",
    )
    parser.add_argument("--dir", default=".", help="Directory for config.json and death.txt (default: cwd)")
    parser.add_argument("--config", help="Config file path (default: <dir>/config.json)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")

    subparsers = parser.add_subparsers(dest="command")

    run_parser = subparsers.add_parser("run", help="Monitor the save file (default)")
    run_parser.set_defaults(func=cmd_run)

    setup_parser = subparsers.add_parser("setup", help="Run the setup wizard")
    setup_parser.set_defaults(func=cmd_setup)

    list_parser = subparsers.add_parser("list", help="List characters in the save file")
    list_parser.add_argument("--save", help="Save file to read instead of the configured/default one")
    list_parser.set_defaults(func=cmd_list)

    parser.set_defaults(func=cmd_run)
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
