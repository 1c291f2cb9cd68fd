"""Command-line interface commands and utilities for KeyNav."""

import argparse
import logging
import sys

from . import __version__
from .choice_map import ChoiceMap, COMMAND_ROW_HEADERS
from .config import DEFAULT_CONFIG, load_choice_map, load_config_file, load_document
from .error_handler_util import ConfigError

logger = logging.getLogger('KeyNav')

LOG_FORMAT = '%(asctime)s.%(msecs)03d - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def setup_logging(debug: bool = False, log_file: str = 'debug.log') -> None:
    """
    Attach KeyNav's handlers to the 'KeyNav' logger.

    Critical messages always reach the console. With ``debug`` set,
    everything is also written to ``log_file``.
    """
    if logger.handlers:
        return
    logger.setLevel(logging.DEBUG if debug else logging.INFO)

    if debug:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        logger.addHandler(file_handler)

    # Console handler for important messages only
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.CRITICAL)
    console_handler.setFormatter(logging.Formatter('%(message)s'))
    logger.addHandler(console_handler)


def check_config(path=None) -> int:
    """Validate a key map strictly. Returns the process exit code."""
    source = path or 'built-in defaults'
    try:
        document = load_config_file(path) if path else load_document(DEFAULT_CONFIG)
    except ConfigError as e:
        print(f"❌ {e}")
        return 1

    choice_map = ChoiceMap.from_config(document)
    print(f"Key map: {source}")
    print(f"  Modes:  {', '.join(choice_map.mode_names())}")
    print(f"  Groups: {', '.join(choice_map.groups) or 'none'}")
    if choice_map.skipped:
        print(f"❌ {choice_map.skipped} entries skipped (run with --debug for details)")
        return 1
    print("✅ Key map is valid.")
    return 0


def print_bindings(choice_map: ChoiceMap, mode=None) -> int:
    """Print the binding table for one mode, or every mode."""
    if mode is not None and mode not in choice_map.modes:
        print(f"Unknown mode '{mode}'. Known modes: {', '.join(choice_map.mode_names())}")
        return 1

    rows = choice_map.command_rows(mode)
    width = max([len(COMMAND_ROW_HEADERS[0])] + [len(row.command) for row in rows])
    current = None
    for row in rows:
        if row.mode != current:
            current = row.mode
            print(f"\n[{current}]")
            print(f"  {COMMAND_ROW_HEADERS[0]:<{width}}  {COMMAND_ROW_HEADERS[1]}")
        print(f"  {row.command:<{width}}  {row.action}")
    return 0


def handle_cli_commands(argv=None):
    """Handle command-line arguments and execute CLI commands."""
    parser = argparse.ArgumentParser(description="KeyNav: keyboard-driven focus navigation for terminal UIs.")
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--config', metavar='PATH', help='Load the key map from a TOML file instead of the defaults.')
    parser.add_argument('--check', action='store_true', help='Validate the key map and report skipped entries.')
    parser.add_argument('--list', nargs='?', const='', default=None, metavar='MODE',
                        help='Print the bindings of MODE, or of every mode.')
    parser.add_argument('--debug', action='store_true', help='Write debug logging to debug.log.')

    args = parser.parse_args(argv)
    setup_logging(debug=args.debug)

    if args.check:
        sys.exit(check_config(args.config))

    if args.list is not None:
        choice_map = load_choice_map(path=args.config)
        sys.exit(print_bindings(choice_map, args.list or None))

    # Interactive mode - return args for further processing
    return args


def main(argv=None):
    """Main entry point for the application"""
    args = handle_cli_commands(argv)

    from .tui import run_ui

    activated = run_ui(load_choice_map(path=args.config))
    if activated:
        print(activated)
    sys.exit(0)
