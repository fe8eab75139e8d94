"""
Command-line interface for autosway.

Usage:
    autosway [options] [action]

Actions:
    auto    Restore the stored layout for the connected monitors (default)
    save    Remember the current layout for the connected monitors
    list    Print the current layout as output commands
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import Config
from .exceptions import (
    AutoswayError,
    ConfigError,
    IpcConnectionError,
    IpcProtocolError,
    IpcIOError,
    SerializationError,
    StorageError,
    ReconciliationError,
    CommandFailedError,
)
from .orchestrator import Action, Orchestrator


def setup_logging(level: str = "WARNING") -> None:
    """Configure logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="autosway",
        description="Restore Sway output layouts for the connected set of monitors"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        help="Path to config file"
    )
    parser.add_argument(
        "action",
        nargs="?",
        default=Action.AUTO.value,
        choices=[action.value for action in Action],
        help="Action to run (default: auto)"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logger = logging.getLogger(__name__)

    try:
        # Verbose logging must be up before the config is read
        if args.verbose:
            setup_logging("DEBUG")

        config = Config.load(config_file=args.config)

        if not args.verbose:
            setup_logging(config.logging.level)

        output = Orchestrator(config).run(Action(args.action))
        if output:
            print(output)

        return 0

    # Handle specific error types with appropriate exit codes and messages
    except KeyboardInterrupt:
        print("\nCancelled by user", file=sys.stderr)
        return 130

    except ConfigError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        return 78  # EX_CONFIG

    except IpcConnectionError as e:
        print(f"Cannot Connect to Compositor\n{e}", file=sys.stderr)
        return 69  # EX_UNAVAILABLE

    except IpcProtocolError as e:
        print(f"Protocol Error: {e}", file=sys.stderr)
        return 76  # EX_PROTOCOL

    except (IpcIOError, StorageError) as e:
        print(f"I/O Error: {e}", file=sys.stderr)
        return 74  # EX_IOERR

    except SerializationError as e:
        print(f"Invalid Data: {e}", file=sys.stderr)
        return 65  # EX_DATAERR

    except ReconciliationError as e:
        print(f"{e}\nRun 'autosway save' to store a layout for this set of monitors.", file=sys.stderr)
        return 65  # EX_DATAERR

    except CommandFailedError as e:
        print(f"Output Configuration Failed: {e}", file=sys.stderr)
        return 70  # EX_SOFTWARE

    except AutoswayError as e:
        # Catch-all for any other autosway errors
        print(f"Error: {e}", file=sys.stderr)
        logger.error(str(e))
        if args.verbose:
            raise
        return 1

    except Exception as e:
        # Unexpected errors - show full traceback in verbose mode
        print(f"Unexpected Error: {type(e).__name__}: {e}", file=sys.stderr)
        logger.error(f"Unexpected error: {type(e).__name__}: {e}")
        if args.verbose:
            raise
        print("\nRun with -v/--verbose for full traceback.", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
