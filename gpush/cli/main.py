"""CLI Main Entry Point"""

import sys

from gpush.config import ConfigManager
from gpush.errors import ExitCode, GPushError
from gpush.output import dim, print_error

from gpush.cli.args import build_parser, parse_args
from gpush.cli.commands import COMMANDS, run_menu
from gpush.cli.utils import TerminalInteraction


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI. Returns the process exit code."""
    args = parse_args(argv)
    ui = TerminalInteraction(verbose=args.verbose)
    manager = ConfigManager()

    if args.command is None:
        if not sys.stdin.isatty():
            build_parser().print_help()
            return int(ExitCode.FAILURE)
        handler = run_menu
    else:
        handler = COMMANDS[args.command]

    try:
        return int(handler(args, manager, ui))
    except GPushError as e:
        print_error(e.message)
        return int(e.exit_code)
    except KeyboardInterrupt:
        print()
        print(dim("Cancelled."))
        return int(ExitCode.FAILURE)


def run() -> None:
    sys.exit(main())
