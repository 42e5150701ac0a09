"""CLI Utility Functions"""

import getpass
from contextlib import contextmanager
from typing import Iterator, Optional

from gpush.errors import CancelledError
from gpush.output import (
    ARROW, Spinner, bold, dim, info,
    print_commit_message, print_debug, print_error, print_success,
)
from gpush.workflow import Interaction


def select_option(title: str, options: list[tuple[str, str]], back: bool = True) -> Optional[str]:
    """Show numbered options and return the chosen value, or None for back/quit."""
    print(f"\n{bold(title)}\n")
    for i, (_, label) in enumerate(options, 1):
        print(f"  {info(str(i))}. {label}")
    if back:
        print(f"  {info('b')}. {dim('Back')}")
    print()

    hint = f"1-{len(options)}" + (" or b" if back else "")
    while True:
        try:
            choice = input(f"Select [{hint}]: ").strip().lower()
        except (KeyboardInterrupt, EOFError):
            print()
            return None
        if back and choice == 'b':
            return None
        if choice.isdigit() and 1 <= int(choice) <= len(options):
            return options[int(choice) - 1][0]
        print(f"Enter {hint}")


class TerminalInteraction(Interaction):
    """Interaction backed by stdin/stdout."""

    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    def confirm(self, prompt: str) -> bool:
        try:
            answer = input(f"\n{prompt} {dim('[y/N]')} ").strip().lower()
        except (KeyboardInterrupt, EOFError):
            print()
            return False
        return answer in ('y', 'yes')

    def report(self, message: str) -> None:
        print(f"{dim(ARROW)} {message}")

    def show_message(self, message: str) -> None:
        print_commit_message(message)

    def success(self, message: str) -> None:
        print_success(message)

    def error(self, message: str) -> None:
        print_error(message)

    def debug(self, message: str) -> None:
        if self.verbose:
            print_debug(message)

    def prompt_secret(self, label: str) -> str:
        try:
            return getpass.getpass(f"{label}: ").strip()
        except (KeyboardInterrupt, EOFError) as e:
            print()
            raise CancelledError(f"{label} input was cancelled") from e

    @contextmanager
    def status(self, message: str, done: Optional[str] = None) -> Iterator[None]:
        self.debug(message)
        with Spinner(message, done=done):
            yield
