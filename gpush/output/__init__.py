"""Terminal Rendering

Everything gpush shows the user goes through here: status lines, the commit
message preview, settings tables and the step spinner. Errors and debug
lines go to stderr so stdout stays the user-facing transcript.
"""

import itertools
import os
import re
import sys
import threading

from gpush import COMMIT_TYPES


class Colors:
    """ANSI escape codes for terminal colors."""
    RESET = '\033[0m'
    BOLD = '\033[1m'
    DIM = '\033[2m'
    RED = '\033[31m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    MAGENTA = '\033[35m'
    CYAN = '\033[36m'


def _color_wanted(stream) -> bool:
    # NO_COLOR beats FORCE_COLOR; otherwise only real terminals get colour
    if os.environ.get('NO_COLOR'):
        return False
    if os.environ.get('FORCE_COLOR'):
        return True
    if os.environ.get('TERM') == 'dumb':
        return False
    return bool(getattr(stream, 'isatty', None) and stream.isatty())


def _can_encode(symbols: str) -> bool:
    try:
        symbols.encode(sys.stdout.encoding or 'utf-8')
    except (UnicodeEncodeError, LookupError):
        return False
    return True


COLORS_ENABLED = _color_wanted(sys.stdout)
UNICODE_ENABLED = _can_encode('✓✗→─⚠⠋')

if UNICODE_ENABLED:
    CHECK, CROSS, ARROW, WARN, RULE = '✓', '✗', '→', '⚠', '─'
else:
    CHECK, CROSS, ARROW, WARN, RULE = '[OK]', '[X]', '->', '[!]', '-'


def _style(*codes: str):
    """Return a function that wraps text in codes while colour is enabled."""
    def apply(text: str) -> str:
        if not COLORS_ENABLED:
            return text
        return f"{''.join(codes)}{text}{Colors.RESET}"
    return apply


success = _style(Colors.GREEN)
error = _style(Colors.RED)
warning = _style(Colors.YELLOW)
info = _style(Colors.CYAN)
dim = _style(Colors.DIM)
bold = _style(Colors.BOLD)


# ---------------------------------------------------------------------------
# Status lines
# ---------------------------------------------------------------------------

def print_success(message: str) -> None:
    print(f"{success(CHECK)} {message}")


def print_error(message: str) -> None:
    """Print an error to stderr.

    gpush errors put the problem on the first line and any remediation
    (commands to run, the underlying git or SDK output) after it. The first
    line is shown in red, the rest indented and dimmed.
    """
    headline, _, details = message.partition('\n')
    print(f"{error(CROSS)} {error(headline)}", file=sys.stderr)
    if details.strip():
        for line in details.strip('\n').split('\n'):
            print(f"  {dim(line)}" if line.strip() else "", file=sys.stderr)


def print_warning(message: str) -> None:
    print(f"{warning(WARN)} {warning(message)}")


def print_debug(message: str) -> None:
    print(dim(f"  {message}"), file=sys.stderr)


def print_table(rows: list[tuple[str, str]], title: str | None = None) -> None:
    """Print aligned 'label  value' rows, optionally under a bold title."""
    if title:
        print(f"\n{bold(title)}\n")
    width = max((len(label) for label, _ in rows), default=0)
    for label, value in rows:
        print(f"  {dim(label.ljust(width))}  {info(value)}")
    print()


# ---------------------------------------------------------------------------
# Commit messages
# ---------------------------------------------------------------------------

TYPE_PREFIX = re.compile(r'^(\w+)(\([^)]*\))?(!?:)')

# Known types not listed here use CYAN
COMMIT_TYPE_COLORS = {
    'feat': Colors.GREEN,
    'perf': Colors.GREEN,
    'fix': Colors.RED,
    'refactor': Colors.YELLOW,
    'test': Colors.MAGENTA,
    'chore': Colors.DIM,
    'style': Colors.DIM,
}


def colorize_commit_type(subject: str) -> str:
    """Bold the subject line and colour its conventional type prefix."""
    match = TYPE_PREFIX.match(subject)
    if not match or match.group(1) not in COMMIT_TYPES:
        return bold(subject)
    prefix = match.group(0)
    color = COMMIT_TYPE_COLORS.get(match.group(1), Colors.CYAN)
    return _style(Colors.BOLD, color)(prefix) + bold(subject[len(prefix):])


def print_commit_message(message: str) -> None:
    """Show a commit message between rules as wide as its longest line."""
    lines = message.split('\n')
    rule = dim(RULE * max(len(line) for line in lines))
    print(f"\n{rule}")
    print(colorize_commit_type(lines[0]))
    for line in lines[1:]:
        print(line)
    print(rule)


# ---------------------------------------------------------------------------
# Spinner
# ---------------------------------------------------------------------------

class Spinner:
    """Animated status line for one workflow step. Use as a context manager.

    The animation only runs on a terminal. When the step finishes, the line
    is replaced by a success line with ``done`` (if given); when the step
    raises, by a failure line naming the step. The exception still
    propagates.
    """

    FRAMES = '⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏' if UNICODE_ENABLED else '-\\|/'
    INTERVAL = 0.08

    def __init__(self, message: str, done: str | None = None, stream=None):
        self.message = message
        self.done = done
        self.stream = stream if stream is not None else sys.stdout
        self._stop = threading.Event()
        self._thread = None

    def _spin(self):
        for frame in itertools.cycle(self.FRAMES):
            self.stream.write(f"\r\033[K{info(frame)} {self.message}")
            self.stream.flush()
            if self._stop.wait(self.INTERVAL):
                return

    def __enter__(self):
        if self.stream.isatty():
            self._thread = threading.Thread(target=self._spin, daemon=True)
            self._thread.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self._stop.set()
        if self._thread:
            self._thread.join()
            self.stream.write('\r\033[K')
            self.stream.flush()

        if exc_type is None:
            if self.done:
                self.succeed(self.done)
        elif not issubclass(exc_type, KeyboardInterrupt):
            self.fail(self.message.rstrip('.'))
        return False

    def succeed(self, text: str) -> None:
        print(f"{success(CHECK)} {text}", file=self.stream)

    def fail(self, text: str) -> None:
        print(f"{error(CROSS)} {dim(text)}", file=self.stream)


__all__ = [
    "Colors", "COLORS_ENABLED", "UNICODE_ENABLED",
    "CHECK", "CROSS", "ARROW", "WARN", "RULE",
    "success", "error", "warning", "info", "dim", "bold",
    "print_success", "print_error", "print_warning", "print_debug", "print_table",
    "COMMIT_TYPE_COLORS", "colorize_commit_type", "print_commit_message",
    "Spinner",
]
