"""Command-line interface"""

from gpush.cli.main import main, run

__all__ = ["main", "run"]
