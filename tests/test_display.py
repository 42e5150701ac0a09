"""
Tests for CLI output formatting.

Shows sample output for each scenario. Run with:
    pytest tests/test_display.py -v
    pytest tests/test_display.py -v -s   # see actual terminal output
"""

import io
import re

import pytest

from gpush.cli.commands import _display_staged_files, display_config
from gpush.cli.utils import TerminalInteraction, select_option
from gpush.config import ConfigManager
from gpush.errors import CancelledError, PartialPushError
from gpush.git import FileChange
from gpush.output import (
    ARROW, CHECK, CROSS, Colors, Spinner, colorize_commit_type, dim, info,
    print_commit_message, print_error, print_table, success,
)

from conftest import VALID_KEY

ANSI_RE = re.compile(r'\033\[[0-9;]*m')


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def strip_ansi():
    """Return a function that removes ANSI escape codes."""
    def _strip(text: str) -> str:
        return ANSI_RE.sub('', text)
    return _strip


@pytest.fixture
def print_sample(capsys):
    """Return a function that replays captured output for -s viewing."""
    def _print(out: str):
        with capsys.disabled():
            try:
                print(out)
            except UnicodeEncodeError:
                # Windows cp1252 can't encode Unicode symbols (─, ✓, etc.)
                cleaned = ANSI_RE.sub('', out)
                print(cleaned.encode('ascii', errors='replace').decode('ascii'))
    return _print


class StagedFiles:
    def __init__(self, files):
        self.files = files

    def staged_files(self):
        return self.files


@pytest.fixture
def make_staged():
    """Return a factory that builds a repository stand-in from (path, +, -) tuples."""
    def _make(file_details):
        return StagedFiles([FileChange(path, added, deleted) for path, added, deleted in file_details])
    return _make


# ---------------------------------------------------------------------------
# Staged file list
# ---------------------------------------------------------------------------

class TestDisplayStagedFiles:
    """Output from _display_staged_files()."""

    def test_small_list_shows_all(self, capsys, make_staged):
        """3 files: every file is printed."""
        _display_staged_files(make_staged([
            ("src/utils/validator.py", 15, 3),
            ("src/utils/__init__.py", 1, 0),
            ("tests/test_validator.py", 22, 0),
        ]))
        out = capsys.readouterr().out

        assert "Staged changes:" in out
        assert "src/utils/validator.py (+15 -3)" in out
        assert "src/utils/__init__.py (+1 -0)" in out
        assert "tests/test_validator.py (+22 -0)" in out
        assert "..." not in out

    def test_large_list_collapses(self, capsys, make_staged):
        """12 files: first 8 shown, rest collapsed."""
        _display_staged_files(make_staged([(f"src/mod_{i}.py", 10 + i, i) for i in range(12)]))
        out = capsys.readouterr().out

        assert "src/mod_0.py" in out
        assert "src/mod_7.py" in out
        assert "src/mod_8.py" not in out
        assert "... and 4 more files" in out

    def test_nothing_staged(self, capsys, make_staged):
        _display_staged_files(make_staged([]))
        out = capsys.readouterr().out

        assert "No staged changes" in out
        assert "git add" in out


# ---------------------------------------------------------------------------
# Commit message display
# ---------------------------------------------------------------------------

class TestDisplayMessage:
    """Output from print_commit_message()."""

    def test_subject_with_body(self, capsys, strip_ansi):
        msg = (
            "feat(auth): add JWT token refresh\n"
            "\n"
            "- implement automatic refresh before expiry\n"
            "- store refresh token in httpOnly cookies"
        )
        print_commit_message(msg)
        out = strip_ansi(capsys.readouterr().out)

        assert "feat(auth): add JWT token refresh" in out
        assert "- implement automatic refresh before expiry" in out
        assert "- store refresh token in httpOnly cookies" in out

    def test_subject_only(self, capsys, strip_ansi):
        print_commit_message("fix(api): handle null response")
        out = strip_ansi(capsys.readouterr().out)

        assert "fix(api): handle null response" in out

    def test_has_horizontal_rules(self, capsys, strip_ansi):
        print_commit_message("chore: update dependencies")
        out = strip_ansi(capsys.readouterr().out)
        lines = [l for l in out.split("\n") if l.strip()]

        # First and last lines are rules as wide as the message
        assert lines[0].strip() == "─" * len("chore: update dependencies")
        assert lines[-1].strip() == lines[0].strip()


class TestColorizeCommitType:

    @pytest.fixture(autouse=True)
    def colors_on(self, monkeypatch):
        monkeypatch.setattr("gpush.output.COLORS_ENABLED", True)

    def test_known_type_prefix_colored(self):
        result = colorize_commit_type("feat(auth): add login")
        assert result == (
            f"{Colors.BOLD}{Colors.GREEN}feat(auth):{Colors.RESET}"
            f"{Colors.BOLD} add login{Colors.RESET}"
        )

    def test_unlisted_known_type_uses_cyan(self):
        assert colorize_commit_type("docs: fix typo").startswith(f"{Colors.BOLD}{Colors.CYAN}docs:")

    def test_unknown_type_only_bold(self):
        assert colorize_commit_type("wip: stuff") == f"{Colors.BOLD}wip: stuff{Colors.RESET}"

    def test_plain_when_colors_off(self, monkeypatch):
        monkeypatch.setattr("gpush.output.COLORS_ENABLED", False)
        assert colorize_commit_type("fix: null check") == "fix: null check"


# ---------------------------------------------------------------------------
# Errors and step status
# ---------------------------------------------------------------------------

class TestPrintError:

    def test_single_line(self, capsys, strip_ansi):
        print_error("No changes detected")
        captured = capsys.readouterr()

        assert captured.out == ""
        assert strip_ansi(captured.err) == f"{CROSS} No changes detected\n"

    def test_details_indented_under_headline(self, capsys, strip_ansi):
        print_error(PartialPushError("abc1234", "rejected: non-fast-forward").message)
        lines = strip_ansi(capsys.readouterr().err).split("\n")

        assert lines[0] == f"{CROSS} Commit abc1234 was created locally, but the push failed."
        assert lines[1].startswith("  Your changes are committed")
        assert lines[2] == ""
        assert lines[3] == "  rejected: non-fast-forward"


class TestSpinner:
    """Spinner on a non-terminal stream: no animation, only the final line."""

    def test_done_line_on_success(self, strip_ansi):
        stream = io.StringIO()
        with Spinner("Generating commit message...", done="Commit message generated", stream=stream):
            pass
        assert strip_ansi(stream.getvalue()) == f"{CHECK} Commit message generated\n"

    def test_silent_without_done(self):
        stream = io.StringIO()
        with Spinner("Committing...", stream=stream):
            pass
        assert stream.getvalue() == ""

    def test_fail_line_names_step(self, strip_ansi):
        stream = io.StringIO()
        with pytest.raises(RuntimeError):
            with Spinner("Pushing to origin/main...", done="never shown", stream=stream):
                raise RuntimeError("rejected")
        assert strip_ansi(stream.getvalue()) == f"{CROSS} Pushing to origin/main\n"

    def test_interrupt_prints_nothing(self):
        stream = io.StringIO()
        with pytest.raises(KeyboardInterrupt):
            with Spinner("Committing...", stream=stream):
                raise KeyboardInterrupt
        assert stream.getvalue() == ""


# ---------------------------------------------------------------------------
# Tables and configuration
# ---------------------------------------------------------------------------

class TestPrintTable:

    def test_aligns_labels(self, capsys, strip_ansi):
        print_table([("AI Provider", "openai"), ("Model", "gpt-4o")], title="Settings")
        lines = strip_ansi(capsys.readouterr().out).split("\n")

        assert "Settings" in lines
        assert "  AI Provider  openai" in lines
        assert "  Model        gpt-4o" in lines


class TestDisplayConfig:

    def test_masks_key(self, isolated_home, capsys):
        (isolated_home.home / ".gpushrc").write_text(f'{{"openai_api_key": "{VALID_KEY}"}}')
        display_config(ConfigManager())
        out = capsys.readouterr().out

        assert "*****ghij" in out
        assert VALID_KEY not in out
        assert str(isolated_home.home / ".gpushrc") in out

    def test_bedrock_shows_region_not_key(self, isolated_home, capsys):
        (isolated_home.home / ".gpushrc").write_text('{"provider": "bedrock", "aws_region": "us-west-2"}')
        display_config(ConfigManager())
        out = capsys.readouterr().out

        assert "us-west-2" in out
        assert "API Key" not in out

    def test_lists_environment_overrides(self, isolated_home, monkeypatch, capsys, strip_ansi):
        monkeypatch.setenv("OPENAI_MODEL", "gpt-4o-mini")
        display_config(ConfigManager())
        out = strip_ansi(capsys.readouterr().out)

        assert "gpt-4o-mini" in out
        assert "Environment overrides: OPENAI_MODEL" in out


# ---------------------------------------------------------------------------
# Interactive prompts
# ---------------------------------------------------------------------------

OPTIONS = [("openai", "OpenAI"), ("bedrock", "AWS Bedrock")]


class TestSelectOption:

    @pytest.mark.parametrize("answer, expected", [
        pytest.param("1\n", "openai", id="first"),
        pytest.param("2\n", "bedrock", id="second"),
        pytest.param("b\n", None, id="back"),
        pytest.param("", None, id="eof"),
        pytest.param("7\nx\n2\n", "bedrock", id="retries-until-valid"),
    ])
    def test_choice(self, monkeypatch, capsys, answer, expected):
        monkeypatch.setattr("sys.stdin", io.StringIO(answer))
        assert select_option("Select AI Provider:", OPTIONS) == expected

    def test_invalid_choice_prints_hint(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO("9\n1\n"))
        select_option("Select AI Provider:", OPTIONS)
        assert "Enter 1-2 or b" in capsys.readouterr().out

    def test_no_back_option(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO("b\n1\n"))
        assert select_option("What would you like to do?", OPTIONS, back=False) == "openai"
        assert "Back" not in capsys.readouterr().out


class TestTerminalInteraction:

    @pytest.mark.parametrize("answer, expected", [
        ("y\n", True),
        ("YES\n", True),
        ("n\n", False),
        ("\n", False),
        ("", False),
    ])
    def test_confirm(self, monkeypatch, capsys, answer, expected):
        monkeypatch.setattr("sys.stdin", io.StringIO(answer))
        assert TerminalInteraction().confirm("Commit and push?") is expected

    def test_debug_only_when_verbose(self, capsys):
        TerminalInteraction(verbose=False).debug("Diff: 12 chars")
        assert capsys.readouterr().err == ""

        TerminalInteraction(verbose=True).debug("Diff: 12 chars")
        assert "Diff: 12 chars" in capsys.readouterr().err

    def test_prompt_secret_strips(self, monkeypatch):
        monkeypatch.setattr("getpass.getpass", lambda prompt: f"  {VALID_KEY}\n")
        assert TerminalInteraction().prompt_secret("OpenAI API Key") == VALID_KEY

    def test_prompt_secret_eof_cancels(self, monkeypatch, capsys):
        def eof(prompt):
            raise EOFError
        monkeypatch.setattr("getpass.getpass", eof)
        with pytest.raises(CancelledError):
            TerminalInteraction().prompt_secret("OpenAI API Key")

    def test_status_runs_body(self, capsys):
        ran = []
        with TerminalInteraction().status("Working..."):
            ran.append(True)
        assert ran == [True]


# ---------------------------------------------------------------------------
# Full console output: run with -s to see what users see
#   pytest tests/test_display.py::TestConsoleOutput -v -s
# ---------------------------------------------------------------------------

@pytest.fixture
def simulate_console(capsys, make_staged, strip_ansi, print_sample):
    """Return a function that reproduces the gpush push console flow."""
    def _simulate(*, files, provider, message, branch=None):
        ui = TerminalInteraction()

        # 1. File list
        _display_staged_files(make_staged(files))

        # 2. Status line (mock)
        print(f"Generating commit message using {info(provider)}... {success('done!')}")

        # 3. Commit message
        ui.show_message(message)

        # 4. Confirmation (mock) and result
        print(f"\n{'Commit and push these changes?'} {dim('[y/N]')} y")
        ui.report("Committed abc1234")
        target = f" to origin/{branch}" if branch else ""
        ui.success(f"Changes committed and pushed{target}")

        # Capture, display for -s, return for assertions
        out = capsys.readouterr().out
        print_sample(out)
        return strip_ansi(out)
    return _simulate


class TestConsoleOutput:
    """
    Full console mock: shows exactly what a user sees after running gpush push.

    Run:  pytest tests/test_display.py::TestConsoleOutput -v -s
    """

    def test_quick_bugfix(self, simulate_console):
        """gpush output for a small 2-file bug fix."""
        out = simulate_console(
            files=[
                ("src/utils/validator.py", 15, 3),
                ("src/utils/__init__.py", 1, 0),
            ],
            provider="OpenAI (gpt-4o)",
            message="fix(utils): add null check for email validation",
        )

        assert "validator.py (+15 -3)" in out
        assert "using OpenAI (gpt-4o)" in out
        assert "fix(utils): add null check" in out
        assert f"{ARROW} Committed abc1234" in out
        assert f"{CHECK} Changes committed and pushed" in out

    def test_large_change_to_branch(self, simulate_console):
        """gpush output for a 12-file change pushed to a named branch."""
        out = simulate_console(
            files=[(f"src/services/service_{i}.py", 40 + i, i) for i in range(12)],
            provider="Bedrock (anthropic.claude-3-5-sonnet-20240620-v1:0, eu-central-1)",
            message="refactor(api): extract service layer",
            branch="feature/services",
        )

        assert "service_7.py (+47 -7)" in out
        assert "... and 4 more files" in out
        assert "refactor(api):" in out
        assert "pushed to origin/feature/services" in out
