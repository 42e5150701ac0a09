"""Shared fixtures and fakes."""

import io
import shutil
import subprocess
from pathlib import Path
from types import SimpleNamespace

import pytest

from gpush.config import ENV_OVERRIDES
from gpush.errors import CancelledError
from gpush.git import FileChange
from gpush.workflow import Interaction

VALID_KEY = "sk-test1234567890abcdefghij"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Settings must come from the test, not from the developer's shell."""
    for name in ENV_OVERRIDES.values():
        monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv("FORCE_COLOR", raising=False)


AWS_CREDENTIAL_ENV = (
    "AWS_ACCESS_KEY_ID",
    "AWS_SECRET_ACCESS_KEY",
    "AWS_SESSION_TOKEN",
    "AWS_SECURITY_TOKEN",
    "AWS_PROFILE",
    "AWS_DEFAULT_PROFILE",
    "AWS_ROLE_ARN",
    "AWS_WEB_IDENTITY_TOKEN_FILE",
    "AWS_CONTAINER_CREDENTIALS_RELATIVE_URI",
    "AWS_CONTAINER_CREDENTIALS_FULL_URI",
    "AWS_CONTAINER_AUTHORIZATION_TOKEN",
    "AWS_BEARER_TOKEN_BEDROCK",
)


@pytest.fixture
def no_aws_credentials(tmp_path, monkeypatch):
    """Leave the AWS credential chain with nothing to find."""
    for name in AWS_CREDENTIAL_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("AWS_CONFIG_FILE", str(tmp_path / "aws-config"))
    monkeypatch.setenv("AWS_SHARED_CREDENTIALS_FILE", str(tmp_path / "aws-credentials"))
    monkeypatch.setenv("AWS_EC2_METADATA_DISABLED", "true")


@pytest.fixture
def isolated_home(tmp_path, monkeypatch):
    """Run in an empty working directory with a fake home directory."""
    home = tmp_path / "home"
    work = tmp_path / "work"
    home.mkdir()
    work.mkdir()
    monkeypatch.chdir(work)
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setattr("pathlib.Path.home", lambda: home)
    monkeypatch.setattr("sys.stdin", io.StringIO())
    return SimpleNamespace(home=home, work=work)


# ---------------------------------------------------------------------------
# Fakes for the workflow's collaborators
# ---------------------------------------------------------------------------

class FakeRepository:
    """In-memory stand-in for GitRepository."""

    def __init__(self, diff="diff --git a/x b/x\n+hello\n", commit_error=None, push_error=None):
        self.diff = diff
        self.commit_error = commit_error
        self.push_error = push_error
        self.commits = []
        self.pushes = []
        self.files = [FileChange("x", 1, 0)]

    def staged_diff(self):
        return self.diff

    def staged_files(self):
        return self.files

    def current_branch(self):
        return "main"

    def commit(self, message):
        if self.commit_error:
            raise self.commit_error
        self.commits.append(message)
        return "abc1234"

    def push(self, force=False, branch=None):
        self.pushes.append({"force": force, "branch": branch})
        if self.push_error:
            raise self.push_error


class FakeProvider:
    name = "Fake (test-model)"

    def __init__(self, response="```\nfeat: add hello marker\n```\nThis adds a greeting.", error=None):
        self.response = response
        self.error = error
        self.received = []

    def generate_commit_message(self, diff):
        self.received.append(diff)
        if self.error:
            raise self.error
        return self.response


class FakeInteraction(Interaction):
    """Records everything the workflow tells the user."""

    def __init__(self, answer=True, secret=VALID_KEY):
        self.answer = answer
        self.secret = secret
        self.confirm_prompts = []
        self.reports = []
        self.messages = []
        self.successes = []
        self.errors = []
        self.debugs = []

    def confirm(self, prompt):
        self.confirm_prompts.append(prompt)
        return self.answer

    def report(self, message):
        self.reports.append(message)

    def show_message(self, message):
        self.messages.append(message)

    def success(self, message):
        self.successes.append(message)

    def error(self, message):
        self.errors.append(message)

    def debug(self, message):
        self.debugs.append(message)

    def prompt_secret(self, label):
        if self.secret is None:
            raise CancelledError(f"{label} input was cancelled")
        return self.secret


@pytest.fixture
def repository():
    return FakeRepository()


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def interaction():
    return FakeInteraction()


# ---------------------------------------------------------------------------
# Real git repositories
# ---------------------------------------------------------------------------

def git(cwd: Path, *args: str) -> str:
    result = subprocess.run(['git', *args], cwd=cwd, capture_output=True, text=True, check=True)
    return result.stdout


@pytest.fixture
def git_repo(tmp_path):
    """A repository with one commit on main and a bare 'origin' remote."""
    if shutil.which('git') is None:
        pytest.skip("git is not installed")

    remote = tmp_path / "remote.git"
    repo = tmp_path / "repo"
    repo.mkdir()
    git(tmp_path, 'init', '--bare', str(remote))
    git(repo, 'init')
    git(repo, 'symbolic-ref', 'HEAD', 'refs/heads/main')
    git(repo, 'config', 'user.email', 'dev@example.com')
    git(repo, 'config', 'user.name', 'Dev')
    git(repo, 'config', 'commit.gpgsign', 'false')
    git(repo, 'config', 'push.default', 'current')
    git(repo, 'remote', 'add', 'origin', str(remote))

    (repo / "README.md").write_text("# demo\n")
    git(repo, 'add', 'README.md')
    git(repo, 'commit', '-m', 'chore: initial commit')
    git(repo, 'push', 'origin', 'main')

    return SimpleNamespace(path=repo, remote=remote)
