"""CLI Commands"""

import os
import sys

from gpush.config import (
    AWS_REGIONS, BEDROCK_MODELS, ENV_OVERRIDES, MODEL_KEYS, OPENAI_MODELS,
    ConfigManager, mask_secret,
)
from gpush.errors import ConfigurationError, GitOperationError, GPushError
from gpush.git import GitRepository
from gpush.llm import get_provider
from gpush.output import bold, dim, info, print_error, print_success, print_table, print_warning
from gpush.workflow import Interaction, PushOptions, PushWorkflow

from gpush.cli.utils import select_option

PROVIDER_CHOICES = [
    ("openai", "OpenAI (GPT-4o)"),
    ("bedrock", "AWS Bedrock (Claude)"),
]

MAIN_MENU = [
    ("push", "Push changes"),
    ("config", "Configure settings"),
    ("status", "Show status"),
    ("exit", "Exit"),
]

SETTINGS_MENU = [
    ("api_key", "OpenAI API Key"),
    ("ai_provider", "AI Provider"),
    ("ai_model", "AI Model"),
    ("aws_region", "AWS Region"),
]

MAX_FILE_DISPLAY = 8


# ---------------------------------------------------------------------------
# push
# ---------------------------------------------------------------------------

def ensure_api_key(manager: ConfigManager, ui: Interaction) -> None:
    """Ask for the OpenAI key on a terminal when none is stored."""
    config = manager.load()
    if config.provider != "openai" or config.has_api_key:
        return
    if not sys.stdin.isatty():
        raise ConfigurationError("No API key configured. Use `gpush config --set-key <key>`")

    print_warning("No API key configured. Please enter your OpenAI API key:")
    key = ui.prompt_secret("OpenAI API Key")
    manager.set("openai_api_key", key)
    ui.success("API key successfully stored")


def push(manager: ConfigManager, ui: Interaction, options: PushOptions) -> int:
    repository = GitRepository()
    ensure_api_key(manager, ui)
    config = manager.load()
    provider = get_provider(config)
    ui.debug(f"Provider: {provider.name}")

    workflow = PushWorkflow(repository, provider, ui, max_diff_length=config.max_diff_length)
    return workflow.run(options)


def run_push(args, manager: ConfigManager, ui: Interaction) -> int:
    options = PushOptions(
        dry_run=args.dry_run,
        force=args.force,
        branch=args.branch,
        assume_yes=args.yes,
    )
    return push(manager, ui, options)


# ---------------------------------------------------------------------------
# status / config
# ---------------------------------------------------------------------------

def _settings_rows(manager: ConfigManager) -> list[tuple[str, str]]:
    config = manager.load()
    rows = [("AI Provider", config.provider)]
    if config.provider == "openai":
        rows.append(("OpenAI API Key", mask_secret(config.get("openai_api_key"))))
        rows.append(("Model", config.openai_model))
    else:
        rows.append(("Model", config.bedrock_model))
        rows.append(("AWS Region", config.aws_region))
    rows.append(("Max diff length", str(config.max_diff_length)))
    rows.append(("Timeout", f"{config.timeout}s"))
    return rows


def display_config(manager: ConfigManager) -> int:
    """Display current configuration."""
    print_table(_settings_rows(manager), title="Current Configuration")

    config_path = manager.get_config_path()
    print(f"  {dim('Loaded from:')} {config_path or f'defaults (no {manager.CONFIG_FILENAME} found)'}")

    overrides = [name for name in ENV_OVERRIDES.values() if os.environ.get(name)]
    if overrides:
        print(f"  {dim('Environment overrides:')} {', '.join(overrides)}")

    print(f"\n  {dim('Run')} gpush config --help {dim('to change settings')}\n")
    return 0


def _display_staged_files(repository: GitRepository) -> None:
    files = repository.staged_files()
    if not files:
        print(dim("  No staged changes. Run 'git add' first.\n"))
        return
    print(bold("Staged changes:"))
    for change in files[:MAX_FILE_DISPLAY]:
        print(dim(f"  {change.path} (+{change.additions} -{change.deletions})"))
    remaining = len(files) - MAX_FILE_DISPLAY
    if remaining > 0:
        print(dim(f"  ... and {remaining} more files"))
    print()


def run_status(args, manager: ConfigManager, ui: Interaction) -> int:
    display_config(manager)
    try:
        repository = GitRepository()
    except GitOperationError as e:
        print(dim(f"  {e.message}\n"))
        return 0
    print(f"  {dim('Branch:')} {info(repository.current_branch())}\n")
    _display_staged_files(repository)
    return 0


def set_setting(manager: ConfigManager, key: str, value, global_config: bool | None = None) -> None:
    path = manager.set(key, value, global_config=global_config)
    print_success(f"{key} set to {value} ({path})")


def set_model(manager: ConfigManager, model: str, global_config: bool | None = None) -> None:
    """Set the model of the currently selected provider."""
    provider = manager.load().provider
    key = MODEL_KEYS.get(provider)
    if key is None:
        raise ConfigurationError(f"Unknown provider '{provider}'. Run: gpush ai:provider openai")
    set_setting(manager, key, model, global_config)


def run_config(args, manager: ConfigManager, ui: Interaction) -> int:
    global_config = False if args.local else None
    changed = False

    if args.set_key:
        manager.set("openai_api_key", args.set_key, global_config=global_config)
        print_success("API key successfully stored")
        changed = True
    if args.provider:
        set_setting(manager, "provider", args.provider, global_config)
        changed = True
    if args.model:
        set_model(manager, args.model, global_config)
        changed = True
    if args.region:
        set_setting(manager, "aws_region", args.region, global_config)
        changed = True
    if args.max_diff_length:
        set_setting(manager, "max_diff_length", args.max_diff_length, global_config)
        changed = True
    if args.timeout:
        set_setting(manager, "timeout", args.timeout, global_config)
        changed = True

    if args.show_key:
        print(f"API key: {mask_secret(manager.load().get('openai_api_key'))}")
    elif not changed:
        return display_config(manager)
    return 0


def run_set_provider(args, manager: ConfigManager, ui: Interaction) -> int:
    set_setting(manager, "provider", args.provider)
    return 0


def run_set_model(args, manager: ConfigManager, ui: Interaction) -> int:
    set_model(manager, args.model)
    return 0


def run_set_region(args, manager: ConfigManager, ui: Interaction) -> int:
    set_setting(manager, "aws_region", args.region)
    return 0


# ---------------------------------------------------------------------------
# Interactive menu
# ---------------------------------------------------------------------------

def configure_settings(manager: ConfigManager, ui: Interaction) -> None:
    """Settings submenu; returns when the user goes back."""
    while True:
        setting = select_option("Which setting would you like to configure?", SETTINGS_MENU)
        if setting is None:
            return
        try:
            if setting == "api_key":
                manager.set("openai_api_key", ui.prompt_secret("Enter your OpenAI API Key"))
                ui.success("API key successfully stored")
            elif setting == "ai_provider":
                provider = select_option("Select AI Provider:", PROVIDER_CHOICES)
                if provider:
                    set_setting(manager, "provider", provider)
            elif setting == "ai_model":
                choices = BEDROCK_MODELS if manager.load().provider == "bedrock" else OPENAI_MODELS
                model = select_option("Select Model:", choices)
                if model:
                    set_model(manager, model)
            elif setting == "aws_region":
                region = select_option("Select AWS Region:", AWS_REGIONS)
                if region:
                    set_setting(manager, "aws_region", region)
        except GPushError as e:
            print_error(e.message)


def run_menu(args, manager: ConfigManager, ui: Interaction) -> int:
    print(f"\n{bold(info('GPush AI'))} {dim('- AI-powered commit and push')}")

    while True:
        action = select_option("What would you like to do?", MAIN_MENU, back=False)
        if action in (None, "exit"):
            return 0
        try:
            if action == "push":
                push(manager, ui, PushOptions())
            elif action == "config":
                configure_settings(manager, ui)
            elif action == "status":
                run_status(args, manager, ui)
        except GPushError as e:
            print_error(e.message)


# ---------------------------------------------------------------------------
# Shell completion
# ---------------------------------------------------------------------------

# shell -> (startup file, activation line)
COMPLETION_SETUP = {
    "bash": ("~/.bashrc", 'eval "$(register-python-argcomplete gpush)"'),
    "zsh": ("~/.zshrc", 'eval "$(register-python-argcomplete gpush)"'),
    "fish": ("~/.config/fish/config.fish", "register-python-argcomplete --shell fish gpush | source"),
    "powershell": ("$PROFILE", "register-python-argcomplete --shell powershell gpush | Out-String | Invoke-Expression"),
}


def _detect_shell() -> str | None:
    if os.environ.get("SHELL"):
        return os.path.basename(os.environ["SHELL"])
    if sys.platform == "win32":
        return "powershell"
    return None


def run_completion(args, manager: ConfigManager, ui: Interaction) -> int:
    """Print the argcomplete activation line for the user's shell."""
    shell = _detect_shell()
    print(f"\n{bold('Tab completion')}\n")

    if shell in COMPLETION_SETUP:
        startup_file, line = COMPLETION_SETUP[shell]
        print(f"Add to {dim(startup_file)}:\n\n  {line}\n")
    else:
        print(f"Unrecognised shell {dim(shell or 'unknown')}; pick the line for yours:\n")
        print_table([(name, line) for name, (_, line) in COMPLETION_SETUP.items()])

    print(dim("Open a new shell afterwards, then press TAB after 'gpush'."))
    return 0


COMMANDS = {
    "push": run_push,
    "config": run_config,
    "status": run_status,
    "ai:provider": run_set_provider,
    "ai:model": run_set_model,
    "ai:region": run_set_region,
    "menu": run_menu,
    "completion": run_completion,
}
