"""CLI Argument Parsing"""

import argparse

import argcomplete

from gpush import __version__
from gpush.config import VALID_PROVIDERS


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got '{value}'")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got '{value}'")
    return number


def build_parser() -> argparse.ArgumentParser:
    # --verbose is accepted before or after the command
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument('--verbose', action='store_true', default=argparse.SUPPRESS, help='Show debug info (diff size, provider)')

    parser = argparse.ArgumentParser(
        prog='gpush',
        description='AI-powered git commit message generator and push tool',
        epilog='Example: git add -p && gpush push',
    )
    parser.add_argument('-v', '--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--verbose', action='store_true', default=False, help='Show debug info (diff size, provider)')

    commands = parser.add_subparsers(dest='command', metavar='<command>')

    push = commands.add_parser('push', parents=[common], help='Generate a commit message, commit and push')
    push.add_argument('-d', '--dry-run', action='store_true', help='Show the generated message without committing')
    push.add_argument('-f', '--force', action='store_true', help='Force push changes')
    push.add_argument('-b', '--branch', type=str, metavar='BRANCH', help='Push to origin BRANCH')
    push.add_argument('-y', '--yes', action='store_true', help='Commit and push without asking for confirmation')

    config = commands.add_parser('config', parents=[common], help='Manage configuration')
    config.add_argument('--set-key', type=str, metavar='KEY', help='Set OpenAI API key')
    config.add_argument('--show-key', action='store_true', help='Show current API key status')
    config.add_argument('--provider', type=str, choices=VALID_PROVIDERS, help='AI provider')
    config.add_argument('--model', type=str, metavar='MODEL', help='Model for the selected provider')
    config.add_argument('--region', type=str, metavar='REGION', help='AWS region for Bedrock')
    config.add_argument('--max-diff-length', type=_positive_int, metavar='N', help='Characters of diff sent to the provider (default: 4000)')
    config.add_argument('--timeout', type=_positive_int, metavar='SECONDS', help='Provider request timeout (default: 60)')
    config.add_argument('--local', action='store_true', help='Write ./.gpushrc instead of ~/.gpushrc')

    commands.add_parser('status', parents=[common], help='Show current configuration and staged files')

    provider = commands.add_parser('ai:provider', parents=[common], help='Set AI provider')
    provider.add_argument('provider', choices=VALID_PROVIDERS)

    model = commands.add_parser('ai:model', parents=[common], help='Set default AI model for the selected provider')
    model.add_argument('model', help='Model name (e.g., gpt-4o, anthropic.claude-3-haiku-20240307-v1:0)')

    region = commands.add_parser('ai:region', parents=[common], help='Set AWS region for Bedrock')
    region.add_argument('region', help='AWS region (e.g., us-east-1)')

    commands.add_parser('menu', parents=[common], help='Interactive menu')
    commands.add_parser('completion', parents=[common], help='Show how to enable shell tab completion')

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = build_parser()
    argcomplete.autocomplete(parser)
    return parser.parse_args(argv)
