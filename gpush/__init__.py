"""
gpush

AI-generated commit messages for staged git changes, with commit and push.
"""

__version__ = "1.0.0"

# Conventional commit types - used by the prompts and the terminal colours
COMMIT_TYPES = {
    'feat': 'A new feature or capability',
    'fix': 'A bug fix',
    'refactor': 'Code restructuring without behavior change',
    'chore': 'Maintenance tasks, dependencies, tooling',
    'docs': 'Documentation only changes',
    'test': 'Adding or updating tests',
    'style': 'Formatting, whitespace, no code change',
    'perf': 'Performance improvement',
    'ci': 'CI/CD configuration changes',
    'build': 'Build system or external dependency changes',
}

COMMIT_TYPE_NAMES = list(COMMIT_TYPES.keys())

# Diffs longer than this are cut before being sent to a provider
DEFAULT_MAX_DIFF_LENGTH = 4000
TRUNCATION_MARKER = '\n... (truncated due to length)'
