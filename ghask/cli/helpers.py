# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Shared helper functions for the gh-ask command
"""

import json
import os
import shutil
import subprocess
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

import click

from ghask.classes import RunConfiguration
from ghask.constants import DEFAULT_GITHUB_HOST, PROG_NAME
from ghask.errors import ConfigError
from ghask.utils.logging import logger

GH_AUTH_TIMEOUT = 10

# Default paths
GHASK_DIR = Path.home() / '.ghask'
CONFIG_FILE = GHASK_DIR / 'config.json'


class CommandFailed(click.ClickException):
    """ClickException reported as ``gh-ask failed: <message>`` with exit code 1."""

    exit_code = 1

    def show(self, file=None) -> None:
        click.echo(f'{PROG_NAME} failed: {self.format_message()}', file=file, err=True)


def get_config_file() -> Path:
    """Config file path, honouring GH_ASK_CONFIG_DIR."""
    config_dir = os.environ.get('GH_ASK_CONFIG_DIR')
    if config_dir:
        return Path(config_dir) / 'config.json'
    return CONFIG_FILE


def load_config() -> Dict[str, Any]:
    """
    Load configuration from ~/.ghask/config.json.

    Priority:
    1. CLI arguments (highest - handled by callers)
    2. Environment variables (handled by the getters below)
    3. ~/.ghask/config.json
    4. Defaults

    Config file format:
        {
            "token": "ghp_xxx",
            "host": "github.com",
            "browser": "firefox",
            "table_theme": "minimal"
        }

    Returns:
        Dict with all config keys, empty if the file is missing or invalid
    """
    config_file = get_config_file()
    if config_file.exists():
        try:
            with open(config_file, 'r') as f:
                config = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            logger.warning(f'Ignoring unreadable config file {config_file}: {e}')
            return {}
        if isinstance(config, dict):
            return config
        logger.warning(f'Ignoring config file {config_file}: expected a JSON object')
    return {}


def get_github_host(config: Optional[Dict[str, Any]] = None) -> str:
    """GitHub host. GH_HOST env var > config file > github.com."""
    config = load_config() if config is None else config
    return os.environ.get('GH_HOST') or config.get('host') or DEFAULT_GITHUB_HOST


def _token_from_gh_cli(host: str) -> Optional[str]:
    """Ask an installed GitHub CLI for its stored token."""
    if shutil.which('gh') is None:
        return None
    try:
        result = subprocess.run(
            ['gh', 'auth', 'token', '--hostname', host],
            capture_output=True,
            text=True,
            timeout=GH_AUTH_TIMEOUT,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug(f'gh auth token failed: {e}')
        return None
    if result.returncode != 0:
        return None
    return result.stdout.strip() or None


def get_github_token(host: str, config: Optional[Dict[str, Any]] = None) -> str:
    """
    Get a GitHub token for ``host``. Env var > config file > ``gh auth token``.

    Raises:
        ConfigError: If no token can be found
    """
    if host.lower() == DEFAULT_GITHUB_HOST:
        env_names = ('GH_TOKEN', 'GITHUB_TOKEN')
    else:
        env_names = ('GH_ENTERPRISE_TOKEN', 'GITHUB_ENTERPRISE_TOKEN')

    for name in env_names:
        if os.environ.get(name):
            logger.debug(f'Using token from {name}')
            return os.environ[name]

    config = load_config() if config is None else config
    if config.get('token'):
        logger.debug('Using token from config file')
        return config['token']

    token = _token_from_gh_cli(host)
    if token:
        logger.debug('Using token from gh auth token')
        return token

    raise ConfigError(
        f'no GitHub token found for {host}; set {env_names[0]} or run `gh auth login`'
    )


def get_browser_command(config: Optional[Dict[str, Any]] = None) -> str:
    """Browser command. GH_BROWSER > BROWSER > config file > '' (platform default)."""
    config = load_config() if config is None else config
    return os.environ.get('GH_BROWSER') or os.environ.get('BROWSER') or config.get('browser') or ''


def resolve_run_configuration(
    terms: Sequence[str],
    json_output: bool = False,
    jq_expression: str = '',
    lucky: bool = False,
    repo_override: str = '',
    verbose: bool = False,
) -> RunConfiguration:
    """Validate parsed options into a RunConfiguration.

    Raises:
        ConfigError: If no search term was given
    """
    if len(terms) < 1:
        raise ConfigError('search term required')

    if jq_expression and not json_output:
        logger.warning('--jq has no effect without --json')

    return RunConfiguration(
        search_term=' '.join(terms),
        json_output=json_output,
        jq_expression=jq_expression,
        lucky=lucky,
        repo_override=repo_override,
        verbose=verbose,
    )
