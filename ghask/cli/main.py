# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
gh-ask CLI - Main entry point

Usage:
    gh-ask [--json] [--jq EXPR] [--lucky] [--repo OWNER/NAME] TERM...
"""

from typing import Optional

import click

from ghask import __version__
from ghask.classes import RunConfiguration
from ghask.cli.helpers import (
    CommandFailed,
    get_browser_command,
    get_github_host,
    get_github_token,
    load_config,
    resolve_run_configuration,
)
from ghask.cli.output import OutputSink, present_matches
from ghask.cli.tables import DEFAULT_TABLE_THEME
from ghask.constants import PROG_NAME
from ghask.errors import ApiError, ConfigError, GhAskError
from ghask.search import ensure_discussions_enabled, find_matching_discussions
from ghask.utils.github_api_tools import fetch_discussions
from ghask.utils.logging import logger, setup_logging
from ghask.utils.repository import GitRemoteContext, RepositoryContextProvider, resolve_repository


def run_search(
    config: RunConfiguration,
    provider: Optional[RepositoryContextProvider] = None,
    sink: Optional[OutputSink] = None,
) -> None:
    """Resolve the repository, fetch its discussions, filter and present the matches."""
    settings = load_config()
    host = get_github_host(settings)
    provider = provider or GitRemoteContext(default_host=host)
    sink = sink or OutputSink()

    try:
        repo = resolve_repository(config.repo_override, provider, default_host=host)
    except ConfigError as e:
        raise ConfigError(f'could not determine repository: {e}') from e
    logger.debug(f'Searching {repo.host}/{repo.full_name} for {config.search_term!r}')

    token = get_github_token(repo.host, settings)

    try:
        response = fetch_discussions(repo, token)
    except ApiError as e:
        raise ApiError(f'failed to talk to the GitHub API: {e}') from e

    ensure_discussions_enabled(response, repo)

    matches = find_matching_discussions(response, config.search_term)
    logger.debug(f'{len(matches)} of {len(response.discussions)} discussions match')

    present_matches(
        matches,
        config,
        repo,
        sink,
        browser_command=get_browser_command(settings),
        theme=settings.get('table_theme') or DEFAULT_TABLE_THEME,
    )


@click.command(name=PROG_NAME, context_settings={'help_option_names': ['-h', '--help']})
@click.option('--json', 'json_output', is_flag=True, help='Output JSON')
@click.option('--jq', 'jq_expression', default='', metavar='EXPR', help='Process JSON output with a jq expression')
@click.option('--lucky', is_flag=True, help='Open the first matching result in a web browser')
@click.option(
    '--repo',
    'repo_override',
    default='',
    metavar='OWNER/NAME',
    help='Specify a repository. If omitted, uses current repository',
)
@click.option('--verbose', '-v', is_flag=True, help='Show debug output')
@click.argument('terms', nargs=-1)
@click.version_option(version=__version__, prog_name=PROG_NAME)
def cli(json_output: bool, jq_expression: str, lucky: bool, repo_override: str, verbose: bool, terms):
    """Search a repository's discussions for TERM.

    All positional arguments are joined with spaces into one search term,
    matched literally (case-sensitive) against each discussion's body and title.

    \b
    Examples:
        gh-ask crash on save
        gh-ask --repo cli/cli --json --jq '.[].url' extension
        gh-ask --lucky "release notes"
    """
    setup_logging(verbose)

    try:
        config = resolve_run_configuration(
            terms,
            json_output=json_output,
            jq_expression=jq_expression,
            lucky=lucky,
            repo_override=repo_override,
            verbose=verbose,
        )
    except ConfigError as e:
        raise CommandFailed(f'failed to parse flags: {e}')

    try:
        run_search(config)
    except GhAskError as e:
        raise CommandFailed(str(e))


def main():
    """Main entry point for the CLI"""
    cli()


if __name__ == '__main__':
    main()
