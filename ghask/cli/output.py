# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Result presentation: table, JSON (optionally through jq) or browser.
"""

import json
import shlex
import subprocess
from typing import Callable, List, Optional, Sequence

import click
import jq
from rich.console import Console
from rich.json import JSON
from rich.text import Text

from ghask.classes import Discussion, RepositoryRef, RunConfiguration
from ghask.cli.tables import DEFAULT_TABLE_THEME, build_discussion_table
from ghask.constants import JSON_INDENT, NO_MATCHES_MESSAGE, SEARCH_BANNER, TABLE_MAX_WIDTH
from ghask.errors import RenderError
from ghask.utils.logging import logger


class OutputSink:
    """stdout/stderr pair with knowledge of whether stdout is a terminal."""

    def __init__(self, console: Optional[Console] = None, err_console: Optional[Console] = None):
        self.console = console or Console(highlight=False)
        self.err_console = err_console or Console(stderr=True, highlight=False)

    @property
    def is_interactive(self) -> bool:
        return self.console.is_terminal

    def write(self, text: str) -> None:
        try:
            self.console.file.write(text)
            self.console.file.flush()
        except OSError as e:
            raise RenderError(f'could not write output: {e}') from e

    def write_line(self, text: str = '') -> None:
        self.write(text + '\n')

    def print(self, renderable, **kwargs) -> None:
        try:
            self.console.print(renderable, **kwargs)
        except OSError as e:
            raise RenderError(f'could not write output: {e}') from e

    def error(self, message: str) -> None:
        self.err_console.print(Text(message))


def serialize_discussions(discussions: Sequence[Discussion]) -> str:
    """JSON array of {Title, url, Body} objects."""
    return json.dumps([d.to_dict() for d in discussions], ensure_ascii=False)


def evaluate_jq(buffer: str, expression: str, sink: OutputSink) -> None:
    """Run ``expression`` over ``buffer``.

    Strings are written raw, null as an empty line, other values as compact JSON.
    """
    try:
        results = jq.compile(expression).input_text(buffer).all()
    except ValueError as e:
        raise RenderError(f'jq: {e}') from e

    for value in results:
        if value is None:
            sink.write_line()
        elif isinstance(value, str):
            sink.write_line(value)
        else:
            sink.write_line(json.dumps(value, ensure_ascii=False, separators=(',', ':')))


def render_json(discussions: Sequence[Discussion], jq_expression: str, sink: OutputSink) -> None:
    buffer = serialize_discussions(discussions)

    if jq_expression:
        evaluate_jq(buffer, jq_expression, sink)
        return

    if sink.is_interactive:
        sink.print(JSON(buffer, indent=JSON_INDENT, ensure_ascii=False), soft_wrap=True)
    else:
        sink.write_line(json.dumps(json.loads(buffer), indent=JSON_INDENT, ensure_ascii=False))


def render_table(
    discussions: Sequence[Discussion],
    repo: RepositoryRef,
    term: str,
    sink: OutputSink,
    theme: str = DEFAULT_TABLE_THEME,
) -> None:
    """Banner plus a width-limited table on a terminal, tab-separated rows otherwise.

    A blank line always precedes the rows.
    """
    if not sink.is_interactive:
        sink.write_line()
        for discussion in discussions:
            title = ' '.join(discussion.title.split())
            sink.write_line(f'{title}\t{discussion.url}')
        return

    sink.print(Text(SEARCH_BANNER.format(repo=f'{repo.owner}/{repo.name}', term=term)))
    sink.write_line()
    width = min(sink.console.width, TABLE_MAX_WIDTH)
    sink.print(build_discussion_table(discussions, theme=theme, width=width), width=width)


def open_in_browser(url: str, browser_command: str = '', launcher: Optional[Callable[[str], int]] = None) -> None:
    """Open ``url`` with ``browser_command`` if configured, else the platform default."""
    if browser_command:
        args = shlex.split(browser_command) + [url]
        logger.debug(f'Launching browser: {args}')
        try:
            returncode = subprocess.run(args).returncode
        except OSError as e:
            raise RenderError(f'could not launch browser {args[0]!r}: {e}') from e
    else:
        logger.debug(f'Opening {url} with the default browser')
        returncode = (launcher or click.launch)(url)

    if returncode != 0:
        raise RenderError(f'browser exited with status {returncode} opening {url}')


def present_matches(
    matches: List[Discussion],
    config: RunConfiguration,
    repo: RepositoryRef,
    sink: OutputSink,
    browser_command: str = '',
    theme: str = DEFAULT_TABLE_THEME,
    launcher: Optional[Callable[[str], int]] = None,
) -> None:
    """Dispatch to exactly one of lucky, JSON or table output."""
    if not matches:
        sink.error(NO_MATCHES_MESSAGE)
        return

    if config.lucky:
        open_in_browser(matches[0].url, browser_command, launcher)
        return

    if config.json_output:
        render_json(matches, config.jq_expression, sink)
        return

    render_table(matches, repo, config.search_term, sink, theme=theme)
