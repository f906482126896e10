# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Tests for result presentation.

Covers: OutputSink, table rendering (terminal and piped), JSON rendering,
jq evaluation, browser launching and present_matches dispatch.
"""

import io
import json
from unittest.mock import Mock, patch

import pytest
from rich.console import Console

from ghask.classes import Discussion, RunConfiguration
from ghask.cli.output import (
    OutputSink,
    evaluate_jq,
    open_in_browser,
    present_matches,
    render_json,
    render_table,
)
from ghask.cli.tables import build_discussion_table
from ghask.errors import RenderError


class _Capture:
    def __init__(self, interactive):
        self.out = io.StringIO()
        self.err = io.StringIO()
        self.sink = OutputSink(
            console=Console(file=self.out, force_terminal=interactive, color_system=None, width=120),
            err_console=Console(file=self.err, force_terminal=False, width=120),
        )


@pytest.fixture
def piped():
    return _Capture(interactive=False)


@pytest.fixture
def terminal():
    return _Capture(interactive=True)


@pytest.fixture
def bugs(sample_discussions):
    return [sample_discussions[0], sample_discussions[2]]


# ============================================================================
# OutputSink
# ============================================================================


class TestOutputSink:
    def test_interactive_flag(self, piped, terminal):
        assert piped.sink.is_interactive is False
        assert terminal.sink.is_interactive is True

    def test_error_goes_to_err_console(self, piped):
        piped.sink.error('[red]oops[/red]')

        assert piped.err.getvalue() == '[red]oops[/red]\n'
        assert piped.out.getvalue() == ''

    def test_write_failure_is_render_error(self):
        class BrokenPipe(io.StringIO):
            def write(self, text):
                raise BrokenPipeError('pipe closed')

        sink = OutputSink(console=Console(file=BrokenPipe()))

        with pytest.raises(RenderError, match='could not write output'):
            sink.write_line('x')


# ============================================================================
# Table
# ============================================================================


class TestRenderTable:
    def test_piped_is_tab_separated(self, piped, bugs, repo):
        render_table(bugs, repo, 'Bug', piped.sink)

        assert piped.out.getvalue() == (
            '\n'
            'Bug: crash on save\thttps://github.com/octo/widgets/discussions/1\n'
            'Bug: typo in docs\thttps://github.com/octo/widgets/discussions/3\n'
        )

    def test_piped_has_no_banner(self, piped, bugs, repo):
        render_table(bugs, repo, 'Bug', piped.sink)

        assert 'Searching discussions' not in piped.out.getvalue()

    def test_piped_collapses_newlines_in_title(self, piped, repo):
        render_table([Discussion(title='two\nlines', body='', url='u')], repo, 'two', piped.sink)

        assert piped.out.getvalue() == '\ntwo lines\tu\n'

    def test_terminal_banner_and_rows(self, terminal, bugs, repo):
        render_table(bugs, repo, 'Bug', terminal.sink)

        output = terminal.out.getvalue()
        lines = output.splitlines()
        assert lines[0] == "Searching discussions in 'octo/widgets' for 'Bug'"
        assert lines[1] == ''
        assert 'Bug: crash on save' in output
        assert 'https://github.com/octo/widgets/discussions/3' in output

    def test_terminal_width_is_capped(self, terminal, repo):
        long_title = 'x' * 300
        render_table([Discussion(title=long_title, body='', url='https://github.com/o/r/discussions/9')], repo, 'x', terminal.sink)

        table_lines = terminal.out.getvalue().splitlines()[2:]
        assert all(len(line) <= 100 for line in table_lines)
        assert any('https://github.com/o/r/discussions/9' in line for line in table_lines)

    def test_long_url_is_never_truncated(self, terminal, repo):
        url = 'https://github.com/some-organization/a-long-repository-name/discussions/123456'
        render_table([Discussion(title='t' * 200, body='', url=url)], repo, 't', terminal.sink, theme='square')

        table_lines = terminal.out.getvalue().splitlines()[2:]
        assert all(len(line) <= 100 for line in table_lines)
        assert any(url in line for line in table_lines)

    def test_markup_in_title_is_literal(self):
        table = build_discussion_table([Discussion(title='[bold]x[/bold]', body='', url='u')])
        out = io.StringIO()
        Console(file=out, width=80).print(table)

        assert '[bold]x[/bold]' in out.getvalue()


# ============================================================================
# JSON / jq
# ============================================================================


class TestRenderJson:
    def test_piped_pretty_print_one_space_indent(self, piped, bugs):
        render_json(bugs, '', piped.sink)

        output = piped.out.getvalue()
        assert output.startswith('[\n {\n  "Title": "Bug: crash on save",\n')
        assert json.loads(output) == [d.to_dict() for d in bugs]

    def test_terminal_output_is_valid_json(self, terminal, bugs):
        render_json(bugs, '', terminal.sink)

        assert json.loads(terminal.out.getvalue()) == [d.to_dict() for d in bugs]

    def test_jq_string_results_are_raw(self, piped, bugs):
        render_json(bugs, '.[].Title', piped.sink)

        assert piped.out.getvalue() == 'Bug: crash on save\nBug: typo in docs\n'

    def test_jq_non_string_results_are_compact_json(self, piped, bugs):
        render_json(bugs, 'length, (.[0] | {Title})', piped.sink)

        assert piped.out.getvalue() == '2\n{"Title":"Bug: crash on save"}\n'

    def test_jq_receives_serialized_array_and_expression(self, piped, bugs):
        with patch('ghask.cli.output.jq') as mock_jq:
            mock_jq.compile.return_value.input_text.return_value.all.return_value = ['result']
            render_json(bugs, '.[0].title', piped.sink)

        mock_jq.compile.assert_called_once_with('.[0].title')
        buffer = mock_jq.compile.return_value.input_text.call_args[0][0]
        assert json.loads(buffer) == [d.to_dict() for d in bugs]
        assert piped.out.getvalue() == 'result\n'

    def test_jq_null_result_is_empty_line(self, piped, bugs):
        render_json(bugs, '.[0].missing', piped.sink)

        assert piped.out.getvalue() == '\n'

    def test_jq_compile_error(self, piped, bugs):
        with pytest.raises(RenderError, match='^jq: '):
            evaluate_jq('[]', '.[', piped.sink)

    def test_jq_runtime_error(self, piped):
        with pytest.raises(RenderError):
            evaluate_jq('[1]', '.[0].title', piped.sink)


# ============================================================================
# Browser
# ============================================================================


class TestOpenInBrowser:
    def test_default_launcher(self):
        launcher = Mock(return_value=0)

        open_in_browser('https://example.com/d/1', launcher=launcher)

        launcher.assert_called_once_with('https://example.com/d/1')

    def test_default_uses_click_launch(self):
        with patch('ghask.cli.output.click.launch', return_value=0) as mock_launch:
            open_in_browser('https://example.com/d/1')

        mock_launch.assert_called_once_with('https://example.com/d/1')

    def test_launcher_failure(self):
        with pytest.raises(RenderError, match='status 3'):
            open_in_browser('u', launcher=Mock(return_value=3))

    @patch('ghask.cli.output.subprocess.run')
    def test_browser_command(self, mock_run):
        mock_run.return_value = Mock(returncode=0)
        launcher = Mock()

        open_in_browser('https://example.com/d/1', 'firefox --new-tab', launcher=launcher)

        mock_run.assert_called_once_with(['firefox', '--new-tab', 'https://example.com/d/1'])
        launcher.assert_not_called()

    @patch('ghask.cli.output.subprocess.run', side_effect=FileNotFoundError('no such file'))
    def test_browser_command_missing(self, mock_run):
        with pytest.raises(RenderError, match="could not launch browser 'nobrowser'"):
            open_in_browser('u', 'nobrowser')


# ============================================================================
# present_matches
# ============================================================================


class TestPresentMatches:
    def test_no_matches(self, piped, repo):
        launcher = Mock()

        present_matches([], RunConfiguration(search_term='x', lucky=True), repo, piped.sink, launcher=launcher)

        assert piped.err.getvalue() == 'No matching discussion threads found :(\n'
        assert piped.out.getvalue() == ''
        launcher.assert_not_called()

    def test_lucky_opens_first_only(self, piped, bugs, repo):
        launcher = Mock(return_value=0)

        present_matches(bugs, RunConfiguration(search_term='Bug', lucky=True, json_output=True), repo, piped.sink, launcher=launcher)

        launcher.assert_called_once_with('https://github.com/octo/widgets/discussions/1')
        assert piped.out.getvalue() == ''

    def test_json_mode(self, piped, bugs, repo):
        present_matches(bugs, RunConfiguration(search_term='Bug', json_output=True), repo, piped.sink)

        assert len(json.loads(piped.out.getvalue())) == 2

    def test_table_mode(self, piped, bugs, repo):
        present_matches(bugs, RunConfiguration(search_term='Bug'), repo, piped.sink)

        assert piped.out.getvalue().splitlines() == [
            '',
            'Bug: crash on save\thttps://github.com/octo/widgets/discussions/1',
            'Bug: typo in docs\thttps://github.com/octo/widgets/discussions/3',
        ]
