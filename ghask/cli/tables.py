# The MIT License (MIT)
# Copyright © 2025 Entrius

"""Reusable Rich table presets."""

from dataclasses import dataclass
from typing import Optional, Sequence

from rich import box
from rich.table import Table
from rich.text import Text

from ghask.classes import Discussion


@dataclass(frozen=True)
class TableTheme:
    box_style: box.Box
    header_style: str
    border_style: str
    show_lines: bool
    pad_edge: bool


TABLE_THEMES = {
    # Full wrapped grid
    'square': TableTheme(
        box_style=box.SQUARE,
        header_style='bold magenta',
        border_style='grey35',
        show_lines=True,
        pad_edge=True,
    ),

    # Minimal separators with a heavier header rule
    'minimal': TableTheme(
        box_style=box.MINIMAL_HEAVY_HEAD,
        header_style='bold white',
        border_style='grey50',
        show_lines=False,
        pad_edge=False,
    ),
}

DEFAULT_TABLE_THEME = 'minimal'

# Edges, separator and cell padding of a two-column table, widest theme
TABLE_CHROME_WIDTH = 8
MIN_TITLE_WIDTH = 10


def build_table(theme: str = DEFAULT_TABLE_THEME, **kwargs) -> Table:
    """Create a Rich table using a named visual theme."""
    preset = TABLE_THEMES.get(theme, TABLE_THEMES[DEFAULT_TABLE_THEME])
    params = {
        'box': preset.box_style,
        'header_style': preset.header_style,
        'border_style': preset.border_style,
        'show_lines': preset.show_lines,
        'pad_edge': preset.pad_edge,
    }
    params.update(kwargs)
    return Table(**params)


def build_discussion_table(
    discussions: Sequence[Discussion],
    theme: str = DEFAULT_TABLE_THEME,
    width: Optional[int] = None,
) -> Table:
    """Two-column (title, URL) table.

    The URL column always fits its longest URL. With ``width`` set, titles are
    truncated to whatever space remains.
    """
    url_width = max((len(d.url) for d in discussions), default=len('URL'))
    title_width = None
    if width is not None:
        title_width = max(width - url_width - TABLE_CHROME_WIDTH, MIN_TITLE_WIDTH)

    table = build_table(theme=theme, show_header=True)
    table.add_column('Title', style='green', no_wrap=True, overflow='ellipsis', max_width=title_width)
    table.add_column('URL', style='cyan', no_wrap=True, min_width=url_width)

    for discussion in discussions:
        table.add_row(Text(discussion.title), Text(discussion.url))

    return table
