# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
gh-ask CLI

Usage:
    gh-ask TERM...                    # Table of matching discussions
    gh-ask --json TERM...             # JSON array of {Title, url, Body}
    gh-ask --json --jq EXPR TERM...   # JSON filtered through jq
    gh-ask --lucky TERM...            # Open the first match in a browser
"""

from .main import cli, run_search

__all__ = ['cli', 'run_search']
