# The MIT License (MIT)
# Copyright © 2025 Entrius

"""Shared fixtures for CLI tests."""

from unittest.mock import patch

import pytest
from click.testing import CliRunner

from ghask.classes import QueryResponse


@pytest.fixture
def cli_root():
    from ghask.cli.main import cli

    return cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def authenticated(monkeypatch):
    monkeypatch.setenv('GH_TOKEN', 'test-token')


@pytest.fixture
def mock_fetch(authenticated, enabled_response):
    """Patch the network call; returns the mock so tests can inspect or reconfigure it."""
    with patch('ghask.cli.main.fetch_discussions', return_value=enabled_response) as mock:
        yield mock


@pytest.fixture
def disabled_response():
    return QueryResponse(has_discussions_enabled=False)
