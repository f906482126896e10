# The MIT License (MIT)
# Copyright © 2025 Entrius

"""Shared fixtures for gh-ask tests."""

from unittest.mock import Mock

import pytest

from ghask.classes import Discussion, QueryResponse, RepositoryRef

_AMBIENT_ENV = (
    'GH_TOKEN',
    'GITHUB_TOKEN',
    'GH_ENTERPRISE_TOKEN',
    'GITHUB_ENTERPRISE_TOKEN',
    'GH_HOST',
    'GH_REPO',
    'GH_BROWSER',
    'BROWSER',
    'FORCE_COLOR',
    'TTY_COMPATIBLE',
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep the developer's tokens, gh config and ~/.ghask out of every test."""
    for name in _AMBIENT_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv('GH_ASK_CONFIG_DIR', str(tmp_path / 'ghask-config'))
    return tmp_path


@pytest.fixture
def repo():
    return RepositoryRef(owner='octo', name='widgets')


@pytest.fixture
def sample_discussions():
    return (
        Discussion(
            title='Bug: crash on save',
            body='The editor crashes when saving large files.',
            url='https://github.com/octo/widgets/discussions/1',
        ),
        Discussion(
            title='Feature request',
            body='Please add a dark mode.',
            url='https://github.com/octo/widgets/discussions/2',
        ),
        Discussion(
            title='Bug: typo in docs',
            body='',
            url='https://github.com/octo/widgets/discussions/3',
        ),
    )


@pytest.fixture
def enabled_response(sample_discussions):
    return QueryResponse(has_discussions_enabled=True, discussions=sample_discussions)


@pytest.fixture
def graphql_payload():
    """Factory for the raw GraphQL body returned by the discussions query."""

    def _build(discussions, enabled=True):
        return {
            'data': {
                'repository': {
                    'hasDiscussionsEnabled': enabled,
                    'discussions': {
                        'edges': [{'node': {'title': d.title, 'body': d.body, 'url': d.url}} for d in discussions]
                    },
                }
            }
        }

    return _build


@pytest.fixture
def make_response():
    """Factory for requests.Response stand-ins."""

    def _build(status_code=200, payload=None, headers=None, text=''):
        response = Mock()
        response.status_code = status_code
        response.headers = headers or {}
        response.text = text
        response.reason = 'Reason'
        if payload is None:
            response.json.side_effect = ValueError('No JSON object could be decoded')
        else:
            response.json.return_value = payload
        return response

    return _build
