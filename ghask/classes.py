# The MIT License (MIT)
# Copyright © 2025 Entrius

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from ghask.constants import BASE_GITHUB_API_URL, DEFAULT_GITHUB_HOST


@dataclass(frozen=True)
class Discussion:
    """A single discussion thread as reported by the GraphQL API"""

    title: str
    body: str
    url: str

    @classmethod
    def from_node(cls, node: Dict[str, Any]) -> 'Discussion':
        return cls(
            title=node.get('title') or '',
            body=node.get('body') or '',
            url=node.get('url') or '',
        )

    def to_dict(self) -> Dict[str, str]:
        return {'Title': self.title, 'url': self.url, 'Body': self.body}


@dataclass(frozen=True)
class RepositoryRef:
    """Repository information"""

    owner: str
    name: str
    host: str = DEFAULT_GITHUB_HOST

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @property
    def graphql_url(self) -> str:
        """GraphQL endpoint for the repository's host (github.com or an Enterprise server)."""
        if self.host.lower() == DEFAULT_GITHUB_HOST:
            return f'{BASE_GITHUB_API_URL}/graphql'
        return f'https://{self.host}/api/graphql'

    def __str__(self) -> str:
        return self.full_name


@dataclass(frozen=True)
class QueryResponse:
    """Repository discussions payload: enablement flag plus the first page of threads"""

    has_discussions_enabled: bool
    discussions: Tuple[Discussion, ...] = ()

    @classmethod
    def from_graphql(cls, data: Dict[str, Any]) -> Optional['QueryResponse']:
        """Build from the ``data`` object of a GraphQL response.

        Returns None when the repository node is missing.
        """
        repository = (data or {}).get('repository')
        if repository is None:
            return None

        edges = (repository.get('discussions') or {}).get('edges') or []
        discussions = tuple(Discussion.from_node(edge.get('node') or {}) for edge in edges if edge)
        return cls(
            has_discussions_enabled=bool(repository.get('hasDiscussionsEnabled')),
            discussions=discussions,
        )


@dataclass(frozen=True)
class RunConfiguration:
    """Parsed command-line options for one gh-ask invocation"""

    search_term: str
    json_output: bool = False
    jq_expression: str = ''
    lucky: bool = False
    repo_override: str = ''
    verbose: bool = field(default=False, compare=False)
