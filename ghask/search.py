# The MIT License (MIT)
# Copyright © 2025 Entrius

from typing import List

from ghask.classes import Discussion, QueryResponse, RepositoryRef
from ghask.errors import ApiError


def ensure_discussions_enabled(response: QueryResponse, repo: RepositoryRef) -> None:
    """Raise ApiError naming the repository when discussions are turned off."""
    if not response.has_discussions_enabled:
        raise ApiError(f'{repo.owner}/{repo.name} does not have discussions enabled')


def find_matching_discussions(response: QueryResponse, term: str) -> List[Discussion]:
    """Discussions whose body followed by title contains ``term``, in fetch order.

    Literal, case-sensitive match. The body comes first, so a term that spans
    the end of the body and the start of the title also matches.
    """
    return [d for d in response.discussions if term in d.body + d.title]
