# The MIT License (MIT)
# Copyright © 2025 Entrius
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import requests

from ghask import __version__
from ghask.classes import QueryResponse, RepositoryRef
from ghask.constants import (
    DISCUSSIONS_PAGE_SIZE,
    GITHUB_API_TIMEOUT,
    RATE_LIMIT_MIN_REMAINING,
)
from ghask.errors import ApiError
from ghask.utils.logging import logger


@dataclass
class RateLimitInfo:
    """Represents GitHub API rate limit information extracted from response headers."""

    limit: int  # Maximum requests allowed per hour
    remaining: int  # Requests remaining in current window
    reset_timestamp: int  # Unix timestamp when the rate limit resets
    used: int  # Requests used in current window

    @property
    def is_exceeded(self) -> bool:
        """Check if rate limit has been exceeded."""
        return self.remaining == 0

    @property
    def seconds_until_reset(self) -> int:
        """Calculate seconds until rate limit resets."""
        current_time = int(time.time())
        return max(0, self.reset_timestamp - current_time)

    def __str__(self) -> str:
        return f"RateLimit(remaining={self.remaining}/{self.limit}, used={self.used}, resets_in={self.seconds_until_reset}s)"


def parse_rate_limit_headers(response: requests.Response) -> Optional[RateLimitInfo]:
    """
    Parse GitHub API rate limit information from response headers.

    Args:
        response: The HTTP response from GitHub API

    Returns:
        RateLimitInfo object if headers are present, None otherwise
    """
    headers = response.headers

    try:
        limit = int(headers.get('X-RateLimit-Limit', 0))
        remaining = int(headers.get('X-RateLimit-Remaining', 0))
        reset_timestamp = int(headers.get('X-RateLimit-Reset', 0))
        used = int(headers.get('X-RateLimit-Used', 0))

        if limit == 0 and reset_timestamp == 0:
            return None

        return RateLimitInfo(
            limit=limit,
            remaining=remaining,
            reset_timestamp=reset_timestamp,
            used=used,
        )
    except (ValueError, TypeError) as e:
        logger.debug(f"Could not parse rate limit headers: {e}")
        return None


def is_rate_limited(response: requests.Response) -> Tuple[bool, Optional[int]]:
    """
    Check if a response indicates rate limiting.

    Args:
        response: The HTTP response from GitHub API

    Returns:
        Tuple of (is_rate_limited, seconds_until_reset)
        - seconds_until_reset is None when the response carries no reset header
    """
    if response.status_code not in (403, 429):
        return (False, None)

    rate_limit_info = parse_rate_limit_headers(response)
    if rate_limit_info and rate_limit_info.is_exceeded:
        return (True, rate_limit_info.seconds_until_reset)

    response_text = (response.text or '').lower()
    if 'rate limit' in response_text:
        reset_header = response.headers.get('X-RateLimit-Reset')
        if reset_header:
            try:
                return (True, max(0, int(reset_header) - int(time.time())))
            except ValueError:
                pass
        return (True, None)

    return (False, None)


def check_preemptive_rate_limit(response: requests.Response) -> None:
    """
    Log a warning when the remaining request quota is running low.

    Args:
        response: The HTTP response from GitHub API
    """
    rate_limit_info = parse_rate_limit_headers(response)

    if rate_limit_info:
        if rate_limit_info.remaining <= RATE_LIMIT_MIN_REMAINING:
            logger.warning(
                f"Approaching GitHub API rate limit: {rate_limit_info.remaining} requests remaining, "
                f"resets in {rate_limit_info.seconds_until_reset}s"
            )
        else:
            logger.debug(f"GitHub API {rate_limit_info}")


# discussions lookup for a single repository
QUERY = """
    query($owner: String!, $name: String!, $limit: Int!) {
      repository(owner: $owner, name: $name) {
        hasDiscussionsEnabled
        discussions(first: $limit) {
          edges {
            node {
              title
              body
              url
            }
          }
        }
      }
    }
"""


def make_headers(token: str) -> Dict[str, str]:
    """Build standard GitHub HTTP headers for a token.

    Args:
        token (str): GitHub token
    Returns:
        Dict[str, str]: Mapping of HTTP header names to values.
    """
    return {
        'Authorization': f'Bearer {token}',
        'Content-Type': 'application/json',
        'User-Agent': f'gh-ask/{__version__}',
    }


def build_discussion_query(repo: RepositoryRef) -> Dict[str, Any]:
    """GraphQL payload asking for the enablement flag and the first page of discussions."""
    return {
        'query': QUERY,
        'variables': {
            'owner': repo.owner,
            'name': repo.name,
            'limit': DISCUSSIONS_PAGE_SIZE,
        },
    }


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return (response.text or '').strip() or response.reason or 'unknown error'
    if isinstance(body, dict) and body.get('message'):
        return body['message']
    return (response.text or '').strip()


def fetch_discussions(repo: RepositoryRef, token: str, timeout: int = GITHUB_API_TIMEOUT) -> QueryResponse:
    """
    Fetch the first page of discussions for a repository in one GraphQL request.

    No retry is attempted: any failure is reported to the caller as is.

    Args:
        repo (RepositoryRef): Repository to query
        token (str): GitHub token
        timeout (int): Request timeout in seconds

    Returns:
        QueryResponse: Enablement flag and discussions in API order

    Raises:
        ApiError: On transport, HTTP, authentication or GraphQL errors
    """
    endpoint = repo.graphql_url
    logger.debug(f"POST {endpoint} for {repo.full_name}")

    try:
        response = requests.post(
            endpoint,
            headers=make_headers(token),
            json=build_discussion_query(repo),
            timeout=timeout,
        )
    except requests.exceptions.RequestException as e:
        raise ApiError(str(e)) from e

    rate_limited, seconds_until_reset = is_rate_limited(response)
    if rate_limited:
        reset_str = f', resets in {seconds_until_reset}s' if seconds_until_reset is not None else ''
        raise ApiError(f'GitHub API rate limit exceeded{reset_str}')

    if response.status_code == 401:
        raise ApiError(f'HTTP 401: {_error_message(response)} (check your GitHub token)')
    if response.status_code != 200:
        raise ApiError(f'HTTP {response.status_code}: {_error_message(response)}')

    check_preemptive_rate_limit(response)

    try:
        payload = response.json()
    except ValueError as e:
        raise ApiError(f'invalid JSON in GraphQL response: {e}') from e

    errors = payload.get('errors') if isinstance(payload, dict) else None
    if errors:
        messages = [err.get('message', str(err)) if isinstance(err, dict) else str(err) for err in errors]
        raise ApiError('GraphQL: ' + ', '.join(messages))

    result = QueryResponse.from_graphql(payload.get('data') if isinstance(payload, dict) else None)
    if result is None:
        raise ApiError(f"Could not resolve to a Repository with the name '{repo.full_name}'.")

    logger.debug(f"Fetched {len(result.discussions)} discussions from {repo.full_name}")
    return result
