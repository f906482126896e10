# The MIT License (MIT)
# Copyright © 2025 Entrius

# =============================================================================
# General
# =============================================================================
PROG_NAME = 'gh-ask'

# =============================================================================
# GitHub API
# =============================================================================
DEFAULT_GITHUB_HOST = 'github.com'
BASE_GITHUB_API_URL = 'https://api.github.com'
GITHUB_API_TIMEOUT = 30  # seconds
DISCUSSIONS_PAGE_SIZE = 100

# =============================================================================
# Rate Limit Reporting
# =============================================================================
RATE_LIMIT_MIN_REMAINING = 10  # Remaining requests below which a warning is logged

# =============================================================================
# Output
# =============================================================================
TABLE_MAX_WIDTH = 100
JSON_INDENT = 1
NO_MATCHES_MESSAGE = 'No matching discussion threads found :('
SEARCH_BANNER = "Searching discussions in '{repo}' for '{term}'"
