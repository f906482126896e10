# The MIT License (MIT)
# Copyright © 2025 Entrius

"""Error types raised along the resolve -> fetch -> filter -> present flow."""


class GhAskError(Exception):
    """Base class for every failure that aborts a gh-ask run."""


class ConfigError(GhAskError):
    """Bad or missing arguments, malformed repository, or no repository context."""


class ApiError(GhAskError):
    """Transport, authentication or query failure talking to the GitHub API."""


class RenderError(GhAskError):
    """Failure writing output, evaluating a jq expression or launching a browser."""
