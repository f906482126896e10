# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Repository resolution: parsing OWNER/NAME style references and finding the
repository the current working directory belongs to.
"""

import os
import re
import subprocess
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple

from ghask.classes import RepositoryRef
from ghask.constants import DEFAULT_GITHUB_HOST
from ghask.errors import ConfigError
from ghask.utils.logging import logger

REPO_COMPONENT_PATTERN = re.compile(r'^[A-Za-z0-9._-]+$')
# git@github.com:owner/repo.git
SCP_REMOTE_PATTERN = re.compile(r'^(?:[\w.-]+@)?(?P<host>[\w.-]+):(?P<path>[^/].*)$')
# https://github.com/owner/repo(.git), ssh://git@github.com/owner/repo.git
URL_REMOTE_PATTERN = re.compile(r'^[a-z][a-z0-9+.-]*://(?:[^@/]+@)?(?P<host>[^/:]+)(?::\d+)?/(?P<path>.+)$')

# Preferred remote names, highest priority first
REMOTE_PRIORITY = ('upstream', 'github', 'origin')
GIT_TIMEOUT = 10


def _split_path(path: str) -> List[str]:
    path = path.strip().strip('/')
    if path.endswith('.git'):
        path = path[: -len('.git')]
    return path.split('/') if path else []


def _build_ref(owner: str, name: str, host: str, raw: str) -> RepositoryRef:
    for part in (owner, name, host):
        if not part or not REPO_COMPONENT_PATTERN.match(part):
            raise ConfigError(f'expected the "[HOST/]OWNER/REPO" format, got "{raw}"')
    return RepositoryRef(owner=owner, name=name, host=host.lower())


def parse_repository(value: str, default_host: Optional[str] = None) -> RepositoryRef:
    """Parse a repository reference.

    Accepts ``OWNER/REPO``, ``HOST/OWNER/REPO`` and repository URLs
    (``https://HOST/OWNER/REPO`` or ``git@HOST:OWNER/REPO.git``).

    Raises:
        ConfigError: If the value cannot be read as a repository.
    """
    raw = value
    value = value.strip()
    host = default_host or DEFAULT_GITHUB_HOST

    url_match = URL_REMOTE_PATTERN.match(value)
    if url_match:
        parts = _split_path(url_match.group('path'))
        if len(parts) != 2:
            raise ConfigError(f'invalid repository URL "{raw}"')
        return _build_ref(parts[0], parts[1], url_match.group('host'), raw)

    scp_match = SCP_REMOTE_PATTERN.match(value)
    if scp_match and '/' not in scp_match.group('host'):
        parts = _split_path(scp_match.group('path'))
        if len(parts) != 2:
            raise ConfigError(f'invalid repository URL "{raw}"')
        return _build_ref(parts[0], parts[1], scp_match.group('host'), raw)

    parts = value.split('/')
    if len(parts) == 2:
        return _build_ref(parts[0], parts[1], host, raw)
    if len(parts) == 3:
        return _build_ref(parts[1], parts[2], parts[0], raw)

    raise ConfigError(f'expected the "[HOST/]OWNER/REPO" format, got "{raw}"')


class RepositoryContextProvider:
    """Supplies the repository implied by the execution environment."""

    def current_repository(self) -> RepositoryRef:
        raise NotImplementedError


class StaticRepositoryContext(RepositoryContextProvider):
    """Context provider that always answers with a fixed repository (or none)."""

    def __init__(self, repository: Optional[RepositoryRef] = None):
        self.repository = repository

    def current_repository(self) -> RepositoryRef:
        if self.repository is None:
            raise ConfigError('unable to determine current repository')
        return self.repository


class GitRemoteContext(RepositoryContextProvider):
    """Resolve the current repository from ``GH_REPO`` or the local git remotes."""

    def __init__(self, cwd: Optional[Path] = None, default_host: Optional[str] = None, env: Optional[Dict] = None):
        self.cwd = cwd or Path.cwd()
        self.default_host = default_host
        self.env = os.environ if env is None else env

    @property
    def known_hosts(self) -> Set[str]:
        hosts = {DEFAULT_GITHUB_HOST}
        if self.default_host:
            hosts.add(self.default_host.lower())
        return hosts

    def list_remotes(self) -> List[Tuple[str, str]]:
        """Return (name, fetch_url) pairs from ``git remote -v``."""
        try:
            result = subprocess.run(
                ['git', 'remote', '-v'],
                capture_output=True,
                text=True,
                cwd=self.cwd,
                timeout=GIT_TIMEOUT,
            )
        except (OSError, subprocess.SubprocessError) as e:
            raise ConfigError(f'unable to run git: {e}')

        if result.returncode != 0:
            raise ConfigError('not a git repository (or any of the parent directories)')

        remotes = []
        seen = set()
        for line in result.stdout.splitlines():
            fields = line.split()
            if len(fields) < 2 or fields[0] in seen:
                continue
            if len(fields) >= 3 and fields[2] != '(fetch)':
                continue
            seen.add(fields[0])
            remotes.append((fields[0], fields[1]))
        return remotes

    def current_repository(self) -> RepositoryRef:
        override = self.env.get('GH_REPO', '')
        if override:
            logger.debug(f'Using repository from GH_REPO: {override}')
            return parse_repository(override, self.default_host)

        remotes = self.list_remotes()
        if not remotes:
            raise ConfigError('no git remotes found')

        def priority(remote: Tuple[str, str]) -> int:
            name = remote[0]
            return REMOTE_PRIORITY.index(name) if name in REMOTE_PRIORITY else len(REMOTE_PRIORITY)

        for name, url in sorted(remotes, key=priority):
            try:
                repo = parse_repository(url, self.default_host)
            except ConfigError:
                logger.debug(f'Skipping remote {name}: {url} is not a repository URL')
                continue
            if repo.host not in self.known_hosts:
                logger.debug(f'Skipping remote {name}: {repo.host} is not a known GitHub host')
                continue
            logger.debug(f'Using repository {repo.full_name} from remote {name}')
            return repo

        raise ConfigError('none of the git remotes configured for this repository point to a known GitHub host')


def resolve_repository(repo_override: str, provider: RepositoryContextProvider, default_host: Optional[str] = None) -> RepositoryRef:
    """Explicit ``--repo`` value wins; otherwise ask the context provider."""
    if not repo_override:
        return provider.current_repository()
    return parse_repository(repo_override, default_host)
