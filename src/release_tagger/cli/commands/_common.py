"""Helpers shared by the CLI commands."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

from release_tagger.config import load_config
from release_tagger.core.policy import parse_environment
from release_tagger.exceptions import ConfigValidationError, MissingCredentialsError
from release_tagger.vcs import GitHubClient

if TYPE_CHECKING:
    from release_tagger.config.models import ReleaseTaggerConfig


def load_run_config(path: str | None, environment: str | None) -> ReleaseTaggerConfig:
    """Load configuration, applying an environment override.

    Raises:
        ConfigValidationError: If the environment or configuration is invalid
    """
    project_path = Path(path) if path else Path.cwd()
    config = load_config(project_path)

    if environment:
        config = config.model_copy(update={"environment": parse_environment(environment)})
    return config


def open_github_client(config: ReleaseTaggerConfig, repository: str | None) -> GitHubClient:
    """Create a client for ``owner/name`` or the configured repository.

    Raises:
        ConfigValidationError: If no repository is given or configured
        MissingCredentialsError: If the token environment variable is unset
    """
    owner, repo = config.github.owner, config.github.repo
    if repository:
        owner, _, repo = repository.partition("/")

    if not owner or not repo:
        raise ConfigValidationError(
            "No repository specified. Pass --repo owner/name, set GITHUB_REPOSITORY, "
            "or configure github.owner and github.repo."
        )

    token = os.environ.get(config.github.token_env)
    if not token:
        raise MissingCredentialsError(
            f"No repo token specified. Please set the {config.github.token_env} "
            "environment variable."
        )

    return GitHubClient(owner, repo, token, api_url=config.github.api_url)
