"""Release policies and the environments that select them.

A policy decides which lineage of tags a release belongs to: the stable
lineage (``1.2.0``) or the pre-release lineage (``1.3.0-pre.1``). Runs are
triggered per deployment environment, and each environment maps to exactly
one policy.
"""

from __future__ import annotations

from enum import StrEnum

from release_tagger.exceptions import ConfigValidationError


class ReleasePolicy(StrEnum):
    """Versioning policy of a release run."""

    STABLE = "stable"
    PRERELEASE = "prerelease"


class Environment(StrEnum):
    """Deployment environment a release run is triggered for."""

    DEV = "dev"
    TEST = "test"
    PROD = "prod"


_ENVIRONMENT_POLICIES: dict[Environment, ReleasePolicy] = {
    Environment.DEV: ReleasePolicy.STABLE,
    Environment.TEST: ReleasePolicy.PRERELEASE,
    Environment.PROD: ReleasePolicy.STABLE,
}


def parse_environment(value: str | Environment) -> Environment:
    """Parse an environment name.

    Raises:
        ConfigValidationError: If the value is not a known environment
    """
    try:
        return Environment(str(value).strip().lower())
    except ValueError as e:
        allowed = ", ".join(env.value for env in Environment)
        raise ConfigValidationError(
            f"Unknown environment {value!r}. Expected one of: {allowed}"
        ) from e


def parse_policy(value: str | ReleasePolicy) -> ReleasePolicy:
    """Parse a policy name.

    Raises:
        ConfigValidationError: If the value is not a known policy
    """
    try:
        return ReleasePolicy(str(value).strip().lower())
    except ValueError as e:
        allowed = ", ".join(policy.value for policy in ReleasePolicy)
        raise ConfigValidationError(
            f"Unknown release policy {value!r}. Expected one of: {allowed}"
        ) from e


def policy_for_environment(environment: str | Environment) -> ReleasePolicy:
    """Map an environment to its release policy (test is the only pre-release one)."""
    return _ENVIRONMENT_POLICIES[parse_environment(environment)]
