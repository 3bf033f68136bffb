"""Semantic version parsing and incrementing.

Versions are :class:`semver.Version` values, whose ordering follows
semver 2.0 precedence: a release sorts above all of its pre-releases and
build metadata is ignored.

Increments follow the usual ``npm version`` semantics:

- ``1.2.3`` + minor          -> ``1.3.0``
- ``1.3.0-beta.2`` + minor   -> ``1.3.0`` (the pre-release is promoted)
- ``1.2.3`` + preminor       -> ``1.3.0-beta.0``
- ``1.3.0-beta.0`` + preminor -> ``1.3.0-beta.1``
"""

from __future__ import annotations

from enum import StrEnum

from semver import Version

from release_tagger.core.policy import ReleasePolicy
from release_tagger.exceptions import VersionError, VersionSeedError

DEFAULT_PRERELEASE_CHANNEL = "beta"


class BumpType(StrEnum):
    """Which version component a release increments."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"
    PREMAJOR = "premajor"
    PREMINOR = "preminor"
    PREPATCH = "prepatch"

    @property
    def is_prerelease(self) -> bool:
        return self in _PRE_TO_BASE

    @property
    def base(self) -> BumpType:
        """The stable bump behind a pre-release bump (preminor -> minor)."""
        return _PRE_TO_BASE.get(self, self)

    def to_prerelease(self) -> BumpType:
        """The pre-release variant of this bump (minor -> preminor)."""
        return _BASE_TO_PRE[self.base]


_PRE_TO_BASE: dict[BumpType, BumpType] = {
    BumpType.PREMAJOR: BumpType.MAJOR,
    BumpType.PREMINOR: BumpType.MINOR,
    BumpType.PREPATCH: BumpType.PATCH,
}
_BASE_TO_PRE: dict[BumpType, BumpType] = {base: pre for pre, base in _PRE_TO_BASE.items()}


def parse_version(text: str) -> Version:
    """Parse a version string, tolerating a leading ``v`` or ``=``.

    Args:
        text: Version or tag name such as ``"v1.2.3"`` or ``"1.3.0-beta.1"``

    Returns:
        Parsed version

    Raises:
        VersionError: If the text is not a full MAJOR.MINOR.PATCH version
    """
    candidate = text.strip().lstrip("=")
    if candidate[:1] in ("v", "V"):
        candidate = candidate[1:]

    try:
        return Version.parse(candidate)
    except (ValueError, TypeError) as e:
        raise VersionError(f"Invalid semantic version: {text!r}") from e


def _base_satisfies(version: Version, bump: BumpType) -> bool:
    """Whether a pre-release's base version already carries ``bump``.

    ``1.3.0-beta.0`` already is a minor step (patch is zero), so another
    minor bump stays on ``1.3.0``. A patch bump is always satisfied.
    """
    bump = bump.base
    if bump is BumpType.MAJOR:
        return version.minor == 0 and version.patch == 0
    if bump is BumpType.MINOR:
        return version.patch == 0
    return True


def _increment_stable(version: Version, bump: BumpType) -> Version:
    if version.prerelease and _base_satisfies(version, bump):
        return version.finalize_version()

    bump = bump.base
    if bump is BumpType.MAJOR:
        return Version(version.major + 1, 0, 0)
    if bump is BumpType.MINOR:
        return Version(version.major, version.minor + 1, 0)
    return Version(version.major, version.minor, version.patch + 1)


def _increment_prerelease(version: Version, bump: BumpType, channel: str) -> Version:
    parts = version.prerelease.split(".") if version.prerelease else []

    if parts and parts[0] == channel and _base_satisfies(version, bump):
        if len(parts) > 1 and parts[-1].isdigit():
            parts[-1] = str(int(parts[-1]) + 1)
        else:
            parts.append("0")
        return version.replace(prerelease=".".join(parts), build=None)

    seeded = f"{channel}.0"
    if parts and _base_satisfies(version, bump):
        candidate = version.replace(prerelease=seeded, build=None)
        # A channel that sorts below the current pre-release would go backwards.
        if candidate > version:
            return candidate

    base = _increment_stable(version.finalize_version(), bump)
    return base.replace(prerelease=seeded)


def next_version(
    previous: Version | str | None,
    bump: BumpType,
    policy: ReleasePolicy,
    *,
    channel: str = DEFAULT_PRERELEASE_CHANNEL,
    initial_version: str | None = None,
) -> str:
    """Compute the next version string.

    Args:
        previous: Version of the previous release, or None for a first release
        bump: Bump decision; stable and pre-release variants are both accepted
        policy: Stable or pre-release lineage
        channel: Pre-release channel name used under the pre-release policy
        initial_version: Seed version used when there is no previous release

    Returns:
        Next version string (e.g. ``"1.3.0"`` or ``"1.3.0-beta.0"``)

    Raises:
        VersionSeedError: If there is no previous release and no seed
        VersionError: If a version string is invalid
    """
    if previous is None:
        if not initial_version:
            raise VersionSeedError(
                "No previous release tag found and no initial version configured. "
                "Set version.initial_version in [tool.release-tagger]."
            )
        seed = parse_version(initial_version)
        if policy is ReleasePolicy.PRERELEASE and not seed.prerelease:
            seed = seed.replace(prerelease=f"{channel}.0")
        return str(seed)

    if isinstance(previous, str):
        previous = parse_version(previous)

    if policy is ReleasePolicy.PRERELEASE:
        return str(_increment_prerelease(previous, bump.to_prerelease(), channel))
    return str(_increment_stable(previous, bump.base))
