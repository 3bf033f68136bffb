"""Release tag classification and previous-release resolution.

Stable and pre-release runs keep separate tag lineages so that a test
pre-release never becomes the baseline of a production release (and vice
versa). A tag belongs to the pre-release lineage when its first pre-release
identifier is the channel pre-release runs publish under (``beta`` by
default), or when any identifier is the marker component (``pre``)::

    v1.2.0          stable
    v1.2.0-rc.1     stable (unrelated pre-release, unless strict)
    v1.3.0-beta.0   pre-release (channel)
    v1.3.0-pre.0    pre-release (marker)
    latest          neither
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from release_tagger.core.policy import ReleasePolicy
from release_tagger.core.version import DEFAULT_PRERELEASE_CHANNEL, parse_version
from release_tagger.exceptions import VersionError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from semver import Version

    from release_tagger.vcs.models import Tag

DEFAULT_PRERELEASE_MARKER = "pre"

_GIT_TAG_REF_RE = re.compile(r"^(refs/)?tags/(.*)$")


@dataclass(frozen=True, slots=True)
class TagRules:
    """Rules deciding which tags belong to which lineage.

    Attributes:
        prerelease_marker: Pre-release identifier marking the pre-release lineage
        channel: Channel pre-release runs publish under; tags whose first
            pre-release identifier is the channel belong to the pre-release lineage
        stable_allows_prerelease: Accept tags with unrelated pre-release
            identifiers (``1.2.0-rc.1``) into the stable lineage
    """

    prerelease_marker: str = DEFAULT_PRERELEASE_MARKER
    channel: str = DEFAULT_PRERELEASE_CHANNEL
    stable_allows_prerelease: bool = True


@dataclass(frozen=True, slots=True)
class TagVersion:
    """A tag together with the version it was classified as."""

    tag: Tag
    version: Version


def classify_tag(
    name: str,
    policy: ReleasePolicy,
    rules: TagRules | None = None,
) -> Version | None:
    """Classify a tag name under a release policy.

    Args:
        name: Tag name, e.g. ``"v1.2.0"``
        policy: Lineage the tag must belong to
        rules: Lineage rules (defaults to :class:`TagRules`)

    Returns:
        The tag's version, or None if it is not a release tag under ``policy``
    """
    rules = rules or TagRules()

    try:
        version = parse_version(name)
    except VersionError:
        return None

    identifiers = version.prerelease.split(".") if version.prerelease else []
    prerelease_lineage = rules.prerelease_marker in identifiers or (
        bool(identifiers) and identifiers[0] == rules.channel
    )

    if policy is ReleasePolicy.PRERELEASE:
        return version if prerelease_lineage else None

    if prerelease_lineage:
        return None
    if identifiers and not rules.stable_allows_prerelease:
        return None
    return version


def find_release_tags(
    tags: Iterable[Tag],
    policy: ReleasePolicy,
    rules: TagRules | None = None,
) -> list[TagVersion]:
    """Return the release tags valid under ``policy``, highest version first.

    Tags with equal versions keep their input order.
    """
    classified = []
    for tag in tags:
        version = classify_tag(tag.name, policy, rules)
        if version is not None:
            classified.append(TagVersion(tag=tag, version=version))

    return sorted(classified, key=lambda tv: tv.version, reverse=True)


def resolve_previous_tag(
    tags: Iterable[Tag],
    policy: ReleasePolicy,
    rules: TagRules | None = None,
) -> Tag | None:
    """Select the previous release tag.

    Args:
        tags: All tags of the repository
        policy: Lineage to search
        rules: Lineage rules

    Returns:
        The tag with the highest version, or None when this is the first release
    """
    release_tags = find_release_tags(tags, policy, rules)
    if not release_tags:
        return None
    return release_tags[0].tag


def parse_git_tag(ref: str) -> str:
    """Extract the tag name from a ref like ``refs/tags/v1.0.0``.

    Returns an empty string when the ref does not point at a tag.
    """
    match = _GIT_TAG_REF_RE.match(ref)
    if not match or not match.group(2):
        return ""
    return match.group(2)
