"""Tests for release tag classification and resolution."""

from __future__ import annotations

import pytest
from semver import Version

from release_tagger.core.policy import ReleasePolicy
from release_tagger.core.tags import (
    TagRules,
    classify_tag,
    find_release_tags,
    parse_git_tag,
    resolve_previous_tag,
)
from release_tagger.vcs.models import Tag

STRICT = TagRules(stable_allows_prerelease=False)


class TestClassifyTag:
    """Tests for classify_tag()."""

    def test_stable_tag(self):
        """A plain version is a stable release tag."""
        assert classify_tag("v1.2.0", ReleasePolicy.STABLE) == Version(1, 2, 0)
        assert classify_tag("1.2.0", ReleasePolicy.STABLE) == Version(1, 2, 0)

    def test_stable_tag_rejected_under_prerelease(self):
        """A tag without the marker is not a pre-release tag."""
        assert classify_tag("v1.2.0", ReleasePolicy.PRERELEASE) is None

    def test_marker_tag_is_prerelease(self):
        """A tag carrying the marker belongs to the pre-release lineage."""
        assert classify_tag("v1.3.0-pre.1", ReleasePolicy.PRERELEASE) == Version(
            1, 3, 0, prerelease="pre.1"
        )
        assert classify_tag("v1.3.0-pre.1", ReleasePolicy.STABLE) is None

    def test_marker_must_be_whole_component(self):
        """The marker only counts as a complete identifier."""
        assert classify_tag("v1.3.0-preview.1", ReleasePolicy.PRERELEASE) is None
        assert classify_tag("v1.3.0-rc.pre", ReleasePolicy.PRERELEASE) is not None

    def test_unrelated_prerelease_accepted_as_stable(self):
        """Unrelated pre-release identifiers stay in the stable pool by default."""
        assert classify_tag("v1.2.1-rc.1", ReleasePolicy.STABLE) == Version(
            1, 2, 1, prerelease="rc.1"
        )
        assert classify_tag("v1.2.1-rc.1", ReleasePolicy.PRERELEASE) is None

    def test_strict_stable_rejects_any_prerelease(self):
        """With strict rules the stable pool only holds plain releases."""
        assert classify_tag("v1.2.1-rc.1", ReleasePolicy.STABLE, STRICT) is None
        assert classify_tag("v1.2.1", ReleasePolicy.STABLE, STRICT) == Version(1, 2, 1)

    def test_channel_tag_is_prerelease(self):
        """Tags cut on the pre-release channel continue the pre-release lineage."""
        assert classify_tag("v1.3.0-beta.0", ReleasePolicy.PRERELEASE) == Version(
            1, 3, 0, prerelease="beta.0"
        )
        assert classify_tag("v1.3.0-beta.0", ReleasePolicy.STABLE) is None

    def test_channel_must_lead(self):
        """The channel only counts as the first pre-release identifier."""
        assert classify_tag("v1.3.0-rc.beta", ReleasePolicy.PRERELEASE) is None
        assert classify_tag("v1.3.0-rc.beta", ReleasePolicy.STABLE) is not None

    def test_custom_channel(self):
        """The channel comes from the rules."""
        rules = TagRules(channel="next")
        assert classify_tag("v2.0.0-next.3", ReleasePolicy.PRERELEASE, rules) is not None
        assert classify_tag("v2.0.0-next.3", ReleasePolicy.STABLE, rules) is None
        assert classify_tag("v2.0.0-beta.3", ReleasePolicy.STABLE, rules) is not None

    def test_custom_marker(self):
        """The pre-release marker is configurable."""
        rules = TagRules(prerelease_marker="beta")
        assert classify_tag("v1.3.0-beta.0", ReleasePolicy.PRERELEASE, rules) is not None
        assert classify_tag("v1.3.0-beta.0", ReleasePolicy.STABLE, rules) is None
        assert classify_tag("v1.3.0-pre.0", ReleasePolicy.STABLE, rules) is not None

    @pytest.mark.parametrize("name", ["latest", "not-a-version", "v1.3", "release-2024", ""])
    @pytest.mark.parametrize("policy", list(ReleasePolicy))
    def test_malformed_rejected(self, name: str, policy: ReleasePolicy):
        """Malformed tag names are rejected under both policies."""
        assert classify_tag(name, policy) is None

    @pytest.mark.parametrize(
        "name", ["v1.0.0", "v1.0.0-pre.0", "v1.0.0-beta.1", "v1.0.0-rc.1", "v1.0.0-pre", "junk"]
    )
    @pytest.mark.parametrize("rules", [TagRules(), STRICT])
    def test_pools_are_disjoint(self, name: str, rules: TagRules):
        """No tag belongs to both lineages."""
        stable = classify_tag(name, ReleasePolicy.STABLE, rules)
        pre = classify_tag(name, ReleasePolicy.PRERELEASE, rules)
        assert stable is None or pre is None


class TestResolvePreviousTag:
    """Tests for resolve_previous_tag()."""

    def test_empty_tag_list(self):
        """No tags means a first release."""
        assert resolve_previous_tag([], ReleasePolicy.STABLE) is None
        assert resolve_previous_tag([], ReleasePolicy.PRERELEASE) is None

    def test_all_invalid(self):
        """Only non-release tags means a first release."""
        tags = [Tag("latest"), Tag("nightly")]
        assert resolve_previous_tag(tags, ReleasePolicy.STABLE) is None

    def test_highest_stable(self):
        """The highest version wins regardless of input order."""
        tags = [Tag("1.0.0"), Tag("1.2.0"), Tag("1.1.0")]
        assert resolve_previous_tag(tags, ReleasePolicy.STABLE) == Tag("1.2.0")

    def test_numeric_not_lexical(self):
        """Versions compare numerically."""
        tags = [Tag("v1.9.0"), Tag("v1.10.0"), Tag("v1.2.0")]
        assert resolve_previous_tag(tags, ReleasePolicy.STABLE).name == "v1.10.0"

    def test_stable_lineage(self, sample_tags: list[Tag]):
        """The stable lineage ignores marker tags."""
        assert resolve_previous_tag(sample_tags, ReleasePolicy.STABLE).name == "v1.2.1-rc.1"

    def test_stable_lineage_strict(self, sample_tags: list[Tag]):
        """The strict stable lineage also ignores unrelated pre-releases."""
        assert resolve_previous_tag(sample_tags, ReleasePolicy.STABLE, STRICT).name == "v1.2.0"

    def test_prerelease_lineage(self, sample_tags: list[Tag]):
        """The pre-release lineage only considers marker tags."""
        assert resolve_previous_tag(sample_tags, ReleasePolicy.PRERELEASE).name == "v1.3.0-pre.1"

    def test_release_beats_its_prerelease(self):
        """A release sorts above its pre-releases."""
        tags = [Tag("v2.0.0-rc.1"), Tag("v2.0.0"), Tag("v2.0.0-rc.2")]
        assert resolve_previous_tag(tags, ReleasePolicy.STABLE).name == "v2.0.0"

    def test_equal_versions_keep_input_order(self):
        """Among equal versions the first tag in the input wins."""
        tags = [Tag("1.2.0", "a"), Tag("v1.2.0", "b"), Tag("v1.2.0+build.1", "c")]
        assert resolve_previous_tag(tags, ReleasePolicy.STABLE) == Tag("1.2.0", "a")

    def test_find_release_tags_sorted(self, sample_tags: list[Tag]):
        """find_release_tags returns the lineage highest first."""
        names = [tv.tag.name for tv in find_release_tags(sample_tags, ReleasePolicy.STABLE)]
        assert names == ["v1.2.1-rc.1", "v1.2.0", "v1.1.0", "v1.0.0"]


class TestParseGitTag:
    """Tests for parse_git_tag()."""

    @pytest.mark.parametrize(
        ("ref", "expected"),
        [
            ("refs/tags/v1.0.0", "v1.0.0"),
            ("tags/v1.0.0", "v1.0.0"),
            ("refs/heads/main", ""),
            ("refs/tags/", ""),
            ("v1.0.0", ""),
        ],
    )
    def test_parse(self, ref: str, expected: str):
        """Only tag refs yield a name."""
        assert parse_git_tag(ref) == expected
