"""Tests for configuration loading and validation."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from release_tagger.config.loader import (
    extract_release_tagger_config,
    find_pyproject_toml,
    load_config,
    load_pyproject_toml,
)
from release_tagger.config.models import (
    ChangelogConfig,
    CommitsConfig,
    GitHubConfig,
    ReleaseTaggerConfig,
    TagsConfig,
    VersionConfig,
)
from release_tagger.core.policy import (
    Environment,
    ReleasePolicy,
    parse_policy,
    policy_for_environment,
)
from release_tagger.core.tags import TagRules
from release_tagger.exceptions import ConfigNotFoundError, ConfigValidationError


class TestReleaseTaggerConfig:
    """Tests for ReleaseTaggerConfig model."""

    def test_default_config(self):
        """Default configuration has sensible values."""
        config = ReleaseTaggerConfig()

        assert config.environment is Environment.PROD
        assert config.policy is ReleasePolicy.STABLE
        assert config.effective_tag_prefix == "v"

    def test_nested_defaults(self):
        """Nested configurations have defaults."""
        config = ReleaseTaggerConfig()

        assert config.tags.prerelease_marker == "pre"
        assert config.commits.reverts_affect_bump is False
        assert config.version.initial_version == "0.1.0"
        assert config.version.prerelease_channel == "beta"
        assert config.changelog.section_order == "title"
        assert config.github.api_url == "https://api.github.com"

    def test_test_environment_is_prerelease(self):
        """The test environment selects the pre-release policy."""
        config = ReleaseTaggerConfig(environment="test")

        assert config.policy is ReleasePolicy.PRERELEASE

    def test_unknown_environment_rejected(self):
        """Unknown environments are rejected."""
        with pytest.raises(ValidationError):
            ReleaseTaggerConfig(environment="staging")

    def test_unknown_key_rejected(self):
        """Typos in configuration keys are rejected."""
        with pytest.raises(ValidationError):
            ReleaseTaggerConfig(enviroment="test")


class TestSectionConfigs:
    """Tests for the nested configuration models."""

    def test_tags_rules(self):
        """TagsConfig builds the matching TagRules."""
        config = TagsConfig(prerelease_marker="next", stable_allows_prerelease=False)

        assert config.rules() == TagRules(prerelease_marker="next", stable_allows_prerelease=False)

    def test_tag_rules_follow_channel(self):
        """The pre-release channel feeds the lineage rules."""
        config = ReleaseTaggerConfig(version={"prerelease_channel": "rc"})

        assert config.tag_rules == TagRules(channel="rc")

    def test_default_skip_patterns(self):
        """Default skip release patterns are configured."""
        config = CommitsConfig()

        assert "[skip release]" in config.skip_release_patterns
        assert "[release skip]" in config.skip_release_patterns
        assert "[no release]" in config.skip_release_patterns

    def test_invalid_initial_version(self):
        """The initial version must be a semantic version."""
        with pytest.raises(ValidationError):
            VersionConfig(initial_version="one")

    def test_initial_version_may_be_unset(self):
        """The initial version seed can be disabled."""
        assert VersionConfig(initial_version=None).initial_version is None
        assert VersionConfig(initial_version="").initial_version is None

    def test_invalid_channel(self):
        """The channel must be a single identifier."""
        with pytest.raises(ValidationError):
            VersionConfig(prerelease_channel="beta.1")

    def test_invalid_section_order(self):
        """Only title and priority orders exist."""
        with pytest.raises(ValidationError):
            ChangelogConfig(section_order="alphabetical")

    def test_github_enterprise_url(self):
        """GitHub Enterprise URL can be configured."""
        config = GitHubConfig(api_url="https://github.mycompany.com/api/v3")

        assert config.api_url == "https://github.mycompany.com/api/v3"


class TestPolicies:
    """Tests for environment and policy parsing."""

    @pytest.mark.parametrize(
        ("environment", "policy"),
        [
            ("dev", ReleasePolicy.STABLE),
            ("prod", ReleasePolicy.STABLE),
            ("test", ReleasePolicy.PRERELEASE),
            ("TEST", ReleasePolicy.PRERELEASE),
        ],
    )
    def test_policy_for_environment(self, environment: str, policy: ReleasePolicy):
        """Environments map to their policies."""
        assert policy_for_environment(environment) is policy

    def test_unknown_environment_raises(self):
        """An unknown environment is a configuration error."""
        with pytest.raises(ConfigValidationError, match="staging"):
            policy_for_environment("staging")

    def test_parse_policy(self):
        """Policies parse from their names."""
        assert parse_policy("prerelease") is ReleasePolicy.PRERELEASE
        with pytest.raises(ConfigValidationError):
            parse_policy("nightly")


class TestLoadPyprojectToml:
    """Tests for load_pyproject_toml()."""

    def test_load_valid_toml(self, project_with_pyproject: Path):
        """Load a valid pyproject.toml."""
        data = load_pyproject_toml(project_with_pyproject / "pyproject.toml")

        assert data["project"]["name"] == "test-project"

    def test_load_nonexistent_raises(self, tmp_path: Path):
        """Loading nonexistent file raises ConfigNotFoundError."""
        with pytest.raises(ConfigNotFoundError):
            load_pyproject_toml(tmp_path / "nonexistent.toml")

    def test_load_invalid_toml_raises(self, tmp_path: Path):
        """Invalid TOML raises ConfigValidationError."""
        path = tmp_path / "pyproject.toml"
        path.write_text("[project\nname = ")

        with pytest.raises(ConfigValidationError):
            load_pyproject_toml(path)


class TestFindPyprojectToml:
    """Tests for find_pyproject_toml()."""

    def test_find_in_current_dir(self, project_with_pyproject: Path):
        """Find pyproject.toml in current directory."""
        assert find_pyproject_toml(project_with_pyproject).name == "pyproject.toml"

    def test_find_in_parent_dir(self, project_with_pyproject: Path):
        """Find pyproject.toml in parent directory."""
        subdir = project_with_pyproject / "src" / "package"
        subdir.mkdir(parents=True)

        assert find_pyproject_toml(subdir).parent == project_with_pyproject.resolve()


class TestExtractReleaseTaggerConfig:
    """Tests for extract_release_tagger_config()."""

    def test_extract_existing_config(self):
        """Extract existing release-tagger config."""
        pyproject = {"tool": {"release-tagger": {"environment": "test"}}}

        assert extract_release_tagger_config(pyproject) == {"environment": "test"}

    def test_extract_missing_config(self):
        """Extract returns empty dict when config missing."""
        assert extract_release_tagger_config({"project": {"name": "test"}}) == {}


class TestLoadConfig:
    """Tests for load_config()."""

    def test_load_with_config(self, project_with_pyproject: Path):
        """Load configuration from pyproject.toml."""
        config = load_config(project_with_pyproject)

        assert config.environment is Environment.TEST
        assert config.version.prerelease_channel == "rc"
        assert config.tag_rules.channel == "rc"
        assert config.github.owner == "octo"
        assert config.github.repo == "widgets"

    def test_load_from_file_path(self, project_with_pyproject: Path):
        """A pyproject.toml path can be passed directly."""
        config = load_config(project_with_pyproject / "pyproject.toml")

        assert config.policy is ReleasePolicy.PRERELEASE

    def test_load_defaults_when_no_section(self, tmp_path: Path):
        """Load defaults when there is no [tool.release-tagger] table."""
        (tmp_path / "pyproject.toml").write_text('[project]\nname = "test"\n')

        assert load_config(tmp_path) == ReleaseTaggerConfig()

    def test_invalid_config_raises(self, tmp_path: Path):
        """Invalid values raise ConfigValidationError."""
        (tmp_path / "pyproject.toml").write_text('[tool.release-tagger]\nenvironment = "qa"\n')

        with pytest.raises(ConfigValidationError, match="release-tagger"):
            load_config(tmp_path)
