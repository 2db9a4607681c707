"""Tests for wrapper distribution selection (initforge.scaffolder.wrapper_gen)."""

from __future__ import annotations

import pytest

from initforge.config import GeneratorConfig, VersionTable
from initforge.models import Version
from initforge.scaffolder.wrapper_gen import WrapperAsset, count_token, select_wrapper

pytestmark = pytest.mark.unit


class TestSelectWrapper:
    def test_maven(self, config):
        asset = select_wrapper(config, "maven", Version.parse("3.4.3"))
        assert asset is not None
        assert asset.distribution_version == "3.9.12"
        assert asset.distribution_url == (
            "https://repo.maven.apache.org/maven2/org/apache/maven/apache-maven/"
            "3.9.12/apache-maven-3.9.12-bin.zip"
        )
        assert asset.token == "apache-maven-3.9.12-bin.zip"
        assert asset.wrapper_version == "3.3.4"

    @pytest.mark.parametrize("platform", ["3.3.8", "3.4.3"])
    def test_gradle(self, config, platform):
        asset = select_wrapper(config, "gradle", Version.parse(platform))
        assert asset is not None
        assert asset.token == "gradle-8.14.4-bin.zip"
        assert asset.distribution_url == "https://services.gradle.org/distributions/gradle-8.14.4-bin.zip"
        assert asset.wrapper_version is None

    def test_gradle_older_platform(self, config):
        asset = select_wrapper(config, "gradle", Version.parse("3.2.0"))
        assert asset.distribution_version == "8.7"

    def test_no_matching_range(self, config):
        assert select_wrapper(config, "maven", Version.parse("2.7.18")) is None

    def test_unknown_build_system(self, config):
        assert select_wrapper(config, "ant", Version.parse("3.4.3")) is None

    def test_custom_table(self):
        config = GeneratorConfig(gradle_wrapper=VersionTable.of({"3.0.0": "8.12"}))
        asset = select_wrapper(config, "gradle", Version.parse("3.4.3"))
        assert asset.token == "gradle-8.12-bin.zip"


class TestCountToken:
    def test_counts_occurrences(self):
        asset = WrapperAsset(
            build_system="gradle",
            distribution_version="8.14.4",
            distribution_url="https://services.gradle.org/distributions/gradle-8.14.4-bin.zip",
        )
        assert count_token("distributionUrl=https\\://x/gradle-8.14.4-bin.zip\n", asset) == 1
        assert count_token("nothing here", asset) == 0
        assert count_token("gradle-8.14.4-bin.zip gradle-8.14.4-bin.zip", asset) == 2
