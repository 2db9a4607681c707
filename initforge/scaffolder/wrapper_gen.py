"""Wrapper distribution selection for Maven and Gradle.

Picks the build-tool distribution that the generated wrapper scripts download,
using the version tables in ``GeneratorConfig`` keyed by platform version.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from initforge.config import GeneratorConfig
from initforge.models import GRADLE, MAVEN, Version


_DISTRIBUTION_URLS: dict[str, str] = {
    MAVEN: (
        "https://repo.maven.apache.org/maven2/org/apache/maven/apache-maven/"
        "{version}/apache-maven-{version}-bin.zip"
    ),
    GRADLE: "https://services.gradle.org/distributions/gradle-{version}-bin.zip",
}


@dataclass(frozen=True)
class WrapperAsset:
    """The distribution a wrapper pins, e.g. Gradle 8.14.4.

    ``token`` is the distribution archive name (``gradle-8.14.4-bin.zip``),
    the one string that identifies the pinned version inside the wrapper
    properties file.
    """

    build_system: str
    distribution_version: str
    distribution_url: str
    wrapper_version: Optional[str] = None

    @property
    def token(self) -> str:
        return self.distribution_url.rsplit("/", 1)[-1]


def select_wrapper(
    config: GeneratorConfig, build_system_id: str, platform: Version
) -> Optional[WrapperAsset]:
    """Return the wrapper asset for *build_system_id* at *platform*.

    Returns ``None`` when the build system has no wrapper table or no range in
    the table covers the platform version.
    """
    url_pattern = _DISTRIBUTION_URLS.get(build_system_id)
    if url_pattern is None:
        return None
    version = config.wrapper_table(build_system_id).resolve(platform)
    if version is None:
        return None
    return WrapperAsset(
        build_system=build_system_id,
        distribution_version=version,
        distribution_url=url_pattern.format(version=version),
        wrapper_version=config.maven_wrapper_version if build_system_id == MAVEN else None,
    )


def count_token(content: str, asset: WrapperAsset) -> int:
    """Count how many times the asset's distribution token appears in *content*."""
    return content.count(asset.token)
