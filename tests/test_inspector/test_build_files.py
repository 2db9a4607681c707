"""Tests for the POM and Gradle script parsers (initforge.inspector.build_files)."""

from __future__ import annotations

import textwrap

import pytest

from initforge.inspector.build_files import parse_gradle, parse_pom

pytestmark = pytest.mark.unit


SAMPLE_POM = textwrap.dedent("""\
    <?xml version="1.0" encoding="UTF-8"?>
    <project xmlns="http://maven.apache.org/POM/4.0.0">
        <modelVersion>4.0.0</modelVersion>
        <parent>
            <groupId>org.springframework.boot</groupId>
            <artifactId>spring-boot-starter-parent</artifactId>
            <version>3.3.8</version>
        </parent>
        <groupId>com.example</groupId>
        <artifactId>my-app</artifactId>
        <version>0.0.1-SNAPSHOT</version>
        <packaging>war</packaging>
        <name>my-app</name>
        <properties>
            <java.version>21</java.version>
        </properties>
        <dependencies>
            <dependency>
                <groupId>org.springframework.boot</groupId>
                <artifactId>spring-boot-starter-tomcat</artifactId>
                <scope>provided</scope>
            </dependency>
            <dependency>
                <groupId>org.projectlombok</groupId>
                <artifactId>lombok</artifactId>
                <optional>true</optional>
            </dependency>
        </dependencies>
    </project>
""")

SAMPLE_GROOVY = textwrap.dedent("""\
    plugins {
    \tid 'java'
    \tid 'org.springframework.boot' version '3.4.3'
    \tid 'io.spring.dependency-management' version '1.1.7'
    }

    group = 'com.example'
    version = '0.0.1-SNAPSHOT'
    description = ''

    java {
    \ttoolchain {
    \t\tlanguageVersion = JavaLanguageVersion.of(17)
    \t}
    }

    dependencies {
    \timplementation 'org.springframework.boot:spring-boot-starter'
    \ttestRuntimeOnly 'org.junit.platform:junit-platform-launcher'
    }
""")

SAMPLE_KOTLIN = textwrap.dedent("""\
    plugins {
    \tkotlin("jvm") version "1.9.25"
    \tkotlin("plugin.spring") version "1.9.25"
    \twar
    \tid("org.springframework.boot") version "3.3.8"
    }

    group = "com.example"
    version = "1.0.0"

    dependencies {
    \timplementation("org.springframework.boot:spring-boot-starter")
    }
""")


class TestParsePom:
    def test_parent(self):
        build = parse_pom(SAMPLE_POM)
        assert build.parent.group_id == "org.springframework.boot"
        assert build.parent.artifact_id == "spring-boot-starter-parent"
        assert build.parent.version == "3.3.8"

    def test_coordinates(self):
        build = parse_pom(SAMPLE_POM)
        assert (build.group_id, build.artifact_id, build.version) == (
            "com.example", "my-app", "0.0.1-SNAPSHOT"
        )
        assert build.packaging == "war"
        assert build.name == "my-app"
        assert build.description is None
        assert build.properties == {"java.version": "21"}

    def test_dependencies(self):
        build = parse_pom(SAMPLE_POM)
        assert build.has_dependency("org.springframework.boot", "spring-boot-starter-tomcat")
        assert not build.has_dependency("org.springframework.boot", "spring-boot-starter-web")
        tomcat, lombok = build.dependencies
        assert tomcat.scope == "provided"
        assert lombok.optional is True

    def test_packaging_defaults_to_jar(self):
        pom = '<project xmlns="http://maven.apache.org/POM/4.0.0"><artifactId>x</artifactId></project>'
        build = parse_pom(pom)
        assert build.packaging == "jar"
        assert build.parent is None

    def test_malformed(self):
        with pytest.raises(ValueError, match="Malformed"):
            parse_pom("<project>")

    def test_not_a_pom(self):
        with pytest.raises(ValueError, match="Not a Maven POM"):
            parse_pom("<settings/>")


class TestParseGradle:
    def test_groovy_plugins(self):
        build = parse_gradle(SAMPLE_GROOVY, "groovy")
        assert [p.id for p in build.plugins] == [
            "java",
            "org.springframework.boot",
            "io.spring.dependency-management",
        ]
        assert build.has_plugin("org.springframework.boot", "3.4.3")
        assert not build.has_plugin("org.springframework.boot", "3.3.8")
        assert build.plugin("java").version is None

    def test_groovy_properties(self):
        build = parse_gradle(SAMPLE_GROOVY, "groovy")
        assert build.group == "com.example"
        assert build.version == "0.0.1-SNAPSHOT"
        assert build.description == ""

    def test_groovy_dependencies(self):
        build = parse_gradle(SAMPLE_GROOVY, "groovy")
        assert build.dependencies == (
            "org.springframework.boot:spring-boot-starter",
            "org.junit.platform:junit-platform-launcher",
        )

    def test_nested_blocks_ignored(self):
        build = parse_gradle(SAMPLE_GROOVY, "groovy")
        assert build.plugin("languageVersion") is None

    def test_kotlin_plugins(self):
        build = parse_gradle(SAMPLE_KOTLIN, "kotlin")
        assert build.has_plugin("org.jetbrains.kotlin.jvm", "1.9.25")
        assert build.has_plugin("org.jetbrains.kotlin.plugin.spring", "1.9.25")
        assert build.has_plugin("war")
        assert build.has_plugin("org.springframework.boot", "3.3.8")
        assert build.dialect == "kotlin"

    def test_kotlin_properties(self):
        build = parse_gradle(SAMPLE_KOTLIN, "kotlin")
        assert build.group == "com.example"
        assert build.version == "1.0.0"
        assert build.description is None
        assert build.dependencies == ("org.springframework.boot:spring-boot-starter",)
