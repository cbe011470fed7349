"""Unit tests for targets, name helpers and ProjectIdentity (composables.models)."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from composables.errors import InvalidTargetError
from composables.models import (
    TARGET_ORDER,
    ProjectIdentity,
    Target,
    is_valid_app_name,
    is_valid_module_name,
    is_valid_namespace,
    ordered_targets,
    parse_target,
    parse_targets,
    pascal_case,
)

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Targets
# ---------------------------------------------------------------------------


class TestTargets:
    def test_values(self):
        assert [t.value for t in TARGET_ORDER] == ["android", "jvm", "ios", "web"]

    def test_labels(self):
        assert Target.JVM.label == "JVM (Desktop)"
        assert Target.IOS.label == "iOS"

    def test_parse_is_case_insensitive(self):
        assert parse_target(" Android ") is Target.ANDROID

    def test_parse_unknown(self):
        with pytest.raises(InvalidTargetError, match="Unknown target 'desktop'"):
            parse_target("desktop")

    def test_parse_targets_mixed(self):
        assert parse_targets(["web", Target.IOS, "web"]) == frozenset({Target.WEB, Target.IOS})

    def test_ordered_targets(self):
        assert ordered_targets({Target.WEB, Target.ANDROID, Target.IOS}) == [
            Target.ANDROID,
            Target.IOS,
            Target.WEB,
        ]


# ---------------------------------------------------------------------------
# Name helpers
# ---------------------------------------------------------------------------


class TestPascalCase:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("composeApp", "ComposeApp"),
            ("my-app", "MyApp"),
            ("shared_ui", "SharedUi"),
            ("a-bC_d", "ABCD"),
        ],
    )
    def test_conversion(self, value: str, expected: str):
        assert pascal_case(value) == expected


class TestValidators:
    @pytest.mark.parametrize("namespace", ["com.example.app", "io.a1.b_2", "Org.Example"])
    def test_valid_namespaces(self, namespace: str):
        assert is_valid_namespace(namespace)

    @pytest.mark.parametrize(
        "namespace", ["", "app", "com..app", "com.1app", "com.example-app", "com.example."]
    )
    def test_invalid_namespaces(self, namespace: str):
        assert not is_valid_namespace(namespace)

    def test_app_names(self):
        assert is_valid_app_name("My App")
        assert is_valid_app_name("!1!")
        assert not is_valid_app_name("")
        assert not is_valid_app_name("--- !")

    def test_module_names(self):
        assert is_valid_module_name("composeApp")
        assert is_valid_module_name("shared-ui_2")
        assert not is_valid_module_name("")
        assert not is_valid_module_name("my module")
        assert not is_valid_module_name("a.b")
        assert not is_valid_module_name("--")


# ---------------------------------------------------------------------------
# ProjectIdentity
# ---------------------------------------------------------------------------


class TestProjectIdentity:
    def test_derived_names(self):
        identity = ProjectIdentity(
            namespace="com.example.app", app_name="My App", module_name="my-app"
        )
        assert identity.namespace_path == "com/example/app"
        assert identity.binary_name == "MyApp"
        assert identity.ios_app_name == "iosMyApp"
        assert identity.target_name == "MyApp.app"

    def test_default_module(self):
        identity = ProjectIdentity(namespace="com.example.app", app_name="My App")
        assert identity.module_name == "composeApp"
        assert identity.ios_app_name == "iosComposeApp"

    def test_frozen(self):
        identity = ProjectIdentity(namespace="com.example.app", app_name="My App")
        with pytest.raises(ValidationError):
            identity.app_name = "Other"

    def test_invalid_namespace(self):
        with pytest.raises(ValidationError, match="valid Java package name"):
            ProjectIdentity(namespace="app", app_name="My App")

    def test_invalid_app_name(self):
        with pytest.raises(ValidationError):
            ProjectIdentity(namespace="com.example.app", app_name="  ")

    def test_invalid_module_name(self):
        with pytest.raises(ValidationError):
            ProjectIdentity(namespace="com.example.app", app_name="A", module_name="a b")

    def test_module_equal_to_directory(self):
        with pytest.raises(ValidationError, match="same as the project name"):
            ProjectIdentity(
                namespace="com.example.app",
                app_name="A",
                module_name="myapp",
                directory_name="myapp",
            )
