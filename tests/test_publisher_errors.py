"""Tests for exception formatting."""

from safari_publisher.exceptions import (
    BuildError,
    ConfigurationError,
    PublisherError,
    PublishError,
    StagingError,
)


def test_message_without_target() -> None:
    assert str(ConfigurationError("Need secrets")) == (
        "Configuration error: Need secrets"
    )


def test_message_with_target() -> None:
    error = StagingError("manifest not found", "/tmp/manifest.json")
    assert str(error) == "Staging failed for '/tmp/manifest.json': manifest not found"


def test_build_error_details() -> None:
    error = BuildError("exited with code 65", "macos", 65, ["xcodebuild", "archive"])
    assert isinstance(error, PublisherError)
    assert error.returncode == 65
    assert error.command == ["xcodebuild", "archive"]
    assert str(error).startswith("Build failed for 'macos'")


def test_build_error_defaults() -> None:
    error = BuildError("could not run xcodebuild")
    assert error.returncode is None
    assert error.command == []


def test_hierarchy() -> None:
    assert issubclass(PublishError, PublisherError)
