"""Exception classes for safari-publisher operations."""


class PublisherError(Exception):
    """Base exception for safari-publisher operations."""

    error_prefix: str = "Operation failed"

    def __init__(self, message: str, target: str | None = None) -> None:
        """Initialize error with message and optional target.

        Args:
            message: Error message describing the failure.
            target: Optional name of the target that failed.

        """
        super().__init__(message)
        self.message = message
        self.target = target

    def __str__(self) -> str:
        """Return formatted error message."""
        if self.target:
            return f"{self.error_prefix} for '{self.target}': {self.message}"
        return f"{self.error_prefix}: {self.message}"


class ConfigurationError(PublisherError):
    """Raised when a required input (secrets, flag, repo root) is missing."""

    error_prefix = "Configuration error"


class StagingError(PublisherError):
    """Raised when the downloaded package cannot be staged."""

    error_prefix = "Staging failed"


class PatchError(PublisherError):
    """Raised when the Xcode project descriptor cannot be patched."""

    error_prefix = "Patch failed"


class BuildError(PublisherError):
    """Raised when xcodebuild exits with a non-zero status."""

    error_prefix = "Build failed"

    def __init__(
        self,
        message: str,
        target: str | None = None,
        returncode: int | None = None,
        command: list[str] | None = None,
    ) -> None:
        """Initialize error with the failing command details.

        Args:
            message: Error message describing the failure.
            target: Optional platform that failed to build.
            returncode: Exit status of the tool, None if it never ran.
            command: Argument list that was executed.

        """
        super().__init__(message, target)
        self.returncode = returncode
        self.command = command or []


class PublishError(PublisherError):
    """Raised when a release asset cannot be fetched or published."""

    error_prefix = "Publish failed"
