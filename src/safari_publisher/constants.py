"""Centralized constants module for safari-publisher.

This module serves as the single source of truth for shared constants
across the safari-publisher codebase. Constants are organized by logical
categories and use typing.Final annotations to ensure immutability.

Usage:
    from safari_publisher.constants import SECRETS_FILE_NAME
"""

from typing import Final

# =============================================================================
# Discovery Constants
# =============================================================================

# Secrets file looked up from the working directory towards $HOME
SECRETS_FILE_NAME: Final[str] = "ubo_secrets"
SECRETS_TOKEN_KEY: Final[str] = "github_token"

# Version-control marker used to find the checkout root
REPO_MARKER: Final[str] = ".git"

# Keyring fallback for the GitHub token
KEYRING_SERVICE: Final[str] = "safari-publisher"
KEYRING_USERNAME: Final[str] = "github_token"

# =============================================================================
# Native Project Layout (relative to the repository root)
# =============================================================================

SAFARI_PROJECT_SUBDIR: Final[str] = "platform/mv3/safari/xcode"
APP_NAME: Final[str] = "uBlock Origin Lite"
RESOURCES_SUBDIR: Final[str] = "Shared (Extension)/Resources"
XCODE_PROJECT_NAME: Final[str] = f"{APP_NAME}.xcodeproj"
PROJECT_DESCRIPTOR_NAME: Final[str] = "project.pbxproj"
MANIFEST_FILE_NAME: Final[str] = "manifest.json"
EXPORT_OPTIONS_TEMPLATE: Final[str] = "ExportOptions-{platform}.plist"

# Project descriptor fields patched with the manifest version
MARKETING_VERSION_KEY: Final[str] = "MARKETING_VERSION"
BUILD_NUMBER_KEY: Final[str] = "CURRENT_PROJECT_VERSION"
DEFAULT_BUILD_NUMBER: Final[int] = 1

# =============================================================================
# Build Constants
# =============================================================================

XCODEBUILD: Final[str] = "xcodebuild"
ARCHIVE_PREFIX: Final[str] = "ubolite"
ARCHIVE_SUFFIX: Final[str] = ".xcarchive"
EXPORT_SUFFIX: Final[str] = ".export"

# Lines of tool output kept in BuildError messages
BUILD_OUTPUT_TAIL_LINES: Final[int] = 20

# Publish destination that re-uploads the export to the release
PUBLISH_TARGET_GITHUB: Final[str] = "github"

# =============================================================================
# Network Constants
# =============================================================================

GITHUB_API_BASE: Final[str] = "https://api.github.com"
GITHUB_ACCEPT_JSON: Final[str] = "application/vnd.github+json"
GITHUB_API_VERSION: Final[str] = "2022-11-28"
ACCEPT_OCTET_STREAM: Final[str] = "application/octet-stream"
ZIP_MIME_TYPE: Final[str] = "application/zip"

DEFAULT_TIMEOUT_SECONDS: Final[int] = 30
DOWNLOAD_CHUNK_SIZE: Final[int] = 64 * 1024

# =============================================================================
# Workspace Constants
# =============================================================================

WORKSPACE_PREFIX: Final[str] = "safari-publisher-"
DOWNLOAD_DIR_PREFIX: Final[str] = "github-asset-"
UNPACK_SUFFIX: Final[str] = ".unpacked"

# =============================================================================
# Logging Constants
# =============================================================================

LOG_ROOT_NAME: Final[str] = "safari_publisher"
LOG_DIR_ENV: Final[str] = "SAFARI_PUBLISHER_LOG_DIR"
LOG_FILE_NAME: Final[str] = "safari-publisher.log"
DEFAULT_CONSOLE_LOG_LEVEL: Final[str] = "INFO"
DEFAULT_FILE_LOG_LEVEL: Final[str] = "DEBUG"

# Maximum size for rotated log files (bytes)
LOG_ROTATION_THRESHOLD_BYTES: Final[int] = 1024 * 1024  # 1 MB
LOG_BACKUP_COUNT: Final[int] = 3

# Console and file format strings used by the logger
LOG_CONSOLE_FORMAT: Final[str] = (
    "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
LOG_CONSOLE_DATE_FORMAT: Final[str] = "%H:%M:%S"
LOG_FILE_FORMAT: Final[str] = (
    "%(asctime)s - %(name)s - %(levelname)s - "
    "%(funcName)s:%(lineno)d - %(message)s"
)
LOG_FILE_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

# Color mapping for console output levels
LOG_COLORS: Final[dict[str, str]] = {
    "DEBUG": "\033[36m",  # Cyan
    "INFO": "\033[32m",  # Green
    "WARNING": "\033[33m",  # Yellow
    "ERROR": "\033[31m",  # Red
    "CRITICAL": "\033[35m",  # Magenta
    "RESET": "\033[0m",
}
