"""Patch version fields in the Xcode project descriptor."""

import re
from dataclasses import dataclass
from pathlib import Path

from safari_publisher.constants import (
    BUILD_NUMBER_KEY,
    DEFAULT_BUILD_NUMBER,
    MARKETING_VERSION_KEY,
)
from safari_publisher.exceptions import PatchError
from safari_publisher.logger import get_logger

logger = get_logger(__name__)

_MARKETING_RE = re.compile(rf"(\b{MARKETING_VERSION_KEY}\s*=\s*)([^;]*)(;)")
_BUILD_RE = re.compile(rf"(\b{BUILD_NUMBER_KEY}\s*=\s*)([^;]*)(;)")


@dataclass(slots=True, frozen=True)
class PatchResult:
    """Before/after values of a descriptor patch."""

    old_version: str | None
    new_version: str
    old_build: str | None
    new_build: int | None


def _first_value(pattern: re.Pattern[str], text: str) -> str | None:
    match = pattern.search(text)
    return match.group(2).strip() if match else None


def next_build_number(current: str | None) -> int:
    """Return current + 1, treating a missing or non-integer value as 1."""
    try:
        number = int(current) if current is not None else DEFAULT_BUILD_NUMBER
    except ValueError:
        number = DEFAULT_BUILD_NUMBER
    return number + 1


def patch_xcode_version(text: str, version: str, *, distribute: bool) -> str:
    """Stamp version into every MARKETING_VERSION field of text.

    In distribute mode every CURRENT_PROJECT_VERSION is also set to the
    first one found plus one, so each distribute run is a new build.

    Args:
        text: Project descriptor contents
        version: Marketing version from the manifest
        distribute: Whether to bump the build number

    Returns:
        Patched descriptor contents

    """
    text = _MARKETING_RE.sub(lambda m: f"{m.group(1)}{version}{m.group(3)}", text)
    if distribute:
        build = next_build_number(_first_value(_BUILD_RE, text))
        text = _BUILD_RE.sub(lambda m: f"{m.group(1)}{build}{m.group(3)}", text)
    return text


def patch_project_file(
    path: Path, version: str, *, distribute: bool
) -> PatchResult:
    """Patch the descriptor at path in place.

    Raises:
        PatchError: If the descriptor cannot be read or written

    """
    try:
        original = path.read_text(encoding="utf-8")
    except OSError as e:
        raise PatchError(str(e), str(path)) from e

    old_version = _first_value(_MARKETING_RE, original)
    old_build = _first_value(_BUILD_RE, original)
    if old_version is None:
        logger.warning("No %s field in %s", MARKETING_VERSION_KEY, path.name)

    patched = patch_xcode_version(original, version, distribute=distribute)
    new_build = (
        next_build_number(old_build)
        if distribute and old_build is not None
        else None
    )

    try:
        path.write_text(patched, encoding="utf-8")
    except OSError as e:
        raise PatchError(str(e), str(path)) from e

    logger.info("Patched %s: version %s -> %s", path.name, old_version, version)
    if new_build is not None:
        logger.info("Build number %s -> %d", old_build, new_build)

    return PatchResult(
        old_version=old_version,
        new_version=version,
        old_build=old_build,
        new_build=new_build,
    )
