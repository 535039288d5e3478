"""Upward directory search bounded by the user's home directory.

Both the secrets file and the repository root are found by walking from the
working directory towards the filesystem root, giving up as soon as the
search leaves the home directory.
"""

from pathlib import Path

from safari_publisher.constants import REPO_MARKER, SAFARI_PROJECT_SUBDIR
from safari_publisher.logger import get_logger

logger = get_logger(__name__)


def _is_within(path: Path, boundary: Path) -> bool:
    """Return True if path is boundary itself or one of its descendants."""
    return path == boundary or boundary in path.parents


def find_upward(
    start: Path,
    marker: str,
    boundary: Path,
) -> Path | None:
    """Find the nearest ancestor of start that contains marker.

    Args:
        start: Directory to start searching from
        marker: File or directory name to look for
        boundary: Directory the search must stay inside

    Returns:
        Path to the marker itself, or None if the search left boundary

    """
    current = start.resolve()
    boundary = boundary.resolve()

    while _is_within(current, boundary):
        candidate = current / marker
        if candidate.exists():
            return candidate
        if current.parent == current:
            break
        current = current.parent

    logger.debug("No %s found between %s and %s", marker, start, boundary)
    return None


def find_repo_root(
    start: Path | None = None,
    home: Path | None = None,
) -> Path | None:
    """Locate the version-control root of the current checkout.

    Args:
        start: Directory to start from (defaults to the working directory)
        home: Search boundary (defaults to the user's home directory)

    Returns:
        Repository root directory, or None if not found

    """
    marker = find_upward(
        start or Path.cwd(),
        REPO_MARKER,
        home or Path.home(),
    )
    if marker is None:
        return None
    return marker.parent


def safari_project_dir(repo_root: Path) -> Path:
    """Return the Xcode project directory inside the checkout."""
    return repo_root / SAFARI_PROJECT_SUBDIR
