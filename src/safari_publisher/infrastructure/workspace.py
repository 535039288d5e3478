"""Scoped temporary workspace for a publish run.

Everything a run downloads, unpacks, archives or exports lives under one
directory that is removed when the run ends, whichever way it ends.
"""

import shutil
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from safari_publisher.constants import WORKSPACE_PREFIX
from safari_publisher.logger import get_logger

logger = get_logger(__name__)


def remove_workspace(path: Path) -> None:
    """Recursively delete a workspace directory if it still exists."""
    if not path.exists():
        return
    logger.debug("Removing workspace: %s", path)
    shutil.rmtree(path)


@contextmanager
def temporary_workspace(
    *,
    keep: bool = False,
    keep_on_failure: bool = False,
) -> Iterator[Path]:
    """Create a unique workspace directory and remove it on exit.

    Args:
        keep: Never remove the workspace
        keep_on_failure: Keep the workspace only if the block raised

    Yields:
        Path to the workspace directory

    """
    workspace = Path(tempfile.mkdtemp(prefix=WORKSPACE_PREFIX))
    logger.debug("Created workspace: %s", workspace)
    try:
        yield workspace
    except BaseException:
        if keep or keep_on_failure:
            logger.info("Keeping workspace for inspection: %s", workspace)
        else:
            remove_workspace(workspace)
        raise

    if keep:
        logger.info("Keeping workspace: %s", workspace)
    else:
        remove_workspace(workspace)
