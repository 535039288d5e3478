"""Stage a packaged extension build into the Xcode project.

The downloaded zip is unpacked inside the run's workspace and its contents
replace the extension's ``Resources`` directory wholesale. The manifest
found there is the single source of truth for the version stamped into the
Xcode project.
"""

from __future__ import annotations

import shutil
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import orjson
from packaging.version import InvalidVersion, Version

from safari_publisher.constants import MANIFEST_FILE_NAME, UNPACK_SUFFIX
from safari_publisher.exceptions import StagingError
from safari_publisher.logger import get_logger

logger = get_logger(__name__)


@dataclass(slots=True, frozen=True)
class Manifest:
    """Extension manifest fields used by the publish run.

    Attributes:
        version: Dotted release version, e.g. "2025.1015.1230"
        name: Extension name, empty if absent
        data: Full parsed manifest

    """

    version: str
    name: str = ""
    data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Manifest:
        """Validate and build a Manifest from parsed JSON.

        Raises:
            StagingError: If the version is missing or not a release version

        """
        version = data.get("version")
        if not isinstance(version, str) or not version:
            msg = "manifest has no version"
            raise StagingError(msg, MANIFEST_FILE_NAME)
        try:
            parsed = Version(version)
        except InvalidVersion as e:
            msg = f"invalid version '{version}'"
            raise StagingError(msg, MANIFEST_FILE_NAME) from e
        if (
            not version[0].isdigit()
            or parsed.pre
            or parsed.post is not None
            or parsed.dev is not None
            or parsed.local
            or parsed.epoch
        ):
            msg = f"'{version}' is not a plain dotted release version"
            raise StagingError(msg, MANIFEST_FILE_NAME)

        return cls(version=version, name=str(data.get("name", "")), data=data)


class PackageStager:
    """Unpacks a build archive and installs it as the project's resources."""

    def __init__(self, workspace: Path) -> None:
        """Initialize the stager.

        Args:
            workspace: Run workspace that receives unpacked files

        """
        self.workspace = workspace

    def unpack(self, archive: Path) -> Path:
        """Extract archive into ``<workspace>/<stem>.unpacked``.

        Args:
            archive: Path to the downloaded zip

        Returns:
            Directory holding the unpacked contents

        Raises:
            StagingError: If the archive is missing, invalid or unsafe

        """
        target = self.workspace / f"{archive.stem}{UNPACK_SUFFIX}"
        logger.info("Unpacking %s into %s", archive.name, target)
        try:
            with zipfile.ZipFile(archive) as zf:
                root = target.resolve()
                for member in zf.namelist():
                    dest = (target / member).resolve()
                    if dest != root and root not in dest.parents:
                        msg = f"entry '{member}' escapes the extraction root"
                        raise StagingError(msg, archive.name)
                target.mkdir(parents=True, exist_ok=True)
                zf.extractall(target)
        except FileNotFoundError as e:
            raise StagingError("archive not found", str(archive)) from e
        except (zipfile.BadZipFile, OSError) as e:
            raise StagingError(str(e), archive.name) from e
        return target

    def replace_resources(self, unpacked: Path, resources_dir: Path) -> None:
        """Replace everything in resources_dir with the unpacked tree.

        Existing entries are deleted first so files from an earlier build
        never survive.

        Raises:
            StagingError: If either tree cannot be read or written

        """
        logger.info("Copying files to %s", resources_dir)
        try:
            resources_dir.mkdir(parents=True, exist_ok=True)
            for entry in resources_dir.iterdir():
                if entry.is_dir() and not entry.is_symlink():
                    shutil.rmtree(entry)
                else:
                    entry.unlink()
            shutil.copytree(unpacked, resources_dir, dirs_exist_ok=True)
        except OSError as e:
            raise StagingError(str(e), str(resources_dir)) from e

    def read_manifest(self, resources_dir: Path) -> Manifest:
        """Read and validate the manifest inside resources_dir.

        Raises:
            StagingError: If the manifest is missing or malformed

        """
        manifest_path = resources_dir / MANIFEST_FILE_NAME
        try:
            data = orjson.loads(manifest_path.read_bytes())
        except FileNotFoundError as e:
            raise StagingError("manifest not found", str(manifest_path)) from e
        except (OSError, orjson.JSONDecodeError) as e:
            raise StagingError(str(e), str(manifest_path)) from e

        if not isinstance(data, dict):
            raise StagingError("manifest is not a JSON object", str(manifest_path))
        manifest = Manifest.from_dict(data)
        logger.info("Manifest version: %s", manifest.version)
        return manifest
