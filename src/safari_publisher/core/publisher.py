"""Publish an exported app back to its GitHub release.

The export is zipped and uploaded first; the source asset that started the
run is deleted only once that upload has succeeded, so the release is never
left without a build.
"""

import os
import stat
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from safari_publisher.constants import ZIP_MIME_TYPE
from safari_publisher.core.github import Asset, ReleaseClient
from safari_publisher.exceptions import PublishError
from safari_publisher.logger import get_logger

logger = get_logger(__name__)


@dataclass(slots=True, frozen=True)
class PublishOutcome:
    """Result of a publish step.

    Attributes:
        archive: Local zip that was uploaded
        uploaded: Asset JSON returned by the upload
        source_deleted: Whether the source asset was removed

    """

    archive: Path
    uploaded: dict[str, Any]
    source_deleted: bool

    @property
    def uploaded_name(self) -> str:
        return str(self.uploaded.get("name", self.archive.name))


def _symlink_info(arcname: str) -> zipfile.ZipInfo:
    info = zipfile.ZipInfo(arcname)
    info.create_system = 3  # Unix, so the link mode below is honoured
    info.external_attr = (stat.S_IFLNK | 0o755) << 16
    return info


def zip_directory(source: Path, archive: Path) -> Path:
    """Zip the contents of source into archive.

    Symlinks, such as a framework's ``Versions/Current``, are stored as
    links and never followed.
    """
    with zipfile.ZipFile(archive, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for root, dirs, files in os.walk(source):
            root_path = Path(root)
            for name in sorted(dirs + files):
                path = root_path / name
                arcname = path.relative_to(source).as_posix()
                if path.is_symlink():
                    zf.writestr(_symlink_info(arcname), os.readlink(path))
                else:
                    zf.write(path, arcname)
    return archive


class Publisher:
    """Uploads exports to a release and retires the source asset."""

    def __init__(self, client: ReleaseClient, tag: str) -> None:
        """Initialize the publisher.

        Args:
            client: Release client for the target repository
            tag: Release tag to publish to

        """
        self.client = client
        self.tag = tag

    async def publish(
        self,
        export_path: Path,
        source_asset: Asset,
        upload_name: str,
    ) -> PublishOutcome:
        """Zip export_path, upload it, then delete source_asset.

        Args:
            export_path: Exported package directory
            source_asset: Asset that triggered the run
            upload_name: Name of the new release asset

        Returns:
            Outcome describing what was uploaded and deleted

        Raises:
            PublishError: If zipping or uploading fails

        """
        try:
            archive = zip_directory(export_path, export_path.parent / upload_name)
        except OSError as e:
            raise PublishError(str(e), str(export_path)) from e
        logger.info("Created %s", archive)

        upload = await self.client.upload_asset(
            self.tag, archive, ZIP_MIME_TYPE, name=upload_name
        )
        if not upload.ok:
            raise PublishError(upload.reason, upload_name)
        uploaded = upload.value or {}
        logger.info("Uploaded %s to %s", upload_name, self.tag)

        deleted = await self.client.delete_asset(source_asset.url)
        if not deleted.ok:
            logger.warning(
                "Uploaded %s but could not delete %s: %s",
                upload_name,
                source_asset.name,
                deleted.reason,
            )
        else:
            logger.info("Deleted source asset %s", source_asset.name)

        return PublishOutcome(
            archive=archive,
            uploaded=uploaded,
            source_deleted=deleted.ok,
        )
