"""Drive xcodebuild to archive and export the Safari app.

Commands are always passed to the tool as argument lists; a non-zero exit
aborts the run with ``BuildError``.
"""

import asyncio
from enum import Enum
from pathlib import Path

from safari_publisher.constants import (
    APP_NAME,
    ARCHIVE_PREFIX,
    ARCHIVE_SUFFIX,
    BUILD_OUTPUT_TAIL_LINES,
    EXPORT_OPTIONS_TEMPLATE,
    EXPORT_SUFFIX,
    XCODE_PROJECT_NAME,
    XCODEBUILD,
)
from safari_publisher.exceptions import BuildError
from safari_publisher.logger import get_logger

logger = get_logger(__name__)


class Platform(Enum):
    """Apple platforms the Safari app is built for."""

    IOS = "ios"
    MACOS = "macos"

    @property
    def display_name(self) -> str:
        """Platform name as xcodebuild and scheme names spell it."""
        return "iOS" if self is Platform.IOS else "macOS"

    @property
    def destination(self) -> str:
        """Generic build destination for this platform."""
        return f"generic/platform={self.display_name}"


class BuildDriver:
    """Runs the archive and export steps for one Xcode project."""

    def __init__(
        self,
        project_dir: Path,
        workspace: Path,
        scheme_name: str = APP_NAME,
        archive_prefix: str = ARCHIVE_PREFIX,
        xcodebuild: str = XCODEBUILD,
    ) -> None:
        """Initialize the build driver.

        Args:
            project_dir: Directory holding the .xcodeproj and export plists
            workspace: Run workspace receiving archives and exports
            scheme_name: Scheme base name; the platform is appended
            archive_prefix: File name prefix for archives and exports
            xcodebuild: Build tool executable

        """
        self.project_dir = project_dir
        self.workspace = workspace
        self.scheme_name = scheme_name
        self.archive_prefix = archive_prefix
        self.xcodebuild = xcodebuild

    @property
    def project_path(self) -> Path:
        return self.project_dir / XCODE_PROJECT_NAME

    def scheme(self, platform: Platform) -> str:
        return f"{self.scheme_name} ({platform.display_name})"

    def archive_path(self, platform: Platform) -> Path:
        """Return ``<workspace>/<prefix>.<platform>``.

        xcodebuild appends ``.xcarchive`` to this path itself.
        """
        return self.workspace / f"{self.archive_prefix}.{platform.value}"

    def export_path(self, platform: Platform) -> Path:
        return self.workspace / (
            f"{self.archive_prefix}.{platform.value}{EXPORT_SUFFIX}"
        )

    def export_options(self, platform: Platform) -> Path:
        return self.project_dir / EXPORT_OPTIONS_TEMPLATE.format(
            platform=platform.value
        )

    def archive_command(self, platform: Platform) -> list[str]:
        return [
            self.xcodebuild,
            "clean",
            "archive",
            "-project",
            str(self.project_path),
            "-scheme",
            self.scheme(platform),
            "-destination",
            platform.destination,
            "-archivePath",
            str(self.archive_path(platform)),
        ]

    def export_command(
        self, platform: Platform, archive: Path
    ) -> list[str]:
        return [
            self.xcodebuild,
            "-exportArchive",
            "-archivePath",
            str(archive),
            "-exportPath",
            str(self.export_path(platform)),
            "-exportOptionsPlist",
            str(self.export_options(platform)),
        ]

    async def _run(self, command: list[str], platform: Platform) -> None:
        """Run one xcodebuild invocation to completion.

        Raises:
            BuildError: If the tool cannot be started or exits non-zero

        """
        logger.debug("Running: %s", command)
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                cwd=self.project_dir,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except OSError as e:
            msg = f"could not run {command[0]}: {e}"
            raise BuildError(msg, platform.value, command=command) from e

        stdout, _ = await process.communicate()
        if process.returncode != 0:
            output = stdout.decode("utf-8", errors="ignore") if stdout else ""
            tail = "\n".join(output.splitlines()[-BUILD_OUTPUT_TAIL_LINES:])
            logger.error("%s failed:\n%s", command[1], tail)
            msg = f"{command[0]} exited with code {process.returncode}"
            raise BuildError(
                msg,
                platform.value,
                returncode=process.returncode,
                command=command,
            )

    async def archive(self, platform: Platform) -> Path:
        """Produce a clean archive for platform.

        Returns:
            Path of the created ``.xcarchive`` bundle

        """
        logger.info("Archiving %s build", platform.display_name)
        await self._run(self.archive_command(platform), platform)
        archive = self.archive_path(platform).with_name(
            self.archive_path(platform).name + ARCHIVE_SUFFIX
        )
        logger.info("Archive created: %s", archive)
        return archive

    async def export(self, platform: Platform, archive: Path) -> Path:
        """Export a distributable package from archive.

        Returns:
            Directory holding the exported package

        """
        logger.info("Exporting %s archive", platform.display_name)
        await self._run(self.export_command(platform, archive), platform)
        export_dir = self.export_path(platform)
        logger.info("Export created: %s", export_dir)
        return export_dir
