"""Tests for the xcodebuild driver."""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from safari_publisher.core.build import BuildDriver, Platform
from safari_publisher.exceptions import BuildError


def _process(returncode: int = 0, output: bytes = b"") -> MagicMock:
    process = MagicMock()
    process.returncode = returncode
    process.communicate = AsyncMock(return_value=(output, None))
    return process


@pytest.fixture
def driver(tmp_path: Path) -> BuildDriver:
    return BuildDriver(tmp_path / "xcode", tmp_path / "ws")


class TestPlatform:
    """Test platform naming."""

    def test_names(self) -> None:
        assert Platform.IOS.display_name == "iOS"
        assert Platform.MACOS.destination == "generic/platform=macOS"


class TestCommands:
    """Test command construction."""

    def test_archive_command(self, driver: BuildDriver, tmp_path: Path) -> None:
        """Archive is a clean archive of the platform scheme."""
        command = driver.archive_command(Platform.IOS)

        assert command == [
            "xcodebuild",
            "clean",
            "archive",
            "-project",
            str(tmp_path / "xcode" / "uBlock Origin Lite.xcodeproj"),
            "-scheme",
            "uBlock Origin Lite (iOS)",
            "-destination",
            "generic/platform=iOS",
            "-archivePath",
            str(tmp_path / "ws" / "ubolite.ios"),
        ]

    def test_export_command(self, driver: BuildDriver, tmp_path: Path) -> None:
        """Export uses the per-platform options plist."""
        archive = tmp_path / "ws" / "ubolite.macos.xcarchive"

        command = driver.export_command(Platform.MACOS, archive)

        assert command[:2] == ["xcodebuild", "-exportArchive"]
        assert command[command.index("-archivePath") + 1] == str(archive)
        assert command[command.index("-exportPath") + 1] == str(
            tmp_path / "ws" / "ubolite.macos.export"
        )
        assert command[-1] == str(tmp_path / "xcode" / "ExportOptions-macos.plist")


class TestRun:
    """Test running xcodebuild."""

    @pytest.mark.asyncio
    async def test_archive_success(self, driver: BuildDriver, tmp_path: Path) -> None:
        """A zero exit returns the .xcarchive path."""
        with patch(
            "safari_publisher.core.build.asyncio.create_subprocess_exec",
            new=AsyncMock(return_value=_process()),
        ) as mock_exec:
            archive = await driver.archive(Platform.MACOS)

        assert archive == tmp_path / "ws" / "ubolite.macos.xcarchive"
        args, kwargs = mock_exec.call_args
        assert list(args) == driver.archive_command(Platform.MACOS)
        assert kwargs["cwd"] == tmp_path / "xcode"

    @pytest.mark.asyncio
    async def test_export_success(self, driver: BuildDriver, tmp_path: Path) -> None:
        """A zero exit returns the export directory."""
        archive = tmp_path / "ws" / "ubolite.ios.xcarchive"
        with patch(
            "safari_publisher.core.build.asyncio.create_subprocess_exec",
            new=AsyncMock(return_value=_process()),
        ):
            export_dir = await driver.export(Platform.IOS, archive)

        assert export_dir == tmp_path / "ws" / "ubolite.ios.export"

    @pytest.mark.asyncio
    async def test_nonzero_exit(self, driver: BuildDriver) -> None:
        """A failing build raises BuildError with the exit code."""
        with patch(
            "safari_publisher.core.build.asyncio.create_subprocess_exec",
            new=AsyncMock(return_value=_process(65, b"line\n** ARCHIVE FAILED **")),
        ):
            with pytest.raises(BuildError) as exc_info:
                await driver.archive(Platform.IOS)

        assert exc_info.value.returncode == 65
        assert exc_info.value.target == "ios"
        assert exc_info.value.command[0] == "xcodebuild"

    @pytest.mark.asyncio
    async def test_missing_tool(self, driver: BuildDriver) -> None:
        """A tool that cannot start raises BuildError."""
        with patch(
            "safari_publisher.core.build.asyncio.create_subprocess_exec",
            new=AsyncMock(side_effect=FileNotFoundError("xcodebuild")),
        ):
            with pytest.raises(BuildError, match="could not run"):
                await driver.archive(Platform.IOS)
