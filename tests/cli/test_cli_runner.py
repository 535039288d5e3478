"""Tests for the CLI runner."""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from aioresponses import aioresponses

from safari_publisher.cli import CLIRunner
from safari_publisher.cli.runner import EXIT_FAILURE, EXIT_OK
from safari_publisher.core.build import Platform
from safari_publisher.exceptions import BuildError, ConfigurationError
from tests.conftest import EXEC_PATH, FakeXcodebuild

RELEASE_URL = "https://api.github.com/repos/owner/repo/releases/tags/v1.2.3"
ASSET_URL = "https://api.github.com/repos/owner/repo/releases/assets/7"


@pytest.fixture
def checkout(repo_root: Path) -> Path:
    """repo_root with a secrets file next to it."""
    (repo_root.parent / "ubo_secrets").write_text('{"github_token": "tok"}')
    return repo_root


@pytest.fixture
def runner(checkout: Path) -> CLIRunner:
    store = MagicMock()
    store.get.return_value = None
    return CLIRunner(
        cwd=checkout / "platform",
        home=checkout.parent,
        environ={"GITHUB_OWNER": "owner", "GITHUB_REPO": "repo"},
        token_store=store,
    )


class TestBuildConfig:
    """Test configuration assembly from the checkout."""

    def test_build_config(self, runner: CLIRunner, checkout: Path) -> None:
        """Secrets, repo root and flags are combined."""
        config = runner.build_config(
            ["tag=v1.2.3", "asset=package.zip", "macos", "publish=github"]
        )

        assert config.token == "tok"
        assert config.repo_root == checkout.resolve()
        assert config.owner == "owner"
        assert config.platforms == (Platform.MACOS,)
        assert config.publish_to_github

    def test_verbose_raises_console_level(self, runner: CLIRunner) -> None:
        with patch("safari_publisher.cli.runner.set_console_level") as mock_level:
            runner.build_config(["tag=v1", "asset=a", "verbose"])

        mock_level.assert_called_once_with("DEBUG")

    def test_missing_tag(self, runner: CLIRunner) -> None:
        with pytest.raises(ConfigurationError, match=r"Need tag=\[\.\.\.\]"):
            runner.build_config(["asset=package.zip"])


class TestRun:
    """Test exit codes."""

    @pytest.mark.asyncio
    async def test_success_exit_code(self, runner: CLIRunner) -> None:
        with patch.object(runner, "publish", new=AsyncMock()) as mock_publish:
            code = await runner.run(["tag=v1.2.3", "asset=package.zip"])

        assert code == EXIT_OK
        mock_publish.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_configuration_error_exit_code(
        self, runner: CLIRunner, caplog
    ) -> None:
        """Missing flags end the run with a non-zero code."""
        with patch.object(runner, "publish", new=AsyncMock()) as mock_publish:
            code = await runner.run(["tag=v1.2.3"])

        assert code == EXIT_FAILURE
        assert "Need asset=[...]" in caplog.text
        mock_publish.assert_not_called()

    @pytest.mark.asyncio
    async def test_build_error_exit_code(self, runner: CLIRunner) -> None:
        """Pipeline failures are reported, not raised."""
        with patch.object(
            runner,
            "publish",
            new=AsyncMock(side_effect=BuildError("xcodebuild exited", "ios")),
        ):
            code = await runner.run(["tag=v1.2.3", "asset=package.zip"])

        assert code == EXIT_FAILURE


class TestEndToEnd:
    """Run the CLI from flags to exit code against a mocked GitHub."""

    @pytest.mark.asyncio
    async def test_ios_publish_run(
        self,
        runner: CLIRunner,
        checkout: Path,
        package_zip: Path,
        release_payload: dict,
    ) -> None:
        """iOS is archived and exported, nothing is uploaded, cleanup runs."""
        xcodebuild = FakeXcodebuild()

        with aioresponses() as m, patch(EXEC_PATH, new=xcodebuild):
            m.get(RELEASE_URL, payload=release_payload)
            m.get(ASSET_URL, body=package_zip.read_bytes())
            code = await runner.run(
                ["tag=v1.2.3", "asset=package.zip", "ios=true", "publish=github"]
            )
            methods = {method for method, _ in m.requests}

        assert code == EXIT_OK
        assert [c[1] for c in xcodebuild.commands] == ["clean", "-exportArchive"]
        assert methods == {"GET"}
        assert not xcodebuild.workspace.exists()

        project_dir = checkout / "platform" / "mv3" / "safari" / "xcode"
        resources = project_dir / "Shared (Extension)" / "Resources"
        assert not (resources / "old.txt").exists()
        assert (resources / "manifest.json").is_file()
        pbxproj = project_dir / "uBlock Origin Lite.xcodeproj" / "project.pbxproj"
        assert "MARKETING_VERSION = 2.3.4;" in pbxproj.read_text()

    @pytest.mark.asyncio
    async def test_missing_release_exit_code(
        self, runner: CLIRunner, caplog
    ) -> None:
        """A 404 for the tag ends the run with exit code 1."""
        with aioresponses() as m:
            m.get(RELEASE_URL, status=404)
            code = await runner.run(["tag=v1.2.3", "asset=package.zip"])

        assert code == EXIT_FAILURE
        assert "release v1.2.3: not found" in caplog.text
