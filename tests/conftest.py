"""Pytest configuration and fixtures for safari-publisher tests."""

import logging
import os
import tempfile
import zipfile
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

# Keep test logs out of ~/.config; must be set before the package is imported
os.environ.setdefault(
    "SAFARI_PUBLISHER_LOG_DIR",
    str(Path(tempfile.gettempdir()) / "safari-publisher-test-logs"),
)

PBXPROJ_TEMPLATE = """// !$*UTF8*$!
{{
\tobjects = {{
\t\tA1 /* Debug */ = {{
\t\t\tbuildSettings = {{
\t\t\t\tCURRENT_PROJECT_VERSION = {build};
\t\t\t\tMARKETING_VERSION = {version};
\t\t\t}};
\t\t}};
\t\tA2 /* Release */ = {{
\t\t\tbuildSettings = {{
\t\t\t\tCURRENT_PROJECT_VERSION = {build};
\t\t\t\tMARKETING_VERSION = {version};
\t\t\t}};
\t\t}};
\t}};
}}
"""

EXEC_PATH = "safari_publisher.core.build.asyncio.create_subprocess_exec"


@pytest.fixture(autouse=True)
def enable_log_propagation():
    """Enable log propagation so caplog sees safari_publisher records."""
    original_propagation = {}
    for name in list(logging.Logger.manager.loggerDict.keys()):
        if name.startswith("safari_publisher"):
            logger = logging.getLogger(name)
            original_propagation[name] = logger.propagate
            logger.propagate = True

    yield

    for name, propagate_value in original_propagation.items():
        logging.getLogger(name).propagate = propagate_value


def make_package_zip(
    path: Path, version: str = "2.3.4", extra: dict[str, str] | None = None
) -> Path:
    """Write an extension package zip with a manifest to path."""
    files = {
        "manifest.json": f'{{"name": "uBO Lite", "version": "{version}"}}',
        "js/background.js": "console.log('hi');",
    }
    files.update(extra or {})
    with zipfile.ZipFile(path, "w") as zf:
        for name, content in files.items():
            zf.writestr(name, content)
    return path


@pytest.fixture
def package_zip(tmp_path: Path) -> Path:
    """Packaged extension build with version 2.3.4."""
    return make_package_zip(tmp_path / "package.zip")


@pytest.fixture
def repo_root(tmp_path: Path) -> Path:
    """Checkout with a .git marker, Xcode project and stale resources."""
    root = tmp_path / "checkout"
    (root / ".git").mkdir(parents=True)
    project_dir = root / "platform" / "mv3" / "safari" / "xcode"
    resources = project_dir / "Shared (Extension)" / "Resources"
    resources.mkdir(parents=True)
    (resources / "old.txt").write_text("stale")
    pbxproj = project_dir / "uBlock Origin Lite.xcodeproj" / "project.pbxproj"
    pbxproj.parent.mkdir(parents=True)
    pbxproj.write_text(PBXPROJ_TEMPLATE.format(build=5, version="1.0.0"))
    return root


@pytest.fixture
def release_payload() -> dict:
    """GitHub API payload for release v1.2.3 with one package asset."""
    return {
        "id": 42,
        "tag_name": "v1.2.3",
        "upload_url": (
            "https://uploads.github.com/repos/owner/repo/releases/42/assets"
            "{?name,label}"
        ),
        "assets": [
            {
                "id": 7,
                "name": "package.zip",
                "size": 1024,
                "url": "https://api.github.com/repos/owner/repo/releases/assets/7",
                "browser_download_url": (
                    "https://github.com/owner/repo/releases/download/"
                    "v1.2.3/package.zip"
                ),
            }
        ],
    }


class FakeXcodebuild:
    """Records xcodebuild invocations and fakes their outputs.

    Patch it in at EXEC_PATH; export calls create the export directory.
    """

    def __init__(self, returncode: int = 0) -> None:
        self.returncode = returncode
        self.commands: list[list[str]] = []

    async def __call__(self, *args, **kwargs):
        command = list(args)
        self.commands.append(command)
        if self.returncode == 0 and "-exportArchive" in command:
            export_dir = Path(command[command.index("-exportPath") + 1])
            (export_dir / "app").mkdir(parents=True)
            (export_dir / "app" / "binary").write_text("x")
        process = MagicMock()
        process.returncode = self.returncode
        process.communicate = AsyncMock(return_value=(b"", None))
        return process

    @property
    def workspace(self) -> Path:
        """Workspace of the run, taken from the first archive path."""
        first = self.commands[0]
        return Path(first[first.index("-archivePath") + 1]).parent
