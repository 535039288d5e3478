"""Publish pipeline: release asset in, Xcode builds out.

Stages run strictly in order, each awaited before the next starts:

    asset lookup -> download -> unpack -> replace resources -> manifest
    -> patch project -> per platform: archive [-> export [-> publish]]

All files live in one temporary workspace which is removed however the run
ends, unless the configuration asks to keep it.
"""

from dataclasses import dataclass, field
from pathlib import Path

from safari_publisher.config import PublishConfig
from safari_publisher.core.build import BuildDriver, Platform
from safari_publisher.core.github import ReleaseClient
from safari_publisher.core.patcher import PatchResult, patch_project_file
from safari_publisher.core.publisher import PublishOutcome, Publisher
from safari_publisher.core.staging import PackageStager
from safari_publisher.exceptions import PublishError
from safari_publisher.infrastructure.workspace import temporary_workspace
from safari_publisher.logger import get_logger

logger = get_logger(__name__)


@dataclass(slots=True)
class PublishSummary:
    """What a publish run produced."""

    version: str = ""
    patch: PatchResult | None = None
    archives: dict[Platform, Path] = field(default_factory=dict)
    exports: dict[Platform, Path] = field(default_factory=dict)
    published: dict[Platform, PublishOutcome] = field(default_factory=dict)


def upload_name_for(asset_name: str, platform: Platform) -> str:
    """Name of the re-uploaded build, e.g. ``pkg.safari.macos.zip``."""
    return f"{Path(asset_name).stem}.{platform.value}.zip"


def should_upload(config: PublishConfig, platform: Platform) -> bool:
    """Only the macOS export is uploaded back to GitHub."""
    return platform is Platform.MACOS and config.publish_to_github


async def run_publish(
    config: PublishConfig, client: ReleaseClient
) -> PublishSummary:
    """Run every stage of a publish for config.

    Args:
        config: Validated run configuration
        client: Release client for the configured repository

    Returns:
        Summary of the produced artifacts

    Raises:
        PublishError: If the source asset cannot be found or fetched,
            or an upload fails
        StagingError: If the package cannot be staged
        PatchError: If the project descriptor cannot be patched
        BuildError: If xcodebuild fails

    """
    summary = PublishSummary()

    with temporary_workspace(
        keep=config.keep, keep_on_failure=config.keep_on_failure
    ) as workspace:
        asset_result = await client.get_asset_info(config.tag, config.asset)
        if not asset_result.ok:
            raise PublishError(asset_result.reason, config.asset)
        asset = asset_result.unwrap()

        download = await client.download_asset(asset, dest_dir=workspace)
        if not download.ok:
            raise PublishError(download.reason, asset.name)
        archive_file = download.unwrap()

        stager = PackageStager(workspace)
        unpacked = stager.unpack(archive_file)
        stager.replace_resources(unpacked, config.resources_dir)
        manifest = stager.read_manifest(config.resources_dir)
        summary.version = manifest.version

        summary.patch = patch_project_file(
            config.project_file,
            manifest.version,
            distribute=config.distribute,
        )

        driver = BuildDriver(config.project_dir, workspace)
        publisher = Publisher(client, config.tag)
        for platform in config.platforms:
            archive = await driver.archive(platform)
            summary.archives[platform] = archive
            if config.publish is None:
                continue

            export_dir = await driver.export(platform, archive)
            summary.exports[platform] = export_dir
            if should_upload(config, platform):
                summary.published[platform] = await publisher.publish(
                    export_dir,
                    asset,
                    upload_name_for(asset.name, platform),
                )

    logger.info("Published version %s", summary.version)
    return summary
