"""Run configuration for safari-publisher.

Everything a publish run needs is gathered once at startup into an
immutable ``PublishConfig`` and passed to each stage.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from safari_publisher.constants import (
    EXPORT_OPTIONS_TEMPLATE,
    PROJECT_DESCRIPTOR_NAME,
    PUBLISH_TARGET_GITHUB,
    RESOURCES_SUBDIR,
    XCODE_PROJECT_NAME,
)
from safari_publisher.core.build import Platform
from safari_publisher.exceptions import ConfigurationError
from safari_publisher.infrastructure.locator import safari_project_dir
from safari_publisher.infrastructure.secrets import (
    KeyringTokenStore,
    Secrets,
    resolve_token,
)

FALSE_VALUES = frozenset({"false", "0", "no", "off"})


def flag_enabled(args: Mapping[str, str], name: str) -> bool:
    """Return True if name was given and not explicitly set to false.

    A bare ``name`` argument is stored with an empty value and counts as
    enabled.
    """
    if name not in args:
        return False
    return args[name].strip().lower() not in FALSE_VALUES


def select_platforms(args: Mapping[str, str]) -> tuple[Platform, ...]:
    """Return the platforms to build, in build order.

    Enabled platform flags are built. With none enabled, every platform
    that was not explicitly turned off is built, so ``ios=false`` alone
    builds macOS only.
    """
    enabled = tuple(p for p in Platform if flag_enabled(args, p.value))
    if enabled:
        return enabled
    return tuple(p for p in Platform if p.value not in args)


@dataclass(slots=True, frozen=True)
class PublishConfig:
    """Immutable configuration of a single publish run.

    Attributes:
        owner: GitHub repository owner
        repo: GitHub repository name
        tag: Release tag holding the source asset
        asset: Substring selecting the source asset
        token: GitHub access token
        repo_root: Root of the local checkout
        platforms: Platforms to build, in build order
        publish: Publish target ("" for export only), None when not
            publishing
        distribute: Bump the build number
        keep: Keep the workspace after the run
        keep_on_failure: Keep the workspace only when the run fails
        verbose: Debug output on the console

    """

    owner: str
    repo: str
    tag: str
    asset: str
    token: str
    repo_root: Path
    platforms: tuple[Platform, ...] = (Platform.IOS, Platform.MACOS)
    publish: str | None = None
    distribute: bool = False
    keep: bool = False
    keep_on_failure: bool = False
    verbose: bool = False

    @property
    def project_dir(self) -> Path:
        return safari_project_dir(self.repo_root)

    @property
    def resources_dir(self) -> Path:
        return self.project_dir / RESOURCES_SUBDIR

    @property
    def project_file(self) -> Path:
        return self.project_dir / XCODE_PROJECT_NAME / PROJECT_DESCRIPTOR_NAME

    def export_options(self, platform: Platform) -> Path:
        """Export options plist used when exporting for platform."""
        return self.project_dir / EXPORT_OPTIONS_TEMPLATE.format(
            platform=platform.value
        )

    @property
    def publish_to_github(self) -> bool:
        return (self.publish or "").lower() == PUBLISH_TARGET_GITHUB

    @classmethod
    def from_sources(
        cls,
        args: Mapping[str, str],
        secrets: Secrets | None,
        repo_root: Path | None,
        environ: Mapping[str, str] | None = None,
        token_store: KeyringTokenStore | None = None,
    ) -> PublishConfig:
        """Validate inputs and assemble the run configuration.

        Args:
            args: Parsed ``name=value`` command-line flags
            secrets: Loaded secrets, None if no secrets file was found
            repo_root: Checkout root, None if not found
            environ: Environment (defaults to os.environ)
            token_store: Keyring fallback for the token

        Returns:
            Validated configuration

        Raises:
            ConfigurationError: If a required input is missing

        """
        env = os.environ if environ is None else environ

        token = resolve_token(secrets, token_store)
        if token is None:
            raise ConfigurationError("Need secrets")

        owner = args.get("githubOwner") or env.get("GITHUB_OWNER", "")
        if not owner:
            raise ConfigurationError("Need GitHub owner")
        repo = args.get("githubRepo") or env.get("GITHUB_REPO", "")
        if not repo:
            raise ConfigurationError("Need GitHub repo")

        tag = args.get("tag", "")
        if not tag:
            raise ConfigurationError("Need tag=[...]")
        asset = args.get("asset", "")
        if not asset:
            raise ConfigurationError("Need asset=[...]")

        if repo_root is None:
            raise ConfigurationError("Need repo root")

        platforms = select_platforms(args)
        if not platforms:
            raise ConfigurationError("Need ios or macos")

        return cls(
            owner=owner,
            repo=repo,
            tag=tag,
            asset=asset,
            token=token,
            repo_root=repo_root,
            platforms=platforms,
            publish=args["publish"] if flag_enabled(args, "publish") else None,
            distribute=flag_enabled(args, "distribute"),
            keep=flag_enabled(args, "keep"),
            keep_on_failure=flag_enabled(args, "keepOnFailure"),
            verbose=flag_enabled(args, "verbose"),
        )
