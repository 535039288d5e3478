"""Filesystem and credential infrastructure for safari-publisher."""

from safari_publisher.infrastructure.locator import (
    find_repo_root,
    find_upward,
    safari_project_dir,
)
from safari_publisher.infrastructure.secrets import (
    KeyringTokenStore,
    Secrets,
    load_secrets,
    resolve_token,
)
from safari_publisher.infrastructure.workspace import temporary_workspace

__all__ = [
    "KeyringTokenStore",
    "Secrets",
    "find_repo_root",
    "find_upward",
    "load_secrets",
    "resolve_token",
    "safari_project_dir",
    "temporary_workspace",
]
