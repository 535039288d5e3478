"""GitHub release API client and models."""

from safari_publisher.core.github.client import ReleaseClient
from safari_publisher.core.github.models import Asset, Release
from safari_publisher.core.github.results import ApiResult, FailureKind

__all__ = [
    "ApiResult",
    "Asset",
    "FailureKind",
    "Release",
    "ReleaseClient",
]
