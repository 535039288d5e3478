"""GitHub release and asset models."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from safari_publisher.logger import get_logger

logger = get_logger(__name__)

# RFC 6570 query expansion at the end of GitHub's upload_url,
# e.g. ".../assets{?name,label}"
_URI_TEMPLATE_SUFFIX = re.compile(r"\{\?[^}]*\}$")


@dataclass(slots=True, frozen=True)
class Asset:
    """Represents a GitHub release asset.

    Attributes:
        id: Asset id
        name: Asset filename
        size: Asset size in bytes
        url: API URL (download with an octet-stream Accept header, delete)
        browser_download_url: Public download URL

    """

    id: int
    name: str
    size: int
    url: str
    browser_download_url: str

    @classmethod
    def from_api_response(cls, asset_data: dict[str, Any]) -> Asset | None:
        """Create Asset from GitHub API response data.

        Returns:
            Asset instance or None if required fields are missing

        """
        try:
            name = asset_data.get("name", "")
            url = asset_data.get("url", "")
            if not isinstance(name, str) or not isinstance(url, str):
                return None
            if not name or not url:
                return None
            return cls(
                id=int(asset_data.get("id", 0)),
                name=name,
                size=int(asset_data.get("size", 0)),
                url=url,
                browser_download_url=asset_data.get(
                    "browser_download_url", ""
                ),
            )
        except (AttributeError, TypeError, ValueError):
            return None


@dataclass(slots=True, frozen=True)
class Release:
    """Represents a GitHub release with its upload template and assets.

    Attributes:
        id: Release id
        tag_name: Tag the release was published under
        upload_url: RFC 6570 template for asset uploads
        assets: Assets in the order returned by the API

    """

    id: int
    tag_name: str
    upload_url: str
    assets: list[Asset] = field(default_factory=list)

    @classmethod
    def from_api_response(cls, api_data: dict[str, Any]) -> Release | None:
        """Create Release from GitHub API response data.

        Returns:
            Release instance or None if a field has the wrong type

        """
        tag_name = api_data.get("tag_name") or ""
        upload_url = api_data.get("upload_url") or ""
        if not isinstance(tag_name, str) or not isinstance(upload_url, str):
            return None

        try:
            release_id = int(api_data.get("id") or 0)
            assets = []
            for asset_data in api_data.get("assets") or []:
                if not isinstance(asset_data, dict):
                    continue
                asset = Asset.from_api_response(asset_data)
                if asset:
                    assets.append(asset)
        except (TypeError, ValueError):
            return None

        return cls(
            id=release_id,
            tag_name=tag_name,
            upload_url=upload_url,
            assets=assets,
        )

    def find_asset(self, name_part: str) -> Asset | None:
        """Return the first asset whose name contains name_part.

        List order decides between several matches; a warning names the
        ones that were passed over.
        """
        matches = [asset for asset in self.assets if name_part in asset.name]
        if not matches:
            return None
        if len(matches) > 1:
            logger.warning(
                "'%s' matches %d assets in %s, using %s (ignored: %s)",
                name_part,
                len(matches),
                self.tag_name,
                matches[0].name,
                ", ".join(asset.name for asset in matches[1:]),
            )
        return matches[0]

    def upload_endpoint(self) -> str:
        """Return the upload URL with its URI-template suffix removed."""
        return _URI_TEMPLATE_SUFFIX.sub("", self.upload_url)
