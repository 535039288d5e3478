"""GitHub release API client.

Wraps the four release operations the publish run needs: look up a release
by tag, download an asset, upload an asset and delete an asset. Every
operation is a single request with token authorization. Transport errors,
non-2xx statuses and malformed bodies are all turned into a failed
``ApiResult``; nothing is retried.
"""

import shutil
import tempfile
from pathlib import Path
from typing import Any

import aiofiles
import aiohttp
import orjson

from safari_publisher.constants import (
    ACCEPT_OCTET_STREAM,
    DOWNLOAD_CHUNK_SIZE,
    DOWNLOAD_DIR_PREFIX,
    GITHUB_ACCEPT_JSON,
    GITHUB_API_BASE,
    GITHUB_API_VERSION,
)
from safari_publisher.core.github.models import Asset, Release
from safari_publisher.core.github.results import ApiResult, FailureKind
from safari_publisher.logger import get_logger

logger = get_logger(__name__)

HTTP_NOT_FOUND = 404

# Errors that mean "the request did not complete"
TRANSPORT_ERRORS = (aiohttp.ClientError, TimeoutError, OSError)


def _is_success(status: int) -> bool:
    return 200 <= status < 300


def _status_failure(status: int, what: str) -> ApiResult[Any]:
    if status == HTTP_NOT_FOUND:
        return ApiResult.fail(FailureKind.NOT_FOUND, f"{what}: not found", status)
    return ApiResult.fail(
        FailureKind.HTTP_ERROR, f"{what}: HTTP {status}", status
    )


def _discard_download(dest: Path, temp_dir: Path | None) -> None:
    """Remove a partial download and the temp directory made for it."""
    dest.unlink(missing_ok=True)
    if temp_dir is not None:
        shutil.rmtree(temp_dir)


class ReleaseClient:
    """Handles release and asset requests for one repository."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        owner: str,
        repo: str,
        token: str,
        api_base: str = GITHUB_API_BASE,
    ) -> None:
        """Initialize the release client.

        Args:
            session: aiohttp session for making requests
            owner: Repository owner
            repo: Repository name
            token: GitHub access token
            api_base: API root URL

        """
        self.session = session
        self.owner = owner
        self.repo = repo
        self._token = token
        self.api_base = api_base.rstrip("/")

    def _headers(self, accept: str = GITHUB_ACCEPT_JSON) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token}",
            "Accept": accept,
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        }

    def release_url(self, tag: str) -> str:
        """Return the API URL of the release tagged tag."""
        return (
            f"{self.api_base}/repos/{self.owner}/{self.repo}"
            f"/releases/tags/{tag}"
        )

    async def get_release_info(self, tag: str) -> ApiResult[Release]:
        """Fetch the release published under tag.

        Args:
            tag: Release tag

        Returns:
            Result carrying the Release

        """
        logger.info("Fetching release info for %s from GitHub", tag)
        url = self.release_url(tag)
        what = f"release {tag}"
        try:
            async with self.session.get(url, headers=self._headers()) as resp:
                if not _is_success(resp.status):
                    logger.warning("GET %s returned %s", url, resp.status)
                    return _status_failure(resp.status, what)
                data = await resp.json(loads=orjson.loads, content_type=None)
        except TRANSPORT_ERRORS as e:
            logger.warning("GET %s failed: %s", url, e)
            return ApiResult.fail(FailureKind.TRANSPORT_ERROR, f"{what}: {e}")
        except (orjson.JSONDecodeError, UnicodeDecodeError) as e:
            return ApiResult.fail(
                FailureKind.INVALID_RESPONSE, f"{what}: invalid JSON ({e})"
            )

        if not isinstance(data, dict):
            logger.warning(
                "Unexpected API response type for %s: %s", what, type(data)
            )
            return ApiResult.fail(
                FailureKind.INVALID_RESPONSE, f"{what}: not a JSON object"
            )
        release = Release.from_api_response(data)
        if release is None:
            return ApiResult.fail(
                FailureKind.INVALID_RESPONSE, f"{what}: malformed release data"
            )
        return ApiResult.success(release)

    async def get_asset_info(
        self, tag: str, name_part: str
    ) -> ApiResult[Asset]:
        """Find the first asset of a release whose name contains name_part.

        Args:
            tag: Release tag
            name_part: Substring of the asset name

        Returns:
            Result carrying the matching Asset

        """
        release_result = await self.get_release_info(tag)
        if not release_result.ok:
            return ApiResult.fail(
                release_result.failure or FailureKind.NOT_FOUND,
                release_result.reason,
                release_result.status,
            )

        asset = release_result.unwrap().find_asset(name_part)
        if asset is None:
            return ApiResult.fail(
                FailureKind.NO_MATCH,
                f"Asset '{name_part}' not found in release {tag}",
            )
        return ApiResult.success(asset)

    async def download_asset(
        self, asset: Asset, dest_dir: Path | None = None
    ) -> ApiResult[Path]:
        """Download an asset's bytes to dest_dir / asset.name.

        Args:
            asset: Asset to download
            dest_dir: Target directory; a fresh temp directory if None

        Returns:
            Result carrying the path of the downloaded file

        """
        logger.info("Fetching %s", asset.url)
        what = f"download {asset.name}"
        temp_dir = None
        if dest_dir is None:
            temp_dir = Path(tempfile.mkdtemp(prefix=DOWNLOAD_DIR_PREFIX))
            dest_dir = temp_dir
        dest = dest_dir / asset.name

        try:
            async with self.session.get(
                asset.url, headers=self._headers(ACCEPT_OCTET_STREAM)
            ) as resp:
                if not _is_success(resp.status):
                    logger.warning("GET %s returned %s", asset.url, resp.status)
                    _discard_download(dest, temp_dir)
                    return _status_failure(resp.status, what)
                async with aiofiles.open(dest, mode="wb") as f:
                    async for chunk in resp.content.iter_chunked(
                        DOWNLOAD_CHUNK_SIZE
                    ):
                        await f.write(chunk)
        except (aiohttp.ClientError, TimeoutError) as e:
            logger.warning("Download of %s failed: %s", asset.name, e)
            _discard_download(dest, temp_dir)
            return ApiResult.fail(FailureKind.TRANSPORT_ERROR, f"{what}: {e}")
        except OSError as e:
            logger.warning("Could not write %s: %s", dest, e)
            _discard_download(dest, temp_dir)
            return ApiResult.fail(FailureKind.IO_ERROR, f"{what}: {e}")

        logger.info("Asset saved at %s", dest)
        return ApiResult.success(dest)

    async def upload_asset(
        self,
        tag: str,
        path: Path,
        mime_type: str,
        name: str | None = None,
    ) -> ApiResult[dict[str, Any]]:
        """Upload a local file as a new asset of the release tagged tag.

        The release is re-fetched for its upload URL template.

        Args:
            tag: Release tag
            path: Local file to upload
            mime_type: Content type of the upload
            name: Asset name (defaults to the file name)

        Returns:
            Result carrying the created asset JSON

        """
        asset_name = name or path.name
        what = f"upload {asset_name}"
        try:
            async with aiofiles.open(path, mode="rb") as f:
                body = await f.read()
        except OSError as e:
            logger.warning("Could not read %s: %s", path, e)
            return ApiResult.fail(FailureKind.IO_ERROR, f"{what}: {e}")

        release_result = await self.get_release_info(tag)
        if not release_result.ok:
            return ApiResult.fail(
                release_result.failure or FailureKind.NOT_FOUND,
                release_result.reason,
                release_result.status,
            )
        endpoint = release_result.unwrap().upload_endpoint()
        if not endpoint:
            return ApiResult.fail(
                FailureKind.INVALID_RESPONSE, f"{what}: release has no upload_url"
            )

        logger.info("Uploading %s (%d bytes) to %s", asset_name, len(body), tag)
        headers = self._headers()
        headers["Content-Type"] = mime_type
        try:
            async with self.session.post(
                endpoint,
                params={"name": asset_name},
                data=body,
                headers=headers,
            ) as resp:
                if not _is_success(resp.status):
                    logger.warning("Upload of %s returned %s", asset_name, resp.status)
                    return _status_failure(resp.status, what)
                data = await resp.json(loads=orjson.loads, content_type=None)
        except TRANSPORT_ERRORS as e:
            logger.warning("Upload of %s failed: %s", asset_name, e)
            return ApiResult.fail(FailureKind.TRANSPORT_ERROR, f"{what}: {e}")
        except (orjson.JSONDecodeError, UnicodeDecodeError) as e:
            return ApiResult.fail(
                FailureKind.INVALID_RESPONSE, f"{what}: invalid JSON ({e})"
            )

        if not isinstance(data, dict):
            return ApiResult.fail(
                FailureKind.INVALID_RESPONSE, f"{what}: not a JSON object"
            )
        return ApiResult.success(data)

    async def delete_asset(self, asset_url: str) -> ApiResult[None]:
        """Delete an asset through its API URL.

        Args:
            asset_url: API URL of the asset

        Returns:
            Result whose ``ok`` tells whether the delete succeeded

        """
        logger.info("Deleting asset %s", asset_url)
        what = f"delete {asset_url}"
        try:
            async with self.session.delete(
                asset_url, headers=self._headers()
            ) as resp:
                if not _is_success(resp.status):
                    logger.warning("DELETE %s returned %s", asset_url, resp.status)
                    return _status_failure(resp.status, what)
                return ApiResult.success(status=resp.status)
        except TRANSPORT_ERRORS as e:
            logger.warning("DELETE %s failed: %s", asset_url, e)
            return ApiResult.fail(FailureKind.TRANSPORT_ERROR, f"{what}: {e}")
