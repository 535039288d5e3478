"""Tests for release and asset models."""

from safari_publisher.core.github import Asset, Release


def _asset(name: str, asset_id: int = 1) -> dict:
    return {
        "id": asset_id,
        "name": name,
        "size": 10,
        "url": f"https://api.github.com/repos/o/r/releases/assets/{asset_id}",
        "browser_download_url": f"https://github.com/o/r/releases/download/v1/{name}",
    }


class TestAsset:
    """Test Asset.from_api_response."""

    def test_from_api_response(self) -> None:
        """All fields are read from the payload."""
        asset = Asset.from_api_response(_asset("package.zip", 7))
        assert asset is not None
        assert asset.id == 7
        assert asset.name == "package.zip"
        assert asset.url.endswith("/assets/7")

    def test_missing_required_fields(self) -> None:
        """Assets without a name or API URL are dropped."""
        assert Asset.from_api_response({"name": "x.zip"}) is None
        assert Asset.from_api_response({"url": "https://x"}) is None

    def test_bad_numbers(self) -> None:
        """Non-numeric sizes make the asset invalid."""
        data = _asset("x.zip")
        data["size"] = "big"
        assert Asset.from_api_response(data) is None


class TestRelease:
    """Test Release parsing and asset selection."""

    def test_from_api_response(self, release_payload: dict) -> None:
        """Release fields and assets are parsed in order."""
        release = Release.from_api_response(release_payload)
        assert release.id == 42
        assert release.tag_name == "v1.2.3"
        assert [a.name for a in release.assets] == ["package.zip"]

    def test_invalid_assets_are_skipped(self) -> None:
        """Malformed asset entries do not break parsing."""
        release = Release.from_api_response(
            {"id": 1, "assets": ["junk", {"name": "no-url"}, _asset("ok.zip")]}
        )
        assert [a.name for a in release.assets] == ["ok.zip"]

    def test_find_asset_first_match_wins(self, caplog) -> None:
        """Ambiguous substrings select the first asset in list order."""
        release = Release.from_api_response(
            {
                "id": 1,
                "tag_name": "v1",
                "assets": [_asset("foobar", 1), _asset("foobaz", 2)],
            }
        )

        asset = release.find_asset("foo")

        assert asset is not None
        assert asset.name == "foobar"
        assert "matches 2 assets" in caplog.text

    def test_find_asset_no_match(self, release_payload: dict) -> None:
        """None when no asset name contains the substring."""
        release = Release.from_api_response(release_payload)
        assert release.find_asset("chromium") is None

    def test_upload_endpoint_strips_template(self, release_payload: dict) -> None:
        """The RFC 6570 query template is removed from upload_url."""
        release = Release.from_api_response(release_payload)
        assert release.upload_endpoint() == (
            "https://uploads.github.com/repos/owner/repo/releases/42/assets"
        )
