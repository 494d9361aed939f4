import pytest
import requests

from nerdfetch import listing
from nerdfetch.constants import GITHUB_API_TIMEOUT, NERD_FONTS_RELEASES_URL
from nerdfetch.exceptions import ListingFetchError
from nerdfetch.listing import FontAsset


@pytest.fixture
def release_payload():
    """
    Provide a trimmed GitHub release payload with zip, tar.xz and oddball assets.
    """
    return {
        "tag_name": "v3.2.1",
        "assets": [
            {"name": "nerd-fonts-FiraCode.zip"},
            {"name": "nerd-fonts-FiraCode.tar.xz"},
            {"name": "Hack.zip"},
            {"name": "Hack.tar.xz"},
            {"name": "JetBrainsMono.zip"},
            {"name": None},
            {"label": "no name"},
            "not-a-dict",
            {"name": "Hack.zip"},
        ],
    }


@pytest.mark.parametrize(
    "asset_name, expected",
    [
        ("nerd-fonts-FiraCode.zip", "FiraCode"),
        ("Hack.zip", "Hack"),
        ("nerd-fonts-Foo.tar.xz", None),
        ("Foo.tar.xz", None),
        ("nerd-fonts-.zip", None),
        ("", None),
    ],
)
def test_asset_name_to_identifier(asset_name, expected):
    assert listing.asset_name_to_identifier(asset_name) == expected


def test_parse_release_assets(release_payload):
    fonts = listing.parse_release_assets(release_payload)

    assert fonts == [FontAsset("FiraCode"), FontAsset("Hack"), FontAsset("JetBrainsMono")]


@pytest.mark.parametrize("payload", [[], "release", {"assets": None}, {}])
def test_parse_release_assets_rejects_bad_payload(payload):
    with pytest.raises(ListingFetchError):
        listing.parse_release_assets(payload)


def test_fetch_font_assets(mocker, release_payload):
    session = mocker.MagicMock()
    session.get.return_value.json.return_value = release_payload

    fonts = listing.fetch_font_assets(session)

    session.get.assert_called_once_with(
        NERD_FONTS_RELEASES_URL, timeout=GITHUB_API_TIMEOUT
    )
    assert [font.name for font in fonts] == ["FiraCode", "Hack", "JetBrainsMono"]
    session.close.assert_not_called()


def test_fetch_font_assets_creates_and_closes_session(mocker, release_payload):
    session = mocker.MagicMock()
    session.get.return_value.json.return_value = release_payload
    mocker.patch("nerdfetch.listing.create_session", return_value=session)

    listing.fetch_font_assets()

    session.close.assert_called_once()


def test_fetch_font_assets_http_error(mocker):
    session = mocker.MagicMock()
    session.get.return_value.raise_for_status.side_effect = requests.HTTPError(
        "403 rate limited"
    )

    with pytest.raises(ListingFetchError) as exc_info:
        listing.fetch_font_assets(session)
    assert "403 rate limited" in str(exc_info.value)


def test_fetch_font_assets_connection_error(mocker):
    session = mocker.MagicMock()
    session.get.side_effect = requests.ConnectionError("no route")

    with pytest.raises(ListingFetchError):
        listing.fetch_font_assets(session)


def test_fetch_font_assets_invalid_json(mocker):
    session = mocker.MagicMock()
    session.get.return_value.json.side_effect = ValueError("Expecting value")

    with pytest.raises(ListingFetchError):
        listing.fetch_font_assets(session)


def test_font_asset_to_dict():
    assert FontAsset("Hack").to_dict() == {"name": "Hack"}
