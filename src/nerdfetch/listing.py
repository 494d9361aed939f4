"""
Remote font listing for nerdfetch.

Fetches the latest Nerd Fonts GitHub release and turns its asset filenames
into font identifiers (``nerd-fonts-FiraCode.zip`` -> ``FiraCode``).
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

from nerdfetch.constants import (
    ASSET_NAME_PREFIX,
    EXCLUDED_ASSET_MARKER,
    GITHUB_API_TIMEOUT,
    NERD_FONTS_RELEASES_URL,
    ZIP_EXTENSION,
)
from nerdfetch.exceptions import ListingFetchError
from nerdfetch.log_utils import logger
from nerdfetch.utils import create_session


@dataclass(frozen=True)
class FontAsset:
    """A downloadable font bundle, identified by its short name."""

    name: str

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name}


def asset_name_to_identifier(asset_name: str) -> Optional[str]:
    """
    Derive a font identifier from a release asset filename.

    Returns:
        str | None: The filename without the ``nerd-fonts-`` prefix and ``.zip`` suffix,
        or None for assets that are not zip bundles (e.g. ``.tar.xz``) or would
        produce an empty identifier.
    """
    if not asset_name or EXCLUDED_ASSET_MARKER in asset_name:
        return None
    identifier = asset_name
    if identifier.startswith(ASSET_NAME_PREFIX):
        identifier = identifier[len(ASSET_NAME_PREFIX) :]
    if identifier.endswith(ZIP_EXTENSION):
        identifier = identifier[: -len(ZIP_EXTENSION)]
    return identifier or None


def parse_release_assets(release: Any) -> List[FontAsset]:
    """
    Extract font assets from a GitHub release payload.

    Asset order is preserved; duplicate identifiers keep their first occurrence and
    assets without a usable string name are skipped.

    Raises:
        ListingFetchError: If the payload is not an object with an ``assets`` list.
    """
    if not isinstance(release, dict):
        raise ListingFetchError(
            "Unexpected release payload", details=f"got {type(release).__name__}"
        )
    assets = release.get("assets")
    if not isinstance(assets, list):
        raise ListingFetchError("Release payload has no assets list")

    fonts: List[FontAsset] = []
    seen = set()
    for asset in assets:
        if not isinstance(asset, dict):
            continue
        name = asset.get("name")
        if not isinstance(name, str):
            continue
        identifier = asset_name_to_identifier(name)
        if identifier is None or identifier in seen:
            continue
        seen.add(identifier)
        fonts.append(FontAsset(name=identifier))
    return fonts


def fetch_font_assets(
    session: Optional[requests.Session] = None,
    url: str = NERD_FONTS_RELEASES_URL,
) -> List[FontAsset]:
    """
    Fetch the list of downloadable fonts from the latest Nerd Fonts release.

    Parameters:
        session (requests.Session | None): Session to use; a retrying session with the
            nerdfetch User-Agent is created when omitted.
        url (str): Release endpoint to query.

    Returns:
        list[FontAsset]: Fonts in release asset order.

    Raises:
        ListingFetchError: On network errors, non-OK responses, or malformed JSON.
    """
    http = session or create_session()
    try:
        response = http.get(url, timeout=GITHUB_API_TIMEOUT)
        response.raise_for_status()
        release = response.json()
    except requests.RequestException as e:
        raise ListingFetchError(
            "Error fetching available fonts", details=str(e)
        ) from e
    except ValueError as e:
        raise ListingFetchError(
            "Release response is not valid JSON", details=str(e)
        ) from e
    finally:
        if session is None:
            http.close()

    fonts = parse_release_assets(release)
    logger.debug(f"Fetched {len(fonts)} fonts from {url}")
    return fonts
