# src/nerdfetch/menu.py

from typing import List, Optional, Sequence

import requests
from pick import pick

from nerdfetch.cache import ListingCache, get_listing
from nerdfetch.constants import MSG_NO_FONTS_AVAILABLE
from nerdfetch.listing import FontAsset, fetch_font_assets
from nerdfetch.log_utils import logger


def select_fonts(assets: Sequence[FontAsset]) -> List[str]:
    """
    Present an interactive multi-select prompt for the available fonts.

    Returns the chosen identifiers in listing order. When `assets` is empty nothing is
    shown and an empty list is returned, so an unavailable listing looks the same as
    the user picking nothing.

    Parameters:
        assets (Sequence[FontAsset]): Fonts to offer.

    Returns:
        list[str]: Selected font identifiers, possibly empty.
    """
    options = [asset.name for asset in assets]
    if not options:
        logger.warning(MSG_NO_FONTS_AVAILABLE)
        return []

    title = "Select the fonts you want to download (press SPACE to select, ENTER to confirm):"
    selected_options = pick(
        options, title, multiselect=True, min_selection_count=0, indicator="*"
    )
    selected_indexes = sorted(option[1] for option in selected_options)
    return [options[index] for index in selected_indexes]


def run_menu(
    cache: Optional[ListingCache] = None,
    session: Optional[requests.Session] = None,
) -> List[str]:
    """
    Fetch the font listing (through the cache) and prompt the user to pick from it.
    """
    result = get_listing(cache, fetcher=lambda: fetch_font_assets(session))
    if result.from_cache:
        logger.debug("Font listing served from cache")
    return select_fonts(result.entries)
