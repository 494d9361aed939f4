# src/nerdfetch/utils.py
import importlib.metadata
import os
import platform
from typing import Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry  # type: ignore

from nerdfetch.constants import (
    APP_NAME,
    DEFAULT_BACKOFF_FACTOR,
    DEFAULT_CONNECT_RETRIES,
    NETWORK_CHECK_TIMEOUT,
    NETWORK_CHECK_URL,
)
from nerdfetch.exceptions import NetworkError
from nerdfetch.log_utils import logger

SIZE_UNITS = ("Bytes", "KB", "MB", "GB", "TB")

# Cache for the User-Agent string to avoid repeated metadata lookups
_USER_AGENT_CACHE: Optional[str] = None


def get_version() -> str:
    """
    Return the installed nerdfetch version, or "unknown" when the package metadata is missing.
    """
    try:
        return importlib.metadata.version(APP_NAME)
    except importlib.metadata.PackageNotFoundError:
        return "unknown"


def get_user_agent() -> str:
    """
    Get the User-Agent string used for HTTP requests.

    Returns:
        The string `nerdfetch/{version}`, where `{version}` is the installed package version or `unknown`.
    """
    global _USER_AGENT_CACHE

    if _USER_AGENT_CACHE is None:
        _USER_AGENT_CACHE = f"{APP_NAME}/{get_version()}"

    return _USER_AGENT_CACHE


def create_session() -> requests.Session:
    """
    Build a requests session with retry-capable adapters and the nerdfetch User-Agent.

    Connection errors and transient HTTP statuses (408, 429, 5xx) are retried with
    exponential backoff by urllib3; the final status is left for the caller to raise.
    """
    session = requests.Session()
    retry_strategy: Retry = Retry(
        total=DEFAULT_CONNECT_RETRIES,
        connect=DEFAULT_CONNECT_RETRIES,
        read=DEFAULT_CONNECT_RETRIES,
        status=DEFAULT_CONNECT_RETRIES,
        backoff_factor=DEFAULT_BACKOFF_FACTOR,
        status_forcelist=[408, 429, 500, 502, 503, 504],
        allowed_methods=frozenset({"GET", "HEAD"}),
        raise_on_status=False,
        respect_retry_after_header=True,
    )
    adapter = HTTPAdapter(max_retries=retry_strategy)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    session.headers.update({"User-Agent": get_user_agent()})
    return session


def bytes_to_size(num_bytes: int) -> str:
    """
    Format a byte count as a short human readable size.

    Sizes are scaled by powers of 1024 and rounded to two decimals with trailing
    zeros dropped, e.g. 0 -> "0 Byte", 1536 -> "1.5 KB", 1048576 -> "1 MB".
    """
    if num_bytes <= 0:
        return "0 Byte"

    value = float(num_bytes)
    unit_index = 0
    while value >= 1024 and unit_index < len(SIZE_UNITS) - 1:
        value /= 1024
        unit_index += 1

    return f"{round(value, 2):g} {SIZE_UNITS[unit_index]}"


def check_network_available(
    session: Optional[requests.Session] = None,
    url: str = NETWORK_CHECK_URL,
) -> None:
    """
    Send a HEAD request to `url` and raise if the network cannot be reached.

    Any HTTP answer counts as reachable; only transport failures are treated as
    the network being down.

    Raises:
        NetworkError: If the connectivity check fails to connect or times out.
    """
    http = session or requests
    try:
        http.head(url, timeout=NETWORK_CHECK_TIMEOUT, allow_redirects=True)
    except requests.RequestException as e:
        logger.debug(f"Network check against {url} failed: {e}")
        raise NetworkError("Network is unreachable", url=url, details=str(e)) from e


def is_windows() -> bool:
    return platform.system() == "Windows"


def is_termux() -> bool:
    """
    Check if the current environment is Termux.
    """
    return "com.termux" in os.environ.get("PREFIX", "")


def is_android() -> bool:
    """Check whether we are running on Android (Termux or a bare Android userland)."""
    return is_termux() or "ANDROID_ROOT" in os.environ
