"""
Constants and configuration values for nerdfetch.

This module contains all hardcoded values, URLs, timeouts, and other constants
used throughout the application.
"""

# GitHub URLs
GITHUB_API_BASE = "https://api.github.com/repos"
NERD_FONTS_RELEASES_URL = f"{GITHUB_API_BASE}/ryanoasis/nerd-fonts/releases/latest"
NERD_FONTS_DOWNLOAD_URL = (
    "https://github.com/ryanoasis/nerd-fonts/releases/latest/download"
)
NETWORK_CHECK_URL = "https://api.github.com"

# Network timeouts (in seconds)
GITHUB_API_TIMEOUT = 10
NETWORK_CHECK_TIMEOUT = 5

# Download and retry settings
DEFAULT_CONNECT_RETRIES = 5
DEFAULT_BACKOFF_FACTOR = 0.3
DEFAULT_REQUEST_TIMEOUT = 30
DEFAULT_CHUNK_SIZE = 8192

# Release asset naming
ASSET_NAME_PREFIX = "nerd-fonts-"
ZIP_EXTENSION = ".zip"
EXCLUDED_ASSET_MARKER = "tar.xz"

# Font formats that can be filtered during extraction
FONT_FORMATS = ("otf", "ttf")

# Listing cache
CACHE_FILE_NAME = "nerdfetch-fonts-cache.json"
CACHE_TTL_SECONDS = 60 * 60  # 1 hour

# Target directory, relative to the user's home directory
DEFAULT_FONTS_DIR_NAME = ".fonts"

# Font cache rebuild
FONT_CACHE_COMMAND = ("fc-cache", "-fv")

# Configuration
APP_NAME = "nerdfetch"
CONFIG_FILE_NAME = "nerdfetch.yaml"

# Logging configuration
LOGGER_NAME = "nerdfetch"
LOG_LEVEL_ENV_VAR = "NERDFETCH_LOG_LEVEL"
LOG_FILE_NAME = "nerdfetch.log"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
INFO_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
DEBUG_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s: %(message)s"
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024  # 10 MB
LOG_FILE_BACKUP_COUNT = 5

# User-facing messages
MSG_NO_FONTS_SELECTED = "No fonts selected. Exiting..."
MSG_NO_FONTS_AVAILABLE = "No fonts available to select."
MSG_NETWORK_UNAVAILABLE = (
    "Network is unavailable. Check your internet connection and try again."
)
MSG_FONTS_SAVED = "Fonts saved to {path}"
