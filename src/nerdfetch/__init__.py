"""nerdfetch - interactive Nerd Fonts downloader."""
