# src/nerdfetch/font_cache.py

import subprocess
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from nerdfetch.constants import FONT_CACHE_COMMAND
from nerdfetch.log_utils import logger
from nerdfetch.utils import is_android, is_windows


@dataclass
class FontCacheResult:
    command: Sequence[str]
    returncode: Optional[int] = None
    stdout: str = ""
    stderr: str = ""
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None and self.returncode == 0


def should_rebuild_font_cache() -> bool:
    """Font cache rebuilding only applies to desktop Unix-like systems."""
    return not is_windows() and not is_android()


def _log_output(text: str, log: Callable[[str], None]) -> None:
    for line in (text or "").splitlines():
        if line.strip():
            log(line)


def rebuild_font_cache(
    command: Sequence[str] = FONT_CACHE_COMMAND,
    runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    on_complete: Optional[Callable[[FontCacheResult], None]] = None,
) -> FontCacheResult:
    """
    Run the font cache rebuild command and wait for it to finish.

    The command's stdout is logged at info level and stderr at warning level. A
    missing binary, OS error, or non-zero exit is logged and reported in the result;
    it never raises, so the caller's exit status is unaffected.

    Parameters:
        command (Sequence[str]): Command line to execute.
        runner (Callable): `subprocess.run`-compatible callable.
        on_complete (Callable[[FontCacheResult], None] | None): Invoked with the result once the command has finished or failed to start.

    Returns:
        FontCacheResult: Exit status and captured output.
    """
    result = FontCacheResult(command=list(command))
    logger.info("Rebuilding font cache...")
    try:
        completed = runner(list(command), capture_output=True, text=True, check=False)
    except FileNotFoundError:
        result.error = f"{command[0]} not found"
        logger.warning(f"Could not rebuild font cache: {result.error}")
    except OSError as e:
        result.error = str(e)
        logger.warning(f"Could not rebuild font cache: {e}")
    else:
        result.returncode = completed.returncode
        result.stdout = completed.stdout or ""
        result.stderr = completed.stderr or ""
        _log_output(result.stdout, logger.info)
        _log_output(result.stderr, logger.warning)
        if completed.returncode != 0:
            result.error = f"{command[0]} exited with status {completed.returncode}"
            logger.warning(f"Font cache rebuild failed: {result.error}")
        else:
            logger.info("Font cache rebuilt.")

    if on_complete:
        on_complete(result)
    return result
