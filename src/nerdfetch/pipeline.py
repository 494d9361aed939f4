"""
Download-extract pipeline for nerdfetch.

Each selected font is downloaded, optionally extracted into the target
directory, and its archive removed, strictly one after the other. A failure
is recorded against its font and the loop moves on to the next one.
"""

import os
import shutil
import zipfile
import zlib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Sequence

import requests
from rich.console import Console
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn

from nerdfetch.constants import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_REQUEST_TIMEOUT,
    FONT_FORMATS,
    MSG_FONTS_SAVED,
    NERD_FONTS_DOWNLOAD_URL,
    ZIP_EXTENSION,
)
from nerdfetch.exceptions import (
    DownloadError,
    ExtractionError,
    HTTPError,
    NetworkError,
)
from nerdfetch.log_utils import logger
from nerdfetch.utils import bytes_to_size, create_session

ProgressCallback = Callable[[float], None]


@dataclass
class DownloadJob:
    """Where one font archive comes from and where it goes."""

    identifier: str
    source_url: str
    archive_path: Path
    target_directory: Path


@dataclass
class PipelineResult:
    target_directory: Path
    succeeded: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)

    @property
    def has_failures(self) -> bool:
        return bool(self.failed)


def build_download_job(
    identifier: str,
    target_directory: Path,
    base_url: str = NERD_FONTS_DOWNLOAD_URL,
) -> DownloadJob:
    archive_name = f"{identifier}{ZIP_EXTENSION}"
    target_directory = Path(target_directory)
    return DownloadJob(
        identifier=identifier,
        source_url=f"{base_url.rstrip('/')}/{archive_name}",
        archive_path=target_directory / archive_name,
        target_directory=target_directory,
    )


def progress_percent(downloaded: int, total: Optional[int]) -> float:
    """
    Convert a byte count into a percentage in the range 0-100.

    Unknown or non-positive totals report 0 until the download finishes.
    """
    if not total or total <= 0:
        return 0.0
    return max(0.0, min(100.0, downloaded * 100.0 / total))


def _content_length(response: requests.Response) -> Optional[int]:
    raw = response.headers.get("Content-Length")
    try:
        return int(raw) if raw else None
    except (TypeError, ValueError):
        return None


def download_archive(
    job: DownloadJob,
    session: requests.Session,
    on_progress: Optional[ProgressCallback] = None,
) -> int:
    """
    Stream `job.source_url` into `job.archive_path`.

    The archive file is closed before this function returns, so callers can read it
    straight away. A partial file is left behind if the transfer fails.

    Parameters:
        job (DownloadJob): Download to perform.
        session (requests.Session): Session used for the GET request.
        on_progress (Callable[[float], None] | None): Receives the percentage after every chunk.

    Returns:
        int: Number of bytes written.

    Raises:
        NetworkError: On connection failures or timeouts.
        HTTPError: When the server answers with an error status.
        DownloadError: On any other request failure.
    """
    logger.debug(f"Downloading {job.source_url} to {job.archive_path}")
    try:
        response = session.get(
            job.source_url, stream=True, timeout=DEFAULT_REQUEST_TIMEOUT
        )
    except (requests.ConnectionError, requests.Timeout) as e:
        raise NetworkError(
            "Connection failed",
            url=job.source_url,
            identifier=job.identifier,
            details=str(e),
        ) from e
    except requests.RequestException as e:
        raise DownloadError(
            "Request failed",
            url=job.source_url,
            identifier=job.identifier,
            details=str(e),
        ) from e

    try:
        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            raise HTTPError(
                f"Server returned HTTP {response.status_code}",
                status_code=response.status_code,
                url=job.source_url,
                identifier=job.identifier,
            ) from e

        total = _content_length(response)
        downloaded = 0
        with open(job.archive_path, "wb") as archive:
            try:
                for chunk in response.iter_content(chunk_size=DEFAULT_CHUNK_SIZE):
                    if not chunk:
                        continue
                    archive.write(chunk)
                    downloaded += len(chunk)
                    if on_progress:
                        on_progress(progress_percent(downloaded, total))
            except requests.RequestException as e:
                raise NetworkError(
                    "Download interrupted",
                    url=job.source_url,
                    identifier=job.identifier,
                    details=str(e),
                ) from e
    finally:
        response.close()

    if on_progress:
        on_progress(100.0)
    logger.info(f"Downloaded {job.archive_path.name} ({bytes_to_size(downloaded)})")
    return downloaded


def safe_extract_path(extract_dir: Path, member_name: str) -> Path:
    """
    Resolve where an archive member would land and refuse anything outside `extract_dir`.

    Raises:
        ValueError: If the member is absolute, contains a null byte, or escapes the directory.
    """
    if not member_name or "\x00" in member_name or os.path.isabs(member_name):
        raise ValueError(f"Unsafe archive member '{member_name}'")
    real_extract_dir = os.path.realpath(extract_dir)
    candidate = os.path.realpath(os.path.join(real_extract_dir, member_name))
    if os.path.commonpath([real_extract_dir, candidate]) != real_extract_dir:
        raise ValueError(
            f"Unsafe extraction path '{member_name}' is outside base '{extract_dir}'"
        )
    return Path(candidate)


def _skipped_by_format(member_name: str, formats: Iterable[str]) -> bool:
    wanted = {fmt.lower() for fmt in formats}
    if not wanted:
        return False
    extension = os.path.splitext(member_name)[1].lower().lstrip(".")
    return extension in FONT_FORMATS and extension not in wanted


def extract_archive(
    archive_path: Path,
    target_directory: Path,
    formats: Optional[Sequence[str]] = None,
) -> List[Path]:
    """
    Extract a font archive into `target_directory`.

    Members that would be written outside the directory are skipped with a warning.
    When `formats` is given (e.g. ["otf"]), font files of other formats are skipped;
    licence and readme files are always extracted.

    Returns:
        list[Path]: Files written to disk.

    Raises:
        ExtractionError: If the archive is missing, corrupt, or cannot be written out.
    """
    target_directory = Path(target_directory)
    extracted: List[Path] = []
    try:
        with zipfile.ZipFile(archive_path, "r") as zip_ref:
            for member in zip_ref.infolist():
                if member.is_dir():
                    continue
                if _skipped_by_format(member.filename, formats or ()):
                    logger.debug(f"Skipping {member.filename} (format not selected)")
                    continue
                try:
                    extract_path = safe_extract_path(target_directory, member.filename)
                except ValueError as e:
                    logger.warning(f"Skipping unsafe archive member: {e}")
                    continue

                extract_path.parent.mkdir(parents=True, exist_ok=True)
                with zip_ref.open(member) as source, open(extract_path, "wb") as target:
                    shutil.copyfileobj(source, target)
                extracted.append(extract_path)
    except (
        zipfile.BadZipFile,
        zlib.error,
        EOFError,
        NotImplementedError,
        RuntimeError,
        OSError,
    ) as e:
        raise ExtractionError(
            "Could not extract archive", archive_path=str(archive_path), details=str(e)
        ) from e

    logger.debug(f"Extracted {len(extracted)} files from {archive_path}")
    return extracted


def process_job(
    job: DownloadJob,
    session: requests.Session,
    extract: bool,
    formats: Optional[Sequence[str]] = None,
    on_progress: Optional[ProgressCallback] = None,
) -> None:
    """Download one archive and, when asked, extract it and remove the archive."""
    download_archive(job, session, on_progress)
    if not extract:
        return
    files = extract_archive(job.archive_path, job.target_directory, formats)
    os.remove(job.archive_path)
    logger.info(f"Extracted {job.identifier} ({len(files)} files)")


def _make_progress(console: Optional[Console]) -> Progress:
    return Progress(
        TextColumn("[bold]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
        transient=False,
    )


def run_pipeline(
    selection: Sequence[str],
    target_directory: Path,
    extract: bool = False,
    session: Optional[requests.Session] = None,
    formats: Optional[Sequence[str]] = None,
    console: Optional[Console] = None,
) -> PipelineResult:
    """
    Download (and optionally extract) every selected font, one at a time.

    A failure for one font is logged with its identifier and recorded in the result;
    the remaining fonts are still attempted. The closing summary naming the target
    directory is always logged.

    Parameters:
        selection (Sequence[str]): Font identifiers in the order to process them.
        target_directory (Path): Directory archives are saved and extracted into.
        extract (bool): Extract each archive and delete it afterwards.
        session (requests.Session | None): HTTP session; a retrying session is created when omitted.
        formats (Sequence[str] | None): Font formats to keep when extracting.
        console (rich.console.Console | None): Console the progress bars render to.

    Returns:
        PipelineResult: Which fonts succeeded and why the others failed.
    """
    target_directory = Path(target_directory)
    result = PipelineResult(target_directory=target_directory)
    http = session or create_session()

    try:
        with _make_progress(console) as progress:
            for identifier in selection:
                job = build_download_job(identifier, target_directory)
                task_id = progress.add_task(identifier, total=100)

                def _update(percent: float, task_id=task_id) -> None:
                    progress.update(task_id, completed=percent)

                try:
                    process_job(job, http, extract, formats, _update)
                except Exception as e:
                    logger.error(f"Failed to download {identifier}: {e}")
                    result.failed[identifier] = str(e)
                    continue
                result.succeeded.append(identifier)
    finally:
        if session is None:
            http.close()

    if result.has_failures:
        logger.warning(
            f"{len(result.failed)} of {len(selection)} fonts failed: "
            + ", ".join(result.failed)
        )
    logger.info(MSG_FONTS_SAVED.format(path=target_directory))
    return result
