import io
import zipfile
from pathlib import Path

import platformdirs
import pytest
import requests

_NETWORK_BLOCK_MSG = (
    "Network access is blocked during tests. Mock requests.* or Session.request."
)


def _block_network(*_args, **_kwargs):
    """
    Prevent network calls in tests by raising a RuntimeError.

    Raises:
        RuntimeError: with `_NETWORK_BLOCK_MSG` indicating that network access is blocked during tests.
    """
    raise RuntimeError(_NETWORK_BLOCK_MSG)


@pytest.fixture(autouse=True)
def _isolate_test_environment(tmp_path_factory, monkeypatch):
    """
    Point every platformdirs location, the config file, and the home directory into a temp tree.

    Also clears NERDFETCH_LOG_LEVEL so the logger starts from its default level.
    """
    base = tmp_path_factory.mktemp("nerdfetch")
    cache_dir = base / "cache"
    config_dir = base / "config"
    log_dir = base / "log"
    home_dir = base / "home"

    for path in (cache_dir, config_dir, log_dir, home_dir):
        path.mkdir(parents=True, exist_ok=True)

    monkeypatch.setenv("XDG_CACHE_HOME", str(cache_dir))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_dir))
    monkeypatch.setenv("HOME", str(home_dir))
    monkeypatch.delenv("NERDFETCH_LOG_LEVEL", raising=False)

    monkeypatch.setattr(
        platformdirs, "user_cache_dir", lambda *_args, **_kwargs: str(cache_dir)
    )
    monkeypatch.setattr(
        platformdirs, "user_config_dir", lambda *_args, **_kwargs: str(config_dir)
    )
    monkeypatch.setattr(
        platformdirs, "user_log_dir", lambda *_args, **_kwargs: str(log_dir)
    )
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: home_dir))

    import nerdfetch.config as nerdfetch_config

    monkeypatch.setattr(nerdfetch_config, "CONFIG_DIR", str(config_dir))
    monkeypatch.setattr(
        nerdfetch_config,
        "CONFIG_FILE",
        str(config_dir / "nerdfetch.yaml"),
    )

    import nerdfetch.cache as nerdfetch_cache

    monkeypatch.setattr(
        nerdfetch_cache,
        "default_cache_path",
        lambda: str(cache_dir / "nerdfetch-fonts-cache.json"),
    )


def pytest_runtest_setup():
    """
    Prevent real network requests during tests by replacing HTTP entry points with blocking callables.
    """
    requests.get = _block_network
    requests.head = _block_network
    requests.post = _block_network
    requests.Session.request = _block_network


def _make_zip_bytes(members):
    """
    Build an in-memory zip archive.

    Parameters:
        members (dict[str, bytes]): Archive member names mapped to their contents.
    """
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for name, data in members.items():
            zf.writestr(name, data)
    return buffer.getvalue()


@pytest.fixture
def make_zip_bytes():
    return _make_zip_bytes


@pytest.fixture
def font_zip_bytes():
    return _make_zip_bytes(
        {
            "FiraCodeNerdFont-Regular.ttf": b"ttf-data",
            "FiraCodeNerdFont-Bold.otf": b"otf-data",
            "LICENSE": b"license",
            "README.md": b"readme",
        }
    )


@pytest.fixture
def mock_response_factory(mocker):
    """
    Provide a factory for mocked streaming `requests.Response` objects.

    The factory accepts the body chunks, a status code, and optional headers; a
    status of 400 or above makes `raise_for_status` raise `requests.HTTPError`.
    """

    def _create_response(chunks=(), status_code=200, headers=None):
        response = mocker.MagicMock()
        response.status_code = status_code
        response.headers = headers if headers is not None else {}
        response.iter_content.return_value = iter(list(chunks))
        if status_code >= 400:
            response.raise_for_status.side_effect = requests.HTTPError(
                f"{status_code} Error"
            )
        else:
            response.raise_for_status.return_value = None
        return response

    return _create_response
