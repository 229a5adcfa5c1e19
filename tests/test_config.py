# tests/test_config.py
import pytest

from mcp_browser_devtools.config import get_env_config

_VARS = (
    "MBD_HEADLESS",
    "MBD_BROWSER_CHANNEL",
    "MBD_EXECUTABLE_PATH",
    "MBD_USER_DATA_DIR",
    "MBD_CDP_ENDPOINT",
    "MBD_VIEWPORT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    assert get_env_config() == {
        "headless": True,
        "channel": None,
        "executable_path": None,
        "user_data_dir": None,
        "cdp_endpoint": None,
        "viewport": None,
    }


@pytest.mark.parametrize("raw,expected", [("0", False), ("false", False), ("OFF", False), ("yes", True), ("1", True)])
def test_headless_parsing(monkeypatch, raw, expected):
    monkeypatch.setenv("MBD_HEADLESS", raw)
    assert get_env_config()["headless"] is expected


def test_invalid_headless(monkeypatch):
    monkeypatch.setenv("MBD_HEADLESS", "sometimes")
    with pytest.raises(EnvironmentError, match="MBD_HEADLESS"):
        get_env_config()


def test_blank_values_count_as_unset(monkeypatch):
    monkeypatch.setenv("MBD_BROWSER_CHANNEL", "   ")
    assert get_env_config()["channel"] is None


def test_viewport(monkeypatch):
    monkeypatch.setenv("MBD_VIEWPORT", "1280x720")
    assert get_env_config()["viewport"] == {"width": 1280, "height": 720}


@pytest.mark.parametrize("raw", ["1280", "wide", "1280x", "x720"])
def test_invalid_viewport(monkeypatch, raw):
    monkeypatch.setenv("MBD_VIEWPORT", raw)
    with pytest.raises(EnvironmentError, match="MBD_VIEWPORT"):
        get_env_config()


def test_cdp_and_profile_are_exclusive(monkeypatch, tmp_path):
    monkeypatch.setenv("MBD_CDP_ENDPOINT", "http://127.0.0.1:9222")
    monkeypatch.setenv("MBD_USER_DATA_DIR", str(tmp_path))
    with pytest.raises(EnvironmentError, match="not both"):
        get_env_config()


def test_user_data_dir_is_resolved(monkeypatch, tmp_path):
    monkeypatch.setenv("MBD_USER_DATA_DIR", str(tmp_path / "profile"))
    assert get_env_config()["user_data_dir"] == str((tmp_path / "profile").resolve())


def test_missing_executable(monkeypatch, tmp_path):
    monkeypatch.setenv("MBD_EXECUTABLE_PATH", str(tmp_path / "no-such-chrome"))
    with pytest.raises(FileNotFoundError):
        get_env_config()


def test_existing_executable(monkeypatch, tmp_path):
    chrome = tmp_path / "chrome"
    chrome.write_text("")
    monkeypatch.setenv("MBD_EXECUTABLE_PATH", str(chrome))
    monkeypatch.setenv("MBD_BROWSER_CHANNEL", "chrome")
    cfg = get_env_config()
    assert cfg["executable_path"] == str(chrome)
    assert cfg["channel"] == "chrome"
