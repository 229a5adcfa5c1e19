"""Environment configuration and validation."""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv, find_dotenv

import logging
logger = logging.getLogger(__name__)

load_dotenv(find_dotenv(filename=".env", usecwd=True))


_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


def _env(name: str) -> Optional[str]:
    value = (os.getenv(name) or "").strip()
    return value or None


def _parse_bool(name: str, default: bool) -> bool:
    raw = _env(name)
    if raw is None:
        return default
    if raw.lower() in _TRUE:
        return True
    if raw.lower() in _FALSE:
        return False
    raise EnvironmentError(f"{name} must be a boolean (1/0, true/false), got {raw!r}.")


def _parse_viewport(raw: Optional[str]) -> Optional[dict]:
    if raw is None:
        return None
    width, sep, height = raw.lower().partition("x")
    if not sep or not width.strip().isdigit() or not height.strip().isdigit():
        raise EnvironmentError(f"MBD_VIEWPORT must look like 1280x720, got {raw!r}.")
    return {"width": int(width), "height": int(height)}


def get_env_config() -> dict:
    """
    Read the browser settings from the environment (and a .env file, if any).

    Optional:   MBD_HEADLESS (default 1)
                MBD_BROWSER_CHANNEL, e.g. 'chrome' or 'msedge'
                MBD_EXECUTABLE_PATH (overrides the channel)
                MBD_USER_DATA_DIR (launch a persistent context on this profile)
                MBD_CDP_ENDPOINT (attach to an already running browser instead of launching)
                MBD_VIEWPORT, e.g. '1280x720'

    MBD_CDP_ENDPOINT and MBD_USER_DATA_DIR are mutually exclusive: an attached
    browser already owns its profile.
    """
    cdp_endpoint = _env("MBD_CDP_ENDPOINT")
    user_data_dir = _env("MBD_USER_DATA_DIR")
    if cdp_endpoint and user_data_dir:
        raise EnvironmentError("Set either MBD_CDP_ENDPOINT or MBD_USER_DATA_DIR, not both.")

    executable_path = _env("MBD_EXECUTABLE_PATH")
    if executable_path and not Path(executable_path).exists():
        raise FileNotFoundError(f"MBD_EXECUTABLE_PATH does not exist: {executable_path}")

    if user_data_dir:
        try:
            user_data_dir = str(Path(user_data_dir).expanduser().resolve())
        except OSError:
            user_data_dir = str(Path(user_data_dir).absolute())

    return {
        "headless": _parse_bool("MBD_HEADLESS", True),
        "channel": _env("MBD_BROWSER_CHANNEL"),
        "executable_path": executable_path,
        "user_data_dir": user_data_dir,
        "cdp_endpoint": cdp_endpoint,
        "viewport": _parse_viewport(_env("MBD_VIEWPORT")),
    }
