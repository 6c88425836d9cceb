"""Runtime data path resolution helpers."""

import os
import sys
from typing import Any, Mapping

from node_editor.core import constants
from node_editor.core.exceptions import EXPECTED_ERRORS


def _normalized_home() -> str:
    try:
        return os.path.abspath(os.path.expanduser("~"))
    except EXPECTED_ERRORS:
        return os.path.abspath(os.getcwd())


def _safe_windows_base(base: Any) -> str:
    # Keep env-derived base rooted under user home.
    home = _normalized_home()
    try:
        candidate = os.path.abspath(str(base or "").strip())
    except EXPECTED_ERRORS:
        return home
    if not str(base or "").strip():
        return home
    try:
        if os.path.commonpath([home, candidate]) == home:
            return candidate
    except EXPECTED_ERRORS:
        return home
    return home


def runtime_data_dir(
    runtime_dir_name: str = constants.RUNTIME_DIR_NAME,
    create: bool = False,
    platform_name: str | None = None,
    env: Mapping[str, str] | None = None,
) -> str:
    """Resolve runtime data directory path with platform-aware base fallback."""
    use_platform = str(platform_name or sys.platform)
    use_env = os.environ if env is None else env
    base = None
    match use_platform:
        case "win32":
            env_base = str(use_env.get("LOCALAPPDATA", "")).strip() or str(use_env.get("APPDATA", "")).strip()
            base = _safe_windows_base(env_base)
        case _:
            state_home = str(use_env.get("XDG_STATE_HOME", "")).strip()
            base = state_home or None
    if not base:
        try:
            base = os.path.join(os.path.expanduser("~"), ".local", "state")
        except EXPECTED_ERRORS:
            base = os.getcwd()
    target = os.path.join(base, runtime_dir_name)
    if create:
        try:
            os.makedirs(target, exist_ok=True)
        except EXPECTED_ERRORS:
            return os.getcwd()
    return target


def settings_path(create: bool = False, **kwargs: Any) -> str:
    return os.path.join(runtime_data_dir(create=create, **kwargs), constants.SETTINGS_FILENAME)


def diag_log_path(create: bool = False, **kwargs: Any) -> str:
    return os.path.join(runtime_data_dir(create=create, **kwargs), constants.DIAG_LOG_FILENAME)
