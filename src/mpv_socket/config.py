"""Connection configuration.

Values resolve with priority: argument > environment > config file > default.

Environment Variables:
    MPV_SOCKET_PATH: Socket or named pipe path
    MPV_SOCKET_CONNECT_ATTEMPTS: Attempts while the pipe is busy
    MPV_SOCKET_RETRY_DELAY: Seconds between attempts
    MPV_SOCKET_CONFIG: YAML config file with the keys path,
        connect_attempts and retry_delay
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from mpv_socket.transport.channel import CONNECT_ATTEMPTS, RETRY_DELAY

WINDOWS_DEFAULT_PATH = r"\\.\pipe\mpv-socket"
POSIX_DEFAULT_PATH = "/tmp/mpv-socket"


def default_path() -> str:
    return WINDOWS_DEFAULT_PATH if os.name == "nt" else POSIX_DEFAULT_PATH


@dataclass
class SocketConfig:
    """Where and how to connect to mpv.

    Attributes:
        path: Named pipe (Windows) or Unix socket path.
        connect_attempts: Attempts while the pipe is busy.
        retry_delay: Seconds to sleep between attempts.
    """

    path: str
    connect_attempts: int = CONNECT_ATTEMPTS
    retry_delay: float = RETRY_DELAY


def _load_file(config_file: str | None) -> dict[str, Any]:
    config_path = config_file or os.environ.get("MPV_SOCKET_CONFIG")
    if not config_path:
        return {}
    try:
        content = Path(config_path).read_text()
    except FileNotFoundError:
        return {}
    loaded = yaml.safe_load(content) or {}
    if not isinstance(loaded, dict):
        raise ValueError(f"config file {config_path} must contain a mapping")
    return loaded


def load_config(
    path: str | None = None,
    connect_attempts: int | None = None,
    retry_delay: float | None = None,
    config_file: str | None = None,
) -> SocketConfig:
    """Resolve the connection configuration.

    Args:
        path: Socket path override.
        connect_attempts: Attempts override.
        retry_delay: Retry delay override.
        config_file: YAML config file, defaults to MPV_SOCKET_CONFIG.

    Returns:
        Resolved SocketConfig.

    Raises:
        ValueError: If a value cannot be parsed.
    """
    file_config = _load_file(config_file)

    def get_value(arg: Any, env_key: str, file_key: str, default: Any) -> Any:
        if arg is not None:
            return arg
        env_val = os.environ.get(env_key)
        if env_val:
            return env_val
        file_val = file_config.get(file_key)
        if file_val is not None:
            return file_val
        return default

    return SocketConfig(
        path=str(get_value(path, "MPV_SOCKET_PATH", "path", default_path())),
        connect_attempts=int(
            get_value(connect_attempts, "MPV_SOCKET_CONNECT_ATTEMPTS", "connect_attempts", CONNECT_ATTEMPTS)
        ),
        retry_delay=float(get_value(retry_delay, "MPV_SOCKET_RETRY_DELAY", "retry_delay", RETRY_DELAY)),
    )
